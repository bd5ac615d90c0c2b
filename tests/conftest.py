"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from kpi_tracker.client import SnapshotFeed, TrackerClient
from kpi_tracker.records import build_weekly_frame
from kpi_tracker.sample_data import get_sample_records
from kpi_tracker.store import InMemoryRecordStore


# Per-week total outbound for the sample weeks, oldest first
SAMPLE_OUTBOUND = [247, 269, 307, 398, 556, 383, 398, 1024, 1122]
SAMPLE_OUTBOUND_TOTAL = 4704


def make_week(week_start_date: str, **counts: Any) -> dict[str, Any]:
    """Helper to build a canonical record; unspecified metrics are omitted."""
    return {"week_start_date": week_start_date, **counts}


def make_doc(doc_id: str, data: dict[str, Any]) -> MagicMock:
    """Stand-in for a Firestore DocumentSnapshot."""
    doc = MagicMock()
    doc.id = doc_id
    doc.to_dict.return_value = data
    return doc


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_records():
    return get_sample_records()


@pytest.fixture()
def sample_weekly(sample_records):
    return build_weekly_frame(sample_records)


@pytest.fixture()
def empty_weekly():
    return build_weekly_frame([])


@pytest.fixture()
def memory_store():
    return InMemoryRecordStore(user_id="tester")


@pytest.fixture()
def feed():
    return SnapshotFeed()


@pytest.fixture()
def ready_client(memory_store):
    client = TrackerClient(memory_store, app_id="test-app")
    assert client.initialize()
    return client
