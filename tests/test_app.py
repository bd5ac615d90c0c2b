"""Tests for the Streamlit app, driven through streamlit.testing.v1.AppTest."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from kpi_tracker import config as config_module
from kpi_tracker.store import InMemoryRecordStore, StoreWriteError, SubscriptionError

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("KPI_TRACKER_BACKEND", "memory")
    monkeypatch.delenv("KPI_TRACKER_USER_ID", raising=False)
    monkeypatch.delenv("KPI_TRACKER_AUTH_TOKEN", raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda: False)
    st.cache_resource.clear()

    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    yield at
    st.cache_resource.clear()


def _open_form(at: AppTest) -> AppTest:
    return at.sidebar.radio(key="view").set_value("Add Weekly Data").run()


def test_dashboard_shows_seeded_weeks(app):
    assert not app.exception
    assert app.session_state["view"] == "Dashboard"
    assert "Latest Week's Summary (8/4/2025)" in [s.value for s in app.subheader]


def test_submit_new_week_returns_to_dashboard(app):
    _open_form(app)
    app.date_input(key="form_week_start_date").set_value(date(2025, 9, 1))
    app.number_input(key="form_new_leads").set_value(12)
    app.button[0].click().run()

    assert not app.exception
    assert app.session_state["view"] == "Dashboard"
    assert any("Added week of 2025-09-01" in s.value for s in app.success)
    assert "Latest Week's Summary (9/1/2025)" in [s.value for s in app.subheader]

    _open_form(app)
    assert app.date_input(key="form_week_start_date").value is None
    assert app.number_input(key="form_new_leads").value is None


def test_submit_existing_week_reports_overwrite(app):
    _open_form(app)
    app.date_input(key="form_week_start_date").set_value(date(2025, 8, 4))
    app.button[0].click().run()

    assert app.session_state["view"] == "Dashboard"
    assert any("already existed and was overwritten" in s.value for s in app.success)


def test_write_failure_keeps_form_values(app, monkeypatch):
    def _reject(self, path, key, record):
        raise StoreWriteError("offline")

    monkeypatch.setattr(InMemoryRecordStore, "create", _reject)

    _open_form(app)
    app.date_input(key="form_week_start_date").set_value(date(2025, 9, 1))
    app.number_input(key="form_new_leads").set_value(12)
    app.button[0].click().run()

    assert not app.exception
    assert app.error[0].value == "Failed to add data. Please try again."
    assert app.session_state["view"] == "Add Weekly Data"
    assert app.date_input(key="form_week_start_date").value == date(2025, 9, 1)
    assert app.number_input(key="form_new_leads").value == 12


def test_missing_week_start_is_rejected(app):
    _open_form(app)
    app.number_input(key="form_new_leads").set_value(3)
    app.button[0].click().run()

    assert app.error[0].value == "Week Start Date is required."
    assert app.session_state["view"] == "Add Weekly Data"


def test_feed_error_is_shown(app):
    app.session_state["feed"].fail(SubscriptionError("offline"))
    app.run()

    assert app.error[0].value.startswith("Could not load weekly data")
