"""Tests for dashboard-ready outputs."""

from __future__ import annotations

import pandas as pd

from kpi_tracker.dashboard import (
    HISTORY_COLUMNS,
    TREND_CHARTS,
    get_dashboard_view,
    get_history_table,
    get_kpi_cards,
    get_latest_week_summary,
)
from kpi_tracker.kpis import get_all_time_summary

from tests.conftest import SAMPLE_OUTBOUND_TOTAL


class TestDashboardView:
    def test_keys(self, sample_records):
        view = get_dashboard_view(sample_records)
        assert set(view) == {"is_empty", "summary", "cards", "latest_week", "progress", "recent", "history"}
        assert view["is_empty"] is False

    def test_idempotent(self, sample_records):
        first = get_dashboard_view(sample_records)
        second = get_dashboard_view(sample_records)
        assert first["summary"] == second["summary"]
        assert first["cards"] == second["cards"]
        assert first["latest_week"] == second["latest_week"]
        for key in ("progress", "recent", "history"):
            pd.testing.assert_frame_equal(first[key], second[key])

    def test_final_progress_point(self, sample_records):
        view = get_dashboard_view(sample_records)
        assert view["progress"]["cumulative_outbound"].iloc[-1] == SAMPLE_OUTBOUND_TOTAL
        assert view["progress"]["cumulative_goal_pace"].iloc[-1] == 1440

    def test_empty_collection(self):
        view = get_dashboard_view([])
        assert view["is_empty"] is True
        assert view["summary"]["total_meetings"] == 0
        assert view["summary"]["lead_conversion_rate"] == "0%"
        assert view["summary"]["activities_per_meeting"] == "N/A"
        assert view["latest_week"] is None
        assert view["progress"].empty
        assert view["recent"].empty
        assert view["history"].empty

    def test_records_not_mutated(self, sample_records):
        snapshot = [dict(r) for r in sample_records]
        get_dashboard_view(sample_records)
        assert sample_records == snapshot


class TestLatestWeekSummary:
    def test_figures(self, sample_records):
        latest = get_dashboard_view(sample_records)["latest_week"]
        assert latest["display_date"] == "8/4/2025"
        assert latest["new_leads"] == 298
        assert latest["linkedin_activity"] == 374
        assert latest["calls_connected"] == 28
        assert latest["meetings_booked"] == 4

    def test_none(self):
        assert get_latest_week_summary(None) is None


def test_kpi_cards(sample_weekly):
    cards = get_kpi_cards(get_all_time_summary(sample_weekly))
    assert [c["title"] for c in cards] == [
        "Total Meetings Booked",
        "Lead Conversion Rate",
        "Call Connection Rate",
        "Total New Leads",
        "Total Outbound Activities",
        "Activities Per Meeting",
    ]
    values = {c["title"]: c["value"] for c in cards}
    assert values["Total Outbound Activities"] == "4,704"
    assert values["Activities Per Meeting"] == "588.0"


def test_history_table(sample_weekly):
    history = get_history_table(sample_weekly)
    assert list(history.columns) == HISTORY_COLUMNS
    assert len(history) == 9
    first = history.iloc[0]
    assert first["Week Start"] == "8/4/2025"
    assert first["Emails"] == "361 Delivered"
    assert first["LinkedIn"] == "374 Activities"
    assert first["Calls"] == "387 Dialed"
    assert history.iloc[-1]["Week Start"] == "6/9/2025"


def test_trend_chart_columns_exist(sample_records):
    recent = get_dashboard_view(sample_records)["recent"]
    for _, lines in TREND_CHARTS:
        for column, _, _ in lines:
            assert column in recent.columns
