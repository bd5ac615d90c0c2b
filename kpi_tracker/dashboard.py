"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end.
Each function returns plain dicts or DataFrames suitable for rendering
cards, charts, and tables.
"""

import logging
from typing import Any, Iterable, Mapping

import pandas as pd

from .kpis import get_all_time_summary, total_linkedin_activity
from .records import build_weekly_frame, display_date
from .transforms import (
    build_cumulative_progress,
    build_recent_window,
    get_latest_week,
    sort_reverse_chronological,
)

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ["Week Start", "New Leads", "Emails", "LinkedIn", "Calls", "Meetings"]

# title -> [(column, legend name, colour), ...]
TREND_CHARTS: list[tuple[str, list[tuple[str, str, str]]]] = [
    ("Emails Sent", [
        ("emails_delivered", "Delivered", "#8884d8"),
        ("emails_opened", "Opened", "#82ca9d"),
    ]),
    ("Calls Dialed", [
        ("calls_dialed", "Dialed", "#ffc658"),
        ("calls_connected", "Connected", "#ff7300"),
    ]),
    ("LinkedIn Activity", [
        ("total_linkedin_activity", "Total Activity", "#0088FE"),
    ]),
    ("Meetings Booked", [
        ("meetings_booked", "Booked", "#d0ed57"),
    ]),
]


def get_latest_week_summary(latest: Mapping[str, Any] | None) -> dict | None:
    """Figures for the latest-week banner, or None when there is no data."""
    if latest is None:
        return None
    return {
        "week_start_date": latest.get("week_start_date"),
        "display_date": display_date(latest.get("week_start_date")),
        "new_leads": int(latest.get("new_leads", 0)),
        "emails_delivered": int(latest.get("emails_delivered", 0)),
        "linkedin_activity": total_linkedin_activity(latest),
        "calls_dialed": int(latest.get("calls_dialed", 0)),
        "calls_connected": int(latest.get("calls_connected", 0)),
        "meetings_booked": int(latest.get("meetings_booked", 0)),
    }


def get_kpi_cards(summary: Mapping[str, Any]) -> list[dict]:
    """Six summary cards (title, value, subtext) in display order."""
    return [
        {"title": "Total Meetings Booked", "value": str(summary["total_meetings"]), "subtext": "All Time"},
        {"title": "Lead Conversion Rate", "value": summary["lead_conversion_rate"], "subtext": "Meetings / New Leads"},
        {"title": "Call Connection Rate", "value": summary["call_connection_rate"], "subtext": "Connected / Dialed"},
        {"title": "Total New Leads", "value": str(summary["total_new_leads"]), "subtext": "All Time"},
        {"title": "Total Outbound Activities", "value": f"{summary['total_outbound']:,}", "subtext": "All Time"},
        {"title": "Activities Per Meeting", "value": summary["activities_per_meeting"], "subtext": "Effort to get 1 meeting"},
    ]


def get_history_table(weekly: pd.DataFrame) -> pd.DataFrame:
    """Historical data table, latest week first.

    Returns
    -------
    DataFrame with columns:
        Week Start, New Leads, Emails, LinkedIn, Calls, Meetings
    """
    if weekly.empty:
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    ordered = sort_reverse_chronological(weekly)
    rows = []
    for _, week in ordered.iterrows():
        rows.append({
            "Week Start": display_date(week["week_start"]),
            "New Leads": int(week["new_leads"]),
            "Emails": f"{week['emails_delivered']} Delivered",
            "LinkedIn": f"{total_linkedin_activity(week)} Activities",
            "Calls": f"{week['calls_dialed']} Dialed",
            "Meetings": int(week["meetings_booked"]),
        })
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def get_dashboard_view(records: Iterable[Mapping[str, Any]]) -> dict:
    """Single entry point the app calls on every snapshot.

    Recomputes every derived view from the complete record collection.

    Returns
    -------
    Dict with keys:
        is_empty, summary, cards, latest_week, progress, recent, history
    """
    weekly = build_weekly_frame(records)
    summary = get_all_time_summary(weekly)

    view = {
        "is_empty": weekly.empty,
        "summary": summary,
        "cards": get_kpi_cards(summary),
        "latest_week": get_latest_week_summary(get_latest_week(weekly)),
        "progress": build_cumulative_progress(weekly),
        "recent": build_recent_window(weekly),
        "history": get_history_table(weekly),
    }

    if view["is_empty"]:
        logger.info("No weekly records available — returning empty dashboard view")
    return view
