"""
KPI computation functions — pure functions with no side effects.

Provides the per-week composite counters (outbound, LinkedIn activity),
rate formatting, and the all-time summary used by the dashboard cards.
"""

import logging
from typing import Any, Mapping

import pandas as pd

from .config import LINKEDIN_FIELDS, NOT_APPLICABLE, OUTBOUND_FIELDS
from .records import coerce_count

logger = logging.getLogger(__name__)


def _sum_fields(record: Mapping[str, Any], fields: list[str]) -> int:
    return sum(coerce_count(record.get(field)) for field in fields)


def total_outbound(record: Mapping[str, Any]) -> int:
    """Outbound activity for one week.

    emails_delivered + profile_visits + connection_requests + messages_sent
    + calls_dialed + likes. Absent fields count as 0.
    """
    return _sum_fields(record, OUTBOUND_FIELDS)


def total_linkedin_activity(record: Mapping[str, Any]) -> int:
    """LinkedIn activity for one week: visits, requests, likes, messages."""
    return _sum_fields(record, LINKEDIN_FIELDS)


def format_rate(numerator: float, denominator: float) -> str:
    """Return numerator/denominator as a one-decimal percentage string.

    Returns exactly '0%' when the denominator is 0.
    """
    if not denominator:
        return "0%"
    return f"{numerator / denominator * 100:.1f}%"


def _column_total(weekly: pd.DataFrame, column: str) -> int:
    if weekly.empty or column not in weekly.columns:
        return 0
    return int(weekly[column].sum())


def get_all_time_summary(weekly: pd.DataFrame) -> dict:
    """Return a dict of all-time KPIs for the summary cards.

    Parameters
    ----------
    weekly : Weekly frame from build_weekly_frame().

    Returns
    -------
    Dict with structure:
    {
        "total_meetings": 8,
        "total_new_leads": 1103,
        "total_outbound": 4704,
        "total_calls_dialed": 960,
        "total_calls_connected": 59,
        "lead_conversion_rate": "0.7%",
        "call_connection_rate": "6.1%",
        "activities_per_meeting": "588.0",   # "N/A" when no meetings
    }
    """
    total_meetings = _column_total(weekly, "meetings_booked")
    total_new_leads = _column_total(weekly, "new_leads")
    total_calls_dialed = _column_total(weekly, "calls_dialed")
    total_calls_connected = _column_total(weekly, "calls_connected")
    total_outbound_all_time = sum(_column_total(weekly, field) for field in OUTBOUND_FIELDS)

    if total_meetings > 0:
        activities_per_meeting = f"{total_outbound_all_time / total_meetings:.1f}"
    else:
        activities_per_meeting = NOT_APPLICABLE

    summary = {
        "total_meetings": total_meetings,
        "total_new_leads": total_new_leads,
        "total_outbound": total_outbound_all_time,
        "total_calls_dialed": total_calls_dialed,
        "total_calls_connected": total_calls_connected,
        "lead_conversion_rate": format_rate(total_meetings, total_new_leads),
        "call_connection_rate": format_rate(total_calls_connected, total_calls_dialed),
        "activities_per_meeting": activities_per_meeting,
    }

    logger.debug("All-time summary over %d weeks: %s", len(weekly), summary)
    return summary
