"""
Data transforms: sort the weekly frame and build the chart-ready series
(cumulative progress vs goal pace, recent-window trends, latest week).

Every function returns a new DataFrame; the input frame is never mutated.
"""

import logging

import pandas as pd

from .config import (
    LINKEDIN_FIELDS,
    OUTBOUND_FIELDS,
    RECENT_WINDOW_WEEKS,
    WEEKLY_OUTBOUND_GOAL,
)
from .records import FRAME_COLUMNS, week_label

logger = logging.getLogger(__name__)

PROGRESS_COLUMNS = [
    "week_start_date",
    "label",
    "weekly_outbound",
    "cumulative_outbound",
    "cumulative_goal_pace",
]


def sort_chronological(weekly: pd.DataFrame) -> pd.DataFrame:
    """Weekly frame sorted ascending by week start (unparseable dates last)."""
    return weekly.sort_values(
        "week_start", ascending=True, kind="mergesort", na_position="last"
    ).reset_index(drop=True)


def sort_reverse_chronological(weekly: pd.DataFrame) -> pd.DataFrame:
    """Weekly frame sorted descending by week start (unparseable dates last)."""
    return weekly.sort_values(
        "week_start", ascending=False, kind="mergesort", na_position="last"
    ).reset_index(drop=True)


def build_cumulative_progress(
    weekly: pd.DataFrame,
    weekly_goal: int = WEEKLY_OUTBOUND_GOAL,
) -> pd.DataFrame:
    """Cumulative outbound activity against a linear goal trajectory.

    Parameters
    ----------
    weekly : Weekly frame from build_weekly_frame().
    weekly_goal : Outbound target per week.

    Returns
    -------
    DataFrame with one row per week, ascending, with columns:
        week_start_date, label, weekly_outbound, cumulative_outbound,
        cumulative_goal_pace
    cumulative_goal_pace at 1-based position i is i * weekly_goal.
    """
    if weekly.empty:
        return pd.DataFrame(columns=PROGRESS_COLUMNS)

    ordered = sort_chronological(weekly)
    weekly_outbound = ordered[OUTBOUND_FIELDS].sum(axis=1).astype("int64")

    result = pd.DataFrame({
        "week_start_date": ordered["week_start_date"],
        "label": ordered["week_start"].apply(week_label),
        "weekly_outbound": weekly_outbound,
        "cumulative_outbound": weekly_outbound.cumsum(),
        "cumulative_goal_pace": [(i + 1) * weekly_goal for i in range(len(ordered))],
    })

    logger.info("Built cumulative progress with %d rows", len(result))
    return result


def build_recent_window(
    weekly: pd.DataFrame,
    weeks: int = RECENT_WINDOW_WEEKS,
) -> pd.DataFrame:
    """Most recent `weeks` records, re-sorted ascending, for the trend charts.

    Returns
    -------
    DataFrame with all weekly-frame columns plus:
        label, total_linkedin_activity, total_outbound
    Length is min(weeks, len(weekly)).
    """
    if weekly.empty:
        return pd.DataFrame(
            columns=[*FRAME_COLUMNS, "label", "total_linkedin_activity", "total_outbound"]
        )

    recent = sort_reverse_chronological(weekly).head(weeks)
    recent = sort_chronological(recent)

    recent["label"] = recent["week_start"].apply(week_label)
    recent["total_linkedin_activity"] = recent[LINKEDIN_FIELDS].sum(axis=1).astype("int64")
    recent["total_outbound"] = recent[OUTBOUND_FIELDS].sum(axis=1).astype("int64")

    logger.info("Built recent window with %d of %d weeks", len(recent), len(weekly))
    return recent


def get_latest_week(weekly: pd.DataFrame) -> dict | None:
    """Return the record with the latest week start, or None if there is none."""
    if weekly.empty:
        return None
    latest = sort_reverse_chronological(weekly).iloc[0]
    return latest.to_dict()
