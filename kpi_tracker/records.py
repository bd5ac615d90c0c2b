"""
Metrics records: numeric coercion, date normalisation, and the mapping
between stored documents and the canonical weekly frame.
"""

import logging
import math
from datetime import date, datetime
from typing import Any, Iterable, Mapping

import pandas as pd

from .config import FIELD_MAP, METRIC_FIELDS

logger = logging.getLogger(__name__)

_DOC_TO_FIELD = {doc_key: field for field, doc_key in FIELD_MAP.items()}

FRAME_COLUMNS = ["id", "week_start_date", "week_start", *METRIC_FIELDS, "created_at"]


def coerce_count(val: Any) -> int:
    """Coerce a form or document value to a non-negative integer count.

    Missing, blank, NaN, infinite, and non-numeric values become 0.
    Fractional values are truncated; negative values clamp to 0.
    """
    if val is None or isinstance(val, bool):
        return 0
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return 0
    try:
        num = float(val)
    except (ValueError, TypeError):
        return 0
    if math.isnan(num) or math.isinf(num):
        return 0
    return max(int(num), 0)


def parse_week_start(val: Any) -> str | None:
    """Normalise a week-start value to an ISO date string (YYYY-MM-DD).

    Accepts date/datetime/Timestamp objects and date strings. Timezone-aware
    values are converted to UTC before the date is taken. Returns None for
    missing or unparseable values.
    """
    if val is None or val is pd.NaT:
        return None
    if isinstance(val, datetime):
        ts = pd.Timestamp(val)
    elif isinstance(val, date):
        return val.isoformat()
    else:
        text = str(val).strip()
        if not text:
            return None
        try:
            ts = pd.Timestamp(text)
        except (ValueError, TypeError):
            logger.warning("Could not parse week start date: %s", val)
            return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.date().isoformat()


def _canonical(field_or_key: str) -> str:
    return _DOC_TO_FIELD.get(field_or_key, field_or_key)


def coerce_record(form: Mapping[str, Any]) -> dict:
    """Turn a form payload into a canonical metrics record.

    Keys may be canonical (``new_leads``) or stored (``newLeads``).
    Every metric is coerced with coerce_count(); the week start date is
    required.

    Raises
    ------
    ValueError if the week start date is missing or unparseable.
    """
    values = {_canonical(k): v for k, v in form.items()}

    week_start = parse_week_start(values.get("week_start_date"))
    if week_start is None:
        raise ValueError("Week Start Date is required.")

    record = {"week_start_date": week_start}
    for field in METRIC_FIELDS:
        record[field] = coerce_count(values.get(field))
    return record


def to_document(record: Mapping[str, Any]) -> dict:
    """Map a canonical record to stored document keys.

    ``id`` and ``created_at`` are not written; the store owns both.
    """
    doc = {}
    for field, doc_key in FIELD_MAP.items():
        if field == "created_at" or field not in record:
            continue
        doc[doc_key] = record[field]
    return doc


def from_document(doc_id: str, data: Mapping[str, Any] | None) -> dict:
    """Map a stored document to a canonical record, coercing every metric."""
    data = data or {}
    values = {_canonical(k): v for k, v in data.items()}

    record = {
        "id": doc_id,
        "week_start_date": parse_week_start(values.get("week_start_date")) or parse_week_start(doc_id),
    }
    for field in METRIC_FIELDS:
        record[field] = coerce_count(values.get(field))
    record["created_at"] = values.get("created_at")
    return record


def build_weekly_frame(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """Build the canonical weekly DataFrame from a snapshot of records.

    Returns
    -------
    DataFrame with columns:
        id, week_start_date, week_start, <METRIC_FIELDS>, created_at
    ``week_start`` is the parsed Timestamp (NaT when unparseable). Missing
    metrics are filled with 0. The input is not modified.
    """
    rows = []
    for rec in records:
        values = {_canonical(k): v for k, v in rec.items()}
        week_start_date = parse_week_start(values.get("week_start_date"))
        row = {
            "id": values.get("id", week_start_date),
            "week_start_date": week_start_date,
            "week_start": pd.Timestamp(week_start_date) if week_start_date else pd.NaT,
        }
        for field in METRIC_FIELDS:
            row[field] = coerce_count(values.get(field))
        row["created_at"] = values.get("created_at")
        rows.append(row)

    if not rows:
        df = pd.DataFrame(columns=FRAME_COLUMNS)
        df["week_start"] = pd.to_datetime(df["week_start"])
        return df.astype({field: "int64" for field in METRIC_FIELDS})

    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["week_start"] = pd.to_datetime(df["week_start"])
    df = df.astype({field: "int64" for field in METRIC_FIELDS})

    logger.debug("Built weekly frame with %d rows", len(df))
    return df


def week_label(ts: Any) -> str:
    """Short chart label for a week start, e.g. 'Jun 9'."""
    if ts is None or pd.isna(ts):
        return ""
    ts = pd.Timestamp(ts)
    return f"{ts:%b} {ts.day}"


def display_date(ts: Any) -> str:
    """US-style display date for a week start, e.g. '6/9/2025'."""
    if ts is None or pd.isna(ts):
        return ""
    ts = pd.Timestamp(ts)
    return f"{ts.month}/{ts.day}/{ts.year}"
