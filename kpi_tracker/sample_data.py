"""
Built-in sample dataset: nine example weeks of outreach activity.

Used to seed an empty collection the first time it is subscribed to,
and by the CLI smoke test.
"""

from .config import METRIC_FIELDS

# week_start_date, then METRIC_FIELDS in order:
# new_leads, emails_delivered, emails_opened, emails_replied,
# profile_visits, connection_requests, likes, messages_sent,
# calls_dialed, calls_connected, meetings_booked
SAMPLE_WEEKS = [
    ("2025-06-09", 70, 115, 28, 0, 55, 60, 12, 3, 2, 0, 1),
    ("2025-06-16", 75, 120, 30, 1, 60, 65, 15, 4, 5, 1, 0),
    ("2025-06-23", 80, 133, 43, 0, 79, 70, 17, 5, 3, 0, 0),
    ("2025-06-30", 81, 190, 38, 0, 85, 80, 32, 11, 0, 0, 0),
    ("2025-07-07", 106, 251, 40, 0, 107, 96, 61, 41, 0, 0, 0),
    ("2025-07-14", 49, 201, 36, 0, 73, 60, 32, 17, 0, 0, 0),
    ("2025-07-21", 91, 187, 37, 0, 92, 80, 29, 10, 0, 0, 0),
    ("2025-07-28", 253, 244, 44, 0, 95, 65, 47, 10, 563, 30, 3),
    ("2025-08-04", 298, 361, 123, 0, 205, 100, 47, 22, 387, 28, 4),
]


def get_sample_records() -> list[dict]:
    """Return fresh canonical records for the sample weeks."""
    records = []
    for week_start_date, *counts in SAMPLE_WEEKS:
        record = {"week_start_date": week_start_date}
        record.update(zip(METRIC_FIELDS, counts))
        records.append(record)
    return records
