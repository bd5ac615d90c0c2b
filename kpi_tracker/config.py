"""
Configuration: metric registry, goals, backend settings.

METRIC_FIELDS lists the eleven weekly counters in canonical order.
FIELD_MAP maps each canonical column name to the key used in stored
documents, which keep the camelCase names of the existing collection.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

APP_TITLE = "Sales KPI Tracker"

# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------
WEEKLY_OUTBOUND_GOAL = 160
DAILY_OUTBOUND_GOAL = 32

RECENT_WINDOW_WEEKS = 8

NOT_APPLICABLE = "N/A"

# ---------------------------------------------------------------------------
# Metric registry
# ---------------------------------------------------------------------------
METRIC_FIELDS: list[str] = [
    "new_leads",
    "emails_delivered",
    "emails_opened",
    "emails_replied",
    "profile_visits",
    "connection_requests",
    "likes",
    "messages_sent",
    "calls_dialed",
    "calls_connected",
    "meetings_booked",
]

# Components of the composite counters
OUTBOUND_FIELDS = [
    "emails_delivered",
    "profile_visits",
    "connection_requests",
    "messages_sent",
    "calls_dialed",
    "likes",
]
LINKEDIN_FIELDS = [
    "profile_visits",
    "connection_requests",
    "likes",
    "messages_sent",
]

# Canonical column name -> stored document key
FIELD_MAP: dict[str, str] = {
    "week_start_date": "weekStartDate",
    "new_leads": "newLeads",
    "emails_delivered": "emailsDelivered",
    "emails_opened": "emailsOpened",
    "emails_replied": "emailsReplied",
    "profile_visits": "profileVisits",
    "connection_requests": "connectionRequests",
    "likes": "likes",
    "messages_sent": "messagesSent",
    "calls_dialed": "callsDialed",
    "calls_connected": "callsConnected",
    "meetings_booked": "meetingsBooked",
    "created_at": "createdAt",
}

FIELD_LABELS: dict[str, str] = {
    "week_start_date": "Week Start Date",
    "new_leads": "New Leads",
    "emails_delivered": "Emails Delivered",
    "emails_opened": "Emails Opened",
    "emails_replied": "Emails Replied",
    "profile_visits": "Profile Visits",
    "connection_requests": "Connection Requests",
    "likes": "Likes",
    "messages_sent": "Messages Sent",
    "calls_dialed": "Calls Dialed",
    "calls_connected": "Calls Connected",
    "meetings_booked": "Meetings Booked",
}

# Form layout: (section title, [(field, placeholder), ...])
FORM_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    ("Leads", [("new_leads", "e.g., 80")]),
    ("Emails", [
        ("emails_delivered", "e.g., 133"),
        ("emails_opened", "e.g., 43"),
        ("emails_replied", "e.g., 0"),
    ]),
    ("LinkedIn", [
        ("profile_visits", "e.g., 79"),
        ("connection_requests", "e.g., 70"),
        ("likes", "e.g., 17"),
        ("messages_sent", "e.g., 5"),
    ]),
    ("Calls & Meetings", [
        ("calls_dialed", "e.g., 3"),
        ("calls_connected", "e.g., 0"),
        ("meetings_booked", "e.g., 0"),
    ]),
]

# ---------------------------------------------------------------------------
# Remote store layout
# ---------------------------------------------------------------------------
DEFAULT_APP_ID = "default-app-id"
COLLECTION_TEMPLATE = "artifacts/{app_id}/users/{user_id}/weeklyData"

BACKEND_FIRESTORE = "firestore"
BACKEND_MEMORY = "memory"


@dataclass(frozen=True)
class BackendConfig:
    """Settings for the remote record store, read from the environment."""

    backend: str = BACKEND_FIRESTORE
    credentials_path: str | None = None
    project_id: str | None = None
    app_id: str = DEFAULT_APP_ID
    auth_token: str | None = None
    user_id: str | None = None
    refresh_seconds: int = 5

    @property
    def is_configured(self) -> bool:
        if self.backend == BACKEND_MEMORY:
            return True
        return bool(self.credentials_path or self.project_id)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def load_backend_config() -> BackendConfig:
    """Build BackendConfig from environment variables (and a .env file if present)."""
    load_dotenv()

    backend = os.getenv("KPI_TRACKER_BACKEND", BACKEND_FIRESTORE).strip().lower()
    if backend not in {BACKEND_FIRESTORE, BACKEND_MEMORY}:
        logger.warning("Unknown backend '%s', falling back to '%s'", backend, BACKEND_FIRESTORE)
        backend = BACKEND_FIRESTORE

    return BackendConfig(
        backend=backend,
        credentials_path=os.getenv("FIREBASE_CREDENTIALS") or os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
        project_id=os.getenv("FIREBASE_PROJECT_ID"),
        app_id=os.getenv("KPI_TRACKER_APP_ID", DEFAULT_APP_ID),
        auth_token=os.getenv("KPI_TRACKER_AUTH_TOKEN") or None,
        user_id=os.getenv("KPI_TRACKER_USER_ID") or None,
        refresh_seconds=_env_int("KPI_TRACKER_REFRESH_SECONDS", 5),
    )
