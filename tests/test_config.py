"""Tests for backend configuration loading."""

from __future__ import annotations

import pytest

from kpi_tracker import config as config_module
from kpi_tracker.config import (
    BACKEND_FIRESTORE,
    BACKEND_MEMORY,
    DEFAULT_APP_ID,
    BackendConfig,
    load_backend_config,
)

_ENV_VARS = [
    "KPI_TRACKER_BACKEND",
    "FIREBASE_CREDENTIALS",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "FIREBASE_PROJECT_ID",
    "KPI_TRACKER_APP_ID",
    "KPI_TRACKER_AUTH_TOKEN",
    "KPI_TRACKER_USER_ID",
    "KPI_TRACKER_REFRESH_SECONDS",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda: False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = load_backend_config()
    assert cfg.backend == BACKEND_FIRESTORE
    assert cfg.app_id == DEFAULT_APP_ID
    assert cfg.refresh_seconds == 5
    assert cfg.is_configured is False


def test_firestore_from_env(clean_env):
    clean_env.setenv("FIREBASE_CREDENTIALS", "/secrets/sa.json")
    clean_env.setenv("KPI_TRACKER_APP_ID", "sales")
    clean_env.setenv("KPI_TRACKER_AUTH_TOKEN", "tok")
    cfg = load_backend_config()
    assert cfg.credentials_path == "/secrets/sa.json"
    assert cfg.app_id == "sales"
    assert cfg.auth_token == "tok"
    assert cfg.is_configured is True


def test_memory_backend_is_configured(clean_env):
    clean_env.setenv("KPI_TRACKER_BACKEND", "Memory")
    cfg = load_backend_config()
    assert cfg.backend == BACKEND_MEMORY
    assert cfg.is_configured is True


def test_unknown_backend_falls_back(clean_env):
    clean_env.setenv("KPI_TRACKER_BACKEND", "postgres")
    assert load_backend_config().backend == BACKEND_FIRESTORE


def test_bad_refresh_seconds(clean_env):
    clean_env.setenv("KPI_TRACKER_REFRESH_SECONDS", "soon")
    assert load_backend_config().refresh_seconds == 5


def test_project_id_alone_is_configured():
    assert BackendConfig(project_id="demo").is_configured is True
