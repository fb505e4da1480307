"""
Pytest fixtures for the console navigation core.

Everything runs in-process: dashboards are built from the helpers in
tests/helpers/factories.py and the database layer is exercised with mocked
AsyncSessions.
"""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("GOVBOT_ENVIRONMENT", "testing")

from src.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Fresh settings per test so env overrides do not leak between tests."""
    monkeypatch.setenv("GOVBOT_ENVIRONMENT", "testing")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def admin_ids(monkeypatch):
    """Make 'admin-1' a console admin for the duration of a test."""
    monkeypatch.setenv("GOVBOT_ADMIN_USER_IDS", "admin-1")
    get_settings.cache_clear()
    return ["admin-1"]
