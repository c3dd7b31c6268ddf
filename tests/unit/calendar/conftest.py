"""Shared fixtures for calendar unit tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, create_autospec
from zoneinfo import ZoneInfo

import pytest
from google.oauth2.credentials import Credentials

from memo_ai.calendar.client import CalendarClient
from memo_ai.calendar.platform import CalendarPlatform
from memo_ai.models.calendar import Calendar, PermissionState

VANCOUVER = ZoneInfo("America/Vancouver")
FIXED_NOW = datetime(2026, 3, 10, 9, 30, tzinfo=VANCOUVER)


def _make_platform(
    status: PermissionState = PermissionState.GRANTED,
    calendars: list[Calendar] | None = None,
) -> MagicMock:
    """Return a mock :class:`CalendarPlatform` with sensible defaults."""
    platform = create_autospec(CalendarPlatform, instance=True)
    platform.get_permission_status.return_value = status
    platform.request_permission.return_value = status
    platform.list_calendars.return_value = (
        calendars
        if calendars is not None
        else [Calendar(id="primary-id", title="Work", is_primary=True, allows_modifications=True)]
    )
    platform.list_events.return_value = []
    platform.create_event.return_value = "evt-1"
    return platform


def _make_client(platform: MagicMock, now: datetime = FIXED_NOW) -> CalendarClient:
    """Return a :class:`CalendarClient` with a frozen clock."""
    return CalendarClient(
        platform,
        timezone="America/Vancouver",
        default_alarm_minutes=15,
        clock=lambda: now,
    )


@pytest.fixture()
def platform() -> MagicMock:
    return _make_platform()


@pytest.fixture()
def client(platform: MagicMock) -> CalendarClient:
    return _make_client(platform)


@pytest.fixture()
def mock_credentials() -> MagicMock:
    """Return a mock Credentials object that reports as valid."""
    creds = create_autospec(Credentials, instance=True)
    creds.valid = True
    creds.expired = False
    creds.refresh_token = "fake-refresh-token"
    creds.to_json.return_value = '{"token": "fake"}'
    return creds


@pytest.fixture()
def mock_expired_credentials() -> MagicMock:
    """Return a mock Credentials object that is expired but has a refresh token."""
    creds = create_autospec(Credentials, instance=True)
    creds.valid = False
    creds.expired = True
    creds.refresh_token = "fake-refresh-token"
    creds.to_json.return_value = '{"token": "refreshed"}'
    return creds


@pytest.fixture()
def tmp_credentials_file(tmp_path: Path) -> Path:
    """Write a minimal credentials.json to a temp directory and return its path."""
    creds_path = tmp_path / "credentials.json"
    creds_path.write_text('{"installed": {"client_id": "fake", "client_secret": "fake"}}')
    return creds_path


@pytest.fixture()
def tmp_token_file(tmp_path: Path) -> Path:
    """Return a path for token.json in a temp directory (file does not exist yet)."""
    return tmp_path / "token.json"
