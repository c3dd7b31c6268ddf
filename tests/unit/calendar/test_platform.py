"""Tests for :class:`memo_ai.calendar.platform.GoogleCalendarPlatform`.

The Google API service resource is a ``MagicMock``; OAuth helpers are
patched where the platform imports them.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest
from googleapiclient.errors import HttpError
from httplib2 import Response
from oauthlib.oauth2.rfc6749.errors import AccessDeniedError

from memo_ai.calendar.exceptions import CalendarPermissionError, CalendarPlatformError
from memo_ai.calendar.platform import GoogleCalendarPlatform
from memo_ai.models.calendar import CreateEventOptions, EventUpdate, PermissionState

TZ_NAME = "America/Vancouver"
VANCOUVER = ZoneInfo(TZ_NAME)


def _make_platform(service: MagicMock | None = None, tmp_path=None) -> GoogleCalendarPlatform:
    base = tmp_path or "."
    return GoogleCalendarPlatform(
        credentials_path=f"{base}/credentials.json",
        token_path=f"{base}/token.json",
        timezone=TZ_NAME,
        service=service,
    )


def _event(event_id: str, start: str, end: str) -> dict:
    return {
        "id": event_id,
        "summary": event_id.title(),
        "start": {"dateTime": start},
        "end": {"dateTime": end},
    }


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


class TestPermissions:
    def test_injected_service_is_granted(self) -> None:
        platform = _make_platform(MagicMock())
        assert platform.get_permission_status() is PermissionState.GRANTED
        assert platform.request_permission() is PermissionState.GRANTED

    def test_no_token_is_undetermined(self, tmp_path) -> None:
        platform = _make_platform(tmp_path=tmp_path)
        with patch("memo_ai.calendar.platform.load_credentials", return_value=None):
            assert platform.get_permission_status() is PermissionState.UNDETERMINED

    def test_usable_token_is_granted(self, tmp_path) -> None:
        platform = _make_platform(tmp_path=tmp_path)
        creds = MagicMock()
        with patch("memo_ai.calendar.platform.load_credentials", return_value=creds), patch(
            "memo_ai.calendar.platform.build"
        ) as mock_build:
            assert platform.get_permission_status() is PermissionState.GRANTED

        mock_build.assert_called_once_with(
            "calendar", "v3", credentials=creds, cache_discovery=False
        )

    def test_declined_consent_is_denied(self, tmp_path) -> None:
        platform = _make_platform(tmp_path=tmp_path)
        with patch("memo_ai.calendar.platform.load_credentials", return_value=None), patch(
            "memo_ai.calendar.platform.authorize", side_effect=AccessDeniedError()
        ):
            assert platform.request_permission() is PermissionState.DENIED
            assert platform.get_permission_status() is PermissionState.DENIED

    def test_consent_granted(self, tmp_path) -> None:
        platform = _make_platform(tmp_path=tmp_path)
        with patch("memo_ai.calendar.platform.authorize", return_value=MagicMock()), patch(
            "memo_ai.calendar.platform.build"
        ):
            assert platform.request_permission() is PermissionState.GRANTED
        assert platform.get_permission_status() is PermissionState.GRANTED

    def test_calls_without_service_raise(self, tmp_path) -> None:
        platform = _make_platform(tmp_path=tmp_path)
        with pytest.raises(CalendarPermissionError):
            platform.list_calendars()


# ---------------------------------------------------------------------------
# Calendars and events
# ---------------------------------------------------------------------------


class TestListCalendars:
    def test_paginates(self) -> None:
        service = MagicMock()
        service.calendarList.return_value.list.return_value.execute.side_effect = [
            {"items": [{"id": "a", "summary": "A", "primary": True}], "nextPageToken": "p2"},
            {"items": [{"id": "b", "summary": "B", "accessRole": "writer"}]},
        ]

        calendars = _make_platform(service).list_calendars()

        assert [cal.id for cal in calendars] == ["a", "b"]
        assert calendars[0].is_primary is True
        assert calendars[1].allows_modifications is True
        service.calendarList.return_value.list.assert_any_call(pageToken="p2")


class TestListEvents:
    def test_merges_and_sorts_across_calendars(self) -> None:
        service = MagicMock()
        service.events.return_value.list.return_value.execute.side_effect = [
            {"items": [_event("late", "2026-03-12T15:00:00-07:00", "2026-03-12T16:00:00-07:00")]},
            {"items": [_event("early", "2026-03-12T09:00:00-07:00", "2026-03-12T10:00:00-07:00")]},
        ]
        start = datetime(2026, 3, 10, tzinfo=VANCOUVER)
        end = datetime(2026, 3, 17, tzinfo=VANCOUVER)

        records = _make_platform(service).list_events(["work", "home"], start, end)

        assert [r.id for r in records] == ["early", "late"]
        service.events.return_value.list.assert_any_call(
            calendarId="work",
            timeMin=start.isoformat(),
            timeMax=end.isoformat(),
            singleEvents=True,
            orderBy="startTime",
            pageToken=None,
        )


class TestEventWrites:
    def _options(self) -> CreateEventOptions:
        return CreateEventOptions(
            title="Budget review",
            start_date=datetime(2026, 3, 11, 10, 0, tzinfo=VANCOUVER),
            end_date=datetime(2026, 3, 11, 11, 0, tzinfo=VANCOUVER),
            alarm_minutes_before=15,
        )

    def test_create_returns_id(self) -> None:
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.return_value = {"id": "g-1"}

        event_id = _make_platform(service).create_event("work", self._options())

        assert event_id == "g-1"
        kwargs = service.events.return_value.insert.call_args.kwargs
        assert kwargs["calendarId"] == "work"
        assert kwargs["body"]["summary"] == "Budget review"

    def test_create_http_error_mapped(self) -> None:
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.side_effect = HttpError(
            Response({"status": "500"}), b"server error"
        )

        with pytest.raises(CalendarPlatformError) as exc_info:
            _make_platform(service).create_event("work", self._options())
        assert exc_info.value.status_code == 500

    def test_update_patches(self) -> None:
        service = MagicMock()
        _make_platform(service).update_event("g-1", EventUpdate(title="Renamed"), "work")
        service.events.return_value.patch.assert_called_once_with(
            calendarId="work", eventId="g-1", body={"summary": "Renamed"}
        )

    def test_delete(self) -> None:
        service = MagicMock()
        _make_platform(service).delete_event("g-1", "work")
        service.events.return_value.delete.assert_called_once_with(
            calendarId="work", eventId="g-1"
        )
