"""Calendar platform abstraction and its Google Calendar implementation.

:class:`CalendarPlatform` is the narrow capability the
:class:`~memo_ai.calendar.client.CalendarClient` depends on: permission
check/request, calendar enumeration, and event CRUD.
:class:`GoogleCalendarPlatform` implements it on top of the Google
Calendar API v3, treating a usable OAuth token as "granted".

All API calls are wrapped with :func:`~memo_ai.calendar.exceptions.with_retry`
so rate limits and network blips are retried and ``HttpError`` surfaces as
:class:`~memo_ai.calendar.exceptions.CalendarPlatformError`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from googleapiclient.discovery import build
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from memo_ai.calendar.auth import authorize, load_credentials
from memo_ai.calendar.event_mapper import (
    map_calendar,
    map_create_options,
    map_event_update,
    map_google_event,
)
from memo_ai.calendar.exceptions import CalendarPermissionError, with_retry
from memo_ai.models.calendar import (
    Calendar,
    CalendarEventRecord,
    CreateEventOptions,
    EventUpdate,
    PermissionState,
)

logger = logging.getLogger(__name__)

_PRIMARY_CALENDAR = "primary"


class CalendarPlatform(Protocol):
    """Operations a device or account calendar must provide."""

    def get_permission_status(self) -> PermissionState: ...

    def request_permission(self) -> PermissionState: ...

    def list_calendars(self) -> list[Calendar]: ...

    def list_events(
        self,
        calendar_ids: list[str],
        start: datetime,
        end: datetime,
    ) -> list[CalendarEventRecord]: ...

    def create_event(self, calendar_id: str, options: CreateEventOptions) -> str: ...

    def update_event(
        self, event_id: str, update: EventUpdate, calendar_id: str
    ) -> None: ...

    def delete_event(self, event_id: str, calendar_id: str) -> None: ...


class GoogleCalendarPlatform:
    """Google Calendar API v3 backend.

    Args:
        credentials_path: OAuth client secrets file used by the consent flow.
        token_path: Cached user token.
        timezone: IANA timezone attached to event start/end times.
        service: Optional pre-built ``googleapiclient`` service resource.
            When given, permission checks report ``GRANTED`` without
            touching the token files.  Pass a mock here in tests.
    """

    def __init__(
        self,
        credentials_path: Path | str,
        token_path: Path | str,
        timezone: str,
        service: Any | None = None,
    ) -> None:
        self._credentials_path = Path(credentials_path)
        self._token_path = Path(token_path)
        self._timezone = timezone
        self._service = service
        self._declined = False

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def get_permission_status(self) -> PermissionState:
        """Report access without prompting.

        Returns ``GRANTED`` when a usable token exists, ``DENIED`` if the
        user declined consent earlier in this process, otherwise
        ``UNDETERMINED``.
        """
        if self._service is not None:
            return PermissionState.GRANTED

        creds = load_credentials(self._token_path)
        if creds is not None:
            self._service = self._build_service(creds)
            return PermissionState.GRANTED
        if self._declined:
            return PermissionState.DENIED
        return PermissionState.UNDETERMINED

    def request_permission(self) -> PermissionState:
        """Run the browser consent flow.

        Returns ``DENIED`` when the user declines.  A missing client
        secrets file raises :class:`CalendarPlatformError`.
        """
        if self._service is not None:
            return PermissionState.GRANTED

        try:
            creds = authorize(self._credentials_path, self._token_path)
        except OAuth2Error as exc:
            logger.warning("Calendar consent declined: %s", exc)
            self._declined = True
            return PermissionState.DENIED

        self._declined = False
        self._service = self._build_service(creds)
        return PermissionState.GRANTED

    # ------------------------------------------------------------------
    # Calendars and events
    # ------------------------------------------------------------------

    @with_retry()
    def list_calendars(self) -> list[Calendar]:
        """Fetch every calendar on the account's calendar list."""
        calendars: list[Calendar] = []
        page_token: str | None = None

        while True:
            response = (
                self._require_service()
                .calendarList()
                .list(pageToken=page_token)
                .execute()
            )
            calendars.extend(map_calendar(item) for item in response.get("items", []))
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return calendars

    @with_retry()
    def list_events(
        self,
        calendar_ids: list[str],
        start: datetime,
        end: datetime,
    ) -> list[CalendarEventRecord]:
        """Fetch single-instance events across *calendar_ids*, sorted by start."""
        records: list[CalendarEventRecord] = []

        for calendar_id in calendar_ids:
            page_token: str | None = None
            while True:
                response = (
                    self._require_service()
                    .events()
                    .list(
                        calendarId=calendar_id,
                        timeMin=start.isoformat(),
                        timeMax=end.isoformat(),
                        singleEvents=True,
                        orderBy="startTime",
                        pageToken=page_token,
                    )
                    .execute()
                )
                for item in response.get("items", []):
                    record = map_google_event(item)
                    if record is not None:
                        records.append(record)
                page_token = response.get("nextPageToken")
                if page_token is None:
                    break

        records.sort(key=lambda r: r.start_date.isoformat())
        return records

    @with_retry()
    def create_event(self, calendar_id: str, options: CreateEventOptions) -> str:
        body = map_create_options(options, self._timezone)
        result = (
            self._require_service()
            .events()
            .insert(calendarId=calendar_id, body=body)
            .execute()
        )
        return result["id"]

    @with_retry()
    def update_event(
        self,
        event_id: str,
        update: EventUpdate,
        calendar_id: str = _PRIMARY_CALENDAR,
    ) -> None:
        body = map_event_update(update, self._timezone)
        self._require_service().events().patch(
            calendarId=calendar_id, eventId=event_id, body=body
        ).execute()

    @with_retry()
    def delete_event(self, event_id: str, calendar_id: str = _PRIMARY_CALENDAR) -> None:
        self._require_service().events().delete(
            calendarId=calendar_id, eventId=event_id
        ).execute()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_service(creds: Any) -> Any:
        return build("calendar", "v3", credentials=creds, cache_discovery=False)

    def _require_service(self) -> Any:
        # Callers gate on permission first.
        if self._service is None:
            raise CalendarPermissionError()
        return self._service
