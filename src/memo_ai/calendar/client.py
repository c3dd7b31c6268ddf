"""Calendar client with cached permission state and calendar list.

Provides :class:`CalendarClient`, an explicitly constructed wrapper around a
:class:`~memo_ai.calendar.platform.CalendarPlatform` that adds:

- **Cached state** -- the last known :class:`PermissionState` and the list
  of event-capable calendars, refreshed only by explicit calls.
- **Default-calendar selection** over the cached list.
- **Low-level CRUD** (``fetch_events``, ``create_event``, ``update_event``,
  ``delete_event``) that raises calendar exceptions with fixed messages.
- **Tool-facing operations** (``add_event_to_calendar``,
  ``get_upcoming_events_for_llm``, ``ensure_calendar_access``) that never
  raise and report every failure through a
  :class:`~memo_ai.models.calendar.ToolResult`.

Refreshes of the cached state are serialised with a lock so two pipelines
sharing one client cannot interleave a permission check and a calendar load.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from memo_ai.calendar.exceptions import (
    CalendarError,
    CalendarPermissionError,
    CalendarPlatformError,
    NoCalendarAvailableError,
)
from memo_ai.calendar.platform import CalendarPlatform
from memo_ai.exceptions import InvalidInputError
from memo_ai.models.calendar import (
    Calendar,
    CalendarEventRecord,
    CreateEventOptions,
    EventUpdate,
    PermissionState,
    ToolResult,
)

logger = logging.getLogger(__name__)

_DEFAULT_SOURCE_NAME = "Default"
# Google alias for the signed-in user's main calendar.
_FALLBACK_CALENDAR_ID = "primary"

_PERMISSION_HINT = (
    "Calendar permission not granted. "
    "Please allow calendar access in device settings."
)
_INVALID_DATE_HINT = (
    "Invalid date format. Please use ISO date strings "
    '(e.g., "2025-08-08T10:00:00.000Z")'
)


class CalendarClient:
    """Permission-aware calendar client.

    Args:
        platform: Backend implementing the calendar capability.
        timezone: IANA timezone used for naive timestamps and for "now".
        default_alarm_minutes: Reminder applied by
            :meth:`add_event_to_calendar` when the caller gives none.
        clock: Optional callable returning the current aware ``datetime``.
            Defaults to ``datetime.now`` in *timezone*; override in tests.
    """

    def __init__(
        self,
        platform: CalendarPlatform,
        timezone: str = "UTC",
        default_alarm_minutes: int = 15,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._platform = platform
        self._tz = ZoneInfo(timezone)
        self._default_alarm_minutes = default_alarm_minutes
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._permission = PermissionState.UNKNOWN
        self._calendars: list[Calendar] = []
        self._lock = threading.Lock()

    @property
    def timezone(self) -> ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        """Return the current time according to the client's clock."""
        return self._clock()

    # ------------------------------------------------------------------
    # Permissions and calendars
    # ------------------------------------------------------------------

    def check_permissions(self) -> PermissionState:
        """Query the platform for the current permission state.

        Raises:
            CalendarPlatformError: If the platform query fails.
        """
        with self._lock:
            try:
                status = PermissionState(self._platform.get_permission_status())
            except Exception as exc:
                logger.error("Error checking calendar permissions: %s", exc)
                raise CalendarPlatformError(
                    "Failed to check calendar permissions"
                ) from exc
            self._permission = status

        logger.info("Calendar permission status: %s", status.value)
        return status

    def request_permissions(self) -> PermissionState:
        """Prompt the user for calendar access.

        Raises:
            CalendarPlatformError: If the platform request fails.
        """
        with self._lock:
            try:
                status = PermissionState(self._platform.request_permission())
            except Exception as exc:
                logger.error("Error requesting calendar permissions: %s", exc)
                raise CalendarPlatformError(
                    "Failed to request calendar permissions"
                ) from exc
            self._permission = status

        logger.info("Calendar permission status after request: %s", status.value)
        return status

    def get_permission_status(self) -> PermissionState:
        """Return the cached permission state without querying."""
        return self._permission

    def load_calendars(self) -> list[Calendar]:
        """Fetch all event-capable calendars and replace the cached list.

        Raises:
            CalendarPlatformError: If the platform listing fails.
        """
        with self._lock:
            try:
                calendars = list(self._platform.list_calendars())
            except Exception as exc:
                logger.error("Error loading calendars: %s", exc)
                raise CalendarPlatformError("Failed to load calendars") from exc
            self._calendars = calendars

        logger.info("Loaded %d calendar(s)", len(calendars))
        return list(calendars)

    def get_calendars(self) -> list[Calendar]:
        """Return a copy of the cached calendar list."""
        return list(self._calendars)

    def get_default_calendar(self) -> Calendar | None:
        """Pick the calendar new events go to.

        Priority: a calendar whose source is named ``"Default"``, then the
        primary calendar, then any writable calendar, then the first cached
        calendar.  Never triggers a load.

        Returns:
            The chosen :class:`Calendar`, or ``None`` if the cache is empty.
        """
        calendars = self._calendars
        if not calendars:
            return None

        for predicate in (
            lambda cal: cal.source_name == _DEFAULT_SOURCE_NAME,
            lambda cal: cal.is_primary,
            lambda cal: cal.allows_modifications,
        ):
            for calendar in calendars:
                if predicate(calendar):
                    return calendar

        return calendars[0]

    # ------------------------------------------------------------------
    # Low-level operations (raise on failure)
    # ------------------------------------------------------------------

    def fetch_events(
        self,
        start: datetime,
        end: datetime,
        calendar_ids: list[str] | None = None,
    ) -> list[CalendarEventRecord]:
        """List events between *start* and *end*.

        Args:
            start: Start of the window.
            end: End of the window.
            calendar_ids: Calendars to search; defaults to all cached ones.

        Raises:
            CalendarPermissionError: If access has not been granted.
            NoCalendarAvailableError: If there are no calendars to search.
            CalendarPlatformError: If the platform listing fails.
        """
        self._require_permission()

        target_ids = calendar_ids or [cal.id for cal in self._calendars]
        if not target_ids:
            raise NoCalendarAvailableError("No calendars available")

        try:
            events = self._platform.list_events(target_ids, start, end)
        except Exception as exc:
            logger.error("Error fetching calendar events: %s", exc)
            raise CalendarPlatformError(
                "Failed to fetch calendar events", _status_of(exc)
            ) from exc

        logger.info(
            "Fetched %d event(s) from %d calendar(s)", len(events), len(target_ids)
        )
        return events

    def create_event(
        self,
        options: CreateEventOptions,
        calendar_id: str | None = None,
    ) -> str:
        """Create an event and return its platform identifier.

        Args:
            options: The event to create.
            calendar_id: Target calendar; defaults to
                :meth:`get_default_calendar`.

        Raises:
            CalendarPermissionError: If access has not been granted.
            NoCalendarAvailableError: If no target calendar resolves.
            InvalidInputError: If the end is not after the start.
            CalendarPlatformError: If the platform create call fails.
        """
        self._require_permission()
        target = self._resolve_calendar(calendar_id)

        try:
            event_id = self._platform.create_event(target.id, options)
        except InvalidInputError:
            raise
        except Exception as exc:
            logger.error("Error creating calendar event '%s': %s", options.title, exc)
            raise CalendarPlatformError(
                "Failed to create calendar event", _status_of(exc)
            ) from exc

        logger.info("Created event '%s' (id=%s)", options.title, event_id)
        return event_id

    def update_event(
        self,
        event_id: str,
        update: EventUpdate,
        calendar_id: str | None = None,
    ) -> None:
        """Apply a partial update; only fields set on *update* change.

        Raises:
            CalendarPermissionError: If access has not been granted.
            CalendarPlatformError: If the platform update call fails.
        """
        self._require_permission()
        target_id = self._existing_event_calendar(calendar_id)

        if update.is_empty():
            logger.info("No fields to update for event %s", event_id)
            return

        try:
            self._platform.update_event(event_id, update, target_id)
        except Exception as exc:
            logger.error("Error updating calendar event %s: %s", event_id, exc)
            raise CalendarPlatformError(
                "Failed to update calendar event", _status_of(exc)
            ) from exc

        logger.info("Updated event (id=%s)", event_id)

    def delete_event(self, event_id: str, calendar_id: str | None = None) -> None:
        """Delete an event by identifier.

        Raises:
            CalendarPermissionError: If access has not been granted.
            CalendarPlatformError: If the platform delete call fails.
        """
        self._require_permission()
        target_id = self._existing_event_calendar(calendar_id)

        try:
            self._platform.delete_event(event_id, target_id)
        except Exception as exc:
            logger.error("Error deleting calendar event %s: %s", event_id, exc)
            raise CalendarPlatformError(
                "Failed to delete calendar event", _status_of(exc)
            ) from exc

        logger.info("Deleted event (id=%s)", event_id)

    def get_upcoming_events(self, days: int = 7) -> list[CalendarEventRecord]:
        """Events from now until *days* days from now."""
        start = self.now()
        return self.fetch_events(start, start + timedelta(days=days))

    def get_current_month_events(self) -> list[CalendarEventRecord]:
        """Events from the first to the last second of the current month."""
        now = self.now()
        start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return self.fetch_events(start, next_month - timedelta(seconds=1))

    # ------------------------------------------------------------------
    # Tool-facing operations (never raise)
    # ------------------------------------------------------------------

    def add_event_to_calendar(
        self,
        title: str,
        start_date: str | datetime,
        end_date: str | datetime,
        location: str | None = None,
        notes: str | None = None,
        alarm_minutes_before: int | None = None,
    ) -> ToolResult:
        """Create an event from loosely typed input.

        Ensures permission (requesting it once if needed), loads calendars
        when the cache is empty, parses and validates the timestamps, then
        creates the event with a default reminder.

        Args:
            title: Event title.
            start_date: ISO 8601 string or ``datetime``; naive values are
                interpreted in the client timezone.
            end_date: ISO 8601 string or ``datetime``.
            location: Optional location.
            notes: Optional notes.
            alarm_minutes_before: Reminder offset; defaults to the client's
                ``default_alarm_minutes``.

        Returns:
            ``ToolResult`` with ``event_id`` on success, ``error`` otherwise.
        """
        try:
            if not self._ensure_permission():
                return ToolResult.failure(_PERMISSION_HINT)

            if not self._calendars:
                self.load_calendars()

            try:
                start = self._parse_timestamp(start_date)
                end = self._parse_timestamp(end_date)
            except (TypeError, ValueError):
                return ToolResult.failure(_INVALID_DATE_HINT)

            if start >= end:
                return ToolResult.failure("Start date must be before end date")

            event_id = self.create_event(
                CreateEventOptions(
                    title=title,
                    start_date=start,
                    end_date=end,
                    location=location,
                    notes=notes,
                    alarm_minutes_before=(
                        alarm_minutes_before
                        if alarm_minutes_before is not None
                        else self._default_alarm_minutes
                    ),
                )
            )
            return ToolResult.ok(event_id=event_id)

        except Exception as exc:
            logger.error("Error in add_event_to_calendar: %s", exc)
            return ToolResult.failure(_error_message(exc))

    def get_upcoming_events_for_llm(self, days: int = 7) -> ToolResult:
        """List upcoming events as plain JSON-ready dicts.

        Returns:
            ``ToolResult`` with ``events`` on success, ``error`` otherwise.
        """
        try:
            if self.check_permissions() is not PermissionState.GRANTED:
                return ToolResult.failure("Calendar permission not granted")

            if not self._calendars:
                self.load_calendars()

            events = self.get_upcoming_events(days)
            return ToolResult.ok(events=[event.to_llm_dict() for event in events])

        except Exception as exc:
            logger.error("Error in get_upcoming_events_for_llm: %s", exc)
            return ToolResult.failure(_error_message(exc))

    def ensure_calendar_access(self) -> ToolResult:
        """Check permission, request it if missing, and load calendars.

        Returns:
            ``ToolResult`` with ``calendars_count`` on success.
        """
        try:
            if not self._ensure_permission():
                return ToolResult.failure("Calendar permission denied by user")

            calendars = self.load_calendars()
            return ToolResult.ok(calendars_count=len(calendars))

        except Exception as exc:
            logger.error("Error ensuring calendar access: %s", exc)
            return ToolResult.failure(_error_message(exc))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_permission(self) -> bool:
        """Check permission and request it once if not granted."""
        if self.check_permissions() is PermissionState.GRANTED:
            return True
        return self.request_permissions() is PermissionState.GRANTED

    def _require_permission(self) -> None:
        if self._permission is not PermissionState.GRANTED:
            raise CalendarPermissionError()

    def _resolve_calendar(self, calendar_id: str | None) -> Calendar:
        if calendar_id is not None:
            target = next(
                (cal for cal in self._calendars if cal.id == calendar_id), None
            )
        else:
            target = self.get_default_calendar()

        if target is None:
            raise NoCalendarAvailableError()
        return target

    def _existing_event_calendar(self, calendar_id: str | None) -> str:
        if calendar_id is not None:
            return calendar_id
        default = self.get_default_calendar()
        return default.id if default is not None else _FALLBACK_CALENDAR_ID

    def _parse_timestamp(self, value: str | datetime) -> datetime:
        parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self._tz)
        return parsed


def _status_of(exc: Exception) -> int | None:
    return exc.status_code if isinstance(exc, CalendarPlatformError) else None


def _error_message(exc: Exception) -> str:
    message = str(exc)
    if message:
        return message
    if isinstance(exc, CalendarError):
        return type(exc).__name__
    return "Unknown error occurred"
