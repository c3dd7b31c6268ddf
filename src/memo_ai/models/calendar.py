"""Data models for the calendar layer.

- :class:`PermissionState` -- cached calendar access state.
- :class:`Calendar` -- one event-capable calendar exposed by the platform.
- :class:`CreateEventOptions` / :class:`EventUpdate` -- create and
  partial-update requests.
- :class:`CalendarEventRecord` -- an event as stored by the platform.
- :class:`ToolResult` -- the never-raising result returned by every
  tool-facing calendar operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class PermissionState(str, Enum):
    """Calendar access state as reported by the platform."""

    UNKNOWN = "unknown"
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


@dataclass(frozen=True)
class Calendar:
    """An event-capable calendar.

    Attributes:
        id: Platform identifier of the calendar.
        title: Display name.
        source_name: Name of the account/source the calendar belongs to.
        is_primary: Whether the platform marks this as the primary calendar.
        allows_modifications: Whether events can be written to it.
    """

    id: str
    title: str
    source_name: str | None = None
    is_primary: bool = False
    allows_modifications: bool = False


@dataclass(frozen=True)
class CreateEventOptions:
    """Request to create a calendar event.

    Attributes:
        title: Event title.
        start_date: Timezone-aware start.
        end_date: Timezone-aware end; must be after *start_date*.
        location: Optional location.
        notes: Optional free-text notes.
        alarm_minutes_before: Single reminder offset, or ``None`` for no
            reminder.
    """

    title: str
    start_date: datetime
    end_date: datetime
    location: str | None = None
    notes: str | None = None
    alarm_minutes_before: int | None = None


@dataclass(frozen=True)
class EventUpdate:
    """Partial update for an existing event.

    Only fields that are not ``None`` are sent to the platform.
    """

    title: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = None
    notes: str | None = None
    alarm_minutes_before: int | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.title,
                self.start_date,
                self.end_date,
                self.location,
                self.notes,
                self.alarm_minutes_before,
            )
        )


@dataclass(frozen=True)
class CalendarEventRecord:
    """A stored calendar event.

    Attributes:
        id: Identifier assigned by the calendar platform.
        title: Event title.
        start_date: Event start.
        end_date: Event end.
        location: Optional location.
        notes: Optional notes.
    """

    id: str
    title: str
    start_date: datetime
    end_date: datetime
    location: str | None = None
    notes: str | None = None

    def to_llm_dict(self) -> dict[str, Any]:
        """Project to plain JSON-serialisable fields with ISO dates."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
        }
        if self.location:
            data["location"] = self.location
        if self.notes:
            data["notes"] = self.notes
        return data


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool-facing calendar operation.

    Tool-facing operations never raise; every failure is reported here with
    ``success=False`` and a human-readable ``error``.

    Attributes:
        success: Whether the operation succeeded.
        event_id: Identifier of a created event.
        events: Upcoming events projected for the language model.
        calendars_count: Number of calendars available after an access check.
        error: Failure description when ``success`` is ``False``.
    """

    success: bool
    event_id: str | None = None
    events: list[dict[str, Any]] | None = field(default=None)
    calendars_count: int | None = None
    error: str | None = None

    @classmethod
    def ok(
        cls,
        *,
        event_id: str | None = None,
        events: list[dict[str, Any]] | None = None,
        calendars_count: int | None = None,
    ) -> ToolResult:
        return cls(
            success=True,
            event_id=event_id,
            events=events,
            calendars_count=calendars_count,
        )

    @classmethod
    def failure(cls, error: str) -> ToolResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase JSON shape handed back to the model."""
        data: dict[str, Any] = {"success": self.success}
        if self.event_id is not None:
            data["eventId"] = self.event_id
        if self.events is not None:
            data["events"] = self.events
        if self.calendars_count is not None:
            data["calendarsCount"] = self.calendars_count
        if self.error is not None:
            data["error"] = self.error
        return data
