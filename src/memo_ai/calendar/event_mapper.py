"""Map between calendar models and Google Calendar API resources.

- :func:`map_create_options` -- :class:`CreateEventOptions` to an
  ``events().insert()`` body.
- :func:`map_event_update` -- :class:`EventUpdate` to an
  ``events().patch()`` body containing only the changed fields.
- :func:`map_calendar` -- a ``calendarList`` entry to :class:`Calendar`.
- :func:`map_google_event` -- an event resource to
  :class:`CalendarEventRecord`.
"""

from __future__ import annotations

import contextlib
import logging
from datetime import datetime
from typing import Any

from memo_ai.exceptions import InvalidInputError
from memo_ai.models.calendar import (
    Calendar,
    CalendarEventRecord,
    CreateEventOptions,
    EventUpdate,
)

logger = logging.getLogger(__name__)

# calendarList access roles that permit event writes.
_WRITABLE_ROLES = frozenset({"owner", "writer"})


def map_create_options(options: CreateEventOptions, timezone: str) -> dict:
    """Convert a create request into a Google Calendar event body.

    Args:
        options: The event to create.
        timezone: IANA timezone attached to the start and end times.

    Returns:
        A ``dict`` conforming to the Google Calendar Event resource schema.

    Raises:
        InvalidInputError: If the end is not after the start.
    """
    if options.end_date <= options.start_date:
        raise InvalidInputError(
            f"end_date ({options.end_date.isoformat()}) must be after "
            f"start_date ({options.start_date.isoformat()})"
        )

    body: dict = {
        "summary": options.title,
        "start": _format_datetime(options.start_date, timezone),
        "end": _format_datetime(options.end_date, timezone),
        "description": options.notes or "",
    }

    if options.location:
        body["location"] = options.location

    if options.alarm_minutes_before is not None:
        body["reminders"] = _build_reminders(options.alarm_minutes_before)

    logger.debug(
        "Mapped event '%s' (%s -> %s) to Google Calendar body",
        options.title,
        options.start_date.isoformat(),
        options.end_date.isoformat(),
    )
    return body


def map_event_update(update: EventUpdate, timezone: str) -> dict:
    """Convert a partial update into a ``patch`` body.

    Only fields set on *update* appear in the result.
    """
    body: dict = {}

    if update.title is not None:
        body["summary"] = update.title
    if update.start_date is not None:
        body["start"] = _format_datetime(update.start_date, timezone)
    if update.end_date is not None:
        body["end"] = _format_datetime(update.end_date, timezone)
    if update.location is not None:
        body["location"] = update.location
    if update.notes is not None:
        body["description"] = update.notes
    if update.alarm_minutes_before is not None:
        body["reminders"] = _build_reminders(update.alarm_minutes_before)

    return body


def map_calendar(entry: dict) -> Calendar:
    """Convert a ``calendarList`` entry into a :class:`Calendar`."""
    return Calendar(
        id=entry["id"],
        title=entry.get("summaryOverride") or entry.get("summary", ""),
        is_primary=bool(entry.get("primary", False)),
        allows_modifications=entry.get("accessRole") in _WRITABLE_ROLES,
    )


def map_google_event(item: dict) -> CalendarEventRecord | None:
    """Convert a Google Calendar event resource into a record.

    Handles both ``dateTime`` (timed) and ``date`` (all-day) fields.

    Returns:
        The record, or ``None`` when the start or end cannot be parsed.
    """
    start = _parse_event_time(item.get("start", {}))
    end = _parse_event_time(item.get("end", {}))
    if start is None or end is None:
        logger.debug("Skipping event %s with unparseable times", item.get("id", "?"))
        return None

    return CalendarEventRecord(
        id=item.get("id", ""),
        title=item.get("summary", ""),
        start_date=start,
        end_date=end,
        location=item.get("location") or None,
        notes=item.get("description") or None,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _format_datetime(dt: datetime, timezone: str) -> dict:
    """Format a datetime as a Google Calendar ``EventDateTime``."""
    return {
        "dateTime": dt.isoformat(),
        "timeZone": timezone,
    }


def _build_reminders(minutes_before: int) -> dict[str, Any]:
    """Build a single popup reminder override."""
    return {
        "useDefault": False,
        "overrides": [{"method": "popup", "minutes": minutes_before}],
    }


def _parse_event_time(value: dict) -> datetime | None:
    raw = value.get("dateTime") or value.get("date")
    if raw is None:
        return None
    with contextlib.suppress(ValueError):
        return datetime.fromisoformat(raw)
    return None
