"""Turn a loose (date word, time string, duration) triple into a time window.

Used by the ``create_quick_event`` tool.  Everything here is a pure
validating transform: no calendar I/O happens until the resulting window is
handed to :meth:`~memo_ai.calendar.client.CalendarClient.add_event_to_calendar`.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone

from memo_ai.exceptions import InvalidInputError

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$", re.ASCII)

_DATE_TOKENS = {"today": 0, "tomorrow": 1}


def resolve_event_date(value: str, today: date) -> date:
    """Resolve ``"today"``, ``"tomorrow"`` (any case) or an ISO date string.

    Args:
        value: The date word or ISO 8601 date/datetime string.
        today: The reference day for the relative tokens.

    Raises:
        InvalidInputError: If *value* is neither a token nor parseable.
    """
    cleaned = value.strip()
    offset = _DATE_TOKENS.get(cleaned.lower())
    if offset is not None:
        return today + timedelta(days=offset)

    try:
        return datetime.fromisoformat(cleaned).date()
    except ValueError as exc:
        raise InvalidInputError(
            'Invalid date. Use "today", "tomorrow", or ISO date string'
        ) from exc


def parse_event_time(value: str) -> time:
    """Parse a strict ``H:MM`` / ``HH:MM`` 24-hour time.

    Raises:
        InvalidInputError: On any other shape, or hour/minute out of range.
    """
    match = _TIME_PATTERN.match(value.strip())
    if match is None:
        raise InvalidInputError(
            'Invalid time format. Use HH:MM format (e.g., "10:00" or "14:30")'
        )

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise InvalidInputError(
            "Invalid time. Hours must be 0-23, minutes must be 0-59"
        )
    return time(hours, minutes)


def build_event_window(
    date_text: str,
    time_text: str,
    duration_minutes: int,
    now: datetime,
) -> tuple[datetime, datetime]:
    """Compose a concrete ``(start, end)`` pair.

    The start is the resolved day at the given wall-clock time in the
    timezone of *now*; both bounds are returned in UTC so that
    ``end - start`` is exactly *duration_minutes* even across DST changes.

    Args:
        date_text: ``"today"``, ``"tomorrow"`` or an ISO date.
        time_text: ``HH:MM`` start time.
        duration_minutes: Event length in minutes; must be positive.
        now: Current aware datetime; its timezone is the local timezone.

    Raises:
        InvalidInputError: On a bad date, time, or duration.
    """
    if duration_minutes <= 0:
        raise InvalidInputError("Duration must be a positive number of minutes")

    day = resolve_event_date(date_text, now.date())
    start_time = parse_event_time(time_text)

    start = datetime.combine(day, start_time, tzinfo=now.tzinfo).astimezone(
        timezone.utc
    )
    return start, start + timedelta(minutes=duration_minutes)
