"""Calendar integration for memo-ai."""

from __future__ import annotations

from memo_ai.calendar.client import CalendarClient
from memo_ai.calendar.exceptions import (
    CalendarError,
    CalendarPermissionError,
    CalendarPlatformError,
    NoCalendarAvailableError,
)
from memo_ai.calendar.platform import CalendarPlatform, GoogleCalendarPlatform
from memo_ai.calendar.quick_event import build_event_window
from memo_ai.calendar.tools import TOOL_SCHEMAS, CalendarTools, function_declarations

__all__ = [
    "TOOL_SCHEMAS",
    "CalendarClient",
    "CalendarError",
    "CalendarPermissionError",
    "CalendarPlatform",
    "CalendarPlatformError",
    "CalendarTools",
    "GoogleCalendarPlatform",
    "NoCalendarAvailableError",
    "build_event_window",
    "function_declarations",
]
