"""Calendar tools exposed to the language model.

Publishes three function-calling tools and routes calls to the
:class:`~memo_ai.calendar.client.CalendarClient`:

========================  =====================================================
Tool                      Operation
========================  =====================================================
``add_calendar_event``    :meth:`CalendarClient.add_event_to_calendar`
``get_upcoming_events``   :meth:`CalendarClient.get_upcoming_events_for_llm`
``create_quick_event``    :meth:`CalendarTools.create_quick_event`
========================  =====================================================

:meth:`CalendarTools.execute` never raises: unknown tools, missing
parameters, access failures and unexpected exceptions all come back as a
failed :class:`~memo_ai.models.calendar.ToolResult`.
"""

from __future__ import annotations

import logging
from typing import Any

from google.genai import types as genai_types

from memo_ai.calendar.client import CalendarClient
from memo_ai.calendar.quick_event import build_event_window
from memo_ai.config import EventDefaults
from memo_ai.models.calendar import ToolResult

logger = logging.getLogger(__name__)

ADD_CALENDAR_EVENT = "add_calendar_event"
GET_UPCOMING_EVENTS = "get_upcoming_events"
CREATE_QUICK_EVENT = "create_quick_event"
ENSURE_ACCESS = "ensure_access"

TOOL_SCHEMAS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": ADD_CALENDAR_EVENT,
            "description": "Add an event to the user's calendar",
            "parameters": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Event title"},
                    "startDate": {
                        "type": "string",
                        "description": (
                            "Event start date and time in ISO format "
                            "(e.g., '2025-08-08T10:00:00.000Z')"
                        ),
                    },
                    "endDate": {
                        "type": "string",
                        "description": (
                            "Event end date and time in ISO format "
                            "(e.g., '2025-08-08T12:00:00.000Z')"
                        ),
                    },
                    "location": {
                        "type": "string",
                        "description": "Event location (optional)",
                    },
                    "notes": {
                        "type": "string",
                        "description": "Event notes or description (optional)",
                    },
                    "alarmMinutesBefore": {
                        "type": "number",
                        "description": "Minutes before event to set alarm (default: 15)",
                    },
                },
                "required": ["title", "startDate", "endDate"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": GET_UPCOMING_EVENTS,
            "description": "Get upcoming events from the user's calendar",
            "parameters": {
                "type": "object",
                "properties": {
                    "days": {
                        "type": "number",
                        "description": "Number of days to look ahead (default: 7)",
                    },
                },
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": CREATE_QUICK_EVENT,
            "description": (
                "Create a quick event for today or tomorrow with simple time input"
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Event title"},
                    "date": {
                        "type": "string",
                        "description": (
                            "Date for the event: 'today', 'tomorrow', or ISO date string"
                        ),
                    },
                    "time": {
                        "type": "string",
                        "description": "Time in HH:MM format (e.g., '10:00' or '14:30')",
                    },
                    "durationMinutes": {
                        "type": "number",
                        "description": "Event duration in minutes (default: 60)",
                    },
                    "location": {
                        "type": "string",
                        "description": "Event location (optional)",
                    },
                    "notes": {"type": "string", "description": "Event notes (optional)"},
                },
                "required": ["title", "date", "time"],
            },
        },
    },
]

_REQUIRED_PARAMS: dict[str, list[str]] = {
    schema["function"]["name"]: schema["function"]["parameters"].get("required", [])
    for schema in TOOL_SCHEMAS
}


def function_declarations() -> list[genai_types.FunctionDeclaration]:
    """Return :data:`TOOL_SCHEMAS` as Gemini function declarations."""
    return [
        genai_types.FunctionDeclaration(
            name=schema["function"]["name"],
            description=schema["function"]["description"],
            parameters_json_schema=schema["function"]["parameters"],
        )
        for schema in TOOL_SCHEMAS
    ]


class CalendarTools:
    """Registry and dispatcher for the calendar tools.

    Args:
        client: The calendar client the tools operate on.
        defaults: Policy for omitted durations and look-ahead windows.
    """

    def __init__(
        self,
        client: CalendarClient,
        defaults: EventDefaults | None = None,
    ) -> None:
        self._client = client
        self._defaults = defaults or EventDefaults()

    @property
    def client(self) -> CalendarClient:
        return self._client

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def add_event(self, parameters: dict[str, Any]) -> ToolResult:
        return self._client.add_event_to_calendar(
            title=parameters["title"],
            start_date=parameters["startDate"],
            end_date=parameters["endDate"],
            location=parameters.get("location"),
            notes=parameters.get("notes"),
            alarm_minutes_before=_optional_int(parameters.get("alarmMinutesBefore")),
        )

    def get_upcoming_events(self, days: int | None = None) -> ToolResult:
        return self._client.get_upcoming_events_for_llm(
            days if days is not None else self._defaults.upcoming_days
        )

    def ensure_access(self) -> ToolResult:
        return self._client.ensure_calendar_access()

    def create_quick_event(
        self,
        title: str,
        date: str,
        time: str,
        duration_minutes: int | None = None,
        location: str | None = None,
        notes: str | None = None,
    ) -> ToolResult:
        """Create an event from a date word and an ``HH:MM`` time.

        Invalid dates, times or durations fail before any calendar write.
        Never raises.
        """
        try:
            start, end = build_event_window(
                str(date),
                str(time),
                duration_minutes
                if duration_minutes is not None
                else self._defaults.duration_minutes,
                self._client.now(),
            )
        except (ValueError, OverflowError) as exc:
            logger.warning("Rejected quick event '%s': %s", title, exc)
            return ToolResult.failure(str(exc))
        except Exception as exc:
            logger.error("Quick event '%s' failed: %s", title, exc)
            return ToolResult.failure(str(exc) or "Unknown error occurred")

        return self._client.add_event_to_calendar(
            title=title,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            location=location,
            notes=notes,
            alarm_minutes_before=self._defaults.alarm_minutes_before,
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def execute(
        self,
        tool_name: str,
        parameters: dict[str, Any] | None = None,
    ) -> ToolResult:
        """Run a tool by name.

        Every tool except ``ensure_access`` is preceded by
        :meth:`CalendarClient.ensure_calendar_access`; when that fails the
        tool is not invoked.

        Args:
            tool_name: One of the published tool names.
            parameters: The tool's parameter bag (camelCase keys, as in
                :data:`TOOL_SCHEMAS`).

        Returns:
            The tool's :class:`ToolResult`; never raises.
        """
        params = dict(parameters or {})
        try:
            if tool_name != ENSURE_ACCESS:
                access = self.ensure_access()
                if not access.success:
                    return ToolResult.failure(
                        f"Calendar access required: {access.error}"
                    )

            if tool_name == ENSURE_ACCESS:
                return self.ensure_access()

            if tool_name not in _REQUIRED_PARAMS:
                return ToolResult.failure(f"Unknown calendar tool: {tool_name}")

            missing = [
                name
                for name in _REQUIRED_PARAMS[tool_name]
                if params.get(name) in (None, "")
            ]
            if missing:
                return ToolResult.failure(
                    f"Missing required parameter(s) for {tool_name}: "
                    f"{', '.join(missing)}"
                )

            logger.info("Executing calendar tool %s", tool_name)

            if tool_name == ADD_CALENDAR_EVENT:
                return self.add_event(params)
            if tool_name == GET_UPCOMING_EVENTS:
                return self.get_upcoming_events(_optional_int(params.get("days")))
            return self.create_quick_event(
                title=params["title"],
                date=params["date"],
                time=params["time"],
                duration_minutes=_optional_int(params.get("durationMinutes")),
                location=params.get("location"),
                notes=params.get("notes"),
            )

        except Exception as exc:
            logger.error("Calendar tool %s failed: %s", tool_name, exc)
            return ToolResult.failure(str(exc) or "Unknown error occurred")

    def execute_function_call(self, call: genai_types.FunctionCall) -> dict[str, Any]:
        """Run a Gemini ``FunctionCall`` and return the JSON response payload."""
        result = self.execute(call.name or "", dict(call.args or {}))
        return result.to_dict()


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)
