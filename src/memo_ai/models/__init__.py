"""Data models for memo-ai."""

from __future__ import annotations

from memo_ai.models.calendar import (
    Calendar,
    CalendarEventRecord,
    CreateEventOptions,
    EventUpdate,
    PermissionState,
    ToolResult,
)
from memo_ai.models.extraction import CandidateEvent, CreatedEvent, ExtractionOutcome
from memo_ai.models.note import AIAnalysis, CalendarEventRef, NoteSummary, VoiceNote

__all__ = [
    "AIAnalysis",
    "Calendar",
    "CalendarEventRecord",
    "CalendarEventRef",
    "CandidateEvent",
    "CreateEventOptions",
    "CreatedEvent",
    "EventUpdate",
    "ExtractionOutcome",
    "NoteSummary",
    "PermissionState",
    "ToolResult",
    "VoiceNote",
]
