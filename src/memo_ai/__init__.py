"""memo-ai: Voice notes with AI summaries and calendar events.

Transcribes voice recordings, summarises them with a language model, and
creates calendar events for any scheduling intents they mention.
"""

from __future__ import annotations

from memo_ai.exceptions import (
    InvalidInputError,
    MalformedResponseError,
    MemoAIError,
    ProcessingCancelledError,
    RemoteServiceError,
    StorageError,
)
from memo_ai.models.calendar import ToolResult
from memo_ai.models.extraction import CandidateEvent, CreatedEvent, ExtractionOutcome
from memo_ai.models.note import AIAnalysis, CalendarEventRef, NoteSummary, VoiceNote
from memo_ai.response_parser import parse_model_json

__version__ = "0.1.0"

__all__ = [
    "AIAnalysis",
    "CalendarEventRef",
    "CandidateEvent",
    "CreatedEvent",
    "ExtractionOutcome",
    "InvalidInputError",
    "MalformedResponseError",
    "MemoAIError",
    "NoteSummary",
    "ProcessingCancelledError",
    "RemoteServiceError",
    "StorageError",
    "ToolResult",
    "VoiceNote",
    "parse_model_json",
]
