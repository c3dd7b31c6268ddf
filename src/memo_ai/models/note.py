"""Pydantic models for summaries and persisted voice notes.

Field names are snake_case in Python and camelCase on the wire (model
responses and the persisted note file).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CalendarEventRef(BaseModel):
    """Reference to a calendar event created for a note."""

    model_config = _CAMEL

    title: str
    event_id: str | None = None
    created: bool = True


class NoteSummary(BaseModel):
    """Structured summary returned by the language model.

    Attributes:
        title: Short title (the prompt asks for 50 characters or fewer).
        key_points: Main ideas from the recording.
        actions: Concrete next steps.
        tags: Topic keywords.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    title: str | None = None
    key_points: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class AIAnalysis(NoteSummary):
    """Summary merged with the outcome of calendar-event creation.

    ``calendar_events`` is ``None`` (and omitted from JSON) when no events
    were created.
    """

    calendar_events: list[CalendarEventRef] | None = None


class VoiceNote(BaseModel):
    """A processed voice recording.

    Attributes:
        id: Millisecond creation timestamp as a string.
        title: Note title.
        audio_uri: Path of the owned audio file.
        transcription: Full transcript text.
        key_points: Main ideas.
        actions: Next steps.
        tags: Topic keywords.
        created_at: Creation time.
        duration: Recording length in seconds.
        calendar_events: Events created from the recording, if any.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    title: str
    audio_uri: str
    transcription: str
    key_points: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    duration: float = 0.0
    calendar_events: list[CalendarEventRef] | None = None

    def to_json_dict(self) -> dict:
        """Serialise with camelCase keys, omitting ``calendarEvents`` when unset."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
