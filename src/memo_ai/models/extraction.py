"""Models for calendar-event detection.

- :class:`CandidateEvent` -- one event proposed by the language model.
- :class:`CreatedEvent` -- a candidate that was written to the calendar.
- :class:`ExtractionOutcome` -- the never-raising result of the detection
  stage: created events plus per-candidate error messages, both in input
  order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CandidateEvent(BaseModel):
    """A scheduling intent detected in a transcript.

    Every field is optional at parse time so that a candidate with a
    missing title can be reported as an error instead of failing the
    whole batch.  Defaults for ``date``, ``time`` and ``duration_minutes``
    come from :class:`~memo_ai.config.EventDefaults` when the event is
    created.

    Attributes:
        title: Event title; candidates without one are discarded.
        date: ``"today"``, ``"tomorrow"`` or an ISO date string.
        time: ``HH:MM`` start time.
        duration_minutes: Event length in minutes.
        location: Optional location.
        notes: Optional notes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    title: str | None = None
    date: str | None = None
    time: str | None = None
    duration_minutes: int | None = None
    location: str | None = None
    notes: str | None = None

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())


@dataclass(frozen=True)
class CreatedEvent:
    """A calendar event created from a transcript."""

    title: str
    event_id: str | None = None


@dataclass
class ExtractionOutcome:
    """Result of the event detection stage.

    Attributes:
        events_created: Events written to the calendar, in input order.
        errors: One message per candidate that could not be created, in
            input order, or a single message describing a malformed model
            response.
    """

    events_created: list[CreatedEvent] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_events(self) -> bool:
        return len(self.events_created) > 0
