"""Calendar-event detection and creation from a transcript.

:class:`EventExtractor` asks the language model for a strict JSON verdict,
repairs near-miss JSON, validates the shape, and creates each candidate
through the ``create_quick_event`` tool.  Candidates are processed one at a
time so created events and error messages keep the model's order, and one
failing candidate never stops the rest.

The stage never raises: every failure ends up in
:attr:`ExtractionOutcome.errors`.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from memo_ai.calendar.tools import CREATE_QUICK_EVENT, CalendarTools
from memo_ai.config import EventDefaults
from memo_ai.llm import GeminiClient
from memo_ai.models.extraction import CandidateEvent, CreatedEvent, ExtractionOutcome
from memo_ai.prompts import (
    build_event_detection_prompt,
    build_event_detection_user_prompt,
)
from memo_ai.response_parser import parse_model_json

logger = logging.getLogger(__name__)

NOTES_PREFIX = "Created from voice note"

_DETECTION_TEMPERATURE = 0.1


class EventExtractor:
    """Detects scheduling intents and creates the matching calendar events.

    Args:
        llm: Client used for the detection call.
        tools: Calendar tool dispatcher used to create events.
        defaults: Fallbacks for candidates missing a date, time or duration.
        temperature: Sampling temperature for detection; kept low so the
            same transcript yields the same verdict.
    """

    def __init__(
        self,
        llm: GeminiClient,
        tools: CalendarTools,
        defaults: EventDefaults | None = None,
        temperature: float = _DETECTION_TEMPERATURE,
    ) -> None:
        self._llm = llm
        self._tools = tools
        self._defaults = defaults or EventDefaults()
        self._temperature = temperature

    def extract(self, transcript: str) -> ExtractionOutcome:
        """Detect and create calendar events mentioned in *transcript*.

        Returns:
            An :class:`ExtractionOutcome`; empty when the transcript has no
            scheduling language or the model returned nothing.
        """
        try:
            return self._extract(transcript)
        except Exception as exc:
            logger.error("Calendar event processing failed: %s", exc)
            return ExtractionOutcome(errors=[f"Calendar processing failed: {exc}"])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _extract(self, transcript: str) -> ExtractionOutcome:
        raw_text = self._llm.generate_json(
            build_event_detection_prompt(self._tools.client.now(), self._defaults),
            build_event_detection_user_prompt(transcript),
            temperature=self._temperature,
        )

        if not raw_text.strip():
            logger.info("No calendar verdict returned; skipping event creation")
            return ExtractionOutcome()

        data = parse_model_json(raw_text).data

        if not isinstance(data, dict):
            logger.warning("Calendar verdict is not a JSON object")
            return ExtractionOutcome(errors=["Invalid calendar data structure"])

        if "hasCalendarEvents" not in data or "events" not in data:
            logger.warning("Calendar verdict missing keys: %s", sorted(data))
            return ExtractionOutcome(
                errors=["Missing required fields in calendar data"]
            )

        events = data["events"]
        if (
            not _is_true(data["hasCalendarEvents"])
            or not isinstance(events, list)
            or not events
        ):
            logger.info("No calendar events detected")
            return ExtractionOutcome()

        logger.info("Detected %d candidate event(s)", len(events))
        outcome = ExtractionOutcome()
        for index, raw_event in enumerate(events, start=1):
            self._process_candidate(index, raw_event, outcome)

        logger.info(
            "Calendar events: %d created, %d error(s)",
            len(outcome.events_created),
            len(outcome.errors),
        )
        return outcome

    def _process_candidate(
        self,
        index: int,
        raw_event: Any,
        outcome: ExtractionOutcome,
    ) -> None:
        """Create one candidate, recording success or failure on *outcome*."""
        if not isinstance(raw_event, dict):
            outcome.errors.append(f"Event {index}: invalid event data")
            return

        try:
            candidate = CandidateEvent.model_validate(raw_event)
        except ValidationError as exc:
            label = raw_event.get("title") or f"Event {index}"
            logger.warning("Candidate '%s' failed validation: %s", label, exc)
            outcome.errors.append(f'Failed to create "{label}": invalid event fields')
            return

        if not candidate.has_title:
            logger.warning("Skipping candidate %d without a title", index)
            outcome.errors.append(f"Event {index}: missing title, skipped")
            return

        title = candidate.title.strip()  # type: ignore[union-attr]
        result = self._tools.execute(
            CREATE_QUICK_EVENT,
            {
                "title": title,
                "date": candidate.date or self._defaults.date,
                "time": candidate.time or self._defaults.time,
                "durationMinutes": candidate.duration_minutes
                or self._defaults.duration_minutes,
                "location": candidate.location,
                "notes": _with_provenance(candidate.notes),
            },
        )

        if result.success:
            logger.info("Created calendar event '%s' (id=%s)", title, result.event_id)
            outcome.events_created.append(
                CreatedEvent(title=title, event_id=result.event_id)
            )
        else:
            logger.warning("Failed to create calendar event '%s': %s", title, result.error)
            outcome.errors.append(f'Failed to create "{title}": {result.error}')


def _with_provenance(notes: str | None) -> str:
    if notes and notes.strip():
        return f"{NOTES_PREFIX}: {notes.strip()}"
    return NOTES_PREFIX


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)
