"""Structured summary of a transcript.

Unlike event detection, a missing or malformed summary is fatal: the summary
is the note's primary content, so :class:`Summarizer` raises instead of
degrading to an empty result.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from memo_ai.exceptions import MalformedResponseError, RemoteServiceError
from memo_ai.llm import GeminiClient
from memo_ai.models.extraction import CreatedEvent
from memo_ai.models.note import AIAnalysis, CalendarEventRef, NoteSummary
from memo_ai.prompts import build_summary_prompt, build_summary_user_prompt

logger = logging.getLogger(__name__)


class Summarizer:
    """Produces an :class:`AIAnalysis` from a transcript.

    Args:
        llm: Client used for the summary call.
        temperature: Sampling temperature; ``None`` keeps the model default.
    """

    def __init__(self, llm: GeminiClient, temperature: float | None = None) -> None:
        self._llm = llm
        self._temperature = temperature

    def summarize(
        self,
        transcript: str,
        created_events: list[CreatedEvent] | None = None,
    ) -> AIAnalysis:
        """Summarise *transcript* and attach any created calendar events.

        Args:
            transcript: The full transcription.
            created_events: Events created by the detection stage; they are
                mentioned in the prompt and attached as ``calendar_events``.

        Returns:
            The merged analysis.  ``calendar_events`` is ``None`` when
            *created_events* is empty.

        Raises:
            RemoteServiceError: If the model call fails or returns nothing.
            MalformedResponseError: If the response is not valid JSON or
                does not match the summary shape.
        """
        created_events = created_events or []

        raw_text = self._llm.generate_json(
            build_summary_prompt([event.title for event in created_events]),
            build_summary_user_prompt(transcript),
            temperature=self._temperature,
        )
        if not raw_text.strip():
            raise RemoteServiceError("No analysis response received")

        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(
                f"Invalid summary JSON: {exc}", raw_response=raw_text
            ) from exc

        try:
            summary = NoteSummary.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Summary schema validation failed: {exc}", raw_response=raw_text
            ) from exc

        analysis = AIAnalysis(
            **summary.model_dump(),
            calendar_events=[
                CalendarEventRef(title=event.title, event_id=event.event_id, created=True)
                for event in created_events
            ]
            or None,
        )
        logger.info(
            "Summary '%s': %d key point(s), %d action(s), %d tag(s)",
            analysis.title,
            len(analysis.key_points),
            len(analysis.actions),
            len(analysis.tags),
        )
        return analysis
