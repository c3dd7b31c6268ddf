"""Pipeline orchestrator for the voice-note workflow.

Wires all components together: audio persistence, transcription, calendar
event detection, summarisation, and note storage.  The top-level entry
point is :func:`process_voice_note`, which returns a :class:`PipelineResult`
suitable for rendering by :mod:`memo_ai.display`.

Stages run strictly one after another.  An optional ``threading.Event``
cancel token is checked before each remote call.
"""

from __future__ import annotations

import logging
import shutil
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from memo_ai.calendar.client import CalendarClient
from memo_ai.calendar.platform import GoogleCalendarPlatform
from memo_ai.calendar.tools import CalendarTools
from memo_ai.config import Settings
from memo_ai.exceptions import ProcessingCancelledError
from memo_ai.extraction import EventExtractor
from memo_ai.llm import GeminiClient
from memo_ai.models.extraction import ExtractionOutcome
from memo_ai.models.note import AIAnalysis, VoiceNote
from memo_ai.storage import NoteStore
from memo_ai.summary import Summarizer
from memo_ai.transcription import Transcriber

logger = logging.getLogger(__name__)

_DEFAULT_AUDIO_SUFFIX = ".m4a"
_NO_KEY_POINTS = ["No key points identified"]
_NO_ACTIONS = ["No actions identified"]
_NO_TAGS = ["General"]


# ---------------------------------------------------------------------------
# Result and component dataclasses
# ---------------------------------------------------------------------------


@dataclass
class PipelineResult:
    """Aggregated result of processing one recording.

    Attributes:
        audio_path: The recording that was processed.
        stored_audio_path: Where the recording was copied before processing.
        transcript: The transcription text.
        note: The saved note.
        extraction: Outcome of calendar event detection.
        warnings: Non-fatal problems from any stage.
        duration_seconds: Wall-clock time for the full pipeline.
    """

    audio_path: Path
    stored_audio_path: Path | None = None
    transcript: str = ""
    note: VoiceNote | None = None
    extraction: ExtractionOutcome = field(default_factory=ExtractionOutcome)
    warnings: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class PipelineComponents:
    """Everything the pipeline needs, constructed once per process.

    Attributes:
        transcriber: Speech-to-text client.
        extractor: Calendar event detection stage.
        summarizer: Summary stage.
        store: Persisted note collection.
        audio_dir: Directory recordings are copied into.
        timezone: Timezone for note timestamps.
    """

    transcriber: Transcriber
    extractor: EventExtractor
    summarizer: Summarizer
    store: NoteStore
    audio_dir: Path
    timezone: ZoneInfo


def build_pipeline(settings: Settings) -> PipelineComponents:
    """Construct the pipeline components from *settings*.

    The calendar client is created here and shared by reference with the
    tool dispatcher; nothing is looked up globally.
    """
    llm = GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.request_timeout_seconds,
    )
    calendar_client = CalendarClient(
        GoogleCalendarPlatform(
            credentials_path=settings.google_credentials_path,
            token_path=settings.google_token_path,
            timezone=settings.timezone,
        ),
        timezone=settings.timezone,
        default_alarm_minutes=settings.event_defaults.alarm_minutes_before,
    )
    tools = CalendarTools(calendar_client, settings.event_defaults)

    return PipelineComponents(
        transcriber=Transcriber(
            api_url=settings.transcription_api_url,
            api_key=settings.transcription_api_key,
            model=settings.transcription_model,
            language=settings.transcription_language,
            timeout_seconds=settings.request_timeout_seconds,
        ),
        extractor=EventExtractor(llm, tools, settings.event_defaults),
        summarizer=Summarizer(llm),
        store=NoteStore(settings.notes_path),
        audio_dir=Path(settings.audio_dir),
        timezone=ZoneInfo(settings.timezone),
    )


# ---------------------------------------------------------------------------
# Pipeline entry points
# ---------------------------------------------------------------------------


def analyze_transcript(
    transcript: str,
    extractor: EventExtractor,
    summarizer: Summarizer,
    cancel: threading.Event | None = None,
) -> tuple[AIAnalysis, ExtractionOutcome]:
    """Detect calendar events, then summarise.

    Event detection never raises; its errors are returned alongside the
    analysis.  Summary failures propagate.

    Returns:
        ``(analysis, extraction)``.

    Raises:
        RemoteServiceError: If the summary call fails.
        MalformedResponseError: If the summary is not valid JSON.
        ProcessingCancelledError: If *cancel* is set before a stage.
    """
    _check_cancelled(cancel, "event detection")
    extraction = extractor.extract(transcript)
    for error in extraction.errors:
        logger.warning("Calendar: %s", error)

    _check_cancelled(cancel, "summary")
    analysis = summarizer.summarize(transcript, extraction.events_created)
    return analysis, extraction


def process_voice_note(
    audio_path: Path,
    duration: float,
    components: PipelineComponents,
    cancel: threading.Event | None = None,
    current_datetime: datetime | None = None,
) -> PipelineResult:
    """Run the full recording-to-note pipeline.

    Executes five stages:

    1. **Persist audio** -- copy the recording into ``audio_dir`` so it
       survives any later failure.
    2. **Transcribe** -- send the audio to the transcription endpoint.
    3. **Detect events** -- create calendar events for scheduling intents.
    4. **Summarise** -- produce the title, key points, actions and tags.
    5. **Store** -- prepend the new note to the persisted collection.

    Args:
        audio_path: The finished recording.
        duration: Recording length in seconds.
        components: Pipeline components from :func:`build_pipeline`.
        cancel: Optional token; when set, the pipeline stops before its next
            remote call.
        current_datetime: Override for "now" (useful for testing).

    Returns:
        A :class:`PipelineResult` with the saved note.

    Raises:
        FileNotFoundError: If *audio_path* does not exist.
        StorageError: If the note store cannot be read.
        RemoteServiceError: If transcription or the summary call fails.
        MalformedResponseError: If the summary is not valid JSON.
        ProcessingCancelledError: If *cancel* is set mid-pipeline.
    """
    start_time = time.monotonic()
    created_at = current_datetime or datetime.now(components.timezone)
    result = PipelineResult(audio_path=audio_path)

    # ------------------------------------------------------------------
    # Stage 1: Persist audio
    # ------------------------------------------------------------------
    if not audio_path.is_file():
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    # An unreadable store would lose the note after the remote work is done.
    components.store.load_notes()

    timestamp_ms = int(created_at.timestamp() * 1000)
    result.stored_audio_path = persist_audio(audio_path, components.audio_dir, timestamp_ms)
    logger.info("Stage 1 complete: audio stored at %s", result.stored_audio_path)

    # ------------------------------------------------------------------
    # Stage 2: Transcribe
    # ------------------------------------------------------------------
    _check_cancelled(cancel, "transcription")
    logger.info("Stage 2: Transcribing audio")
    result.transcript = components.transcriber.transcribe(result.stored_audio_path)

    # ------------------------------------------------------------------
    # Stages 3-4: Detect events, summarise
    # ------------------------------------------------------------------
    logger.info("Stages 3-4: Detecting calendar events and summarising")
    analysis, result.extraction = analyze_transcript(
        result.transcript,
        components.extractor,
        components.summarizer,
        cancel=cancel,
    )
    result.warnings.extend(f"Calendar: {error}" for error in result.extraction.errors)

    # ------------------------------------------------------------------
    # Stage 5: Store
    # ------------------------------------------------------------------
    result.note = build_voice_note(
        analysis,
        transcript=result.transcript,
        audio_uri=str(result.stored_audio_path),
        created_at=created_at,
        duration=duration,
        note_id=str(timestamp_ms),
    )
    components.store.add_note(result.note)

    result.duration_seconds = time.monotonic() - start_time
    logger.info(
        "Pipeline complete in %.2fs: note %s, %d calendar event(s)",
        result.duration_seconds,
        result.note.id,
        len(result.extraction.events_created),
    )
    return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def persist_audio(audio_path: Path, audio_dir: Path, timestamp_ms: int) -> Path:
    """Copy *audio_path* to ``audio_dir/voice_note_<timestamp_ms><suffix>``."""
    audio_dir.mkdir(parents=True, exist_ok=True)
    suffix = audio_path.suffix.lower() or _DEFAULT_AUDIO_SUFFIX
    destination = audio_dir / f"voice_note_{timestamp_ms}{suffix}"
    shutil.copyfile(audio_path, destination)
    return destination


def build_voice_note(
    analysis: AIAnalysis,
    transcript: str,
    audio_uri: str,
    created_at: datetime,
    duration: float,
    note_id: str | None = None,
) -> VoiceNote:
    """Assemble a :class:`VoiceNote`, filling gaps in the analysis.

    A missing title becomes ``"Voice Note - HH:MM AM"``; empty key points,
    actions and tags get placeholder entries.  ``calendar_events`` is
    carried over only when the analysis has it.
    """
    title = (analysis.title or "").strip() or (
        f"Voice Note - {created_at.strftime('%I:%M %p')}"
    )
    return VoiceNote(
        id=note_id or str(int(created_at.timestamp() * 1000)),
        title=title,
        audio_uri=audio_uri,
        transcription=transcript,
        key_points=analysis.key_points or list(_NO_KEY_POINTS),
        actions=analysis.actions or list(_NO_ACTIONS),
        tags=analysis.tags or list(_NO_TAGS),
        created_at=created_at,
        duration=duration,
        calendar_events=analysis.calendar_events,
    )


def _check_cancelled(cancel: threading.Event | None, stage: str) -> None:
    if cancel is not None and cancel.is_set():
        logger.info("Processing cancelled before %s", stage)
        raise ProcessingCancelledError(f"Processing cancelled before {stage}")
