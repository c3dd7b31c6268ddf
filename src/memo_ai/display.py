"""Console rendering for voice notes and pipeline runs.

:func:`format_note` renders one note in full, :func:`format_note_list`
renders the library view (one line per note, newest first), and
:func:`format_pipeline_result` shows what a processing run did.  All
functions return strings; :func:`print_output` writes them to stdout.
"""

from __future__ import annotations

import sys

from memo_ai.models.extraction import ExtractionOutcome
from memo_ai.models.note import AIAnalysis, VoiceNote
from memo_ai.pipeline import PipelineResult

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH
_PREVIEW_LENGTH = 60


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def format_note(note: VoiceNote) -> str:
    """Render a single note with its summary, calendar events and transcript.

    Args:
        note: The note to format.

    Returns:
        A multi-line string ready for console display.
    """
    lines: list[str] = [_SEPARATOR, f"  {note.title}", _SEPARATOR]
    lines.append(f"  ID: {note.id}")
    lines.append(f"  Recorded: {note.created_at.strftime('%A %Y-%m-%d, %I:%M %p')}")
    lines.append(f"  Duration: {_format_duration(note.duration)}")
    lines.append(f"  Audio: {note.audio_uri}")
    lines.append(f"  Tags: {', '.join(note.tags) if note.tags else 'none'}")

    _append_bullets(lines, "KEY POINTS", note.key_points)
    _append_bullets(lines, "ACTIONS", note.actions)

    if note.calendar_events:
        lines.append("")
        lines.append("--- CALENDAR EVENTS ---")
        for event in note.calendar_events:
            suffix = f" (ID: {event.event_id})" if event.event_id else ""
            lines.append(f'  [CREATED] "{event.title}"{suffix}')

    lines.append("")
    lines.append("--- TRANSCRIPT ---")
    lines.append(f"  {note.transcription}")
    lines.append(_SEPARATOR)
    return "\n".join(lines)


def format_note_list(notes: list[VoiceNote]) -> str:
    """Render the library view: one summary line per note.

    Args:
        notes: Notes in display order.

    Returns:
        A multi-line string, or a placeholder when *notes* is empty.
    """
    if not notes:
        return "No voice notes yet."

    lines = [f"{len(notes)} voice note(s)", ""]
    for note in notes:
        calendar_marker = f"  [{len(note.calendar_events)} event(s)]" if note.calendar_events else ""
        lines.append(
            f"{note.id}  {note.created_at.strftime('%Y-%m-%d %H:%M')}  "
            f"{_format_duration(note.duration):>6}  {note.title}{calendar_marker}"
        )
        lines.append(f"    {_preview(note.transcription)}")
    return "\n".join(lines)


def format_analysis(analysis: AIAnalysis, extraction: ExtractionOutcome) -> str:
    """Render an analysis that was not saved as a note."""
    lines: list[str] = [_SEPARATOR, f"  {analysis.title or '(untitled)'}", _SEPARATOR]
    lines.append(f"  Tags: {', '.join(analysis.tags) if analysis.tags else 'none'}")
    _append_bullets(lines, "KEY POINTS", analysis.key_points)
    _append_bullets(lines, "ACTIONS", analysis.actions)
    _append_calendar_outcome(lines, extraction)
    lines.append(_SEPARATOR)
    return "\n".join(lines)


def format_pipeline_result(result: PipelineResult) -> str:
    """Render a :class:`PipelineResult` after a ``process`` run.

    Args:
        result: The pipeline result to format.

    Returns:
        A multi-line string ready for console display.
    """
    lines: list[str] = []
    if result.note is not None:
        lines.append(format_note(result.note))

    _append_calendar_outcome(lines, result.extraction)

    lines.append("")
    lines.append("--- SUMMARY ---")
    lines.append(f"  Audio stored: {result.stored_audio_path}")
    lines.append(f"  Calendar events created: {len(result.extraction.events_created)}")
    lines.append(f"  Warnings: {len(result.warnings)}")
    for warning in result.warnings:
        lines.append(f"    - {warning}")
    lines.append(f"  Pipeline duration: {result.duration_seconds:.1f}s")
    return "\n".join(lines)


def print_output(text: str) -> None:
    """Write *text* to stdout followed by a newline."""
    sys.stdout.write(text + "\n")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _append_bullets(lines: list[str], heading: str, items: list[str]) -> None:
    lines.append("")
    lines.append(f"--- {heading} ---")
    if not items:
        lines.append("  (none)")
        return
    for item in items:
        lines.append(f"  - {item}")


def _append_calendar_outcome(lines: list[str], extraction: ExtractionOutcome) -> None:
    if not extraction.events_created and not extraction.errors:
        return
    lines.append("")
    lines.append("--- CALENDAR ---")
    for event in extraction.events_created:
        suffix = f" (ID: {event.event_id})" if event.event_id else ""
        lines.append(f'  [CREATE] "{event.title}" -> Created{suffix}')
    for error in extraction.errors:
        lines.append(f"  [FAILED] {error}")


def _format_duration(seconds: float) -> str:
    """Format seconds as ``M:SS``."""
    total = max(int(round(seconds)), 0)
    return f"{total // 60}:{total % 60:02d}"


def _preview(text: str) -> str:
    flat = " ".join(text.split())
    if len(flat) <= _PREVIEW_LENGTH:
        return flat
    return flat[: _PREVIEW_LENGTH - 3] + "..."
