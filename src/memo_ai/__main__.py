"""Entry point for ``python -m memo_ai``.

Provides a CLI over the voice-note pipeline and the note library.  Uses
stdlib :mod:`argparse` for argument parsing.

Subcommands:
    process -- Transcribe a recording, create calendar events, save a note.
    analyze -- Run event detection and summary on a transcript text file.
    list    -- Show saved notes, optionally filtered by a search query.
    delete  -- Remove a saved note by id.

Exit codes:
    0 -- Command completed successfully.
    1 -- An error occurred (file not found, config error, remote failure).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from memo_ai.config import ConfigError, load_notes_path, load_settings
from memo_ai.display import (
    format_analysis,
    format_note,
    format_note_list,
    format_pipeline_result,
    print_output,
)
from memo_ai.exceptions import MemoAIError, StorageError
from memo_ai.log import setup_logging
from memo_ai.pipeline import analyze_transcript, build_pipeline, process_voice_note
from memo_ai.storage import NoteStore


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="memo-ai",
        description="Turn voice recordings into summarised notes and calendar events.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- "process" subcommand -----------------------------------------
    process_parser = subparsers.add_parser(
        "process",
        help="Transcribe a recording and save it as a note.",
    )
    process_parser.add_argument("audio_file", type=str, help="Path to the recording.")
    process_parser.add_argument(
        "--duration",
        type=float,
        default=0.0,
        help="Recording length in seconds (default: 0).",
    )
    _add_verbose(process_parser)

    # --- "analyze" subcommand -----------------------------------------
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Detect calendar events and summarise a transcript file.",
    )
    analyze_parser.add_argument(
        "transcript_file", type=str, help="Path to a .txt transcript."
    )
    _add_verbose(analyze_parser)

    # --- "list" subcommand --------------------------------------------
    list_parser = subparsers.add_parser("list", help="List saved notes.")
    list_parser.add_argument(
        "--search",
        type=str,
        default="",
        help="Only show notes whose title or transcript contains this text.",
    )
    list_parser.add_argument(
        "--show",
        type=str,
        default=None,
        metavar="NOTE_ID",
        help="Show one note in full.",
    )
    _add_verbose(list_parser)

    # --- "delete" subcommand ------------------------------------------
    delete_parser = subparsers.add_parser("delete", help="Delete a saved note.")
    delete_parser.add_argument("note_id", type=str, help="Id of the note to delete.")
    _add_verbose(delete_parser)

    return parser


def _add_verbose(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_process(args: argparse.Namespace) -> int:
    audio_path = Path(args.audio_file)
    if not audio_path.is_file():
        print(f"Error: File not found: {audio_path}", file=sys.stderr)
        return 1

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    components = build_pipeline(settings)
    try:
        result = process_voice_note(audio_path, args.duration, components)
    except (MemoAIError, OSError) as exc:
        print(f"Error: Failed to process voice note: {exc}", file=sys.stderr)
        print(
            f"The recording was kept in {components.audio_dir}.", file=sys.stderr
        )
        return 1

    print_output(format_pipeline_result(result))
    return 0


def _handle_analyze(args: argparse.Namespace) -> int:
    transcript_path = Path(args.transcript_file)
    try:
        transcript = transcript_path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: Cannot read {transcript_path}: {exc}", file=sys.stderr)
        return 1

    if not transcript.strip():
        print(f"Error: Transcript is empty: {transcript_path}", file=sys.stderr)
        return 1

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    components = build_pipeline(settings)
    try:
        analysis, extraction = analyze_transcript(
            transcript, components.extractor, components.summarizer
        )
    except MemoAIError as exc:
        print(f"Error: Failed to analyze transcript: {exc}", file=sys.stderr)
        return 1

    print_output(format_analysis(analysis, extraction))
    return 0


def _handle_list(args: argparse.Namespace) -> int:
    store = NoteStore(load_notes_path())
    try:
        if args.show is not None:
            matches = [note for note in store.load_notes() if note.id == args.show]
        else:
            notes = store.search_notes(args.search)
    except (StorageError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.show is not None:
        if not matches:
            print(f"Error: No note with id {args.show}", file=sys.stderr)
            return 1
        print_output(format_note(matches[0]))
        return 0

    print_output(format_note_list(notes))
    return 0


def _handle_delete(args: argparse.Namespace) -> int:
    store = NoteStore(load_notes_path())
    try:
        deleted = store.delete_note(args.note_id)
    except (StorageError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if not deleted:
        print(f"Error: No note with id {args.note_id}", file=sys.stderr)
        return 1
    print_output(f"Deleted note {args.note_id}")
    return 0


_HANDLERS = {
    "process": _handle_process,
    "analyze": _handle_analyze,
    "list": _handle_list,
    "delete": _handle_delete,
}


def main(argv: list[str] | None = None) -> int:
    """Run the memo-ai CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``
            when ``None`` (the normal case).

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    log_level = "DEBUG" if args.verbose else "INFO"
    setup_logging(log_level)

    return _HANDLERS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
