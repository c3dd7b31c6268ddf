"""JSON-file persistence for voice notes.

All notes live in one JSON document under a single ``"voiceNotes"`` slot,
newest first.  Every create or delete is a full read-modify-write of that
document; writes go to a temporary file that is then atomically renamed
over the original.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import ValidationError

from memo_ai.exceptions import StorageError
from memo_ai.models.note import VoiceNote

logger = logging.getLogger(__name__)

NOTES_SLOT = "voiceNotes"


class NoteStore:
    """Persisted collection of :class:`VoiceNote` records.

    Args:
        path: Location of the JSON document.  Created on first write.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load_notes(self) -> list[VoiceNote]:
        """Return all notes, newest first.

        Records that fail validation are logged and skipped.

        Raises:
            StorageError: If the document is not valid JSON or does not
                hold a list under the notes slot.
        """
        with self._lock:
            return self._read()

    def add_note(self, note: VoiceNote) -> list[VoiceNote]:
        """Prepend *note* to the collection and persist it.

        Returns:
            The updated collection.
        """
        with self._lock:
            notes = [note, *self._read()]
            self._write(notes)
        logger.info("Saved note %s ('%s')", note.id, note.title)
        return notes

    def delete_note(self, note_id: str) -> bool:
        """Remove the note with *note_id*.

        Returns:
            ``True`` if a note was removed, ``False`` if none matched.
        """
        with self._lock:
            notes = self._read()
            remaining = [note for note in notes if note.id != note_id]
            if len(remaining) == len(notes):
                logger.info("No note with id %s to delete", note_id)
                return False
            self._write(remaining)
        logger.info("Deleted note %s", note_id)
        return True

    def search_notes(self, query: str) -> list[VoiceNote]:
        """Case-insensitive substring match over title and transcription.

        An empty query returns every note.
        """
        needle = query.strip().lower()
        notes = self.load_notes()
        if not needle:
            return notes
        return [
            note
            for note in notes
            if needle in note.title.lower() or needle in note.transcription.lower()
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self) -> list[VoiceNote]:
        if not self._path.exists():
            return []

        try:
            document = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise StorageError(f"Note store {self._path} is not valid JSON: {exc}") from exc

        records = document.get(NOTES_SLOT, []) if isinstance(document, dict) else None
        if not isinstance(records, list):
            raise StorageError(
                f"Note store {self._path} does not hold a '{NOTES_SLOT}' list"
            )

        notes: list[VoiceNote] = []
        for record in records:
            try:
                notes.append(VoiceNote.model_validate(record))
            except ValidationError as exc:
                logger.warning("Skipping unreadable note record: %s", exc)
        return notes

    def _write(self, notes: list[VoiceNote]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            {NOTES_SLOT: [note.to_json_dict() for note in notes]},
            indent=2,
            ensure_ascii=False,
        )
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
