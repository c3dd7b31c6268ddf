"""Speech-to-text client for Whisper-style transcription endpoints.

Uploads an audio file as ``multipart/form-data`` with bearer-token auth and
expects a plain-text transcript back (``response_format=text``).
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from memo_ai.exceptions import RemoteServiceError

logger = logging.getLogger(__name__)

_MIME_TYPES = {
    "wav": "audio/wav",
    "webm": "audio/webm",
    "mp3": "audio/mpeg",
    "m4a": "audio/mp4",
    "mp4": "audio/mp4",
    "ogg": "audio/ogg",
}
_DEFAULT_MIME_TYPE = "audio/mp4"


def mime_type_for(audio_path: Path | str) -> str:
    """Return the upload MIME type for *audio_path* based on its extension."""
    extension = Path(audio_path).suffix.lstrip(".").lower()
    return _MIME_TYPES.get(extension, _DEFAULT_MIME_TYPE)


class Transcriber:
    """Client for a remote transcription endpoint.

    Args:
        api_url: Full URL of the transcription endpoint.
        api_key: Bearer token.
        model: Model name sent in the ``model`` form field.
        language: Spoken-language hint.
        timeout_seconds: Request timeout.
        session: Optional :class:`requests.Session`; pass a mock in tests.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str = "whisper-large-v3",
        language: str = "en",
        timeout_seconds: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._model = model
        self._language = language
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    def transcribe(self, audio_path: Path | str) -> str:
        """Transcribe an audio file.

        Args:
            audio_path: Path of the recording.

        Returns:
            The transcript text.

        Raises:
            RemoteServiceError: On network failure, timeout, a non-2xx
                response, or an empty transcript.
        """
        audio_path = Path(audio_path)
        mime_type = mime_type_for(audio_path)
        extension = audio_path.suffix.lstrip(".").lower() or "m4a"

        logger.info("Sending %s file to transcription endpoint", extension.upper())

        try:
            with audio_path.open("rb") as audio:
                response = self._session.post(
                    self._api_url,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    files={"file": (f"audio.{extension}", audio, mime_type)},
                    data={
                        "model": self._model,
                        "response_format": "text",
                        "language": self._language,
                    },
                    timeout=self._timeout,
                )
        except requests.RequestException as exc:
            logger.error("Transcription request failed: %s", exc)
            raise RemoteServiceError(f"Error transcribing audio: {exc}") from exc

        if not response.ok:
            logger.error("Transcription endpoint returned HTTP %s", response.status_code)
            raise RemoteServiceError(
                f"Error transcribing audio: HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        transcript = response.text
        if not transcript or not transcript.strip():
            raise RemoteServiceError("Error transcribing audio: Empty transcription response")

        logger.info("Transcription successful: %s...", transcript[:100])
        return transcript.strip()
