"""Configuration loading for memo-ai.

Reads settings from environment variables (with .env support via python-dotenv)
and validates that all required values are present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class EventDefaults:
    """Fallback values used when a detected event omits a field.

    Attributes:
        date: Date token applied when the model gives no date
            (``"today"``, ``"tomorrow"`` or an ISO date).
        time: ``HH:MM`` start time applied when the model gives no time.
        duration_minutes: Event length applied when no duration is given.
        alarm_minutes_before: Reminder offset for created events.
        upcoming_days: Look-ahead window for ``get_upcoming_events``.
    """

    date: str = "tomorrow"
    time: str = "10:00"
    duration_minutes: int = 60
    alarm_minutes_before: int = 15
    upcoming_days: int = 7


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        gemini_api_key: API key for Google Gemini.
        transcription_api_url: Speech-to-text endpoint accepting multipart
            audio uploads.
        transcription_api_key: Bearer token for the transcription endpoint.
        log_level: Logging level (default ``"INFO"``).
        timezone: IANA timezone string (default ``"America/Vancouver"``).
        gemini_model: Gemini model identifier.
        transcription_model: Model name sent with each transcription request.
        transcription_language: Spoken-language hint for transcription.
        notes_path: JSON file holding the persisted voice notes.
        audio_dir: Directory where recordings are copied before processing.
        google_credentials_path: OAuth client secrets for Google Calendar.
        google_token_path: Cached OAuth token for Google Calendar.
        request_timeout_seconds: Timeout applied to every remote call.
        event_defaults: Policy for fields missing from detected events.
    """

    gemini_api_key: str
    transcription_api_url: str
    transcription_api_key: str
    log_level: str = "INFO"
    timezone: str = "America/Vancouver"
    gemini_model: str = "gemini-2.0-flash"
    transcription_model: str = "whisper-large-v3"
    transcription_language: str = "en"
    notes_path: str = "voice_notes.json"
    audio_dir: str = "audio"
    google_credentials_path: str = "credentials.json"
    google_token_path: str = "token.json"
    request_timeout_seconds: float = 60.0
    event_defaults: EventDefaults = field(default_factory=EventDefaults)

    def __repr__(self) -> str:
        return (
            f"Settings(gemini_api_key='***', "
            f"transcription_api_url={self.transcription_api_url!r}, "
            f"transcription_api_key='***', "
            f"log_level={self.log_level!r}, "
            f"timezone={self.timezone!r}, "
            f"gemini_model={self.gemini_model!r}, "
            f"notes_path={self.notes_path!r})"
        )


# Optional string settings: env var -> Settings field.
_OPTIONAL = {
    "LOG_LEVEL": "log_level",
    "TIMEZONE": "timezone",
    "GEMINI_MODEL": "gemini_model",
    "TRANSCRIPTION_MODEL": "transcription_model",
    "TRANSCRIPTION_LANGUAGE": "transcription_language",
    "NOTES_PATH": "notes_path",
    "AUDIO_DIR": "audio_dir",
    "GOOGLE_CREDENTIALS_PATH": "google_credentials_path",
    "GOOGLE_TOKEN_PATH": "google_token_path",
}


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the project root
    is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If any required environment variable is missing,
            empty, or whitespace-only (the message names **all** missing
            variables), or if a numeric setting cannot be parsed.
    """
    load_dotenv()

    required = {
        "GEMINI_API_KEY": "gemini_api_key",
        "TRANSCRIPTION_API_URL": "transcription_api_url",
        "TRANSCRIPTION_API_KEY": "transcription_api_key",
    }

    values: dict[str, object] = {}
    missing: list[str] = []

    for env_var, field_name in required.items():
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            missing.append(env_var)
        else:
            values[field_name] = raw

    if missing:
        names = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {names}")

    for env_var, field_name in _OPTIONAL.items():
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = raw

    timeout = os.environ.get("REQUEST_TIMEOUT_SECONDS", "").strip()
    if timeout:
        try:
            values["request_timeout_seconds"] = float(timeout)
        except ValueError as exc:
            raise ConfigError(
                f"REQUEST_TIMEOUT_SECONDS must be a number, got {timeout!r}"
            ) from exc

    values["event_defaults"] = _load_event_defaults()

    return Settings(**values)  # type: ignore[arg-type]


def _load_event_defaults() -> EventDefaults:
    """Build :class:`EventDefaults` from the ``DEFAULT_EVENT_*`` variables."""
    overrides: dict[str, object] = {}

    date = os.environ.get("DEFAULT_EVENT_DATE", "").strip()
    if date:
        overrides["date"] = date
    time = os.environ.get("DEFAULT_EVENT_TIME", "").strip()
    if time:
        overrides["time"] = time

    for env_var, field_name in (
        ("DEFAULT_EVENT_DURATION", "duration_minutes"),
        ("DEFAULT_ALARM_MINUTES", "alarm_minutes_before"),
    ):
        raw = os.environ.get(env_var, "").strip()
        if not raw:
            continue
        try:
            overrides[field_name] = int(raw)
        except ValueError as exc:
            raise ConfigError(f"{env_var} must be an integer, got {raw!r}") from exc

    return EventDefaults(**overrides)  # type: ignore[arg-type]


def load_notes_path() -> str:
    """Return the notes file location without requiring API credentials.

    Used by commands that only read or edit the note library.
    """
    load_dotenv()
    return os.environ.get("NOTES_PATH", "").strip() or Settings.notes_path
