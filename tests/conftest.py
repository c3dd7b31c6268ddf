"""Shared fixtures for memo-ai tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

_ENV_VARS = (
    "GEMINI_API_KEY",
    "TRANSCRIPTION_API_URL",
    "TRANSCRIPTION_API_KEY",
    "LOG_LEVEL",
    "TIMEZONE",
    "GEMINI_MODEL",
    "TRANSCRIPTION_MODEL",
    "TRANSCRIPTION_LANGUAGE",
    "NOTES_PATH",
    "AUDIO_DIR",
    "GOOGLE_CREDENTIALS_PATH",
    "GOOGLE_TOKEN_PATH",
    "REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_EVENT_DATE",
    "DEFAULT_EVENT_TIME",
    "DEFAULT_EVENT_DURATION",
    "DEFAULT_ALARM_MINUTES",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all memo-ai-related environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("memo_ai.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def monkeypatch_env(
    monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> dict[str, str]:
    """Set all required environment variables to valid defaults.

    Returns the dict of variables so tests can inspect or override values.
    """
    env_vars = {
        "GEMINI_API_KEY": "test-gemini-key-12345",
        "TRANSCRIPTION_API_URL": "https://stt.example.com/v1/audio/transcriptions",
        "TRANSCRIPTION_API_KEY": "test-stt-key-67890",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
