"""Tests for memo-ai configuration loading."""

from __future__ import annotations

import pytest

from memo_ai.config import ConfigError, EventDefaults, Settings, load_notes_path, load_settings


class TestLoadSettingsHappyPath:
    """Tests for successful configuration loading."""

    def test_required_values(self, monkeypatch_env: dict[str, str]) -> None:
        settings = load_settings()

        assert settings.gemini_api_key == "test-gemini-key-12345"
        assert settings.transcription_api_url == monkeypatch_env["TRANSCRIPTION_API_URL"]
        assert settings.transcription_api_key == "test-stt-key-67890"

    def test_defaults(self, monkeypatch_env: dict[str, str]) -> None:
        settings = load_settings()

        assert settings.log_level == "INFO"
        assert settings.timezone == "America/Vancouver"
        assert settings.gemini_model == "gemini-2.0-flash"
        assert settings.transcription_model == "whisper-large-v3"
        assert settings.transcription_language == "en"
        assert settings.notes_path == "voice_notes.json"
        assert settings.audio_dir == "audio"
        assert settings.request_timeout_seconds == 60.0
        assert settings.event_defaults == EventDefaults()

    def test_optional_overrides(
        self, monkeypatch_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("NOTES_PATH", "/data/notes.json")
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "12.5")

        settings = load_settings()

        assert settings.log_level == "DEBUG"
        assert settings.timezone == "Europe/Berlin"
        assert settings.notes_path == "/data/notes.json"
        assert settings.request_timeout_seconds == 12.5

    def test_event_default_overrides(
        self, monkeypatch_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEFAULT_EVENT_DATE", "today")
        monkeypatch.setenv("DEFAULT_EVENT_TIME", "09:00")
        monkeypatch.setenv("DEFAULT_EVENT_DURATION", "30")
        monkeypatch.setenv("DEFAULT_ALARM_MINUTES", "5")

        defaults = load_settings().event_defaults

        assert defaults == EventDefaults(
            date="today", time="09:00", duration_minutes=30, alarm_minutes_before=5
        )

    def test_repr_masks_secrets(self, monkeypatch_env: dict[str, str]) -> None:
        text = repr(load_settings())

        assert "test-gemini-key-12345" not in text
        assert "test-stt-key-67890" not in text
        assert "***" in text


class TestLoadSettingsErrors:
    """Tests for missing or invalid environment variables."""

    def test_all_missing_named(self, clean_env: None) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_settings()

        message = str(exc_info.value)
        for name in ("GEMINI_API_KEY", "TRANSCRIPTION_API_URL", "TRANSCRIPTION_API_KEY"):
            assert name in message

    def test_whitespace_counts_as_missing(
        self, monkeypatch_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "   ")

        with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
            load_settings()

    def test_bad_timeout(
        self, monkeypatch_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "soon")

        with pytest.raises(ConfigError, match="REQUEST_TIMEOUT_SECONDS"):
            load_settings()

    def test_bad_duration(
        self, monkeypatch_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEFAULT_EVENT_DURATION", "an hour")

        with pytest.raises(ConfigError, match="DEFAULT_EVENT_DURATION must be an integer"):
            load_settings()


class TestLoadNotesPath:
    def test_default(self, clean_env: None) -> None:
        assert load_notes_path() == Settings.notes_path == "voice_notes.json"

    def test_override_without_api_keys(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NOTES_PATH", "/tmp/notes.json")
        assert load_notes_path() == "/tmp/notes.json"
