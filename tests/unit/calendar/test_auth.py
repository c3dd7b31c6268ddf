"""Tests for Google Calendar OAuth in :mod:`memo_ai.calendar.auth`.

``load_credentials`` is the silent permission check (cached token, refresh);
``authorize`` is the interactive request (browser consent flow).

Test matrix:

| Test | Scenario | Expected |
|---|---|---|
| test_no_token_file | token.json missing | None, nothing loaded |
| test_valid_cached_token | token valid | Returned as-is, not saved |
| test_expired_token_refreshed | expired + refresh token | refresh() called, token saved |
| test_refresh_rejected | RefreshError | None |
| test_unparseable_token | ValueError on load | None |
| test_expired_without_refresh_token | no refresh token | None |
| test_missing_client_secrets | credentials.json missing | CalendarPlatformError |
| test_consent_flow_saves_token | browser flow OK | token.json written |
| test_correct_scopes_requested | flow scopes | calendar scope |
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, create_autospec, patch

import pytest
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials

from memo_ai.calendar.auth import SCOPES, authorize, load_credentials
from memo_ai.calendar.exceptions import CalendarPlatformError

_FROM_FILE = "memo_ai.calendar.auth.Credentials.from_authorized_user_file"


class TestLoadCredentials:
    def test_no_token_file(self, tmp_token_file: Path) -> None:
        with patch(_FROM_FILE) as mock_load:
            assert load_credentials(tmp_token_file) is None
        mock_load.assert_not_called()

    def test_valid_cached_token(
        self, tmp_token_file: Path, mock_credentials: MagicMock
    ) -> None:
        tmp_token_file.write_text('{"token": "cached"}')

        with patch(_FROM_FILE, return_value=mock_credentials) as mock_load:
            result = load_credentials(tmp_token_file)

        assert result is mock_credentials
        mock_load.assert_called_once_with(str(tmp_token_file), SCOPES)
        mock_credentials.refresh.assert_not_called()
        assert tmp_token_file.read_text() == '{"token": "cached"}'

    def test_expired_token_refreshed(
        self, tmp_token_file: Path, mock_expired_credentials: MagicMock
    ) -> None:
        tmp_token_file.write_text('{"token": "expired"}')

        with patch(_FROM_FILE, return_value=mock_expired_credentials):
            result = load_credentials(tmp_token_file)

        assert result is mock_expired_credentials
        mock_expired_credentials.refresh.assert_called_once()
        assert tmp_token_file.read_text() == '{"token": "refreshed"}'

    def test_refresh_rejected(
        self, tmp_token_file: Path, mock_expired_credentials: MagicMock
    ) -> None:
        tmp_token_file.write_text('{"token": "expired"}')
        mock_expired_credentials.refresh.side_effect = RefreshError("revoked")

        with patch(_FROM_FILE, return_value=mock_expired_credentials):
            assert load_credentials(tmp_token_file) is None

    def test_unparseable_token(self, tmp_token_file: Path) -> None:
        tmp_token_file.write_text("not json")

        with patch(_FROM_FILE, side_effect=ValueError("bad token")):
            assert load_credentials(tmp_token_file) is None

    def test_expired_without_refresh_token(
        self, tmp_token_file: Path, mock_expired_credentials: MagicMock
    ) -> None:
        tmp_token_file.write_text('{"token": "expired"}')
        mock_expired_credentials.refresh_token = None

        with patch(_FROM_FILE, return_value=mock_expired_credentials):
            assert load_credentials(tmp_token_file) is None


class TestAuthorize:
    def test_missing_client_secrets(self, tmp_path: Path, tmp_token_file: Path) -> None:
        with patch("memo_ai.calendar.auth.InstalledAppFlow") as mock_flow_cls, pytest.raises(
            CalendarPlatformError, match="client secrets"
        ):
            authorize(tmp_path / "missing.json", tmp_token_file)
        mock_flow_cls.from_client_secrets_file.assert_not_called()

    def test_consent_flow_saves_token(
        self, tmp_credentials_file: Path, tmp_path: Path
    ) -> None:
        token_path = tmp_path / "nested" / "token.json"
        fresh_creds = create_autospec(Credentials, instance=True)
        fresh_creds.to_json.return_value = '{"token": "brand-new"}'

        with patch("memo_ai.calendar.auth.InstalledAppFlow") as mock_flow_cls:
            mock_flow_cls.from_client_secrets_file.return_value.run_local_server.return_value = (
                fresh_creds
            )
            result = authorize(tmp_credentials_file, token_path)

        assert result is fresh_creds
        assert token_path.read_text() == '{"token": "brand-new"}'

    def test_correct_scopes_requested(
        self, tmp_credentials_file: Path, tmp_token_file: Path
    ) -> None:
        creds = create_autospec(Credentials, instance=True)
        creds.to_json.return_value = "{}"

        with patch("memo_ai.calendar.auth.InstalledAppFlow") as mock_flow_cls:
            mock_flow_cls.from_client_secrets_file.return_value.run_local_server.return_value = creds
            authorize(tmp_credentials_file, tmp_token_file)

        mock_flow_cls.from_client_secrets_file.assert_called_once_with(
            str(tmp_credentials_file), scopes=SCOPES
        )
        assert SCOPES == ["https://www.googleapis.com/auth/calendar"]
