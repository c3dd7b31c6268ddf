"""OAuth 2.0 authorisation for Google Calendar.

Splits the Desktop application OAuth flow into the two steps the calendar
client needs:

- :func:`load_credentials` -- the silent *check*: load the cached token and
  refresh it if possible, never prompting the user.
- :func:`authorize` -- the interactive *request*: run the browser consent
  flow and cache the resulting token.

Usage::

    from memo_ai.calendar.auth import authorize, load_credentials

    creds = load_credentials(Path("token.json"))
    if creds is None:
        creds = authorize(Path("credentials.json"), Path("token.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from memo_ai.calendar.exceptions import CalendarPlatformError

logger = logging.getLogger(__name__)

SCOPES: list[str] = ["https://www.googleapis.com/auth/calendar"]
"""OAuth 2.0 scopes required for calendar listing and event CRUD."""


def load_credentials(token_path: Path | str) -> Credentials | None:
    """Return usable cached credentials without user interaction.

    Loads ``token_path``; if the token has expired but carries a refresh
    token, refreshes it and writes it back.

    Args:
        token_path: Path of the cached user token (``token.json``).

    Returns:
        Valid :class:`Credentials`, or ``None`` when no usable token exists
        (missing, unparseable, or refresh rejected).
    """
    token_path = Path(token_path)

    if not token_path.exists():
        logger.info("No cached token found at %s", token_path)
        return None

    try:
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)
    except (json.JSONDecodeError, ValueError, KeyError) as exc:
        logger.warning("Failed to parse cached token at %s: %s", token_path, exc)
        return None

    if creds.valid:
        logger.debug("Loaded valid cached token from %s", token_path)
        return creds

    if creds.expired and creds.refresh_token:
        logger.info("Cached token expired, attempting refresh")
        try:
            creds.refresh(Request())
        except RefreshError as exc:
            logger.warning("Token refresh rejected: %s", exc)
            return None
        _save_token(creds, token_path)
        return creds

    return None


def authorize(credentials_path: Path | str, token_path: Path | str) -> Credentials:
    """Run the browser consent flow and cache the resulting token.

    Args:
        credentials_path: OAuth client secrets file downloaded from Google
            Cloud Console.
        token_path: Destination for the cached user token.

    Returns:
        Fresh :class:`Credentials` with the calendar scope.

    Raises:
        CalendarPlatformError: If the client secrets file is missing.
        oauthlib.oauth2.rfc6749.errors.OAuth2Error: If the user declines
            consent.
    """
    credentials_path = Path(credentials_path)
    token_path = Path(token_path)

    if not credentials_path.exists():
        msg = f"OAuth client secrets file not found: {credentials_path}"
        logger.error(msg)
        raise CalendarPlatformError(msg)

    logger.info("Starting browser-based OAuth flow")
    flow = InstalledAppFlow.from_client_secrets_file(
        str(credentials_path),
        scopes=SCOPES,
    )
    creds = flow.run_local_server(port=0)
    _save_token(creds, token_path)
    logger.info("Browser OAuth flow completed successfully")
    return creds


def _save_token(creds: Credentials, token_path: Path) -> None:
    """Persist credentials, creating parent directories as needed."""
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(creds.to_json())
    logger.info("Token saved to %s", token_path)
