"""Gemini client for JSON-producing prompts.

Wraps the Google ``google-genai`` SDK.  Both pipeline stages (event
detection and summarisation) send a system instruction plus a user prompt
and expect a single JSON object back; this module owns the API call, the
request timeout, and the mapping of SDK/transport failures onto
:class:`~memo_ai.exceptions.RemoteServiceError`.  Parsing is left to the
callers because they disagree on how to treat malformed output.
"""

from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from memo_ai.exceptions import RemoteServiceError

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gemini-2.0-flash"
_DEFAULT_TIMEOUT_SECONDS = 60.0


class GeminiClient:
    """Client for JSON-mode generation via Google Gemini.

    Args:
        api_key: Google Gemini API key.
        model: Model identifier.  Defaults to ``"gemini-2.0-flash"``.
        timeout_seconds: Per-request timeout.  Defaults to 60 seconds.
    """

    def __init__(
        self,
        api_key: str,
        model: str = _DEFAULT_MODEL,
        timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = genai.Client(
            api_key=api_key,
            http_options=genai_types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
    ) -> str:
        """Run one JSON-mode generation and return the raw response text.

        Args:
            system_prompt: System instruction describing the task and the
                expected JSON shape.
            user_prompt: The user-facing content (usually the transcript).
            temperature: Sampling temperature; ``None`` keeps the model
                default.

        Returns:
            The text of the first candidate, or ``""`` when the model
            produced no candidates or no text.

        Raises:
            RemoteServiceError: On API, network or timeout failures.
        """
        logger.debug("System prompt sent to Gemini:\n%s", system_prompt)
        logger.debug("User prompt sent to Gemini:\n%s", user_prompt)

        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            response_mime_type="application/json",
            temperature=temperature,
        )

        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as exc:
            logger.error("Gemini API error: %s", exc)
            raise RemoteServiceError(
                f"Gemini API call failed: {exc}", status_code=exc.code
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini transport error: %s", exc)
            raise RemoteServiceError(f"Gemini request failed: {exc}") from exc

        raw_text = response.text or ""
        logger.debug("Raw Gemini response:\n%s", raw_text)
        return raw_text
