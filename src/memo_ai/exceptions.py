"""Custom exceptions for the memo-ai processing pipeline.

Calendar-specific errors live in :mod:`memo_ai.calendar.exceptions`; the
exceptions here cover the remote services (transcription and the language
model), response parsing, input validation, and cancellation.
"""

from __future__ import annotations


class MemoAIError(Exception):
    """Base class for all memo-ai errors."""


class RemoteServiceError(MemoAIError):
    """Raised when a remote service call fails.

    Covers network failures, timeouts, non-2xx HTTP responses, SDK-level
    API errors, and empty responses from the transcription endpoint or the
    language model.

    Attributes:
        status_code: HTTP status code when the failure came from an HTTP
            response, otherwise ``None``.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(MemoAIError):
    """Raised when a model response cannot be parsed or validated.

    Attributes:
        raw_response: The raw model output that failed to parse.
    """

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class InvalidInputError(MemoAIError, ValueError):
    """Raised for malformed caller input (bad date, bad time, start >= end)."""


class ProcessingCancelledError(MemoAIError):
    """Raised when a caller-supplied cancel token is set mid-pipeline."""


class StorageError(MemoAIError):
    """Raised when the persisted note collection cannot be read."""
