"""Calendar exceptions and retry logic for Google Calendar API calls.

Exception hierarchy::

    CalendarError                  (base for all calendar errors)
    +-- CalendarPermissionError    (access not granted)
    +-- NoCalendarAvailableError   (no calendar resolves for a write)
    +-- CalendarPlatformError      (the underlying platform call failed)
        +-- CalendarRateLimitError (HTTP 429)
        +-- CalendarNotFoundError  (HTTP 404)

The ``@with_retry`` decorator wraps Google API calls: it retries rate
limits and network errors with exponential backoff and maps
``googleapiclient.errors.HttpError`` onto :class:`CalendarPlatformError`.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class CalendarError(Exception):
    """Base exception for calendar failures."""


class CalendarPermissionError(CalendarError):
    """Raised when calendar access has not been granted."""

    def __init__(self, message: str = "Calendar permission not granted") -> None:
        super().__init__(message)


class NoCalendarAvailableError(CalendarError):
    """Raised when no target calendar can be resolved for a write."""

    def __init__(
        self, message: str = "No calendar available for creating events"
    ) -> None:
        super().__init__(message)


class CalendarPlatformError(CalendarError):
    """Raised when the calendar platform itself fails.

    Attributes:
        status_code: HTTP status code from the API, or ``None`` if the
            error did not originate from an HTTP response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CalendarRateLimitError(CalendarPlatformError):
    """Raised when the Calendar API returns HTTP 429."""

    def __init__(self, message: str = "Calendar API rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class CalendarNotFoundError(CalendarPlatformError):
    """Raised when a calendar or event does not exist (HTTP 404)."""

    def __init__(self, message: str = "Calendar resource not found") -> None:
        super().__init__(message, status_code=404)


_DEFAULT_MAX_RETRIES = 3
_DEFAULT_BASE_DELAY = 1.0  # seconds


def _translate(error: Exception) -> tuple[CalendarPlatformError, bool]:
    """Return the calendar error for *error* and whether it is worth retrying."""
    if isinstance(error, HttpError):
        status = error.resp.status
        if status == 429:
            return CalendarRateLimitError(str(error)), True
        if status == 404:
            return CalendarNotFoundError(str(error)), False
        return CalendarPlatformError(str(error), status_code=status), False
    return CalendarPlatformError(f"Network error: {error}"), True


def with_retry(
    max_retries: int = _DEFAULT_MAX_RETRIES,
    base_delay: float = _DEFAULT_BASE_DELAY,
) -> Callable[[F], F]:
    """Retry a platform call on rate limits and network failures.

    HTTP 429 and ``OSError``/``TimeoutError`` are retried with a delay of
    ``base_delay * 2**attempt``.  When retries run out, a rate limit
    surfaces as :class:`CalendarRateLimitError` and a network failure as
    :class:`CalendarPlatformError`.  Any other ``HttpError`` is translated
    and raised on the first attempt; unrelated exceptions pass through.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except (HttpError, OSError, TimeoutError) as exc:
                    translated, retryable = _translate(exc)
                    if not retryable:
                        logger.error("Calendar request failed: %s", translated)
                        raise translated from exc
                    if attempt >= max_retries:
                        logger.error(
                            "Calendar request still failing after %d retries: %s",
                            max_retries,
                            exc,
                        )
                        if isinstance(translated, CalendarRateLimitError):
                            raise translated from exc
                        raise CalendarPlatformError(
                            f"Network error after {max_retries} retries: {exc}"
                        ) from exc

                    delay = base_delay * (2**attempt)
                    attempt += 1
                    logger.warning(
                        "Transient calendar failure (%s); retry %d/%d in %.1fs",
                        exc,
                        attempt,
                        max_retries,
                        delay,
                    )
                    time.sleep(delay)

        return wrapper  # type: ignore[return-value]

    return decorator
