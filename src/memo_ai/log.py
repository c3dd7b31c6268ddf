"""Logging setup for the memo-ai CLI.

One stderr handler on the root logger, pipe-separated fields with ISO 8601
timestamps.  HTTP transports and the Google SDKs log at WARNING unless the
application runs at DEBUG.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Set on the handler we install so repeat calls find it again.
_HANDLER_ATTR = "_memo_ai_log_handler"

_NOISY_LOGGERS = (
    "googleapiclient.discovery",
    "googleapiclient.discovery_cache",
    "google_genai",
    "httpx",
    "urllib3",
)


def setup_logging(level: str = "INFO") -> None:
    """Route log records to stderr at *level*.

    Repeat calls adjust the level of the existing handler instead of adding
    another one.

    Raises:
        ValueError: If *level* is not a logging level name.
    """
    numeric_level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
        )

    ours = next((h for h in root.handlers if getattr(h, _HANDLER_ATTR, False)), None)
    if ours is None:
        ours = logging.StreamHandler(sys.stderr)
        ours.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        setattr(ours, _HANDLER_ATTR, True)
        root.addHandler(ours)
    ours.setLevel(numeric_level)


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return resolved
