"""Best-effort JSON parsing for model output.

Models asked for strict JSON occasionally return near-misses: ``//`` or
``/* */`` comments, or a trailing comma before ``}``/``]``.
:func:`parse_model_json` tries a direct parse first, then a repaired parse,
and records which path succeeded.  A persistent failure is reported in the
result rather than raised; callers decide whether it is fatal.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal

logger = logging.getLogger(__name__)

ParsePath = Literal["direct", "repaired", "failed"]


@dataclass(frozen=True)
class ParsedResponse:
    """Outcome of :func:`parse_model_json`.

    Attributes:
        data: The decoded JSON value, or ``None`` when both attempts failed.
        path: Which attempt produced *data*.
        error: The decode error from the last attempt, if it failed.
    """

    data: Any
    path: ParsePath
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.path != "failed"


def parse_model_json(raw_text: str) -> ParsedResponse:
    """Decode *raw_text*, repairing comments and trailing commas if needed."""
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        logger.warning("Model response is not valid JSON (%s); attempting repair", exc)
    else:
        logger.debug("Model response parsed directly")
        return ParsedResponse(data=data, path="direct")

    repaired = repair_json(raw_text)
    try:
        data = json.loads(repaired)
    except json.JSONDecodeError as exc:
        logger.error("Model response still invalid after repair: %s", exc)
        logger.debug("Unparseable model response:\n%s", raw_text)
        return ParsedResponse(data=None, path="failed", error=str(exc))

    logger.warning("Model response parsed after repair")
    return ParsedResponse(data=data, path="repaired")


def repair_json(text: str) -> str:
    """Strip comments and trailing commas outside string literals."""
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        char = text[i]

        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = length if close == -1 else close + 2
        elif char == ",":
            j = _skip_insignificant(text, i + 1)
            if j < length and text[j] in "}]":
                i += 1
            else:
                out.append(char)
                i += 1
        else:
            out.append(char)
            i += 1

    return "".join(out)


def _skip_insignificant(text: str, i: int) -> int:
    """Return the index of the next character that is not whitespace or a comment."""
    length = len(text)
    while i < length:
        if text[i].isspace():
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = length if close == -1 else close + 2
        else:
            break
    return i
