"""Recover one JSON object from free-form generative-model output.

Models are asked for bare JSON but regularly wrap it in prose, markdown
fences, or stop mid-object. The parser first tries the whole text, then
walks every ``{`` left to right and tries the first balanced span that
starts there. The first span that decodes to an object wins, even if an
earlier start produced an unbalanced or undecodable span.
"""
from __future__ import annotations

import json
from typing import Any

from pagegenie.models.outputs import ParseFailure, ParsedOutput


def _decode_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return value if isinstance(value, dict) else None


def balanced_span_end(raw: str, start: int) -> int | None:
    """Return the index of the brace closing the object opened at ``start``.

    Braces inside JSON string literals (including escaped quotes) are not
    counted. Returns ``None`` when the object never closes.
    """
    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(raw)):
        char = raw[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos
    return None


def iter_candidates(raw: str):
    """Yield balanced ``{...}`` substrings in order of their start position."""
    start = raw.find("{")
    while start >= 0:
        end = balanced_span_end(raw, start)
        if end is not None:
            yield raw[start : end + 1]
        start = raw.find("{", start + 1)


def parse(raw: str | None) -> ParsedOutput:
    """Parse model output into a dict, or return a ``ParseFailure``."""
    if not raw or not raw.strip():
        return ParseFailure("empty model output")

    whole = _decode_object(raw.strip())
    if whole is not None:
        return whole

    for candidate in iter_candidates(raw):
        parsed = _decode_object(candidate)
        if parsed is not None:
            return parsed

    return ParseFailure()
