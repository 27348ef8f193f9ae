"""JSON Recovery Parser - Repairs and extracts JSON from noisy model text.

Models wrap JSON in commentary or code fences, cut output off at the token
budget and emit near-valid JSON with typographic quotes or missing commas.
Each repair below targets one of those failure modes; nothing here attempts
full grammar correction, and only the first balanced top-level structure is
recovered.
"""

import json
import logging
import re
from typing import Any

from quizsmith.errors import EmptyInputError, ParseMalformedError, ParseTruncatedError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_CURLY_DOUBLE_RE = re.compile("[“”]")
_CURLY_SINGLE_RE = re.compile("[‘’]")
_MISSING_OBJECT_COMMA_RE = re.compile(r"}\s*\n\s*\{")
_MISSING_ARRAY_COMMA_RE = re.compile(r"\]\s*\n\s*\[")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_ENDS_WITH_CLOSER_RE = re.compile(r"[}\]]\s*$")

TRUNCATED_MESSAGE = (
    "Model returned truncated/invalid JSON. "
    "Increase max output tokens or reduce question count."
)


def repair_json_common(text: str) -> str:
    """
    Apply the common repairs to model output.

    Args:
        text: Raw or partially cleaned model output

    Returns:
        Repaired, stripped text
    """
    text = _FENCE_RE.sub("", text or "")
    text = _CURLY_DOUBLE_RE.sub('"', text)
    text = _CURLY_SINGLE_RE.sub("'", text)
    text = _MISSING_OBJECT_COMMA_RE.sub("},{", text)
    text = _MISSING_ARRAY_COMMA_RE.sub("],[", text)
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    return text.strip()


def _scan_depth(text: str, start: int = 0, stop_at_zero: bool = False) -> tuple[int, int | None]:
    """
    Walk text tracking bracket depth outside of strings.

    Returns:
        Final depth, and the index where depth first returned to zero
    """
    in_string = False
    escaped = False
    depth = 0

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0 and stop_at_zero:
                return depth, i

    return depth, None


def find_balanced_json_end(text: str, start: int) -> int | None:
    """
    Find where the first balanced structure starting at start closes.

    Args:
        text: Text to scan
        start: Index of the opening brace or bracket

    Returns:
        Index of the closing delimiter, or None if it never closes
    """
    _, end = _scan_depth(text, start, stop_at_zero=True)
    return end


def looks_truncated_json(text: str) -> bool:
    """
    Guess whether JSON text was cut off rather than malformed.

    Args:
        text: JSON candidate, starting at its first brace or bracket

    Returns:
        True when the text is empty, lacks a trailing closer or is unbalanced
    """
    stripped = (text or "").strip()
    if not stripped:
        return True
    if not _ENDS_WITH_CLOSER_RE.search(stripped):
        return True
    depth, _ = _scan_depth(stripped)
    return depth != 0


def _try_parse(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except json.JSONDecodeError as e:
        return False, e


def safe_parse_json(text: str) -> Any:
    """
    Parse the first JSON object or array found in model output.

    Args:
        text: Model output that should contain JSON

    Returns:
        The decoded JSON value

    Raises:
        EmptyInputError: If the text is blank
        ParseTruncatedError: If the JSON looks cut off
        ParseMalformedError: If no valid JSON could be recovered
    """
    raw = (text or "").strip()
    if not raw:
        raise EmptyInputError("Empty model output.")

    cleaned = repair_json_common(raw)

    ok, value = _try_parse(cleaned)
    if ok:
        return value

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i >= 0]
    if not starts:
        raise ParseMalformedError("Model output was not JSON.")
    start = min(starts)

    end = find_balanced_json_end(cleaned, start)
    if end is not None:
        ok, value = _try_parse(repair_json_common(cleaned[start : end + 1]))
        if ok:
            logger.debug("Recovered JSON from balanced span [%d, %d]", start, end)
            return value

    tail = repair_json_common(cleaned[start:])
    ok, value = _try_parse(tail)
    if ok:
        return value

    if looks_truncated_json(tail):
        logger.warning("Model output looks truncated (%d chars)", len(tail))
        raise ParseTruncatedError(TRUNCATED_MESSAGE)

    detail = str(value)
    raise ParseMalformedError(f"Model output was not valid JSON: {detail}", detail=detail)
