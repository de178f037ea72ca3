"""
Locate and parse the first balanced JSON object inside raw model output.

Model output may carry prose or code fences around the object, several
objects, or be truncated after the first object closes. The scanner walks
the characters with three states (outside a string, inside a string, just
after a backslash inside a string) and tracks brace depth only outside
strings.
"""

import json
from enum import Enum
from typing import Any

from models.errors import SynthesisError

PREVIEW_CHARS = 500


class _ScanState(Enum):
    OUTSIDE = "outside"
    IN_STRING = "in_string"
    ESCAPE = "escape"


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


def find_first_json_object(text: str) -> str | None:
    """
    Return the first complete ``{...}`` substring of ``text``, or None when
    there is no opening brace or the object never closes.
    """
    start = text.find("{")
    if start < 0:
        return None

    state = _ScanState.OUTSIDE
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if state is _ScanState.ESCAPE:
            state = _ScanState.IN_STRING
        elif state is _ScanState.IN_STRING:
            if ch == "\\":
                state = _ScanState.ESCAPE
            elif ch == '"':
                state = _ScanState.OUTSIDE
        elif ch == '"':
            state = _ScanState.IN_STRING
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def extract_json_object(text: str) -> str:
    """
    Like :func:`find_first_json_object` but raises SynthesisError with a
    bounded preview of the text when no balanced object exists.
    """
    if not (text or "").strip():
        raise SynthesisError("Meta-summary returned empty output.")
    extracted = find_first_json_object(text)
    if extracted is None:
        raise SynthesisError(
            "Meta-summary did not contain a complete JSON object.", preview(text)
        )
    return extracted


def parse_json_object(text: str) -> dict[str, Any]:
    """Extract and decode the first JSON object in ``text``."""
    extracted = extract_json_object(text)
    try:
        parsed = json.loads(extracted)
    except json.JSONDecodeError as e:
        raise SynthesisError(
            f"Meta-summary did not return valid JSON: {e.msg} (line {e.lineno}, col {e.colno})",
            preview(extracted),
        ) from e
    return parsed
