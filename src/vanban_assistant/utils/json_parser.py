"""Recover JSON payloads from free-form AI replies."""

from __future__ import annotations

import json
import re

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?|\n?\s*```\s*$")


def extract_json(text: str) -> dict | list:
    """Parse the JSON value contained in an AI reply.

    Tries, in order: the raw text, the text with ```json fences removed,
    the outermost [...] span, then the outermost {...} span. Arrays are
    tried before objects because review replies are lists.
    """
    if not isinstance(text, str):
        raise ValueError("Could not extract JSON from non-text response")
    text = text.strip()

    for candidate in (text, strip_code_fences(text)):
        value = _loads(candidate)
        if value is not None:
            return value

    for opener, closer in (("[", "]"), ("{", "}")):
        value = _loads(_span(text, opener, closer))
        if value is not None:
            return value

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence."""
    return _FENCE_RE.sub("", text.strip()).strip()


def _span(text: str, opener: str, closer: str) -> str:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return ""
    return text[start : end + 1]


def _loads(candidate: str) -> dict | list | None:
    if not candidate:
        return None
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, (dict, list)) else None
