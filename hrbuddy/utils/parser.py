"""
JSON extraction from LLM replies.

Gemini is asked to answer in JSON but often wraps it in prose or a
```json fence. Two strategies are tried in order:

- JSON in ```json blocks
- the first balanced {...} object in the text

Neither raises; callers get either the parsed object or the raw text back.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)


@dataclass
class ParsedJson:
    data: dict[str, Any]


@dataclass
class RawText:
    text: str
    # True when a JSON-looking span was found but did not parse
    malformed: bool = False


def parse_json_reply(text: str) -> ParsedJson | RawText:
    """
    Extract a JSON object from an LLM reply.

    Args:
        text: Raw model output

    Returns:
        ParsedJson with the object, or RawText with the full reply
    """
    if not text or not text.strip():
        return RawText(text or "")

    candidates = _fenced_candidates(text)
    # Fenced bodies were already tried; scan only the prose around them
    span = _first_object_span(FENCED_JSON.sub("", text))
    if span is not None:
        candidates.append(span)

    if not candidates:
        return RawText(text)

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return ParsedJson(data)

    return RawText(text, malformed=True)


def _fenced_candidates(text: str) -> list[str]:
    """Bodies of ```json ... ``` blocks, in order."""
    return [match.strip() for match in FENCED_JSON.findall(text)]


def _first_object_span(text: str) -> str | None:
    """Find the first top-level {...} span by matching braces."""
    start = text.find("{")
    while start != -1:
        span = _extract_balanced(text, start, "{", "}")
        if span:
            return span
        start = text.find("{", start + 1)
    return None


def _extract_balanced(text: str, start: int, open_char: str, close_char: str) -> str | None:
    """Extract balanced brackets/braces starting from position."""
    depth = 0
    in_string = False
    escape_next = False

    for i, char in enumerate(text[start:], start):
        if escape_next:
            escape_next = False
            continue

        if char == "\\" and in_string:
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None
