"""
JSON Utilities — Best-effort JSON extraction from LLM output.

Model replies that should be JSON often arrive wrapped in markdown
fences or surrounded by commentary. `extract_json` strips the fences,
isolates the outermost object/array and parses it. It never raises:
anything that does not parse to an object or array yields None and a
warning log entry.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.MULTILINE | re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```\s*$", re.MULTILINE)
# Greedy: first "{" to last "}", else first "[" to last "]".
_JSON_SPAN = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def clean_json_text(raw: str) -> str:
    """Strip fences and surrounding prose, returning the text to be parsed."""
    cleaned = _FENCE_OPEN.sub("", raw.strip())
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    cleaned = cleaned.strip()

    if not cleaned.startswith(("{", "[")):
        m = _JSON_SPAN.search(cleaned)
        if m:
            cleaned = m.group(1)

    return cleaned


def extract_json(raw: str, log: Any = None) -> dict | list | None:
    """
    Extract a JSON value (object or array) from raw model output.

    Steps:
      1. Strip ```json / ``` fence markers on any line
      2. If the text does not start with { or [, isolate the outermost
         {...} or [...] span
      3. Parse strictly (NaN / Infinity are rejected)
      4. Keep only objects and arrays; a bare scalar is a failure

    Args:
        raw: Text returned by the model.
        log: structlog-style logger; defaults to this module's logger.

    Returns:
        The parsed value, or None when the cleaned text is not valid JSON.
    """
    log = log or logger
    cleaned = ""
    try:
        cleaned = clean_json_text(raw)
        value = json.loads(cleaned, parse_constant=_reject_constant)
        if not isinstance(value, (dict, list)):
            raise ValueError(f"Expected a JSON object or array, got {type(value).__name__}")
        return value
    except Exception as e:
        log.warning(
            "json_extraction_failed",
            raw=raw,
            cleaned=cleaned,
            error=str(e),
        )
        return None
