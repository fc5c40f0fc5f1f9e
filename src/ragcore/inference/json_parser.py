"""Tolerant JSON extraction from LLM output."""

from __future__ import annotations

import json
import re
from typing import Any

from ragcore.exceptions import JSONParseError


def _try_parse(s: str) -> Any | None:
    """Attempt JSON parse with common fixups."""
    s = s.strip()
    if not s:
        return None
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        pass
    # Python-style literals and trailing commas
    s = re.sub(r"\bNone\b", "null", s)
    s = re.sub(r"\bTrue\b", "true", s)
    s = re.sub(r"\bFalse\b", "false", s)
    s = re.sub(r",\s*([}\]])", r"\1", s)
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        return None


def _scan_balanced(content: str, open_ch: str, close_ch: str) -> Any | None:
    """Parse the first balanced ``open_ch ... close_ch`` span, skipping strings."""
    idx = content.find(open_ch)
    if idx == -1:
        return None
    depth = 0
    in_string = False
    escape = False
    for i in range(idx, len(content)):
        ch = content[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return _try_parse(content[idx : i + 1])
    return None


def extract_json(content: str) -> Any:
    """Parse JSON from an LLM response, handling fences, prose, and common issues.

    Raises:
        JSONParseError: No strategy produced valid JSON.
    """
    # Strategy 1: ```json ... ``` fences
    fence_start = content.find("```json")
    if fence_start != -1:
        inner = content[fence_start + 7 :]
        fence_end = inner.find("```")
        if fence_end != -1:
            result = _try_parse(inner[:fence_end])
            if result is not None:
                return result

    # Strategy 2: ``` ... ``` generic fence
    fence_start = content.find("```")
    if fence_start != -1:
        inner = content[fence_start + 3 :]
        fence_end = inner.find("```")
        if fence_end != -1:
            result = _try_parse(inner[:fence_end])
            if result is not None:
                return result

    # Strategy 3: full content
    result = _try_parse(content)
    if result is not None:
        return result

    # Strategy 4: first balanced object or array
    for open_ch, close_ch in (("{", "}"), ("[", "]")):
        result = _scan_balanced(content, open_ch, close_ch)
        if result is not None:
            return result

    raise JSONParseError("Failed to parse JSON from LLM response", raw_response=content[:500])
