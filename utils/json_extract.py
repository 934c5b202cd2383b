"""
Helpers for pulling JSON out of free-form LLM responses
"""
import json
import re
from typing import Any

from utils.errors import ResponseParseError

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_CLOSERS = {"{": "}", "[": "]"}


def extract_json(text: str) -> str:
    """
    Extract the JSON payload from an LLM response

    Strips a markdown code fence if present, then returns the first
    balanced {...} or [...] substring. Brackets inside JSON strings are
    ignored. If the payload never closes (truncated output), everything
    from the opening bracket on is returned so callers can detect it.

    Args:
        text: Raw response text

    Returns:
        The JSON candidate string
    """
    candidate = (text or "").strip()

    fence = _CODE_FENCE.search(candidate)
    if fence:
        candidate = fence.group(1).strip()

    starts = [i for i in (candidate.find("{"), candidate.find("[")) if i != -1]
    if not starts:
        return candidate
    start = min(starts)

    stack = []
    in_string = False
    escaped = False
    for i in range(start, len(candidate)):
        char = candidate[i]
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
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif stack and char == stack[-1]:
            stack.pop()
            if not stack:
                return candidate[start:i + 1]

    return candidate[start:]


def parse_json_array(text: str) -> list[Any]:
    """
    Parse an LLM response that must contain a JSON array

    Raises:
        ResponseParseError: If the payload is truncated, not valid JSON or not an array
    """
    payload = extract_json(text)
    stripped = payload.strip()

    # Validate JSON completeness before parsing
    if not stripped.endswith("]") and not stripped.endswith("}"):
        raise ResponseParseError("Incomplete JSON response (output looks truncated)", raw=text)

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in response: {e}", raw=text) from e

    if not isinstance(data, list):
        raise ResponseParseError(f"Expected a JSON array, got {type(data).__name__}", raw=text)

    return data
