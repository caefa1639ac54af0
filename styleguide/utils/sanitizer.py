"""Clean raw LLM output: strip code fences and isolate embedded JSON."""

import json
import re
from typing import Literal

ResponseFormat = Literal["json", "markdown"]

_OPENING_FENCE_RE = re.compile(r"```(?:json|markdown|md)?[ \t]*\n?", re.IGNORECASE)
_INVALID_ESCAPE_RE = re.compile(r"\\(?![\"\\/bfnrtu])")


def clean_response(text: str | None, fmt: ResponseFormat = "markdown") -> str:
    """Strip fence markers; for JSON return the first parseable value re-serialized compactly.

    Never raises. If no prefix parses, the text from the first '[' or '{' is returned.
    """
    cleaned = _OPENING_FENCE_RE.sub("", text or "").replace("```", "").strip()
    if fmt != "json":
        return cleaned

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not starts:
        return cleaned
    candidate = cleaned[min(starts):]

    for end in range(len(candidate), 0, -1):
        # Only a closing bracket can end a container value.
        if candidate[end - 1] not in "}]":
            continue
        try:
            value = json.loads(candidate[:end])
        except json.JSONDecodeError:
            continue
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return candidate


def parse_json_object(text: str) -> dict[str, object]:
    parsed = _loads_lenient(text)
    if not isinstance(parsed, dict):
        raise ValueError("Expected JSON object response.")
    return parsed


def parse_json_list(text: str) -> list[object]:
    parsed = _loads_lenient(text)
    if not isinstance(parsed, list):
        raise ValueError("Expected JSON array response.")
    return parsed


def _loads_lenient(text: str) -> object:
    cleaned = clean_response(text, "json")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        # Attempt to salvage common invalid escape issues by escaping stray backslashes.
        return json.loads(_escape_invalid_backslashes(cleaned))


def _escape_invalid_backslashes(text: str) -> str:
    return _INVALID_ESCAPE_RE.sub(r"\\\\", text)


def ensure_string_list(value: object) -> list[str]:
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []
