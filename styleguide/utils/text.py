"""Small text helpers shared by prompt builders and the blog service."""

import math
import re

from constants import SLUG_MAX_LENGTH, WORDS_PER_MINUTE

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACE_RE = re.compile(r"\s+")
_SLUG_DASHES_RE = re.compile(r"-+")


def slugify(text: str, *, max_length: int = SLUG_MAX_LENGTH) -> str:
    slug = _SLUG_STRIP_RE.sub("", (text or "").lower())
    slug = _SLUG_SPACE_RE.sub("-", slug.strip())
    slug = _SLUG_DASHES_RE.sub("-", slug)
    return slug[:max_length].strip("-")


def word_count(text: str) -> int:
    return len((text or "").split())


def reading_time(words: int) -> int:
    """Minutes to read, rounded up, never below one."""
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def truncate(text: str, max_chars: int, *, ellipsis: str = "…") -> str:
    text = (text or "").strip()
    if len(text) <= max_chars:
        return text
    return text[: max(0, max_chars - len(ellipsis))].rstrip() + ellipsis


def collapse_whitespace(text: str) -> str:
    return _SLUG_SPACE_RE.sub(" ", text or "").strip()
