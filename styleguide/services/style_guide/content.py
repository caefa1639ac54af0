"""Smaller style guide sections and brand helpers: examples, word list, audience, keywords, traits."""

import logging
from typing import TypedDict

from constants import LLM_MODEL, LLM_MODEL_QUALITY, LLM_MODEL_REASONING
from styleguide.models import BrandDetails
from styleguide.prompts import (
    AUDIENCE_SECTION_SYSTEM_PROMPT,
    AUDIENCE_SUMMARY_SYSTEM_PROMPT,
    BEFORE_AFTER_SYSTEM_PROMPT,
    BRAND_NAME_SYSTEM_PROMPT,
    BRAND_SUMMARY_SYSTEM_PROMPT,
    KEYWORDS_SYSTEM_PROMPT,
    TRAIT_SUGGESTIONS_SYSTEM_PROMPT,
    WORD_LIST_SYSTEM_PROMPT,
)
from styleguide.prompts.guide_content import (
    build_audience_section_prompt,
    build_audience_summary_prompt,
    build_before_after_prompt,
    build_brand_name_prompt,
    build_brand_summary_prompt,
    build_keywords_prompt,
    build_trait_suggestions_prompt,
    build_word_list_prompt,
)
from styleguide.services.style_guide.traits import TRAITS
from styleguide.utils.errors import GenerationError, classify_error
from styleguide.utils.openai_client import GenerationRequest, GenerationResult, generate
from styleguide.utils.sanitizer import ensure_string_list, parse_json_object

logger = logging.getLogger(__name__)

KEYWORD_MAX_LENGTH = 20


class BeforeAfterExample(TypedDict):
    before: str
    after: str


class WordListEntry(TypedDict):
    use: str
    avoid: str
    why: str


def _content_or_raise(result: GenerationResult, what: str) -> str:
    if not result["success"] or not result["content"].strip():
        message = result["error"] or f"Failed to generate {what}"
        raise GenerationError(message, classify_error(message))
    return result["content"].strip()


# ── Before / After ────────────────────────────────────────────────────────────

def render_before_after_markdown(examples: list[BeforeAfterExample]) -> str:
    blocks = [
        f"### Example {i}\n\nBefore: {ex['before']}\n\nAfter: {ex['after']}"
        for i, ex in enumerate(examples, start=1)
    ]
    return "\n\n".join(blocks)


def generate_before_after(brand: BrandDetails, traits_context: str | None = None, count: int = 3) -> str:
    result = generate(GenerationRequest(
        system_prompt=BEFORE_AFTER_SYSTEM_PROMPT,
        user_prompt=build_before_after_prompt(brand, count=count, traits_context=traits_context),
        response_format="json",
        max_tokens=400,
        model=LLM_MODEL_QUALITY,
        label="before_after",
    ))
    payload = parse_json_object(_content_or_raise(result, "before/after examples"))
    examples = [
        BeforeAfterExample(before=str(ex["before"]).strip(), after=str(ex["after"]).strip())
        for ex in payload.get("examples") or []
        if isinstance(ex, dict) and ex.get("before") and ex.get("after")
    ]
    if not examples:
        raise GenerationError("No before/after examples in response")
    return render_before_after_markdown(examples[:count])


# ── Word list ─────────────────────────────────────────────────────────────────

def render_word_list_markdown(entries: list[WordListEntry]) -> str:
    rows = ["| Use | Avoid | Why |", "| --- | --- | --- |"]
    for entry in entries:
        cells = [entry["use"], entry["avoid"], entry["why"]]
        rows.append("| " + " | ".join(c.replace("|", "/") for c in cells) + " |")
    return "\n".join(rows)


def generate_word_list(brand: BrandDetails, traits_context: str | None = None, count: int = 12) -> str:
    result = generate(GenerationRequest(
        system_prompt=WORD_LIST_SYSTEM_PROMPT,
        user_prompt=build_word_list_prompt(brand, count=count, traits_context=traits_context),
        response_format="json",
        max_tokens=1200,
        model=LLM_MODEL_QUALITY,
        label="word_list",
    ))
    payload = parse_json_object(_content_or_raise(result, "word list"))
    entries = [
        WordListEntry(
            use=str(w["use"]).strip(),
            avoid=str(w["avoid"]).strip(),
            why=str(w.get("why") or "").strip(),
        )
        for w in payload.get("words") or []
        if isinstance(w, dict) and w.get("use") and w.get("avoid")
    ]
    if not entries:
        raise GenerationError("No word list entries in response")
    return render_word_list_markdown(entries)


# ── Audience ──────────────────────────────────────────────────────────────────

def generate_audience_section(brand: BrandDetails) -> str:
    result = generate(GenerationRequest(
        system_prompt=AUDIENCE_SECTION_SYSTEM_PROMPT,
        user_prompt=build_audience_section_prompt(brand),
        response_format="markdown",
        max_tokens=1200,
        model=LLM_MODEL_REASONING,
        label="audience_section",
    ))
    return _content_or_raise(result, "audience section")


def generate_audience_summary(name: str, description: str) -> str:
    result = generate(GenerationRequest(
        system_prompt=AUDIENCE_SUMMARY_SYSTEM_PROMPT,
        user_prompt=build_audience_summary_prompt(name, description),
        response_format="markdown",
        max_tokens=200,
        model=LLM_MODEL,
        label="audience_summary",
    ))
    return _content_or_raise(result, "audience summary")


# ── Keywords and trait suggestions ────────────────────────────────────────────

def generate_keywords(name: str, description: str, audience: str | None = None) -> list[str]:
    """8-10 keywords; entries longer than 20 chars or repeated are dropped."""
    result = generate(GenerationRequest(
        system_prompt=KEYWORDS_SYSTEM_PROMPT,
        user_prompt=build_keywords_prompt(name, description, audience),
        response_format="json",
        max_tokens=400,
        model=LLM_MODEL,
        label="keywords",
    ))
    payload = parse_json_object(_content_or_raise(result, "keywords"))
    keywords: list[str] = []
    seen: set[str] = set()
    for keyword in ensure_string_list(payload.get("keywords")):
        if len(keyword) > KEYWORD_MAX_LENGTH or keyword.lower() in seen:
            continue
        seen.add(keyword.lower())
        keywords.append(keyword)
    return keywords[:10]


def generate_trait_suggestions(name: str, description: str, audience: str) -> list[str]:
    """Three catalog trait names that fit the brand; unknown names are discarded."""
    available = list(TRAITS)
    result = generate(GenerationRequest(
        system_prompt=TRAIT_SUGGESTIONS_SYSTEM_PROMPT,
        user_prompt=build_trait_suggestions_prompt(name, description, audience, available),
        response_format="json",
        max_tokens=100,
        model=LLM_MODEL_QUALITY,
        label="trait_suggestions",
    ))
    payload = parse_json_object(_content_or_raise(result, "trait suggestions"))
    by_lower = {t.lower(): t for t in available}
    suggestions: list[str] = []
    for raw in ensure_string_list(payload.get("traits")):
        match = by_lower.get(raw.lower())
        if match and match not in suggestions:
            suggestions.append(match)
    return suggestions[:3]


# ── Brand summary / name ──────────────────────────────────────────────────────

def generate_brand_summary(brand_text: str) -> str:
    result = generate(GenerationRequest(
        system_prompt=BRAND_SUMMARY_SYSTEM_PROMPT,
        user_prompt=build_brand_summary_prompt(brand_text),
        response_format="markdown",
        max_tokens=300,
        model=LLM_MODEL,
        label="brand_summary",
    ))
    return _content_or_raise(result, "brand summary")


def extract_brand_name(brand_text: str) -> str:
    result = generate(GenerationRequest(
        system_prompt=BRAND_NAME_SYSTEM_PROMPT,
        user_prompt=build_brand_name_prompt(brand_text),
        response_format="markdown",
        max_tokens=50,
        model=LLM_MODEL,
        label="brand_name",
    ))
    return _content_or_raise(result, "brand name").strip("\"' ")


# ── Static sections ───────────────────────────────────────────────────────────

def how_to_use_content(brand_name: str) -> str:
    return (
        "This document outlines the rules for brand voice, spelling, grammar, and formatting across "
        f"all content channels. Anyone writing and publishing content for {brand_name} should follow "
        "these guidelines."
    )
