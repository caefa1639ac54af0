"""
Blog article generation: category -> research brief -> outline -> article.

Each step is a single LLM call. Research is optional; the outline is still
generated when Firecrawl is not configured or returns nothing.
"""

import json
import logging
import re
from datetime import datetime
from typing import TypedDict

from constants import (
    BLOG_CATEGORIES,
    BLOG_DEFAULT_CATEGORY,
    LLM_MODEL,
    LLM_MODEL_QUALITY,
    RESEARCH_OUTLINE_SOURCE_MAX_CHARS,
)
from styleguide.models import ResearchNotes
from styleguide.prompts import CATEGORY_SYSTEM_PROMPT, build_blog_system_prompt
from styleguide.prompts.blog import (
    build_article_prompt,
    build_category_prompt,
    build_outline_prompt,
    mentions_template,
)
from styleguide.services.blog.research import search_brief
from styleguide.utils.errors import GenerationError, classify_error
from styleguide.utils.openai_client import GenerationRequest, generate
from styleguide.utils.sanitizer import ensure_string_list, parse_json_object

logger = logging.getLogger(__name__)

TEMPLATE_FORMAT = "Template/Toolkit"

_BACKTICKS_RE = re.compile(r"^`+|`+$")


# ---------------------------------------------------------------------------
# Typed structures
# ---------------------------------------------------------------------------

class OutlineSection(TypedDict):
    heading: str
    topics: list[str]


class ResearchExcerpt(TypedDict):
    source_url: str
    excerpt: str
    context: str


class BlogOutline(TypedDict):
    title: str
    format: str
    sections: list[OutlineSection]
    includes_template: bool
    template_description: str
    research_excerpts: list[ResearchExcerpt]


class GeneratedArticle(TypedDict):
    title: str
    content: str
    excerpt: str
    keywords: list[str]


class BlogDraft(TypedDict):
    title: str
    content: str
    excerpt: str
    keywords: list[str]
    category: str
    includes_template: bool
    research_urls: list[str]


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def _system_prompt() -> str:
    return build_blog_system_prompt(datetime.now().year)


def generate_category(topic: str, keywords: list[str]) -> str:
    """One of BLOG_CATEGORIES; the default category when the answer is not in the list."""
    result = generate(GenerationRequest(
        system_prompt=CATEGORY_SYSTEM_PROMPT,
        user_prompt=build_category_prompt(topic, keywords, BLOG_CATEGORIES),
        response_format="markdown",
        max_tokens=50,
        model=LLM_MODEL,
        label="blog_category",
    ))
    if result["success"]:
        category = _BACKTICKS_RE.sub("", result["content"].strip()).strip()
        if category in BLOG_CATEGORIES:
            return category
        logger.info("Category %r is not allowed; using %s", category, BLOG_DEFAULT_CATEGORY)
    return BLOG_DEFAULT_CATEGORY


def _ensure_template_title(title: str) -> str:
    if "template" in title.lower():
        return title
    return f"{title}: Free Template"


def parse_outline(payload: dict[str, object], topic: str, keywords: list[str]) -> BlogOutline:
    sections: list[OutlineSection] = []
    for raw in payload.get("sections") or []:
        if not isinstance(raw, dict) or not str(raw.get("heading") or "").strip():
            continue
        sections.append(OutlineSection(
            heading=str(raw["heading"]).strip(),
            topics=ensure_string_list(raw.get("topics") or raw.get("key_points")),
        ))
    excerpts = [
        ResearchExcerpt(
            source_url=str(e.get("source_url") or ""),
            excerpt=str(e.get("excerpt") or ""),
            context=str(e.get("context") or ""),
        )
        for e in payload.get("research_excerpts") or []
        if isinstance(e, dict) and e.get("excerpt")
    ]
    outline = BlogOutline(
        title=str(payload.get("title") or topic).strip(),
        format=str(payload.get("format") or "Guide").strip(),
        sections=sections,
        includes_template=bool(payload.get("includes_template")),
        template_description=str(payload.get("template_description") or ""),
        research_excerpts=excerpts,
    )
    if mentions_template(topic, keywords):
        outline["includes_template"] = True
        outline["format"] = TEMPLATE_FORMAT
        outline["title"] = _ensure_template_title(outline["title"])
    return outline


def generate_outline(topic: str, keywords: list[str], research: ResearchNotes | None = None) -> BlogOutline:
    result = generate(GenerationRequest(
        system_prompt=_system_prompt(),
        user_prompt=build_outline_prompt(
            topic, keywords, research, source_max_chars=RESEARCH_OUTLINE_SOURCE_MAX_CHARS
        ),
        response_format="json",
        max_tokens=2000,
        model=LLM_MODEL_QUALITY,
        label="blog_outline",
    ))
    if not result["success"]:
        raise GenerationError(result["error"] or "Outline generation failed", classify_error(result["error"]))
    try:
        payload = parse_outline(parse_json_object(result["content"]), topic, keywords)
    except (ValueError, json.JSONDecodeError) as exc:
        raise GenerationError("Invalid JSON response from outline generation") from exc
    if not payload["sections"]:
        raise GenerationError("Outline has no sections")
    logger.info("Outline for %r: %d sections, format=%s", topic, len(payload["sections"]), payload["format"])
    return payload


def generate_article(
    outline: BlogOutline,
    keywords: list[str],
    *,
    internal_links: list[dict[str, str]] | None = None,
    external_links: list[dict[str, str]] | None = None,
) -> GeneratedArticle:
    result = generate(GenerationRequest(
        system_prompt=_system_prompt(),
        user_prompt=build_article_prompt(
            dict(outline), keywords, internal_links=internal_links, external_links=external_links
        ),
        response_format="json",
        max_tokens=4096,
        model=LLM_MODEL_QUALITY,
        label="blog_article",
    ))
    if not result["success"]:
        raise GenerationError(result["error"] or "Content generation failed", classify_error(result["error"]))
    try:
        payload = parse_json_object(result["content"])
    except (ValueError, json.JSONDecodeError) as exc:
        raise GenerationError("Invalid JSON response from content generation") from exc

    title = str(payload.get("title") or "").strip()
    content = str(payload.get("content") or "").strip()
    excerpt = str(payload.get("excerpt") or "").strip()
    if not title or not content or not excerpt:
        raise GenerationError("Incomplete generation: missing title, content, or excerpt")
    if outline["includes_template"]:
        title = title if "template" in title.lower() else outline["title"]
    return GeneratedArticle(
        title=title,
        content=content,
        excerpt=excerpt,
        keywords=ensure_string_list(payload.get("keywords")) or list(keywords),
    )


def build_blog_draft(
    topic: str,
    keywords: list[str],
    *,
    category: str | None = None,
    internal_links: list[dict[str, str]] | None = None,
    use_research: bool = True,
) -> BlogDraft:
    """Run the full pipeline for one topic. Raises GenerationError when the outline or article fails."""
    topic = topic.strip()
    if category not in BLOG_CATEGORIES:
        category = generate_category(topic, keywords)
    research = search_brief(topic, keywords) if use_research else None
    outline = generate_outline(topic, keywords, research)
    external_links = [
        {"title": s["title"] or s["url"], "url": s["url"]}
        for s in (research["sources"] if research else [])
        if s["url"]
    ]
    article = generate_article(
        outline, keywords, internal_links=internal_links, external_links=external_links or None
    )
    return BlogDraft(
        title=article["title"],
        content=article["content"],
        excerpt=article["excerpt"],
        keywords=article["keywords"],
        category=category,
        includes_template=outline["includes_template"],
        research_urls=list(research["urls"]) if research else [],
    )
