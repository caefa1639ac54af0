"""Tests for the blog pipeline: category, outline and article generation."""

import json
from datetime import datetime

import pytest

from styleguide.prompts import CATEGORY_SYSTEM_PROMPT, build_blog_system_prompt
from styleguide.services.blog.blog_builder import (
    TEMPLATE_FORMAT,
    build_blog_draft,
    generate_category,
    parse_outline,
)
from styleguide.utils.errors import GenerationError
from tests.conftest import make_routing_client, user_prompt

OUTLINE = {
    "title": "How to Build a Brand Voice",
    "format": "Guide",
    "sections": [
        {"heading": "What a brand voice is", "topics": ["Definition", "Examples"]},
        {"heading": "Choosing traits", "key_points": ["Start with three"]},
        {"heading": "   "},
    ],
}

ARTICLE = {
    "title": "How to Build a Brand Voice",
    "content": "## What a brand voice is\n\nA brand voice is how you sound.",
    "excerpt": "Find the words that sound like you.",
    "keywords": ["brand voice", "tone"],
}


def _blog_routes(*, category: str = "Brand Strategy", outline=None, article=None, seen: list | None = None) -> dict:
    outline_text = json.dumps(OUTLINE if outline is None else outline) if not isinstance(outline, str) else outline
    article_text = json.dumps(ARTICLE if article is None else article)

    def blog(params: dict) -> str:
        prompt = user_prompt(params)
        if seen is not None:
            seen.append(prompt)
        if prompt.startswith("Generate a detailed outline"):
            return outline_text
        return article_text

    return {
        CATEGORY_SYSTEM_PROMPT: category,
        build_blog_system_prompt(datetime.now().year): blog,
    }


@pytest.fixture
def install_client(monkeypatch):
    def install(routes: dict):
        client = make_routing_client(routes)
        monkeypatch.setattr("styleguide.utils.openai_client._get_openai_client", lambda: client)
        return client

    return install


# ── Category ────────────────────────────────────────────────────────────────

class TestCategory:
    def test_backticks_are_stripped(self, install_client) -> None:
        install_client(_blog_routes(category="`AI Tools`"))
        assert generate_category("AI writing assistants", []) == "AI Tools"

    def test_unknown_category_falls_back(self, install_client) -> None:
        install_client(_blog_routes(category="Cooking"))
        assert generate_category("Sourdough", []) == "Brand Strategy"


# ── Outline parsing ─────────────────────────────────────────────────────────

class TestParseOutline:
    def test_sections_and_topics(self) -> None:
        outline = parse_outline(OUTLINE, "brand voice", [])

        assert [s["heading"] for s in outline["sections"]] == ["What a brand voice is", "Choosing traits"]
        assert outline["sections"][1]["topics"] == ["Start with three"]
        assert outline["includes_template"] is False

    def test_template_topic_forces_template_format(self) -> None:
        outline = parse_outline(OUTLINE, "brand voice", ["style guide template"])

        assert outline["includes_template"] is True
        assert outline["format"] == TEMPLATE_FORMAT
        assert outline["title"] == "How to Build a Brand Voice: Free Template"


# ── Full draft ──────────────────────────────────────────────────────────────

class TestBuildBlogDraft:
    def test_draft_without_research(self, install_client) -> None:
        seen: list[str] = []
        install_client(_blog_routes(category="Content Creation", seen=seen))

        draft = build_blog_draft(
            "brand voice",
            ["brand voice"],
            internal_links=[{"title": "Style guides 101", "slug": "style-guides-101"}],
            use_research=False,
        )

        assert draft["title"] == "How to Build a Brand Voice"
        assert draft["category"] == "Content Creation"
        assert draft["keywords"] == ["brand voice", "tone"]
        assert draft["research_urls"] == []
        assert draft["includes_template"] is False
        assert "Style guides 101" in seen[1]

    def test_given_category_skips_the_category_call(self, install_client) -> None:
        routes = _blog_routes()
        del routes[CATEGORY_SYSTEM_PROMPT]
        install_client(routes)

        draft = build_blog_draft("brand voice", [], category="Marketing", use_research=False)

        assert draft["category"] == "Marketing"

    def test_template_topic_keeps_template_title(self, install_client) -> None:
        install_client(_blog_routes())

        draft = build_blog_draft("Brand voice template", [], use_research=False)

        assert draft["includes_template"] is True
        assert "template" in draft["title"].lower()

    def test_missing_api_key_skips_research(self, install_client, monkeypatch) -> None:
        monkeypatch.setattr("styleguide.services.blog.research.FIRECRAWL_API_KEY", "")
        install_client(_blog_routes())

        draft = build_blog_draft("brand voice", [])

        assert draft["research_urls"] == []

    def test_invalid_outline_json(self, install_client) -> None:
        install_client(_blog_routes(outline="this is not json"))

        with pytest.raises(GenerationError, match="Invalid JSON response from outline generation"):
            build_blog_draft("brand voice", [], use_research=False)

    def test_outline_without_sections(self, install_client) -> None:
        install_client(_blog_routes(outline={"title": "Empty", "sections": []}))

        with pytest.raises(GenerationError, match="Outline has no sections"):
            build_blog_draft("brand voice", [], use_research=False)

    def test_incomplete_article(self, install_client) -> None:
        install_client(_blog_routes(article={"title": "Only a title", "content": "", "excerpt": ""}))

        with pytest.raises(GenerationError, match="Incomplete generation"):
            build_blog_draft("brand voice", [], use_research=False)
