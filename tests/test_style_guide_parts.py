"""Tests for the style guide building blocks: traits, input validation, templates, sections and rules."""

import json

import pytest

from styleguide.prompts import RULES_SYSTEM_PROMPT, TRAIT_SYSTEM_PROMPT
from styleguide.services.style_guide.sections import (
    get_section_content,
    parse_sections,
    replace_section,
    section_id_for_heading,
)
from styleguide.services.style_guide.style_rules import (
    ALLOWED_RULE_CATEGORIES,
    generate_core_rules,
    generate_preview_rules,
    parse_rules,
    render_rules_markdown,
    validate_rules,
)
from styleguide.services.style_guide.template_renderer import load_template, render_template
from styleguide.services.style_guide.traits import (
    create_custom_trait,
    is_valid_custom_trait_name,
    list_traits,
    predefined_trait_markdown,
)
from styleguide.services.style_guide.validation import validate_brand_details, validate_input
from styleguide.services.style_guide.voice_traits import (
    generate_brand_voice_traits,
    generate_brand_voice_traits_preview,
    generate_trait_description,
)
from styleguide.utils.errors import GenerationError
from tests.conftest import (
    make_brand,
    make_multi_response_client,
    make_routing_client,
    make_rule,
    make_rules_payload,
    trait_reply,
)

GUIDE = "\n".join([
    "# Acme Style Guide",
    "",
    "## Brand Voice",
    "",
    "Direct.",
    "",
    "## Style Rules",
    "",
    "_Unlock to see Style Rules._",
    "",
    "## Questions?",
    "",
    "Ask us.",
])


@pytest.fixture
def openai_client(monkeypatch):
    """Install a mock client for generate(); tests set its behaviour."""
    def install(client):
        monkeypatch.setattr("styleguide.utils.openai_client._get_openai_client", lambda: client)
        return client

    return install


# ── Trait catalog ───────────────────────────────────────────────────────────

class TestTraits:
    def test_catalog_order(self) -> None:
        names = [t["name"] for t in list_traits()]
        assert names == [
            "Assertive", "Witty", "Direct", "Inspiring", "Warm",
            "Inclusive", "Playful", "Supportive", "Refined",
        ]
        assert all(t["is_custom"] is False for t in list_traits())

    @pytest.mark.parametrize("name, valid", [
        ("Curious", True),
        ("Data-driven 2", True),
        ("direct", False),
        ("Bold!", False),
        ("", False),
        ("x" * 21, False),
    ])
    def test_custom_trait_names(self, name: str, valid: bool) -> None:
        assert is_valid_custom_trait_name(name) is valid

    def test_create_custom_trait(self) -> None:
        trait = create_custom_trait("  Curious ")
        assert trait["name"] == "Curious"
        assert trait["is_custom"] is True
        assert trait["id"].startswith("custom_")

    def test_predefined_trait_markdown(self) -> None:
        md = predefined_trait_markdown("Direct", 2)
        assert md.startswith("### 2. Direct")
        assert "***What It Means***" in md
        assert "✗ " in md


# ── Landing input and brand details validation ──────────────────────────────

class TestValidateInput:
    def test_empty_is_valid(self) -> None:
        result = validate_input("   ")
        assert result["is_valid"] is True
        assert result["input_type"] == "empty"

    def test_bare_domain_is_normalized(self) -> None:
        result = validate_input("Example.com")
        assert result["is_valid"] is True
        assert result["input_type"] == "url"
        assert result["clean_input"] == "https://example.com/"

    def test_localhost_is_rejected(self) -> None:
        result = validate_input("localhost")
        assert result["is_valid"] is False
        assert result["error"] == "Enter a valid URL (e.g., example.com)"

    def test_short_description(self) -> None:
        result = validate_input("We sell bags")
        assert result["input_type"] == "description"
        assert result["error"] == "Write at least 25 characters about your brand"

    def test_long_description(self) -> None:
        result = validate_input("word " * 60)
        assert result["is_valid"] is False
        assert result["error"] == "Description too long. Keep under 200 characters"

    def test_description_in_range(self) -> None:
        result = validate_input("We make handmade leather bags for travellers")
        assert result["is_valid"] is True
        assert result["error"] is None

    def test_brand_details_errors(self) -> None:
        empty = make_brand(name="", description="", audience="")
        assert validate_brand_details(empty) == [
            "Brand name is required",
            "Brand description is required",
            "Target audience is required",
        ]
        assert len(validate_brand_details(empty, require_audience=False)) == 2
        assert validate_brand_details(make_brand(name="x" * 51))[0] == "Brand name must be 50 characters or less"


# ── Template rendering ──────────────────────────────────────────────────────

class TestTemplateRenderer:
    def test_missing_tokens_become_placeholders(self) -> None:
        out = render_template("# {{brand_name}}\n{{word_list}}\n{{ spaced }}", {"brand_name": "Acme", "spaced": "ok"})
        assert out == "# Acme\n_Could not generate word list._\nok"

    def test_substituted_braces_never_survive(self) -> None:
        out = render_template("{{a}} and {{b}}", {"a": "{{b}}", "b": "}}}}"})
        assert "{{" not in out
        assert "}}" not in out

    @pytest.mark.parametrize("name", ["style_guide_core", "style_guide_complete"])
    def test_templates_render_without_tokens(self, name: str) -> None:
        out = render_template(load_template(name), {"brand_name": "Acme"})
        assert "{{" not in out
        assert "}}" not in out
        assert "# Acme" in out

    def test_unknown_template(self) -> None:
        with pytest.raises(ValueError, match="Template not found"):
            load_template("../secrets")
        with pytest.raises(ValueError, match="Template not found"):
            load_template("does_not_exist")


# ── Sections ────────────────────────────────────────────────────────────────

class TestSections:
    def test_parse_sections_ids(self) -> None:
        ids = [s["id"] for s in parse_sections(GUIDE)]
        assert ids == ["acme-style-guide", "brand-voice", "style-rules", "questions"]

    def test_heading_aliases(self) -> None:
        assert section_id_for_heading("25 Core Rules") == "style-rules"
        assert section_id_for_heading("Before / After") == "examples"
        assert section_id_for_heading("Something Else") == "something-else"
        assert section_id_for_heading("!!!") == ""
        assert parse_sections("# Guide\n\n## !!!\n\nx")[1]["id"] == "section-1"

    def test_get_section_content(self) -> None:
        assert get_section_content(GUIDE, "brand-voice") == "## Brand Voice\n\nDirect."
        assert get_section_content(GUIDE, "word-list") == ""

    def test_replace_section_keeps_neighbours(self) -> None:
        out = replace_section(GUIDE, "style-rules", "## Style Rules\n\n### 1. Numbers")
        assert "Unlock" not in out
        assert "### 1. Numbers\n\n## Questions?" in out
        assert out.startswith("# Acme Style Guide")

    def test_replace_unknown_section_is_noop(self) -> None:
        assert replace_section(GUIDE, "word-list", "## Word List\n\nx") == GUIDE

    def test_no_headings(self) -> None:
        sections = parse_sections("just text")
        assert sections[0]["id"] == "content"


# ── Style rules ─────────────────────────────────────────────────────────────

class TestStyleRules:
    def test_validate_rules_rejects_unknown_and_duplicate_categories(self) -> None:
        rules = [make_rule("Numbers"), make_rule("Bogus"), make_rule("Numbers"), {"category": "Emojis"}]

        result = validate_rules(rules)

        assert [r["category"] for r in result["valid"]] == ["Numbers"]
        assert len(result["invalid"]) == 3

    def test_render_rules_markdown(self) -> None:
        md = render_rules_markdown([make_rule("Numbers"), make_rule("Emojis")])
        assert md.startswith("### 1. Numbers guidance\n")
        assert "### 2. Emojis guidance" in md
        assert md.count("✅ ") == 2
        assert md.count("❌ ") == 2

    def test_parse_rules_shapes(self) -> None:
        assert len(parse_rules(make_rules_payload(["Numbers", "Emojis"]))) == 2
        assert len(parse_rules(json.dumps([make_rule("Numbers")]))) == 1
        assert parse_rules(json.dumps(make_rule("Numbers")))[0]["category"] == "Numbers"

    def test_core_rules_cover_every_category(self, openai_client) -> None:
        openai_client(make_routing_client({RULES_SYSTEM_PROMPT: make_rules_payload(ALLOWED_RULE_CATEGORIES)}))

        md = generate_core_rules(make_brand())

        assert md.count("✅ ") == 25
        assert md.count("❌ ") == 25
        for category in ALLOWED_RULE_CATEGORIES:
            assert f"{category} guidance" in md

    def test_invalid_rules_are_repaired(self, openai_client) -> None:
        first = json.loads(make_rules_payload(ALLOWED_RULE_CATEGORIES[:-1]))
        first["rules"].append(make_rule("Bogus"))
        client = openai_client(make_multi_response_client(
            json.dumps(first),
            make_rules_payload([ALLOWED_RULE_CATEGORIES[-1]]),
        ))

        md = generate_core_rules(make_brand())

        assert client.chat.completions.create.call_count == 2
        assert "### 25. Compound Adjectives guidance" in md
        assert "Bogus" not in md

    def test_core_rules_raise_when_generation_fails(self, openai_client) -> None:
        openai_client(make_multi_response_client(*[RuntimeError("Rate limit exceeded")] * 9))

        with pytest.raises(GenerationError, match="Rate limit exceeded"):
            generate_core_rules(make_brand())

    def test_preview_rules_are_capped(self, openai_client) -> None:
        openai_client(make_routing_client({RULES_SYSTEM_PROMPT: make_rules_payload(ALLOWED_RULE_CATEGORIES[:5])}))

        md = generate_preview_rules(make_brand())

        assert "### 3." in md
        assert "### 4." not in md


# ── Brand voice traits ──────────────────────────────────────────────────────

class TestVoiceTraits:
    def test_one_block_per_trait_in_order(self, openai_client) -> None:
        openai_client(make_routing_client({TRAIT_SYSTEM_PROMPT: trait_reply}))

        md = generate_brand_voice_traits(make_brand())

        assert md.index("### 1. Direct") < md.index("### 2. Warm") < md.index("### 3. Witty")

    def test_failed_trait_falls_back_to_catalog_text(self, openai_client) -> None:
        def reply(params: dict) -> str:
            if '"Warm"' in params["messages"][1]["content"]:
                raise RuntimeError("boom")
            return trait_reply(params)

        openai_client(make_routing_client({TRAIT_SYSTEM_PROMPT: reply}))

        md = generate_brand_voice_traits(make_brand())

        assert "### 2. Warm" in md
        assert md.count("***What It Means***") == 3

    def test_unstructured_reply_is_kept_and_flagged(self, openai_client, caplog) -> None:
        openai_client(make_routing_client({TRAIT_SYSTEM_PROMPT: "Just be direct with people."}))

        with caplog.at_level("WARNING"):
            md = generate_trait_description("Direct", make_brand(), 1)

        assert md == "Just be direct with people."
        assert "without the expected markdown structure" in caplog.text

    def test_no_traits(self) -> None:
        with pytest.raises(GenerationError, match="No traits selected"):
            generate_brand_voice_traits(make_brand(traits=[]))

    def test_preview_payload(self, openai_client) -> None:
        openai_client(make_routing_client({TRAIT_SYSTEM_PROMPT: trait_reply}))

        payload = json.loads(generate_brand_voice_traits_preview(make_brand()))

        assert len(payload["fullTraits"]) == 1
        assert payload["fullTraits"][0].startswith("### 1. Direct")
        assert payload["nameOnlyTraits"] == ["Warm", "Witty"]
