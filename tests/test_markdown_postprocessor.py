"""Tests for the markdown post-processing steps."""

from styleguide.utils.markdown_postprocessor import (
    MARKDOWN_STEPS,
    RULES_MARKDOWN_STEPS,
    bold_lines_to_strong,
    clean_whitespace,
    colon_spacing,
    example_markers,
    fix_broken_parentheses,
    format_markdown_content,
    format_rules_markdown,
    heading_spacing,
    join_spaced_dashes,
    list_marker_spacing,
    meaning_headers_to_h4,
    normalize_markdown_content,
    promote_numbered_headers,
    punctuation_spacing,
    section_spacing,
    strip_style_rules_title,
    trait_names_to_h3,
    validate_markdown_content,
)

TRAIT_SAMPLE = "\n".join([
    "### 1. Direct",
    "",
    "Direct writing helps founders act quickly.",
    "",
    "***What It Means***",
    "",
    "→ Lead with the number",
    "",
    "***What It Doesn't Mean***",
    "",
    "✗ Dropping context",
])

TRAIT_FORMATTED = "\n".join([
    "### 1. Direct",
    "",
    "Direct writing helps founders act quickly.",
    "",
    "#### What It Means",
    "",
    "→ Lead with the number",
    "",
    "#### What It Doesn't Mean",
    "",
    "✗ Dropping context",
])


# ── Individual steps ────────────────────────────────────────────────────────

class TestSteps:
    def test_steps_run_in_declared_order(self) -> None:
        names = [s.name for s in MARKDOWN_STEPS]
        assert names[0] == "strip_style_rules_title"
        assert names.index("trait_names_to_h3") < names.index("meaning_headers_to_h4")
        assert names[-1] == "colon_spacing"

    def test_strip_style_rules_title(self) -> None:
        assert strip_style_rules_title("# Acme Style Rules\n### 1. Numbers") == "### 1. Numbers"
        assert strip_style_rules_title("## Style Rules\nx") == "## Style Rules\nx"

    def test_clean_whitespace(self) -> None:
        assert clean_whitespace("  a  \n\n\n\n   b\t") == "a\n\nb"

    def test_promote_numbered_headers(self) -> None:
        assert promote_numbered_headers("1. Spelling Conventions") == "## 1. Spelling Conventions"
        assert promote_numbered_headers("### 1. Numbers") == "### 1. Numbers"

    def test_bold_lines_to_strong(self) -> None:
        assert bold_lines_to_strong("**Numbers**") == "<strong>Numbers</strong>"
        assert bold_lines_to_strong("**Numbers** are fun") == "**Numbers** are fun"

    def test_join_spaced_dashes(self) -> None:
        assert join_spaced_dashes("before - after") == "before\u00a0-\u00a0after"

    def test_fix_broken_parentheses(self) -> None:
        assert fix_broken_parentheses("(\n  note\n)") == "(note)"

    def test_trait_names_to_h3(self) -> None:
        assert trait_names_to_h3("**Direct**\nLead with the point.") == "### Direct\nLead with the point."

    def test_meaning_headers_to_h4(self) -> None:
        out = meaning_headers_to_h4("***What It Means***\n→ x\n***What It Doesn't Mean***\n✗ y")
        assert "#### What It Means" in out
        assert "#### What It Doesn't Mean" in out
        assert "***" not in out

    def test_heading_spacing(self) -> None:
        assert heading_spacing("text\n## Head") == "text\n\n## Head"

    def test_example_markers_split_and_italicise(self) -> None:
        assert example_markers("✅Good one ❌Bad one") == "✅ *Good one*\n❌ *Bad one*"

    def test_example_markers_join_separated_pair(self) -> None:
        assert example_markers("✅ Good\n\n❌ Bad") == "✅ *Good*\n❌ *Bad*"

    def test_list_marker_spacing(self) -> None:
        assert list_marker_spacing("→Do this\n✗   Not that") == "→ Do this\n✗ Not that"

    def test_punctuation_spacing(self) -> None:
        assert punctuation_spacing("Hello , world") == "Hello, world"

    def test_section_spacing(self) -> None:
        assert section_spacing("#### What It Means\n→ x") == "#### What It Means\n\n→ x"

    def test_colon_spacing_skips_times_and_urls(self) -> None:
        text = "Note:this at 10:30 see https://example.com"
        assert colon_spacing(text) == "Note: this at 10:30 see https://example.com"

    def test_colon_spacing_skips_mailto(self) -> None:
        assert colon_spacing("Write to mailto:hi@acme.com today") == "Write to mailto:hi@acme.com today"


# ── Entry points ────────────────────────────────────────────────────────────

class TestFormatMarkdownContent:
    def test_trait_block(self) -> None:
        assert format_markdown_content(TRAIT_SAMPLE) == TRAIT_FORMATTED

    def test_is_idempotent_on_trait_block(self) -> None:
        once = format_markdown_content(TRAIT_SAMPLE)
        assert format_markdown_content(once) == once

    def test_rule_block(self) -> None:
        text = "# Acme Style Rules\n\n### 1. Numbers\nSpell out one to nine.\n✅ We have three plans\n❌ We have 3 plans"
        assert format_markdown_content(text) == (
            "### 1. Numbers\nSpell out one to nine.\n✅ *We have three plans*\n❌ *We have 3 plans*"
        )

    def test_empty_input(self) -> None:
        assert format_markdown_content("") == ""
        assert format_markdown_content(None) == ""

    def test_normalize_is_light(self) -> None:
        assert normalize_markdown_content("  **Who**\n\n\n\n  They read fast. ") == "**Who**\n\nThey read fast."


class TestFormatRulesMarkdown:
    def test_description_starting_with_a_numeral_stays_a_paragraph(self) -> None:
        text = "### 1. Numbers\n10 or more uses numerals, below ten spell out.\n✅ We sold 12 plans\n❌ We sold twelve plans"
        assert format_rules_markdown(text) == (
            "### 1. Numbers\n10 or more uses numerals, below ten spell out.\n"
            "✅ *We sold 12 plans*\n❌ *We sold twelve plans*"
        )

    def test_skips_heading_steps(self) -> None:
        names = {step.name for step in RULES_MARKDOWN_STEPS}
        assert "promote_numbered_headers" not in names
        assert "trait_names_to_h3" not in names
        assert "example_markers" in names

    def test_empty_input(self) -> None:
        assert format_rules_markdown(None) == ""


class TestValidateMarkdownContent:
    def test_requires_a_header(self) -> None:
        assert validate_markdown_content("plain text") is False

    def test_trait_content_needs_sections(self) -> None:
        assert validate_markdown_content("### Trait\n\n#### What It Means\n→ x") is True
        assert validate_markdown_content("### Trait\n\nnothing else") is False

    def test_rule_content_needs_examples(self) -> None:
        assert validate_markdown_content("### 1. A rule\n✅ good\n❌ bad") is True
        assert validate_markdown_content("### 1. A rule\nno examples") is False
