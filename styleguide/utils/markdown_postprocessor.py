"""
Markdown post-processing for generated style guide sections.

LLM output arrives with inconsistent heading levels, marker spacing and
punctuation. format_markdown_content runs an ordered list of named steps
(MARKDOWN_STEPS); later steps assume the earlier ones already ran.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkdownStep:
    name: str
    apply: Callable[[str], str]


_BLANK_RUN_RE = re.compile(r"\n{3,}")
_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_LEADING_WS_RE = re.compile(r"^[ \t]+", re.MULTILINE)


def _collapse_blank_lines(text: str) -> str:
    return _BLANK_RUN_RE.sub("\n\n", text)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

_STYLE_RULES_TITLE_RE = re.compile(r"^#(?!#)[^\n]*style[^\n]*rules?[^\n]*$\n?", re.IGNORECASE | re.MULTILINE)


def strip_style_rules_title(text: str) -> str:
    """Drop a top-level "# ... Style Rules" title; the template supplies its own."""
    return _STYLE_RULES_TITLE_RE.sub("", text, count=1)


def clean_whitespace(text: str) -> str:
    text = _collapse_blank_lines(text)
    text = _TRAILING_WS_RE.sub("", text)
    text = _LEADING_WS_RE.sub("", text)
    return text.strip()


_NUMBERED_LINE_RE = re.compile(r"^(\d+\.?[ \t]+[^\n]+)$", re.MULTILINE)


def promote_numbered_headers(text: str) -> str:
    """'1. Spelling Conventions' -> '## 1. Spelling Conventions'."""
    return _NUMBERED_LINE_RE.sub(r"## \g<1>", text)


_BOLD_LINE_RE = re.compile(r"^\*\*([^*\n]+)\*\*[ \t]*$", re.MULTILINE)


def bold_lines_to_strong(text: str) -> str:
    """A line that is only bold text is a rule name, rendered as <strong> rather than a heading."""
    return _BOLD_LINE_RE.sub(r"<strong>\g<1></strong>", text)


_SPACED_DASH_RE = re.compile(r"([a-zA-Z0-9])[ \t\u00a0]+([-/])[ \t\u00a0]+([a-zA-Z0-9])")


def join_spaced_dashes(text: str) -> str:
    """'foo - bar' uses non-breaking spaces so the dash never starts a wrapped line."""
    return _SPACED_DASH_RE.sub("\\g<1>\u00a0\\g<2>\u00a0\\g<3>", text)


_OPEN_PAREN_BREAK_RE = re.compile(r"\(\s*\n\s*")
_CLOSE_PAREN_BREAK_RE = re.compile(r"\s*\n\s*\)")


def fix_broken_parentheses(text: str) -> str:
    text = _OPEN_PAREN_BREAK_RE.sub("(", text)
    return _CLOSE_PAREN_BREAK_RE.sub(")", text)


_BOLD_PREFIX_RE = re.compile(r"^\*\*([^*\n]+)\*\*(?!\n#)", re.MULTILINE)
_PLAIN_TRAIT_NAME_RE = re.compile(
    r"^([A-Z][a-zA-Z ]{2,30})\n(?=What It Means|What It Doesn['’]t Mean|[A-Z][a-z]+)",
    re.MULTILINE,
)


def trait_names_to_h3(text: str) -> str:
    text = _BOLD_PREFIX_RE.sub(r"### \g<1>", text)
    return _PLAIN_TRAIT_NAME_RE.sub("### \\g<1>\n", text)


_MEANING_LABEL_RE = re.compile(
    r"^(?:\*\*\*?|__)?(What It (?:Doesn['’]t )?Means?)(?:\*\*\*?|__)?",
    re.MULTILINE,
)


def meaning_headers_to_h4(text: str) -> str:
    """'***What It Means***' -> '#### What It Means' preceded by a blank line."""
    text = _MEANING_LABEL_RE.sub("\n\n#### \\g<1>", text)
    return _collapse_blank_lines(text)


_HEADING_AFTER_TEXT_RE = re.compile(r"([^\n])\n(#{1,6}\s)")


def heading_spacing(text: str) -> str:
    """Exactly one blank line before every heading that follows text."""
    return _HEADING_AFTER_TEXT_RE.sub("\\g<1>\n\n\\g<2>", text)


_MARKER_SPACE_RE = re.compile(r"(✅|❌)[ \t]*")
_SAME_LINE_PAIR_RE = re.compile(r"(✅[^\n]+?)[ \t]+(❌)")
_PAIR_GAP_RE = re.compile(r"(✅[^\n]+)\n\n(❌)")
_ORPHAN_LETTERS_RE = re.compile(r"^(✅|❌) ([^\n]+)\n([a-z]{1,3})(?=\n|$)", re.MULTILINE)
_EXAMPLE_LINE_RE = re.compile(r"^(✅|❌) (?!\*[^\n]*\*$)([^\n]+)$", re.MULTILINE)


def example_markers(text: str) -> str:
    """Normalise ✅/❌ example lines: one per line, paired, italicised."""
    text = _MARKER_SPACE_RE.sub(r"\g<1> ", text)
    text = _SAME_LINE_PAIR_RE.sub("\\g<1>\n\\g<2>", text)
    text = _PAIR_GAP_RE.sub("\\g<1>\n\\g<2>", text)
    text = _ORPHAN_LETTERS_RE.sub(r"\g<1> \g<2>\g<3>", text)
    return _EXAMPLE_LINE_RE.sub(r"\g<1> *\g<2>*", text)


_ARROW_RE = re.compile(r"^→[ \t]*", re.MULTILINE)
_CROSS_RE = re.compile(r"^✗[ \t]*", re.MULTILINE)


def list_marker_spacing(text: str) -> str:
    text = _ARROW_RE.sub("→ ", text)
    return _CROSS_RE.sub("✗ ", text)


_DANGLING_PUNCT_RE = re.compile(r"(\w+)[ \t]+([,.!?:;\"])([ \t]*\n)")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([,.!?:;])")
_ORPHAN_WORD_END_RE = re.compile(r"(\w+)[ \t]*\n[ \t]*([a-z])([ \t]*\n)")


def punctuation_spacing(text: str) -> str:
    text = _DANGLING_PUNCT_RE.sub(r"\g<1>\g<2>\g<3>", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\g<1>", text)
    return _ORPHAN_WORD_END_RE.sub(r"\g<1>\g<2>\g<3>", text)


_H4_MEANING_RE = re.compile(r"(####\s+What It (?:Doesn['’]t )?Means?)\n(?!\n)")


def section_spacing(text: str) -> str:
    text = _collapse_blank_lines(text)
    return _H4_MEANING_RE.sub("\\g<1>\n\n", text)


# Skips times (10:30), URL schemes (https://) and mailto: links.
_COLON_RE = re.compile(r"(?<!\d)(?<!mailto):(?![\s/\d])(?=\S)")


def colon_spacing(text: str) -> str:
    return _COLON_RE.sub(": ", text)


MARKDOWN_STEPS: tuple[MarkdownStep, ...] = (
    MarkdownStep("strip_style_rules_title", strip_style_rules_title),
    MarkdownStep("clean_whitespace", clean_whitespace),
    MarkdownStep("promote_numbered_headers", promote_numbered_headers),
    MarkdownStep("bold_lines_to_strong", bold_lines_to_strong),
    MarkdownStep("join_spaced_dashes", join_spaced_dashes),
    MarkdownStep("fix_broken_parentheses", fix_broken_parentheses),
    MarkdownStep("trait_names_to_h3", trait_names_to_h3),
    MarkdownStep("meaning_headers_to_h4", meaning_headers_to_h4),
    MarkdownStep("heading_spacing", heading_spacing),
    MarkdownStep("example_markers", example_markers),
    MarkdownStep("list_marker_spacing", list_marker_spacing),
    MarkdownStep("punctuation_spacing", punctuation_spacing),
    MarkdownStep("section_spacing", section_spacing),
    MarkdownStep("colon_spacing", colon_spacing),
)


# Rules rendered from validated JSON already carry their "### n. Title" headings,
# so no step here creates headings.
_RULES_STEP_NAMES = frozenset({
    "clean_whitespace",
    "join_spaced_dashes",
    "fix_broken_parentheses",
    "heading_spacing",
    "example_markers",
    "punctuation_spacing",
    "section_spacing",
    "colon_spacing",
})

RULES_MARKDOWN_STEPS: tuple[MarkdownStep, ...] = tuple(
    step for step in MARKDOWN_STEPS if step.name in _RULES_STEP_NAMES
)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def format_markdown_content(content: str | None) -> str:
    if not content:
        logger.warning("Empty content passed to format_markdown_content")
        return ""
    text = content
    for step in MARKDOWN_STEPS:
        text = step.apply(text)
    return text.strip()


def format_rules_markdown(content: str | None) -> str:
    """Example-marker and spacing steps only, for rules that are already structured."""
    if not content:
        return ""
    text = content
    for step in RULES_MARKDOWN_STEPS:
        text = step.apply(text)
    return text.strip()


def normalize_markdown_content(content: str | None) -> str:
    """Light cleanup only: collapse blank-line runs and strip per-line indentation."""
    if not content:
        return ""
    return clean_whitespace(content)


_HEADER_RE = re.compile(r"^#{1,6}\s.+", re.MULTILINE)
_RULE_HEADER_RE = re.compile(r"^###\s.+", re.MULTILINE)
_TRAIT_SECTION_MARKERS = ("What It Means", "Description", "What It Doesn't Mean", "Guidelines", "Avoid")


def validate_markdown_content(content: str | None) -> bool:
    """Structural sanity check for generated trait or rule markdown."""
    if not content or not isinstance(content, str):
        logger.warning("Invalid content passed to validate_markdown_content")
        return False

    cleaned = _collapse_blank_lines(content.replace("```markdown", "").replace("```", "").strip())
    has_headers = bool(_HEADER_RE.search(cleaned))
    if not has_headers:
        logger.warning("Content missing required markdown header")
        return False

    lowered = cleaned.lower()
    if "trait" in lowered:
        has_trait_sections = any(marker in cleaned for marker in _TRAIT_SECTION_MARKERS)
        if not has_trait_sections:
            logger.warning("Voice trait content missing required sections")
        return has_trait_sections

    if "rule" in lowered:
        has_examples = (
            re.search(r"(^|\n)✅", cleaned) is not None
            and re.search(r"(^|\n)❌", cleaned) is not None
            and _RULE_HEADER_RE.search(cleaned) is not None
        )
        if not has_examples:
            logger.warning("Rule content missing required example structure")
        return has_examples

    return bool(re.search(r"[*_`]", cleaned))
