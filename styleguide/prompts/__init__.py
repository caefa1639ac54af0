"""Prompt strings and prompt builders for LLM tasks."""

from .blog import CATEGORY_SYSTEM_PROMPT, build_blog_system_prompt
from .brand_extraction import BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT, BRAND_FROM_WEBSITE_SYSTEM_PROMPT
from .brand_voice import TRAIT_SYSTEM_PROMPT
from .guide_content import (
    AUDIENCE_SECTION_SYSTEM_PROMPT,
    AUDIENCE_SUMMARY_SYSTEM_PROMPT,
    BEFORE_AFTER_SYSTEM_PROMPT,
    BRAND_NAME_SYSTEM_PROMPT,
    BRAND_SUMMARY_SYSTEM_PROMPT,
    KEYWORDS_SYSTEM_PROMPT,
    TRAIT_SUGGESTIONS_SYSTEM_PROMPT,
    WORD_LIST_SYSTEM_PROMPT,
)
from .rewrite_section import REWRITE_SYSTEM_PROMPT
from .style_rules import COMPLETE_RULES_SYSTEM_PROMPT, RULES_SYSTEM_PROMPT

__all__ = [
    "AUDIENCE_SECTION_SYSTEM_PROMPT",
    "AUDIENCE_SUMMARY_SYSTEM_PROMPT",
    "BEFORE_AFTER_SYSTEM_PROMPT",
    "BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT",
    "BRAND_FROM_WEBSITE_SYSTEM_PROMPT",
    "BRAND_NAME_SYSTEM_PROMPT",
    "BRAND_SUMMARY_SYSTEM_PROMPT",
    "CATEGORY_SYSTEM_PROMPT",
    "COMPLETE_RULES_SYSTEM_PROMPT",
    "KEYWORDS_SYSTEM_PROMPT",
    "REWRITE_SYSTEM_PROMPT",
    "RULES_SYSTEM_PROMPT",
    "TRAIT_SUGGESTIONS_SYSTEM_PROMPT",
    "TRAIT_SYSTEM_PROMPT",
    "WORD_LIST_SYSTEM_PROMPT",
    "build_blog_system_prompt",
]
