"""App constants, overridable via environment variables."""

import os
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parent

# Data directory; default "data" under repo root, overridable via DATA_DIR env
DATA_DIR = Path(os.environ["DATA_DIR"]) if os.environ.get("DATA_DIR") else _REPO_ROOT / "data"

# Markdown templates for rendered style guides
TEMPLATES_DIR = (
    Path(os.environ["TEMPLATES_DIR"]) if os.environ.get("TEMPLATES_DIR") else _REPO_ROOT / "templates"
)

# ── LLM models ────────────────────────────────────────────────────────────────
# Fast model for short helper outputs (keywords, summaries, categories).
LLM_MODEL: str = os.environ.get("LLM_MODEL") or os.environ.get("OPENAI_MODEL") or "gpt-4o-mini"

# Higher quality model for trait descriptions, examples and blog writing.
LLM_MODEL_QUALITY: str = os.environ.get("LLM_MODEL_QUALITY") or "gpt-4o"

# Reasoning model for long structured outputs (rules, audience, rewrites).
LLM_MODEL_REASONING: str = os.environ.get("LLM_MODEL_REASONING") or "gpt-5.2"

# Model name prefixes that take reasoning_effort + max_completion_tokens
# instead of temperature + max_tokens.
REASONING_MODEL_PREFIXES: tuple[str, ...] = ("gpt-5", "o1", "o3", "o4")

# ── Generation client ─────────────────────────────────────────────────────────
LLM_MAX_ATTEMPTS: int = int(os.environ.get("LLM_MAX_ATTEMPTS", "3"))

# Delay before retry n is LLM_RETRY_DELAY_SECONDS * n
LLM_RETRY_DELAY_SECONDS: float = float(os.environ.get("LLM_RETRY_DELAY_SECONDS", "1.0"))

LLM_TEMPERATURE: float = 0.4

LLM_REASONING_EFFORT: str = os.environ.get("LLM_REASONING_EFFORT", "low")

# Orchestrator-level retry wrapper around a whole generation step
SECTION_MAX_ATTEMPTS: int = 2
SECTION_RETRY_DELAY_SECONDS: float = float(os.environ.get("SECTION_RETRY_DELAY_SECONDS", "1.0"))

# Concurrent LLM calls per style guide / blog job
GENERATION_MAX_CONCURRENCY: int = int(os.environ.get("GENERATION_MAX_CONCURRENCY", "5"))

# ── Style guide content ───────────────────────────────────────────────────────
# Preview traits are reused for this long before being regenerated.
PREVIEW_TRAITS_TTL_SECONDS: int = 24 * 60 * 60

# Max chars of "Selected Traits ... + voice content" passed to downstream prompts
TRAITS_CONTEXT_MAX_CHARS: int = 4000

# Before/after prompts only need a short slice of the voice content
BEFORE_AFTER_TRAITS_CONTEXT_MAX_CHARS: int = 1000

# Keyword / product caps applied when building prompts
KEYWORDS_PROMPT_CAP: int = 15
AUDIENCE_KEYWORDS_PROMPT_CAP: int = 25
PRODUCTS_PROMPT_CAP: int = 12

CORE_RULES_COUNT: int = 25
PREVIEW_RULES_COUNT: int = 3
RULES_MAX_ATTEMPTS: int = 3

DEFAULT_ENGLISH_VARIANT: str = "american"

# ── Brand inputs ──────────────────────────────────────────────────────────────
BRAND_NAME_MAX_LENGTH: int = 50
BRAND_DESCRIPTION_MAX_LENGTH: int = 2500
BRAND_AUDIENCE_MAX_LENGTH: int = 500
DESCRIPTION_INPUT_MIN_LENGTH: int = 25
DESCRIPTION_INPUT_MAX_LENGTH: int = 200
CUSTOM_TRAIT_NAME_MAX_LENGTH: int = 20

# Website extraction limits (chars)
WEBSITE_TEXT_MAX_CHARS: int = 2000
WEBSITE_SUBPAGE_MAX_CHARS: int = 1500
WEBSITE_SUMMARY_MAX_CHARS: int = 7000

# ── Saved guides ──────────────────────────────────────────────────────────────
GUIDE_LIMITS: dict[str, int] = {"starter": 1, "pro": 5}
GUIDE_LIMIT_DEFAULT: int = 99
GUIDE_TITLE_MAX_LENGTH: int = 255

# ── Blog ──────────────────────────────────────────────────────────────────────
BLOG_CATEGORIES: tuple[str, ...] = (
    "Brand Strategy",
    "Content Creation",
    "Marketing",
    "AI Tools",
    "Case Studies",
)
BLOG_DEFAULT_CATEGORY: str = "Brand Strategy"
BLOG_AUTHOR_NAME: str = os.environ.get("BLOG_AUTHOR_NAME", "Tahi Gichigi")
BLOG_AUTHOR_IMAGE: str = os.environ.get("BLOG_AUTHOR_IMAGE", "/logos/profile_orange_clean.png")
WORDS_PER_MINUTE: int = 200
SLUG_MAX_LENGTH: int = 60
BLOG_PAGE_SIZE_DEFAULT: int = 10
BLOG_PAGE_SIZE_MAX: int = 50

# Research excerpts passed into outline / article prompts
RESEARCH_OUTLINE_SOURCE_MAX_CHARS: int = 3000
RESEARCH_SUMMARY_SOURCE_MAX_CHARS: int = 1000
RESEARCH_RESULT_LIMIT: int = 5
RESEARCH_MAX_RETRIES: int = 2
RESEARCH_RETRY_DELAY_SECONDS: float = 1.5
