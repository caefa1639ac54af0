"""
Assemble style guide documents from the template and generated sections.

Flow for a full guide: audience summary (when missing) -> brand voice traits
(explicit, cached or generated) -> rules, before/after, word list and audience
section concurrently, each fed the traits context -> template.
"""

import json
import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable, Literal, TypeVar

from constants import SECTION_MAX_ATTEMPTS, SECTION_RETRY_DELAY_SECONDS, TRAITS_CONTEXT_MAX_CHARS
from styleguide.models import BrandDetails
from styleguide.services.state.repository import PreviewTraitsCache, traits_fingerprint
from styleguide.services.style_guide.content import (
    generate_audience_section,
    generate_audience_summary,
    generate_before_after,
    generate_word_list,
    how_to_use_content,
)
from styleguide.services.style_guide.sections import replace_section
from styleguide.services.style_guide.style_rules import generate_complete_rules, generate_core_rules
from styleguide.services.style_guide.template_renderer import load_template, render_template
from styleguide.services.style_guide.voice_traits import generate_brand_voice_traits
from styleguide.utils.errors import GenerationError
from styleguide.utils.markdown_postprocessor import (
    format_markdown_content,
    format_rules_markdown,
    normalize_markdown_content,
)
from styleguide.utils.openai_client import run_parallel

logger = logging.getLogger(__name__)

T = TypeVar("T")

Plan = Literal["core", "complete"]

DEFAULT_BRAND_NAME = "Your Brand"
DEFAULT_DESCRIPTION = "An innovative company focused on delivering exceptional results."
DEFAULT_AUDIENCE = "Business professionals and decision makers"

LOCKED_STYLE_RULES = "_Unlock to see Style Rules._"
LOCKED_BEFORE_AFTER = "_Unlock to see Before/After examples._"
LOCKED_WORD_LIST = "_Unlock to see Word List._"

GENERIC_VOICE_TRAITS = """**Clear & Concise**

What It Means
→ Use simple, direct language that anyone can understand.
→ Break down complex ideas into easy steps.
→ Keep sentences short and to the point.

What It Doesn't Mean
✗ Leaving out important details for the sake of brevity.
✗ Using jargon or technical terms without explanation.
✗ Oversimplifying topics that need nuance.

**Friendly & Approachable**

What It Means
→ Write as if you're talking to a real person.
→ Use a warm, welcoming tone in every message.
→ Encourage questions and feedback.

What It Doesn't Mean
✗ Being overly casual or unprofessional.
✗ Using slang that not everyone will understand.
✗ Ignoring the needs or concerns of your audience."""

_BRAND_VOICE_RE = re.compile(r"## Brand Voice([\s\S]*?)(?=##|$)")


# ---------------------------------------------------------------------------
# Retry wrapper
# ---------------------------------------------------------------------------

def _log_generation_metrics(name: str, success: bool, attempts: int, error: BaseException | None) -> None:
    payload = {
        "operation": name,
        "success": success,
        "attempts": attempts,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "error": {"message": str(error)} if error else None,
    }
    if success:
        logger.info("AI_GENERATION_SUCCESS %s", json.dumps(payload))
    else:
        logger.error("AI_GENERATION_FAILURE %s", json.dumps(payload))


def with_retry(
    operation: Callable[[], T],
    *,
    name: str,
    max_attempts: int = SECTION_MAX_ATTEMPTS,
) -> T | None:
    """Run operation up to max_attempts times; None when every attempt raised."""
    last_error: BaseException | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = operation()
        except Exception as exc:
            last_error = exc
            logger.warning("[%s] attempt %d/%d failed: %s", name, attempt, max_attempts, exc)
            if attempt < max_attempts:
                time.sleep(SECTION_RETRY_DELAY_SECONDS * attempt)
            continue
        _log_generation_metrics(name, True, attempt, None)
        return result
    _log_generation_metrics(name, False, max_attempts, last_error)
    return None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def format_date(now: datetime | None = None) -> str:
    """'7 March 2026'."""
    now = now or datetime.now()
    return f"{now.day} {now.strftime('%B')} {now.year}"


def contact_section(brand_name: str, user_email: str | None) -> str:
    intro = f"Need help applying these guidelines? Have questions about {brand_name}'s voice?"
    if user_email and user_email.strip():
        return f"{intro}\n\n**Contact:** {user_email.strip()}"
    return f"{intro}\n\nContact the {brand_name} content team."


def contact_footer(brand_name: str, user_email: str | None) -> str:
    if user_email and user_email.strip():
        return f"Questions about {brand_name} content? Contact {user_email.strip()}."
    return f"Questions? Contact the {brand_name} content team."


def build_traits_context(trait_names: list[str], voice_content: str) -> str | None:
    parts = []
    if trait_names:
        parts.append(f"Selected Traits: {', '.join(trait_names)}")
    if voice_content.strip():
        parts.append(voice_content.strip())
    if not parts:
        return None
    return "\n\n".join(parts)[:TRAITS_CONTEXT_MAX_CHARS]


def _prepare_brand(brand: BrandDetails) -> BrandDetails:
    prepared = BrandDetails(**brand)
    prepared["name"] = brand["name"] or DEFAULT_BRAND_NAME
    prepared["description"] = brand["description"] or DEFAULT_DESCRIPTION
    prepared["audience"] = brand["audience"].strip() or "general audience"
    return prepared


def _template_name(plan: Plan) -> str:
    return "style_guide_complete" if plan == "complete" else "style_guide_core"


def _static_values(brand: BrandDetails, user_email: str | None) -> dict[str, str]:
    name = brand["name"] or DEFAULT_BRAND_NAME
    return {
        "date": format_date(),
        "brand_name": name,
        "brand_description": brand["description"] or DEFAULT_DESCRIPTION,
        "brand_audience": brand["audience"] or DEFAULT_AUDIENCE,
        "contact_section": contact_section(name, user_email),
        "how_to_use_section": how_to_use_content(name),
    }


def _resolve_voice_traits(
    brand: BrandDetails,
    *,
    preview_traits: str | None,
    client_id: str | None,
    traits_cache: PreviewTraitsCache | None,
    reuse_cached: bool,
) -> str | None:
    """
    Explicit preview traits, then cached traits inside the TTL for the same brand
    and trait selection, then a fresh generation. A preview always generates and
    overwrites the cache entry for the following full guide.
    """
    if preview_traits and preview_traits.strip():
        return preview_traits
    fingerprint = traits_fingerprint(brand["name"], brand["traits"])
    if reuse_cached and traits_cache is not None and client_id:
        cached = traits_cache.get(client_id, fingerprint)
        if cached:
            logger.info("Reusing cached preview traits for %s", client_id)
            return cached
    voice = with_retry(lambda: generate_brand_voice_traits(brand), name="brand_voice_traits")
    if voice and traits_cache is not None and client_id:
        traits_cache.save(client_id, voice, fingerprint)
    return voice


def _rules_formatter(plan: Plan) -> Callable[[str], str]:
    """Complete-plan rules are free-form markdown; core rules are rendered from JSON."""
    return format_markdown_content if plan == "complete" else format_rules_markdown


def _section_or_placeholder(result: object, placeholder: str, formatter: Callable[[str], str] | None = None) -> str:
    if isinstance(result, str) and result.strip():
        return formatter(result) if formatter else result
    return placeholder


# ---------------------------------------------------------------------------
# Orchestrators
# ---------------------------------------------------------------------------

def render_style_guide(
    brand: BrandDetails,
    *,
    plan: Plan = "core",
    use_ai_content: bool = True,
    is_preview: bool = False,
    user_email: str | None = None,
    client_id: str | None = None,
    preview_traits: str | None = None,
    traits_cache: PreviewTraitsCache | None = None,
) -> str:
    """
    Render a style guide for the brand.

    Without AI content the guide carries generic traits and locked placeholders.
    A preview generates the traits and the audience section only; a full guide
    generates every section. Raises GenerationError when a full guide cannot
    get its brand voice traits.
    """
    template = load_template(_template_name(plan))
    values = _static_values(brand, user_email)

    if not use_ai_content:
        values.update({
            "audience_section": "_Your audience will be described here._",
            "brand_voice_traits": GENERIC_VOICE_TRAITS,
            "style_rules": LOCKED_STYLE_RULES,
            "before_after_examples": LOCKED_BEFORE_AFTER,
            "word_list": LOCKED_WORD_LIST,
        })
        return render_template(template, values)

    details = _prepare_brand(brand)
    if details["audience"].lower() == "general audience":
        summary = with_retry(
            lambda: generate_audience_summary(details["name"], details["description"]),
            name="audience_summary",
        )
        if summary:
            details["audience"] = summary.strip()

    voice = _resolve_voice_traits(
        details,
        preview_traits=preview_traits,
        client_id=client_id,
        traits_cache=traits_cache,
        reuse_cached=not is_preview,
    )
    if not voice and not is_preview:
        raise GenerationError("Could not generate brand voice traits")
    values["brand_voice_traits"] = (
        format_markdown_content(voice) if voice else "_Could not generate brand voice traits._"
    )
    traits_context = build_traits_context(details["traits"], voice or "")

    if is_preview:
        audience = with_retry(lambda: generate_audience_section(details), name="audience_section")
        values.update({
            "audience_section": _section_or_placeholder(
                audience, "_Could not generate audience section._", normalize_markdown_content
            ),
            "style_rules": LOCKED_STYLE_RULES,
            "before_after_examples": LOCKED_BEFORE_AFTER,
            "word_list": LOCKED_WORD_LIST,
        })
        return render_template(template, values)

    rules_generator = generate_complete_rules if plan == "complete" else generate_core_rules
    rules, before_after, word_list, audience = run_parallel([
        lambda: with_retry(lambda: rules_generator(details, traits_context), name="style_rules"),
        lambda: with_retry(lambda: generate_before_after(details, traits_context), name="before_after"),
        lambda: with_retry(lambda: generate_word_list(details, traits_context), name="word_list"),
        lambda: with_retry(lambda: generate_audience_section(details), name="audience_section"),
    ])
    values.update({
        "style_rules": _section_or_placeholder(rules, "_Could not generate rules._", _rules_formatter(plan)),
        "before_after_examples": _section_or_placeholder(
            before_after, "_Could not generate before/after examples._"
        ),
        "word_list": _section_or_placeholder(word_list, "_Could not generate word list._"),
        "audience_section": _section_or_placeholder(
            audience, "_Could not generate audience._", normalize_markdown_content
        ),
    })
    return render_template(template, values)


def render_preview_style_guide(
    brand: BrandDetails,
    *,
    client_id: str | None = None,
    traits_cache: PreviewTraitsCache | None = None,
) -> str:
    logger.info("Generating preview for %s", brand["name"] or "unnamed brand")
    return render_style_guide(
        brand,
        plan="core",
        use_ai_content=True,
        is_preview=True,
        client_id=client_id,
        traits_cache=traits_cache,
    )


def _replace_locked_section(merged: str, section_id: str, heading: str, locked: str, body: str) -> str:
    replacement = f"## {heading}\n\n{body}"
    updated = replace_section(merged, section_id, replacement)
    if updated != merged:
        return updated
    logger.warning("Section replacement failed for %s, using placeholder fallback", section_id)
    pattern = re.compile(rf"## {re.escape(heading)}\s*\n+{re.escape(locked)}")
    return pattern.sub(lambda _m: replacement, merged)


def render_full_guide_from_preview(
    preview_content: str,
    brand: BrandDetails,
    *,
    plan: Plan = "core",
    user_email: str | None = None,
) -> str:
    """
    Keep the preview the user already has and generate only the locked sections
    (rules, before/after, word list), using the preview's Brand Voice as context.
    """
    details = _prepare_brand(brand)
    match = _BRAND_VOICE_RE.search(preview_content)
    traits_context = build_traits_context(details["traits"], match.group(1)) if match else None

    rules_generator = generate_complete_rules if plan == "complete" else generate_core_rules
    rules, before_after, word_list = run_parallel([
        lambda: with_retry(lambda: rules_generator(details, traits_context), name="style_rules"),
        lambda: with_retry(lambda: generate_before_after(details, traits_context), name="before_after"),
        lambda: with_retry(lambda: generate_word_list(details, traits_context), name="word_list"),
    ])

    merged = preview_content
    merged = _replace_locked_section(
        merged,
        "style-rules",
        "Style Rules",
        LOCKED_STYLE_RULES,
        _section_or_placeholder(rules, "_Could not generate rules._", _rules_formatter(plan)),
    )
    merged = _replace_locked_section(
        merged,
        "examples",
        "Before / After",
        LOCKED_BEFORE_AFTER,
        _section_or_placeholder(before_after, "_Could not generate before/after examples._"),
    )
    merged = _replace_locked_section(
        merged,
        "word-list",
        "Word List",
        LOCKED_WORD_LIST,
        _section_or_placeholder(word_list, "_Could not generate word list._"),
    )
    return replace_section(merged, "questions", f"## Questions?\n\n{contact_footer(details['name'], user_email)}")


def has_locked_sections(content: str) -> bool:
    lowered = content.lower()
    return any(p.lower() in lowered for p in (LOCKED_STYLE_RULES, LOCKED_BEFORE_AFTER, LOCKED_WORD_LIST))
