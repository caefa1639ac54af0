"""Generate, validate and render writing style rules."""

import logging
from typing import TypedDict

from constants import (
    CORE_RULES_COUNT,
    LLM_MODEL_QUALITY,
    LLM_MODEL_REASONING,
    PREVIEW_RULES_COUNT,
    RULES_MAX_ATTEMPTS,
)
from styleguide.models import BrandDetails
from styleguide.prompts import COMPLETE_RULES_SYSTEM_PROMPT, RULES_SYSTEM_PROMPT
from styleguide.prompts.style_rules import (
    build_complete_rules_prompt,
    build_core_rules_prompt,
    build_preview_rules_prompt,
    build_rules_repair_prompt,
)
from styleguide.utils.errors import GenerationError, classify_error
from styleguide.utils.openai_client import GenerationRequest, generate
from styleguide.utils.sanitizer import parse_json_list, parse_json_object

logger = logging.getLogger(__name__)

ALLOWED_RULE_CATEGORIES: list[str] = [
    "Abbreviations",
    "Acronyms",
    "Capitalisation",
    "Contractions",
    "Emojis",
    "Numbers",
    "Pronouns",
    "Serial Comma",
    "Hyphens",
    "Em Dash",
    "Apostrophes",
    "Quotation Marks",
    "Exclamation Points",
    "Titles and Headings",
    "Job Titles",
    "Dates",
    "Time & Time Zones",
    "Money",
    "Percentages",
    "Proper Nouns",
    "Active vs. Passive Voice",
    "Ampersands",
    "Slang & Jargon",
    "UK vs. US English",
    "Compound Adjectives",
]


class RuleExamples(TypedDict):
    good: str
    bad: str


class StyleRule(TypedDict):
    category: str
    title: str
    description: str
    examples: RuleExamples


class RulesValidation(TypedDict):
    valid: list[StyleRule]
    invalid: list[object]


# ---------------------------------------------------------------------------
# Validation and rendering
# ---------------------------------------------------------------------------

def is_valid_rule(rule: object) -> bool:
    if not isinstance(rule, dict):
        return False
    examples = rule.get("examples")
    if not (rule.get("category") and rule.get("title") and rule.get("description")):
        return False
    if not isinstance(examples, dict) or not examples.get("good") or not examples.get("bad"):
        return False
    return rule["category"] in ALLOWED_RULE_CATEGORIES


def validate_rules(rules: list[object]) -> RulesValidation:
    """Split rules into valid and invalid; a repeated category (case-insensitive) is invalid."""
    valid: list[StyleRule] = []
    invalid: list[object] = []
    seen: set[str] = set()
    for rule in rules:
        if not is_valid_rule(rule):
            invalid.append(rule)
            continue
        key = str(rule["category"]).strip().lower()
        if key in seen:
            invalid.append(rule)
            continue
        seen.add(key)
        valid.append(rule)
    return RulesValidation(valid=valid, invalid=invalid)


def render_rules_markdown(rules: list[StyleRule]) -> str:
    blocks = []
    for number, rule in enumerate(rules, start=1):
        blocks.append("\n".join([
            f"### {number}. {rule['title']}",
            rule["description"],
            f"✅ {rule['examples']['good']}",
            f"❌ {rule['examples']['bad']}",
        ]))
    return "\n\n".join(blocks)


def parse_rules(content: str) -> list[object]:
    """Accept {"rules": [...]}, a bare array, or a single rule object."""
    try:
        parsed = parse_json_object(content)
    except ValueError:
        return parse_json_list(content)
    rules = parsed.get("rules")
    if isinstance(rules, list):
        return rules
    return [parsed]


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def _generate_valid_rules(
    brand: BrandDetails,
    prompt: str,
    *,
    count: int,
    model: str,
    max_tokens: int,
    label: str,
) -> list[StyleRule]:
    """Generate until `count` valid rules with distinct categories exist, repairing invalid ones."""
    valid: list[StyleRule] = []
    last_error: str | None = None

    for attempt in range(1, RULES_MAX_ATTEMPTS + 1):
        result = generate(GenerationRequest(
            system_prompt=RULES_SYSTEM_PROMPT,
            user_prompt=prompt,
            response_format="json",
            max_tokens=max_tokens,
            model=model,
            label=label,
        ))
        if not result["success"]:
            last_error = result["error"]
            continue
        try:
            rules = parse_rules(result["content"])
        except ValueError as exc:
            last_error = f"Failed to parse rules JSON: {exc}"
            logger.warning("%s attempt %d: %s", label, attempt, last_error)
            continue

        validation = validate_rules([*valid, *rules])
        valid = validation["valid"]
        logger.info(
            "%s attempt %d: %d valid, %d invalid",
            label,
            attempt,
            len(valid),
            len(validation["invalid"]),
        )
        if validation["invalid"] and len(valid) < count and attempt < RULES_MAX_ATTEMPTS:
            valid = _repair_rules(brand, valid, validation["invalid"], count=count, label=label)
        if len(valid) >= count:
            break

    if not valid and last_error:
        raise GenerationError(last_error, classify_error(last_error))
    if len(valid) < count:
        logger.warning("%s produced %d of %d rules", label, len(valid), count)
    return valid[:count]


def _repair_rules(
    brand: BrandDetails,
    valid: list[StyleRule],
    invalid: list[object],
    *,
    count: int,
    label: str,
) -> list[StyleRule]:
    used = {r["category"].strip().lower() for r in valid}
    remaining = [c for c in ALLOWED_RULE_CATEGORIES if c.lower() not in used]
    needed = min(len(invalid), count - len(valid))
    if needed <= 0 or not remaining:
        return valid
    result = generate(GenerationRequest(
        system_prompt=RULES_SYSTEM_PROMPT,
        user_prompt=build_rules_repair_prompt(brand, invalid, remaining, count=needed),
        response_format="json",
        max_tokens=1000,
        model=LLM_MODEL_QUALITY,
        label=f"{label}_repair",
    ))
    if not result["success"]:
        return valid
    try:
        repaired = parse_rules(result["content"])
    except ValueError as exc:
        logger.warning("%s repair response unparseable: %s", label, exc)
        return valid
    return validate_rules([*valid, *repaired])["valid"]


def generate_core_rules(brand: BrandDetails, traits_context: str | None = None) -> str:
    """25 rules, one per allowed category, rendered as markdown."""
    prompt = build_core_rules_prompt(brand, ALLOWED_RULE_CATEGORIES, traits_context=traits_context)
    rules = _generate_valid_rules(
        brand,
        prompt,
        count=CORE_RULES_COUNT,
        model=LLM_MODEL_REASONING,
        max_tokens=5500,
        label="core_rules",
    )
    if not rules:
        raise GenerationError("No valid style rules were generated")
    return render_rules_markdown(rules)


def generate_preview_rules(
    brand: BrandDetails,
    traits_context: str | None = None,
    count: int = PREVIEW_RULES_COUNT,
) -> str:
    """A few rules for the preview. Returns an empty string when none validate."""
    prompt = build_preview_rules_prompt(
        brand, ALLOWED_RULE_CATEGORIES, count=count, traits_context=traits_context
    )
    rules = _generate_valid_rules(
        brand,
        prompt,
        count=count,
        model=LLM_MODEL_QUALITY,
        max_tokens=2000,
        label="preview_rules",
    )
    return render_rules_markdown(rules)


def generate_complete_rules(brand: BrandDetails, traits_context: str | None = None) -> str:
    result = generate(GenerationRequest(
        system_prompt=COMPLETE_RULES_SYSTEM_PROMPT,
        user_prompt=build_complete_rules_prompt(brand, traits_context=traits_context),
        response_format="markdown",
        max_tokens=9000,
        model=LLM_MODEL_QUALITY,
        label="complete_rules",
    ))
    if not result["success"]:
        raise GenerationError(result["error"] or "Failed to generate style rules", classify_error(result["error"]))
    return result["content"]
