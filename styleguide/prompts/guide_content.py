"""System prompts and prompt builders for the smaller style guide sections and brand helpers."""

from constants import (
    AUDIENCE_KEYWORDS_PROMPT_CAP,
    BEFORE_AFTER_TRAITS_CONTEXT_MAX_CHARS,
    KEYWORDS_PROMPT_CAP,
    PRODUCTS_PROMPT_CAP,
)
from styleguide.models import BrandDetails
from styleguide.utils.text import truncate

BEFORE_AFTER_SYSTEM_PROMPT: str = (
    "You are an expert copywriter who transforms generic content into distinctive brand voice. "
    "Return strict JSON only."
)
WORD_LIST_SYSTEM_PROMPT: str = (
    "You are a brand terminology editor. Return strict JSON only."
)
AUDIENCE_SECTION_SYSTEM_PROMPT: str = (
    "You write precise, brand-specific audience sections for tone of voice guidelines."
)
AUDIENCE_SUMMARY_SYSTEM_PROMPT: str = (
    "You are a brand strategist who writes precise, practical audience descriptions."
)
KEYWORDS_SYSTEM_PROMPT: str = "You are a keyword expert focused on content marketing terms."
TRAIT_SUGGESTIONS_SYSTEM_PROMPT: str = (
    "You are a brand voice expert. Choose the 3 most fitting traits for this brand."
)
BRAND_SUMMARY_SYSTEM_PROMPT: str = "You are a brand strategist."
BRAND_NAME_SYSTEM_PROMPT: str = (
    "You are a brand analyst. Extract only the brand name from the given text."
)


def build_before_after_prompt(brand: BrandDetails, *, count: int, traits_context: str | None) -> str:
    audience = brand["audience"] or "general audience"
    lines = [
        f'Create exactly {count} "Before → After" content transformation examples for the {brand["name"]} brand.',
        "",
        "Brand Details:",
        f"- Name: {brand['name']}",
        f"- Description: {brand['description']}",
        f"- Target Audience: {audience}",
    ]
    if traits_context:
        lines.append(f"- Brand Voice Traits: {traits_context[:BEFORE_AFTER_TRAITS_CONTEXT_MAX_CHARS]}")
    lines.extend([
        "",
        f"Generate {count} pairs showing how generic content transforms to match this brand's voice. Each pair should:",
        "- Be 12 words or fewer (both before and after)",
        "- Show this brand's personality in the \"After\" version",
        "- Balance all selected brand voice traits",
        "- Be relevant to the business type",
        "- Make the \"Before\" generic and the \"After\" distinctly on-brand",
        "",
        "Return JSON with this exact structure:",
        '{"examples": [{"before": "Try our pancakes today.", "after": "Taste the cosmos."}]}',
        "",
        f"Create {count} transformations that feel natural for {brand['name']} and their {audience} audience.",
    ])
    return "\n".join(lines)


def build_word_list_prompt(brand: BrandDetails, *, count: int, traits_context: str | None) -> str:
    lines = [
        f"Create a word list of exactly {count} preferred terms for {brand['name']}, each paired with "
        "the word or phrase writers should avoid.",
        "",
        f"- Description: {brand['description']}",
        f"- Audience: {brand['audience'] or 'general audience'}",
        f"- English Variant: {brand['english_variant'] or 'american'}",
    ]
    if brand["keywords"]:
        lines.append(f"- Keywords: {', '.join(brand['keywords'][:KEYWORDS_PROMPT_CAP])}")
    if traits_context:
        lines.extend(["", "Traits Context:", traits_context])
    lines.extend([
        "",
        "Rules:",
        "- Cover product names, industry terms and everyday words this brand uses often.",
        "- Each \"use\" and \"avoid\" entry is 1-4 words.",
        "- \"why\" is one short clause (max 10 words).",
        "- Never use em dashes.",
        "",
        'Return JSON: {"words": [{"use": "sign in", "avoid": "login (as a verb)", "why": "login is a noun"}]}',
    ])
    return "\n".join(lines)


def build_audience_section_prompt(brand: BrandDetails) -> str:
    keywords_line = ", ".join(brand["keywords"][:AUDIENCE_KEYWORDS_PROMPT_CAP])
    products_line = ", ".join(brand["products_services"][:PRODUCTS_PROMPT_CAP])
    lines = [
        "Write an Audience section for the brand below.",
        "",
        f"Brand: {truncate(brand['name'], 120)}",
        f"What they do: {truncate(brand['description'], 700)}",
        f"Audience hint: {truncate(brand['audience'] or 'general audience', 350)}",
        f"Keywords (optional): {truncate(keywords_line, 350)}",
        f"Products/services (optional): {truncate(products_line, 350)}",
        "",
        "Output markdown only, with these headings exactly:",
        "### Audience (Overview)",
        "### Primary Audience",
        "### Secondary Audience",
        "",
        "Formatting rules:",
        "- No bullets. No numbered lists. No tables. No code blocks.",
        "- 1-2 sentences per paragraph. Keep sentences short.",
        "",
        "Length rules:",
        "- Overview: exactly 1 sentence.",
        "- Primary: exactly 2 paragraphs, 2 sentences each.",
        "- Secondary: exactly 1 paragraph, 2 sentences.",
        "",
        "Detail rules:",
        "- Describe who they are and their context and mindset (goals, motivations, anxieties).",
        "- Do not include writing advice or tone guidance.",
        '- Be specific but do not invent facts. If unsure, use "often" or "typically."',
        "- Never use em dashes. Use hyphens or rewrite.",
    ]
    return "\n".join(lines)


def build_audience_summary_prompt(name: str, description: str) -> str:
    return "\n".join([
        "Based on the brand below, write a concise audience description (1-2 sentences, 25-40 words). "
        "Keep it practical and specific. Output plain text only.",
        "",
        f"Brand Name: {name}",
        f"What they do: {description}",
    ])


def build_keywords_prompt(name: str, description: str, audience: str | None = None) -> str:
    return "\n".join([
        "Generate 8-10 high-value keywords for this brand's content marketing and communications.",
        "",
        "Brand:",
        f"- Name: {name}",
        f"- Description: {description}",
        f"- Audience: {audience or 'general audience'}",
        "",
        "Guidelines:",
        "- Focus on terms the audience actually searches for and uses",
        "- Include product or service names, features and industry terminology",
        '- Avoid generic buzzwords like "innovative", "leading", "solution"',
        "- Each keyword MUST be 20 characters or less (including spaces)",
        "- Prefer 1-2 words",
        "",
        'Return clean JSON: {"keywords": ["keyword1", "keyword2"]} with exactly 8-10 keywords.',
    ])


def build_trait_suggestions_prompt(
    name: str,
    description: str,
    audience: str,
    available_traits: list[str],
) -> str:
    return "\n".join([
        "Based on this brand information, suggest exactly 3 brand voice traits that would work best for this brand.",
        "",
        f"Brand Name: {name or 'Brand'}",
        f"Description: {description}",
        f"Audience: {audience or 'general audience'}",
        "",
        f"Available traits: {', '.join(available_traits)}",
        "",
        'Return JSON: {"traits": ["Warm", "Direct", "Inspiring"]} using only the available traits.',
    ])


def build_brand_summary_prompt(brand_text: str) -> str:
    return (
        "Write a single paragraph (30-40 words) that starts with the brand name and summarizes the brand "
        "using all key info, keywords and terms from the input below.\n\n"
        f"Brand Info:\n{brand_text}"
    )


def build_brand_name_prompt(brand_text: str) -> str:
    return (
        "Extract only the brand name from the text below. Return just the brand name, nothing else.\n\n"
        f"Brand Info:\n{brand_text}"
    )
