"""System prompts and prompt builders for style rules (core JSON rules, preview rules, complete guide)."""

import json

from constants import KEYWORDS_PROMPT_CAP, PRODUCTS_PROMPT_CAP
from styleguide.models import BrandDetails

RULES_SYSTEM_PROMPT: str = (
    "You are a tone of voice guide expert. Return strict JSON only."
)

COMPLETE_RULES_SYSTEM_PROMPT: str = "You are a writing style guide expert."

# (section, topics) in document order; topics are numbered sequentially across sections.
COMPLETE_GUIDE_OUTLINE: list[tuple[str, list[str]]] = [
    ("Spelling Conventions", [
        "Capitalisation of Months of the Year", "Capitalisation of Seasons & Directions",
        "Company Name Spelling", "Complex vs. Simple Words", "Hyphenation in Heritage Terms",
        "Possessives", "Proper Nouns", "Spelling for Loanwords", "Spelling of Internet Terms",
        "UK vs. US English",
    ]),
    ("Grammar & Mechanics", [
        "Abbreviated Words", "Acronyms", "Active vs. Passive Voice", "Capitalisation",
        "Compound Adjectives", "Contractions", "eg / ie / etc.", "Emojis", "Jargon Translation",
        "Job Titles", "Languages", "Sentence Case", "Title Case", "Upper Case",
    ]),
    ("Punctuation", [
        "Accents", "Ampersands", "Apostrophes", "Asterisks", "At Symbols", "Colons", "Commas",
        "Ellipses", "Ellipsis Spacing", "Em Dash", "En Dash", "Exclamation Points", "Hash Symbols",
        "Hyphens", "Multiple Punctuation", "Parentheses", "Periods", "Pipes", "Question Marks",
        "Quotation Marks", "Semicolons", "Slashes", "Special Characters",
    ]),
    ("Formatting", [
        "Alignment", "Bold and Italics", "Bullet Points", "Coloured Text", "Numbered Lists",
        "Spacing", "Strikethrough",
    ]),
    ("Digital & Web", [
        "Alt Text", "Button Capitalisation", "Buttons", "Call-to-Action Text",
        "Character Limits for Inputs", "Checkboxes", "Email Addresses", "Empty State Guidance",
        "Error Message Tone", "File Extensions", "Forms", "Image Captions",
        "Loading State Messaging", "Meta Descriptions", "Radio Buttons", "Social Media Hashtags",
        "URL & Link Formatting", "UTM & Tracking Rules", "Video Transcripts",
    ]),
    ("Numbers & Data", [
        "Big Numbers", "Dates", "Decimals", "Fractions", "Measurements", "Millions & Billions",
        "Money", "Numerals", "Percentages", "Ranges", "Telephone Numbers", "Temperature",
        "Time & Time Zones", "Weights", "Whole Numbers",
    ]),
    ("People & Inclusive Language", [
        "Age References", "Disability-related Terms", "Gender & Sexuality Terminology",
        "Heritage & Nationality Terminology", "Mental Health Terminology",
        "Neurodiversity References", "Person-first Language", "Socio-economic References",
    ]),
    ("Points of View", ["First vs. Third Person", "Pronouns"]),
    ("Style Consistency", [
        "AI-Generated Content Flags", "Consistency Review", "Disclaimers & Fine Print",
        "Readability Grade Target", "Sentence Length Limit", "Serial Comma", "Slang & Jargon",
        "Source Attribution", "Third-Party Brand References", "Titles and Headings", "Trademarks",
    ]),
]


def _brand_block(brand: BrandDetails, selected_traits: list[str]) -> list[str]:
    lines = [
        "Brand:",
        f"- Name: {brand['name']}",
        f"- Audience: {brand['audience'] or 'general audience'}",
        f"- Description: {brand['description']}",
        f"- Formality: {brand['formality_level'] or 'Neutral'}",
        f"- Reading Level: {brand['reading_level'] or '10-12'}",
        f"- English Variant: {brand['english_variant'] or 'american'}",
    ]
    if brand["keywords"]:
        lines.append(f"- Keywords: {', '.join(brand['keywords'][:KEYWORDS_PROMPT_CAP])}")
    if brand["products_services"]:
        lines.append(f"- Products/Services: {', '.join(brand['products_services'][:PRODUCTS_PROMPT_CAP])}")
    if selected_traits:
        lines.append(f"- Selected Traits: {', '.join(selected_traits)}")
    return lines


def numbered_categories(categories: list[str]) -> str:
    return "\n".join(f"{i}. {category}" for i, category in enumerate(categories, start=1))


def build_core_rules_prompt(
    brand: BrandDetails,
    categories: list[str],
    *,
    traits_context: str | None = None,
) -> str:
    count = len(categories)
    lines = [
        f"Create exactly {count} writing style rules for this brand. Use ONE rule per category "
        "from the list below. Rules support the brand voice traits.",
        "",
        *_brand_block(brand, brand["traits"]),
    ]
    if traits_context:
        lines.extend(["", "Traits Context:", traits_context])
    lines.extend([
        "",
        "Allowed categories (use each exactly once, in this order):",
        numbered_categories(categories),
        "",
        "Return STRICT JSON: an object with a \"rules\" array:",
        '{"rules": [{"category": "Category Name", "title": "Category Name", '
        '"description": "One sentence rule 8-12 words", "examples": {"good": "Example", "bad": "Example"}}]}',
        "",
        "Requirements:",
        "- Front-load the reason in the description and reference the single Selected Trait that fits best.",
        "- Vary sentence structure and opening verbs so no two descriptions feel the same.",
        f"- Examples must sound like {brand['name']} speaking to {brand['audience'] or 'their audience'}.",
        "- Description 8-12 words max.",
        "- Use numerals for numbers above ten.",
        f"- Exactly {count} rules, one per category, using the category names verbatim.",
        '- Format times without extra spaces (e.g. "10:00 am" not "10: 00 am").',
        "- In the Emojis rule, use plain text only in examples.",
        "- Never use em dashes anywhere in your output. Use hyphens or rewrite the sentence.",
    ])
    return "\n".join(lines)


def build_preview_rules_prompt(
    brand: BrandDetails,
    categories: list[str],
    *,
    count: int,
    traits_context: str | None = None,
) -> str:
    lines = [
        f"You are a writing style guide expert. Based on the brand info below, create exactly {count} "
        "specific writing style rules that support and reinforce the brand voice traits.",
        "",
        *_brand_block(brand, brand["traits"]),
    ]
    if traits_context:
        lines.extend(["", "Traits Context:", traits_context])
    lines.extend([
        "",
        "CRITICAL: Choose ONLY from these allowed categories. Reject content, tone or strategy topics.",
        "",
        "Allowed Categories:",
        numbered_categories(categories),
        "",
        "Instructions:",
        "- Each rule must be about writing style, grammar, punctuation, spelling or formatting.",
        '- Return STRICT JSON: {"rules": [{"category": "Contractions", "title": "Contractions", '
        '"description": "Avoid contractions to maintain our Assertive tone", '
        '"examples": {"good": "We will help you streamline workflows", '
        '"bad": "We\'ll help you streamline workflows"}}]}',
        "- Description must be 8-12 words. In most rules, reference 1-2 of the Selected Traits by name.",
        f"- Examples are 6-12 words, written as if {brand['name']} is speaking to "
        f"{brand['audience'] or 'their audience'}.",
        f"Return ONLY valid JSON with exactly {count} rules.",
    ])
    return "\n".join(lines)


def build_rules_repair_prompt(
    brand: BrandDetails,
    invalid_rules: list[object],
    categories: list[str],
    *,
    count: int,
) -> str:
    lines = [
        "The following rules use invalid or duplicate categories. Replace them with rules using ONLY "
        "these allowed categories:",
        "",
        numbered_categories(categories),
        "",
        "Invalid rules to replace:",
        json.dumps(invalid_rules, indent=2, ensure_ascii=False),
        "",
        "Brand context:",
        f"- Name: {brand['name']}",
        f"- Audience: {brand['audience'] or 'general audience'}",
        f"- Type: {brand['description']}",
        "",
        f'Return {count} replacement rules as JSON: {{"rules": [...]}} using ONLY the allowed categories.',
    ]
    return "\n".join(lines)


def build_complete_rules_prompt(brand: BrandDetails, *, traits_context: str | None = None) -> str:
    lines = [
        "You are a writing style guide expert. Based on the brand info below, create a comprehensive set "
        "of writing style rules that support and reinforce the brand voice traits, covering every topic listed.",
        "",
        *_brand_block(brand, brand["traits"]),
    ]
    if traits_context:
        lines.extend(["", "Traits Context:", traits_context])
    lines.extend([
        "",
        "Instructions:",
        '- Each main section is an H2 (##) without numbers (e.g. "## Spelling Conventions").',
        '- Each rule is an H3 (###) with sequential numbering from 1 (e.g. "### 1. Company Name Spelling").',
        "- Each rule has a ONE SENTENCE description (8-16 words), then a ✅ example and a ❌ example "
        "on separate lines.",
        f"- Examples must sound like {brand['name']} speaking to {brand['audience'] or 'their audience'}.",
        "- Keep dashes, slashes and quotes on the same line as their text.",
        "- Only rules about writing style, grammar, punctuation, spelling or formatting.",
        "- Never use em dashes.",
        "",
        "Sections and topics, in this order:",
    ])
    number = 1
    for section, topics in COMPLETE_GUIDE_OUTLINE:
        lines.append("")
        lines.append(f"## {section}")
        for topic in topics:
            lines.append(f"   - ### {number}. {topic}")
            number += 1
    lines.extend([
        "",
        f"Generate all {number - 1} rules in the exact order above. Do not skip any rule or section.",
    ])
    return "\n".join(lines)
