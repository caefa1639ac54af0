"""System prompt and prompt builder for per-trait brand voice descriptions."""

from constants import KEYWORDS_PROMPT_CAP
from styleguide.models import BrandDetails

TRAIT_SYSTEM_PROMPT: str = (
    "You are a brand voice expert creating specific, actionable communication style guidelines."
)


def build_trait_prompt(trait_name: str, brand: BrandDetails, index: int) -> str:
    lines = [
        f'You are a brand voice expert. Generate communication style guidelines for the trait "{trait_name}" '
        "based on this brand information.",
        "",
        "Brand Info:",
        f"• Brand Name: {brand['name']}",
        f"• What they do: {brand['description']}",
        f"• Audience: {brand['audience'] or 'general audience'}",
    ]
    if brand["keywords"]:
        lines.append(f"• Keywords: {', '.join(brand['keywords'][:KEYWORDS_PROMPT_CAP])}")
    lines.extend([
        "",
        "Create the trait description in this EXACT format:",
        "",
        f"### {index}. {trait_name}",
        "",
        "[ONE SENTENCE description of what this trait means for this specific brand and why it matters. "
        "Explicitly reference the core audience at least once.]",
        "",
        "Constraints for the ONE SENTENCE description:",
        "- Be neutral and explanatory; never adopt the trait's tone.",
        "- Max 20 words; no first/second person, emojis, or hype.",
        "- Reading level and formality do NOT affect this sentence.",
        "",
        "***What It Means***",
        "",
        "→ [Specific actionable writing instruction, around 10 words]",
        "→ [Specific actionable writing instruction, around 10 words]",
        "→ [Specific actionable writing instruction, around 10 words]",
        "",
        "***What It Doesn't Mean***",
        "",
        "✗ [How the first instruction could be taken too far]",
        "✗ [How the second instruction could be taken too far]",
        "✗ [How the third instruction could be taken too far]",
        "",
        "Each \"What It Doesn't Mean\" line pushes its matching \"What It Means\" line to an extreme. "
        "Focus on writing style, tone and language use. Use → and ✗ exactly as shown. "
        "Never use em dashes.",
    ])
    return "\n".join(lines)


def trait_fallback_markdown(trait_name: str, brand: BrandDetails, index: int) -> str:
    """Generic trait block used when the model cannot describe a trait."""
    audience = brand["audience"] or "target audience"
    return "\n".join([
        f"### {index}. {trait_name}",
        "",
        f"This trait should be tailored specifically to {brand['name']} and their {audience}.",
        "",
        "***What It Means***",
        "",
        "→ Use clear, professional language appropriate for your audience",
        "→ Maintain consistent tone and style across all communications",
        "→ Structure content logically for easy comprehension",
        "",
        "***What It Doesn't Mean***",
        "",
        "✗ Using generic examples that don't reflect your brand's uniqueness",
        "✗ Applying this trait without considering your audience's expectations",
        "✗ Taking this trait to extremes that don't align with your brand context",
    ])
