"""System prompt and prompt builder for rewriting a section, a selection or a whole guide."""

REWRITE_SYSTEM_PROMPT: str = (
    "You are an expert editor specializing in brand voice and style guides.\n"
    "Preserve the exact markdown structure (headings, lists, formatting).\n"
    "Maintain consistency with the brand's voice.\n\n"
    "For style rules with examples:\n"
    "- ✅ examples must demonstrate the rule CORRECTLY\n"
    "- ❌ examples must show the rule VIOLATED\n"
    "- Both examples should show the SAME sentence (correct vs incorrect)\n"
    "- Examples must logically demonstrate what the rule states\n\n"
    "Return ONLY the rewritten markdown content, no explanations or commentary."
)

_SCOPE_LABELS: dict[str, str] = {
    "section": "section",
    "selection": "selected text",
    "document": "entire document",
}


def build_rewrite_prompt(
    *,
    instruction: str,
    content: str,
    scope: str,
    brand_name: str | None = None,
) -> str:
    label = _SCOPE_LABELS.get(scope, "section")
    lines: list[str] = []
    if brand_name:
        lines.append(f"Brand: {brand_name}")
    if scope == "selection":
        lines.extend([
            "",
            "IMPORTANT: The user has selected a specific portion of text to rewrite. Apply the instruction "
            "to ONLY this selected text. Follow the user's instruction exactly.",
            "",
        ])
    lines.extend([
        f"Current {label} content:",
        content,
        "",
        f"User instruction: {instruction}",
        "",
        f"Rewritten {label} (preserve markdown structure):",
    ])
    return "\n".join(lines)
