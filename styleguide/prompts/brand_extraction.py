"""System prompts and prompt builders for extracting brand details from a website or a description."""

BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT: str = "You are a brand analysis expert."

BRAND_FROM_WEBSITE_SYSTEM_PROMPT: str = (
    "You are an expert brand analyst with experience writing clear, readable brand summaries. "
    "Use simple language and short sentences. Avoid complex words, marketing jargon and run-on "
    "sentences. Make your description easily scannable and accessible to all readers."
)


def build_brand_from_description_prompt(description: str) -> str:
    return "\n".join([
        f'Based on this business description: "{description}"',
        "",
        "Extract and expand brand details in this exact JSON format:",
        "{",
        '  "name": "business name (extract exactly if mentioned; otherwise create a memorable name that fits)",',
        '  "industry": "specific industry category",',
        '  "description": "rich, detailed business description (300-450 characters) that expands on the input '
        'with specifics about what they do, their approach and what makes them special",',
        '  "targetAudience": "their ideal customers, including demographics, needs and characteristics"',
        "}",
        "",
        "Important: keep the description 300-450 characters and true to the original business concept. "
        "No em dashes.",
    ])


def build_brand_from_website_prompt(website_summary: str) -> str:
    return "\n".join([
        "Analyze the following website content and extract the brand's core identity.",
        "",
        "Write a single, cohesive paragraph (30-50 words) that follows this structure:",
        "1. Start with the brand name followed by what they are or do",
        "2. Include their main products or services",
        "3. Specify their target audience",
        "4. Mention what makes them unique (if identifiable)",
        "",
        "Your paragraph should be professional, factual and written in third person. Focus on current "
        "offerings, not history. Use short sentences and simple punctuation.",
        "",
        "Example:",
        "Nike is a sports brand selling workout products, services and experiences worldwide. Nike targets "
        "athletes and sports enthusiasts who want high-quality sportswear and equipment.",
        "",
        'Return JSON: {"paragraph": "..."}',
        "",
        "Website Content:",
        website_summary,
    ])
