"""System prompts and prompt builders for blog category, outline and article generation."""

import re

from styleguide.models import ResearchNotes

_BLOG_BELIEFS: tuple[str, ...] = (
    "Brand voice is the moat; it's what makes every brand unique.",
    "Content is what you say; brand voice is how you say it.",
    "Brand voice comes from what you do, why you do it, and who you do it for.",
    "Brand voice and tone of voice mean the same thing. Voice doesn't change based on circumstance, "
    "it flexes as you lean into different voice traits.",
    "A good brand voice is made up of 3 traits that are single word adjectives, supported by spelling, "
    "grammar, punctuation and formatting rules that reinforce the voice.",
    "Strong visuals exist to strengthen the voice.",
    "A strong voice makes even simple ideas memorable.",
    "Voice is the bridge between brand and emotion.",
    "When voice is right, you don't need to shout.",
    "People don't remember what you wrote; they remember how it felt.",
)

CATEGORY_SYSTEM_PROMPT: str = "You are a content categorization expert. Return only the category name."

UTM_PARAMS: str = "utm_source=aistyleguide&utm_medium=blog&utm_campaign=reference"

OUTLINE_INSTRUCTIONS: str = (
    "## Outline Requirements\n\n"
    "- Pick ONE format: Guide, List, Comparison, Question-based, Case Study, Explainer, "
    "Template/Toolkit, Anatomy of x.\n"
    "- Title: specific and benefit-led (keep under 60 characters).\n"
    "- 5-8 sections, each with a heading and 2-4 topics to cover.\n"
    "- Plan for 1200-1800 words in the final article.\n\n"
    "Return JSON:\n"
    "{\n"
    '  "title": "...",\n'
    '  "format": "Guide",\n'
    '  "sections": [{"heading": "...", "topics": ["...", "..."]}],\n'
    '  "includes_template": false,\n'
    '  "template_description": "",\n'
    '  "research_excerpts": [{"source_url": "...", "excerpt": "...", "context": "which section it supports"}]\n'
    "}"
)

ARTICLE_INSTRUCTIONS: str = (
    "## Writing Requirements\n\n"
    "- Open with a hook in the first two sentences; no throat-clearing.\n"
    "- Use H2 for each outline section and H3 for sub-points.\n"
    "- Mix short paragraphs with lists; expand every list item with context.\n"
    "- Weave the target keywords in naturally.\n"
    "- Close with a short, practical conclusion.\n"
    "- Never use em dashes.\n\n"
    "## CRITICAL REQUIREMENTS\n\n"
    "- 1200-1800 words.\n"
    "- Every section from the outline appears in order."
)

TEMPLATE_REQUIREMENTS: str = (
    "## Template Requirements\n\n"
    "IMPORTANT: Include the actual template described above. The template should be:\n"
    "- Complete and ready to use (not just placeholders)\n"
    "- Filled with example content showing how sections should be completed\n"
    "- Structured so users can copy and immediately adapt it"
)

FORMAT_GUIDANCE: dict[str, str] = {
    "Guide": "Structure as step-by-step instructions with clear, actionable guidance.",
    "List": "Use a mix of paragraphs and lists. Expand each item with context and explanation "
            "rather than bare bullet points.",
    "Comparison": "Clearly compare and contrast options, highlighting key differences and similarities.",
    "Question-based": "Answer the key question thoroughly with supporting evidence and examples.",
    "Case Study": "Analyze real examples with specific details, outcomes, and lessons learned.",
    "Explainer": "Define concepts clearly and build understanding progressively from basics to advanced.",
    "Template/Toolkit": "Provide actionable templates, frameworks, or tools that readers can immediately use.",
    "Anatomy of x": "Analyze the anatomy of x, breaking down the components and how they work together.",
}
_DEFAULT_FORMAT_GUIDANCE = "Write in a clear, engaging format appropriate for the topic."


def build_blog_system_prompt(year: int) -> str:
    lines = [
        "You are a brand voice and content style guide expert specializing in copywriting and content "
        f"marketing. The current year is {year}. You believe that:",
        "",
    ]
    lines.extend(f"{i}. {belief}" for i, belief in enumerate(_BLOG_BELIEFS, start=1))
    lines.extend(["", "Always return strict JSON only."])
    return "\n".join(lines)


def build_category_prompt(topic: str, keywords: list[str], categories: tuple[str, ...]) -> str:
    lines = ["Analyze this blog topic and determine the most appropriate category from these options:"]
    lines.extend(f"{i}. {category}" for i, category in enumerate(categories, start=1))
    lines.extend([
        "",
        f"Topic: {topic}",
        f"Keywords: {', '.join(keywords) or 'none provided'}",
        "",
        "Return ONLY the category name that best fits this topic. No explanation, just the category name.",
    ])
    return "\n".join(lines)


def mentions_template(topic: str, keywords: list[str]) -> bool:
    return "template" in topic.lower() or any("template" in k.lower() for k in keywords)


def build_outline_prompt(
    topic: str,
    keywords: list[str],
    research: ResearchNotes | None,
    *,
    source_max_chars: int,
) -> str:
    has_template = mentions_template(topic, keywords)
    lines = [
        f"Generate a detailed outline for a blog post about: {topic}",
        "",
        f"Target Keywords: {', '.join(keywords) or 'none provided'}",
    ]

    if research and research["urls"]:
        lines.extend(["", "## Research Sources", "", "You have access to recent research from these sources:"])
        lines.extend(f"{i}. {url}" for i, url in enumerate(research["urls"], start=1))
        if research["sources"]:
            lines.extend(["", "### Full Article Content", ""])
            for i, source in enumerate(research["sources"], start=1):
                body = source["markdown"]
                lines.append(f"**Source {i}: {source['title'] or source['url']}**")
                lines.append("")
                lines.append(body[:source_max_chars])
                if len(body) > source_max_chars:
                    lines.append("... (content continues)")
                lines.extend(["", "---", ""])
            lines.extend([
                "**YOUR TASK:** Extract the most valuable excerpts for the article writer: brand examples "
                "with details, statistics, quotes, frameworks and actionable tactics. Return them in "
                "research_excerpts with the source URL, the excerpt text and the outline section it supports.",
            ])
        elif research["summary"]:
            lines.extend(["", "Summary:", research["summary"]])

    if has_template:
        lines.extend([
            "",
            'CRITICAL: The topic or keywords mention "template". The reader wants an actual template. You MUST:',
            '1. Use "Template/Toolkit" format',
            '2. Include "template" in the title',
            "3. Set includes_template to true",
            "4. Describe exactly what the template will contain in template_description",
        ])
    else:
        lines.extend([
            "",
            "Only set includes_template to true if the article will contain a complete, usable template.",
        ])

    instructions = OUTLINE_INSTRUCTIONS
    if has_template:
        instructions = instructions.replace(
            "keep under 60 characters)", 'keep under 60 characters, include "template")'
        )
    lines.extend(["", instructions])
    return "\n".join(lines)


def format_guidance(article_format: str) -> str:
    return FORMAT_GUIDANCE.get(article_format, _DEFAULT_FORMAT_GUIDANCE)


def add_utm_params(url: str) -> str:
    if not url:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{UTM_PARAMS}"


_SCHEME_RE = re.compile(r"^https?://(www\.)?", re.IGNORECASE)


def source_name(url: str) -> str:
    """'https://www.sprout-social.com/x' -> 'Sprout social'."""
    if not url:
        return "Source"
    domain = _SCHEME_RE.sub("", url).split("/")[0]
    main = domain.split(".")[0]
    if not main:
        return "Source"
    return (main[0].upper() + main[1:]).replace("-", " ")


def build_article_prompt(
    outline: dict[str, object],
    keywords: list[str],
    *,
    internal_links: list[dict[str, str]] | None = None,
    external_links: list[dict[str, str]] | None = None,
) -> str:
    article_format = str(outline.get("format") or "Guide")
    lines = [
        "Write a comprehensive blog post based on this outline:",
        "",
        f"Title: {outline.get('title')}",
        f"Format: {article_format}",
    ]
    if outline.get("includes_template"):
        lines.append(f"Template Description: {outline.get('template_description') or ''}")
    lines.extend(["", "Sections:"])
    for i, section in enumerate(outline.get("sections") or [], start=1):
        if not isinstance(section, dict):
            continue
        topics = section.get("topics") or section.get("key_points") or []
        lines.append(f"{i}. {section.get('heading')}")
        lines.append(f"   Topics to cover: {', '.join(str(t) for t in topics)}")
    lines.extend(["", f"Target Keywords: {', '.join(keywords) or 'none provided'}"])

    excerpts = [e for e in (outline.get("research_excerpts") or []) if isinstance(e, dict)]
    if excerpts:
        lines.extend([
            "",
            "## Research Excerpts for Citation",
            "",
            "Use the most relevant excerpts below to enrich the article:",
            "",
        ])
        for i, excerpt in enumerate(excerpts, start=1):
            url = str(excerpt.get("source_url") or "")
            lines.append(f"{i}. **{excerpt.get('context') or ''}**")
            lines.append(f"   Source Name: {source_name(url)}")
            lines.append(f"   Source URL: {add_utm_params(url)}")
            lines.append(f'   Excerpt: "{excerpt.get("excerpt") or ""}"')
            lines.append("")
        first_url = str(excerpts[0].get("source_url") or "")
        lines.extend([
            "**Citation Requirements:**",
            "- When you use an excerpt, link it with its Source Name in markdown: "
            f"[{source_name(first_url)}]({add_utm_params(first_url)})",
            "- Use the exact Source Names and URLs above (they include tracking parameters).",
            '- Never write generic terms like "source" or "research" in place of the Source Name.',
        ])

    if internal_links or external_links:
        lines.extend(["", "## Linking Requirements", ""])
        if internal_links:
            lines.append("Include internal links to these related posts naturally within the content:")
            lines.extend(f"- [{link['title']}](/blog/{link['slug']})" for link in internal_links)
            lines.append("")
        if external_links:
            lines.append("Include authoritative external links to these sources where relevant:")
            lines.extend(f"- [{link['title']}]({link['url']})" for link in external_links)
            lines.append("")
        lines.append("Integrate these links within the relevant sections; do not add a separate links section.")

    lines.extend(["", ARTICLE_INSTRUCTIONS])
    if outline.get("includes_template"):
        lines.extend(["", TEMPLATE_REQUIREMENTS])
    lines.extend([
        "",
        f"Write the full article following the outline. {format_guidance(article_format)}",
        "",
        'Return as JSON with: title, content (markdown, starting with "# {title}"), '
        "excerpt (140-160 characters), keywords (array of 5-8 relevant SEO keywords).",
    ])
    return "\n".join(lines)
