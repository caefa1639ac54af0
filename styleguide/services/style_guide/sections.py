"""Split a style guide into H1/H2 sections and replace sections by id."""

import re
from dataclasses import dataclass
from typing import TypedDict

from styleguide.utils.text import slugify


@dataclass(frozen=True)
class SectionConfig:
    id: str
    label: str
    min_tier: str
    match_heading: re.Pattern[str]


STYLE_GUIDE_SECTIONS: tuple[SectionConfig, ...] = (
    SectionConfig("cover", "Cover Page", "free", re.compile(r"^Cover", re.IGNORECASE)),
    SectionConfig("about", "About Brand", "free", re.compile(r"^About", re.IGNORECASE)),
    SectionConfig("how-to-use", "How to Use", "free", re.compile(r"^How to Use", re.IGNORECASE)),
    SectionConfig(
        "general-guidelines", "General Guidelines", "free", re.compile(r"^General Guidelines", re.IGNORECASE)
    ),
    SectionConfig("audience", "Audience", "free", re.compile(r"^Audience", re.IGNORECASE)),
    SectionConfig("brand-voice", "Brand Voice", "free", re.compile(r"^Brand Voice", re.IGNORECASE)),
    SectionConfig(
        "style-rules", "Style Rules", "pro", re.compile(r"^(?:25 )?(?:Core|Style) Rules", re.IGNORECASE)
    ),
    SectionConfig("examples", "Before / After", "pro", re.compile(r"^Before.*After", re.IGNORECASE)),
    SectionConfig("word-list", "Word List", "pro", re.compile(r"^Word List", re.IGNORECASE)),
    SectionConfig("questions", "Questions", "free", re.compile(r"^Questions", re.IGNORECASE)),
)

_HEADING_RE = re.compile(r"^(#{1,2})\s+(.+)$", re.MULTILINE)


class StyleGuideSection(TypedDict):
    id: str
    title: str
    content: str
    level: int
    is_main_section: bool
    min_tier: str


def _match_config(title: str) -> SectionConfig | None:
    return next((c for c in STYLE_GUIDE_SECTIONS if c.match_heading.search(title)), None)


def section_id_for_heading(title: str) -> str:
    """Known headings map to their configured id; others to a slug, "" when nothing sluggable remains."""
    config = _match_config(title)
    if config:
        return config.id
    return slugify(title, max_length=255)


def parse_sections(markdown: str) -> list[StyleGuideSection]:
    """Sections start at each H1/H2 heading and run to the next one."""
    if not markdown:
        return []
    matches = list(_HEADING_RE.finditer(markdown))
    if not matches:
        return [StyleGuideSection(
            id="content",
            title="Style Guide",
            content=markdown.strip(),
            level=2,
            is_main_section=True,
            min_tier="free",
        )]

    sections: list[StyleGuideSection] = []
    for i, match in enumerate(matches):
        title = match.group(2).strip()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(markdown)
        config = _match_config(title)
        sections.append(StyleGuideSection(
            id=section_id_for_heading(title) or f"section-{i}",
            title=title,
            content=markdown[match.end():end].strip(),
            level=len(match.group(1)),
            is_main_section=True,
            min_tier=config.min_tier if config else "free",
        ))
    return sections


def get_section_content(markdown: str, section_id: str) -> str:
    """'## Title\\n\\nbody' for the section, or '' when absent."""
    if not markdown or not section_id:
        return ""
    section = next((s for s in parse_sections(markdown) if s["id"] == section_id), None)
    if section is None:
        return ""
    return f"## {section['title']}\n\n{section['content']}".strip()


def replace_section(markdown: str, section_id: str, new_content: str) -> str:
    """Swap the section (heading included) for new_content; unchanged when the id is unknown."""
    if not markdown or not section_id:
        return markdown
    sections = parse_sections(markdown)
    index = next((i for i, s in enumerate(sections) if s["id"] == section_id), -1)
    if index == -1:
        return markdown

    matches = list(_HEADING_RE.finditer(markdown))
    if not matches:
        return new_content.strip()
    start = matches[index].start()
    end = matches[index + 1].start() if index + 1 < len(matches) else len(markdown)
    before, after = markdown[:start], markdown[end:]
    return before + new_content.strip() + ("\n\n" + after if after else "")
