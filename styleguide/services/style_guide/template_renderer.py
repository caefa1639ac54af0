"""Load markdown templates and substitute {{token}} placeholders."""

import re

from constants import TEMPLATES_DIR

_TOKEN_RE = re.compile(r"\{\{\s*([^{}]*?)\s*\}\}")
_TEMPLATE_NAME_RE = re.compile(r"^[a-z0-9_]+$")


def load_template(name: str) -> str:
    if not _TEMPLATE_NAME_RE.match(name or ""):
        raise ValueError(f"Template not found: {name}")
    path = TEMPLATES_DIR / f"{name}.md"
    if not path.is_file():
        raise ValueError(f"Template not found: {name}")
    return path.read_text(encoding="utf-8")


def missing_placeholder(token: str) -> str:
    words = token.replace("_", " ").strip().lower() or "section"
    return f"_Could not generate {words}._"


def render_template(template: str, values: dict[str, str]) -> str:
    """
    Replace every {{token}} in one pass. Tokens without a non-empty value become
    an italic placeholder. The result never contains '{{' or '}}', even when a
    substituted value did.
    """
    def _substitute(match: re.Match[str]) -> str:
        token = match.group(1)
        value = values.get(token)
        return value if value else missing_placeholder(token)

    rendered = _TOKEN_RE.sub(_substitute, template)
    while "{{" in rendered or "}}" in rendered:
        rendered = rendered.replace("{{", "{").replace("}}", "}")
    return rendered
