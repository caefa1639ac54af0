"""BrandDetails: the brand context passed through prompt builders and orchestrators."""

from typing import TypedDict

from constants import DEFAULT_ENGLISH_VARIANT


class BrandDetails(TypedDict):
    name: str
    description: str
    audience: str
    traits: list[str]
    keywords: list[str]
    products_services: list[str]
    formality_level: str
    reading_level: str
    english_variant: str


# Request payloads use camelCase keys; both spellings are accepted.
_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "brandName"),
    "description": ("description", "brandDetailsDescription", "brandDetailsText", "brand_details_text"),
    "audience": ("audience", "targetAudience", "target_audience"),
    "traits": ("traits", "selectedTraits", "selected_traits"),
    "keywords": ("keywords",),
    "products_services": ("products_services", "productsServices"),
    "formality_level": ("formality_level", "formalityLevel"),
    "reading_level": ("reading_level", "readingLevel"),
    "english_variant": ("english_variant", "englishVariant"),
}


def _pick(raw: dict[str, object], field: str) -> object:
    for key in _ALIASES[field]:
        value = raw.get(key)
        if value not in (None, "", []):
            return value
    return None


def trait_name(trait: object) -> str:
    """Selected traits are plain names or {"name": ...} objects (custom traits)."""
    if isinstance(trait, str):
        return trait.strip()
    if isinstance(trait, dict):
        return str(trait.get("name") or "").strip()
    return ""


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


def normalize_brand_details(raw: dict[str, object] | None) -> BrandDetails:
    """Coerce a loosely typed request payload into BrandDetails. Missing fields become empty."""
    raw = raw or {}
    traits_raw = _pick(raw, "traits")
    traits = [trait_name(t) for t in traits_raw] if isinstance(traits_raw, list) else []
    return BrandDetails(
        name=str(_pick(raw, "name") or "").strip(),
        description=str(_pick(raw, "description") or "").strip(),
        audience=str(_pick(raw, "audience") or "").strip(),
        traits=[t for t in traits if t],
        keywords=_string_list(_pick(raw, "keywords")),
        products_services=_string_list(_pick(raw, "products_services")),
        formality_level=str(_pick(raw, "formality_level") or "").strip(),
        reading_level=str(_pick(raw, "reading_level") or "").strip(),
        english_variant=str(_pick(raw, "english_variant") or DEFAULT_ENGLISH_VARIANT).strip().lower(),
    )
