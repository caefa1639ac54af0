"""Service for turning a website URL or a short description into brand details."""

import json
import logging
import re
from typing import TypedDict

import httpx

from constants import LLM_MODEL, LLM_MODEL_QUALITY
from styleguide.prompts import BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT, BRAND_FROM_WEBSITE_SYSTEM_PROMPT
from styleguide.prompts.brand_extraction import (
    build_brand_from_description_prompt,
    build_brand_from_website_prompt,
)
from styleguide.services.brand.extractor import build_website_summary
from styleguide.services.style_guide.content import (
    extract_brand_name,
    generate_audience_summary,
    generate_brand_summary,
    generate_keywords,
    generate_trait_suggestions,
)
from styleguide.services.style_guide.validation import normalize_url
from styleguide.utils.errors import GenerationError, classify_error
from styleguide.utils.openai_client import GenerationRequest, generate, run_parallel
from styleguide.utils.sanitizer import parse_json_object

logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = "Invalid URL provided. Please check for typos or extra punctuation."

_BRAND_NAME_RE = re.compile(r"^([^.]+?)\s+is\s+", re.IGNORECASE)
_SURROUNDING_QUOTES_RE = re.compile(r"^['\"\s]+|['\"\s]+$")


class BrandExtraction(TypedDict):
    brand_name: str
    brand_details_text: str
    audience: str
    keywords: list[str]
    suggested_traits: list[str]


def flatten_audience(value: object) -> str:
    """targetAudience is a string or {demographic, interestsValues, context}."""
    if isinstance(value, str):
        return value.strip()
    if not isinstance(value, dict):
        return ""
    parts: list[str] = []
    demographic = value.get("demographic")
    if isinstance(demographic, dict):
        demo = []
        if demographic.get("occupation"):
            demo.append(str(demographic["occupation"]))
        if demographic.get("age"):
            demo.append(f"aged {demographic['age']}")
        if demographic.get("location"):
            demo.append(f"in {demographic['location']}")
        if demo:
            parts.append(" ".join(demo))
    interests = value.get("interestsValues")
    if isinstance(interests, list) and interests:
        parts.append(f"interested in {', '.join(str(i) for i in interests)}")
    if value.get("context"):
        parts.append(str(value["context"]))
    return " who are ".join(parts)


def brand_name_from_paragraph(paragraph: str) -> str:
    match = _BRAND_NAME_RE.match(paragraph.strip())
    return match.group(1).strip() if match else ""


def clean_url_input(raw: str) -> str:
    """Strip quotes and whitespace, add a scheme, validate. ValueError with a user-facing message."""
    cleaned = _SURROUNDING_QUOTES_RE.sub("", raw or "")
    try:
        return normalize_url(cleaned)
    except ValueError as exc:
        logger.info("Rejected URL %r: %s", raw, exc)
        raise ValueError(INVALID_URL_MESSAGE) from exc


def _suggest_traits(name: str, description: str, audience: str) -> list[str]:
    try:
        return generate_trait_suggestions(name, description, audience)
    except (GenerationError, ValueError) as exc:
        logger.warning("Trait suggestions failed for %s: %s", name or "brand", exc)
        return []


class BrandService:
    """Brand detail extraction."""

    @staticmethod
    def extract_from_description(description: str) -> BrandExtraction:
        result = generate(GenerationRequest(
            system_prompt=BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT,
            user_prompt=build_brand_from_description_prompt(description.strip()),
            response_format="json",
            max_tokens=800,
            model=LLM_MODEL,
            label="brand_from_description",
        ))
        if not result["success"]:
            raise GenerationError(
                "Could not process description. Try again or add details manually.",
                classify_error(result["error"]),
            )
        try:
            details = parse_json_object(result["content"])
        except (ValueError, json.JSONDecodeError) as exc:
            raise GenerationError("Could not process description. Try again or add details manually.") from exc

        name = str(details.get("name") or "").strip()
        text = str(details.get("description") or "").strip()
        audience = flatten_audience(details.get("targetAudience"))
        try:
            keywords = generate_keywords(name, text, audience)
        except (GenerationError, ValueError) as exc:
            logger.warning("Keyword extraction failed for %s: %s", name, exc)
            keywords = []

        logger.info("Extracted brand details from description for %s", name or "unnamed brand")
        return BrandExtraction(
            brand_name=name,
            brand_details_text=text,
            audience=audience,
            keywords=keywords,
            suggested_traits=_suggest_traits(name, text, audience),
        )

    @staticmethod
    def extract_from_url(raw_url: str, *, client: httpx.Client | None = None) -> BrandExtraction:
        url = clean_url_input(raw_url)
        summary = build_website_summary(url, client=client)

        result = generate(GenerationRequest(
            system_prompt=BRAND_FROM_WEBSITE_SYSTEM_PROMPT,
            user_prompt=build_brand_from_website_prompt(summary),
            response_format="json",
            max_tokens=500,
            model=LLM_MODEL_QUALITY,
            label="brand_from_website",
        ))
        paragraph = ""
        if result["success"]:
            try:
                paragraph = str(parse_json_object(result["content"]).get("paragraph") or "").strip()
            except (ValueError, json.JSONDecodeError):
                logger.warning("Brand paragraph was not valid JSON; summarizing instead")
        if not paragraph:
            paragraph = generate_brand_summary(summary)

        name = brand_name_from_paragraph(paragraph)
        if not name:
            try:
                name = extract_brand_name(paragraph)
            except GenerationError as exc:
                logger.warning("Brand name extraction failed: %s", exc)

        audience_result, keywords_result = run_parallel([
            lambda: generate_audience_summary(name or "Brand", paragraph),
            lambda: generate_keywords(name or "Brand", paragraph),
        ])
        audience = audience_result.strip() if isinstance(audience_result, str) else ""
        keywords = keywords_result if isinstance(keywords_result, list) else []
        if isinstance(audience_result, BaseException):
            logger.warning("Audience summary failed for %s: %s", url, audience_result)
        if isinstance(keywords_result, BaseException):
            logger.warning("Keyword extraction failed for %s: %s", url, keywords_result)

        logger.info("Extracted brand information from %s", url)
        return BrandExtraction(
            brand_name=name,
            brand_details_text=paragraph,
            audience=audience,
            keywords=keywords,
            suggested_traits=_suggest_traits(name, paragraph, audience),
        )
