"""Validation of the landing input (URL or short description) and of brand details."""

import logging
import re
from typing import Literal, TypedDict
from urllib.parse import urlsplit, urlunsplit

from constants import (
    BRAND_AUDIENCE_MAX_LENGTH,
    BRAND_DESCRIPTION_MAX_LENGTH,
    BRAND_NAME_MAX_LENGTH,
    DESCRIPTION_INPUT_MAX_LENGTH,
    DESCRIPTION_INPUT_MIN_LENGTH,
)
from styleguide.models import BrandDetails

logger = logging.getLogger(__name__)

InputType = Literal["url", "description", "empty"]

_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^https?://", re.IGNORECASE),
    re.compile(r"\.[a-z]{2,}([/?]|$)", re.IGNORECASE),
    re.compile(r"^[a-zA-Z0-9-]+\.[a-zA-Z]{2,}"),
    re.compile(r"^www\.", re.IGNORECASE),
    re.compile(r"^localhost$", re.IGNORECASE),
)
_HOSTNAME_RE = re.compile(r"^[a-z0-9.-]+$")
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

INVALID_URL_MESSAGE = "Enter a valid URL (e.g., example.com)"


class InputValidation(TypedDict):
    is_valid: bool
    clean_input: str
    input_type: InputType
    error: str | None


def detect_input_type(raw: str) -> tuple[InputType, str]:
    clean = (raw or "").strip()
    if not clean:
        return "empty", clean
    if any(p.search(clean) for p in _URL_PATTERNS):
        return "url", clean
    return "description", clean


def normalize_url(raw: str) -> str:
    """Add https:// when missing and return the normalized URL; ValueError if it isn't a public host."""
    candidate = raw.strip()
    if not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"
    parts = urlsplit(candidate)
    hostname = parts.hostname or ""
    if not hostname or not _HOSTNAME_RE.match(hostname):
        raise ValueError("Invalid URL format")
    if hostname == "localhost":
        raise ValueError("localhost URLs not allowed")
    if "." not in hostname or ".." in hostname or hostname.startswith(".") or hostname.endswith("."):
        raise ValueError("Invalid domain format")
    # .port raises ValueError for a non-numeric or out-of-range port.
    if parts.port == 0:
        raise ValueError("Invalid URL format")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", parts.query, ""))


def validate_input(raw: str) -> InputValidation:
    input_type, clean = detect_input_type(raw)
    if input_type == "empty":
        return InputValidation(is_valid=True, clean_input=clean, input_type="empty", error=None)

    if input_type == "url":
        try:
            url = normalize_url(clean)
        except ValueError as exc:
            logger.info("URL validation failed for %r: %s", clean, exc)
            return InputValidation(is_valid=False, clean_input=clean, input_type="url", error=INVALID_URL_MESSAGE)
        return InputValidation(is_valid=True, clean_input=url, input_type="url", error=None)

    if len(clean) < DESCRIPTION_INPUT_MIN_LENGTH:
        error = f"Write at least {DESCRIPTION_INPUT_MIN_LENGTH} characters about your brand"
    elif len(clean) > DESCRIPTION_INPUT_MAX_LENGTH:
        error = f"Description too long. Keep under {DESCRIPTION_INPUT_MAX_LENGTH} characters"
    else:
        error = None
    return InputValidation(is_valid=error is None, clean_input=clean, input_type="description", error=error)


def validate_brand_details(details: BrandDetails, *, require_audience: bool = True) -> list[str]:
    """Field errors, empty when the details are usable."""
    errors: list[str] = []
    if not details["name"]:
        errors.append("Brand name is required")
    elif len(details["name"]) > BRAND_NAME_MAX_LENGTH:
        errors.append(f"Brand name must be {BRAND_NAME_MAX_LENGTH} characters or less")

    if not details["description"]:
        errors.append("Brand description is required")
    elif len(details["description"]) > BRAND_DESCRIPTION_MAX_LENGTH:
        errors.append(f"Brand description must be {BRAND_DESCRIPTION_MAX_LENGTH} characters or less")

    if require_audience:
        if not details["audience"]:
            errors.append("Target audience is required")
        elif len(details["audience"]) > BRAND_AUDIENCE_MAX_LENGTH:
            errors.append(f"Target audience must be {BRAND_AUDIENCE_MAX_LENGTH} characters or less")
    return errors
