"""Classification of generation failures into a closed set of error kinds."""

from enum import Enum
from typing import TypedDict

import openai


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    QUOTA = "quota"
    NETWORK = "network"
    CONTENT_POLICY = "content_policy"
    UNKNOWN = "unknown"


class ErrorDetails(TypedDict):
    message: str
    type: str
    can_retry: bool
    suggested_action: str


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "The AI service took too long to respond. Please try again.",
    ErrorKind.RATE_LIMIT: "Too many requests right now. Please wait a moment and try again.",
    ErrorKind.QUOTA: "The AI service is temporarily unavailable. Please try again later.",
    ErrorKind.NETWORK: "Could not reach the AI service. Check your connection and try again.",
    ErrorKind.CONTENT_POLICY: "This content could not be generated. Try rephrasing your brand details.",
    ErrorKind.UNKNOWN: "Something went wrong while generating your content. Please try again.",
}

_SUGGESTED_ACTIONS: dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "Retry in a few seconds.",
    ErrorKind.RATE_LIMIT: "Wait a minute before retrying.",
    ErrorKind.QUOTA: "Contact support if this keeps happening.",
    ErrorKind.NETWORK: "Check your network and retry.",
    ErrorKind.CONTENT_POLICY: "Edit your brand description and try again.",
    ErrorKind.UNKNOWN: "Retry, or contact support if it persists.",
}

HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.QUOTA: 402,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.NETWORK: 502,
    ErrorKind.CONTENT_POLICY: 422,
    ErrorKind.UNKNOWN: 502,
}

_RETRYABLE: frozenset[ErrorKind] = frozenset(
    {ErrorKind.TIMEOUT, ErrorKind.RATE_LIMIT, ErrorKind.NETWORK, ErrorKind.UNKNOWN}
)

# Checked in order; first match wins.
_MESSAGE_PATTERNS: list[tuple[ErrorKind, tuple[str, ...]]] = [
    (ErrorKind.QUOTA, ("insufficient_quota", "quota", "billing")),
    (ErrorKind.RATE_LIMIT, ("rate limit", "rate_limit", "too many requests", "429")),
    (ErrorKind.TIMEOUT, ("timeout", "timed out", "etimedout")),
    (ErrorKind.CONTENT_POLICY, ("content_policy", "content policy", "safety system", "flagged")),
    (ErrorKind.NETWORK, ("network", "connection", "econnreset", "econnrefused", "enotfound", "fetch failed")),
]


class GenerationError(Exception):
    """Raised when a document or post cannot be generated."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UNKNOWN):
        super().__init__(message)
        self.kind = kind

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.kind]


def classify_error(error: BaseException | str | None) -> ErrorKind:
    """Map an exception (or its message) to an ErrorKind."""
    if error is None:
        return ErrorKind.UNKNOWN
    if isinstance(error, GenerationError):
        return error.kind
    if isinstance(error, openai.APITimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(error, openai.RateLimitError):
        text = str(error).lower()
        return ErrorKind.QUOTA if "quota" in text else ErrorKind.RATE_LIMIT
    if isinstance(error, openai.APIConnectionError):
        return ErrorKind.NETWORK

    text = str(error).lower()
    for kind, needles in _MESSAGE_PATTERNS:
        if any(needle in text for needle in needles):
            return kind
    return ErrorKind.UNKNOWN


def is_retryable(kind: ErrorKind) -> bool:
    return kind in _RETRYABLE


def error_details(error: BaseException | str | None) -> ErrorDetails:
    kind = classify_error(error)
    return ErrorDetails(
        message=ERROR_MESSAGES[kind],
        type=kind.value,
        can_retry=is_retryable(kind),
        suggested_action=_SUGGESTED_ACTIONS[kind],
    )
