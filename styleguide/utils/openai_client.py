"""OpenAI generation client: retries, model-family parameters, usage logging, fan-out."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, TypedDict, TypeVar

from openai import OpenAI

from constants import (
    GENERATION_MAX_CONCURRENCY,
    LLM_MAX_ATTEMPTS,
    LLM_MODEL_QUALITY,
    LLM_REASONING_EFFORT,
    LLM_RETRY_DELAY_SECONDS,
    LLM_TEMPERATURE,
    REASONING_MODEL_PREFIXES,
)
from styleguide.utils.errors import classify_error, is_retryable
from styleguide.utils.sanitizer import ResponseFormat, clean_response

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GenerationRequest:
    system_prompt: str
    user_prompt: str
    response_format: ResponseFormat = "markdown"
    max_tokens: int = 2000
    model: str = LLM_MODEL_QUALITY
    reasoning_effort: str = LLM_REASONING_EFFORT
    label: str = "generation"


class GenerationResult(TypedDict):
    success: bool
    content: str
    error: str | None
    error_kind: str | None
    attempts: int


def is_reasoning_model(model: str) -> bool:
    return model.lower().startswith(REASONING_MODEL_PREFIXES)


def _get_openai_client() -> OpenAI:
    return OpenAI()


def build_completion_params(request: GenerationRequest) -> dict[str, object]:
    """Chat Completions kwargs for the request's model family."""
    params: dict[str, object] = {
        "model": request.model,
        "messages": [
            {"role": "system", "content": request.system_prompt},
            {"role": "user", "content": request.user_prompt},
        ],
    }
    if is_reasoning_model(request.model):
        params["max_completion_tokens"] = request.max_tokens
        params["reasoning_effort"] = request.reasoning_effort
    else:
        params["max_tokens"] = request.max_tokens
        params["temperature"] = LLM_TEMPERATURE
    if request.response_format == "json" and not is_reasoning_model(request.model):
        params["response_format"] = {"type": "json_object"}
    return params


def generate(
    request: GenerationRequest,
    *,
    client: OpenAI | None = None,
    max_attempts: int | None = None,
) -> GenerationResult:
    """
    Run one generation with up to max_attempts tries and a linear backoff.

    Never raises for provider errors: a failure is reported with the last
    error message verbatim and its classified kind. Quota and content-policy
    errors end the attempts early.
    """
    attempts_allowed = max(1, max_attempts or LLM_MAX_ATTEMPTS)
    client = client or _get_openai_client()
    params = build_completion_params(request)
    last_error: BaseException | None = None
    attempts_made = 0

    for attempt in range(1, attempts_allowed + 1):
        try:
            logger.debug(
                "LLM call label=%s model=%s attempt=%d/%d",
                request.label,
                request.model,
                attempt,
                attempts_allowed,
            )
            response = client.chat.completions.create(**params)
            content = _first_message_content(response)
            if not content or not content.strip():
                raise ValueError("Empty response from OpenAI")
            _log_usage(response, request)
            return GenerationResult(
                success=True,
                content=clean_response(content, request.response_format),
                error=None,
                error_kind=None,
                attempts=attempt,
            )
        except Exception as exc:
            last_error = exc
            attempts_made = attempt
            if not is_retryable(classify_error(exc)):
                logger.warning("LLM call failed label=%s with a non-retryable error: %s", request.label, exc)
                break
            if attempt < attempts_allowed:
                logger.warning(
                    "LLM call failed label=%s attempt=%d/%d: %s",
                    request.label,
                    attempt,
                    attempts_allowed,
                    exc,
                )
                time.sleep(LLM_RETRY_DELAY_SECONDS * attempt)

    logger.error(
        "LLM call gave up label=%s attempts=%d: %s",
        request.label,
        attempts_made,
        last_error,
    )
    return GenerationResult(
        success=False,
        content="",
        error=str(last_error),
        error_kind=classify_error(last_error).value,
        attempts=attempts_made,
    )


def run_parallel(
    tasks: list[Callable[[], T]],
    *,
    max_concurrency: int = GENERATION_MAX_CONCURRENCY,
) -> list[T | BaseException]:
    """Run independent callables concurrently; results (or raised exceptions) in input order."""
    if not tasks:
        return []
    workers = max(1, min(max_concurrency, len(tasks)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="generation") as pool:
        futures = [pool.submit(task) for task in tasks]
        results: list[T | BaseException] = []
        for future in futures:
            try:
                results.append(future.result())
            except Exception as exc:
                logger.warning("Parallel generation task failed: %s", exc)
                results.append(exc)
        return results


def _first_message_content(response: object) -> str | None:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else None


def _log_usage(response: object, request: GenerationRequest) -> None:
    usage = getattr(response, "usage", None)
    if usage is None:
        return
    logger.info(
        "LLM usage label=%s model=%s prompt=%s completion=%s total=%s max_requested=%d",
        request.label,
        request.model,
        getattr(usage, "prompt_tokens", None),
        getattr(usage, "completion_tokens", None),
        getattr(usage, "total_tokens", None),
        request.max_tokens,
    )
