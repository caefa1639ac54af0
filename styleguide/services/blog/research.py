"""Firecrawl web search used to brief the blog outline with recent sources."""

import logging
import re
import time

import httpx

from config import FIRECRAWL_API_KEY, FIRECRAWL_SEARCH_URL, FIRECRAWL_TIMEOUT_SECONDS
from constants import (
    RESEARCH_MAX_RETRIES,
    RESEARCH_RESULT_LIMIT,
    RESEARCH_RETRY_DELAY_SECONDS,
    RESEARCH_SUMMARY_SOURCE_MAX_CHARS,
)
from styleguide.models import ResearchNotes, ResearchSource

logger = logging.getLogger(__name__)

RELEVANT_CONTENT_MAX_CHARS = 1200

_SKIP_AND_GAP_RE = re.compile(
    r"^(Skip to|Table of Contents|Share|Agree & Join|Would you like|Try .* for free|Free account)",
    re.IGNORECASE,
)
_LEGAL_RE = re.compile(r"(User Agreement|Privacy Policy|Cookie Policy|By clicking)", re.IGNORECASE)
_SKIP_LINK_RE = re.compile(r"\[Skip to.*\]\(.*#")
_IMAGE_ONLY_RE = re.compile(r"^!\[.*\]\(http")
_SOCIAL_RE = re.compile(r"^(Facebook|Twitter|LinkedIn|Email|Copy Link)", re.IGNORECASE)
_NON_PROSE_START_RE = re.compile(r"^[#!\[\-]")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")


class ResearchError(Exception):
    """Firecrawl could not be queried."""


def extract_main_content(markdown: str) -> str:
    """
    Drop navigation, sharing and legal lines, then keep everything from the
    first substantial prose line (over 100 chars) on, plus any H2 before it.
    """
    kept: list[str] = []
    skip_blank = False
    found_main = False
    for raw in markdown.split("\n"):
        line = raw.strip()
        if _SKIP_AND_GAP_RE.match(line) or _LEGAL_RE.search(line):
            skip_blank = True
            continue
        if _SKIP_LINK_RE.search(line) or _IMAGE_ONLY_RE.match(line) or _SOCIAL_RE.match(line):
            continue
        if skip_blank and not line:
            continue
        skip_blank = False
        if not found_main and len(line) > 100 and not _NON_PROSE_START_RE.match(line):
            found_main = True
        if found_main or line.startswith("##"):
            kept.append(raw)
    return "\n".join(kept)


def extract_relevant_content(markdown: str, max_chars: int = RELEVANT_CONTENT_MAX_CHARS) -> str:
    paragraphs = [p for p in _PARAGRAPH_SPLIT_RE.split(extract_main_content(markdown)) if len(p.strip()) > 50]
    extracted = ""
    for paragraph in paragraphs:
        if len(extracted) + len(paragraph) > max_chars:
            break
        extracted += paragraph + "\n\n"
    return extracted.strip()


def extract_web_results(data: object) -> list[object]:
    """Results arrive as a list, or under web / results, possibly nested in data / response."""
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    for key in ("web", "results"):
        if isinstance(data.get(key), list):
            return data[key]
    for key in ("data", "response"):
        if data.get(key):
            return extract_web_results(data[key])
    return []


def normalize_result(raw: object) -> ResearchSource | None:
    if not isinstance(raw, dict):
        return None
    source = ResearchSource(
        url=str(raw.get("url") or raw.get("link") or ""),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        markdown=str(raw.get("markdown") or raw.get("content") or ""),
    )
    if not any(source.values()):
        return None
    return source


def _source_summary(source: ResearchSource) -> str:
    parts: list[str] = []
    if source["title"]:
        parts.append(f"**{source['title']}**")
    if source["description"]:
        parts.append(source["description"])
    relevant = extract_relevant_content(source["markdown"])
    if relevant:
        clipped = relevant[:RESEARCH_SUMMARY_SOURCE_MAX_CHARS]
        if len(relevant) > RESEARCH_SUMMARY_SOURCE_MAX_CHARS:
            clipped += "..."
        parts.append(f"Key insights and content:\n{clipped}")
    return "\n\n".join(parts).strip()


def format_results(data: object, limit: int = RESEARCH_RESULT_LIMIT) -> ResearchNotes | None:
    urls: list[str] = []
    summaries: list[str] = []
    sources: list[ResearchSource] = []
    for raw in extract_web_results(data)[:limit]:
        source = normalize_result(raw)
        if source is None:
            continue
        if source["url"]:
            urls.append(source["url"])
        if not source["markdown"]:
            continue
        summary = _source_summary(source)
        if summary:
            summaries.append(summary)
        sources.append(source)
    if not summaries:
        return None
    return ResearchNotes(summary="\n\n---\n\n".join(summaries), urls=urls, sources=sources)


def build_query(topic: str, keywords: list[str]) -> str:
    keyword_text = " ".join(keywords[:3])
    return f"{topic} {keyword_text}" if keyword_text else topic


def _post_with_retries(client: httpx.Client, payload: dict[str, object], api_key: str) -> object:
    headers = {"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"}
    last_error: str = ""
    attempts = RESEARCH_MAX_RETRIES + 1
    for attempt in range(1, attempts + 1):
        try:
            response = client.post(
                FIRECRAWL_SEARCH_URL, json=payload, headers=headers, timeout=FIRECRAWL_TIMEOUT_SECONDS
            )
            if response.is_success:
                return response.json()
            last_error = f"{response.status_code} {response.text[:200]}"
        except httpx.HTTPError as exc:
            last_error = str(exc)
        except ValueError as exc:
            last_error = f"invalid JSON body: {exc}"
        logger.warning("Firecrawl request failed (attempt %d/%d): %s", attempt, attempts, last_error)
        if attempt < attempts:
            time.sleep(RESEARCH_RETRY_DELAY_SECONDS)
    raise ResearchError(f"Firecrawl search failed after {attempts} attempts: {last_error}")


def search_brief(
    topic: str,
    keywords: list[str] | None = None,
    limit: int = RESEARCH_RESULT_LIMIT,
    *,
    client: httpx.Client | None = None,
    api_key: str | None = None,
) -> ResearchNotes | None:
    """
    Search for recent sources on the topic. None when no API key is configured,
    the search fails, or nothing usable comes back; research is optional.
    """
    api_key = api_key if api_key is not None else FIRECRAWL_API_KEY
    if not api_key:
        logger.warning("FIRECRAWL_API_KEY not set; skipping research")
        return None

    payload = {
        "query": build_query(topic, keywords or []),
        "limit": limit or RESEARCH_RESULT_LIMIT,
        "scrapeOptions": {"formats": ["markdown"], "onlyMainContent": True},
    }
    owns_client = client is None
    client = client or httpx.Client()
    try:
        data = _post_with_retries(client, payload, api_key)
    except ResearchError as exc:
        logger.warning("%s", exc)
        return None
    finally:
        if owns_client:
            client.close()

    notes = format_results(data, limit)
    if notes is None:
        logger.warning("Firecrawl search returned no usable results for %r", topic)
    else:
        logger.info("Research for %r: %d sources", topic, len(notes["sources"]))
    return notes
