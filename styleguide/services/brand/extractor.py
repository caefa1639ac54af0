"""
Fetch a brand website and reduce it to a plain-text summary for the brand prompt.

Homepage: title, meta description, first h1/h2 and main (or body) text. At most
one about/company/team subpage is followed with a short timeout; a failed
subpage is skipped.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from config import WEBSITE_FETCH_TIMEOUT_SECONDS, WEBSITE_SUBPAGE_TIMEOUT_SECONDS, WEBSITE_USER_AGENT
from constants import WEBSITE_SUBPAGE_MAX_CHARS, WEBSITE_SUMMARY_MAX_CHARS, WEBSITE_TEXT_MAX_CHARS
from styleguide.utils.text import collapse_whitespace

logger = logging.getLogger(__name__)

BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": WEBSITE_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}

_SUBPAGE_HREF_RE = re.compile(r"about|company|team", re.IGNORECASE)


class WebsiteFetchError(ValueError):
    """The site could not be fetched. The message is shown to the user."""


@dataclass
class PageContent:
    title: str
    meta_description: str
    h1: str
    h2: str
    main_text: str

    def lines(self) -> list[str]:
        return [self.title, self.meta_description, self.h1, self.h2, self.main_text]


def _first_text(soup: BeautifulSoup, tag: str) -> str:
    element = soup.find(tag)
    return element.get_text(" ", strip=True) if element else ""


def parse_page(html: str, *, max_chars: int = WEBSITE_TEXT_MAX_CHARS) -> PageContent:
    soup = BeautifulSoup(html, "html.parser")
    meta = soup.find("meta", attrs={"name": "description"})
    container = soup.find("main") or soup.find("body") or soup
    main_text = collapse_whitespace(container.get_text(" "))
    return PageContent(
        title=soup.title.get_text(strip=True) if soup.title else "",
        meta_description=(meta.get("content") or "").strip() if meta else "",
        h1=_first_text(soup, "h1"),
        h2=_first_text(soup, "h2"),
        main_text=main_text[:max_chars],
    )


def find_subpage_links(html: str, base_url: str, *, limit: int = 1) -> list[str]:
    """Absolute URLs of about/company/team links, in document order, without duplicates."""
    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not _SUBPAGE_HREF_RE.search(href) or href.startswith(("#", "mailto:")):
            continue
        url = urljoin(base_url, href)
        if url not in links:
            links.append(url)
        if len(links) >= limit:
            break
    return links


def _fetch_error(exc: httpx.HTTPError) -> WebsiteFetchError:
    text = str(exc).lower()
    if "reset" in text or "econnreset" in text:
        return WebsiteFetchError("Connection was interrupted. Try again or add details manually.")
    if isinstance(exc, httpx.TimeoutException) or "timeout" in text or "timed out" in text:
        return WebsiteFetchError("Site didn't respond. Try again or add details manually.")
    return WebsiteFetchError("Can't reach this site. Try again later.")


def fetch_html(url: str, *, client: httpx.Client, timeout: float = WEBSITE_FETCH_TIMEOUT_SECONDS) -> str:
    try:
        response = client.get(url, headers=BROWSER_HEADERS, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        raise _fetch_error(exc) from exc
    return response.text


def _subpage_text(url: str, *, client: httpx.Client) -> str:
    try:
        html = fetch_html(url, client=client, timeout=WEBSITE_SUBPAGE_TIMEOUT_SECONDS)
    except WebsiteFetchError as exc:
        logger.info("Skipping subpage %s: %s", url, exc)
        return ""
    page = parse_page(html, max_chars=WEBSITE_SUBPAGE_MAX_CHARS)
    return "\n".join([f"[Subpage: {url}]", *page.lines()])


def build_website_summary(url: str, *, client: httpx.Client | None = None) -> str:
    """Homepage plus one subpage as newline-joined text, capped at WEBSITE_SUMMARY_MAX_CHARS."""
    owns_client = client is None
    client = client or httpx.Client()
    try:
        html = fetch_html(url, client=client)
        page = parse_page(html)
        parts = page.lines()
        for subpage_url in find_subpage_links(html, url):
            parts.append(_subpage_text(subpage_url, client=client))
    finally:
        if owns_client:
            client.close()
    summary = "\n".join(p for p in parts if p)
    logger.debug("Website summary for %s: %d chars", url, len(summary))
    return summary[:WEBSITE_SUMMARY_MAX_CHARS]
