"""Tests for website extraction and BrandService."""

import json

import httpx
import pytest

from styleguide.prompts import (
    AUDIENCE_SUMMARY_SYSTEM_PROMPT,
    BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT,
    BRAND_FROM_WEBSITE_SYSTEM_PROMPT,
    BRAND_NAME_SYSTEM_PROMPT,
    BRAND_SUMMARY_SYSTEM_PROMPT,
    KEYWORDS_SYSTEM_PROMPT,
    TRAIT_SUGGESTIONS_SYSTEM_PROMPT,
)
from styleguide.services import BrandService
from styleguide.services.brand.extractor import (
    WebsiteFetchError,
    build_website_summary,
    find_subpage_links,
    parse_page,
)
from styleguide.services.brand.service import (
    INVALID_URL_MESSAGE,
    brand_name_from_paragraph,
    clean_url_input,
    flatten_audience,
)
from styleguide.utils.errors import GenerationError
from tests.conftest import make_multi_response_client, make_routing_client

HOMEPAGE = """
<html>
  <head>
    <title>Acme Analytics</title>
    <meta name="description" content="Revenue dashboards for founders">
  </head>
  <body>
    <nav><a href="#top">Top</a><a href="/about-us">About</a><a href="/team">Team</a></nav>
    <main>
      <h1>Know your numbers</h1>
      <h2>Dashboards in minutes</h2>
      <p>Acme   Analytics connects to your billing system.</p>
    </main>
  </body>
</html>
"""

ABOUT_PAGE = "<html><head><title>About Acme</title></head><body><p>Founded in 2021.</p></body></html>"

PARAGRAPH = "Acme Analytics is a revenue dashboard company for startup founders."

KEYWORDS_REPLY = json.dumps({"keywords": ["dashboards", "revenue", "Dashboards", "a very long keyword phrase"]})
TRAITS_REPLY = json.dumps({"traits": ["direct", "Bold", "Warm", "Witty", "Refined"]})


def _site_client(pages: dict[str, str], seen: list[str] | None = None) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if seen is not None:
            seen.append(url)
        if url not in pages:
            return httpx.Response(404, text="<html><body>Not found</body></html>")
        return httpx.Response(200, text=pages[url])

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def install_client(monkeypatch):
    def install(client):
        monkeypatch.setattr("styleguide.utils.openai_client._get_openai_client", lambda: client)
        return client

    return install


# ── Website extraction ──────────────────────────────────────────────────────

class TestExtractor:
    def test_parse_page(self) -> None:
        page = parse_page(HOMEPAGE)

        assert page.title == "Acme Analytics"
        assert page.meta_description == "Revenue dashboards for founders"
        assert page.h1 == "Know your numbers"
        assert page.h2 == "Dashboards in minutes"
        assert "Acme Analytics connects to your billing system." in page.main_text
        assert "Top" not in page.main_text

    def test_subpage_links(self) -> None:
        assert find_subpage_links(HOMEPAGE, "https://acme.test/") == ["https://acme.test/about-us"]
        assert find_subpage_links(HOMEPAGE, "https://acme.test/", limit=5) == [
            "https://acme.test/about-us",
            "https://acme.test/team",
        ]

    def test_summary_follows_one_subpage(self) -> None:
        seen: list[str] = []
        client = _site_client(
            {"https://acme.test/": HOMEPAGE, "https://acme.test/about-us": ABOUT_PAGE}, seen
        )

        summary = build_website_summary("https://acme.test/", client=client)

        assert summary.startswith("Acme Analytics\nRevenue dashboards for founders")
        assert "[Subpage: https://acme.test/about-us]" in summary
        assert "Founded in 2021." in summary
        assert seen == ["https://acme.test/", "https://acme.test/about-us"]

    def test_failed_subpage_is_skipped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/about-us":
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, text=HOMEPAGE)

        summary = build_website_summary(
            "https://acme.test/", client=httpx.Client(transport=httpx.MockTransport(handler))
        )

        assert "Know your numbers" in summary
        assert "[Subpage:" not in summary

    @pytest.mark.parametrize("error, message", [
        (httpx.ConnectTimeout("timed out"), "Site didn't respond"),
        (httpx.ReadError("Connection reset by peer"), "Connection was interrupted"),
        (httpx.ConnectError("Name or service not known"), "Can't reach this site"),
    ])
    def test_homepage_failures(self, error: httpx.HTTPError, message: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error

        with pytest.raises(WebsiteFetchError, match=message):
            build_website_summary("https://acme.test/", client=httpx.Client(transport=httpx.MockTransport(handler)))


# ── Helpers ─────────────────────────────────────────────────────────────────

class TestBrandHelpers:
    def test_flatten_audience(self) -> None:
        assert flatten_audience("  Founders ") == "Founders"
        assert flatten_audience({
            "demographic": {"occupation": "Founders", "age": "25-40", "location": "the UK"},
            "interestsValues": ["growth", "clarity"],
            "context": "checking revenue daily",
        }) == "Founders aged 25-40 in the UK who are interested in growth, clarity who are checking revenue daily"
        assert flatten_audience(None) == ""

    def test_brand_name_from_paragraph(self) -> None:
        assert brand_name_from_paragraph(PARAGRAPH) == "Acme Analytics"
        assert brand_name_from_paragraph("We build dashboards.") == ""

    def test_clean_url_input(self) -> None:
        assert clean_url_input(' "Acme.test" ') == "https://acme.test/"
        with pytest.raises(ValueError, match=INVALID_URL_MESSAGE):
            clean_url_input("localhost")


# ── BrandService ────────────────────────────────────────────────────────────

class TestBrandService:
    def test_extract_from_description(self, install_client) -> None:
        install_client(make_routing_client({
            BRAND_FROM_DESCRIPTION_SYSTEM_PROMPT: json.dumps({
                "name": "Acme Analytics",
                "description": PARAGRAPH,
                "targetAudience": {"demographic": {"occupation": "Founders"}},
            }),
            KEYWORDS_SYSTEM_PROMPT: KEYWORDS_REPLY,
            TRAIT_SUGGESTIONS_SYSTEM_PROMPT: TRAITS_REPLY,
        }))

        result = BrandService.extract_from_description("Revenue dashboards for startup founders")

        assert result["brand_name"] == "Acme Analytics"
        assert result["brand_details_text"] == PARAGRAPH
        assert result["audience"] == "Founders"
        assert result["keywords"] == ["dashboards", "revenue"]
        assert result["suggested_traits"] == ["Direct", "Warm", "Witty"]

    def test_description_failure(self, install_client) -> None:
        install_client(make_multi_response_client(*[RuntimeError("Rate limit exceeded")] * 3))

        with pytest.raises(GenerationError, match="Could not process description") as exc_info:
            BrandService.extract_from_description("Revenue dashboards for startup founders")
        assert exc_info.value.http_status == 429

    def test_extract_from_url(self, install_client) -> None:
        install_client(make_routing_client({
            BRAND_FROM_WEBSITE_SYSTEM_PROMPT: json.dumps({"paragraph": PARAGRAPH}),
            AUDIENCE_SUMMARY_SYSTEM_PROMPT: "Startup founders tracking revenue.",
            KEYWORDS_SYSTEM_PROMPT: KEYWORDS_REPLY,
            TRAIT_SUGGESTIONS_SYSTEM_PROMPT: TRAITS_REPLY,
        }))
        site = _site_client({"https://acme.test/": HOMEPAGE})

        result = BrandService.extract_from_url("acme.test", client=site)

        assert result["brand_name"] == "Acme Analytics"
        assert result["brand_details_text"] == PARAGRAPH
        assert result["audience"] == "Startup founders tracking revenue."
        assert result["keywords"] == ["dashboards", "revenue"]

    def test_url_falls_back_to_summary_and_name_calls(self, install_client) -> None:
        def audience_fails(params: dict) -> str:
            raise RuntimeError("audience down")

        install_client(make_routing_client({
            BRAND_FROM_WEBSITE_SYSTEM_PROMPT: "not json",
            BRAND_SUMMARY_SYSTEM_PROMPT: "Revenue dashboards built for founders.",
            BRAND_NAME_SYSTEM_PROMPT: '"Acme"',
            AUDIENCE_SUMMARY_SYSTEM_PROMPT: audience_fails,
            KEYWORDS_SYSTEM_PROMPT: KEYWORDS_REPLY,
            TRAIT_SUGGESTIONS_SYSTEM_PROMPT: TRAITS_REPLY,
        }))

        result = BrandService.extract_from_url("https://acme.test", client=_site_client({"https://acme.test/": HOMEPAGE}))

        assert result["brand_name"] == "Acme"
        assert result["brand_details_text"] == "Revenue dashboards built for founders."
        assert result["audience"] == ""

    def test_invalid_url(self) -> None:
        with pytest.raises(ValueError, match="Invalid URL provided"):
            BrandService.extract_from_url("not a url at all")
