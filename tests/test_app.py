"""Route tests using the Flask test client with services patched or backed by the test database."""

from unittest.mock import MagicMock

import pytest

import app as app_module
from styleguide.services import DuplicateSlugError
from styleguide.utils.errors import ErrorKind, GenerationError
from tests.conftest import make_blog_post, make_style_guide


@pytest.fixture
def client(mock_adapter):
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


@pytest.fixture
def admin_client(client, monkeypatch):
    monkeypatch.setattr("config.ADMIN_BLOG_PASSWORD", "letmein")
    resp = client.post("/api/admin/login", json={"password": "letmein"})
    assert resp.status_code == 200
    return client


# ── Health and input helpers ────────────────────────────────────────────────

class TestBasics:
    def test_health(self, client) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok"}

    def test_validate_input(self, client) -> None:
        resp = client.post("/api/validate-input", json={"input": "example.com"})
        data = resp.get_json()
        assert data["isValid"] is True
        assert data["inputType"] == "url"
        assert data["cleanInput"] == "https://example.com/"

    def test_traits(self, client) -> None:
        traits = client.get("/api/traits").get_json()["traits"]
        assert traits[0]["name"] == "Assertive"

    def test_custom_trait_validation(self, client) -> None:
        assert client.post("/api/traits/validate", json={"name": "Curious"}).status_code == 200
        assert client.post("/api/traits/validate", json={"name": "Warm"}).status_code == 400


# ── Brand extraction ────────────────────────────────────────────────────────

class TestExtractWebsite:
    def test_requires_url_or_description(self, client) -> None:
        resp = client.post("/api/extract-website", json={})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "URL or description is required"

    def test_invalid_url(self, client) -> None:
        resp = client.post("/api/extract-website", json={"url": "localhost"})
        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("Invalid URL provided")

    def test_description(self, client, monkeypatch) -> None:
        monkeypatch.setattr(
            "app.BrandService.extract_from_description",
            MagicMock(return_value={
                "brand_name": "Acme",
                "brand_details_text": "Acme builds dashboards.",
                "audience": "Founders",
                "keywords": ["dashboards"],
                "suggested_traits": ["Direct"],
            }),
        )

        data = client.post("/api/extract-website", json={"description": "Acme builds dashboards."}).get_json()

        assert data["success"] is True
        assert data["brandName"] == "Acme"
        assert data["suggestedTraits"] == ["Direct"]


# ── Style guide routes ──────────────────────────────────────────────────────

BRAND_BODY = {
    "brandDetails": {
        "name": "Acme",
        "brandDetailsDescription": "Acme builds dashboards for startup founders.",
        "audience": "Founders",
    },
    "selectedTraits": ["Direct", {"name": "Curious"}],
}


class TestStyleGuideRoutes:
    def test_preview_requires_brand_details(self, client) -> None:
        assert client.post("/api/preview", json={}).status_code == 400

    def test_preview_validates_brand(self, client) -> None:
        resp = client.post("/api/preview", json={"brandDetails": {"name": "Acme"}})
        assert resp.status_code == 400
        assert resp.get_json()["details"] == ["Brand description is required"]

    def test_preview(self, client, monkeypatch) -> None:
        generate = MagicMock(return_value="# Acme Style Guide")
        monkeypatch.setattr("app.StyleGuideService.generate_preview", generate)

        resp = client.post("/api/preview", json=BRAND_BODY, headers={"X-Client-Id": "client-1"})

        assert resp.status_code == 200
        assert resp.get_json()["preview"] == "# Acme Style Guide"
        brand = generate.call_args.args[0]
        assert brand["traits"] == ["Direct", "Curious"]
        assert generate.call_args.kwargs["client_id"] == "client-1"

    def test_preview_teaser(self, client, monkeypatch) -> None:
        monkeypatch.setattr(
            "app.StyleGuideService.generate_preview_teaser",
            MagicMock(return_value={"fullTraits": [], "nameOnlyTraits": [], "rules": ""}),
        )

        resp = client.post("/api/preview", json={**BRAND_BODY, "teaser": True})

        assert resp.get_json()["teaser"]["rules"] == ""

    def test_generate_rejects_bad_plan(self, client) -> None:
        resp = client.post("/api/generate-styleguide", json={**BRAND_BODY, "plan": "gold"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid plan: gold"

    def test_generate_requires_description(self, client) -> None:
        resp = client.post("/api/generate-styleguide", json={"brandDetails": {"name": "Acme"}})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Brand description is required"

    def test_generate_maps_generation_errors(self, client, monkeypatch) -> None:
        monkeypatch.setattr(
            "app.StyleGuideService.generate_style_guide",
            MagicMock(side_effect=GenerationError("Rate limit exceeded", ErrorKind.RATE_LIMIT)),
        )

        resp = client.post("/api/generate-styleguide", json=BRAND_BODY)

        assert resp.status_code == 429
        data = resp.get_json()
        assert data["error_kind"] == "rate_limit"
        assert data["can_retry"] is True

    def test_generate(self, client, monkeypatch) -> None:
        generate = MagicMock(return_value="# Guide")
        monkeypatch.setattr("app.StyleGuideService.generate_style_guide", generate)

        resp = client.post(
            "/api/generate-styleguide",
            json={**BRAND_BODY, "plan": "complete"},
            headers={"X-User-Id": "user-1"},
        )

        assert resp.get_json()["styleGuide"] == "# Guide"
        assert generate.call_args.kwargs["plan"] == "complete"
        assert generate.call_args.kwargs["user_id"] == "user-1"

    def test_rewrite_validation(self, client) -> None:
        resp = client.post("/api/rewrite-section", json={"currentContent": "Text"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Missing or invalid 'instruction' field"


class TestSavedGuides:
    def test_user_routes_require_user_header(self, client) -> None:
        assert client.post("/api/save-style-guide", json={"content": "# G"}).status_code == 401
        assert client.get("/api/load-style-guide?guideId=1").status_code == 401
        assert client.get("/api/style-guides").status_code == 401
        assert client.get("/api/user-subscription-tier").status_code == 401
        assert client.post("/api/expand-style-guide", json={"guideId": 1}).status_code == 401

    def test_save_load_and_limit(self, client) -> None:
        headers = {"X-User-Id": "user-1"}
        saved = client.post("/api/save-style-guide", json={"content": "# G", "brandName": "Acme"}, headers=headers)
        assert saved.status_code == 200
        guide_id = saved.get_json()["guide"]["guide_id"]

        loaded = client.get(f"/api/load-style-guide?guideId={guide_id}", headers=headers)
        assert loaded.get_json()["guide"]["title"] == "Acme Style Guide"

        second = client.post("/api/save-style-guide", json={"content": "# Two"}, headers=headers)
        assert second.status_code == 403

        listed = client.get("/api/style-guides", headers=headers).get_json()["guides"]
        assert [g["guide_id"] for g in listed] == [guide_id]

    def test_load_missing_guide(self, client) -> None:
        resp = client.get("/api/load-style-guide?guideId=999", headers={"X-User-Id": "user-1"})
        assert resp.status_code == 404

    def test_save_rejects_bad_guide_id(self, client) -> None:
        resp = client.post(
            "/api/save-style-guide", json={"content": "# G", "guideId": "abc"}, headers={"X-User-Id": "user-1"}
        )
        assert resp.status_code == 400

    def test_expand_requires_paid_tier(self, client, session) -> None:
        guide = make_style_guide(session, user_id="user-1", content_md="_Unlock to see Word List._")
        session.commit()

        resp = client.post("/api/expand-style-guide", json={"guideId": guide.guide_id}, headers={"X-User-Id": "user-1"})

        assert resp.status_code == 403

    def test_subscription_tier(self, client) -> None:
        resp = client.get("/api/user-subscription-tier", headers={"X-User-Id": "user-1"})
        assert resp.get_json() == {"tier": "starter"}


# ── Client state ────────────────────────────────────────────────────────────

class TestStateRoutes:
    def test_requires_client_header(self, client) -> None:
        assert client.get("/api/state/brandDetails").status_code == 400
        assert client.delete("/api/state").status_code == 400

    def test_round_trip(self, client) -> None:
        headers = {"X-Client-Id": "client-1"}
        assert client.get("/api/state/brandDetails", headers=headers).status_code == 404

        put = client.put("/api/state/brandDetails", json={"value": {"name": "Acme"}}, headers=headers)
        assert put.status_code == 200

        got = client.get("/api/state/brandDetails", headers=headers).get_json()
        assert got["value"] == {"name": "Acme"}

        assert client.delete("/api/state", headers=headers).get_json()["cleared"] == 1

    def test_unknown_key_and_missing_value(self, client) -> None:
        headers = {"X-Client-Id": "client-1"}
        assert client.put("/api/state/nope", json={"value": 1}, headers=headers).status_code == 400
        assert client.put("/api/state/brandDetails", json={}, headers=headers).status_code == 400


# ── Admin and blog ──────────────────────────────────────────────────────────

class TestAdmin:
    def test_login_without_configured_password(self, client, monkeypatch) -> None:
        monkeypatch.setattr("config.ADMIN_BLOG_PASSWORD", "")
        resp = client.post("/api/admin/login", json={"password": "x"})
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "Admin password not configured"

    def test_wrong_password(self, client, monkeypatch) -> None:
        monkeypatch.setattr("config.ADMIN_BLOG_PASSWORD", "letmein")
        assert client.post("/api/admin/login", json={"password": "nope"}).status_code == 401

    def test_admin_routes_require_login(self, client) -> None:
        resp = client.post("/api/blog/generate", json={"topic": "brand voice"})
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Unauthorized - Please log in"
        assert client.delete("/api/blog/anything").status_code == 401

    def test_logout(self, admin_client) -> None:
        admin_client.post("/api/admin/logout")
        assert admin_client.patch("/api/blog/a", json={"action": "publish"}).status_code == 401


class TestBlogRoutes:
    def test_public_list_hides_drafts(self, client, session) -> None:
        make_blog_post(session, slug="live")
        make_blog_post(session, slug="draft", is_published=False)
        session.commit()

        data = client.get("/api/blog?published=false").get_json()

        assert [p["slug"] for p in data["posts"]] == ["live"]
        assert data["pagination"]["totalPages"] == 1
        assert client.get("/api/blog/draft").status_code == 404

    def test_admin_sees_drafts(self, admin_client, session) -> None:
        make_blog_post(session, slug="draft", is_published=False)
        session.commit()

        assert admin_client.get("/api/blog?published=false").get_json()["pagination"]["total"] == 1
        assert admin_client.get("/api/blog/draft").status_code == 200

    def test_bad_pagination_args(self, client) -> None:
        assert client.get("/api/blog?page=two").status_code == 400

    def test_generate_created(self, admin_client, monkeypatch) -> None:
        generate = MagicMock(return_value={"slug": "brand-voice"})
        monkeypatch.setattr("app.BlogService.generate_post", generate)

        resp = admin_client.post("/api/blog/generate", json={"topic": "brand voice", "keywords": ["tone"]})

        assert resp.status_code == 201
        assert generate.call_args.args == ("brand voice", ["tone"])
        assert generate.call_args.kwargs["publish"] is True

    def test_generate_duplicate_slug(self, admin_client, monkeypatch) -> None:
        monkeypatch.setattr("app.BlogService.generate_post", MagicMock(side_effect=DuplicateSlugError("brand-voice")))

        resp = admin_client.post("/api/blog/generate", json={"topic": "brand voice"})

        assert resp.status_code == 409
        assert resp.get_json()["error"] == "A post with this slug already exists"

    def test_generate_missing_topic(self, admin_client) -> None:
        resp = admin_client.post("/api/blog/generate", json={"keywords": []})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Missing required field: topic"

    def test_update_with_non_string_content_is_bad_request(self, admin_client, session) -> None:
        make_blog_post(session, slug="post")
        session.commit()

        resp = admin_client.put("/api/blog/post", json={"content": 123})

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Field 'content' must be a string"

    def test_update_publish_delete(self, admin_client, session) -> None:
        make_blog_post(session, slug="post", is_published=False)
        session.commit()

        updated = admin_client.put("/api/blog/post", json={"title": "New title"})
        assert updated.get_json()["post"]["title"] == "New title"

        published = admin_client.patch("/api/blog/post", json={"action": "publish"})
        assert published.get_json()["post"]["is_published"] is True
        assert admin_client.patch("/api/blog/post", json={"action": "archive"}).status_code == 400

        assert admin_client.delete("/api/blog/post").status_code == 200
        assert admin_client.delete("/api/blog/post").status_code == 404
