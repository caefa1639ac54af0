import logging
import time

from dotenv import load_dotenv

from flask import Flask, request, jsonify
from openai import OpenAI

load_dotenv()

import config
from styleguide.db import get_default_adapter
from styleguide.models import normalize_brand_details, trait_name
from styleguide.services import (
    BlogService,
    BrandService,
    DuplicateSlugError,
    ProfileService,
    StateService,
    StyleGuideService,
)
from styleguide.services.admin.auth import (
    AdminConfigError,
    admin_required,
    is_admin,
    login_admin,
    logout_admin,
    session_lifetime,
    verify_admin_password,
)
from styleguide.services.style_guide.traits import create_custom_trait, is_valid_custom_trait_name, list_traits
from styleguide.services.style_guide.validation import validate_brand_details, validate_input
from styleguide.utils.errors import GenerationError, error_details

app = Flask(__name__)
app.secret_key = config.FLASK_SECRET_KEY
app.permanent_session_lifetime = session_lifetime()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
db_adapter = get_default_adapter()
db_adapter.create_tables()
for migrated in db_adapter.migrate_tables():
    logger.info("Added missing column %s", migrated)

PLANS = ("core", "complete")
INVALID_TRAIT_MESSAGE = (
    "Trait names use letters, numbers, spaces and hyphens (up to 20 characters) "
    "and can't repeat a predefined trait"
)


def _user_id() -> str | None:
    return request.headers.get("X-User-Id", "").strip() or None


def _client_id() -> str | None:
    return request.headers.get("X-Client-Id", "").strip() or None


def _value_error(e: ValueError) -> tuple:
    msg = str(e)
    code = 404 if "not found" in msg.lower() else 400
    return jsonify({"success": False, "error": msg}), code


def _generation_error(e: GenerationError, message: str) -> tuple:
    details = error_details(e)
    return jsonify({
        "success": False,
        "message": message,
        "error": str(e),
        "error_kind": e.kind.value,
        "can_retry": details["can_retry"],
    }), e.http_status


def _brand_from_body(body: dict) -> dict:
    brand = normalize_brand_details(body.get("brandDetails") or {})
    selected = body.get("selectedTraits")
    if isinstance(selected, list) and selected:
        brand["traits"] = [n for n in (trait_name(t) for t in selected) if n]
    return brand


def _guide_id_arg(raw: object) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@app.route("/")
def health() -> tuple:
    logger.debug("Health check request received.")
    return jsonify({"status": "ok"}), 200


@app.route("/api/openai/health", methods=["GET"])
def openai_health() -> tuple:
    """Validate OpenAI SDK configuration."""
    try:
        client = OpenAI()
        model_count = len(list(client.models.list()))
        logger.info("OpenAI health ok. Models=%d", model_count)
        return jsonify({"status": "ok", "models": model_count}), 200
    except Exception as e:
        logger.exception("OpenAI health failed.")
        return jsonify({"status": "error", "error": str(e)}), 500


# ---------------------------------------------------------------------------
# Brand input
# ---------------------------------------------------------------------------

@app.route("/api/extract-website", methods=["POST"])
def extract_website() -> tuple:
    """
    Extract brand details from a website or a short description.

    JSON body: { "url": "example.com" } or { "description": "..." }
    """
    body = request.get_json(silent=True) or {}
    url = str(body.get("url") or "").strip()
    description = str(body.get("description") or "").strip()
    if not url and not description:
        logger.info("extract-website missing url and description.")
        return jsonify({
            "success": False,
            "message": "URL or description is required",
            "error": "Missing required field: url or description",
        }), 400

    try:
        if url:
            logger.info("Extracting brand from url: %s", url)
            result = BrandService.extract_from_url(url)
        else:
            logger.info("Extracting brand from description (%d chars)", len(description))
            result = BrandService.extract_from_description(description)
        return jsonify({
            "success": True,
            "brandName": result["brand_name"],
            "brandDetailsText": result["brand_details_text"],
            "audience": result["audience"],
            "keywords": result["keywords"],
            "suggestedTraits": result["suggested_traits"],
        }), 200
    except ValueError as e:
        return jsonify({"success": False, "message": str(e), "error": str(e)}), 400
    except GenerationError as e:
        logger.warning("extract-website generation failed: %s", e)
        return jsonify({
            "success": False,
            "message": str(e) if description and not url else "Failed to extract brand information",
            "error": str(e),
        }), 500
    except Exception as e:
        logger.exception("extract-website failed.")
        return jsonify({"success": False, "message": "Failed to extract brand information", "error": str(e)}), 500


@app.route("/api/validate-input", methods=["POST"])
def validate_landing_input() -> tuple:
    body = request.get_json(silent=True) or {}
    result = validate_input(str(body.get("input") or ""))
    return jsonify({
        "isValid": result["is_valid"],
        "cleanInput": result["clean_input"],
        "inputType": result["input_type"],
        "error": result["error"],
    }), 200


@app.route("/api/traits", methods=["GET"])
def traits_catalog() -> tuple:
    return jsonify({"traits": list_traits()}), 200


@app.route("/api/traits/validate", methods=["POST"])
def validate_custom_trait() -> tuple:
    body = request.get_json(silent=True) or {}
    name = str(body.get("name") or "")
    if not is_valid_custom_trait_name(name):
        return jsonify({"valid": False, "error": INVALID_TRAIT_MESSAGE}), 400
    return jsonify({"valid": True, "trait": create_custom_trait(name)}), 200


# ---------------------------------------------------------------------------
# Style guides
# ---------------------------------------------------------------------------

@app.route("/api/preview", methods=["POST"])
def preview() -> tuple:
    """
    Generate a preview guide (voice traits and audience; other sections locked).

    JSON body: { "brandDetails": {...}, "selectedTraits": [...], "teaser": false }
    """
    body = request.get_json(silent=True) or {}
    if not isinstance(body.get("brandDetails"), dict):
        return jsonify({"error": "Brand details are required"}), 400
    brand = _brand_from_body(body)
    errors = validate_brand_details(brand, require_audience=False)
    if errors:
        return jsonify({"error": "Invalid brand details", "details": errors}), 400

    started = time.monotonic()
    try:
        if body.get("teaser"):
            teaser = StyleGuideService.generate_preview_teaser(brand)
            return jsonify({"success": True, "teaser": teaser}), 200
        content = StyleGuideService.generate_preview(brand, client_id=_client_id())
        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info("Preview for %s generated in %dms", brand["name"], duration_ms)
        return jsonify({"success": True, "preview": content, "duration": f"{duration_ms}ms"}), 200
    except GenerationError as e:
        logger.warning("Preview generation failed: %s", e)
        return jsonify({"error": "Failed to generate preview", "details": str(e)}), e.http_status
    except Exception as e:
        logger.exception("preview failed.")
        return jsonify({"error": "Failed to generate preview", "details": str(e)}), 500


@app.route("/api/generate-styleguide", methods=["POST"])
def generate_styleguide() -> tuple:
    """
    Generate a full style guide.

    JSON body: { "brandDetails": {...}, "plan": "core" | "complete",
                 "previewContent": optional preview to complete, "userEmail": optional }
    """
    body = request.get_json(silent=True) or {}
    brand = _brand_from_body(body)
    if not brand["name"]:
        return jsonify({"success": False, "message": "Brand name is required", "error": "Missing name"}), 400
    if not brand["description"]:
        return jsonify({
            "success": False,
            "message": "Brand description is required",
            "error": "Missing description",
        }), 400
    plan = body.get("plan") or "core"
    if plan not in PLANS:
        return jsonify({
            "success": False,
            "message": "Plan must be either 'core' or 'complete'",
            "error": f"Invalid plan: {plan}",
        }), 400

    try:
        logger.info("Generating %s style guide for %s", plan, brand["name"])
        content = StyleGuideService.generate_style_guide(
            brand,
            plan=plan,
            preview_content=body.get("previewContent") or None,
            user_id=_user_id(),
            user_email=body.get("userEmail") or None,
            client_id=_client_id(),
        )
        return jsonify({
            "success": True,
            "message": "Style guide generated successfully",
            "styleGuide": content,
        }), 200
    except GenerationError as e:
        logger.warning("Style guide generation failed: %s", e)
        return _generation_error(e, "Failed to generate style guide")
    except Exception as e:
        logger.exception("generate-styleguide failed.")
        return jsonify({"success": False, "message": "Failed to generate style guide", "error": str(e)}), 500


@app.route("/api/expand-style-guide", methods=["POST"])
def expand_style_guide() -> tuple:
    """Fill the locked sections of a saved preview. JSON body: { "guideId": 1 }"""
    user_id = _user_id()
    if not user_id:
        return jsonify({"success": False, "error": "Unauthorized"}), 401
    body = request.get_json(silent=True) or {}
    guide_id = _guide_id_arg(body.get("guideId"))
    if guide_id is None:
        return jsonify({"success": False, "error": "Missing guideId"}), 400

    try:
        record = StyleGuideService.expand_guide(user_id, guide_id, user_email=body.get("userEmail") or None)
        return jsonify({"success": True, "content": record["content"]}), 200
    except PermissionError as e:
        return jsonify({"success": False, "error": str(e)}), 403
    except ValueError as e:
        return _value_error(e)
    except GenerationError as e:
        return _generation_error(e, "Failed to expand guide")
    except Exception as e:
        logger.exception("expand-style-guide failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/rewrite-section", methods=["POST"])
def rewrite_section() -> tuple:
    """
    Rewrite a section, a selection or the whole guide.

    JSON body: { "instruction": "...", "currentContent": "...", "brandName": "...",
                 "scope": "section" | "selection" | "document", "selectedText": "..." }
    """
    body = request.get_json(silent=True) or {}
    try:
        content = StyleGuideService.rewrite_section(
            instruction=body.get("instruction"),
            current_content=body.get("currentContent"),
            scope=body.get("scope") or "section",
            selected_text=body.get("selectedText"),
            brand_name=body.get("brandName"),
        )
        return jsonify({"success": True, "content": content}), 200
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400
    except GenerationError as e:
        return jsonify({"success": False, "error": "Failed to rewrite section", "details": str(e)}), 500
    except Exception as e:
        logger.exception("rewrite-section failed.")
        return jsonify({"success": False, "error": "Failed to rewrite section", "details": str(e)}), 500


@app.route("/api/save-style-guide", methods=["POST"])
def save_style_guide() -> tuple:
    user_id = _user_id()
    if not user_id:
        return jsonify({"success": False, "error": "Unauthorized"}), 401
    body = request.get_json(silent=True) or {}
    raw_guide_id = body.get("guideId")
    guide_id = _guide_id_arg(raw_guide_id) if raw_guide_id not in (None, "") else None
    if raw_guide_id not in (None, "") and guide_id is None:
        return jsonify({"success": False, "error": "Invalid guideId"}), 400

    try:
        record = StyleGuideService.save_guide(
            user_id,
            content=body.get("content"),
            guide_id=guide_id,
            title=body.get("title"),
            brand_name=body.get("brandName"),
            plan_type=body.get("planType"),
            english_variant=body.get("englishVariant"),
            brand_details=body.get("brandDetails") if isinstance(body.get("brandDetails"), dict) else None,
            selected_traits=body.get("selectedTraits") if isinstance(body.get("selectedTraits"), list) else None,
        )
        logger.info("Saved guide %d for user %s", record["guide_id"], user_id)
        return jsonify({"success": True, "guide": record}), 200
    except PermissionError as e:
        return jsonify({"success": False, "error": str(e)}), 403
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("save-style-guide failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/load-style-guide", methods=["GET"])
def load_style_guide() -> tuple:
    user_id = _user_id()
    if not user_id:
        return jsonify({"success": False, "error": "Unauthorized"}), 401
    guide_id = _guide_id_arg(request.args.get("guideId"))
    if guide_id is None:
        return jsonify({"success": False, "error": "Missing or invalid guideId"}), 400
    try:
        return jsonify({"success": True, "guide": StyleGuideService.load_guide(user_id, guide_id)}), 200
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("load-style-guide failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/style-guides", methods=["GET"])
def list_style_guides() -> tuple:
    user_id = _user_id()
    if not user_id:
        return jsonify({"success": False, "error": "Unauthorized"}), 401
    try:
        return jsonify({"success": True, "guides": StyleGuideService.list_guides(user_id)}), 200
    except Exception as e:
        logger.exception("list style guides failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/user-subscription-tier", methods=["GET"])
def user_subscription_tier() -> tuple:
    user_id = _user_id()
    if not user_id:
        return jsonify({"success": False, "error": "Unauthorized"}), 401
    try:
        return jsonify({"tier": ProfileService.get_subscription_tier(user_id)}), 200
    except Exception as e:
        logger.exception("user-subscription-tier failed.")
        return jsonify({"success": False, "error": str(e)}), 500


# ---------------------------------------------------------------------------
# Client state
# ---------------------------------------------------------------------------

@app.route("/api/state/<string:key>", methods=["GET", "PUT", "DELETE"])
def client_state(key: str) -> tuple:
    client_id = _client_id()
    if not client_id:
        return jsonify({"success": False, "error": "Missing X-Client-Id header"}), 400
    try:
        if request.method == "GET":
            entry = StateService.get(client_id, key)
            return jsonify({"key": key, "value": entry["value"], "savedAt": entry["saved_at"]}), 200
        if request.method == "PUT":
            body = request.get_json(silent=True) or {}
            if "value" not in body:
                return jsonify({"success": False, "error": "Missing 'value' in JSON body"}), 400
            entry = StateService.set(client_id, key, body["value"])
            return jsonify({"success": True, "key": key, "savedAt": entry["saved_at"]}), 200
        return jsonify({"success": True, "cleared": StateService.clear(client_id, key)}), 200
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("client state %s failed.", request.method)
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/state", methods=["DELETE"])
def clear_client_state() -> tuple:
    client_id = _client_id()
    if not client_id:
        return jsonify({"success": False, "error": "Missing X-Client-Id header"}), 400
    try:
        return jsonify({"success": True, "cleared": StateService.clear_all(client_id)}), 200
    except Exception as e:
        logger.exception("clear client state failed.")
        return jsonify({"success": False, "error": str(e)}), 500


# ---------------------------------------------------------------------------
# Admin and blog
# ---------------------------------------------------------------------------

@app.route("/api/admin/login", methods=["POST"])
def admin_login() -> tuple:
    body = request.get_json(silent=True) or {}
    try:
        valid = verify_admin_password(body.get("password"))
    except AdminConfigError as e:
        logger.error("Admin login attempted without a configured password.")
        return jsonify({"success": False, "error": str(e)}), 500
    if not valid:
        logger.info("Admin login rejected.")
        return jsonify({"success": False, "error": "Invalid password"}), 401
    login_admin()
    return jsonify({"success": True}), 200


@app.route("/api/admin/logout", methods=["POST"])
def admin_logout() -> tuple:
    logout_admin()
    return jsonify({"success": True}), 200


@app.route("/api/blog", methods=["GET"])
def list_blog_posts() -> tuple:
    """
    Paginated posts, newest first.

    Query params: page, limit, category, published ("false" lists drafts too; admin only)
    """
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "10"))
    except ValueError:
        return jsonify({"success": False, "error": "page and limit must be integers"}), 400
    published_only = request.args.get("published", "").lower() != "false" or not is_admin()
    try:
        result = BlogService.list_posts(
            page=page,
            limit=limit,
            category=request.args.get("category") or None,
            published_only=published_only,
        )
        pagination = result["pagination"]
        return jsonify({
            "posts": result["posts"],
            "pagination": {
                "page": pagination["page"],
                "limit": pagination["limit"],
                "total": pagination["total"],
                "totalPages": pagination["total_pages"],
                "hasNext": pagination["has_next"],
                "hasPrev": pagination["has_prev"],
            },
        }), 200
    except Exception as e:
        logger.exception("list blog posts failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/blog/generate", methods=["POST"])
@admin_required
def generate_blog_post() -> tuple:
    """
    Research, outline and write a post.

    JSON body: { "topic": "...", "keywords": [...], "category": optional, "publish": true }
    """
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({"success": False, "error": "Invalid JSON in request body"}), 400
    keywords = body.get("keywords") if isinstance(body.get("keywords"), list) else []
    try:
        post = BlogService.generate_post(
            body.get("topic"),
            keywords,
            category=body.get("category") or None,
            publish=body.get("publish") is not False,
        )
        return jsonify({"success": True, "post": post}), 201
    except DuplicateSlugError as e:
        return jsonify({"success": False, "error": str(e)}), 409
    except ValueError as e:
        return _value_error(e)
    except GenerationError as e:
        logger.warning("Blog generation failed: %s", e)
        return jsonify({"success": False, "error": str(e), "error_kind": e.kind.value}), e.http_status
    except Exception as e:
        logger.exception("blog generate failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/blog/<string:slug>", methods=["GET"])
def get_blog_post(slug: str) -> tuple:
    try:
        return jsonify({"post": BlogService.get_post(slug, include_unpublished=is_admin())}), 200
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("get blog post failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/blog/<string:slug>", methods=["PUT"])
@admin_required
def update_blog_post(slug: str) -> tuple:
    body = request.get_json(silent=True) or {}
    try:
        return jsonify({"success": True, "post": BlogService.update_post(slug, body)}), 200
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("update blog post failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/blog/<string:slug>", methods=["PATCH"])
@admin_required
def publish_blog_post(slug: str) -> tuple:
    body = request.get_json(silent=True) or {}
    try:
        return jsonify({"success": True, "post": BlogService.set_published(slug, body.get("action"))}), 200
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("publish blog post failed.")
        return jsonify({"success": False, "error": str(e)}), 500


@app.route("/api/blog/<string:slug>", methods=["DELETE"])
@admin_required
def delete_blog_post(slug: str) -> tuple:
    try:
        BlogService.delete_post(slug)
        return jsonify({"success": True, "message": "Blog post deleted"}), 200
    except ValueError as e:
        return _value_error(e)
    except Exception as e:
        logger.exception("delete blog post failed.")
        return jsonify({"success": False, "error": str(e)}), 500


if __name__ == "__main__":
    app.run(debug=True)
