"""Service for style guide generation, rewriting and saved guides."""

import json
import logging
from typing import TypedDict

from constants import GUIDE_TITLE_MAX_LENGTH, LLM_MODEL_REASONING
from styleguide.db import get_default_adapter
from styleguide.db_managers import ProfileManager, StyleGuideManager
from styleguide.models import (
    BrandDetails,
    PlanType,
    StyleGuide,
    StyleGuideMeta,
    SubscriptionTier,
    normalize_brand_details,
)
from styleguide.prompts import REWRITE_SYSTEM_PROMPT
from styleguide.prompts.rewrite_section import build_rewrite_prompt
from styleguide.services.profile.service import guide_limit, normalize_tier
from styleguide.services.state.repository import PreviewTraitsCache
from styleguide.services.state.service import StateService
from styleguide.services.style_guide.orchestrator import (
    has_locked_sections,
    render_full_guide_from_preview,
    render_preview_style_guide,
    render_style_guide,
)
from styleguide.services.style_guide.style_rules import generate_preview_rules
from styleguide.services.style_guide.voice_traits import generate_brand_voice_traits_preview
from styleguide.utils.errors import GenerationError, classify_error
from styleguide.utils.openai_client import GenerationRequest, generate
from styleguide.utils.text import truncate

logger = logging.getLogger(__name__)

REWRITE_SCOPES = ("section", "selection", "document")
_EXPAND_TIERS = (SubscriptionTier.PRO.value, SubscriptionTier.AGENCY.value)


class GuideRecord(TypedDict):
    guide_id: int
    title: str
    brand_name: str | None
    plan_type: str
    english_variant: str
    content: str
    meta: StyleGuideMeta
    created_at: int
    updated_at: int


class GuideSummary(TypedDict):
    guide_id: int
    title: str
    brand_name: str | None
    plan_type: str
    updated_at: int


def _to_record(guide: StyleGuide) -> GuideRecord:
    return GuideRecord(
        guide_id=guide.guide_id,
        title=guide.title,
        brand_name=guide.brand_name,
        plan_type=guide.plan_type,
        english_variant=guide.english_variant,
        content=guide.content_md,
        meta=guide.get_meta(),
        created_at=guide.created_at,
        updated_at=guide.updated_at,
    )


def _plan_value(plan: str | None) -> str:
    valid = {p.value for p in PlanType}
    return plan if plan in valid else PlanType.STYLE_GUIDE.value


def _guide_title(title: str | None, brand_name: str | None) -> str:
    if title and title.strip():
        resolved = title.strip()
    elif brand_name and brand_name.strip():
        resolved = f"{brand_name.strip()} Style Guide"
    else:
        resolved = "Untitled Style Guide"
    return truncate(resolved, GUIDE_TITLE_MAX_LENGTH)


def _traits_cache() -> PreviewTraitsCache:
    return PreviewTraitsCache(StateService.repository)


class StyleGuideService:
    """Style guide operations: generation, rewrites and saved guides."""

    @staticmethod
    def generate_preview(brand: BrandDetails, *, client_id: str | None = None) -> str:
        return render_preview_style_guide(
            brand,
            client_id=client_id,
            traits_cache=_traits_cache() if client_id else None,
        )

    @staticmethod
    def generate_preview_teaser(brand: BrandDetails) -> dict[str, object]:
        """Teaser payload: one trait fully written, the next ones by name, and a few rules."""
        teaser = json.loads(generate_brand_voice_traits_preview(brand))
        try:
            teaser["rules"] = generate_preview_rules(brand)
        except GenerationError as exc:
            logger.warning("Preview rules failed for %s: %s", brand["name"], exc)
            teaser["rules"] = ""
        return teaser

    @staticmethod
    def generate_style_guide(
        brand: BrandDetails,
        *,
        plan: str = "core",
        preview_content: str | None = None,
        user_id: str | None = None,
        user_email: str | None = None,
        client_id: str | None = None,
    ) -> str:
        """
        Generate a full guide. A preview that still has locked sections is
        completed in place; otherwise the whole guide is generated. When a user
        id is given the result is saved, and a failed save is only logged.
        """
        plan = "complete" if plan == "complete" else "core"
        if preview_content and has_locked_sections(preview_content):
            content = render_full_guide_from_preview(
                preview_content, brand, plan=plan, user_email=user_email
            )
        else:
            content = render_style_guide(
                brand,
                plan=plan,
                use_ai_content=True,
                is_preview=False,
                user_email=user_email,
                client_id=client_id,
                traits_cache=_traits_cache() if client_id else None,
            )

        if user_id:
            try:
                StyleGuideService.save_guide(
                    user_id,
                    content=content,
                    brand_name=brand["name"],
                    plan_type=plan,
                    english_variant=brand["english_variant"],
                    brand_details=dict(brand),
                    selected_traits=list(brand["traits"]),
                )
            except Exception:
                logger.exception("Auto-save of generated guide failed for user %s", user_id)
        return content

    @staticmethod
    def rewrite_section(
        *,
        instruction: str,
        current_content: str | None = None,
        scope: str = "section",
        selected_text: str | None = None,
        brand_name: str | None = None,
    ) -> str:
        if not isinstance(instruction, str) or not instruction.strip():
            raise ValueError("Missing or invalid 'instruction' field")
        scope = scope if scope in REWRITE_SCOPES else "section"
        if scope == "selection" and isinstance(selected_text, str) and selected_text.strip():
            content = selected_text
        elif isinstance(current_content, str) and current_content.strip():
            content = current_content
        else:
            raise ValueError("Missing or invalid 'currentContent' field")

        result = generate(GenerationRequest(
            system_prompt=REWRITE_SYSTEM_PROMPT,
            user_prompt=build_rewrite_prompt(
                instruction=instruction.strip(),
                content=content,
                scope=scope,
                brand_name=brand_name,
            ),
            response_format="markdown",
            max_tokens=2000,
            model=LLM_MODEL_REASONING,
            label=f"rewrite_{scope}",
        ))
        if not result["success"] or not result["content"].strip():
            logger.error("Rewrite failed (%s): %s", scope, result["error"])
            raise GenerationError("Failed to rewrite section", classify_error(result["error"]))
        return result["content"].strip()

    @staticmethod
    def save_guide(
        user_id: str,
        *,
        content: str,
        guide_id: int | None = None,
        title: str | None = None,
        brand_name: str | None = None,
        plan_type: str | None = None,
        english_variant: str | None = None,
        brand_details: dict[str, object] | None = None,
        selected_traits: list[object] | None = None,
    ) -> GuideRecord:
        """Create a guide (within the tier's limit) or update one the user owns."""
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Missing content")
        meta = StyleGuideMeta(brand_details=brand_details or {}, selected_traits=selected_traits or [])
        fields = {
            "title": _guide_title(title, brand_name),
            "brand_name": brand_name or None,
            "plan_type": _plan_value(plan_type),
            "content_md": content,
            "english_variant": (english_variant or "american").lower(),
            "meta": meta,
        }
        adapter = get_default_adapter()
        with adapter.session() as session:
            manager = StyleGuideManager(session)
            if guide_id is not None:
                guide = manager.get_owned(guide_id, user_id)
                if guide is None:
                    raise ValueError(f"Guide not found: {guide_id}")
                return _to_record(manager.update(guide, **fields))

            profile = ProfileManager(session).get(user_id)
            tier = normalize_tier(profile.subscription_tier if profile else None)
            limit = guide_limit(tier)
            if manager.count_for_user(user_id) >= limit:
                raise PermissionError(
                    f"Guide limit reached: the {tier} plan allows {limit} saved guide(s)"
                )
            return _to_record(manager.add(user_id=user_id, **fields))

    @staticmethod
    def load_guide(user_id: str, guide_id: int) -> GuideRecord:
        adapter = get_default_adapter()
        with adapter.session() as session:
            guide = StyleGuideManager(session).get_owned(guide_id, user_id)
            if guide is None:
                raise ValueError(f"Guide not found: {guide_id}")
            return _to_record(guide)

    @staticmethod
    def list_guides(user_id: str) -> list[GuideSummary]:
        adapter = get_default_adapter()
        with adapter.session() as session:
            return [
                GuideSummary(
                    guide_id=g.guide_id,
                    title=g.title,
                    brand_name=g.brand_name,
                    plan_type=g.plan_type,
                    updated_at=g.updated_at,
                )
                for g in StyleGuideManager(session).list_for_user(user_id)
            ]

    @staticmethod
    def expand_guide(user_id: str, guide_id: int, *, user_email: str | None = None) -> GuideRecord:
        """Fill the locked sections of a saved preview for pro and agency users."""
        adapter = get_default_adapter()
        with adapter.session() as session:
            guide = StyleGuideManager(session).get_owned(guide_id, user_id)
            if guide is None:
                raise ValueError(f"Guide not found: {guide_id}")
            profile = ProfileManager(session).get(user_id)
            tier = normalize_tier(profile.subscription_tier if profile else None)
            content = guide.content_md
            plan = "complete" if guide.plan_type == PlanType.COMPLETE.value else "core"
            meta = guide.get_meta()

        if tier not in _EXPAND_TIERS:
            raise PermissionError("Pro or Agency subscription required to expand guide")
        if not has_locked_sections(content):
            raise ValueError("Guide already has full content")
        raw_details = dict(meta.get("brand_details") or {})
        if meta.get("selected_traits") and not raw_details.get("traits"):
            raw_details["traits"] = meta["selected_traits"]
        brand = normalize_brand_details(raw_details)
        if not brand["description"]:
            raise ValueError("Brand details missing description; cannot generate sections")

        expanded = render_full_guide_from_preview(content, brand, plan=plan, user_email=user_email)

        with adapter.session() as session:
            manager = StyleGuideManager(session)
            guide = manager.get_owned(guide_id, user_id)
            if guide is None:
                raise ValueError(f"Guide not found: {guide_id}")
            guide = manager.update(
                guide,
                title=guide.title,
                brand_name=guide.brand_name,
                plan_type=guide.plan_type,
                content_md=expanded,
                english_variant=guide.english_variant,
                meta=guide.get_meta(),
            )
            return _to_record(guide)
