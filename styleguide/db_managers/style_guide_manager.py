"""Manager for StyleGuide: CRUD using a DB session."""

import time

from sqlalchemy.orm import Session

from styleguide.models import StyleGuide, StyleGuideMeta


class StyleGuideManager:
    """Provides access to saved style guides. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    def get_owned(self, guide_id: int, user_id: str) -> StyleGuide | None:
        return (
            self._session.query(StyleGuide)
            .filter(StyleGuide.guide_id == guide_id, StyleGuide.user_id == user_id)
            .first()
        )

    def count_for_user(self, user_id: str) -> int:
        return self._session.query(StyleGuide).filter(StyleGuide.user_id == user_id).count()

    def list_for_user(self, user_id: str) -> list[StyleGuide]:
        return (
            self._session.query(StyleGuide)
            .filter(StyleGuide.user_id == user_id)
            .order_by(StyleGuide.updated_at.desc(), StyleGuide.guide_id.desc())
            .all()
        )

    def add(
        self,
        *,
        user_id: str,
        title: str,
        brand_name: str | None,
        plan_type: str,
        content_md: str,
        english_variant: str,
        meta: StyleGuideMeta,
    ) -> StyleGuide:
        now = int(time.time())
        guide = StyleGuide(
            user_id=user_id,
            title=title,
            brand_name=brand_name,
            plan_type=plan_type,
            content_md=content_md,
            english_variant=english_variant,
            created_at=now,
            updated_at=now,
        )
        guide.set_meta(meta)
        self._session.add(guide)
        self._session.flush()
        return guide

    def update(
        self,
        guide: StyleGuide,
        *,
        title: str,
        brand_name: str | None,
        plan_type: str,
        content_md: str,
        english_variant: str,
        meta: StyleGuideMeta,
    ) -> StyleGuide:
        guide.title = title
        guide.brand_name = brand_name
        guide.plan_type = plan_type
        guide.content_md = content_md
        guide.english_variant = english_variant
        guide.set_meta(meta)
        guide.updated_at = int(time.time())
        self._session.flush()
        return guide
