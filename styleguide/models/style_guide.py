"""StyleGuide model: a saved, user-owned style guide document."""

import json
import time
from enum import Enum
from typing import TypedDict

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class PlanType(str, Enum):
    STYLE_GUIDE = "style_guide"
    CORE = "core"
    COMPLETE = "complete"


class StyleGuideMeta(TypedDict, total=False):
    """Brand inputs stored in StyleGuide.meta_json so a guide can be regenerated."""
    brand_details: dict[str, object]
    selected_traits: list[object]


class StyleGuide(Base):
    """A generated style guide saved against a user id."""

    __tablename__ = "style_guides"

    guide_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    brand_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plan_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=PlanType.STYLE_GUIDE.value
    )
    english_variant: Mapped[str] = mapped_column(String(16), nullable=False, default="american")
    content_md: Mapped[str] = mapped_column(Text, nullable=False)
    meta_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: int(time.time())
    )
    updated_at: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: int(time.time())
    )

    def get_meta(self) -> StyleGuideMeta:
        if not self.meta_json:
            return StyleGuideMeta()
        try:
            data = json.loads(self.meta_json)
        except (json.JSONDecodeError, TypeError):
            return StyleGuideMeta()
        if not isinstance(data, dict):
            return StyleGuideMeta()
        return StyleGuideMeta(
            **{k: v for k, v in data.items() if k in ("brand_details", "selected_traits")}
        )

    def set_meta(self, meta: StyleGuideMeta) -> None:
        self.meta_json = json.dumps(dict(meta))

    def __repr__(self) -> str:
        return f"<StyleGuide {self.guide_id} user={self.user_id} plan={self.plan_type}>"
