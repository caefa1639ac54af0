"""BlogPost model: admin-generated articles."""

import json
import time
from typing import TypedDict

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class BlogPostMeta(TypedDict, total=False):
    keywords: list[str]
    research_urls: list[str]
    includes_template: bool


class BlogPost(Base):
    """A blog article. The slug is the public identifier and is unique."""

    __tablename__ = "blog_posts"

    post_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    author_name: Mapped[str] = mapped_column(String(128), nullable=False)
    author_image: Mapped[str | None] = mapped_column(String(255), nullable=True)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reading_time: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    published_at: Mapped[int | None] = mapped_column(Integer, nullable=True)
    meta_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: int(time.time())
    )
    updated_at: Mapped[int] = mapped_column(
        Integer, nullable=False, default=lambda: int(time.time())
    )

    def get_meta(self) -> BlogPostMeta:
        if not self.meta_json:
            return BlogPostMeta()
        try:
            data = json.loads(self.meta_json)
        except (json.JSONDecodeError, TypeError):
            return BlogPostMeta()
        if not isinstance(data, dict):
            return BlogPostMeta()
        return BlogPostMeta(
            **{k: v for k, v in data.items() if k in ("keywords", "research_urls", "includes_template")}
        )

    def set_meta(self, meta: BlogPostMeta) -> None:
        self.meta_json = json.dumps(dict(meta))

    @property
    def keywords(self) -> list[str]:
        return list(self.get_meta().get("keywords") or [])

    def __repr__(self) -> str:
        return f"<BlogPost {self.post_id} slug={self.slug!r} published={self.is_published}>"
