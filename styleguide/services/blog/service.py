"""Service for blog posts: generation, listing and admin edits."""

import logging
import time
from typing import TypedDict

from constants import (
    BLOG_AUTHOR_IMAGE,
    BLOG_AUTHOR_NAME,
    BLOG_CATEGORIES,
    BLOG_DEFAULT_CATEGORY,
    BLOG_PAGE_SIZE_DEFAULT,
    BLOG_PAGE_SIZE_MAX,
)
from styleguide.db import get_default_adapter
from styleguide.db_managers import BlogManager
from styleguide.models import BlogPost, BlogPostMeta
from styleguide.services.blog.blog_builder import build_blog_draft
from styleguide.utils.text import reading_time, slugify, word_count

logger = logging.getLogger(__name__)

# Fields an admin may change with update_post.
EDITABLE_FIELDS = ("title", "content", "excerpt", "category", "keywords", "author_name", "author_image")
_TEXT_FIELDS = ("title", "content", "excerpt", "author_name", "author_image")
_REQUIRED_TEXT_FIELDS = ("title", "content", "author_name")


def _validate_changes(changes: dict[str, object]) -> None:
    for field in _TEXT_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        if value is None and field == "author_image":
            continue
        if not isinstance(value, str):
            raise ValueError(f"Field '{field}' must be a string")
        if field in _REQUIRED_TEXT_FIELDS and not value.strip():
            raise ValueError(f"Field '{field}' cannot be empty")
    if "keywords" in changes and not isinstance(changes["keywords"], list):
        raise ValueError("Field 'keywords' must be a list")


class DuplicateSlugError(ValueError):
    """A post with the same slug already exists."""

    def __init__(self, slug: str):
        super().__init__("A post with this slug already exists")
        self.slug = slug


class BlogPostRecord(TypedDict):
    post_id: int
    slug: str
    title: str
    content: str
    excerpt: str
    category: str
    keywords: list[str]
    author_name: str
    author_image: str | None
    word_count: int
    reading_time: int
    is_published: bool
    published_at: int | None
    created_at: int
    updated_at: int


class Pagination(TypedDict):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class BlogPage(TypedDict):
    posts: list[BlogPostRecord]
    pagination: Pagination


def _to_record(post: BlogPost) -> BlogPostRecord:
    return BlogPostRecord(
        post_id=post.post_id,
        slug=post.slug,
        title=post.title,
        content=post.content,
        excerpt=post.excerpt,
        category=post.category,
        keywords=post.keywords,
        author_name=post.author_name,
        author_image=post.author_image,
        word_count=post.word_count,
        reading_time=post.reading_time,
        is_published=post.is_published,
        published_at=post.published_at,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _require(post: BlogPost | None, slug: str) -> BlogPost:
    if post is None:
        raise ValueError(f"Blog post not found: {slug}")
    return post


def _apply_publish(post: BlogPost, publish: bool, now: int) -> None:
    post.is_published = publish
    if publish and post.published_at is None:
        post.published_at = now


class BlogService:
    """Blog post operations."""

    @staticmethod
    def generate_post(
        topic: str,
        keywords: list[str] | None = None,
        *,
        category: str | None = None,
        publish: bool = True,
        use_research: bool = True,
    ) -> BlogPostRecord:
        """
        Generate and store a post. Raises DuplicateSlugError before anything is
        written when the title's slug is taken; GenerationError propagates.
        """
        if not isinstance(topic, str) or not topic.strip():
            raise ValueError("Missing required field: topic")
        keywords = [k.strip() for k in keywords or [] if isinstance(k, str) and k.strip()]

        adapter = get_default_adapter()
        with adapter.session() as session:
            internal_links = [
                {"title": p.title, "slug": p.slug}
                for p in BlogManager(session).list_page(page=1, limit=5, published=True)[0]
            ]

        draft = build_blog_draft(
            topic,
            keywords,
            category=category,
            internal_links=internal_links or None,
            use_research=use_research,
        )
        slug = slugify(draft["title"])
        words = word_count(draft["content"])
        now = int(time.time())

        with adapter.session() as session:
            manager = BlogManager(session)
            if manager.slug_exists(slug):
                raise DuplicateSlugError(slug)
            post = BlogPost(
                slug=slug,
                title=draft["title"],
                content=draft["content"],
                excerpt=draft["excerpt"],
                category=draft["category"],
                author_name=BLOG_AUTHOR_NAME,
                author_image=BLOG_AUTHOR_IMAGE,
                word_count=words,
                reading_time=reading_time(words),
                is_published=publish,
                published_at=now if publish else None,
                created_at=now,
                updated_at=now,
            )
            post.set_meta(BlogPostMeta(
                keywords=draft["keywords"],
                research_urls=draft["research_urls"],
                includes_template=draft["includes_template"],
            ))
            manager.add(post)
            logger.info("Created blog post %s (%d words, published=%s)", slug, words, publish)
            return _to_record(post)

    @staticmethod
    def list_posts(
        *,
        page: int = 1,
        limit: int = BLOG_PAGE_SIZE_DEFAULT,
        category: str | None = None,
        published_only: bool = True,
    ) -> BlogPage:
        page = max(1, page)
        limit = min(max(1, limit), BLOG_PAGE_SIZE_MAX)
        adapter = get_default_adapter()
        with adapter.session() as session:
            posts, total = BlogManager(session).list_page(
                page=page,
                limit=limit,
                category=category or None,
                published=True if published_only else None,
            )
            total_pages = -(-total // limit)
            return BlogPage(
                posts=[_to_record(p) for p in posts],
                pagination=Pagination(
                    page=page,
                    limit=limit,
                    total=total,
                    total_pages=total_pages,
                    has_next=page < total_pages,
                    has_prev=page > 1,
                ),
            )

    @staticmethod
    def get_post(slug: str, *, include_unpublished: bool = False) -> BlogPostRecord:
        adapter = get_default_adapter()
        with adapter.session() as session:
            post = BlogManager(session).get_by_slug(slug)
            if post is not None and not post.is_published and not include_unpublished:
                post = None
            return _to_record(_require(post, slug))

    @staticmethod
    def update_post(slug: str, changes: dict[str, object]) -> BlogPostRecord:
        _validate_changes(changes)
        adapter = get_default_adapter()
        with adapter.session() as session:
            post = _require(BlogManager(session).get_by_slug(slug), slug)
            now = int(time.time())
            for field in EDITABLE_FIELDS:
                if field not in changes:
                    continue
                value = changes[field]
                if field == "keywords":
                    meta = post.get_meta()
                    meta["keywords"] = [str(k) for k in value] if isinstance(value, list) else []
                    post.set_meta(meta)
                elif field == "category":
                    post.category = value if value in BLOG_CATEGORIES else BLOG_DEFAULT_CATEGORY
                else:
                    setattr(post, field, value)
            if "content" in changes:
                post.word_count = word_count(post.content)
                post.reading_time = reading_time(post.word_count)
            if "is_published" in changes:
                _apply_publish(post, bool(changes["is_published"]), now)
            post.updated_at = now
            session.flush()
            return _to_record(post)

    @staticmethod
    def set_published(slug: str, action: str) -> BlogPostRecord:
        if action not in ("publish", "unpublish"):
            raise ValueError('Invalid action. Must be "publish" or "unpublish"')
        adapter = get_default_adapter()
        with adapter.session() as session:
            post = _require(BlogManager(session).get_by_slug(slug), slug)
            now = int(time.time())
            _apply_publish(post, action == "publish", now)
            post.updated_at = now
            session.flush()
            return _to_record(post)

    @staticmethod
    def delete_post(slug: str) -> None:
        adapter = get_default_adapter()
        with adapter.session() as session:
            manager = BlogManager(session)
            manager.delete(_require(manager.get_by_slug(slug), slug))
        logger.info("Deleted blog post %s", slug)
