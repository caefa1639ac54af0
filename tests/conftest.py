"""Shared pytest fixtures for style guide and blog tests."""

import json
import os

# app.py opens the default adapter at import time; keep it off the real data dir.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import re
import time
import uuid
from contextlib import contextmanager
from typing import Callable
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from styleguide.models import BlogPost, BlogPostMeta, BrandDetails, Profile, StyleGuide, StyleGuideMeta
from styleguide.models.base import Base


# ---------------------------------------------------------------------------
# In-memory SQLite engine + session factory
#
# A named shared-cache in-memory database lets every connection (including
# those opened by run_parallel worker threads) see the same data. Each test
# gets a unique name so tests stay isolated from each other.
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def engine():
    db_name = f"test_{uuid.uuid4().hex}"
    url = f"file:{db_name}?mode=memory&cache=shared"
    eng = create_engine(
        f"sqlite:///{url}",
        connect_args={"check_same_thread": False, "uri": True},
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture(scope="function")
def _session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def session(_session_factory) -> Session:
    """Main test session; closed (not rolled back) so rows written by services stay visible."""
    s = _session_factory()
    yield s
    s.close()


# ---------------------------------------------------------------------------
# DB adapter mock backed by the shared in-memory engine
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_adapter(_session_factory, monkeypatch):
    """
    Patch get_default_adapter() in every module that calls it. Each
    .session() call opens a new session from the shared factory, committing
    on exit and rolling back on error like SQLiteAdapter does.
    """
    adapter = MagicMock()

    @contextmanager
    def thread_safe_session():
        s = _session_factory()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    adapter.session.side_effect = thread_safe_session

    for module_path in [
        "styleguide.services.state.repository",
        "styleguide.services.style_guide.service",
        "styleguide.services.profile.service",
        "styleguide.services.blog.service",
    ]:
        monkeypatch.setattr(f"{module_path}.get_default_adapter", lambda: adapter)

    return adapter


@pytest.fixture(autouse=True)
def no_retry_delays(monkeypatch):
    """Retries still happen, without sleeping between attempts."""
    monkeypatch.setattr("styleguide.utils.openai_client.LLM_RETRY_DELAY_SECONDS", 0)
    monkeypatch.setattr("styleguide.services.style_guide.orchestrator.SECTION_RETRY_DELAY_SECONDS", 0)
    monkeypatch.setattr("styleguide.services.blog.research.RESEARCH_RETRY_DELAY_SECONDS", 0)


# ---------------------------------------------------------------------------
# Model factory helpers
# ---------------------------------------------------------------------------

def make_brand(**overrides) -> BrandDetails:
    brand = BrandDetails(
        name="Acme Analytics",
        description="Acme Analytics builds dashboards that help startup founders track revenue.",
        audience="Startup founders and early finance hires",
        traits=["Direct", "Warm", "Witty"],
        keywords=["dashboards", "revenue"],
        products_services=[],
        formality_level="",
        reading_level="",
        english_variant="american",
    )
    brand.update(overrides)
    return brand


def make_style_guide(
    session: Session,
    *,
    user_id: str = "user-1",
    title: str = "Acme Analytics Style Guide",
    content_md: str = "# Acme Analytics Style Guide\n\n## Brand Voice\n\nDirect.",
    plan_type: str = "core",
    meta: StyleGuideMeta | None = None,
) -> StyleGuide:
    now = int(time.time())
    guide = StyleGuide(
        user_id=user_id,
        title=title,
        brand_name="Acme Analytics",
        plan_type=plan_type,
        english_variant="american",
        content_md=content_md,
        created_at=now,
        updated_at=now,
    )
    guide.set_meta(meta or StyleGuideMeta(brand_details={}, selected_traits=[]))
    session.add(guide)
    session.flush()
    return guide


def make_blog_post(
    session: Session,
    *,
    slug: str = "how-to-write-a-style-guide",
    title: str = "How to Write a Style Guide",
    category: str = "Brand Strategy",
    is_published: bool = True,
    created_at: int | None = None,
    keywords: list[str] | None = None,
) -> BlogPost:
    now = created_at if created_at is not None else int(time.time())
    post = BlogPost(
        slug=slug,
        title=title,
        content="A style guide keeps every writer on the same page.",
        excerpt="Why style guides matter.",
        category=category,
        author_name="Test Author",
        author_image=None,
        word_count=10,
        reading_time=1,
        is_published=is_published,
        published_at=now if is_published else None,
        created_at=now,
        updated_at=now,
    )
    post.set_meta(BlogPostMeta(keywords=keywords or [], research_urls=[], includes_template=False))
    session.add(post)
    session.flush()
    return post


def make_profile(session: Session, *, user_id: str = "user-1", tier: str = "starter") -> Profile:
    profile = Profile(user_id=user_id, subscription_tier=tier, guides_limit=1, created_at=int(time.time()))
    session.add(profile)
    session.flush()
    return profile


# ---------------------------------------------------------------------------
# OpenAI mock helpers (re-usable across test files)
# ---------------------------------------------------------------------------

def make_completion(text: str | None) -> MagicMock:
    """A mock object shaped like a Chat Completions response."""
    message = MagicMock()
    message.content = text
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    response.usage = None
    return response


def make_multi_response_client(*responses: str | Exception) -> MagicMock:
    """A mock client returning (or raising) successive items for successive calls."""
    client = MagicMock()
    client.chat.completions.create.side_effect = [
        r if isinstance(r, Exception) else make_completion(r) for r in responses
    ]
    return client


def user_prompt(params: dict) -> str:
    return params["messages"][1]["content"]


def make_routing_client(routes: dict[str, str | Callable[[dict], str]]) -> MagicMock:
    """
    A mock client that answers by system prompt. A route value is the reply
    text or a callable taking the create() kwargs. An unknown system prompt
    raises so a test never silently talks to a missing route.
    """
    client = MagicMock()

    def create(**params):
        system = params["messages"][0]["content"]
        if system not in routes:
            raise AssertionError(f"Unexpected system prompt: {system[:80]!r}")
        route = routes[system]
        return make_completion(route(params) if callable(route) else route)

    client.chat.completions.create.side_effect = create
    return client


_TRAIT_HEADING_RE = re.compile(r"^### (\d+)\. (.+)$", re.MULTILINE)


def trait_reply(params: dict) -> str:
    """Trait markdown in the requested '### n. Name' shape."""
    index, name = _TRAIT_HEADING_RE.search(user_prompt(params)).groups()
    return "\n".join([
        f"### {index}. {name}",
        "",
        f"{name} writing helps startup founders act on numbers quickly.",
        "",
        "***What It Means***",
        "",
        "→ Lead with the number that matters most",
        "→ Keep sentences short and plain",
        "→ Close with one clear next step",
        "",
        "***What It Doesn't Mean***",
        "",
        "✗ Dropping the context a reader needs",
        "✗ Writing in clipped fragments",
        "✗ Pushing readers toward a sale",
    ])


def make_rule(category: str) -> dict:
    return {
        "category": category,
        "title": f"{category} guidance",
        "description": f"Keep {category.lower()} consistent in every channel.",
        "examples": {
            "good": f"We follow the {category.lower()} guidance here",
            "bad": f"we ignore {category.lower()} guidance",
        },
    }


def make_rules_payload(categories: list[str]) -> str:
    return json.dumps({"rules": [make_rule(c) for c in categories]})
