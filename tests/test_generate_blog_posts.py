"""Tests for the bulk blog generation script."""

from unittest.mock import MagicMock

import pytest

from scripts.generate_blog_posts import TopicRow, generate_all, read_topics
from styleguide.services import DuplicateSlugError
from styleguide.utils.errors import GenerationError


def test_read_topics(tmp_path) -> None:
    path = tmp_path / "topics.csv"
    path.write_text(
        'title,keywords,category\n'
        '"Brand Voice Guide","brand voice, tone",Marketing\n'
        '\n'
        'Style guide template,,\n',
        encoding="utf-8",
    )

    topics = read_topics(path)

    assert topics == [
        TopicRow(title="Brand Voice Guide", keywords=["brand voice", "tone"], category="Marketing"),
        TopicRow(title="Style guide template", keywords=[], category=None),
    ]


def test_read_topics_requires_title(tmp_path) -> None:
    path = tmp_path / "topics.csv"
    path.write_text("title,keywords\n,brand voice\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Row 2"):
        read_topics(path)


def test_generate_all_counts_outcomes(monkeypatch) -> None:
    generate = MagicMock(side_effect=[
        {"slug": "one", "word_count": 900, "reading_time": 5},
        DuplicateSlugError("two"),
        GenerationError("Outline has no sections"),
    ])
    monkeypatch.setattr("scripts.generate_blog_posts.BlogService.generate_post", generate)
    topics = [TopicRow(title=t, keywords=[], category=None) for t in ("One", "Two", "Three")]

    summary = generate_all(topics, publish=False, delay=0)

    assert summary.successful == ["One"]
    assert summary.skipped == ["Two"]
    assert summary.failed == ["Three"]
    assert generate.call_args.kwargs["publish"] is False
