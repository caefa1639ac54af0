"""Generate blog posts in bulk from a CSV of topics.

Usage:
    python scripts/generate_blog_posts.py --csv=topics.csv [--limit=5] [--dry-run] [--draft]

CSV columns: title (required), keywords (comma-separated, optional), category (optional).
A header row is expected.
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

load_dotenv()

from styleguide.services import BlogService, DuplicateSlugError  # noqa: E402
from styleguide.utils.errors import GenerationError  # noqa: E402

logger = logging.getLogger("generate_blog_posts")

DELAY_BETWEEN_POSTS_SECONDS = 2.0


@dataclass
class TopicRow:
    title: str
    keywords: list[str]
    category: str | None


@dataclass
class BatchSummary:
    successful: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def read_topics(path: Path) -> list[TopicRow]:
    """Rows with an empty title raise ValueError naming the CSV line."""
    with path.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    if len(rows) < 2:
        raise ValueError("CSV file must have a header row and at least one data row")

    topics: list[TopicRow] = []
    for line_no, row in enumerate(rows[1:], start=2):
        if not any(cell.strip() for cell in row):
            continue
        title = row[0].strip() if row else ""
        if not title:
            raise ValueError(f"Row {line_no}: missing required field 'title'")
        keywords = [k.strip() for k in (row[1] if len(row) > 1 else "").split(",") if k.strip()]
        category = row[2].strip() if len(row) > 2 and row[2].strip() else None
        topics.append(TopicRow(title=title, keywords=keywords, category=category))
    return topics


def generate_all(topics: list[TopicRow], *, publish: bool, delay: float = DELAY_BETWEEN_POSTS_SECONDS) -> BatchSummary:
    summary = BatchSummary()
    for index, topic in enumerate(topics, start=1):
        logger.info("[%d/%d] Generating %r", index, len(topics), topic.title)
        try:
            post = BlogService.generate_post(
                topic.title, topic.keywords, category=topic.category, publish=publish
            )
            logger.info("Created /blog/%s (%d words, %d min read)", post["slug"], post["word_count"], post["reading_time"])
            summary.successful.append(topic.title)
        except DuplicateSlugError as exc:
            logger.warning("Skipping %r: %s (%s)", topic.title, exc, exc.slug)
            summary.skipped.append(topic.title)
        except (GenerationError, ValueError) as exc:
            logger.error("Failed %r: %s", topic.title, exc)
            summary.failed.append(topic.title)
        if index < len(topics) and delay > 0:
            time.sleep(delay)
    return summary


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate blog posts from a CSV of topics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--csv", required=True, type=Path, help="Path to the topics CSV")
    parser.add_argument("--limit", type=int, default=5, help="Maximum number of topics to process (default: 5)")
    parser.add_argument("--dry-run", action="store_true", help="List the topics without generating anything")
    parser.add_argument("--draft", action="store_true", help="Store generated posts unpublished")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        topics = read_topics(args.csv)[: max(0, args.limit)]
    except (OSError, ValueError) as exc:
        logger.error("Could not read %s: %s", args.csv, exc)
        return 1

    if args.dry_run:
        for topic in topics:
            print(f"{topic.title} | keywords: {', '.join(topic.keywords) or 'none'} | category: {topic.category or 'auto'}")
        return 0

    summary = generate_all(topics, publish=not args.draft)
    print(f"Successful: {len(summary.successful)}")
    print(f"Skipped (duplicate slug): {len(summary.skipped)}")
    print(f"Failed: {len(summary.failed)}")
    for title in summary.failed:
        print(f"  - {title}")
    return 1 if summary.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
