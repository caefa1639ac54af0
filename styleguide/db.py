"""
Storage for guides, posts, profiles and client state.

DBAdapter hides the engine behind a session() context manager; SQLiteAdapter
is the only backend. Columns added after a table first shipped are listed in
_MIGRATIONS and added on startup.
"""

import os
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session, sessionmaker

from constants import DATA_DIR
from .models.base import Base

# Columns added after release: (table, column, sql_type, default)
_MIGRATIONS: list[tuple[str, str, str, str]] = [
    ("style_guides", "plan_type", "VARCHAR(32)", "'style_guide'"),
    ("style_guides", "english_variant", "VARCHAR(16)", "'american'"),
    ("blog_posts", "reading_time", "INTEGER", "1"),
    ("profiles", "guides_limit", "INTEGER", "1"),
]


class DBAdapter(ABC):
    """Backend-neutral access to sessions and schema setup."""

    @abstractmethod
    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session; commits on exit, rolls back on exception."""
        ...

    @abstractmethod
    def create_tables(self) -> None:
        ...

    @abstractmethod
    def migrate_tables(self) -> list[str]:
        """Add any missing columns to existing tables (forward-only)."""
        ...


class SQLiteAdapter(DBAdapter):
    def __init__(self, url: str = "sqlite:///data/styleguide.db", *, echo: bool = False):
        self._url = url
        self._engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
        self._session_factory = sessionmaker(
            self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self._engine)

    def migrate_tables(self) -> list[str]:
        """Add the _MIGRATIONS columns missing from existing tables; returns "table.column" for each one added."""
        added: list[str] = []
        with self._engine.begin() as conn:
            inspector = inspect(conn)
            tables = set(inspector.get_table_names())
            for table, column, sql_type, default in _MIGRATIONS:
                if table not in tables:
                    continue
                existing = {c["name"] for c in inspector.get_columns(table)}
                if column in existing:
                    continue
                conn.execute(text(
                    f"ALTER TABLE {table} ADD COLUMN {column} {sql_type} NOT NULL DEFAULT {default}"
                ))
                added.append(f"{table}.{column}")
        return added


_default_adapter: DBAdapter | None = None


def get_default_adapter() -> DBAdapter:
    """Build the default adapter from environment/config (cached per process)."""
    global _default_adapter
    if _default_adapter is not None:
        return _default_adapter

    url = os.environ.get("DATABASE_URL")
    if url:
        if not url.startswith("sqlite"):
            raise ValueError("Only sqlite:// URLs are supported. Set DATABASE_URL to a sqlite path.")
        _default_adapter = SQLiteAdapter(url)
        return _default_adapter

    DATA_DIR.mkdir(parents=True, exist_ok=True)
    db_path = DATA_DIR / "styleguide.db"
    _default_adapter = SQLiteAdapter(f"sqlite:///{db_path}")
    return _default_adapter
