"""Tests for the SQLite adapter: sessions and forward-only column migrations."""

import pytest
from sqlalchemy import inspect, text

from styleguide.db import SQLiteAdapter
from styleguide.models import Profile


@pytest.fixture
def adapter(tmp_path) -> SQLiteAdapter:
    return SQLiteAdapter(f"sqlite:///{tmp_path / 'styleguide.db'}")


def test_session_commits_and_rolls_back(adapter) -> None:
    adapter.create_tables()

    with adapter.session() as s:
        s.add(Profile(user_id="user-1", subscription_tier="pro", guides_limit=5, created_at=1))

    with pytest.raises(RuntimeError):
        with adapter.session() as s:
            s.add(Profile(user_id="user-2", subscription_tier="pro", guides_limit=5, created_at=1))
            s.flush()
            raise RuntimeError("abort")

    with adapter.session() as s:
        assert [p.user_id for p in s.query(Profile).all()] == ["user-1"]


def test_fresh_schema_needs_no_migration(adapter) -> None:
    adapter.create_tables()
    assert adapter.migrate_tables() == []


def test_missing_column_is_added_to_legacy_table(adapter) -> None:
    with adapter._engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE profiles (user_id VARCHAR(64) PRIMARY KEY, subscription_tier VARCHAR(16), created_at INTEGER)"
        ))
        conn.execute(text("INSERT INTO profiles VALUES ('user-1', 'free', 1)"))

    assert adapter.migrate_tables() == ["profiles.guides_limit"]

    columns = {c["name"] for c in inspect(adapter._engine).get_columns("profiles")}
    assert "guides_limit" in columns
    with adapter._engine.connect() as conn:
        assert conn.execute(text("SELECT guides_limit FROM profiles")).scalar() == 1
