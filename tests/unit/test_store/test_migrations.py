"""Unit tests for schema migrations."""

import sqlite3
from collections.abc import Generator

import pytest

from article_recommender.store.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    MigrationManager,
)


@pytest.fixture
def conn() -> Generator[sqlite3.Connection]:
    """Create an in-memory SQLite connection."""
    connection = sqlite3.connect(":memory:")
    connection.execute("PRAGMA foreign_keys=ON")
    yield connection
    connection.close()


class TestMigrationConstants:
    """Tests for migration constants."""

    def test_migrations_in_order(self) -> None:
        """Test migrations are in ascending version order."""
        versions = [m.version for m in MIGRATIONS]
        assert versions == sorted(versions)

    def test_current_version_matches_latest_migration(self) -> None:
        """Test current version matches the latest migration."""
        assert MIGRATIONS[-1].version == CURRENT_VERSION


class TestMigrationManager:
    """Tests for MigrationManager."""

    def test_fresh_database_is_version_zero(self, conn: sqlite3.Connection) -> None:
        """Test an empty database reports version 0."""
        assert MigrationManager(conn).get_current_version() == 0

    def test_apply_all(self, conn: sqlite3.Connection) -> None:
        """Test applying migrations reaches the current version."""
        manager = MigrationManager(conn)
        applied = manager.apply_migrations()

        assert applied == [m.version for m in MIGRATIONS]
        assert manager.get_current_version() == CURRENT_VERSION

    def test_apply_twice_is_noop(self, conn: sqlite3.Connection) -> None:
        """Test re-applying does nothing."""
        manager = MigrationManager(conn)
        manager.apply_migrations()
        assert manager.apply_migrations() == []

    def test_tables_created(self, conn: sqlite3.Connection) -> None:
        """Test all tables exist after migration."""
        MigrationManager(conn).apply_migrations()
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"articles", "users", "interactions", "schema_version"} <= tables

    def test_interaction_uniqueness(self, conn: sqlite3.Connection) -> None:
        """Test one interaction per (user, article, kind) is enforced."""
        MigrationManager(conn).apply_migrations()
        now = "2024-01-01T00:00:00+00:00"
        conn.execute(
            "INSERT INTO users VALUES ('u1', 'alice', '[]', ?, ?)", (now, now)
        )
        conn.execute(
            "INSERT INTO articles VALUES ('a1', 'T', 'C', 'A', NULL, ?, ?)", (now, now)
        )
        conn.execute(
            "INSERT INTO interactions VALUES ('i1', 'u1', 'a1', 'view', ?)", (now,)
        )

        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO interactions VALUES ('i2', 'u1', 'a1', 'view', ?)", (now,)
            )

    def test_kind_check(self, conn: sqlite3.Connection) -> None:
        """Test unknown interaction kinds are rejected by the schema."""
        MigrationManager(conn).apply_migrations()
        now = "2024-01-01T00:00:00+00:00"
        conn.execute(
            "INSERT INTO users VALUES ('u1', 'alice', '[]', ?, ?)", (now, now)
        )
        conn.execute(
            "INSERT INTO articles VALUES ('a1', 'T', 'C', 'A', NULL, ?, ?)", (now, now)
        )

        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO interactions VALUES ('i1', 'u1', 'a1', 'share', ?)", (now,)
            )
