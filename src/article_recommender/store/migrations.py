"""SQLite schema migrations for the recommender store."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog

from article_recommender.config.constants import COMPONENT_STORE
from article_recommender.store.errors import MigrationError


logger = structlog.get_logger()

CURRENT_VERSION = 2


@dataclass(frozen=True)
class Migration:
    """A forward-only schema migration.

    Attributes:
        version: Target version after applying this migration.
        description: Human-readable description.
        up_sql: SQL script that applies the migration.
    """

    version: int
    description: str
    up_sql: str


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        description="Articles, users and interactions tables",
        up_sql="""
CREATE TABLE IF NOT EXISTS articles (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    author TEXT NOT NULL,
    summary TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_articles_created_at ON articles(created_at);
CREATE INDEX IF NOT EXISTS idx_articles_author ON articles(author);

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    username TEXT NOT NULL UNIQUE,
    interests_json TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS interactions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    article_id TEXT NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
    kind TEXT NOT NULL CHECK (kind IN ('view', 'like')),
    created_at TEXT NOT NULL,
    UNIQUE (user_id, article_id, kind)
);
CREATE INDEX IF NOT EXISTS idx_interactions_article_kind
    ON interactions(article_id, kind);
CREATE INDEX IF NOT EXISTS idx_interactions_user_created
    ON interactions(user_id, created_at);
""",
    ),
    Migration(
        version=2,
        description="Index interactions by creation time for trending windows",
        up_sql="""
CREATE INDEX IF NOT EXISTS idx_interactions_created_at ON interactions(created_at);
""",
    ),
]


class MigrationManager:
    """Applies pending migrations and tracks the schema version."""

    VERSION_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL,
    description TEXT
);
"""

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Initialize the migration manager.

        Args:
            connection: SQLite connection to manage.
        """
        self._conn = connection
        self._log = logger.bind(component=COMPONENT_STORE, operation="migration")

    def get_current_version(self) -> int:
        """Get the current schema version.

        Returns:
            Current version number, or 0 if no migrations applied.
        """
        self._conn.execute(self.VERSION_TABLE_SQL)
        self._conn.commit()
        row = self._conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
        return row[0] if row[0] is not None else 0

    def apply_migrations(self) -> list[int]:
        """Apply all pending migrations in version order.

        Returns:
            Versions that were applied.

        Raises:
            MigrationError: If a migration script fails.
        """
        current = self.get_current_version()
        pending = [m for m in MIGRATIONS if m.version > current]

        if not pending:
            self._log.debug("no_migrations_pending", current_version=current)
            return []

        applied: list[int] = []
        for migration in pending:
            self._log.info(
                "applying_migration",
                version=migration.version,
                description=migration.description,
            )
            try:
                self._conn.executescript(migration.up_sql)
                self._conn.execute(
                    """
                    INSERT INTO schema_version (version, applied_at, description)
                    VALUES (?, ?, ?)
                    """,
                    (
                        migration.version,
                        datetime.now(UTC).isoformat(),
                        migration.description,
                    ),
                )
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                self._log.error(
                    "migration_failed",
                    version=migration.version,
                    error=str(e),
                )
                raise MigrationError(migration.version, str(e)) from e
            applied.append(migration.version)

        return applied
