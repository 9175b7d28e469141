"""SQLite store for articles, users and interactions."""

import json
import sqlite3
import threading
import time
import uuid
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from article_recommender.config.constants import COMPONENT_STORE
from article_recommender.data_model import utc_now
from article_recommender.store.errors import (
    ArticleNotFoundError,
    ConnectionError as StoreConnectionError,
    DuplicateUsernameError,
    StateStoreError,
    UserNotFoundError,
)
from article_recommender.store.metrics import StoreMetrics, TransactionContext
from article_recommender.store.migrations import CURRENT_VERSION, MigrationManager
from article_recommender.store.models import (
    Article,
    ArticleDraft,
    Interaction,
    InteractionKind,
    InteractionQuery,
    InteractionStats,
    User,
    UserDraft,
    normalize_search_query,
)


logger = structlog.get_logger()


class StateStore:
    """SQLite-backed content, identity and interaction store.

    Implements the ``ArticleReader``, ``UserReader`` and
    ``InteractionReader`` protocols plus the write operations used by the
    CLI. A single connection is shared between threads; every statement
    runs under one lock so the engine can fan reads out on a thread pool.
    """

    def __init__(self, db_path: Path | str) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file.
        """
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(
            component=COMPONENT_STORE,
            db_path=str(self._db_path),
        )

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open the database and apply pending migrations.

        Creates the database file and parent directories if needed.
        """
        if self._conn is not None:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._log.info("connecting_to_database")

        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA foreign_keys=ON")

        migration_mgr = MigrationManager(conn)
        old_version = migration_mgr.get_current_version()
        applied = migration_mgr.apply_migrations()
        self._conn = conn

        self._log.info(
            "database_connected",
            old_version=old_version,
            new_version=CURRENT_VERSION,
            migrations_applied=applied,
        )

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                self._log.info(
                    "database_closed",
                    avg_tx_duration_ms=round(self._metrics.avg_tx_duration_ms, 2),
                    **self._metrics.to_dict(),
                )

    def __enter__(self) -> "StateStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Return the open connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    def _fetch(
        self, operation: str, sql: str, params: Sequence[Any] = ()
    ) -> list[sqlite3.Row]:
        """Run a read query under the connection lock.

        Args:
            operation: Name of the read for logging.
            sql: Query text.
            params: Bound parameters.

        Returns:
            All result rows.

        Raises:
            StateStoreError: If the query fails.
        """
        with self._lock:
            conn = self._ensure_connected()
            try:
                rows = conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                self._metrics.record_read_error()
                self._log.error("read_failed", op=operation, error=str(e))
                msg = f"{operation} failed: {e}"
                raise StateStoreError(msg) from e
            self._metrics.record_read()
        return rows

    @contextmanager
    def _transaction(self, operation: str) -> Generator[TransactionContext]:
        """Context manager for write transactions with timing and logging.

        Args:
            operation: Name of the operation for logging.

        Yields:
            Transaction context with timing information.
        """
        with self._lock:
            conn = self._ensure_connected()
            tx_id = str(uuid.uuid4())[:8]
            start_ns = time.perf_counter_ns()
            ctx = TransactionContext(
                tx_id=tx_id, start_time_ns=start_ns, operation=operation
            )

            try:
                yield ctx
                conn.commit()
            except Exception:
                conn.rollback()
                self._log.error(
                    "transaction_failed",
                    tx_id=tx_id,
                    op=operation,
                    duration_ms=round((time.perf_counter_ns() - start_ns) / 1e6, 2),
                )
                raise

            duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
            self._metrics.record_tx_duration(duration_ms)
            self._log.debug(
                "transaction_complete",
                tx_id=tx_id,
                op=operation,
                affected_rows=ctx.affected_rows,
                duration_ms=round(duration_ms, 2),
            )

    # ===== Articles =====

    def create_article(self, draft: ArticleDraft) -> Article:
        """Insert a new article.

        Args:
            draft: Validated article fields.

        Returns:
            The stored article with generated id and timestamps.
        """
        now = utc_now()
        article = Article(
            id=uuid.uuid4().hex, created_at=now, updated_at=now, **draft.model_dump()
        )

        with self._transaction("create_article") as ctx:
            conn = self._ensure_connected()
            conn.execute(
                """
                INSERT INTO articles (id, title, content, author, summary, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    article.id,
                    article.title,
                    article.content,
                    article.author,
                    article.summary,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            ctx.add_affected_rows(1)

        self._metrics.record_article_created()
        return article

    def update_article(self, article_id: str, draft: ArticleDraft) -> Article:
        """Replace an article's editable fields.

        Args:
            article_id: Article to update.
            draft: New field values.

        Returns:
            The updated article.

        Raises:
            ArticleNotFoundError: If the article does not exist.
        """
        existing = self.get_article(article_id)
        if existing is None:
            raise ArticleNotFoundError(article_id)

        now = utc_now()
        with self._transaction("update_article") as ctx:
            conn = self._ensure_connected()
            cursor = conn.execute(
                """
                UPDATE articles SET title = ?, content = ?, author = ?, summary = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    draft.title,
                    draft.content,
                    draft.author,
                    draft.summary,
                    now.isoformat(),
                    article_id,
                ),
            )
            ctx.add_affected_rows(cursor.rowcount)

        return existing.model_copy(update={**draft.model_dump(), "updated_at": now})

    def delete_article(self, article_id: str) -> bool:
        """Delete an article and, by cascade, its interactions.

        Args:
            article_id: Article to delete.

        Returns:
            True if a row was deleted.
        """
        with self._transaction("delete_article") as ctx:
            conn = self._ensure_connected()
            cursor = conn.execute("DELETE FROM articles WHERE id = ?", (article_id,))
            ctx.add_affected_rows(cursor.rowcount)
        return ctx.affected_rows > 0

    def get_article(self, article_id: str) -> Article | None:
        """Get an article by id.

        Args:
            article_id: The id to look up.

        Returns:
            The article, or None if not found.
        """
        rows = self._fetch(
            "get_article", "SELECT * FROM articles WHERE id = ?", (article_id,)
        )
        return self._row_to_article(rows[0]) if rows else None

    def list_articles(self) -> list[Article]:
        """List every article, newest first."""
        rows = self._fetch(
            "list_articles",
            "SELECT * FROM articles ORDER BY created_at DESC, rowid DESC",
        )
        return [self._row_to_article(row) for row in rows]

    def search_articles(self, query: str) -> list[Article]:
        """Find articles whose title, summary or content contains ``query``.

        Matching is case-insensitive, the same way interests are matched.

        Args:
            query: Text to look for.

        Returns:
            Matching articles, newest first.

        Raises:
            ValueError: If the query is blank.
        """
        needle = normalize_search_query(query)
        matches = [a for a in self.list_articles() if a.matches_text(needle)]
        self._log.debug("articles_searched", query=needle, matches=len(matches))
        return matches

    def _row_to_article(self, row: sqlite3.Row) -> Article:
        return Article(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            author=row["author"],
            summary=row["summary"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ===== Users =====

    def create_user(self, draft: UserDraft) -> User:
        """Insert a new user.

        Args:
            draft: Validated user fields.

        Returns:
            The stored user.

        Raises:
            DuplicateUsernameError: If the username is taken.
        """
        now = utc_now()
        user = User(
            id=uuid.uuid4().hex, created_at=now, updated_at=now, **draft.model_dump()
        )

        try:
            with self._transaction("create_user") as ctx:
                conn = self._ensure_connected()
                conn.execute(
                    """
                    INSERT INTO users (id, username, interests_json, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        user.id,
                        user.username,
                        json.dumps(user.interests),
                        now.isoformat(),
                        now.isoformat(),
                    ),
                )
                ctx.add_affected_rows(1)
        except sqlite3.IntegrityError as e:
            raise DuplicateUsernameError(user.username) from e

        self._metrics.record_user_created()
        return user

    def update_user_interests(self, user_id: str, interests: list[str]) -> User:
        """Replace a user's interest list.

        Args:
            user_id: User to update.
            interests: New ordered interest terms.

        Returns:
            The updated user.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        existing = self.get_user(user_id)
        if existing is None:
            raise UserNotFoundError(user_id)

        validated = UserDraft(username=existing.username, interests=interests)
        now = utc_now()
        with self._transaction("update_user_interests") as ctx:
            conn = self._ensure_connected()
            cursor = conn.execute(
                "UPDATE users SET interests_json = ?, updated_at = ? WHERE id = ?",
                (json.dumps(validated.interests), now.isoformat(), user_id),
            )
            ctx.add_affected_rows(cursor.rowcount)

        return existing.model_copy(
            update={"interests": validated.interests, "updated_at": now}
        )

    def delete_user(self, user_id: str) -> bool:
        """Delete a user and, by cascade, their interactions.

        Args:
            user_id: User to delete.

        Returns:
            True if a row was deleted.
        """
        with self._transaction("delete_user") as ctx:
            conn = self._ensure_connected()
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            ctx.add_affected_rows(cursor.rowcount)
        return ctx.affected_rows > 0

    def get_user(self, user_id: str) -> User | None:
        """Get a user by id.

        Args:
            user_id: The id to look up.

        Returns:
            The user, or None if not found.
        """
        rows = self._fetch("get_user", "SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_user(rows[0]) if rows else None

    def get_user_by_username(self, username: str) -> User | None:
        """Get a user by username (case-insensitive).

        Args:
            username: Username to look up.

        Returns:
            The user, or None if not found.
        """
        rows = self._fetch(
            "get_user_by_username",
            "SELECT * FROM users WHERE username = ?",
            (username.strip().lower(),),
        )
        return self._row_to_user(rows[0]) if rows else None

    def list_users(self) -> list[User]:
        """List every user, newest first."""
        rows = self._fetch(
            "list_users",
            "SELECT * FROM users ORDER BY created_at DESC, rowid DESC",
        )
        return [self._row_to_user(row) for row in rows]

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            interests=json.loads(row["interests_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ===== Interactions =====

    def record_interaction(
        self, user_id: str, article_id: str, kind: InteractionKind
    ) -> Interaction:
        """Record an interaction, returning the existing one on repeats.

        Args:
            user_id: Interacting user.
            article_id: Target article.
            kind: View or like.

        Returns:
            The new or pre-existing interaction.

        Raises:
            UserNotFoundError: If the user does not exist.
            ArticleNotFoundError: If the article does not exist.
        """
        with self._transaction("record_interaction") as ctx:
            if self.get_user(user_id) is None:
                raise UserNotFoundError(user_id)
            if self.get_article(article_id) is None:
                raise ArticleNotFoundError(article_id)

            existing = self._find_interaction(user_id, article_id, kind)
            if existing is not None:
                self._metrics.record_interaction_deduplicated()
                return existing

            interaction = Interaction(
                id=uuid.uuid4().hex,
                user_id=user_id,
                article_id=article_id,
                kind=kind,
                created_at=utc_now(),
            )
            conn = self._ensure_connected()
            conn.execute(
                """
                INSERT INTO interactions (id, user_id, article_id, kind, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    interaction.id,
                    user_id,
                    article_id,
                    kind.value,
                    interaction.created_at.isoformat(),
                ),
            )
            ctx.add_affected_rows(1)

        self._metrics.record_interaction_created()
        return interaction

    def remove_interaction(
        self, user_id: str, article_id: str, kind: InteractionKind
    ) -> bool:
        """Remove an interaction.

        Returns:
            True if an interaction was removed.
        """
        with self._transaction("remove_interaction") as ctx:
            conn = self._ensure_connected()
            cursor = conn.execute(
                """
                DELETE FROM interactions
                WHERE user_id = ? AND article_id = ? AND kind = ?
                """,
                (user_id, article_id, kind.value),
            )
            ctx.add_affected_rows(cursor.rowcount)

        self._metrics.record_interactions_removed(ctx.affected_rows)
        return ctx.affected_rows > 0

    def has_interaction(
        self, user_id: str, article_id: str, kind: InteractionKind
    ) -> bool:
        """Check whether the user recorded this kind of interaction."""
        return self._find_interaction(user_id, article_id, kind) is not None

    def _find_interaction(
        self, user_id: str, article_id: str, kind: InteractionKind
    ) -> Interaction | None:
        rows = self._fetch(
            "find_interaction",
            """
            SELECT * FROM interactions
            WHERE user_id = ? AND article_id = ? AND kind = ?
            """,
            (user_id, article_id, kind.value),
        )
        return self._row_to_interaction(rows[0]) if rows else None

    def list_interactions_by_user(self, user_id: str) -> list[Interaction]:
        """List a user's interactions, newest first."""
        rows = self._fetch(
            "list_interactions_by_user",
            """
            SELECT * FROM interactions WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (user_id,),
        )
        return [self._row_to_interaction(row) for row in rows]

    def list_interactions_by_article(
        self,
        article_id: str,
        query: InteractionQuery | None = None,
    ) -> list[Interaction]:
        """List interactions against an article, newest first.

        Args:
            article_id: Article to filter by.
            query: Optional filter on interaction kind.

        Returns:
            Matching interactions.
        """
        sql = "SELECT * FROM interactions WHERE article_id = ?"
        params: list[Any] = [article_id]
        if query is not None and query.kind is not None:
            sql += " AND kind = ?"
            params.append(query.kind.value)
        sql += " ORDER BY created_at DESC, rowid DESC"

        rows = self._fetch("list_interactions_by_article", sql, params)
        return [self._row_to_interaction(row) for row in rows]

    def list_interactions(self, since: datetime | None = None) -> list[Interaction]:
        """List all interactions, newest first.

        Args:
            since: If given, only interactions created at or after this time.
                Naive values are taken as local time.

        Returns:
            Matching interactions.
        """
        if since is None:
            rows = self._fetch(
                "list_interactions",
                "SELECT * FROM interactions ORDER BY created_at DESC, rowid DESC",
            )
        else:
            rows = self._fetch(
                "list_interactions",
                """
                SELECT * FROM interactions WHERE created_at >= ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (since.astimezone(UTC).isoformat(),),
            )
        return [self._row_to_interaction(row) for row in rows]

    def count_by_article_and_kind(self, article_id: str, kind: InteractionKind) -> int:
        """Count interactions of one kind against an article."""
        rows = self._fetch(
            "count_by_article_and_kind",
            "SELECT COUNT(*) FROM interactions WHERE article_id = ? AND kind = ?",
            (article_id, kind.value),
        )
        return int(rows[0][0])

    def get_interaction_stats(self, article_id: str) -> InteractionStats:
        """Get view, like and total counts for an article."""
        rows = self._fetch(
            "get_interaction_stats",
            """
            SELECT
                SUM(CASE WHEN kind = 'view' THEN 1 ELSE 0 END) AS views,
                SUM(CASE WHEN kind = 'like' THEN 1 ELSE 0 END) AS likes,
                COUNT(*) AS total
            FROM interactions WHERE article_id = ?
            """,
            (article_id,),
        )
        row = rows[0]
        return InteractionStats(
            views=row["views"] or 0,
            likes=row["likes"] or 0,
            total=row["total"],
        )

    def _row_to_interaction(self, row: sqlite3.Row) -> Interaction:
        return Interaction(
            id=row["id"],
            user_id=row["user_id"],
            article_id=row["article_id"],
            kind=row["kind"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    # ===== Stats =====

    def get_stats(self) -> dict[str, int]:
        """Get row counts for all tables.

        Returns:
            Dictionary mapping table name to row count.
        """
        stats: dict[str, int] = {}
        for table in ("articles", "users", "interactions"):
            rows = self._fetch("get_stats", f"SELECT COUNT(*) FROM {table}")  # noqa: S608
            stats[table] = int(rows[0][0])
        return stats

    def get_schema_version(self) -> int:
        """Get current schema version."""
        with self._lock:
            return MigrationManager(self._ensure_connected()).get_current_version()
