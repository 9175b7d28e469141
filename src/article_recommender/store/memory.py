"""In-memory store implementing the engine's read protocols.

Useful for tests and for embedding the recommender over data that already
lives in memory. Records keep insertion order; listings are newest first
by insertion, matching the SQLite store's ordering.
"""

import threading
from datetime import datetime

from article_recommender.store.errors import DuplicateUsernameError
from article_recommender.store.models import (
    Article,
    Interaction,
    InteractionKind,
    InteractionQuery,
    User,
    normalize_search_query,
)


class InMemoryStore:
    """Dictionary-backed articles, users and interactions."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._lock = threading.Lock()
        self._articles: dict[str, Article] = {}
        self._users: dict[str, User] = {}
        self._interactions: dict[tuple[str, str, InteractionKind], Interaction] = {}

    def add_article(self, article: Article) -> Article:
        """Store or replace an article."""
        with self._lock:
            self._articles[article.id] = article
        return article

    def remove_article(self, article_id: str) -> bool:
        """Remove an article without touching interactions that reference it."""
        with self._lock:
            return self._articles.pop(article_id, None) is not None

    def add_user(self, user: User) -> User:
        """Store a user.

        Raises:
            DuplicateUsernameError: If another user has the same username.
        """
        with self._lock:
            for existing in self._users.values():
                if existing.username == user.username and existing.id != user.id:
                    raise DuplicateUsernameError(user.username)
            self._users[user.id] = user
        return user

    def add_interaction(self, interaction: Interaction) -> Interaction:
        """Store an interaction, returning the existing one on repeats."""
        key = (interaction.user_id, interaction.article_id, interaction.kind)
        with self._lock:
            return self._interactions.setdefault(key, interaction)

    def remove_interaction(
        self, user_id: str, article_id: str, kind: InteractionKind
    ) -> bool:
        """Remove an interaction; True if one existed."""
        with self._lock:
            return self._interactions.pop((user_id, article_id, kind), None) is not None

    def list_articles(self) -> list[Article]:
        """List every article, newest first."""
        with self._lock:
            return list(reversed(self._articles.values()))

    def get_article(self, article_id: str) -> Article | None:
        """Get an article by id."""
        with self._lock:
            return self._articles.get(article_id)

    def search_articles(self, query: str) -> list[Article]:
        """Find articles containing ``query``, newest first.

        Raises:
            ValueError: If the query is blank.
        """
        needle = normalize_search_query(query)
        return [a for a in self.list_articles() if a.matches_text(needle)]

    def get_user(self, user_id: str) -> User | None:
        """Get a user by id."""
        with self._lock:
            return self._users.get(user_id)

    def list_users(self) -> list[User]:
        """List every user, newest first."""
        with self._lock:
            return list(reversed(self._users.values()))

    def _snapshot(self) -> list[Interaction]:
        with self._lock:
            return list(reversed(self._interactions.values()))

    def list_interactions_by_user(self, user_id: str) -> list[Interaction]:
        """List a user's interactions, newest first."""
        return [i for i in self._snapshot() if i.user_id == user_id]

    def list_interactions_by_article(
        self,
        article_id: str,
        query: InteractionQuery | None = None,
    ) -> list[Interaction]:
        """List interactions against an article, optionally of one kind."""
        kind = query.kind if query is not None else None
        return [
            i
            for i in self._snapshot()
            if i.article_id == article_id and (kind is None or i.kind == kind)
        ]

    def list_interactions(self, since: datetime | None = None) -> list[Interaction]:
        """List all interactions, optionally only those created since a time."""
        return [
            i for i in self._snapshot() if since is None or i.created_at >= since
        ]

    def count_by_article_and_kind(self, article_id: str, kind: InteractionKind) -> int:
        """Count interactions of one kind against an article."""
        return len(
            self.list_interactions_by_article(article_id, InteractionQuery(kind=kind))
        )
