"""Read interfaces the recommendation engine depends on.

The engine only ever reads; it receives these at construction so that the
SQLite store, the in-memory store or any other backend can be substituted.
Implementations return ``None`` or empty lists for missing data and raise
for infrastructure failures, so callers can tell "no data" apart from
"store unavailable".
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from article_recommender.store.models import (
    Article,
    Interaction,
    InteractionKind,
    InteractionQuery,
    User,
)


@runtime_checkable
class ArticleReader(Protocol):
    """Content store read contract."""

    def list_articles(self) -> list[Article]:
        """Return every article, newest first."""
        ...

    def get_article(self, article_id: str) -> Article | None:
        """Return the article, or None if it does not exist."""
        ...


@runtime_checkable
class UserReader(Protocol):
    """Identity store read contract."""

    def get_user(self, user_id: str) -> User | None:
        """Return the user, or None if it does not exist."""
        ...


@runtime_checkable
class InteractionReader(Protocol):
    """Interaction store read contract."""

    def list_interactions_by_user(self, user_id: str) -> list[Interaction]:
        """Return all interactions recorded by a user, newest first."""
        ...

    def list_interactions_by_article(
        self,
        article_id: str,
        query: InteractionQuery | None = None,
    ) -> list[Interaction]:
        """Return interactions recorded against an article, newest first."""
        ...

    def list_interactions(self, since: datetime | None = None) -> list[Interaction]:
        """Return all interactions, optionally only those created since a time."""
        ...

    def count_by_article_and_kind(self, article_id: str, kind: InteractionKind) -> int:
        """Count interactions of one kind against an article."""
        ...
