"""Storage for articles, users and interactions.

This package provides:
- Read protocols the recommendation engine is constructed with
- A SQLite store with migrations and idempotent interaction writes
- An in-memory store implementing the same read protocols
- Seeding from YAML fixtures
"""

from article_recommender.store.errors import (
    ArticleNotFoundError,
    ConnectionError,
    DuplicateUsernameError,
    MigrationError,
    StateStoreError,
    UserNotFoundError,
)
from article_recommender.store.memory import InMemoryStore
from article_recommender.store.metrics import StoreMetrics
from article_recommender.store.models import (
    Article,
    ArticleDraft,
    Interaction,
    InteractionKind,
    InteractionQuery,
    InteractionStats,
    User,
    UserDraft,
)
from article_recommender.store.protocols import (
    ArticleReader,
    InteractionReader,
    UserReader,
)
from article_recommender.store.seed import SeedError, SeedResult, seed_store
from article_recommender.store.store import StateStore


__all__ = [
    # Errors
    "ArticleNotFoundError",
    "ConnectionError",
    "DuplicateUsernameError",
    "MigrationError",
    "SeedError",
    "StateStoreError",
    "UserNotFoundError",
    # Metrics
    "StoreMetrics",
    # Models
    "Article",
    "ArticleDraft",
    "Interaction",
    "InteractionKind",
    "InteractionQuery",
    "InteractionStats",
    "User",
    "UserDraft",
    # Protocols
    "ArticleReader",
    "InteractionReader",
    "UserReader",
    # Seeding
    "SeedResult",
    "seed_store",
    # Stores
    "InMemoryStore",
    "StateStore",
]
