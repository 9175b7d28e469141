"""Load users, articles and interactions from a seed mapping."""

from dataclasses import dataclass
from typing import Any

import structlog

from article_recommender.config.constants import COMPONENT_STORE
from article_recommender.store.errors import StateStoreError
from article_recommender.store.models import ArticleDraft, InteractionKind, UserDraft
from article_recommender.store.store import StateStore


logger = structlog.get_logger()


class SeedError(StateStoreError):
    """Raised when seed data is malformed or refers to an unknown record."""

    def __init__(self, section: str, index: int, message: str) -> None:
        """Initialize the error.

        Args:
            section: Seed section (users, articles, interactions).
            index: Position of the offending entry.
            message: What is wrong with it.
        """
        self.section = section
        self.index = index
        super().__init__(f"{section}[{index}]: {message}")


@dataclass
class SeedResult:
    """Counts of records written by a seed run."""

    users: int = 0
    articles: int = 0
    interactions: int = 0


def seed_store(store: StateStore, data: dict[str, Any]) -> SeedResult:
    """Write seed records into the store.

    Expected shape::

        users:
          - username: alice
            interests: [tech, programming]
        articles:
          - key: ts-tips
            title: Advanced TypeScript Programming Techniques
            content: ...
            author: Jane
            summary: ...
        interactions:
          - user: alice
            article: ts-tips
            kind: view

    Users already present (by username) are reused. Articles are referenced
    by ``key`` when given, otherwise by title. Interactions are idempotent.

    Args:
        store: Connected store.
        data: Parsed seed document.

    Returns:
        Number of records created per section.

    Raises:
        SeedError: If an entry is not a mapping or an interaction refers to
            an unknown user or article.
        pydantic.ValidationError: If a record is malformed.
        ValueError: If an interaction kind is not view or like.
    """
    result = SeedResult()
    log = logger.bind(component=COMPONENT_STORE, operation="seed")

    user_ids: dict[str, str] = {}
    for raw in data.get("users") or []:
        draft = UserDraft.model_validate(raw)
        existing = store.get_user_by_username(draft.username)
        if existing is None:
            existing = store.create_user(draft)
            result.users += 1
        user_ids[existing.username] = existing.id

    article_ids: dict[str, str] = {}
    for index, raw in enumerate(data.get("articles") or []):
        if not isinstance(raw, dict):
            raise SeedError("articles", index, "expected a mapping")
        fields = dict(raw)
        key = str(fields.pop("key", "") or fields.get("title", ""))
        article = store.create_article(ArticleDraft.model_validate(fields))
        article_ids[key] = article.id
        result.articles += 1

    for index, raw in enumerate(data.get("interactions") or []):
        if not isinstance(raw, dict):
            raise SeedError("interactions", index, "expected a mapping")
        username = str(raw.get("user", "")).strip().lower()
        user_id = user_ids.get(username)
        if user_id is None:
            found = store.get_user_by_username(username)
            if found is None:
                raise SeedError("interactions", index, f"unknown user '{username}'")
            user_id = found.id

        article_key = str(raw.get("article", ""))
        article_id = article_ids.get(article_key)
        if article_id is None:
            raise SeedError("interactions", index, f"unknown article '{article_key}'")

        kind = InteractionKind(str(raw.get("kind", "")).lower())
        if store.has_interaction(user_id, article_id, kind):
            continue
        store.record_interaction(user_id, article_id, kind)
        result.interactions += 1

    log.info(
        "seed_complete",
        users=result.users,
        articles=result.articles,
        interactions=result.interactions,
    )
    return result
