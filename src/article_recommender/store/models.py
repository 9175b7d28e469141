"""Data models for articles, users and interactions."""

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import Field, field_validator

from article_recommender.data_model import StrictBaseModel, utc_now


MAX_INTERESTS = 10
_USERNAME_PATTERN = re.compile(r"^[a-z0-9_]+$")


class InteractionKind(str, Enum):
    """Kind of engagement a user recorded against an article."""

    VIEW = "view"
    LIKE = "like"


def normalize_search_query(query: str) -> str:
    """Trim and lowercase a search query.

    Raises:
        ValueError: If the query is blank.
    """
    cleaned = query.strip().lower()
    if not cleaned:
        msg = "Search query must not be empty"
        raise ValueError(msg)
    return cleaned


def _normalize_summary(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _normalize_username(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        if not _USERNAME_PATTERN.match(value):
            msg = "Username can only contain letters, numbers, and underscores"
            raise ValueError(msg)
    return value


def _normalize_interests(value: Any) -> Any:
    if isinstance(value, list):
        cleaned = [v.strip() if isinstance(v, str) else v for v in value]
        for term in cleaned:
            if isinstance(term, str) and not term:
                msg = "Interests must be non-empty strings"
                raise ValueError(msg)
        return cleaned
    return value


class ArticleDraft(StrictBaseModel):
    """Fields supplied when creating an article."""

    title: Annotated[str, Field(min_length=1, max_length=200)]
    content: Annotated[str, Field(min_length=1)]
    author: Annotated[str, Field(min_length=1, max_length=100)]
    summary: Annotated[str | None, Field(max_length=500)] = None

    @field_validator("title", "content", "author", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("summary", mode="before")
    @classmethod
    def normalize_summary(cls, v: Any) -> Any:
        """Treat blank summaries as absent."""
        return _normalize_summary(v)


class Article(ArticleDraft):
    """Stored article.

    Articles are owned by the content store and are never mutated while a
    recommendation call scores them.
    """

    id: Annotated[str, Field(min_length=1, description="Article identifier")]
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def matches_text(self, needle: str) -> bool:
        """Check whether a lowercased needle occurs in title, summary or content."""
        return any(
            needle in field.lower()
            for field in (self.title, self.summary or "", self.content)
        )


class UserDraft(StrictBaseModel):
    """Fields supplied when creating a user."""

    username: Annotated[str, Field(min_length=3, max_length=30)]
    interests: Annotated[
        list[Annotated[str, Field(min_length=1, max_length=50)]],
        Field(max_length=MAX_INTERESTS),
    ] = Field(default_factory=list)

    @field_validator("username", mode="before")
    @classmethod
    def normalize_username(cls, v: Any) -> Any:
        """Lowercase and validate the username charset."""
        return _normalize_username(v)

    @field_validator("interests", mode="before")
    @classmethod
    def normalize_interests(cls, v: Any) -> Any:
        """Trim interest terms, keeping their order."""
        return _normalize_interests(v)


class User(UserDraft):
    """Stored user with an ordered list of interest terms."""

    id: Annotated[str, Field(min_length=1, description="User identifier")]
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Interaction(StrictBaseModel):
    """A single user-article engagement record.

    At most one interaction exists per (user_id, article_id, kind).
    """

    id: Annotated[str, Field(min_length=1)]
    user_id: Annotated[str, Field(min_length=1)]
    article_id: Annotated[str, Field(min_length=1)]
    kind: InteractionKind
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("kind", mode="before")
    @classmethod
    def coerce_kind(cls, v: Any) -> InteractionKind:
        """Coerce string to InteractionKind enum."""
        if isinstance(v, InteractionKind):
            return v
        if isinstance(v, str):
            return InteractionKind(v.lower())
        msg = f"Invalid interaction kind: {v}"
        raise ValueError(msg)


class InteractionQuery(StrictBaseModel):
    """Supported filters when listing an article's interactions."""

    kind: InteractionKind | None = None


class InteractionStats(StrictBaseModel):
    """Per-article interaction counters."""

    views: Annotated[int, Field(ge=0)] = 0
    likes: Annotated[int, Field(ge=0)] = 0
    total: Annotated[int, Field(ge=0)] = 0
