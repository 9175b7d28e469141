"""Unit tests for store models."""

import pytest
from pydantic import ValidationError

from article_recommender.store.models import (
    ArticleDraft,
    Interaction,
    InteractionKind,
    InteractionQuery,
    UserDraft,
)


class TestInteractionKind:
    """Tests for InteractionKind enum."""

    def test_values(self) -> None:
        """Test enum values."""
        assert InteractionKind.VIEW.value == "view"
        assert InteractionKind.LIKE.value == "like"

    def test_from_string(self) -> None:
        """Test creating from string."""
        assert InteractionKind("view") == InteractionKind.VIEW
        assert InteractionKind("like") == InteractionKind.LIKE


class TestArticleDraft:
    """Tests for ArticleDraft model."""

    def test_create_minimal(self) -> None:
        """Test creating an article without a summary."""
        draft = ArticleDraft(title="Title", content="Body", author="Jane")
        assert draft.summary is None

    def test_strips_whitespace(self) -> None:
        """Test surrounding whitespace is trimmed."""
        draft = ArticleDraft(title="  Title  ", content=" Body ", author=" Jane ")
        assert draft.title == "Title"
        assert draft.content == "Body"
        assert draft.author == "Jane"

    def test_blank_summary_is_none(self) -> None:
        """Test blank summaries are treated as absent."""
        draft = ArticleDraft(title="T", content="B", author="A", summary="   ")
        assert draft.summary is None

    def test_title_too_long(self) -> None:
        """Test titles over 200 characters are rejected."""
        with pytest.raises(ValidationError):
            ArticleDraft(title="x" * 201, content="B", author="A")

    def test_summary_too_long(self) -> None:
        """Test summaries over 500 characters are rejected."""
        with pytest.raises(ValidationError):
            ArticleDraft(title="T", content="B", author="A", summary="x" * 501)

    def test_empty_title(self) -> None:
        """Test whitespace-only titles are rejected."""
        with pytest.raises(ValidationError):
            ArticleDraft(title="   ", content="B", author="A")

    def test_immutable(self) -> None:
        """Test drafts are frozen."""
        draft = ArticleDraft(title="T", content="B", author="A")
        with pytest.raises(ValidationError):
            draft.title = "Other"  # type: ignore[misc]

    def test_extra_fields_forbidden(self) -> None:
        """Test unknown fields are rejected."""
        with pytest.raises(ValidationError):
            ArticleDraft(title="T", content="B", author="A", tags=["x"])  # type: ignore[call-arg]


class TestUserDraft:
    """Tests for UserDraft model."""

    def test_username_lowercased(self) -> None:
        """Test usernames are normalized to lowercase."""
        assert UserDraft(username="Alice_01").username == "alice_01"

    def test_username_charset(self) -> None:
        """Test usernames reject characters outside [a-z0-9_]."""
        with pytest.raises(ValidationError):
            UserDraft(username="alice smith")

    def test_username_length(self) -> None:
        """Test usernames must be 3-30 characters."""
        with pytest.raises(ValidationError):
            UserDraft(username="ab")
        with pytest.raises(ValidationError):
            UserDraft(username="a" * 31)

    def test_interests_default_empty(self) -> None:
        """Test interests default to an empty list."""
        assert UserDraft(username="alice").interests == []

    def test_interests_trimmed_in_order(self) -> None:
        """Test interest terms are trimmed and keep their order."""
        draft = UserDraft(username="alice", interests=[" python ", "AI"])
        assert draft.interests == ["python", "AI"]

    def test_too_many_interests(self) -> None:
        """Test at most 10 interests are accepted."""
        with pytest.raises(ValidationError):
            UserDraft(username="alice", interests=[f"t{i}" for i in range(11)])

    def test_blank_interest(self) -> None:
        """Test blank interest terms are rejected."""
        with pytest.raises(ValidationError):
            UserDraft(username="alice", interests=["python", "  "])

    def test_interest_too_long(self) -> None:
        """Test interest terms over 50 characters are rejected."""
        with pytest.raises(ValidationError):
            UserDraft(username="alice", interests=["x" * 51])


class TestInteraction:
    """Tests for Interaction model."""

    def test_kind_coerced_from_string(self) -> None:
        """Test kind accepts case-insensitive strings."""
        interaction = Interaction(id="i1", user_id="u1", article_id="a1", kind="LIKE")
        assert interaction.kind == InteractionKind.LIKE

    def test_invalid_kind(self) -> None:
        """Test unknown kinds are rejected."""
        with pytest.raises(ValidationError):
            Interaction(id="i1", user_id="u1", article_id="a1", kind="share")

    def test_created_at_defaults_to_utc(self) -> None:
        """Test created_at is timezone-aware by default."""
        interaction = Interaction(id="i1", user_id="u1", article_id="a1", kind="view")
        assert interaction.created_at.tzinfo is not None


class TestInteractionQuery:
    """Tests for InteractionQuery model."""

    def test_default_is_unfiltered(self) -> None:
        """Test the default query has no kind filter."""
        assert InteractionQuery().kind is None

    def test_only_kind_supported(self) -> None:
        """Test unsupported filters are rejected."""
        with pytest.raises(ValidationError):
            InteractionQuery(user_id="u1")  # type: ignore[call-arg]
