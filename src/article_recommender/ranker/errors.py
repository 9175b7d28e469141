"""Errors raised by the recommendation engine and trending aggregator.

``UserNotFoundError``, ``InvalidLimitError`` and ``InvalidWindowError`` fail
the whole call before any result is produced. ``StoreUnavailableError``
signals a collaborator read that raised or timed out and is safe to retry.
``MissingReferenceError`` is raised per item while resolving articles and
absorbed by the caller.
"""

from datetime import datetime


class RecommendationError(Exception):
    """Base exception for recommendation and trending failures."""


class UserNotFoundError(RecommendationError):
    """Raised when the requesting user id does not resolve."""

    def __init__(self, user_id: str) -> None:
        """Initialize the error.

        Args:
            user_id: The user id that was not found.
        """
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class InvalidLimitError(RecommendationError):
    """Raised when a requested limit is outside the accepted range."""

    def __init__(self, limit: int, min_limit: int, max_limit: int) -> None:
        """Initialize the error.

        Args:
            limit: The rejected limit.
            min_limit: Smallest accepted limit.
            max_limit: Largest accepted limit.
        """
        self.limit = limit
        self.min_limit = min_limit
        self.max_limit = max_limit
        super().__init__(
            f"Limit must be between {min_limit} and {max_limit}, got {limit}"
        )


class InvalidWindowError(RecommendationError):
    """Raised when a trending window start carries no timezone."""

    def __init__(self, since: datetime) -> None:
        """Initialize the error.

        Args:
            since: The rejected window start.
        """
        self.since = since
        super().__init__(
            f"Trending window start must be timezone-aware, got {since.isoformat()}"
        )


class StoreUnavailableError(RecommendationError):
    """Raised when a store read fails or exceeds the call deadline."""

    retryable = True

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize the error.

        Args:
            operation: The store read that failed.
            reason: What went wrong.
        """
        self.operation = operation
        self.reason = reason
        super().__init__(f"Store unavailable during {operation}: {reason}")


class MissingReferenceError(RecommendationError):
    """Raised when an interaction references an article that cannot be resolved."""

    def __init__(self, article_id: str) -> None:
        """Initialize the error.

        Args:
            article_id: The unresolved article id.
        """
        self.article_id = article_id
        super().__init__(f"Referenced article not found: {article_id}")
