"""Request validation shared by recommendation and trending calls."""

from datetime import UTC, datetime

from article_recommender.config.schemas import LimitsConfig
from article_recommender.ranker.errors import InvalidLimitError, InvalidWindowError


def resolve_limit(limit: int | None, limits: LimitsConfig) -> int:
    """Return the effective limit for a call.

    Args:
        limit: Requested limit, or None for the configured default.
        limits: Accepted bounds and default.

    Returns:
        The validated limit.

    Raises:
        InvalidLimitError: If ``limit`` is outside the accepted range.
    """
    if limit is None:
        return limits.default_limit
    if isinstance(limit, bool) or not limits.min_limit <= limit <= limits.max_limit:
        raise InvalidLimitError(limit, limits.min_limit, limits.max_limit)
    return limit


def resolve_since(since: datetime | None) -> datetime | None:
    """Return the trending window start in UTC.

    Args:
        since: Requested window start, or None for no window.

    Returns:
        The window start converted to UTC, or None.

    Raises:
        InvalidWindowError: If ``since`` is naive.
    """
    if since is None:
        return None
    if since.tzinfo is None or since.utcoffset() is None:
        raise InvalidWindowError(since)
    return since.astimezone(UTC)
