"""Metrics collection for recommendation and trending calls."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class RecommenderMetrics:
    """Metrics for recommender operations.

    Attributes:
        recommendation_requests: Personalized calls started.
        trending_requests: Trending calls started.
        interest_based_total: Interest picks returned across calls.
        popularity_based_total: Popularity picks returned across calls.
        trending_entries_total: Trending entries returned across calls.
        missing_references_total: Articles skipped because they did not resolve.
        store_failures_total: Calls failed with a store error.
        durations_ms: Duration of every completed call.
    """

    recommendation_requests: int = 0
    trending_requests: int = 0
    interest_based_total: int = 0
    popularity_based_total: int = 0
    trending_entries_total: int = 0
    missing_references_total: int = 0
    store_failures_total: int = 0
    durations_ms: list[float] = field(default_factory=list)

    _instance: ClassVar["RecommenderMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RecommenderMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_recommendation_request(self) -> None:
        """Record a personalized call."""
        self.recommendation_requests += 1

    def record_trending_request(self) -> None:
        """Record a trending call."""
        self.trending_requests += 1

    def record_strategy_counts(self, interest_based: int, popularity_based: int) -> None:
        """Record how many picks each strategy contributed.

        Args:
            interest_based: Interest picks in the response.
            popularity_based: Popularity picks in the response.
        """
        self.interest_based_total += interest_based
        self.popularity_based_total += popularity_based

    def record_trending_entries(self, count: int) -> None:
        """Record returned trending entries."""
        self.trending_entries_total += count

    def record_missing_reference(self) -> None:
        """Record a skipped unresolved article."""
        self.missing_references_total += 1

    def record_store_failure(self) -> None:
        """Record a call that failed on a store read."""
        self.store_failures_total += 1

    def record_duration(self, duration_ms: float) -> None:
        """Record a completed call's duration."""
        self.durations_ms.append(duration_ms)

    def get_duration_percentiles(self) -> dict[str, float]:
        """Calculate duration percentiles (p50/p90/p99).

        Returns:
            Dictionary with p50, p90, p99 values.
        """
        if not self.durations_ms:
            return {"p50": 0.0, "p90": 0.0, "p99": 0.0}

        sorted_values = sorted(self.durations_ms)
        n = len(sorted_values)

        def percentile(p: float) -> float:
            idx = int(p * n / 100)
            return sorted_values[min(idx, n - 1)]

        return {
            "p50": percentile(50),
            "p90": percentile(90),
            "p99": percentile(99),
        }

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "recommendation_requests": self.recommendation_requests,
            "trending_requests": self.trending_requests,
            "interest_based_total": self.interest_based_total,
            "popularity_based_total": self.popularity_based_total,
            "trending_entries_total": self.trending_entries_total,
            "missing_references_total": self.missing_references_total,
            "store_failures_total": self.store_failures_total,
            "duration_percentiles": self.get_duration_percentiles(),
        }
