"""Metrics collection for the store."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class StoreMetrics:
    """Counters for store operations.

    Attributes:
        reads_total: Read queries executed.
        read_errors_total: Read queries that raised.
        articles_created_total: Articles inserted.
        users_created_total: Users inserted.
        interactions_created_total: Interactions inserted.
        interactions_deduplicated_total: Interaction writes that hit an
            existing (user, article, kind) record.
        interactions_removed_total: Interactions deleted.
        tx_duration_ms: Cumulative write transaction duration.
        tx_count: Number of write transactions.
    """

    reads_total: int = 0
    read_errors_total: int = 0
    articles_created_total: int = 0
    users_created_total: int = 0
    interactions_created_total: int = 0
    interactions_deduplicated_total: int = 0
    interactions_removed_total: int = 0
    tx_duration_ms: float = 0.0
    tx_count: int = 0

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_read(self) -> None:
        """Record a read query."""
        self.reads_total += 1

    def record_read_error(self) -> None:
        """Record a failed read query."""
        self.read_errors_total += 1

    def record_article_created(self) -> None:
        """Record an inserted article."""
        self.articles_created_total += 1

    def record_user_created(self) -> None:
        """Record an inserted user."""
        self.users_created_total += 1

    def record_interaction_created(self) -> None:
        """Record an inserted interaction."""
        self.interactions_created_total += 1

    def record_interaction_deduplicated(self) -> None:
        """Record a repeated interaction write."""
        self.interactions_deduplicated_total += 1

    def record_interactions_removed(self, count: int) -> None:
        """Record deleted interactions.

        Args:
            count: Number of rows removed.
        """
        self.interactions_removed_total += count

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record transaction duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.tx_duration_ms += duration_ms
        self.tx_count += 1

    @property
    def avg_tx_duration_ms(self) -> float:
        """Average write transaction duration in milliseconds."""
        if self.tx_count == 0:
            return 0.0
        return self.tx_duration_ms / self.tx_count

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "reads_total": self.reads_total,
            "read_errors_total": self.read_errors_total,
            "articles_created_total": self.articles_created_total,
            "users_created_total": self.users_created_total,
            "interactions_created_total": self.interactions_created_total,
            "interactions_deduplicated_total": self.interactions_deduplicated_total,
            "interactions_removed_total": self.interactions_removed_total,
            "tx_duration_ms": self.tx_duration_ms,
            "tx_count": self.tx_count,
        }


@dataclass
class TransactionContext:
    """Context for a single transaction with timing.

    Attributes:
        tx_id: Unique transaction identifier.
        start_time_ns: Start time in nanoseconds.
        operation: The operation being performed.
    """

    tx_id: str
    start_time_ns: int
    operation: str
    affected_rows: int = field(default=0)

    def add_affected_rows(self, rows: int) -> None:
        """Add to the affected row count.

        Args:
            rows: Number of rows affected.
        """
        self.affected_rows += rows
