"""Shared, deterministic timestamps for tests."""

from datetime import UTC, datetime


# Fixed timestamp so interaction windows resolve the same way everywhere.
FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)
