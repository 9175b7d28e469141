"""Recommender configuration: weights, limits and YAML loading."""

from article_recommender.config.loader import (
    ConfigValidationError,
    load_recommender_config,
)
from article_recommender.config.schemas import (
    LimitsConfig,
    RecommenderConfig,
    ScoringConfig,
)


__all__ = [
    "ConfigValidationError",
    "LimitsConfig",
    "RecommenderConfig",
    "ScoringConfig",
    "load_recommender_config",
]
