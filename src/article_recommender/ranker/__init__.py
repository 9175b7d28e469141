"""Recommendation ranking: interest matching, popularity and trending.

The engine blends interest-matched and popularity-ranked articles into one
explained list per user, excluding articles the user already viewed. The
trending aggregator ranks articles by global interaction volume.
"""

from article_recommender.ranker.engine import RecommendationEngine
from article_recommender.ranker.errors import (
    InvalidLimitError,
    InvalidWindowError,
    MissingReferenceError,
    RecommendationError,
    StoreUnavailableError,
    UserNotFoundError,
)
from article_recommender.ranker.info import get_algorithm_info
from article_recommender.ranker.interest_matcher import InterestMatch, InterestMatcher
from article_recommender.ranker.metrics import RecommenderMetrics
from article_recommender.ranker.models import (
    AlgorithmInfo,
    Recommendation,
    RecommendationMetadata,
    RecommendationResponse,
    RecommendationStrategy,
    TrendingEntry,
    UserSummary,
)
from article_recommender.ranker.popularity import PopularityRanker
from article_recommender.ranker.trending import TrendingAggregator


__all__ = [
    "AlgorithmInfo",
    "InterestMatch",
    "InterestMatcher",
    "InvalidLimitError",
    "InvalidWindowError",
    "MissingReferenceError",
    "PopularityRanker",
    "Recommendation",
    "RecommendationEngine",
    "RecommendationError",
    "RecommendationMetadata",
    "RecommendationResponse",
    "RecommendationStrategy",
    "RecommenderMetrics",
    "StoreUnavailableError",
    "TrendingAggregator",
    "TrendingEntry",
    "UserNotFoundError",
    "get_algorithm_info",
]
