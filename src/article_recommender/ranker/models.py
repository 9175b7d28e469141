"""Data models for recommendation and trending output."""

from enum import Enum
from typing import Annotated

from pydantic import Field

from article_recommender.config.constants import ALGORITHM_NAME
from article_recommender.data_model import StrictBaseModel
from article_recommender.store.models import Article


class RecommendationStrategy(str, Enum):
    """Which scorer produced a recommendation."""

    INTEREST = "interest"
    POPULARITY = "popularity"


class Recommendation(StrictBaseModel):
    """A single explained recommendation.

    Attributes:
        article: The recommended article.
        score: Ranking score; interest and popularity scores share one scale.
        reason: Human-readable justification.
        matched_interests: Interest terms found in the article, if any.
        strategy: Scorer that produced this entry.
    """

    article: Article
    score: float
    reason: str
    matched_interests: list[str] | None = None
    strategy: RecommendationStrategy


class TrendingEntry(StrictBaseModel):
    """An article ranked by global interaction volume."""

    article: Article
    score: float
    reason: str


class UserSummary(StrictBaseModel):
    """User identity echoed back with recommendations."""

    id: str
    username: str
    interests: list[str] = Field(default_factory=list)


class RecommendationMetadata(StrictBaseModel):
    """Per-strategy counts and algorithm identity."""

    interest_based_count: Annotated[int, Field(ge=0)]
    popularity_based_count: Annotated[int, Field(ge=0)]
    algorithm: str = ALGORITHM_NAME


class RecommendationResponse(StrictBaseModel):
    """Complete result of a personalized recommendation call."""

    recommendations: list[Recommendation] = Field(default_factory=list)
    total: Annotated[int, Field(ge=0)]
    user: UserSummary
    metadata: RecommendationMetadata


class InterestScoringInfo(StrictBaseModel):
    """Interest-matching weights as reported to clients."""

    title_match: float
    summary_match: float
    content_match: float
    multiple_interests_bonus: float


class PopularityScoringInfo(StrictBaseModel):
    """Popularity weights as reported to clients."""

    likes_weight: int
    views_weight: int
    score_scale: float


class TrendingScoringInfo(StrictBaseModel):
    """Trending weights as reported to clients."""

    likes_weight: int
    views_weight: int


class ScoringInfo(StrictBaseModel):
    """All scoring weights."""

    interest_based: InterestScoringInfo
    popularity_based: PopularityScoringInfo
    trending: TrendingScoringInfo


class LimitsInfo(StrictBaseModel):
    """Request limits as reported to clients."""

    max_recommendations: int
    default_recommendations: int


class AlgorithmInfo(StrictBaseModel):
    """Static description of the recommendation algorithm."""

    algorithm: str
    version: str
    description: str
    features: list[str]
    scoring: ScoringInfo
    limits: LimitsInfo
