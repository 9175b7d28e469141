"""Recommender configuration schema."""

from typing import Annotated

from pydantic import Field, model_validator

from article_recommender.config.constants import (
    CONTENT_MATCH_WEIGHT,
    DEFAULT_LIMIT,
    INTEREST_SHARE,
    MAX_LIMIT,
    MIN_LIMIT,
    MULTI_INTEREST_BONUS,
    POPULARITY_LIKES_WEIGHT,
    POPULARITY_SCORE_SCALE,
    POPULARITY_VIEWS_WEIGHT,
    SUMMARY_MATCH_WEIGHT,
    TITLE_MATCH_WEIGHT,
    TRENDING_LIKES_WEIGHT,
    TRENDING_VIEWS_WEIGHT,
)
from article_recommender.data_model import StrictBaseModel


class ScoringConfig(StrictBaseModel):
    """Scoring weights configuration.

    Attributes:
        title_weight: Points when an interest term occurs in the title.
        summary_weight: Points when an interest term occurs in the summary.
        content_weight: Points when an interest term occurs in the content.
        multi_interest_bonus: Flat bonus per distinct matched interest term.
        likes_weight: Popularity weight of a like.
        views_weight: Popularity weight of a view.
        popularity_scale: Multiplier applied to popularity scores on output.
        trending_likes_weight: Trending weight of a like.
        trending_views_weight: Trending weight of a view.
        interest_share: Fraction of the limit offered to interest matching.
    """

    title_weight: Annotated[float, Field(ge=0.0, le=100.0)] = TITLE_MATCH_WEIGHT
    summary_weight: Annotated[float, Field(ge=0.0, le=100.0)] = SUMMARY_MATCH_WEIGHT
    content_weight: Annotated[float, Field(ge=0.0, le=100.0)] = CONTENT_MATCH_WEIGHT
    multi_interest_bonus: Annotated[float, Field(ge=0.0, le=100.0)] = (
        MULTI_INTEREST_BONUS
    )
    likes_weight: Annotated[int, Field(ge=0, le=100)] = POPULARITY_LIKES_WEIGHT
    views_weight: Annotated[int, Field(ge=0, le=100)] = POPULARITY_VIEWS_WEIGHT
    popularity_scale: Annotated[float, Field(gt=0.0, le=1.0)] = (
        POPULARITY_SCORE_SCALE
    )
    trending_likes_weight: Annotated[int, Field(ge=0, le=100)] = (
        TRENDING_LIKES_WEIGHT
    )
    trending_views_weight: Annotated[int, Field(ge=0, le=100)] = (
        TRENDING_VIEWS_WEIGHT
    )
    interest_share: Annotated[float, Field(ge=0.0, le=1.0)] = INTEREST_SHARE


class LimitsConfig(StrictBaseModel):
    """Request limit bounds.

    Attributes:
        min_limit: Smallest accepted limit.
        max_limit: Largest accepted limit.
        default_limit: Limit used when the caller passes none.
    """

    min_limit: Annotated[int, Field(ge=1)] = MIN_LIMIT
    max_limit: Annotated[int, Field(ge=1)] = MAX_LIMIT
    default_limit: Annotated[int, Field(ge=1)] = DEFAULT_LIMIT

    @model_validator(mode="after")
    def validate_bounds(self) -> "LimitsConfig":
        """Ensure min <= default <= max."""
        if not self.min_limit <= self.default_limit <= self.max_limit:
            msg = (
                "Limits must satisfy min_limit <= default_limit <= max_limit, got "
                f"{self.min_limit}/{self.default_limit}/{self.max_limit}"
            )
            raise ValueError(msg)
        return self


class RecommenderConfig(StrictBaseModel):
    """Root configuration for recommender.yaml.

    Attributes:
        version: Schema version.
        scoring: Scoring weights.
        limits: Request limits.
    """

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
