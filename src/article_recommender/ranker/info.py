"""Static description of the recommendation algorithm."""

from article_recommender.config.constants import ALGORITHM_NAME, ALGORITHM_VERSION
from article_recommender.config.schemas import RecommenderConfig
from article_recommender.ranker.models import (
    AlgorithmInfo,
    InterestScoringInfo,
    LimitsInfo,
    PopularityScoringInfo,
    ScoringInfo,
    TrendingScoringInfo,
)


def get_algorithm_info(config: RecommenderConfig | None = None) -> AlgorithmInfo:
    """Describe the active weights and limits for client-side transparency.

    Args:
        config: Configuration to describe (defaults to built-in weights).

    Returns:
        Algorithm descriptor; computing it touches no store.
    """
    config = config or RecommenderConfig()
    scoring = config.scoring
    interest_pct = round(scoring.interest_share * 100)

    return AlgorithmInfo(
        algorithm=ALGORITHM_NAME,
        version=ALGORITHM_VERSION,
        description="Simple rule-based recommendation system",
        features=[
            f"Interest-based matching ({interest_pct}% weight)",
            f"Popularity-based recommendations ({100 - interest_pct}% weight)",
            "Excludes already viewed articles",
            "Trending articles support",
        ],
        scoring=ScoringInfo(
            interest_based=InterestScoringInfo(
                title_match=scoring.title_weight,
                summary_match=scoring.summary_weight,
                content_match=scoring.content_weight,
                multiple_interests_bonus=scoring.multi_interest_bonus,
            ),
            popularity_based=PopularityScoringInfo(
                likes_weight=scoring.likes_weight,
                views_weight=scoring.views_weight,
                score_scale=scoring.popularity_scale,
            ),
            trending=TrendingScoringInfo(
                likes_weight=scoring.trending_likes_weight,
                views_weight=scoring.trending_views_weight,
            ),
        ),
        limits=LimitsInfo(
            max_recommendations=config.limits.max_limit,
            default_recommendations=config.limits.default_limit,
        ),
    )
