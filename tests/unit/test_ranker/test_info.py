"""Unit tests for the algorithm descriptor."""

from article_recommender.config.schemas import (
    LimitsConfig,
    RecommenderConfig,
    ScoringConfig,
)
from article_recommender.ranker.info import get_algorithm_info


class TestGetAlgorithmInfo:
    """Tests for get_algorithm_info."""

    def test_defaults(self) -> None:
        """Default weights and limits are reported."""
        info = get_algorithm_info()

        assert info.algorithm == "rule-based-v1"
        assert info.version == "1.0.0"
        assert info.description == "Simple rule-based recommendation system"
        assert info.scoring.interest_based.title_match == 3.0
        assert info.scoring.interest_based.summary_match == 2.0
        assert info.scoring.interest_based.content_match == 1.0
        assert info.scoring.interest_based.multiple_interests_bonus == 0.5
        assert info.scoring.popularity_based.likes_weight == 2
        assert info.scoring.popularity_based.views_weight == 1
        assert info.scoring.trending.likes_weight == 3
        assert info.limits.max_recommendations == 50
        assert info.limits.default_recommendations == 10

    def test_features(self) -> None:
        """Feature list describes the blend."""
        features = get_algorithm_info().features

        assert "Interest-based matching (60% weight)" in features
        assert "Popularity-based recommendations (40% weight)" in features
        assert "Excludes already viewed articles" in features

    def test_reflects_config(self) -> None:
        """Configured weights are what gets reported."""
        config = RecommenderConfig(
            scoring=ScoringConfig(title_weight=5.0, interest_share=0.5),
            limits=LimitsConfig(max_limit=20, default_limit=5),
        )
        info = get_algorithm_info(config=config)

        assert info.scoring.interest_based.title_match == 5.0
        assert info.limits.max_recommendations == 20
        assert "Interest-based matching (50% weight)" in info.features

    def test_stable(self) -> None:
        """Repeated calls describe the same algorithm."""
        assert get_algorithm_info() == get_algorithm_info()
