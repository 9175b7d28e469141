"""Popularity ranking from aggregate interaction counts."""

from dataclasses import dataclass

import structlog

from article_recommender.config.schemas import ScoringConfig
from article_recommender.ranker.concurrency import Deadline, fan_out, store_executor
from article_recommender.ranker.models import Recommendation, RecommendationStrategy
from article_recommender.store.models import Article, InteractionKind
from article_recommender.store.protocols import InteractionReader


logger = structlog.get_logger()


@dataclass(frozen=True)
class EngagementCounts:
    """Like and view counts for one article."""

    likes: int
    views: int


def popularity_reason(counts: EngagementCounts) -> str:
    """Explain a popularity pick from its counters.

    Args:
        counts: The article's like and view counts.

    Returns:
        Reason text naming the non-zero counters.
    """
    if counts.likes > 0 and counts.views > 0:
        return f"Popular article ({counts.likes} likes, {counts.views} views)"
    if counts.likes > 0:
        return f"Well-liked article ({counts.likes} likes)"
    if counts.views > 0:
        return f"Trending article ({counts.views} views)"
    return "Popular article"


class PopularityRanker:
    """Ranks candidate articles by weighted like and view counts.

    Scoring formula:
        popularity = likes * likes_weight + views * views_weight
        output score = popularity * popularity_scale

    Articles with no engagement are dropped. The output scale keeps
    popularity picks below interest picks of comparable engagement.
    """

    def __init__(
        self,
        interactions: InteractionReader,
        scoring: ScoringConfig | None = None,
        max_workers: int = 8,
    ) -> None:
        """Initialize the ranker.

        Args:
            interactions: Source of per-article interaction counts.
            scoring: Popularity weights and output scale.
            max_workers: Maximum concurrent count lookups.
        """
        self._interactions = interactions
        self._scoring = scoring or ScoringConfig()
        self._max_workers = max_workers
        self._log = logger.bind(component="ranker", subcomponent="popularity")

    def _fetch_counts(self, article: Article) -> EngagementCounts:
        return EngagementCounts(
            likes=self._interactions.count_by_article_and_kind(
                article.id, InteractionKind.LIKE
            ),
            views=self._interactions.count_by_article_and_kind(
                article.id, InteractionKind.VIEW
            ),
        )

    def popularity_score(self, counts: EngagementCounts) -> int:
        """Unscaled popularity of an article."""
        return (
            counts.likes * self._scoring.likes_weight
            + counts.views * self._scoring.views_weight
        )

    def recommend(
        self,
        articles: list[Article],
        limit: int,
        deadline: Deadline | None = None,
    ) -> list[Recommendation]:
        """Produce popularity-based recommendations.

        Count lookups run concurrently and are all joined before sorting.

        Args:
            articles: Candidates, already stripped of excluded articles.
            limit: Maximum number of results.
            deadline: Call deadline for the count lookups.

        Returns:
            Recommendations sorted by popularity descending, at most ``limit``.

        Raises:
            StoreUnavailableError: If a count lookup fails or times out.
        """
        if not articles or limit <= 0:
            return []

        deadline = deadline or Deadline.after(None)
        with store_executor(self._max_workers) as executor:
            counted = fan_out(
                executor,
                articles,
                self._fetch_counts,
                "count_by_article_and_kind",
                deadline,
            )

        scored = [
            (article, counts, self.popularity_score(counts))
            for article, counts in counted
        ]
        engaged = [entry for entry in scored if entry[2] > 0]
        engaged.sort(key=lambda entry: entry[2], reverse=True)

        self._log.debug(
            "popularity_ranking_complete",
            candidates=len(articles),
            engaged=len(engaged),
            returned=min(limit, len(engaged)),
        )

        return [
            Recommendation(
                article=article,
                score=popularity * self._scoring.popularity_scale,
                reason=popularity_reason(counts),
                strategy=RecommendationStrategy.POPULARITY,
            )
            for article, counts, popularity in engaged[:limit]
        ]
