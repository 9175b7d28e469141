"""Global trending ranking from interaction volume."""

import time
from dataclasses import dataclass
from datetime import datetime

import structlog

from article_recommender.config.constants import COMPONENT_TRENDING
from article_recommender.config.schemas import RecommenderConfig
from article_recommender.ranker.concurrency import (
    Deadline,
    await_store_read,
    store_executor,
)
from article_recommender.ranker.errors import MissingReferenceError, StoreUnavailableError
from article_recommender.ranker.limits import resolve_limit, resolve_since
from article_recommender.ranker.metrics import RecommenderMetrics
from article_recommender.ranker.models import TrendingEntry
from article_recommender.store.models import Article, Interaction, InteractionKind
from article_recommender.store.protocols import ArticleReader, InteractionReader


logger = structlog.get_logger()


@dataclass
class ArticleTally:
    """Running view and like counters for one article."""

    views: int = 0
    likes: int = 0


def tally_interactions(interactions: list[Interaction]) -> dict[str, ArticleTally]:
    """Fold interactions into per-article counters.

    Args:
        interactions: Interactions in store order.

    Returns:
        Article id to counters, in order of first appearance.
    """
    tallies: dict[str, ArticleTally] = {}
    for interaction in interactions:
        tally = tallies.setdefault(interaction.article_id, ArticleTally())
        if interaction.kind == InteractionKind.VIEW:
            tally.views += 1
        elif interaction.kind == InteractionKind.LIKE:
            tally.likes += 1
    return tallies


class TrendingAggregator:
    """Ranks articles by ``likes * 3 + views`` across all users.

    No user's history is excluded. Without a ``since`` bound every
    interaction ever recorded counts.
    """

    def __init__(  # noqa: PLR0913
        self,
        articles: ArticleReader,
        interactions: InteractionReader,
        config: RecommenderConfig | None = None,
        timeout_seconds: float | None = 5.0,
        max_workers: int = 8,
        metrics: RecommenderMetrics | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            articles: Content store reader used to resolve article ids.
            interactions: Interaction store reader.
            config: Trending weights and limits.
            timeout_seconds: Default per-call deadline; None disables it.
            max_workers: Maximum concurrent article lookups.
            metrics: Optional metrics instance.
        """
        self._articles = articles
        self._interactions = interactions
        self._config = config or RecommenderConfig()
        self._timeout_seconds = timeout_seconds
        self._max_workers = max_workers
        self._metrics = metrics or RecommenderMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_TRENDING)

    def trending_score(self, tally: ArticleTally) -> float:
        """Weighted interaction volume of one article."""
        scoring = self._config.scoring
        return float(
            tally.likes * scoring.trending_likes_weight
            + tally.views * scoring.trending_views_weight
        )

    def _resolve_article(self, article_id: str) -> Article:
        article = self._articles.get_article(article_id)
        if article is None:
            raise MissingReferenceError(article_id)
        return article

    def get_trending_articles(
        self,
        limit: int | None = None,
        since: datetime | None = None,
        timeout_seconds: float | None = None,
    ) -> list[TrendingEntry]:
        """Rank articles by global interaction volume.

        Args:
            limit: Maximum entries (default from config).
            since: Only count interactions created at or after this time;
                must be timezone-aware.
            timeout_seconds: Overrides the default deadline.

        Returns:
            Trending entries sorted by score descending.

        Raises:
            InvalidLimitError: If ``limit`` is out of range.
            InvalidWindowError: If ``since`` is naive.
            StoreUnavailableError: If a store read fails or times out.
        """
        effective_limit = resolve_limit(limit, self._config.limits)
        window_start = resolve_since(since)
        deadline = Deadline.after(
            timeout_seconds if timeout_seconds is not None else self._timeout_seconds
        )
        log = self._log.bind(
            limit=effective_limit,
            since=window_start.isoformat() if window_start else None,
        )

        self._metrics.record_trending_request()
        log.info("trending_started")
        start = time.perf_counter()

        try:
            entries = self._rank(effective_limit, window_start, deadline, log)
        except StoreUnavailableError as e:
            self._metrics.record_store_failure()
            log.warning(
                "trending_store_unavailable",
                operation=e.operation,
                reason=e.reason,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_duration(duration_ms)
        self._metrics.record_trending_entries(len(entries))
        log.info(
            "trending_complete",
            returned=len(entries),
            duration_ms=round(duration_ms, 2),
        )
        return entries

    def _rank(
        self,
        limit: int,
        since: datetime | None,
        deadline: Deadline,
        log: structlog.stdlib.BoundLogger,
    ) -> list[TrendingEntry]:
        with store_executor(self._max_workers) as executor:
            interactions = await_store_read(
                executor.submit(self._interactions.list_interactions, since),
                "list_interactions",
                deadline,
            )
            tallies = tally_interactions(interactions or [])

            submitted = [
                (article_id, tally, executor.submit(self._resolve_article, article_id))
                for article_id, tally in tallies.items()
            ]

            entries: list[TrendingEntry] = []
            for article_id, tally, future in submitted:
                try:
                    article = await_store_read(future, "get_article", deadline)
                except MissingReferenceError:
                    self._metrics.record_missing_reference()
                    log.warning("trending_reference_missing", article_id=article_id)
                    continue

                entries.append(
                    TrendingEntry(
                        article=article,
                        score=self.trending_score(tally),
                        reason=(
                            f"Trending now ({tally.likes} likes, {tally.views} views)"
                        ),
                    )
                )

        entries.sort(key=lambda e: e.score, reverse=True)
        return entries[:limit]
