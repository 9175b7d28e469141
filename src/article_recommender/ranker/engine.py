"""Personalized recommendation orchestrator."""

import math
import time

import structlog

from article_recommender.config.constants import ALGORITHM_NAME, COMPONENT_ENGINE
from article_recommender.config.schemas import RecommenderConfig
from article_recommender.ranker.concurrency import (
    Deadline,
    gather_store_reads,
    store_executor,
)
from article_recommender.ranker.errors import StoreUnavailableError, UserNotFoundError
from article_recommender.ranker.interest_matcher import InterestMatcher
from article_recommender.ranker.limits import resolve_limit
from article_recommender.ranker.metrics import RecommenderMetrics
from article_recommender.ranker.models import (
    Recommendation,
    RecommendationMetadata,
    RecommendationResponse,
    UserSummary,
)
from article_recommender.ranker.popularity import PopularityRanker
from article_recommender.store.models import Article, Interaction, InteractionKind, User
from article_recommender.store.protocols import (
    ArticleReader,
    InteractionReader,
    UserReader,
)


logger = structlog.get_logger()


def viewed_article_ids(interactions: list[Interaction]) -> set[str]:
    """Collect ids of articles the user has a view interaction against."""
    return {i.article_id for i in interactions if i.kind == InteractionKind.VIEW}


def candidate_pool(articles: list[Article], excluded: set[str]) -> list[Article]:
    """Drop excluded articles and repeated ids, keeping snapshot order."""
    seen: set[str] = set()
    pool: list[Article] = []
    for article in articles:
        if article.id in excluded or article.id in seen:
            continue
        seen.add(article.id)
        pool.append(article)
    return pool


class RecommendationEngine:
    """Blends interest matching and popularity into one ranked list.

    Each call:
        1. Reads the user, their interactions and all articles concurrently
        2. Excludes articles the user has viewed
        3. Offers ``ceil(limit * interest_share)`` slots to interest matching
        4. Fills the remaining ``limit - len(interest picks)`` by popularity
        5. Merges both lists with a stable descending sort and truncates

    The engine holds no per-call state and never writes to the stores.
    """

    def __init__(  # noqa: PLR0913
        self,
        articles: ArticleReader,
        users: UserReader,
        interactions: InteractionReader,
        config: RecommenderConfig | None = None,
        timeout_seconds: float | None = 5.0,
        max_workers: int = 8,
        metrics: RecommenderMetrics | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            articles: Content store reader.
            users: Identity store reader.
            interactions: Interaction store reader.
            config: Scoring weights and limits.
            timeout_seconds: Default per-call deadline; None disables it.
            max_workers: Maximum concurrent store reads.
            metrics: Optional metrics instance.
        """
        self._articles = articles
        self._users = users
        self._interactions = interactions
        self._config = config or RecommenderConfig()
        self._timeout_seconds = timeout_seconds
        self._max_workers = max_workers
        self._metrics = metrics or RecommenderMetrics.get_instance()

        self._interest_matcher = InterestMatcher(self._config.scoring)
        self._popularity_ranker = PopularityRanker(
            interactions,
            scoring=self._config.scoring,
            max_workers=max_workers,
        )
        self._log = logger.bind(component=COMPONENT_ENGINE)

    def get_recommendations_for_user(
        self,
        user_id: str,
        limit: int | None = None,
        timeout_seconds: float | None = None,
    ) -> RecommendationResponse:
        """Recommend unseen articles to a user.

        Args:
            user_id: Requesting user.
            limit: Maximum recommendations (default from config).
            timeout_seconds: Overrides the engine's default deadline.

        Returns:
            Ranked recommendations with the echoed user and metadata.

        Raises:
            InvalidLimitError: If ``limit`` is out of range.
            UserNotFoundError: If the user does not exist.
            StoreUnavailableError: If a store read fails or times out.
        """
        effective_limit = resolve_limit(limit, self._config.limits)
        deadline = Deadline.after(
            timeout_seconds if timeout_seconds is not None else self._timeout_seconds
        )
        log = self._log.bind(user_id=user_id, limit=effective_limit)

        self._metrics.record_recommendation_request()
        log.info("recommendations_started")
        start = time.perf_counter()

        try:
            response = self._recommend(user_id, effective_limit, deadline, log)
        except StoreUnavailableError as e:
            self._metrics.record_store_failure()
            log.warning(
                "recommendations_store_unavailable",
                operation=e.operation,
                reason=e.reason,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_duration(duration_ms)
        self._metrics.record_strategy_counts(
            response.metadata.interest_based_count,
            response.metadata.popularity_based_count,
        )
        log.info(
            "recommendations_complete",
            total=response.total,
            interest_based=response.metadata.interest_based_count,
            popularity_based=response.metadata.popularity_based_count,
            duration_ms=round(duration_ms, 2),
        )
        return response

    def _recommend(
        self,
        user_id: str,
        limit: int,
        deadline: Deadline,
        log: structlog.stdlib.BoundLogger,
    ) -> RecommendationResponse:
        with store_executor(self._max_workers) as executor:
            snapshot = gather_store_reads(
                executor,
                {
                    "get_user": lambda: self._users.get_user(user_id),
                    "list_interactions_by_user": (
                        lambda: self._interactions.list_interactions_by_user(user_id)
                    ),
                    "list_articles": self._articles.list_articles,
                },
                deadline,
            )

        user: User | None = snapshot["get_user"]  # type: ignore[assignment]
        if user is None:
            log.warning("recommendations_user_not_found")
            raise UserNotFoundError(user_id)

        interactions: list[Interaction] = (
            snapshot["list_interactions_by_user"] or []  # type: ignore[assignment]
        )
        articles: list[Article] = snapshot["list_articles"] or []  # type: ignore[assignment]

        excluded = viewed_article_ids(interactions)
        candidates = candidate_pool(articles, excluded)
        log.debug(
            "candidate_pool_built",
            articles=len(articles),
            excluded=len(excluded),
            candidates=len(candidates),
        )

        interest_limit = math.ceil(limit * self._config.scoring.interest_share)
        interest_picks = self._interest_matcher.recommend(
            user.interests, candidates, interest_limit
        )

        # Based on what interest matching delivered, not on its cap
        popularity_limit = limit - len(interest_picks)
        popularity_picks: list[Recommendation] = []
        if popularity_limit > 0:
            chosen = {r.article.id for r in interest_picks}
            remaining = [a for a in candidates if a.id not in chosen]
            popularity_picks = self._popularity_ranker.recommend(
                remaining, popularity_limit, deadline
            )

        merged = sorted(
            interest_picks + popularity_picks, key=lambda r: r.score, reverse=True
        )[:limit]

        return RecommendationResponse(
            recommendations=merged,
            total=len(merged),
            user=UserSummary(
                id=user.id,
                username=user.username,
                interests=list(user.interests),
            ),
            metadata=RecommendationMetadata(
                interest_based_count=len(interest_picks),
                popularity_based_count=len(popularity_picks),
                algorithm=ALGORITHM_NAME,
            ),
        )
