"""Interest term matching against article text.

Each interest term is tested for case-insensitive substring containment in
the title, the summary (when present) and the content. Field weights are
additive, so a term found in all three fields earns every field weight.
A flat bonus per distinct matched term is added once per article.
"""

from dataclasses import dataclass

import structlog

from article_recommender.config.schemas import ScoringConfig
from article_recommender.ranker.models import Recommendation, RecommendationStrategy
from article_recommender.store.models import Article


logger = structlog.get_logger()


@dataclass(frozen=True)
class InterestMatch:
    """Result of matching one article against a user's interests.

    Attributes:
        score: Field weights plus the multi-interest bonus.
        matched_terms: Matched terms in the user's spelling and order.
    """

    score: float
    matched_terms: list[str]


def distinct_terms(interests: list[str]) -> list[tuple[str, str]]:
    """Deduplicate interest terms case-insensitively.

    Args:
        interests: Interest terms in user order.

    Returns:
        (original, lowered) pairs, first spelling of each term kept.
    """
    seen: set[str] = set()
    terms: list[tuple[str, str]] = []
    for interest in interests:
        lowered = interest.strip().lower()
        if not lowered or lowered in seen:
            continue
        seen.add(lowered)
        terms.append((interest, lowered))
    return terms


class InterestMatcher:
    """Scores articles by how well they match a list of interest terms."""

    def __init__(self, scoring: ScoringConfig | None = None) -> None:
        """Initialize the matcher.

        Args:
            scoring: Weights for title, summary, content and the bonus.
        """
        self._scoring = scoring or ScoringConfig()

    def match_article(
        self, interests: list[str], article: Article
    ) -> InterestMatch | None:
        """Score a single article.

        Args:
            interests: The user's interest terms.
            article: Candidate article.

        Returns:
            The match, or None when no term occurs in any field.
        """
        title = article.title.lower()
        summary = article.summary.lower() if article.summary else None
        content = article.content.lower()

        score = 0.0
        matched: list[str] = []

        for original, term in distinct_terms(interests):
            in_title = term in title
            in_summary = summary is not None and term in summary
            in_content = term in content
            if not (in_title or in_summary or in_content):
                continue

            matched.append(original)
            if in_title:
                score += self._scoring.title_weight
            if in_summary:
                score += self._scoring.summary_weight
            if in_content:
                score += self._scoring.content_weight

        if not matched:
            return None

        score += self._scoring.multi_interest_bonus * len(matched)
        return InterestMatch(score=score, matched_terms=matched)

    def recommend(
        self,
        interests: list[str],
        articles: list[Article],
        limit: int,
    ) -> list[Recommendation]:
        """Produce interest-based recommendations.

        Args:
            interests: The user's interest terms.
            articles: Candidate pool, in the order ties should keep.
            limit: Maximum number of results.

        Returns:
            Recommendations sorted by score descending, at most ``limit``.
        """
        if not interests or limit <= 0:
            return []

        recommendations: list[Recommendation] = []
        for article in articles:
            match = self.match_article(interests, article)
            if match is None:
                continue
            recommendations.append(
                Recommendation(
                    article=article,
                    score=match.score,
                    reason=f"Matches your interests: {', '.join(match.matched_terms)}",
                    matched_interests=match.matched_terms,
                    strategy=RecommendationStrategy.INTEREST,
                )
            )

        # sorted() is stable, so equal scores keep candidate order
        ranked = sorted(recommendations, key=lambda r: r.score, reverse=True)

        logger.debug(
            "interest_matching_complete",
            component="ranker",
            subcomponent="interest_matcher",
            candidates=len(articles),
            matched=len(recommendations),
            returned=min(limit, len(ranked)),
        )
        return ranked[:limit]
