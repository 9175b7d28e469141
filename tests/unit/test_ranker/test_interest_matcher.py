"""Unit tests for interest matching."""

import pytest

from article_recommender.config.schemas import ScoringConfig
from article_recommender.ranker.interest_matcher import InterestMatcher, distinct_terms
from article_recommender.ranker.models import RecommendationStrategy
from tests.helpers.records import make_article


class TestDistinctTerms:
    """Tests for interest term deduplication."""

    def test_keeps_user_order(self) -> None:
        """Terms come back in the order the user listed them."""
        terms = distinct_terms(["python", "ai", "web"])
        assert [original for original, _ in terms] == ["python", "ai", "web"]

    def test_case_insensitive_duplicates_collapse(self) -> None:
        """The first spelling of a repeated term wins."""
        terms = distinct_terms(["Python", "python", "PYTHON"])
        assert terms == [("Python", "python")]

    def test_blank_terms_skipped(self) -> None:
        """Whitespace-only terms never match."""
        assert distinct_terms(["  ", "ai"]) == [("ai", "ai")]


class TestMatchArticle:
    """Tests for scoring a single article."""

    def test_scenario_title_and_summary(self) -> None:
        """Title and summary weights add up with the per-term bonus."""
        article = make_article(
            title="Advanced TypeScript Programming Techniques",
            summary="A deep dive into tech concepts for everyday work",
            content="Generics, mapped types and conditional types.",
        )
        matcher = InterestMatcher()

        match = matcher.match_article(["tech", "programming"], article)

        # "tech" is in the title ("Techniques") and summary: 3 + 2
        # "programming" is in the title: 3
        # bonus: 2 matched terms * 0.5
        assert match is not None
        assert match.score == pytest.approx(9.0)
        assert match.matched_terms == ["tech", "programming"]

    def test_title_only(self) -> None:
        """A title-only match scores the title weight plus one bonus."""
        article = make_article(title="Python tips", content="nothing relevant")
        match = InterestMatcher().match_article(["python"], article)

        assert match is not None
        assert match.score == pytest.approx(3.5)

    def test_all_fields_are_additive(self) -> None:
        """A term present everywhere earns every field weight."""
        article = make_article(
            title="Rust in production",
            summary="Why rust",
            content="We moved to rust last year.",
        )
        match = InterestMatcher().match_article(["rust"], article)

        assert match is not None
        assert match.score == pytest.approx(3.0 + 2.0 + 1.0 + 0.5)

    def test_missing_summary_is_not_matched(self) -> None:
        """Articles without a summary only match on title and content."""
        article = make_article(title="Other", content="about go", summary=None)
        match = InterestMatcher().match_article(["go"], article)

        assert match is not None
        assert match.score == pytest.approx(1.5)

    def test_case_insensitive(self) -> None:
        """Matching ignores case on both sides."""
        article = make_article(title="MACHINE LEARNING at scale")
        match = InterestMatcher().match_article(["Machine Learning"], article)

        assert match is not None
        assert match.matched_terms == ["Machine Learning"]

    def test_substring_match(self) -> None:
        """Terms match inside longer words."""
        article = make_article(title="Javascript frameworks")
        assert InterestMatcher().match_article(["java"], article) is not None

    def test_no_match_returns_none(self) -> None:
        """Articles without any term are not scored."""
        article = make_article(title="Cooking", content="Recipes")
        assert InterestMatcher().match_article(["python"], article) is None

    def test_duplicate_interest_counts_once(self) -> None:
        """Repeated terms do not double the weights or the bonus."""
        article = make_article(title="Python tips")
        match = InterestMatcher().match_article(["python", "Python"], article)

        assert match is not None
        assert match.score == pytest.approx(3.5)
        assert match.matched_terms == ["python"]

    def test_custom_weights(self) -> None:
        """Configured weights replace the defaults."""
        scoring = ScoringConfig(title_weight=10.0, multi_interest_bonus=0.0)
        article = make_article(title="Python tips")
        match = InterestMatcher(scoring).match_article(["python"], article)

        assert match is not None
        assert match.score == pytest.approx(10.0)


class TestRecommend:
    """Tests for interest-based recommendation lists."""

    def test_empty_interests(self) -> None:
        """A user without interests gets no interest picks."""
        articles = [make_article(title="Python")]
        assert InterestMatcher().recommend([], articles, 5) == []

    def test_sorted_by_score(self) -> None:
        """Higher-scoring articles come first."""
        articles = [
            make_article("a1", title="Unrelated", content="python inside"),
            make_article("a2", title="Python", summary="python", content="python"),
            make_article("a3", title="Python basics"),
        ]
        recs = InterestMatcher().recommend(["python"], articles, 10)

        assert [r.article.id for r in recs] == ["a2", "a3", "a1"]
        assert all(r.strategy == RecommendationStrategy.INTEREST for r in recs)

    def test_ties_keep_candidate_order(self) -> None:
        """Equal scores keep the order of the candidate list."""
        articles = [
            make_article("a1", title="Python one"),
            make_article("a2", title="Python two"),
            make_article("a3", title="Python three"),
        ]
        recs = InterestMatcher().recommend(["python"], articles, 10)
        assert [r.article.id for r in recs] == ["a1", "a2", "a3"]

    def test_respects_limit(self) -> None:
        """No more than ``limit`` entries are returned."""
        articles = [make_article(f"a{i}", title=f"Python {i}") for i in range(5)]
        assert len(InterestMatcher().recommend(["python"], articles, 2)) == 2

    def test_reason_lists_matched_terms(self) -> None:
        """The reason names matched terms in user order."""
        article = make_article(title="AI and Python")
        recs = InterestMatcher().recommend(["python", "web", "ai"], [article], 5)

        assert recs[0].reason == "Matches your interests: python, ai"
        assert recs[0].matched_interests == ["python", "ai"]
