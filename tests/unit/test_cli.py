"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from article_recommender.cli.main import cli
from article_recommender.ranker.metrics import RecommenderMetrics
from article_recommender.store.metrics import StoreMetrics
from article_recommender.store.store import StateStore


FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Database path inside a per-test directory."""
    StoreMetrics.reset()
    RecommenderMetrics.reset()
    return tmp_path / "state.sqlite"


def _invoke(state_path: Path, *args: str) -> Result:
    runner = CliRunner()
    return runner.invoke(
        cli, ["--state", str(state_path), "--no-json-logs", *args], catch_exceptions=False
    )


def _seed(state_path: Path) -> None:
    result = _invoke(state_path, "seed", str(FIXTURES_DIR / "seed.yaml"))
    assert result.exit_code == 0, result.output


def _user_id(state_path: Path, username: str) -> str:
    with StateStore(state_path) as store:
        user = store.get_user_by_username(username)
    assert user is not None
    return user.id


class TestSeedCommand:
    """Tests for the seed command."""

    def test_reports_counts(self, state_path: Path) -> None:
        """Seeding reports what was written."""
        result = _invoke(state_path, "seed", str(FIXTURES_DIR / "seed.yaml"))

        assert result.exit_code == 0
        assert "Seeded 3 users, 5 articles, 8 interactions." in result.output

    def test_invalid_fixture(self, state_path: Path, tmp_path: Path) -> None:
        """Malformed fixtures fail with exit code 1."""
        fixture = tmp_path / "bad.yaml"
        fixture.write_text(
            "interactions:\n  - {user: ghost, article: x, kind: view}\n",
            encoding="utf-8",
        )
        result = _invoke(state_path, "seed", str(fixture))

        assert result.exit_code == 1
        assert "Seeding failed" in result.output


class TestRecommendCommand:
    """Tests for the recommend command."""

    def test_json_output(self, state_path: Path) -> None:
        """JSON output carries recommendations, user and metadata."""
        _seed(state_path)
        result = _invoke(
            state_path, "recommend", _user_id(state_path, "alice"), "--json"
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["total"] == 2
        assert payload["user"]["username"] == "alice"
        assert payload["metadata"] == {
            "algorithm": "rule-based-v1",
            "interest_based_count": 1,
            "popularity_based_count": 1,
        }
        assert payload["recommendations"][0]["score"] == pytest.approx(9.0)

    def test_text_output(self, state_path: Path) -> None:
        """Text output lists titles with reasons."""
        _seed(state_path)
        result = _invoke(state_path, "recommend", _user_id(state_path, "alice"))

        assert result.exit_code == 0
        assert "Advanced TypeScript Programming Techniques" in result.output
        assert "Matches your interests: tech, programming" in result.output

    def test_unknown_user(self, state_path: Path) -> None:
        """Unknown users exit with code 1."""
        result = _invoke(state_path, "recommend", "missing")

        assert result.exit_code == 1
        assert "User not found: missing" in result.output

    def test_invalid_limit(self, state_path: Path) -> None:
        """Out-of-range limits exit with code 1."""
        _seed(state_path)
        result = _invoke(
            state_path, "recommend", _user_id(state_path, "alice"), "--limit", "51"
        )

        assert result.exit_code == 1
        assert "Limit must be between 1 and 50" in result.output

    def test_config_limits(self, state_path: Path) -> None:
        """Limits from --config apply."""
        _seed(state_path)
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "--state",
                str(state_path),
                "--config",
                str(FIXTURES_DIR / "recommender.yaml"),
                "recommend",
                _user_id(state_path, "alice"),
                "--limit",
                "25",
            ],
        )

        assert result.exit_code == 1
        assert "between 1 and 20" in result.output


class TestTrendingCommand:
    """Tests for the trending command."""

    def test_json_output(self, state_path: Path) -> None:
        """Trending entries are ranked by global volume."""
        _seed(state_path)
        result = _invoke(state_path, "trending", "--json", "--limit", "2")

        assert result.exit_code == 0
        entries = json.loads(result.stdout)
        assert [e["article"]["title"] for e in entries] == [
            "Sourdough at Home",
            "Winter Soups",
        ]
        assert entries[0]["reason"] == "Trending now (3 likes, 2 views)"

    def test_since_hours(self, state_path: Path) -> None:
        """A recent window still includes freshly seeded interactions."""
        _seed(state_path)
        result = _invoke(state_path, "trending", "--since-hours", "1", "--json")

        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 3


class TestInfoCommand:
    """Tests for the info command."""

    def test_json_output(self, state_path: Path) -> None:
        """Algorithm info is available without any data."""
        result = _invoke(state_path, "info", "--json")

        assert result.exit_code == 0
        info = json.loads(result.stdout)
        assert info["algorithm"] == "rule-based-v1"
        assert info["scoring"]["interest_based"]["title_match"] == 3.0
        assert info["limits"]["max_recommendations"] == 50

    def test_text_output(self, state_path: Path) -> None:
        """Text output names the algorithm and its weights."""
        result = _invoke(state_path, "info")

        assert result.exit_code == 0
        assert "rule-based-v1 v1.0.0" in result.output
        assert "title: 3.0" in result.output


class TestWriteCommands:
    """Tests for user, article and interaction commands."""

    def test_add_and_interact(self, state_path: Path) -> None:
        """Created records can be linked by an interaction."""
        user = _invoke(state_path, "add-user", "dave", "--interest", "python")
        article = _invoke(
            state_path,
            "add-article",
            "--title",
            "Python Tips",
            "--content",
            "Body",
            "--author",
            "Jane",
        )
        user_id = user.output.strip()
        article_id = article.output.strip()

        assert _invoke(state_path, "interact", user_id, article_id, "like").exit_code == 0
        # Repeating is a no-op
        assert _invoke(state_path, "interact", user_id, article_id, "like").exit_code == 0

        stats = _invoke(state_path, "stats", article_id, "--json")
        assert json.loads(stats.stdout) == {"views": 0, "likes": 1, "total": 1}

        removed = _invoke(state_path, "uninteract", user_id, article_id, "like")
        assert removed.exit_code == 0
        again = _invoke(state_path, "uninteract", user_id, article_id, "like")
        assert again.exit_code == 1

    def test_duplicate_user(self, state_path: Path) -> None:
        """Usernames are unique."""
        assert _invoke(state_path, "add-user", "dave").exit_code == 0
        result = _invoke(state_path, "add-user", "DAVE")

        assert result.exit_code == 1
        assert "Username already exists: dave" in result.output

    def test_invalid_username(self, state_path: Path) -> None:
        """Invalid usernames are rejected before touching the store."""
        result = _invoke(state_path, "add-user", "no spaces")
        assert result.exit_code == 1

    def test_interact_unknown_article(self, state_path: Path) -> None:
        """Interactions need an existing article."""
        user_id = _invoke(state_path, "add-user", "dave").output.strip()
        result = _invoke(state_path, "interact", user_id, "missing", "view")

        assert result.exit_code == 1
        assert "Article not found: missing" in result.output

    def test_stats_unknown_article(self, state_path: Path) -> None:
        """Stats for unknown articles fail."""
        assert _invoke(state_path, "stats", "missing").exit_code == 1


class TestDbStatsCommand:
    """Tests for the db-stats command."""

    def test_json_output(self, state_path: Path) -> None:
        """Row counts reflect seeded data."""
        _seed(state_path)
        result = _invoke(state_path, "db-stats", "--json")

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["tables"] == {"articles": 5, "users": 3, "interactions": 8}
        assert payload["schema_version"] == 2


class TestSearchCommand:
    """Tests for the search command."""

    def test_json_output(self, state_path: Path) -> None:
        """Matches in title, summary or content are found regardless of case."""
        _seed(state_path)
        result = _invoke(state_path, "search", "PROGRAMMING", "--json")

        assert result.exit_code == 0
        titles = {article["title"] for article in json.loads(result.stdout)}
        assert titles == {
            "Advanced TypeScript Programming Techniques",
            "Rust for Programming Beginners",
        }

    def test_no_matches(self, state_path: Path) -> None:
        """Queries matching nothing succeed with an empty listing."""
        _seed(state_path)
        result = _invoke(state_path, "search", "quantum")

        assert result.exit_code == 0
        assert "0 matching articles" in result.output

    def test_blank_query(self, state_path: Path) -> None:
        """Blank queries fail with exit code 1."""
        result = _invoke(state_path, "search", "   ")

        assert result.exit_code == 1
        assert "Search query must not be empty" in result.output


class TestUsersCommand:
    """Tests for the users command."""

    def test_json_output(self, state_path: Path) -> None:
        """Every user is listed, newest first."""
        _seed(state_path)
        result = _invoke(state_path, "users", "--json")

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [user["username"] for user in payload] == ["carol", "bob", "alice"]
        assert payload[2]["interests"] == ["tech", "programming"]

    def test_text_output(self, state_path: Path) -> None:
        """Users without interests are marked."""
        _seed(state_path)
        result = _invoke(state_path, "users")

        assert result.exit_code == 0
        assert "bob: (none)" in result.output
