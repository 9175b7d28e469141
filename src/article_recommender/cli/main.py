"""CLI commands for the article recommender."""

import json
import logging
import sqlite3
import sys
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, NoReturn

import click
import structlog
import yaml
from pydantic import ValidationError

from article_recommender import __version__
from article_recommender.config import (
    ConfigValidationError,
    RecommenderConfig,
    load_recommender_config,
)
from article_recommender.config.constants import COMPONENT_CLI
from article_recommender.config.loader import load_yaml_mapping
from article_recommender.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from article_recommender.ranker import (
    RecommendationEngine,
    RecommendationError,
    RecommenderMetrics,
    StoreUnavailableError,
    TrendingAggregator,
    get_algorithm_info,
)
from article_recommender.settings import AppSettings, get_settings
from article_recommender.store import (
    ArticleDraft,
    InteractionKind,
    StateStore,
    StateStoreError,
    UserDraft,
)
from article_recommender.store.seed import seed_store


logger = structlog.get_logger()

EXIT_FAILURE = 1
EXIT_RETRYABLE = 2


@dataclass
class CliOptions:
    """Options shared by every command."""

    settings: AppSettings
    state_path: Path
    config: RecommenderConfig


def _fail(message: str, code: int = EXIT_FAILURE) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


def _open_store(options: CliOptions) -> StateStore:
    store = StateStore(options.state_path)
    try:
        store.connect()
    except (StateStoreError, sqlite3.Error, OSError) as e:
        _fail(f"Cannot open state database {options.state_path}: {e}", EXIT_RETRYABLE)
    return store


def _handle_recommendation_error(error: RecommendationError) -> NoReturn:
    if isinstance(error, StoreUnavailableError):
        _fail(f"{error} (retryable)", EXIT_RETRYABLE)
    _fail(str(error))


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--state",
    "state_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to SQLite state database (default: RECS_STATE_PATH).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to recommender.yaml with scoring weights and limits.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: RECS_LOG_JSON).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    state_path: Path | None,
    config_path: Path | None,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Article recommender CLI."""
    settings = get_settings()
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=settings.log_json if json_logs is None else json_logs,
    )
    bind_request_context(str(uuid.uuid4()))
    ctx.call_on_close(clear_request_context)

    try:
        config = load_recommender_config(config_path or settings.config_path)
    except ConfigValidationError as e:
        click.echo(f"Configuration validation failed for {e.file_path}:", err=True)
        for error in e.errors:
            click.echo(f"  - {error['loc']}: {error['msg']}", err=True)
        sys.exit(EXIT_FAILURE)

    ctx.obj = CliOptions(
        settings=settings,
        state_path=state_path or settings.state_path,
        config=config,
    )


@cli.command()
@click.argument("user_id")
@click.option("--limit", type=int, default=None, help="Number of recommendations (1-50).")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def recommend(
    options: CliOptions, user_id: str, limit: int | None, json_output: bool
) -> None:
    """Recommend unseen articles to USER_ID."""
    log = logger.bind(component=COMPONENT_CLI, command="recommend", user_id=user_id)

    with _open_store(options) as store:
        engine = RecommendationEngine(
            articles=store,
            users=store,
            interactions=store,
            config=options.config,
            timeout_seconds=options.settings.store_timeout_seconds,
            max_workers=options.settings.max_workers,
        )
        try:
            response = engine.get_recommendations_for_user(user_id, limit)
        except RecommendationError as e:
            log.warning("recommend_failed", error=str(e))
            _handle_recommendation_error(e)

    log.info("recommender_metrics", **RecommenderMetrics.get_instance().to_dict())

    if json_output:
        _echo_json(response.model_dump(mode="json"))
        return

    click.echo(f"Recommendations for {response.user.username}")
    click.echo(f"  Interests: {', '.join(response.user.interests) or '(none)'}")
    click.echo("=" * 40)
    for position, rec in enumerate(response.recommendations, start=1):
        click.echo(f"{position:2d}. [{rec.score:6.2f}] {rec.article.title}")
        click.echo(f"      {rec.reason}")
    click.echo("")
    click.echo(
        f"{response.total} total "
        f"({response.metadata.interest_based_count} interest-based, "
        f"{response.metadata.popularity_based_count} popularity-based, "
        f"{response.metadata.algorithm})"
    )


@cli.command()
@click.option("--limit", type=int, default=None, help="Number of entries (1-50).")
@click.option(
    "--since-hours",
    type=click.IntRange(min=1),
    default=None,
    help="Only count interactions from the last N hours (default: all time).",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def trending(
    options: CliOptions,
    limit: int | None,
    since_hours: int | None,
    json_output: bool,
) -> None:
    """List articles with the most global engagement."""
    log = logger.bind(component=COMPONENT_CLI, command="trending")
    now = datetime.now(UTC)
    since = (
        now - timedelta(hours=since_hours)
        if since_hours is not None
        else options.settings.trending_since(now)
    )

    with _open_store(options) as store:
        aggregator = TrendingAggregator(
            articles=store,
            interactions=store,
            config=options.config,
            timeout_seconds=options.settings.store_timeout_seconds,
            max_workers=options.settings.max_workers,
        )
        try:
            entries = aggregator.get_trending_articles(limit, since=since)
        except RecommendationError as e:
            log.warning("trending_failed", error=str(e))
            _handle_recommendation_error(e)

    log.info("recommender_metrics", **RecommenderMetrics.get_instance().to_dict())

    if json_output:
        _echo_json([entry.model_dump(mode="json") for entry in entries])
        return

    click.echo("Trending Articles")
    click.echo("=" * 40)
    for position, entry in enumerate(entries, start=1):
        click.echo(f"{position:2d}. [{entry.score:6.1f}] {entry.article.title}")
        click.echo(f"      {entry.reason}")


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def info(options: CliOptions, json_output: bool) -> None:
    """Show the algorithm's weights and limits."""
    algorithm = get_algorithm_info(options.config)
    if json_output:
        _echo_json(algorithm.model_dump(mode="json"))
        return

    scoring = algorithm.scoring
    click.echo(f"{algorithm.algorithm} v{algorithm.version}")
    click.echo(f"  {algorithm.description}")
    for feature in algorithm.features:
        click.echo(f"  - {feature}")
    click.echo("Interest weights:")
    click.echo(f"  title: {scoring.interest_based.title_match}")
    click.echo(f"  summary: {scoring.interest_based.summary_match}")
    click.echo(f"  content: {scoring.interest_based.content_match}")
    click.echo(f"  bonus per interest: {scoring.interest_based.multiple_interests_bonus}")
    click.echo("Popularity weights:")
    click.echo(f"  likes: {scoring.popularity_based.likes_weight}")
    click.echo(f"  views: {scoring.popularity_based.views_weight}")
    click.echo(
        f"Limits: max {algorithm.limits.max_recommendations}, "
        f"default {algorithm.limits.default_recommendations}"
    )


@cli.command()
@click.argument("fixture_path", type=click.Path(exists=True, path_type=Path))
@click.pass_obj
def seed(options: CliOptions, fixture_path: Path) -> None:
    """Load users, articles and interactions from FIXTURE_PATH (YAML)."""
    try:
        data, _checksum = load_yaml_mapping(fixture_path)
    except (ValueError, yaml.YAMLError) as e:
        _fail(f"Cannot parse {fixture_path}: {e}")

    with _open_store(options) as store:
        try:
            result = seed_store(store, data)
        except (ValidationError, StateStoreError, ValueError) as e:
            _fail(f"Seeding failed: {e}")

    click.echo(
        f"Seeded {result.users} users, {result.articles} articles, "
        f"{result.interactions} interactions."
    )


@cli.command("add-user")
@click.argument("username")
@click.option("--interest", "interests", multiple=True, help="Interest term (repeatable).")
@click.pass_obj
def add_user(options: CliOptions, username: str, interests: tuple[str, ...]) -> None:
    """Create a user."""
    try:
        draft = UserDraft(username=username, interests=list(interests))
    except ValidationError as e:
        _fail(str(e))

    with _open_store(options) as store:
        try:
            user = store.create_user(draft)
        except StateStoreError as e:
            _fail(str(e))
    click.echo(user.id)


@cli.command("add-article")
@click.option("--title", required=True, help="Article title.")
@click.option("--content", required=True, help="Article body.")
@click.option("--author", required=True, help="Author name.")
@click.option("--summary", default=None, help="Optional summary.")
@click.pass_obj
def add_article(
    options: CliOptions,
    title: str,
    content: str,
    author: str,
    summary: str | None,
) -> None:
    """Create an article."""
    try:
        draft = ArticleDraft(title=title, content=content, author=author, summary=summary)
    except ValidationError as e:
        _fail(str(e))

    with _open_store(options) as store:
        article = store.create_article(draft)
    click.echo(article.id)


@cli.command()
@click.argument("query")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def search(options: CliOptions, query: str, json_output: bool) -> None:
    """Find articles whose title, summary or content contains QUERY."""
    with _open_store(options) as store:
        try:
            articles = store.search_articles(query)
        except ValueError as e:
            _fail(str(e))

    if json_output:
        _echo_json([article.model_dump(mode="json") for article in articles])
        return

    for article in articles:
        click.echo(f"{article.id}  {article.title} (by {article.author})")
    click.echo(f"{len(articles)} matching articles")


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def users(options: CliOptions, json_output: bool) -> None:
    """List users, newest first."""
    with _open_store(options) as store:
        found = store.list_users()

    if json_output:
        _echo_json([user.model_dump(mode="json") for user in found])
        return

    for user in found:
        interests = ", ".join(user.interests) or "(none)"
        click.echo(f"{user.id}  {user.username}: {interests}")


_KIND_CHOICE = click.Choice([k.value for k in InteractionKind])


@cli.command()
@click.argument("user_id")
@click.argument("article_id")
@click.argument("kind", type=_KIND_CHOICE)
@click.pass_obj
def interact(options: CliOptions, user_id: str, article_id: str, kind: str) -> None:
    """Record that USER_ID viewed or liked ARTICLE_ID."""
    with _open_store(options) as store:
        try:
            interaction = store.record_interaction(
                user_id, article_id, InteractionKind(kind)
            )
        except StateStoreError as e:
            _fail(str(e))
    click.echo(interaction.id)


@cli.command()
@click.argument("user_id")
@click.argument("article_id")
@click.argument("kind", type=_KIND_CHOICE)
@click.pass_obj
def uninteract(options: CliOptions, user_id: str, article_id: str, kind: str) -> None:
    """Remove a recorded view or like."""
    with _open_store(options) as store:
        removed = store.remove_interaction(user_id, article_id, InteractionKind(kind))
    if not removed:
        _fail("Interaction not found")
    click.echo("Removed.")


@cli.command()
@click.argument("article_id")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def stats(options: CliOptions, article_id: str, json_output: bool) -> None:
    """Show view and like counts for ARTICLE_ID."""
    with _open_store(options) as store:
        if store.get_article(article_id) is None:
            _fail(f"Article not found: {article_id}")
        counts = store.get_interaction_stats(article_id)

    if json_output:
        _echo_json(counts.model_dump(mode="json"))
        return
    click.echo(f"views: {counts.views}")
    click.echo(f"likes: {counts.likes}")
    click.echo(f"total: {counts.total}")


@cli.command("db-stats")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def db_stats(options: CliOptions, json_output: bool) -> None:
    """Display row counts and schema version."""
    with _open_store(options) as store:
        table_counts = store.get_stats()
        schema_version = store.get_schema_version()

    if json_output:
        _echo_json({"schema_version": schema_version, "tables": table_counts})
        return

    click.echo("State Database Statistics")
    click.echo("=" * 40)
    click.echo(f"  Schema Version: {schema_version}")
    click.echo("")
    click.echo("Table Row Counts:")
    for table, count in sorted(table_counts.items()):
        click.echo(f"  {table}: {count}")


if __name__ == "__main__":
    cli()
