"""Application settings powered by Pydantic BaseSettings."""

from datetime import datetime, timedelta
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    state_path: Path = Field(default=Path("state/recommender.sqlite"))
    config_path: Path | None = Field(default=None)
    store_timeout_seconds: float = Field(default=5.0, gt=0.0)
    max_workers: int = Field(default=8, ge=1, le=64)
    trending_window_hours: int | None = Field(default=None, ge=1)
    log_json: bool = Field(default=True)

    def trending_since(self, now: datetime) -> datetime | None:
        """Return the start of the trending window, if one is configured."""
        if self.trending_window_hours is None:
            return None
        return now - timedelta(hours=self.trending_window_hours)


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
