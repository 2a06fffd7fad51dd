"""Runtime settings for the harvester, read from JOB_HARVEST_* variables or .env."""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Harvester settings. Override via JOB_HARVEST_* environment variables or a .env file."""

    database_url: str = "sqlite:///jobs.db"
    http_timeout_seconds: float = 20.0
    user_agent: str = "RemoteHireHub Job Aggregator"
    max_workers: int = 3
    log_level: str = "INFO"

    remoteok_url: str = "https://remoteok.com/api"
    remotive_url: str = "https://remotive.com/api/remote-jobs"
    weworkremotely_url: str = "https://weworkremotely.com/categories/remote-full-stack-programming-jobs.rss"

    # comma-separated bearer secrets accepted by the trigger endpoint (cron + admin)
    scrape_api_keys: str = ""

    model_config = SettingsConfigDict(
        env_prefix="JOB_HARVEST_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def api_keys(self) -> List[str]:
        return [k.strip() for k in self.scrape_api_keys.split(",") if k.strip()]

    def is_authorized(self, authorization: str | None) -> bool:
        """Check an `Authorization: Bearer <token>` header against the configured keys."""
        if not authorization or not self.api_keys:
            return False
        scheme, _, token = authorization.partition(" ")
        return scheme.lower() == "bearer" and token.strip() in self.api_keys


@lru_cache
def get_settings() -> Settings:
    return Settings()
