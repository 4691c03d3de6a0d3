"""Configuration settings for testboard."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``TESTBOARD_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="TESTBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Report location: a file path or an http(s) URL
    report_source: str = "test-results.json"
    fetch_timeout: float = 30.0

    # Logging
    log_level: str = "WARNING"
    log_json_format: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
