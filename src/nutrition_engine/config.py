"""Application configuration."""

import logging
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Energy-density factors and the calorie tolerance live in code, not here.
    """

    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"
    nutrition_debug: bool = False
    search_cache_ttl_seconds: int = 3600
    food_cache_ttl_seconds: int = 86400
    fdc_retry_attempts: int = 1

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_log_level(raw: str | None) -> int:
    """Parse a level name such as ``"debug"``; unknown names mean INFO."""
    if raw is None:
        return logging.INFO
    cleaned = raw.strip().upper()
    if cleaned.isdigit():
        return int(cleaned)
    return logging.getLevelNamesMapping().get(cleaned, logging.INFO)
