"""Application configuration."""

import os
from datetime import UTC, tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    entry_source: Literal["sample", "weightgurus"] = "sample"
    weightgurus_email: str | None = None
    weightgurus_password: str | None = None
    weightgurus_base_url: str = "https://api.weightgurus.com/v3"
    entries_cache_ttl_seconds: int = 300
    chart_timezone: str = "UTC"
    sample_days: int = 1000
    sample_seed: int | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_timezone(name: str) -> tzinfo:
    """Return the chart timezone, treating blank values as UTC."""
    cleaned = name.strip()
    if not cleaned or cleaned.upper() == "UTC":
        return UTC
    return ZoneInfo(cleaned)
