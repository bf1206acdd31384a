"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_URL = "postgresql+asyncpg://root@localhost:26257/defaultdb"
DEFAULT_FEED_URL = "https://api.karenai.click/swechallenge/list"


class AppSettings(BaseSettings):
    """Configuration options for the analyst ratings service."""

    app_name: str = Field(default="Analyst Ratings API")
    api_prefix: str = Field(default="/api/v1")

    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        description="SQLAlchemy database URL.",
    )

    feed_base_url: str = Field(
        default=DEFAULT_FEED_URL,
        description="First page of the upstream ratings feed.",
    )
    feed_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SWE_API_KEY", "feed_api_key"),
        description="Bearer credential for the upstream feed; required only when syncing.",
    )
    feed_timeout_seconds: float = Field(default=30.0, gt=0)

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="analyst-ratings")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)
    telemetry_export_logs: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"feed_api_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_DATABASE_URL",
    "DEFAULT_FEED_URL",
    "get_settings",
]
