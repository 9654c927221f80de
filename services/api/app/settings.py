"""Application settings via Pydantic Settings."""

from functools import lru_cache
import json
from datetime import tzinfo
from zoneinfo import ZoneInfo

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Travel Deal Validator API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        validation_alias=AliasChoices("CORS_ORIGINS", "ALLOWED_ORIGINS"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, v: object) -> object:
        """A JSON array string is decoded; any other string is split on commas."""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    # Presentation
    display_timezone: str = Field(
        default="UTC",
        validation_alias=AliasChoices("DISPLAY_TIMEZONE", "TZ_DISPLAY"),
        description="IANA timezone used for the time-of-day shown in freshness checks",
    )

    @field_validator("display_timezone")
    @classmethod
    def _check_display_timezone(cls, v: str) -> str:
        v = v.strip() or "UTC"
        # Raises ZoneInfoNotFoundError (a KeyError) for unknown names.
        try:
            ZoneInfo(v)
        except (KeyError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def display_tz(self) -> tzinfo:
        """Resolved display timezone."""
        return ZoneInfo(self.display_timezone)

    # Refresh client (used by the presentation layer / CLI)
    deals_api_base_url: str = Field(
        default="http://localhost:8080",
        validation_alias=AliasChoices("DEALS_API_BASE_URL", "DEALS_API_URL"),
    )
    refresh_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices("REFRESH_TIMEOUT_SECONDS"),
        gt=0.0,
        le=120.0,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
