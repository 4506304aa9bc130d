"""Typed settings loader for the market status board."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _is_known_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")
    market_status_file: Path = Field(
        default=Path("./data/market_status.json"),
        alias="MARKET_STATUS_FILE",
    )
    viewer_timezone: str | None = Field(default=None, alias="VIEWER_TIMEZONE")
    page_size: int = Field(default=10, alias="MARKET_PAGE_SIZE")
    refresh_interval_seconds: int = Field(
        default=300,
        alias="MARKET_REFRESH_INTERVAL_SECONDS",
    )
    region_timezone_overrides: dict[str, str] = Field(
        default_factory=dict,
        alias="REGION_TIMEZONE_OVERRIDES",
    )
    chart_max_points: int = Field(default=50, alias="CHART_MAX_POINTS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("viewer_timezone", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat an empty env-string as an unset viewer timezone."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate sizes, intervals and timezone identifiers."""
        if self.page_size <= 0:
            raise ValueError("MARKET_PAGE_SIZE must be > 0.")
        if self.refresh_interval_seconds <= 0:
            raise ValueError("MARKET_REFRESH_INTERVAL_SECONDS must be > 0.")
        if self.chart_max_points <= 0:
            raise ValueError("CHART_MAX_POINTS must be > 0.")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}; got {self.log_level!r}."
            )
        if self.viewer_timezone is not None and not _is_known_timezone(self.viewer_timezone):
            raise ValueError(f"VIEWER_TIMEZONE is not a known timezone: {self.viewer_timezone}")
        for region, zone_name in self.region_timezone_overrides.items():
            if not region.strip():
                raise ValueError("REGION_TIMEZONE_OVERRIDES keys must not be empty.")
            if not _is_known_timezone(zone_name):
                raise ValueError(
                    f"REGION_TIMEZONE_OVERRIDES has unknown timezone for {region!r}: {zone_name}"
                )
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging."""
        return {
            "app_env": self.app_env,
            "market_status_file": str(self.market_status_file),
            "viewer_timezone": self.viewer_timezone or "auto",
            "page_size": self.page_size,
            "refresh_interval_seconds": self.refresh_interval_seconds,
            "region_timezone_overrides": dict(self.region_timezone_overrides),
            "chart_max_points": self.chart_max_points,
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
