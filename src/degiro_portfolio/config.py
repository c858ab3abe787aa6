"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Override via environment variables (prefixed with DEGIRO_) or .env file.

    Examples:
        DEGIRO_LOG_LEVEL=DEBUG
        DEGIRO_COLOR_OUTPUT=false
        DEGIRO_REPORTING_CURRENCY=EUR
    """

    model_config = SettingsConfigDict(
        env_prefix="DEGIRO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "DEGIRO Portfolio Report"
    app_version: str = "0.1.0"
    environment: Environment = Environment.PRODUCTION
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging
    log_level: LogLevel = LogLevel.WARNING
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format: 'json' for machines, 'console' for humans",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    # Report
    reporting_currency: str = Field(
        default="EUR",
        description="Label of the currency all export values are normalized to",
    )
    color_output: bool = Field(
        default=True, description="Render gains, losses and fees with ANSI colors"
    )

    # Export format
    csv_encoding: str = "utf-8-sig"
    date_format: str = "%d-%m-%Y"
    time_format: str = "%H:%M"

    @field_validator("debug", mode="before")
    @classmethod
    def set_debug_from_environment(cls, v: bool, info) -> bool:
        """Auto-enable debug in development environment."""
        if info.data.get("environment") == Environment.DEVELOPMENT:
            return True
        return v

    @field_validator("reporting_currency", mode="after")
    @classmethod
    def validate_reporting_currency(cls, v: str) -> str:
        """Normalize the currency label to an upper-case ISO 4217 style code."""
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid currency code: {v!r}")
        return code

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings.

    Returns:
        Configured Settings instance.
    """
    return Settings()
