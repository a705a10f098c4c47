"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    return AppSettings()


def _build_validation_settings() -> "ValidationSettings":
    return ValidationSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class AppSettings(BaseSettings):
    """Rate limiting and HTTP-surface configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enforce per-action rate limits on HTTP routes",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    login_rate_limit_requests: int = Field(
        5,
        description="Login attempts allowed per window (per email)",
        ge=1,
    )
    login_rate_limit_window_ms: int = Field(
        300_000,
        description="Login attempt window in milliseconds",
        ge=1,
    )
    link_rate_limit_requests: int = Field(
        10,
        description="Link creations allowed per window (per user)",
        ge=1,
    )
    link_rate_limit_window_ms: int = Field(
        60_000,
        description="Link creation window in milliseconds",
        ge=1,
    )
    api_rate_limit_requests: int = Field(
        100,
        description="Generic API calls allowed per window (per client)",
        ge=1,
    )
    api_rate_limit_window_ms: int = Field(
        60_000,
        description="Generic API call window in milliseconds",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class ValidationSettings(BaseSettings):
    """Length limits applied by the form validators."""

    max_title_length: int = Field(200, ge=1, description="Maximum link title length")
    max_description_length: int = Field(
        1000, ge=1, description="Maximum link description length"
    )
    max_bio_length: int = Field(500, ge=1, description="Maximum profile bio length")
    max_display_name_length: int = Field(
        100, ge=1, description="Maximum profile display name length"
    )
    min_password_length: int = Field(
        8, ge=1, description="Minimum password length for credential validation"
    )

    model_config = SettingsConfigDict(
        env_prefix="VALIDATION_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read/propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting is out of range.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    validation: ValidationSettings = Field(default_factory=_build_validation_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()
