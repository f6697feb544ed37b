"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.shared import EnumEnvironment, EnumLogLevel
from src.shared.env import load_secret_file_variables  # noqa: F401


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/velo_stats",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="velo_stats", description="Name of the MongoDB database"
    )
    counters_collection: str = Field(
        default="counter_timeseries",
        description="Collection holding the hourly counter points",
    )
    weather_collection: str = Field(
        default="weather_timeseries",
        description="Collection holding the hourly weather observations",
    )
    ping_timeout_seconds: float = Field(
        default=5.0, gt=0, description="Health check ping timeout"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class AppInfoSettings(BaseSettings):
    """Service identity and HTTP server settings."""

    title: str = Field(default="Velo Stats API", description="API title")
    description: str = Field(
        default="Comparative statistics over the Montpellier bike counters, "
        "computed on Europe/Paris calendar days",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    git_commit: str = Field(
        default="unknown",
        description="Git commit hash",
        validation_alias=AliasChoices("APP_GIT_COMMIT", "GIT_COMMIT"),
    )
    build_time: str = Field(
        default="unknown",
        description="Build timestamp",
        validation_alias=AliasChoices("APP_BUILD_TIME", "BUILD_TIME"),
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_", case_sensitive=False, extra="ignore"
    )


class StatsSettings(BaseSettings):
    """Tunables of the statistics views."""

    max_zero_run: int = Field(
        default=2,
        ge=0,
        description="Longest run of zero days kept before it is treated as downtime",
    )
    min_weekly_daily_total: int = Field(
        default=50,
        ge=0,
        description="Days below this total are left out of weekly averages",
    )
    active_window_days: int = Field(
        default=14,
        gt=0,
        description="A counter is active if it reported within this many days",
    )
    fetch_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout of each series store fetch"
    )
    weather_zone: str = Field(
        default="montpellier", description="Zone of the weather observations"
    )

    model_config = SettingsConfigDict(
        env_prefix="STATS_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format",
    )
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    app: AppInfoSettings = Field(default_factory=AppInfoSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    stats: StatsSettings = Field(default_factory=StatsSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()
