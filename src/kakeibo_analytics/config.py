"""Configuration system for Kakeibo Analytics.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the analytics engine.

Usage:
    from kakeibo_analytics.config import AnalyticsConfig, configure_logging

    # Load from environment variables and .env file
    config = AnalyticsConfig()
    configure_logging(config.log_level)

    # Build a cache that honors the configured TTL
    cache = AnalyticsCache(ttl_seconds=config.cache_ttl_seconds)
"""

import logging

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class AnalyticsConfig(BaseSettings):
    """Root configuration for the analytics engine.

    Environment Variables:
        KAKEIBO_ENV: Environment name (development, staging, production, test)
        KAKEIBO_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        KAKEIBO_CACHE_TTL_SECONDS: Lifetime of a cached monthly report
        KAKEIBO_SLOW_ANALYSIS_THRESHOLD_MS: Duration above which a warning is logged
        KAKEIBO_TREND_MONTHS: Length of the monthly trend window
        KAKEIBO_USE_CACHE: Whether the cached analyzer consults its cache

    Example:
        # Load all configuration from environment
        config = AnalyticsConfig()

        # Override specific settings
        config = AnalyticsConfig(cache_ttl_seconds=600, trend_months=12)
    """

    model_config = SettingsConfigDict(
        env_prefix="KAKEIBO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    cache_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Time-to-live of a cached monthly report in seconds",
    )
    slow_analysis_threshold_ms: float = Field(
        default=2000.0,
        gt=0,
        description="Analyses slower than this are logged as warnings",
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Number of months in the monthly trend series",
    )
    use_cache: bool = Field(
        default=True,
        description="Consult and populate the report cache",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        v_upper = v.upper().strip()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {VALID_LOG_LEVELS}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog to drop events below ``level``.

    Raises:
        ConfigurationError: If ``level`` is not a standard logging level.
    """
    level_name = level.upper().strip()
    if level_name not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level: {level}",
            config_key="KAKEIBO_LOG_LEVEL",
            expected=", ".join(sorted(VALID_LOG_LEVELS)),
            actual=level,
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        cache_logger_on_first_use=False,
    )
