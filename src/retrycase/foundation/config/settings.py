"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated retry defaults from environment variables.
Supports .env files and nested per-strategy parameters.

Example:
    >>> from retrycase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_attempts
    3
    >>> settings.retry.default_strategy
    <BackoffType.EXPONENTIAL: 'exponential'>

    # Or with environment variables:
    # RETRYCASE_RETRY_MAX_ATTEMPTS=5
    # RETRYCASE_RETRY_DEFAULT_STRATEGY=fibonacci
    # RETRYCASE_RETRY_STRATEGIES__FIBONACCI__BASE_US=250000
    # RETRYCASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ONE_SECOND_US = 1_000_000


class BackoffType(StrEnum):
    """Strategy identifiers accepted in configuration."""
    EXPONENTIAL = "exponential"
    EXPONENTIAL_JITTER = "exponential_jitter"
    DECORRELATED_JITTER = "decorrelated_jitter"
    LINEAR = "linear"
    CONSTANT = "constant"
    FIBONACCI = "fibonacci"
    POLYNOMIAL = "polynomial"
    NONE = "none"


class ExponentialSettings(BaseModel):
    """base * multiplier^(attempt - 1). 1s, 2s, 4s, 8s..."""
    base_us: int = ONE_SECOND_US
    multiplier: PositiveFloat = 2.0


class DecorrelatedJitterSettings(BaseModel):
    """Random delay in [base, previous * 3], capped at max_us."""
    base_us: int = ONE_SECOND_US
    max_us: int = 60 * ONE_SECOND_US


class LinearSettings(BaseModel):
    base_us: int = ONE_SECOND_US


class ConstantSettings(BaseModel):
    delay_us: int = ONE_SECOND_US


class FibonacciSettings(BaseModel):
    base_us: int = ONE_SECOND_US


class PolynomialSettings(BaseModel):
    """base * attempt^degree. Degree 2 is quadratic growth."""
    base_us: int = ONE_SECOND_US
    degree: int = 2


class StrategySettings(BaseModel):
    """Parameters for every strategy; only the selected one is used."""
    exponential: ExponentialSettings = Field(default_factory=ExponentialSettings)
    exponential_jitter: ExponentialSettings = Field(default_factory=ExponentialSettings)
    decorrelated_jitter: DecorrelatedJitterSettings = Field(default_factory=DecorrelatedJitterSettings)
    linear: LinearSettings = Field(default_factory=LinearSettings)
    constant: ConstantSettings = Field(default_factory=ConstantSettings)
    fibonacci: FibonacciSettings = Field(default_factory=FibonacciSettings)
    polynomial: PolynomialSettings = Field(default_factory=PolynomialSettings)


class RetrySettings(BaseSettings):
    """Default retry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_RETRY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    max_attempts: PositiveInt = 3
    max_delay_us: int | None = Field(
        default=60 * ONE_SECOND_US,
        description="Ceiling applied to every computed delay; None disables it",
    )
    default_strategy: BackoffType = BackoffType.EXPONENTIAL
    strategies: StrategySettings = Field(default_factory=StrategySettings)

    @field_validator("default_strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, v: str) -> str:
        """Accept mixed-case identifiers."""
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("max_delay_us", mode="before")
    @classmethod
    def _parse_disabled_ceiling(cls, v: object) -> object:
        """Map "", "null" and "none" from the environment to None."""
        return None if isinstance(v, str) and v.strip().lower() in ("", "null", "none") else v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrycaseSettings(BaseSettings):
    """Root settings for retrycase.

    Loads configuration from environment variables with RETRYCASE_ prefix.

    Example environment variables:
        RETRYCASE_RETRY_MAX_ATTEMPTS=5
        RETRYCASE_RETRY_MAX_DELAY_US=30000000
        RETRYCASE_RETRY_DEFAULT_STRATEGY=decorrelated_jitter
        RETRYCASE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrycaseSettings:
    """Get the global settings instance (cached)."""
    return RetrycaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
