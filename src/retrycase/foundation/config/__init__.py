"""Configuration management using pydantic-settings.

Provides environment-based retry defaults with type safety and validation.
"""

from .settings import (
    BackoffType,
    ConstantSettings,
    DecorrelatedJitterSettings,
    ExponentialSettings,
    FibonacciSettings,
    LinearSettings,
    LoggingSettings,
    PolynomialSettings,
    RetrycaseSettings,
    RetrySettings,
    StrategySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "BackoffType",
    "ConstantSettings",
    "DecorrelatedJitterSettings",
    "ExponentialSettings",
    "FibonacciSettings",
    "LinearSettings",
    "LoggingSettings",
    "PolynomialSettings",
    "RetrySettings",
    "RetrycaseSettings",
    "StrategySettings",
    "clear_settings_cache",
    "get_settings",
]
