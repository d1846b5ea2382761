"""Build strategies and policies from configuration.

Resolves a strategy identifier to a Backoff instance using the parameters
from StrategySettings, and a whole RetrySettings block to a RetryPolicy.
Unknown identifiers are startup errors, raised as ConfigurationException.

Example:
    >>> policy = default_policy()  # From RETRYCASE_RETRY_* environment
    >>> policy.execute(sync_inventory)
    >>>
    >>> create_backoff("fibonacci", StrategySettings()).calculate(4)
    5000000
"""

from __future__ import annotations

from retrycase.foundation.config import BackoffType, RetrySettings, StrategySettings, get_settings
from retrycase.foundation.errors import ConfigurationException, ErrorCode

from .backoff import (
    Backoff,
    ConstantBackoff,
    DecorrelatedJitter,
    ExponentialBackoff,
    ExponentialJitterBackoff,
    FibonacciBackoff,
    LinearBackoff,
    PolynomialBackoff,
)
from .policy import RetryPolicy


def _resolve_type(kind: BackoffType | str) -> BackoffType:
    if isinstance(kind, BackoffType):
        return kind
    try:
        return BackoffType(kind.strip().lower())
    except ValueError:
        known = ", ".join(t.value for t in BackoffType)
        raise ConfigurationException.create(
            "default_strategy",
            f"Unknown backoff strategy {kind!r}. Use one of: {known}",
            ErrorCode.UNKNOWN_STRATEGY,
        ) from None


def create_backoff(kind: BackoffType | str, strategies: StrategySettings | None = None) -> Backoff | None:
    """Instantiate the strategy named by kind.

    Args:
        kind: Strategy identifier ("exponential", "fibonacci", ..., "none")
        strategies: Per-strategy parameters (default: built-in defaults)

    Returns:
        Backoff instance, or None for "none"

    Raises:
        ConfigurationException: kind is not a known strategy
    """
    s = strategies or StrategySettings()
    match _resolve_type(kind):
        case BackoffType.EXPONENTIAL:
            return ExponentialBackoff(s.exponential.base_us, s.exponential.multiplier)
        case BackoffType.EXPONENTIAL_JITTER:
            return ExponentialJitterBackoff(s.exponential_jitter.base_us, s.exponential_jitter.multiplier)
        case BackoffType.DECORRELATED_JITTER:
            return DecorrelatedJitter(s.decorrelated_jitter.base_us, s.decorrelated_jitter.max_us)
        case BackoffType.LINEAR:
            return LinearBackoff(s.linear.base_us)
        case BackoffType.CONSTANT:
            return ConstantBackoff(s.constant.delay_us)
        case BackoffType.FIBONACCI:
            return FibonacciBackoff(s.fibonacci.base_us)
        case BackoffType.POLYNOMIAL:
            return PolynomialBackoff(s.polynomial.base_us, s.polynomial.degree)
        case BackoffType.NONE:
            return None


def default_backoff(settings: RetrySettings | None = None) -> Backoff | None:
    """Strategy selected by settings.default_strategy.

    Builds a fresh instance per call, so a DecorrelatedJitter never leaks
    state between callers.
    """
    settings = settings or get_settings().retry
    return create_backoff(settings.default_strategy, settings.strategies)


def default_policy(settings: RetrySettings | None = None) -> RetryPolicy:
    """RetryPolicy built from settings (default: global settings)."""
    settings = settings or get_settings().retry
    return RetryPolicy(
        max_attempts=settings.max_attempts,
        backoff=default_backoff(settings),
        max_delay=settings.max_delay_us,
    )
