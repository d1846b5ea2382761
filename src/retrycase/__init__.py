"""Retrycase - retry fallible operations with pluggable backoff.

Runs an operation until it succeeds, its attempt budget runs out, or a
predicate says stop. Between attempts it sleeps for a delay computed by a
backoff strategy. Delays are integer microseconds; every strategy has
milliseconds() and seconds() constructors.

Quick Start:
    >>> from retrycase import RetryPolicy, ExponentialBackoff
    >>>
    >>> policy = RetryPolicy.with_strategy(4, ExponentialBackoff.milliseconds(200))
    >>> policy.execute(lambda: upload(chunk))

Capping and Predicates:
    >>> policy = (
    ...     RetryPolicy.times(6)
    ...     .with_backoff(FibonacciBackoff.seconds(1))
    ...     .with_max_delay(10 * MICROS_PER_SECOND)
    ...     .when(lambda exc, attempt: isinstance(exc, TimeoutError))
    ... )

Function Form:
    >>> from retrycase import retry
    >>> run = retry(3, lambda attempt: attempt * 100_000)
    >>> run(lambda: upload(chunk))

Strategies:
    ConstantBackoff(delay)                   Fixed delay
    LinearBackoff(base)                      base * n
    ExponentialBackoff(base, multiplier)     base * multiplier^(n-1)
    ExponentialJitterBackoff(base, mult)     random(0, exponential)
    FibonacciBackoff(base)                   base * fib(n)
    PolynomialBackoff(base, degree)          base * n^degree
    DecorrelatedJitter(base, max_delay)      stateful, one per sequence
    MaxDelay(backoff, max_delay)             ceiling around any strategy

Configuration (pydantic-settings):
    >>> from retrycase import default_policy
    >>> policy = default_policy()  # RETRYCASE_RETRY_* environment
"""

from __future__ import annotations

from .foundation import (
    BackoffType,
    ConfigError,
    ConfigurationException,
    ErrorCode,
    RetrycaseSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from .runtime.observability import configure_logging, get_logger
from .runtime.retry import (
    MICROS_PER_MILLI,
    MICROS_PER_SECOND,
    NO_RETRY,
    Backoff,
    ConstantBackoff,
    DecorrelatedJitter,
    ExponentialBackoff,
    ExponentialJitterBackoff,
    FibonacciBackoff,
    FunctionBackoff,
    LinearBackoff,
    MaxDelay,
    PolynomialBackoff,
    RetryPolicy,
    create_backoff,
    default_backoff,
    default_policy,
    retry,
)

__version__ = "0.1.0"

__all__ = [
    # Strategies
    "Backoff", "ConstantBackoff", "LinearBackoff", "ExponentialBackoff", "ExponentialJitterBackoff",
    "FibonacciBackoff", "PolynomialBackoff", "DecorrelatedJitter", "MaxDelay", "FunctionBackoff",
    "MICROS_PER_MILLI", "MICROS_PER_SECOND",
    # Execution
    "RetryPolicy", "NO_RETRY", "retry",
    # Configuration
    "BackoffType", "RetrySettings", "RetrycaseSettings", "get_settings", "clear_settings_cache",
    "create_backoff", "default_backoff", "default_policy",
    # Errors
    "ErrorCode", "ConfigError", "ConfigurationException",
    # Logging
    "configure_logging", "get_logger",
]
