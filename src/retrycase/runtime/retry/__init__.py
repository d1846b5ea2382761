"""Retry policies and backoff strategies.

Runs fallible operations with pluggable delays between attempts. Delays are
integer microseconds.

Example:
    >>> from retrycase.runtime.retry import RetryPolicy, ExponentialBackoff
    >>>
    >>> policy = (
    ...     RetryPolicy.with_strategy(5, ExponentialBackoff.milliseconds(100))
    ...     .with_max_delay(500_000)
    ...     .when(lambda exc, attempt: getattr(exc, "status", 500) >= 500)
    ... )
    >>> policy.execute(lambda: client.get("/orders"))
    >>>
    >>> # Function form
    >>> run = retry(3, FibonacciBackoff.milliseconds(10))
    >>> run(lambda: client.get("/orders"))
"""

from .backoff import (
    MICROS_PER_MILLI,
    MICROS_PER_SECOND,
    Backoff,
    ConstantBackoff,
    DecorrelatedJitter,
    ExponentialBackoff,
    ExponentialJitterBackoff,
    FibonacciBackoff,
    LinearBackoff,
    MaxDelay,
    PolynomialBackoff,
    truncate_delay,
)
from .factory import create_backoff, default_backoff, default_policy
from .functional import FunctionBackoff, as_backoff, retry
from .policy import (
    NO_RETRY,
    RetryPolicy,
    RetryPredicate,
    async_sleep_microseconds,
    sleep_microseconds,
)

__all__ = [
    # Backoff strategies
    "Backoff",
    "ConstantBackoff",
    "LinearBackoff",
    "ExponentialBackoff",
    "ExponentialJitterBackoff",
    "FibonacciBackoff",
    "PolynomialBackoff",
    "DecorrelatedJitter",
    "MaxDelay",
    "FunctionBackoff",
    "as_backoff",
    "truncate_delay",
    "MICROS_PER_MILLI",
    "MICROS_PER_SECOND",
    # Policy
    "RetryPolicy",
    "RetryPredicate",
    "NO_RETRY",
    "sleep_microseconds",
    "async_sleep_microseconds",
    # Function form
    "retry",
    # Configuration
    "create_backoff",
    "default_backoff",
    "default_policy",
]
