"""Function-style retry.

retry(max_attempts, backoff) returns a reusable executor: call it with a
zero-argument operation to run that operation under the same semantics as
RetryPolicy.execute(). The backoff may be a strategy object or a plain
(attempt) -> delay function.

Example:
    >>> run = retry(3, lambda attempt: attempt * 50_000)
    >>> run(lambda: flaky_lookup("user-42"))
    >>> run(lambda: flaky_lookup("user-43"))  # Reusable
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from .backoff import Backoff, truncate_delay
from .policy import RetryPolicy, Sleeper, sleep_microseconds

T = TypeVar("T")

DelayFunction = Callable[[int], float]


@dataclass(frozen=True, slots=True)
class FunctionBackoff:
    """Adapts a plain delay function to the Backoff protocol.

    Fractional results are truncated toward zero.
    """

    fn: DelayFunction

    def calculate(self, attempt: int) -> int:
        return truncate_delay(self.fn(attempt))


def as_backoff(backoff: Backoff | DelayFunction) -> Backoff:
    """Return backoff unchanged if it is a strategy, else wrap the function."""
    return backoff if isinstance(backoff, Backoff) else FunctionBackoff(backoff)


def retry(
    max_attempts: int,
    backoff: Backoff | DelayFunction | None = None,
    *,
    sleep: Sleeper = sleep_microseconds,
) -> Callable[[Callable[[], T]], T]:
    """Build a reusable executor closure.

    Args:
        max_attempts: Total attempts including the first one (>= 1)
        backoff: Strategy or (attempt) -> microseconds function; None = no delay
        sleep: Blocking sleep taking microseconds

    Returns:
        Function that runs an operation with retries and returns its result
    """
    policy = RetryPolicy(
        max_attempts=max_attempts,
        backoff=None if backoff is None else as_backoff(backoff),
        sleep=sleep,
    )

    def run(operation: Callable[[], T]) -> T:
        return policy.execute(operation)

    return run
