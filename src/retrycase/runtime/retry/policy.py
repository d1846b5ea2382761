"""Retry policy and executor.

A RetryPolicy runs an operation up to max_attempts times, sleeping between
attempts for whatever its backoff strategy says. The operation's own
exception is re-raised unchanged once attempts run out or the retry
predicate vetoes another attempt.

Policies are frozen. with_backoff(), with_max_delay() and when() return new
policies and leave the receiver untouched, so one base policy can be cached
and specialised per call site.

Example:
    >>> policy = (
    ...     RetryPolicy.times(5)
    ...     .with_backoff(ExponentialBackoff.milliseconds(100))
    ...     .with_max_delay(500_000)
    ...     .when(lambda exc, attempt: isinstance(exc, ConnectionError))
    ... )
    >>> policy.execute(fetch_report)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from typing import Annotated, Callable, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from retrycase.runtime.observability import get_logger

from .backoff import MICROS_PER_SECOND, Backoff

T = TypeVar("T")

RetryPredicate = Callable[[Exception, int], bool]
Sleeper = Callable[[int], None]

logger = get_logger("retrycase.retry")


def sleep_microseconds(delay: int) -> None:
    """Block the calling thread for delay microseconds."""
    time.sleep(delay / MICROS_PER_SECOND)


async def async_sleep_microseconds(delay: int) -> None:
    """Park the calling task for delay microseconds."""
    await asyncio.sleep(delay / MICROS_PER_SECOND)


class RetryPolicy(BaseModel):
    """Immutable retry configuration with an execute() operation.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        backoff: Strategy for delays between attempts (None = no delay)
        max_delay: Ceiling in microseconds applied to every computed delay
        should_retry: Predicate (exc, attempt) -> bool; False stops retrying
        sleep: Blocking sleep taking microseconds, used by execute()
        async_sleep: Awaitable sleep taking microseconds, used by execute_async()
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        extra="forbid",
        revalidate_instances="never",
    )

    max_attempts: Annotated[int, Field(ge=1)] = 3
    backoff: Backoff | None = Field(default=None, repr=False)
    max_delay: int | None = None
    should_retry: RetryPredicate | None = Field(default=None, exclude=True, repr=False)
    sleep: Sleeper = Field(default=sleep_microseconds, exclude=True, repr=False)
    async_sleep: Callable[[int], Awaitable[None]] = Field(
        default=async_sleep_microseconds, exclude=True, repr=False,
    )

    @classmethod
    def times(cls, attempts: int) -> Self:
        """Policy with no delay between attempts."""
        return cls(max_attempts=attempts)

    @classmethod
    def with_strategy(cls, attempts: int, backoff: Backoff) -> Self:
        return cls(max_attempts=attempts, backoff=backoff)

    def with_backoff(self, backoff: Backoff) -> Self:
        return self.model_copy(update={"backoff": backoff})

    def with_max_delay(self, microseconds: int) -> Self:
        return self.model_copy(update={"max_delay": microseconds})

    def when(self, condition: RetryPredicate) -> Self:
        """Retry only while condition(exc, attempt) is true."""
        return self.model_copy(update={"should_retry": condition})

    @computed_field
    @property
    def is_disabled(self) -> bool:
        """Whether the operation only ever runs once."""
        return self.max_attempts == 1

    def delay_for(self, attempt: int) -> int:
        """Delay in microseconds after the given failed attempt, ceiling applied."""
        if self.backoff is None:
            return 0
        delay = self.backoff.calculate(attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

    def _continues(self, exc: Exception, attempt: int) -> bool:
        """Decide whether another attempt follows this failure."""
        if self.should_retry is not None and not self.should_retry(exc, attempt):
            logger.debug("retry vetoed", attempt=attempt, error=type(exc).__name__)
            return False
        if attempt >= self.max_attempts:
            logger.warning(
                "retry exhausted", attempt=attempt, max_attempts=self.max_attempts,
                error=type(exc).__name__, message=str(exc),
            )
            return False
        return True

    def execute(self, operation: Callable[[], T]) -> T:
        """Run operation until it returns, re-raising its last exception.

        Args:
            operation: Zero-argument callable to run

        Returns:
            Whatever the first successful call returned
        """
        attempt = 1
        while True:
            try:
                return operation()
            except Exception as exc:
                if not self._continues(exc, attempt):
                    raise
            if (delay := self.delay_for(attempt)) > 0:
                logger.debug("retry scheduled", attempt=attempt, delay_us=delay)
                self.sleep(delay)
            attempt += 1

    async def execute_async(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Async variant of execute() for coroutine functions.

        Same attempt accounting; waits with async_sleep instead of blocking.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as exc:
                if not self._continues(exc, attempt):
                    raise
            if (delay := self.delay_for(attempt)) > 0:
                logger.debug("retry scheduled", attempt=attempt, delay_us=delay)
                await self.async_sleep(delay)
            attempt += 1


# Singleton for single-shot execution
NO_RETRY = RetryPolicy(max_attempts=1)
