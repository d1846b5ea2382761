"""Backoff strategies for retry policies.

Each strategy maps a 1-indexed attempt number to a delay in microseconds:
- ConstantBackoff: Fixed delay
- LinearBackoff: base * attempt
- ExponentialBackoff: base * multiplier^(attempt - 1)
- ExponentialJitterBackoff: Full jitter over the exponential curve
- FibonacciBackoff: base * fib(attempt)
- PolynomialBackoff: base * attempt^degree
- DecorrelatedJitter: AWS-style decorrelated jitter (stateful)
- MaxDelay: Ceiling around any other strategy

Strategies never raise. Degenerate input (zero or negative attempts, zero
multipliers, negative degrees) degrades to a deterministic integer.
"""

from __future__ import annotations

import math
import random
import sys
from dataclasses import dataclass, field
from typing import Protocol, Self, runtime_checkable

MICROS_PER_MILLI = 1_000
MICROS_PER_SECOND = 1_000_000

# Saturation bound for delays that overflow float or int range
_DELAY_LIMIT = sys.maxsize


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Attempt numbers are 1-indexed (first failure = attempt 1).
    """

    def calculate(self, attempt: int) -> int:
        """Calculate delay in microseconds for given attempt number.

        Args:
            attempt: 1-indexed attempt that just failed

        Returns:
            Delay in microseconds before next attempt
        """
        ...


def truncate_delay(value: float) -> int:
    """Truncate toward zero, saturating at the delay limit."""
    if value != value:  # NaN
        return 0
    if value >= _DELAY_LIMIT:
        return _DELAY_LIMIT
    if value <= -_DELAY_LIMIT:
        return -_DELAY_LIMIT
    return int(value)


def _power(base: float, exponent: int) -> float:
    """base ** exponent with division by zero and overflow mapped to infinities."""
    try:
        return base ** exponent
    except ZeroDivisionError:
        return math.inf
    except OverflowError:
        return -math.inf if base < 0 and exponent % 2 else math.inf


def _randint(low: int, high: int) -> int:
    """Inclusive uniform integer; an inverted range collapses to low."""
    return low if low >= high else random.randint(low, high)


def _exponential(base: int, multiplier: float, attempt: int) -> int:
    return truncate_delay(base * _power(multiplier, attempt - 1))


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries.

    Simple strategy for rate-limited APIs with a known cooldown.

    Attributes:
        delay: Fixed delay in microseconds
    """

    delay: int

    @classmethod
    def milliseconds(cls, delay: int) -> Self:
        return cls(delay * MICROS_PER_MILLI)

    @classmethod
    def seconds(cls, delay: int) -> Self:
        return cls(delay * MICROS_PER_SECOND)

    def calculate(self, attempt: int) -> int:
        return truncate_delay(self.delay)


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """Linear backoff.

    Delay = base * attempt

    Attributes:
        base: Delay unit in microseconds
    """

    base: int

    @classmethod
    def milliseconds(cls, base: int) -> Self:
        return cls(base * MICROS_PER_MILLI)

    @classmethod
    def seconds(cls, base: int) -> Self:
        return cls(base * MICROS_PER_SECOND)

    def calculate(self, attempt: int) -> int:
        return truncate_delay(self.base * attempt)


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff without jitter.

    Delay = base * (multiplier ^ (attempt - 1)), truncated toward zero.
    With base=1s and multiplier=2: 1s, 2s, 4s, 8s...

    Attributes:
        base: Delay after the first failure, in microseconds
        multiplier: Exponential growth factor (default: 2.0)
    """

    base: int
    multiplier: float = 2.0

    @classmethod
    def milliseconds(cls, base: int, multiplier: float = 2.0) -> Self:
        return cls(base * MICROS_PER_MILLI, multiplier)

    @classmethod
    def seconds(cls, base: int, multiplier: float = 2.0) -> Self:
        return cls(base * MICROS_PER_SECOND, multiplier)

    def calculate(self, attempt: int) -> int:
        return _exponential(self.base, self.multiplier, attempt)


@dataclass(frozen=True, slots=True)
class ExponentialJitterBackoff:
    """Exponential backoff with full jitter.

    Delay = random(0, base * multiplier ^ (attempt - 1)), bounds inclusive.

    Spreads concurrent retriers across the whole window so they don't
    retry in lockstep.

    Attributes:
        base: Upper bound after the first failure, in microseconds
        multiplier: Exponential growth factor of the upper bound
    """

    base: int
    multiplier: float = 2.0

    @classmethod
    def milliseconds(cls, base: int, multiplier: float = 2.0) -> Self:
        return cls(base * MICROS_PER_MILLI, multiplier)

    @classmethod
    def seconds(cls, base: int, multiplier: float = 2.0) -> Self:
        return cls(base * MICROS_PER_SECOND, multiplier)

    def calculate(self, attempt: int) -> int:
        return _randint(0, _exponential(self.base, self.multiplier, attempt))


@dataclass(frozen=True, slots=True)
class FibonacciBackoff:
    """Fibonacci backoff.

    Delay = base * fib(attempt) with fib(0) = fib(1) = 1, so base=1s gives
    1s, 2s, 3s, 5s, 8s... Grows slower than exponential, faster than linear.

    Attributes:
        base: Delay unit in microseconds
    """

    base: int

    @classmethod
    def milliseconds(cls, base: int) -> Self:
        return cls(base * MICROS_PER_MILLI)

    @classmethod
    def seconds(cls, base: int) -> Self:
        return cls(base * MICROS_PER_SECOND)

    def calculate(self, attempt: int) -> int:
        return truncate_delay(self.base * _fibonacci(attempt))


def _fibonacci(n: int) -> int:
    """Iterative fib(n), stopping once the value passes the delay limit."""
    prev, curr = 1, 1
    for _ in range(2, n + 1):
        prev, curr = curr, prev + curr
        if curr > _DELAY_LIMIT:
            break
    return curr


@dataclass(frozen=True, slots=True)
class PolynomialBackoff:
    """Polynomial backoff.

    Delay = base * (attempt ^ degree), truncated toward zero.
    Degree 2 is quadratic, degree 0 is constant, negative degrees shrink.

    Attributes:
        base: Delay unit in microseconds
        degree: Polynomial exponent (default: 2)
    """

    base: int
    degree: int = 2

    @classmethod
    def milliseconds(cls, base: int, degree: int = 2) -> Self:
        return cls(base * MICROS_PER_MILLI, degree)

    @classmethod
    def seconds(cls, base: int, degree: int = 2) -> Self:
        return cls(base * MICROS_PER_SECOND, degree)

    def calculate(self, attempt: int) -> int:
        return truncate_delay(self.base * _power(attempt, self.degree))


@dataclass(slots=True)
class DecorrelatedJitter:
    """AWS-style decorrelated jitter backoff.

    Each delay is drawn from [base, previous * 3] and capped at max_delay;
    the result becomes the next call's previous. The attempt argument is
    ignored, the sequence lives on the instance.

    Not safe to share between concurrent or unrelated retry sequences.
    Build one instance per sequence.

    Reference: https://aws.amazon.com/blogs/architecture/exponential-backoff-and-jitter/

    Attributes:
        base: Minimum delay in microseconds
        max_delay: Maximum delay in microseconds
        previous: Last returned delay, starts at base
    """

    base: int
    max_delay: int
    previous: int = field(init=False)

    def __post_init__(self) -> None:
        self.previous = self.base

    @classmethod
    def milliseconds(cls, base: int, max_delay: int) -> Self:
        return cls(base * MICROS_PER_MILLI, max_delay * MICROS_PER_MILLI)

    @classmethod
    def seconds(cls, base: int, max_delay: int) -> Self:
        return cls(base * MICROS_PER_SECOND, max_delay * MICROS_PER_SECOND)

    def calculate(self, attempt: int) -> int:
        self.previous = min(self.max_delay, _randint(self.base, truncate_delay(self.previous * 3)))
        return self.previous


@dataclass(frozen=True, slots=True)
class MaxDelay:
    """Caps another strategy's delay.

    Delay = min(backoff.calculate(attempt), max_delay)

    Nesting composes: the tightest ceiling wins.

    Example:
        >>> capped = MaxDelay(ExponentialBackoff.seconds(1), 30 * MICROS_PER_SECOND)
        >>> capped.calculate(10)
        30000000

    Attributes:
        backoff: Wrapped strategy
        max_delay: Ceiling in microseconds
    """

    backoff: Backoff
    max_delay: int

    @classmethod
    def milliseconds(cls, backoff: Backoff, max_delay: int) -> Self:
        return cls(backoff, max_delay * MICROS_PER_MILLI)

    @classmethod
    def seconds(cls, backoff: Backoff, max_delay: int) -> Self:
        return cls(backoff, max_delay * MICROS_PER_SECOND)

    def calculate(self, attempt: int) -> int:
        return min(self.backoff.calculate(attempt), self.max_delay)
