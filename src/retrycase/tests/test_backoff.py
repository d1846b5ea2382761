"""Tests for backoff strategies.

Validates:
- Delay formulas per strategy
- Unit constructors (milliseconds/seconds)
- Jitter bounds and variance
- Decorrelated jitter state
- MaxDelay capping and nesting
- No exceptions on degenerate input
"""

from __future__ import annotations

import random
import sys

import pytest

from retrycase import (
    Backoff,
    ConstantBackoff,
    DecorrelatedJitter,
    ExponentialBackoff,
    ExponentialJitterBackoff,
    FibonacciBackoff,
    LinearBackoff,
    MaxDelay,
    PolynomialBackoff,
)
from retrycase.runtime.retry import truncate_delay


ALL_STRATEGIES: list[Backoff] = [
    ConstantBackoff(1000),
    LinearBackoff(1000),
    ExponentialBackoff(1000, 2.0),
    ExponentialJitterBackoff(1000, 2.0),
    FibonacciBackoff(1000),
    PolynomialBackoff(1000),
    PolynomialBackoff(1000, degree=0),
    PolynomialBackoff(1000, degree=-1),
    DecorrelatedJitter(1000, 60_000),
    MaxDelay(ExponentialBackoff(1000), 5000),
]


# ─────────────────────────────────────────────────────────────────────────────
# Common Contract
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: type(s).__name__)
def test_satisfies_protocol(strategy: Backoff) -> None:
    assert isinstance(strategy, Backoff)


@pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: type(s).__name__)
def test_non_negative_for_non_negative_base(strategy: Backoff) -> None:
    for attempt in range(1, 40):
        delay = strategy.calculate(attempt)
        assert isinstance(delay, int)
        assert delay >= 0


@pytest.mark.parametrize("strategy", ALL_STRATEGIES, ids=lambda s: type(s).__name__)
@pytest.mark.parametrize("attempt", [0, -1, -5, 10_000])
def test_degenerate_attempts_return_ints(strategy: Backoff, attempt: int) -> None:
    assert isinstance(strategy.calculate(attempt), int)


def test_truncate_delay_saturates() -> None:
    assert truncate_delay(float("inf")) == sys.maxsize
    assert truncate_delay(float("-inf")) == -sys.maxsize
    assert truncate_delay(float("nan")) == 0
    assert truncate_delay(12.9) == 12
    assert truncate_delay(-12.9) == -12


# ─────────────────────────────────────────────────────────────────────────────
# Constant & Linear
# ─────────────────────────────────────────────────────────────────────────────


def test_constant_ignores_attempt() -> None:
    backoff = ConstantBackoff(250_000)
    assert {backoff.calculate(n) for n in range(-3, 20)} == {250_000}


def test_linear_scales_with_attempt() -> None:
    backoff = LinearBackoff(1000)
    for n in range(1, 20):
        assert backoff.calculate(n) == 1000 * n


def test_linear_negative_attempt_is_negative() -> None:
    assert LinearBackoff(1000).calculate(-2) == -2000


def test_unit_constructors_are_exact() -> None:
    assert ConstantBackoff.milliseconds(5).calculate(1) == 5_000
    assert ConstantBackoff.seconds(5).calculate(1) == 5_000_000
    assert LinearBackoff.milliseconds(250).calculate(2) == 500_000
    assert LinearBackoff.seconds(2).calculate(3) == 6_000_000
    assert ExponentialBackoff.seconds(1).calculate(1) == 1_000_000
    assert ExponentialBackoff.milliseconds(100, 3.0).calculate(3) == 900_000
    assert FibonacciBackoff.milliseconds(1).calculate(5) == 8_000
    assert PolynomialBackoff.seconds(1, 3).calculate(2) == 8_000_000
    assert DecorrelatedJitter.seconds(1, 10) == DecorrelatedJitter(1_000_000, 10_000_000)
    assert MaxDelay.milliseconds(LinearBackoff.seconds(1), 1500).calculate(5) == 1_500_000


# ─────────────────────────────────────────────────────────────────────────────
# Exponential
# ─────────────────────────────────────────────────────────────────────────────


def test_exponential_sequence() -> None:
    backoff = ExponentialBackoff(100_000, 2.0)
    assert [backoff.calculate(n) for n in range(1, 6)] == [100_000, 200_000, 400_000, 800_000, 1_600_000]


def test_exponential_successive_ratio() -> None:
    backoff = ExponentialBackoff(1000, 3.0)
    for n in range(1, 15):
        assert backoff.calculate(n + 1) == backoff.calculate(n) * 3


def test_exponential_truncates_fractional_results() -> None:
    assert ExponentialBackoff(1000, 1.5).calculate(2) == 1500
    assert ExponentialBackoff(1000, 1.5).calculate(3) == 2250
    assert ExponentialBackoff(1001, 1.5).calculate(2) == 1501


def test_exponential_pathological_multipliers() -> None:
    assert ExponentialBackoff(1000, 0.0).calculate(1) == 1000
    assert ExponentialBackoff(1000, 0.0).calculate(3) == 0
    assert ExponentialBackoff(1000, 0.0).calculate(0) == sys.maxsize
    assert ExponentialBackoff(0, 0.0).calculate(0) == 0
    assert ExponentialBackoff(1000, -2.0).calculate(2) == -2000


def test_exponential_overflow_saturates() -> None:
    assert ExponentialBackoff(1000, 2.0).calculate(10_000) == sys.maxsize


# ─────────────────────────────────────────────────────────────────────────────
# Exponential with Jitter
# ─────────────────────────────────────────────────────────────────────────────


def test_exponential_jitter_within_bounds() -> None:
    backoff = ExponentialJitterBackoff(1000, 2.0)
    for n in range(1, 1201):
        attempt = n % 12 + 1
        assert 0 <= backoff.calculate(attempt) <= 1000 * 2 ** (attempt - 1)


def test_exponential_jitter_varies() -> None:
    backoff = ExponentialJitterBackoff(1_000_000, 2.0)
    samples = {backoff.calculate(3) for _ in range(200)}
    assert len(samples) > 1


def test_exponential_jitter_zero_upper_bound() -> None:
    assert ExponentialJitterBackoff(0, 2.0).calculate(5) == 0
    assert ExponentialJitterBackoff(-1000, 2.0).calculate(1) == 0


# ─────────────────────────────────────────────────────────────────────────────
# Fibonacci
# ─────────────────────────────────────────────────────────────────────────────


def test_fibonacci_sequence() -> None:
    backoff = FibonacciBackoff(1000)
    assert [backoff.calculate(n) for n in range(1, 9)] == [1000, 2000, 3000, 5000, 8000, 13000, 21000, 34000]


def test_fibonacci_low_attempts_use_one() -> None:
    backoff = FibonacciBackoff(1000)
    assert backoff.calculate(0) == 1000
    assert backoff.calculate(-7) == 1000


def test_fibonacci_large_attempt_is_fast_and_saturates() -> None:
    assert FibonacciBackoff(1).calculate(1_000_000) == sys.maxsize
    assert FibonacciBackoff(0).calculate(1_000_000) == 0


# ─────────────────────────────────────────────────────────────────────────────
# Polynomial
# ─────────────────────────────────────────────────────────────────────────────


def test_polynomial_default_is_quadratic() -> None:
    backoff = PolynomialBackoff(1000)
    assert backoff.calculate(3) == 9000
    assert [backoff.calculate(n) for n in range(1, 5)] == [1000, 4000, 9000, 16000]


def test_polynomial_degree_zero_is_constant() -> None:
    backoff = PolynomialBackoff(1000, degree=0)
    assert {backoff.calculate(n) for n in range(0, 30)} == {1000}


def test_polynomial_negative_degree_shrinks() -> None:
    backoff = PolynomialBackoff(1000, degree=-1)
    assert backoff.calculate(1) == 1000
    assert backoff.calculate(3) == 333
    assert backoff.calculate(4000) == 0


def test_polynomial_negative_degree_at_zero_does_not_raise() -> None:
    assert PolynomialBackoff(1000, degree=-1).calculate(0) == sys.maxsize
    assert PolynomialBackoff(0, degree=-2).calculate(0) == 0


# ─────────────────────────────────────────────────────────────────────────────
# Decorrelated Jitter
# ─────────────────────────────────────────────────────────────────────────────


def test_decorrelated_first_call_in_range() -> None:
    for _ in range(200):
        backoff = DecorrelatedJitter(1000, 60_000)
        assert 1000 <= backoff.calculate(1) <= 3000


def test_decorrelated_first_call_clamped_to_max() -> None:
    backoff = DecorrelatedJitter(1000, 1500)
    assert 1000 <= backoff.calculate(1) <= 1500


def test_decorrelated_results_stay_in_range() -> None:
    backoff = DecorrelatedJitter(1000, 50_000)
    for n in range(500):
        assert 1000 <= backoff.calculate(n) <= 50_000


def test_decorrelated_saturates_near_max() -> None:
    backoff = DecorrelatedJitter(1000, 5000)
    tail = [backoff.calculate(1) for _ in range(300)][-100:]
    assert sum(1 for d in tail if d == 5000) > 25
    assert max(tail) == 5000


def test_decorrelated_tracks_previous_delay() -> None:
    backoff = DecorrelatedJitter(1000, 1_000_000)
    assert backoff.previous == 1000
    first = backoff.calculate(1)
    assert backoff.previous == first
    second = backoff.calculate(1)
    assert 1000 <= second <= first * 3
    assert backoff.previous == second


def test_decorrelated_instances_do_not_share_state() -> None:
    a = DecorrelatedJitter(1000, 1_000_000)
    b = DecorrelatedJitter(1000, 1_000_000)
    for _ in range(10):
        a.calculate(1)
    assert b.previous == 1000


def test_decorrelated_is_reproducible_with_seeded_random() -> None:
    random.seed(7)
    first = [DecorrelatedJitter(1000, 90_000).calculate(1) for _ in range(5)]
    random.seed(7)
    second = [DecorrelatedJitter(1000, 90_000).calculate(1) for _ in range(5)]
    assert first == second


def test_decorrelated_inverted_range_does_not_raise() -> None:
    backoff = DecorrelatedJitter(-1000, 5000)
    assert backoff.calculate(1) == -1000


# ─────────────────────────────────────────────────────────────────────────────
# MaxDelay
# ─────────────────────────────────────────────────────────────────────────────


def test_max_delay_caps_wrapped_strategy() -> None:
    inner = ExponentialBackoff(1000, 2.0)
    capped = MaxDelay(inner, 10_000)
    for n in range(1, 30):
        assert capped.calculate(n) == min(inner.calculate(n), 10_000)


def test_max_delay_passes_small_values_through() -> None:
    assert MaxDelay(ConstantBackoff(500), 10_000).calculate(1) == 500


def test_nested_max_delay_takes_tightest_ceiling() -> None:
    inner = LinearBackoff(1000)
    nested = MaxDelay(MaxDelay(inner, 5000), 8000)
    reversed_nesting = MaxDelay(MaxDelay(inner, 8000), 5000)
    single = MaxDelay(inner, 5000)
    for n in range(1, 20):
        assert nested.calculate(n) == single.calculate(n) == reversed_nesting.calculate(n)


def test_strategies_are_immutable() -> None:
    backoff = ExponentialBackoff(1000)
    with pytest.raises(AttributeError):
        backoff.base = 5  # type: ignore[misc]
