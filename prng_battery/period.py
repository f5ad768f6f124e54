"""Cycle detection for integer generators and LCG full-period analysis."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import gcd

from prng_battery.engines.base import IntegerAdvance
from prng_battery.engines.lcg import LCG
from prng_battery.errors import InvalidParameter

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1_000_000


@dataclass(frozen=True)
class PeriodResult:
    """Outcome of :func:`find_period`.

    ``period`` and ``repeat_value`` are ``None`` when no value repeated within
    the iteration budget.  ``tail_length`` is the step at which the repeating
    value was first emitted, i.e. how many outputs precede the cycle.
    """

    period: int | None
    repeat_value: int | None
    tail_length: int | None
    iterations: int

    @property
    def found(self) -> bool:
        return self.period is not None


def find_period(generator: IntegerAdvance,
                max_iterations: int = DEFAULT_MAX_ITERATIONS) -> PeriodResult:
    """Advance *generator* until an output repeats or the budget runs out.

    The period is the distance between the first and second occurrence of
    the first repeated value.  That equals the cycle length whenever the
    generator's whole state is its output, which holds for LCG, LFSR
    (register state) and middle-square engines.
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    seen: dict[int, int] = {}
    step = 0
    while step < max_iterations:
        value = generator.next_int()
        first = seen.get(value)
        if first is not None:
            result = PeriodResult(period=step - first, repeat_value=value,
                                  tail_length=first, iterations=step + 1)
            logger.debug("period %d found after %d steps (value %d)",
                         result.period, result.iterations, value)
            return result
        seen[value] = step
        step += 1
    logger.debug("no repeat within %d steps", max_iterations)
    return PeriodResult(period=None, repeat_value=None, tail_length=None,
                        iterations=max_iterations)


# ═══════════════════════ LCG PERIOD ANALYSIS ═══════════════════════

def prime_factors(n: int) -> tuple[int, ...]:
    """Distinct prime factors of ``|n|`` in ascending order (empty for 0 and 1)."""
    n = abs(int(n))
    factors: list[int] = []
    d = 2
    while d * d <= n:
        if n % d == 0:
            factors.append(d)
            while n % d == 0:
                n //= d
        d += 1
    if n > 1:
        factors.append(n)
    return tuple(factors)


@dataclass(frozen=True)
class HullDobell:
    """The three Hull–Dobell conditions for a full-period LCG.

    ``(a·x + c) mod m`` walks all ``m`` residues from every seed exactly when
    ``c`` is coprime to ``m``, ``a − 1`` is divisible by every prime factor of
    ``m``, and ``a − 1`` is divisible by 4 whenever ``m`` is.
    """

    coprime_increment: bool
    multiplier_divisible: bool
    multiple_of_four: bool
    prime_factors: tuple[int, ...]

    @property
    def full_period(self) -> bool:
        return self.coprime_increment and self.multiplier_divisible and self.multiple_of_four


def hull_dobell(a: int, c: int, m: int) -> HullDobell:
    """Check whether ``LCG(a, c, m)`` reaches period ``m`` for every seed."""
    if m < 1:
        raise InvalidParameter(f"Modulus must be >= 1, got {m}")
    primes = prime_factors(m)
    return HullDobell(
        coprime_increment=gcd(c, m) == 1,
        multiplier_divisible=all((a - 1) % p == 0 for p in primes),
        multiple_of_four=(a - 1) % 4 == 0 if m % 4 == 0 else True,
        prime_factors=primes,
    )


@dataclass(frozen=True)
class SeedSurvey:
    """Cycle lengths of one LCG parameter set over seeds ``0..len(periods)-1``.

    ``periods[s]`` is ``None`` when seed ``s`` found no repeat within the
    budget; the aggregates only count seeds whose period was found.
    """

    periods: tuple[int | None, ...]

    @property
    def found(self) -> tuple[int, ...]:
        return tuple(p for p in self.periods if p is not None)

    @property
    def max_period(self) -> int | None:
        return max(self.found, default=None)

    @property
    def mean_period(self) -> float | None:
        found = self.found
        return sum(found) / len(found) if found else None

    @property
    def count_max(self) -> int:
        best = self.max_period
        return sum(1 for p in self.periods if p is not None and p == best)


def analyze_seeds(a: int, c: int, m: int, seed_limit: int = 2000,
                  max_iterations: int = DEFAULT_MAX_ITERATIONS) -> SeedSurvey:
    """Run :func:`find_period` on ``LCG(seed, a, c, m)`` for seeds ``0..seed_limit``.

    The seed range is capped at ``m - 1`` since larger seeds repeat residues.
    """
    if seed_limit < 0:
        raise ValueError(f"seed_limit must be >= 0, got {seed_limit}")
    if m < 1:
        raise InvalidParameter(f"Modulus must be >= 1, got {m}")
    last = min(seed_limit, m - 1)
    periods = tuple(
        find_period(LCG(seed=seed, a=a, c=c, m=m), max_iterations=max_iterations).period
        for seed in range(last + 1)
    )
    survey = SeedSurvey(periods=periods)
    logger.debug("surveyed %d seeds of LCG(a=%d, c=%d, m=%d): max period %s",
                 len(periods), a, c, m, survey.max_period)
    return survey
