"""Combined primality / Möbius sieve.

A single increasing sweep marks composites, accumulates the sign of the
Möbius function and zeroes it for square-divisible integers. The result is an
immutable SieveTable shared read-only by renderers and the gap explorer.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

# Tested up to here; beyond it the three tables start to exhaust memory.
MAX_SIEVE_LIMIT = 20_000_000


class SieveLimitError(ValueError):
    """Requested sieve limit exceeds the configured ceiling."""


@dataclass(frozen=True)
class SieveTable:
    """Primality and Möbius values for every integer in [0, limit).

    Attributes:
        limit: Exclusive upper bound of the table.
        is_prime: Boolean array, True where the index is prime.
        mobius: int8 array with values in {-1, 0, 1}.
        omega: uint8 array counting distinct prime factors, or None.
    """

    limit: int
    is_prime: np.ndarray
    mobius: np.ndarray
    omega: np.ndarray | None = None

    def __contains__(self, n: int) -> bool:
        return 0 <= n < self.limit

    def is_twin(self, n: int) -> bool:
        """True when n has a prime at distance 2 on either side."""
        below = n >= 2 and bool(self.is_prime[n - 2])
        above = n + 2 < self.limit and bool(self.is_prime[n + 2])
        return below or above

    def primes(self) -> np.ndarray:
        """Ordered array of all primes in the table."""
        return np.flatnonzero(self.is_prime).astype(np.int64)


def build_sieve(
    limit: int,
    with_omega: bool = False,
    ceiling: int = MAX_SIEVE_LIMIT,
) -> SieveTable:
    """Compute primality and the Möbius function for [0, limit) in one sweep.

    Every i still marked prime flips the sign of mobius on all its multiples,
    clears the primality of the multiples other than itself and zeroes mobius
    on the multiples of i*i. Once i passes sqrt(limit) the primality flags are
    final, so the remaining primes only need their sign flip.

    Args:
        limit: Exclusive upper bound.
        with_omega: Also count distinct prime factors.
        ceiling: Largest limit accepted.

    Returns:
        Fully populated, read-only SieveTable.

    Raises:
        ValueError: If limit is not a positive integer.
        SieveLimitError: If limit exceeds ceiling.
    """
    if isinstance(limit, bool) or not isinstance(limit, (int, np.integer)) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    limit = int(limit)
    if limit > ceiling:
        raise SieveLimitError(
            f"Sieve limit {limit:,} exceeds the maximum of {ceiling:,}"
        )

    started = time.perf_counter()

    is_prime = np.ones(limit, dtype=bool)
    mobius = np.ones(limit, dtype=np.int8)
    omega = np.zeros(limit, dtype=np.uint8) if with_omega else None

    is_prime[:2] = False
    mobius[0] = 0

    def strike(i: int) -> None:
        mobius[i::i] *= -1
        is_prime[2 * i::i] = False
        square = i * i
        if square < limit:
            mobius[square::square] = 0
        if omega is not None:
            omega[i::i] += 1

    root = math.isqrt(limit - 1) if limit > 1 else 0
    for i in range(2, root + 1):
        if is_prime[i]:
            strike(i)

    for p in np.flatnonzero(is_prime[root + 1:]) + root + 1:
        strike(int(p))

    for array in (is_prime, mobius, omega):
        if array is not None:
            array.flags.writeable = False

    logger.info(
        "Built sieve for %d integers in %.3fs", limit, time.perf_counter() - started
    )
    return SieveTable(limit=limit, is_prime=is_prime, mobius=mobius, omega=omega)


def _numpy_sieve(limit: int) -> np.ndarray:
    """Sieve of Eratosthenes up to and including limit, crossing out to sqrt(limit)."""
    if limit < 2:
        return np.array([], dtype=np.int64)

    is_prime = np.ones(limit + 1, dtype=bool)
    is_prime[0] = False
    is_prime[1] = False

    for i in range(2, math.isqrt(limit) + 1):
        if is_prime[i]:
            is_prime[i*i::i] = False

    return np.nonzero(is_prime)[0].astype(np.int64)


def generate_primes(limit: int, ceiling: int = MAX_SIEVE_LIMIT) -> np.ndarray:
    """Generate all prime numbers up to and including limit.

    Primality-only counterpart of build_sieve, used where the Möbius values
    are not needed (the gap explorer).

    Args:
        limit: Upper bound for prime generation (inclusive).
        ceiling: Largest limit accepted.

    Returns:
        Array of prime numbers up to limit.

    Raises:
        ValueError: If limit is less than 2.
        SieveLimitError: If limit exceeds ceiling.
    """
    if limit < 2:
        raise ValueError(f"Limit must be >= 2, got {limit}")
    if limit > ceiling:
        raise SieveLimitError(
            f"Prime limit {limit:,} exceeds the maximum of {ceiling:,}"
        )

    return _numpy_sieve(limit)
