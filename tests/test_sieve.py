"""Tests for the combined primality / Möbius sieve."""

import numpy as np
import pytest

from spiral_lab.core.sieve import (
    MAX_SIEVE_LIMIT,
    SieveLimitError,
    build_sieve,
    generate_primes,
)


def is_prime(n):
    """Primality by trial division."""
    if n < 2:
        return False
    d = 2
    while d * d <= n:
        if n % d == 0:
            return False
        d += 1
    return True


def factorize(n):
    """Prime factorization by trial division as {prime: exponent}."""
    factors = {}
    d = 2
    while d * d <= n:
        while n % d == 0:
            factors[d] = factors.get(d, 0) + 1
            n //= d
        d += 1
    if n > 1:
        factors[n] = factors.get(n, 0) + 1
    return factors


class TestTrialDivision:
    """Sanity checks for the trial-division reference."""

    def test_small_primes(self):
        """Test known small primes."""
        for p in [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31]:
            assert is_prime(p), f"{p} should be prime"

    def test_small_composites(self):
        """Test known small composites."""
        for c in [4, 6, 8, 9, 10, 12, 14, 15, 16, 18, 20]:
            assert not is_prime(c), f"{c} should not be prime"

    def test_edge_cases(self):
        """Test edge cases."""
        assert not is_prime(0)
        assert not is_prime(1)
        assert is_prime(2)
        assert not is_prime(-5)


class TestBuildSieve:
    """Tests for build_sieve."""

    def test_primality_matches_trial_division(self):
        """Every primality flag agrees with trial division."""
        table = build_sieve(3000)
        for n in range(3000):
            assert bool(table.is_prime[n]) == is_prime(n), n

    def test_zero_and_one_not_prime(self):
        """0 and 1 are never prime."""
        table = build_sieve(10)
        assert not table.is_prime[0]
        assert not table.is_prime[1]

    def test_mobius_samples(self):
        """Known Möbius values."""
        table = build_sieve(100)
        expected = {1: 1, 2: -1, 3: -1, 4: 0, 6: 1, 8: 0, 12: 0, 30: -1, 97: -1}
        for n, mu in expected.items():
            assert table.mobius[n] == mu, n

    def test_mobius_matches_factorization(self):
        """mu(n) is 0 for square factors, else (-1)^omega(n)."""
        table = build_sieve(2000, with_omega=True)
        for n in range(1, 2000):
            factors = factorize(n)
            if any(e > 1 for e in factors.values()):
                assert table.mobius[n] == 0, n
            else:
                assert table.mobius[n] == (-1) ** len(factors), n
            assert table.omega[n] == len(factors), n

    def test_mobius_of_zero(self):
        """0 is divisible by every square."""
        assert build_sieve(10).mobius[0] == 0

    def test_dtypes(self):
        """Tables use compact dtypes."""
        table = build_sieve(100, with_omega=True)
        assert table.is_prime.dtype == bool
        assert table.mobius.dtype == np.int8
        assert table.omega.dtype == np.uint8
        assert len(table.is_prime) == 100

    def test_omega_optional(self):
        """Omega is only computed on request."""
        assert build_sieve(100).omega is None

    def test_read_only(self):
        """The table cannot be modified after build."""
        table = build_sieve(100)
        with pytest.raises(ValueError):
            table.is_prime[4] = True
        with pytest.raises(ValueError):
            table.mobius[4] = 1

    def test_tiny_limits(self):
        """Limits of 1 and 2 produce empty prime sets."""
        assert len(build_sieve(1).primes()) == 0
        assert len(build_sieve(2).primes()) == 0
        np.testing.assert_array_equal(build_sieve(3).primes(), [2])

    def test_primes(self):
        """There are 25 primes below 100."""
        primes = build_sieve(100).primes()
        assert len(primes) == 25
        assert primes[-1] == 97

    def test_contains(self):
        """Membership reflects the table range."""
        table = build_sieve(50)
        assert 0 in table
        assert 49 in table
        assert 50 not in table
        assert -1 not in table

    def test_is_twin(self):
        """Twin detection looks two steps either way."""
        table = build_sieve(100)
        assert table.is_twin(3)
        assert table.is_twin(5)
        assert table.is_twin(7)
        assert not table.is_twin(23)
        assert not table.is_twin(2)

    def test_invalid_limit(self):
        """Non-positive or non-integer limits are rejected."""
        with pytest.raises(ValueError):
            build_sieve(0)
        with pytest.raises(ValueError):
            build_sieve(-5)
        with pytest.raises(ValueError):
            build_sieve(10.5)

    def test_limit_above_ceiling(self):
        """Oversized tables fail fast with SieveLimitError."""
        with pytest.raises(SieveLimitError):
            build_sieve(101, ceiling=100)
        with pytest.raises(SieveLimitError):
            build_sieve(MAX_SIEVE_LIMIT + 1)

    def test_limit_error_is_value_error(self):
        """SieveLimitError can be handled as a ValueError."""
        assert issubclass(SieveLimitError, ValueError)


class TestGeneratePrimes:
    """Tests for generate_primes function."""

    def test_primes_up_to_10(self):
        """Test primes up to 10."""
        np.testing.assert_array_equal(generate_primes(10), [2, 3, 5, 7])

    def test_primes_up_to_100(self):
        """Test primes up to 100."""
        primes = generate_primes(100)
        assert len(primes) == 25
        assert primes[0] == 2
        assert primes[-1] == 97

    def test_agrees_with_build_sieve(self):
        """Both sieves find the same primes."""
        np.testing.assert_array_equal(generate_primes(4999), build_sieve(5000).primes())

    def test_invalid_limit(self):
        """Test that invalid limit raises error."""
        with pytest.raises(ValueError):
            generate_primes(1)
        with pytest.raises(SieveLimitError):
            generate_primes(1000, ceiling=100)

