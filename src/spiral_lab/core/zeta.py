"""Truncated series approximations of the Riemann zeta function.

zeta(s) is computed from the alternating Dirichlet eta series,
zeta(s) = eta(s) / (1 - 2^(1-s)), which converges (slowly) for Re(s) > 0.
No analytic continuation beyond that is attempted.
"""

from __future__ import annotations

import numpy as np

ETA_TERMS = 500
SUM_TERMS = 50


def dirichlet_eta(s: complex, terms: int = ETA_TERMS) -> complex:
    """Partial sum of eta(s) = sum_{n>=1} (-1)^(n-1) / n^s."""
    n = np.arange(1, terms + 1, dtype=np.float64)
    signs = np.where(n % 2 == 1, 1.0, -1.0)
    return complex(np.sum(signs * np.exp(-s * np.log(n))))


def zeta(s: complex, terms: int = ETA_TERMS) -> complex:
    """Approximate zeta(s) through the eta series.

    Raises:
        ZeroDivisionError: At s = 1, where 1 - 2^(1-s) vanishes.
    """
    s = complex(s)
    denominator = 1 - 2 ** (1 - s)
    if denominator == 0:
        raise ZeroDivisionError("zeta has a pole at s = 1")
    return dirichlet_eta(s, terms) / denominator


def critical_line_zeta(t: float, terms: int = ETA_TERMS) -> complex:
    """zeta(1/2 + it)."""
    return zeta(complex(0.5, t), terms)


def partial_sums(t: float, terms: int = SUM_TERMS, sigma: float = 0.5) -> np.ndarray:
    """Cumulative sums of n^-(sigma + it) for n = 1..terms, starting at 0.

    Returns:
        Complex array of length terms + 1; element k is the sum of the first k terms.
    """
    n = np.arange(1, terms + 1, dtype=np.float64)
    terms_ = np.exp(-complex(sigma, t) * np.log(n))
    return np.concatenate([[0j], np.cumsum(terms_)])
