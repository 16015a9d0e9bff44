"""Sieve, coordinate mapping, scheduling and zeta series."""

from spiral_lab.core.sieve import (
    MAX_SIEVE_LIMIT,
    SieveLimitError,
    SieveTable,
    build_sieve,
    generate_primes,
)
from spiral_lab.core.scheduler import ChunkedScheduler, FrameLoop, RunHandle, scaled_chunk_size

__all__ = [
    "MAX_SIEVE_LIMIT",
    "SieveLimitError",
    "SieveTable",
    "build_sieve",
    "generate_primes",
    "ChunkedScheduler",
    "FrameLoop",
    "RunHandle",
    "scaled_chunk_size",
]
