"""spiral_lab - incremental prime, Möbius and prime-gap visualizations."""

__version__ = "0.1.0"

from spiral_lab.core.sieve import SieveTable, build_sieve, generate_primes
from spiral_lab.core.scheduler import ChunkedScheduler, FrameLoop
from spiral_lab.analysis.gaps import GapExplorer, analyze_gaps

__all__ = [
    "SieveTable",
    "build_sieve",
    "generate_primes",
    "ChunkedScheduler",
    "FrameLoop",
    "GapExplorer",
    "analyze_gaps",
]
