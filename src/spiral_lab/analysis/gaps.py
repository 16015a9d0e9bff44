"""Gap analysis and drill-down over ordered integer sets.

Starting from the primes, the explorer groups consecutive differences
("gaps"), ranks the most common ones and lets the user descend into the set
of start values of one gap. Repeating the process on that subset finds
constellations: twin primes, then prime quadruplets among the twins, and so
on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

ROOT_LABEL = "Primes"
DEFAULT_MIN_SUPPORT = 100
DEFAULT_TOP_K = 10
BIAS_TOP_K = 5
BIAS_SENTINEL = 100.0
BIAS_BLOCKS = 10

# (parent label, gap) -> name of the constellation.
SPECIAL_NAMES: Dict[tuple, str] = {
    ("Primes", 2): "Twin Primes",
    ("Primes", 4): "Cousin Primes",
    ("Primes", 6): "Sexy Primes",
    ("Twin Primes", 6): "Prime Quadruplets",
    ("Cousin Primes", 6): "Cousin Quadruplets",
}


@dataclass
class GapRecord:
    """All occurrences of one gap value within a working set.

    Attributes:
        gap: Difference between consecutive members.
        count: Number of occurrences.
        occurrences: Start value of each occurrence, ascending.
        score: Ranking score assigned by the scoring strategy.
    """
    gap: int
    count: int
    occurrences: np.ndarray
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            'gap': self.gap,
            'count': self.count,
            'score': self.score,
            'first': [int(v) for v in self.occurrences[:10]],
        }


@dataclass(frozen=True)
class Selection:
    """One step of the drill-down path."""
    gap: int
    label: str


Scorer = Callable[[GapRecord, np.ndarray, np.ndarray], float]


def count_score(record: GapRecord, values: np.ndarray, gaps: np.ndarray) -> float:
    """Rank by raw number of occurrences."""
    return float(record.count)


class EarlyLateBiasScore:
    """Rank gaps by how much more frequent they are early in the range.

    The value range is cut into `blocks` equal blocks. A gap's relative
    frequency in a block is its share of all gaps starting there; the score
    is the first block's share divided by the last block's share.

    Attributes:
        blocks: Number of equal value blocks.
        sentinel: Score used when the gap vanishes late but occurs early.
    """

    def __init__(self, blocks: int = BIAS_BLOCKS, sentinel: float = BIAS_SENTINEL):
        if blocks < 2:
            raise ValueError(f"blocks must be >= 2, got {blocks}")
        self.blocks = blocks
        self.sentinel = sentinel

    def __call__(self, record: GapRecord, values: np.ndarray, gaps: np.ndarray) -> float:
        starts = values[:-1]
        low, high = int(values[0]), int(values[-1])
        block = max(1, (high - low) // self.blocks)

        early = starts < low + block
        late = starts >= high - block

        early_freq = _relative_frequency(record.gap, gaps, early)
        late_freq = _relative_frequency(record.gap, gaps, late)

        if late_freq == 0:
            return self.sentinel if early_freq > 0 else 0.0
        return early_freq / late_freq


def _relative_frequency(gap: int, gaps: np.ndarray, region: np.ndarray) -> float:
    total = int(region.sum())
    if total == 0:
        return 0.0
    return int(np.count_nonzero(gaps[region] == gap)) / total


SCORERS: Dict[str, Scorer] = {
    "count": count_score,
    "bias": EarlyLateBiasScore(),
}

DEFAULT_TOP_K_BY_SCORER = {"count": DEFAULT_TOP_K, "bias": BIAS_TOP_K}


def resolve_scorer(scorer: Union[str, Scorer, None]) -> Scorer:
    if scorer is None:
        return count_score
    if callable(scorer):
        return scorer
    try:
        return SCORERS[scorer]
    except KeyError:
        raise ValueError(f"Unknown scoring strategy: {scorer!r}") from None


def analyze_gaps(
    values: Sequence[int],
    min_support: int = DEFAULT_MIN_SUPPORT,
    top_k: int = DEFAULT_TOP_K,
    scorer: Union[str, Scorer, None] = "count",
) -> List[GapRecord]:
    """Group consecutive differences of an ordered set and rank the groups.

    Args:
        values: Ascending integers.
        min_support: Gaps occurring fewer times are dropped.
        top_k: Maximum number of records returned.
        scorer: Strategy name from SCORERS or a callable.

    Returns:
        Records sorted by descending score, ties broken by smaller gap.
    """
    values = np.asarray(values, dtype=np.int64)
    if len(values) < 2:
        return []

    score = resolve_scorer(scorer)
    gaps = np.diff(values)
    starts = values[:-1]

    order = np.argsort(gaps, kind="stable")
    unique, first, counts = np.unique(gaps[order], return_index=True, return_counts=True)

    records = []
    for gap, begin, count in zip(unique, first, counts):
        if count < min_support:
            continue
        occurrences = starts[order[begin:begin + count]]
        record = GapRecord(gap=int(gap), count=int(count), occurrences=occurrences)
        record.score = float(score(record, values, gaps))
        records.append(record)

    records.sort(key=lambda r: (-r.score, r.gap))
    logger.debug("Found %d gap classes over %d values", len(records), len(values))
    return records[:top_k]


def strip_count(label: str) -> str:
    """Drop a trailing ' (count)' suffix from a display label."""
    cut = label.find('(')
    return label[:cut].strip() if cut > 0 else label


def gap_label(gap: int, parent: str = ROOT_LABEL) -> str:
    """Human name of a gap class under a parent set."""
    parent = strip_count(parent)
    return SPECIAL_NAMES.get((parent, gap), f"Gap {gap} in {parent}")


def display_label(record: GapRecord, parent: str = ROOT_LABEL) -> str:
    return f"{gap_label(record.gap, parent)} ({record.count})"


class GapExplorer:
    """Drill-down state machine over gap classes.

    The state is either the root (working set = all primes) or a path of
    selections whose last record defines the working set. ``select`` goes
    one level deeper and ``reset`` returns to the root; there is no single
    step back.

    Attributes:
        primes: Full ordered prime sequence.
        min_support: Minimum occurrences for a candidate.
        top_k: Number of candidates offered.
        scorer: Scoring strategy.
    """

    def __init__(
        self,
        primes: Sequence[int],
        min_support: int = DEFAULT_MIN_SUPPORT,
        top_k: Optional[int] = None,
        scorer: Union[str, Scorer, None] = "count",
    ):
        self.primes = np.asarray(primes, dtype=np.int64)
        self.min_support = min_support
        self.scorer = resolve_scorer(scorer)
        if top_k is None:
            name = scorer if isinstance(scorer, str) else "count"
            top_k = DEFAULT_TOP_K_BY_SCORER.get(name, DEFAULT_TOP_K)
        self.top_k = top_k
        self.working_set = self.primes
        self.path: List[Selection] = []
        self._candidates: Optional[List[GapRecord]] = None

    @property
    def is_root(self) -> bool:
        return not self.path

    @property
    def current_label(self) -> str:
        return self.path[-1].label if self.path else ROOT_LABEL

    @property
    def breadcrumb(self) -> str:
        return " > ".join([ROOT_LABEL] + [s.label for s in self.path])

    @property
    def current_gap(self) -> Optional[int]:
        return self.path[-1].gap if self.path else None

    def candidates(self) -> List[GapRecord]:
        """Ranked gap classes of the current working set (cached)."""
        if self._candidates is None:
            self._candidates = analyze_gaps(
                self.working_set, self.min_support, self.top_k, self.scorer
            )
        return self._candidates

    def label_for(self, record: GapRecord) -> str:
        return display_label(record, self.current_label)

    def select(self, record: GapRecord, label: Optional[str] = None) -> str:
        """Descend into a gap class; its occurrences become the working set."""
        label = label or self.label_for(record)
        self.path.append(Selection(gap=record.gap, label=label))
        self.working_set = record.occurrences
        self._candidates = None
        logger.info("Selected %s: %d items", label, len(self.working_set))
        return label

    def reset(self) -> None:
        self.path = []
        self.working_set = self.primes
        self._candidates = None

    def current_record(self) -> Optional[GapRecord]:
        """Record reconstructed from the last selection over the current working set."""
        if not self.path:
            return None
        return GapRecord(gap=self.path[-1].gap, count=len(self.working_set),
                         occurrences=self.working_set)
