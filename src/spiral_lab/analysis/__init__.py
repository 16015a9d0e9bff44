"""Gap analysis of ordered integer sets."""

from spiral_lab.analysis.gaps import (
    EarlyLateBiasScore,
    GapExplorer,
    GapRecord,
    Selection,
    analyze_gaps,
    count_score,
    gap_label,
)

__all__ = [
    "EarlyLateBiasScore",
    "GapExplorer",
    "GapRecord",
    "Selection",
    "analyze_gaps",
    "count_score",
    "gap_label",
]
