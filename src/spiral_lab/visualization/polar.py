"""Polar residue-slice view of a working set with gap connectors.

Each integer n sits in slice n mod m at radius sqrt(n/N)*R, so density is
visually uniform. Highlighting a gap class draws a connector from every
occurrence p to p + gap; when both ends share a slice the connector bulges
sideways as a "petal" so it does not vanish into the spoke.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from spiral_lab.analysis.gaps import GapRecord
from spiral_lab.config import PolarParams
from spiral_lab.core.mapping import TWO_PI, polar_coordinates, slice_trig_table
from spiral_lab.visualization.base import SpiralRenderer
from spiral_lab.visualization.surface import quadratic_curve

logger = logging.getLogger(__name__)

CONNECTOR_BATCH = 2000
CONNECTOR_COLOR = (0, 150, 255, 102)
SPOKE_COLOR = "#e0e0e0"
SAME_SLICE_EPS = 0.01
PETAL_BASE = 30
PETAL_GROWTH = 50


class PolarVisualizer(SpiralRenderer):
    """Draws a working set on residue slices, optionally with gap connectors.

    Points are written in a single pixel-buffer update when a render starts;
    connectors follow in batches of CONNECTOR_BATCH, one scheduler chunk per
    batch, so a preview can be cancelled between batches.

    Attributes:
        working_set: Ascending integers currently displayed.
        highlight: Gap class whose connectors are drawn, or None.
    """

    name = "polar"

    def __init__(self, sieve, surface, theme, scheduler, params: PolarParams | None = None,
                 status=None, working_set=None):
        super().__init__(sieve, surface, theme, scheduler, params or PolarParams(), status)
        self.working_set = np.asarray(
            working_set if working_set is not None else [], dtype=np.int64
        )
        self.highlight: GapRecord | None = None
        self.displayed = 0
        self._connector_starts = np.array([], dtype=np.int64)

    @property
    def chunk_size(self) -> int:
        return 1

    def set_working_set(self, values) -> None:
        self.working_set = np.asarray(values, dtype=np.int64)

    def render(self, highlight: GapRecord | None = None):
        self.highlight = highlight
        return super().render()

    def _on_theme_change(self, key: str) -> None:
        logger.debug("polar: theme changed (%s), restarting", key)
        self.render(highlight=self.highlight)

    def total_work(self) -> int:
        return math.ceil(len(self._connector_starts) / CONNECTOR_BATCH)

    def map_points(self, values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        cx, cy = self.surface.center
        p = self.params
        return polar_coordinates(values, p.modulus, p.limit, p.max_radius, cx, cy)

    def _begin(self) -> None:
        visible = self.working_set[self.working_set <= self.params.limit]
        xs, ys = self.map_points(visible)
        self.surface.put_pixels(xs, ys, self.theme.get("prime"))
        self.displayed = len(visible)
        self.draw_spokes()

        if self.highlight is None:
            self._connector_starts = np.array([], dtype=np.int64)
        else:
            occurrences = np.asarray(self.highlight.occurrences, dtype=np.int64)
            self._connector_starts = occurrences[occurrences <= self.params.limit]
        logger.debug("Polar render: %d points, %d connectors",
                     self.displayed, len(self._connector_starts))

    def draw_spokes(self) -> None:
        cx, cy = self.surface.center
        radius = self.params.max_radius
        cos_table, sin_table = slice_trig_table(self.params.modulus)
        for c, s in zip(cos_table, sin_table):
            self.surface.line((cx, cy), (cx + radius * c, cy + radius * s), SPOKE_COLOR)

    def connector_paths(self, starts: np.ndarray, gap: int) -> list[list[tuple[float, float]]]:
        """Straight or petal-shaped paths from each start to start + gap."""
        p = self.params
        cx, cy = self.surface.center
        ends = starts + gap

        slice_angle = TWO_PI / p.modulus
        a1 = (starts % p.modulus) * slice_angle - math.pi / 2
        a2 = (ends % p.modulus) * slice_angle - math.pi / 2
        r1 = np.sqrt(starts / p.limit) * p.max_radius
        r2 = np.sqrt(ends / p.limit) * p.max_radius
        x1, y1 = cx + r1 * np.cos(a1), cy + r1 * np.sin(a1)
        x2, y2 = cx + r2 * np.cos(a2), cy + r2 * np.sin(a2)

        diff = np.abs(a1 - a2)
        same = (diff < SAME_SLICE_EPS) | (np.abs(diff - TWO_PI) < SAME_SLICE_EPS)

        paths = []
        for i in range(len(starts)):
            start, end = (x1[i], y1[i]), (x2[i], y2[i])
            if same[i]:
                loop = PETAL_BASE + (r1[i] / p.max_radius) * PETAL_GROWTH
                control = ((start[0] + end[0]) / 2 - math.sin(a1[i]) * loop,
                           (start[1] + end[1]) / 2 + math.cos(a1[i]) * loop)
                paths.append(quadratic_curve(start, control, end))
            else:
                paths.append([start, end])
        return paths

    def _step(self, index: int) -> bool | None:
        batch = self._connector_starts[index * CONNECTOR_BATCH:(index + 1) * CONNECTOR_BATCH]
        paths = self.connector_paths(batch, self.highlight.gap)
        self.surface.stroke_paths(paths, CONNECTOR_COLOR)
        self.last_index = min(len(self._connector_starts), (index + 1) * CONNECTOR_BATCH)
        return None

    def _progress(self, completed: int) -> None:
        self.report(f"⏳ {self.last_index}/{len(self._connector_starts)}")

    def _done(self, completed: int) -> None:
        self.report(f"Displayed: {self.displayed}")
