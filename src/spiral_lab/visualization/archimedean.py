"""Archimedean spiral colored by primality and the Möbius function.

Integer n sits at radius pitch*sqrt(n) and angle 2*pi*sqrt(n), so perfect
squares line up on the positive x-axis and every turn holds one more
integer than the previous one. Drawing stops at the inscribed circle.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from spiral_lab.config import ArchimedeanParams
from spiral_lab.core.mapping import TWO_PI, archimedean_angles, archimedean_point
from spiral_lab.visualization.base import SpiralRenderer
from spiral_lab.visualization.surface import quadratic_curve

logger = logging.getLogger(__name__)

WAVE_INNER = 0.5
WAVE_DEPTH = 0.45
WAVE_FILL_ALPHA = 70
WAVE_LINE_ALPHA = 170


def archimedean_sieve_limit(canvas_size: int, pitch: float) -> int:
    """Table size covering every integer inside the inscribed circle."""
    return math.ceil((canvas_size / 2 / pitch) ** 2) + 1


def slice_omega_profile(omega: np.ndarray, last_n: int, slices: int) -> np.ndarray:
    """Average count of distinct prime factors per angular slice of the spiral.

    Args:
        omega: Distinct prime factor counts indexed by integer.
        last_n: Largest integer drawn.
        slices: Number of equal angular slices.

    Returns:
        Array of `slices` averages; empty slices take the overall mean.
    """
    last_n = min(last_n, len(omega) - 1)
    if last_n < 1:
        return np.zeros(slices)

    n = np.arange(1, last_n + 1)
    index = (archimedean_angles(n) / (TWO_PI / slices)).astype(np.int64)
    index = np.clip(index, 0, slices - 1)

    weights = omega[1:last_n + 1].astype(np.float64)
    totals = np.bincount(index, weights=weights, minlength=slices)
    counts = np.bincount(index, minlength=slices)

    averages = np.full(slices, weights.mean())
    filled = counts > 0
    averages[filled] = totals[filled] / counts[filled]
    return averages


def normalize(values: np.ndarray) -> np.ndarray:
    """Linear min/max normalization; a flat profile maps to zeros."""
    low, high = values.min(), values.max()
    if high - low <= 0:
        return np.zeros_like(values, dtype=np.float64)
    return (values - low) / (high - low)


def smooth_closed_curve(points: np.ndarray, segments: int = 8) -> list[tuple[float, float]]:
    """Closed curve through the midpoints of consecutive points.

    Each original point acts as the control point of a quadratic segment
    joining the midpoints on either side of it.
    """
    count = len(points)
    midpoints = (points + np.roll(points, -1, axis=0)) / 2
    outline: list[tuple[float, float]] = []
    for i in range(count):
        start = midpoints[i - 1]
        curve = quadratic_curve(tuple(start), tuple(points[i]), tuple(midpoints[i]), segments)
        outline.extend(curve[:-1])
    return outline


class ArchimedeanSpiral(SpiralRenderer):
    """Archimedean spiral renderer with an optional frequency-wave finish."""

    name = "archimedean"

    def __init__(self, sieve, surface, theme, scheduler, params: ArchimedeanParams | None = None,
                 status=None):
        super().__init__(sieve, surface, theme, scheduler, params or ArchimedeanParams(), status)

    def _step(self, index: int) -> bool | None:
        n = index + 1
        cx, cy = self.surface.center
        point = archimedean_point(n, cx, cy, self.params.pitch)
        if point.radius > self.surface.inscribed_radius:
            return False

        size = self.params.pixel_size
        self.surface.fill_rect(point.x, point.y, size, size, self.color_for(n))
        self.last_index = n
        return None

    def _finish(self, completed: int) -> None:
        if self.params.frequency_wave:
            self.draw_frequency_wave()

    def wave_outline(self) -> list[tuple[float, float]]:
        """Outline of the omega frequency wave for the integers drawn so far."""
        slices = self.params.wave_slices
        profile = normalize(slice_omega_profile(self.sieve.omega, self.last_index, slices))

        cx, cy = self.surface.center
        radius = self.surface.inscribed_radius * (WAVE_INNER + WAVE_DEPTH * profile)
        angles = (np.arange(slices) + 0.5) * (TWO_PI / slices)
        points = np.column_stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)])
        return smooth_closed_curve(points)

    def draw_frequency_wave(self) -> bool:
        if self.sieve.omega is None:
            logger.warning("Frequency wave needs a sieve built with omega counts")
            return False

        outline = self.wave_outline()
        fill = self.theme.rgb("muPos") + (WAVE_FILL_ALPHA,)
        line = self.theme.rgb("prime") + (WAVE_LINE_ALPHA,)
        self.surface.polygon(outline, fill=fill)
        self.surface.polyline(outline + outline[:1], line, width=2)
        return True
