"""Ulam spiral generation and visualization.

The Ulam spiral arranges positive integers in a square spiral pattern,
starting from the center and spiraling outward. Prime numbers are marked,
revealing diagonal patterns corresponding to prime-generating polynomials.
Composites are colored by their Möbius value.
"""

from __future__ import annotations

import math

from spiral_lab.config import UlamParams
from spiral_lab.core.mapping import SquareSpiralWalk
from spiral_lab.visualization.base import SpiralRenderer


def ulam_sieve_limit(canvas_size: int, pixel_size: int) -> int:
    """Table size covering every cell of a square canvas, with some slack."""
    return math.ceil(canvas_size * canvas_size / (pixel_size * pixel_size)) + 1000


class UlamSpiral(SpiralRenderer):
    """Square spiral drawn one cell per step.

    The walk proceeds right, up, left, down from the center, one
    pixel_size cell per integer; it stops once a whole ring falls outside
    the canvas.
    """

    name = "ulam"

    def __init__(self, sieve, surface, theme, scheduler, params: UlamParams | None = None,
                 status=None):
        super().__init__(sieve, surface, theme, scheduler, params or UlamParams(), status)
        self.walk = SquareSpiralWalk()

    def _begin(self) -> None:
        self.walk = SquareSpiralWalk()

    @property
    def max_ring(self) -> int:
        return int(self.surface.inscribed_radius // self.params.pixel_size)

    def _step(self, index: int) -> bool | None:
        walk = self.walk
        if walk.ring > self.max_ring:
            return False

        size = self.params.pixel_size
        cx = self.surface.width // 2
        cy = self.surface.height // 2
        self.surface.fill_rect(cx + walk.x * size, cy + walk.y * size, size, size,
                               self.color_for(walk.n))
        self.last_index = walk.n
        walk.advance()
        return None
