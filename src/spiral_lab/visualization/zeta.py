"""Animated trajectory of zeta(1/2 + it).

Every frame evaluates zeta on the critical line, appends it to a bounded
history and draws the trajectory, the partial-sum spiral of n^-s and a
background of Möbius stripes. The view zooms smoothly to keep the whole
history visible.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

import numpy as np

from spiral_lab.config import coerce_float
from spiral_lab.core.scheduler import ChunkedScheduler
from spiral_lab.core.sieve import SieveTable, build_sieve
from spiral_lab.core.zeta import SUM_TERMS, critical_line_zeta, partial_sums
from spiral_lab.utils.theme import ColorTheme
from spiral_lab.visualization.base import MOBIUS_KEYS
from spiral_lab.visualization.surface import RasterSurface

logger = logging.getLogger(__name__)

MAX_HISTORY = 2000
T_STEP = 0.05
STRIPE_LIMIT = 500
STRIPE_ALPHA = 51
ZOOM_EASING = 0.1
ZOOM_PADDING = 1.2
AXIS_COLOR = "#eeeeee"


class ZetaTrajectory:
    """Play/pause animation of zeta along the critical line.

    Playback is an open-ended scheduler run with one frame per chunk, so
    pausing is a cancellation and a redraw while paused is a single frame.

    Attributes:
        t: Current imaginary part.
        playing: Whether frames keep advancing t.
        history: Recent zeta values, at most MAX_HISTORY.
    """

    def __init__(
        self,
        surface: RasterSurface,
        theme: ColorTheme,
        scheduler: ChunkedScheduler,
        status: Callable[[str], None] | None = None,
        stripes: SieveTable | None = None,
    ):
        self.surface = surface
        self.theme = theme
        self.scheduler = scheduler
        self.status = status or (lambda text: None)
        self.stripes = stripes if stripes is not None else build_sieve(STRIPE_LIMIT)
        self.t = 0.0
        self.playing = False
        self.history: deque[complex] = deque(maxlen=MAX_HISTORY)
        self.scale: float | None = None
        self.handle = None
        self._unsubscribe = theme.subscribe(self._on_theme_change)

    def close(self) -> None:
        self.pause()
        self._unsubscribe()

    def play(self) -> None:
        logger.debug("Zeta playback from t = %.2f", self.t)
        self.playing = True
        self.handle = self.scheduler.run(None, 1, self._frame)

    def pause(self) -> None:
        self.playing = False
        if self.handle is not None:
            self.handle.cancel()

    def toggle(self) -> bool:
        if self.playing:
            self.pause()
        else:
            self.play()
        return self.playing

    def reset(self) -> None:
        self.t = 0.0
        self.history.clear()
        if not self.playing:
            self.draw()

    def set_t(self, value) -> None:
        self.t = coerce_float(value, 0.0)
        if not self.playing:
            self.draw()

    def target_scale(self) -> float:
        max_range = max([2.0] + [abs(z) for z in self.history])
        return self.surface.inscribed_radius / (max_range * ZOOM_PADDING)

    def _frame(self, index: int) -> None:
        self.draw()
        self.t += T_STEP

    def _on_theme_change(self, key: str) -> None:
        if not self.playing:
            self.draw()

    def draw(self) -> complex:
        """Render one frame at the current t and return zeta(1/2 + it)."""
        surface = self.surface
        surface.clear("#ffffff")
        cx, cy = surface.center

        value = critical_line_zeta(self.t)
        if self.playing:
            self.history.append(value)

        target = self.target_scale()
        if self.scale is None:
            self.scale = target
        self.scale += (target - self.scale) * ZOOM_EASING
        scale = self.scale

        self._draw_stripes(scale / 2)

        surface.line((0, cy), (surface.width, cy), AXIS_COLOR)
        surface.line((cx, 0), (cx, surface.height), AXIS_COLOR)

        def to_screen(z: complex) -> tuple[float, float]:
            return (cx + z.real * scale, cy - z.imag * scale)

        if len(self.history) > 1:
            surface.polyline([to_screen(z) for z in self.history], self.theme.get("zetaCurve"), width=2)

        sums = partial_sums(self.t, SUM_TERMS)
        surface.polyline([to_screen(z) for z in sums], self.theme.get("zetaSum"), width=1)

        surface.disc(to_screen(value), 4, "#000000")
        self.status(f"t = {self.t:.2f}")
        return value

    def _draw_stripes(self, unit: float) -> None:
        """Vertical stripes colored by mu(n), mirrored on both sides of the center."""
        surface = self.surface
        cx = surface.center[0]
        mobius = self.stripes.mobius
        for n in range(1, self.stripes.limit):
            color = self.theme.rgb(MOBIUS_KEYS[int(mobius[n])]) + (STRIPE_ALPHA,)
            right = cx + (n - 1) * unit
            if right < surface.width:
                surface.fill_rect(right, 0, np.ceil(unit), surface.height, color)
            left = cx - n * unit
            if left + unit > 0:
                surface.fill_rect(left, 0, np.ceil(unit), surface.height, color)
