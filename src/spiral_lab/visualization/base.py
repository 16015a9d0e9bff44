"""Shared machinery for incrementally drawn spirals."""

from __future__ import annotations

import logging
from typing import Callable

from spiral_lab.core.scheduler import ChunkedScheduler, RunHandle
from spiral_lab.core.sieve import SieveTable
from spiral_lab.utils.theme import ColorTheme, darken, to_rgb
from spiral_lab.visualization.surface import RasterSurface

logger = logging.getLogger(__name__)

UNKNOWN_COLOR = "#dddddd"
TWIN_DARKEN = 0.85

MOBIUS_KEYS = {-1: "muNeg", 0: "muZero", 1: "muPos"}


class SpiralRenderer:
    """Base class for spirals drawn one unit of work per scheduler step.

    Subclasses implement ``_begin`` (reset their cursor), ``_step`` (draw one
    unit, return False when the geometry is exhausted) and optionally
    ``total_work``, ``_finish`` and ``_progress_value``.

    A renderer subscribes to theme changes on construction and restarts its
    run when a color changes. Call ``close`` to unsubscribe.

    Attributes:
        sieve: Classification table.
        surface: Raster the renderer draws on.
        theme: Color theme, re-read at the start of every run.
        scheduler: Scheduler owning the active run.
        status: Callback receiving the progress string.
    """

    name = "spiral"
    background = "#ffffff"
    twin_shading = True

    def __init__(
        self,
        sieve: SieveTable,
        surface: RasterSurface,
        theme: ColorTheme,
        scheduler: ChunkedScheduler,
        params,
        status: Callable[[str], None] | None = None,
    ):
        self.sieve = sieve
        self.surface = surface
        self.theme = theme
        self.scheduler = scheduler
        self.params = params
        self.status = status or (lambda text: None)
        self.status_text = ""
        self.last_index = 0
        self.handle: RunHandle | None = None
        self._palette: dict[str, tuple[int, int, int]] = {}
        self._unsubscribe = theme.subscribe(self._on_theme_change)

    def close(self) -> None:
        self.cancel()
        self._unsubscribe()

    @property
    def chunk_size(self) -> int:
        return self.params.chunk_size

    def total_work(self) -> int | None:
        return None

    def render(self) -> RunHandle:
        """Clear the surface and start a fresh run, cancelling any previous one."""
        self._load_palette()
        self.surface.clear(self.background)
        self.last_index = 0
        self._begin()
        logger.debug("Starting %s render", self.name)
        self.handle = self.scheduler.run(
            self.total_work(),
            self.chunk_size,
            self._step,
            on_done=self._done,
            on_progress=self._progress,
        )
        return self.handle

    def update_params(self, params) -> RunHandle:
        self.params = params
        return self.render()

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()

    @property
    def drawing(self) -> bool:
        return self.handle is not None and self.handle.active

    def color_for(self, n: int, twin_shading: bool | None = None) -> tuple[int, int, int]:
        """Classify n with the sieve and return its draw color.

        Primes use the prime color (darkened when part of a twin pair),
        other integers are keyed by their Möbius value. Integers outside the
        table get a neutral fallback.
        """
        if not self._palette:
            self._load_palette()
        if n not in self.sieve:
            return self._palette["unknown"]

        if self.sieve.is_prime[n]:
            shade = self.twin_shading if twin_shading is None else twin_shading
            if shade and self.sieve.is_twin(n):
                return self._palette["twin"]
            return self._palette["prime"]

        return self._palette[MOBIUS_KEYS[int(self.sieve.mobius[n])]]

    def report(self, text: str) -> None:
        self.status_text = text
        self.status(text)

    def _load_palette(self) -> None:
        prime = self.theme.get("prime")
        self._palette = {
            "prime": to_rgb(prime),
            "twin": to_rgb(darken(prime, TWIN_DARKEN)),
            "muNeg": self.theme.rgb("muNeg"),
            "muZero": self.theme.rgb("muZero"),
            "muPos": self.theme.rgb("muPos"),
            "unknown": to_rgb(UNKNOWN_COLOR),
        }

    def _on_theme_change(self, key: str) -> None:
        logger.debug("%s: theme changed (%s), restarting", self.name, key)
        self.render()

    def _progress_value(self, completed: int) -> int:
        return self.last_index

    def _progress(self, completed: int) -> None:
        self.report(f"⏳ {self._progress_value(completed)}")

    def _done(self, completed: int) -> None:
        self._finish(completed)
        self.report(f"{self._progress_value(completed)}")
        logger.info("%s finished at %d", self.name, self._progress_value(completed))

    def _begin(self) -> None:
        pass

    def _step(self, index: int) -> bool | None:
        raise NotImplementedError

    def _finish(self, completed: int) -> None:
        pass
