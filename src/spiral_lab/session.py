"""Sessions wiring a visualization to the frame loop, theme and viewport.

A session owns the process-lifetime objects of one visualization: the sieve
table (built once, shortly after start so the viewport can settle), the
raster surface and the renderer. User actions go through the session, which
restarts the renderer's scheduler run.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from spiral_lab.analysis.gaps import GapExplorer, GapRecord
from spiral_lab.config import (
    ArchimedeanParams,
    PolarParams,
    PolygonParams,
    UlamParams,
)
from spiral_lab.core.scheduler import ChunkedScheduler, FrameLoop
from spiral_lab.core.sieve import MAX_SIEVE_LIMIT, build_sieve, generate_primes
from spiral_lab.utils.theme import ColorTheme
from spiral_lab.utils.viewport import Viewport
from spiral_lab.visualization.archimedean import ArchimedeanSpiral, archimedean_sieve_limit
from spiral_lab.visualization.base import SpiralRenderer
from spiral_lab.visualization.polar import PolarVisualizer
from spiral_lab.visualization.polygon import CubeSpiral, PolygonSpiral
from spiral_lab.visualization.surface import RasterSurface
from spiral_lab.visualization.ulam import UlamSpiral, ulam_sieve_limit

logger = logging.getLogger(__name__)

STARTUP_DELAY = 0.01

# Fixed sieve sizes; the Archimedean and Ulam tables follow the canvas instead.
POLYGON_LIMIT = 5_000_000
CUBE_LIMIT = 200_000
EXPLORER_LIMIT = 20_000_000

# Largest table each variant accepts, explicit limits included.
MAX_LIMITS: Dict[str, int] = {
    "archimedean": 2_000_000,
    "ulam": MAX_SIEVE_LIMIT,
    "polygon": MAX_SIEVE_LIMIT,
    "cube": 2_000_000,
    "explorer": EXPLORER_LIMIT,
}

VARIANTS: Dict[str, tuple] = {
    "archimedean": (ArchimedeanSpiral, ArchimedeanParams),
    "ulam": (UlamSpiral, UlamParams),
    "polygon": (PolygonSpiral, PolygonParams),
    "cube": (CubeSpiral, PolygonParams),
}


def sieve_limit_for(variant: str, canvas_size: int, params) -> int:
    if variant == "ulam":
        return ulam_sieve_limit(canvas_size, params.pixel_size)
    if variant == "archimedean":
        return archimedean_sieve_limit(canvas_size, params.pitch)
    if variant == "cube":
        return CUBE_LIMIT
    return POLYGON_LIMIT


class SpiralSession:
    """Runs one spiral variant on a frame loop.

    Attributes:
        variant: Key of VARIANTS.
        loop: Host frame loop.
        theme: Shared color theme.
        viewport: Canvas sizer.
        params: Current geometry parameters.
        renderer: Active renderer, None until startup has run.
        status_text: Last status string.
    """

    def __init__(
        self,
        variant: str,
        loop: FrameLoop,
        theme: ColorTheme,
        viewport: Viewport,
        params=None,
        limit: Optional[int] = None,
        status: Optional[Callable[[str], None]] = None,
    ):
        if variant not in VARIANTS:
            raise ValueError(f"Unknown variant: {variant}")

        renderer_cls, params_cls = VARIANTS[variant]
        self.variant = variant
        self.loop = loop
        self.theme = theme
        self.viewport = viewport
        self.params = params or params_cls()
        self.limit = limit
        self.scheduler = ChunkedScheduler(loop, name=variant)
        self.surface: Optional[RasterSurface] = None
        self.renderer: Optional[SpiralRenderer] = None
        self.sieve = None
        self.status_text = ""
        self.failed = False
        self._renderer_cls = renderer_cls
        self._status = status
        self._unsubscribe = viewport.subscribe(self._on_resize)

    def start(self) -> None:
        """Defer the sieve build to the next loop pass so the viewport settles first."""
        self.loop.call_later(STARTUP_DELAY, self._startup)

    def _sieve_limit(self) -> int:
        if self.limit is not None:
            return self.limit
        return sieve_limit_for(self.variant, self.viewport.size, self.params)

    def _startup(self) -> None:
        size = self.viewport.size
        try:
            self.sieve = build_sieve(self._sieve_limit(), with_omega=self._needs_omega(),
                                     ceiling=MAX_LIMITS[self.variant])
        except ValueError as e:
            self.failed = True
            logger.error("Cannot start %s: %s", self.variant, e)
            self.report(str(e))
            return

        self.surface = RasterSurface(size)
        self.renderer = self._renderer_cls(
            self.sieve, self.surface, self.theme, self.scheduler, self.params, status=self.report
        )
        self.renderer.render()

    def _needs_omega(self) -> bool:
        return bool(getattr(self.params, "frequency_wave", False))

    def report(self, text: str) -> None:
        self.status_text = text
        if self._status is not None:
            self._status(text)

    def reset(self) -> None:
        if self.renderer is not None:
            self.renderer.render()

    def update_params(self, params) -> None:
        rebuild = self._needs_omega() != bool(getattr(params, "frequency_wave", False))
        self.params = params
        if self.renderer is None:
            return
        if rebuild or self.sieve.limit != self._sieve_limit():
            self.renderer.close()
            self.renderer = None
            self._startup()
        else:
            self.renderer.update_params(params)

    def _on_resize(self, size: int) -> None:
        """Cancel in-flight work, resize the surface and, if needed, the sieve."""
        if self.renderer is None:
            return
        self.renderer.cancel()
        if self.sieve.limit != self._sieve_limit():
            self.renderer.close()
            self.renderer = None
            self._startup()
            return
        self.surface.resize(size)
        self.renderer.render()

    def close(self) -> None:
        self._unsubscribe()
        if self.renderer is not None:
            self.renderer.close()


class ExplorerSession:
    """Gap drill-down explorer rendered on the polar slice view.

    Attributes:
        explorer: Drill-down state machine over the primes.
        visualizer: Polar renderer of the explorer's working set.
    """

    def __init__(
        self,
        loop: FrameLoop,
        theme: ColorTheme,
        viewport: Viewport,
        params: Optional[PolarParams] = None,
        scoring: str = "count",
        min_support: int = 100,
        top_k: Optional[int] = None,
        status: Optional[Callable[[str], None]] = None,
    ):
        self.loop = loop
        self.theme = theme
        self.viewport = viewport
        self.params = (params or PolarParams(limit=EXPLORER_LIMIT)).fitted(viewport.size, viewport.size)
        self.scoring = scoring
        self.min_support = min_support
        self.top_k = top_k
        self.scheduler = ChunkedScheduler(loop, name="explorer")
        self.explorer: Optional[GapExplorer] = None
        self.visualizer: Optional[PolarVisualizer] = None
        self.surface: Optional[RasterSurface] = None
        self.status_text = ""
        self.failed = False
        self._status = status
        self._unsubscribe = viewport.subscribe(self._on_resize)

    def start(self) -> None:
        self.loop.call_later(STARTUP_DELAY, self._startup)

    def _startup(self) -> None:
        try:
            primes = generate_primes(self.params.limit, ceiling=MAX_LIMITS["explorer"])
        except ValueError as e:
            self.failed = True
            logger.error("Cannot start explorer: %s", e)
            self.report(str(e))
            return

        self.explorer = GapExplorer(primes, min_support=self.min_support,
                                    top_k=self.top_k, scorer=self.scoring)
        self.surface = RasterSurface(self.viewport.size)
        self.visualizer = PolarVisualizer(
            None, self.surface, self.theme, self.scheduler, self.params,
            status=self.report, working_set=primes,
        )
        self.visualizer.render()

    def report(self, text: str) -> None:
        self.status_text = text
        if self._status is not None:
            self._status(text)

    @property
    def ready(self) -> bool:
        return self.explorer is not None

    def candidates(self) -> List[GapRecord]:
        return self.explorer.candidates()

    def options(self) -> List[str]:
        """Lines describing the current state and the candidate gap classes."""
        lines = [self.explorer.breadcrumb, f"Slices: {self.params.modulus}"]
        candidates = self.candidates()
        if not candidates:
            lines.append("No significant patterns found.")
            return lines

        lines.append(f"Found {len(self.explorer.working_set):,} items")
        for i, record in enumerate(candidates, 1):
            lines.append(f"{i}. {self.explorer.label_for(record)}")
        return lines

    def hover(self, record: GapRecord) -> None:
        """Transient preview of a candidate's connectors."""
        self.visualizer.render(highlight=record)

    def leave(self) -> None:
        self.visualizer.render()

    def select(self, record: GapRecord, label: Optional[str] = None) -> str:
        label = self.explorer.select(record, label)
        self.visualizer.set_working_set(self.explorer.working_set)
        self.visualizer.render(highlight=record)
        return label

    def select_index(self, index: int) -> Optional[str]:
        """Select the index-th candidate (zero-based); out of range is ignored."""
        candidates = self.candidates()
        if not 0 <= index < len(candidates):
            return None
        return self.select(candidates[index])

    def select_gap(self, gap: int) -> Optional[str]:
        for record in self.candidates():
            if record.gap == gap:
                return self.select(record)
        return None

    def reset(self) -> None:
        self.explorer.reset()
        self.visualizer.set_working_set(self.explorer.working_set)
        self.visualizer.render()

    def set_modulus(self, modulus) -> int:
        """Change the slice count and redraw, keeping the current selection's connectors."""
        self.params = self.params.with_modulus(modulus)
        if self.visualizer is not None:
            self.visualizer.params = self.params
            self.visualizer.render(highlight=self.explorer.current_record())
        return self.params.modulus

    def _on_resize(self, size: int) -> None:
        self.params = self.params.fitted(size, size)
        if self.visualizer is None:
            return
        self.visualizer.cancel()
        self.surface.resize(size)
        self.visualizer.params = self.params
        self.visualizer.render(highlight=self.explorer.current_record())

    def close(self) -> None:
        self._unsubscribe()
        if self.visualizer is not None:
            self.visualizer.close()
