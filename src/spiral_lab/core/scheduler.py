"""Cooperative chunked scheduling on a single-threaded frame loop.

Long enumerations are cut into bounded chunks. After each chunk the scheduler
hands control back to the host and asks for another frame. Cancellation uses
a generation token: every new run (or explicit cancel) bumps the generation,
and a resumed chunk whose captured token is stale returns without doing any
work.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)


class FrameLoop:
    """Minimal host event loop with animation frames and delayed callbacks.

    Frame callbacks requested during a tick run on the next tick, the same
    way a browser's requestAnimationFrame behaves. A GUI host drives the
    loop by calling ``tick`` from its own timer; headless callers use
    ``run_until_idle``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._frames: deque[Callable[[], None]] = deque()
        self._timers: list[tuple[float, int, Callable[[], None]]] = []
        self._sequence = itertools.count()
        self.frame_count = 0

    @property
    def pending(self) -> int:
        """Number of queued frame callbacks and timers."""
        return len(self._frames) + len(self._timers)

    def request_frame(self, callback: Callable[[], None]) -> None:
        self._frames.append(callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback on the first tick at least `delay` seconds from now."""
        due = self._clock() + max(0.0, delay)
        heapq.heappush(self._timers, (due, next(self._sequence), callback))

    def tick(self) -> int:
        """Run due timers and the frame callbacks queued before this tick.

        Frames requested by a timer or a frame callback wait for the next tick.

        Returns:
            Number of callbacks executed.
        """
        executed = 0
        queued = len(self._frames)
        now = self._clock()
        while self._timers and self._timers[0][0] <= now:
            _, _, callback = heapq.heappop(self._timers)
            callback()
            executed += 1

        for _ in range(queued):
            callback = self._frames.popleft()
            callback()
            executed += 1

        self.frame_count += 1
        return executed

    def run_until_idle(self, max_frames: int | None = None) -> int:
        """Tick until nothing is queued, sleeping through timer delays.

        Args:
            max_frames: Stop after this many ticks even if work remains.

        Returns:
            Number of ticks performed.
        """
        ticks = 0
        while self.pending and (max_frames is None or ticks < max_frames):
            if not self._frames and self._timers:
                wait = self._timers[0][0] - self._clock()
                if wait > 0:
                    time.sleep(wait)
            self.tick()
            ticks += 1
        return ticks


class RunHandle:
    """Reference to one scheduler run, identified by its generation token."""

    def __init__(self, scheduler: ChunkedScheduler, generation: int):
        self.scheduler = scheduler
        self.generation = generation
        self.completed = 0
        self.finished = False

    @property
    def active(self) -> bool:
        return not self.finished and self.scheduler.generation == self.generation

    def cancel(self) -> None:
        if self.active:
            self.scheduler.cancel()


def scaled_chunk_size(budget: int, unit_cost: int, minimum: int = 1) -> int:
    """Units per chunk so that one chunk costs about `budget` elementary draws."""
    return max(minimum, budget // max(1, unit_cost))


class ChunkedScheduler:
    """Drives a step function over an index range in frame-sized chunks.

    Only one run is live at a time: starting a run invalidates the previous
    one, whose next resumption becomes a no-op. Cancellation therefore takes
    effect at the next chunk boundary.

    Attributes:
        host: Frame loop providing ``request_frame``.
        name: Label used in log messages.
    """

    def __init__(self, host: FrameLoop, name: str = "scheduler"):
        self.host = host
        self.name = name
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        """Invalidate the current run, if any."""
        self._generation += 1

    def run(
        self,
        total_work: int | None,
        chunk_size: int,
        step_fn: Callable[[int], bool | None],
        on_done: Callable[[int], None] | None = None,
        on_progress: Callable[[int], None] | None = None,
    ) -> RunHandle:
        """Start a new run; the first chunk executes before returning.

        Args:
            total_work: Number of units, or None for an open-ended enumeration.
            chunk_size: Units executed per frame.
            step_fn: Called with each index in order. Returning False ends
                the run early (e.g. the spiral left the canvas).
            on_done: Called once with the number of completed units.
            on_progress: Called after every chunk with the completed count.

        Returns:
            Handle for this run.

        Raises:
            ValueError: If chunk_size < 1 or total_work < 0.
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        if total_work is not None and total_work < 0:
            raise ValueError(f"total_work must be >= 0, got {total_work}")

        self._generation += 1
        handle = RunHandle(self, self._generation)

        def finish() -> None:
            handle.finished = True
            logger.debug("%s run %d done after %d units",
                         self.name, handle.generation, handle.completed)
            if on_done is not None:
                on_done(handle.completed)

        def resume() -> None:
            if handle.generation != self._generation:
                logger.debug("%s: dropping stale chunk of run %d",
                             self.name, handle.generation)
                return

            stop = False
            for _ in range(chunk_size):
                if total_work is not None and handle.completed >= total_work:
                    break
                result = step_fn(handle.completed)
                if result is False:
                    stop = True
                    break
                handle.completed += 1

            exhausted = total_work is not None and handle.completed >= total_work
            if on_progress is not None:
                on_progress(handle.completed)
                if handle.generation != self._generation:
                    return

            if stop or exhausted:
                finish()
            else:
                self.host.request_frame(resume)

        if total_work == 0:
            finish()
        else:
            resume()
        return handle
