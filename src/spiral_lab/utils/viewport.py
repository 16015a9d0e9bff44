"""Square canvas sizing that follows the host window."""

from __future__ import annotations

from typing import Callable, List

DEFAULT_SIZE = 800
MIN_FIT_SIZE = 400
MAX_FIT_SIZE = 1200

# Chrome around the canvas: side padding, top padding + toolbar + header.
HORIZONTAL_PADDING = 80
VERTICAL_PADDING = 80 + 80 + 30

RESIZE_THRESHOLD = 10


class Viewport:
    """Computes the pixel size of the square drawing surface.

    With fit enabled the canvas fills the window (clamped to
    [MIN_FIT_SIZE, MAX_FIT_SIZE]); otherwise it stays at DEFAULT_SIZE.
    Subscribers receive the new size whenever it changes noticeably.
    """

    def __init__(self, window_width: int = 1280, window_height: int = 1024, fit: bool = True):
        self.window_width = window_width
        self.window_height = window_height
        self.fit = fit
        self._size = self.get_size()
        self._listeners: List[Callable[[int], None]] = []

    @property
    def size(self) -> int:
        return self._size

    def calculate_fit_size(self) -> int:
        available = min(
            self.window_width - HORIZONTAL_PADDING,
            self.window_height - VERTICAL_PADDING,
            MAX_FIT_SIZE,
        )
        return max(MIN_FIT_SIZE, available)

    def get_size(self) -> int:
        return self.calculate_fit_size() if self.fit else DEFAULT_SIZE

    def subscribe(self, callback: Callable[[int], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def resize(self, window_width: int, window_height: int) -> bool:
        """Record a new window size; returns True if listeners were notified."""
        self.window_width = window_width
        self.window_height = window_height
        return self._apply()

    def toggle_fit(self) -> bool:
        self.fit = not self.fit
        self._apply(force=True)
        return self.fit

    def _apply(self, force: bool = False) -> bool:
        size = self.get_size()
        if not force and abs(size - self._size) <= RESIZE_THRESHOLD:
            return False
        self._size = size
        for callback in list(self._listeners):
            callback(size)
        return True
