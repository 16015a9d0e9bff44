"""Persistent color theme shared by every visualization.

Colors are stored as hex strings in a small JSON file. Subscribers are
notified whenever a color changes so renderers can restart their drawing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from PIL import ImageColor

logger = logging.getLogger(__name__)

DEFAULT_COLORS: Dict[str, str] = {
    "prime": "#444444",
    "muNeg": "#ec646f",
    "muZero": "#92da9f",
    "muPos": "#6a9aca",
    "zetaCurve": "#d9534f",
    "zetaSum": "#5b7fbd",
}

THEME_FILENAME = "colors-v3.json"


def default_theme_path() -> Path:
    return Path.home() / ".spiral_lab" / THEME_FILENAME


def to_rgb(color: str) -> tuple[int, int, int]:
    """Convert a CSS color string to an (r, g, b) tuple."""
    return ImageColor.getrgb(color)[:3]


def darken(color: str, factor: float) -> str:
    """Scale each channel by (1 - factor) and return the result as hex."""
    r, g, b = (int(c * (1 - factor)) for c in to_rgb(color))
    return f"#{r:02x}{g:02x}{b:02x}"


class ColorTheme:
    """Key to hex-color map with defaults, JSON persistence and observers.

    Attributes:
        path: JSON file used by load and save, or None for an in-memory theme.
    """

    def __init__(self, path: Optional[Path] = None, colors: Optional[Dict[str, str]] = None):
        self.path = Path(path) if path is not None else None
        self._colors: Dict[str, str] = dict(DEFAULT_COLORS)
        self._listeners: List[Callable[[str], None]] = []
        if colors:
            for key, value in colors.items():
                self._store(key, value)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'ColorTheme':
        """Load a theme from JSON, falling back to defaults on a missing or bad file."""
        path = Path(path) if path is not None else default_theme_path()
        theme = cls(path)
        if not path.exists():
            return theme

        try:
            with open(path) as f:
                saved = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read theme %s: %s", path, e)
            return theme

        if isinstance(saved, dict):
            for key, value in saved.items():
                theme._store(key, value)
        return theme

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self._colors, f, indent=2)

    def get(self, key: str) -> str:
        return self._colors.get(key) or DEFAULT_COLORS[key]

    def rgb(self, key: str) -> tuple[int, int, int]:
        return to_rgb(self.get(key))

    def as_dict(self) -> Dict[str, str]:
        return dict(self._colors)

    def set(self, key: str, color: str) -> bool:
        """Update one color, persist it and notify subscribers.

        Returns:
            False when the color string was rejected.
        """
        if not self._store(key, color):
            return False
        self.save()
        self._notify(key)
        return True

    def reset(self) -> None:
        self._colors = dict(DEFAULT_COLORS)
        self.save()
        self._notify("*")

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register a change callback; returns a function that removes it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _store(self, key: str, color) -> bool:
        try:
            ImageColor.getrgb(color)
        except (ValueError, AttributeError, TypeError):
            logger.warning("Ignoring invalid color %r for %s", color, key)
            return False
        self._colors[key] = color
        return True

    def _notify(self, key: str) -> None:
        for callback in list(self._listeners):
            callback(key)
