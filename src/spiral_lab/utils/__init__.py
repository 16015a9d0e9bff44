"""Theme and viewport collaborators."""

from spiral_lab.utils.theme import ColorTheme, DEFAULT_COLORS, darken
from spiral_lab.utils.viewport import Viewport

__all__ = [
    "ColorTheme",
    "DEFAULT_COLORS",
    "darken",
    "Viewport",
]
