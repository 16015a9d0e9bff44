"""RGB raster surface backed by a Pillow image."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
from PIL import Image, ImageChops, ImageDraw

from spiral_lab.utils.theme import to_rgb

Point = tuple[float, float]
Color = str | tuple[int, ...]


def _color(color: Color) -> tuple[int, ...]:
    return to_rgb(color) if isinstance(color, str) else tuple(color)


def quadratic_curve(p0: Point, control: Point, p1: Point, segments: int = 16) -> list[Point]:
    """Sample a quadratic Bezier curve as a polyline including both endpoints."""
    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    a, c, b = np.asarray(p0), np.asarray(control), np.asarray(p1)
    points = (1 - t) ** 2 * a + 2 * (1 - t) * t * c + t ** 2 * b
    return [tuple(p) for p in points]


class RasterSurface:
    """Square-or-not drawing surface with the handful of primitives renderers use.

    Drawing goes through an RGBA ImageDraw so colors with an alpha channel
    blend onto the RGB image.

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        image: Underlying RGB Pillow image.
    """

    def __init__(self, width: int, height: int | None = None, background: Color = "#ffffff"):
        if width < 1:
            raise ValueError(f"width must be >= 1, got {width}")
        height = width if height is None else height
        if height < 1:
            raise ValueError(f"height must be >= 1, got {height}")

        self.width = width
        self.height = height
        self.image = Image.new("RGB", (width, height), _color(background))
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def center(self) -> Point:
        return (self.width / 2, self.height / 2)

    @property
    def inscribed_radius(self) -> float:
        return min(self.width, self.height) / 2

    def resize(self, width: int, height: int | None = None, background: Color = "#ffffff") -> None:
        height = width if height is None else height
        self.width = width
        self.height = height
        self.image = Image.new("RGB", (width, height), _color(background))
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    def clear(self, background: Color = "#ffffff") -> None:
        self.image.paste(_color(background)[:3], (0, 0, self.width, self.height))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        x0, y0 = int(x), int(y)
        self._draw.rectangle(
            [x0, y0, x0 + max(1, int(w)) - 1, y0 + max(1, int(h)) - 1],
            fill=_color(color),
        )

    def line(self, p1: Point, p2: Point, color: Color, width: int = 1) -> None:
        self._draw.line([p1, p2], fill=_color(color), width=width)

    def polyline(self, points: Sequence[Point], color: Color, width: int = 1) -> None:
        self._draw.line(list(points), fill=_color(color), width=width, joint="curve")

    def stroke_paths(self, paths: Iterable[Sequence[Point]], color: Color, width: int = 1) -> int:
        """Stroke a batch of open paths with one color; returns the number drawn."""
        fill = _color(color)
        count = 0
        for path in paths:
            self._draw.line(list(path), fill=fill, width=width)
            count += 1
        return count

    def polygon(self, points: Sequence[Point], fill: Color | None = None,
                outline: Color | None = None, width: int = 1) -> None:
        self._draw.polygon(
            list(points),
            fill=None if fill is None else _color(fill),
            outline=None if outline is None else _color(outline),
            width=width,
        )

    def disc(self, center: Point, radius: float, color: Color) -> None:
        x, y = center
        self._draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=_color(color))

    def put_pixels(self, xs: np.ndarray, ys: np.ndarray, color: Color) -> int:
        """Write many single pixels in one buffer update.

        Coordinates are floored; points outside the surface are dropped.

        Returns:
            Number of pixels written.
        """
        xs = np.floor(np.asarray(xs)).astype(np.int64)
        ys = np.floor(np.asarray(ys)).astype(np.int64)
        inside = (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)

        pixels = np.array(self.image)
        pixels[ys[inside], xs[inside]] = _color(color)[:3]
        self.image.paste(Image.fromarray(pixels))
        return int(inside.sum())

    def multiply(self, layer: Image.Image) -> None:
        """Multiply-blend an RGB image of the same size onto the surface."""
        self.image.paste(ImageChops.multiply(self.image, layer.convert("RGB")))

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        return self.image.getpixel((int(x), int(y)))

    def to_array(self) -> np.ndarray:
        return np.array(self.image)

    def save(self, path: str | Path) -> None:
        self.image.save(path)
