"""Concentric polygon ("N-gon") spirals.

Integer n occupies one side of a regular polygon: with S sides, layer
(n-1) // S at radius (layer+1)*spacing and side (n-1) % S. Each scheduler
step draws a whole layer, so chunks shrink as the side count grows.
"""

from __future__ import annotations

import math
from dataclasses import replace

import numpy as np
from PIL import Image, ImageDraw

from spiral_lab.config import PolygonParams
from spiral_lab.core.mapping import TWO_PI, polygon_index, polygon_vertices
from spiral_lab.core.scheduler import scaled_chunk_size
from spiral_lab.utils.theme import to_rgb
from spiral_lab.visualization.base import SpiralRenderer

CUBE_ROTATION = math.pi / 6
CUBE_OUTLINE = (0, 0, 0, 178)
CUBE_LINE_WIDTH = 5

# Vertices are numbered clockwise from 30 degrees (screen coordinates):
# 0 lower right, 1 bottom, 2 lower left, 3 upper left, 4 top, 5 upper right.
# Each face: (outer vertices, gradient start, gradient end or None for center, colors).
CUBE_FACES = (
    ((3, 4, 5), 4, None, ("#ffffff", "#aaaaaa")),
    ((1, 2, 3), 3, 1, ("#dddddd", "#777777")),
    ((5, 0, 1), 5, 1, ("#555555", "#111111")),
)


def max_layers(canvas_size: float, spacing: int) -> int:
    return int((canvas_size / 2) // spacing)


def cube_vertex(index: int, radius: float, cx: float, cy: float) -> tuple[float, float]:
    theta = index * TWO_PI / 6 + CUBE_ROTATION
    return (cx + radius * math.cos(theta), cy + radius * math.sin(theta))


def linear_gradient(size: tuple[int, int], start, end, colors) -> np.ndarray:
    """RGB array shading linearly from colors[0] at start to colors[1] at end."""
    width, height = size
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    dx, dy = end[0] - start[0], end[1] - start[1]
    length = dx * dx + dy * dy or 1.0
    t = np.clip(((xs - start[0]) * dx + (ys - start[1]) * dy) / length, 0.0, 1.0)[..., None]
    c0 = np.array(to_rgb(colors[0]), dtype=np.float64)
    c1 = np.array(to_rgb(colors[1]), dtype=np.float64)
    return (c0 + (c1 - c0) * t).astype(np.uint8)


class PolygonSpiral(SpiralRenderer):
    """N-gon spiral, one stroked side per integer."""

    name = "polygon"
    background = "#f5f5f5"
    twin_shading = False

    def __init__(self, sieve, surface, theme, scheduler, params: PolygonParams | None = None,
                 status=None):
        super().__init__(sieve, surface, theme, scheduler, params or PolygonParams(), status)
        self._vertices = polygon_vertices(self.params.sides, self.params.rotation)

    @property
    def max_layers(self) -> int:
        return max_layers(min(self.surface.width, self.surface.height), self.params.spacing)

    @property
    def chunk_size(self) -> int:
        return scaled_chunk_size(self.params.chunk_budget, self.params.sides)

    def total_work(self) -> int:
        return max(0, self.max_layers - 1)

    def _begin(self) -> None:
        self._vertices = polygon_vertices(self.params.sides, self.params.rotation)

    def layer_segments(self, layer: int) -> list[tuple[int, tuple[float, float], tuple[float, float]]]:
        """(n, start, end) for every side of a one-based layer."""
        sides = self.params.sides
        cx, cy = self.surface.center
        r = layer * self.params.spacing
        points = np.column_stack([cx + r * self._vertices[:, 0], cy + r * self._vertices[:, 1]])
        return [
            (polygon_index(layer - 1, s, sides), tuple(points[s]), tuple(points[s + 1]))
            for s in range(sides)
        ]

    def _step(self, index: int) -> bool | None:
        width = self.params.spacing + 1
        for n, start, end in self.layer_segments(index + 1):
            self.surface.line(start, end, self.color_for(n), width=width)
            self.last_index = n
        return None

    def _finish(self, completed: int) -> None:
        if self.params.cube_overlay:
            self.draw_cube_overlay((completed + 1) * self.params.spacing)

    def draw_cube_overlay(self, radius: float) -> None:
        """Multiply three gradient faces onto the hexagon, then outline it as a cube."""
        surface = self.surface
        cx, cy = surface.center
        size = (surface.width, surface.height)

        shading = np.full((surface.height, surface.width, 3), 255, dtype=np.uint8)
        for indices, start, end, colors in CUBE_FACES:
            mask = Image.new("L", size, 0)
            face = [(cx, cy)] + [cube_vertex(i, radius, cx, cy) for i in indices]
            ImageDraw.Draw(mask).polygon(face, fill=255)
            p0 = cube_vertex(start, radius, cx, cy)
            p1 = (cx, cy) if end is None else cube_vertex(end, radius, cx, cy)
            inside = np.array(mask) > 0
            shading[inside] = linear_gradient(size, p0, p1, colors)[inside]

        surface.multiply(Image.fromarray(shading))

        hexagon = [cube_vertex(i, radius, cx, cy) for i in range(6)]
        surface.polyline(hexagon + hexagon[:1], CUBE_OUTLINE, width=CUBE_LINE_WIDTH)
        for i in (1, 3, 5):
            surface.line((cx, cy), cube_vertex(i, radius, cx, cy), CUBE_OUTLINE,
                         width=CUBE_LINE_WIDTH)


def cube_params(params: PolygonParams) -> PolygonParams:
    """Force a parameter set onto the pointy-top hexagon with the cube overlay."""
    return replace(params, sides=6, rotation=CUBE_ROTATION, cube_overlay=True)


class CubeSpiral(PolygonSpiral):
    """Hexagonal spiral with pointy top and bottom, finished as a shaded cube."""

    name = "cube"

    def __init__(self, sieve, surface, theme, scheduler, params: PolygonParams | None = None,
                 status=None):
        super().__init__(sieve, surface, theme, scheduler,
                         cube_params(params or PolygonParams()), status)

    def update_params(self, params: PolygonParams):
        return super().update_params(cube_params(params))


def side_count_color(spiral: SpiralRenderer, sides: int) -> tuple[int, int, int]:
    """Classification color of the side count itself, used to tint its input."""
    return spiral.color_for(sides, twin_shading=False)
