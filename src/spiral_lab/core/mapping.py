"""Coordinate mappers placing integers on 2D geometries.

Every function here is pure: the same (n, parameters) always gives the same
point, which lets renderers resume a pass or redraw a preview without keeping
their own copy of the layout.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

TWO_PI = 2 * math.pi

# Square spiral heading order in screen coordinates: right, up, left, down.
DIRECTIONS = ((1, 0), (0, -1), (-1, 0), (0, 1))


@dataclass(frozen=True)
class PolarPoint:
    """Cartesian position with the polar data it was derived from."""

    x: float
    y: float
    angle: float
    radius: float


def archimedean_point(n: int, cx: float, cy: float, pitch: float = 1.5) -> PolarPoint:
    """Place n on the Archimedean spiral r = pitch*sqrt(n), theta = 2*pi*sqrt(n).

    Perfect squares land on the positive x-axis.
    """
    root = math.sqrt(n)
    r = pitch * root
    theta = root * TWO_PI
    return PolarPoint(cx + r * math.cos(theta), cy + r * math.sin(theta), theta, r)


def archimedean_angles(n: np.ndarray) -> np.ndarray:
    """Angles in [0, 2*pi) of the Archimedean spiral for an array of integers."""
    return np.mod(np.sqrt(np.asarray(n, dtype=np.float64)) * TWO_PI, TWO_PI)


def square_spiral_offset(n: int) -> tuple[int, int]:
    """Grid offset of n from the centre of the square spiral (1 at the origin).

    Closed form of SquareSpiralWalk: ring k holds the integers whose offset
    from 1 lies in [(2k-1)^2, (2k+1)^2).

    Raises:
        ValueError: If n < 1.
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    m = n - 1
    if m == 0:
        return (0, 0)

    k = (math.isqrt(m) + 1) // 2
    side = 2 * k
    m_max = (2 * k + 1) ** 2 - 1

    if m >= m_max - side:
        x, y = k - (m_max - m), -k
    elif m >= m_max - 2 * side:
        x, y = -k, -k + (m_max - side - m)
    elif m >= m_max - 3 * side:
        x, y = -k + (m_max - 2 * side - m), k
    else:
        x, y = k, k - (m_max - 3 * side - m)

    return (x, -y)


class SquareSpiralWalk:
    """Incremental square spiral walk, one grid step per integer.

    The run length grows by one every second turn, producing the standard
    outward spiral. Use ``position`` before ``advance`` to read the cell of
    the current integer.

    Attributes:
        n: Integer at the current position.
        x: Grid column offset from the centre.
        y: Grid row offset from the centre.
    """

    def __init__(self):
        self.n = 1
        self.x = 0
        self.y = 0
        self.direction = 0
        self.run_length = 1
        self.steps_taken = 0
        self.turns = 0

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def ring(self) -> int:
        """Chebyshev distance of the current cell from the centre."""
        return max(abs(self.x), abs(self.y))

    def advance(self) -> None:
        dx, dy = DIRECTIONS[self.direction]
        self.x += dx
        self.y += dy
        self.n += 1
        self.steps_taken += 1

        if self.steps_taken == self.run_length:
            self.steps_taken = 0
            self.direction = (self.direction + 1) % 4
            self.turns += 1
            if self.turns == 2:
                self.run_length += 1
                self.turns = 0


def polygon_slot(n: int, sides: int) -> tuple[int, int]:
    """Return (layer, side) of n on concentric polygons with `sides` sides.

    Layers are zero-based: 1..sides sit on layer 0.
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return divmod(n - 1, sides)


def polygon_index(layer: int, side: int, sides: int) -> int:
    """Inverse of polygon_slot."""
    return layer * sides + side + 1


def polygon_vertices(sides: int, rotation: float = 0.0) -> np.ndarray:
    """Unit polygon vertices as a (sides + 1, 2) array, first vertex repeated last."""
    theta = np.arange(sides + 1) % sides * (TWO_PI / sides) + rotation
    return np.column_stack([np.cos(theta), np.sin(theta)])


def polygon_segment(
    n: int,
    sides: int,
    spacing: float,
    cx: float,
    cy: float,
    rotation: float = 0.0,
    vertices: np.ndarray | None = None,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Endpoints of the polygon side representing n.

    Radius grows linearly with the layer: layer 0 is drawn at `spacing`.
    """
    if vertices is None:
        vertices = polygon_vertices(sides, rotation)
    layer, side = polygon_slot(n, sides)
    r = (layer + 1) * spacing
    (x1, y1), (x2, y2) = vertices[side], vertices[side + 1]
    return (cx + r * x1, cy + r * y1), (cx + r * x2, cy + r * y2)


def polar_angle(n: int, modulus: int) -> float:
    """Angle of the residue slice holding n; residue 0 points straight up."""
    return (n % modulus) * (TWO_PI / modulus) - math.pi / 2


def polar_point(
    n: int,
    modulus: int,
    limit: int,
    max_radius: float,
    cx: float,
    cy: float,
) -> PolarPoint:
    """Place n in its residue slice at an area-preserving radius sqrt(n/limit)."""
    angle = polar_angle(n, modulus)
    r = math.sqrt(n / limit) * max_radius
    return PolarPoint(cx + r * math.cos(angle), cy + r * math.sin(angle), angle, r)


def slice_trig_table(modulus: int) -> tuple[np.ndarray, np.ndarray]:
    """Cosine and sine of every residue slice angle."""
    angles = np.arange(modulus) * (TWO_PI / modulus) - math.pi / 2
    return np.cos(angles), np.sin(angles)


def polar_coordinates(
    values: np.ndarray,
    modulus: int,
    limit: int,
    max_radius: float,
    cx: float,
    cy: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised polar_point for an array of integers."""
    values = np.asarray(values, dtype=np.int64)
    cos_table, sin_table = slice_trig_table(modulus)
    residue = values % modulus
    r = np.sqrt(values / limit) * max_radius
    return cx + r * cos_table[residue], cy + r * sin_table[residue]


def same_slice(angle1: float, angle2: float, eps: float = 0.01) -> bool:
    """True when two angles point along the same ray, allowing for wraparound."""
    diff = abs(angle1 - angle2)
    return diff < eps or abs(diff - TWO_PI) < eps
