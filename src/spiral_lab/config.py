"""Geometry parameters for each visualization variant.

Values coming from interactive controls are coerced and clamped here rather
than rejected: a bad slider value should never stop a drawing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

MIN_SIDES = 3
MAX_SIDES = 360
MIN_MODULUS = 12
MAX_MODULUS = 144
MIN_PITCH = 0.5
MAX_PITCH = 50.0


def coerce_int(value, default: int, minimum: int | None = None, maximum: int | None = None) -> int:
    """Parse value as an int, falling back to default and clamping to range."""
    try:
        result = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid integer %r, using %d", value, default)
        result = default

    if minimum is not None and result < minimum:
        logger.warning("Value %d below minimum, clamped to %d", result, minimum)
        result = minimum
    if maximum is not None and result > maximum:
        logger.warning("Value %d above maximum, clamped to %d", result, maximum)
        result = maximum
    return result


def coerce_float(value, default: float, minimum: float | None = None, maximum: float | None = None) -> float:
    """Parse value as a finite float, falling back to default and clamping to range."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        result = default
    if not math.isfinite(result):
        result = default

    if minimum is not None:
        result = max(minimum, result)
    if maximum is not None:
        result = min(maximum, result)
    return result


@dataclass(frozen=True)
class ArchimedeanParams:
    """Archimedean spiral r = pitch*sqrt(n), theta = 2*pi*sqrt(n)."""
    pixel_size: int = 2
    pitch: float = 1.5
    chunk_size: int = 1000
    frequency_wave: bool = False
    wave_slices: int = 72

    def with_inputs(self, pitch=None, wave_slices=None) -> ArchimedeanParams:
        return replace(
            self,
            pitch=self.pitch if pitch is None else coerce_float(pitch, self.pitch, MIN_PITCH, MAX_PITCH),
            wave_slices=(self.wave_slices if wave_slices is None
                         else coerce_int(wave_slices, self.wave_slices, 8, 720)),
        )


@dataclass(frozen=True)
class UlamParams:
    """Square spiral with one cell of pixel_size per integer."""
    pixel_size: int = 2
    chunk_size: int = 2000


@dataclass(frozen=True)
class PolygonParams:
    """Concentric regular polygons, one side per integer.

    Attributes:
        sides: Polygon side count.
        spacing: Radial distance between layers in pixels.
        rotation: Rotation of the first vertex in radians.
        cube_overlay: Shade the finished hexagon as an isometric cube.
        chunk_budget: Side draws per chunk; layers per chunk = budget // sides.
    """
    sides: int = 6
    spacing: int = 2
    rotation: float = 0.0
    cube_overlay: bool = False
    chunk_budget: int = 600

    def with_inputs(self, sides=None, spacing=None) -> PolygonParams:
        return replace(
            self,
            sides=self.sides if sides is None else coerce_int(sides, 6, MIN_SIDES, MAX_SIDES),
            spacing=self.spacing if spacing is None else coerce_int(spacing, 2, 1, 64),
        )


@dataclass(frozen=True)
class PolarParams:
    """Residue-slice polar layout used by the gap explorer.

    Attributes:
        modulus: Number of angular slices.
        limit: Largest integer mapped; sets the radial scale.
        max_radius: Radius in pixels reached by `limit`.
        margin: Pixels kept free around the outermost ring.
    """
    modulus: int = 28
    limit: int = 1_000_000
    max_radius: float = 360.0
    margin: int = 40

    def with_modulus(self, modulus) -> PolarParams:
        return replace(self, modulus=coerce_int(modulus, self.modulus, MIN_MODULUS, MAX_MODULUS))

    def fitted(self, width: int, height: int) -> PolarParams:
        """Copy with max_radius filling a surface of the given size."""
        return replace(self, max_radius=max(1.0, min(width, height) / 2 - self.margin))
