"""Renderers for spirals, the polar gap view and the zeta trajectory."""

from spiral_lab.visualization.surface import RasterSurface
from spiral_lab.visualization.base import SpiralRenderer
from spiral_lab.visualization.archimedean import ArchimedeanSpiral
from spiral_lab.visualization.ulam import UlamSpiral
from spiral_lab.visualization.polygon import CubeSpiral, PolygonSpiral
from spiral_lab.visualization.polar import PolarVisualizer
from spiral_lab.visualization.zeta import ZetaTrajectory

__all__ = [
    "RasterSurface",
    "SpiralRenderer",
    # Spirals
    "ArchimedeanSpiral",
    "UlamSpiral",
    "PolygonSpiral",
    "CubeSpiral",
    # Explorer and zeta
    "PolarVisualizer",
    "ZetaTrajectory",
]
