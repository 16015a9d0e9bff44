"""Tests for the raster surface and parameter coercion."""

import numpy as np
import pytest

from spiral_lab.config import (
    ArchimedeanParams,
    PolarParams,
    PolygonParams,
    coerce_float,
    coerce_int,
)
from spiral_lab.visualization.renderer import save_surface
from spiral_lab.visualization.surface import RasterSurface, quadratic_curve


class TestRasterSurface:
    """Tests for RasterSurface."""

    def test_geometry(self):
        """Center and inscribed radius follow the shorter side."""
        surface = RasterSurface(100, 60)
        assert surface.center == (50, 30)
        assert surface.inscribed_radius == 30

    def test_invalid_size(self):
        """Empty surfaces are rejected."""
        with pytest.raises(ValueError):
            RasterSurface(0)
        with pytest.raises(ValueError):
            RasterSurface(10, 0)

    def test_fill_rect(self):
        """Rectangles cover exactly w x h pixels."""
        surface = RasterSurface(10)
        surface.fill_rect(2, 3, 2, 2, "#ff0000")
        assert surface.pixel(2, 3) == (255, 0, 0)
        assert surface.pixel(3, 4) == (255, 0, 0)
        assert surface.pixel(4, 4) == (255, 255, 255)

    def test_alpha_blends(self):
        """Translucent colors blend with what is underneath."""
        surface = RasterSurface(4, background="#000000")
        surface.fill_rect(0, 0, 4, 4, (255, 255, 255, 128))
        r, g, b = surface.pixel(1, 1)
        assert 120 <= r <= 135

    def test_put_pixels(self):
        """Pixels are floored and clipped."""
        surface = RasterSurface(10)
        count = surface.put_pixels(np.array([1.7, 5.0, -1.0, 12.0]),
                                   np.array([2.2, 5.9, 3.0, 3.0]), "#0000ff")
        assert count == 2
        assert surface.pixel(1, 2) == (0, 0, 255)
        assert surface.pixel(5, 5) == (0, 0, 255)

    def test_clear_and_resize(self):
        """clear repaints; resize changes dimensions."""
        surface = RasterSurface(10)
        surface.fill_rect(0, 0, 10, 10, "#000000")
        surface.clear("#f5f5f5")
        assert surface.pixel(5, 5) == (245, 245, 245)
        surface.resize(20)
        assert surface.to_array().shape == (20, 20, 3)

    def test_stroke_paths(self):
        """Each path is stroked once."""
        surface = RasterSurface(10)
        count = surface.stroke_paths([[(0, 0), (9, 0)], [(0, 5), (9, 5)]], "#000000")
        assert count == 2
        assert surface.pixel(4, 5) == (0, 0, 0)

    def test_multiply(self):
        """Multiply blending darkens the surface."""
        surface = RasterSurface(4)
        layer = RasterSurface(4, background="#808080")
        surface.multiply(layer.image)
        assert surface.pixel(0, 0) == (128, 128, 128)

    def test_save(self, tmp_path):
        """Surfaces save as image files."""
        path = save_surface(RasterSurface(8), tmp_path / "out.png")
        assert path.exists()


class TestQuadraticCurve:
    """Tests for quadratic_curve."""

    def test_endpoints(self):
        """The sampled curve starts and ends at the endpoints."""
        curve = quadratic_curve((0, 0), (5, 10), (10, 0), segments=4)
        assert len(curve) == 5
        assert curve[0] == pytest.approx((0, 0))
        assert curve[-1] == pytest.approx((10, 0))
        assert curve[2] == pytest.approx((5, 5))


class TestCoercion:
    """Tests for tolerant parameter parsing."""

    def test_coerce_int(self):
        """Bad input falls back to default; results are clamped."""
        assert coerce_int("7", 6, 3, 360) == 7
        assert coerce_int("abc", 6, 3, 360) == 6
        assert coerce_int(None, 6, 3, 360) == 6
        assert coerce_int(1, 6, 3, 360) == 3
        assert coerce_int(1000, 6, 3, 360) == 360

    def test_coerce_float(self):
        """Non-finite values fall back to the default."""
        assert coerce_float("2.5", 1.0) == 2.5
        assert coerce_float("inf", 1.0) == 1.0
        assert coerce_float("x", 1.0) == 1.0
        assert coerce_float(-3, 1.0, 0.1, 50) == 0.1

    def test_polygon_inputs(self):
        """Side counts are clamped to 3..360."""
        assert PolygonParams().with_inputs(sides="abc").sides == 6
        assert PolygonParams().with_inputs(sides=1).sides == 3
        assert PolygonParams().with_inputs(sides=10_000).sides == 360
        assert PolygonParams().with_inputs(spacing="4").spacing == 4

    def test_archimedean_inputs(self):
        """Pitch and wave slices are clamped."""
        params = ArchimedeanParams().with_inputs(pitch="0", wave_slices=2)
        assert params.pitch == 0.5
        assert params.wave_slices == 8

    def test_polar_modulus(self):
        """Slice counts are clamped to 12..144."""
        assert PolarParams().with_modulus(5).modulus == 12
        assert PolarParams().with_modulus(500).modulus == 144
        assert PolarParams().with_modulus("x").modulus == 28

    def test_polar_fitted(self):
        """The outer ring keeps a margin from the edge."""
        assert PolarParams().fitted(800, 800).max_radius == 360
        assert PolarParams().fitted(400, 500).max_radius == 160
