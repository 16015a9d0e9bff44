"""Tests for coordinate mappers."""

import math

import numpy as np
import pytest

from spiral_lab.core.mapping import (
    SquareSpiralWalk,
    archimedean_angles,
    archimedean_point,
    polar_angle,
    polar_coordinates,
    polar_point,
    polygon_index,
    polygon_segment,
    polygon_slot,
    polygon_vertices,
    same_slice,
    square_spiral_offset,
)


class TestArchimedean:
    """Tests for the Archimedean mapper."""

    def test_deterministic(self):
        """Repeated calls give identical points."""
        for n in [1, 2, 17, 1000, 123457]:
            assert archimedean_point(n, 400, 400, 1.5) == archimedean_point(n, 400, 400, 1.5)

    def test_radius(self):
        """Radius is pitch * sqrt(n)."""
        point = archimedean_point(100, 0, 0, pitch=2.0)
        assert point.radius == pytest.approx(20.0)
        assert math.hypot(point.x, point.y) == pytest.approx(20.0)

    def test_squares_on_positive_axis(self):
        """Perfect squares complete whole turns."""
        for k in [1, 2, 5, 12]:
            point = archimedean_point(k * k, 0, 0, pitch=1.0)
            assert point.x == pytest.approx(k)
            assert point.y == pytest.approx(0.0, abs=1e-9)

    def test_vectorised_angles(self):
        """Array angles agree with the scalar mapper modulo a full turn."""
        n = np.arange(1, 50)
        angles = archimedean_angles(n)
        assert np.all((angles >= 0) & (angles < 2 * math.pi))
        for value, angle in zip(n, angles):
            expected = archimedean_point(int(value), 0, 0).angle % (2 * math.pi)
            assert angle == pytest.approx(expected)


class TestSquareSpiral:
    """Tests for the square spiral walk and its closed form."""

    def test_first_cells(self):
        """The walk goes right, up, left, left, down, down, right..."""
        assert square_spiral_offset(1) == (0, 0)
        assert square_spiral_offset(2) == (1, 0)
        assert square_spiral_offset(3) == (1, -1)
        assert square_spiral_offset(4) == (0, -1)
        assert square_spiral_offset(5) == (-1, -1)
        assert square_spiral_offset(6) == (-1, 0)
        assert square_spiral_offset(7) == (-1, 1)
        assert square_spiral_offset(9) == (1, 1)
        assert square_spiral_offset(10) == (2, 1)

    def test_walk_matches_closed_form(self):
        """Incremental walk and closed form agree everywhere."""
        walk = SquareSpiralWalk()
        for n in range(1, 2000):
            assert walk.n == n
            assert walk.position == square_spiral_offset(n), n
            walk.advance()

    def test_cells_unique(self):
        """No two integers share a cell."""
        cells = {square_spiral_offset(n) for n in range(1, 1001)}
        assert len(cells) == 1000

    def test_ring(self):
        """Odd squares close each ring."""
        walk = SquareSpiralWalk()
        for _ in range(8):
            walk.advance()
        assert walk.n == 9
        assert walk.ring == 1
        walk.advance()
        assert walk.ring == 2

    def test_invalid(self):
        """n must be positive."""
        with pytest.raises(ValueError):
            square_spiral_offset(0)


class TestPolygon:
    """Tests for the polygon mapper."""

    def test_slot(self):
        """Integers fill one layer of sides before moving out."""
        assert polygon_slot(1, 6) == (0, 0)
        assert polygon_slot(6, 6) == (0, 5)
        assert polygon_slot(7, 6) == (1, 0)

    def test_index_inverse(self):
        """polygon_index undoes polygon_slot."""
        for n in range(1, 200):
            layer, side = polygon_slot(n, 7)
            assert polygon_index(layer, side, 7) == n

    def test_large_indices_exact(self):
        """Deep layers at high side counts keep exact integer arithmetic."""
        sides = 997
        layer = 10 ** 14 + 3
        n = polygon_index(layer, 5, sides)
        assert polygon_slot(n, sides) == (layer, 5)

    def test_vertices_closed(self):
        """The vertex list repeats the first vertex at the end."""
        vertices = polygon_vertices(4)
        assert vertices.shape == (5, 2)
        np.testing.assert_array_equal(vertices[0], vertices[-1])
        np.testing.assert_allclose(vertices[1], [0.0, 1.0], atol=1e-12)

    def test_rotation(self):
        """Rotation moves the first vertex."""
        vertices = polygon_vertices(6, rotation=math.pi / 6)
        np.testing.assert_allclose(vertices[0], [math.cos(math.pi / 6), 0.5])

    def test_segment(self):
        """n = 1 is the first side of the innermost layer."""
        (x1, y1), (x2, y2) = polygon_segment(1, 4, spacing=2, cx=0, cy=0)
        assert (x1, y1) == pytest.approx((2.0, 0.0))
        assert (x2, y2) == pytest.approx((0.0, 2.0), abs=1e-12)

    def test_segment_radius_grows(self):
        """Second layer sits one spacing further out."""
        (x1, y1), _ = polygon_segment(5, 4, spacing=3, cx=0, cy=0)
        assert math.hypot(x1, y1) == pytest.approx(6.0)


class TestPolar:
    """Tests for the polar slice mapper."""

    def test_residue_zero_points_up(self):
        """Residue 0 is at -pi/2."""
        assert polar_angle(0, 12) == pytest.approx(-math.pi / 2)
        assert polar_angle(24, 12) == pytest.approx(-math.pi / 2)

    def test_slice_angle(self):
        """Each residue adds one slice."""
        assert polar_angle(3, 12) - polar_angle(0, 12) == pytest.approx(math.pi / 2)

    def test_radius(self):
        """Radius is sqrt(n / limit) * max_radius."""
        assert polar_point(1000, 28, 1000, 300, 0, 0).radius == pytest.approx(300)
        assert polar_point(250, 28, 1000, 300, 0, 0).radius == pytest.approx(150)

    def test_deterministic(self):
        """Repeated calls give identical points."""
        assert polar_point(997, 28, 10 ** 6, 360, 400, 400) == polar_point(997, 28, 10 ** 6, 360, 400, 400)

    def test_vectorised_matches_scalar(self):
        """Array mapping agrees with the scalar mapper."""
        values = np.array([2, 3, 5, 7, 11, 13, 97, 997])
        xs, ys = polar_coordinates(values, 28, 1000, 300, 400, 400)
        for value, x, y in zip(values, xs, ys):
            point = polar_point(int(value), 28, 1000, 300, 400, 400)
            assert x == pytest.approx(point.x)
            assert y == pytest.approx(point.y)

    def test_same_slice(self):
        """Same-ray detection handles wraparound."""
        assert same_slice(1.0, 1.005)
        assert same_slice(0.0, 2 * math.pi - 0.001)
        assert not same_slice(0.0, 0.5)
