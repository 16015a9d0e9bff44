"""Tests for the zeta series and trajectory animation."""

import math

import numpy as np
import pytest

from spiral_lab.core.scheduler import ChunkedScheduler, FrameLoop
from spiral_lab.core.sieve import build_sieve
from spiral_lab.core.zeta import critical_line_zeta, dirichlet_eta, partial_sums, zeta
from spiral_lab.utils.theme import ColorTheme
from spiral_lab.visualization.surface import RasterSurface
from spiral_lab.visualization.zeta import MAX_HISTORY, ZetaTrajectory


class TestZetaSeries:
    """Tests for the eta-based zeta approximation."""

    def test_zeta_two(self):
        """zeta(2) = pi^2 / 6."""
        assert zeta(2).real == pytest.approx(math.pi ** 2 / 6, abs=1e-4)
        assert zeta(2).imag == pytest.approx(0.0, abs=1e-12)

    def test_eta_one(self):
        """eta(1) = ln 2."""
        assert dirichlet_eta(1).real == pytest.approx(math.log(2), abs=2e-3)

    def test_first_zero(self):
        """zeta is close to zero at the first nontrivial zero."""
        assert abs(critical_line_zeta(14.134725)) < 0.05

    def test_pole(self):
        """s = 1 is a pole."""
        with pytest.raises(ZeroDivisionError):
            zeta(1)

    def test_partial_sums(self):
        """Cumulative sums start at 0 then 1."""
        sums = partial_sums(3.0)
        assert len(sums) == 51
        assert sums[0] == 0
        assert sums[1] == pytest.approx(1.0)

    def test_partial_sums_real(self):
        """At t = 0 and sigma = 1 the sums are harmonic numbers."""
        sums = partial_sums(0.0, terms=3, sigma=1.0)
        np.testing.assert_allclose(sums.real, [0, 1, 1.5, 1 + 1 / 2 + 1 / 3])


@pytest.fixture
def loop():
    return FrameLoop()


@pytest.fixture
def trajectory(loop):
    statuses = []
    traj = ZetaTrajectory(RasterSurface(200), ColorTheme(), ChunkedScheduler(loop),
                          status=statuses.append, stripes=build_sieve(50))
    traj.statuses = statuses
    return traj


class TestZetaTrajectory:
    """Tests for ZetaTrajectory."""

    def test_draw_paused(self, trajectory):
        """Drawing while paused does not extend the history."""
        value = trajectory.draw()
        assert value == critical_line_zeta(0.0)
        assert len(trajectory.history) == 0
        assert trajectory.statuses[-1] == "t = 0.00"

    def test_play_advances(self, loop, trajectory):
        """Each frame records zeta and advances t."""
        trajectory.play()
        assert trajectory.t == pytest.approx(0.05)
        assert len(trajectory.history) == 1
        loop.tick()
        assert trajectory.t == pytest.approx(0.10)
        assert len(trajectory.history) == 2

    def test_pause(self, loop, trajectory):
        """Pausing stops the frames."""
        trajectory.play()
        trajectory.pause()
        loop.tick()
        loop.tick()
        assert trajectory.t == pytest.approx(0.05)
        assert loop.pending == 0

    def test_toggle(self, trajectory):
        """toggle flips between playing and paused."""
        assert trajectory.toggle() is True
        assert trajectory.toggle() is False

    def test_reset(self, loop, trajectory):
        """Reset clears t and the history."""
        trajectory.play()
        loop.tick()
        trajectory.pause()
        trajectory.reset()
        assert trajectory.t == 0.0
        assert len(trajectory.history) == 0

    def test_set_t(self, trajectory):
        """Invalid input falls back to 0."""
        trajectory.set_t("14.5")
        assert trajectory.t == 14.5
        assert trajectory.statuses[-1] == "t = 14.50"
        trajectory.set_t("abc")
        assert trajectory.t == 0.0
        trajectory.set_t(float("nan"))
        assert trajectory.t == 0.0

    def test_history_bounded(self, trajectory):
        """The history keeps only the most recent values."""
        trajectory.history.extend([0j] * (MAX_HISTORY + 10))
        assert len(trajectory.history) == MAX_HISTORY

    def test_target_scale(self, trajectory):
        """The zoom keeps the farthest value inside the view."""
        assert trajectory.target_scale() == pytest.approx(100 / (2 * 1.2))
        trajectory.history.append(4 + 3j)
        assert trajectory.target_scale() == pytest.approx(100 / (5 * 1.2))

    def test_theme_change_redraws(self, trajectory):
        """A color change redraws a paused trajectory."""
        trajectory.theme.set("zetaSum", "#000000")
        assert trajectory.statuses == ["t = 0.00"]

    def test_close(self, loop, trajectory):
        """A closed trajectory stops playing and ignores the theme."""
        trajectory.play()
        trajectory.close()
        trajectory.theme.set("zetaSum", "#000000")
        assert not trajectory.playing
        assert trajectory.statuses == ["t = 0.00"]
