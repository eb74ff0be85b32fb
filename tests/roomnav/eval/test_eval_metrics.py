"""
Unit tests for roomnav.eval metrics and the session plot.
"""

import tempfile
import unittest
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from roomnav import NavigationSession
from roomnav.eval import count_physical_steps, final_position_error, path_length, path_to_array
from roomnav.eval.plots import plot_session, save_figure
from roomnav.sensors import Point2D


class TestPathMetrics(unittest.TestCase):
    """Test path_to_array, path_length and final_position_error."""

    def test_empty_path(self) -> None:
        self.assertEqual(path_to_array([]).shape, (0, 2))
        self.assertEqual(path_length([]), 0.0)

    def test_length_of_point_path(self) -> None:
        path = [Point2D(0.0, 0.0), Point2D(3.0, 4.0), Point2D(3.0, 0.0)]
        self.assertAlmostEqual(path_length(path), 9.0)

    def test_length_of_array(self) -> None:
        xy = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]])
        self.assertAlmostEqual(path_length(xy), 2.0)

    def test_final_position_error(self) -> None:
        self.assertAlmostEqual(final_position_error(Point2D(3.0, 4.0), Point2D(0.0, 0.0)), 5.0)
        self.assertAlmostEqual(final_position_error(np.array([1.0, 1.0]), np.array([1.0, 2.0])), 1.0)

    def test_final_position_error_shape(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            final_position_error(np.zeros(3), np.zeros(2))


class TestCountPhysicalSteps(unittest.TestCase):
    """Offline peak counting on a synthetic gait signal."""

    def test_two_hertz_gait(self) -> None:
        dt = 0.01
        t = np.arange(0.0, 10.0, dt)
        magnitudes = 1.0 + 0.3 * np.sin(2.0 * np.pi * 2.0 * t)

        result = count_physical_steps(magnitudes, dt)

        # 2 Hz for 10 s: one peak per cycle, edges may drop one
        self.assertGreaterEqual(result["count"], 19)
        self.assertLessEqual(result["count"], 20)
        self.assertEqual(len(result["indices"]), result["count"])

    def test_flat_signal_has_no_steps(self) -> None:
        result = count_physical_steps(np.full(200, 1.0), 0.05)
        self.assertEqual(result["count"], 0)

    def test_empty_signal(self) -> None:
        self.assertEqual(count_physical_steps(np.array([]), 0.05)["count"], 0)

    def test_invalid_inputs(self) -> None:
        with pytest.raises(ValueError, match="1D"):
            count_physical_steps(np.zeros((3, 3)), 0.05)
        with pytest.raises(ValueError, match="dt"):
            count_physical_steps(np.zeros(10), 0.0)


class TestPlotSession(unittest.TestCase):
    """Smoke test for the session figure."""

    def test_plot_and_save(self) -> None:
        session = NavigationSession()
        session.set_origin()
        for _ in range(3):
            session.process_tick(accel=(2.0, 0.0, 0.0))
        session.mark_room("Kitchen")
        session.finish_mapping()

        fig = plot_session(session.snapshot(), truth_xy=np.array([[0.0, 0.0], [1.5, 0.0]]))
        with tempfile.TemporaryDirectory() as tmpdir:
            paths = save_figure(fig, Path(tmpdir) / "figs", "session", formats=("png",))
            self.assertTrue(paths[0].exists())
        plt.close(fig)

    def test_save_defaults_to_png_only(self) -> None:
        fig = plot_session(NavigationSession().snapshot())
        with tempfile.TemporaryDirectory() as tmpdir:
            paths = save_figure(fig, tmpdir, "session")
            self.assertEqual([p.name for p in paths], ["session.png"])
            self.assertEqual(sorted(p.name for p in Path(tmpdir).iterdir()), ["session.png"])
        plt.close(fig)

    def test_save_several_formats(self) -> None:
        fig = plot_session(NavigationSession().snapshot())
        with tempfile.TemporaryDirectory() as tmpdir:
            paths = save_figure(fig, tmpdir, "session", formats=("png", "svg"))
            self.assertEqual([p.suffix for p in paths], [".png", ".svg"])
            self.assertTrue(all(p.exists() for p in paths))
        plt.close(fig)

    def test_save_without_formats_rejected(self) -> None:
        fig = plot_session(NavigationSession().snapshot())
        with tempfile.TemporaryDirectory() as tmpdir:
            with pytest.raises(ValueError, match="at least one format"):
                save_figure(fig, tmpdir, "session", formats=())
        plt.close(fig)


if __name__ == "__main__":
    unittest.main()
