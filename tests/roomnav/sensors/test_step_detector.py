"""
Unit tests for roomnav.sensors.pdr (step-and-heading dead reckoning).

Tests cover:
    - Acceleration magnitude
    - Single step update along a heading
    - Threshold detection (strict greater-than)
    - Level vs edge triggering
    - Debounce interval
    - Reset and validation

Run with: pytest tests/roomnav/sensors/test_step_detector.py -v
"""

import unittest

import numpy as np
import pytest
from numpy.testing import assert_allclose

from roomnav.sensors import ORIGIN, Point2D, StepDetector, accel_magnitude, pdr_step_update


class TestAccelMagnitude(unittest.TestCase):
    """Test accel_magnitude."""

    def test_pythagorean(self) -> None:
        self.assertEqual(accel_magnitude(3.0, 4.0, 0.0), 5.0)

    def test_gravity_only(self) -> None:
        self.assertEqual(accel_magnitude(0.0, 0.0, -1.0), 1.0)


class TestPdrStepUpdate(unittest.TestCase):
    """Test pdr_step_update."""

    def test_heading_zero_moves_along_x(self) -> None:
        self.assertEqual(pdr_step_update(ORIGIN, 0.5, 0.0), Point2D(0.5, 0.0))

    def test_heading_ninety_moves_along_y(self) -> None:
        p = pdr_step_update(Point2D(1.0, 1.0), 0.5, 90.0)
        assert_allclose(p.as_array(), [1.0, 1.5], atol=1e-12)

    def test_accepts_array(self) -> None:
        p = pdr_step_update(np.array([2.0, 0.0]), 1.0, 180.0)
        assert_allclose(p.as_array(), [1.0, 0.0], atol=1e-12)

    def test_negative_step_length_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            pdr_step_update(ORIGIN, -0.5, 0.0)


class TestStepDetectorThreshold(unittest.TestCase):
    """A step fires only when the magnitude strictly exceeds the threshold."""

    def test_hundred_quiet_ticks_never_step(self) -> None:
        detector = StepDetector()
        for k in range(100):
            self.assertIsNone(detector.update(1.0, 0.0, t=0.05 * k))

        self.assertEqual(detector.step_count, 0)
        self.assertEqual(detector.velocity, ORIGIN)

    def test_exactly_threshold_does_not_step(self) -> None:
        detector = StepDetector(threshold=1.5)
        self.assertIsNone(detector.update(1.5, 0.0))

    def test_single_step_at_heading_zero(self) -> None:
        detector = StepDetector()
        position = detector.update(2.0, 0.0)

        self.assertEqual(position, Point2D(0.5, 0.0))
        self.assertEqual(detector.velocity, Point2D(0.5, 0.0))
        self.assertEqual(detector.step_count, 1)

    def test_position_is_origin_plus_velocity(self) -> None:
        detector = StepDetector()
        detector.update(2.0, 0.0)
        position = detector.update(2.0, 90.0, origin=Point2D(10.0, -3.0))

        assert_allclose(position.as_array(), [10.5, -2.5], atol=1e-12)
        assert_allclose(detector.velocity.as_array(), [0.5, 0.5], atol=1e-12)


class TestStepTrigger(unittest.TestCase):
    """Level vs edge triggering on a sustained high magnitude."""

    def test_level_fires_every_tick(self) -> None:
        detector = StepDetector(step_trigger="level")
        fired = [detector.update(2.0, 0.0) is not None for _ in range(5)]

        self.assertEqual(fired, [True] * 5)
        self.assertEqual(detector.velocity, Point2D(2.5, 0.0))

    def test_edge_fires_once_per_crossing(self) -> None:
        detector = StepDetector(step_trigger="edge")
        magnitudes = [2.0, 2.0, 2.0, 1.0, 1.0, 2.0, 2.0]
        fired = [detector.update(m, 0.0) is not None for m in magnitudes]

        self.assertEqual(fired, [True, False, False, False, False, True, False])
        self.assertEqual(detector.step_count, 2)

    def test_invalid_trigger_raises(self) -> None:
        with pytest.raises(ValueError, match="step_trigger"):
            StepDetector(step_trigger="peak")


class TestStepDebounce(unittest.TestCase):
    """min_step_interval_s suppresses events that come too soon."""

    def test_debounce_with_level_trigger(self) -> None:
        detector = StepDetector(min_step_interval_s=0.5)
        times = [0.0, 0.25, 0.5, 0.75, 1.0]
        fired = [detector.update(2.0, 0.0, t=t) is not None for t in times]

        self.assertEqual(fired, [True, False, True, False, True])

    def test_debounce_ignored_without_timestamps(self) -> None:
        detector = StepDetector(min_step_interval_s=0.5)
        for _ in range(3):
            detector.update(2.0, 0.0)
        self.assertEqual(detector.step_count, 3)

    def test_negative_interval_raises(self) -> None:
        with pytest.raises(ValueError, match="min_step_interval_s"):
            StepDetector(min_step_interval_s=-1.0)


class TestStepDetectorReset(unittest.TestCase):
    """reset() zeroes the accumulator and trigger history."""

    def test_reset(self) -> None:
        detector = StepDetector(step_trigger="edge")
        detector.update(2.0, 45.0)
        detector.reset()

        self.assertEqual(detector.velocity, ORIGIN)
        self.assertEqual(detector.step_count, 0)
        # Edge history is forgotten, so a high tick fires again
        self.assertIsNotNone(detector.update(2.0, 0.0))


if __name__ == "__main__":
    unittest.main()
