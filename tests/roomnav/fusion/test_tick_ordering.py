"""
Unit tests for roomnav.fusion.ordering.TickScheduler.

Within one tick the heading samples (gyroscope, then magnetometer) must be
released before the accelerometer sample, regardless of arrival order.
"""

import unittest

import pytest

from roomnav.fusion import SENSOR_PRIORITY, TickScheduler
from roomnav.sensors import SensorKind, SensorSample

ACC = SensorKind.ACCELEROMETER
GYR = SensorKind.GYROSCOPE
MAG = SensorKind.MAGNETOMETER


def sample(kind, t, z=0.0):
    return SensorSample(kind, 0.0, 0.0, z, t=t)


class TestTickOf(unittest.TestCase):
    """Test tick index computation."""

    def test_float_error_absorbed(self) -> None:
        sched = TickScheduler(0.05)
        self.assertEqual(sched.tick_of(0.15), 3)
        self.assertEqual(sched.tick_of(0.0), 0)
        self.assertEqual(sched.tick_of(0.049), 0)
        self.assertEqual(sched.tick_of(0.05), 1)


class TestPerTickOrdering(unittest.TestCase):
    """Test the default per-tick ordering."""

    def test_priority_table(self) -> None:
        self.assertLess(SENSOR_PRIORITY[GYR], SENSOR_PRIORITY[MAG])
        self.assertLess(SENSOR_PRIORITY[MAG], SENSOR_PRIORITY[ACC])

    def test_heading_samples_released_before_accel(self) -> None:
        sched = TickScheduler(0.05)
        self.assertEqual(sched.push(sample(ACC, 0.00)), [])
        self.assertEqual(sched.push(sample(MAG, 0.02)), [])
        self.assertEqual(sched.push(sample(GYR, 0.01)), [])

        released = sched.flush()
        self.assertEqual([s.kind for s in released], [GYR, MAG, ACC])
        self.assertEqual(sched.pending, 0)

    def test_tick_released_when_later_tick_seen(self) -> None:
        sched = TickScheduler(0.05)
        sched.push(sample(ACC, 0.00))
        sched.push(sample(GYR, 0.01))

        released = sched.push(sample(ACC, 0.05))
        self.assertEqual([s.kind for s in released], [GYR, ACC])
        self.assertEqual([s.t for s in released], [0.01, 0.00])
        self.assertEqual(sched.pending, 1)

    def test_same_kind_keeps_arrival_order(self) -> None:
        sched = TickScheduler(0.05)
        sched.push(sample(ACC, 0.0, z=1.0))
        sched.push(sample(ACC, 0.0, z=2.0))

        self.assertEqual([s.z for s in sched.flush()], [1.0, 2.0])

    def test_clear_drops_pending(self) -> None:
        sched = TickScheduler(0.05)
        sched.push(sample(ACC, 0.0))
        sched.clear()

        self.assertEqual(sched.pending, 0)
        self.assertEqual(sched.flush(), [])
        # A tick earlier than the one seen before clear() is not held back
        sched.push(sample(ACC, 0.10))
        self.assertEqual(len(sched.push(sample(ACC, 0.15))), 1)


class TestArrivalOrdering(unittest.TestCase):
    """Arrival ordering releases every sample immediately."""

    def test_passthrough(self) -> None:
        sched = TickScheduler(0.05, ordering="arrival")
        acc = sample(ACC, 0.0)
        gyr = sample(GYR, 0.01)

        self.assertEqual(sched.push(acc), [acc])
        self.assertEqual(sched.push(gyr), [gyr])
        self.assertEqual(sched.pending, 0)


class TestValidation(unittest.TestCase):

    def test_bad_interval(self) -> None:
        with pytest.raises(ValueError, match="sample_interval_s"):
            TickScheduler(0.0)

    def test_bad_ordering(self) -> None:
        with pytest.raises(ValueError, match="ordering"):
            TickScheduler(0.05, ordering="random")


if __name__ == "__main__":
    unittest.main()
