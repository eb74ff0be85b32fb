"""
One-dimensional Kalman filter for per-axis sensor smoothing.

This is the scalar specialisation of the linear Kalman filter with a
random-walk state model (F = 1, H = 1):

    Prediction:
        x_{k|k-1} = x_{k-1}
        P_{k|k-1} = P_{k-1} + Q
    Update:
        K_k = P_{k|k-1} / (P_{k|k-1} + R)
        x_k = x_{k|k-1} + K_k (z_k - x_{k|k-1})
        P_k = (1 - K_k) P_{k|k-1}

Seeding convention:
    The first measurement initialises the estimate directly (x_0 = z_0) and
    the filter returns it unchanged. The error covariance is seeded with
    ``initial_covariance`` when given, otherwise with the measurement noise R.
    With a fixed seed state and an identical input sequence the output
    sequence is bit-identical: there is no randomness and no hidden clock.

One instance is used per sensor axis (accelerometer x/y/z, gyroscope z,
magnetometer x/y/z). Instances never share state.
"""

import math
from typing import Iterable, List, Optional

from roomnav.estimators.base import StateEstimator

# Below this the innovation denominator is treated as zero.
_MIN_INNOVATION_VARIANCE = 1e-300


class ScalarKalmanFilter(StateEstimator):
    """
    Scalar Kalman filter (steady-state random-walk form).

    Attributes:
        process_noise: Q, covariance inflation per prediction step.
        measurement_noise: R, variance of each measurement.
        initial_covariance: P seeded on the first measurement (None -> R).
        state: Current estimate (None before the first measurement).
        covariance: Current error covariance (None before the first measurement).
        last_gain: Kalman gain used by the most recent correction.
    """

    def __init__(
        self,
        process_noise: float = 0.01,
        measurement_noise: float = 3.0,
        initial_covariance: Optional[float] = None,
    ):
        """
        Initialize the filter.

        Args:
            process_noise: Process noise Q (>= 0).
            measurement_noise: Measurement noise R (>= 0).
            initial_covariance: Error covariance seeded on the first
                measurement (>= 0). None seeds with ``measurement_noise``.

        Raises:
            ValueError: If any noise parameter is negative or non-finite.
        """
        super().__init__()
        for name, value in (
            ("process_noise", process_noise),
            ("measurement_noise", measurement_noise),
        ):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and non-negative, got {value}")
        if initial_covariance is not None and (
            not math.isfinite(initial_covariance) or initial_covariance < 0
        ):
            raise ValueError(
                f"initial_covariance must be finite and non-negative, got {initial_covariance}"
            )

        self.process_noise = float(process_noise)
        self.measurement_noise = float(measurement_noise)
        self.initial_covariance = (
            None if initial_covariance is None else float(initial_covariance)
        )
        self.last_gain: Optional[float] = None

    def predict(self) -> None:
        """
        Inflate the error covariance by Q.

        Raises:
            RuntimeError: If called before the first measurement.
        """
        if not self.initialized:
            raise RuntimeError("predict() called before the filter was seeded")
        self.covariance = self.covariance + self.process_noise

    def update(self, z: float) -> None:
        """
        Blend the prior estimate with measurement ``z``.

        If the filter has not been seeded yet, ``z`` becomes the estimate.
        When P + R is zero the gain is taken as 0 and the prior is kept.

        Raises:
            ValueError: If ``z`` is not finite.
        """
        z = float(z)
        if not math.isfinite(z):
            raise ValueError(f"measurement must be finite, got {z}")

        if not self.initialized:
            self.state = z
            self.covariance = (
                self.measurement_noise
                if self.initial_covariance is None
                else self.initial_covariance
            )
            self.last_gain = 1.0
            return

        s = self.covariance + self.measurement_noise
        if s < _MIN_INNOVATION_VARIANCE:
            gain = 0.0
        else:
            gain = self.covariance / s

        self.state = self.state + gain * (z - self.state)
        self.covariance = (1.0 - gain) * self.covariance
        self.last_gain = gain

    def filter(self, z: float) -> float:
        """
        Predict then correct with ``z``; return the new estimate.

        This is the per-sample entry point used by the sensor filter bank.
        """
        if self.initialized:
            self.predict()
        self.update(z)
        return self.state

    def filter_sequence(self, measurements: Iterable[float]) -> List[float]:
        """Run :meth:`filter` over a sequence and collect the estimates."""
        return [self.filter(z) for z in measurements]

    def reset(self) -> None:
        self.state = None
        self.covariance = None
        self.last_gain = None

    def __repr__(self) -> str:
        return (
            f"ScalarKalmanFilter(Q={self.process_noise}, R={self.measurement_noise}, "
            f"state={self.state}, P={self.covariance})"
        )
