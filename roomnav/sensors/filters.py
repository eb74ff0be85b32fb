"""
Per-axis smoothing of raw phone sensor samples.

Seven independent ScalarKalmanFilter instances are kept, one per consumed
axis: accelerometer x/y/z, gyroscope z, magnetometer x/y/z. Each instance
owns its own estimate and covariance; nothing is shared between axes.
"""

from typing import Dict, Optional, Tuple

from roomnav.estimators.scalar_kalman import ScalarKalmanFilter

AXIS_NAMES = (
    "accel_x",
    "accel_y",
    "accel_z",
    "gyro_z",
    "mag_x",
    "mag_y",
    "mag_z",
)


class SensorFilterBank:
    """
    The seven per-axis filters used by a navigation session.

    Example:
        >>> bank = SensorFilterBank(process_noise=0.01, measurement_noise=3.0)
        >>> bank.filter_accelerometer(0.0, 0.0, 1.0)
        (0.0, 0.0, 1.0)
    """

    def __init__(
        self,
        process_noise: float = 0.01,
        measurement_noise: float = 3.0,
        initial_covariance: Optional[float] = None,
    ):
        self.filters: Dict[str, ScalarKalmanFilter] = {
            name: ScalarKalmanFilter(
                process_noise=process_noise,
                measurement_noise=measurement_noise,
                initial_covariance=initial_covariance,
            )
            for name in AXIS_NAMES
        }

    @classmethod
    def from_config(cls, config) -> "SensorFilterBank":
        return cls(
            process_noise=config.process_noise,
            measurement_noise=config.measurement_noise,
            initial_covariance=config.initial_covariance,
        )

    def __getitem__(self, axis: str) -> ScalarKalmanFilter:
        return self.filters[axis]

    def filter_accelerometer(self, x: float, y: float, z: float) -> Tuple[float, float, float]:
        return (
            self.filters["accel_x"].filter(x),
            self.filters["accel_y"].filter(y),
            self.filters["accel_z"].filter(z),
        )

    def filter_gyroscope(self, z: float) -> float:
        """Only the vertical-axis rate is used for heading."""
        return self.filters["gyro_z"].filter(z)

    def filter_magnetometer(self, x: float, y: float, z: float) -> Tuple[float, float, float]:
        return (
            self.filters["mag_x"].filter(x),
            self.filters["mag_y"].filter(y),
            self.filters["mag_z"].filter(z),
        )

    def reset(self) -> None:
        for f in self.filters.values():
            f.reset()
