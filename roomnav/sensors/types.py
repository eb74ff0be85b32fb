"""
Data structures for smartphone inertial samples and planar positions.

This module defines the shared data types used across the estimator:
    - SensorKind: which phone sensor delivered a sample
    - SensorSample: one tri-axial reading with its timestamp
    - Point2D: an immutable planar point (positions, origin, room locations)

Time Base Convention:
    All timestamps are float seconds (monotonic). Samples from different
    sensors are not assumed to be phase-aligned.

Frame Conventions:
    - Positions are 2-D map coordinates relative to the walk's origin.
    - Heading 0 deg points along +x, 90 deg along +y, so a step of length L
      at heading psi moves by L * [cos(psi), sin(psi)].
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np


class SensorKind(str, Enum):
    """Phone sensors consumed by the estimator."""

    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"
    MAGNETOMETER = "magnetometer"


@dataclass(frozen=True)
class SensorSample:
    """
    One tri-axial sensor reading.

    Samples are ephemeral: they are filtered on arrival and not retained.

    Attributes:
        kind: Sensor that produced the reading.
        x, y, z: Axis values. Units depend on the sensor:
                 accelerometer in g-units, gyroscope in deg/s,
                 magnetometer in uT (only the direction matters).
        t: Timestamp in seconds.

    Example:
        >>> s = SensorSample(SensorKind.GYROSCOPE, 0.0, 0.0, 90.0, t=0.05)
        >>> s.is_finite()
        True
    """

    kind: SensorKind
    x: float
    y: float
    z: float
    t: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SensorKind):
            # Accept the plain string value ("gyroscope") as well.
            object.__setattr__(self, "kind", SensorKind(self.kind))

    def is_finite(self) -> bool:
        """True when every axis value and the timestamp are finite."""
        return all(math.isfinite(v) for v in (self.x, self.y, self.z, self.t))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(frozen=True)
class Point2D:
    """
    Immutable 2-D point.

    Example:
        >>> Point2D(2.0, 2.0).distance_to(Point2D(2.3, 2.1))  # doctest: +ELLIPSIS
        0.316...
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Point2D") -> float:
        """Euclidean distance to ``other``."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "Point2D":
        arr = np.asarray(arr, dtype=float)
        if arr.shape != (2,):
            raise ValueError(f"point array must have shape (2,), got {arr.shape}")
        return cls(float(arr[0]), float(arr[1]))


ORIGIN = Point2D(0.0, 0.0)
