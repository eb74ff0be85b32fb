"""
Heading estimation from the gyroscope and magnetometer.

This module implements the two heading update paths of the estimator:
    - Gyroscope integration: psi_k = psi_{k-1} + omega_z * dt
    - Magnetometer bearing:  psi = atan2(m_y, m_x), mapped into [0, 360)

Both paths write the same heading value held by OrientationTracker. How a
magnetometer bearing is combined with the current heading is decided by a
HeadingFusionPolicy (see roomnav.fusion.heading_fusion); the default policy
overwrites.

Frame Conventions:
    - Heading is in degrees, range [0, 360).
    - 0 deg = +x axis of the map, increasing counter-clockwise towards +y.
    - Gyroscope rate is the filtered vertical-axis rate in deg/s.
    - No tilt compensation: the phone is assumed to be held level.
"""

from typing import Optional

from roomnav.fusion.heading_fusion import HeadingFusionPolicy, LastWriterWinsFusion
from roomnav.utils.angles import bearing_from_components_deg, normalize_heading_deg


def integrate_gyro_heading_deg(
    heading_prev_deg: float,
    omega_z_deg_s: float,
    dt: float,
) -> float:
    """
    Integrate a yaw rate into the heading.

        psi_k = (psi_{k-1} + omega_z * dt) mod 360

    Args:
        heading_prev_deg: Previous heading. Units: degrees.
        omega_z_deg_s: Yaw rate about the vertical axis. Units: deg/s.
                       Positive = counter-clockwise.
        dt: Sample interval. Units: seconds. Must be positive.

    Returns:
        Updated heading in [0, 360). Negative results (turning clockwise
        through 0) wrap to the top of the range.

    Example:
        >>> integrate_gyro_heading_deg(0.0, 360.0, 0.05)
        18.0
        >>> integrate_gyro_heading_deg(0.0, -360.0, 0.05)
        342.0
    """
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")

    return normalize_heading_deg(heading_prev_deg + omega_z_deg_s * dt)


def magnetometer_bearing_deg(mag_x: float, mag_y: float) -> float:
    """
    Bearing of the horizontal magnetic field in degrees.

        psi = atan2(m_y, m_x) * 180 / pi, plus 360 if negative

    Args:
        mag_x: Filtered field component along the phone x axis.
        mag_y: Filtered field component along the phone y axis.

    Returns:
        Bearing in [0, 360). A zero field gives 0.0.

    Notes:
        - Indoor magnetic disturbances can corrupt the bearing badly.
        - Declination is not applied; rooms are located relative to the
          walk's own origin so only consistency matters.
    """
    return bearing_from_components_deg(mag_x, mag_y)


class OrientationTracker:
    """
    Holds the single heading value shared by both update paths.

    Attributes:
        heading_deg: Current heading in [0, 360).
        sample_interval_s: Fixed gyro integration step (50 ms by default).
        fusion: Policy applied to magnetometer bearings.
        gyro_updates / mag_updates: Counters per path.

    Example:
        >>> tracker = OrientationTracker()
        >>> for _ in range(20):
        ...     _ = tracker.apply_gyroscope(360.0)
        >>> tracker.heading_deg
        0.0
    """

    def __init__(
        self,
        sample_interval_s: float = 0.05,
        fusion: Optional[HeadingFusionPolicy] = None,
        initial_heading_deg: float = 0.0,
    ):
        if sample_interval_s <= 0:
            raise ValueError(f"sample_interval_s must be positive, got {sample_interval_s}")
        self.sample_interval_s = sample_interval_s
        self.fusion = fusion if fusion is not None else LastWriterWinsFusion()
        self.heading_deg = normalize_heading_deg(initial_heading_deg)
        self.last_bearing_deg: Optional[float] = None
        self.gyro_updates = 0
        self.mag_updates = 0

    def apply_gyroscope(self, omega_z_deg_s: float) -> float:
        """Integrate one gyroscope tick; returns the new heading."""
        self.heading_deg = integrate_gyro_heading_deg(
            self.heading_deg, omega_z_deg_s, self.sample_interval_s
        )
        self.gyro_updates += 1
        return self.heading_deg

    def apply_magnetometer(self, mag_x: float, mag_y: float) -> float:
        """Fold one magnetometer bearing in via the fusion policy."""
        bearing = magnetometer_bearing_deg(mag_x, mag_y)
        self.last_bearing_deg = bearing
        self.heading_deg = self.fusion.combine(self.heading_deg, bearing)
        self.mag_updates += 1
        return self.heading_deg

    def reset(self, heading_deg: float = 0.0) -> None:
        self.heading_deg = normalize_heading_deg(heading_deg)
        self.last_bearing_deg = None
        self.gyro_updates = 0
        self.mag_updates = 0
