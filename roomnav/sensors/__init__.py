"""
Phone sensor models and dead-reckoning primitives.

Modules:
    types: SensorKind, SensorSample, Point2D
    filters: Seven-axis bank of scalar Kalman smoothers
    heading: Gyroscope integration, magnetometer bearing, OrientationTracker
    pdr: Acceleration magnitude, step update, StepDetector

Design principles:
    - Samples and points are frozen dataclasses
    - Trackers and detectors are mutable and reset explicitly
    - Headings are degrees in [0, 360)
"""

from roomnav.sensors.types import ORIGIN, Point2D, SensorKind, SensorSample
from roomnav.sensors.filters import AXIS_NAMES, SensorFilterBank
from roomnav.sensors.heading import (
    OrientationTracker,
    integrate_gyro_heading_deg,
    magnetometer_bearing_deg,
)
from roomnav.sensors.source import ManualSensorSource, SensorSource, Subscription
from roomnav.sensors.pdr import (
    STEP_TRIGGERS,
    StepDetector,
    accel_magnitude,
    pdr_step_update,
)

__all__ = [
    # Data types
    "SensorKind",
    "SensorSample",
    "Point2D",
    "ORIGIN",
    # Filtering
    "SensorFilterBank",
    "AXIS_NAMES",
    # Heading
    "OrientationTracker",
    "integrate_gyro_heading_deg",
    "magnetometer_bearing_deg",
    # Feed lifecycle
    "SensorSource",
    "ManualSensorSource",
    "Subscription",
    # Step-and-heading
    "StepDetector",
    "STEP_TRIGGERS",
    "accel_magnitude",
    "pdr_step_update",
]
