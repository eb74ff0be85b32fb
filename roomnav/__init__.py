"""Inertial dead reckoning for finding labelled rooms indoors.

This package estimates a walker's 2-D position and heading from smartphone
accelerometer, gyroscope and magnetometer samples, records labelled rooms
during a mapping walk and reports which room the user is in while
navigating:
- estimators: per-axis scalar Kalman smoothing
- sensors: sample types, heading tracking, step detection
- fusion: heading fusion policies and per-tick sample ordering
- navigation: position trail, room roster and matching, session state machine
- sim / eval: synthetic walks, sensor logs, metrics and plots
"""

from roomnav.config import PRESETS, SessionConfig
from roomnav.navigation import (
    Mode,
    ModeError,
    NavigationSession,
    Room,
    RoomEnteredEvent,
    SessionSnapshot,
    ValidationError,
)
from roomnav.sensors import Point2D, SensorKind, SensorSample

__version__ = "0.1.0"

__all__ = [
    "SessionConfig",
    "PRESETS",
    "NavigationSession",
    "Mode",
    "Room",
    "RoomEnteredEvent",
    "SessionSnapshot",
    "ValidationError",
    "ModeError",
    "Point2D",
    "SensorKind",
    "SensorSample",
]
