"""
Mapping and navigation layer.

Modules:
    types: Mode, Room, RoomEnteredEvent, SessionSnapshot, errors
    position: PositionEstimator (current position + append-only path)
    rooms: RoomRoster and RoomProximityMatcher
    session: NavigationSession state machine and EstimatorState
"""

from roomnav.navigation.types import (
    Mode,
    ModeError,
    Room,
    RoomEnteredEvent,
    SessionSnapshot,
    ValidationError,
)
from roomnav.navigation.position import PositionEstimator
from roomnav.navigation.rooms import RoomProximityMatcher, RoomRoster
from roomnav.navigation.session import EstimatorState, NavigationSession

__all__ = [
    # Types
    "Mode",
    "Room",
    "RoomEnteredEvent",
    "SessionSnapshot",
    "ValidationError",
    "ModeError",
    # Components
    "PositionEstimator",
    "RoomRoster",
    "RoomProximityMatcher",
    # Session
    "EstimatorState",
    "NavigationSession",
]
