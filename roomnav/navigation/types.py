"""
Data types for mapping and navigation sessions.

This module defines:
    - Mode: the three session phases
    - Room: a labelled location in the roster
    - RoomEnteredEvent: notification raised when the user enters a room
    - SessionSnapshot: read-only view handed to the presentation layer
    - ValidationError / ModeError: rejected user commands
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from roomnav.sensors.types import Point2D


class Mode(str, Enum):
    """Session phase. Transitions: ORIGIN -> MAPPING <-> NAVIGATION."""

    ORIGIN = "origin"
    MAPPING = "mapping"
    NAVIGATION = "navigation"


class ValidationError(ValueError):
    """A user command was rejected; session state is unchanged.

    The message is meant to be shown to the user as-is.
    """


class ModeError(ValidationError):
    """A command was issued in a mode that does not accept it."""

    def __init__(self, command: str, mode: Mode, allowed: Tuple[Mode, ...]):
        self.command = command
        self.mode = mode
        self.allowed = allowed
        allowed_str = ", ".join(m.value for m in allowed)
        super().__init__(
            f"'{command}' is not available in {mode.value} mode (allowed in: {allowed_str})."
        )


@dataclass(frozen=True)
class Room:
    """
    Labelled room location.

    Attributes:
        name: Non-empty label, unique within a roster unless duplicates
              are explicitly allowed.
        position: Location where the room was marked.
    """

    name: str
    position: Point2D


@dataclass(frozen=True)
class RoomEnteredEvent:
    """Raised when the current-room label changes to ``room``."""

    room: Room
    position: Point2D
    previous_room: Optional[str] = None
    t: Optional[float] = None

    @property
    def name(self) -> str:
        return self.room.name


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session for rendering and inspection."""

    mode: Mode
    origin: Point2D
    origin_set: bool
    position: Point2D
    heading_deg: float
    current_room: str
    rooms: Tuple[Room, ...]
    path: Tuple[Point2D, ...]
    step_count: int
    dropped_samples: int
