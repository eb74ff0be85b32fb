"""
Room roster and proximity matching.

The roster is the ordered list of rooms marked during mapping; insertion
order is creation order and rooms are never renamed or moved.

During navigation every new position is compared with every room. A room is
within reach when its Euclidean distance is strictly less than the radius.
Two policies decide what happens when several rooms are within reach:

    first       the first room in roster order that is within reach is the
                candidate; an event fires only if its name differs from the
                current label (default, deterministic, at most one event
                per update)
    sequential  every room within reach whose name differs from the label
                held at the start of the pass fires an event and overwrites
                the label, so the last one in roster order wins (historical)
"""

import logging
from typing import Iterator, List, Optional, Tuple

from roomnav.navigation.types import Room, RoomEnteredEvent, ValidationError
from roomnav.sensors.types import Point2D

log = logging.getLogger(__name__)


class RoomRoster:
    """Ordered, append-only collection of rooms."""

    def __init__(self, allow_duplicate_names: bool = False):
        self.allow_duplicate_names = allow_duplicate_names
        self._rooms: List[Room] = []

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms)

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, name: str) -> bool:
        return any(room.name == name for room in self._rooms)

    @property
    def rooms(self) -> Tuple[Room, ...]:
        return tuple(self._rooms)

    @property
    def names(self) -> List[str]:
        return [room.name for room in self._rooms]

    def add(self, name: str, position: Point2D) -> Room:
        """
        Append a room.

        Surrounding whitespace is stripped from the name before it is
        checked and stored.

        Raises:
            ValidationError: Empty or whitespace-only name, or a duplicate
                name while duplicates are not allowed.
        """
        if not isinstance(name, str) or name.strip() == "":
            raise ValidationError("Room name cannot be empty.")
        name = name.strip()
        if not self.allow_duplicate_names and name in self:
            raise ValidationError(f'A room named "{name}" already exists.')

        room = Room(name=name, position=position)
        self._rooms.append(room)
        return room

    def clear(self) -> None:
        self._rooms.clear()


class RoomProximityMatcher:
    """
    Tracks the current-room label.

    Attributes:
        radius: Match distance (strict less-than).
        policy: 'first' or 'sequential'.
        current_room: Label of the room the user is deemed inside ('' if none).
    """

    def __init__(self, radius: float = 1.0, policy: str = "first"):
        if radius <= 0:
            raise ValueError(f"radius must be positive, got {radius}")
        if policy not in ("first", "sequential"):
            raise ValueError(f"policy must be 'first' or 'sequential', got '{policy}'")
        self.radius = radius
        self.policy = policy
        self.current_room = ""

    def rooms_in_reach(self, position: Point2D, roster: RoomRoster) -> List[Room]:
        """Rooms strictly closer than the radius, in roster order."""
        return [room for room in roster if position.distance_to(room.position) < self.radius]

    def update(
        self,
        position: Point2D,
        roster: RoomRoster,
        t: Optional[float] = None,
    ) -> List[RoomEnteredEvent]:
        """
        Compare ``position`` with the roster and update the label.

        Returns:
            Entered-room events in the order they occurred (empty when the
            label did not change). Not matching any room is not an error;
            the label simply persists.
        """
        in_reach = self.rooms_in_reach(position, roster)
        if not in_reach:
            return []

        if self.policy == "first":
            candidates = in_reach[:1]
        else:
            candidates = in_reach

        label_at_start = self.current_room
        events = []
        for room in candidates:
            if room.name == label_at_start:
                continue
            events.append(
                RoomEnteredEvent(
                    room=room, position=position, previous_room=self.current_room or None, t=t
                )
            )
            self.current_room = room.name
            log.info("entered room '%s' at (%.2f, %.2f)", room.name, position.x, position.y)
        return events

    def reset(self) -> None:
        self.current_room = ""
