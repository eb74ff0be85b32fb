"""
Position trail anchored to the walk's origin.

PositionEstimator only aggregates: the step detector produces absolute
positions, this class remembers the latest one and appends every one of
them to the path in arrival order. Nothing is reordered or deduplicated.
"""

from typing import List, Tuple

from roomnav.sensors.types import ORIGIN, Point2D


class PositionEstimator:
    """
    Current position plus append-only path.

    Attributes:
        origin: Anchor point of the session.
        current: Latest position (equals origin until the first step).
    """

    def __init__(self, origin: Point2D = ORIGIN):
        self.origin = origin
        self.current = origin
        self._path: List[Point2D] = []

    @property
    def path(self) -> Tuple[Point2D, ...]:
        """Copy of the trail; callers cannot mutate the internal log."""
        return tuple(self._path)

    def __len__(self) -> int:
        return len(self._path)

    def record(self, position: Point2D) -> None:
        """Make ``position`` current and append it to the path."""
        self.current = position
        self._path.append(position)

    def set_origin(self, origin: Point2D) -> None:
        """Re-anchor without touching the path or current position."""
        self.origin = origin

    def reset(self) -> None:
        """Clear the path and move the current position back to the origin."""
        self._path.clear()
        self.current = self.origin
