"""
Sensor feed lifecycle.

A SensorSource delivers samples of one SensorKind to a callback at a
requested interval until the returned Subscription is removed. Removal is
independent per feed and idempotent, so tearing down three feeds never
fails half-way.

ManualSensorSource is an in-process source driven by ``emit``; it backs
replay of recorded logs and the tests.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from roomnav.sensors.types import SensorKind, SensorSample

SampleCallback = Callable[[float, float, float, Optional[float]], None]


class Subscription:
    """Handle returned by :meth:`SensorSource.subscribe`."""

    def __init__(self, on_remove: Callable[["Subscription"], None], kind: SensorKind):
        self.kind = kind
        self._on_remove = on_remove
        self.active = True

    def remove(self) -> None:
        """Stop delivery. Calling it again does nothing."""
        if not self.active:
            return
        self.active = False
        self._on_remove(self)


class SensorSource(ABC):
    """Provider of periodic sensor samples."""

    @abstractmethod
    def subscribe(
        self,
        kind: SensorKind,
        callback: SampleCallback,
        interval_s: float,
    ) -> Subscription:
        """
        Start delivering ``kind`` samples as ``callback(x, y, z, t)``.

        Args:
            kind: Sensor to subscribe to.
            callback: Receiver of each sample.
            interval_s: Requested update interval in seconds.
        """
        pass


class ManualSensorSource(SensorSource):
    """
    Source that delivers whatever is passed to :meth:`emit`.

    Example:
        >>> source = ManualSensorSource()
        >>> got = []
        >>> sub = source.subscribe(SensorKind.GYROSCOPE, lambda *a: got.append(a), 0.05)
        >>> source.emit(SensorSample(SensorKind.GYROSCOPE, 0.0, 0.0, 90.0, t=0.0))
        True
        >>> sub.remove(); sub.remove()
        >>> source.emit(SensorSample(SensorKind.GYROSCOPE, 0.0, 0.0, 90.0, t=0.05))
        False
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[SensorKind, List[tuple]] = {kind: [] for kind in SensorKind}
        self.intervals: Dict[SensorKind, float] = {}

    def subscribe(
        self,
        kind: SensorKind,
        callback: SampleCallback,
        interval_s: float,
    ) -> Subscription:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        kind = SensorKind(kind)
        sub = Subscription(self._remove, kind)
        self._subscriptions[kind].append((sub, callback))
        self.intervals[kind] = interval_s
        return sub

    def _remove(self, sub: Subscription) -> None:
        self._subscriptions[sub.kind] = [
            entry for entry in self._subscriptions[sub.kind] if entry[0] is not sub
        ]

    def subscriber_count(self, kind: SensorKind) -> int:
        return len(self._subscriptions[SensorKind(kind)])

    def emit(self, sample: SensorSample) -> bool:
        """Deliver one sample; return whether anyone was subscribed."""
        entries = list(self._subscriptions[sample.kind])
        for _, callback in entries:
            callback(sample.x, sample.y, sample.z, sample.t)
        return bool(entries)
