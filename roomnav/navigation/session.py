"""
Mapping and navigation session.

NavigationSession is the single owner of all estimator state. It accepts
raw sensor samples and user commands, gates which subsystems are active in
each mode, and resets them on transitions.

Data flow per sample:

    raw sample -> TickScheduler -> SensorFilterBank
        gyroscope    -> OrientationTracker (integration)
        magnetometer -> OrientationTracker (bearing via fusion policy)
        accelerometer -> magnitude -> StepDetector -> PositionEstimator
                      -> RoomProximityMatcher (navigation only)

Modes and transitions:

    ORIGIN --set_origin()--> MAPPING --finish_mapping()--> NAVIGATION
                               ^                               |
                               +---start_or_restart_mapping()--+

In ORIGIN mode samples are filtered and the heading is tracked, but no step
moves the position: nothing other than (0, 0) is meaningful before the
origin is set. start_or_restart_mapping() from MAPPING is a fresh start
with the same full reset as a restart from NAVIGATION.

set_origin(), mark_room() and finish_mapping() first process the samples
still buffered by the tick scheduler, so a sample is handled in the mode it
arrived in. start_or_restart_mapping() discards them with the rest of the
old walk.

Thread safety:
    Every inbound call takes one re-entrant lock, so sensor callbacks
    delivered on different OS threads are serialised. Listeners run
    synchronously on the calling thread while the lock is held.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from roomnav.config import SessionConfig
from roomnav.fusion.heading_fusion import create_heading_fusion
from roomnav.fusion.ordering import TickScheduler
from roomnav.navigation.position import PositionEstimator
from roomnav.navigation.rooms import RoomProximityMatcher, RoomRoster
from roomnav.navigation.types import (
    Mode,
    ModeError,
    Room,
    RoomEnteredEvent,
    SessionSnapshot,
    ValidationError,
)
from roomnav.sensors.filters import SensorFilterBank
from roomnav.sensors.heading import OrientationTracker
from roomnav.sensors.pdr import StepDetector, accel_magnitude
from roomnav.sensors.source import SensorSource, Subscription
from roomnav.sensors.types import Point2D, SensorKind, SensorSample

log = logging.getLogger(__name__)

RoomListener = Callable[[RoomEnteredEvent], None]
PositionListener = Callable[[Point2D], None]


@dataclass
class EstimatorState:
    """All mutable estimator state of one session."""

    filters: SensorFilterBank
    orientation: OrientationTracker
    steps: StepDetector
    positions: PositionEstimator
    roster: RoomRoster
    matcher: RoomProximityMatcher
    mode: Mode = Mode.ORIGIN
    origin_set: bool = False
    dropped_samples: int = 0

    @classmethod
    def from_config(cls, config: SessionConfig) -> "EstimatorState":
        return cls(
            filters=SensorFilterBank.from_config(config),
            orientation=OrientationTracker(
                sample_interval_s=config.sample_interval_s,
                fusion=create_heading_fusion(config.heading_fusion, config.mag_weight),
            ),
            steps=StepDetector.from_config(config),
            positions=PositionEstimator(),
            roster=RoomRoster(allow_duplicate_names=config.allow_duplicate_room_names),
            matcher=RoomProximityMatcher(
                radius=config.room_radius, policy=config.room_match_policy
            ),
        )

    def reset_for_mapping(self) -> None:
        """Full reset used by (re)starting mapping; the origin is kept."""
        self.roster.clear()
        self.positions.reset()
        self.steps.reset()
        self.orientation.reset()
        self.matcher.reset()
        self.filters.reset()


class NavigationSession:
    """
    Dead-reckoning room finder.

    Example:
        >>> session = NavigationSession()
        >>> session.set_origin()
        >>> session.process_tick(accel=(2.0, 0.0, 0.0))
        >>> session.position
        Point2D(x=0.5, y=0.0)
        >>> session.mark_room("Kitchen").name
        'Kitchen'
        >>> session.finish_mapping()
        >>> session.mode
        <Mode.NAVIGATION: 'navigation'>
    """

    def __init__(self, config: Optional[SessionConfig] = None):
        self.config = config if config is not None else SessionConfig()
        self.state = EstimatorState.from_config(self.config)
        self.scheduler = TickScheduler(
            self.config.sample_interval_s, ordering=self.config.tick_ordering
        )
        self._lock = threading.RLock()
        self._room_listeners: List[RoomListener] = []
        self._position_listeners: List[PositionListener] = []
        self._clock: Dict[SensorKind, Optional[float]] = {kind: None for kind in SensorKind}
        self._source: Optional[SensorSource] = None
        self._subscriptions: List[Subscription] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def origin(self) -> Point2D:
        return self.state.positions.origin

    @property
    def origin_set(self) -> bool:
        return self.state.origin_set

    @property
    def position(self) -> Point2D:
        return self.state.positions.current

    @property
    def heading_deg(self) -> float:
        return self.state.orientation.heading_deg

    @property
    def velocity(self) -> Point2D:
        return self.state.steps.velocity

    @property
    def current_room(self) -> str:
        return self.state.matcher.current_room

    @property
    def rooms(self) -> Tuple[Room, ...]:
        return self.state.roster.rooms

    @property
    def path(self) -> Tuple[Point2D, ...]:
        return self.state.positions.path

    def snapshot(self) -> SessionSnapshot:
        """Consistent copy of everything the presentation layer shows."""
        with self._lock:
            return SessionSnapshot(
                mode=self.state.mode,
                origin=self.origin,
                origin_set=self.state.origin_set,
                position=self.position,
                heading_deg=self.heading_deg,
                current_room=self.current_room,
                rooms=self.rooms,
                path=self.path,
                step_count=self.state.steps.step_count,
                dropped_samples=self.state.dropped_samples,
            )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_room_listener(self, callback: RoomListener) -> None:
        self._room_listeners.append(callback)

    def remove_room_listener(self, callback: RoomListener) -> None:
        if callback in self._room_listeners:
            self._room_listeners.remove(callback)

    def add_position_listener(self, callback: PositionListener) -> None:
        self._position_listeners.append(callback)

    def remove_position_listener(self, callback: PositionListener) -> None:
        if callback in self._position_listeners:
            self._position_listeners.remove(callback)

    def _notify(self, listeners: list, payload) -> None:
        for callback in list(listeners):
            try:
                callback(payload)
            except Exception:
                # Sensor handlers must stay total; a broken listener is
                # reported but does not abort the update.
                log.exception("listener %r failed", callback)

    # ------------------------------------------------------------------
    # Sensor input
    # ------------------------------------------------------------------

    def on_accelerometer(self, x: float, y: float, z: float, t: Optional[float] = None) -> None:
        self.on_sample(self._make_sample(SensorKind.ACCELEROMETER, x, y, z, t))

    def on_gyroscope(self, x: float, y: float, z: float, t: Optional[float] = None) -> None:
        self.on_sample(self._make_sample(SensorKind.GYROSCOPE, x, y, z, t))

    def on_magnetometer(self, x: float, y: float, z: float, t: Optional[float] = None) -> None:
        self.on_sample(self._make_sample(SensorKind.MAGNETOMETER, x, y, z, t))

    def _make_sample(
        self, kind: SensorKind, x: float, y: float, z: float, t: Optional[float]
    ) -> SensorSample:
        with self._lock:
            if t is None:
                # Samples without a timestamp are spaced one interval apart
                # on a per-sensor clock starting at 0.
                last = self._clock[kind]
                t = 0.0 if last is None else last + self.config.sample_interval_s
            t = float(t)
            # The slot is used even if the sample is dropped later.
            if math.isfinite(t):
                self._clock[kind] = t
            return SensorSample(kind, float(x), float(y), float(z), t)

    def on_sample(self, sample: SensorSample) -> None:
        """
        Accept one raw sample.

        Non-finite samples are dropped and counted. Accepted samples pass
        through the tick scheduler; with per-tick ordering they are processed
        once a later tick is seen or on :meth:`flush`.
        """
        with self._lock:
            if not sample.is_finite():
                self.state.dropped_samples += 1
                log.warning("dropped non-finite %s sample %r", sample.kind.value, sample)
                return
            self._clock[sample.kind] = sample.t
            for ready in self.scheduler.push(sample):
                self._process(ready)

    def flush(self) -> None:
        """Process every sample still buffered by the scheduler."""
        with self._lock:
            for ready in self.scheduler.flush():
                self._process(ready)

    def process_tick(
        self,
        accel: Optional[Tuple[float, float, float]] = None,
        gyro: Optional[Tuple[float, float, float]] = None,
        mag: Optional[Tuple[float, float, float]] = None,
        t: Optional[float] = None,
    ) -> None:
        """
        Feed the samples of one tick and process them immediately.

        Heading samples are applied before the accelerometer sample,
        whatever the configured ordering. A sensor passed as None delivered
        nothing this tick.
        """
        with self._lock:
            if t is None:
                known = [v for v in self._clock.values() if v is not None]
                t = 0.0 if not known else max(known) + self.config.sample_interval_s
            self.flush()
            for kind, values in (
                (SensorKind.GYROSCOPE, gyro),
                (SensorKind.MAGNETOMETER, mag),
                (SensorKind.ACCELEROMETER, accel),
            ):
                if values is not None:
                    self.on_sample(self._make_sample(kind, *values, t=t))
            self.flush()

    def replay(self, samples: Iterable[SensorSample]) -> int:
        """
        Feed a recorded stream in timestamp order and flush.

        Returns:
            Number of step events produced during the replay.
        """
        with self._lock:
            before = self.state.steps.step_count
            for sample in sorted(samples, key=lambda s: s.t):
                self.on_sample(sample)
            self.flush()
            return self.state.steps.step_count - before

    def _process(self, sample: SensorSample) -> None:
        state = self.state

        if sample.kind is SensorKind.GYROSCOPE:
            omega_z = state.filters.filter_gyroscope(sample.z)
            state.orientation.apply_gyroscope(omega_z)
            return

        if sample.kind is SensorKind.MAGNETOMETER:
            mx, my, _ = state.filters.filter_magnetometer(sample.x, sample.y, sample.z)
            state.orientation.apply_magnetometer(mx, my)
            return

        ax, ay, az = state.filters.filter_accelerometer(sample.x, sample.y, sample.z)
        if state.mode is Mode.ORIGIN:
            return

        magnitude = accel_magnitude(ax, ay, az)
        position = state.steps.update(
            magnitude, state.orientation.heading_deg, origin=state.positions.origin, t=sample.t
        )
        if position is None:
            return

        state.positions.record(position)
        self._notify(self._position_listeners, position)

        if state.mode is Mode.NAVIGATION:
            for event in state.matcher.update(position, state.roster, t=sample.t):
                self._notify(self._room_listeners, event)

    # ------------------------------------------------------------------
    # User commands
    # ------------------------------------------------------------------

    def _require_mode(self, command: str, *allowed: Mode) -> None:
        if self.state.mode not in allowed:
            error = ModeError(command, self.state.mode, allowed)
            log.warning("rejected %s: %s", command, error)
            raise error

    def set_origin(self) -> None:
        """
        Anchor the walk at the current position and start mapping.

        Raises:
            ModeError: If the origin has already been set.
        """
        with self._lock:
            self.flush()
            self._require_mode("set_origin", Mode.ORIGIN)
            origin = self.state.positions.current
            self.state.positions.set_origin(origin)
            self.state.origin_set = True
            self.state.mode = Mode.MAPPING
            log.info("origin set at (%.2f, %.2f); mapping started", origin.x, origin.y)
            self._resubscribe()

    def mark_room(self, name: str) -> Room:
        """
        Label the current position as a room.

        Raises:
            ModeError: Outside mapping mode.
            ValidationError: Empty name, or duplicate name when not allowed.
        """
        with self._lock:
            self.flush()
            self._require_mode("mark_room", Mode.MAPPING)
            try:
                room = self.state.roster.add(name, self.state.positions.current)
            except ValidationError as e:
                log.warning("rejected mark_room(%r): %s", name, e)
                raise
            log.info(
                "marked room '%s' at (%.2f, %.2f)", room.name, room.position.x, room.position.y
            )
            return room

    def finish_mapping(self) -> None:
        """
        Switch to navigation.

        Raises:
            ModeError: Outside mapping mode.
            ValidationError: If no room has been marked.
        """
        with self._lock:
            self.flush()
            self._require_mode("finish_mapping", Mode.MAPPING)
            if len(self.state.roster) == 0:
                log.warning("rejected finish_mapping: roster is empty")
                raise ValidationError("Please mark at least one room.")
            self.state.mode = Mode.NAVIGATION
            log.info("navigation started with %d rooms", len(self.state.roster))
            self._resubscribe()

    def start_or_restart_mapping(self) -> None:
        """
        Clear rooms, path, velocity, heading, current room and filter state,
        move the position back to the origin and (re)enter mapping.

        Raises:
            ModeError: If the origin has not been set yet.
        """
        with self._lock:
            self._require_mode("start_or_restart_mapping", Mode.MAPPING, Mode.NAVIGATION)
            self.scheduler.clear()
            self.state.reset_for_mapping()
            self.state.mode = Mode.MAPPING
            log.info("mapping restarted")
            self._resubscribe()

    # ------------------------------------------------------------------
    # Sensor source lifecycle
    # ------------------------------------------------------------------

    def attach_source(self, source: SensorSource) -> None:
        """Subscribe to all three feeds of ``source``."""
        with self._lock:
            self.detach_source()
            self._source = source
            self._subscribe()

    def detach_source(self) -> None:
        """Remove every feed subscription; safe to call repeatedly."""
        with self._lock:
            for sub in self._subscriptions:
                sub.remove()
            self._subscriptions = []
            self._source = None

    def _subscribe(self) -> None:
        interval = self.config.sample_interval_s
        self._subscriptions = [
            self._source.subscribe(SensorKind.ACCELEROMETER, self.on_accelerometer, interval),
            self._source.subscribe(SensorKind.GYROSCOPE, self.on_gyroscope, interval),
            self._source.subscribe(SensorKind.MAGNETOMETER, self.on_magnetometer, interval),
        ]

    def _resubscribe(self) -> None:
        if self._source is None:
            return
        for sub in self._subscriptions:
            sub.remove()
        self._subscribe()

    def close(self) -> None:
        """Flush pending samples and release the sensor source."""
        with self._lock:
            self.flush()
            self.detach_source()

    def __enter__(self) -> "NavigationSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
