"""Per-tick ordering of samples from independent periodic sensor feeds.

Accelerometer, gyroscope and magnetometer each deliver on their own 50 ms
period, not phase-aligned. A step event consumes the heading, so for a given
tick the heading-affecting samples must be applied before the accelerometer
sample of that same tick, otherwise the step uses the previous tick's
heading.

TickScheduler buffers samples and releases them to a single consumer in the
order:

    (tick index, sensor priority, arrival sequence)

with priority gyroscope < magnetometer < accelerometer. A tick is released
once a sample belonging to a later tick has been seen, or on flush().

With ``ordering="arrival"`` every sample is released immediately in arrival
order, which reproduces the historical behaviour of independent callbacks.
"""

import heapq
import itertools
import math
from dataclasses import dataclass, field
from typing import List

from roomnav.sensors.types import SensorKind, SensorSample

TICK_ORDERINGS = ("per_tick", "arrival")

SENSOR_PRIORITY = {
    SensorKind.GYROSCOPE: 0,
    SensorKind.MAGNETOMETER: 1,
    SensorKind.ACCELEROMETER: 2,
}

# Absorbs float error in t / interval (0.15 / 0.05 = 2.9999999999999996).
_TICK_EPS = 1e-6


@dataclass(order=True)
class _QueuedSample:
    tick: int
    priority: int
    seq: int
    sample: SensorSample = field(compare=False)


class TickScheduler:
    """Buffers sensor samples and releases them in per-tick order.

    Example:
        >>> sched = TickScheduler(0.05)
        >>> sched.push(SensorSample(SensorKind.ACCELEROMETER, 0, 0, 2, t=0.0))
        []
        >>> sched.push(SensorSample(SensorKind.GYROSCOPE, 0, 0, 90, t=0.01))
        []
        >>> [s.kind.value for s in sched.flush()]
        ['gyroscope', 'accelerometer']
    """

    def __init__(self, sample_interval_s: float = 0.05, ordering: str = "per_tick"):
        if sample_interval_s <= 0:
            raise ValueError(f"sample_interval_s must be positive, got {sample_interval_s}")
        if ordering not in TICK_ORDERINGS:
            raise ValueError(f"ordering must be one of {TICK_ORDERINGS}, got '{ordering}'")
        self.sample_interval_s = sample_interval_s
        self.ordering = ordering
        self._heap: List[_QueuedSample] = []
        self._seq = itertools.count()
        self._newest_tick = None

    def tick_of(self, t: float) -> int:
        """Tick index a timestamp falls into."""
        return int(math.floor(t / self.sample_interval_s + _TICK_EPS))

    @property
    def pending(self) -> int:
        return len(self._heap)

    def push(self, sample: SensorSample) -> List[SensorSample]:
        """Queue a sample; return the samples now ready, in processing order."""
        if self.ordering == "arrival":
            return [sample]

        tick = self.tick_of(sample.t)
        heapq.heappush(
            self._heap,
            _QueuedSample(tick, SENSOR_PRIORITY[sample.kind], next(self._seq), sample),
        )
        if self._newest_tick is None or tick > self._newest_tick:
            self._newest_tick = tick

        ready = []
        while self._heap and self._heap[0].tick < self._newest_tick:
            ready.append(heapq.heappop(self._heap).sample)
        return ready

    def flush(self) -> List[SensorSample]:
        """Release everything still buffered."""
        ready = [heapq.heappop(self._heap).sample for _ in range(len(self._heap))]
        return ready

    def clear(self) -> None:
        """Drop buffered samples without releasing them."""
        self._heap.clear()
        self._newest_tick = None
