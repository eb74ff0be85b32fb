"""
Step-and-heading dead reckoning.

This module implements the motion side of the estimator:
    - Acceleration magnitude: a_mag = sqrt(ax^2 + ay^2 + az^2)
    - Threshold step detection on the filtered magnitude
    - Velocity accumulation: v <- v + L * [cos(psi), sin(psi)]
    - Absolute position: p = origin + v

Step detection is instantaneous: a step event fires on any tick whose
magnitude is strictly greater than the threshold. Two knobs shape how often
it can fire while the magnitude stays high:

    step_trigger = "level"  fires every tick above threshold (historical)
    step_trigger = "edge"   fires only on the tick that crosses into the
                            active region
    min_step_interval_s     minimum time between two events (debounce);
                            0 disables it

Frame Conventions:
    - Heading in degrees, 0 = +x, 90 = +y (see roomnav.sensors.types).
    - The accumulator is called "velocity" for historical reasons; it is
      the displacement from the origin summed over all step events.
"""

import logging
import math
from typing import Optional, Union

import numpy as np

from roomnav.sensors.types import ORIGIN, Point2D

log = logging.getLogger(__name__)

STEP_TRIGGERS = ("level", "edge")


def accel_magnitude(x: float, y: float, z: float) -> float:
    """
    Total acceleration magnitude of one (filtered) accelerometer sample.

    Example:
        >>> accel_magnitude(3.0, 4.0, 0.0)
        5.0
        >>> accel_magnitude(0.0, 0.0, 0.0)
        0.0
    """
    return math.sqrt(x * x + y * y + z * z)


def pdr_step_update(
    p_prev_xy: Union[Point2D, np.ndarray],
    step_len: float,
    heading_deg: float,
) -> Point2D:
    """
    Advance a 2-D point by one step along a heading.

        p_k = p_{k-1} + L * [cos(psi), sin(psi)]

    Args:
        p_prev_xy: Previous point, Point2D or array of shape (2,).
        step_len: Step length (>= 0), in map distance units.
        heading_deg: Heading in degrees.

    Returns:
        Updated point.

    Example:
        >>> pdr_step_update(Point2D(0.0, 0.0), 0.5, 0.0)
        Point2D(x=0.5, y=0.0)
    """
    if isinstance(p_prev_xy, np.ndarray):
        p_prev_xy = Point2D.from_array(p_prev_xy)
    if step_len < 0:
        raise ValueError(f"step_len must be non-negative, got {step_len}")

    rad = math.radians(heading_deg)
    return Point2D(
        p_prev_xy.x + step_len * math.cos(rad),
        p_prev_xy.y + step_len * math.sin(rad),
    )


class StepDetector:
    """
    Threshold step detector owning the velocity accumulator.

    Attributes:
        threshold: Magnitude a tick must strictly exceed to fire.
        step_length: Distance added per event.
        step_trigger: "level" or "edge".
        min_step_interval_s: Debounce interval in seconds (0 disables).
        velocity: Accumulated displacement since the last reset.
        step_count: Events fired since the last reset.
    """

    def __init__(
        self,
        threshold: float = 1.5,
        step_length: float = 0.5,
        step_trigger: str = "level",
        min_step_interval_s: float = 0.0,
    ):
        if step_trigger not in STEP_TRIGGERS:
            raise ValueError(f"step_trigger must be one of {STEP_TRIGGERS}, got '{step_trigger}'")
        if step_length < 0:
            raise ValueError(f"step_length must be non-negative, got {step_length}")
        if min_step_interval_s < 0:
            raise ValueError(
                f"min_step_interval_s must be non-negative, got {min_step_interval_s}"
            )

        self.threshold = threshold
        self.step_length = step_length
        self.step_trigger = step_trigger
        self.min_step_interval_s = min_step_interval_s
        self.reset()

    @classmethod
    def from_config(cls, config) -> "StepDetector":
        return cls(
            threshold=config.step_threshold,
            step_length=config.step_length,
            step_trigger=config.step_trigger,
            min_step_interval_s=config.min_step_interval_s,
        )

    def reset(self) -> None:
        """Zero the accumulator and forget trigger history."""
        self.velocity = ORIGIN
        self.step_count = 0
        self._above = False
        self._last_step_t: Optional[float] = None

    def is_step(self, magnitude: float, t: Optional[float] = None) -> bool:
        """
        Decide whether this tick fires, updating trigger history.

        Args:
            magnitude: Filtered acceleration magnitude.
            t: Tick timestamp in seconds; needed only for the debounce.
        """
        above = magnitude > self.threshold
        crossed = above and not self._above
        self._above = above

        if not above:
            return False
        if self.step_trigger == "edge" and not crossed:
            return False
        if (
            self.min_step_interval_s > 0
            and t is not None
            and self._last_step_t is not None
            and t - self._last_step_t < self.min_step_interval_s
        ):
            return False
        return True

    def update(
        self,
        magnitude: float,
        heading_deg: float,
        origin: Point2D = ORIGIN,
        t: Optional[float] = None,
    ) -> Optional[Point2D]:
        """
        Process one accelerometer tick.

        Args:
            magnitude: Filtered acceleration magnitude.
            heading_deg: Current heading in degrees.
            origin: Anchor of the absolute position.
            t: Tick timestamp in seconds.

        Returns:
            New absolute position (origin + velocity) if a step fired,
            otherwise None.
        """
        if not self.is_step(magnitude, t):
            return None

        self.velocity = pdr_step_update(self.velocity, self.step_length, heading_deg)
        self.step_count += 1
        self._last_step_t = t
        position = origin + self.velocity
        log.debug(
            "step %d at heading %.1f deg -> (%.2f, %.2f)",
            self.step_count, heading_deg, position.x, position.y,
        )
        return position
