"""
Synthetic indoor walk generator.

Produces accelerometer, gyroscope and magnetometer streams for a phone
carried level through a sequence of straight legs, with in-place turns
between legs. Each sensor gets its own phase offset inside the tick so the
streams are not phase-aligned, as on a real phone.

Signal model (phone units: g, deg/s, uT):
    - Standing: accel = (0, 0, 1) g
    - Walking:  accel = (surge, 0, 1 + bounce * sin(2 pi f_step t)) with
                surge = sqrt(walk_magnitude^2 - 1), so the smoothed
                magnitude settles near ``walk_magnitude``
    - Turning:  gyro z = heading change / turn duration
    - Magnetometer horizontal field points so that atan2(m_y, m_x) equals
      the true heading

Ground truth advances at ``speed`` along the heading while walking.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from roomnav.sensors.types import SensorKind, SensorSample
from roomnav.utils.angles import degrees_to_radians, heading_diff_deg, normalize_heading_deg


@dataclass(frozen=True)
class WalkLeg:
    """
    One straight segment of a walk.

    Attributes:
        heading_deg: Direction of the leg.
        duration_s: Time spent on the leg.
        walking: False for standing still (e.g. while marking a room).
        mark_room: Room name to mark at the end of the leg, if any.
    """

    heading_deg: float
    duration_s: float
    walking: bool = True
    mark_room: Optional[str] = None


@dataclass
class RoomWalk:
    """Generated streams plus ground truth."""

    t: np.ndarray
    truth_xy: np.ndarray
    truth_heading_deg: np.ndarray
    samples: List[SensorSample] = field(default_factory=list)
    room_marks: List[Tuple[float, str]] = field(default_factory=list)

    def samples_between(self, t_start: float, t_end: float) -> List[SensorSample]:
        """Samples with t_start <= t < t_end."""
        return [s for s in self.samples if t_start <= s.t < t_end]


def generate_room_walk(
    legs: Sequence[WalkLeg],
    dt: float = 0.05,
    walk_magnitude: float = 2.0,
    bounce: float = 0.3,
    step_freq: float = 2.0,
    speed: float = 1.2,
    turn_duration_s: float = 1.0,
    mag_strength: float = 40.0,
    noise_std: float = 0.0,
    phase_offsets: Tuple[float, float, float] = (0.0, 0.01, 0.02),
    seed: Optional[int] = None,
) -> RoomWalk:
    """
    Generate a synthetic walk.

    Args:
        legs: Walk legs in order. The walk starts facing legs[0].heading_deg.
        dt: Sample interval per sensor (s).
        walk_magnitude: Mean acceleration magnitude while walking (g).
        bounce: Vertical oscillation amplitude while walking (g).
        step_freq: Step frequency of the bounce (Hz).
        speed: Ground-truth walking speed (distance units / s).
        turn_duration_s: Time to turn between legs of different heading.
        mag_strength: Horizontal field strength (uT).
        noise_std: Gaussian noise added to every axis (0 = noiseless).
        phase_offsets: (accel, gyro, mag) offsets within a tick (s), each < dt.
        seed: Seed for the noise generator.

    Returns:
        RoomWalk with samples sorted by timestamp.

    Example:
        >>> walk = generate_room_walk([WalkLeg(0.0, 1.0)])
        >>> len(walk.t)
        20
    """
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if not legs:
        raise ValueError("at least one leg is required")
    if walk_magnitude < 1.0:
        raise ValueError(f"walk_magnitude must be >= 1 g, got {walk_magnitude}")
    if any(not 0.0 <= off < dt for off in phase_offsets):
        raise ValueError(f"phase_offsets must lie in [0, dt), got {phase_offsets}")

    rng = np.random.default_rng(seed)
    surge = np.sqrt(walk_magnitude**2 - 1.0)

    # Expand legs into per-tick (heading, walking, turn_rate) segments.
    schedule = []  # (n_ticks, heading_start, turn_rate, walking, mark)
    heading = normalize_heading_deg(legs[0].heading_deg)
    for leg in legs:
        delta = heading_diff_deg(normalize_heading_deg(leg.heading_deg), heading)
        if abs(delta) > 1e-9:
            n_turn = max(1, int(round(turn_duration_s / dt)))
            schedule.append((n_turn, heading, delta / (n_turn * dt), False, None))
            heading = normalize_heading_deg(leg.heading_deg)
        n_leg = int(round(leg.duration_s / dt))
        schedule.append((n_leg, heading, 0.0, leg.walking, leg.mark_room))

    n_total = sum(seg[0] for seg in schedule)
    t = np.arange(n_total) * dt
    truth_xy = np.zeros((n_total, 2))
    truth_heading = np.zeros(n_total)
    samples: List[SensorSample] = []
    room_marks: List[Tuple[float, str]] = []

    def noisy(values):
        if noise_std > 0:
            values = values + rng.normal(0.0, noise_std, size=3)
        return values

    k = 0
    pos = np.zeros(2)
    for n_ticks, heading_start, turn_rate, walking, mark in schedule:
        for i in range(n_ticks):
            psi = normalize_heading_deg(heading_start + turn_rate * dt * (i + 1))
            tk = t[k]
            if walking:
                rad = degrees_to_radians(psi)
                pos = pos + speed * dt * np.array([np.cos(rad), np.sin(rad)])
                accel = np.array(
                    [surge, 0.0, 1.0 + bounce * np.sin(2 * np.pi * step_freq * tk)]
                )
            else:
                accel = np.array([0.0, 0.0, 1.0])
            gyro = np.array([0.0, 0.0, turn_rate])
            rad = degrees_to_radians(psi)
            mag = np.array([mag_strength * np.cos(rad), mag_strength * np.sin(rad), -30.0])

            for kind, values, offset in (
                (SensorKind.ACCELEROMETER, accel, phase_offsets[0]),
                (SensorKind.GYROSCOPE, gyro, phase_offsets[1]),
                (SensorKind.MAGNETOMETER, mag, phase_offsets[2]),
            ):
                x, y, z = noisy(values)
                samples.append(SensorSample(kind, float(x), float(y), float(z), float(tk + offset)))

            truth_xy[k] = pos
            truth_heading[k] = psi
            k += 1
        if mark is not None:
            room_marks.append((k * dt, mark))

    samples.sort(key=lambda s: s.t)
    return RoomWalk(
        t=t,
        truth_xy=truth_xy,
        truth_heading_deg=truth_heading,
        samples=samples,
        room_marks=room_marks,
    )


def shift_samples(samples: Sequence[SensorSample], offset_s: float) -> List[SensorSample]:
    """Copy of ``samples`` with every timestamp moved by ``offset_s``."""
    return [replace(s, t=s.t + offset_s) for s in samples]


def square_loop_legs(
    leg_duration_s: float = 3.0,
    pause_s: float = 2.0,
    room_names: Sequence[str] = ("Kitchen", "Living Room", "Bedroom", "Hall"),
) -> List[WalkLeg]:
    """
    Closed square walk: east, north, west, south, pausing at each corner
    to mark a room.
    """
    legs = []
    for heading, name in zip((0.0, 90.0, 180.0, 270.0), room_names):
        legs.append(WalkLeg(heading, leg_duration_s))
        legs.append(WalkLeg(heading, pause_s, walking=False, mark_room=name))
    return legs
