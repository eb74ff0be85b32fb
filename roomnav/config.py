"""Session configuration.

All tunables of the estimator live in one frozen dataclass, validated on
construction. Configurations can be loaded from a dict or a JSON file (the
same ``config.json`` written next to recorded sensor logs) or built from a
named preset.

Presets:
    recommended: per-tick ordering, first-match room tie-break, unique names
    legacy:      arrival ordering, sequential room matching, duplicate names
                 permitted (reproduces the historical app behaviour)
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from roomnav.fusion.heading_fusion import ComplementaryHeadingFusion, LastWriterWinsFusion
from roomnav.fusion.ordering import TICK_ORDERINGS
from roomnav.sensors.pdr import STEP_TRIGGERS

HEADING_FUSIONS = (LastWriterWinsFusion.name, ComplementaryHeadingFusion.name)
ROOM_MATCH_POLICIES = ("first", "sequential")


# ============================================================================
# PRESET CONFIGURATIONS
# ============================================================================

PRESETS: Dict[str, Dict[str, Any]] = {
    'recommended': {
        'description': 'Per-tick ordering, first-match rooms, unique room names',
    },
    'legacy': {
        'description': 'Historical behaviour: arrival order, sequential room overwrite',
        'tick_ordering': 'arrival',
        'room_match_policy': 'sequential',
        'allow_duplicate_room_names': True,
    },
    'debounced': {
        'description': 'Edge-triggered steps with a 0.3 s refractory period',
        'step_trigger': 'edge',
        'min_step_interval_s': 0.3,
    },
}


@dataclass(frozen=True)
class SessionConfig:
    """
    Tunables of a navigation session.

    Attributes:
        sample_interval_s: Sensor period in seconds; gyro integration step.
        process_noise: Q of every per-axis scalar Kalman filter.
        measurement_noise: R of every per-axis scalar Kalman filter.
        initial_covariance: Covariance seeded on the first sample
                            (None -> measurement_noise).
        step_threshold: Filtered magnitude that must be exceeded to step.
        step_length: Distance units added per step event.
        step_trigger: 'level' or 'edge'.
        min_step_interval_s: Debounce between step events (0 disables).
        room_radius: Distance below which a room is entered.
        room_match_policy: 'first' or 'sequential'.
        heading_fusion: 'last_writer' or 'complementary'.
        mag_weight: Magnetometer weight for complementary fusion.
        tick_ordering: 'per_tick' or 'arrival'.
        allow_duplicate_room_names: Permit two rooms with the same name.
    """

    sample_interval_s: float = 0.05
    process_noise: float = 0.01
    measurement_noise: float = 3.0
    initial_covariance: Optional[float] = None
    step_threshold: float = 1.5
    step_length: float = 0.5
    step_trigger: str = 'level'
    min_step_interval_s: float = 0.0
    room_radius: float = 1.0
    room_match_policy: str = 'first'
    heading_fusion: str = 'last_writer'
    mag_weight: float = 0.02
    tick_ordering: str = 'per_tick'
    allow_duplicate_room_names: bool = False

    def __post_init__(self) -> None:
        """Validate parameter ranges and enumerated choices."""
        if self.sample_interval_s <= 0:
            raise ValueError(f"sample_interval_s must be positive, got {self.sample_interval_s}")
        if self.process_noise < 0:
            raise ValueError(f"process_noise must be non-negative, got {self.process_noise}")
        if self.measurement_noise < 0:
            raise ValueError(
                f"measurement_noise must be non-negative, got {self.measurement_noise}"
            )
        if self.initial_covariance is not None and self.initial_covariance < 0:
            raise ValueError(
                f"initial_covariance must be non-negative, got {self.initial_covariance}"
            )
        if self.step_length < 0:
            raise ValueError(f"step_length must be non-negative, got {self.step_length}")
        if self.min_step_interval_s < 0:
            raise ValueError(
                f"min_step_interval_s must be non-negative, got {self.min_step_interval_s}"
            )
        if self.room_radius <= 0:
            raise ValueError(f"room_radius must be positive, got {self.room_radius}")
        if not 0.0 <= self.mag_weight <= 1.0:
            raise ValueError(f"mag_weight must be in [0, 1], got {self.mag_weight}")

        for name, value, choices in (
            ('step_trigger', self.step_trigger, STEP_TRIGGERS),
            ('room_match_policy', self.room_match_policy, ROOM_MATCH_POLICIES),
            ('heading_fusion', self.heading_fusion, HEADING_FUSIONS),
            ('tick_ordering', self.tick_ordering, TICK_ORDERINGS),
        ):
            if value not in choices:
                raise ValueError(f"{name} must be one of {choices}, got '{value}'")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        """
        Build a config from a plain dict.

        A ``description`` key (as found in presets and saved configs) is
        ignored; any other unknown key is an error.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        params = {k: v for k, v in data.items() if k != 'description'}
        unknown = sorted(set(params) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**params)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "SessionConfig":
        """Load a config from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def preset(cls, name: str) -> "SessionConfig":
        if name not in PRESETS:
            raise ValueError(f"Unknown preset '{name}'. Available: {sorted(PRESETS)}")
        return cls.from_dict(PRESETS[name])

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, path: Union[str, Path]) -> None:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
