"""
Unit tests for roomnav.config.SessionConfig and presets.
"""

import json
import tempfile
import unittest
from pathlib import Path

import pytest

from roomnav import PRESETS, SessionConfig


class TestDefaults(unittest.TestCase):
    """Defaults reproduce the historical tuning."""

    def test_default_values(self) -> None:
        config = SessionConfig()
        self.assertEqual(config.sample_interval_s, 0.05)
        self.assertEqual(config.process_noise, 0.01)
        self.assertEqual(config.measurement_noise, 3.0)
        self.assertIsNone(config.initial_covariance)
        self.assertEqual(config.step_threshold, 1.5)
        self.assertEqual(config.step_length, 0.5)
        self.assertEqual(config.room_radius, 1.0)
        self.assertEqual(config.step_trigger, "level")
        self.assertEqual(config.room_match_policy, "first")
        self.assertEqual(config.heading_fusion, "last_writer")
        self.assertEqual(config.tick_ordering, "per_tick")
        self.assertFalse(config.allow_duplicate_room_names)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            SessionConfig().step_length = 1.0


class TestValidation(unittest.TestCase):
    """Invalid values are rejected on construction."""

    def test_numeric_ranges(self) -> None:
        for kwargs, pattern in (
            ({"sample_interval_s": 0.0}, "sample_interval_s"),
            ({"process_noise": -1.0}, "process_noise"),
            ({"measurement_noise": -1.0}, "measurement_noise"),
            ({"initial_covariance": -0.5}, "initial_covariance"),
            ({"step_length": -0.5}, "step_length"),
            ({"room_radius": 0.0}, "room_radius"),
            ({"mag_weight": 1.5}, "mag_weight"),
        ):
            with pytest.raises(ValueError, match=pattern):
                SessionConfig(**kwargs)

    def test_enumerated_choices(self) -> None:
        for kwargs, pattern in (
            ({"step_trigger": "peak"}, "step_trigger"),
            ({"room_match_policy": "nearest"}, "room_match_policy"),
            ({"heading_fusion": "ekf"}, "heading_fusion"),
            ({"tick_ordering": "random"}, "tick_ordering"),
        ):
            with pytest.raises(ValueError, match=pattern):
                SessionConfig(**kwargs)


class TestPresetsAndSerialization(unittest.TestCase):
    """Presets, dict and JSON loading."""

    def test_all_presets_build(self) -> None:
        for name in PRESETS:
            self.assertIsInstance(SessionConfig.preset(name), SessionConfig)

    def test_legacy_preset(self) -> None:
        config = SessionConfig.preset("legacy")
        self.assertEqual(config.tick_ordering, "arrival")
        self.assertEqual(config.room_match_policy, "sequential")
        self.assertTrue(config.allow_duplicate_room_names)

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError, match="Unknown preset"):
            SessionConfig.preset("fast")

    def test_from_dict_ignores_description(self) -> None:
        config = SessionConfig.from_dict({"description": "demo", "room_radius": 2.0})
        self.assertEqual(config.room_radius, 2.0)

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="Unknown config keys"):
            SessionConfig.from_dict({"room_radius": 2.0, "radius": 1.0})

    def test_json_round_trip(self) -> None:
        config = SessionConfig(room_radius=1.5, heading_fusion="complementary", mag_weight=0.1)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            config.to_json(path)

            with open(path, "r", encoding="utf-8") as f:
                self.assertEqual(json.load(f)["room_radius"], 1.5)
            self.assertEqual(SessionConfig.from_json(path), config)


if __name__ == "__main__":
    unittest.main()
