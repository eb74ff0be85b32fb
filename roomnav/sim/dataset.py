"""Sensor log I/O.

A recorded (or generated) sensor log is stored as one text file per sensor
plus a JSON metadata file:

    data_dir/
    ├── accel.txt          # (N, 4): t, x, y, z
    ├── gyro.txt           # (N, 4): t, x, y, z
    ├── magnetometer.txt   # (N, 4): t, x, y, z
    └── config.json        # dict (session config, room marks, ...)
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from roomnav.sensors.types import SensorKind, SensorSample

SENSOR_FILES = {
    SensorKind.ACCELEROMETER: "accel.txt",
    SensorKind.GYROSCOPE: "gyro.txt",
    SensorKind.MAGNETOMETER: "magnetometer.txt",
}


def save_sensor_log(
    samples: List[SensorSample],
    data_dir: Union[str, Path],
    meta: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Save a sensor log to disk.

    Args:
        samples: Samples of any sensor, in any order.
        data_dir: Destination directory (created if needed).
        meta: JSON-serialisable metadata written to config.json.
    """
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    for kind, filename in SENSOR_FILES.items():
        rows = [[s.t, s.x, s.y, s.z] for s in samples if s.kind is kind]
        arr = np.array(rows, dtype=float).reshape(-1, 4)
        np.savetxt(data_dir / filename, arr, fmt="%.9f", header="t x y z")

    with open(data_dir / "config.json", "w", encoding="utf-8") as f:
        json.dump(meta or {}, f, indent=2)


def load_sensor_log(
    data_dir: Union[str, Path],
) -> Tuple[List[SensorSample], Dict[str, Any]]:
    """
    Load a sensor log saved by :func:`save_sensor_log`.

    Returns:
        (samples sorted by timestamp, metadata dict)

    Raises:
        FileNotFoundError: If a sensor file is missing.
        ValueError: If a file does not have four columns.
    """
    data_dir = Path(data_dir)
    samples: List[SensorSample] = []

    for kind, filename in SENSOR_FILES.items():
        filepath = data_dir / filename
        if not filepath.exists():
            raise FileNotFoundError(f"Required file not found: {filepath}")
        arr = np.loadtxt(filepath, ndmin=2)
        if arr.size == 0:
            continue
        if arr.shape[1] != 4:
            raise ValueError(f"{filepath} must have 4 columns (t x y z), got {arr.shape[1]}")
        samples.extend(
            SensorSample(kind, float(x), float(y), float(z), float(t)) for t, x, y, z in arr
        )

    meta: Dict[str, Any] = {}
    config_path = data_dir / "config.json"
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            meta = json.load(f)

    samples.sort(key=lambda s: s.t)
    return samples, meta
