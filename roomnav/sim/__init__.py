"""
Simulation and log utilities.

- generate_room_walk: synthetic phone walk with ground truth
- save_sensor_log / load_sensor_log: text-file sensor logs
"""

from roomnav.sim.dataset import load_sensor_log, save_sensor_log
from roomnav.sim.walk import (
    RoomWalk,
    WalkLeg,
    generate_room_walk,
    shift_samples,
    square_loop_legs,
)

__all__ = [
    "WalkLeg",
    "RoomWalk",
    "generate_room_walk",
    "shift_samples",
    "square_loop_legs",
    "save_sensor_log",
    "load_sensor_log",
]
