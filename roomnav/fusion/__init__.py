"""Sensor fusion utilities.

This package provides the two pieces that coordinate the heading and motion
paths:
- Heading fusion policies (last-writer-wins overwrite, complementary blend)
- Per-tick ordering of samples from independent sensor feeds
"""

from roomnav.fusion.heading_fusion import (
    ComplementaryHeadingFusion,
    HeadingFusionPolicy,
    LastWriterWinsFusion,
    create_heading_fusion,
)
from roomnav.fusion.ordering import SENSOR_PRIORITY, TICK_ORDERINGS, TickScheduler

__all__ = [
    # Heading fusion
    "HeadingFusionPolicy",
    "LastWriterWinsFusion",
    "ComplementaryHeadingFusion",
    "create_heading_fusion",
    # Ordering
    "TickScheduler",
    "TICK_ORDERINGS",
    "SENSOR_PRIORITY",
]
