"""
Heading angle utilities.

Headings in this package are compass-style values in DEGREES, normalised to
the half-open range [0, 360). Step projection still needs radians, so the
conversion helpers live here as well.

Critical for:
- Gyroscope heading integration (turning through 0/360)
- Magnetometer bearings (atan2 returns (-180, 180])
- Blending two heading estimates without a 359 -> 1 degree jump
"""

import math
from typing import Union

import numpy as np


def normalize_heading_deg(heading_deg: float) -> float:
    """
    Normalise a heading into [0, 360).

    Python's modulo already returns a non-negative result for a positive
    divisor, so negative headings (counter-rotation through north) land in
    range. The one remaining trap is a tiny negative value such as -1e-15,
    for which ``x % 360.0`` rounds to exactly 360.0; that case is folded
    back to 0.0.

    Args:
        heading_deg: Heading in degrees (any finite value).

    Returns:
        Equivalent heading in [0, 360).

    Example:
        >>> normalize_heading_deg(370.0)
        10.0
        >>> normalize_heading_deg(-90.0)
        270.0
        >>> normalize_heading_deg(-1e-15)
        0.0
    """
    wrapped = heading_deg % 360.0
    if wrapped >= 360.0:
        return 0.0
    return wrapped


def heading_diff_deg(target_deg: float, source_deg: float) -> float:
    """
    Shortest signed difference ``target - source`` in degrees, in [-180, 180).

    Used when blending a magnetometer bearing into a gyro-integrated heading:
    target = 1 deg, source = 359 deg gives +2 deg, not -358 deg.

    Example:
        >>> heading_diff_deg(1.0, 359.0)
        2.0
        >>> heading_diff_deg(359.0, 1.0)
        -2.0
    """
    return (target_deg - source_deg + 180.0) % 360.0 - 180.0


def bearing_from_components_deg(x: float, y: float) -> float:
    """
    Bearing of the vector (x, y) in degrees, in [0, 360).

    atan2(y, x) converted to degrees with 360 added to negative results.
    atan2(0, 0) is defined as 0, so a zero field still yields a finite
    bearing.
    """
    bearing = math.degrees(math.atan2(y, x))
    if bearing < 0.0:
        bearing += 360.0
    return normalize_heading_deg(bearing)


def degrees_to_radians(degrees: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Convert degrees to radians."""
    return np.deg2rad(degrees)
