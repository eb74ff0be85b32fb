"""
Utility functions shared across the estimator.

Currently only heading-angle handling (degrees in [0, 360)).
"""

from .angles import (
    normalize_heading_deg,
    heading_diff_deg,
    bearing_from_components_deg,
    degrees_to_radians,
)

__all__ = [
    'normalize_heading_deg',
    'heading_diff_deg',
    'bearing_from_components_deg',
    'degrees_to_radians',
]
