"""Heading fusion policies for the gyroscope and magnetometer paths.

The orientation tracker has two independent sources for one quantity:
gyroscope integration (smooth, drifts) and the magnetometer bearing
(absolute, disturbed indoors by steel and electronics). A policy decides how
a new magnetometer bearing is combined with the current heading.

Policies:
    - LastWriterWinsFusion: the bearing overwrites the heading outright.
      This is the historical behaviour and the default.
    - ComplementaryHeadingFusion: the heading is pulled towards the bearing
      by a small weight along the shortest arc:

          psi <- psi + w * diff(bearing, psi)

      so the gyro dominates short-term and the magnetometer corrects drift.
"""

import warnings
from abc import ABC, abstractmethod

from roomnav.utils.angles import heading_diff_deg, normalize_heading_deg


class HeadingFusionPolicy(ABC):
    """Combines a magnetometer bearing with the current heading."""

    name: str = ""

    @abstractmethod
    def combine(self, current_deg: float, bearing_deg: float) -> float:
        """
        Args:
            current_deg: Heading before the magnetometer update, [0, 360).
            bearing_deg: Magnetometer bearing, [0, 360).

        Returns:
            New heading in [0, 360).
        """
        pass


class LastWriterWinsFusion(HeadingFusionPolicy):
    """Magnetometer bearing replaces the heading."""

    name = "last_writer"

    def combine(self, current_deg: float, bearing_deg: float) -> float:
        return normalize_heading_deg(bearing_deg)


class ComplementaryHeadingFusion(HeadingFusionPolicy):
    """Weighted blend of the current heading towards the bearing.

    Args:
        mag_weight: Weight w in [0, 1]. 0 ignores the magnetometer,
                    1 is equivalent to LastWriterWinsFusion.
    """

    name = "complementary"

    def __init__(self, mag_weight: float = 0.02):
        if not 0.0 <= mag_weight <= 1.0:
            raise ValueError(f"mag_weight must be in [0, 1], got {mag_weight}")
        if mag_weight == 1.0:
            warnings.warn(
                "mag_weight=1.0 makes complementary fusion identical to "
                "last-writer-wins overwrite.",
                UserWarning,
            )
        self.mag_weight = float(mag_weight)

    def combine(self, current_deg: float, bearing_deg: float) -> float:
        correction = self.mag_weight * heading_diff_deg(bearing_deg, current_deg)
        return normalize_heading_deg(current_deg + correction)


def create_heading_fusion(name: str, mag_weight: float = 0.02) -> HeadingFusionPolicy:
    """Build a policy from its configuration name."""
    if name == LastWriterWinsFusion.name:
        return LastWriterWinsFusion()
    if name == ComplementaryHeadingFusion.name:
        return ComplementaryHeadingFusion(mag_weight=mag_weight)
    raise ValueError(
        f"Unknown heading fusion policy '{name}'. "
        f"Use '{LastWriterWinsFusion.name}' or '{ComplementaryHeadingFusion.name}'."
    )
