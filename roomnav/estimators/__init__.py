"""
State estimation algorithms.

Available estimators:
    - ScalarKalmanFilter: per-axis random-walk Kalman smoother
"""

from roomnav.estimators.base import StateEstimator
from roomnav.estimators.scalar_kalman import ScalarKalmanFilter

__all__ = [
    "StateEstimator",
    "ScalarKalmanFilter",
]
