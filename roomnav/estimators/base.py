"""
Base classes for state estimators.

This module defines the abstract interface shared by the recursive
estimators in this package.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple


class StateEstimator(ABC):
    """Abstract base class for recursive scalar state estimators."""

    def __init__(self) -> None:
        self.state: Optional[float] = None
        self.covariance: Optional[float] = None

    @abstractmethod
    def predict(self) -> None:
        """Perform prediction step (time update)."""
        pass

    @abstractmethod
    def update(self, z: float) -> None:
        """
        Perform measurement update (correction step).

        Args:
            z: Scalar measurement.
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Return the estimator to its pre-first-measurement state."""
        pass

    @property
    def initialized(self) -> bool:
        return self.state is not None and self.covariance is not None

    def get_state(self) -> Tuple[float, float]:
        """
        Get current state estimate and covariance.

        Returns:
            Tuple of (estimate, error_covariance).
        """
        if not self.initialized:
            raise RuntimeError("Estimator not initialized. Feed a measurement first.")
        return self.state, self.covariance
