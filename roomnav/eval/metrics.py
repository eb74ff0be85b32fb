"""
Evaluation metrics for dead-reckoned room walks.

Author: Navigation Engineering Team
"""

from typing import Dict, Optional, Sequence, Union

import numpy as np
from scipy import signal

from roomnav.sensors.types import Point2D


def path_to_array(path: Sequence[Point2D]) -> np.ndarray:
    """Convert a path of points to an (N, 2) array (empty path -> (0, 2))."""
    return np.array([p.as_tuple() for p in path], dtype=float).reshape(-1, 2)


def path_length(path: Union[Sequence[Point2D], np.ndarray]) -> float:
    """
    Total length of a polyline.

    Args:
        path: Points as Point2D sequence or (N, 2) array.

    Returns:
        Sum of segment lengths (0.0 for fewer than two points).
    """
    xy = path if isinstance(path, np.ndarray) else path_to_array(path)
    if len(xy) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(xy, axis=0), axis=1)))


def final_position_error(
    estimated: Union[Point2D, np.ndarray],
    truth: Union[Point2D, np.ndarray],
) -> float:
    """Euclidean distance between an estimated and a true end point."""
    est = estimated.as_array() if isinstance(estimated, Point2D) else np.asarray(estimated)
    tru = truth.as_array() if isinstance(truth, Point2D) else np.asarray(truth)
    if est.shape != (2,) or tru.shape != (2,):
        raise ValueError(f"points must have shape (2,), got {est.shape} and {tru.shape}")
    return float(np.linalg.norm(est - tru))


def count_physical_steps(
    magnitudes: np.ndarray,
    dt: float,
    min_peak_height: float = 0.1,
    min_peak_distance: float = 0.3,
    lowpass_cutoff: Optional[float] = 5.0,
) -> Dict[str, Union[int, np.ndarray]]:
    """
    Count footsteps offline with a peak detector.

    The live detector fires once per tick above threshold, so one physical
    footstep can produce several events. This offline count gives the number
    of physical steps in a recorded magnitude trace for comparison.

    Steps:
        1. Remove the mean (gravity and any sustained surge)
        2. Optionally low-pass filter (4th order Butterworth, zero phase)
        3. Find peaks with minimum height and minimum spacing

    Args:
        magnitudes: Acceleration magnitude time series, shape (N,).
        dt: Sample interval (s).
        min_peak_height: Minimum peak height above the mean.
        min_peak_distance: Minimum time between peaks (s).
        lowpass_cutoff: Cutoff frequency (Hz); None disables filtering.

    Returns:
        Dict with 'count' and 'indices' of detected peaks.
    """
    magnitudes = np.asarray(magnitudes, dtype=float)
    if magnitudes.ndim != 1:
        raise ValueError(f"magnitudes must be 1D, got shape {magnitudes.shape}")
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if min_peak_distance <= 0:
        raise ValueError(f"min_peak_distance must be positive, got {min_peak_distance}")

    if len(magnitudes) == 0:
        return {'count': 0, 'indices': np.array([], dtype=int)}

    dynamic = magnitudes - np.mean(magnitudes)

    if lowpass_cutoff is not None:
        normalized_cutoff = lowpass_cutoff / (0.5 / dt)
        # filtfilt needs more samples than its padding length
        if normalized_cutoff < 1.0 and len(dynamic) > 27:
            b, a = signal.butter(4, normalized_cutoff, btype='low')
            dynamic = signal.filtfilt(b, a, dynamic)

    distance = max(1, int(min_peak_distance / dt))
    indices, _ = signal.find_peaks(dynamic, height=min_peak_height, distance=distance)
    return {'count': int(len(indices)), 'indices': indices}
