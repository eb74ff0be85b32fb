"""
Evaluation and visualization utilities.

Metrics:
    - path_length, final_position_error
    - count_physical_steps (offline peak detector)

Plots (imported lazily by callers, needs matplotlib):
    - plot_session, save_figure in roomnav.eval.plots
"""

from roomnav.eval.metrics import (
    count_physical_steps,
    final_position_error,
    path_length,
    path_to_array,
)

__all__ = [
    "path_to_array",
    "path_length",
    "final_position_error",
    "count_physical_steps",
]
