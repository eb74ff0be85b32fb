"""
Visualization of mapping and navigation sessions.

All functions return matplotlib Figure objects for flexible display/saving.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from roomnav.eval.metrics import path_to_array
from roomnav.navigation.types import SessionSnapshot
from roomnav.utils.angles import degrees_to_radians


def plot_session(
    snapshot: SessionSnapshot,
    truth_xy: Optional[np.ndarray] = None,
    room_radius: float = 1.0,
    title: str = "Room Map",
) -> plt.Figure:
    """
    Plot the walked path, marked rooms and current position.

    Args:
        snapshot: Session snapshot to draw.
        truth_xy: Ground-truth trajectory, shape (N, 2) (optional).
        room_radius: Radius of the circle drawn around each room.
        title: Plot title.

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(8, 8))

    if truth_xy is not None and len(truth_xy) > 0:
        ax.plot(truth_xy[:, 0], truth_xy[:, 1], "k-", linewidth=2, label="Ground Truth")

    path_xy = path_to_array(snapshot.path)
    if len(path_xy) > 0:
        ax.plot(path_xy[:, 0], path_xy[:, 1], "b-", linewidth=1.5, alpha=0.7, label="Path")

    ax.plot(snapshot.origin.x, snapshot.origin.y, "go", markersize=10, label="Origin")

    for room in snapshot.rooms:
        is_current = room.name == snapshot.current_room
        color = "red" if is_current else "orange"
        ax.add_patch(
            plt.Circle(
                room.position.as_tuple(), room_radius, color=color, alpha=0.2, zorder=1
            )
        )
        ax.plot(room.position.x, room.position.y, "s", color=color, markersize=8)
        ax.annotate(
            room.name,
            room.position.as_tuple(),
            xytext=(5, 5),
            textcoords="offset points",
        )

    pos = snapshot.position
    ax.plot(pos.x, pos.y, "o", color="blue", markersize=12, label="Current")
    rad = degrees_to_radians(snapshot.heading_deg)
    ax.arrow(pos.x, pos.y, 0.5 * np.cos(rad), 0.5 * np.sin(rad), head_width=0.15, color="blue")

    subtitle = f"mode={snapshot.mode.value}, steps={snapshot.step_count}"
    if snapshot.current_room:
        subtitle += f", in: {snapshot.current_room}"
    ax.set_title(f"{title}\n{subtitle}")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("png",),
    dpi: int = 150,
) -> List[Path]:
    """
    Write ``fig`` as ``out_dir/name.<fmt>`` for each format.

    The directory is created if needed. Returns the written paths in the
    order of ``formats``.
    """
    if not formats:
        raise ValueError("at least one format is required")
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = [out_dir / f"{name}.{fmt}" for fmt in formats]
    for path in paths:
        fig.savefig(path, dpi=dpi, bbox_inches="tight")
    return paths
