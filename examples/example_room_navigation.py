"""
Example: Mapping rooms and finding them again by dead reckoning.

Walks a square loop twice. The first lap is the mapping walk: the origin is
set at the start and a room is marked at each corner. The second lap is the
navigation walk: every time the estimated position comes within the room
radius of a marked room, an "entered room" event is printed.

Can run with:
    - Pre-generated dataset: python example_room_navigation.py --data room_walk_baseline
    - Inline data (default): python example_room_navigation.py

Key Insight: the level-triggered step detector fires on every tick the
            smoothed magnitude stays above threshold, so the event count is
            far larger than the number of physical footsteps.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from roomnav import NavigationSession, SessionConfig
from roomnav.eval import count_physical_steps, final_position_error, path_length
from roomnav.sensors import SensorKind, SensorSample, accel_magnitude
from roomnav.sim import generate_room_walk, load_sensor_log, shift_samples, square_loop_legs


def run_mapping_and_navigation(
    samples: List[SensorSample],
    room_marks: List[Tuple[float, str]],
    duration: float,
    config: SessionConfig,
) -> Tuple[NavigationSession, list]:
    """Map on the first lap, navigate on a second copy of the same lap."""
    session = NavigationSession(config)
    session.set_origin()

    t_prev = 0.0
    for t_mark, name in room_marks:
        session.replay([s for s in samples if t_prev <= s.t < t_mark])
        session.mark_room(name)
        print(f"  Marked {name:12s} at ({session.position.x:6.2f}, {session.position.y:6.2f})")
        t_prev = t_mark
    session.replay([s for s in samples if s.t >= t_prev])
    session.finish_mapping()

    entered = []
    session.add_room_listener(entered.append)
    session.replay(shift_samples(samples, duration))
    return session, entered


def print_results(session: NavigationSession, entered: list, samples: List[SensorSample],
                  dt: float, truth_xy: Optional[np.ndarray]) -> None:
    snapshot = session.snapshot()

    mags = np.array([
        accel_magnitude(s.x, s.y, s.z) for s in samples if s.kind is SensorKind.ACCELEROMETER
    ])
    physical = count_physical_steps(mags, dt)

    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"  Step events (two laps):       {snapshot.step_count}")
    print(f"  Physical steps (one lap):     {physical['count']}")
    print(f"  Estimated path length:        {path_length(snapshot.path):.1f}")
    print(f"  Final heading:                {snapshot.heading_deg:.1f} deg")
    print(f"  Loop closure error:           "
          f"{final_position_error(snapshot.position, snapshot.origin):.2f}")
    if truth_xy is not None:
        print(f"  True path length (one lap):   {path_length(truth_xy):.1f}")
    print(f"  Dropped samples:              {snapshot.dropped_samples}")
    print("\nRooms entered while navigating:")
    if not entered:
        print("  (none)")
    for event in entered:
        print(f"  -> {event.name} at ({event.position.x:.2f}, {event.position.y:.2f})")


def plot_results(session: NavigationSession, config: SessionConfig) -> None:
    # matplotlib is only needed for the figure
    from roomnav.eval.plots import plot_session, save_figure

    figs_dir = Path(__file__).parent / 'figs'
    fig = plot_session(session.snapshot(), room_radius=config.room_radius)
    paths = save_figure(fig, figs_dir, 'room_navigation')
    print(f"\nSaved figure: {paths[0]}")


def run_with_inline_data(config: SessionConfig, plot: bool) -> None:
    print("\n" + "=" * 70)
    print("Room Navigation: inline square walk")
    print("=" * 70)

    walk = generate_room_walk(square_loop_legs(), dt=config.sample_interval_s)
    duration = float(walk.t[-1] + config.sample_interval_s)

    session, entered = run_mapping_and_navigation(
        walk.samples, walk.room_marks, duration, config
    )
    print_results(session, entered, walk.samples, config.sample_interval_s, walk.truth_xy)
    if plot:
        plot_results(session, config)


def run_with_dataset(data_dir: str, config: SessionConfig, plot: bool) -> None:
    print("\n" + "=" * 70)
    print(f"Room Navigation: dataset {data_dir}")
    print("=" * 70)

    samples, meta = load_sensor_log(data_dir)
    if 'session_config' in meta:
        config = SessionConfig.from_dict(meta['session_config'])
    room_marks = [(m['t'], m['name']) for m in meta.get('room_marks', [])]
    dt = config.sample_interval_s
    duration = meta.get('num_ticks', 0) * dt or (samples[-1].t + dt)

    truth_path = Path(data_dir) / 'ground_truth_position.txt'
    truth_xy = np.loadtxt(truth_path) if truth_path.exists() else None

    session, entered = run_mapping_and_navigation(samples, room_marks, duration, config)
    print_results(session, entered, samples, dt, truth_xy)
    if plot:
        plot_results(session, config)


def main():
    """Main execution with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Room mapping and navigation by inertial dead reckoning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with inline generated data (default)
  python example_room_navigation.py

  # Run with pre-generated dataset
  python example_room_navigation.py --data room_walk_baseline

  # Historical behaviour
  python example_room_navigation.py --preset legacy
        """
    )
    parser.add_argument(
        "--data", type=str, default=None,
        help="Dataset name or path (e.g., 'room_walk_baseline' or full path)"
    )
    parser.add_argument(
        "--preset", type=str, default="recommended",
        help="Session config preset (default: recommended)"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a session config JSON file (overrides --preset)"
    )
    parser.add_argument("--no-plot", action="store_true", help="Skip the figure")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log session events")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    config = (
        SessionConfig.from_json(args.config) if args.config
        else SessionConfig.preset(args.preset)
    )

    if args.data:
        data_path = Path(args.data)
        if not data_path.exists():
            data_path = Path("data/sim") / args.data
        if not data_path.exists():
            print(f"Error: Dataset not found at '{args.data}' or 'data/sim/{args.data}'")
            print("Generate one with: python scripts/generate_room_walk_dataset.py --preset baseline")
            return
        run_with_dataset(str(data_path), config, plot=not args.no_plot)
    else:
        run_with_inline_data(config, plot=not args.no_plot)


if __name__ == "__main__":
    main()
