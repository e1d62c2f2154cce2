"""
Trajectory Analytics
====================
Summaries computed from the sampled trajectory logs, the way the
charts consume them:
  - range and peak height of one logged flight
  - launch angle estimated from the first two samples
  - best range per (rounded) launch angle, and the best angle overall
"""

from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from .sampler import TrajectoryPoint


def to_arrays(points: Sequence[TrajectoryPoint]) -> Dict[str, np.ndarray]:
    """Columns 'time', 'x', 'y', 'z' of a trajectory log."""
    if not points:
        empty = np.array([], dtype=float)
        return {'time': empty, 'x': empty, 'y': empty, 'z': empty}
    data = np.array([(p.time, p.x, p.y, p.z) for p in points], dtype=float)
    return {'time': data[:, 0], 'x': data[:, 1], 'y': data[:, 2], 'z': data[:, 3]}


def max_range(points: Sequence[TrajectoryPoint]) -> float:
    """Largest horizontal distance from the first logged point (m)."""
    if not points:
        return 0.0
    cols = to_arrays(points)
    return float(np.max(np.hypot(cols['x'] - cols['x'][0],
                                 cols['z'] - cols['z'][0])))


def max_height(points: Sequence[TrajectoryPoint]) -> float:
    if not points:
        return 0.0
    return float(max(p.y for p in points))


def launch_angle(points: Sequence[TrajectoryPoint]) -> Optional[float]:
    """
    Elevation (degrees) of the segment between the first two samples.

    None when fewer than two points are logged.
    """
    if len(points) < 2:
        return None
    p0, p1 = points[0], points[1]
    horizontal = np.hypot(p1.x - p0.x, p1.z - p0.z)
    return float(np.degrees(np.arctan2(p1.y - p0.y, horizontal)))


def range_by_angle(trajectories: Mapping[str, Sequence[TrajectoryPoint]]) -> List[Dict[str, float]]:
    """
    Best range for each rounded launch angle, sorted by angle.

    Returns a list of {'angle': deg, 'range': m}.
    """
    best: Dict[int, float] = {}
    for points in trajectories.values():
        angle = launch_angle(points)
        if angle is None:
            continue
        key = int(round(angle))
        reach = max_range(points)
        if key not in best or reach > best[key]:
            best[key] = reach
    return [{'angle': float(a), 'range': r} for a, r in sorted(best.items())]


def optimal_angle(trajectories: Mapping[str, Sequence[TrajectoryPoint]]) -> Optional[float]:
    """Launch angle with the longest logged range, or None."""
    data = range_by_angle(trajectories)
    if not data:
        return None
    return max(data, key=lambda d: d['range'])['angle']
