"""
Racing line builder

Samples the centerline of an ordered piece list, tags every sample with its
cumulative arc length in meters and smooths the resulting polyline.

The line is the vehicle's path of travel and the overlay drawn by the
renderer. It is rebuilt from scratch whenever the track changes.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Sequence

import numpy as np

from looprace.config import UNITS_PER_METER
from looprace.tracks.geometry import GEOMETRY_EPS, center_point_at, segment_length
from looprace.tracks.segments import Segment


# Weights of the 3-point smoothing kernel (previous, current, next)
SMOOTHING_WEIGHTS = (0.25, 0.5, 0.25)
SMOOTHING_PASSES = 2


@dataclass(frozen=True)
class RacingLinePoint:
    """Waypoint on the racing line."""
    x: float  # layout units
    y: float  # layout units
    heading: float  # radians, tangent direction
    s: float  # meters from the first point


def _detailed_steps(length: float) -> int:
    # ~2 samples per unit length, never fewer than 20
    return max(20, math.ceil(length * 2))


def _coarse_steps(length: float) -> int:
    return max(5, math.ceil(length / 2))


def _sample_segments(
    segments: Sequence[Segment],
    steps_for: Callable[[float], int],
    units_per_meter: float,
) -> List[RacingLinePoint]:
    """Sample every piece end to end, accumulating arc length."""
    points: List[RacingLinePoint] = []
    total_s = 0.0
    prev = None
    upm = max(units_per_meter, GEOMETRY_EPS)

    for segment in segments:
        length = segment_length(segment)
        steps = steps_for(length)

        for i in range(steps + 1):
            pose = center_point_at(segment, (i / steps) * length)

            if prev is not None:
                dx = (pose.x - prev.x) / upm
                dy = (pose.y - prev.y) / upm
                total_s += math.hypot(dx, dy)

            points.append(RacingLinePoint(pose.x, pose.y, pose.heading, total_s))
            prev = pose

    return points


def smooth_racing_line(
    points: List[RacingLinePoint],
    passes: int = SMOOTHING_PASSES,
) -> List[RacingLinePoint]:
    """
    Weighted 3-point average over interior positions.

    Headings and arc-length tags are kept as sampled; the first and last
    points never move.
    """
    if len(points) < 3:
        return list(points)

    xy = np.array([[p.x, p.y] for p in points], dtype=float)
    w_prev, w_curr, w_next = SMOOTHING_WEIGHTS

    for _ in range(passes):
        xy[1:-1] = w_prev * xy[:-2] + w_curr * xy[1:-1] + w_next * xy[2:]

    return [
        RacingLinePoint(float(x), float(y), p.heading, p.s)
        for (x, y), p in zip(xy, points)
    ]


def build_racing_line(
    segments: Sequence[Segment],
    units_per_meter: float = UNITS_PER_METER,
) -> List[RacingLinePoint]:
    """
    Build the smoothed, arc-length-tagged racing line of a track.

    Args:
        segments: Ordered track pieces
        units_per_meter: Layout units per physical meter

    Returns:
        Ordered racing-line points (empty for an empty track)
    """
    if not segments:
        return []
    raw = _sample_segments(segments, _detailed_steps, units_per_meter)
    return smooth_racing_line(raw)


def sample_centerline(
    segments: Sequence[Segment],
    units_per_meter: float = UNITS_PER_METER,
) -> List[RacingLinePoint]:
    """
    Coarse, unsmoothed centerline samples.

    Lower-fidelity substitute for build_racing_line() when that fails.
    """
    if not segments:
        return []
    return _sample_segments(segments, _coarse_steps, units_per_meter)


def total_s(points: Sequence[RacingLinePoint]) -> float:
    """Arc length of the last point (0 for an empty line)."""
    return points[-1].s if points else 0.0


def track_length(
    points: Sequence[RacingLinePoint],
    units_per_meter: float = UNITS_PER_METER,
) -> float:
    """Sum of distances between consecutive points, in meters."""
    if len(points) < 2:
        return 0.0
    xy = as_array(points)[:, :2]
    length = float(np.sum(np.linalg.norm(np.diff(xy, axis=0), axis=1)))
    return length / max(units_per_meter, GEOMETRY_EPS)


def as_array(points: Sequence[RacingLinePoint]) -> np.ndarray:
    """Nx4 array of (x, y, heading, s)."""
    if not points:
        return np.zeros((0, 4))
    return np.array([[p.x, p.y, p.heading, p.s] for p in points], dtype=float)
