"""
Racing-line interpolation

Resolves an arc-length position into a cartesian pose. The bracketing pair
is found by walking a stored index hint forward, which is O(1) amortized
because the vehicle visits ``s`` monotonically within a lap.
"""

from typing import Sequence, Tuple

from looprace.tracks.geometry import wrap_angle
from looprace.tracks.racing_line import RacingLinePoint
from looprace.tracks.segments import Pose


# Floor for the arc-length gap between bracketing points
INTERP_EPS = 1e-9
# First and last points closer than this (layout units) form a closed loop
CLOSURE_EPS = 1e-3


def advance_index(racing_line: Sequence[RacingLinePoint], s: float, hint: int) -> int:
    """
    Index ``i`` such that ``racing_line[i].s <= s <= racing_line[i + 1].s``.

    The hint is only moved forward. A hint that is out of range, or already
    past ``s``, restarts the walk from 0.
    """
    n = len(racing_line)
    last_pair = n - 2
    i = hint
    if i < 0 or i > last_pair or racing_line[i].s > s:
        i = 0
    while i < last_pair and racing_line[i + 1].s < s:
        i += 1
    return i


def catmull_rom(
    p0: Tuple[float, float],
    p1: Tuple[float, float],
    p2: Tuple[float, float],
    p3: Tuple[float, float],
    t: float,
) -> Tuple[float, float]:
    """Uniform Catmull-Rom point between p1 (t=0) and p2 (t=1)."""
    t2 = t * t
    t3 = t2 * t
    out = []
    for a, b, c, d in zip(p0, p1, p2, p3):
        out.append(0.5 * (
            2.0 * b
            + (-a + c) * t
            + (2.0 * a - 5.0 * b + 4.0 * c - d) * t2
            + (-a + 3.0 * b - 3.0 * c + d) * t3
        ))
    return out[0], out[1]


def _spline_neighbours(
    racing_line: Sequence[RacingLinePoint],
    index: int,
) -> Tuple[RacingLinePoint, RacingLinePoint]:
    """
    Outer control points for the pair [index, index + 1].

    On a closed loop the spline continues across the seam, skipping the
    duplicated seam point. On an open line the end points are repeated.
    """
    n = len(racing_line)
    first, last = racing_line[0], racing_line[-1]
    closed = n > 3 and abs(last.x - first.x) + abs(last.y - first.y) <= CLOSURE_EPS

    if index > 0:
        p0 = racing_line[index - 1]
    else:
        p0 = racing_line[n - 2] if closed else racing_line[0]

    if index + 2 < n:
        p3 = racing_line[index + 2]
    else:
        p3 = racing_line[1] if closed else racing_line[n - 1]

    return p0, p3


def blend_heading(h1: float, h2: float, t: float) -> float:
    """Interpolate along the shorter way round, result in (-pi, pi]."""
    return wrap_angle(h1 + wrap_angle(h2 - h1) * t)


def interpolate_pose(
    racing_line: Sequence[RacingLinePoint],
    s: float,
    index: int,
    spline: bool = True,
) -> Pose:
    """
    Pose at arc length ``s`` given the bracketing index.

    Args:
        racing_line: At least two racing-line points
        s: Arc length in meters
        index: Bracketing index from advance_index()
        spline: Catmull-Rom on position instead of linear

    Returns:
        Interpolated pose
    """
    p1 = racing_line[index]
    p2 = racing_line[index + 1]

    t = (s - p1.s) / max(p2.s - p1.s, INTERP_EPS)
    t = min(max(t, 0.0), 1.0)

    if spline:
        p0, p3 = _spline_neighbours(racing_line, index)
        x, y = catmull_rom((p0.x, p0.y), (p1.x, p1.y), (p2.x, p2.y), (p3.x, p3.y), t)
    else:
        x = p1.x + t * (p2.x - p1.x)
        y = p1.y + t * (p2.y - p1.y)

    return Pose(x, y, blend_heading(p1.heading, p2.heading, t))
