"""
Track geometry

Closed-form poses along a single piece. Every function here depends only on
the piece's own fields, never on its neighbours, so chaining a track is just
"start the next piece at ``end_pose_of(previous)``".
"""

import math
from typing import Tuple

from looprace.tracks.segments import CurveSegment, Pose, Segment


# Floor for denominators: zero-radius or zero-angle curves have zero length
GEOMETRY_EPS = 1e-3


def wrap_angle(angle: float) -> float:
    """Normalise an angle into (-pi, pi]."""
    wrapped = math.fmod(angle + math.pi, 2.0 * math.pi)
    if wrapped <= 0.0:
        wrapped += 2.0 * math.pi
    return wrapped - math.pi


def turn_sign(angle_deg: float) -> float:
    """Turn direction of a signed angle; zero counts as a left turn."""
    return -1.0 if angle_deg < 0.0 else 1.0


def segment_length(segment: Segment) -> float:
    """
    Centerline length of a piece.

    Args:
        segment: Any track piece

    Returns:
        Stored length for straight pieces, ``R * |angle|`` for curves
    """
    if isinstance(segment, CurveSegment):
        return max(segment.radius, 0.0) * abs(segment.angle_rad)
    return max(segment.length, 0.0)


def curve_center(segment: CurveSegment) -> Tuple[float, float]:
    """Center of the circle a curve piece runs on."""
    pose = segment.pose
    radius = max(segment.radius, 0.0)
    sign = turn_sign(segment.angle_deg)
    cx = pose.x - sign * radius * math.sin(pose.heading)
    cy = pose.y + sign * radius * math.cos(pose.heading)
    return cx, cy


def _arc_pose(segment: CurveSegment, swept: float) -> Pose:
    """Pose after sweeping ``swept`` radians around the curve center."""
    pose = segment.pose
    radius = max(segment.radius, 0.0)
    cx, cy = curve_center(segment)

    start_angle = math.atan2(pose.y - cy, pose.x - cx)
    end_angle = start_angle + swept

    return Pose(
        x=cx + radius * math.cos(end_angle),
        y=cy + radius * math.sin(end_angle),
        heading=pose.heading + swept,
    )


def center_point_at(segment: Segment, distance: float) -> Pose:
    """
    Pose on the centerline of a piece.

    Args:
        segment: Any track piece
        distance: Distance from the piece start, in [0, segment_length]

    Returns:
        Pose (position and tangent heading) at that distance
    """
    if isinstance(segment, CurveSegment):
        angle_rad = segment.angle_rad
        arc_length = max(segment.radius, 0.0) * abs(angle_rad)
        # zero-length arcs (R <= 0 or angle == 0) stay at the start point
        fraction = distance / max(arc_length, GEOMETRY_EPS)
        return _arc_pose(segment, fraction * angle_rad)

    pose = segment.pose
    return Pose(
        x=pose.x + distance * math.cos(pose.heading),
        y=pose.y + distance * math.sin(pose.heading),
        heading=pose.heading,
    )


def end_pose_of(segment: Segment) -> Pose:
    """
    Pose at the far end of a piece.

    This is the single chaining rule: the next piece starts here.
    """
    if isinstance(segment, CurveSegment):
        return _arc_pose(segment, segment.angle_rad)
    return center_point_at(segment, segment.length)
