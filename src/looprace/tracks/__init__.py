"""Track pieces, geometry and racing line."""

from looprace.tracks.segments import (
    CurveSegment,
    PieceType,
    Pose,
    Segment,
    StartSegment,
    StraightSegment,
)
from looprace.tracks.geometry import center_point_at, end_pose_of, segment_length, wrap_angle
from looprace.tracks.layout import PALETTE, TrackLayout
from looprace.tracks.presets import Hairpin, Oval, RoundedSquare
from looprace.tracks.racing_line import (
    RacingLinePoint,
    build_racing_line,
    sample_centerline,
    track_length,
)

__all__ = [
    "CurveSegment", "PieceType", "Pose", "Segment", "StartSegment", "StraightSegment",
    "center_point_at", "end_pose_of", "segment_length", "wrap_angle",
    "PALETTE", "TrackLayout", "RoundedSquare", "Oval", "Hairpin",
    "RacingLinePoint", "build_racing_line", "sample_centerline", "track_length",
    "get_layout",
]


# Layout registry
LAYOUTS = {
    'rounded_square': RoundedSquare,
    'oval': Oval,
    'hairpin': Hairpin,
}


def get_layout(name: str) -> TrackLayout:
    """
    Get a preset layout by name.

    Args:
        name: Layout name (lowercase)

    Returns:
        TrackLayout instance
    """
    if name.lower() not in LAYOUTS:
        raise ValueError(f"Unknown layout: {name}. Available: {list(LAYOUTS.keys())}")

    return LAYOUTS[name.lower()]()
