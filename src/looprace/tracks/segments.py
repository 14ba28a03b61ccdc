"""
Track pieces

A track is an ordered list of analytic pieces. Each piece knows its own
starting pose and the shape parameters its variant needs:

- Start / Straight: length
- Curve (45°, 90°, 180°): radius and signed turn angle in degrees
  (positive = left / counter-clockwise, negative = right / clockwise)

Headings are radians, counter-clockwise from the x-axis.
"""

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class PieceType(Enum):
    """Type of track piece."""
    START = "start"
    STRAIGHT = "straight"
    CURVE45 = "curve45"
    CURVE90 = "curve90"
    CURVE180 = "curve180"

    @property
    def is_curve(self) -> bool:
        return self in CURVE_ANGLES

    @property
    def nominal_angle(self) -> float:
        """Unsigned turn angle in degrees (0 for straight pieces)."""
        return CURVE_ANGLES.get(self, 0.0)


CURVE_ANGLES = {
    PieceType.CURVE45: 45.0,
    PieceType.CURVE90: 90.0,
    PieceType.CURVE180: 180.0,
}


def new_segment_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Pose:
    """Position and tangent heading."""
    x: float
    y: float
    heading: float  # radians

    def distance_to(self, other: 'Pose') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class StartSegment:
    """Start gate. Establishes the track origin and orientation."""
    pose: Pose
    length: float
    id: str = field(default_factory=new_segment_id)

    @property
    def piece(self) -> PieceType:
        return PieceType.START


@dataclass(frozen=True)
class StraightSegment:
    """Straight piece."""
    pose: Pose
    length: float
    id: str = field(default_factory=new_segment_id)

    @property
    def piece(self) -> PieceType:
        return PieceType.STRAIGHT


@dataclass(frozen=True)
class CurveSegment:
    """
    Circular arc piece.

    ``angle_deg`` is signed: the piece type fixes the nominal sweep, the
    sign fixes the turn direction.
    """
    pose: Pose
    piece: PieceType
    radius: float
    angle_deg: float
    id: str = field(default_factory=new_segment_id)

    def __post_init__(self):
        if not self.piece.is_curve:
            raise ValueError(f"CurveSegment needs a curve piece type, got {self.piece.value}")

    @property
    def angle_rad(self) -> float:
        return math.radians(self.angle_deg)

    @property
    def turns_left(self) -> bool:
        return self.angle_deg >= 0.0


Segment = Union[StartSegment, StraightSegment, CurveSegment]
