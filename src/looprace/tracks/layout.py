"""
Track layout

Owns the ordered piece list of a track under construction. Pieces can only
be appended at the end pose of the previous one, which keeps the chaining
invariant true by construction.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from looprace.exceptions import TrackLayoutError
from looprace.tracks.geometry import end_pose_of
from looprace.tracks.segments import (
    CurveSegment,
    PieceType,
    Pose,
    Segment,
    StartSegment,
    StraightSegment,
)


@dataclass(frozen=True)
class PaletteEntry:
    """A piece offered by the editor palette."""
    label: str
    piece: PieceType
    length: float = 0.0  # meters (start/straight)
    radius: float = 0.0  # meters (curves)


PALETTE: Tuple[PaletteEntry, ...] = (
    PaletteEntry("Start", PieceType.START, length=4.0),
    PaletteEntry("Straight 50", PieceType.STRAIGHT, length=5.0),
    PaletteEntry("Straight 100", PieceType.STRAIGHT, length=10.0),
    PaletteEntry("Curve 45°", PieceType.CURVE45, radius=6.0),
    PaletteEntry("Curve 90°", PieceType.CURVE90, radius=6.0),
    PaletteEntry("Curve 180°", PieceType.CURVE180, radius=6.0),
)

# Defaults used when append() is not given explicit dimensions
DEFAULT_DIMENSIONS: Dict[PieceType, PaletteEntry] = {
    PieceType.START: PALETTE[0],
    PieceType.STRAIGHT: PALETTE[2],
    PieceType.CURVE45: PALETTE[3],
    PieceType.CURVE90: PALETTE[4],
    PieceType.CURVE180: PALETTE[5],
}


class TrackLayout:
    """
    Ordered list of track pieces.

    The first piece is always a Start. Placing a new Start begins a new
    track. Existing pieces are never edited; the only removal is clear().

    Args:
        name: Display name of the layout
    """

    def __init__(self, name: str = "Custom Track"):
        self.name = name
        self.turn_right = False
        self._segments: List[Segment] = []
        self._version = 0

    @property
    def segments(self) -> Tuple[Segment, ...]:
        """Immutable snapshot of the current pieces."""
        return tuple(self._segments)

    @property
    def version(self) -> int:
        """Incremented on every change to the piece list."""
        return self._version

    def __len__(self) -> int:
        return len(self._segments)

    def is_empty(self) -> bool:
        return not self._segments

    def place_start(
        self,
        x: float = 0.0,
        y: float = 0.0,
        heading: float = 0.0,
        length: Optional[float] = None,
    ) -> StartSegment:
        """
        Place a Start piece, replacing any existing track.

        Args:
            x, y: Start gate position
            heading: Start gate heading (radians)
            length: Start piece length (palette default if None)

        Returns:
            The new Start piece
        """
        if length is None:
            length = DEFAULT_DIMENSIONS[PieceType.START].length
        start = StartSegment(pose=Pose(x, y, heading), length=length)
        self._segments = [start]
        self._version += 1
        return start

    def append(
        self,
        piece: PieceType,
        length: Optional[float] = None,
        radius: Optional[float] = None,
        turn_right: Optional[bool] = None,
    ) -> Segment:
        """
        Append a piece at the end pose of the last piece.

        Args:
            piece: Piece type (not START, use place_start for that)
            length: Straight length (palette default if None)
            radius: Curve radius (palette default if None)
            turn_right: Curve direction (layout's turn flag if None)

        Returns:
            The appended piece

        Raises:
            TrackLayoutError: If no Start has been placed yet
        """
        segment = self.preview(piece, length=length, radius=radius, turn_right=turn_right)
        self._segments.append(segment)
        self._version += 1
        return segment

    def preview(
        self,
        piece: PieceType,
        length: Optional[float] = None,
        radius: Optional[float] = None,
        turn_right: Optional[bool] = None,
    ) -> Segment:
        """Build the piece append() would add, without adding it."""
        if piece == PieceType.START:
            raise TrackLayoutError("Use place_start() to begin a new track")
        if not self._segments or self._segments[0].piece != PieceType.START:
            raise TrackLayoutError("Place a Start piece first")

        pose = end_pose_of(self._segments[-1])
        defaults = DEFAULT_DIMENSIONS[piece]

        if piece == PieceType.STRAIGHT:
            return StraightSegment(
                pose=pose,
                length=defaults.length if length is None else length,
            )

        if turn_right is None:
            turn_right = self.turn_right
        angle = piece.nominal_angle
        return CurveSegment(
            pose=pose,
            piece=piece,
            radius=defaults.radius if radius is None else radius,
            angle_deg=-angle if turn_right else angle,
        )

    def toggle_turn_direction(self) -> bool:
        """Flip the direction used for the next curve. Returns the new flag."""
        self.turn_right = not self.turn_right
        return self.turn_right

    def clear(self):
        """Remove every piece."""
        self._segments = []
        self._version += 1

    def end_pose(self) -> Optional[Pose]:
        """Pose where the next piece would start (None if empty)."""
        if not self._segments:
            return None
        return end_pose_of(self._segments[-1])

    def chaining_errors(self, tolerance: float = 1e-6) -> List[int]:
        """
        Indices ``i`` where piece ``i + 1`` does not start at the end of piece ``i``.
        """
        errors = []
        for i in range(len(self._segments) - 1):
            end = end_pose_of(self._segments[i])
            nxt = self._segments[i + 1].pose
            if end.distance_to(nxt) > tolerance or abs(end.heading - nxt.heading) > tolerance:
                errors.append(i)
        return errors

    def closure_gap(self) -> float:
        """Distance between the track end pose and the start gate."""
        if not self._segments:
            return 0.0
        return self.end_pose().distance_to(self._segments[0].pose)

    def __repr__(self) -> str:
        return f"TrackLayout(name='{self.name}', segments={len(self._segments)})"
