"""
Built-in closed layouts

Each preset is assembled from palette pieces exactly the way the editor
would, so every preset satisfies the chaining invariant and closes on its
start gate.
"""

from looprace.tracks.layout import TrackLayout
from looprace.tracks.segments import PieceType


class RoundedSquare(TrackLayout):
    """Square with 10 m sides and 6 m right-hand corners."""

    def __init__(self, side: float = 10.0, radius: float = 6.0):
        super().__init__(name="Rounded Square")
        self.side = side
        self.radius = radius
        self._build_pieces()

    def _build_pieces(self):
        start = self.place_start(0.0, 0.0, 0.0, length=4.0)
        self.append(PieceType.STRAIGHT, length=self.side - start.length)
        for corner in range(4):
            self.append(PieceType.CURVE90, radius=self.radius, turn_right=True)
            if corner < 3:
                self.append(PieceType.STRAIGHT, length=self.side)


class Oval(TrackLayout):
    """Two straights joined by left-hand 180° bends."""

    def __init__(self, straight: float = 10.0, radius: float = 6.0):
        super().__init__(name="Oval")
        self.straight = straight
        self.radius = radius
        self._build_pieces()

    def _build_pieces(self):
        start = self.place_start(0.0, 0.0, 0.0, length=4.0)
        self.append(PieceType.STRAIGHT, length=self.straight - start.length)
        self.append(PieceType.CURVE180, radius=self.radius, turn_right=False)
        self.append(PieceType.STRAIGHT, length=self.straight)
        self.append(PieceType.CURVE180, radius=self.radius, turn_right=False)


class Hairpin(Oval):
    """Long straights with tight hairpin ends."""

    def __init__(self):
        super().__init__(straight=30.0, radius=3.0)
        self.name = "Hairpin"
