"""Shared fixtures for the looprace test suite."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import matplotlib
matplotlib.use("Agg")

import pytest

from looprace.physics.vehicle import VehicleSpecs
from looprace.sim.simulator import Simulator
from looprace.tracks import PieceType, RoundedSquare, TrackLayout


def single_curve_layout(radius: float, runout: float = 30.0) -> TrackLayout:
    """Short start, one left 90° curve, then a straight run-out."""
    layout = TrackLayout(name=f"Curve R{radius}")
    layout.place_start(0.0, 0.0, 0.0, length=1.0)
    layout.append(PieceType.CURVE90, radius=radius, turn_right=False)
    layout.append(PieceType.STRAIGHT, length=runout)
    return layout


@pytest.fixture
def square():
    return RoundedSquare()


@pytest.fixture
def sim(square):
    simulator = Simulator(VehicleSpecs())
    simulator.load_track(square.segments)
    return simulator
