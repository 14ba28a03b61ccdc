"""looprace - build a loop track from modular pieces and simulate a car lapping it."""

__version__ = "0.1.0"

from looprace.config import SimulationConfig
from looprace.physics.vehicle import VehicleSpecs, VehicleState
from looprace.sim.simulator import SimulationMode, Simulator
from looprace.tracks import TrackLayout, build_racing_line, get_layout

__all__ = [
    "SimulationConfig", "VehicleSpecs", "VehicleState",
    "SimulationMode", "Simulator", "TrackLayout", "build_racing_line", "get_layout",
]
