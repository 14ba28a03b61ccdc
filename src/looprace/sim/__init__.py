"""Lap simulation: speed control, interpolation and the tick loop."""

from looprace.sim.controller import PedalCommand, pedal_command, target_speed
from looprace.sim.simulator import SimulationMode, Simulator
from looprace.sim.telemetry import TelemetryRecorder

__all__ = [
    "PedalCommand", "pedal_command", "target_speed",
    "SimulationMode", "Simulator", "TelemetryRecorder",
]
