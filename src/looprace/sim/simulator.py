"""
Lap simulator

Drives one vehicle around the racing line of a closed track:
- Racing line rebuilt whenever the track changes
- Look-ahead cornering speed control
- Longitudinal force integration
- Arc-length position with lap wraparound
- Smooth pose interpolation for playback

Single-threaded: one tick source calls tick() synchronously. Track edits and new
vehicle specs are applied between ticks.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from looprace.config import SimulationConfig
from looprace.exceptions import StartRejectedError
from looprace.physics.vehicle import ForceModel, VehicleSpecs, VehicleState
from looprace.sim.controller import PedalCommand, pedal_command, target_speed
from looprace.sim.interpolation import advance_index, interpolate_pose
from looprace.sim.telemetry import TelemetryRecorder
from looprace.tracks.geometry import wrap_angle
from looprace.tracks.racing_line import (
    RacingLinePoint,
    build_racing_line,
    sample_centerline,
    total_s,
    track_length,
)
from looprace.tracks.segments import PieceType, Segment

_logger = logging.getLogger(__name__)


class SimulationMode(Enum):
    IDLE = "idle"
    RUNNING = "running"


class Simulator:
    """
    Single-vehicle simulator over a piece-built track.

    Commands: start, stop, reset, clear. The vehicle state is only ever
    written here; consumers get snapshots.

    Args:
        specs: Vehicle parameters (replaced wholesale via update_specs)
        config: Controller and integrator parameters
        telemetry: Optional recorder fed once per advancing tick
    """

    def __init__(
        self,
        specs: Optional[VehicleSpecs] = None,
        config: Optional[SimulationConfig] = None,
        telemetry: Optional[TelemetryRecorder] = None,
    ):
        self.config = config or SimulationConfig()
        self.telemetry = telemetry
        self.update_specs(specs or VehicleSpecs())

        self.mode = SimulationMode.IDLE
        self.state = VehicleState()
        self._segments: Tuple[Segment, ...] = ()
        self._racing_line: List[RacingLinePoint] = []

        self.time = 0.0
        self.lap = 0
        self.lap_times: List[float] = []
        self._lap_clock = 0.0

        self.last_target_speed = 0.0
        self.last_command = PedalCommand(throttle=0.0, brake=0.0)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def update_specs(self, specs: VehicleSpecs):
        """Replace the vehicle specs snapshot."""
        self._specs = specs
        self.force_model = ForceModel(specs, self.config)

    def load_track(self, segments: Sequence[Segment]):
        """
        Swap in a new piece list.

        The racing line is rebuilt from scratch and lap timing restarts.
        An empty list behaves like clear().
        """
        segments = tuple(segments)
        if not segments:
            self.clear()
            return

        self._segments = segments
        self._racing_line = []
        self.rebuild_racing_line()
        self.state.s = 0.0
        self.state.index = 0
        self._reset_laps()

    def rebuild_racing_line(self) -> List[RacingLinePoint]:
        """
        Recompute the racing line of the current track.

        Falls back to unsmoothed centerline samples if the builder fails or
        returns fewer than two points.
        """
        upm = self.config.units_per_meter
        try:
            line = build_racing_line(self._segments, upm)
        except Exception as exc:
            _logger.warning("Racing line build failed (%s); using centerline samples", exc)
            line = sample_centerline(self._segments, upm)
        else:
            if self._segments and len(line) < 2:
                _logger.warning("Racing line degenerate (%d points); using centerline samples", len(line))
                line = sample_centerline(self._segments, upm)

        self._racing_line = line
        _logger.info("Racing line computed with %d points (%.1f m)", len(line), total_s(line))
        return line

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self):
        """
        Start a run from the first racing-line point.

        Raises:
            StartRejectedError: If the track has no Start piece plus at
                least one more piece, or no usable racing line. The
                vehicle state is left untouched.
        """
        if len(self._segments) < 2 or self._segments[0].piece != PieceType.START:
            raise StartRejectedError("You need a Start piece and at least one track segment")

        if len(self._racing_line) < 2:
            self.rebuild_racing_line()
        if len(self._racing_line) < 2:
            raise StartRejectedError("Cannot compute racing line for this layout")

        self._anchor(speed=min(self.config.launch_speed, self.config.max_speed))
        self._reset_laps()
        self.mode = SimulationMode.RUNNING
        _logger.info("Simulation started on %d racing-line points", len(self._racing_line))

    def stop(self):
        """Suspend advancement, keeping the last state for display."""
        if self.mode == SimulationMode.RUNNING:
            _logger.info("Simulation stopped at s=%.1f m", self.state.s)
        self.mode = SimulationMode.IDLE

    def reset(self):
        """Stop and put the vehicle back on the first racing-line point at rest."""
        self.mode = SimulationMode.IDLE
        if self._racing_line:
            self._anchor(speed=0.0)
        self._reset_laps()

    def clear(self):
        """Drop the track, the racing line and the vehicle state."""
        self.mode = SimulationMode.IDLE
        self._segments = ()
        self._racing_line = []
        self.state = VehicleState()
        self._reset_laps()

    def _reset_laps(self):
        self.time = 0.0
        self.lap = 0
        self.lap_times = []
        self._lap_clock = 0.0

    def _anchor(self, speed: float):
        first = self._racing_line[0]
        self.state = VehicleState(
            s=0.0,
            speed=speed,
            heading=wrap_angle(first.heading),
            x=first.x,
            y=first.y,
            index=0,
        )

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, dt: float, segments: Optional[Sequence[Segment]] = None) -> VehicleState:
        """
        Advance the vehicle by one time step.

        Args:
            dt: Elapsed time in seconds (clamped to [0, max_dt])
            segments: Current piece list, swapped in if it changed

        Returns:
            Snapshot of the vehicle state
        """
        if segments is not None and tuple(segments) != self._segments:
            self.load_track(segments)

        if self.mode != SimulationMode.RUNNING:
            return self.state.snapshot()

        if not self._segments:
            self.clear()
            return self.state.snapshot()

        if not self._racing_line:
            self.rebuild_racing_line()
            self.state.s = 0.0
            self.state.index = 0
            if len(self._racing_line) < 2:
                return self.state.snapshot()

        dt = min(max(dt, 0.0), self.config.max_dt)
        line = self._racing_line
        state = self.state
        cfg = self.config

        if not 0 <= state.index < len(line) - 1:
            _logger.warning("Index hint %d out of range; resetting", state.index)
            state.index = 0

        # === SPEED CONTROL ===
        target = target_speed(line, state.index, self.force_model, cfg)
        command = pedal_command(state.speed, target, cfg)

        # === FORCES ===
        forces = self.force_model.calculate_forces(state.speed, command.throttle, command.brake)

        # === INTEGRATION ===
        speed = state.speed + forces['acceleration'] * dt
        state.speed = float(np.clip(speed, 0.0, cfg.max_speed))

        self.time += dt
        self._lap_clock += dt
        self._advance(state.speed * dt)

        self.last_target_speed = target
        self.last_command = command
        if self.telemetry is not None:
            self.telemetry.record(self.time, self.lap, state, target, command)

        return state.snapshot()

    def safe_tick(self, dt: float, segments: Optional[Sequence[Segment]] = None) -> VehicleState:
        """
        tick() for the render loop: arithmetic or indexing failures reset
        the index hint instead of stopping the run.
        """
        try:
            return self.tick(dt, segments)
        except (ArithmeticError, IndexError, ValueError) as exc:
            _logger.warning("Tick failed (%s); resetting index hint", exc)
            self.state.index = 0
            return self.state.snapshot()

    def _advance(self, distance: float):
        """Move along the racing line and resolve the new pose."""
        line = self._racing_line
        state = self.state

        state.s += distance
        lap_length = line[-1].s
        if lap_length > 0.0 and state.s > lap_length:
            state.s = state.s % lap_length
            state.index = 0
            self.lap += 1
            self.lap_times.append(self._lap_clock)
            _logger.debug("Lap %d completed in %.2f s", self.lap, self._lap_clock)
            self._lap_clock = 0.0

        state.index = advance_index(line, state.s, state.index)
        pose = interpolate_pose(line, state.s, state.index, spline=self.config.spline_interpolation)
        state.x = pose.x
        state.y = pose.y
        state.heading = pose.heading

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def specs(self) -> VehicleSpecs:
        return self._specs

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def racing_line(self) -> Tuple[RacingLinePoint, ...]:
        return tuple(self._racing_line)

    @property
    def is_running(self) -> bool:
        return self.mode == SimulationMode.RUNNING

    @property
    def speed_kmh(self) -> float:
        return self.state.speed * 3.6

    @property
    def track_length(self) -> float:
        """Racing-line length in meters."""
        return track_length(self._racing_line, self.config.units_per_meter)

    @property
    def best_lap(self) -> Optional[float]:
        return min(self.lap_times) if self.lap_times else None

    def __repr__(self) -> str:
        return (f"Simulator(mode={self.mode.value}, segments={len(self._segments)}, "
                f"s={self.state.s:.1f}m, speed={self.speed_kmh:.1f}km/h)")
