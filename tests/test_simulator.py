"""
Lap simulator tests.

Run with: pytest tests/test_simulator.py -v
"""

import math

import numpy as np
import pytest

from looprace.config import SimulationConfig
from looprace.exceptions import ConfigError, StartRejectedError
from looprace.physics.vehicle import VehicleSpecs
from looprace.sim.simulator import SimulationMode, Simulator
from looprace.sim.telemetry import TelemetryRecorder
from looprace.tracks import Oval, PieceType, TrackLayout
from looprace.tracks.racing_line import as_array, sample_centerline

DT = 1.0 / 60.0


def _run(sim, seconds, dt=DT):
    states = []
    for _ in range(int(round(seconds / dt))):
        states.append(sim.tick(dt))
    return states


class TestStart:
    def test_empty_track_rejected(self):
        sim = Simulator()
        with pytest.raises(StartRejectedError):
            sim.start()
        assert sim.mode == SimulationMode.IDLE

    def test_start_piece_alone_rejected(self):
        layout = TrackLayout()
        layout.place_start()
        sim = Simulator()
        sim.load_track(layout.segments)
        sim.state.speed = 3.0

        with pytest.raises(StartRejectedError) as excinfo:
            sim.start()

        assert "Start piece" in excinfo.value.reason
        assert not sim.is_running
        assert sim.state.speed == 3.0

    def test_first_piece_must_be_start(self, square):
        sim = Simulator()
        sim.load_track(square.segments[1:])
        with pytest.raises(StartRejectedError):
            sim.start()

    def test_start_anchors_on_first_point(self, sim):
        sim.start()
        first = sim.racing_line[0]

        assert sim.is_running
        assert sim.state.speed == pytest.approx(sim.config.launch_speed)
        assert sim.state.s == 0.0
        assert sim.state.index == 0
        assert (sim.state.x, sim.state.y) == (first.x, first.y)
        assert sim.state.heading == pytest.approx(first.heading)


class TestTick:
    def test_idle_tick_does_not_move(self, sim):
        before = sim.tick(DT)
        after = sim.tick(DT)

        assert after == before
        assert sim.time == 0.0

    def test_dt_is_clamped(self, sim):
        sim.start()
        sim.tick(1.0)
        assert sim.time == pytest.approx(sim.config.max_dt)

        s = sim.state.s
        sim.tick(-0.5)
        assert sim.time == pytest.approx(sim.config.max_dt)
        assert sim.state.s == pytest.approx(s)

    def test_tick_returns_snapshot(self, sim):
        sim.start()
        snapshot = sim.tick(DT)
        snapshot.speed = 999.0

        assert sim.state.speed != 999.0

    def test_state_stays_consistent(self, sim):
        """Index brackets s and the car stays on the racing line."""
        sim.start()
        line = sim.racing_line
        xy = as_array(line)[:, :2]

        for state in _run(sim, 10.0):
            assert 0 <= state.index < len(line) - 1
            assert line[state.index].s <= state.s <= line[state.index + 1].s + 1e-9
            assert 0.0 <= state.s <= line[-1].s
            assert 0.0 <= state.speed <= sim.config.max_speed
            nearest = np.min(np.hypot(xy[:, 0] - state.x, xy[:, 1] - state.y))
            assert nearest < 0.5

    def test_laps_are_counted(self, sim):
        sim.start()
        _run(sim, 30.0)

        assert sim.lap >= 2
        assert len(sim.lap_times) == sim.lap
        assert all(t > 0.0 for t in sim.lap_times)
        assert sim.best_lap == min(sim.lap_times)

    def test_speed_capped_on_long_straight(self):
        layout = TrackLayout()
        layout.place_start(length=4.0)
        layout.append(PieceType.STRAIGHT, length=2000.0)
        sim = Simulator(config=SimulationConfig(max_speed=30.0))
        sim.load_track(layout.segments)
        sim.start()

        speeds = [state.speed for state in _run(sim, 10.0)]

        assert max(speeds) <= 30.0
        assert speeds[-1] == pytest.approx(30.0)

    def test_zero_grip_never_accelerates(self, square):
        sim = Simulator(VehicleSpecs(tire_grip=0.0))
        sim.load_track(square.segments)
        sim.start()

        speeds = [sim.tick(0.033).speed for _ in range(3000)]

        assert all(b <= a for a, b in zip(speeds, speeds[1:]))
        assert speeds[-1] == 0.0

    @pytest.mark.parametrize("specs", [
        VehicleSpecs(mass=0.0),
        VehicleSpecs(mass=-50.0),
        VehicleSpecs(engine_power=-100.0),
        VehicleSpecs(drag_coeff=0.0, frontal_area=0.0),
    ])
    def test_pathological_specs_stay_finite(self, square, specs):
        sim = Simulator(specs)
        sim.load_track(square.segments)
        sim.start()

        for state in _run(sim, 5.0):
            assert math.isfinite(state.speed)
            assert math.isfinite(state.x) and math.isfinite(state.y)
            assert 0.0 <= state.speed <= sim.config.max_speed

    def test_out_of_range_index_is_reset(self, sim):
        sim.start()
        sim.state.index = 10_000
        state = sim.tick(DT)

        assert 0 <= state.index < len(sim.racing_line) - 1

    def test_telemetry_rows_per_tick(self, square):
        recorder = TelemetryRecorder()
        sim = Simulator(telemetry=recorder)
        sim.load_track(square.segments)
        sim.tick(DT)
        sim.start()
        _run(sim, 1.0)

        assert len(recorder) == 60


class TestCommands:
    def test_stop_keeps_state(self, sim):
        sim.start()
        _run(sim, 1.0)
        sim.stop()
        s = sim.state.s

        sim.tick(DT)

        assert sim.mode == SimulationMode.IDLE
        assert sim.state.s == s

    def test_reset_returns_to_start_at_rest(self, sim):
        sim.start()
        _run(sim, 12.0)
        sim.reset()

        assert not sim.is_running
        assert sim.state.s == 0.0
        assert sim.state.speed == 0.0
        assert sim.lap == 0
        assert sim.lap_times == []
        assert (sim.state.x, sim.state.y) == (sim.racing_line[0].x, sim.racing_line[0].y)

    def test_clear_drops_track(self, sim):
        sim.start()
        sim.clear()

        assert sim.segments == ()
        assert sim.racing_line == ()
        assert sim.track_length == 0.0
        with pytest.raises(StartRejectedError):
            sim.start()

    def test_restart_resets_lap_clock(self, sim):
        sim.start()
        _run(sim, 20.0)
        sim.start()

        assert sim.time == 0.0
        assert sim.lap == 0


class TestTrackChanges:
    def test_new_segments_swapped_in_on_tick(self, sim):
        sim.start()
        _run(sim, 2.0)
        oval = Oval()

        sim.tick(DT, oval.segments)

        assert sim.segments == oval.segments
        assert sim.racing_line[-1].s == pytest.approx(sim.track_length, rel=0.05)
        assert sim.state.s < 1.0

    def test_empty_segments_clear_running_sim(self, sim):
        sim.start()
        sim.tick(DT, [])

        assert not sim.is_running
        assert sim.racing_line == ()

    def test_builder_failure_falls_back_to_centerline(self, square, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("no line")

        monkeypatch.setattr("looprace.sim.simulator.build_racing_line", broken)
        sim = Simulator()
        sim.load_track(square.segments)

        assert len(sim.racing_line) == len(sample_centerline(square.segments))
        sim.start()
        assert sim.is_running

    def test_degenerate_builder_output_falls_back(self, square, monkeypatch):
        monkeypatch.setattr("looprace.sim.simulator.build_racing_line", lambda *a, **k: [])
        sim = Simulator()
        sim.load_track(square.segments)

        assert len(sim.racing_line) >= 2

    def test_safe_tick_recovers_from_arithmetic_error(self, sim, monkeypatch):
        sim.start()
        _run(sim, 1.0)

        def broken(*args, **kwargs):
            raise ZeroDivisionError("bad interpolation")

        monkeypatch.setattr("looprace.sim.simulator.interpolate_pose", broken)
        state = sim.safe_tick(DT)

        assert state.index == 0
        assert sim.is_running

    def test_update_specs_mid_run(self, sim):
        sim.start()
        _run(sim, 1.0)
        sim.update_specs(sim.specs.replace(tire_grip=0.5))

        assert sim.force_model.specs.tire_grip == 0.5
        assert sim.is_running
        sim.tick(DT)


def test_heavier_car_has_lower_corner_limit(square):
    """Downforce matters less on a heavier car, so the grip limit drops."""
    light = Simulator(VehicleSpecs(mass=800.0))
    heavy = Simulator(VehicleSpecs(mass=2000.0))

    assert heavy.force_model.max_lateral_accel() < light.force_model.max_lateral_accel()


def test_repr_shows_mode(sim):
    sim.start()
    assert "running" in repr(sim)


def test_open_track_stays_on_racing_line():
    """Near both ends of an open track the car stays on its line."""
    layout = TrackLayout()
    layout.place_start(length=4.0)
    layout.append(PieceType.STRAIGHT, length=2000.0)
    sim = Simulator()
    sim.load_track(layout.segments)
    sim.start()
    xy = as_array(sim.racing_line)[:, :2]

    for state in _run(sim, 0.5):
        nearest = np.min(np.hypot(xy[:, 0] - state.x, xy[:, 1] - state.y))
        assert nearest < 0.5
        assert state.y == pytest.approx(0.0, abs=1e-9)


def test_track_swap_restarts_lap_timing(sim):
    sim.start()
    _run(sim, 10.0)
    assert sim.lap >= 1

    sim.tick(DT, Oval().segments)

    assert sim.lap == 0
    assert sim.lap_times == []
    while sim.lap < 1 and sim.time < 60.0:
        sim.tick(DT)
    assert sim.lap_times[0] <= sim.time


def test_zero_units_per_meter_rejected():
    with pytest.raises(ConfigError):
        SimulationConfig(units_per_meter=0.0)
