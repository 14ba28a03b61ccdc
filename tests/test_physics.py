"""
Vehicle physics and configuration tests.

Run with: pytest tests/test_physics.py -v
"""

import pytest

from looprace.config import SimulationConfig
from looprace.exceptions import ConfigError
from looprace.physics import ForceModel, VehicleSpecs, VehicleState, estimate_performance


@pytest.fixture
def model():
    return ForceModel(VehicleSpecs())


class TestForceModel:
    def test_drag_is_quadratic(self, model):
        assert model.drag_force(10.0) == pytest.approx(36.75)
        assert model.drag_force(20.0) == pytest.approx(4 * 36.75)
        assert model.drag_force(0.0) == 0.0

    def test_traction_includes_downforce(self, model):
        assert model.normal_force() == pytest.approx(1000 * 9.81 + 800)
        assert model.traction_limit() == pytest.approx(1.8 * 10610.0)
        assert model.max_lateral_accel() == pytest.approx(19.098)

    def test_rolling_resistance(self, model):
        assert model.rolling_resistance() == pytest.approx(147.15)

    def test_engine_force_is_traction_limited(self, model):
        assert model.engine_force(1.0) == pytest.approx(model.traction_limit())
        assert model.engine_force(0.0) == 0.0

    def test_weak_engine_below_traction(self):
        model = ForceModel(VehicleSpecs(engine_power=10.0))
        assert model.engine_force(0.5) == pytest.approx(0.5 * 10.0 * 500.0)

    def test_calculate_forces(self, model):
        forces = model.calculate_forces(10.0, throttle=1.0, brake=0.0)

        assert set(forces) == {'engine', 'drag', 'rolling', 'brake', 'net', 'acceleration'}
        assert forces['net'] == pytest.approx(19098.0 - 36.75 - 147.15)
        assert forces['acceleration'] == pytest.approx(18.91410)

    def test_full_brake_decelerates(self, model):
        forces = model.calculate_forces(20.0, throttle=0.0, brake=1.0)

        assert forces['engine'] == 0.0
        assert forces['brake'] == pytest.approx(model.traction_limit())
        assert forces['acceleration'] < -19.0

    def test_massless_car_is_guarded(self):
        model = ForceModel(VehicleSpecs(mass=0.0))
        forces = model.calculate_forces(5.0, 1.0, 0.0)

        assert model.mass > 0.0
        assert forces['acceleration'] == forces['acceleration']  # not NaN

    def test_no_grip_transmits_nothing(self):
        model = ForceModel(VehicleSpecs(tire_grip=0.0))

        assert model.engine_force(1.0) == 0.0
        assert model.brake_force(1.0) == 0.0
        assert model.max_lateral_accel() == 0.0


class TestPerformance:
    def test_default_car(self):
        estimate = estimate_performance(VehicleSpecs())

        assert 350.0 < estimate.top_speed_kmh < 400.0
        assert estimate.zero_to_100_s is not None
        assert 1.0 < estimate.zero_to_100_s < 2.5

    def test_more_power_is_faster(self):
        base = estimate_performance(VehicleSpecs(engine_power=150.0))
        strong = estimate_performance(VehicleSpecs(engine_power=300.0))

        assert strong.top_speed_kmh > base.top_speed_kmh
        assert strong.zero_to_100_s < base.zero_to_100_s

    def test_weak_car_never_reaches_100(self):
        estimate = estimate_performance(VehicleSpecs(engine_power=1.0))

        assert estimate.zero_to_100_s is None
        assert estimate.top_speed_kmh < 100.0


class TestSpecsAndConfig:
    def test_replace_is_partial(self):
        specs = VehicleSpecs().replace(mass=1500.0)

        assert specs.mass == 1500.0
        assert specs.tire_grip == VehicleSpecs().tire_grip

    def test_specs_yaml_round_trip(self, tmp_path):
        path = tmp_path / "specs.yaml"
        specs = VehicleSpecs(mass=1234.0, downforce=0.0)
        specs.to_yaml(str(path))

        assert VehicleSpecs.from_yaml(str(path)) == specs

    def test_config_yaml_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        config = SimulationConfig(max_speed=50.0, spline_interpolation=False)
        config.to_yaml(str(path))

        assert SimulationConfig.from_yaml(str(path)) == config

    def test_partial_yaml_keeps_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("hysteresis: 0.2\n")
        config = SimulationConfig.from_yaml(str(path))

        assert config.hysteresis == 0.2
        assert config.max_speed == SimulationConfig().max_speed

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "specs.yaml"
        path.write_text("")
        assert VehicleSpecs.from_yaml(str(path)) == VehicleSpecs()

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigError):
            VehicleSpecs.from_dict({'mass': 900.0, 'turbo': True})
        with pytest.raises(ConfigError):
            SimulationConfig.from_dict({'gravity': 9.81, 'warp': 9})

    def test_non_mapping_yaml_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            SimulationConfig.from_yaml(str(path))

    def test_state_snapshot_is_independent(self):
        state = VehicleState(s=3.0, speed=12.0)
        snapshot = state.snapshot()
        state.s = 4.0

        assert snapshot.s == 3.0
        assert snapshot.speed == 12.0


@pytest.mark.parametrize("values", [
    {'units_per_meter': 0.0},
    {'units_per_meter': -10.0},
    {'max_dt': -0.01},
    {'lookahead_stride': 0},
    {'lookahead_points': 0},
])
def test_invalid_config_rejected(values):
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(values)


def test_invalid_config_yaml_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("units_per_meter: 0\n")
    with pytest.raises(ConfigError):
        SimulationConfig.from_yaml(str(path))
