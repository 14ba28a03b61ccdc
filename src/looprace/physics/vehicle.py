"""
Vehicle model

Longitudinal force model of a single car driving along the racing line:
- Aerodynamic drag
- Rolling resistance
- Engine force (traction limited)
- Brake force (traction limited)
- Grip-limited lateral acceleration used for cornering speeds
"""

from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, Optional

import yaml

from looprace.config import SimulationConfig
from looprace.exceptions import ConfigError


# Floor for mass in every division; a massless car is treated as very light
MIN_MASS = 1e-3  # kg


@dataclass(frozen=True)
class VehicleSpecs:
    """
    Car parameters supplied by the settings panel.

    final_drive and wheelbase are carried for the settings collaborator but
    are not used by the force model.
    """

    mass: float = 1000.0  # kg
    engine_power: float = 450.0  # power units (kW in the performance estimate)
    drag_coeff: float = 0.3  # Cd
    frontal_area: float = 2.0  # m²
    tire_grip: float = 1.8  # friction coefficient
    downforce: float = 800.0  # N
    final_drive: float = 3.8
    wheelbase: float = 2.5  # meters

    def replace(self, **changes) -> 'VehicleSpecs':
        """Copy with some fields changed (partial settings update)."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'VehicleSpecs':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown vehicle spec keys: {unknown}")
        return cls(**values)

    @classmethod
    def from_yaml(cls, filepath: str) -> 'VehicleSpecs':
        """Load specs from YAML file."""
        with open(filepath, 'r') as f:
            specs_dict = yaml.safe_load(f) or {}
        if not isinstance(specs_dict, dict):
            raise ConfigError(f"{filepath}: expected a mapping at top level")
        return cls.from_dict(specs_dict)

    def to_yaml(self, filepath: str):
        """Save specs to YAML file."""
        with open(filepath, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)


@dataclass
class VehicleState:
    """
    Mutable vehicle state, written only by the simulator.

    ``index`` is a hint into the racing line: the segment [index, index + 1]
    last known to bracket ``s``.
    """

    s: float = 0.0  # meters along the racing line
    speed: float = 0.0  # m/s
    heading: float = 0.0  # radians
    x: float = 0.0  # layout units
    y: float = 0.0  # layout units
    index: int = 0

    def snapshot(self) -> 'VehicleState':
        """Independent copy for consumers."""
        return replace(self)


class ForceModel:
    """
    Longitudinal forces acting on the car.

    Args:
        specs: Vehicle parameters
        config: Physical constants and force scaling
    """

    def __init__(self, specs: VehicleSpecs, config: Optional[SimulationConfig] = None):
        self.specs = specs
        self.config = config or SimulationConfig()

    @property
    def mass(self) -> float:
        return max(self.specs.mass, MIN_MASS)

    def normal_force(self) -> float:
        """Weight plus downforce (N)."""
        return self.mass * self.config.gravity + self.specs.downforce

    def traction_limit(self) -> float:
        """Largest force the tires can transmit (N)."""
        return max(self.specs.tire_grip * self.normal_force(), 0.0)

    def max_lateral_accel(self) -> float:
        """Sustainable cornering acceleration (m/s²)."""
        return self.traction_limit() / self.mass

    def drag_force(self, speed: float) -> float:
        return (0.5 * self.config.air_density * self.specs.drag_coeff
                * self.specs.frontal_area * speed ** 2)

    def rolling_resistance(self) -> float:
        return self.config.rolling_coeff * self.mass * self.config.gravity

    def engine_force(self, throttle: float) -> float:
        if throttle <= 0.0:
            return 0.0
        raw = throttle * self.specs.engine_power * self.config.engine_force_scale
        return min(raw, self.traction_limit())

    def brake_force(self, brake: float) -> float:
        if brake <= 0.0:
            return 0.0
        return brake * self.traction_limit()

    def calculate_forces(self, speed: float, throttle: float, brake: float) -> Dict[str, float]:
        """
        Calculate every longitudinal force at the current speed.

        Args:
            speed: Speed in m/s
            throttle: Throttle [0, 1]
            brake: Brake [0, 1]

        Returns:
            Dictionary with individual forces, net force and acceleration
        """
        engine = self.engine_force(throttle)
        drag = self.drag_force(speed)
        rolling = self.rolling_resistance()
        braking = self.brake_force(brake)

        net = engine - drag - rolling - braking

        return {
            'engine': engine,
            'drag': drag,
            'rolling': rolling,
            'brake': braking,
            'net': net,
            'acceleration': net / self.mass,
        }
