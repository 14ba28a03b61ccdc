"""
Simulation configuration

Holds every tunable constant of the speed controller, force model and
integrator. Values can be loaded from / saved to YAML so a run can be
reproduced without touching code.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict

import yaml

from looprace.exceptions import ConfigError


# Layout coordinates are expressed in meters unless a caller says otherwise
UNITS_PER_METER = 1.0


@dataclass
class SimulationConfig:
    """Controller and integrator parameters."""

    # Physical constants
    gravity: float = 9.81  # m/s²
    air_density: float = 1.225  # kg/m³

    # Force model
    rolling_coeff: float = 0.015  # fraction of weight
    engine_force_scale: float = 500.0  # N per unit of engine power

    # Speed limits
    max_speed: float = 80.0  # m/s (~288 km/h)
    min_target_speed: float = 5.0  # m/s
    launch_speed: float = 10.0  # m/s when a run starts

    # Cornering look-ahead
    lookahead_points: int = 12
    lookahead_stride: int = 4  # racing-line indices between samples

    # Throttle/brake control
    hysteresis: float = 0.10  # ±10% band around target speed
    hold_throttle: float = 0.3

    # Integration
    max_dt: float = 0.033  # s, longest step accepted from the tick source
    spline_interpolation: bool = True

    # Rendering units per physical meter
    units_per_meter: float = UNITS_PER_METER

    def __post_init__(self):
        if self.units_per_meter <= 0.0:
            raise ConfigError(f"units_per_meter must be positive, got {self.units_per_meter}")
        if self.max_dt < 0.0:
            raise ConfigError(f"max_dt must be non-negative, got {self.max_dt}")
        if self.lookahead_points < 1 or self.lookahead_stride < 1:
            raise ConfigError(
                f"lookahead_points and lookahead_stride must be >= 1, "
                f"got {self.lookahead_points} and {self.lookahead_stride}"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'SimulationConfig':
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown simulation config keys: {unknown}")
        return cls(**values)

    @classmethod
    def from_yaml(cls, filepath: str) -> 'SimulationConfig':
        """Load configuration from YAML file."""
        with open(filepath, 'r') as f:
            config_dict = yaml.safe_load(f) or {}
        if not isinstance(config_dict, dict):
            raise ConfigError(f"{filepath}: expected a mapping at top level")
        return cls.from_dict(config_dict)

    def to_yaml(self, filepath: str):
        """Save configuration to YAML file."""
        with open(filepath, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)
