"""
Straight-line performance estimate

Quick figures shown next to the settings: top speed and 0-100 km/h time.
Engine power is read as kW here, unlike the scaled force model used on track.
"""

from dataclasses import dataclass
from typing import Optional

from looprace.config import SimulationConfig
from looprace.physics.vehicle import MIN_MASS, VehicleSpecs


@dataclass(frozen=True)
class PerformanceEstimate:
    top_speed_kmh: float
    zero_to_100_s: Optional[float]  # None if 100 km/h is never reached


def estimate_performance(
    specs: VehicleSpecs,
    config: Optional[SimulationConfig] = None,
    speed_step: float = 0.5,  # m/s
    speed_ceiling: float = 200.0,  # m/s
    dt: float = 0.05,  # s
    time_limit: float = 60.0,  # s
) -> PerformanceEstimate:
    """
    Estimate top speed and 0-100 km/h time.

    Args:
        specs: Vehicle parameters
        config: Physical constants
        speed_step: Resolution of the top speed search
        speed_ceiling: Highest speed considered
        dt: Integration step for the acceleration run
        time_limit: Give up on the acceleration run after this long

    Returns:
        PerformanceEstimate
    """
    config = config or SimulationConfig()
    g = config.gravity
    mass = max(specs.mass, MIN_MASS)
    power = specs.engine_power * 1000.0  # kW -> W

    drag_const = 0.5 * config.air_density * specs.drag_coeff * specs.frontal_area
    rolling = config.rolling_coeff * mass * g

    # === TOP SPEED ===
    # highest speed whose resistive power the engine can still supply
    v_top = 0.0
    v = 0.0
    while v < speed_ceiling:
        if (drag_const * v * v + rolling) * v > power:
            break
        v_top = v
        v += speed_step

    # === 0-100 km/h ===
    target = 100.0 / 3.6
    traction = specs.tire_grip * (mass * g + specs.downforce)
    v = 0.0
    t = 0.0
    while v < target and t <= time_limit:
        power_force = power / max(v, 1.0)
        drive = min(traction, power_force)
        net = drive - drag_const * v * v - rolling
        v += max(net, 0.0) / mass * dt
        t += dt

    return PerformanceEstimate(
        top_speed_kmh=v_top * 3.6,
        zero_to_100_s=t if v >= target else None,
    )
