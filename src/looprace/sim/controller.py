"""
Cornering speed controller

Looks ahead along the racing line, turns local curvature into a grip-limited
speed ceiling and picks throttle or brake to track the tightest one.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from looprace.config import SimulationConfig
from looprace.physics.vehicle import ForceModel
from looprace.tracks.geometry import GEOMETRY_EPS, wrap_angle
from looprace.tracks.racing_line import RacingLinePoint


# Racing-line points closer than this (m) are skipped as near-duplicates
CURVATURE_EPS = 0.01
# Curvature floor (1/m) when converting to a speed ceiling
MIN_CURVATURE = 1e-4


@dataclass(frozen=True)
class PedalCommand:
    throttle: float  # [0, 1]
    brake: float  # [0, 1]


def local_curvature(p1: RacingLinePoint, p2: RacingLinePoint, units_per_meter: float) -> float:
    """
    Heading change per meter between two racing-line points.

    Returns 0.0 for near-duplicate points.
    """
    spacing = math.hypot(p2.x - p1.x, p2.y - p1.y) / max(units_per_meter, GEOMETRY_EPS)
    if spacing < CURVATURE_EPS:
        return 0.0
    return abs(wrap_angle(p2.heading - p1.heading)) / spacing


def target_speed(
    racing_line: Sequence[RacingLinePoint],
    index: int,
    force_model: ForceModel,
    config: SimulationConfig,
) -> float:
    """
    Fastest speed the car can carry through the look-ahead window.

    Args:
        racing_line: Racing-line points
        index: Current index hint of the vehicle
        force_model: Provides the lateral grip limit
        config: Look-ahead window, speed cap and floor

    Returns:
        Target speed in m/s, within [min_target_speed, max_speed]
    """
    n = len(racing_line)
    if n < 2:
        return config.min_target_speed

    a_lat = force_model.max_lateral_accel()
    best = config.max_speed

    for k in range(config.lookahead_points):
        i = (index + k * config.lookahead_stride) % n
        p1 = racing_line[i]
        p2 = racing_line[(i + 1) % n]

        curvature = local_curvature(p1, p2, config.units_per_meter)
        if curvature == 0.0:
            continue

        # v = sqrt(a_lat / curvature)
        ceiling = math.sqrt(a_lat / max(curvature, MIN_CURVATURE))
        best = min(best, ceiling)

    return max(best, config.min_target_speed)


def pedal_command(speed: float, target: float, config: SimulationConfig) -> PedalCommand:
    """
    Throttle/brake with a hysteresis band around the target speed.

    Above the band: full brake. Below: full throttle. Inside: a small
    holding throttle.
    """
    upper = target * (1.0 + config.hysteresis)
    lower = target * (1.0 - config.hysteresis)

    if speed > upper:
        return PedalCommand(throttle=0.0, brake=1.0)
    if speed < lower:
        return PedalCommand(throttle=1.0, brake=0.0)
    return PedalCommand(throttle=config.hold_throttle, brake=0.0)
