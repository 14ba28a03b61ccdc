"""Vehicle physics."""

from looprace.physics.vehicle import ForceModel, VehicleSpecs, VehicleState
from looprace.physics.performance import PerformanceEstimate, estimate_performance

__all__ = ["ForceModel", "VehicleSpecs", "VehicleState", "PerformanceEstimate", "estimate_performance"]
