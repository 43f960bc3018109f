"""Structural operations: radius propagation, degradation and growth."""

from .radii import CalculationType, Direction, calculate_radius, assign_radius, update_radii
from .degradation import DegradationDriver
from .growth import GrowthDriver, choose_direction

__all__ = [
    "CalculationType",
    "Direction",
    "calculate_radius",
    "assign_radius",
    "update_radii",
    "DegradationDriver",
    "GrowthDriver",
    "choose_direction",
]
