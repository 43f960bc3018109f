"""Radius rules and driver specifications."""

from .constraints import WalkType, DegradationRuleSpec, GrowthRuleSpec
from .radius import murray_parent, murray_remainder, murray_even_split

__all__ = [
    "WalkType",
    "DegradationRuleSpec",
    "GrowthRuleSpec",
    "murray_parent",
    "murray_remainder",
    "murray_even_split",
]
