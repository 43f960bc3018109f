"""Hemodynamics, graph reduction and perfusion analysis."""

from .linear import sor, direct
from .hemodynamics import (
    calculate_viscosity,
    calculate_coefficient,
    get_coefficient,
    calculate_local_flow,
    calculate_root_pressure,
    calculate_thickness,
    get_partial_pressure,
    get_saturation,
    get_total_oxygen,
    set_root_pressures,
    set_leaf_pressures,
    calculate_pressures,
    reverse_pressures,
    calculate_flows,
    calculate_stresses,
    check_for_negative_flow,
    calculate_current_state,
)
from .reduction import find_leaves, update_graph, remove_edge, update_traverse
from .perfusion import path, get_path, traverse, check_perfused
from .query import get_edges_by_type, get_leaves_by_type, summarize_network
from .solver import solve_hemodynamics

__all__ = [
    "sor",
    "direct",
    "calculate_viscosity",
    "calculate_coefficient",
    "get_coefficient",
    "calculate_local_flow",
    "calculate_root_pressure",
    "calculate_thickness",
    "get_partial_pressure",
    "get_saturation",
    "get_total_oxygen",
    "set_root_pressures",
    "set_leaf_pressures",
    "calculate_pressures",
    "reverse_pressures",
    "calculate_flows",
    "calculate_stresses",
    "check_for_negative_flow",
    "calculate_current_state",
    "find_leaves",
    "update_graph",
    "remove_edge",
    "update_traverse",
    "path",
    "get_path",
    "traverse",
    "check_perfused",
    "get_edges_by_type",
    "get_leaves_by_type",
    "summarize_network",
    "solve_hemodynamics",
]
