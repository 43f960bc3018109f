"""
Vascular Remodel - hemodynamics and structural remodeling of vascular graphs

A directed graph of vessel segments embedded in a tissue lattice. The
package solves nodal pressures, segment flows and wall stresses, prunes
the graph back to a valid state after every structural change, and
provides drivers that degrade and grow vessels from local tissue state.

Example Usage:
    import numpy as np
    from vascular_remodel import Graph, Edge, EdgeType, make_root, solve_hemodynamics

    graph = Graph()
    artery = graph.add_edge(Edge((0, 0, 0), (1, 0, 0), EdgeType.ARTERY, radius=5, length=10))
    capillary = graph.add_edge(Edge((1, 0, 0), (2, 0, 0), radius=5, length=10))
    vein = graph.add_edge(Edge((2, 0, 0), (3, 0, 0), EdgeType.VEIN, radius=5, length=10))

    arteries = [make_root(graph, artery, at_source=True)]
    veins = [make_root(graph, vein, at_source=False)]
    result = solve_hemodynamics(graph, arteries, veins)
"""

__version__ = "0.1.0"

from .core.types import Coordinate, EdgeCategory, EdgeType, EdgeLevel
from .core.graph import Node, Edge, Root, Graph, make_root
from .core.result import OperationResult, ErrorCode

from .analysis.hemodynamics import (
    set_root_pressures,
    calculate_pressures,
    calculate_flows,
    calculate_stresses,
    calculate_current_state,
)
from .analysis.reduction import update_graph, update_traverse
from .analysis.perfusion import check_perfused, get_path
from .analysis.solver import solve_hemodynamics

from .ops.radii import CalculationType, update_radii
from .ops.degradation import DegradationDriver
from .ops.growth import GrowthDriver

from .rules.constraints import WalkType, DegradationRuleSpec, GrowthRuleSpec

__all__ = [
    "Coordinate",
    "EdgeCategory",
    "EdgeType",
    "EdgeLevel",
    "Node",
    "Edge",
    "Root",
    "Graph",
    "make_root",
    "OperationResult",
    "ErrorCode",
    "set_root_pressures",
    "calculate_pressures",
    "calculate_flows",
    "calculate_stresses",
    "calculate_current_state",
    "update_graph",
    "update_traverse",
    "check_perfused",
    "get_path",
    "solve_hemodynamics",
    "CalculationType",
    "update_radii",
    "DegradationDriver",
    "GrowthDriver",
    "WalkType",
    "DegradationRuleSpec",
    "GrowthRuleSpec",
]
