"""
Query and summary functions.
"""

import math
from typing import Dict, Iterable, List, Optional

import networkx as nx
import numpy as np

from ..core.graph import Edge, Graph
from ..core.types import EdgeLevel, EdgeType


def get_edges_by_type(
    graph: Graph,
    types: Iterable[EdgeType],
    level: Optional[EdgeLevel] = None,
) -> List[Edge]:
    """
    Get all edges of the given types.

    Parameters
    ----------
    graph : Graph
        Graph to query
    types : iterable of EdgeType
        Types to include
    level : EdgeLevel, optional
        Restrict to one resolution level

    Returns
    -------
    edges : List[Edge]
        Matching edges in graph order
    """
    types = set(types)
    return [
        edge for edge in graph.all_edges()
        if edge.edge_type in types and (level is None or edge.level == level)
    ]


def get_leaves_by_type(graph: Graph, types: Iterable[EdgeType]) -> List[Edge]:
    """Get edges of the given types whose target has no outflow."""
    types = set(types)
    return [
        edge for edge in graph.all_edges()
        if edge.edge_type in types and graph.get_out_degree(edge.target) == 0
    ]


def summarize_network(graph: Graph) -> Dict:
    """
    Summarize the structural and hemodynamic state of a graph.

    Returns
    -------
    summary : dict
        Edge and node counts, perfusion, flow and pressure statistics and
        the number of weakly connected components among active edges
    """
    from ..adapters.networkx_adapter import to_networkx_graph

    edges = graph.all_edges()
    active = [edge for edge in edges if not edge.is_ignored]

    flows = np.array([edge.flow for edge in active], dtype=float)
    flows = flows[np.isfinite(flows)]
    pressures = np.array([node.pressure for node in graph.all_nodes()], dtype=float)
    finite_pressures = pressures[np.isfinite(pressures)]

    G = to_networkx_graph(graph, include_ignored=False)
    components = nx.number_weakly_connected_components(G) if len(G) else 0

    return {
        "num_edges": len(edges),
        "num_nodes": len(graph.nodes),
        "num_ignored": len(edges) - len(active),
        "num_perfused": sum(1 for edge in edges if edge.is_perfused),
        "num_disconnected_nodes": int(np.isnan(pressures).sum()),
        "num_components": components,
        "total_root_inflow": float(sum(
            edge.flow for edge in active
            if edge.is_root and graph.get_source(edge).is_root
            and not math.isnan(edge.flow)
        )),
        "max_flow": float(flows.max()) if len(flows) else 0.0,
        "min_pressure": float(finite_pressures.min()) if len(finite_pressures) else float("nan"),
        "max_pressure": float(finite_pressures.max()) if len(finite_pressures) else float("nan"),
    }
