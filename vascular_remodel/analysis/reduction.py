"""
Graph reduction: keep the graph structurally valid for the pressure solver.

Dangling edges are never an error. After every structural change the
reduction strips them to a fixed point and the hemodynamic state is
recomputed on what remains.
"""

import logging
import math
from typing import Iterable, List, Optional

from ..core.graph import Edge, Graph, NodeKey, node_key
from ..utils import constants as C
from .hemodynamics import Solver, calculate_current_state

logger = logging.getLogger(__name__)


def find_leaves(graph: Graph) -> List[Edge]:
    """
    Find dead-end and orphaned edges.

    An edge is a leaf when its target has no outflow and is not a root,
    or its source has no inflow and is not a root.
    """
    leaves = []
    for edge in graph.all_edges():
        source = graph.get_source(edge)
        target = graph.get_target(edge)
        if graph.get_out_degree(edge.target) == 0 and not target.is_root:
            leaves.append(edge)
        elif graph.get_in_degree(edge.source) == 0 and not source.is_root:
            leaves.append(edge)
    return leaves


def _disconnect(graph: Graph, edge: Edge) -> None:
    for node in (graph.get_source(edge), graph.get_target(edge)):
        if not node.is_root:
            node.pressure = float("nan")


def update_graph(graph: Graph, solver: Optional[Solver] = None) -> int:
    """
    Ignore leaf edges until none remain, then recompute the hemodynamics.

    Each pass works on the edges not yet ignored, so the loop ends once a
    pass finds no leaves. Ignored edges stay ignored. Nodes still at NaN
    pressure afterwards get NaN oxygen.

    Parameters
    ----------
    graph : Graph
        Graph to reduce in place
    solver : callable, optional
        Linear solver passed on to the pressure computation

    Returns
    -------
    int
        Number of edges newly marked ignored
    """
    current = graph.get_subgraph(lambda edge: not edge.is_ignored)
    ignored = 0

    while True:
        leaves = find_leaves(current)
        if not leaves:
            break

        for edge in leaves:
            edge.is_ignored = True
            _disconnect(graph, edge)
        ignored += len(leaves)

        current = current.get_subgraph(lambda edge: not edge.is_ignored)

    if ignored:
        logger.debug(f"Graph reduction ignored {ignored} edges")

    calculate_current_state(graph, solver)

    for node in graph.all_nodes():
        if math.isnan(node.pressure):
            node.oxygen = float("nan")

    return ignored


def remove_edge(graph: Graph, edge: Edge) -> None:
    """Remove an edge from the graph, disconnecting its non-root endpoints."""
    logger.info(f"Removing edge {edge.id} {edge.source} -> {edge.target}")
    _disconnect(graph, edge)
    graph.remove_edge(edge)


def update_traverse(
    graph: Graph,
    nodes: Iterable[NodeKey],
    remove_min: bool,
    solver: Optional[Solver] = None,
) -> int:
    """
    Remove implausibly small flow paths around the given nodes.

    For each node, edges with NaN flow or flow below the absolute floor are
    removed, as is an inflow edge carrying less than the minimum share of
    a two-inlet node's inflow. With ``remove_min`` the single lowest-flow
    edge seen across all inspected nodes is removed once at the end.
    Every removal is followed by a full graph reduction.

    Parameters
    ----------
    graph : Graph
        Graph to prune in place
    nodes : iterable
        Nodes (or coordinates) to inspect
    remove_min : bool
        Also remove the minimum-flow edge over all inspected nodes
    solver : callable, optional
        Linear solver passed on to the pressure computation

    Returns
    -------
    int
        Number of edges removed
    """
    removed = 0
    min_edge = None
    min_flow = math.inf

    for node in nodes:
        coord = node_key(node)
        if not graph.contains_node(coord):
            continue

        for edge in graph.get_edges_out(coord) + graph.get_edges_in(coord):
            if edge not in graph:
                continue
            if math.isnan(edge.flow) or edge.flow < C.MINIMUM_FLOW_RATE:
                remove_edge(graph, edge)
                update_graph(graph, solver)
                removed += 1
            elif edge.flow < min_flow:
                min_flow = edge.flow
                min_edge = edge

        inflow = graph.get_edges_in(coord)
        if len(inflow) == 2:
            total = inflow[0].flow + inflow[1].flow
            for edge in inflow:
                if total > 0 and edge.flow / total < C.MINIMUM_FLOW_PERCENT:
                    remove_edge(graph, edge)
                    update_graph(graph, solver)
                    removed += 1
                    break

    if remove_min and min_edge is not None and min_edge in graph:
        remove_edge(graph, min_edge)
        update_graph(graph, solver)
        removed += 1

    return removed
