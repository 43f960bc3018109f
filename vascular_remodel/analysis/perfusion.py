"""
Shortest paths between roots and perfusion marking.
"""

import heapq
import logging
from typing import List, Optional

from ..core.graph import Edge, Graph, NodeKey, Root, node_key

logger = logging.getLogger(__name__)


def _reset_scratch(graph: Graph) -> None:
    for node in graph.all_nodes():
        node.distance = float("inf")
        node.prev = None


def path(graph: Graph, start: NodeKey, end: NodeKey) -> None:
    """
    Run Dijkstra's algorithm from ``start`` with unit edge weights.

    Fills ``distance`` and ``prev`` on the node records; the search stops
    once ``end`` is settled. Scratch state is reset first.

    Parameters
    ----------
    graph : Graph
        Graph to search along edge directions
    start : Node or Coordinate
        Start node
    end : Node or Coordinate
        End node
    """
    _reset_scratch(graph)

    start = node_key(start)
    end = node_key(end)
    if start not in graph.nodes:
        return

    graph.nodes[start].distance = 0
    heap = [(0, start)]
    settled = set()

    while heap:
        distance, coord = heapq.heappop(heap)
        if coord in settled:
            continue
        settled.add(coord)
        if coord == end:
            break

        for edge in graph.get_edges_out(coord):
            neighbor = graph.nodes[edge.target]
            if edge.target in settled:
                continue
            if distance + 1 < neighbor.distance:
                neighbor.distance = distance + 1
                neighbor.prev = coord
                heapq.heappush(heap, (distance + 1, edge.target))


def _walk_back(graph: Graph, start: NodeKey, end: NodeKey) -> Optional[List[Edge]]:
    start = node_key(start)
    node = graph.get_node(end)
    edges = []

    while node is not None and node.coordinate != start:
        if node.prev is None:
            return None
        step = next(
            (edge for edge in graph.get_edges_in(node) if edge.source == node.prev),
            None,
        )
        if step is None:
            return None
        edges.append(step)
        node = graph.get_node(node.prev)

    if node is None:
        return None

    edges.reverse()
    return edges


def get_path(graph: Graph, start: NodeKey, end: NodeKey) -> Optional[List[Edge]]:
    """
    Get the shortest edge path from ``start`` to ``end``.

    Returns
    -------
    list of Edge or None
        Edges in traversal order, or None if ``end`` is unreachable
    """
    path(graph, start, end)
    edges = _walk_back(graph, start, end)
    _reset_scratch(graph)
    return edges


def traverse(graph: Graph, start: NodeKey) -> int:
    """
    Mark every edge reachable downstream of ``start`` as perfused.

    Ignored edges are not followed.

    Returns
    -------
    int
        Number of edges newly marked
    """
    marked = 0
    stack = [node_key(start)]
    seen = {stack[0]}

    while stack:
        coord = stack.pop()
        for edge in graph.get_edges_out(coord):
            if edge.is_ignored:
                continue
            if not edge.is_perfused:
                edge.is_perfused = True
                marked += 1
            if edge.target not in seen:
                seen.add(edge.target)
                stack.append(edge.target)

    return marked


def check_perfused(graph: Graph, arteries: List[Root], veins: List[Root]) -> int:
    """
    Mark edges on artery-to-vein paths and everything downstream of them.

    Perfusion flags are reset first. Each artery/vein pair contributes its
    shortest path, then perfusion is propagated forward from every
    perfused edge.

    Parameters
    ----------
    graph : Graph
        Graph to mark
    arteries : list of Root
        Arterial inlets
    veins : list of Root
        Venous outlets

    Returns
    -------
    int
        Number of perfused edges
    """
    for edge in graph.all_edges():
        edge.is_perfused = False

    for artery in arteries:
        for vein in veins:
            path(graph, artery.coordinate, vein.coordinate)
            edges = _walk_back(graph, artery.coordinate, vein.coordinate)
            if edges is None:
                logger.debug(f"No path from {artery.coordinate} to {vein.coordinate}")
                continue
            for edge in edges:
                edge.is_perfused = True

    for edge in [edge for edge in graph.all_edges() if edge.is_perfused]:
        traverse(graph, edge.target)

    _reset_scratch(graph)

    perfused = sum(1 for edge in graph.all_edges() if edge.is_perfused)
    logger.debug(f"{perfused} of {len(graph)} edges perfused")
    return perfused
