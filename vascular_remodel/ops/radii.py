"""
Breadth-first radius propagation from seed capillaries using Murray's law.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from ..core.graph import Edge, Graph
from ..core.types import EdgeCategory
from ..rules.radius import murray_even_split, murray_parent, murray_remainder
from ..utils.constants import CAPILLARY_RADIUS

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Direction of propagation relative to flow."""
    UPSTREAM = "upstream"
    DOWNSTREAM = "downstream"


class CalculationType(Enum):
    """
    Radius propagation mode.

    Each value is (direction, in-degree and out-degree of a junction where
    the known edge splits, category filter, pattern layout).
    """
    UPSTREAM_ALL = (Direction.UPSTREAM, 2, 1, None, False)
    UPSTREAM_ARTERIES = (Direction.UPSTREAM, 2, 1, EdgeCategory.ARTERY, False)
    UPSTREAM_PATTERN = (Direction.UPSTREAM, 2, 1, EdgeCategory.ARTERY, True)
    DOWNSTREAM_VEINS = (Direction.DOWNSTREAM, 1, 2, EdgeCategory.VEIN, False)
    DOWNSTREAM_PATTERN = (Direction.DOWNSTREAM, 1, 2, EdgeCategory.VEIN, True)

    @property
    def direction(self) -> Direction:
        return self.value[0]

    @property
    def fromcheck(self) -> int:
        return self.value[1]

    @property
    def tocheck(self) -> int:
        return self.value[2]

    @property
    def category(self) -> Optional[EdgeCategory]:
        return self.value[3]

    @property
    def is_pattern(self) -> bool:
        return self.value[4]


def _neighbors(graph: Graph, edge: Edge, direction: Direction) -> List[Edge]:
    ids = edge.edges_out if direction == Direction.DOWNSTREAM else edge.edges_in
    return graph.edges_of(ids)


def _junction_degrees(graph: Graph, edge: Edge, direction: Direction):
    junction = edge.target if direction == Direction.UPSTREAM else edge.source
    return graph.get_in_degree(junction), graph.get_out_degree(junction)


def _merge(graph: Graph, e: Edge, direction: Direction) -> None:
    opposite = e.edges_in if direction == Direction.DOWNSTREAM else e.edges_out
    siblings = graph.edges_of(opposite)
    r1, r2 = siblings[0].radius, siblings[1].radius
    if r1 != 0 and r2 != 0:
        e.radius = murray_parent(r1, r2)


def calculate_radius(graph: Graph, edge: Edge, code: CalculationType) -> List[Edge]:
    """
    Derive the radii of the edges adjacent to ``edge`` in the propagation direction.

    Parameters
    ----------
    graph : Graph
        Graph containing the edge
    edge : Edge
        Edge whose radius is (normally) known
    code : CalculationType
        Propagation mode

    Returns
    -------
    children : List[Edge]
        Edges to process in the next layer; ``[edge]`` itself when its own
        radius is still unknown
    """
    direction = code.direction
    neighbors = _neighbors(graph, edge, direction)
    if not neighbors or edge.is_visited:
        return []

    children = []
    for e in neighbors:
        in_degree, out_degree = _junction_degrees(graph, e, direction)

        if in_degree == 1 and out_degree == 1 and edge.radius != 0:
            e.radius = edge.radius
        elif in_degree == code.fromcheck and out_degree == code.tocheck:
            if e.radius == 0 and edge.radius != 0:
                split = graph.edges_of(
                    edge.edges_out if direction == Direction.DOWNSTREAM else edge.edges_in
                )
                r1, r2 = split[0].radius, split[1].radius
                if r1 == 0 and r2 != 0:
                    e.radius = murray_remainder(edge.radius, r2)
                elif r1 != 0 and r2 == 0:
                    e.radius = murray_remainder(edge.radius, r1)
                else:
                    e.radius = murray_even_split(edge.radius)
        elif in_degree == code.tocheck and out_degree == code.fromcheck:
            _merge(graph, e, direction)

        children.append(e)

    if edge.radius == 0:
        return [edge]

    edge.is_visited = True
    return children


def assign_radius(graph: Graph, edge: Edge, code: CalculationType) -> List[Edge]:
    """
    Pattern-layout variant of ``calculate_radius``.

    Split edges copy the known radius instead of sharing it by Murray's law;
    merges still combine by Murray's law.
    """
    direction = code.direction
    neighbors = _neighbors(graph, edge, direction)
    if not neighbors or edge.is_visited:
        return []

    children = []
    for e in neighbors:
        in_degree, out_degree = _junction_degrees(graph, e, direction)

        if in_degree == 1 and out_degree == 1 and edge.radius != 0:
            e.radius = edge.radius
        elif in_degree == code.fromcheck and out_degree == code.tocheck:
            e.radius = edge.radius
        elif in_degree == code.tocheck and out_degree == code.fromcheck:
            _merge(graph, e, direction)

        children.append(e)

    edge.is_visited = True
    return children


def update_radii(
    graph: Graph,
    seeds: List[Edge],
    code: CalculationType,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """
    Assign capillary radii to seed edges and propagate radii breadth first.

    Parameters
    ----------
    graph : Graph
        Graph to update in place
    seeds : list of Edge
        Seed capillary edges
    code : CalculationType
        Propagation mode
    rng : np.random.Generator, optional
        Generator for the seed radius jitter; required for pattern modes

    Raises
    ------
    ValueError
        If a pattern mode is requested without a generator
    """
    if code.is_pattern and rng is None:
        raise ValueError(f"{code.name} requires a random generator")

    for edge in graph.all_edges():
        edge.is_visited = False

    for edge in seeds:
        edge.radius = CAPILLARY_RADIUS
        if code.is_pattern:
            edge.radius *= rng.random() + 0.5

    step = assign_radius if code.is_pattern else calculate_radius

    def expand(layer: List[Edge]) -> Dict[int, Edge]:
        next_layer: Dict[int, Edge] = {}
        for edge in layer:
            for child in step(graph, edge, code):
                if code.category is None or child.category == code.category:
                    next_layer.setdefault(child.id, child)
        return next_layer

    current = expand(seeds)
    rounds = 0

    while current:
        radii = [edge.radius for edge in graph.all_edges()]
        next_layer = expand(list(current.values()))
        rounds += 1

        if next_layer.keys() == current.keys() and radii == [edge.radius for edge in graph.all_edges()]:
            logger.debug(
                f"Radius propagation stalled on {len(current)} unresolved edges "
                f"after {rounds} rounds"
            )
            break

        current = next_layer

    logger.debug(f"Radius propagation ({code.name}) finished after {rounds} rounds")
