"""
Angiogenic sprouting toward growth-factor gradients.
"""

import logging
from typing import Dict, List, Optional, Set

import numpy as np

from ..analysis.hemodynamics import Solver, calculate_stresses, calculate_thickness
from ..analysis.reduction import update_graph
from ..core.graph import Edge, Graph, Node
from ..core.interfaces import LatticeGeometry, ScalarField
from ..core.result import OperationResult
from ..core.types import Coordinate, EdgeType
from ..rules.constraints import GrowthRuleSpec, WalkType
from ..utils.constants import CAPILLARY_RADIUS

logger = logging.getLogger(__name__)


def choose_direction(
    values: List[List[float]],
    skip: Set[int],
    walk_type: WalkType,
    rng: np.random.Generator,
) -> Optional[int]:
    """
    Pick a growth direction from per-direction field samples.

    Parameters
    ----------
    values : list of list of float
        Field samples along each candidate direction; empty when the
        direction leaves the lattice
    skip : set of int
        Directions already taken by incident edges
    walk_type : WalkType
        Selection policy
    rng : np.random.Generator
        Random generator for RANDOM and BIASED

    Returns
    -------
    int or None
        Index of the chosen direction, None when no direction qualifies
    """
    allowed = [i for i, v in enumerate(values) if v and i not in skip]
    if not allowed:
        return None

    if walk_type == WalkType.RANDOM:
        return allowed[int(rng.integers(len(allowed)))]

    weights = np.zeros(len(values))
    for i in allowed:
        weights[i] = max(float(np.mean(values[i])), 0.0)

    if walk_type == WalkType.BIASED:
        total = weights.sum()
        if total <= 0:
            return None
        return int(rng.choice(len(weights), p=weights / total))

    return max(allowed, key=lambda i: weights[i])


class GrowthDriver:
    """
    Extends sprouts from vessel nodes toward high growth-factor signal.

    Parameters
    ----------
    graph : Graph
        Graph to remodel in place
    geometry : LatticeGeometry
        Lattice offsets, spans, bounds and lengths
    spec : GrowthRuleSpec
        Growth rates, threshold and walk policy
    solver : callable, optional
        Linear solver used when the graph is re-solved
    """

    def __init__(
        self,
        graph: Graph,
        geometry: LatticeGeometry,
        spec: Optional[GrowthRuleSpec] = None,
        solver: Optional[Solver] = None,
    ):
        self.graph = graph
        self.geometry = geometry
        self.spec = spec if spec is not None else GrowthRuleSpec()
        self.solver = solver
        self.interval = self.spec.interval(geometry.edge_size)
        self.cooldown = 60 * geometry.edge_size / self.spec.migration_rate
        self.max_edges = max(1, int(self.spec.max_length // geometry.edge_size))
        self.sprouts: Dict[Coordinate, List[int]] = {}

    def get_candidates(self, tick: float) -> List[Coordinate]:
        """
        Nodes that may grow this step.

        Active tips always qualify. Other nodes qualify once their cooldown
        has passed if they are not roots, have not sprouted before, have
        degree below 3 and touch no ignored edge.
        """
        candidates = []
        seen = set()

        for edge in self.graph.all_edges():
            for coord in (edge.source, edge.target):
                if coord in seen:
                    continue
                seen.add(coord)

                node = self.graph.nodes[coord]
                if node.is_tip:
                    candidates.append(coord)
                    continue
                if node.is_root or node.is_sprout:
                    continue
                if tick - node.last_update < self.cooldown:
                    continue
                if self.graph.get_degree(coord) >= 3:
                    continue
                incident = self.graph.get_edges_in(coord) + self.graph.get_edges_out(coord)
                if any(e.is_ignored for e in incident):
                    continue
                candidates.append(coord)

        return candidates

    def sample(self, coord: Coordinate, field: ScalarField) -> List[List[float]]:
        """Sample the field along the span toward each candidate offset."""
        values = []
        for offset in self.geometry.offsets:
            target = coord.offset(offset)
            if not self.geometry.in_bounds(target):
                values.append([])
                continue
            span = self.geometry.get_span(coord, target)
            values.append([field.get_value(c) for c in span])
        return values

    def occupied_directions(self, coord: Coordinate) -> Set[int]:
        """Indices of offsets already covered by edges at a node."""
        neighbors = [e.target for e in self.graph.get_edges_out(coord)]
        neighbors += [e.source for e in self.graph.get_edges_in(coord)]
        deltas = {coord.delta_to(n) for n in neighbors}
        return {
            i for i, offset in enumerate(self.geometry.offsets)
            if Coordinate.from_tuple(offset) in deltas
        }

    def step(self, field: ScalarField, rng: np.random.Generator, tick: float) -> OperationResult:
        """
        Grow sprouts for one step.

        Parameters
        ----------
        field : ScalarField
            Growth-factor concentration
        rng : np.random.Generator
            Shared simulation generator
        tick : float
            Current simulation time (min)

        Returns
        -------
        OperationResult
            Result with 'added_edges' and 'anastomoses' in metadata
        """
        added = []
        anastomoses = 0

        for coord in self.get_candidates(tick):
            node = self.graph.get_node(coord)
            if node is None or self.graph.get_degree(coord) >= 3:
                continue

            if node.is_tip and node.sprout_length >= self.max_edges:
                logger.debug(f"Sprout tip {coord} reached maximum length")
                node.is_tip = False
                node.is_sprout = True
                self.sprouts.pop(node.sprout_origin, None)
                continue

            values = self.sample(coord, field)
            samples = [v for direction in values for v in direction]
            signal = float(np.mean(samples)) if samples else 0.0
            if not node.is_tip and signal <= self.spec.vegf_threshold:
                continue

            skip = self.occupied_directions(coord)
            direction = choose_direction(values, skip, self.spec.walk_type, rng)
            if direction is None:
                continue

            target = coord.offset(self.geometry.offsets[direction])
            edge = self._extend(node, target, tick)
            if edge is None:
                continue

            added.append(edge.id)
            if edge.is_anastomotic:
                anastomoses += 1

        if added:
            update_graph(self.graph, self.solver)
        else:
            calculate_stresses(self.graph)

        return OperationResult.success(
            f"Added {len(added)} sprout edges, {anastomoses} anastomoses",
            metadata={"added_edges": added, "anastomoses": anastomoses},
        )

    def _new_edge(self, source: Coordinate, target: Coordinate) -> Edge:
        edge = Edge(
            source=source,
            target=target,
            edge_type=EdgeType.ANGIOGENIC,
            radius=CAPILLARY_RADIUS,
            wall=calculate_thickness(CAPILLARY_RADIUS),
            length=self.geometry.get_length(source, target),
            span=self.geometry.get_span(source, target),
            is_angiogenic=True,
        )
        return self.graph.add_edge(edge)

    def _extend(self, node: Node, target: Coordinate, tick: float) -> Optional[Edge]:
        if not self.geometry.in_bounds(target):
            return None

        coord = node.coordinate
        origin = node.sprout_origin if node.is_tip else coord

        existing = self.graph.get_node(target)
        if existing is not None:
            if target == origin or existing.sprout_origin == origin:
                return None
            if (self.graph.get_degree(target) > 2
                    or self.graph.get_in_degree(target) == 0
                    or self.graph.get_out_degree(target) == 0):
                return None

            edge = self._new_edge(coord, target)
            edge.is_anastomotic = True
            for chain_edge in self.graph.edges_of(self.sprouts.pop(origin, [])):
                chain_edge.is_ignored = False

            node.is_tip = False
            node.is_sprout = True
            node.last_update = tick
            logger.info(f"Anastomosis from sprout {origin} at {target}")
            return edge

        edge = self._new_edge(coord, target)
        self.sprouts.setdefault(origin, []).append(edge.id)

        new_node = self.graph.get_node(target)
        new_node.is_tip = True
        new_node.sprout_origin = origin
        new_node.sprout_length = node.sprout_length + 1 if node.is_tip else 1
        new_node.last_update = tick

        node.is_tip = False
        node.is_sprout = True
        node.last_update = tick
        logger.info(f"Added sprout edge {coord} -> {target}")
        return edge

    def to_dict(self) -> dict:
        """Flat summary of the driver configuration."""
        return {
            "type": "growth",
            "interval": self.interval,
            **self.spec.to_dict(),
        }
