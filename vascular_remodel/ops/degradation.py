"""
Vessel wall degradation next to non-healthy tissue.
"""

import logging
import math
from typing import Optional

from ..analysis.hemodynamics import Solver, calculate_stresses
from ..analysis.reduction import remove_edge, update_graph
from ..core.graph import Graph
from ..core.interfaces import AgentGrid, LocationMapper
from ..core.result import OperationResult
from ..rules.constraints import DegradationRuleSpec
from ..utils.constants import MINIMUM_WALL_THICKNESS

logger = logging.getLogger(__name__)


class DegradationDriver:
    """
    Thins vessel walls under non-healthy agents and removes collapsed vessels.

    Parameters
    ----------
    graph : Graph
        Graph to remodel in place
    mapper : LocationMapper
        Maps edge span coordinates to grid locations
    spec : DegradationRuleSpec
        Degradation rates and thresholds
    healthy_category : str
        Agent category that does not degrade walls
    solver : callable, optional
        Linear solver used when the graph is re-solved
    """

    def __init__(
        self,
        graph: Graph,
        mapper: LocationMapper,
        spec: Optional[DegradationRuleSpec] = None,
        healthy_category: str = "healthy",
        solver: Optional[Solver] = None,
    ):
        self.graph = graph
        self.mapper = mapper
        self.spec = spec if spec is not None else DegradationRuleSpec()
        self.healthy_category = healthy_category
        self.solver = solver

    def step(self, grid: AgentGrid) -> OperationResult:
        """
        Degrade every edge touching a non-healthy agent.

        Walls lose ``rate / 60`` per step down to the minimum thickness. An
        edge at minimum thickness whose shear is below the threshold, or
        NaN, is removed. Removal triggers graph reduction; otherwise only
        stresses are recomputed.

        Parameters
        ----------
        grid : AgentGrid
            Agents occupying the lattice

        Returns
        -------
        OperationResult
            Result with 'degraded_edges' and 'removed_edges' in metadata
        """
        degraded = 0
        removed = []

        for edge in self.graph.all_edges():
            locations = []
            for coord in edge.span:
                location = self.mapper.get_location(coord)
                if location is not None and location not in locations:
                    locations.append(location)
            if not locations:
                continue

            agents = grid.get_objects_at_locations(locations)
            if all(agent.category == self.healthy_category for agent in agents):
                continue

            edge.wall = max(edge.wall - self.spec.rate / 60, MINIMUM_WALL_THICKNESS)
            degraded += 1

            collapsed = edge.wall <= MINIMUM_WALL_THICKNESS
            if collapsed and (edge.shear < self.spec.shear_threshold or math.isnan(edge.shear)):
                remove_edge(self.graph, edge)
                removed.append(edge.id)

        if removed:
            logger.debug(f"Reducing graph after removing {len(removed)} collapsed edges")
            update_graph(self.graph, self.solver)
        else:
            calculate_stresses(self.graph)

        return OperationResult.success(
            f"Degraded {degraded} edges, removed {len(removed)}",
            metadata={"degraded_edges": degraded, "removed_edges": removed},
        )

    def to_dict(self) -> dict:
        """Flat summary of the driver configuration."""
        return {
            "type": "degradation",
            "healthy_category": self.healthy_category,
            **self.spec.to_dict(),
        }
