"""
Full hemodynamic solve for a vascular graph with designated roots.
"""

import logging
import math
from typing import List, Optional

from ..core.graph import Graph, Root
from ..core.result import ErrorCode, OperationResult
from ..core.types import EdgeCategory
from .hemodynamics import Solver, check_for_negative_flow, set_root_pressures
from .perfusion import check_perfused
from .query import summarize_network
from .reduction import update_graph

logger = logging.getLogger(__name__)


def solve_hemodynamics(
    graph: Graph,
    arteries: List[Root],
    veins: List[Root],
    solver: Optional[Solver] = None,
) -> OperationResult:
    """
    Set boundary pressures, reduce the graph and solve its hemodynamics.

    Parameters
    ----------
    graph : Graph
        Graph to solve in place
    arteries : list of Root
        Arterial inlets
    veins : list of Root
        Venous outlets
    solver : callable, optional
        Linear solver ``solve(A, b, x0) -> x``; defaults to SOR

    Returns
    -------
    OperationResult
        Result with root pressures and a network summary in metadata
    """
    if not arteries or not veins:
        return OperationResult.failure(
            "Both arterial and venous roots are required",
            error_codes=[ErrorCode.NO_ROOTS.value],
        )

    artery_pressure = set_root_pressures(graph, arteries, EdgeCategory.ARTERY)
    vein_pressure = set_root_pressures(graph, veins, EdgeCategory.VEIN)

    if math.isnan(artery_pressure) or math.isnan(vein_pressure):
        result = OperationResult.failure(
            "No arterial or no venous root is left in the graph",
            error_codes=[ErrorCode.NO_ROOTS.value, ErrorCode.EDGE_NOT_FOUND.value],
            metadata={"artery_pressure": artery_pressure, "vein_pressure": vein_pressure},
        )
        logger.warning(result.message)
        return result

    ignored = update_graph(graph, solver)
    perfused = check_perfused(graph, arteries, veins)
    summary = summarize_network(graph)

    message = f"Hemodynamics solved: {summary['num_edges']} edges, {perfused} perfused"
    metadata = {
        "artery_pressure": artery_pressure,
        "vein_pressure": vein_pressure,
        "ignored_edges": ignored,
        "summary": summary,
    }

    if perfused == 0 or check_for_negative_flow(graph):
        result = OperationResult.partial_success(message, metadata=metadata)
        if perfused == 0:
            result.add_warning("No arterial root reaches a venous root")
            result.add_error("No perfused path", ErrorCode.NO_PATH)
        if check_for_negative_flow(graph):
            result.add_warning("Negative flow remains after edge reversal")
            result.add_error("Negative flow", ErrorCode.NEGATIVE_FLOW)
    else:
        result = OperationResult.success(message, metadata=metadata)

    logger.info(result.message)
    return result
