"""Tests for the full hemodynamic solve."""

import math

import pytest

from vascular_remodel.analysis.linear import direct
from vascular_remodel.analysis.reduction import remove_edge, update_graph
from vascular_remodel.analysis.solver import solve_hemodynamics
from vascular_remodel.core.graph import Edge, Graph, make_root
from vascular_remodel.core.result import ErrorCode, OperationStatus
from vascular_remodel.core.types import EdgeType


def test_solve_chain(chain):
    """A connected chain is solved, perfused and flows downhill."""
    result = solve_hemodynamics(chain.graph, chain.arteries, chain.veins)

    assert result.is_success()
    assert result.metadata["artery_pressure"] > result.metadata["vein_pressure"]
    assert result.metadata["ignored_edges"] == 0
    assert result.metadata["summary"]["num_perfused"] == 3
    for edge in chain.graph.all_edges():
        assert edge.is_perfused
        assert edge.flow > 0


def test_solve_with_direct_solver(diamond):
    """Any solver with the SOR signature can be plugged in."""
    result = solve_hemodynamics(diamond.graph, diamond.arteries, diamond.veins, solver=direct)
    assert result.is_success()
    inflow = diamond.artery.flow
    assert diamond.vein.flow == pytest.approx(inflow, rel=1e-6)


def test_missing_roots(chain):
    """Solving without roots of both kinds fails."""
    result = solve_hemodynamics(chain.graph, [], chain.veins)
    assert result.is_failure()
    assert ErrorCode.NO_ROOTS.value in result.error_codes


def test_no_path_is_partial():
    """Roots that cannot reach each other give a partial result."""
    graph = Graph()
    artery = graph.add_edge(Edge((0, 0, 0), (1, 0, 0), EdgeType.ARTERY, radius=5.0, length=10.0))
    vein = graph.add_edge(Edge((3, 0, 0), (4, 0, 0), EdgeType.VEIN, radius=5.0, length=10.0))

    result = solve_hemodynamics(
        graph,
        [make_root(graph, artery)],
        [make_root(graph, vein, at_source=False)],
    )

    assert result.status == OperationStatus.PARTIAL_SUCCESS
    assert ErrorCode.NO_PATH.value in result.error_codes
    assert result.warnings
    assert artery.is_ignored and vein.is_ignored


def test_resolve_after_root_edge_removed(chain):
    """Losing a root's bounding edge fails the next solve instead of raising."""
    graph = chain.graph
    solve_hemodynamics(graph, chain.arteries, chain.veins)
    remove_edge(graph, chain.artery)
    update_graph(graph)

    result = solve_hemodynamics(graph, chain.arteries, chain.veins)
    assert result.is_failure()
    assert ErrorCode.NO_ROOTS.value in result.error_codes
    assert math.isnan(result.metadata["artery_pressure"])


def test_result_serialization(chain):
    """Results flatten to plain dictionaries."""
    data = solve_hemodynamics(chain.graph, chain.arteries, chain.veins).to_dict()
    assert data["status"] == "success"
    assert data["error_codes"] == []
    assert data["metadata"]["summary"]["num_edges"] == 3
