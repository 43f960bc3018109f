"""Tests for graph reduction and low-flow pruning."""

import logging
import math

import pytest

from vascular_remodel.analysis import hemodynamics
from vascular_remodel.analysis.hemodynamics import set_root_pressures
from vascular_remodel.analysis.reduction import find_leaves, update_graph, update_traverse
from vascular_remodel.core.graph import Edge
from vascular_remodel.core.types import EdgeCategory
from vascular_remodel.utils import constants as C


@pytest.fixture
def tailed(chain):
    """Chain with a two-edge dead-end tail hanging off the first interior node."""
    graph = chain.graph
    chain.tail_in = graph.add_edge(Edge((1, 0, 0), (1, 1, 0), radius=4.0, length=10.0))
    chain.tail_out = graph.add_edge(Edge((1, 1, 0), (1, 2, 0), radius=4.0, length=10.0))
    set_root_pressures(graph, chain.arteries, EdgeCategory.ARTERY)
    set_root_pressures(graph, chain.veins, EdgeCategory.VEIN)
    return chain


def test_find_leaves(tailed):
    """Only the dead-end tip of the tail is a leaf at first."""
    assert find_leaves(tailed.graph) == [tailed.tail_out]


def test_leaf_pruning(tailed):
    """Dead-end tails are ignored and disconnected down to the main path."""
    ignored = update_graph(tailed.graph)
    graph = tailed.graph

    assert ignored == 2
    assert tailed.tail_out.is_ignored
    assert tailed.tail_in.is_ignored
    assert math.isnan(graph.get_node((1, 1, 0)).pressure)
    assert math.isnan(graph.get_node((1, 2, 0)).pressure)
    assert math.isnan(graph.get_node((1, 2, 0)).oxygen)

    for edge in (tailed.artery, tailed.capillary, tailed.vein):
        assert not edge.is_ignored
        assert edge.flow > 0
    assert math.isfinite(graph.get_node((1, 0, 0)).pressure)


def test_roots_keep_pressure(tailed):
    """Reduction never overwrites a root pressure."""
    pressure = tailed.graph.get_node((0, 0, 0)).pressure
    update_graph(tailed.graph)
    assert tailed.graph.get_node((0, 0, 0)).pressure == pressure


def test_reduction_is_idempotent(tailed):
    """Reducing an already reduced graph changes nothing."""
    update_graph(tailed.graph)
    flags = {e.id: e.is_ignored for e in tailed.graph.all_edges()}
    pressures = {c: n.pressure for c, n in tailed.graph.nodes.items()}

    assert update_graph(tailed.graph) == 0
    assert {e.id: e.is_ignored for e in tailed.graph.all_edges()} == flags
    for coord, node in tailed.graph.nodes.items():
        if math.isnan(pressures[coord]):
            assert math.isnan(node.pressure)
        else:
            assert node.pressure == pytest.approx(pressures[coord], rel=1e-9)


def test_orphaned_source_is_pruned(chain):
    """An edge feeding in from a non-root source with no inflow is ignored."""
    graph = chain.graph
    orphan = graph.add_edge(Edge((2, 1, 0), (2, 0, 0), radius=4.0, length=10.0))
    set_root_pressures(graph, chain.arteries, EdgeCategory.ARTERY)
    set_root_pressures(graph, chain.veins, EdgeCategory.VEIN)

    update_graph(graph)
    assert orphan.is_ignored
    assert math.isnan(graph.get_node((2, 1, 0)).pressure)
    assert not chain.capillary.is_ignored


def test_update_traverse_keeps_healthy_flow(tailed):
    """Edges with ample flow survive."""
    graph = tailed.graph
    update_graph(graph)
    assert update_traverse(graph, [(2, 0, 0)], remove_min=False) == 0
    assert len(graph) == 5


def test_update_traverse_removes_nan_flow(tailed):
    """Disconnected edges with NaN flow are removed."""
    graph = tailed.graph
    update_graph(graph)

    removed = update_traverse(graph, [(1, 1, 0)], remove_min=False)
    assert removed == 2
    assert tailed.tail_in not in graph
    assert tailed.tail_out not in graph
    assert not graph.contains_node((1, 1, 0))
    assert tailed.capillary.flow > 0


def test_update_traverse_removes_minimum(chain):
    """With remove_min the weakest edge at a node goes and the path collapses."""
    graph = chain.graph
    set_root_pressures(graph, chain.arteries, EdgeCategory.ARTERY)
    set_root_pressures(graph, chain.veins, EdgeCategory.VEIN)
    update_graph(graph)

    removed = update_traverse(graph, [(1, 0, 0)], remove_min=True)
    assert removed == 1
    assert len(graph) == 2
    assert all(edge.is_ignored for edge in graph.all_edges())


def test_update_traverse_removes_one_global_minimum(diamond):
    """With several nodes only the weakest edge over all of them goes."""
    graph = diamond.graph
    set_root_pressures(graph, diamond.arteries, EdgeCategory.ARTERY)
    set_root_pressures(graph, diamond.veins, EdgeCategory.VEIN)
    update_graph(graph)
    upper_in, lower_in, upper_out, upper_join, lower_join = diamond.branches

    removed = update_traverse(graph, [(1, 1, 0), (2, 0, 0)], remove_min=True)
    assert removed == 1
    assert len(graph) == 6
    for edge in (lower_in, lower_join):
        assert edge not in graph or edge.is_ignored
    for edge in (diamond.artery, upper_in, upper_out, upper_join, diamond.vein):
        assert not edge.is_ignored
        assert edge.flow > 0


@pytest.fixture
def weak_inlet(chain):
    """Junction fed by the main capillary and a narrow side branch."""
    graph = chain.graph
    chain.side = graph.add_edge(Edge((1, 0, 0), (1, 1, 0), radius=5.0, length=10.0))
    chain.narrow = graph.add_edge(Edge((1, 1, 0), (2, 0, 0), radius=1.5, length=10.0))
    set_root_pressures(graph, chain.arteries, EdgeCategory.ARTERY)
    set_root_pressures(graph, chain.veins, EdgeCategory.VEIN)
    update_graph(graph)
    return chain


def test_update_traverse_removes_minor_inlet(weak_inlet):
    """An inlet below the minimum share of a two-inlet node's inflow is removed."""
    graph = weak_inlet.graph
    narrow = weak_inlet.narrow
    total = narrow.flow + weak_inlet.capillary.flow
    assert narrow.flow >= C.MINIMUM_FLOW_RATE
    assert narrow.flow / total < C.MINIMUM_FLOW_PERCENT

    removed = update_traverse(graph, [(2, 0, 0)], remove_min=False)
    assert removed == 1
    assert narrow not in graph
    assert weak_inlet.side.is_ignored
    assert math.isnan(graph.get_node((1, 1, 0)).pressure)
    for edge in (weak_inlet.artery, weak_inlet.capillary, weak_inlet.vein):
        assert not edge.is_ignored
        assert edge.flow > 0


def test_state_iteration_cap_warns(chain, monkeypatch, caplog):
    """Persistent negative flow stops at the iteration cap with a warning."""
    set_root_pressures(chain.graph, chain.arteries, EdgeCategory.ARTERY)
    set_root_pressures(chain.graph, chain.veins, EdgeCategory.VEIN)
    monkeypatch.setattr(hemodynamics, "MAX_STATE_ITERATIONS", 3)
    monkeypatch.setattr(hemodynamics, "check_for_negative_flow", lambda graph: True)

    with caplog.at_level(logging.WARNING):
        hemodynamics.calculate_current_state(chain.graph)
    assert "after 3 state updates" in caplog.text
