"""Tests for the graph ADT and its adjacency bookkeeping."""

import pytest

from vascular_remodel.core.graph import Edge, Graph, Node
from vascular_remodel.core.types import Coordinate, EdgeCategory, EdgeType


def _assert_adjacency(graph):
    for edge in graph.all_edges():
        assert edge in graph.get_edges_out(edge.source)
        assert edge in graph.get_edges_in(edge.target)
        assert set(edge.edges_out) == {e.id for e in graph.get_edges_out(edge.target)} - {edge.id}
        assert set(edge.edges_in) == {e.id for e in graph.get_edges_in(edge.source)} - {edge.id}


@pytest.fixture
def fork():
    graph = Graph()
    a = graph.add_edge(Edge((0, 0, 0), (1, 0, 0)))
    b = graph.add_edge(Edge((1, 0, 0), (2, 0, 0)))
    c = graph.add_edge(Edge((1, 0, 0), (1, 1, 0)))
    return graph, a, b, c


def test_node_identity_is_coordinate():
    """Nodes with equal coordinates are interchangeable."""
    n1 = Node((1, 2, 3))
    n2 = Node(Coordinate(1, 2, 3), pressure=40.0)
    assert n1 == n2
    assert hash(n1) == hash(n2)
    assert len({n1, n2}) == 1
    assert Node((0, 0, 0)) < n1


def test_edge_ids_are_sequential(fork):
    """Edges get stable sequential ids."""
    graph, a, b, c = fork
    assert [a.id, b.id, c.id] == [0, 1, 2]
    assert graph.add_edge(Edge((2, 0, 0), (3, 0, 0))).id == 3


def test_explicit_edge_ids(fork):
    """Explicit ids are kept, reserved, and must be unique."""
    graph, *_ = fork
    assert graph.add_edge(Edge((2, 0, 0), (3, 0, 0), id=10)).id == 10
    assert graph.add_edge(Edge((3, 0, 0), (4, 0, 0))).id == 11
    with pytest.raises(ValueError):
        graph.add_edge(Edge((4, 0, 0), (5, 0, 0), id=10))


def test_adjacency_invariant_after_add(fork):
    """Every edge sits in its source's out-set and its target's in-set."""
    graph, a, b, c = fork
    _assert_adjacency(graph)
    assert a.edges_out == [b.id, c.id]
    assert b.edges_in == [a.id]
    assert c.edges_in == [a.id]


def test_remove_edge_updates_maps_and_links(fork):
    """Removing an edge clears it from both maps and every link."""
    graph, a, b, c = fork
    graph.remove_edge(b)

    assert b not in graph
    assert b not in graph.get_edges_out((1, 0, 0))
    assert a.edges_out == [c.id]
    assert not graph.contains_node((2, 0, 0))
    assert graph.contains_node((1, 0, 0))
    _assert_adjacency(graph)


def test_remove_unknown_edge_raises(fork):
    """Removing an edge that is not in the graph raises KeyError."""
    graph, *_ = fork
    with pytest.raises(KeyError):
        graph.remove_edge(Edge((5, 5, 0), (6, 5, 0)))


def test_missing_node_queries():
    """Queries on unknown nodes behave as zero degree."""
    graph = Graph()
    assert graph.get_in_degree((9, 9, 9)) == 0
    assert graph.get_out_degree((9, 9, 9)) == 0
    assert graph.get_degree((9, 9, 9)) == 0
    assert graph.get_edges_in((9, 9, 9)) == []
    assert graph.get_edges_out((9, 9, 9)) == []
    assert graph.get_node((9, 9, 9)) is None


def test_has_edge_is_directed(fork):
    """has_edge follows edge direction."""
    graph, *_ = fork
    assert graph.has_edge((0, 0, 0), (1, 0, 0))
    assert not graph.has_edge((1, 0, 0), (0, 0, 0))
    assert graph.has_edge(Node((1, 0, 0)), Node((1, 1, 0)))


def test_reverse_edge_keeps_state(fork):
    """Reversing swaps endpoints and keeps id and fields."""
    graph, a, b, c = fork
    b.radius = 7.5
    graph.reverse_edge(b)

    assert b.source == (2, 0, 0) and b.target == (1, 0, 0)
    assert b.id == 1
    assert b.radius == 7.5
    assert graph.get_in_degree((1, 0, 0)) == 2
    assert graph.get_out_degree((1, 0, 0)) == 1
    _assert_adjacency(graph)


def test_node_records_are_shared(fork):
    """Edges meeting at a coordinate share one node record."""
    graph, a, b, c = fork
    graph.get_target(a).pressure = 42.0
    assert graph.get_source(b).pressure == 42.0
    assert graph.get_source(c) is graph.get_target(a)


def test_merge_nodes_rebuilds_adjacency(fork):
    """Endpoints changed outside the graph become visible after merge."""
    graph, a, b, c = fork
    c.target = Coordinate(2, 0, 0)
    graph.merge_nodes()

    assert graph.get_in_degree((2, 0, 0)) == 2
    assert not graph.contains_node((1, 1, 0))
    _assert_adjacency(graph)


def test_subgraph_degrees(fork):
    """Subgraphs share edges and count only the kept ones."""
    graph, a, b, c = fork
    sub = graph.get_subgraph(lambda edge: edge is not c)

    assert len(sub) == 2
    assert sub.get_out_degree((1, 0, 0)) == 1
    assert graph.get_out_degree((1, 0, 0)) == 2
    assert sub.edges[a.id] is a
    assert sub.get_node((1, 0, 0)) is graph.get_node((1, 0, 0))


def test_edge_category():
    """Edge types map onto coarse categories."""
    assert Edge((0, 0, 0), (1, 0, 0), EdgeType.ARTERIOLE).category == EdgeCategory.ARTERY
    assert Edge((0, 0, 0), (1, 0, 0), EdgeType.VENULE).category == EdgeCategory.VEIN
    assert Edge((0, 0, 0), (1, 0, 0), EdgeType.ANGIOGENIC).category == EdgeCategory.CAPILLARY
