"""Shared fixtures and fake simulation collaborators."""

import math
from types import SimpleNamespace

import pytest

from vascular_remodel.core.graph import Edge, Graph, make_root
from vascular_remodel.core.interfaces import (
    Agent,
    AgentGrid,
    LatticeGeometry,
    LocationMapper,
    ScalarField,
)
from vascular_remodel.core.types import Coordinate, EdgeType


class FakeAgent(Agent):
    def __init__(self, category):
        self._category = category

    @property
    def category(self):
        return self._category


class IdentityMapper(LocationMapper):
    """Every coordinate is its own location."""

    def get_location(self, coordinate):
        return tuple(coordinate)


class DictGrid(AgentGrid):
    def __init__(self, agents=None):
        self.agents = agents or {}

    def get_objects_at_locations(self, locations):
        return [agent for loc in locations for agent in self.agents.get(loc, [])]


class DictField(ScalarField):
    def __init__(self, values=None, default=0.0):
        self.values = values or {}
        self.default = default

    def get_value(self, coordinate):
        return self.values.get(tuple(coordinate), self.default)


class PlanarGeometry(LatticeGeometry):
    """Square lattice in the z = 0 plane with four axis offsets."""

    def __init__(self, width=6, height=6, edge_size=10.0):
        self.width = width
        self.height = height
        self._edge_size = edge_size

    @property
    def offsets(self):
        return [
            Coordinate(1, 0, 0),
            Coordinate(-1, 0, 0),
            Coordinate(0, 1, 0),
            Coordinate(0, -1, 0),
        ]

    @property
    def edge_size(self):
        return self._edge_size

    def in_bounds(self, coordinate):
        x, y, z = coordinate
        return 0 <= x < self.width and 0 <= y < self.height and z == 0

    def get_span(self, source, target):
        return [Coordinate.from_tuple(source), Coordinate.from_tuple(target)]

    def get_length(self, source, target):
        return self._edge_size * math.dist(source, target)


def add(graph, source, target, edge_type=EdgeType.CAPILLARY, radius=5.0, length=10.0, **kwargs):
    return graph.add_edge(
        Edge(source, target, edge_type, radius=radius, length=length, **kwargs)
    )


@pytest.fixture
def chain():
    """Artery root -> capillary -> vein root, radius 5 and length 10 throughout."""
    graph = Graph()
    artery = add(graph, (0, 0, 0), (1, 0, 0), EdgeType.ARTERY, wall=1.0)
    capillary = add(graph, (1, 0, 0), (2, 0, 0), wall=1.0, span=[(1, 0, 0), (2, 0, 0)])
    vein = add(graph, (2, 0, 0), (3, 0, 0), EdgeType.VEIN, wall=1.0)

    return SimpleNamespace(
        graph=graph,
        artery=artery,
        capillary=capillary,
        vein=vein,
        arteries=[make_root(graph, artery, at_source=True)],
        veins=[make_root(graph, vein, at_source=False)],
    )


@pytest.fixture
def diamond():
    """Artery root splitting into two unequal branches that rejoin before a vein root."""
    graph = Graph()
    artery = add(graph, (0, 0, 0), (1, 0, 0), EdgeType.ARTERY, radius=8.0)
    upper_in = add(graph, (1, 0, 0), (1, 1, 0), radius=6.0)
    lower_in = add(graph, (1, 0, 0), (2, 0, 0), radius=4.0, length=15.0)
    upper_out = add(graph, (1, 1, 0), (2, 1, 0), radius=6.0)
    upper_join = add(graph, (2, 1, 0), (3, 0, 0), radius=5.0)
    lower_join = add(graph, (2, 0, 0), (3, 0, 0), radius=4.0)
    vein = add(graph, (3, 0, 0), (4, 0, 0), EdgeType.VEIN, radius=8.0)

    return SimpleNamespace(
        graph=graph,
        artery=artery,
        vein=vein,
        branches=[upper_in, lower_in, upper_out, upper_join, lower_join],
        arteries=[make_root(graph, artery, at_source=True)],
        veins=[make_root(graph, vein, at_source=False)],
    )


@pytest.fixture
def mapper():
    return IdentityMapper()


@pytest.fixture
def geometry():
    return PlanarGeometry()
