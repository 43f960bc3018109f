"""
Directed vascular graph with bidirectional adjacency.

Edges are stored in an arena keyed by stable integer ids. Nodes are
coordinate-keyed records that exist while at least one edge touches them.
Each edge caches the ids of the edges flowing into its source node and out
of its target node; the graph keeps these caches in sync on every mutation.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Union

from .ids import IDGenerator
from .types import Coordinate, EdgeCategory, EdgeLevel, EdgeType


@dataclass(eq=False)
class Node:
    """
    Graph node identified by its lattice coordinate.

    Two records with the same coordinate compare equal and hash alike.
    """

    coordinate: Coordinate
    pressure: float = 0.0
    oxygen: float = 0.0
    is_root: bool = False
    distance: float = float("inf")
    prev: Optional[Coordinate] = None
    last_update: float = 0.0
    is_sprout: bool = False
    is_tip: bool = False
    sprout_origin: Optional[Coordinate] = None
    sprout_length: int = 0

    def __post_init__(self):
        self.coordinate = Coordinate.from_tuple(self.coordinate)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.coordinate == other.coordinate

    def __lt__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.coordinate < other.coordinate

    def __hash__(self):
        return hash(self.coordinate)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "coordinate": self.coordinate.to_list(),
            "pressure": self.pressure,
            "oxygen": self.oxygen,
            "is_root": self.is_root,
            "is_sprout": self.is_sprout,
            "is_tip": self.is_tip,
        }


@dataclass(eq=False)
class Edge:
    """
    Directed vessel segment from ``source`` to ``target``.

    ``edges_in`` holds ids of edges entering the source node and
    ``edges_out`` ids of edges leaving the target node. Both lists are
    owned by the graph.
    """

    source: Coordinate
    target: Coordinate
    edge_type: EdgeType = EdgeType.CAPILLARY
    level: EdgeLevel = EdgeLevel.VARIABLE
    radius: float = 0.0
    wall: float = 0.0
    length: float = 1.0
    span: List[Coordinate] = field(default_factory=list)
    shear: float = 0.0
    shear_scaled: float = 0.0
    circum: float = 0.0
    flow: float = 0.0
    area: float = 0.0
    is_root: bool = False
    is_ignored: bool = False
    is_visited: bool = False
    is_perfused: bool = False
    is_angiogenic: bool = False
    is_anastomotic: bool = False
    id: int = -1
    edges_in: List[int] = field(default_factory=list)
    edges_out: List[int] = field(default_factory=list)

    def __post_init__(self):
        self.source = Coordinate.from_tuple(self.source)
        self.target = Coordinate.from_tuple(self.target)

    @property
    def category(self) -> EdgeCategory:
        return self.edge_type.category

    def reverse(self) -> None:
        """Swap endpoints in place. Use ``Graph.reverse_edge`` for graph edges."""
        self.source, self.target = self.target, self.source

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "source": self.source.to_list(),
            "target": self.target.to_list(),
            "type": self.edge_type.value,
            "level": self.level.name,
            "radius": self.radius,
            "wall": self.wall,
            "length": self.length,
            "shear": self.shear,
            "circum": self.circum,
            "flow": self.flow,
            "area": self.area,
            "is_root": self.is_root,
            "is_ignored": self.is_ignored,
            "is_perfused": self.is_perfused,
        }


@dataclass
class Root:
    """Boundary condition pairing a root node with its bounding edge."""

    coordinate: Coordinate
    edge_id: int
    edge_type: EdgeType

    def __post_init__(self):
        self.coordinate = Coordinate.from_tuple(self.coordinate)


NodeKey = Union[Node, Coordinate, tuple]


def node_key(node: NodeKey) -> Coordinate:
    if isinstance(node, Node):
        return node.coordinate
    if isinstance(node, Coordinate):
        return node
    return Coordinate.from_tuple(node)


class Graph:
    """
    Directed multigraph of vessel segments keyed by node coordinates.

    Missing nodes are treated as isolated: degree queries return 0 and
    edge queries return empty lists.
    """

    def __init__(self, id_gen: Optional[IDGenerator] = None):
        self.edges: Dict[int, Edge] = {}
        self.nodes: Dict[Coordinate, Node] = {}
        self.id_gen = id_gen if id_gen is not None else IDGenerator()
        self._out: Dict[Coordinate, List[int]] = {}
        self._in: Dict[Coordinate, List[int]] = {}

    def __len__(self) -> int:
        return len(self.edges)

    def __contains__(self, edge: Edge) -> bool:
        return self.edges.get(edge.id) is edge

    def all_edges(self) -> List[Edge]:
        """Snapshot of all edges in insertion order."""
        return list(self.edges.values())

    def all_nodes(self) -> List[Node]:
        """Snapshot of all node records."""
        return list(self.nodes.values())

    def get_node(self, node: NodeKey) -> Optional[Node]:
        """Get the canonical node record for a coordinate, or None."""
        return self.nodes.get(node_key(node))

    def contains_node(self, node: NodeKey) -> bool:
        return node_key(node) in self.nodes

    def get_source(self, edge: Edge) -> Node:
        return self.nodes[edge.source]

    def get_target(self, edge: Edge) -> Node:
        return self.nodes[edge.target]

    def add_edge(self, edge: Edge) -> Edge:
        """
        Add an edge, creating node records for its endpoints as needed.

        Parameters
        ----------
        edge : Edge
            Edge to add. A fresh id is assigned when ``edge.id`` is negative.

        Returns
        -------
        Edge
            The added edge
        """
        if edge.id < 0:
            edge.id = self.id_gen.next_id()
        elif edge.id in self.edges:
            raise ValueError(f"Edge id {edge.id} already in graph")
        else:
            self.id_gen.reserve(edge.id)

        self._ensure_node(edge.source)
        self._ensure_node(edge.target)
        self.edges[edge.id] = edge
        self._link(edge)
        return edge

    def remove_edge(self, edge: Edge) -> None:
        """
        Remove an edge and drop node records left without edges.

        Raises
        ------
        KeyError
            If the edge is not part of this graph
        """
        if self.edges.get(edge.id) is not edge:
            raise KeyError(f"Edge {edge.id} not in graph")

        self._unlink(edge)
        del self.edges[edge.id]

        for coord in (edge.source, edge.target):
            if coord not in self._in and coord not in self._out:
                self.nodes.pop(coord, None)

    def reverse_edge(self, edge: Edge) -> None:
        """Reverse an edge in place, keeping its id and all other state."""
        if self.edges.get(edge.id) is not edge:
            raise KeyError(f"Edge {edge.id} not in graph")

        self._unlink(edge)
        edge.reverse()
        self._link(edge)

    def get_edges_out(self, node: NodeKey) -> List[Edge]:
        return [self.edges[eid] for eid in self._out.get(node_key(node), ())]

    def get_edges_in(self, node: NodeKey) -> List[Edge]:
        return [self.edges[eid] for eid in self._in.get(node_key(node), ())]

    def get_out_degree(self, node: NodeKey) -> int:
        return len(self._out.get(node_key(node), ()))

    def get_in_degree(self, node: NodeKey) -> int:
        return len(self._in.get(node_key(node), ()))

    def get_degree(self, node: NodeKey) -> int:
        return self.get_in_degree(node) + self.get_out_degree(node)

    def has_edge(self, source: NodeKey, target: NodeKey) -> bool:
        """Check if any edge runs from ``source`` to ``target``."""
        target = node_key(target)
        return any(
            self.edges[eid].target == target
            for eid in self._out.get(node_key(source), ())
        )

    def edges_of(self, ids: Iterable[int]) -> List[Edge]:
        """Resolve a list of edge ids, skipping ids no longer in the graph."""
        return [self.edges[eid] for eid in ids if eid in self.edges]

    def merge_nodes(self) -> None:
        """
        Rebuild node records and adjacency from the current edge endpoints.

        Edges whose endpoints were changed outside the graph become
        mutually visible again. Existing node records are kept so their
        state survives; records no longer referenced are dropped.
        """
        edges = list(self.edges.values())
        self._out.clear()
        self._in.clear()

        for edge in edges:
            edge.edges_in = []
            edge.edges_out = []

        for edge in edges:
            self._ensure_node(edge.source)
            self._ensure_node(edge.target)
            self._link(edge)

        referenced = set(self._in) | set(self._out)
        for coord in list(self.nodes):
            if coord not in referenced:
                del self.nodes[coord]

    def get_subgraph(self, keep: Callable[[Edge], bool]) -> "Graph":
        """
        Collect the edges matching ``keep`` into a second graph.

        The subgraph shares edge and node objects with this graph and has
        correct degree maps, but edge adjacency links still describe this
        graph. Do not traverse ``edges_in``/``edges_out`` or mutate
        structure through the subgraph.
        """
        sub = Graph(id_gen=self.id_gen)
        for edge in self.edges.values():
            if not keep(edge):
                continue
            sub.edges[edge.id] = edge
            sub._out.setdefault(edge.source, []).append(edge.id)
            sub._in.setdefault(edge.target, []).append(edge.id)
            sub.nodes[edge.source] = self.nodes[edge.source]
            sub.nodes[edge.target] = self.nodes[edge.target]
        return sub

    def _ensure_node(self, coord: Coordinate) -> Node:
        node = self.nodes.get(coord)
        if node is None:
            node = Node(coord)
            self.nodes[coord] = node
        return node

    def _link(self, edge: Edge) -> None:
        self._out.setdefault(edge.source, []).append(edge.id)
        self._in.setdefault(edge.target, []).append(edge.id)

        for eid in self._out.get(edge.target, ()):
            if eid == edge.id:
                continue
            self.edges[eid].edges_in.append(edge.id)
            edge.edges_out.append(eid)

        for eid in self._in.get(edge.source, ()):
            if eid == edge.id:
                continue
            self.edges[eid].edges_out.append(edge.id)
            edge.edges_in.append(eid)

    def _unlink(self, edge: Edge) -> None:
        out_ids = self._out[edge.source]
        out_ids.remove(edge.id)
        if not out_ids:
            del self._out[edge.source]

        in_ids = self._in[edge.target]
        in_ids.remove(edge.id)
        if not in_ids:
            del self._in[edge.target]

        for eid in edge.edges_out:
            other = self.edges.get(eid)
            if other is not None and edge.id in other.edges_in:
                other.edges_in.remove(edge.id)

        for eid in edge.edges_in:
            other = self.edges.get(eid)
            if other is not None and edge.id in other.edges_out:
                other.edges_out.remove(edge.id)

        edge.edges_in = []
        edge.edges_out = []


def make_root(graph: Graph, edge: Edge, at_source: bool = True) -> Root:
    """
    Mark one end of an edge as a boundary node.

    Parameters
    ----------
    graph : Graph
        Graph containing the edge
    edge : Edge
        Bounding edge of the root
    at_source : bool
        Use the edge's source node (inlet) instead of its target (outlet)

    Returns
    -------
    Root
        Boundary condition record for the root node
    """
    coord = edge.source if at_source else edge.target
    graph.nodes[coord].is_root = True
    edge.is_root = True
    return Root(coordinate=coord, edge_id=edge.id, edge_type=edge.edge_type)
