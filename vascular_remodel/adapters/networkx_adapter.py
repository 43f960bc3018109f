"""
Adapter for converting between vascular graphs and NetworkX graphs.

Nodes are keyed by their coordinate tuples; edges carry their id and
hemodynamic state as attributes.
"""

import networkx as nx

from ..core.graph import Edge, Graph
from ..core.types import EdgeLevel, EdgeType


def to_networkx_graph(graph: Graph, include_ignored: bool = True) -> nx.MultiDiGraph:
    """
    Convert a vascular graph to a NetworkX multi-digraph.

    Node attributes: 'pressure', 'oxygen', 'is_root'.
    Edge attributes: 'edge_id', 'edge_type', 'radius', 'length', 'wall',
    'flow', 'shear', 'is_ignored', 'is_perfused'; edges are keyed by id.

    Parameters
    ----------
    graph : Graph
        Graph to convert
    include_ignored : bool
        Include edges marked ignored by graph reduction

    Returns
    -------
    G : nx.MultiDiGraph
        NetworkX representation
    """
    G = nx.MultiDiGraph()

    for edge in graph.all_edges():
        if edge.is_ignored and not include_ignored:
            continue

        for coord in (edge.source, edge.target):
            if coord not in G:
                node = graph.nodes[coord]
                G.add_node(
                    tuple(coord),
                    pressure=node.pressure,
                    oxygen=node.oxygen,
                    is_root=node.is_root,
                )

        G.add_edge(
            tuple(edge.source),
            tuple(edge.target),
            key=edge.id,
            edge_id=edge.id,
            edge_type=edge.edge_type.value,
            level=edge.level.name,
            radius=edge.radius,
            length=edge.length,
            wall=edge.wall,
            flow=edge.flow,
            shear=edge.shear,
            is_ignored=edge.is_ignored,
            is_perfused=edge.is_perfused,
        )

    return G


def from_networkx_graph(G: nx.DiGraph) -> Graph:
    """
    Convert a NetworkX digraph with coordinate-tuple nodes to a vascular graph.

    Missing edge attributes fall back to ``Edge`` defaults; node
    'pressure' and 'is_root' attributes are copied when present.

    Parameters
    ----------
    G : nx.DiGraph or nx.MultiDiGraph
        Directed graph whose nodes are integer 3-tuples

    Returns
    -------
    Graph
        Reconstructed vascular graph
    """
    graph = Graph()

    for u, v, data in G.edges(data=True):
        edge = Edge(
            source=u,
            target=v,
            edge_type=EdgeType(data.get("edge_type", EdgeType.CAPILLARY.value)),
            level=EdgeLevel[data.get("level", EdgeLevel.VARIABLE.name)],
            radius=data.get("radius", 0.0),
            length=data.get("length", 1.0),
            wall=data.get("wall", 0.0),
        )
        graph.add_edge(edge)

    for coord, data in G.nodes(data=True):
        node = graph.get_node(coord)
        if node is None:
            continue
        if "pressure" in data:
            node.pressure = data["pressure"]
        if "is_root" in data:
            node.is_root = data["is_root"]

    return graph
