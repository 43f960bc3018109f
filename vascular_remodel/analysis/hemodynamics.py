"""
Pressure, flow and wall stress computations on a vascular graph.

Nodes cut off from circulation carry NaN pressure. Every formula here
passes NaN through instead of raising, and callers check for it.
"""

import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np
import scipy.sparse as sp

from ..core.graph import Edge, Graph, Root
from ..core.types import Coordinate, EdgeCategory
from ..utils import constants as C
from .linear import sor

logger = logging.getLogger(__name__)

Solver = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]

MAX_STATE_ITERATIONS = 100


def calculate_viscosity(radius: float) -> float:
    """
    Relative blood viscosity for a vessel radius (Pries in vitro fit).

    Parameters
    ----------
    radius : float
        Vessel radius (um)

    Returns
    -------
    float
        Viscosity relative to plasma
    """
    diameter = 2 * radius
    mu45 = (
        6 * math.exp(-0.085 * diameter)
        + 3.2
        - 2.44 * math.exp(-0.06 * diameter ** 0.645)
    )
    fr = (diameter / (diameter - 1.1)) ** 2
    return (1 + (mu45 - 1) * fr) * fr


def calculate_coefficient(radius: float, length: float) -> float:
    """
    Hagen-Poiseuille conductance pi r^4 / (8 mu L).

    Returns 0 for non-positive or NaN radius or length.
    """
    if not (radius > 0 and length > 0):
        return 0.0
    mu = C.PLASMA_VISCOSITY * calculate_viscosity(radius) / 60
    return math.pi * radius ** 4 / (8 * mu * length)


def get_coefficient(edge: Edge) -> float:
    return calculate_coefficient(edge.radius, edge.length)


def calculate_local_flow(radius: float, length: float, delta_pressure: float) -> float:
    """Flow through a segment of given geometry under a pressure drop."""
    return calculate_coefficient(radius, length) * delta_pressure


def calculate_root_pressure(radius: float, category: EdgeCategory) -> float:
    """
    Boundary pressure for a root vessel of the given radius.

    Arteries get higher pressures and veins lower ones for the same radius.
    """
    span = C.ROOT_PRESSURE_MAX - C.ROOT_PRESSURE_MIN
    return C.ROOT_PRESSURE_MIN + span / (1 + math.exp((radius * category.sign + 21) / 16))


def calculate_thickness(radius: float) -> float:
    """Wall thickness for a vessel radius."""
    diameter = 2 * radius
    return diameter * (0.267 - 0.084 * math.log10(diameter))


def get_partial_pressure(edge: Edge) -> float:
    """Oxygen partial pressure (mmHg) carried by an edge."""
    partial = C.MINIMUM_OXYGEN_PRESSURE + edge.radius * C.OXYGEN_PRESSURE_SCALE
    return min(partial, C.MAXIMUM_OXYGEN_PRESSURE)


def get_saturation(pressure: float) -> float:
    """Hemoglobin oxygen saturation (Hill curve) at a partial pressure."""
    numerator = pressure ** C.OXYGEN_CURVE_EXP
    return numerator / (numerator + C.OXYGEN_CURVE_P50 ** C.OXYGEN_CURVE_EXP)


def get_total_oxygen(pressure: float, solubility: float) -> float:
    """Bound plus dissolved oxygen content at a partial pressure."""
    return C.OXYGEN_SATURATION * get_saturation(pressure) + solubility * pressure


def set_root_pressures(graph: Graph, roots: List[Root], category: EdgeCategory) -> float:
    """
    Assign one shared boundary pressure to a set of roots.

    Arterial roots share the maximum pressure across the set and venous
    roots the minimum.

    Parameters
    ----------
    graph : Graph
        Graph containing the roots
    roots : list of Root
        Roots of a single category
    category : EdgeCategory
        ARTERY or VEIN

    Returns
    -------
    float
        The assigned pressure, NaN if no root or its bounding edge is
        still in the graph
    """
    live = []
    for root in roots:
        edge = graph.edges.get(root.edge_id)
        node = graph.get_node(root.coordinate)
        if edge is None or node is None:
            logger.debug(f"Root {root.coordinate} no longer in graph")
            continue
        live.append((node, calculate_root_pressure(edge.radius, root.edge_type.category)))

    if not live:
        return float("nan")

    pressures = [p for _, p in live]
    pressure = max(pressures) if category == EdgeCategory.ARTERY else min(pressures)

    for node, _ in live:
        node.pressure = pressure
        node.is_root = True

    return pressure


def set_leaf_pressures(graph: Graph, artery_pressure: float, vein_pressure: float) -> None:
    """Give every non-root dead end the root pressure of its edge category."""
    for edge in graph.all_edges():
        target = graph.get_target(edge)
        if target.is_root or graph.get_out_degree(target.coordinate) != 0:
            continue
        if edge.category == EdgeCategory.ARTERY:
            target.pressure = artery_pressure
        else:
            target.pressure = vein_pressure


def _is_interior(graph: Graph, coord: Coordinate, as_source: bool) -> bool:
    node = graph.nodes[coord]
    if node.is_root:
        return False

    in_degree = graph.get_in_degree(coord)
    out_degree = graph.get_out_degree(coord)

    if as_source and in_degree == 0 and out_degree == 1:
        return False
    if not as_source and in_degree == 1 and out_degree == 0:
        return False

    if in_degree == 1 and out_degree == 1:
        incident = graph.get_edges_in(coord) + graph.get_edges_out(coord)
        if any(edge.radius == 0 for edge in incident):
            return False

    return True


def calculate_pressures(graph: Graph, solver: Optional[Solver] = None) -> int:
    """
    Solve conservation of flow for the pressures of interior nodes.

    Root nodes, source and sink stubs and zero-radius pass-through nodes
    act as fixed boundary pressures. Ignored edges are left out.

    Parameters
    ----------
    graph : Graph
        Graph with root pressures already assigned
    solver : callable, optional
        ``solve(A, b, x0) -> x``; defaults to SOR

    Returns
    -------
    int
        Number of interior nodes solved for
    """
    if solver is None:
        solver = sor

    index: Dict[Coordinate, int] = {}
    for edge in graph.all_edges():
        if edge.is_ignored:
            continue
        if edge.source not in index and _is_interior(graph, edge.source, True):
            index[edge.source] = len(index)
        if edge.target not in index and _is_interior(graph, edge.target, False):
            index[edge.target] = len(index)

    n = len(index)
    if n == 0:
        return 0

    A = sp.lil_matrix((n, n))
    b = np.zeros(n)
    x0 = np.zeros(n)
    div = np.zeros(n)

    for coord, i in index.items():
        node = graph.nodes[coord]
        incident = graph.get_edges_in(coord) + graph.get_edges_out(coord)

        for edge in incident:
            if edge.is_ignored or edge.source == edge.target:
                continue
            coeff = get_coefficient(edge)
            if coeff == 0:
                continue

            neighbor_coord = edge.source if edge.target == coord else edge.target
            neighbor = graph.nodes[neighbor_coord]
            A[i, i] += coeff

            j = index.get(neighbor_coord)
            if neighbor.is_root or j is None:
                b[i] += coeff * neighbor.pressure
            else:
                A[i, j] -= coeff

            if not math.isnan(neighbor.pressure):
                x0[i] += neighbor.pressure
                div[i] += 1

        if div[i] > 0:
            x0[i] /= div[i]
        if node.pressure > 0:
            x0[i] = node.pressure

        if A[i, i] == 0:
            A[i, i] = 1.0
            b[i] = x0[i]

    x0 = np.nan_to_num(x0, nan=0.0)
    A = A.tocsr() * C.MATRIX_SCALE
    b = b * C.MATRIX_SCALE

    x = solver(A, b, x0)

    for coord, i in index.items():
        graph.nodes[coord].pressure = float(x[i])

    logger.debug(f"Solved pressures for {n} interior nodes")
    return n


def reverse_pressures(graph: Graph) -> bool:
    """
    Reverse non-ignored edges whose target pressure exceeds their source.

    Returns
    -------
    bool
        True if any edge was reversed; pressures must then be re-solved
    """
    reversed_any = False
    for edge in graph.all_edges():
        if edge.is_ignored:
            continue
        delta = graph.get_source(edge).pressure - graph.get_target(edge).pressure
        if delta < 0:
            graph.reverse_edge(edge)
            reversed_any = True
    return reversed_any


def calculate_flows(graph: Graph) -> None:
    """Compute flow and exchange area for every edge."""
    for edge in graph.all_edges():
        pressure_from = graph.get_source(edge).pressure
        pressure_to = graph.get_target(edge).pressure
        edge.flow = get_coefficient(edge) * (pressure_from - pressure_to)

        if 2 * edge.radius < C.LAYER_HEIGHT:
            edge.area = math.pi * 2 * (edge.radius + edge.wall / 2) * edge.length
        else:
            edge.area = edge.length * C.LAYER_HEIGHT * 2


def calculate_stresses(graph: Graph) -> None:
    """
    Compute shear and circumferential stress for every edge.

    Shear is also min-max scaled into ``shear_scaled`` over the finite
    values; it is 0 for every finite edge when all shears are equal.
    """
    edges = graph.all_edges()
    if not edges:
        return

    radius = np.array([edge.radius for edge in edges], dtype=float)
    length = np.array([edge.length for edge in edges], dtype=float)
    wall = np.array([edge.wall for edge in edges], dtype=float)
    pressure_from = np.array([graph.get_source(edge).pressure for edge in edges], dtype=float)
    pressure_to = np.array([graph.get_target(edge).pressure for edge in edges], dtype=float)

    with np.errstate(divide="ignore", invalid="ignore"):
        shear = radius * np.abs(pressure_to - pressure_from) / (2 * length)
        circum = (pressure_to + pressure_from) / 2 * radius / wall

        finite = np.isfinite(shear)
        scaled = np.full(len(edges), np.nan)
        if finite.any():
            low = shear[finite].min()
            high = shear[finite].max()
            if high > low:
                scaled[finite] = (shear[finite] - low) / (high - low)
            else:
                scaled[finite] = 0.0

    for edge, s, c, ss in zip(edges, shear, circum, scaled):
        edge.shear = float(s)
        edge.circum = float(c)
        edge.shear_scaled = float(ss)


def check_for_negative_flow(graph: Graph) -> bool:
    """Check if any non-ignored edge carries negative flow."""
    return any(edge.flow < 0 for edge in graph.all_edges() if not edge.is_ignored)


def calculate_current_state(graph: Graph, solver: Optional[Solver] = None) -> None:
    """
    Bring pressures, edge directions, flows and stresses up to date.

    Re-solves after any reversal and repeats while a non-ignored edge
    still carries negative flow.
    """
    for _ in range(MAX_STATE_ITERATIONS):
        calculate_pressures(graph, solver)
        if reverse_pressures(graph):
            calculate_pressures(graph, solver)
        calculate_flows(graph)
        calculate_stresses(graph)
        if not check_for_negative_flow(graph):
            return

    logger.warning(
        f"Negative flow remained after {MAX_STATE_ITERATIONS} state updates"
    )
