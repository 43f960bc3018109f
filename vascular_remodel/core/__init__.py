"""Core data structures for vascular remodeling graphs."""

from .types import Coordinate, EdgeCategory, EdgeType, EdgeLevel
from .graph import Node, Edge, Root, Graph, make_root
from .result import OperationResult, OperationStatus, ErrorCode
from .ids import IDGenerator
from .interfaces import Agent, LocationMapper, AgentGrid, ScalarField, LatticeGeometry

__all__ = [
    "Coordinate",
    "EdgeCategory",
    "EdgeType",
    "EdgeLevel",
    "Node",
    "Edge",
    "Root",
    "Graph",
    "make_root",
    "OperationResult",
    "OperationStatus",
    "ErrorCode",
    "IDGenerator",
    "Agent",
    "LocationMapper",
    "AgentGrid",
    "ScalarField",
    "LatticeGeometry",
]
