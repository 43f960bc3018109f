"""
Interfaces for the simulation collaborators the remodeling drivers consume.

The cell grid, tissue lattice and diffusion fields live outside this
package; drivers only see them through these abstract classes.
"""

from abc import ABC, abstractmethod
from typing import Hashable, List, Optional, Sequence

from .types import Coordinate


class Agent(ABC):
    """A cell or other object occupying a lattice location."""

    @property
    @abstractmethod
    def category(self) -> str:
        """Coarse agent category, e.g. ``"healthy"``."""
        pass


class LocationMapper(ABC):
    """Maps lattice coordinates onto discretized simulation locations."""

    @abstractmethod
    def get_location(self, coordinate: Coordinate) -> Optional[Hashable]:
        """Get the location containing a coordinate, or None if outside."""
        pass


class AgentGrid(ABC):
    """Grid of agents queryable by location."""

    @abstractmethod
    def get_objects_at_locations(self, locations: Sequence[Hashable]) -> List[Agent]:
        """Get all agents occupying any of the given locations."""
        pass


class ScalarField(ABC):
    """Scalar concentration field, e.g. growth factor."""

    @abstractmethod
    def get_value(self, coordinate: Coordinate) -> float:
        """Get the field value at a lattice coordinate."""
        pass


class LatticeGeometry(ABC):
    """Geometry of the lattice the graph is embedded in."""

    @property
    @abstractmethod
    def offsets(self) -> List[Coordinate]:
        """Candidate growth offsets from a node, in a fixed order."""
        pass

    @property
    @abstractmethod
    def edge_size(self) -> float:
        """Length of one lattice edge."""
        pass

    @abstractmethod
    def in_bounds(self, coordinate: Coordinate) -> bool:
        """Check if a coordinate lies inside the lattice."""
        pass

    @abstractmethod
    def get_span(self, source: Coordinate, target: Coordinate) -> List[Coordinate]:
        """Get the coordinates covered by a segment between two nodes."""
        pass

    @abstractmethod
    def get_length(self, source: Coordinate, target: Coordinate) -> float:
        """Get the physical length of a segment between two nodes."""
        pass
