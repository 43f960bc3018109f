"""
Primitive types for vascular remodeling graphs.
"""

from enum import Enum
from typing import NamedTuple, Tuple


class Coordinate(NamedTuple):
    """Integer lattice coordinate identifying a graph node."""

    x: int
    y: int
    z: int

    def offset(self, delta: "Coordinate") -> "Coordinate":
        """Return the coordinate shifted by ``delta``."""
        return Coordinate(self.x + delta[0], self.y + delta[1], self.z + delta[2])

    def delta_to(self, other: "Coordinate") -> "Coordinate":
        """Return the offset that moves this coordinate onto ``other``."""
        return Coordinate(other[0] - self.x, other[1] - self.y, other[2] - self.z)

    def to_list(self) -> list:
        """Convert to list for serialization."""
        return [self.x, self.y, self.z]

    @classmethod
    def from_tuple(cls, t: Tuple[int, int, int]) -> "Coordinate":
        """Create from any 3-sequence."""
        return cls(int(t[0]), int(t[1]), int(t[2]))


class EdgeCategory(Enum):
    """Coarse vessel category, valued by its sign in the root pressure curve."""
    ARTERY = -1
    CAPILLARY = 0
    VEIN = 1

    @property
    def sign(self) -> int:
        return self.value


class EdgeType(Enum):
    """Vessel segment type."""
    ARTERY = "artery"
    ARTERIOLE = "arteriole"
    CAPILLARY = "capillary"
    VENULE = "venule"
    VEIN = "vein"
    ANGIOGENIC = "angiogenic"

    @property
    def category(self) -> EdgeCategory:
        return _TYPE_CATEGORIES[self]


_TYPE_CATEGORIES = {
    EdgeType.ARTERY: EdgeCategory.ARTERY,
    EdgeType.ARTERIOLE: EdgeCategory.ARTERY,
    EdgeType.CAPILLARY: EdgeCategory.CAPILLARY,
    EdgeType.VENULE: EdgeCategory.VEIN,
    EdgeType.VEIN: EdgeCategory.VEIN,
    EdgeType.ANGIOGENIC: EdgeCategory.CAPILLARY,
}


class EdgeLevel(Enum):
    """Graph resolution tier, valued by its lattice scale factor."""
    VARIABLE = 1
    LEVEL_1 = 4
    LEVEL_2 = 2

    @property
    def scale(self) -> int:
        return self.value
