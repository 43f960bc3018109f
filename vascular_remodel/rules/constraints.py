"""
Rule specifications for the structural remodeling drivers.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)


class WalkType(Enum):
    """Policy for choosing a sprout direction."""
    RANDOM = "random"
    BIASED = "biased"
    DETERMINISTIC = "deterministic"

    @classmethod
    def parse(cls, value: Union[str, "WalkType"]) -> "WalkType":
        """
        Parse a walk type name, falling back to DETERMINISTIC.

        Names are case-insensitive; "MAX" is accepted for DETERMINISTIC.
        Unknown names are logged as a warning.
        """
        if isinstance(value, cls):
            return value

        name = str(value).strip().upper()
        if name == "MAX":
            return cls.DETERMINISTIC
        if name in cls.__members__:
            return cls[name]

        logger.warning(f"Unknown walk type '{value}', using {cls.DETERMINISTIC.name}")
        return cls.DETERMINISTIC


@dataclass
class DegradationRuleSpec:
    """
    Specification for wall degradation near non-healthy tissue.

    Units: rate in um of wall per hour, applied each minute step.
    """

    interval: int = 1
    rate: float = 0.1
    shear_threshold: float = 0.1

    def __post_init__(self):
        if self.interval < 1:
            raise ValueError(f"interval must be >= 1, got {self.interval}")
        if self.rate < 0:
            raise ValueError(f"rate must be non-negative, got {self.rate}")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "interval": self.interval,
            "rate": self.rate,
            "shear_threshold": self.shear_threshold,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DegradationRuleSpec":
        """Create from dictionary."""
        return cls(
            interval=d.get("interval", 1),
            rate=d.get("rate", 0.1),
            shear_threshold=d.get("shear_threshold", 0.1),
        )


@dataclass
class GrowthRuleSpec:
    """
    Specification for growth-factor driven sprouting.

    Units: migration_rate in um per hour, max_length in um.
    """

    migration_rate: float = 60.0
    vegf_threshold: float = 0.5
    walk_type: WalkType = WalkType.DETERMINISTIC
    max_length: float = 200.0

    def __post_init__(self):
        self.walk_type = WalkType.parse(self.walk_type)
        if self.migration_rate <= 0:
            raise ValueError(f"migration_rate must be positive, got {self.migration_rate}")
        if self.max_length <= 0:
            raise ValueError(f"max_length must be positive, got {self.max_length}")

    def interval(self, edge_size: float) -> int:
        """Steps between growth checks for a lattice edge size."""
        return 60 if self.migration_rate < edge_size else 30

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "migration_rate": self.migration_rate,
            "vegf_threshold": self.vegf_threshold,
            "walk_type": self.walk_type.name,
            "max_length": self.max_length,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "GrowthRuleSpec":
        """Create from dictionary."""
        return cls(
            migration_rate=d.get("migration_rate", 60.0),
            vegf_threshold=d.get("vegf_threshold", 0.5),
            walk_type=d.get("walk_type", WalkType.DETERMINISTIC.name),
            max_length=d.get("max_length", 200.0),
        )
