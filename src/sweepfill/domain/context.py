"""Fixed-scale coordinate space shared by contours.

A precision context maps continuous (world) coordinates onto an integer
lattice. Every contour and infill result carries a reference to the context
its lattice points are expressed in; operations that combine geometry require
the contexts to agree.
"""

import math
from dataclasses import dataclass
from typing import Any

from sweepfill.exceptions import PrecisionError


@dataclass(frozen=True, slots=True)
class PrecisionContext:
    """Scale definition for lattice coordinates.

    Immutable once created, so a single instance can be shared by reference
    across every contour of a slicing session and across threads.

    Attributes:
        p: Lattice units per world unit (e.g. 1000 for micron lattice over mm)
        epsilon: Tolerance in world units for near-coincidence checks
    """

    p: float = 1000.0
    epsilon: float = 1e-6

    def __post_init__(self) -> None:
        if not math.isfinite(self.p) or self.p <= 0:
            raise PrecisionError(f"scale factor must be positive and finite, got {self.p}")
        if not math.isfinite(self.epsilon) or self.epsilon < 0:
            raise PrecisionError(f"epsilon must be non-negative, got {self.epsilon}")

    @property
    def default_spacing(self) -> int:
        """Infill spacing used when a caller omits one: one world unit, in lattice units."""
        return max(1, round(self.p))

    @property
    def lattice_epsilon(self) -> float:
        """Epsilon expressed in lattice units."""
        return self.epsilon * self.p

    def to_lattice(self, value: float) -> int:
        """Convert a world coordinate to the nearest lattice coordinate."""
        return round(value * self.p)

    def to_world(self, value: float) -> float:
        """Convert a lattice coordinate back to world units."""
        return value / self.p

    def to_lattice_length(self, length: float) -> int:
        """Convert a positive world-unit length to lattice units (at least 1)."""
        return max(1, round(length * self.p))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with p and epsilon fields
        """
        return {"p": self.p, "epsilon": self.epsilon}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrecisionContext":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with p and (optionally) epsilon fields

        Returns:
            PrecisionContext instance
        """
        return cls(p=data["p"], epsilon=data.get("epsilon", 1e-6))
