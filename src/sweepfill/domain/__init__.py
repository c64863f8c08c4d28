"""Domain models for sweepfill.

This module contains the core domain models representing precision contexts,
contours, and generated infill. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Independent of the sweep engine implementation

Key classes:
- PrecisionContext: Fixed-scale lattice shared by contours
- Point: A 2D lattice point
- Loop: One closed polygon ring
- Contour: Outer boundaries and holes of one region
- Segment: One fill stroke
- InfillResult: The fill generated for one contour
"""

from sweepfill.domain.context import PrecisionContext
from sweepfill.domain.contour import (
    Contour,
    FillRule,
    Loop,
    Point,
    WindingDirection,
    rotate_points,
)
from sweepfill.domain.infill import InfillPattern, InfillResult, Segment

__all__: list[str] = [
    # Enums
    "FillRule",
    "InfillPattern",
    "WindingDirection",
    # Core types
    "Contour",
    "InfillResult",
    "Loop",
    "Point",
    "PrecisionContext",
    "Segment",
    # Helpers
    "rotate_points",
]
