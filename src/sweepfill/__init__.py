"""Sweepfill - Polygon infill generation for 3D printing.

Sweepfill takes a closed 2D contour (one cross-section of a printable solid)
and fills its interior with a geometric pattern: evenly spaced parallel lines,
a triangular lattice, or a hexagonal lattice.

Example:
    >>> from sweepfill import Contour, InfillPattern, PrecisionContext, generate
    >>> context = PrecisionContext(p=1000)
    >>> square = Contour.from_coordinates(context, [[(0, 0), (10, 0), (10, 10), (0, 10)]])
    >>> infill = generate(square, InfillPattern.LINEAR, {"spacing": 2})
    >>> len(infill)
    6
"""

from sweepfill.core.infill import InfillGenerator, generate
from sweepfill.domain import Contour, InfillPattern, InfillResult, PrecisionContext

__version__ = "0.1.0"

__all__ = [
    "Contour",
    "InfillGenerator",
    "InfillPattern",
    "InfillResult",
    "PrecisionContext",
    "__version__",
    "generate",
]
