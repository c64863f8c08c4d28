"""Core processing algorithms for sweepfill.

This module contains the core algorithms for:

- Geometry operations (edge crossings, interior intervals, window clipping)
- The sweep engine (event queue, active edge set, interior spans)
- Infill operations (linear raster, triangular lattice, hexagonal lattice)
- The infill façade (pattern dispatch, rotate-sweep-unrotate)
- Batch processing of layer stacks

All services are designed to be:
- Stateless (safe for use in worker processes and threads)
- Pure (no side effects on caller-owned contours)

Key functions:
- generate: Generate infill for one contour
- merge_intervals: Merge overlapping intervals
- interior_intervals: Pair crossings into interior intervals under a fill rule

Key classes:
- SweepEngine: Scans contours for interior spans
- LinearInfill, HexDashInfill: Sweep operations
- LinearOperation, TriangularOperation, HexagonalOperation: Infill patterns
- OperationRegistry: Maps patterns to operations
- InfillGenerator: Configured infill façade
- LayerProcessor: Parallel infill for layer stacks
"""

from sweepfill.core.geometry import (
    clip_to_windows,
    crossing_x,
    interior_intervals,
    merge_intervals,
)
from sweepfill.core.infill import InfillGenerator, generate, resolve_params
from sweepfill.core.operations import (
    HexagonalOperation,
    HexDashInfill,
    InfillOperation,
    LinearInfill,
    LinearOperation,
    OperationRegistry,
    OperationRequest,
    TriangularOperation,
    create_default_registry,
    default_registry,
)
from sweepfill.core.processor import LayerProcessor, ProcessingResult, process_layer
from sweepfill.core.sweep import (
    Span,
    SweepEngine,
    SweepEvent,
    SweepOperation,
    SweepResult,
)

__all__ = [
    # Operation classes
    "HexDashInfill",
    "HexagonalOperation",
    # Façade
    "InfillGenerator",
    "InfillOperation",
    "LayerProcessor",
    "LinearInfill",
    "LinearOperation",
    "OperationRegistry",
    "OperationRequest",
    "ProcessingResult",
    # Sweep engine
    "Span",
    "SweepEngine",
    "SweepEvent",
    "SweepOperation",
    "SweepResult",
    "TriangularOperation",
    # Geometry functions
    "clip_to_windows",
    "create_default_registry",
    "crossing_x",
    "default_registry",
    "generate",
    "interior_intervals",
    "merge_intervals",
    "process_layer",
    "resolve_params",
]
