"""Infill operations built on the sweep engine.

Two layers of strategy live here:

- Sweep operations (LinearInfill, HexDashInfill) run inside a single sweep:
  they pick the sample heights and turn interior spans into segments.
- Infill operations (LinearOperation, TriangularOperation,
  HexagonalOperation) compose one or more sweep passes, each at its own
  angle offset, into a complete pattern.

The OperationRegistry maps each InfillPattern to a factory building the
matching infill operation.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import structlog

from sweepfill.core.geometry import clip_to_windows
from sweepfill.core.sweep import Span, SweepEngine, SweepOperation
from sweepfill.domain import Contour, InfillPattern, InfillResult, Point, Segment
from sweepfill.exceptions import UnknownOperationError

logger = structlog.get_logger(__name__)

# Angle offsets of the three line families of a triangular lattice
LATTICE_OFFSETS: tuple[float, float, float] = (0.0, math.pi / 3, 2 * math.pi / 3)


class LinearInfill(SweepOperation):
    """Parallel raster lines at a fixed spacing.

    Samples every multiple of ``spacing`` inside the swept extent. Using
    absolute multiples keeps the lines of neighbouring contours on the same
    grid.
    """

    def __init__(self, spacing: int, pass_index: int = 0) -> None:
        """Initialize the raster pass.

        Args:
            spacing: Distance between lines in lattice units (>= 1)
            pass_index: Pass number recorded on every emitted segment
        """
        if spacing < 1:
            raise ValueError(f"spacing must be at least 1 lattice unit, got {spacing}")
        self.spacing = spacing
        self.pass_index = pass_index
        self._segments: list[Segment] = []

    def sample_positions(self, y_min: int, y_max: int) -> Iterator[int]:
        first = -(-y_min // self.spacing)
        last = y_max // self.spacing
        for k in range(first, last + 1):
            yield k * self.spacing

    def consume(self, y: int, spans: list[Span]) -> None:
        for span in spans:
            self._emit(y, span.x_start, span.x_end)

    def _emit(self, y: int, x_start: int, x_end: int) -> None:
        self._segments.append(
            Segment(start=Point(x_start, y), end=Point(x_end, y), pass_index=self.pass_index)
        )

    @property
    def segments(self) -> list[Segment]:
        return self._segments


class HexDashInfill(LinearInfill):
    """Raster pass keeping only the honeycomb edges lying on each line.

    A honeycomb whose edges run at 0, 60 and 120 degrees has all of its
    edges on the lines of a triangular lattice with the same spacing. With
    edge length ``a = 2 * spacing / sqrt(3)``, the edges on line ``m`` are
    dashes of length ``a`` repeating every ``3a``; consecutive lines are
    shifted by ``1.5a``. Each dash is shortened by ``linewidth / 2`` at both
    ends so extruded lines meet at the cell corners instead of piling up.

    The honeycomb has a cell centered on the origin, so it is unchanged by
    rotations of 60 degrees and the same dash layout serves all three passes.
    """

    def __init__(self, spacing: int, linewidth: int = 0, pass_index: int = 0) -> None:
        super().__init__(spacing, pass_index)
        self.linewidth = max(0, linewidth)
        self.edge_length = 2.0 * spacing / math.sqrt(3.0)

    def consume(self, y: int, spans: list[Span]) -> None:
        a = self.edge_length
        line = y // self.spacing
        phase = 1.5 * a * ((line - 1) % 2)
        width = a - self.linewidth
        for span in spans:
            for x_start, x_end in clip_to_windows(span.x_start, span.x_end, 3.0 * a, width, phase):
                self._emit(y, x_start, x_end)


class InfillOperation(ABC):
    """A complete infill pattern made of one or more sweep passes.

    Operations receive a contour already rotated to the caller's base angle
    and return segments in that same frame.
    """

    pattern: InfillPattern = InfillPattern.NONE

    @abstractmethod
    def apply(self, contour: Contour, engine: SweepEngine) -> InfillResult:
        """Generate the pattern for a contour.

        Args:
            contour: Contour in the base-angle frame (not modified)
            engine: Sweep engine to run passes with

        Returns:
            InfillResult in the same frame as ``contour``
        """

    def run_pass(
        self,
        contour: Contour,
        engine: SweepEngine,
        operation: SweepOperation,
        offset: float = 0.0,
    ) -> InfillResult:
        """Rotate, sweep and rotate back one pass.

        Args:
            contour: Contour in the base-angle frame
            engine: Sweep engine
            operation: Sweep operation for this pass
            offset: Extra rotation of this pass relative to the base angle

        Returns:
            Segments of the pass in the frame of ``contour``
        """
        if offset == 0.0:
            return engine.sweep(operation, contour).infill
        rotated = contour.clone(deep=True).rotate(offset)
        return engine.sweep(operation, rotated).infill.rotate(-offset)


class LinearOperation(InfillOperation):
    """Single raster pass of parallel lines."""

    pattern = InfillPattern.LINEAR

    def __init__(self, spacing: int) -> None:
        self.spacing = spacing

    def apply(self, contour: Contour, engine: SweepEngine) -> InfillResult:
        result = self.run_pass(contour, engine, LinearInfill(self.spacing))
        result.pattern = self.pattern
        return result


class TriangularOperation(InfillOperation):
    """Three raster passes 60 degrees apart forming a triangular lattice.

    Passes are kept as independent segment sets, ordered 0, 60, 120 degrees;
    overlapping segments of different passes are not merged.
    """

    pattern = InfillPattern.TRIANGLE

    def __init__(self, spacing: int) -> None:
        self.spacing = spacing

    def make_pass(self, pass_index: int) -> SweepOperation:
        """Create the sweep operation for one lattice direction."""
        return LinearInfill(self.spacing, pass_index=pass_index)

    def apply(self, contour: Contour, engine: SweepEngine) -> InfillResult:
        result = InfillResult.empty(contour.context, self.pattern)
        for pass_index, offset in enumerate(LATTICE_OFFSETS):
            result.extend(self.run_pass(contour, engine, self.make_pass(pass_index), offset))
        logger.debug(
            "Lattice passes complete",
            pattern=self.pattern.name,
            passes=len(LATTICE_OFFSETS),
            segments=len(result),
        )
        return result


class HexagonalOperation(TriangularOperation):
    """Honeycomb infill derived from the triangular lattice lines.

    Uses the same three lattice directions as the triangular pattern but
    keeps only the dashes forming hexagon edges, leaving open cells.
    """

    pattern = InfillPattern.HEX

    def __init__(self, spacing: int, linewidth: int = 0) -> None:
        super().__init__(spacing)
        self.linewidth = linewidth

    def make_pass(self, pass_index: int) -> SweepOperation:
        return HexDashInfill(self.spacing, self.linewidth, pass_index=pass_index)


@dataclass(frozen=True)
class OperationRequest:
    """Resolved lattice-unit parameters handed to operation factories.

    Attributes:
        spacing: Line spacing in lattice units
        linewidth: Extrusion width in lattice units
    """

    spacing: int
    linewidth: int = 0


OperationFactory = Callable[[OperationRequest], InfillOperation]


class OperationRegistry:
    """Registry mapping infill patterns to operation factories."""

    def __init__(self) -> None:
        self._factories: dict[InfillPattern, OperationFactory] = {}

    def register(self, pattern: InfillPattern, factory: OperationFactory) -> None:
        """Register a factory for a pattern.

        Args:
            pattern: Pattern handled by the factory
            factory: Callable building an operation from a request

        Raises:
            ValueError: If pattern is NONE
        """
        if pattern is InfillPattern.NONE:
            raise ValueError("NONE pattern cannot have an operation")
        self._factories[pattern] = factory

    def unregister(self, pattern: InfillPattern) -> None:
        """Remove the factory for a pattern, if any."""
        self._factories.pop(pattern, None)

    def create(self, pattern: InfillPattern, request: OperationRequest) -> InfillOperation:
        """Build the operation for a pattern.

        Raises:
            UnknownOperationError: If no factory is registered for the pattern
        """
        factory = self._factories.get(pattern)
        if factory is None:
            raise UnknownOperationError(pattern)
        return factory(request)

    def list_patterns(self) -> list[InfillPattern]:
        """Registered patterns in registration order."""
        return list(self._factories)

    def __contains__(self, pattern: InfillPattern) -> bool:
        return pattern in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def create_default_registry() -> OperationRegistry:
    """Build a registry with the built-in patterns."""
    registry = OperationRegistry()
    registry.register(InfillPattern.LINEAR, lambda r: LinearOperation(r.spacing))
    registry.register(InfillPattern.TRIANGLE, lambda r: TriangularOperation(r.spacing))
    registry.register(InfillPattern.HEX, lambda r: HexagonalOperation(r.spacing, r.linewidth))
    return registry


default_registry = create_default_registry()
