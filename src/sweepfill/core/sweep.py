"""Event-driven sweep over contour edges.

The sweep line is horizontal and advances along +y. At every sample height
requested by a sweep operation, the engine reports the interior spans of the
contour along x and lets the operation turn them into fill geometry.

Edges enter and leave an active set as the sweep passes their endpoints.
Events are processed in y order; at equal y, entries come before the sample
and exits after it, so a sample exactly on a vertex still sees both edges
meeting there. Crossings are then evaluated separately for edges extending
above and below the sample line and the two interval lists are unioned. This
puts horizontal boundary edges and vertices touched by the line inside the
adjoining span instead of opening a zero-length gap.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

import structlog

from sweepfill.core.geometry import crossing_x, interior_intervals, merge_intervals
from sweepfill.domain import Contour, FillRule, InfillResult, Segment

logger = structlog.get_logger(__name__)


class EventKind(IntEnum):
    """Sweep event kind. Entries sort before exits at equal coordinates."""

    ENTRY = 0
    EXIT = 1


@dataclass(frozen=True, slots=True)
class SweepEvent:
    """An edge endpoint met by the sweep line.

    Attributes:
        y: Sweep coordinate of the endpoint
        kind: Whether the edge enters or leaves the active set
        edge_index: Index of the edge in the engine's edge list
    """

    y: int
    kind: EventKind
    edge_index: int


@dataclass(frozen=True, slots=True)
class Span:
    """One interior interval of the sweep line.

    Attributes:
        y: Sample height
        x_start: Left end of the interval
        x_end: Right end of the interval
    """

    y: int
    x_start: int
    x_end: int

    @property
    def length(self) -> int:
        """Interval length in lattice units."""
        return self.x_end - self.x_start


@dataclass(frozen=True, slots=True)
class SweepEdge:
    """A non-horizontal contour edge, stored bottom to top.

    Attributes:
        x_low, y_low: Lower endpoint
        x_high, y_high: Upper endpoint
        winding: +1 if the loop runs upward along the edge, -1 if downward
    """

    x_low: int
    y_low: int
    x_high: int
    y_high: int
    winding: int

    def x_at(self, y: float) -> float:
        """X coordinate of the edge at height y."""
        return crossing_x(self.x_low, self.y_low, self.x_high, self.y_high, y)


def collect_edges(contour: Contour) -> list[SweepEdge]:
    """Collect the non-horizontal edges of every non-degenerate loop.

    Args:
        contour: Contour to scan

    Returns:
        Edges oriented bottom to top with their winding sign
    """
    edges: list[SweepEdge] = []
    for loop in contour.loops:
        if loop.is_degenerate():
            continue
        for a, b in loop.edges():
            if a.y == b.y:
                continue
            if a.y < b.y:
                edges.append(SweepEdge(a.x, a.y, b.x, b.y, 1))
            else:
                edges.append(SweepEdge(b.x, b.y, a.x, a.y, -1))
    return edges


def build_events(edges: list[SweepEdge]) -> list[SweepEvent]:
    """Build the sorted event queue for a list of edges."""
    events: list[SweepEvent] = []
    for index, edge in enumerate(edges):
        events.append(SweepEvent(edge.y_low, EventKind.ENTRY, index))
        events.append(SweepEvent(edge.y_high, EventKind.EXIT, index))
    events.sort(key=lambda e: (e.y, e.kind, e.edge_index))
    return events


class SweepOperation(ABC):
    """Strategy consumed by the sweep engine.

    An operation decides where the sweep line is sampled and turns the
    interior spans found at each sample into segments.
    """

    @abstractmethod
    def sample_positions(self, y_min: int, y_max: int) -> Iterable[int]:
        """Return the sample heights wanted within [y_min, y_max], ascending."""

    @abstractmethod
    def consume(self, y: int, spans: list[Span]) -> None:
        """Receive the interior spans at one sample height."""

    @property
    @abstractmethod
    def segments(self) -> list[Segment]:
        """Segments assembled so far."""


@dataclass
class SweepResult:
    """Outcome of one sweep.

    Attributes:
        infill: Segments produced by the operation, in the swept frame
        samples: Number of sample heights visited
        spans: Number of interior spans reported to the operation
    """

    infill: InfillResult
    samples: int = 0
    spans: int = 0


class SweepEngine:
    """Scans contours for interior spans on behalf of sweep operations.

    The engine holds no per-sweep state, so one instance can be shared
    between threads.
    """

    def __init__(self, fill_rule: FillRule = FillRule.NONZERO) -> None:
        """Initialize the engine.

        Args:
            fill_rule: Interior rule for overlapping loops
        """
        self.fill_rule = fill_rule

    def sweep(self, operation: SweepOperation, contour: Contour) -> SweepResult:
        """Run an operation over a contour.

        Args:
            operation: Sweep operation deciding samples and output
            contour: Contour in the frame the sweep runs in

        Returns:
            SweepResult wrapping the operation's segments
        """
        edges = collect_edges(contour)
        if not edges:
            logger.debug("Sweep skipped, no edges", loops=len(contour.loops))
            return SweepResult(infill=InfillResult.empty(contour.context))

        events = build_events(edges)
        y_min = events[0].y
        y_max = events[-1].y

        active: dict[int, SweepEdge] = {}
        cursor = 0
        samples = 0
        span_count = 0

        for y in operation.sample_positions(y_min, y_max):
            while cursor < len(events):
                event = events[cursor]
                if event.y > y or (event.y == y and event.kind is EventKind.EXIT):
                    break
                if event.kind is EventKind.ENTRY:
                    active[event.edge_index] = edges[event.edge_index]
                else:
                    active.pop(event.edge_index, None)
                cursor += 1

            spans = self.spans_at(active.values(), y)
            operation.consume(y, spans)
            samples += 1
            span_count += len(spans)

        return SweepResult(
            infill=InfillResult(context=contour.context, segments=list(operation.segments)),
            samples=samples,
            spans=span_count,
        )

    def spans_at(self, active: Iterable[SweepEdge], y: int) -> list[Span]:
        """Compute interior spans at one sample height.

        Args:
            active: Edges whose closed y-range contains y
            y: Sample height

        Returns:
            Disjoint, non-empty spans ordered along x
        """
        above: list[tuple[float, int]] = []
        below: list[tuple[float, int]] = []
        for edge in active:
            x = edge.x_at(y)
            if edge.y_high > y:
                above.append((x, edge.winding))
            if edge.y_low < y:
                below.append((x, edge.winding))

        intervals = interior_intervals(above, self.fill_rule)
        intervals.extend(interior_intervals(below, self.fill_rule))
        return [Span(y, start, end) for start, end in merge_intervals(intervals) if end > start]


def sweep(
    operation: SweepOperation,
    contour: Contour,
    fill_rule: FillRule = FillRule.NONZERO,
) -> SweepResult:
    """Run an operation over a contour with a one-off engine."""
    return SweepEngine(fill_rule).sweep(operation, contour)
