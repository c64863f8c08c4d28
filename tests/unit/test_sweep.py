"""Tests for the sweep engine."""

import pytest

from sweepfill.core.operations import LinearInfill
from sweepfill.core.sweep import (
    EventKind,
    SweepEdge,
    SweepEngine,
    build_events,
    collect_edges,
    sweep,
)
from sweepfill.domain import Contour, FillRule, Loop, Point, PrecisionContext


def make_contour(*loops: list[tuple[int, int]]) -> Contour:
    """Build a contour directly from lattice coordinates."""
    return Contour(
        context=PrecisionContext(),
        loops=[Loop(points=[Point(x, y) for x, y in loop]) for loop in loops],
    )


@pytest.fixture
def square() -> Contour:
    """Counter-clockwise 100x100 square."""
    return make_contour([(0, 0), (100, 0), (100, 100), (0, 100)])


@pytest.fixture
def engine() -> SweepEngine:
    """Sweep engine with the default fill rule."""
    return SweepEngine()


def spans_by_y(result) -> dict[int, list[tuple[int, int]]]:
    """Group result segments into (x_start, x_end) lists keyed by sweep height."""
    grouped: dict[int, list[tuple[int, int]]] = {}
    for segment in result.infill:
        assert segment.start.y == segment.end.y
        grouped.setdefault(segment.start.y, []).append((segment.start.x, segment.end.x))
    return grouped


class TestEdgesAndEvents:
    """Tests for edge collection and event ordering."""

    def test_horizontal_edges_skipped(self, square: Contour):
        """Test that only the two vertical edges of a square are kept."""
        edges = collect_edges(square)
        assert len(edges) == 2
        assert sorted(e.winding for e in edges) == [-1, 1]
        assert all(e.y_low < e.y_high for e in edges)

    def test_degenerate_loops_skipped(self):
        """Test that zero-area loops contribute no edges."""
        contour = make_contour([(0, 0), (50, 50), (100, 100)])
        assert collect_edges(contour) == []

    def test_entries_before_exits(self):
        """Test that at equal y, entries sort before exits."""
        edges = [
            SweepEdge(0, 0, 0, 10, 1),
            SweepEdge(0, 10, 5, 20, 1),
        ]
        events = build_events(edges)
        at_ten = [e for e in events if e.y == 10]
        assert [e.kind for e in at_ten] == [EventKind.ENTRY, EventKind.EXIT]
        assert [e.y for e in events] == sorted(e.y for e in events)


class TestSweepEngine:
    """Tests for SweepEngine class."""

    def test_square_spans(self, square: Contour, engine: SweepEngine):
        """Test every sample of a square spans its full width."""
        result = engine.sweep(LinearInfill(spacing=20), square)

        grouped = spans_by_y(result)
        assert sorted(grouped) == [0, 20, 40, 60, 80, 100]
        assert all(spans == [(0, 100)] for spans in grouped.values())
        assert result.samples == 6
        assert result.spans == 6

    def test_vertex_tie_break(self, engine: SweepEngine):
        """Test samples through vertices of a diamond."""
        diamond = make_contour([(50, 0), (100, 50), (50, 100), (0, 50)])
        grouped = spans_by_y(engine.sweep(LinearInfill(spacing=25), diamond))

        # Top and bottom vertices give zero-length spans, which are dropped
        assert 0 not in grouped
        assert 100 not in grouped
        assert grouped[50] == [(0, 100)]
        assert grouped[25] == [(25, 75)]

    def test_hole(self, engine: SweepEngine):
        """Test that a clockwise hole splits spans."""
        contour = make_contour(
            [(0, 0), (100, 0), (100, 100), (0, 100)],
            [(40, 40), (40, 60), (60, 60), (60, 40)],
        )
        grouped = spans_by_y(engine.sweep(LinearInfill(spacing=10), contour))

        assert grouped[50] == [(0, 40), (60, 100)]
        assert grouped[30] == [(0, 100)]
        # Sample on the hole's horizontal edge keeps the full line
        assert grouped[40] == [(0, 100)]

    def test_even_odd_overlap(self):
        """Test that even-odd leaves doubly-covered regions empty."""
        contour = make_contour(
            [(0, 0), (60, 0), (60, 60), (0, 60)],
            [(40, 10), (100, 10), (100, 50), (40, 50)],
        )
        nonzero = spans_by_y(sweep(LinearInfill(spacing=30), contour, FillRule.NONZERO))
        even_odd = spans_by_y(sweep(LinearInfill(spacing=30), contour, FillRule.EVEN_ODD))

        assert nonzero[30] == [(0, 100)]
        assert even_odd[30] == [(0, 40), (60, 100)]

    def test_absolute_sample_grid(self, engine: SweepEngine):
        """Test that samples fall on multiples of the spacing, not offsets from y_min."""
        contour = make_contour([(0, 7), (100, 7), (100, 95), (0, 95)])
        grouped = spans_by_y(engine.sweep(LinearInfill(spacing=20), contour))
        assert sorted(grouped) == [20, 40, 60, 80]

    def test_concave_contour(self, engine: SweepEngine):
        """Test that a U shape gives two spans across its arms."""
        u_shape = make_contour(
            [(0, 0), (90, 0), (90, 90), (60, 90), (60, 30), (30, 30), (30, 90), (0, 90)]
        )
        grouped = spans_by_y(engine.sweep(LinearInfill(spacing=15), u_shape))
        assert grouped[15] == [(0, 90)]
        assert grouped[60] == [(0, 30), (60, 90)]

    def test_degenerate_contour_empty(self, engine: SweepEngine):
        """Test that a contour without edges yields nothing."""
        contour = make_contour([(0, 0), (10, 0)])
        result = engine.sweep(LinearInfill(spacing=5), contour)
        assert result.infill.is_empty()
        assert result.samples == 0

    def test_context_carried(self, square: Contour, engine: SweepEngine):
        """Test the result shares the contour's precision context."""
        result = engine.sweep(LinearInfill(spacing=50), square)
        assert result.infill.context is square.context

    def test_bowtie_lobes_filled(self, engine: SweepEngine):
        """Test a self-intersecting loop with zero net area still fills both lobes."""
        bowtie = make_contour([(0, 0), (100, 100), (100, 0), (0, 100)])
        assert bowtie.loops[0].signed_area() == 0
        assert not bowtie.is_degenerate()

        grouped = spans_by_y(engine.sweep(LinearInfill(spacing=20), bowtie))
        assert grouped[20] == [(0, 20), (80, 100)]
        assert grouped[80] == [(0, 20), (80, 100)]
        for start, end in grouped[20]:
            assert bowtie.contains_point((start + end) / 2, 20)
