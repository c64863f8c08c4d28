"""Tests for sweep operations, infill operations and the operation registry."""

import math

import pytest

from sweepfill.core.operations import (
    LATTICE_OFFSETS,
    HexagonalOperation,
    HexDashInfill,
    LinearInfill,
    LinearOperation,
    OperationRegistry,
    OperationRequest,
    TriangularOperation,
    create_default_registry,
)
from sweepfill.core.sweep import Span, SweepEngine
from sweepfill.domain import Contour, InfillPattern, PrecisionContext
from sweepfill.exceptions import UnknownOperationError


@pytest.fixture
def square() -> Contour:
    """20x20 world-unit square at the default precision."""
    return Contour.from_coordinates(
        PrecisionContext(), [[(0, 0), (20, 0), (20, 20), (0, 20)]]
    )


@pytest.fixture
def engine() -> SweepEngine:
    """Default sweep engine."""
    return SweepEngine()


class TestLinearInfill:
    """Tests for LinearInfill sweep operation."""

    def test_sample_positions_are_multiples(self):
        """Test samples are absolute multiples of the spacing."""
        op = LinearInfill(spacing=3)
        assert list(op.sample_positions(-5, 7)) == [-3, 0, 3, 6]
        assert list(op.sample_positions(1, 2)) == []

    def test_invalid_spacing(self):
        """Test that spacing below one lattice unit is rejected."""
        with pytest.raises(ValueError):
            LinearInfill(spacing=0)

    def test_consume_emits_segments(self):
        """Test each span becomes one segment tagged with the pass."""
        op = LinearInfill(spacing=10, pass_index=2)
        op.consume(10, [Span(10, 0, 4), Span(10, 6, 9)])
        assert len(op.segments) == 2
        assert op.segments[1].start.x == 6
        assert all(s.pass_index == 2 for s in op.segments)


class TestHexDashInfill:
    """Tests for HexDashInfill sweep operation."""

    def test_dashes_on_even_and_odd_lines(self):
        """Test dash layout alternates between neighbouring lines."""
        # spacing 866 gives an edge length of ~1000
        op = HexDashInfill(spacing=866)
        op.consume(0, [Span(0, 0, 10000)])
        line_zero = list(op.segments)
        op.consume(866, [Span(866, 0, 10000)])
        line_one = op.segments[len(line_zero):]

        assert len(line_zero) == 3
        assert all(abs(s.length() - 1000) <= 2 for s in line_zero)
        assert abs(line_zero[0].start.x - 1000) <= 2

        # Shifted by half a period; first dash is cut by the span start
        assert len(line_one) == 4
        assert line_one[0].start.x == 0
        assert abs(line_one[0].end.x - 500) <= 2

    def test_linewidth_trims_dashes(self):
        """Test linewidth shortens each dash by its width."""
        op = HexDashInfill(spacing=866, linewidth=200)
        op.consume(0, [Span(0, 0, 10000)])
        assert all(abs(s.length() - 800) <= 2 for s in op.segments)

    def test_linewidth_covering_edge(self):
        """Test no dashes remain when the linewidth exceeds the edge length."""
        op = HexDashInfill(spacing=866, linewidth=5000)
        op.consume(0, [Span(0, 0, 10000)])
        assert op.segments == []


class TestInfillOperations:
    """Tests for LinearOperation, TriangularOperation and HexagonalOperation."""

    def test_linear_single_pass(self, square: Contour, engine: SweepEngine):
        """Test the linear pattern is one pass of horizontal lines."""
        result = LinearOperation(spacing=2000).apply(square, engine)

        assert result.pattern is InfillPattern.LINEAR
        assert len(result) == 11
        assert all(s.pass_index == 0 and s.start.y == s.end.y for s in result)

    def test_triangular_three_passes(self, square: Contour, engine: SweepEngine):
        """Test the triangular pattern has one pass per lattice direction."""
        result = TriangularOperation(spacing=2000).apply(square, engine)

        assert result.pattern is InfillPattern.TRIANGLE
        passes = result.passes()
        assert sorted(passes) == [0, 1, 2]
        for pass_index, offset in enumerate(LATTICE_OFFSETS):
            # Each pass is swept at +offset and rotated back by -offset
            expected = -offset % math.pi
            for segment in passes[pass_index]:
                if segment.length() < 1000:
                    continue
                delta = abs(segment.angle() - expected)
                assert min(delta, math.pi - delta) < 0.01

    def test_triangular_keeps_input(self, square: Contour, engine: SweepEngine):
        """Test passes rotate clones, not the given contour."""
        before = square.to_dict()
        TriangularOperation(spacing=2000).apply(square, engine)
        assert square.to_dict() == before

    def test_hexagonal_is_subset_of_triangular(self, square: Contour, engine: SweepEngine):
        """Test honeycomb edges lie on the triangular lattice lines."""
        triangle = TriangularOperation(spacing=2000).apply(square, engine)
        hexagon = HexagonalOperation(spacing=2000).apply(square, engine)

        assert hexagon.pattern is InfillPattern.HEX
        assert sorted(hexagon.passes()) == [0, 1, 2]
        assert 0 < hexagon.total_length() < triangle.total_length()

        # Roughly a third of each lattice line survives
        ratio = hexagon.total_length() / triangle.total_length()
        assert 0.2 < ratio < 0.5

    def test_hexagonal_linewidth_reduces_length(self, square: Contour, engine: SweepEngine):
        """Test trimming for line width shortens the honeycomb."""
        plain = HexagonalOperation(spacing=2000).apply(square, engine)
        trimmed = HexagonalOperation(spacing=2000, linewidth=400).apply(square, engine)
        assert trimmed.total_length() < plain.total_length()


class TestOperationRegistry:
    """Tests for OperationRegistry class."""

    def test_default_patterns(self):
        """Test the built-in registry covers every fill pattern."""
        registry = create_default_registry()
        assert registry.list_patterns() == [
            InfillPattern.LINEAR,
            InfillPattern.TRIANGLE,
            InfillPattern.HEX,
        ]
        assert InfillPattern.NONE not in registry
        assert len(registry) == 3

    def test_create_builds_operation(self):
        """Test factories receive the request."""
        registry = create_default_registry()
        op = registry.create(InfillPattern.HEX, OperationRequest(spacing=500, linewidth=40))
        assert isinstance(op, HexagonalOperation)
        assert op.spacing == 500
        assert op.linewidth == 40

    def test_unknown_pattern_raises(self):
        """Test lookup of an unregistered pattern."""
        registry = OperationRegistry()
        with pytest.raises(UnknownOperationError) as exc_info:
            registry.create(InfillPattern.LINEAR, OperationRequest(spacing=10))
        assert exc_info.value.pattern is InfillPattern.LINEAR

    def test_none_cannot_register(self):
        """Test the NONE pattern cannot have an operation."""
        with pytest.raises(ValueError):
            OperationRegistry().register(InfillPattern.NONE, lambda r: LinearOperation(r.spacing))

    def test_register_and_unregister(self):
        """Test replacing and removing factories."""
        registry = create_default_registry()
        registry.register(InfillPattern.HEX, lambda r: TriangularOperation(r.spacing))
        op = registry.create(InfillPattern.HEX, OperationRequest(spacing=10))
        assert type(op) is TriangularOperation

        registry.unregister(InfillPattern.HEX)
        assert InfillPattern.HEX not in registry
        registry.unregister(InfillPattern.HEX)
