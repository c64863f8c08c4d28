"""Geometric operations for the sweep engine.

This module provides the numeric building blocks of a sweep:
- Edge/sweep-line intersection
- Interior intervals from sorted crossings under a fill rule
- Interval merging
- Periodic window clipping (used for dashed honeycomb passes)

All functions are pure, stateless, and designed for use in parallel processing.
"""

import math
from collections.abc import Iterable

from sweepfill.domain import FillRule


def crossing_x(x0: int, y0: int, x1: int, y1: int, y: float) -> float:
    """X coordinate where a non-horizontal edge crosses the line at height y.

    Args:
        x0, y0: First endpoint of the edge
        x1, y1: Second endpoint of the edge
        y: Height of the sweep line

    Returns:
        Interpolated x coordinate

    Raises:
        ValueError: If the edge is horizontal

    Examples:
        >>> crossing_x(0, 0, 10, 10, 5)
        5.0
    """
    if y1 == y0:
        raise ValueError("Horizontal edge has no single crossing")
    if y == y0:
        return float(x0)
    if y == y1:
        return float(x1)
    return x0 + (x1 - x0) * (y - y0) / (y1 - y0)


def interior_intervals(
    crossings: list[tuple[float, int]],
    fill_rule: FillRule = FillRule.NONZERO,
) -> list[tuple[int, int]]:
    """Pair up sweep-line crossings into interior intervals.

    Crossings are sorted along the line and their windings accumulated from
    the left; every gap between consecutive crossings whose accumulated
    winding is interior under the fill rule becomes an interval.

    Args:
        crossings: (x, winding) pairs, winding +1 or -1 per edge
        fill_rule: Interior rule

    Returns:
        Interior intervals as (start, end) lattice coordinates, left to right

    Examples:
        >>> interior_intervals([(10.0, 1), (0.0, -1)])
        [(0, 10)]
    """
    ordered = sorted(crossings)
    intervals: list[tuple[int, int]] = []
    winding = 0
    for i in range(len(ordered) - 1):
        winding += ordered[i][1]
        if fill_rule.is_inside(winding):
            intervals.append((round(ordered[i][0]), round(ordered[i + 1][0])))
    return intervals


def merge_intervals(intervals: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    """Merge overlapping or touching intervals.

    Args:
        intervals: (start, end) pairs with start <= end, in any order

    Returns:
        Disjoint intervals sorted by start

    Examples:
        >>> merge_intervals([(5, 8), (0, 5), (10, 12)])
        [(0, 8), (10, 12)]
    """
    merged: list[tuple[int, int]] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


def clip_to_windows(
    start: float,
    end: float,
    period: float,
    width: float,
    phase: float,
) -> list[tuple[int, int]]:
    """Clip an interval to a periodic set of windows.

    Windows have the given width and are centered at ``phase + k * period``
    for every integer k.

    Args:
        start: Interval start
        end: Interval end
        period: Distance between window centers
        width: Window width (no output when <= 0)
        phase: Center of window k = 0

    Returns:
        Non-empty clipped pieces, rounded to the lattice, left to right

    Examples:
        >>> clip_to_windows(0, 10, period=6, width=2, phase=0)
        [(0, 1), (5, 7)]
    """
    if width <= 0 or end <= start or period <= 0:
        return []

    half = width / 2.0
    first = math.floor((start - phase - half) / period)
    last = math.ceil((end - phase + half) / period)

    pieces: list[tuple[int, int]] = []
    for k in range(first, last + 1):
        center = phase + k * period
        lo = round(max(start, center - half))
        hi = round(min(end, center + half))
        if hi > lo:
            pieces.append((lo, hi))
    return pieces
