"""Core geometric types for contour representation.

This module defines the fundamental geometric types used throughout sweepfill:
- Point: A 2D lattice point
- Loop: One closed polygon ring
- Contour: A set of loops (outer boundaries and holes) in one precision context
- WindingDirection: Enum for loop winding direction
- FillRule: Enum for the interior rule applied to overlapping loops
"""

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from sweepfill.domain.context import PrecisionContext
from sweepfill.exceptions import ContextMismatchError, ContourError


class WindingDirection(Enum):
    """Loop winding direction.

    Sign convention for sweepfill contours:
    - Outer boundaries wind counter-clockwise (positive signed area)
    - Holes wind clockwise (negative signed area)
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


class FillRule(str, Enum):
    """Rule deciding which winding numbers count as interior.

    NONZERO treats any nonzero winding number as inside, which handles nested
    holes of mixed winding correctly. EVEN_ODD only counts odd winding numbers.
    """

    NONZERO = "nonzero"
    EVEN_ODD = "even_odd"

    def is_inside(self, winding: int) -> bool:
        """Check whether a winding number is interior under this rule."""
        if self is FillRule.EVEN_ODD:
            return winding % 2 != 0
        return winding != 0


@dataclass(frozen=True, slots=True)
class Point:
    """A point on the integer lattice of a precision context.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in lattice units
        y: Y coordinate in lattice units
    """

    x: int
    y: int

    def rotated(self, angle: float) -> "Point":
        """Rotate about the origin by angle radians, rounding to the lattice."""
        return rotate_points([self], angle)[0]

    def to_tuple(self) -> tuple[int, int]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=int(data["x"]), y=int(data["y"]))


def rotate_points(points: Iterable[Point], angle: float) -> list[Point]:
    """Rotate points about the origin, rounding each result to the lattice.

    Args:
        points: Points to rotate
        angle: Rotation angle in radians (counter-clockwise)

    Returns:
        New list of rotated points
    """
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return [
        Point(round(p.x * cos_a - p.y * sin_a), round(p.x * sin_a + p.y * cos_a))
        for p in points
    ]


@dataclass
class Loop:
    """A single closed polygon ring.

    The last point connects back to the first; the closing point is not
    repeated.

    Attributes:
        points: Ordered lattice points of the ring
    """

    points: list[Point]
    _cached_area: float | None = field(default=None, repr=False, init=False, compare=False)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        Positive area means counter-clockwise (outer), negative means
        clockwise (hole). Result is cached until the points change.

        Returns:
            Signed area in square lattice units
        """
        if self._cached_area is not None:
            return self._cached_area

        n = len(self.points)
        if n < 3:
            self._cached_area = 0.0
            return 0.0

        area = 0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        self._cached_area = area / 2.0
        return self._cached_area

    @property
    def direction(self) -> WindingDirection | None:
        """Winding direction, or None for a zero-area loop."""
        area = self.signed_area()
        if area > 0:
            return WindingDirection.COUNTER_CLOCKWISE
        if area < 0:
            return WindingDirection.CLOCKWISE
        return None

    def is_hole(self) -> bool:
        """Check whether this loop winds as a hole."""
        return self.signed_area() < 0

    def distinct_points(self) -> list[Point]:
        """Points with consecutive duplicates (including a repeated closing point) removed."""
        result: list[Point] = []
        for point in self.points:
            if not result or result[-1] != point:
                result.append(point)
        while len(result) > 1 and result[0] == result[-1]:
            result.pop()
        return result

    def is_degenerate(self) -> bool:
        """Check for fewer than 3 distinct vertices or all vertices on one line.

        A self-intersecting loop whose lobes cancel to zero net area is
        not degenerate.
        """
        points = self.distinct_points()
        if len(points) < 3:
            return True
        origin, first = points[0], points[1]
        dx, dy = first.x - origin.x, first.y - origin.y
        return all(
            dx * (p.y - origin.y) - dy * (p.x - origin.x) == 0 for p in points[2:]
        )

    def edges(self) -> Iterator[tuple[Point, Point]]:
        """Yield the directed edges of the ring, including the closing edge."""
        points = self.distinct_points()
        n = len(points)
        if n < 2:
            return
        for i in range(n):
            yield points[i], points[(i + 1) % n]

    def bounding_box(self) -> tuple[int, int, int, int]:
        """Calculate bounding box of the loop.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.points:
            return (0, 0, 0, 0)
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def replace_points(self, points: list[Point]) -> None:
        """Swap in a new point list and drop cached values."""
        self.points = points
        self._cached_area = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Loop":
        """Deserialize from dictionary."""
        return cls(points=[Point.from_dict(p) for p in data["points"]])


@dataclass
class Contour:
    """A closed region bounded by one or more loops.

    All points are lattice coordinates of ``context``. Outer boundaries wind
    counter-clockwise and holes clockwise; the interior is decided by a fill
    rule (nonzero by default).

    Attributes:
        context: Precision context the lattice points belong to
        loops: Polygon rings forming the region boundary
    """

    context: PrecisionContext
    loops: list[Loop] = field(default_factory=list)

    @classmethod
    def from_coordinates(
        cls,
        context: PrecisionContext,
        loops: Iterable[Iterable[tuple[float, float]]],
    ) -> "Contour":
        """Build a contour from world-unit coordinates.

        Args:
            context: Precision context used to quantize the coordinates
            loops: One sequence of (x, y) pairs per loop

        Returns:
            Contour instance

        Raises:
            ContourError: If a coordinate is not an (x, y) pair
        """
        built: list[Loop] = []
        for loop in loops:
            points: list[Point] = []
            for coords in loop:
                try:
                    x, y = coords
                    points.append(Point(context.to_lattice(float(x)), context.to_lattice(float(y))))
                except (TypeError, ValueError) as e:
                    raise ContourError(f"Invalid coordinate {coords!r}: expected (x, y)") from e
            built.append(Loop(points=points))
        return cls(context=context, loops=built)

    def clone(self, deep: bool = True) -> "Contour":
        """Return an independent copy of this contour.

        A deep clone copies every loop's point list, so rotating the clone
        leaves this contour untouched. A shallow clone shares the Loop
        objects; rotating it rewrites the original's loops too.

        Args:
            deep: Copy loop point lists instead of sharing loops

        Returns:
            New Contour with the same context
        """
        if deep:
            loops = [Loop(points=list(loop.points)) for loop in self.loops]
        else:
            loops = list(self.loops)
        return Contour(context=self.context, loops=loops)

    def rotate(self, angle: float) -> "Contour":
        """Rotate every point about the origin, in place.

        Callers holding a contour they do not own must clone first.

        Args:
            angle: Rotation angle in radians (counter-clockwise)

        Returns:
            This contour, for chaining
        """
        for loop in self.loops:
            loop.replace_points(rotate_points(loop.points, angle))
        return self

    def merge(self, other: "Contour") -> "Contour":
        """Return a new contour holding the loops of both contours.

        Raises:
            ContextMismatchError: If the contours use different contexts
        """
        if other.context != self.context:
            raise ContextMismatchError(self.context, other.context)
        merged = self.clone(deep=True)
        merged.loops.extend(other.clone(deep=True).loops)
        return merged

    @property
    def vertex_count(self) -> int:
        """Total number of points across all loops."""
        return sum(len(loop.points) for loop in self.loops)

    def signed_area(self) -> float:
        """Sum of the signed areas of all loops."""
        return sum(loop.signed_area() for loop in self.loops)

    def is_degenerate(self) -> bool:
        """Check whether every loop is degenerate."""
        return all(loop.is_degenerate() for loop in self.loops)

    def bounding_box(self) -> tuple[int, int, int, int]:
        """Calculate bounding box over all loops.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        points = [p for loop in self.loops for p in loop.points]
        if not points:
            return (0, 0, 0, 0)
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return (min(xs), min(ys), max(xs), max(ys))

    def winding_number(self, x: float, y: float) -> int:
        """Winding number of the region around a point.

        Uses half-open crossings (an edge covers y_low <= y < y_high) so a
        ray through a vertex is counted exactly once.

        Args:
            x: X coordinate in lattice units
            y: Y coordinate in lattice units

        Returns:
            Signed winding number (counter-clockwise loops count positive)
        """
        winding = 0
        for loop in self.loops:
            for a, b in loop.edges():
                is_left = (b.x - a.x) * (y - a.y) - (x - a.x) * (b.y - a.y)
                if a.y <= y < b.y and is_left > 0:
                    winding += 1
                elif b.y <= y < a.y and is_left < 0:
                    winding -= 1
        return winding

    def on_boundary(self, x: float, y: float) -> bool:
        """Check whether a point lies on any edge, within the context epsilon."""
        tolerance = self.context.lattice_epsilon
        for loop in self.loops:
            for a, b in loop.edges():
                dx = b.x - a.x
                dy = b.y - a.y
                length_sq = dx * dx + dy * dy
                if length_sq == 0:
                    distance = math.hypot(x - a.x, y - a.y)
                else:
                    t = max(0.0, min(1.0, ((x - a.x) * dx + (y - a.y) * dy) / length_sq))
                    distance = math.hypot(x - (a.x + t * dx), y - (a.y + t * dy))
                if distance <= tolerance:
                    return True
        return False

    def contains_point(
        self, x: float, y: float, fill_rule: FillRule = FillRule.NONZERO
    ) -> bool:
        """Check if a point lies in the closed region bounded by the loops.

        Points on an edge count as inside. Degenerate loops contribute no
        winding, so a degenerate contour contains only its boundary.

        Args:
            x: X coordinate in lattice units
            y: Y coordinate in lattice units
            fill_rule: Interior rule for overlapping loops

        Returns:
            True if the point is inside or on the boundary
        """
        if self.on_boundary(x, y):
            return True
        return fill_rule.is_inside(self.winding_number(x, y))

    def to_coordinates(self) -> list[list[tuple[float, float]]]:
        """Convert loops back to world-unit coordinates."""
        to_world = self.context.to_world
        return [[(to_world(p.x), to_world(p.y)) for p in loop.points] for loop in self.loops]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the contour
        """
        return {
            "context": self.context.to_dict(),
            "loops": [loop.to_dict() for loop in self.loops],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a contour

        Returns:
            Contour instance
        """
        return cls(
            context=PrecisionContext.from_dict(data["context"]),
            loops=[Loop.from_dict(loop) for loop in data["loops"]],
        )
