"""Infill pattern types and generated fill geometry.

This module defines the output side of the engine:
- InfillPattern: The closed set of supported fill patterns
- Segment: One straight fill stroke between two lattice points
- InfillResult: The segments generated for one contour
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sweepfill.domain.context import PrecisionContext
from sweepfill.domain.contour import Point, rotate_points
from sweepfill.exceptions import ContextMismatchError


class InfillPattern(Enum):
    """Supported infill patterns.

    The values keep the historical numeric codes (0, 1, 2, 4). Patterns are
    a closed set of alternatives; they are not combined bitwise.
    """

    NONE = 0
    LINEAR = 1
    TRIANGLE = 2
    HEX = 4

    @classmethod
    def parse(cls, value: "InfillPattern | int | str | None") -> "InfillPattern":
        """Resolve a pattern from a member, numeric code, or name.

        Unrecognized values resolve to NONE; absence of infill is a valid
        outcome rather than an error.

        Args:
            value: Pattern member, numeric code, or case-insensitive name

        Returns:
            Matching InfillPattern, or NONE
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or value is None:
            return cls.NONE
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return cls.NONE
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key.isdigit():
                return cls.parse(int(key))
        return cls.NONE


@dataclass(frozen=True, slots=True)
class Segment:
    """A single straight fill stroke.

    Attributes:
        start: First endpoint in lattice units
        end: Second endpoint in lattice units
        pass_index: Index of the sweep pass that produced the segment
    """

    start: Point
    end: Point
    pass_index: int = 0

    def length(self) -> float:
        """Euclidean length in lattice units."""
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def angle(self) -> float:
        """Direction of the segment in radians, normalized to [0, pi)."""
        theta = math.atan2(self.end.y - self.start.y, self.end.x - self.start.x)
        return theta % math.pi

    def midpoint(self) -> tuple[float, float]:
        """Midpoint in lattice units."""
        return ((self.start.x + self.end.x) / 2.0, (self.start.y + self.end.y) / 2.0)

    def rotated(self, angle: float) -> "Segment":
        """Rotate both endpoints about the origin, rounding to the lattice."""
        start, end = rotate_points([self.start, self.end], angle)
        return Segment(start=start, end=end, pass_index=self.pass_index)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "pass": self.pass_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from dictionary."""
        return cls(
            start=Point.from_dict(data["start"]),
            end=Point.from_dict(data["end"]),
            pass_index=data.get("pass", 0),
        )


@dataclass
class InfillResult:
    """Fill geometry generated for one contour.

    Segments are kept in generation order: pass by pass, and within a pass
    by sweep position then along the sweep line.

    Attributes:
        context: Precision context of the segment endpoints
        segments: Generated fill strokes
        pattern: Pattern that produced the segments
    """

    context: PrecisionContext
    segments: list[Segment] = field(default_factory=list)
    pattern: InfillPattern = InfillPattern.NONE

    @classmethod
    def empty(
        cls, context: PrecisionContext, pattern: InfillPattern = InfillPattern.NONE
    ) -> "InfillResult":
        """Create a result without segments."""
        return cls(context=context, segments=[], pattern=pattern)

    def is_empty(self) -> bool:
        """Check if no segments were generated."""
        return not self.segments

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def rotate(self, angle: float) -> "InfillResult":
        """Return a new result with every segment rotated about the origin.

        Args:
            angle: Rotation angle in radians (counter-clockwise)

        Returns:
            Rotated copy; this result is left unchanged
        """
        if not self.segments:
            return InfillResult(context=self.context, segments=[], pattern=self.pattern)

        endpoints = [p for s in self.segments for p in (s.start, s.end)]
        rotated = rotate_points(endpoints, angle)
        segments = [
            Segment(start=rotated[2 * i], end=rotated[2 * i + 1], pass_index=s.pass_index)
            for i, s in enumerate(self.segments)
        ]
        return InfillResult(context=self.context, segments=segments, pattern=self.pattern)

    def extend(self, other: "InfillResult") -> None:
        """Append the segments of another result.

        Raises:
            ContextMismatchError: If the results use different contexts
        """
        if other.context != self.context:
            raise ContextMismatchError(self.context, other.context)
        self.segments.extend(other.segments)

    def passes(self) -> dict[int, list[Segment]]:
        """Group segments by pass index, in ascending pass order."""
        grouped: dict[int, list[Segment]] = {}
        for segment in sorted(self.segments, key=lambda s: s.pass_index):
            grouped.setdefault(segment.pass_index, []).append(segment)
        return grouped

    def total_length(self) -> float:
        """Sum of segment lengths in world units."""
        return self.context.to_world(sum(s.length() for s in self.segments))

    def to_coordinates(self) -> list[tuple[tuple[float, float], tuple[float, float]]]:
        """Segments as pairs of world-unit (x, y) tuples."""
        to_world = self.context.to_world
        return [
            (
                (to_world(s.start.x), to_world(s.start.y)),
                (to_world(s.end.x), to_world(s.end.y)),
            )
            for s in self.segments
        ]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the result
        """
        return {
            "context": self.context.to_dict(),
            "pattern": self.pattern.value,
            "segments": [s.to_dict() for s in self.segments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InfillResult":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a result

        Returns:
            InfillResult instance
        """
        return cls(
            context=PrecisionContext.from_dict(data["context"]),
            segments=[Segment.from_dict(s) for s in data["segments"]],
            pattern=InfillPattern(data["pattern"]),
        )
