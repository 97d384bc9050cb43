"""Planar geometry value objects.

All coordinates are millimetres in layout space: the origin is the top-left
of the canvas and y grows downward.
"""

from __future__ import annotations

from dataclasses import dataclass

# Edge-touch tolerance used by adjacency and connectivity checks.
TOUCH_TOLERANCE_MM = 1.0


@dataclass(frozen=True)
class Point2D:
    """A point in layout coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle occupied by a placed cabinet.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent after rotation.
        height: Vertical extent after rotation.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        """Right edge."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Bottom edge."""
        return self.y + self.height

    @property
    def center(self) -> Point2D:
        """Geometric centre of the rectangle."""
        return Point2D(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height

    def overlaps(self, other: Bounds) -> bool:
        """Check whether the two rectangles share a positive-area region.

        Rectangles that only touch along an edge do not overlap.
        """
        return (
            self.x < other.x2
            and self.x2 > other.x
            and self.y < other.y2
            and self.y2 > other.y
        )

    def touches(self, other: Bounds, tolerance: float = TOUCH_TOLERANCE_MM) -> bool:
        """Check whether the rectangles abut along an edge.

        An edge counts as shared when the facing edges are within ``tolerance``
        of each other on one axis and the rectangles strictly overlap on the
        other axis. Corner-only contact is not a touch.
        """
        horizontal = (
            abs(self.x2 - other.x) <= tolerance or abs(other.x2 - self.x) <= tolerance
        ) and not (self.y2 <= other.y or other.y2 <= self.y)
        vertical = (
            abs(self.y2 - other.y) <= tolerance or abs(other.y2 - self.y) <= tolerance
        ) and not (self.x2 <= other.x or other.x2 <= self.x)
        return horizontal or vertical

    def is_connected_to(
        self, other: Bounds, tolerance: float = TOUCH_TOLERANCE_MM
    ) -> bool:
        """Overlapping or edge-touching rectangles are connected."""
        return self.overlaps(other) or self.touches(other, tolerance)


@dataclass(frozen=True)
class LayoutExtent:
    """Bounding box of a set of rectangles.

    An extent built from no rectangles is empty and reports zero for every
    coordinate so callers can size margins without special-casing.

    Attributes:
        min_x: Left-most edge.
        min_y: Top-most edge.
        max_x: Right-most edge.
        max_y: Bottom-most edge.
        is_empty: True when no rectangle contributed to the extent.
    """

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    is_empty: bool = False

    @classmethod
    def empty(cls) -> LayoutExtent:
        return cls(0.0, 0.0, 0.0, 0.0, is_empty=True)

    @classmethod
    def from_bounds(cls, rects: list[Bounds]) -> LayoutExtent:
        """Build the extent enclosing every rectangle in ``rects``."""
        if not rects:
            return cls.empty()
        return cls(
            min_x=min(r.x for r in rects),
            min_y=min(r.y for r in rects),
            max_x=max(r.x2 for r in rects),
            max_y=max(r.y2 for r in rects),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2

    @property
    def center_y(self) -> float:
        return (self.min_y + self.max_y) / 2

    def union(self, other: LayoutExtent) -> LayoutExtent:
        """Smallest extent containing both; empty extents are ignored."""
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        return LayoutExtent(
            min_x=min(self.min_x, other.min_x),
            min_y=min(self.min_y, other.min_y),
            max_x=max(self.max_x, other.max_x),
            max_y=max(self.max_y, other.max_y),
        )
