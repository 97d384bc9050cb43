"""Geometry resolution for placed cabinets.

Provides rotated bounds, the overall layout extent and connected-group
detection. Every other service derives its positions from here.
"""

from __future__ import annotations

import logging
from collections import deque

from ..entities import Cabinet, Layout
from ..value_objects import TOUCH_TOLERANCE_MM, Bounds, CabinetType, LayoutExtent
from .type_resolution import CabinetTypeResolver

logger = logging.getLogger(__name__)

__all__ = [
    "ROW_CLUSTER_TOLERANCE_MM",
    "GeometryResolver",
    "cluster_row_centers",
    "row_index",
    "overlaps",
    "are_connected",
]


# Cabinet centres closer than this vertically share a row.
ROW_CLUSTER_TOLERANCE_MM = 50.0


def overlaps(a: Bounds, b: Bounds) -> bool:
    """True when the rectangles share a positive-area region."""
    return a.overlaps(b)


def are_connected(a: Bounds, b: Bounds, tolerance: float = TOUCH_TOLERANCE_MM) -> bool:
    """True when the rectangles overlap or abut along an edge."""
    return a.is_connected_to(b, tolerance)


class GeometryResolver:
    """Resolves cabinet rectangles against a type catalog.

    Attributes:
        resolver: Type resolution chain used for every lookup.
    """

    def __init__(self, catalog: tuple[CabinetType, ...] | list[CabinetType]) -> None:
        self.resolver = CabinetTypeResolver(catalog)

    @classmethod
    def for_layout(cls, layout: Layout) -> GeometryResolver:
        return cls(layout.catalog)

    def resolve_type(self, type_id: str) -> CabinetType | None:
        return self.resolver.resolve(type_id)

    def bounds(self, cabinet: Cabinet) -> Bounds | None:
        """Return the placed rectangle of ``cabinet``.

        Width and height swap at 90 and 270 degrees. Returns ``None`` when
        the cabinet type cannot be resolved.
        """
        cabinet_type = self.resolver.resolve(cabinet.type_id)
        if cabinet_type is None:
            return None
        width, height = cabinet_type.width_mm, cabinet_type.height_mm
        if cabinet.is_rotated_sideways:
            width, height = height, width
        return Bounds(cabinet.x_mm, cabinet.y_mm, width, height)

    def resolved(self, cabinets: tuple[Cabinet, ...] | list[Cabinet]) -> list[tuple[Cabinet, Bounds]]:
        """Pair each resolvable cabinet with its bounds, in input order."""
        pairs = []
        for cabinet in cabinets:
            rect = self.bounds(cabinet)
            if rect is None:
                logger.debug(f"Skipping cabinet {cabinet.id}: no bounds")
                continue
            pairs.append((cabinet, rect))
        return pairs

    def layout_bounds(self, cabinets: tuple[Cabinet, ...] | list[Cabinet]) -> LayoutExtent:
        """Bounding box of every resolvable cabinet.

        Returns an empty extent (all zeros) when nothing resolves.
        """
        return LayoutExtent.from_bounds([rect for _, rect in self.resolved(cabinets)])

    def connected_groups(
        self, cabinets: tuple[Cabinet, ...] | list[Cabinet]
    ) -> list[LayoutExtent]:
        """Group cabinets into connected screens.

        Args:
            cabinets: Cabinets to group. Unresolvable cabinets are ignored.

        Returns:
            One extent per connected component, sorted by top edge then
            left edge.
        """
        rects = [rect for _, rect in self.resolved(cabinets)]
        neighbours: list[list[int]] = [[] for _ in rects]
        for i in range(len(rects)):
            for j in range(i + 1, len(rects)):
                if rects[i].is_connected_to(rects[j]):
                    neighbours[i].append(j)
                    neighbours[j].append(i)

        visited = [False] * len(rects)
        groups: list[LayoutExtent] = []
        for start in range(len(rects)):
            if visited[start]:
                continue
            visited[start] = True
            queue = deque([start])
            members = []
            while queue:
                current = queue.popleft()
                members.append(rects[current])
                for nxt in neighbours[current]:
                    if not visited[nxt]:
                        visited[nxt] = True
                        queue.append(nxt)
            groups.append(LayoutExtent.from_bounds(members))

        groups.sort(key=lambda g: (g.min_y, g.min_x))
        return groups

    def has_neighbour(self, target: Bounds, others: list[Bounds]) -> bool:
        """True when ``target`` is connected to any rectangle in ``others``."""
        return any(target.is_connected_to(other) for other in others)


def cluster_row_centers(
    rects: list[Bounds], tolerance: float = ROW_CLUSTER_TOLERANCE_MM
) -> list[float]:
    """Distinct row centre lines, top to bottom.

    Each rectangle joins the first known row whose centre is within
    ``tolerance`` of its own centre; otherwise it opens a new row.
    """
    rows: list[float] = []
    for rect in rects:
        if not any(abs(row - rect.center_y) < tolerance for row in rows):
            rows.append(rect.center_y)
    return sorted(rows)


def row_index(rows: list[float], center_y: float) -> int:
    """Index of the row nearest to ``center_y``; the first one wins ties."""
    if not rows:
        return 0
    return min(range(len(rows)), key=lambda i: (abs(rows[i] - center_y), i))
