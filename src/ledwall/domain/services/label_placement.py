"""Placement of port, breaker, grid-address and mapping-number labels.

Route and feed labels sit outside the wall on one of four sides. Labels that
land on the same side are packed along that side so they never overlap;
each keeps its natural position unless a neighbour pushes it away.

Glyph sizes are screen pixels. :func:`scaled_world_size` clamps them to a
readable on-screen range and converts them to millimetres for the layout
zoom.
"""

from __future__ import annotations

import logging
import math

from ..entities import DataRoute, Layout, MappingPositionOverride, PowerFeed
from ..value_objects import (
    Bounds,
    CabinetStep,
    LabelBox,
    LabelFontSize,
    LabelKind,
    LabelLayout,
    LabelPosition,
    LayoutExtent,
    MappingLabelPosition,
    PackItem,
    Point2D,
)
from .addressing import grid_labels, mapping_labels
from .capacity import CapacityModel
from .geometry import GeometryResolver, cluster_row_centers, row_index
from .routing import RoutingSynthesizer

logger = logging.getLogger(__name__)

__all__ = [
    "LabelPlacementSolver",
    "pack_intervals",
    "scaled_world_size",
    "text_width",
]

# Average advance of a bold sans-serif glyph, as a fraction of the font size.
GLYPH_WIDTH_FACTOR = 0.6

# Leaders shorter than this along an axis are drawn straight.
LEADER_SNAP_MM = 1.0

_MAPPING_FONT_BASE = {
    LabelFontSize.SMALL: 10.0,
    LabelFontSize.MEDIUM: 13.0,
    LabelFontSize.LARGE: 16.0,
}


def scaled_world_size(base_px: float, zoom: float, min_px: float, max_px: float) -> float:
    """Screen size ``base_px`` clamped to [min_px, max_px], in millimetres."""
    size_px = min(max(base_px * zoom, min_px), max_px)
    return size_px / zoom


def text_width(text: str, font_size: float) -> float:
    """Estimated rendered width of ``text`` at ``font_size``."""
    return len(text) * font_size * GLYPH_WIDTH_FACTOR


def pack_intervals(items: list[PackItem], gap: float) -> dict[str, float]:
    """Pack labels along one axis without overlap.

    Items are visited by desired centre. Each one is pushed forward only as
    far as needed for its leading edge to clear the previous item's trailing
    edge plus ``gap``.

    Args:
        items: Labels to pack.
        gap: Minimum clearance between neighbours.

    Returns:
        Packed centre per item id.
    """
    centers: dict[str, float] = {}
    last_edge = -math.inf
    for item in sorted(items, key=lambda i: i.desired_center):
        half = item.size / 2
        min_center = last_edge + gap + half
        center = max(item.desired_center, min_center)
        centers[item.item_id] = center
        last_edge = center + half
    return centers


def _leader(start: Point2D, anchor: Point2D) -> tuple[Point2D, ...]:
    if abs(anchor.x - start.x) > LEADER_SNAP_MM and abs(anchor.y - start.y) > LEADER_SNAP_MM:
        return (start, Point2D(anchor.x, start.y), anchor)
    return (start, anchor)


def _edge_point(side: LabelPosition, x: float, y: float, width: float, height: float) -> Point2D:
    """Point on the box edge facing the wall."""
    if side == LabelPosition.LEFT:
        return Point2D(x + width, y + height / 2)
    if side == LabelPosition.RIGHT:
        return Point2D(x, y + height / 2)
    if side == LabelPosition.TOP:
        return Point2D(x + width / 2, y + height)
    return Point2D(x + width / 2, y)


class _Plan:
    """A label whose size and side are known but whose position is not."""

    def __init__(
        self,
        owner_id: str,
        lines: tuple[str, ...],
        side: LabelPosition,
        center: Point2D,
        width: float,
        height: float,
        anchor: Point2D,
    ) -> None:
        self.owner_id = owner_id
        self.lines = lines
        self.side = side
        self.center = center
        self.width = width
        self.height = height
        self.anchor = anchor

    @property
    def along_side(self) -> tuple[float, float]:
        """Desired centre and size along the side the label sits on."""
        if self.side in (LabelPosition.LEFT, LabelPosition.RIGHT):
            return self.center.y, self.height
        return self.center.x, self.width


class LabelPlacementSolver:
    """Places every annotation label for one layout snapshot.

    Attributes:
        layout: Snapshot being annotated.
        geometry: Resolver bound to the layout catalog.
        routing: Synthesiser providing route and feed anchors.
        extent: Bounding box of every resolvable cabinet.
    """

    def __init__(
        self,
        layout: Layout,
        geometry: GeometryResolver | None = None,
        routing: RoutingSynthesizer | None = None,
    ) -> None:
        self.layout = layout
        self.geometry = geometry or GeometryResolver.for_layout(layout)
        self.routing = routing or RoutingSynthesizer(layout, self.geometry)
        self.capacity = CapacityModel(layout, self.geometry)
        self.zoom = layout.settings.zoom
        self._cabinets = layout.cabinet_index()
        rects = [rect for _, rect in self.geometry.resolved(layout.cabinets)]
        self.extent = LayoutExtent.from_bounds(rects)
        self.rows = cluster_row_centers(rects)

    def _sws(self, base_px: float, min_px: float, max_px: float) -> float:
        return scaled_world_size(base_px, self.zoom, min_px, max_px)

    def _first_bounds(self, steps) -> Bounds | None:
        for step in steps:
            cabinet = self._cabinets.get(step.cabinet_id)
            if cabinet is None:
                continue
            rect = self.geometry.bounds(cabinet)
            if rect is not None:
                return rect
        return None

    # ------------------------------------------------------------------
    # Side selection
    # ------------------------------------------------------------------

    def route_label_side(self, route: DataRoute, first_bounds: Bounds | None = None) -> LabelPosition:
        """Side of the wall that carries a route's port label.

        An explicit position wins, then the route's force-bottom flag (or the
        global one). Otherwise a route starting above the lowest row is
        labelled on the side of the wall its first cabinet is nearest to.
        """
        if route.label_position != LabelPosition.AUTO:
            return route.label_position
        force_bottom = route.force_label_bottom
        if force_bottom is None:
            force_bottom = self.layout.settings.overview.force_port_labels_bottom
        if force_bottom:
            return LabelPosition.BOTTOM

        if first_bounds is None:
            first_bounds = self._first_bounds(route.cabinet_steps)
        if first_bounds is None or len(self.rows) <= 1:
            return LabelPosition.BOTTOM
        if row_index(self.rows, first_bounds.center_y) >= len(self.rows) - 1:
            return LabelPosition.BOTTOM
        if first_bounds.center_x >= self.extent.center_x:
            return LabelPosition.RIGHT
        return LabelPosition.LEFT

    def feed_label_side(
        self, feed: PowerFeed, feed_extent: LayoutExtent, anchor_x: float
    ) -> LabelPosition:
        """Side of the wall that carries a feed's breaker label.

        Feeds that reach the bottom edge of the wall are labelled below it;
        others on the side nearest their first anchor.
        """
        if feed.label_position != LabelPosition.AUTO:
            return feed.label_position
        tolerance = self._sws(18, 10, 28)
        if self.extent.max_y - feed_extent.max_y <= tolerance:
            return LabelPosition.BOTTOM
        if anchor_x >= self.extent.center_x:
            return LabelPosition.RIGHT
        return LabelPosition.LEFT

    # ------------------------------------------------------------------
    # Packing
    # ------------------------------------------------------------------

    def _pack(self, plans: list[_Plan], gap: float) -> None:
        for side in LabelPosition:
            same_side = [p for p in plans if p.side == side]
            if len(same_side) < 2:
                continue
            # Keyed by position; owner ids may repeat.
            items = [PackItem(str(i), *p.along_side) for i, p in enumerate(same_side)]
            centers = pack_intervals(items, gap)
            for i, plan in enumerate(same_side):
                packed = centers[str(i)]
                if side in (LabelPosition.LEFT, LabelPosition.RIGHT):
                    plan.center = Point2D(plan.center.x, packed)
                else:
                    plan.center = Point2D(packed, plan.center.y)

    def _boxes(self, kind: LabelKind, plans: list[_Plan]) -> list[LabelBox]:
        boxes = []
        for plan in plans:
            x = plan.center.x - plan.width / 2
            y = plan.center.y - plan.height / 2
            start = _edge_point(plan.side, x, y, plan.width, plan.height)
            boxes.append(
                LabelBox(
                    kind=kind,
                    owner_id=plan.owner_id,
                    lines=plan.lines,
                    x=x,
                    y=y,
                    width=plan.width,
                    height=plan.height,
                    side=plan.side,
                    leader=_leader(start, plan.anchor),
                )
            )
        return boxes

    # ------------------------------------------------------------------
    # Route and feed labels
    # ------------------------------------------------------------------

    def port_labels(self) -> list[LabelBox]:
        """One "Port N" label per data route with a resolvable first anchor."""
        if self.extent.is_empty:
            return []
        font = self._sws(14, 12, 18)
        padding = self._sws(8, 6, 12)
        base_offset = self._sws(90, 70, 140)
        side_gap = self._sws(60, 40, 90)

        plans: list[_Plan] = []
        for route in self.layout.data_routes:
            anchor = self.routing.route_path(route).first_anchor
            if anchor is None:
                continue
            text = f"Port {route.port}"
            width = text_width(text, font) + padding * 2
            height = font + padding * 1.6
            offset = max(base_offset, height * 0.8)
            side = self.route_label_side(route)

            if side == LabelPosition.LEFT:
                cx = self.extent.min_x - side_gap - width / 2
            elif side == LabelPosition.RIGHT:
                cx = self.extent.max_x + side_gap + width / 2
            else:
                cx = anchor.x
            if side == LabelPosition.TOP:
                cy = self.extent.min_y - offset
            elif side == LabelPosition.BOTTOM:
                cy = self.extent.max_y + offset
            else:
                cy = anchor.y
            plans.append(_Plan(route.id, (text,), side, Point2D(cx, cy), width, height, anchor.point))

        self._pack(plans, self._sws(14, 10, 22))
        return self._boxes(LabelKind.PORT, plans)

    def feed_labels(self, port_labels: list[LabelBox] | None = None) -> list[LabelBox]:
        """Breaker labels, kept clear of the port labels.

        Args:
            port_labels: Already placed port labels. Computed when omitted.

        Returns:
            One label per feed with at least one resolvable cabinet.
        """
        if self.extent.is_empty:
            return []
        if port_labels is None:
            port_labels = self.port_labels()
        font = self._sws(14, 12, 18)
        padding = self._sws(9, 6, 13)
        base_offset = self._sws(140, 105, 220)
        side_gap = self._sws(110, 70, 160)
        side_label_gap = self._sws(12, 8, 18)
        below_ports_gap = self._sws(16, 10, 22)

        left_ports = [b for b in port_labels if b.side == LabelPosition.LEFT]
        right_ports = [b for b in port_labels if b.side == LabelPosition.RIGHT]
        bottom_ports = [b for b in port_labels if b.side == LabelPosition.BOTTOM]

        plans: list[_Plan] = []
        for feed in self.layout.power_feeds:
            if not feed.cabinet_steps:
                continue
            members = [
                rect
                for rect in (
                    self.geometry.bounds(self._cabinets[s.cabinet_id])
                    for s in feed.cabinet_steps
                    if s.cabinet_id in self._cabinets
                )
                if rect is not None
            ]
            if not members:
                logger.debug(f"Feed {feed.id}: no resolvable cabinets, no label")
                continue
            anchor = self.routing.feed_path(feed).first_anchor
            if anchor is None:
                continue
            feed_extent = LayoutExtent.from_bounds(members)

            load_w = self.capacity.feed_load_w(feed)
            head = f"{feed.breaker or feed.label} | {load_w}W"
            tail = (feed.custom_label or "").strip() or feed.connector
            width = max(text_width(head, font), text_width(tail, font)) + padding * 2
            height = font * 2.4 + padding * 2
            offset = max(base_offset, height * 0.78)
            side = self.feed_label_side(feed, feed_extent, anchor.x)

            if side == LabelPosition.LEFT:
                if left_ports:
                    cx = min(b.x for b in left_ports) - side_label_gap - width / 2
                else:
                    cx = self.extent.min_x - side_gap - width / 2
            elif side == LabelPosition.RIGHT:
                if right_ports:
                    cx = max(b.x2 for b in right_ports) + side_label_gap + width / 2
                else:
                    cx = self.extent.max_x + side_gap + width / 2
            else:
                cx = anchor.x

            if side == LabelPosition.BOTTOM:
                top = feed_extent.max_y + offset
                if bottom_ports:
                    top = max(top, max(b.y2 for b in bottom_ports) + below_ports_gap)
                cy = top + height / 2
            elif side == LabelPosition.TOP:
                cy = feed_extent.min_y - offset
            else:
                cy = anchor.y
            plans.append(_Plan(feed.id, (head, tail), side, Point2D(cx, cy), width, height, anchor.point))

        self._pack(plans, self._sws(14, 10, 22))
        return self._boxes(LabelKind.BREAKER, plans)

    # ------------------------------------------------------------------
    # In-cabinet labels
    # ------------------------------------------------------------------

    def grid_address_labels(self) -> list[LabelBox]:
        """Grid address boxes inset at the top-left of each cabinet."""
        z = self.zoom
        font = max(11.0, 13 / z)
        inset = 4 / z
        addresses = grid_labels(self.layout, self.geometry)
        boxes = []
        for cabinet, rect in self.geometry.resolved(self.layout.cabinets):
            text = addresses.get(cabinet.id)
            if not text:
                continue
            boxes.append(
                LabelBox(
                    kind=LabelKind.GRID_ADDRESS,
                    owner_id=cabinet.id,
                    lines=(text,),
                    x=rect.x + inset,
                    y=rect.y + inset,
                    width=text_width(text, font) + 8 / z,
                    height=font + 6 / z,
                )
            )
        return boxes

    def module_cells(self, rect: Bounds) -> list[Bounds]:
        """Module cells of a cabinet, aligned to the wall's module grid."""
        width, height = self.layout.settings.overview.module_dimensions
        if not width or not height:
            return [rect]
        origin_x = self.extent.min_x if not self.extent.is_empty else rect.x
        origin_y = self.extent.min_y if not self.extent.is_empty else rect.y
        start_x = origin_x + math.floor((rect.x - origin_x) / width) * width
        start_y = origin_y + math.floor((rect.y - origin_y) / height) * height
        eps = 1e-6
        cells = []
        x = start_x
        while x < rect.x2 - eps:
            x1, x2 = max(x, rect.x), min(x + width, rect.x2)
            if x2 > x1 + eps:
                y = start_y
                while y < rect.y2 - eps:
                    y1, y2 = max(y, rect.y), min(y + height, rect.y2)
                    if y2 > y1 + eps:
                        cells.append(Bounds(x1, y1, x2 - x1, y2 - y1))
                    y += height
            x += width
        return cells

    def _mapping_box(
        self,
        text: str,
        cell: Bounds,
        override: MappingPositionOverride | None,
    ) -> tuple[float, float, float, float]:
        settings = self.layout.settings.overview.mapping_numbers
        font = self._sws(_MAPPING_FONT_BASE[settings.font_size], 9, 20)
        pad_x = self._sws(6, 4, 10)
        pad_y = self._sws(4, 3, 8)
        inset = self._sws(6, 4, 12)
        width = text_width(text, font) + pad_x * 2
        height = font + pad_y * 2

        fallback = settings.position
        if fallback == MappingLabelPosition.CUSTOM:
            fallback = MappingLabelPosition.TOP_RIGHT
        position = override.position if override and override.position else fallback

        left, right = cell.x + inset, cell.x2 - inset - width
        top, bottom = cell.y + inset, cell.y2 - inset - height
        if position == MappingLabelPosition.CUSTOM:
            fx = min(max(override.anchor_x if override and override.anchor_x is not None else 0.5, 0.0), 1.0)
            fy = min(max(override.anchor_y if override and override.anchor_y is not None else 0.5, 0.0), 1.0)
            x = cell.x + cell.width * fx - width / 2
            y = cell.y + cell.height * fy - height / 2
        elif position == MappingLabelPosition.TOP_LEFT:
            x, y = left, top
        elif position == MappingLabelPosition.BOTTOM_LEFT:
            x, y = left, bottom
        elif position == MappingLabelPosition.BOTTOM_RIGHT:
            x, y = right, bottom
        else:
            x, y = right, top

        x = min(max(x, cell.x), max(cell.x, cell.x2 - width))
        y = min(max(y, cell.y), max(cell.y, cell.y2 - height))
        return x, y, width, height

    def mapping_number_labels(self) -> list[LabelBox]:
        """Mapping-number badges, one per module cell of each labelled endpoint.

        Dual-card cabinets label their upper cells with card 0 and their
        lower cells with card 1. Nothing is placed when badges are hidden.
        """
        settings = self.layout.settings.overview.mapping_numbers
        if not settings.show:
            return []
        labels = mapping_labels(self.layout)
        if not labels:
            return []

        boxes = []
        for cabinet, rect in self.geometry.resolved(self.layout.cabinets):
            for cell in self.module_cells(rect):
                if cabinet.card_count == 2:
                    card = 0 if cell.center_y <= rect.center_y else 1
                    key = CabinetStep(cabinet.id, card).key
                else:
                    key = cabinet.id
                text = labels.get(key)
                if not text:
                    continue
                x, y, width, height = self._mapping_box(
                    text, cell, settings.position_overrides.get(key)
                )
                boxes.append(
                    LabelBox(
                        kind=LabelKind.MAPPING_NUMBER,
                        owner_id=key,
                        lines=(text,),
                        x=x,
                        y=y,
                        width=width,
                        height=height,
                    )
                )
        return boxes

    def solve(self) -> LabelLayout:
        """Place every label kind and return them together."""
        ports = self.port_labels()
        feeds = self.feed_labels(ports)
        return LabelLayout(
            labels=tuple(
                ports + feeds + self.grid_address_labels() + self.mapping_number_labels()
            )
        )
