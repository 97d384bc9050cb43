"""Anchor resolution and orthogonal path synthesis for routes and feeds.

Every route step is resolved to an anchor point, then consecutive anchors
are joined with axis-aligned legs. Three leg planners exist:

- the standard planner (indoor chains): straight when aligned, otherwise
  vertical, horizontal, vertical through the midpoint, with the turn pinned
  to the chain's extreme Y when the vertical direction reverses;
- the side-ported planner (outdoor chains): cabinets enter and exit through
  separate ports and vertical moves run in a lateral lane;
- the free-point planner, used whenever a chain contains hand-placed
  waypoints.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..entities import Cabinet, DataRoute, Layout, PowerFeed
from ..value_objects import (
    Anchor,
    Bounds,
    CabinetStep,
    Direction,
    LayoutExtent,
    Point2D,
    PointStep,
    PortRole,
    RoutePath,
    RouteStep,
    TerminalMarker,
)
from .geometry import GeometryResolver, cluster_row_centers, row_index
from .receiver_cards import ReceiverCardLayout

logger = logging.getLogger(__name__)

__all__ = ["RoutingSynthesizer", "STANDARD_SNAP_MM", "SIDE_PORT_SNAP_MM"]

# Legs whose offset along an axis is below this are drawn straight.
STANDARD_SNAP_MM = 10.0
SIDE_PORT_SNAP_MM = 0.75

# Cabinet steps whose x positions differ by less than this give no flow
# direction for outdoor power ports.
FLOW_DIRECTION_THRESHOLD_MM = 1.0


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class _LegState:
    """Mutable bookkeeping while walking one chain."""

    min_y: float
    max_y: float
    last_vertical_dir: int | None = None
    last_axis: str | None = None


class RoutingSynthesizer:
    """Builds anchors and paths for the routes and feeds of one layout.

    Attributes:
        layout: Snapshot being routed.
        geometry: Resolver bound to the layout catalog.
        cards: Receiver card placement for the layout zoom and mode.
        extent: Bounding box of every resolvable cabinet.
        rows: Row centre lines of the layout, top to bottom.
    """

    def __init__(self, layout: Layout, geometry: GeometryResolver | None = None) -> None:
        self.layout = layout
        self.geometry = geometry or GeometryResolver.for_layout(layout)
        self.zoom = layout.settings.zoom
        self.cards = ReceiverCardLayout(layout.settings.zoom, layout.settings.mode)
        self._cabinets = layout.cabinet_index()
        resolved = [rect for _, rect in self.geometry.resolved(layout.cabinets)]
        self.extent = LayoutExtent.from_bounds(resolved)
        self.rows = cluster_row_centers(resolved)

    @property
    def is_side_ported(self) -> bool:
        return self.layout.settings.is_outdoor

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def _lookup(self, cabinet_id: str) -> tuple[Cabinet, Bounds] | None:
        cabinet = self._cabinets.get(cabinet_id)
        if cabinet is None:
            logger.debug(f"Skipping stale endpoint {cabinet_id}: no such cabinet")
            return None
        rect = self.geometry.bounds(cabinet)
        if rect is None:
            logger.debug(f"Skipping endpoint {cabinet_id}: unresolved type {cabinet.type_id}")
            return None
        return cabinet, rect

    def _bounds_of(self, anchor: Anchor) -> Bounds | None:
        if anchor.cabinet_id is None:
            return None
        cabinet = self._cabinets.get(anchor.cabinet_id)
        return self.geometry.bounds(cabinet) if cabinet else None

    def has_visible_card(self, cabinet: Cabinet) -> bool:
        """True when a captioned receiver card is drawn on ``cabinet``."""
        overview = self.layout.settings.overview
        if cabinet.card_count == 0 or not overview.show_receiver_cards:
            return False
        if cabinet.receiver_card_label is None:
            return False
        return bool(cabinet.receiver_card_label or overview.receiver_card_model)

    @staticmethod
    def _free_anchor(step: PointStep) -> Anchor:
        return Anchor(x=step.x_mm, y=step.y_mm, is_free_point=True)

    # ------------------------------------------------------------------
    # Anchors
    # ------------------------------------------------------------------

    def data_anchor(self, cabinet: Cabinet, bounds: Bounds, card_index: int | None = None) -> Anchor:
        """Data attachment point of one cabinet endpoint.

        Carded cabinets attach at the selected card (index clamped to the
        available cards): the connector under an indoor card or the "in"
        port of an outdoor card. Cardless cabinets attach at their
        normalised override point or centre and are flagged virtual.
        """
        count = cabinet.card_count
        visible = self.has_visible_card(cabinet)
        rects = self.cards.card_rects(bounds, count)
        if rects:
            index = 0 if card_index is None else int(_clamp(card_index, 0, len(rects) - 1))
            rect = rects[index]
            if self.is_side_ported:
                port = self.cards.data_ports(rect).data_in
                return Anchor(
                    x=port.x,
                    y=port.y,
                    cabinet_id=cabinet.id,
                    card_index=index,
                    card_count=count,
                    has_visible_card=visible,
                    port_role=PortRole.IN,
                )
            return Anchor(
                x=rect.connector.x,
                y=rect.connector.y,
                cabinet_id=cabinet.id,
                card_index=index,
                card_count=count,
                has_visible_card=visible,
            )

        override = cabinet.data_anchor
        fx = _clamp(override.x, 0.0, 1.0) if override else 0.5
        fy = _clamp(override.y, 0.0, 1.0) if override else 0.5
        return Anchor(
            x=bounds.x + bounds.width * fx,
            y=bounds.y + bounds.height * fy,
            cabinet_id=cabinet.id,
            card_count=count,
            is_virtual=count == 0,
        )

    def power_anchor(self, cabinet: Cabinet, bounds: Bounds) -> Anchor:
        """Power attachment point of one cabinet.

        Left of the card body at card mid-height. With two cards the lower
        card is used when the cabinet centre lies below the layout middle.
        Cardless cabinets attach at their centre.
        """
        rects = self.cards.card_rects(bounds, cabinet.card_count)
        if not rects:
            return Anchor(
                x=bounds.center_x,
                y=bounds.center_y,
                cabinet_id=cabinet.id,
                card_count=cabinet.card_count,
            )
        mid_y = self.extent.center_y if not self.extent.is_empty else bounds.center_y
        if len(rects) == 1 or bounds.center_y <= mid_y:
            index = 0
        else:
            index = 1
        point = self.cards.power_anchor(rects[index], bounds)
        return Anchor(
            x=point.x,
            y=point.y,
            cabinet_id=cabinet.id,
            card_index=index,
            card_count=cabinet.card_count,
        )

    def resolve_data_anchors(self, route: DataRoute) -> list[Anchor]:
        """Anchors of a data route in walk order.

        Side-ported layouts give each carded cabinet an entry and an exit
        port and ignore free waypoints.
        """
        if self.is_side_ported:
            return self._side_ported_data_anchors(route.cabinet_steps)
        anchors = []
        for step in route.steps:
            if isinstance(step, PointStep):
                anchors.append(self._free_anchor(step))
                continue
            found = self._lookup(step.cabinet_id)
            if found is None:
                continue
            cabinet, bounds = found
            anchors.append(self.data_anchor(cabinet, bounds, step.card_index))
        return anchors

    def _side_ported_data_anchors(self, steps: tuple[CabinetStep, ...]) -> list[Anchor]:
        bounds_by_id: dict[str, Bounds] = {}
        for step in steps:
            found = self._lookup(step.cabinet_id)
            if found is not None:
                bounds_by_id.setdefault(step.cabinet_id, found[1])

        def step_row(step: CabinetStep) -> int | None:
            rect = bounds_by_id.get(step.cabinet_id)
            return None if rect is None else row_index(self.rows, rect.center_y)

        def screen_jump(a: CabinetStep, b: CabinetStep) -> bool:
            first, second = bounds_by_id.get(a.cabinet_id), bounds_by_id.get(b.cabinet_id)
            if first is None or second is None:
                return False
            return not first.is_connected_to(second)

        anchors: list[Anchor] = []
        previous_exit_top: bool | None = None
        for i, step in enumerate(steps):
            found = self._lookup(step.cabinet_id)
            if found is None:
                continue
            cabinet, bounds = found
            rects = self.cards.card_rects(bounds, cabinet.card_count)
            if not rects:
                anchor = self.data_anchor(cabinet, bounds, step.card_index)
                anchors.append(anchor)
                if previous_exit_top is None:
                    previous_exit_top = True
                continue

            row = row_index(self.rows, bounds.center_y)
            index = 0 if step.card_index is None else int(_clamp(step.card_index, 0, len(rects) - 1))
            ports = self.cards.data_ports(rects[index])

            if previous_exit_top is not None:
                entry_top = previous_exit_top
            else:
                # Serpentine: alternate port sides so the run ends leaving
                # from the bottom of the row.
                run = 1
                for following in steps[i + 1 :]:
                    if step_row(following) != row:
                        break
                    run += 1
                entry_top = run % 2 == 0
            if i > 0 and screen_jump(steps[i - 1], step):
                entry_top = False

            exit_top = not entry_top
            if i + 1 < len(steps):
                next_row = step_row(steps[i + 1])
                if next_row is not None and next_row != row and not screen_jump(step, steps[i + 1]):
                    exit_top = True

            visible = self.has_visible_card(cabinet)
            for top, role in ((entry_top, PortRole.IN), (exit_top, PortRole.OUT)):
                point = ports.data_in if top else ports.data_out
                anchors.append(
                    Anchor(
                        x=point.x,
                        y=point.y,
                        cabinet_id=cabinet.id,
                        card_index=index,
                        card_count=cabinet.card_count,
                        has_visible_card=visible,
                        port_role=role,
                    )
                )
            previous_exit_top = exit_top
        return anchors

    def resolve_power_anchors(self, feed: PowerFeed) -> list[Anchor]:
        """Anchors of a power feed in walk order."""
        if self.is_side_ported and not feed.has_free_points:
            return self._side_ported_power_anchors(feed.cabinet_steps)
        anchors = []
        for step in feed.steps:
            if isinstance(step, PointStep):
                anchors.append(self._free_anchor(step))
                continue
            found = self._lookup(step.cabinet_id)
            if found is None:
                continue
            anchors.append(self.power_anchor(*found))
        return anchors

    def _flow_direction(self, steps: tuple[CabinetStep, ...], i: int) -> int:
        """-1 when power flows right to left through step ``i``, else 1."""
        current = self._cabinets[steps[i].cabinet_id]
        direction = 0
        if i + 1 < len(steps):
            following = self._cabinets.get(steps[i + 1].cabinet_id)
            if following is not None:
                dx = following.x_mm - current.x_mm
                if abs(dx) > FLOW_DIRECTION_THRESHOLD_MM:
                    direction = _sign(dx)
        if direction == 0 and i > 0:
            previous = self._cabinets.get(steps[i - 1].cabinet_id)
            if previous is not None:
                dx = current.x_mm - previous.x_mm
                if abs(dx) > FLOW_DIRECTION_THRESHOLD_MM:
                    direction = _sign(dx)
        return -1 if direction < 0 else 1

    def _side_ported_power_anchors(self, steps: tuple[CabinetStep, ...]) -> list[Anchor]:
        anchors: list[Anchor] = []
        for i, step in enumerate(steps):
            found = self._lookup(step.cabinet_id)
            if found is None:
                continue
            cabinet, bounds = found
            rects = self.cards.card_rects(bounds, cabinet.card_count)
            ports = self.cards.power_ports(bounds, rects)
            if ports is None:
                logger.debug(f"Cabinet {cabinet.id} is too short for power ports")
                continue
            if self._flow_direction(steps, i) < 0:
                entry, exit_ = ports.right, ports.left
            else:
                entry, exit_ = ports.left, ports.right
            for point, role in ((entry, PortRole.IN), (exit_, PortRole.OUT)):
                anchors.append(
                    Anchor(
                        x=point.x,
                        y=point.y,
                        cabinet_id=cabinet.id,
                        card_count=cabinet.card_count,
                        port_role=role,
                    )
                )
        return anchors

    # ------------------------------------------------------------------
    # Leg planners
    # ------------------------------------------------------------------

    def _standard_leg(
        self, prev: Anchor, curr: Anchor, state: _LegState, tol: float = STANDARD_SNAP_MM
    ) -> list[Point2D]:
        dx, dy = curr.x - prev.x, curr.y - prev.y
        dir_y = _sign(dy)
        if abs(dx) < tol and abs(dy) < tol:
            return [curr.point]
        if abs(dy) < tol:
            return [curr.point]

        reverses = (
            state.last_vertical_dir is not None
            and dir_y != 0
            and dir_y != state.last_vertical_dir
        )
        if dir_y != 0:
            state.last_vertical_dir = dir_y
        if reverses:
            turn_y = state.min_y if dir_y > 0 else state.max_y
            return [Point2D(prev.x, turn_y), Point2D(curr.x, turn_y), curr.point]
        if abs(dx) < tol:
            return [curr.point]
        mid_y = (prev.y + curr.y) / 2
        return [Point2D(prev.x, mid_y), Point2D(curr.x, mid_y), curr.point]

    def _free_point_data_leg(self, prev: Anchor, curr: Anchor) -> list[Point2D]:
        dx, dy = curr.x - prev.x, curr.y - prev.y
        if abs(dx) < STANDARD_SNAP_MM or abs(dy) < STANDARD_SNAP_MM:
            return [curr.point]
        return [Point2D(prev.x, curr.y), curr.point]

    def _free_point_power_leg(self, prev: Anchor, curr: Anchor, state: _LegState) -> list[Point2D]:
        """Alternate horizontal-first and vertical-first legs."""
        adx, ady = abs(curr.x - prev.x), abs(curr.y - prev.y)
        tol = STANDARD_SNAP_MM
        if adx < tol or ady < tol:
            if adx < tol and ady >= tol:
                state.last_axis = "v"
            elif ady < tol and adx >= tol:
                state.last_axis = "h"
            return [curr.point]
        horizontal_first = state.last_axis == "h" or (state.last_axis is None and adx >= ady)
        if horizontal_first:
            state.last_axis = "v"
            return [Point2D(curr.x, prev.y), curr.point]
        state.last_axis = "h"
        return [Point2D(prev.x, curr.y), curr.point]

    def _reference_metrics(
        self, prev: Anchor, curr: Anchor
    ) -> tuple[Bounds | None, Bounds | None, float, bool]:
        prev_b, curr_b = self._bounds_of(prev), self._bounds_of(curr)
        ref_w = min(
            prev_b.width if prev_b else math.inf,
            curr_b.width if curr_b else math.inf,
        )
        prev_cx = prev_b.center_x if prev_b else prev.x
        curr_cx = curr_b.center_x if curr_b else curr.x
        if math.isfinite(ref_w):
            same_column = abs(prev_cx - curr_cx) <= ref_w * 0.28
        else:
            same_column = abs(curr.x - prev.x) <= 120 / self.zoom
        return prev_b, curr_b, ref_w, same_column

    def _side_ported_data_leg(self, prev: Anchor, curr: Anchor, state: _LegState) -> list[Point2D]:
        tol = SIDE_PORT_SNAP_MM
        dx, dy = curr.x - prev.x, curr.y - prev.y
        adx, ady = abs(dx), abs(dy)
        if adx < tol and ady < tol:
            return [curr.point]
        if not (ady >= tol and ady > adx):
            return self._standard_leg(prev, curr, state, tol)

        z = self.zoom
        prev_b, curr_b, ref_w, same_column = self._reference_metrics(prev, curr)
        finite = math.isfinite(ref_w)
        transition = prev_b is not None and curr_b is not None and prev.cabinet_id != curr.cabinet_id
        jump = prev_b is not None and curr_b is not None and not prev_b.is_connected_to(curr_b)
        preferred = -1 if prev.x < self.extent.center_x else 1
        prev_cx = prev_b.center_x if prev_b else prev.x
        lane_sign = 1 if prev.x >= prev_cx else -1

        gap = (32 if jump else 16) / z
        edge_inset = (4 if jump else 10) / z
        min_lane = self.extent.min_x + edge_inset
        max_lane = self.extent.max_x - edge_inset
        right_candidate = max(prev.x, curr.x) + gap
        left_candidate = min(prev.x, curr.x) - gap
        dir_y = _sign(dy)
        if dir_y != 0:
            state.last_vertical_dir = dir_y

        def lane_path(lane_x: float) -> list[Point2D]:
            return [Point2D(lane_x, prev.y), Point2D(lane_x, curr.y), curr.point]

        if transition and same_column and adx <= tol * 2:
            offset = max(28 / z, ref_w * 0.1) if finite else 28 / z
            return lane_path(_clamp(prev.x + lane_sign * offset, min_lane, max_lane))

        mid_x = (prev.x + curr.x) / 2
        if transition and same_column:
            bend = max(24 / z, ref_w * 0.08) if finite else 24 / z
            lane_x = _clamp(mid_x + lane_sign * bend, min_lane, max_lane)
        elif jump:
            edge = self.extent.max_x - edge_inset if preferred > 0 else self.extent.min_x + edge_inset
            lane_x = _clamp(edge, min_lane, max_lane)
        elif preferred > 0:
            lane_x = min(max_lane, right_candidate)
        else:
            lane_x = max(min_lane, left_candidate)

        min_gap = (4 if jump else 12) / z

        def clear(x: float) -> bool:
            return abs(x - prev.x) >= min_gap and abs(x - curr.x) >= min_gap

        if not clear(lane_x):
            if transition and same_column:
                enforced = max(min_gap, ref_w * 0.08) if finite else max(min_gap, 24 / z)
                preferred_x = _clamp(mid_x + lane_sign * enforced, min_lane, max_lane)
                alternate_x = _clamp(mid_x - lane_sign * enforced, min_lane, max_lane)
                if clear(preferred_x):
                    lane_x = preferred_x
                elif clear(alternate_x):
                    lane_x = alternate_x
            elif jump:
                nudge = 2 / z
                if preferred > 0:
                    lane_x = min(max_lane, max(lane_x, max(prev.x, curr.x) + nudge))
                else:
                    lane_x = max(min_lane, min(lane_x, min(prev.x, curr.x) - nudge))
            else:
                if preferred > 0:
                    alternate_x = max(min_lane, left_candidate)
                else:
                    alternate_x = min(max_lane, right_candidate)
                if clear(alternate_x):
                    lane_x = alternate_x
        return lane_path(lane_x)

    def _side_ported_power_leg(self, prev: Anchor, curr: Anchor) -> list[Point2D]:
        tol = SIDE_PORT_SNAP_MM
        z = self.zoom
        adx, ady = abs(curr.x - prev.x), abs(curr.y - prev.y)
        prev_b, curr_b, ref_w, same_column = self._reference_metrics(prev, curr)
        transition = (
            prev.cabinet_id is not None
            and curr.cabinet_id is not None
            and prev.cabinet_id != curr.cabinet_id
        )

        if transition and ady >= tol and same_column:
            prev_cx = prev_b.center_x if prev_b else prev.x
            lane_sign = 1 if prev.x >= prev_cx else -1
            offset = max(28 / z, ref_w * 0.09) if math.isfinite(ref_w) else 58 / z
            base_x = max(prev.x, curr.x) if lane_sign > 0 else min(prev.x, curr.x)
            lane_x = base_x + lane_sign * offset
            vertical_dir = _sign(curr.y - prev.y) or 1
            base_h = min(
                prev_b.height if prev_b else math.inf,
                curr_b.height if curr_b else math.inf,
            )
            min_clearance = max(36 / z, base_h * 0.24) if math.isfinite(base_h) else 48 / z
            clearance = min(max(min_clearance, ady * 0.42), ady * 0.5)
            approach_y = curr.y - vertical_dir * clearance
            return [
                Point2D(lane_x, prev.y),
                Point2D(lane_x, approach_y),
                Point2D(curr.x, approach_y),
                curr.point,
            ]
        if adx < tol or ady < tol:
            return [curr.point]
        if transition and ady > adx:
            return [Point2D(curr.x, prev.y), curr.point]
        return [Point2D(prev.x, curr.y), curr.point]

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @staticmethod
    def _is_internal_bridge(prev: Anchor, curr: Anchor) -> bool:
        return (
            prev.cabinet_id is not None
            and prev.cabinet_id == curr.cabinet_id
            and prev.port_role == PortRole.IN
            and curr.port_role == PortRole.OUT
        )

    def _walk(self, anchors: list[Anchor], leg, split_bridges: bool) -> tuple[tuple[Point2D, ...], ...]:
        if not anchors:
            return ()
        state = _LegState(
            min_y=min(a.y for a in anchors),
            max_y=max(a.y for a in anchors),
        )
        polylines: list[list[Point2D]] = [[anchors[0].point]]
        for prev, curr in zip(anchors, anchors[1:]):
            if split_bridges and self._is_internal_bridge(prev, curr):
                polylines.append([curr.point])
                continue
            polylines[-1].extend(leg(prev, curr, state))
        return tuple(tuple(line) for line in polylines)

    @staticmethod
    def _arrival(polylines: tuple[tuple[Point2D, ...], ...]) -> Direction | None:
        last_line = polylines[-1] if polylines else ()
        if len(last_line) < 2:
            return None
        return Direction.between(last_line[-2], last_line[-1])

    def route_path(self, route: DataRoute) -> RoutePath:
        """Anchors, polylines and markers for one data route."""
        anchors = self.resolve_data_anchors(route)
        if self.is_side_ported:
            polylines = self._walk(anchors, self._side_ported_data_leg, split_bridges=True)
        elif route.has_free_points:
            polylines = self._walk(
                anchors, lambda p, c, _s: self._free_point_data_leg(p, c), split_bridges=False
            )
        else:
            polylines = self._walk(anchors, self._standard_leg, split_bridges=False)

        marker = None
        if len(anchors) > 1 and not anchors[-1].has_visible_card:
            direction = self._arrival(polylines) or Direction.DOWN
            marker = TerminalMarker(point=anchors[-1].point, direction=direction)

        return RoutePath(
            route_id=route.id,
            anchors=tuple(anchors),
            polylines=polylines,
            terminal_marker=marker,
            virtual_anchors=tuple(a.point for a in anchors if a.is_virtual),
        )

    def feed_path(self, feed: PowerFeed, approach_from: Point2D | None = None) -> RoutePath:
        """Anchors, polylines and end marker for one power feed.

        Args:
            feed: Feed to route.
            approach_from: Where the feed's leader starts. Orients the end
                marker of a single-anchor feed.
        """
        anchors = self.resolve_power_anchors(feed)
        side_ported = self.is_side_ported and not feed.has_free_points
        if side_ported:
            polylines = self._walk(
                anchors, lambda p, c, _s: self._side_ported_power_leg(p, c), split_bridges=True
            )
        elif feed.has_free_points:
            polylines = self._walk(anchors, self._free_point_power_leg, split_bridges=False)
        else:
            polylines = self._walk(anchors, self._standard_leg, split_bridges=False)

        marker = None
        if anchors and not side_ported:
            direction = self._arrival(polylines)
            if direction is None and approach_from is not None:
                direction = Direction.between(approach_from, anchors[-1].point)
            marker = TerminalMarker(point=anchors[-1].point, direction=direction or Direction.DOWN)

        return RoutePath(
            route_id=feed.id,
            anchors=tuple(anchors),
            polylines=polylines,
            terminal_marker=marker,
        )

    def route_paths(self) -> list[RoutePath]:
        return [self.route_path(route) for route in self.layout.data_routes]

    def feed_paths(self) -> list[RoutePath]:
        return [self.feed_path(feed) for feed in self.layout.power_feeds]

    def step_position(self, step: RouteStep) -> Point2D | None:
        """Data anchor position of a single step, ``None`` if stale."""
        if isinstance(step, PointStep):
            return step.point
        found = self._lookup(step.cabinet_id)
        if found is None:
            return None
        return self.data_anchor(found[0], found[1], step.card_index).point
