"""Pixel and power load accounting.

Pixel counts use the effective pitch and half-up rounding per cabinet side.
Power loads use the rotated cabinet area at a fixed areal density.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..entities import Cabinet, DataRoute, Layout, PowerFeed
from ..value_objects import (
    BREAKER_LIMITS,
    CONTROLLER_LIMITS,
    P156_EFFECTIVE_PITCH_MM,
    P156_NOMINAL_PITCH_MM,
    PER_PORT_MAX_PX,
    PITCH_MATCH_TOLERANCE,
    POWER_DENSITY_W_M2,
    ControllerLoad,
    ControllerModel,
    FeedLoad,
    LayoutExtent,
    PixelDimensions,
    ProjectMode,
    RouteLoad,
)
from .geometry import GeometryResolver

logger = logging.getLogger(__name__)

__all__ = [
    "CapacityModel",
    "effective_pitch",
    "round_half_up",
    "breaker_safe_max_w",
]

# Row bands in the pixel matrix merge when they come within this distance.
ROW_BAND_TOLERANCE_MM = 1.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded toward +infinity.

    Python's ``round`` rounds halves to even, which would shift pixel
    counts such as 408.5 down to 408.
    """
    return math.floor(value + 0.5)


def effective_pitch(pitch_mm: float) -> float:
    """Return the pitch used for pixel arithmetic.

    1.56 mm panels resolve as 1.568627 mm. Non-finite or non-positive values
    are returned unchanged so callers can treat them as zero capacity.
    """
    if not math.isfinite(pitch_mm) or pitch_mm <= 0:
        return pitch_mm
    if abs(pitch_mm - P156_NOMINAL_PITCH_MM) <= PITCH_MATCH_TOLERANCE:
        return P156_EFFECTIVE_PITCH_MM
    return pitch_mm


def _usable(pitch_mm: float) -> bool:
    return math.isfinite(pitch_mm) and pitch_mm > 0


def breaker_safe_max_w(breaker: str | None) -> int | None:
    """Safe continuous load for a breaker spec, ``None`` when unknown."""
    if not breaker:
        return None
    limit = BREAKER_LIMITS.get(breaker)
    return limit.safe_w if limit else None


@dataclass
class _RowBand:
    min_y: float
    max_y: float
    width_mm: float


class CapacityModel:
    """Capacity accounting for one layout snapshot.

    Attributes:
        layout: Snapshot being measured.
        geometry: Resolver bound to the layout catalog.
        pitch_mm: Effective pitch of the layout.
    """

    def __init__(self, layout: Layout, geometry: GeometryResolver | None = None) -> None:
        self.layout = layout
        self.geometry = geometry or GeometryResolver.for_layout(layout)
        self.pitch_mm = effective_pitch(layout.settings.pitch_mm)
        self._cabinets = layout.cabinet_index()

    def _px(self, length_mm: float) -> int:
        if not _usable(self.pitch_mm):
            return 0
        return round_half_up(length_mm / self.pitch_mm)

    def cabinet_pixel_area(self, cabinet: Cabinet) -> int:
        """Pixel count of one cabinet; 0 when unresolved or pitch invalid."""
        rect = self.geometry.bounds(cabinet)
        if rect is None:
            return 0
        return self._px(rect.width) * self._px(rect.height)

    def route_load_px(self, route: DataRoute) -> float:
        """Pixels carried by a data route.

        Dual-card cabinets split their area between the two cards. Cabinets
        without cards, missing cabinets and free points add nothing.
        """
        total = 0.0
        for step in route.cabinet_steps:
            cabinet = self._cabinets.get(step.cabinet_id)
            if cabinet is None:
                logger.debug(f"Route {route.id}: skipping missing cabinet {step.cabinet_id}")
                continue
            cards = cabinet.card_count
            if cards == 0:
                continue
            divisor = 2 if cards == 2 else 1
            total += self.cabinet_pixel_area(cabinet) / divisor
        return total

    def route_load(self, route: DataRoute) -> RouteLoad:
        return RouteLoad(route_id=route.id, port=route.port, load_px=self.route_load_px(route))

    def is_route_over_capacity(self, route: DataRoute) -> bool:
        return self.route_load_px(route) > PER_PORT_MAX_PX

    def total_pixel_load(self) -> int:
        return sum(self.cabinet_pixel_area(c) for c in self.layout.cabinets)

    def layout_pixel_dimensions(self) -> PixelDimensions:
        """Layout bounding box converted to pixels."""
        extent = self.geometry.layout_bounds(self.layout.cabinets)
        if extent.is_empty:
            return PixelDimensions()
        return PixelDimensions(self._px(extent.width), self._px(extent.height))

    def controller_load(self, controller: ControllerModel | None = None) -> ControllerLoad:
        """Pixel load against a controller model.

        Args:
            controller: Model to check. Defaults to the layout controller.
        """
        model = controller or self.layout.settings.controller
        dims = self.layout_pixel_dimensions()
        return ControllerLoad(
            controller=model,
            limits=CONTROLLER_LIMITS[model],
            total_px=self.total_pixel_load(),
            width_px=dims.width_px,
            height_px=dims.height_px,
        )

    def is_controller_over_capacity(self, controller: ControllerModel | None = None) -> bool:
        return self.controller_load(controller).is_over_capacity

    def feed_load_w(self, feed: PowerFeed) -> int:
        """Estimated feed load in watts, rounded half-up."""
        total = 0.0
        for step in feed.cabinet_steps:
            cabinet = self._cabinets.get(step.cabinet_id)
            if cabinet is None:
                logger.debug(f"Feed {feed.id}: skipping missing cabinet {step.cabinet_id}")
                continue
            rect = self.geometry.bounds(cabinet)
            if rect is None:
                continue
            total += rect.area / 1_000_000 * POWER_DENSITY_W_M2
        return round_half_up(total)

    def feed_load(self, feed: PowerFeed) -> FeedLoad:
        return FeedLoad(
            feed_id=feed.id,
            breaker=feed.breaker,
            load_w=self.feed_load_w(feed),
            safe_max_w=breaker_safe_max_w(feed.breaker),
        )

    def is_feed_overloaded(self, feed: PowerFeed) -> bool:
        return self.feed_load(feed).is_overloaded

    def pixel_matrix_dimensions(self) -> PixelDimensions:
        """Size of the pixel canvas the controller has to drive.

        Indoor screens that sit side by side are laid out in one row band,
        so their widths add up; separate row bands stack vertically. Outdoor
        layouts use the plain bounding box.
        """
        if not _usable(self.pitch_mm) or not self.layout.cabinets:
            return PixelDimensions()
        extent = self.geometry.layout_bounds(self.layout.cabinets)
        if extent.is_empty:
            return PixelDimensions()
        if self.layout.settings.mode != ProjectMode.INDOOR:
            return PixelDimensions(self._px(extent.width), self._px(extent.height))

        groups = sorted(
            self.geometry.connected_groups(self.layout.cabinets), key=lambda g: g.min_y
        )
        bands = _merge_row_bands(groups)
        width_mm = max((band.width_mm for band in bands), default=0.0)
        height_mm = sum(band.max_y - band.min_y for band in bands)
        return PixelDimensions(self._px(width_mm), self._px(height_mm))


def _merge_row_bands(groups: list[LayoutExtent]) -> list[_RowBand]:
    bands: list[_RowBand] = []
    tol = ROW_BAND_TOLERANCE_MM
    for group in groups:
        target = next(
            (
                band
                for band in bands
                if not (group.min_y > band.max_y + tol or group.max_y < band.min_y - tol)
            ),
            None,
        )
        if target is None:
            bands.append(_RowBand(group.min_y, group.max_y, group.width))
            continue
        target.width_mm += group.width
        target.min_y = min(target.min_y, group.min_y)
        target.max_y = max(target.max_y, group.max_y)
    return bands
