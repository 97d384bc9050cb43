"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from ledwall.domain import Bounds, Layout, LayoutExtent, ValidationReport
from ledwall.domain.value_objects import (
    ControllerLoad,
    FeedLoad,
    LabelLayout,
    PixelDimensions,
    RouteLoad,
    RoutePath,
)


@dataclass
class LayoutAnalysis:
    """Every derived value computed for one layout snapshot.

    Attributes:
        layout: The analysed snapshot, passed through unchanged.
        bounds: Rotated bounds per resolvable cabinet id.
        extent: Bounding box of the whole wall.
        groups: Connected screens, top to bottom then left to right.
        validation: Structural findings.
        cabinet_pixels: Pixel area per resolvable cabinet id.
        route_loads: Pixel load per data route.
        controller_load: Total pixel load against the controller model.
        pixel_matrix: Size of the canvas the controller has to drive.
        feed_loads: Electrical load per power feed.
        grid_labels: Grid address per cabinet id.
        mapping_labels: Mapping number per endpoint key.
        card_labels: Receiver card caption per cabinet id, ``None`` if hidden.
        route_paths: Anchors and polylines per data route.
        feed_paths: Anchors and polylines per power feed.
        labels: Placed annotation labels.
    """

    layout: Layout
    bounds: dict[str, Bounds] = field(default_factory=dict)
    extent: LayoutExtent = field(default_factory=LayoutExtent.empty)
    groups: list[LayoutExtent] = field(default_factory=list)
    validation: ValidationReport = field(default_factory=ValidationReport)
    cabinet_pixels: dict[str, int] = field(default_factory=dict)
    route_loads: list[RouteLoad] = field(default_factory=list)
    controller_load: ControllerLoad | None = None
    pixel_matrix: PixelDimensions = field(default_factory=PixelDimensions)
    feed_loads: list[FeedLoad] = field(default_factory=list)
    grid_labels: dict[str, str] = field(default_factory=dict)
    mapping_labels: dict[str, str] = field(default_factory=dict)
    card_labels: dict[str, str | None] = field(default_factory=dict)
    route_paths: list[RoutePath] = field(default_factory=list)
    feed_paths: list[RoutePath] = field(default_factory=list)
    labels: LabelLayout = field(default_factory=LabelLayout)

    @property
    def is_valid(self) -> bool:
        """Check if the layout has no error-level findings."""
        return self.validation.is_valid

    @property
    def overloaded_routes(self) -> list[RouteLoad]:
        return [load for load in self.route_loads if load.is_over_capacity]

    @property
    def overloaded_feeds(self) -> list[FeedLoad]:
        return [load for load in self.feed_loads if load.is_overloaded]

    @property
    def total_pixels(self) -> int:
        return self.controller_load.total_px if self.controller_load else 0
