"""Application commands (use cases) for layout analysis."""

from __future__ import annotations

import logging

from ledwall.domain import (
    Bounds,
    CapacityModel,
    GeometryResolver,
    LabelPlacementSolver,
    Layout,
    LayoutValidator,
    RoutingSynthesizer,
)
from ledwall.domain.services import grid_labels, mapping_labels, receiver_card_label

from .dtos import LayoutAnalysis

logger = logging.getLogger(__name__)


class AnalyzeLayoutCommand:
    """Command to compute every derived value of a layout snapshot.

    The command holds no state between calls; each execution builds fresh
    engine services bound to the snapshot it is given.
    """

    def __init__(self, validator: LayoutValidator | None = None) -> None:
        self.validator = validator or LayoutValidator()

    def execute(self, layout: Layout) -> LayoutAnalysis:
        """Execute the analysis.

        Args:
            layout: Snapshot to analyse. It is never mutated.

        Returns:
            LayoutAnalysis with geometry, findings, capacities, addresses,
            paths and labels.
        """
        geometry = GeometryResolver.for_layout(layout)
        capacity = CapacityModel(layout, geometry)
        routing = RoutingSynthesizer(layout, geometry)
        labels = LabelPlacementSolver(layout, geometry, routing)

        resolved = geometry.resolved(layout.cabinets)
        logger.debug(
            f"Analysing {len(layout.cabinets)} cabinets "
            f"({len(resolved)} resolved), {len(layout.data_routes)} routes, "
            f"{len(layout.power_feeds)} feeds"
        )

        bounds: dict[str, Bounds] = {}
        for cabinet, rect in resolved:
            bounds.setdefault(cabinet.id, rect)

        return LayoutAnalysis(
            layout=layout,
            bounds=bounds,
            extent=geometry.layout_bounds(layout.cabinets),
            groups=geometry.connected_groups(layout.cabinets),
            validation=self.validator.report(layout),
            cabinet_pixels={
                cabinet.id: capacity.cabinet_pixel_area(cabinet) for cabinet, _ in resolved
            },
            route_loads=[capacity.route_load(route) for route in layout.data_routes],
            controller_load=capacity.controller_load(),
            pixel_matrix=capacity.pixel_matrix_dimensions(),
            feed_loads=[capacity.feed_load(feed) for feed in layout.power_feeds],
            grid_labels=grid_labels(layout, geometry),
            mapping_labels=mapping_labels(layout),
            card_labels={
                cabinet.id: receiver_card_label(layout.settings, cabinet)
                for cabinet, _ in resolved
            },
            route_paths=routing.route_paths(),
            feed_paths=routing.feed_paths(),
            labels=labels.solve(),
        )
