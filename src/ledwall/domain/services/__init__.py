"""Domain services for LED wall layouts.

This package provides the layout engine:
- Cabinet type resolution and rotated geometry
- Structural validation
- Pixel and power capacity accounting
- Grid addresses, mapping numbers and card captions
- Receiver card placement, anchor resolution and cable routing
- Annotation label placement
"""

from .addressing import (
    GridAddressLabeler,
    MappingNumberAssigner,
    build_sequence,
    column_label,
    dominant_card_index,
    grid_labels,
    mapping_labels,
    receiver_card_label,
)
from .capacity import CapacityModel, breaker_safe_max_w, effective_pitch, round_half_up
from .geometry import GeometryResolver, are_connected, overlaps
from .label_placement import LabelPlacementSolver, pack_intervals, scaled_world_size
from .receiver_cards import ReceiverCardLayout
from .routing import RoutingSynthesizer
from .type_resolution import (
    CabinetTypeResolver,
    CatalogTypeResolver,
    PatternTypeResolver,
    TypeResolver,
)
from .validation import LayoutValidator, validate

__all__ = [
    # Type resolution
    "CabinetTypeResolver",
    "CatalogTypeResolver",
    "PatternTypeResolver",
    "TypeResolver",
    # Geometry
    "GeometryResolver",
    "are_connected",
    "overlaps",
    # Validation
    "LayoutValidator",
    "validate",
    # Capacity
    "CapacityModel",
    "breaker_safe_max_w",
    "effective_pitch",
    "round_half_up",
    # Addressing
    "GridAddressLabeler",
    "MappingNumberAssigner",
    "build_sequence",
    "column_label",
    "dominant_card_index",
    "grid_labels",
    "mapping_labels",
    "receiver_card_label",
    # Routing
    "ReceiverCardLayout",
    "RoutingSynthesizer",
    # Labels
    "LabelPlacementSolver",
    "pack_intervals",
    "scaled_world_size",
]
