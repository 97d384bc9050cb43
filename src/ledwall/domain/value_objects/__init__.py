"""Value objects for the LED wall domain.

This module provides immutable data types used throughout the planner.
All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Planar geometry
from ._geometry import (
    TOUCH_TOLERANCE_MM,
    Bounds,
    LayoutExtent,
    Point2D,
)

# Catalog and project enums
from ._catalog import (
    DEFAULT_RECEIVER_CARD_MODEL,
    INDOOR_CABINET_TYPES,
    INDOOR_PITCH_OPTIONS,
    OUTDOOR_CABINET_TYPES,
    OUTDOOR_PITCH_OPTIONS,
    RECEIVER_CARD_MODELS,
    CabinetType,
    ControllerModel,
    GridLabelAxis,
    ModuleOrientation,
    ModuleSize,
    PitchOption,
    ProjectMode,
    ReceiverCardModel,
    mode_cabinet_types,
    mode_module_sizes,
    mode_pitch_options,
)

# Receiver card geometry
from ._cards import CardRect, DataPorts, PowerPorts

# Validation findings
from ._findings import (
    FindingCode,
    Severity,
    ValidationError,
    ValidationReport,
)

# Capacity tables and results
from ._capacity import (
    BREAKER_LIMITS,
    CONTROLLER_LIMITS,
    P156_EFFECTIVE_PITCH_MM,
    P156_NOMINAL_PITCH_MM,
    PER_PORT_MAX_PX,
    PITCH_MATCH_TOLERANCE,
    POWER_DENSITY_W_M2,
    BreakerLimit,
    ControllerLimits,
    ControllerLoad,
    FeedLoad,
    PixelDimensions,
    RouteLoad,
)

# Routing
from ._routing import (
    ENDPOINT_CARD_SEPARATOR,
    Anchor,
    CabinetStep,
    Direction,
    LabelPosition,
    PointStep,
    PortRole,
    RoutePath,
    RouteStep,
    TerminalMarker,
)

# Annotation labels
from ._labels import (
    LabelBox,
    LabelFontSize,
    LabelKind,
    LabelLayout,
    MappingLabelPosition,
    PackItem,
)

__all__ = [
    # Geometry
    "TOUCH_TOLERANCE_MM",
    "Bounds",
    "LayoutExtent",
    "Point2D",
    # Catalog
    "DEFAULT_RECEIVER_CARD_MODEL",
    "INDOOR_CABINET_TYPES",
    "INDOOR_PITCH_OPTIONS",
    "OUTDOOR_CABINET_TYPES",
    "OUTDOOR_PITCH_OPTIONS",
    "RECEIVER_CARD_MODELS",
    "CabinetType",
    "ControllerModel",
    "GridLabelAxis",
    "ModuleOrientation",
    "ModuleSize",
    "PitchOption",
    "ProjectMode",
    "ReceiverCardModel",
    "mode_cabinet_types",
    "mode_module_sizes",
    "mode_pitch_options",
    # Cards
    "CardRect",
    "DataPorts",
    "PowerPorts",
    # Findings
    "FindingCode",
    "Severity",
    "ValidationError",
    "ValidationReport",
    # Capacity
    "BREAKER_LIMITS",
    "CONTROLLER_LIMITS",
    "P156_EFFECTIVE_PITCH_MM",
    "P156_NOMINAL_PITCH_MM",
    "PER_PORT_MAX_PX",
    "PITCH_MATCH_TOLERANCE",
    "POWER_DENSITY_W_M2",
    "BreakerLimit",
    "ControllerLimits",
    "ControllerLoad",
    "FeedLoad",
    "PixelDimensions",
    "RouteLoad",
    # Routing
    "ENDPOINT_CARD_SEPARATOR",
    "Anchor",
    "CabinetStep",
    "Direction",
    "LabelPosition",
    "PointStep",
    "PortRole",
    "RoutePath",
    "RouteStep",
    "TerminalMarker",
    # Labels
    "LabelBox",
    "LabelFontSize",
    "LabelKind",
    "LabelLayout",
    "MappingLabelPosition",
    "PackItem",
]
