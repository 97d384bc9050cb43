"""Domain layer - layout engine for LED video walls."""

from .entities import (
    Cabinet,
    DataRoute,
    GridSettings,
    Layout,
    LayoutSettings,
    MappingNumberSettings,
    MappingPositionOverride,
    OverviewSettings,
    PowerFeed,
)
from .services import (
    CapacityModel,
    GeometryResolver,
    LabelPlacementSolver,
    LayoutValidator,
    RoutingSynthesizer,
    build_sequence,
    validate,
)
from .value_objects import (
    Bounds,
    CabinetStep,
    CabinetType,
    LayoutExtent,
    Point2D,
    PointStep,
    RouteStep,
    ValidationError,
    ValidationReport,
)

__all__ = [
    "Bounds",
    "Cabinet",
    "CabinetStep",
    "CabinetType",
    "CapacityModel",
    "DataRoute",
    "GeometryResolver",
    "GridSettings",
    "LabelPlacementSolver",
    "Layout",
    "LayoutExtent",
    "LayoutSettings",
    "LayoutValidator",
    "MappingNumberSettings",
    "MappingPositionOverride",
    "OverviewSettings",
    "Point2D",
    "PointStep",
    "PowerFeed",
    "RouteStep",
    "RoutingSynthesizer",
    "ValidationError",
    "ValidationReport",
    "build_sequence",
    "validate",
]
