"""Layout document schema, loading and conversion.

Public API:
    - LayoutConfiguration: Root document model
    - load_layout: Load a document from a JSON file
    - load_layout_from_dict: Load a document from a dictionary
    - LayoutLoadError: Exception for unreadable or invalid documents
    - config_to_layout: Convert a document into a domain Layout

Example:
    >>> from pathlib import Path
    >>> from ledwall.application.config import LayoutLoadError, config_to_layout, load_layout
    >>>
    >>> try:
    ...     layout = config_to_layout(load_layout(Path("wall.json")))
    ... except LayoutLoadError as e:
    ...     print(f"Error: {e}")
"""

from ledwall.application.config.adapter import (
    config_to_cabinet,
    config_to_feed,
    config_to_layout,
    config_to_route,
    config_to_settings,
    config_to_step,
)
from ledwall.application.config.loader import (
    DocumentIssue,
    LayoutLoadError,
    load_layout,
    load_layout_from_dict,
)
from ledwall.application.config.schema import (
    SUPPORTED_VERSIONS,
    AnchorConfig,
    CabinetConfig,
    CabinetStepConfig,
    CabinetTypeConfig,
    DataRouteConfig,
    GridConfig,
    LayoutConfiguration,
    MappingNumbersConfig,
    MappingPositionOverrideConfig,
    OverviewConfig,
    PointStepConfig,
    PowerFeedConfig,
    ProjectConfig,
)

__all__ = [
    # Loading
    "DocumentIssue",
    "LayoutLoadError",
    "load_layout",
    "load_layout_from_dict",
    # Schema
    "SUPPORTED_VERSIONS",
    "AnchorConfig",
    "CabinetConfig",
    "CabinetStepConfig",
    "CabinetTypeConfig",
    "DataRouteConfig",
    "GridConfig",
    "LayoutConfiguration",
    "MappingNumbersConfig",
    "MappingPositionOverrideConfig",
    "OverviewConfig",
    "PointStepConfig",
    "PowerFeedConfig",
    "ProjectConfig",
    # Adapter
    "config_to_cabinet",
    "config_to_feed",
    "config_to_layout",
    "config_to_route",
    "config_to_settings",
    "config_to_step",
]
