"""Pydantic schema models for LED wall layout documents.

This module defines the schema of JSON layout files. It uses Pydantic v2 for
validation and serialization. Enums are reused from the domain layer so the
document and the engine share one vocabulary.

Cabinet id uniqueness, unknown cabinet types and stale route endpoints are
deliberately not rejected here: they are reported by the layout validator
so a half-finished layout can still be loaded and inspected.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ledwall.domain.value_objects import (
    DEFAULT_RECEIVER_CARD_MODEL,
    ControllerModel,
    GridLabelAxis,
    LabelFontSize,
    LabelPosition,
    MappingLabelPosition,
    ModuleOrientation,
    ModuleSize,
    ProjectMode,
    mode_module_sizes,
)

# Supported schema versions for layout files
# Version 1.0: Cabinets, data routes and power feeds with cabinet-only steps
# Version 2.0: Free waypoints, receiver card overrides and mapping numbers
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "2.0"})


class CabinetTypeConfig(BaseModel):
    """A registered cabinet type.

    Attributes:
        type_id: Catalog identifier referenced by cabinets.
        width_mm: Unrotated width in millimetres.
        height_mm: Unrotated height in millimetres.
    """

    model_config = ConfigDict(extra="forbid")

    type_id: str = Field(..., min_length=1)
    width_mm: float = Field(..., ge=0)
    height_mm: float = Field(..., ge=0)


class AnchorConfig(BaseModel):
    """Normalised point inside a cabinet (0..1 on each axis)."""

    model_config = ConfigDict(extra="forbid")

    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)


class CabinetConfig(BaseModel):
    """A placed cabinet.

    Attributes:
        id: Cabinet identifier.
        type_id: Catalog type, or any id carrying a ``WxH`` size.
        x_mm: Left edge.
        y_mm: Top edge.
        rotation: Clockwise rotation in degrees.
        receiver_card_count: 0, 1 or 2 cards; omitted means one card.
        receiver_card_label: Omitted uses the global card model, ``null``
            hides the caption, any text replaces it.
        data_anchor: Attachment point used when the cabinet has no card.
        grid_label: Manual grid address.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    type_id: str
    x_mm: float
    y_mm: float
    rotation: Literal[0, 90, 180, 270] = 0
    receiver_card_count: int | None = Field(default=None, ge=0, le=2)
    receiver_card_label: str | None = ""
    data_anchor: AnchorConfig | None = None
    grid_label: str | None = None


class CabinetStepConfig(BaseModel):
    """Route step landing on a cabinet, optionally on a specific card."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["cabinet"] = "cabinet"
    cabinet_id: str = Field(..., min_length=1)
    card_index: int | None = Field(default=None, ge=0, le=1)


class PointStepConfig(BaseModel):
    """Free waypoint placed by hand."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["point"] = "point"
    x_mm: float
    y_mm: float


StepConfig = Annotated[
    Union[CabinetStepConfig, PointStepConfig], Field(discriminator="type")
]


class DataRouteConfig(BaseModel):
    """A data chain from one controller port.

    Attributes:
        id: Route identifier.
        port: 1-based controller output.
        steps: Ordered cabinet and point steps.
        label_position: Port label placement.
        force_label_bottom: Route-level override of the global
            bottom-label flag.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    port: int = Field(..., ge=1)
    steps: list[StepConfig] = Field(default_factory=list)
    label_position: LabelPosition = LabelPosition.AUTO
    force_label_bottom: bool | None = None


class PowerFeedConfig(BaseModel):
    """A power circuit.

    Attributes:
        id: Feed identifier.
        label: Display name used when no breaker is set.
        breaker: Breaker specification such as "220V 20A".
        connector: Connector description.
        steps: Ordered cabinet and point steps.
        consumption_w: Declared consumption, informational.
        label_position: Breaker label placement.
        custom_label: Replaces the connector line of the label.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    label: str = ""
    breaker: str | None = None
    connector: str = ""
    steps: list[StepConfig] = Field(default_factory=list)
    consumption_w: float = Field(default=0.0, ge=0.0)
    label_position: LabelPosition = LabelPosition.AUTO
    custom_label: str | None = None


class GridConfig(BaseModel):
    """Snap grid."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    step_mm: float = Field(default=160.0, ge=0.0)


class MappingPositionOverrideConfig(BaseModel):
    """Placement of one endpoint's mapping-number badge."""

    model_config = ConfigDict(extra="forbid")

    position: MappingLabelPosition | None = None
    x: float | None = Field(default=None, ge=0.0, le=1.0)
    y: float | None = Field(default=None, ge=0.0, le=1.0)


class MappingNumbersConfig(BaseModel):
    """Mapping-number assignment and display.

    Attributes:
        mode: ``auto`` numbers chains from ``labels`` then odd numbers,
            ``manual`` uses the override tables only.
        restart_per_card: Restart numbering per dominant card index.
        labels: Leading label values.
        per_chain: Manual label per route id.
        per_endpoint: Manual label per endpoint key (``"C1"`` or ``"C1#1"``).
        show: Whether badges are drawn.
        position: Default badge corner.
        font_size: Badge font size.
        badge: Draw a background behind the number.
        position_overrides: Per-endpoint badge placement.
    """

    model_config = ConfigDict(extra="forbid")

    mode: Literal["auto", "manual"] = "auto"
    restart_per_card: bool = False
    labels: list[float] = Field(default_factory=list)
    per_chain: dict[str, str] = Field(default_factory=dict)
    per_endpoint: dict[str, str] = Field(default_factory=dict)
    show: bool = False
    position: MappingLabelPosition = MappingLabelPosition.TOP_RIGHT
    font_size: LabelFontSize = LabelFontSize.MEDIUM
    badge: bool = True
    position_overrides: dict[str, MappingPositionOverrideConfig] = Field(
        default_factory=dict
    )


class OverviewConfig(BaseModel):
    """Overview annotation options."""

    model_config = ConfigDict(extra="forbid")

    show_receiver_cards: bool = True
    receiver_card_model: str = DEFAULT_RECEIVER_CARD_MODEL
    grid_label_axis: GridLabelAxis = GridLabelAxis.COLUMNS
    force_port_labels_bottom: bool = False
    module_size: ModuleSize | None = Field(
        default=None, description="Module footprint; defaults to the mode default"
    )
    module_orientation: ModuleOrientation = ModuleOrientation.PORTRAIT
    mapping_numbers: MappingNumbersConfig = Field(default_factory=MappingNumbersConfig)


class ProjectConfig(BaseModel):
    """Project-wide settings.

    Attributes:
        name: Project name.
        client: Client name.
        mode: Indoor or outdoor installation.
        pitch_mm: Nominal pixel pitch.
        pitch_is_gob: Glue-on-board coating.
        controller: Sending controller model.
        zoom: Screen scale used to size card and label glyphs.
        grid: Snap grid.
        overview: Annotation options.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = "New Layout"
    client: str = ""
    mode: ProjectMode = ProjectMode.INDOOR
    pitch_mm: float = Field(default=2.5, gt=0)
    pitch_is_gob: bool = False
    controller: ControllerModel = ControllerModel.A100
    zoom: float = Field(default=1.0, gt=0)
    grid: GridConfig = Field(default_factory=GridConfig)
    overview: OverviewConfig = Field(default_factory=OverviewConfig)

    @model_validator(mode="after")
    def validate_module_size_for_mode(self) -> "ProjectConfig":
        """Ensure the module footprint exists in the selected mode."""
        size = self.overview.module_size
        if size is not None and size not in mode_module_sizes(self.mode):
            allowed = ", ".join(s.value for s in mode_module_sizes(self.mode))
            raise ValueError(
                f"Module size {size.value} is not available in {self.mode.value} "
                f"mode (allowed: {allowed})"
            )
        return self


class LayoutConfiguration(BaseModel):
    """Root model of a layout document.

    Attributes:
        schema_version: Version string in format "major.minor".
        project: Project-wide settings.
        cabinet_types: Registered catalog. Omitted or empty uses the mode
            catalog.
        cabinets: Placed cabinets.
        data_routes: Data chains.
        power_feeds: Power circuits.

    Example:
        >>> config = LayoutConfiguration(
        ...     schema_version="2.0",
        ...     cabinets=[CabinetConfig(id="C1", type_id="STD_960x640", x_mm=0, y_mm=0)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    cabinet_types: list[CabinetTypeConfig] | None = None
    cabinets: list[CabinetConfig] = Field(default_factory=list)
    data_routes: list[DataRouteConfig] = Field(default_factory=list)
    power_feeds: list[PowerFeedConfig] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that schema version is supported.

        Newer minor versions of a supported major version are accepted for
        forward compatibility.
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )
