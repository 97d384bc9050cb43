"""Domain entities for LED wall layouts.

A :class:`Layout` is an immutable snapshot. Editing operations such as
:meth:`Layout.duplicate_cabinet` return a new snapshot and never mutate the
receiver.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace

from .value_objects import (
    DEFAULT_RECEIVER_CARD_MODEL,
    CabinetStep,
    CabinetType,
    ControllerModel,
    GridLabelAxis,
    LabelFontSize,
    LabelPosition,
    MappingLabelPosition,
    ModuleOrientation,
    ModuleSize,
    Point2D,
    ProjectMode,
    RouteStep,
    mode_cabinet_types,
)

logger = logging.getLogger(__name__)

VALID_ROTATIONS = frozenset({0, 90, 180, 270})
MAX_RECEIVER_CARDS = 2

_COPY_SUFFIX = re.compile(r"^(.*)-(\d+)$")


@dataclass(frozen=True)
class Cabinet:
    """A placed cabinet.

    Attributes:
        id: Layout-unique identifier. Uniqueness is reported by validation,
            not enforced here.
        type_id: Catalog type (or a free-form id carrying ``WxH``).
        x_mm: Left edge of the placed cabinet.
        y_mm: Top edge of the placed cabinet.
        rotation: Clockwise rotation, one of 0, 90, 180 or 270 degrees.
        receiver_card_count: Number of receiver cards (0, 1 or 2). ``None``
            means the default of one card.
        receiver_card_label: Card caption. Empty string uses the global card
            model, ``None`` hides the caption, any other text replaces it.
        data_anchor: Normalised attachment point (0..1 on each axis) used
            when the cabinet carries no receiver card.
        grid_label_override: Manual grid address.
    """

    id: str
    type_id: str
    x_mm: float
    y_mm: float
    rotation: int = 0
    receiver_card_count: int | None = None
    receiver_card_label: str | None = ""
    data_anchor: Point2D | None = None
    grid_label_override: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Cabinet id must not be empty")
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(
                f"Cabinet rotation must be one of 0, 90, 180, 270, got {self.rotation}"
            )
        if self.receiver_card_count is not None and not (
            0 <= self.receiver_card_count <= MAX_RECEIVER_CARDS
        ):
            raise ValueError(
                f"receiver_card_count must be between 0 and {MAX_RECEIVER_CARDS}"
            )

    @property
    def card_count(self) -> int:
        """Effective number of receiver cards."""
        if self.receiver_card_count is None:
            return 1
        return self.receiver_card_count

    @property
    def is_rotated_sideways(self) -> bool:
        return self.rotation in (90, 270)

    def moved_by(self, dx: float, dy: float) -> Cabinet:
        return replace(self, x_mm=self.x_mm + dx, y_mm=self.y_mm + dy)


@dataclass(frozen=True)
class DataRoute:
    """A data daisy-chain from one controller port.

    Attributes:
        id: Route identifier.
        port: 1-based controller output port.
        steps: Ordered cabinet endpoints and free waypoints.
        label_position: Where to place the port label.
        force_label_bottom: Route-level override of the global
            "port labels at bottom" flag. ``None`` defers to the global flag.
    """

    id: str
    port: int
    steps: tuple[RouteStep, ...] = ()
    label_position: LabelPosition = LabelPosition.AUTO
    force_label_bottom: bool | None = None

    def __post_init__(self) -> None:
        if self.port < 1:
            raise ValueError(f"Route port must be >= 1, got {self.port}")

    @property
    def cabinet_steps(self) -> tuple[CabinetStep, ...]:
        return tuple(s for s in self.steps if isinstance(s, CabinetStep))

    @property
    def has_free_points(self) -> bool:
        return any(not isinstance(s, CabinetStep) for s in self.steps)


@dataclass(frozen=True)
class PowerFeed:
    """An electrical circuit feeding a chain of cabinets.

    Attributes:
        id: Feed identifier.
        label: Display name, used when no breaker is set.
        breaker: Breaker specification, e.g. "220V 20A".
        connector: Connector description shown under the load.
        steps: Ordered cabinet endpoints and free waypoints.
        consumption_w: Declared consumption. Informational only; the
            computed load comes from cabinet areas.
        label_position: Where to place the feed label.
        custom_label: Replaces the connector line when set.
    """

    id: str
    label: str = ""
    breaker: str | None = None
    connector: str = ""
    steps: tuple[RouteStep, ...] = ()
    consumption_w: float = 0.0
    label_position: LabelPosition = LabelPosition.AUTO
    custom_label: str | None = None

    @property
    def cabinet_steps(self) -> tuple[CabinetStep, ...]:
        return tuple(s for s in self.steps if isinstance(s, CabinetStep))

    @property
    def has_free_points(self) -> bool:
        return any(not isinstance(s, CabinetStep) for s in self.steps)


@dataclass(frozen=True)
class GridSettings:
    """Snap grid.

    Attributes:
        enabled: Whether off-grid placement is reported.
        step_mm: Grid pitch. Non-positive values disable the check.
    """

    enabled: bool = False
    step_mm: float = 0.0


@dataclass(frozen=True)
class MappingPositionOverride:
    """Per-endpoint placement of a mapping-number badge.

    ``anchor_x``/``anchor_y`` are normalised inside the module cell and only
    matter for the custom position.
    """

    position: MappingLabelPosition | None = None
    anchor_x: float | None = None
    anchor_y: float | None = None


@dataclass(frozen=True)
class MappingNumberSettings:
    """Mapping-number assignment and display options.

    Attributes:
        mode: "auto" numbers chains from the label sequence, "manual" uses
            the override tables only.
        restart_per_card: Restart the sequence for each dominant card index.
        labels: Supplied label sequence; the odd sequence fills the rest.
        per_chain: Manual label per route id.
        per_endpoint: Manual label per endpoint key.
        show: Whether badges are drawn.
        position: Default badge corner.
        font_size: Badge font size.
        badge: Draw a background badge behind the text.
        position_overrides: Per-endpoint badge placement.
    """

    mode: str = "auto"
    restart_per_card: bool = False
    labels: tuple[float, ...] = ()
    per_chain: dict[str, str] = field(default_factory=dict)
    per_endpoint: dict[str, str] = field(default_factory=dict)
    show: bool = False
    position: MappingLabelPosition = MappingLabelPosition.TOP_RIGHT
    font_size: LabelFontSize = LabelFontSize.MEDIUM
    badge: bool = True
    position_overrides: dict[str, MappingPositionOverride] = field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        if self.mode not in ("auto", "manual"):
            raise ValueError(f"Mapping number mode must be auto or manual, got {self.mode}")

    @property
    def is_manual(self) -> bool:
        return self.mode == "manual"


@dataclass(frozen=True)
class OverviewSettings:
    """Annotation options for the overview drawing."""

    show_receiver_cards: bool = True
    receiver_card_model: str = DEFAULT_RECEIVER_CARD_MODEL
    grid_label_axis: GridLabelAxis = GridLabelAxis.COLUMNS
    force_port_labels_bottom: bool = False
    module_size: ModuleSize = ModuleSize.M320X160
    module_orientation: ModuleOrientation = ModuleOrientation.PORTRAIT
    mapping_numbers: MappingNumberSettings = field(
        default_factory=MappingNumberSettings
    )

    @property
    def module_dimensions(self) -> tuple[float, float]:
        """Module cell width and height after orientation.

        Portrait modules stand on their short edge.
        """
        width, height = self.module_size.dimensions
        if self.module_orientation == ModuleOrientation.PORTRAIT:
            return height, width
        return width, height


@dataclass(frozen=True)
class LayoutSettings:
    """Project-wide settings.

    Attributes:
        name: Project name shown in report titles.
        client: Client name shown in report titles.
        mode: Indoor or outdoor installation.
        pitch_mm: Nominal pixel pitch.
        pitch_is_gob: Whether the panels carry a glue-on-board coating.
        controller: Sending controller model.
        grid: Snap grid settings.
        overview: Annotation options.
        zoom: Screen scale used to size card and label glyphs. World units
            are millimetres; glyph sizes are screen pixels divided by zoom.
    """

    name: str = ""
    client: str = ""
    mode: ProjectMode = ProjectMode.INDOOR
    pitch_mm: float = 2.5
    pitch_is_gob: bool = False
    controller: ControllerModel = ControllerModel.A100
    grid: GridSettings = field(default_factory=GridSettings)
    overview: OverviewSettings = field(default_factory=OverviewSettings)
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")

    @property
    def is_outdoor(self) -> bool:
        return self.mode == ProjectMode.OUTDOOR


@dataclass(frozen=True)
class Layout:
    """Immutable snapshot of a wall layout.

    Attributes:
        cabinets: Placed cabinets in insertion order.
        cabinet_types: Registered catalog. Defaults to the mode catalog.
        data_routes: Data chains.
        power_feeds: Power circuits.
        settings: Project-wide settings.
    """

    cabinets: tuple[Cabinet, ...] = ()
    cabinet_types: tuple[CabinetType, ...] | None = None
    data_routes: tuple[DataRoute, ...] = ()
    power_feeds: tuple[PowerFeed, ...] = ()
    settings: LayoutSettings = field(default_factory=LayoutSettings)

    @property
    def catalog(self) -> tuple[CabinetType, ...]:
        """Registered cabinet types, falling back to the mode catalog."""
        if self.cabinet_types is None:
            return mode_cabinet_types(self.settings.mode)
        return self.cabinet_types

    def find_cabinet(self, cabinet_id: str) -> Cabinet | None:
        """Return the first cabinet with ``cabinet_id``, if any."""
        for cabinet in self.cabinets:
            if cabinet.id == cabinet_id:
                return cabinet
        return None

    def cabinet_index(self) -> dict[str, Cabinet]:
        """Map ids to cabinets. The first cabinet wins on duplicate ids."""
        index: dict[str, Cabinet] = {}
        for cabinet in self.cabinets:
            index.setdefault(cabinet.id, cabinet)
        return index

    def next_copy_id(self, cabinet_id: str) -> str:
        """Return the first free ``<base>-<n>`` id with n >= 2.

        A trailing ``-<n>`` on ``cabinet_id`` is stripped to find the base,
        so copying "C1-2" yields "C1-3" rather than "C1-2-2".
        """
        match = _COPY_SUFFIX.match(cabinet_id)
        base = match.group(1) if match else cabinet_id
        taken = {c.id for c in self.cabinets}
        n = 2
        while f"{base}-{n}" in taken:
            n += 1
        return f"{base}-{n}"

    def duplicate_cabinet(
        self, cabinet_id: str, offset: tuple[float, float] = (0.0, 0.0)
    ) -> Layout:
        """Return a snapshot with a renumbered copy of ``cabinet_id``.

        Args:
            cabinet_id: Cabinet to copy.
            offset: Shift applied to the copy, in millimetres.

        Returns:
            New layout with the copy appended.

        Raises:
            KeyError: If no cabinet has ``cabinet_id``.
        """
        source = self.find_cabinet(cabinet_id)
        if source is None:
            raise KeyError(cabinet_id)
        new_id = self.next_copy_id(cabinet_id)
        clone = replace(source.moved_by(*offset), id=new_id)
        logger.debug(f"Duplicated cabinet {cabinet_id} as {new_id}")
        return replace(self, cabinets=self.cabinets + (clone,))

    def remove_cabinet(self, cabinet_id: str) -> Layout:
        """Return a snapshot without ``cabinet_id``.

        Route and feed steps that reference the cabinet are kept; every
        consumer skips stale endpoints.
        """
        remaining = tuple(c for c in self.cabinets if c.id != cabinet_id)
        if len(remaining) == len(self.cabinets):
            logger.debug(f"remove_cabinet: no cabinet with id {cabinet_id}")
        return replace(self, cabinets=remaining)

    def with_cabinets(self, cabinets: tuple[Cabinet, ...]) -> Layout:
        return replace(self, cabinets=cabinets)
