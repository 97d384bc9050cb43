"""Cabinet catalog and project-level enums."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProjectMode(str, Enum):
    """Installation environment.

    The mode selects the cabinet catalog and the receiver card variant.
    Indoor cards expose a bottom-centre connector; outdoor cards are
    side-ported and chain through separate "in" and "out" data ports.
    """

    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class ControllerModel(str, Enum):
    """Supported sending controllers."""

    A100 = "A100"
    A200 = "A200"


class GridLabelAxis(str, Enum):
    """Which axis of the grid address is rendered as letters."""

    COLUMNS = "columns"
    ROWS = "rows"


class ModuleSize(str, Enum):
    """LED module footprint within a cabinet, in millimetres."""

    M320X160 = "320x160"
    M160X160 = "160x160"
    M320X320 = "320x320"

    @property
    def dimensions(self) -> tuple[float, float]:
        width, height = self.value.split("x")
        return float(width), float(height)


class ModuleOrientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


@dataclass(frozen=True)
class CabinetType:
    """Nominal, unrotated cabinet dimensions.

    Attributes:
        type_id: Catalog identifier, e.g. "STD_960x640".
        width_mm: Width before rotation.
        height_mm: Height before rotation.
    """

    type_id: str
    width_mm: float
    height_mm: float

    def __post_init__(self) -> None:
        if not self.type_id:
            raise ValueError("type_id must not be empty")
        if self.width_mm < 0 or self.height_mm < 0:
            raise ValueError("Cabinet type dimensions must not be negative")


@dataclass(frozen=True)
class PitchOption:
    """A selectable pixel pitch for a project mode."""

    pitch_mm: float
    is_gob: bool
    label: str


@dataclass(frozen=True)
class ReceiverCardModel:
    """Receiver card model and the pixel area one card can drive."""

    model_id: str
    width_px: int
    height_px: int

    @property
    def label(self) -> str:
        return f"{self.model_id} ({self.width_px} x {self.height_px} px)"


DEFAULT_RECEIVER_CARD_MODEL = "5A75-E"

RECEIVER_CARD_MODELS: tuple[ReceiverCardModel, ...] = (
    ReceiverCardModel("5A75-E", 256, 1024),
    ReceiverCardModel("I5+", 512, 384),
)

INDOOR_CABINET_TYPES: tuple[CabinetType, ...] = (
    CabinetType("STD_1120x640", 1120, 640),
    CabinetType("STD_960x640", 960, 640),
    CabinetType("STD_480x640", 480, 640),
    CabinetType("STD_1280x640", 1280, 640),
    CabinetType("STD_640x640", 640, 640),
)

OUTDOOR_CABINET_TYPES: tuple[CabinetType, ...] = (
    CabinetType("OUT_960x320", 960, 320),
    CabinetType("OUT_960x640", 960, 640),
    CabinetType("OUT_960x960", 960, 960),
    CabinetType("OUT_960x1280", 960, 1280),
    CabinetType("OUT_1280x320", 1280, 320),
    CabinetType("OUT_1280x640", 1280, 640),
    CabinetType("OUT_1280x960", 1280, 960),
    CabinetType("OUT_1280x1280", 1280, 1280),
    CabinetType("OUT_1600x640", 1600, 640),
    CabinetType("OUT_1600x960", 1600, 960),
)

INDOOR_PITCH_OPTIONS: tuple[PitchOption, ...] = (
    PitchOption(1.25, False, "P 1.25"),
    PitchOption(1.25, True, "P 1.25 GOB"),
    PitchOption(1.56, False, "P 1.56"),
    PitchOption(1.56, True, "P 1.56 GOB"),
    PitchOption(1.86, False, "P 1.86"),
    PitchOption(1.86, True, "P 1.86 GOB"),
    PitchOption(2.5, False, "P 2.5"),
    PitchOption(2.5, True, "P 2.5 GOB"),
    PitchOption(4, False, "P 4"),
    PitchOption(4, True, "P 4 GOB"),
    PitchOption(5, False, "P 5"),
    PitchOption(5, True, "P 5 GOB"),
)

OUTDOOR_PITCH_OPTIONS: tuple[PitchOption, ...] = (
    PitchOption(4, False, "P 4"),
    PitchOption(5, False, "P 5"),
    PitchOption(6.67, False, "P 6.67"),
    PitchOption(8, False, "P 8"),
    PitchOption(10, False, "P 10"),
)


def mode_cabinet_types(mode: ProjectMode) -> tuple[CabinetType, ...]:
    """Return the cabinet catalog for a project mode."""
    if mode == ProjectMode.OUTDOOR:
        return OUTDOOR_CABINET_TYPES
    return INDOOR_CABINET_TYPES


def mode_pitch_options(mode: ProjectMode) -> tuple[PitchOption, ...]:
    """Return the selectable pitches for a project mode."""
    if mode == ProjectMode.OUTDOOR:
        return OUTDOOR_PITCH_OPTIONS
    return INDOOR_PITCH_OPTIONS


def mode_module_sizes(mode: ProjectMode) -> tuple[ModuleSize, ...]:
    """Return the module footprints available in a project mode.

    The first entry is the mode default.
    """
    if mode == ProjectMode.OUTDOOR:
        return (ModuleSize.M320X320,)
    return (ModuleSize.M320X160, ModuleSize.M160X160)
