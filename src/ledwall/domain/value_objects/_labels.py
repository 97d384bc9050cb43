"""Annotation label value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ._geometry import LayoutExtent, Point2D
from ._routing import LabelPosition


class LabelKind(str, Enum):
    """What an annotation label describes."""

    PORT = "port"
    BREAKER = "breaker"
    GRID_ADDRESS = "grid_address"
    MAPPING_NUMBER = "mapping_number"


class MappingLabelPosition(str, Enum):
    """Preset corner for mapping-number badges."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"
    CUSTOM = "custom"


class LabelFontSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass(frozen=True)
class LabelBox:
    """A placed annotation box.

    Attributes:
        kind: What the label describes.
        owner_id: Route, feed, cabinet or endpoint key the label belongs to.
        lines: Text lines, top to bottom.
        x: Left edge.
        y: Top edge.
        width: Box width.
        height: Box height.
        side: Side of the layout for route/feed labels, ``None`` for labels
            drawn inside a cabinet.
        leader: Polyline from the box edge to the first anchor. Empty when
            the label needs no leader.
    """

    kind: LabelKind
    owner_id: str
    lines: tuple[str, ...]
    x: float
    y: float
    width: float
    height: float
    side: LabelPosition | None = None
    leader: tuple[Point2D, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point2D:
        return Point2D(self.x + self.width / 2, self.y + self.height / 2)

    def overlaps(self, other: LabelBox) -> bool:
        return (
            self.x < other.x2
            and self.x2 > other.x
            and self.y < other.y2
            and self.y2 > other.y
        )


@dataclass(frozen=True)
class PackItem:
    """One label to pack along a single axis.

    Attributes:
        item_id: Identifier returned with the packed centre.
        desired_center: Natural centre position along the packing axis.
        size: Full extent along the packing axis.
    """

    item_id: str
    desired_center: float
    size: float


@dataclass(frozen=True)
class LabelLayout:
    """Every label placed for one layout snapshot."""

    labels: tuple[LabelBox, ...] = ()

    def of_kind(self, kind: LabelKind) -> tuple[LabelBox, ...]:
        return tuple(label for label in self.labels if label.kind == kind)

    def get(self, kind: LabelKind, owner_id: str) -> LabelBox | None:
        for label in self.labels:
            if label.kind == kind and label.owner_id == owner_id:
                return label
        return None

    @property
    def extent(self) -> LayoutExtent:
        """Combined bounding box of every placed label."""
        if not self.labels:
            return LayoutExtent.empty()
        return LayoutExtent(
            min_x=min(label.x for label in self.labels),
            min_y=min(label.y for label in self.labels),
            max_x=max(label.x2 for label in self.labels),
            max_y=max(label.y2 for label in self.labels),
        )
