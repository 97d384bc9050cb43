"""Route step, anchor and path value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ._geometry import Point2D

ENDPOINT_CARD_SEPARATOR = "#"


@dataclass(frozen=True)
class CabinetStep:
    """A route step that lands on a cabinet.

    Attributes:
        cabinet_id: Target cabinet.
        card_index: Receiver card on the cabinet (0 = top card). ``None``
            means "the cabinet's default card".
    """

    cabinet_id: str
    card_index: int | None = None

    def __post_init__(self) -> None:
        if not self.cabinet_id:
            raise ValueError("cabinet_id must not be empty")
        if self.card_index is not None and self.card_index < 0:
            raise ValueError("card_index must be non-negative")

    @property
    def key(self) -> str:
        """Stable endpoint key used by mapping-number overrides."""
        if self.card_index is None:
            return self.cabinet_id
        return f"{self.cabinet_id}{ENDPOINT_CARD_SEPARATOR}{self.card_index}"

    @classmethod
    def parse(cls, key: str) -> CabinetStep:
        """Parse an endpoint key produced by :attr:`key`.

        ``"C1#1"`` targets card 1 of cabinet ``C1``. A suffix that is not a
        number is treated as part of the cabinet id.
        """
        head, sep, tail = key.rpartition(ENDPOINT_CARD_SEPARATOR)
        if sep and head and tail.isdigit():
            return cls(cabinet_id=head, card_index=int(tail))
        return cls(cabinet_id=key)


@dataclass(frozen=True)
class PointStep:
    """A free waypoint placed by hand."""

    x_mm: float
    y_mm: float

    @property
    def point(self) -> Point2D:
        return Point2D(self.x_mm, self.y_mm)


RouteStep = Union[CabinetStep, PointStep]


class LabelPosition(str, Enum):
    """Placement preference for a route or feed label."""

    AUTO = "auto"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class PortRole(str, Enum):
    """Which side-ported data port an anchor represents."""

    IN = "in"
    OUT = "out"


class Direction(str, Enum):
    """Axis-aligned travel direction in layout space (y grows downward)."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def between(cls, start: Point2D, end: Point2D, tolerance: float = 10.0) -> Direction:
        """Direction of arrival at ``end`` coming from ``start``.

        Segments whose horizontal change is within ``tolerance`` are treated
        as vertical.
        """
        if abs(end.x - start.x) < tolerance:
            return cls.DOWN if end.y > start.y else cls.UP
        return cls.RIGHT if end.x > start.x else cls.LEFT


@dataclass(frozen=True)
class Anchor:
    """Resolved attachment point of one route step.

    Attributes:
        x: Horizontal position.
        y: Vertical position.
        cabinet_id: Owning cabinet, ``None`` for free points.
        card_index: Resolved receiver card index, if a card was used.
        card_count: Number of cards on the owning cabinet.
        is_virtual: True when the cabinet has no card and the anchor is the
            override point or the cabinet centre.
        has_visible_card: True when the anchor sits on a receiver card that
            is drawn, which is already a visual terminus.
        port_role: Side-ported data port role, ``None`` otherwise.
        is_free_point: True for hand-placed waypoints.
    """

    x: float
    y: float
    cabinet_id: str | None = None
    card_index: int | None = None
    card_count: int = 0
    is_virtual: bool = False
    has_visible_card: bool = False
    port_role: PortRole | None = None
    is_free_point: bool = False

    @property
    def point(self) -> Point2D:
        return Point2D(self.x, self.y)


@dataclass(frozen=True)
class TerminalMarker:
    """End-of-chain marker drawn at the final anchor."""

    point: Point2D
    direction: Direction


@dataclass(frozen=True)
class RoutePath:
    """Synthesised geometry of one data route or power feed.

    Attributes:
        route_id: Route or feed identifier.
        anchors: Resolved anchors in walk order.
        polylines: Orthogonal polylines. Normally one; side-ported routing
            splits the path wherever entry and exit ports of the same cabinet
            must not be bridged.
        terminal_marker: Marker at the last anchor, if one is drawn.
        virtual_anchors: Anchors rendered as virtual attachment dots.
    """

    route_id: str
    anchors: tuple[Anchor, ...] = ()
    polylines: tuple[tuple[Point2D, ...], ...] = ()
    terminal_marker: TerminalMarker | None = None
    virtual_anchors: tuple[Point2D, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.anchors

    @property
    def waypoints(self) -> tuple[Point2D, ...]:
        """All polyline vertices in drawing order."""
        return tuple(p for line in self.polylines for p in line)

    @property
    def is_contiguous(self) -> bool:
        return len(self.polylines) <= 1

    @property
    def first_anchor(self) -> Anchor | None:
        return self.anchors[0] if self.anchors else None
