"""Receiver card geometry value objects."""

from __future__ import annotations

from dataclasses import dataclass

from ._geometry import Point2D


@dataclass(frozen=True)
class CardRect:
    """Rectangle of one receiver card drawn on a cabinet.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Card width.
        height: Card height.
        connector: Bottom-centre data connector, just below the card.
    """

    x: float
    y: float
    width: float
    height: float
    connector: Point2D

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point2D) -> bool:
        return self.x <= point.x <= self.x + self.width and self.y <= point.y <= self.bottom


@dataclass(frozen=True)
class DataPorts:
    """Side data ports of an outdoor receiver card (in above out)."""

    data_in: Point2D
    data_out: Point2D


@dataclass(frozen=True)
class PowerPorts:
    """Power ports on the bar under outdoor receiver cards.

    Attributes:
        bar_y: Vertical position of the bar.
        left: Left port, the entry when power flows left to right.
        right: Right port, the entry when power flows right to left.
    """

    bar_y: float
    left: Point2D
    right: Point2D
