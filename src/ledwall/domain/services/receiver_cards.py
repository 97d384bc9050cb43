"""Receiver card placement inside cabinets.

Card glyphs are sized in screen pixels, so every constant below is divided
by the zoom factor to get millimetres. Indoor cards sit at the cabinet
centre with a connector under the card. Outdoor cards sit near the top and
expose side data ports plus a power bar underneath.
"""

from __future__ import annotations

import math

from ..value_objects import Bounds, CardRect, DataPorts, Point2D, PowerPorts, ProjectMode

__all__ = ["ReceiverCardLayout", "CONNECTOR_DROP_PX"]

# Distance between the card bottom and its connector, in screen pixels.
CONNECTOR_DROP_PX = 6.0

SINGLE_CARD_HEIGHT_FRACTION = 0.26
DUAL_CARD_HEIGHT_FRACTION = 0.2
OUTDOOR_CARD_TOP_OFFSET_MM = 160.0
OUTDOOR_POWER_BAR_MAX_WIDTH_MM = 220.0


class ReceiverCardLayout:
    """Computes card rectangles and ports for one zoom level and mode.

    Attributes:
        zoom: Screen pixels per millimetre.
        mode: Selects the indoor or outdoor (side-ported) card variant.
    """

    def __init__(self, zoom: float = 1.0, mode: ProjectMode = ProjectMode.INDOOR) -> None:
        self.zoom = zoom
        self.mode = mode

    @property
    def is_outdoor(self) -> bool:
        return self.mode == ProjectMode.OUTDOOR

    def _card_center_y(self, bounds: Bounds) -> float:
        if self.is_outdoor:
            return bounds.y + min(OUTDOOR_CARD_TOP_OFFSET_MM, bounds.height / 2)
        return bounds.y + bounds.height / 2

    def card_rect(self, bounds: Bounds, height_fraction: float = 0.28) -> CardRect:
        """Rectangle of a single card centred in ``bounds``."""
        z = self.zoom
        if self.is_outdoor:
            max_w = min(68 / z, bounds.width * 0.55)
            min_w = min(30 / z, max_w)
            max_h = min(29 / z, bounds.height * (height_fraction + 0.11))
            min_h = min(16.5 / z, max_h)
            width = min(max_w, max(min_w, bounds.width * 0.42))
            height = min(max_h, max(min_h, bounds.height * 0.297))
        else:
            max_w = min(84 / z, bounds.width * 0.65)
            min_w = min(40 / z, max_w)
            max_h = min(18 / z, bounds.height * height_fraction)
            min_h = min(12 / z, max_h)
            width = min(max_w, max(min_w, bounds.width * 0.7))
            height = min(max_h, max(min_h, bounds.height * 0.2))
        x = bounds.x + bounds.width / 2 - width / 2
        y = self._card_center_y(bounds) - height / 2
        return self._rect(x, y, width, height)

    def _rect(self, x: float, y: float, width: float, height: float) -> CardRect:
        connector = Point2D(x + width / 2, y + height + CONNECTOR_DROP_PX / self.zoom)
        return CardRect(x=x, y=y, width=width, height=height, connector=connector)

    def card_rects(self, bounds: Bounds | None, count: int) -> list[CardRect]:
        """Card rectangles for a cabinet, top card first.

        Two cards are stacked around the same centre with a small gap.
        """
        if bounds is None or count <= 0:
            return []
        fraction = DUAL_CARD_HEIGHT_FRACTION if count == 2 else SINGLE_CARD_HEIGHT_FRACTION
        base = self.card_rect(bounds, fraction)
        if count == 1:
            return [base]

        gap = min(10 / self.zoom, base.height)
        start_y = self._card_center_y(bounds) - (base.height * 2 + gap) / 2
        top = self._rect(base.x, start_y, base.width, base.height)
        bottom = self._rect(base.x, start_y + base.height + gap, base.width, base.height)
        return [top, bottom]

    def data_ports(self, rect: CardRect) -> DataPorts:
        """Side data ports on the left of an outdoor card body."""
        z = self.zoom
        body_h = max(13 / z, rect.height * 0.97)
        body_w = min(rect.width * 0.72, body_h * 1.45)
        body_x = rect.center_x - body_w / 2
        port_w = max(5 / z, body_w * 0.16)
        port_h = max(3 / z, body_h * 0.16)
        port_gap = max(5 / z, body_h * 0.58)
        port_x = body_x - port_w * 0.9
        anchor_x = port_x + port_w / 2
        top_port_y = rect.center_y - port_gap / 2 - port_h
        bottom_port_y = rect.center_y + port_gap / 2
        return DataPorts(
            data_in=Point2D(anchor_x, top_port_y + port_h / 2),
            data_out=Point2D(anchor_x, bottom_port_y + port_h / 2),
        )

    def power_ports(self, bounds: Bounds, rects: list[CardRect]) -> PowerPorts | None:
        """Power bar ports under the cards of an outdoor cabinet.

        Returns ``None`` when the cabinet is too short to fit the bar.
        """
        z = self.zoom
        if rects:
            card_bottom = max(rect.bottom for rect in rects)
        else:
            card_bottom = bounds.y + bounds.height * 0.34
        min_required = max(bounds.height * 0.12, 18 / z)
        max_bar_y = bounds.y + bounds.height - min_required
        min_bar_y = card_bottom + 6 / z
        if not math.isfinite(max_bar_y) or max_bar_y <= bounds.y + 2 / z:
            return None

        bar_y = min(min_bar_y, max_bar_y)
        center_x = bounds.center_x
        bar_width = min(bounds.width * 0.34, OUTDOOR_POWER_BAR_MAX_WIDTH_MM)
        stem_top = bar_y + 1.2 / z
        stem_bottom = stem_top + max(6.8 / z, bounds.height * 0.05)
        return PowerPorts(
            bar_y=bar_y,
            left=Point2D(center_x - bar_width * 0.24, stem_bottom),
            right=Point2D(center_x + bar_width * 0.24, stem_bottom),
        )

    def power_anchor(self, rect: CardRect, bounds: Bounds) -> Point2D:
        """Power attachment left of the card body at card mid-height."""
        margin = min(8 / self.zoom, bounds.width * 0.04)
        offset = min(6 / self.zoom, rect.width * 0.25)
        return Point2D(max(bounds.x + margin, rect.x - offset), rect.center_y)

    def card_index_at(self, bounds: Bounds, count: int, point: Point2D) -> int | None:
        """Card under ``point``, else the card vertically nearest to it."""
        rects = self.card_rects(bounds, count)
        if not rects:
            return None
        for index, rect in enumerate(rects):
            if rect.contains(point):
                return index
        return min(range(len(rects)), key=lambda i: abs(point.y - rects[i].center_y))
