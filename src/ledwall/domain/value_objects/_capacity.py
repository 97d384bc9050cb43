"""Capacity tables and result value objects."""

from __future__ import annotations

from dataclasses import dataclass

from ._catalog import ControllerModel

# Maximum pixels a single controller output port can drive.
PER_PORT_MAX_PX = 650_000

# Areal power density used to estimate cabinet consumption.
POWER_DENSITY_W_M2 = 550

# 1.56 mm panels are sold under their nominal pitch but resolve as if the
# pitch were 1.568627 mm (e.g. 640 mm -> 408 px).
P156_NOMINAL_PITCH_MM = 1.56
P156_EFFECTIVE_PITCH_MM = 1.568627
PITCH_MATCH_TOLERANCE = 0.001


@dataclass(frozen=True)
class ControllerLimits:
    """Pixel ceilings of a sending controller.

    Attributes:
        total_max_px: Maximum total pixels across every output.
        max_width_px: Optional ceiling on the layout width in pixels.
        max_height_px: Optional ceiling on the layout height in pixels.
    """

    total_max_px: int
    max_width_px: int | None = None
    max_height_px: int | None = None


@dataclass(frozen=True)
class BreakerLimit:
    """Rated and safe continuous load of a breaker, in watts."""

    max_w: int
    safe_w: int


CONTROLLER_LIMITS: dict[ControllerModel, ControllerLimits] = {
    ControllerModel.A100: ControllerLimits(total_max_px=1_300_000),
    ControllerModel.A200: ControllerLimits(
        total_max_px=2_300_000, max_width_px=4096, max_height_px=2560
    ),
}

BREAKER_LIMITS: dict[str, BreakerLimit] = {
    "220V 20A": BreakerLimit(max_w=3520, safe_w=2816),
    "110V 15A": BreakerLimit(max_w=1650, safe_w=1320),
}


@dataclass(frozen=True)
class PixelDimensions:
    """Width and height of a pixel canvas."""

    width_px: int = 0
    height_px: int = 0

    @property
    def total_px(self) -> int:
        return self.width_px * self.height_px


@dataclass(frozen=True)
class ControllerLoad:
    """Pixel load of a whole layout against one controller model.

    Attributes:
        controller: Controller model checked.
        limits: Ceilings of that model.
        total_px: Sum of every cabinet's pixel area.
        width_px: Layout bounding-box width in pixels.
        height_px: Layout bounding-box height in pixels.
    """

    controller: ControllerModel
    limits: ControllerLimits
    total_px: int
    width_px: int
    height_px: int

    @property
    def over_total(self) -> bool:
        return self.total_px > self.limits.total_max_px

    @property
    def over_width(self) -> bool:
        limit = self.limits.max_width_px
        return bool(limit) and self.width_px > limit

    @property
    def over_height(self) -> bool:
        limit = self.limits.max_height_px
        return bool(limit) and self.height_px > limit

    @property
    def is_over_capacity(self) -> bool:
        return self.over_total or self.over_width or self.over_height


@dataclass(frozen=True)
class RouteLoad:
    """Pixel load carried by one data route."""

    route_id: str
    port: int
    load_px: float
    max_px: int = PER_PORT_MAX_PX

    @property
    def is_over_capacity(self) -> bool:
        return self.load_px > self.max_px

    @property
    def utilization(self) -> float:
        return self.load_px / self.max_px if self.max_px else 0.0


@dataclass(frozen=True)
class FeedLoad:
    """Estimated electrical load of one power feed.

    Attributes:
        feed_id: Feed identifier.
        breaker: Breaker specification string, if any.
        load_w: Rounded load in watts.
        safe_max_w: Safe continuous load of the breaker, ``None`` when the
            breaker is unknown (no limit applies).
    """

    feed_id: str
    breaker: str | None
    load_w: int
    safe_max_w: int | None

    @property
    def is_overloaded(self) -> bool:
        return self.safe_max_w is not None and self.load_w > self.safe_max_w
