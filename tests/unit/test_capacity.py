"""Unit tests for pixel and power capacity accounting.

These tests verify:
- 1.56 mm pitch resolves to the effective 1.568627 mm pitch
- Pixel counts round half up per cabinet side
- Dual-card cabinets split their area across the two cards
- Per-port, controller and breaker limits flag overloads correctly
- Indoor pixel matrices add side-by-side screen widths
"""

import pytest

from ledwall.domain import (
    Cabinet,
    CabinetStep,
    CapacityModel,
    DataRoute,
    Layout,
    LayoutSettings,
    PowerFeed,
)
from ledwall.domain.services import breaker_safe_max_w, effective_pitch, round_half_up
from ledwall.domain.value_objects import CabinetType, ControllerModel, ProjectMode


def _single(width: float, height: float, pitch: float = 1.0, **settings) -> Layout:
    return Layout(
        cabinets=(Cabinet("C1", "T", 0, 0),),
        cabinet_types=(CabinetType("T", width, height),),
        data_routes=(DataRoute("R1", 1, (CabinetStep("C1"),)),),
        settings=LayoutSettings(pitch_mm=pitch, **settings),
    )


class TestPitchArithmetic:
    """Tests for effective pitch and rounding helpers."""

    def test_p156_uses_effective_pitch(self) -> None:
        assert effective_pitch(1.56) == pytest.approx(1.568627)

    def test_other_pitches_unchanged(self) -> None:
        assert effective_pitch(2.5) == 2.5

    def test_round_half_up(self) -> None:
        assert round_half_up(408.5) == 409
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2

    def test_p156_cabinet_side(self) -> None:
        """640 mm at P1.56 resolves to 408 px."""
        layout = _single(640, 640, pitch=1.56)
        assert CapacityModel(layout).cabinet_pixel_area(layout.cabinets[0]) == 408 * 408


class TestCabinetPixels:
    """Tests for per-cabinet pixel areas."""

    def test_grid_cabinet(self, grid_layout) -> None:
        model = CapacityModel(grid_layout)
        assert model.cabinet_pixel_area(grid_layout.cabinets[0]) == 400 * 200

    def test_unresolved_cabinet_is_zero(self, grid_layout) -> None:
        model = CapacityModel(grid_layout)
        assert model.cabinet_pixel_area(Cabinet("X", "mystery", 0, 0)) == 0

    @pytest.mark.parametrize("pitch", [0.0, -1.0, float("nan"), float("inf")])
    def test_invalid_pitch_is_zero(self, pitch: float) -> None:
        layout = _single(1000, 500, pitch=1.0)
        layout = Layout(
            cabinets=layout.cabinets,
            cabinet_types=layout.cabinet_types,
            settings=LayoutSettings(pitch_mm=pitch),
        )
        model = CapacityModel(layout)
        assert model.cabinet_pixel_area(layout.cabinets[0]) == 0
        assert model.pixel_matrix_dimensions().total_px == 0

    def test_zero_width_type_gives_zero_loads(self) -> None:
        layout = _single(0, 500)
        feed = PowerFeed("F1", breaker="110V 15A", steps=(CabinetStep("C1"),))
        layout = Layout(
            cabinets=layout.cabinets,
            cabinet_types=layout.cabinet_types,
            data_routes=layout.data_routes,
            power_feeds=(feed,),
        )
        model = CapacityModel(layout)
        assert model.cabinet_pixel_area(layout.cabinets[0]) == 0
        assert model.route_load_px(layout.data_routes[0]) == 0
        assert model.feed_load_w(feed) == 0
        assert not model.is_feed_overloaded(feed)


class TestRouteLoad:
    """Tests for per-port loads."""

    def test_route_sums_cabinets(self, grid_layout) -> None:
        model = CapacityModel(grid_layout)
        route = grid_layout.data_routes[0]
        assert model.route_load_px(route) == 4 * 80_000
        assert not model.is_route_over_capacity(route)

    def test_at_limit_is_not_over(self) -> None:
        layout = _single(1000, 650)
        model = CapacityModel(layout)
        assert model.route_load_px(layout.data_routes[0]) == 650_000
        assert not model.is_route_over_capacity(layout.data_routes[0])

    def test_above_limit_is_over(self) -> None:
        layout = _single(1001, 650)
        assert CapacityModel(layout).is_route_over_capacity(layout.data_routes[0])

    def test_dual_card_cabinet_counts_half(self) -> None:
        layout = Layout(
            cabinets=(Cabinet("C1", "T", 0, 0, receiver_card_count=2),),
            cabinet_types=(CabinetType("T", 100, 100),),
            data_routes=(DataRoute("R1", 1, (CabinetStep("C1", 0),)),),
            settings=LayoutSettings(pitch_mm=1.0),
        )
        assert CapacityModel(layout).route_load_px(layout.data_routes[0]) == 5000

    def test_cardless_and_missing_cabinets_add_nothing(self) -> None:
        layout = Layout(
            cabinets=(Cabinet("C1", "T", 0, 0, receiver_card_count=0),),
            cabinet_types=(CabinetType("T", 100, 100),),
            data_routes=(DataRoute("R1", 1, (CabinetStep("C1"), CabinetStep("gone"))),),
            settings=LayoutSettings(pitch_mm=1.0),
        )
        assert CapacityModel(layout).route_load_px(layout.data_routes[0]) == 0

    def test_route_load_value_object(self, grid_layout) -> None:
        load = CapacityModel(grid_layout).route_load(grid_layout.data_routes[0])
        assert load.route_id == "R1"
        assert load.port == 1
        assert load.utilization == pytest.approx(320_000 / 650_000)


class TestControllerLoad:
    """Tests for controller ceilings."""

    def test_total_pixels(self, grid_layout) -> None:
        load = CapacityModel(grid_layout).controller_load()
        assert load.total_px == 320_000
        assert (load.width_px, load.height_px) == (800, 400)
        assert not load.is_over_capacity

    def test_a100_total_only(self) -> None:
        layout = _single(5000, 100, controller=ControllerModel.A100)
        assert not CapacityModel(layout).is_controller_over_capacity()

    def test_a200_width_ceiling(self) -> None:
        layout = _single(5000, 100, controller=ControllerModel.A200)
        load = CapacityModel(layout).controller_load()
        assert load.over_width
        assert not load.over_height
        assert not load.over_total
        assert load.is_over_capacity

    def test_a100_total_ceiling(self) -> None:
        layout = _single(1300, 1001, controller=ControllerModel.A100)
        assert CapacityModel(layout).controller_load().over_total


class TestFeedLoad:
    """Tests for power feed loads."""

    def test_grid_feed(self, grid_layout) -> None:
        load = CapacityModel(grid_layout).feed_load(grid_layout.power_feeds[0])
        assert load.load_w == 1100
        assert load.safe_max_w == 2816
        assert not load.is_overloaded

    def test_110v_breaker_overload(self, panel_type, make_grid) -> None:
        cabinets = make_grid(5, 1)
        feed = PowerFeed("F1", breaker="110V 15A", steps=tuple(CabinetStep(c.id) for c in cabinets))
        layout = Layout(cabinets=cabinets, cabinet_types=(panel_type,), power_feeds=(feed,))
        load = CapacityModel(layout).feed_load(feed)
        assert load.load_w == 1375
        assert load.is_overloaded

    def test_is_feed_overloaded(self, panel_type, make_grid) -> None:
        cabinets = make_grid(5, 1)
        steps = tuple(CabinetStep(c.id) for c in cabinets)
        small = PowerFeed("F1", breaker="110V 15A", steps=steps)
        large = PowerFeed("F2", breaker="220V 20A", steps=steps)
        layout = Layout(cabinets=cabinets, cabinet_types=(panel_type,), power_feeds=(small, large))
        model = CapacityModel(layout)
        assert model.is_feed_overloaded(small)
        assert not model.is_feed_overloaded(large)

    def test_unknown_breaker_has_no_limit(self) -> None:
        assert breaker_safe_max_w("400V 63A") is None
        assert breaker_safe_max_w(None) is None
        assert breaker_safe_max_w("220V 20A") == 2816

    def test_rotation_does_not_change_area(self, panel_type) -> None:
        feed = PowerFeed("F1", steps=(CabinetStep("C1"),))
        layout = Layout(
            cabinets=(Cabinet("C1", "PANEL", 0, 0, rotation=90),),
            cabinet_types=(panel_type,),
            power_feeds=(feed,),
        )
        assert CapacityModel(layout).feed_load_w(feed) == 275


class TestPixelMatrix:
    """Tests for pixel matrix dimensions."""

    def _two_screens(self, panel_type, mode: ProjectMode) -> Layout:
        return Layout(
            cabinets=(Cabinet("A", "PANEL", 0, 0), Cabinet("B", "PANEL", 3000, 0)),
            cabinet_types=(panel_type,),
            settings=LayoutSettings(mode=mode),
        )

    def test_indoor_side_by_side_screens_add_widths(self, panel_type) -> None:
        dims = CapacityModel(self._two_screens(panel_type, ProjectMode.INDOOR)).pixel_matrix_dimensions()
        assert (dims.width_px, dims.height_px) == (800, 200)

    def test_outdoor_uses_bounding_box(self, panel_type) -> None:
        dims = CapacityModel(self._two_screens(panel_type, ProjectMode.OUTDOOR)).pixel_matrix_dimensions()
        assert (dims.width_px, dims.height_px) == (1600, 200)

    def test_stacked_screens_add_heights(self, panel_type) -> None:
        layout = Layout(
            cabinets=(Cabinet("A", "PANEL", 0, 0), Cabinet("B", "PANEL", 0, 2000)),
            cabinet_types=(panel_type,),
        )
        dims = CapacityModel(layout).pixel_matrix_dimensions()
        assert (dims.width_px, dims.height_px) == (400, 400)

    def test_empty_layout(self) -> None:
        assert CapacityModel(Layout()).pixel_matrix_dimensions().total_px == 0
