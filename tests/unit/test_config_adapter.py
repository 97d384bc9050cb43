"""Unit tests for the document-to-domain adapter."""

from ledwall.application.config import (
    CabinetConfig,
    LayoutConfiguration,
    PointStepConfig,
    config_to_cabinet,
    config_to_layout,
    config_to_step,
    load_layout_from_dict,
)
from ledwall.domain import CabinetStep, PointStep
from ledwall.domain.value_objects import (
    INDOOR_CABINET_TYPES,
    OUTDOOR_CABINET_TYPES,
    LabelPosition,
    MappingLabelPosition,
    ModuleSize,
    Point2D,
)


class TestConfigToCabinet:
    """Tests for cabinet conversion."""

    def test_fields_copied(self) -> None:
        cabinet = config_to_cabinet(
            CabinetConfig(
                id="C1",
                type_id="STD_960x640",
                x_mm=10,
                y_mm=20,
                rotation=90,
                receiver_card_count=2,
                receiver_card_label=None,
                data_anchor={"x": 0.1, "y": 0.9},
                grid_label="Z1",
            )
        )
        assert cabinet.id == "C1"
        assert cabinet.rotation == 90
        assert cabinet.card_count == 2
        assert cabinet.receiver_card_label is None
        assert cabinet.data_anchor == Point2D(0.1, 0.9)
        assert cabinet.grid_label_override == "Z1"

    def test_omitted_card_count_means_one(self) -> None:
        cabinet = config_to_cabinet(CabinetConfig(id="C1", type_id="T", x_mm=0, y_mm=0))
        assert cabinet.receiver_card_count is None
        assert cabinet.card_count == 1


class TestConfigToStep:
    """Tests for tagged step conversion."""

    def test_point_step(self) -> None:
        assert config_to_step(PointStepConfig(x_mm=1, y_mm=2)) == PointStep(1, 2)

    def test_cabinet_step(self) -> None:
        config = LayoutConfiguration.model_validate(
            {
                "schema_version": "2.0",
                "data_routes": [
                    {"id": "R1", "port": 1, "steps": [{"type": "cabinet", "cabinet_id": "C1", "card_index": 1}]}
                ],
            }
        )
        assert config_to_step(config.data_routes[0].steps[0]) == CabinetStep("C1", 1)


class TestConfigToLayout:
    """Tests for full layout conversion."""

    def test_mode_catalog_when_types_omitted(self) -> None:
        layout = config_to_layout(LayoutConfiguration(schema_version="2.0"))
        assert layout.cabinet_types is None
        assert layout.catalog == INDOOR_CABINET_TYPES

    def test_empty_types_fall_back_to_mode_catalog(self) -> None:
        config = load_layout_from_dict(
            {"schema_version": "2.0", "project": {"mode": "outdoor"}, "cabinet_types": []}
        )
        layout = config_to_layout(config)
        assert layout.catalog == OUTDOOR_CABINET_TYPES

    def test_registered_types(self) -> None:
        config = load_layout_from_dict(
            {
                "schema_version": "2.0",
                "cabinet_types": [{"type_id": "PANEL", "width_mm": 1000, "height_mm": 500}],
            }
        )
        layout = config_to_layout(config)
        assert [t.type_id for t in layout.catalog] == ["PANEL"]

    def test_default_module_size_follows_mode(self) -> None:
        indoor = config_to_layout(load_layout_from_dict({"schema_version": "2.0"}))
        outdoor = config_to_layout(
            load_layout_from_dict({"schema_version": "2.0", "project": {"mode": "outdoor"}})
        )
        assert indoor.settings.overview.module_size == ModuleSize.M320X160
        assert outdoor.settings.overview.module_size == ModuleSize.M320X320

    def test_routes_feeds_and_settings(self) -> None:
        config = load_layout_from_dict(
            {
                "schema_version": "2.0",
                "project": {
                    "name": "Wall",
                    "pitch_mm": 1.56,
                    "zoom": 2,
                    "grid": {"enabled": True, "step_mm": 80},
                    "overview": {
                        "mapping_numbers": {
                            "mode": "manual",
                            "per_endpoint": {"C1#1": "5"},
                            "position_overrides": {
                                "C1#1": {"position": "custom", "x": 0.2, "y": 0.8}
                            },
                        }
                    },
                },
                "data_routes": [
                    {"id": "R1", "port": 3, "label_position": "left", "force_label_bottom": True}
                ],
                "power_feeds": [
                    {"id": "F1", "breaker": "110V 15A", "custom_label": "Dimmer rack"}
                ],
            }
        )
        layout = config_to_layout(config)
        settings = layout.settings
        assert settings.name == "Wall"
        assert settings.pitch_mm == 1.56
        assert settings.zoom == 2
        assert settings.grid.enabled and settings.grid.step_mm == 80

        mapping = settings.overview.mapping_numbers
        assert mapping.is_manual
        assert mapping.per_endpoint == {"C1#1": "5"}
        override = mapping.position_overrides["C1#1"]
        assert override.position == MappingLabelPosition.CUSTOM
        assert (override.anchor_x, override.anchor_y) == (0.2, 0.8)

        route = layout.data_routes[0]
        assert route.port == 3
        assert route.label_position == LabelPosition.LEFT
        assert route.force_label_bottom is True

        feed = layout.power_feeds[0]
        assert feed.breaker == "110V 15A"
        assert feed.custom_label == "Dimmer rack"
