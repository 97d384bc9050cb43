"""End-to-end tests for the layout analysis use case."""

from dataclasses import replace
from pathlib import Path

from ledwall.application import AnalyzeLayoutCommand
from ledwall.application.config import config_to_layout, load_layout
from ledwall.domain import Layout
from ledwall.domain.value_objects import LabelKind, ProjectMode

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "layouts"


def analyse(name: str):
    layout = config_to_layout(load_layout(FIXTURES_PATH / name))
    return AnalyzeLayoutCommand().execute(layout)


class TestGridWall:
    """A 2 x 2 wall of 1000 x 500 cabinets on one port and one feed."""

    def test_geometry(self) -> None:
        analysis = analyse("valid_grid.json")
        assert analysis.extent.width == 2000
        assert analysis.extent.height == 1000
        assert len(analysis.groups) == 1
        assert analysis.is_valid

    def test_capacity(self) -> None:
        analysis = analyse("valid_grid.json")
        assert analysis.route_loads[0].load_px == 320_000
        assert not analysis.overloaded_routes
        assert analysis.total_pixels == 320_000
        assert analysis.feed_loads[0].load_w == 1100
        assert analysis.feed_loads[0].safe_max_w == 2816
        assert not analysis.overloaded_feeds

    def test_addressing(self) -> None:
        analysis = analyse("valid_grid.json")
        assert analysis.grid_labels == {"C1": "A1", "C2": "B1", "C3": "A2", "C4": "B2"}
        assert set(analysis.mapping_labels.values()) == {"1"}

    def test_single_contiguous_polyline(self) -> None:
        path = analyse("valid_grid.json").route_paths[0]
        assert path.is_contiguous
        assert len(path.polylines) == 1
        assert path.terminal_marker is None

    def test_labels(self) -> None:
        labels = analyse("valid_grid.json").labels
        assert len(labels.of_kind(LabelKind.PORT)) == 1
        assert len(labels.of_kind(LabelKind.BREAKER)) == 1
        assert len(labels.of_kind(LabelKind.GRID_ADDRESS)) == 4

    def test_snapshot_not_mutated(self) -> None:
        layout = config_to_layout(load_layout(FIXTURES_PATH / "valid_grid.json"))
        before = replace(layout)
        AnalyzeLayoutCommand().execute(layout)
        assert layout == before


class TestOutdoorDualCard:
    """Outdoor cabinets with two cards split their pixels between ports."""

    def test_mode_and_loads(self) -> None:
        analysis = analyse("outdoor_dual_card.json")
        assert analysis.layout.settings.mode == ProjectMode.OUTDOOR
        # 960 mm at 5 mm pitch is 192 px; each card carries half a cabinet
        assert [load.load_px for load in analysis.route_loads] == [36864, 36864]

    def test_hidden_card_caption(self) -> None:
        analysis = analyse("outdoor_dual_card.json")
        assert analysis.card_labels["C2"] is None
        assert analysis.card_labels["C1"]

    def test_mapping_restarts_per_card(self) -> None:
        labels = analyse("outdoor_dual_card.json").mapping_labels
        assert labels["C1#0"] == "1"
        assert labels["C1#1"] == "1"

    def test_mapping_badges_drawn(self) -> None:
        labels = analyse("outdoor_dual_card.json").labels
        assert labels.of_kind(LabelKind.MAPPING_NUMBER)

    def test_feed_within_breaker(self) -> None:
        feed = analyse("outdoor_dual_card.json").feed_loads[0]
        assert feed.safe_max_w == 1320
        assert not feed.is_overloaded


class TestFaultyLayouts:
    """Analysis tolerates layouts that fail validation."""

    def test_errors_reported(self) -> None:
        analysis = analyse("with_errors.json")
        assert not analysis.is_valid
        assert "C2" not in analysis.bounds

    def test_empty_layout(self) -> None:
        analysis = AnalyzeLayoutCommand().execute(Layout())
        assert analysis.extent.is_empty
        assert analysis.route_paths == []
        assert analysis.total_pixels == 0
