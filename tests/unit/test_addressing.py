"""Unit tests for grid addresses, mapping numbers and card captions."""

from dataclasses import replace

import pytest

from ledwall.domain import (
    Cabinet,
    CabinetStep,
    DataRoute,
    GeometryResolver,
    Layout,
    LayoutSettings,
    MappingNumberSettings,
    OverviewSettings,
    build_sequence,
)
from ledwall.domain.services import (
    GridAddressLabeler,
    MappingNumberAssigner,
    column_label,
    dominant_card_index,
    grid_labels,
    mapping_labels,
    receiver_card_label,
)
from ledwall.domain.services.addressing import format_label_value, group_positions
from ledwall.domain.value_objects import GridLabelAxis


class TestColumnLabel:
    """Tests for bijective base-26 letters."""

    @pytest.mark.parametrize(
        "index,expected",
        [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")],
    )
    def test_letters(self, index: int, expected: str) -> None:
        assert column_label(index) == expected


class TestGroupPositions:
    """Tests for coordinate clustering."""

    def test_values_within_one_mm_merge(self) -> None:
        assert group_positions([1000.5, 0, 1000, 0.9]) == [0, 1000]

    def test_group_compares_with_last_representative(self) -> None:
        assert group_positions([0, 0.8, 1.6]) == [0, 1.6]


class TestGridAddresses:
    """Tests for GridAddressLabeler."""

    def test_two_by_three_grid(self, panel_type, make_grid) -> None:
        """A 2 row x 3 column grid is labelled A1..C2 regardless of order."""
        cabinets = make_grid(3, 2)
        geometry = GeometryResolver([panel_type])
        labels = GridAddressLabeler(geometry).labels(cabinets)
        assert sorted(labels.values()) == ["A1", "A2", "B1", "B2", "C1", "C2"]
        assert labels["C1"] == "A1"
        assert labels["C3"] == "C1"
        assert labels["C4"] == "A2"

        shuffled = GridAddressLabeler(geometry).labels(tuple(reversed(cabinets)))
        assert shuffled == labels

    def test_two_columns_three_rows(self, panel_type, make_grid) -> None:
        """A 2 column x 3 row grid gives letters A..B and numbers 1..3."""
        cabinets = make_grid(2, 3)
        labels = GridAddressLabeler(GeometryResolver([panel_type])).labels(cabinets)
        assert set(labels.values()) == {"A1", "A2", "A3", "B1", "B2", "B3"}
        assert labels["C2"] == "B1"
        assert labels["C5"] == "A3"

    def test_rows_axis(self, panel_type, make_grid) -> None:
        cabinets = make_grid(3, 2)
        labels = GridAddressLabeler(GeometryResolver([panel_type])).labels(
            cabinets, GridLabelAxis.ROWS
        )
        assert labels["C3"] == "A3"
        assert labels["C4"] == "B1"

    def test_manual_override_wins(self, panel_type) -> None:
        cabinets = (
            Cabinet("C1", "PANEL", 0, 0, grid_label_override=" Z9 "),
            Cabinet("C2", "PANEL", 1000, 0, grid_label_override="  "),
        )
        labels = GridAddressLabeler(GeometryResolver([panel_type])).labels(cabinets)
        assert labels == {"C1": "Z9", "C2": "B1"}

    def test_unresolved_cabinets_skipped(self, grid_layout) -> None:
        layout = grid_layout.with_cabinets(grid_layout.cabinets + (Cabinet("X", "mystery", 0, 0),))
        assert "X" not in grid_labels(layout)

    def test_layout_helper(self, grid_layout) -> None:
        assert grid_labels(grid_layout) == {"C1": "A1", "C2": "B1", "C3": "A2", "C4": "B2"}


class TestBuildSequence:
    """Tests for mapping label sequences."""

    def test_default_odd_sequence(self) -> None:
        assert build_sequence(5) == [1, 3, 5, 7, 9]

    def test_supplied_labels_first(self) -> None:
        assert build_sequence(5, [10, 20]) == [10, 20, 5, 7, 9]

    def test_non_finite_labels_dropped(self) -> None:
        assert build_sequence(3, [float("nan"), 4]) == [4, 3, 5]

    def test_truncates_long_supply(self) -> None:
        assert build_sequence(2, [7, 8, 9]) == [7, 8]

    def test_zero_count(self) -> None:
        assert build_sequence(0) == []

    def test_format_label_value(self) -> None:
        assert format_label_value(3.0) == "3"
        assert format_label_value(2.5) == "2.5"


class TestDominantCard:
    """Tests for dominant card selection."""

    def test_majority(self) -> None:
        route = DataRoute("R", 1, (CabinetStep("A", 1), CabinetStep("B", 1), CabinetStep("C", 0)))
        assert dominant_card_index(route) == 1

    def test_tie_goes_to_lower_index(self) -> None:
        route = DataRoute("R", 1, (CabinetStep("A", 1), CabinetStep("B", 0)))
        assert dominant_card_index(route) == 0

    def test_missing_card_counts_as_zero(self) -> None:
        route = DataRoute("R", 1, (CabinetStep("A"), CabinetStep("B", 1), CabinetStep("C")))
        assert dominant_card_index(route) == 0


class TestMappingNumberAssigner:
    """Tests for mapping number assignment."""

    def test_auto_numbers_by_port_then_id(self) -> None:
        routes = (
            DataRoute("b", 2, (CabinetStep("C2"),)),
            DataRoute("a", 1, (CabinetStep("C1"),)),
            DataRoute("empty", 1, ()),
        )
        labels = MappingNumberAssigner().assign(routes, MappingNumberSettings())
        assert labels == {"C1": "1", "C2": "3"}

    def test_supplied_labels(self) -> None:
        routes = (DataRoute("a", 1, (CabinetStep("C1"),)), DataRoute("b", 2, (CabinetStep("C2"),)))
        labels = MappingNumberAssigner().assign(routes, MappingNumberSettings(labels=(10,)))
        assert labels == {"C1": "10", "C2": "3"}

    def test_restart_per_card(self) -> None:
        routes = (
            DataRoute("r1", 1, (CabinetStep("C1", 0),)),
            DataRoute("r2", 2, (CabinetStep("C1", 1),)),
            DataRoute("r3", 3, (CabinetStep("C2", 0),)),
        )
        labels = MappingNumberAssigner().assign(
            routes, MappingNumberSettings(restart_per_card=True)
        )
        assert labels == {"C1#0": "1", "C2#0": "3", "C1#1": "1"}

    def test_manual_mode(self) -> None:
        routes = (DataRoute("r1", 1, (CabinetStep("C1"), CabinetStep("C2"))),)
        settings = MappingNumberSettings(
            mode="manual",
            per_chain={"r1": "7"},
            per_endpoint={"C2": " 9 ", "C5": "11", "C6": "  "},
        )
        labels = MappingNumberAssigner().assign(routes, settings)
        assert labels == {"C1": "7", "C2": "9", "C5": "11"}

    def test_invalid_mode_rejected(self) -> None:
        with pytest.raises(ValueError):
            MappingNumberSettings(mode="sometimes")

    def test_route_for_endpoint(self) -> None:
        routes = (
            DataRoute("r1", 1, (CabinetStep("C1", 1),)),
            DataRoute("r2", 2, (CabinetStep("C1"),)),
        )
        assigner = MappingNumberAssigner()
        assert assigner.route_for_endpoint(routes, "C1#1") == "r1"
        assert assigner.route_for_endpoint(routes, "C1") == "r2"
        assert assigner.route_for_endpoint(routes, "C9") is None

    def test_layout_helper(self, grid_layout) -> None:
        assert mapping_labels(grid_layout) == {"C1": "1", "C2": "1", "C3": "1", "C4": "1"}


class TestReceiverCardLabel:
    """Tests for card captions."""

    def test_default_model(self) -> None:
        assert receiver_card_label(LayoutSettings(), Cabinet("C1", "T", 0, 0)) == "5A75-E"

    def test_custom_label(self) -> None:
        cabinet = Cabinet("C1", "T", 0, 0, receiver_card_label=" I5+ ")
        assert receiver_card_label(LayoutSettings(), cabinet) == "I5+"

    def test_hidden_label(self) -> None:
        cabinet = Cabinet("C1", "T", 0, 0, receiver_card_label=None)
        assert receiver_card_label(LayoutSettings(), cabinet) is None

    def test_no_card(self) -> None:
        cabinet = Cabinet("C1", "T", 0, 0, receiver_card_count=0)
        assert receiver_card_label(LayoutSettings(), cabinet) is None

    def test_cards_hidden_globally(self) -> None:
        settings = LayoutSettings(overview=OverviewSettings(show_receiver_cards=False))
        assert receiver_card_label(settings, Cabinet("C1", "T", 0, 0)) is None

    def test_global_model(self) -> None:
        settings = replace(
            LayoutSettings(), overview=OverviewSettings(receiver_card_model="I5+")
        )
        assert receiver_card_label(settings, Cabinet("C1", "T", 0, 0)) == "I5+"
