"""Unit tests for report formatters and the JSON exporter."""

import json
from dataclasses import replace

import pytest

from ledwall.application import AnalyzeLayoutCommand
from ledwall.domain import CabinetStep, DataRoute, Layout
from ledwall.domain.value_objects import (
    FindingCode,
    Severity,
    ValidationError,
    ValidationReport,
)
from ledwall.infrastructure import (
    JsonExporter,
    LayoutReportFormatter,
    RouteFormatter,
    ValidationReportFormatter,
)


@pytest.fixture
def analysis(grid_layout):
    return AnalyzeLayoutCommand().execute(grid_layout)


class TestValidationReportFormatter:
    """Tests for finding display."""

    def test_clean_report(self) -> None:
        assert ValidationReportFormatter().format(ValidationReport()) == "No issues found."

    def test_errors_before_warnings(self) -> None:
        report = ValidationReport(
            findings=[
                ValidationError(
                    severity=Severity.WARNING,
                    code=FindingCode.ISOLATED_CABINET,
                    message="Cabinet C3 touches no other cabinet",
                    cabinet_ids=("C3",),
                ),
                ValidationError(
                    severity=Severity.ERROR,
                    code=FindingCode.DUPLICATE_ID,
                    message="Duplicate cabinet id C1",
                    cabinet_ids=("C1",),
                ),
            ]
        )
        output = ValidationReportFormatter().format(report)
        assert output.index("Errors:") < output.index("Warnings:")
        assert "  [DUPLICATE_ID] Duplicate cabinet id C1" in output
        assert "  [ISOLATED_CABINET] Cabinet C3 touches no other cabinet" in output


class TestLayoutReportFormatter:
    """Tests for the plain-text layout report."""

    def test_sections(self, analysis) -> None:
        output = LayoutReportFormatter().format(analysis)
        assert output.startswith("LAYOUT REPORT: Test Wall")
        for section in ("CABINETS", "VALIDATION", "DATA PORTS", "CONTROLLER", "POWER FEEDS"):
            assert section in output

    def test_capacity_lines(self, analysis) -> None:
        output = LayoutReportFormatter().format(analysis)
        assert "Wall size: 2000.0 x 1000.0 mm (1 screen(s))" in output
        assert "Pixel matrix: 800 x 400 px" in output
        assert "Port 1 (R1): 320,000 / 650,000 px (49%) ok" in output
        assert "A100: 320,000 / 1,300,000 px" in output
        assert "220V 20A (F1): 1100 W / 2816 W ok" in output

    def test_grid_addresses_listed(self, analysis) -> None:
        output = LayoutReportFormatter().format(analysis)
        lines = [line for line in output.splitlines() if line.startswith("C4 ")]
        assert len(lines) == 1
        assert " B2 " in lines[0]

    def test_empty_layout(self) -> None:
        output = LayoutReportFormatter().format(AnalyzeLayoutCommand().execute(Layout()))
        assert "Wall size: (no resolvable cabinets)" in output
        assert "  (none)" in output


class TestRouteFormatter:
    """Tests for the route listing."""

    def test_route_and_feed_sections(self, analysis) -> None:
        output = RouteFormatter().format(analysis)
        assert "DATA ROUTES" in output
        assert "POWER FEEDS" in output
        assert "R1:" in output
        assert "F1:" in output
        assert "  C1 (500.0, 265.0) [map 1]" in output
        assert "path 1: (500.0, 265.0) -> " in output

    def test_unresolved_route(self, grid_layout) -> None:
        layout = replace(
            grid_layout,
            data_routes=(DataRoute(id="R9", port=2, steps=(CabinetStep("missing"),)),),
        )
        output = RouteFormatter().format(AnalyzeLayoutCommand().execute(layout))
        assert "R9:" in output
        assert "(no resolvable endpoints)" in output


class TestJsonExporter:
    """Tests for JSON export."""

    def test_export_is_valid_json(self, analysis) -> None:
        data = json.loads(JsonExporter().export(analysis))
        assert set(data) == {
            "extent",
            "cabinets",
            "validation",
            "capacity",
            "mapping_labels",
            "routes",
            "feeds",
            "labels",
        }

    def test_capacity_values(self, analysis) -> None:
        data = JsonExporter().to_dict(analysis)
        route = data["capacity"]["routes"][0]
        assert route["load_px"] == 320000
        assert route["over_capacity"] is False
        assert data["capacity"]["controller"]["model"] == "A100"
        assert data["capacity"]["pixel_matrix"] == {"width_px": 800, "height_px": 400}
        assert data["capacity"]["feeds"][0]["load_w"] == 1100

    def test_cabinets_and_extent(self, analysis) -> None:
        data = JsonExporter().to_dict(analysis)
        assert data["extent"] == {"min_x": 0, "min_y": 0, "max_x": 2000, "max_y": 1000}
        by_id = {c["id"]: c for c in data["cabinets"]}
        assert by_id["C2"]["grid_label"] == "B1"
        assert by_id["C2"]["pixels"] == 80000

    def test_labels_serialised(self, analysis) -> None:
        data = JsonExporter().to_dict(analysis)
        kinds = {label["kind"] for label in data["labels"]}
        assert {"port", "breaker", "grid_address"} <= kinds

    def test_empty_layout_has_null_extent(self) -> None:
        data = JsonExporter().to_dict(AnalyzeLayoutCommand().execute(Layout()))
        assert data["extent"] is None
        assert data["cabinets"] == []
