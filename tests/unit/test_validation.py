"""Unit tests for structural layout validation."""

from dataclasses import replace

from ledwall.domain import (
    Cabinet,
    GeometryResolver,
    GridSettings,
    Layout,
    LayoutSettings,
    LayoutValidator,
    validate,
)
from ledwall.domain.value_objects import FindingCode, Severity


def _codes(findings) -> list[FindingCode]:
    return [f.code for f in findings]


class TestDuplicateIds:
    """Tests for DUPLICATE_ID findings."""

    def test_one_error_per_duplicated_id(self, panel_type) -> None:
        layout = Layout(
            cabinets=(
                Cabinet("C1", "PANEL", 0, 0),
                Cabinet("C1", "PANEL", 1000, 0),
                Cabinet("C1", "PANEL", 2000, 0),
            ),
            cabinet_types=(panel_type,),
        )
        findings = LayoutValidator().check_duplicate_ids(layout)
        assert len(findings) == 1
        assert findings[0].severity == Severity.ERROR
        assert findings[0].message == "Duplicate cabinet ID: C1"


class TestMissingTypes:
    """Tests for MISSING_TYPE findings."""

    def test_unknown_type_is_error(self, panel_type) -> None:
        layout = Layout(
            cabinets=(Cabinet("C1", "mystery", 0, 0),),
            cabinet_types=(panel_type,),
        )
        findings = validate(layout)
        assert _codes(findings) == [FindingCode.MISSING_TYPE]
        assert findings[0].message == "Cabinet C1 has unknown type: mystery"

    def test_pattern_type_is_not_missing(self, panel_type) -> None:
        layout = Layout(
            cabinets=(Cabinet("C1", "custom 500x500", 0, 0),),
            cabinet_types=(panel_type,),
        )
        assert validate(layout) == []


class TestOverlaps:
    """Tests for OVERLAP findings."""

    def test_touching_cabinets_never_overlap(self, grid_layout) -> None:
        assert FindingCode.OVERLAP not in _codes(validate(grid_layout))

    def test_overlap_reported_once_per_pair(self, panel_type) -> None:
        layout = Layout(
            cabinets=(
                Cabinet("A", "PANEL", 0, 0),
                Cabinet("B", "PANEL", 500, 0),
            ),
            cabinet_types=(panel_type,),
        )
        findings = [f for f in validate(layout) if f.code == FindingCode.OVERLAP]
        assert len(findings) == 1
        assert findings[0].cabinet_ids == ("A", "B")
        assert findings[0].message == "Cabinets A and B overlap"

    def test_three_way_overlap(self, panel_type) -> None:
        layout = Layout(
            cabinets=tuple(Cabinet(cid, "PANEL", 0, 0) for cid in ("A", "B", "C")),
            cabinet_types=(panel_type,),
        )
        overlaps = LayoutValidator().check_overlaps(layout, GeometryResolver.for_layout(layout))
        assert len(overlaps) == 3


class TestGridAlignment:
    """Tests for OUT_OF_GRID findings."""

    def _layout(self, panel_type, enabled: bool, step: float) -> Layout:
        return Layout(
            cabinets=(Cabinet("C1", "PANEL", 0, 0), Cabinet("C2", "PANEL", 1005, 0)),
            cabinet_types=(panel_type,),
            settings=LayoutSettings(grid=GridSettings(enabled=enabled, step_mm=step)),
        )

    def test_off_grid_warning(self, panel_type) -> None:
        findings = LayoutValidator().check_grid_alignment(self._layout(panel_type, True, 10))
        assert len(findings) == 1
        assert findings[0].severity == Severity.WARNING
        assert findings[0].message == "Cabinet C2 is not aligned to grid (10mm)"

    def test_disabled_grid_skips_check(self, panel_type) -> None:
        assert LayoutValidator().check_grid_alignment(self._layout(panel_type, False, 10)) == []

    def test_non_positive_step_skips_check(self, panel_type) -> None:
        assert LayoutValidator().check_grid_alignment(self._layout(panel_type, True, 0)) == []


class TestIsolation:
    """Tests for ISOLATED_CABINET findings."""

    def test_single_cabinet_is_never_isolated(self, panel_type) -> None:
        layout = Layout(cabinets=(Cabinet("C1", "PANEL", 0, 0),), cabinet_types=(panel_type,))
        assert validate(layout) == []

    def test_detached_cabinet_warns(self, grid_layout) -> None:
        layout = grid_layout.with_cabinets(
            grid_layout.cabinets + (Cabinet("far", "PANEL", 5000, 5000),)
        )
        findings = validate(layout)
        assert _codes(findings) == [FindingCode.ISOLATED_CABINET]
        assert findings[0].message == "Cabinet far has no adjacent neighbors"


class TestValidatorBehaviour:
    """Cross-cutting validator properties."""

    def test_check_order(self, panel_type) -> None:
        layout = Layout(
            cabinets=(
                Cabinet("A", "PANEL", 0, 0),
                Cabinet("A", "PANEL", 100, 0),
                Cabinet("X", "mystery", 0, 0),
                Cabinet("far", "PANEL", 9000, 0),
            ),
            cabinet_types=(panel_type,),
        )
        codes = _codes(validate(layout))
        assert codes == [
            FindingCode.DUPLICATE_ID,
            FindingCode.MISSING_TYPE,
            FindingCode.OVERLAP,
            FindingCode.ISOLATED_CABINET,
        ]

    def test_idempotent_and_non_mutating(self, grid_layout) -> None:
        before = replace(grid_layout)
        first = validate(grid_layout)
        second = validate(grid_layout)
        assert first == second
        assert grid_layout == before

    def test_report_exit_code(self, grid_layout) -> None:
        assert LayoutValidator().report(grid_layout).exit_code == 0
