"""Structural validation of a layout snapshot.

Checks run in a fixed order: duplicate ids, unknown types, overlaps, grid
alignment, isolation. Findings are data; nothing here raises on malformed
input.
"""

from __future__ import annotations

import logging
import math
from collections import Counter

from ..entities import Layout
from ..value_objects import (
    FindingCode,
    Severity,
    ValidationError,
    ValidationReport,
)
from .geometry import GeometryResolver

logger = logging.getLogger(__name__)

__all__ = ["LayoutValidator", "validate"]


class LayoutValidator:
    """Produces ordered findings for a layout."""

    def validate(self, layout: Layout) -> list[ValidationError]:
        """Run every check and return findings in check order."""
        geometry = GeometryResolver.for_layout(layout)
        findings: list[ValidationError] = []
        findings.extend(self.check_duplicate_ids(layout))
        findings.extend(self.check_missing_types(layout, geometry))
        findings.extend(self.check_overlaps(layout, geometry))
        findings.extend(self.check_grid_alignment(layout))
        findings.extend(self.check_isolation(layout, geometry))
        logger.debug(f"Validation produced {len(findings)} findings")
        return findings

    def report(self, layout: Layout) -> ValidationReport:
        return ValidationReport(findings=self.validate(layout))

    def check_duplicate_ids(self, layout: Layout) -> list[ValidationError]:
        """One error per id that appears on more than one cabinet."""
        counts = Counter(c.id for c in layout.cabinets)
        return [
            ValidationError(
                severity=Severity.ERROR,
                code=FindingCode.DUPLICATE_ID,
                message=f"Duplicate cabinet ID: {cabinet_id}",
                cabinet_ids=(cabinet_id,),
            )
            for cabinet_id, count in counts.items()
            if count > 1
        ]

    def check_missing_types(
        self, layout: Layout, geometry: GeometryResolver
    ) -> list[ValidationError]:
        return [
            ValidationError(
                severity=Severity.ERROR,
                code=FindingCode.MISSING_TYPE,
                message=f"Cabinet {c.id} has unknown type: {c.type_id}",
                cabinet_ids=(c.id,),
            )
            for c in layout.cabinets
            if geometry.resolve_type(c.type_id) is None
        ]

    def check_overlaps(
        self, layout: Layout, geometry: GeometryResolver
    ) -> list[ValidationError]:
        """One error per unordered pair sharing a positive area."""
        resolved = geometry.resolved(layout.cabinets)
        findings = []
        for i, (first, first_rect) in enumerate(resolved):
            for second, second_rect in resolved[i + 1 :]:
                if first_rect.overlaps(second_rect):
                    findings.append(
                        ValidationError(
                            severity=Severity.ERROR,
                            code=FindingCode.OVERLAP,
                            message=f"Cabinets {first.id} and {second.id} overlap",
                            cabinet_ids=(first.id, second.id),
                        )
                    )
        return findings

    def check_grid_alignment(self, layout: Layout) -> list[ValidationError]:
        """Warn about cabinets whose origin is off the snap grid.

        Skipped when the grid is disabled or its step is not a positive
        finite number.
        """
        grid = layout.settings.grid
        step = grid.step_mm
        if not grid.enabled or not math.isfinite(step) or step <= 0:
            return []
        step_text = f"{step:g}"
        return [
            ValidationError(
                severity=Severity.WARNING,
                code=FindingCode.OUT_OF_GRID,
                message=f"Cabinet {c.id} is not aligned to grid ({step_text}mm)",
                cabinet_ids=(c.id,),
            )
            for c in layout.cabinets
            if math.fmod(c.x_mm, step) != 0 or math.fmod(c.y_mm, step) != 0
        ]

    def check_isolation(
        self, layout: Layout, geometry: GeometryResolver
    ) -> list[ValidationError]:
        """Warn about resolvable cabinets with no connected neighbour.

        Only meaningful when the layout has more than one cabinet.
        """
        if len(layout.cabinets) <= 1:
            return []
        resolved = geometry.resolved(layout.cabinets)
        findings = []
        for i, (cabinet, rect) in enumerate(resolved):
            others = [other for j, (_, other) in enumerate(resolved) if j != i]
            if not geometry.has_neighbour(rect, others):
                findings.append(
                    ValidationError(
                        severity=Severity.WARNING,
                        code=FindingCode.ISOLATED_CABINET,
                        message=f"Cabinet {cabinet.id} has no adjacent neighbors",
                        cabinet_ids=(cabinet.id,),
                    )
                )
        return findings


def validate(layout: Layout) -> list[ValidationError]:
    """Validate ``layout`` with a default :class:`LayoutValidator`."""
    return LayoutValidator().validate(layout)
