"""Validation finding value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """How serious a finding is.

    Errors describe layouts that cannot be installed as drawn. Warnings are
    informational. Neither blocks any other engine computation; whether to
    block an export is left to the caller.
    """

    ERROR = "error"
    WARNING = "warning"


class FindingCode(str, Enum):
    """Machine-readable finding identifiers."""

    DUPLICATE_ID = "DUPLICATE_ID"
    MISSING_TYPE = "MISSING_TYPE"
    OVERLAP = "OVERLAP"
    OUT_OF_GRID = "OUT_OF_GRID"
    ISOLATED_CABINET = "ISOLATED_CABINET"


@dataclass(frozen=True)
class ValidationError:
    """A single structural finding about a layout.

    Attributes:
        severity: Error or warning.
        code: Finding identifier.
        message: Human-readable description.
        cabinet_ids: Cabinets to highlight, in report order.
    """

    severity: Severity
    code: FindingCode
    message: str
    cabinet_ids: tuple[str, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


@dataclass
class ValidationReport:
    """Container for the findings produced by one validation pass.

    Attributes:
        findings: Findings in the order the checks produced them.
    """

    findings: list[ValidationError] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationError]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationError]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """Check if the layout has no error-level findings."""
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """Get the CLI exit code based on validation status.

        Returns:
            0 if valid with no warnings
            1 if there are errors
            2 if valid but has warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    @property
    def affected_cabinet_ids(self) -> set[str]:
        """Every cabinet id mentioned by any finding."""
        return {cid for finding in self.findings for cid in finding.cabinet_ids}

    def by_code(self, code: FindingCode) -> list[ValidationError]:
        return [f for f in self.findings if f.code == code]

    def add(self, finding: ValidationError) -> ValidationReport:
        """Append a finding and return self for chaining."""
        self.findings.append(finding)
        return self

    def merge(self, other: ValidationReport) -> ValidationReport:
        """Merge another report into this one."""
        self.findings.extend(other.findings)
        return self
