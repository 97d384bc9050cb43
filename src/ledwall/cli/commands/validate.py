"""Validate command for checking layout files.

This module provides the `validate` command that loads a JSON layout file and
reports structural findings: duplicate ids, unknown cabinet types, overlaps,
off-grid cabinets and isolated cabinets.
"""

from pathlib import Path
from typing import Annotated

import typer

from ledwall.domain import LayoutValidator
from ledwall.domain.value_objects import ValidationReport

from ._loading import load_layout_or_exit


def validate_command(
    layout_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON layout file to validate"),
    ],
) -> None:
    """Validate an LED wall layout file.

    Exit codes:
        0 - Layout is valid with no warnings
        1 - Layout has errors (or could not be loaded)
        2 - Layout is valid but has warnings

    Example:
        ledwall validate my-wall.json
    """
    typer.echo(f"Validating {layout_file}...")
    typer.echo()

    layout = load_layout_or_exit(layout_file)
    report = LayoutValidator().report(layout)

    _display_validation_report(report)
    raise typer.Exit(code=report.exit_code)


def _display_validation_report(report: ValidationReport) -> None:
    if report.errors:
        typer.echo("Errors:", err=True)
        for finding in report.errors:
            typer.echo(f"  [{finding.code.value}] {finding.message}", err=True)
        typer.echo()

    if report.warnings:
        typer.echo("Warnings:")
        for finding in report.warnings:
            typer.echo(f"  [{finding.code.value}] {finding.message}")
        typer.echo()

    if report.errors:
        typer.echo(
            f"Validation failed: {len(report.errors)} error(s), "
            f"{len(report.warnings)} warning(s)",
            err=True,
        )
    elif report.warnings:
        typer.echo(f"Validation passed with {len(report.warnings)} warning(s)")
    else:
        typer.echo("Validation passed. Layout is valid.")
