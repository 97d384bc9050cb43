"""Shared layout loading for CLI commands."""

from pathlib import Path

import typer

from ledwall.application.config import LayoutLoadError, config_to_layout, load_layout
from ledwall.domain import Layout

OUTPUT_FORMATS = ("text", "json")


def load_layout_or_exit(layout_file: Path) -> Layout:
    """Load a layout file, printing errors and exiting with code 1 on failure."""
    try:
        config = load_layout(layout_file)
    except LayoutLoadError as e:
        display_load_error(e)
        raise typer.Exit(code=1)
    return config_to_layout(config)


def check_output_format(output_format: str) -> str:
    fmt = output_format.lower()
    if fmt not in OUTPUT_FORMATS:
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {', '.join(OUTPUT_FORMATS)}", err=True)
        raise typer.Exit(code=1)
    return fmt


def display_load_error(error: LayoutLoadError) -> None:
    """Print a load failure grouped by document location."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for issue in error.issues:
            typer.echo(f"    {issue.location.capitalize()}: {issue.message}", err=True)
    elif error.issues:
        for issue in error.issues:
            location = issue.location or "(document)"
            typer.echo(f"  {location}: {issue.message}", err=True)
            if issue.value is not None:
                typer.echo(f"    Value: {issue.value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Loading failed.", err=True)
