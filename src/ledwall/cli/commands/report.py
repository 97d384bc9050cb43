"""Report command: capacity, addressing and validation summary."""

from pathlib import Path
from typing import Annotated

import typer

from ledwall.application import AnalyzeLayoutCommand
from ledwall.infrastructure import JsonExporter, LayoutReportFormatter

from ._loading import check_output_format, load_layout_or_exit


def report_command(
    layout_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON layout file"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the report to a file instead of stdout"),
    ] = None,
) -> None:
    """Print the capacity and addressing report for a layout.

    Example:
        ledwall report my-wall.json --format json
    """
    fmt = check_output_format(output_format)
    layout = load_layout_or_exit(layout_file)
    analysis = AnalyzeLayoutCommand().execute(layout)

    if fmt == "json":
        output = JsonExporter().export(analysis)
    else:
        output = LayoutReportFormatter().format(analysis)

    if output_file is not None:
        output_file.write_text(output)
        typer.echo(f"Report written to {output_file}")
    else:
        typer.echo(output)
