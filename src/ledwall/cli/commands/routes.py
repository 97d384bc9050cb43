"""Routes command: synthesised data chains and power circuits."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ledwall.application import AnalyzeLayoutCommand
from ledwall.infrastructure import JsonExporter, RouteFormatter

from ._loading import check_output_format, load_layout_or_exit


def routes_command(
    layout_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON layout file"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
) -> None:
    """Print anchors and polylines of every data route and power feed.

    Example:
        ledwall routes my-wall.json
    """
    fmt = check_output_format(output_format)
    layout = load_layout_or_exit(layout_file)
    analysis = AnalyzeLayoutCommand().execute(layout)

    if fmt == "json":
        data = JsonExporter().to_dict(analysis)
        typer.echo(
            json.dumps(
                {
                    "routes": data["routes"],
                    "feeds": data["feeds"],
                    "mapping_labels": data["mapping_labels"],
                },
                indent=2,
            )
        )
    else:
        typer.echo(RouteFormatter().format(analysis))
