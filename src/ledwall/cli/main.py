"""Typer CLI for LED wall layouts."""

import logging
from typing import Annotated

import typer

from ledwall.cli.commands import report_command, routes_command, validate_command

app = typer.Typer(
    name="ledwall",
    help="Validate LED video-wall layouts and compute capacity, addressing and cabling.",
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """LED video-wall layout engine."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


app.command(name="validate")(validate_command)
app.command(name="report")(report_command)
app.command(name="routes")(routes_command)


if __name__ == "__main__":
    app()
