"""CLI command implementations for the ledwall application.

This package contains subcommands for the ledwall CLI, including:
- validate: Validate a layout file
- report: Print capacity and addressing report for a layout file
- routes: Print synthesised data and power paths for a layout file
"""

from ledwall.cli.commands.report import report_command
from ledwall.cli.commands.routes import routes_command
from ledwall.cli.commands.validate import validate_command

__all__ = ["report_command", "routes_command", "validate_command"]
