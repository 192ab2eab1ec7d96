"""CLI command modules."""

import typer

from keysmith.cli.commands.firmware import (
    register_commands as register_firmware_commands,
)
from keysmith.cli.commands.geometry import (
    register_commands as register_geometry_commands,
)
from keysmith.cli.commands.layout import register_commands as register_layout_commands


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_layout_commands(app)
    register_geometry_commands(app)
    register_firmware_commands(app)
