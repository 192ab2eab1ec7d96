"""Geometry CLI commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from keysmith.cli.commands.dependencies import get_geometry_service, get_settings
from keysmith.cli.decorators import handle_errors
from keysmith.cli.helpers import console, print_info_message
from keysmith.layout.models import Position


geometry_app = typer.Typer(
    name="geometry",
    help="Inspect how a keyboard's physical keys map to layout positions.",
    no_args_is_help=True,
)


@geometry_app.command()
@handle_errors
def show(
    ctx: typer.Context,
    hardware: Annotated[
        Path,
        typer.Argument(
            help="Hardware description or QMK info.json", show_default=False
        ),
    ],
    layout_variant: Annotated[
        str | None,
        typer.Option("--layout-variant", "-L", help="QMK layout to use"),
    ] = None,
    row_tolerance: Annotated[
        float | None,
        typer.Option(
            "--row-tolerance", min=0, help="Max vertical distance within a row"
        ),
    ] = None,
    grid: Annotated[
        bool, typer.Option("--grid", help="Show the visual grid instead of a list")
    ] = False,
) -> None:
    """Show the matrix, LED and grid position of every key."""
    settings = get_settings(ctx)
    tolerance = settings.row_tolerance if row_tolerance is None else row_tolerance
    result = get_geometry_service(tolerance).load(hardware, layout_variant)
    geometry, mapping = result.geometry, result.mapping

    print_info_message(
        f"{geometry.keyboard} ({geometry.layout_variant}): {geometry.key_count} keys, "
        f"matrix {geometry.matrix_rows}x{geometry.matrix_cols}, "
        f"{geometry.led_count} LEDs"
    )

    if grid:
        table = Table(title="Visual grid (matrix row,col)", show_header=True)
        table.add_column("")
        for col in range(mapping.grid_cols):
            table.add_column(str(col), justify="center")
        for row in range(mapping.grid_rows):
            cells = []
            for col in range(mapping.grid_cols):
                matrix = mapping.grid_to_matrix(Position(row=row, col=col))
                cells.append(f"{matrix[0]},{matrix[1]}" if matrix else "")
            table.add_row(str(row), *cells)
        console.print(table)
        return

    table = Table(title="Keys in visual order")
    table.add_column("#", justify="right")
    table.add_column("Matrix")
    table.add_column("Grid")
    table.add_column("LED", justify="right")
    for visual in mapping:
        table.add_row(
            str(visual.visual_index),
            f"{visual.matrix[0]},{visual.matrix[1]}",
            f"{visual.grid.row},{visual.grid.col}",
            "" if visual.led is None else str(visual.led),
        )
    console.print(table)


def register_commands(app: typer.Typer) -> None:
    """Register geometry commands with the main app."""
    app.add_typer(geometry_app, name="geometry")
