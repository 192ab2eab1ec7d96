"""Layout CLI commands."""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from keysmith.cli.commands.dependencies import get_layout_service
from keysmith.cli.decorators import handle_errors
from keysmith.cli.helpers import (
    console,
    print_diagnostics,
    print_error_message,
    print_info_message,
    print_success_message,
)
from keysmith.core.errors import FileSystemError
from keysmith.layout.models import Layout, Position


layout_app = typer.Typer(
    name="layout",
    help="""Layout document commands.

Create, validate, display and reformat Markdown layout documents.""",
    no_args_is_help=True,
)

LayoutArgument = Annotated[
    Path, typer.Argument(help="Path to the layout document", show_default=False)
]


def _resolve_layer(layout: Layout, layer: str) -> int:
    """Accept a layer index, id or name."""
    if layer.isdigit() and int(layer) < len(layout.layers):
        return int(layer)
    index = layout.layer_index(layer)
    if index is not None:
        return index
    for i, candidate in enumerate(layout.layers):
        if candidate.name == layer:
            return i
    print_error_message(f"Layer not found: {layer}")
    raise typer.Exit(1)


@layout_app.command()
@handle_errors
def new(
    path: LayoutArgument,
    name: Annotated[str, typer.Option("--name", "-n", help="Layout name")] = "",
    rows: Annotated[int, typer.Option("--rows", min=1, help="Grid rows")] = 4,
    cols: Annotated[int, typer.Option("--cols", min=1, help="Grid columns")] = 12,
    keyboard: Annotated[
        str | None, typer.Option("--keyboard", "-k", help="Target keyboard")
    ] = None,
    layout_variant: Annotated[
        str | None, typer.Option("--layout-variant", help="Physical layout variant")
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite an existing file")
    ] = False,
) -> None:
    """Create a new layout with one empty base layer."""
    if path.exists() and not force:
        raise FileSystemError(
            "File already exists, use --force to overwrite", value=str(path)
        )
    service = get_layout_service()
    layout = service.create(
        path,
        name or path.stem,
        rows,
        cols,
        keyboard=keyboard,
        layout_variant=layout_variant,
    )
    print_success_message(
        f"Created layout {layout.metadata.name!r} ({rows}x{cols}) at {path}"
    )


@layout_app.command()
@handle_errors
def validate(
    path: LayoutArgument,
    strict: Annotated[
        bool, typer.Option("--strict", help="Treat warnings as errors")
    ] = False,
) -> None:
    """Parse a layout and check every reference."""
    result = get_layout_service().validate(path)
    print_diagnostics(result.warnings)

    layout = result.layout
    summary = (
        f"{len(layout.layers)} layers, {len(layout.tap_dances)} tap dances, "
        f"{len(layout.combos)} combos"
    )
    if strict and result.warnings:
        print_error_message(
            f"Layout has {len(result.warnings)} warnings ({summary})"
        )
        raise typer.Exit(1)
    print_success_message(f"Layout is valid: {summary}")


@layout_app.command()
@handle_errors
def show(
    path: LayoutArgument,
    layer: Annotated[
        str | None,
        typer.Option("--layer", "-l", help="Layer index, id or name to show"),
    ] = None,
) -> None:
    """Display layers as grids of key tokens."""
    parsed = get_layout_service().load(path)
    print_diagnostics(parsed.warnings)
    layout = parsed.layout

    indices = (
        [_resolve_layer(layout, layer)]
        if layer is not None
        else list(range(len(layout.layers)))
    )
    for index in indices:
        current = layout.layers[index]
        table = Table(
            title=f"Layer {index}: {escape(current.name)} [dim]@{current.id}[/dim]",
            show_header=True,
        )
        cols = current.column_count
        table.add_column("")
        for col in range(cols):
            table.add_column(str(col), justify="center")
        for row in range(current.row_count):
            cells = []
            for col in range(cols):
                key = current.get_key(Position(row=row, col=col))
                cells.append(escape(key.action.to_token()) if key is not None else "")
            table.add_row(str(row), *cells)
        console.print(table)


@layout_app.command(name="format")
@handle_errors
def format_layout(
    path: LayoutArgument,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead"),
    ] = None,
    check: Annotated[
        bool,
        typer.Option("--check", help="Exit with status 1 if the file would change"),
    ] = False,
) -> None:
    """Rewrite a layout document in canonical form."""
    changed = get_layout_service().format(path, output=output, check=check)
    if check:
        if changed:
            print_error_message(f"{path} is not canonically formatted")
            raise typer.Exit(1)
        print_success_message(f"{path} is already formatted")
        return
    if changed:
        print_success_message(f"Formatted {output or path}")
    else:
        print_info_message(f"{path} is already formatted")


@layout_app.command()
@handle_errors
def refs(
    path: LayoutArgument,
    layer: Annotated[
        str | None,
        typer.Option("--layer", "-l", help="Only list keys targeting this layer"),
    ] = None,
) -> None:
    """List the keys that target each layer."""
    result = get_layout_service().validate(path)
    print_diagnostics(result.warnings)
    layout = result.layout

    indices = (
        [_resolve_layer(layout, layer)]
        if layer is not None
        else list(range(len(layout.layers)))
    )
    table = Table(title="Layer references")
    table.add_column("Target")
    table.add_column("From layer")
    table.add_column("Position")
    table.add_column("Kind")
    table.add_column("Token")
    for index in indices:
        target = layout.layers[index]
        for reference in result.references_to(index):
            table.add_row(
                f"{index}: {target.name}",
                f"{reference.source_layer}: {layout.layers[reference.source_layer].name}",
                f"{reference.position.row},{reference.position.col}",
                reference.kind.description,
                escape(reference.token),
            )
    if table.row_count:
        console.print(table)
    else:
        print_info_message("No keys reference the selected layers")


def register_commands(app: typer.Typer) -> None:
    """Register layout commands with the main app."""
    app.add_typer(layout_app, name="layout")
