"""Firmware CLI commands."""

from pathlib import Path
from typing import Annotated

import typer

from keysmith.cli.commands.dependencies import (
    get_firmware_service,
    get_geometry_service,
    get_layout_service,
    get_settings,
)
from keysmith.cli.decorators import handle_errors
from keysmith.cli.helpers import (
    print_diagnostics,
    print_info_message,
    print_success_message,
)
from keysmith.core.structlog_logger import get_struct_logger
from keysmith.firmware import GenerationOptions


logger = get_struct_logger(__name__)

firmware_app = typer.Typer(
    name="firmware",
    help="Generate QMK keymap sources from a layout.",
    no_args_is_help=True,
)


@firmware_app.command()
@handle_errors
def generate(
    ctx: typer.Context,
    layout_file: Annotated[
        Path, typer.Argument(help="Layout document", show_default=False)
    ],
    hardware: Annotated[
        Path,
        typer.Argument(
            help="Hardware description or QMK info.json", show_default=False
        ),
    ],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory for generated files"),
    ] = None,
    layout_variant: Annotated[
        str | None,
        typer.Option(
            "--layout-variant",
            "-L",
            help="QMK layout to use (defaults to the one named in the layout)",
        ),
    ] = None,
    keymap_name: Annotated[
        str | None, typer.Option("--keymap-name", help="Keymap name")
    ] = None,
    lighting: Annotated[
        bool | None,
        typer.Option(
            "--lighting/--no-lighting",
            help="Export per-key colors (default: when the keyboard has LEDs)",
        ),
    ] = None,
    lighting_layer: Annotated[
        int | None,
        typer.Option("--lighting-layer", min=0, help="Layer exported to the LEDs"),
    ] = None,
    row_tolerance: Annotated[
        float | None,
        typer.Option(
            "--row-tolerance", min=0, help="Max vertical distance within a row"
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Render everything but write nothing"),
    ] = False,
) -> None:
    """Generate keymap.c, config.h, rules.mk and a JSON descriptor."""
    settings = get_settings(ctx)

    parsed = get_layout_service().load(layout_file)
    layout = parsed.layout
    print_diagnostics(parsed.warnings)

    tolerance = settings.row_tolerance if row_tolerance is None else row_tolerance
    geometry = get_geometry_service(tolerance).load(
        hardware, layout_variant or layout.metadata.layout_variant
    )

    options = GenerationOptions(
        output_dir=output_dir or settings.output_dir,
        keymap_name=keymap_name or settings.keymap_name,
        lighting=lighting,
        lighting_layer=(
            settings.lighting_layer if lighting_layer is None else lighting_layer
        ),
    )
    logger.debug(
        "generation_options",
        output_dir=str(options.output_dir),
        lighting=options.lighting,
        lighting_layer=options.lighting_layer,
    )

    service = get_firmware_service()
    if dry_run:
        rendered = service.render(layout, geometry, options)
        print_diagnostics(rendered.warnings)
        for name, content in rendered.files.items():
            print_info_message(
                f"{options.output_dir / name} ({len(content.splitlines())} lines)"
            )
        print_success_message("Dry run complete, nothing written")
        return

    result = service.generate(layout, geometry, options)
    print_diagnostics(result.warnings)
    for path in result.files:
        print_info_message(str(path))
    lighting_note = "with" if result.lighting_enabled else "without"
    print_success_message(
        f"Generated {len(result.files)} files {lighting_note} per-key lighting "
        f"in {result.output_dir}"
    )


def register_commands(app: typer.Typer) -> None:
    """Register firmware commands with the main app."""
    app.add_typer(firmware_app, name="firmware")
