"""Main CLI application for Keysmith."""

import logging
import sys
from typing import Annotated

import typer

from keysmith import __version__
from keysmith.cli.decorators.error_handling import (
    handle_errors,
    print_stack_trace_if_verbose,
)
from keysmith.config import UserConfig, create_user_config
from keysmith.core.logging import setup_logging


__all__ = ["AppContext", "app", "main", "__version__"]


logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
    ):
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.user_config: UserConfig = create_user_config(cli_config_path=config_file)


app = typer.Typer(
    name="keysmith",
    help=f"""Keysmith keyboard layout compiler v{__version__}

Turns a Markdown layout document and a keyboard's physical description
into QMK keymap sources:

Layout (.md) + Hardware (.json) → keymap.c + config.h + rules.mk

Common workflows:
  • Start a layout:   keysmith layout new my-layout.md --rows 4 --cols 12
  • Check a layout:   keysmith layout validate my-layout.md
  • Generate sources: keysmith firmware generate my-layout.md info.json -o keymap/""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
@handle_errors
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """Keysmith keyboard layout compiler."""
    if version:
        print(f"Keysmith v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    app_context = AppContext(
        verbose=verbose, log_file=log_file, config_file=config_file
    )
    ctx.obj = app_context

    # CLI flags win over the configured level
    log_level: int | str = logging.WARNING
    if debug or verbose >= 2:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = app_context.user_config.settings.log_level

    setup_logging(log_level=log_level, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    from keysmith.cli.commands import register_all_commands

    register_all_commands(app)
    try:
        app()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
