"""Helper functions for CLI output formatting with Rich integration."""

from rich.console import Console
from rich.markup import escape

from keysmith.models.diagnostics import Diagnostic, Severity


console = Console()
err_console = Console(stderr=True)


def print_success_message(message: str) -> None:
    """Print a success message with a checkmark."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error_message(message: str) -> None:
    """Print an error message on stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False)


def print_info_message(message: str) -> None:
    console.print(f"[blue]•[/blue] {escape(message)}")


def print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    """Print warnings and errors, one per line, on stderr."""
    for diagnostic in diagnostics:
        style = "yellow" if diagnostic.severity is Severity.WARNING else "red"
        err_console.print(
            f"[{style}]{diagnostic.severity.value}[/{style}] "
            f"[dim]{diagnostic.stage.value}[/dim] {escape(str(diagnostic))}",
            highlight=False,
        )


__all__ = [
    "console",
    "err_console",
    "print_diagnostics",
    "print_error_message",
    "print_info_message",
    "print_success_message",
]
