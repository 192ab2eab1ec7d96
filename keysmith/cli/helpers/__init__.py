"""CLI helper utilities."""

from keysmith.cli.helpers.output import (
    console,
    print_diagnostics,
    print_error_message,
    print_info_message,
    print_success_message,
)


__all__ = [
    "console",
    "print_diagnostics",
    "print_error_message",
    "print_info_message",
    "print_success_message",
]
