"""Command line interface for Keysmith."""

from keysmith.cli.app import app, main


__all__ = ["app", "main"]
