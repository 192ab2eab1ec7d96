"""Keysmith - keyboard layout to QMK firmware compiler."""

from importlib.metadata import distribution

from .firmware.models import FirmwareResult
from .layout.resolver import ResolutionResult


__version__ = distribution(__package__ or "keysmith").version

__all__ = [
    "FirmwareResult",
    "ResolutionResult",
    "__version__",
]

# Import CLI after setting __version__ to avoid circular imports
from .cli import app, main


__all__ += ["app", "main"]
