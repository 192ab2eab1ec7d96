"""Options for firmware generation."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class GenerationOptions:
    """Options for generating firmware sources with FirmwareService.

    Lighting is tri-state: ``None`` exports per-key lighting whenever the
    hardware has LEDs, ``True`` requires it and ``False`` turns it off.
    """

    output_dir: Path
    """Directory where generated files are written"""

    keymap_name: str | None = None
    """Keymap name for the descriptor (defaults to the layout's keymap_name)"""

    lighting: bool | None = None
    """Export the per-key lighting array and indicator hook"""

    lighting_layer: int = 0
    """Layer whose colors are exported to the lighting array"""
