"""Firmware generation models."""

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field

from keysmith.models.diagnostics import Diagnostic
from keysmith.models.results import BaseResult


KEYMAP_C = "keymap.c"
CONFIG_H = "config.h"
RULES_MK = "rules.mk"
DESCRIPTOR_JSON = "keysmith.json"

OUTPUT_FILES = (KEYMAP_C, CONFIG_H, RULES_MK, DESCRIPTOR_JSON)


@dataclass
class FeatureFlags:
    """QMK features the generated sources depend on.

    Attributes:
        tap_dance: Layout defines tap dances
        combos: Layout defines combos
        lighting: Per-key lighting array is exported
        idle_effect: Idle effect state machine is generated
        rgb_timeout: Legacy RGB_MATRIX_TIMEOUT is emitted
    """

    tap_dance: bool = False
    combos: bool = False
    lighting: bool = False
    idle_effect: bool = False
    rgb_timeout: bool = False

    @property
    def rgb_matrix(self) -> bool:
        return self.lighting or self.idle_effect or self.rgb_timeout


@dataclass
class RenderedFirmware:
    """Generated file contents, held in memory until written.

    Attributes:
        files: File name to content, in write order
        features: Features the sources were generated with
        warnings: Advisory diagnostics from resolution and generation
    """

    files: dict[str, str]
    features: FeatureFlags
    warnings: list[Diagnostic]


class FirmwareResult(BaseResult):
    """Result of a firmware generation run."""

    output_dir: Path
    files: list[Path] = Field(default_factory=list)
    lighting_enabled: bool = False


__all__ = [
    "CONFIG_H",
    "DESCRIPTOR_JSON",
    "FeatureFlags",
    "FirmwareResult",
    "KEYMAP_C",
    "OUTPUT_FILES",
    "RULES_MK",
    "RenderedFirmware",
]
