"""QMK firmware source generation."""

from keysmith.firmware.config_generator import (
    ConfigGenerator,
    create_config_generator,
    tap_hold_defines,
)
from keysmith.firmware.descriptor import build_descriptor, render_descriptor
from keysmith.firmware.keymap_generator import KeymapGenerator, create_keymap_generator
from keysmith.firmware.models import (
    CONFIG_H,
    DESCRIPTOR_JSON,
    KEYMAP_C,
    OUTPUT_FILES,
    RULES_MK,
    FeatureFlags,
    FirmwareResult,
    RenderedFirmware,
)
from keysmith.firmware.options import GenerationOptions
from keysmith.firmware.service import FirmwareService, create_firmware_service


__all__ = [
    "CONFIG_H",
    "ConfigGenerator",
    "DESCRIPTOR_JSON",
    "FeatureFlags",
    "FirmwareResult",
    "FirmwareService",
    "GenerationOptions",
    "KEYMAP_C",
    "KeymapGenerator",
    "OUTPUT_FILES",
    "RULES_MK",
    "RenderedFirmware",
    "build_descriptor",
    "create_config_generator",
    "create_firmware_service",
    "create_keymap_generator",
    "render_descriptor",
    "tap_hold_defines",
]
