"""config.h and rules.mk generation."""

import logging
from typing import Any, TypeAlias

from keysmith.adapters import TemplateAdapter
from keysmith.firmware.models import FeatureFlags
from keysmith.firmware.templates import CONFIG_H_TEMPLATE, RULES_MK_TEMPLATE
from keysmith.geometry import KeyboardGeometry
from keysmith.layout.models import HoldMode, Layout, TapHoldSettings


logger = logging.getLogger(__name__)

# Ordered (name, value) pairs; a None value is a bare flag define
ConfigDefines: TypeAlias = list[tuple[str, int | None]]

QMK_DEFAULT_TAPPING_TOGGLE = 5


def tap_hold_defines(settings: TapHoldSettings) -> ConfigDefines:
    """QMK defines for the tap/hold settings, in a fixed order."""
    defines: ConfigDefines = [("TAPPING_TERM", settings.tapping_term)]
    if settings.quick_tap_term is not None:
        defines.append(("QUICK_TAP_TERM", settings.quick_tap_term))
    if settings.hold_mode is HoldMode.PERMISSIVE_HOLD:
        defines.append(("PERMISSIVE_HOLD", None))
    elif settings.hold_mode is HoldMode.HOLD_ON_OTHER_KEY_PRESS:
        defines.append(("HOLD_ON_OTHER_KEY_PRESS", None))
    if settings.retro_tapping:
        defines.append(("RETRO_TAPPING", None))
    if settings.tapping_toggle != QMK_DEFAULT_TAPPING_TOGGLE:
        defines.append(("TAPPING_TOGGLE", settings.tapping_toggle))
    if settings.flow_tap_term is not None:
        defines.append(("FLOW_TAP_TERM", settings.flow_tap_term))
    if settings.chordal_hold:
        defines.append(("CHORDAL_HOLD", None))
    return defines


class ConfigGenerator:
    """Generator for the keymap-level ``config.h`` and ``rules.mk``."""

    def __init__(self, template_adapter: TemplateAdapter) -> None:
        self._template_adapter = template_adapter
        logger.debug("ConfigGenerator initialized")

    def generate_config_h(
        self,
        layout: Layout,
        geometry: KeyboardGeometry,
        features: FeatureFlags,
    ) -> str:
        """Render ``config.h``.

        The idle effect and the legacy ``RGB_MATRIX_TIMEOUT`` are never both
        emitted; ``features`` decides which one applies.
        """
        idle: dict[str, Any] | None = None
        if features.idle_effect:
            settings = layout.idle_effect
            idle = {
                "timeout_ms": settings.idle_timeout_ms,
                "duration_ms": settings.effect_duration_ms,
                "mode": settings.effect.qmk_name,
                "enable_define": settings.effect.enable_define,
            }

        context = {
            "layout_name": layout.metadata.name,
            "matrix_rows": geometry.matrix_rows,
            "matrix_cols": geometry.matrix_cols,
            "led_count": geometry.led_count if features.rgb_matrix else 0,
            "tap_hold_preset": layout.tap_hold.preset.value,
            "tap_hold": tap_hold_defines(layout.tap_hold),
            "combos": features.combos,
            "idle": idle,
            "rgb_timeout_ms": layout.rgb_timeout_ms if features.rgb_timeout else 0,
            "lighting_off": features.rgb_matrix and not layout.lighting.enabled,
        }
        logger.debug("Generating config.h with %d tap-hold defines", len(context["tap_hold"]))
        return self._template_adapter.render_string(CONFIG_H_TEMPLATE, context)

    def generate_rules_mk(self, layout: Layout, features: FeatureFlags) -> str:
        """Render ``rules.mk`` enabling the QMK features the keymap uses."""
        enabled = []
        if features.tap_dance:
            enabled.append("TAP_DANCE_ENABLE")
        if features.combos:
            enabled.append("COMBO_ENABLE")
        if features.rgb_matrix:
            enabled.append("RGB_MATRIX_ENABLE")
        return self._template_adapter.render_string(
            RULES_MK_TEMPLATE,
            {"layout_name": layout.metadata.name, "features": enabled},
        )


def create_config_generator(template_adapter: TemplateAdapter) -> ConfigGenerator:
    """Create a new ConfigGenerator instance."""
    return ConfigGenerator(template_adapter)


__all__ = [
    "ConfigDefines",
    "ConfigGenerator",
    "create_config_generator",
    "tap_hold_defines",
]
