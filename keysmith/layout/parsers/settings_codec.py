"""Read and write the ``## Settings`` section of a layout document.

Only settings that differ from their defaults are written. Tap/hold fields are
compared against the selected preset, so a preset line followed by a few
overrides round-trips exactly.
"""

from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from keysmith.core.errors import LayoutParseError
from keysmith.layout.models import (
    HoldMode,
    IdleEffectSettings,
    LightingSettings,
    RgbMatrixEffect,
    TapHoldPreset,
    TapHoldSettings,
)
from keysmith.layout.parsers.values import (
    format_duration,
    format_switch,
    parse_duration,
    parse_optional_duration,
    parse_percent,
    parse_switch,
    parse_tap_count,
)
from keysmith.models.diagnostics import Diagnostic, Stage, warning


RGB_ENABLED = "RGB Enabled"
RGB_BRIGHTNESS = "RGB Brightness"
RGB_SATURATION = "RGB Saturation"
UNCOLORED_KEY_BEHAVIOR = "Uncolored Key Behavior"
IDLE_EFFECT = "Idle Effect"
IDLE_TIMEOUT = "Idle Timeout"
IDLE_EFFECT_DURATION = "Idle Effect Duration"
IDLE_EFFECT_MODE = "Idle Effect Mode"
RGB_TIMEOUT = "RGB Timeout"
TAP_HOLD_PRESET = "Tap-Hold Preset"
TAPPING_TERM = "Tapping Term"
QUICK_TAP_TERM = "Quick Tap Term"
HOLD_MODE = "Hold Mode"
RETRO_TAPPING = "Retro Tapping"
TAPPING_TOGGLE = "Tapping Toggle"
FLOW_TAP_TERM = "Flow Tap Term"
CHORDAL_HOLD = "Chordal Hold"

# Older spellings read as their current name
SETTING_ALIASES = {
    "RGB Master Switch": RGB_ENABLED,
    "Uncolored Key Brightness": UNCOLORED_KEY_BEHAVIOR,
    "Inactive Key Behavior": UNCOLORED_KEY_BEHAVIOR,
}

_UNCOLORED_WORDS = {
    "off": 0,
    "black": 0,
    "off (black)": 0,
    "show color": 100,
    "full": 100,
}


def parse_uncolored_behavior(text: str) -> int:
    """Brightness percentage for keys without a color; ``Off`` is 0."""
    word = text.strip().lower()
    if word in _UNCOLORED_WORDS:
        return _UNCOLORED_WORDS[word]
    return parse_percent(text)


# Setting name -> (model field, value parser)
_LIGHTING_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    RGB_ENABLED: ("enabled", parse_switch),
    RGB_BRIGHTNESS: ("brightness", parse_percent),
    RGB_SATURATION: ("saturation", parse_percent),
    UNCOLORED_KEY_BEHAVIOR: ("uncolored_brightness", parse_uncolored_behavior),
}

_IDLE_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    IDLE_EFFECT: ("enabled", parse_switch),
    IDLE_TIMEOUT: ("idle_timeout_ms", parse_duration),
    IDLE_EFFECT_DURATION: ("effect_duration_ms", parse_duration),
    IDLE_EFFECT_MODE: ("effect", RgbMatrixEffect.from_name),
}

_TAP_HOLD_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    TAPPING_TERM: ("tapping_term", parse_duration),
    QUICK_TAP_TERM: ("quick_tap_term", lambda v: parse_optional_duration(v, "Auto")),
    HOLD_MODE: ("hold_mode", HoldMode),
    RETRO_TAPPING: ("retro_tapping", parse_switch),
    TAPPING_TOGGLE: ("tapping_toggle", parse_tap_count),
    FLOW_TAP_TERM: (
        "flow_tap_term",
        lambda v: parse_optional_duration(v, "Disabled"),
    ),
    CHORDAL_HOLD: ("chordal_hold", parse_switch),
}

KNOWN_SETTINGS = frozenset(
    {*_LIGHTING_FIELDS, *_IDLE_FIELDS, *_TAP_HOLD_FIELDS, RGB_TIMEOUT, TAP_HOLD_PRESET}
)


class SettingsReader:
    """Collects ``**Name**: value`` lines and builds settings models."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, int]] = {}
        self.warnings: list[Diagnostic] = []

    def add(self, name: str, value: str, line: int) -> None:
        name = SETTING_ALIASES.get(name, name)
        if name not in KNOWN_SETTINGS:
            self.warnings.append(
                warning(Stage.PARSE, f"Unknown setting {name!r} ignored", line=line)
            )
            return
        self._entries[name] = (value, line)

    def _convert(
        self, name: str, parser: Callable[[str], Any]
    ) -> tuple[bool, Any]:
        if name not in self._entries:
            return False, None
        value, line = self._entries[name]
        try:
            return True, parser(value)
        except ValueError as e:
            raise LayoutParseError(
                f"Invalid value for {name}: {e}", line=line, value=value
            ) from e

    def lighting(self) -> LightingSettings:
        values: dict[str, Any] = {}
        for name, (field, parser) in _LIGHTING_FIELDS.items():
            present, converted = self._convert(name, parser)
            if present:
                values[field] = converted
        anchor = next((n for n in _LIGHTING_FIELDS if n in self._entries), RGB_ENABLED)
        return self._build(LightingSettings, values, anchor)

    def idle_effect(self) -> IdleEffectSettings:
        values: dict[str, Any] = {}
        for name, (field, parser) in _IDLE_FIELDS.items():
            present, converted = self._convert(name, parser)
            if present:
                values[field] = converted
        return self._build(IdleEffectSettings, values, IDLE_EFFECT)

    def tap_hold(self) -> TapHoldSettings:
        present, preset = self._convert(TAP_HOLD_PRESET, TapHoldPreset)
        baseline = TapHoldSettings.from_preset(
            preset if present else TapHoldPreset.DEFAULT
        )
        values = baseline.model_dump()
        for name, (field, parser) in _TAP_HOLD_FIELDS.items():
            present, converted = self._convert(name, parser)
            if present:
                values[field] = converted
        return self._build(TapHoldSettings, values, TAP_HOLD_PRESET)

    def rgb_timeout_ms(self) -> int:
        present, value = self._convert(RGB_TIMEOUT, parse_duration)
        return value if present else 0

    def _build(self, model: type[Any], values: dict[str, Any], anchor: str) -> Any:
        try:
            return model(**values)
        except ValidationError as e:
            line = self._entries.get(anchor, ("", None))[1]
            raise LayoutParseError(f"Invalid settings: {e}", line=line) from e


def format_settings(
    lighting: LightingSettings,
    idle: IdleEffectSettings,
    tap_hold: TapHoldSettings,
    rgb_timeout_ms: int,
) -> list[str]:
    """Lines for the settings section, empty when everything is default."""
    lines: list[str] = []

    default_lighting = LightingSettings()
    if lighting.enabled != default_lighting.enabled:
        lines.append(f"**{RGB_ENABLED}**: {format_switch(lighting.enabled)}")
    if lighting.brightness != default_lighting.brightness:
        lines.append(f"**{RGB_BRIGHTNESS}**: {lighting.brightness}%")
    if lighting.saturation != default_lighting.saturation:
        lines.append(f"**{RGB_SATURATION}**: {lighting.saturation}%")
    if lighting.uncolored_brightness != default_lighting.uncolored_brightness:
        lines.append(
            f"**{UNCOLORED_KEY_BEHAVIOR}**: {lighting.uncolored_brightness}%"
        )

    if rgb_timeout_ms:
        lines.append(f"**{RGB_TIMEOUT}**: {format_duration(rgb_timeout_ms)}")

    default_idle = IdleEffectSettings()
    if idle.enabled != default_idle.enabled:
        lines.append(f"**{IDLE_EFFECT}**: {format_switch(idle.enabled)}")
    if idle.idle_timeout_ms != default_idle.idle_timeout_ms:
        lines.append(f"**{IDLE_TIMEOUT}**: {format_duration(idle.idle_timeout_ms)}")
    if idle.effect_duration_ms != default_idle.effect_duration_ms:
        lines.append(
            f"**{IDLE_EFFECT_DURATION}**: {format_duration(idle.effect_duration_ms)}"
        )
    if idle.effect != default_idle.effect:
        lines.append(f"**{IDLE_EFFECT_MODE}**: {idle.effect.display_name}")

    baseline = TapHoldSettings.from_preset(tap_hold.preset)
    if tap_hold.preset != TapHoldPreset.DEFAULT:
        lines.append(f"**{TAP_HOLD_PRESET}**: {tap_hold.preset.value}")
    if tap_hold.tapping_term != baseline.tapping_term:
        lines.append(f"**{TAPPING_TERM}**: {tap_hold.tapping_term}ms")
    if tap_hold.quick_tap_term != baseline.quick_tap_term:
        value = (
            "Auto" if tap_hold.quick_tap_term is None else f"{tap_hold.quick_tap_term}ms"
        )
        lines.append(f"**{QUICK_TAP_TERM}**: {value}")
    if tap_hold.hold_mode != baseline.hold_mode:
        lines.append(f"**{HOLD_MODE}**: {tap_hold.hold_mode.value}")
    if tap_hold.retro_tapping != baseline.retro_tapping:
        lines.append(f"**{RETRO_TAPPING}**: {format_switch(tap_hold.retro_tapping)}")
    if tap_hold.tapping_toggle != baseline.tapping_toggle:
        lines.append(f"**{TAPPING_TOGGLE}**: {tap_hold.tapping_toggle} taps")
    if tap_hold.flow_tap_term != baseline.flow_tap_term:
        value = (
            "Disabled"
            if tap_hold.flow_tap_term is None
            else f"{tap_hold.flow_tap_term}ms"
        )
        lines.append(f"**{FLOW_TAP_TERM}**: {value}")
    if tap_hold.chordal_hold != baseline.chordal_hold:
        lines.append(f"**{CHORDAL_HOLD}**: {format_switch(tap_hold.chordal_hold)}")

    return lines


__all__ = [
    "KNOWN_SETTINGS",
    "SETTING_ALIASES",
    "SettingsReader",
    "format_settings",
    "parse_uncolored_behavior",
]
