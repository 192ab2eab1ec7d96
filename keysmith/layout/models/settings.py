"""Lighting and tap/hold settings carried by a layout."""

from enum import Enum

from pydantic import Field, model_validator

from keysmith.layout.models.color import RgbColor
from keysmith.models.base import KeysmithBaseModel


class RgbMatrixEffect(str, Enum):
    """RGB matrix animations that can run as the idle effect."""

    SOLID_COLOR = "solid_color"
    ALPHAS_MODS = "alphas_mods"
    GRADIENT_UP_DOWN = "gradient_up_down"
    GRADIENT_LEFT_RIGHT = "gradient_left_right"
    BREATHING = "breathing"
    BAND_SAT = "band_sat"
    BAND_VAL = "band_val"
    CYCLE_ALL = "cycle_all"
    CYCLE_LEFT_RIGHT = "cycle_left_right"
    CYCLE_UP_DOWN = "cycle_up_down"
    CYCLE_OUT_IN = "cycle_out_in"
    CYCLE_PINWHEEL = "cycle_pinwheel"
    CYCLE_SPIRAL = "cycle_spiral"
    RAINBOW_MOVING_CHEVRON = "rainbow_moving_chevron"
    DUAL_BEACON = "dual_beacon"
    RAINBOW_BEACON = "rainbow_beacon"
    RAINBOW_PINWHEELS = "rainbow_pinwheels"
    RAINDROPS = "raindrops"
    JELLYBEAN_RAINDROPS = "jellybean_raindrops"
    HUE_BREATHING = "hue_breathing"
    PIXEL_RAIN = "pixel_rain"
    PIXEL_FLOW = "pixel_flow"
    DIGITAL_RAIN = "digital_rain"
    TYPING_HEATMAP = "typing_heatmap"
    SOLID_REACTIVE_SIMPLE = "solid_reactive_simple"
    SOLID_REACTIVE = "solid_reactive"
    SPLASH = "splash"

    @property
    def qmk_name(self) -> str:
        """Mode constant, e.g. ``RGB_MATRIX_BREATHING``."""
        return f"RGB_MATRIX_{self.name}"

    @property
    def enable_define(self) -> str | None:
        """``ENABLE_*`` define QMK needs to compile the effect in.

        Solid color is always built, so it needs none.
        """
        if self is RgbMatrixEffect.SOLID_COLOR:
            return None
        return f"ENABLE_RGB_MATRIX_{self.name}"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def from_name(cls, name: str) -> "RgbMatrixEffect":
        """Look up an effect by display name, value or QMK constant.

        Raises:
            ValueError: If no effect matches
        """
        key = name.strip().upper().removeprefix("RGB_MATRIX_")
        key = key.replace(" ", "_").replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown RGB matrix effect: {name!r}") from None


class IdleEffectSettings(KeysmithBaseModel):
    """Time-based lighting: run an effect after inactivity, then turn off.

    Mutually exclusive with the layout's legacy lighting timeout; when this is
    enabled the firmware generator never emits the legacy timeout.
    """

    enabled: bool = False
    idle_timeout_ms: int = Field(default=60_000, ge=0)
    effect_duration_ms: int = Field(default=300_000, ge=0)
    effect: RgbMatrixEffect = RgbMatrixEffect.BREATHING

    @model_validator(mode="after")
    def validate_timeout(self) -> "IdleEffectSettings":
        if self.enabled and self.idle_timeout_ms == 0:
            raise ValueError("Idle effect needs a non-zero idle timeout")
        return self

    def is_default(self) -> bool:
        return self == IdleEffectSettings()


class LightingSettings(KeysmithBaseModel):
    """Global lighting switch and color adjustments.

    Brightness and saturation scale every exported key color. Keys that get
    no color from the inheritance chain are dimmed further to
    ``uncolored_brightness`` (0 turns them off).
    """

    enabled: bool = True
    brightness: int = Field(default=100, ge=0, le=100)
    saturation: int = Field(default=100, ge=0, le=200)
    uncolored_brightness: int = Field(default=100, ge=0, le=100)

    def apply(self, color: RgbColor, uncolored: bool = False) -> RgbColor:
        if uncolored:
            color = color.dim(self.uncolored_brightness)
        if self.saturation != 100:
            color = color.saturate(self.saturation)
        return color.dim(self.brightness)

    def is_default(self) -> bool:
        return self == LightingSettings()


class TapHoldPreset(str, Enum):
    DEFAULT = "Default"
    HOME_ROW_MODS = "Home Row Mods"
    RESPONSIVE = "Responsive"
    DELIBERATE = "Deliberate"
    CUSTOM = "Custom"


class HoldMode(str, Enum):
    """How a tap-hold key decides it is held when another key is pressed."""

    DEFAULT = "Default"
    PERMISSIVE_HOLD = "Permissive Hold"
    HOLD_ON_OTHER_KEY_PRESS = "Hold On Other Key Press"


class TapHoldSettings(KeysmithBaseModel):
    """Global tap/hold timing, emitted into ``config.h``."""

    preset: TapHoldPreset = TapHoldPreset.DEFAULT
    tapping_term: int = Field(default=200, ge=0)
    quick_tap_term: int | None = Field(default=None, ge=0)
    hold_mode: HoldMode = HoldMode.DEFAULT
    retro_tapping: bool = False
    tapping_toggle: int = Field(default=5, ge=1)
    flow_tap_term: int | None = Field(default=None, ge=0)
    chordal_hold: bool = False

    @classmethod
    def from_preset(cls, preset: TapHoldPreset) -> "TapHoldSettings":
        values = _PRESET_VALUES.get(preset, {})
        return cls(preset=preset, **values)

    def is_default(self) -> bool:
        return self == TapHoldSettings()


_PRESET_VALUES: dict[TapHoldPreset, dict[str, object]] = {
    TapHoldPreset.DEFAULT: {},
    TapHoldPreset.HOME_ROW_MODS: {
        "tapping_term": 175,
        "quick_tap_term": 120,
        "hold_mode": HoldMode.PERMISSIVE_HOLD,
        "flow_tap_term": 150,
        "chordal_hold": True,
    },
    TapHoldPreset.RESPONSIVE: {
        "tapping_term": 150,
        "quick_tap_term": 100,
        "hold_mode": HoldMode.HOLD_ON_OTHER_KEY_PRESS,
    },
    TapHoldPreset.DELIBERATE: {
        "tapping_term": 250,
        "retro_tapping": True,
    },
    TapHoldPreset.CUSTOM: {},
}


__all__ = [
    "HoldMode",
    "IdleEffectSettings",
    "LightingSettings",
    "RgbMatrixEffect",
    "TapHoldPreset",
    "TapHoldSettings",
]
