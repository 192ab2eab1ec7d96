"""Layout models for keyboard layouts."""

from keysmith.layout.models.actions import (
    HOLD_LIKE_KINDS,
    NO_ACTION_TOKENS,
    TRANSPARENT_TOKENS,
    Action,
    ComboTrigger,
    KeyAction,
    LayerModAction,
    LayerRef,
    LayerRefKind,
    LayerSwitchAction,
    LayerTapAction,
    ModTapAction,
    NoAction,
    RawAction,
    TapDanceTrigger,
    TransparentAction,
    is_transparent,
)
from keysmith.layout.models.color import BLACK, FALLBACK_COLOR, RgbColor
from keysmith.layout.models.layout import (
    CATEGORY_ID_PATTERN,
    FIRMWARE_IDENTIFIER_PATTERN,
    LAYER_ID_PATTERN,
    Category,
    Combo,
    KeyDefinition,
    Layer,
    Layout,
    LayoutMetadata,
    TapDance,
    new_layer_id,
    utc_now,
)
from keysmith.layout.models.position import Position
from keysmith.layout.models.settings import (
    HoldMode,
    IdleEffectSettings,
    LightingSettings,
    RgbMatrixEffect,
    TapHoldPreset,
    TapHoldSettings,
)


__all__ = [
    "Action",
    "BLACK",
    "CATEGORY_ID_PATTERN",
    "Category",
    "Combo",
    "ComboTrigger",
    "FALLBACK_COLOR",
    "FIRMWARE_IDENTIFIER_PATTERN",
    "LAYER_ID_PATTERN",
    "HOLD_LIKE_KINDS",
    "HoldMode",
    "IdleEffectSettings",
    "KeyAction",
    "KeyDefinition",
    "Layer",
    "LightingSettings",
    "LayerModAction",
    "LayerRef",
    "LayerRefKind",
    "LayerSwitchAction",
    "LayerTapAction",
    "Layout",
    "LayoutMetadata",
    "ModTapAction",
    "NO_ACTION_TOKENS",
    "NoAction",
    "Position",
    "RawAction",
    "RgbColor",
    "RgbMatrixEffect",
    "TRANSPARENT_TOKENS",
    "TapDance",
    "TapDanceTrigger",
    "TapHoldPreset",
    "TapHoldSettings",
    "TransparentAction",
    "is_transparent",
    "new_layer_id",
    "utc_now",
]
