"""Key action vocabulary.

An action is one of a closed set of tagged variants plus ``RawAction``, which
keeps any token the vocabulary does not model so it can be emitted verbatim.
Layer-targeting actions never store a layer ordinal directly; they hold a
``LayerRef`` naming the target layer by its identity token.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field, model_validator

from keysmith.models.base import KeysmithBaseModel


TRANSPARENT_TOKENS = frozenset({"KC_TRNS", "KC_TRANSPARENT", "_______"})
NO_ACTION_TOKENS = frozenset({"KC_NO", "XXXXXXX"})


class LayerRefKind(str, Enum):
    """How an action uses the layer it targets."""

    MOMENTARY = "MO"
    TAP_HOLD = "LT"
    TOGGLE = "TG"
    ONE_SHOT = "OSL"
    SWITCH_TO = "TO"
    TAP_TOGGLE = "TT"
    DEFAULT_SET = "DF"
    LAYER_MOD = "LM"

    @property
    def is_hold_like(self) -> bool:
        """True when the target layer is active only while the key is held."""
        return self in HOLD_LIKE_KINDS

    @property
    def description(self) -> str:
        return _KIND_DESCRIPTIONS[self]


HOLD_LIKE_KINDS = frozenset(
    {
        LayerRefKind.MOMENTARY,
        LayerRefKind.TAP_HOLD,
        LayerRefKind.TAP_TOGGLE,
        LayerRefKind.LAYER_MOD,
    }
)

_KIND_DESCRIPTIONS = {
    LayerRefKind.MOMENTARY: "momentary",
    LayerRefKind.TAP_HOLD: "layer-tap",
    LayerRefKind.TOGGLE: "toggle",
    LayerRefKind.ONE_SHOT: "one-shot",
    LayerRefKind.SWITCH_TO: "switch-to",
    LayerRefKind.TAP_TOGGLE: "tap-toggle",
    LayerRefKind.DEFAULT_SET: "default-set",
    LayerRefKind.LAYER_MOD: "layer-mod",
}

# Functions that take a single layer argument
SWITCH_KINDS = frozenset(
    {
        LayerRefKind.MOMENTARY,
        LayerRefKind.TOGGLE,
        LayerRefKind.ONE_SHOT,
        LayerRefKind.SWITCH_TO,
        LayerRefKind.TAP_TOGGLE,
        LayerRefKind.DEFAULT_SET,
    }
)


class LayerRef(KeysmithBaseModel):
    """Reference to a layer by identity token or, for legacy input, by ordinal."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: str | None = None
    index: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_exactly_one(self) -> "LayerRef":
        if (self.token is None) == (self.index is None):
            raise ValueError("Layer reference needs exactly one of token or index")
        return self

    @property
    def is_legacy(self) -> bool:
        return self.index is not None

    def __str__(self) -> str:
        return f"@{self.token}" if self.token is not None else str(self.index)


class _ActionBase(KeysmithBaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_token(self) -> str:
        raise NotImplementedError

    def layer_refs(self) -> list[tuple[LayerRefKind, LayerRef]]:
        """Layer references made by this action, outermost first."""
        return []

    def __str__(self) -> str:
        return self.to_token()


class NoAction(_ActionBase):
    """Key does nothing and stops layer fall-through."""

    type: Literal["none"] = "none"
    token: str = "KC_NO"

    def to_token(self) -> str:
        return self.token


class TransparentAction(_ActionBase):
    """Key falls through to the next active layer below."""

    type: Literal["transparent"] = "transparent"
    token: str = "KC_TRNS"

    def to_token(self) -> str:
        return self.token


class KeyAction(_ActionBase):
    """A basic keycode, optionally wrapped in modifier functions."""

    type: Literal["key"] = "key"
    code: str

    def to_token(self) -> str:
        return self.code


class LayerSwitchAction(_ActionBase):
    """``MO``/``TG``/``TO``/``TT``/``OSL``/``DF`` with one layer argument."""

    type: Literal["layer"] = "layer"
    kind: LayerRefKind
    layer: LayerRef

    @model_validator(mode="after")
    def validate_kind(self) -> "LayerSwitchAction":
        if self.kind not in SWITCH_KINDS:
            raise ValueError(f"{self.kind.value} is not a single-argument layer action")
        return self

    def to_token(self) -> str:
        return f"{self.kind.value}({self.layer})"

    def layer_refs(self) -> list[tuple[LayerRefKind, LayerRef]]:
        return [(self.kind, self.layer)]


class LayerTapAction(_ActionBase):
    """``LT(layer, tap)``: tap sends ``tap``, hold activates ``layer``."""

    type: Literal["layer_tap"] = "layer_tap"
    layer: LayerRef
    tap: "Action"

    def to_token(self) -> str:
        return f"LT({self.layer}, {self.tap.to_token()})"

    def layer_refs(self) -> list[tuple[LayerRefKind, LayerRef]]:
        return [(LayerRefKind.TAP_HOLD, self.layer), *self.tap.layer_refs()]


class LayerModAction(_ActionBase):
    """``LM(layer, mods)``: hold activates ``layer`` with ``mods`` applied."""

    type: Literal["layer_mod"] = "layer_mod"
    layer: LayerRef
    mods: str

    def to_token(self) -> str:
        return f"LM({self.layer}, {self.mods})"

    def layer_refs(self) -> list[tuple[LayerRefKind, LayerRef]]:
        return [(LayerRefKind.LAYER_MOD, self.layer)]


class ModTapAction(_ActionBase):
    """Modifier when held, ``tap`` when tapped.

    ``function`` is ``MT`` (with explicit ``mods``) or a shorthand such as
    ``LCTL_T`` where the modifier is implied by the name.
    """

    type: Literal["mod_tap"] = "mod_tap"
    function: str = "MT"
    mods: str | None = None
    tap: "Action"

    @model_validator(mode="after")
    def validate_mods(self) -> "ModTapAction":
        if self.function == "MT" and not self.mods:
            raise ValueError("MT requires a modifier argument")
        return self

    @property
    def hold_modifier(self) -> str:
        if self.mods:
            return self.mods
        return "MOD_" + self.function.removesuffix("_T")

    def to_token(self) -> str:
        if self.function == "MT":
            return f"MT({self.mods}, {self.tap.to_token()})"
        return f"{self.function}({self.tap.to_token()})"

    def layer_refs(self) -> list[tuple[LayerRefKind, LayerRef]]:
        return self.tap.layer_refs()


class TapDanceTrigger(_ActionBase):
    """``TD(name)``: runs the named tap dance."""

    type: Literal["tap_dance"] = "tap_dance"
    name: str

    def to_token(self) -> str:
        return f"TD({self.name})"


class ComboTrigger(_ActionBase):
    """``COMBO(name)``: fires the named combo's action from a single key."""

    type: Literal["combo"] = "combo"
    name: str

    def to_token(self) -> str:
        return f"COMBO({self.name})"


class RawAction(_ActionBase):
    """Token outside the modeled vocabulary, kept verbatim."""

    type: Literal["raw"] = "raw"
    token: str

    def to_token(self) -> str:
        return self.token


Action = Annotated[
    Union[
        NoAction,
        TransparentAction,
        KeyAction,
        LayerSwitchAction,
        LayerTapAction,
        LayerModAction,
        ModTapAction,
        TapDanceTrigger,
        ComboTrigger,
        RawAction,
    ],
    Field(discriminator="type"),
]

LayerTapAction.model_rebuild()
ModTapAction.model_rebuild()


def is_transparent(action: "Action | None") -> bool:
    return isinstance(action, TransparentAction)


__all__ = [
    "Action",
    "ComboTrigger",
    "HOLD_LIKE_KINDS",
    "KeyAction",
    "LayerModAction",
    "LayerRef",
    "LayerRefKind",
    "LayerSwitchAction",
    "LayerTapAction",
    "ModTapAction",
    "NO_ACTION_TOKENS",
    "NoAction",
    "RawAction",
    "SWITCH_KINDS",
    "TRANSPARENT_TOKENS",
    "TapDanceTrigger",
    "TransparentAction",
    "is_transparent",
]
