"""Models produced by keycode resolution."""

from enum import Enum

from pydantic import Field

from keysmith.layout.models import Layout, LayerRefKind, Position
from keysmith.models.base import KeysmithBaseModel
from keysmith.models.results import BaseResult


class HoldKind(str, Enum):
    """What a key does when held instead of tapped."""

    LAYER = "layer"
    MODIFIER = "modifier"
    TAP_DANCE = "tap_dance"


class ResolvedKey(KeysmithBaseModel):
    """A key with every layer reference replaced by an ordinal.

    ``keycode`` is the firmware expression for the key. Dual-role keys also
    carry their ``tap`` and ``hold`` parts.
    """

    position: Position
    keycode: str
    tap: str | None = None
    hold: str | None = None
    hold_kind: HoldKind | None = None
    hold_layer: int | None = None

    @property
    def is_dual_role(self) -> bool:
        return self.hold_kind is not None


class ResolvedLayer(KeysmithBaseModel):
    """Resolved keys of one layer in grid order."""

    index: int
    id: str
    name: str
    define: str
    keys: list[ResolvedKey] = Field(default_factory=list)

    def by_position(self) -> dict[Position, ResolvedKey]:
        return {key.position: key for key in self.keys}

    def get(self, position: Position) -> ResolvedKey | None:
        return self.by_position().get(position)


class LayerReference(KeysmithBaseModel):
    """One key that targets another layer."""

    source_layer: int
    position: Position
    kind: LayerRefKind
    token: str
    target_layer: int


class TapDanceStep(KeysmithBaseModel):
    """One tap dance outcome.

    ``layer`` is set when the step activates a layer instead of sending a key.
    """

    keycode: str
    layer: int | None = None
    layer_kind: LayerRefKind | None = None


class ResolvedTapDance(KeysmithBaseModel):
    name: str
    firmware_id: str
    single_tap: TapDanceStep
    double_tap: TapDanceStep
    hold: TapDanceStep | None = None

    @property
    def arity(self) -> int:
        return 3 if self.hold is not None else 2


class ResolvedCombo(KeysmithBaseModel):
    name: str
    positions: list[Position]
    # Base layer keycodes at ``positions``, in order
    trigger_keycodes: list[str]
    keycode: str


class ResolutionResult(BaseResult):
    """Everything downstream stages need from a resolved layout."""

    layout: Layout
    layers: list[ResolvedLayer] = Field(default_factory=list)
    references: dict[int, list[LayerReference]] = Field(default_factory=dict)
    tap_dances: list[ResolvedTapDance] = Field(default_factory=list)
    combos: list[ResolvedCombo] = Field(default_factory=list)

    def references_to(self, layer_index: int) -> list[LayerReference]:
        """All keys that target ``layer_index``."""
        return list(self.references.get(layer_index, []))


__all__ = [
    "HoldKind",
    "LayerReference",
    "ResolutionResult",
    "ResolvedCombo",
    "ResolvedKey",
    "ResolvedLayer",
    "ResolvedTapDance",
    "TapDanceStep",
]
