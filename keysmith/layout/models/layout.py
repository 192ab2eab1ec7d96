"""Layout, layer and key models."""

import re
import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator, model_validator

from keysmith.layout.models.actions import Action, NoAction
from keysmith.layout.models.color import RgbColor
from keysmith.layout.models.position import Position
from keysmith.layout.models.settings import (
    IdleEffectSettings,
    LightingSettings,
    TapHoldSettings,
)
from keysmith.models.base import KeysmithBaseModel


CATEGORY_ID_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")
FIRMWARE_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
LAYER_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:-]*$")


def new_layer_id() -> str:
    """Return a fresh layer identity token."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


def _check_category_ref(value: str | None) -> str | None:
    if value is not None and not CATEGORY_ID_PATTERN.match(value):
        raise ValueError(f"Invalid category id: {value!r}")
    return value


def _check_single_line(value: str) -> str:
    if "\n" in value or "\r" in value:
        raise ValueError("Must be a single line of text")
    return value


class Category(KeysmithBaseModel):
    """Named color group that keys and layers can belong to."""

    id: str
    name: str = Field(min_length=1)
    color: RgbColor

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not CATEGORY_ID_PATTERN.match(v):
            raise ValueError(
                f"Category id {v!r} must be lowercase letters, digits and hyphens"
            )
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_single_line(v)


class KeyDefinition(KeysmithBaseModel):
    """One key on one layer."""

    position: Position
    action: Action = Field(default_factory=NoAction)
    color: RgbColor | None = None
    category_id: str | None = None
    annotation: str | None = None

    @field_validator("category_id")
    @classmethod
    def validate_category_id(cls, v: str | None) -> str | None:
        return _check_category_ref(v)

    @field_validator("annotation")
    @classmethod
    def validate_annotation(cls, v: str | None) -> str | None:
        return v if v is None else _check_single_line(v)


class Layer(KeysmithBaseModel):
    """An ordered layer of key definitions.

    ``id`` is the stable identity other layers use to reference this one; it
    survives renaming and reordering.
    """

    id: str = Field(default_factory=new_layer_id)
    name: str = Field(min_length=1)
    color: RgbColor | None = None
    category_id: str | None = None
    # Off: layer and layer-category colors are skipped, key colors still apply
    layer_colors_enabled: bool = True
    keys: list[KeyDefinition] = Field(default_factory=list)

    @field_validator("category_id")
    @classmethod
    def validate_category_id(cls, v: str | None) -> str | None:
        return _check_category_ref(v)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not LAYER_ID_PATTERN.match(v):
            raise ValueError(f"Invalid layer id: {v!r}")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_single_line(v)

    @field_validator("keys")
    @classmethod
    def validate_unique_positions(cls, v: list[KeyDefinition]) -> list[KeyDefinition]:
        seen: set[Position] = set()
        for key in v:
            if key.position in seen:
                raise ValueError(f"Duplicate key at position {key.position}")
            seen.add(key.position)
        return v

    def get_key(self, position: Position) -> KeyDefinition | None:
        for key in self.keys:
            if key.position == position:
                return key
        return None

    def set_key(self, key: KeyDefinition) -> None:
        """Insert or replace the key at ``key.position``."""
        self.keys = [k for k in self.keys if k.position != key.position] + [key]

    def sorted_keys(self) -> list[KeyDefinition]:
        return sorted(self.keys, key=lambda k: k.position.as_tuple())

    @property
    def row_count(self) -> int:
        return max((k.position.row for k in self.keys), default=-1) + 1

    @property
    def column_count(self) -> int:
        return max((k.position.col for k in self.keys), default=-1) + 1


class TapDance(KeysmithBaseModel):
    """Multi-tap key behavior.

    Two-way when only single and double tap are set; three-way once a hold
    action is added.
    """

    name: str = Field(min_length=1)
    single_tap: Action
    double_tap: Action
    hold: Action | None = None

    @property
    def arity(self) -> int:
        return 3 if self.hold is not None else 2

    @property
    def is_hold_capable(self) -> bool:
        return self.hold is not None

    @property
    def firmware_id(self) -> str:
        return f"TD_{self.name.upper()}"


class Combo(KeysmithBaseModel):
    """Chord of two or more keys that fires ``action``."""

    name: str = Field(min_length=1)
    positions: list[Position] = Field(min_length=2)
    action: Action

    @field_validator("positions")
    @classmethod
    def validate_distinct(cls, v: list[Position]) -> list[Position]:
        if len(set(v)) != len(v):
            raise ValueError("Combo positions must be distinct")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_single_line(v)


class LayoutMetadata(KeysmithBaseModel):
    """Document metadata. Unknown keys are kept as extra fields."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    description: str = ""
    author: str = ""
    created: datetime = Field(default_factory=utc_now)
    modified: datetime = Field(default_factory=utc_now)
    tags: list[str] = Field(default_factory=list)
    version: str = "1.0"
    keyboard: str | None = None
    layout_variant: str | None = None
    keymap_name: str = "default"

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_single_line(v)

    @property
    def extra_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class Layout(KeysmithBaseModel):
    """Complete keyboard layout: layers plus shared definitions and settings."""

    metadata: LayoutMetadata
    layers: list[Layer] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    tap_dances: list[TapDance] = Field(default_factory=list)
    combos: list[Combo] = Field(default_factory=list)
    lighting: LightingSettings = Field(default_factory=LightingSettings)
    idle_effect: IdleEffectSettings = Field(default_factory=IdleEffectSettings)
    tap_hold: TapHoldSettings = Field(default_factory=TapHoldSettings)
    rgb_timeout_ms: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_unique_layer_ids(self) -> "Layout":
        seen: set[str] = set()
        for layer in self.layers:
            if layer.id in seen:
                raise ValueError(f"Duplicate layer id: {layer.id}")
            seen.add(layer.id)
        return self

    @classmethod
    def skeleton(
        cls,
        name: str,
        rows: int,
        cols: int,
        keyboard: str | None = None,
        layout_variant: str | None = None,
    ) -> "Layout":
        """Minimal layout: one base layer of ``KC_NO`` keys on a grid."""
        keys = [
            KeyDefinition(position=Position(row=r, col=c))
            for r in range(rows)
            for c in range(cols)
        ]
        return cls(
            metadata=LayoutMetadata(
                name=name, keyboard=keyboard, layout_variant=layout_variant
            ),
            layers=[Layer(name="Base", keys=keys)],
        )

    def layer_index(self, layer_id: str) -> int | None:
        for index, layer in enumerate(self.layers):
            if layer.id == layer_id:
                return index
        return None

    def get_layer(self, layer_id: str) -> Layer | None:
        index = self.layer_index(layer_id)
        return self.layers[index] if index is not None else None

    def get_category(self, category_id: str | None) -> Category | None:
        if category_id is None:
            return None
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def get_tap_dance(self, name: str) -> TapDance | None:
        for tap_dance in self.tap_dances:
            if tap_dance.name == name:
                return tap_dance
        return None

    def get_combo(self, name: str) -> Combo | None:
        for combo in self.combos:
            if combo.name == name:
                return combo
        return None

    def add_layer(self, name: str, position: int | None = None) -> Layer:
        """Create an empty layer with a fresh identity token."""
        layer = Layer(name=name)
        layers = list(self.layers)
        layers.insert(len(layers) if position is None else position, layer)
        self.layers = layers
        return layer

    def move_layer(self, from_index: int, to_index: int) -> None:
        """Reorder layers. References follow the layer, not the slot."""
        layers = list(self.layers)
        layer = layers.pop(from_index)
        layers.insert(to_index, layer)
        self.layers = layers

    def touch(self) -> None:
        self.metadata.modified = utc_now()


__all__ = [
    "CATEGORY_ID_PATTERN",
    "Category",
    "Combo",
    "FIRMWARE_IDENTIFIER_PATTERN",
    "KeyDefinition",
    "LAYER_ID_PATTERN",
    "Layer",
    "Layout",
    "LayoutMetadata",
    "TapDance",
    "new_layer_id",
    "utc_now",
]
