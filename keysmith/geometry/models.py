"""Physical keyboard geometry models."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import Field, field_validator

from keysmith.layout.models import Position
from keysmith.models.base import KeysmithBaseModel


MatrixPosition = tuple[int, int]


class PhysicalKey(KeysmithBaseModel):
    """One switch: its matrix wiring, placement in key units and LED."""

    matrix: MatrixPosition
    x: float
    y: float
    w: float = Field(default=1.0, gt=0)
    h: float = Field(default=1.0, gt=0)
    r: float = 0.0
    led: int | None = Field(default=None, ge=0)

    @field_validator("matrix")
    @classmethod
    def validate_matrix(cls, v: MatrixPosition) -> MatrixPosition:
        if v[0] < 0 or v[1] < 0:
            raise ValueError(f"Matrix position must not be negative: {v}")
        return v

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def center_y(self) -> float:
        return self.y + self.h / 2


class HardwareDescription(KeysmithBaseModel):
    """Normalized hardware input for the geometry builder.

    ``led_count`` may be left out, in which case it is derived from the
    highest LED index on any key.
    """

    keyboard: str
    layout_variant: str
    matrix_rows: int = Field(gt=0)
    matrix_cols: int = Field(gt=0)
    led_count: int | None = Field(default=None, ge=0)
    keys: list[PhysicalKey] = Field(default_factory=list)


class KeyboardGeometry(KeysmithBaseModel):
    """Validated physical geometry of one keyboard layout variant."""

    keyboard: str
    layout_variant: str
    matrix_rows: int
    matrix_cols: int
    led_count: int
    keys: list[PhysicalKey]

    @property
    def has_lighting(self) -> bool:
        return self.led_count > 0

    @property
    def key_count(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class VisualKey:
    """Where one physical key sits in every coordinate system."""

    matrix: MatrixPosition
    """Wiring matrix ``(row, col)``"""

    visual_index: int
    """Reading-order index, row by row from the top left"""

    grid: Position
    """Cell in the layout document table"""

    led: int | None = None
    """Lighting element index, if the key has one"""


@dataclass(frozen=True)
class VisualLayoutMapping:
    """Immutable correspondence between matrix, LED, visual and grid positions.

    Built once per geometry by ``build_geometry``; lookups are dictionary
    backed.
    """

    keys: tuple[VisualKey, ...]
    led_count: int
    _by_matrix: Mapping[MatrixPosition, VisualKey] = field(
        init=False, repr=False, compare=False
    )
    _by_led: Mapping[int, VisualKey] = field(init=False, repr=False, compare=False)
    _by_grid: Mapping[Position, VisualKey] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_by_matrix", MappingProxyType({k.matrix: k for k in self.keys})
        )
        object.__setattr__(
            self,
            "_by_led",
            MappingProxyType({k.led: k for k in self.keys if k.led is not None}),
        )
        object.__setattr__(
            self, "_by_grid", MappingProxyType({k.grid: k for k in self.keys})
        )

    def __iter__(self) -> Iterator[VisualKey]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def by_matrix(self, matrix: MatrixPosition) -> VisualKey | None:
        return self._by_matrix.get(matrix)

    def by_led(self, led: int) -> VisualKey | None:
        return self._by_led.get(led)

    def by_grid(self, position: Position) -> VisualKey | None:
        return self._by_grid.get(position)

    def by_visual_index(self, index: int) -> VisualKey | None:
        if 0 <= index < len(self.keys):
            return self.keys[index]
        return None

    def matrix_to_led(self, matrix: MatrixPosition) -> int | None:
        key = self.by_matrix(matrix)
        return key.led if key else None

    def led_to_matrix(self, led: int) -> MatrixPosition | None:
        key = self.by_led(led)
        return key.matrix if key else None

    def matrix_to_grid(self, matrix: MatrixPosition) -> Position | None:
        key = self.by_matrix(matrix)
        return key.grid if key else None

    def grid_to_matrix(self, position: Position) -> MatrixPosition | None:
        key = self.by_grid(position)
        return key.matrix if key else None

    @property
    def grid_rows(self) -> int:
        return max((k.grid.row for k in self.keys), default=-1) + 1

    @property
    def grid_cols(self) -> int:
        return max((k.grid.col for k in self.keys), default=-1) + 1


__all__ = [
    "HardwareDescription",
    "KeyboardGeometry",
    "MatrixPosition",
    "PhysicalKey",
    "VisualKey",
    "VisualLayoutMapping",
]
