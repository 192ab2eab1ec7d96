"""Key position on the visual grid."""

from pydantic import ConfigDict, Field

from keysmith.models.base import KeysmithBaseModel


class Position(KeysmithBaseModel):
    """A ``(row, col)`` cell of a layer table.

    Positions are immutable and hashable so they can key dictionaries.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    row: int = Field(ge=0)
    col: int = Field(ge=0)

    @classmethod
    def of(cls, row: int, col: int) -> "Position":
        return cls(row=row, col=col)

    def as_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


__all__ = ["Position"]
