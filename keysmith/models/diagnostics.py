"""Diagnostic models shared by every pipeline stage."""

from enum import Enum

from pydantic import Field

from keysmith.models.base import KeysmithBaseModel


class Stage(str, Enum):
    """Pipeline stage that produced a diagnostic."""

    PARSE = "parse"
    GEOMETRY = "geometry"
    RESOLVE = "resolve"
    COLOR = "color"
    GENERATE = "generate"
    CONFIG = "config"
    IO = "io"


class Severity(str, Enum):
    """How serious a diagnostic is."""

    WARNING = "warning"
    ERROR = "error"


class SourceLocation(KeysmithBaseModel):
    """Where a diagnostic points to.

    A location is either a line in the layout document, a key on a layer,
    or both when the parser knows which key a line describes.
    """

    line: int | None = None
    layer: int | None = None
    row: int | None = None
    col: int | None = None

    def __str__(self) -> str:
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.layer is not None:
            parts.append(f"layer {self.layer}")
        if self.row is not None and self.col is not None:
            parts.append(f"position ({self.row}, {self.col})")
        return ", ".join(parts)


class Diagnostic(KeysmithBaseModel):
    """A warning or error attached to a stage and a location."""

    severity: Severity = Severity.WARNING
    stage: Stage
    message: str
    location: SourceLocation = Field(default_factory=SourceLocation)
    value: str | None = None

    def __str__(self) -> str:
        where = str(self.location)
        text = f"{where}: {self.message}" if where else self.message
        if self.value is not None:
            text += f" ({self.value!r})"
        return text


def warning(
    stage: Stage,
    message: str,
    *,
    line: int | None = None,
    layer: int | None = None,
    row: int | None = None,
    col: int | None = None,
    value: str | None = None,
) -> Diagnostic:
    """Build an advisory diagnostic."""
    return Diagnostic(
        severity=Severity.WARNING,
        stage=stage,
        message=message,
        location=SourceLocation(line=line, layer=layer, row=row, col=col),
        value=value,
    )


def error(
    stage: Stage,
    message: str,
    *,
    line: int | None = None,
    layer: int | None = None,
    row: int | None = None,
    col: int | None = None,
    value: str | None = None,
) -> Diagnostic:
    """Build an error diagnostic."""
    return Diagnostic(
        severity=Severity.ERROR,
        stage=stage,
        message=message,
        location=SourceLocation(line=line, layer=layer, row=row, col=col),
        value=value,
    )


__all__ = [
    "Diagnostic",
    "Severity",
    "SourceLocation",
    "Stage",
    "error",
    "warning",
]
