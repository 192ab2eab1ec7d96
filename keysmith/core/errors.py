"""Exception hierarchy for Keysmith.

Every error carries the pipeline stage that raised it, an optional location
(document line, or layer and key position) and the offending value, so the CLI
can report precise messages without parsing exception text.
"""

from keysmith.models.diagnostics import Diagnostic, SourceLocation, Stage


class KeysmithError(Exception):
    """Base class for all Keysmith errors."""

    stage: Stage = Stage.CONFIG

    def __init__(
        self,
        message: str,
        *,
        location: SourceLocation | None = None,
        value: str | None = None,
        stage: Stage | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = location or SourceLocation()
        self.value = value
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        where = str(self.location)
        text = f"{where}: {self.message}" if where else self.message
        if self.value is not None:
            text += f" ({self.value!r})"
        return text


class ConfigError(KeysmithError):
    """Invalid user configuration."""

    stage = Stage.CONFIG


class FileSystemError(KeysmithError):
    """A layout, hardware description or output file could not be accessed."""

    stage = Stage.IO


class LayoutParseError(KeysmithError):
    """Structural error in a layout document. Always fatal."""

    stage = Stage.PARSE

    def __init__(
        self, message: str, *, line: int | None = None, value: str | None = None
    ) -> None:
        super().__init__(message, location=SourceLocation(line=line), value=value)
        self.line = line


class LayoutReferenceError(KeysmithError):
    """One or more cross-references in a layout cannot be resolved.

    All problems found in a single pass are collected in ``issues`` so the
    author can fix them together.
    """

    stage = Stage.RESOLVE

    def __init__(self, issues: list[Diagnostic]) -> None:
        self.issues = list(issues)
        count = len(self.issues)
        summary = f"{count} unresolved reference{'s' if count != 1 else ''}"
        super().__init__(summary)

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)


class GeometryConfigError(KeysmithError):
    """The hardware description cannot produce a valid geometry."""

    stage = Stage.GEOMETRY


class GenerationError(KeysmithError):
    """The requested firmware output does not match the hardware."""

    stage = Stage.GENERATE


__all__ = [
    "ConfigError",
    "FileSystemError",
    "GenerationError",
    "GeometryConfigError",
    "KeysmithError",
    "LayoutParseError",
    "LayoutReferenceError",
]
