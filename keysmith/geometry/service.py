"""Geometry service: load hardware descriptions and memoize built geometry."""

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from keysmith.adapters import FileAdapter, create_file_adapter
from keysmith.core.errors import GeometryConfigError
from keysmith.core.structlog_logger import StructlogMixin
from keysmith.geometry.builder import (
    DEFAULT_ROW_TOLERANCE,
    GeometryResult,
    build_geometry,
)
from keysmith.geometry.models import HardwareDescription
from keysmith.geometry.qmk_info import load_qmk_info_json


class GeometryService(StructlogMixin):
    """Builds geometry once per keyboard, layout variant and row tolerance."""

    def __init__(
        self,
        file_adapter: FileAdapter,
        row_tolerance: float = DEFAULT_ROW_TOLERANCE,
    ) -> None:
        super().__init__()
        self._file_adapter = file_adapter
        self.row_tolerance = row_tolerance
        self._cache: dict[tuple[str, str, float], GeometryResult] = {}

    def build(self, description: HardwareDescription) -> GeometryResult:
        """Return the geometry for ``description``, building it on first use."""
        cache_key = (
            description.keyboard,
            description.layout_variant,
            self.row_tolerance,
        )
        cached = self._cache.get(cache_key)
        if cached is not None:
            self.logger.debug("geometry_cache_hit", keyboard=cache_key[0])
            return cached

        result = build_geometry(description, row_tolerance=self.row_tolerance)
        self._cache[cache_key] = result
        return result

    def load_description(
        self, path: Path, layout_variant: str | None = None
    ) -> HardwareDescription:
        """Read a hardware description or QMK ``info.json`` file.

        Raises:
            FileSystemError: If the file cannot be read
            GeometryConfigError: If the content describes no usable keyboard
        """
        data = self._file_adapter.read_json(path)
        return parse_hardware_data(data, layout_variant)

    def load(self, path: Path, layout_variant: str | None = None) -> GeometryResult:
        """Load and build the geometry in ``path``."""
        description = self.load_description(path, layout_variant)
        self.logger.info(
            "hardware_loaded",
            path=str(path),
            keyboard=description.keyboard,
            layout_variant=description.layout_variant,
            keys=len(description.keys),
        )
        return self.build(description)

    def clear_cache(self) -> None:
        self._cache.clear()


def parse_hardware_data(
    data: dict[str, Any], layout_variant: str | None = None
) -> HardwareDescription:
    """Accept either the native description format or QMK keyboard data."""
    if "layouts" in data and "keys" not in data:
        return load_qmk_info_json(data, layout_variant)

    try:
        description = HardwareDescription.model_validate(data)
    except ValidationError as e:
        raise GeometryConfigError(f"Invalid hardware description: {e}") from e
    if layout_variant is not None and layout_variant != description.layout_variant:
        raise GeometryConfigError(
            f"Hardware description is for {description.layout_variant!r}",
            value=layout_variant,
        )
    return description


def create_geometry_service(
    file_adapter: FileAdapter | None = None,
    row_tolerance: float = DEFAULT_ROW_TOLERANCE,
) -> GeometryService:
    """Create a GeometryService instance."""
    return GeometryService(
        file_adapter=file_adapter or create_file_adapter(),
        row_tolerance=row_tolerance,
    )


__all__ = ["GeometryService", "create_geometry_service", "parse_hardware_data"]
