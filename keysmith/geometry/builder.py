"""Build keyboard geometry and the visual layout mapping.

Keys are grouped into visual rows by the y coordinate of their centers. A key
joins the current row when its center is within ``row_tolerance`` key units
of the mean center of the keys already in that row, which keeps staggered
and slightly angled thumb clusters on one row. Rows are then ordered left to
right by x center.
"""

import math
from dataclasses import dataclass

from keysmith.core.errors import GeometryConfigError
from keysmith.core.structlog_logger import get_struct_logger
from keysmith.geometry.models import (
    HardwareDescription,
    KeyboardGeometry,
    PhysicalKey,
    VisualKey,
    VisualLayoutMapping,
)
from keysmith.layout.models import Position


logger = get_struct_logger(__name__)

DEFAULT_ROW_TOLERANCE = 0.5


@dataclass(frozen=True)
class GeometryResult:
    """Geometry plus its derived mapping."""

    geometry: KeyboardGeometry
    mapping: VisualLayoutMapping


def _validate(description: HardwareDescription) -> int:
    """Check the description and return the effective LED count."""
    if not description.keys:
        raise GeometryConfigError(
            "Hardware description has no keys", value=description.layout_variant
        )

    seen_matrix: set[tuple[int, int]] = set()
    seen_led: set[int] = set()
    for key in description.keys:
        row, col = key.matrix
        if row >= description.matrix_rows or col >= description.matrix_cols:
            raise GeometryConfigError(
                f"Matrix position outside the "
                f"{description.matrix_rows}x{description.matrix_cols} matrix",
                value=f"{row},{col}",
            )
        if key.matrix in seen_matrix:
            raise GeometryConfigError(
                "Two keys share a matrix position", value=f"{row},{col}"
            )
        seen_matrix.add(key.matrix)

        if key.led is None:
            continue
        if key.led in seen_led:
            raise GeometryConfigError("Two keys share an LED index", value=str(key.led))
        seen_led.add(key.led)

    if description.led_count is None:
        return max(seen_led) + 1 if seen_led else 0

    for led in sorted(seen_led):
        if led >= description.led_count:
            raise GeometryConfigError(
                f"LED index is not below the LED count {description.led_count}",
                value=str(led),
            )
    return description.led_count


def cluster_rows(
    keys: list[PhysicalKey], row_tolerance: float = DEFAULT_ROW_TOLERANCE
) -> list[list[PhysicalKey]]:
    """Group keys into visual rows, each sorted left to right."""
    ordered = sorted(keys, key=lambda k: (k.center_y, k.center_x, k.matrix))
    rows: list[list[PhysicalKey]] = []
    row_sum = 0.0
    for key in ordered:
        if rows and abs(key.center_y - row_sum / len(rows[-1])) <= row_tolerance:
            rows[-1].append(key)
            row_sum += key.center_y
        else:
            rows.append([key])
            row_sum = key.center_y
    return [sorted(row, key=lambda k: (k.center_x, k.matrix)) for row in rows]


def _grid_column(key: PhysicalKey, taken: set[int]) -> int:
    col = max(0, math.floor(key.x + 0.5))
    while col in taken:
        col += 1
    taken.add(col)
    return col


def build_geometry(
    description: HardwareDescription,
    row_tolerance: float = DEFAULT_ROW_TOLERANCE,
) -> GeometryResult:
    """Validate a hardware description and derive the visual mapping.

    Args:
        description: Normalized hardware input
        row_tolerance: Maximum distance in key units between a key's center
            and the running mean of a row for the key to join that row

    Returns:
        GeometryResult with the geometry and its mapping

    Raises:
        GeometryConfigError: If the description is inconsistent
    """
    if row_tolerance < 0:
        raise GeometryConfigError(
            "Row tolerance must not be negative", value=str(row_tolerance)
        )
    led_count = _validate(description)

    geometry = KeyboardGeometry(
        keyboard=description.keyboard,
        layout_variant=description.layout_variant,
        matrix_rows=description.matrix_rows,
        matrix_cols=description.matrix_cols,
        led_count=led_count,
        keys=list(description.keys),
    )

    visual_keys: list[VisualKey] = []
    for grid_row, row in enumerate(cluster_rows(geometry.keys, row_tolerance)):
        taken: set[int] = set()
        for key in row:
            visual_keys.append(
                VisualKey(
                    matrix=key.matrix,
                    visual_index=len(visual_keys),
                    grid=Position(row=grid_row, col=_grid_column(key, taken)),
                    led=key.led,
                )
            )

    mapping = VisualLayoutMapping(keys=tuple(visual_keys), led_count=led_count)
    logger.debug(
        "geometry_built",
        keyboard=geometry.keyboard,
        layout_variant=geometry.layout_variant,
        keys=len(visual_keys),
        rows=mapping.grid_rows,
        led_count=led_count,
    )
    return GeometryResult(geometry=geometry, mapping=mapping)


__all__ = [
    "DEFAULT_ROW_TOLERANCE",
    "GeometryResult",
    "build_geometry",
    "cluster_rows",
]
