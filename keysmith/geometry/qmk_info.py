"""Normalize QMK ``info.json`` / ``keyboard.json`` data into a HardwareDescription."""

from typing import Any

from pydantic import ValidationError

from keysmith.core.errors import GeometryConfigError
from keysmith.geometry.models import HardwareDescription, PhysicalKey


def list_layout_variants(data: dict[str, Any]) -> list[str]:
    """Names of the physical layouts defined in the data, sorted."""
    return sorted((data.get("layouts") or {}).keys())


def _select_layout(
    data: dict[str, Any], layout_variant: str | None
) -> tuple[str, list[dict[str, Any]]]:
    layouts = data.get("layouts") or {}
    if not layouts:
        raise GeometryConfigError("Keyboard data defines no layouts")

    if layout_variant is None:
        if len(layouts) != 1:
            raise GeometryConfigError(
                "Keyboard defines several layouts; choose one of: "
                + ", ".join(sorted(layouts))
            )
        layout_variant = next(iter(layouts))

    if layout_variant not in layouts:
        raise GeometryConfigError(
            "Unknown layout variant; available: " + ", ".join(sorted(layouts)),
            value=layout_variant,
        )
    entries = layouts[layout_variant].get("layout") or []
    return layout_variant, entries


def _matrix_size(data: dict[str, Any], keys: list[PhysicalKey]) -> tuple[int, int]:
    size = data.get("matrix_size")
    if isinstance(size, dict) and "rows" in size and "cols" in size:
        return int(size["rows"]), int(size["cols"])

    pins = data.get("matrix_pins") or {}
    if isinstance(pins.get("rows"), list) and isinstance(pins.get("cols"), list):
        rows = len(pins["rows"])
        if (data.get("split") or {}).get("enabled"):
            rows *= 2
        return rows, len(pins["cols"])

    return (
        max(k.matrix[0] for k in keys) + 1,
        max(k.matrix[1] for k in keys) + 1,
    )


def _led_table(data: dict[str, Any]) -> tuple[dict[tuple[int, int], int], int]:
    """Map matrix positions to LED indices from ``rgb_matrix.layout``."""
    rgb_matrix = data.get("rgb_matrix") or {}
    layout = rgb_matrix.get("layout")
    if not layout:
        return {}, 0

    leds: dict[tuple[int, int], int] = {}
    for index, entry in enumerate(layout):
        matrix = entry.get("matrix")
        # Underglow LEDs have no switch
        if matrix is None:
            continue
        leds[(int(matrix[0]), int(matrix[1]))] = index
    return leds, len(layout)


def load_qmk_info_json(
    data: dict[str, Any],
    layout_variant: str | None = None,
    keyboard: str | None = None,
) -> HardwareDescription:
    """Build a HardwareDescription from QMK keyboard data.

    Args:
        data: Parsed ``info.json`` or ``keyboard.json`` content
        layout_variant: Name under ``layouts``; may be omitted when the
            keyboard defines exactly one
        keyboard: Hardware id; defaults to ``keyboard_name`` in the data

    Raises:
        GeometryConfigError: If the data cannot describe a keyboard
    """
    variant, entries = _select_layout(data, layout_variant)
    leds, led_count = _led_table(data)

    keys: list[PhysicalKey] = []
    for index, entry in enumerate(entries):
        matrix = entry.get("matrix")
        if matrix is None or len(matrix) != 2:
            raise GeometryConfigError(
                f"Layout entry {index} has no matrix position", value=variant
            )
        position = (int(matrix[0]), int(matrix[1]))
        try:
            keys.append(
                PhysicalKey(
                    matrix=position,
                    x=entry.get("x", 0.0),
                    y=entry.get("y", 0.0),
                    w=entry.get("w", 1.0),
                    h=entry.get("h", 1.0),
                    r=entry.get("r", 0.0),
                    led=leds.get(position),
                )
            )
        except ValidationError as e:
            raise GeometryConfigError(
                f"Invalid layout entry {index}: {e}", value=variant
            ) from e

    if not keys:
        raise GeometryConfigError("Layout has no keys", value=variant)

    rows, cols = _matrix_size(data, keys)
    try:
        return HardwareDescription(
            keyboard=keyboard or data.get("keyboard_name") or "unknown",
            layout_variant=variant,
            matrix_rows=rows,
            matrix_cols=cols,
            led_count=led_count,
            keys=keys,
        )
    except ValidationError as e:
        raise GeometryConfigError(f"Invalid keyboard data: {e}", value=variant) from e


__all__ = ["list_layout_variants", "load_qmk_info_json"]
