"""Serialize ``Layout`` models to the Markdown layout format.

Output is deterministic: the same layout always produces the same text, and
parsing that text yields a layout that serializes identically.
"""

from datetime import UTC, datetime
from typing import Any

import yaml

from keysmith.layout.models import KeyDefinition, Layer, Layout
from keysmith.layout.parsers.markdown_parser import (
    CATEGORIES,
    COMBOS,
    KEY_DESCRIPTIONS,
    LAYER_COLORS,
    SETTINGS,
    TAP_DANCES,
)
from keysmith.layout.parsers.settings_codec import format_settings
from keysmith.layout.parsers.values import format_switch


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Frontmatter keys in output order; extra metadata follows, sorted
_METADATA_ORDER = (
    "name",
    "description",
    "author",
    "created",
    "modified",
    "tags",
    "version",
    "keyboard",
    "layout_variant",
    "keymap_name",
)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def format_cell(key: KeyDefinition) -> str:
    cell = key.action.to_token()
    if key.color is not None:
        cell += f"{{{key.color.to_hex()}}}"
    if key.category_id:
        cell += f"@{key.category_id}"
    return cell


class MarkdownLayoutWriter:
    """Writer for the Markdown layout format."""

    def serialize(self, layout: Layout) -> str:
        """Render a layout document.

        Args:
            layout: Layout to serialize

        Returns:
            Document text ending with a single newline
        """
        lines: list[str] = []
        lines.extend(self._frontmatter(layout))
        lines.append("")
        lines.append(f"# {layout.metadata.name}")
        lines.append("")

        for index, layer in enumerate(layout.layers):
            lines.extend(self._layer(index, layer))

        sections = self._trailing_sections(layout)
        if sections:
            lines.append("---")
            lines.append("")
            lines.extend(sections)

        while lines and lines[-1] == "":
            lines.pop()
        return "\n".join(lines) + "\n"

    def _frontmatter(self, layout: Layout) -> list[str]:
        metadata = layout.metadata
        data: dict[str, Any] = {}
        for key in _METADATA_ORDER:
            value = getattr(metadata, key)
            if value is None:
                continue
            if isinstance(value, datetime):
                value = format_timestamp(value)
            data[key] = value
        for key in sorted(metadata.extra_fields):
            data[key] = metadata.extra_fields[key]

        body = yaml.safe_dump(
            data,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=1000,
        )
        return ["---", *body.rstrip("\n").splitlines(), "---"]

    def _layer(self, index: int, layer: Layer) -> list[str]:
        lines = [f"## Layer {index}: {layer.name}", f"**ID**: {layer.id}"]
        if layer.color is not None:
            lines.append(f"**Color**: {layer.color.to_hex()}")
        if layer.category_id:
            lines.append(f"**Category**: {layer.category_id}")
        if not layer.layer_colors_enabled:
            lines.append(f"**{LAYER_COLORS}**: {format_switch(False)}")
        lines.append("")

        if layer.keys:
            lines.extend(self._table(layer))
            lines.append("")
        return lines

    def _table(self, layer: Layer) -> list[str]:
        columns = layer.column_count
        grid: list[list[str]] = [["" for _ in range(columns)] for _ in range(layer.row_count)]
        for key in layer.keys:
            grid[key.position.row][key.position.col] = format_cell(key)

        lines = [
            "| " + " | ".join(f"C{col}" for col in range(columns)) + " |",
            "|" + "------|" * columns,
        ]
        lines.extend("| " + " | ".join(row) + " |" for row in grid)
        return lines

    def _trailing_sections(self, layout: Layout) -> list[str]:
        lines: list[str] = []

        descriptions = [
            f"- {index}:{key.position.row}:{key.position.col}: {key.annotation}"
            for index, layer in enumerate(layout.layers)
            for key in layer.sorted_keys()
            if key.annotation
        ]
        if descriptions:
            lines.extend([f"## {KEY_DESCRIPTIONS}", *descriptions, ""])

        if layout.categories:
            lines.append(f"## {CATEGORIES}")
            lines.extend(
                f"- {category.id}: {category.name} ({category.color.to_hex()})"
                for category in layout.categories
            )
            lines.append("")

        settings = format_settings(
            layout.lighting, layout.idle_effect, layout.tap_hold, layout.rgb_timeout_ms
        )
        if settings:
            lines.extend([f"## {SETTINGS}", *settings, ""])

        if layout.tap_dances:
            lines.append(f"## {TAP_DANCES}")
            for tap_dance in layout.tap_dances:
                lines.append(f"- **{tap_dance.name}**:")
                lines.append(f"  - Single Tap: {tap_dance.single_tap.to_token()}")
                lines.append(f"  - Double Tap: {tap_dance.double_tap.to_token()}")
                if tap_dance.hold is not None:
                    lines.append(f"  - Hold: {tap_dance.hold.to_token()}")
            lines.append("")

        if layout.combos:
            lines.append(f"## {COMBOS}")
            for combo in layout.combos:
                positions = " + ".join(f"{p.row}:{p.col}" for p in combo.positions)
                lines.append(
                    f"- **{combo.name}**: {positions} -> {combo.action.to_token()}"
                )
            lines.append("")

        return lines


def create_markdown_writer() -> MarkdownLayoutWriter:
    """Create a new MarkdownLayoutWriter instance."""
    return MarkdownLayoutWriter()


__all__ = [
    "MarkdownLayoutWriter",
    "create_markdown_writer",
    "format_cell",
    "format_timestamp",
]
