"""Parse Markdown layout documents into ``Layout`` models.

Document shape::

    ---
    name: My Layout
    keyboard: crkbd/rev1
    layout_variant: LAYOUT_split_3x6_3
    ---

    # My Layout

    ## Layer 0: Base
    **ID**: 9b6f...
    **Color**: #808080

    | C0 | C1 |
    |------|------|
    | KC_A | LT(@1c2d..., KC_SPC){#FF0000}@thumbs |

    ---

    ## Categories
    - thumbs: Thumb Keys (#00FF00)

Structural problems raise ``LayoutParseError`` with the offending line.
Problems the parser can recover from (unknown sections, unknown properties,
a layer without an ID) are returned as warnings.
"""

import re
from dataclasses import dataclass, field
from typing import Any

import yaml
from pydantic import ValidationError

from keysmith.core.errors import LayoutParseError
from keysmith.core.structlog_logger import get_struct_logger
from keysmith.layout.models import (
    Action,
    Category,
    Combo,
    KeyDefinition,
    Layer,
    Layout,
    LayoutMetadata,
    Position,
    RgbColor,
    TapDance,
    new_layer_id,
)
from keysmith.layout.parsers.action_parser import (
    ActionSyntaxError,
    parse_action,
    split_expression,
)
from keysmith.layout.parsers.settings_codec import SettingsReader
from keysmith.layout.parsers.values import parse_switch
from keysmith.models.diagnostics import Diagnostic, Stage, warning
from keysmith.models.results import BaseResult


logger = get_struct_logger(__name__)

LAYER_HEADER = re.compile(r"^##\s+Layer\s+(\d+)\s*:\s*(.+?)\s*$")
SECTION_HEADER = re.compile(r"^##\s+(.+?)\s*$")
TITLE = re.compile(r"^#\s+(.+?)\s*$")
PROPERTY = re.compile(r"^\*\*(.+?)\*\*:\s*(.*?)\s*$")
SEPARATOR_ROW = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?$")
CELL_SUFFIX = re.compile(r"^(?:\{(#[0-9A-Fa-f]{6})\})?(?:@([a-z][a-z0-9-]*))?$")
CATEGORY_ENTRY = re.compile(r"^-\s+([^:\s]+)\s*:\s*(.+?)\s+\((#[0-9A-Fa-f]{6})\)$")
DESCRIPTION_ENTRY = re.compile(r"^-\s+(\d+):(\d+):(\d+):\s*(.*)$")
NAMED_ENTRY = re.compile(r"^-\s+\*\*(.+?)\*\*:\s*(.*)$")
TAP_DANCE_STEP = re.compile(r"^-\s+(Single Tap|Double Tap|Hold)\s*:\s*(.+)$")
COMBO_BODY = re.compile(r"^(.+?)\s*->\s*(.+)$")
GRID_POSITION = re.compile(r"^(\d+):(\d+)$")

CATEGORIES = "Categories"
KEY_DESCRIPTIONS = "Key Descriptions"
SETTINGS = "Settings"
TAP_DANCES = "Tap Dances"
COMBOS = "Combos"
KNOWN_SECTIONS = (CATEGORIES, KEY_DESCRIPTIONS, SETTINGS, TAP_DANCES, COMBOS)
LAYER_COLORS = "Layer Colors"


class LayoutParseResult(BaseResult):
    """Parsed layout plus any non-fatal warnings."""

    layout: Layout


def parse_cell(text: str, line: int) -> tuple[Action, RgbColor | None, str | None] | None:
    """Parse one table cell. Returns None for an empty cell (a gap).

    Raises:
        LayoutParseError: If the cell is not ``ACTION[{#RRGGBB}][@category]``
    """
    text = text.strip()
    if not text:
        return None
    try:
        expression, rest = split_expression(text)
        action = parse_action(expression)
    except ActionSyntaxError as e:
        raise LayoutParseError(f"Unparseable cell: {e}", line=line, value=text) from e

    suffix = CELL_SUFFIX.match(rest.strip())
    if not suffix:
        raise LayoutParseError("Unparseable cell suffix", line=line, value=text)
    color_hex, category_id = suffix.groups()
    color = RgbColor.from_hex(color_hex) if color_hex else None
    return action, color, category_id


def split_table_row(line: str) -> list[str]:
    """Split ``| a | b |`` into ``["a", "b"]`` keeping empty cells."""
    body = line.strip()
    if body.startswith("|"):
        body = body[1:]
    if body.endswith("|"):
        body = body[:-1]
    return [cell.strip() for cell in body.split("|")]


@dataclass
class _LayerDraft:
    index: int
    name: str
    line: int
    id: str | None = None
    id_line: int | None = None
    color: RgbColor | None = None
    category_id: str | None = None
    layer_colors_enabled: bool = True
    keys: list[KeyDefinition] = field(default_factory=list)
    columns: int | None = None
    header_line: int | None = None
    separator_seen: bool = False
    table_closed: bool = False
    row: int = 0


@dataclass
class _TapDanceDraft:
    name: str
    line: int
    steps: dict[str, Action] = field(default_factory=dict)


class MarkdownLayoutParser:
    """Parser for the Markdown layout format."""

    def parse(self, text: str) -> LayoutParseResult:
        """Parse a layout document.

        Args:
            text: Full document text

        Returns:
            LayoutParseResult with the layout and non-fatal warnings

        Raises:
            LayoutParseError: On any structural error
        """
        self._warnings: list[Diagnostic] = []
        self._layers: list[_LayerDraft] = []
        self._categories: list[Category] = []
        self._descriptions: list[tuple[int, int, int, str, int]] = []
        self._tap_dances: list[_TapDanceDraft] = []
        self._combos: list[Combo] = []
        self._settings = SettingsReader()
        self._title: str | None = None

        lines = text.splitlines()
        metadata, start = self._parse_frontmatter(lines)
        self._parse_body(lines, start)

        layers = self._finish_layers()
        if not layers:
            raise LayoutParseError("Layout has no layers")
        self._apply_descriptions(layers)

        if "name" not in metadata:
            if self._title is None:
                raise LayoutParseError("Layout has no name in frontmatter or title")
            metadata["name"] = self._title

        try:
            layout = Layout(
                metadata=LayoutMetadata.model_validate(metadata),
                layers=layers,
                categories=self._categories,
                tap_dances=self._finish_tap_dances(),
                combos=self._combos,
                lighting=self._settings.lighting(),
                idle_effect=self._settings.idle_effect(),
                tap_hold=self._settings.tap_hold(),
                rgb_timeout_ms=self._settings.rgb_timeout_ms(),
            )
        except ValidationError as e:
            raise LayoutParseError(f"Invalid layout: {e}") from e

        warnings = self._warnings + self._settings.warnings
        logger.debug(
            "layout_parsed",
            name=layout.metadata.name,
            layers=len(layout.layers),
            warnings=len(warnings),
        )
        return LayoutParseResult(success=True, layout=layout, warnings=warnings)

    def _warn(self, message: str, line: int, value: str | None = None) -> None:
        self._warnings.append(warning(Stage.PARSE, message, line=line, value=value))

    def _parse_frontmatter(self, lines: list[str]) -> tuple[dict[str, Any], int]:
        first = next((i for i, line in enumerate(lines) if line.strip()), None)
        if first is None:
            raise LayoutParseError("Layout document is empty")
        if lines[first].strip() != "---":
            return {}, first

        for end in range(first + 1, len(lines)):
            if lines[end].strip() == "---":
                break
        else:
            raise LayoutParseError("Unterminated frontmatter", line=first + 1)

        block = "\n".join(lines[first + 1 : end])
        try:
            data = yaml.safe_load(block) or {}
        except yaml.YAMLError as e:
            raise LayoutParseError(f"Invalid frontmatter: {e}", line=first + 1) from e
        if not isinstance(data, dict):
            raise LayoutParseError("Frontmatter must be a mapping", line=first + 1)
        return {str(k): v for k, v in data.items()}, end + 1

    def _parse_body(self, lines: list[str], start: int) -> None:
        section: str | None = None
        layer: _LayerDraft | None = None
        tap_dance: _TapDanceDraft | None = None

        for offset, raw in enumerate(lines[start:]):
            line_no = start + offset + 1
            line = raw.strip()

            if line.startswith("## ") or line == "##":
                if layer is not None:
                    self._close_table(layer)
                layer = None
                tap_dance = None

                header = LAYER_HEADER.match(line)
                if header:
                    layer = self._start_layer(header, line_no)
                    section = "layer"
                    continue
                name_match = SECTION_HEADER.match(line)
                name = name_match.group(1) if name_match else ""
                if name in KNOWN_SECTIONS:
                    section = name
                else:
                    self._warn("Unknown section ignored", line_no, value=name)
                    section = "unknown"
                continue

            if section is None:
                title = TITLE.match(line)
                if title and self._title is None:
                    self._title = title.group(1)
                elif line and line != "---":
                    self._warn("Text before the first section ignored", line_no)
                continue

            if section == "layer":
                if layer is not None:
                    self._parse_layer_line(layer, line, line_no)
            elif section == CATEGORIES:
                self._parse_category(line, line_no)
            elif section == KEY_DESCRIPTIONS:
                self._parse_description(line, line_no)
            elif section == SETTINGS:
                self._parse_setting(line, line_no)
            elif section == TAP_DANCES:
                tap_dance = self._parse_tap_dance_line(tap_dance, line, line_no)
            elif section == COMBOS:
                self._parse_combo(line, line_no)

        if layer is not None:
            self._close_table(layer)

    # Layers

    def _start_layer(self, header: re.Match[str], line_no: int) -> _LayerDraft:
        number = int(header.group(1))
        expected = len(self._layers)
        if number != expected:
            raise LayoutParseError(
                f"Layer number {number} out of sequence, expected {expected}",
                line=line_no,
            )
        draft = _LayerDraft(index=number, name=header.group(2), line=line_no)
        self._layers.append(draft)
        return draft

    def _parse_layer_line(self, layer: _LayerDraft, line: str, line_no: int) -> None:
        if not line or line == "---":
            self._close_table(layer)
            return

        if line.startswith("|"):
            self._parse_table_line(layer, line, line_no)
            return

        prop = PROPERTY.match(line)
        if prop is None:
            self._warn("Unrecognized text in layer ignored", line_no, value=line)
            return

        name, value = prop.groups()
        if name == "ID":
            if not value:
                raise LayoutParseError("Empty layer ID", line=line_no)
            layer.id = value
            layer.id_line = line_no
        elif name == "Color":
            try:
                layer.color = RgbColor.from_hex(value)
            except ValueError as e:
                raise LayoutParseError(
                    "Invalid layer color", line=line_no, value=value
                ) from e
        elif name == "Category":
            layer.category_id = value or None
        elif name == LAYER_COLORS:
            try:
                layer.layer_colors_enabled = parse_switch(value)
            except ValueError as e:
                raise LayoutParseError(
                    f"Invalid {LAYER_COLORS} value", line=line_no, value=value
                ) from e
        else:
            self._warn(f"Unknown layer property {name!r} ignored", line_no)

    def _parse_table_line(self, layer: _LayerDraft, line: str, line_no: int) -> None:
        if layer.table_closed:
            raise LayoutParseError("Layer has more than one table", line=line_no)

        cells = split_table_row(line)
        if layer.columns is None:
            layer.columns = len(cells)
            layer.header_line = line_no
            return

        if not layer.separator_seen:
            if not SEPARATOR_ROW.match(line):
                raise LayoutParseError(
                    "Table header must be followed by a separator row", line=line_no
                )
            layer.separator_seen = True
            return

        if len(cells) > layer.columns:
            raise LayoutParseError(
                f"Row has {len(cells)} cells but the header has {layer.columns}",
                line=line_no,
            )

        for col, cell in enumerate(cells):
            parsed = parse_cell(cell, line_no)
            if parsed is None:
                continue
            action, color, category_id = parsed
            layer.keys.append(
                KeyDefinition(
                    position=Position(row=layer.row, col=col),
                    action=action,
                    color=color,
                    category_id=category_id,
                )
            )
        layer.row += 1

    def _close_table(self, layer: _LayerDraft) -> None:
        if layer.columns is None or layer.table_closed:
            return
        if not layer.separator_seen:
            raise LayoutParseError(
                "Table header must be followed by a separator row",
                line=layer.header_line,
            )
        layer.table_closed = True

    def _finish_layers(self) -> list[Layer]:
        layers: list[Layer] = []
        seen: dict[str, int] = {}
        for draft in self._layers:
            if draft.id is None:
                draft.id = new_layer_id()
                self._warn(
                    f"Layer {draft.index} has no ID; assigned a new one",
                    draft.line,
                    value=draft.id,
                )
            if draft.id in seen:
                raise LayoutParseError(
                    f"Duplicate layer ID (first used by layer {seen[draft.id]})",
                    line=draft.id_line,
                    value=draft.id,
                )
            seen[draft.id] = draft.index
            try:
                layers.append(
                    Layer(
                        id=draft.id,
                        name=draft.name,
                        color=draft.color,
                        category_id=draft.category_id,
                        layer_colors_enabled=draft.layer_colors_enabled,
                        keys=draft.keys,
                    )
                )
            except ValidationError as e:
                raise LayoutParseError(
                    f"Invalid layer: {e}", line=draft.id_line or draft.line
                ) from e
        return layers

    # Trailing sections

    def _parse_category(self, line: str, line_no: int) -> None:
        if not line or line == "---":
            return
        match = CATEGORY_ENTRY.match(line)
        if not match:
            raise LayoutParseError("Malformed category entry", line=line_no, value=line)
        category_id, name, color = match.groups()
        try:
            self._categories.append(Category(id=category_id, name=name, color=color))
        except ValidationError as e:
            raise LayoutParseError(
                f"Invalid category: {e}", line=line_no, value=line
            ) from e

    def _parse_description(self, line: str, line_no: int) -> None:
        if not line or line == "---":
            return
        match = DESCRIPTION_ENTRY.match(line)
        if not match:
            raise LayoutParseError(
                "Malformed key description", line=line_no, value=line
            )
        layer, row, col, text = match.groups()
        self._descriptions.append((int(layer), int(row), int(col), text, line_no))

    def _apply_descriptions(self, layers: list[Layer]) -> None:
        for layer_index, row, col, text, line_no in self._descriptions:
            if layer_index >= len(layers):
                self._warn("Description for a missing layer ignored", line_no)
                continue
            key = layers[layer_index].get_key(Position(row=row, col=col))
            if key is None:
                self._warn("Description for a missing key ignored", line_no)
                continue
            key.annotation = text or None

    def _parse_setting(self, line: str, line_no: int) -> None:
        if not line or line == "---":
            return
        match = PROPERTY.match(line)
        if not match:
            raise LayoutParseError("Malformed setting", line=line_no, value=line)
        self._settings.add(match.group(1), match.group(2), line_no)

    def _parse_tap_dance_line(
        self, current: _TapDanceDraft | None, line: str, line_no: int
    ) -> _TapDanceDraft | None:
        if not line or line == "---":
            return current

        step = TAP_DANCE_STEP.match(line)
        if step:
            if current is None:
                raise LayoutParseError(
                    "Tap dance step outside a tap dance", line=line_no
                )
            label, token = step.groups()
            if label in current.steps:
                raise LayoutParseError(f"Duplicate {label} entry", line=line_no)
            current.steps[label] = self._parse_action(token, line_no)
            return current

        entry = NAMED_ENTRY.match(line)
        if entry and not entry.group(2):
            draft = _TapDanceDraft(name=entry.group(1), line=line_no)
            self._tap_dances.append(draft)
            return draft

        raise LayoutParseError("Malformed tap dance entry", line=line_no, value=line)

    def _finish_tap_dances(self) -> list[TapDance]:
        tap_dances: list[TapDance] = []
        for draft in self._tap_dances:
            for required in ("Single Tap", "Double Tap"):
                if required not in draft.steps:
                    raise LayoutParseError(
                        f"Tap dance {draft.name!r} has no {required} action",
                        line=draft.line,
                    )
            tap_dances.append(
                TapDance(
                    name=draft.name,
                    single_tap=draft.steps["Single Tap"],
                    double_tap=draft.steps["Double Tap"],
                    hold=draft.steps.get("Hold"),
                )
            )
        return tap_dances

    def _parse_combo(self, line: str, line_no: int) -> None:
        if not line or line == "---":
            return
        entry = NAMED_ENTRY.match(line)
        body = COMBO_BODY.match(entry.group(2)) if entry else None
        if entry is None or body is None:
            raise LayoutParseError("Malformed combo entry", line=line_no, value=line)

        positions: list[Position] = []
        for part in body.group(1).split("+"):
            grid = GRID_POSITION.match(part.strip())
            if not grid:
                raise LayoutParseError(
                    "Combo positions must be row:col", line=line_no, value=part.strip()
                )
            positions.append(Position(row=int(grid.group(1)), col=int(grid.group(2))))

        action = self._parse_action(body.group(2), line_no)
        try:
            self._combos.append(
                Combo(name=entry.group(1), positions=positions, action=action)
            )
        except ValidationError as e:
            raise LayoutParseError(f"Invalid combo: {e}", line=line_no) from e

    def _parse_action(self, token: str, line_no: int) -> Action:
        try:
            return parse_action(token)
        except ActionSyntaxError as e:
            raise LayoutParseError(str(e), line=line_no, value=token) from e


def create_markdown_parser() -> MarkdownLayoutParser:
    """Create a new MarkdownLayoutParser instance."""
    return MarkdownLayoutParser()


__all__ = [
    "LayoutParseResult",
    "MarkdownLayoutParser",
    "create_markdown_parser",
    "parse_cell",
    "split_table_row",
]
