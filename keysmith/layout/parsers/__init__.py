"""Text format for layouts: Markdown reader and writer."""

from keysmith.layout.models import Layout
from keysmith.layout.parsers.action_parser import (
    ActionSyntaxError,
    normalize_token,
    parse_action,
    parse_layer_ref,
)
from keysmith.layout.parsers.markdown_parser import (
    LayoutParseResult,
    MarkdownLayoutParser,
    create_markdown_parser,
)
from keysmith.layout.parsers.markdown_writer import (
    MarkdownLayoutWriter,
    create_markdown_writer,
)


def parse_layout(text: str) -> LayoutParseResult:
    """Parse a Markdown layout document."""
    return create_markdown_parser().parse(text)


def serialize_layout(layout: Layout) -> str:
    """Render a layout as a Markdown document."""
    return create_markdown_writer().serialize(layout)


__all__ = [
    "ActionSyntaxError",
    "LayoutParseResult",
    "MarkdownLayoutParser",
    "MarkdownLayoutWriter",
    "create_markdown_parser",
    "create_markdown_writer",
    "normalize_token",
    "parse_action",
    "parse_layer_ref",
    "parse_layout",
    "serialize_layout",
]
