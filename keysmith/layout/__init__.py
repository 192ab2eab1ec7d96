"""Layout documents: models, Markdown format, reference and color resolution."""

from keysmith.layout.colors import ColorResolver, ColorSource, create_color_resolver
from keysmith.layout.models import Layout
from keysmith.layout.parsers import parse_layout, serialize_layout
from keysmith.layout.resolver import (
    KeycodeResolver,
    ResolutionResult,
    create_keycode_resolver,
    resolve_layout,
)
from keysmith.layout.service import LayoutService, create_layout_service


__all__ = [
    "ColorResolver",
    "ColorSource",
    "KeycodeResolver",
    "Layout",
    "LayoutService",
    "ResolutionResult",
    "create_color_resolver",
    "create_keycode_resolver",
    "create_layout_service",
    "parse_layout",
    "resolve_layout",
    "serialize_layout",
]
