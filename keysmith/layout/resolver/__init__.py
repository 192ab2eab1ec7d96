"""Keycode resolution: layer references, dual-role keys and reference checks."""

from keysmith.layout.resolver.keycode_resolver import (
    KeycodeResolver,
    create_keycode_resolver,
    layer_define_names,
    resolve_layout,
)
from keysmith.layout.resolver.models import (
    HoldKind,
    LayerReference,
    ResolutionResult,
    ResolvedCombo,
    ResolvedKey,
    ResolvedLayer,
    ResolvedTapDance,
    TapDanceStep,
)
from keysmith.layout.resolver.validation import (
    collect_reference_issues,
    validate_references,
    walk_action,
)


__all__ = [
    "HoldKind",
    "KeycodeResolver",
    "LayerReference",
    "ResolutionResult",
    "ResolvedCombo",
    "ResolvedKey",
    "ResolvedLayer",
    "ResolvedTapDance",
    "TapDanceStep",
    "collect_reference_issues",
    "create_keycode_resolver",
    "layer_define_names",
    "resolve_layout",
    "validate_references",
    "walk_action",
]
