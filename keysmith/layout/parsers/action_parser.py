"""Parse action tokens such as ``LT(@<id>, KC_SPC)`` into action models."""

import re

from keysmith.layout.models.actions import (
    NO_ACTION_TOKENS,
    SWITCH_KINDS,
    TRANSPARENT_TOKENS,
    Action,
    ComboTrigger,
    KeyAction,
    LayerModAction,
    LayerRef,
    LayerRefKind,
    LayerSwitchAction,
    LayerTapAction,
    ModTapAction,
    NoAction,
    RawAction,
    TapDanceTrigger,
    TransparentAction,
)


IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
LAYER_TOKEN_PATTERN = re.compile(r"^@(.+)$")

# Functions that wrap a keycode with held modifiers; the result is still a key
MODIFIER_WRAPPERS = frozenset(
    {
        "LCTL", "LSFT", "LALT", "LGUI", "LOPT", "LCMD", "LWIN",
        "RCTL", "RSFT", "RALT", "RGUI", "ROPT", "RCMD", "RWIN",
        "C", "S", "A", "G",
        "LCS", "LCA", "LCG", "LSA", "LSG", "LAG", "LCAG", "LCSG",
        "RCS", "RCA", "RCG", "RSA", "RSG", "RAG", "RCAG",
        "SGUI", "HYPR", "MEH", "OSM", "SH_T",
    }
)  # fmt: skip

_SWITCH_FUNCTIONS = {kind.value: kind for kind in SWITCH_KINDS}


class ActionSyntaxError(ValueError):
    """Token is not a well-formed action expression."""


def split_expression(text: str) -> tuple[str, str]:
    """Split the leading ``NAME`` or ``NAME(...)`` off ``text``.

    Parentheses may nest. Returns the expression and the remaining text.

    Raises:
        ActionSyntaxError: If no identifier starts the text or parentheses
            are unbalanced
    """
    match = IDENTIFIER_PATTERN.match(text)
    if not match:
        raise ActionSyntaxError(f"Expected a keycode, got {text!r}")
    end = match.end()
    if end >= len(text) or text[end] != "(":
        return text[:end], text[end:]

    depth = 0
    for i in range(end, len(text)):
        char = text[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return text[: i + 1], text[i + 1 :]
    raise ActionSyntaxError(f"Unbalanced parentheses in {text!r}")


def split_arguments(inner: str) -> list[str]:
    """Split a call's argument text on top-level commas."""
    args: list[str] = []
    current = ""
    depth = 0
    for char in inner:
        if char == "," and depth == 0:
            args.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    args.append(current.strip())
    if any(not arg for arg in args):
        raise ActionSyntaxError(f"Empty argument in {inner!r}")
    return args


def _split_call(expression: str) -> tuple[str, list[str] | None]:
    paren = expression.find("(")
    if paren == -1:
        return expression, None
    return expression[:paren], split_arguments(expression[paren + 1 : -1])


def normalize_token(text: str) -> str:
    """Canonical spelling of a token: ``F(a,b)`` becomes ``F(a, b)``."""
    text = text.strip()
    try:
        expression, rest = split_expression(text)
    except ActionSyntaxError:
        return text
    if rest.strip() or "(" not in expression:
        return text
    name, args = _split_call(expression)
    if args is None:
        return text
    return f"{name}({', '.join(normalize_token(arg) for arg in args)})"


def parse_layer_ref(text: str) -> LayerRef | None:
    """Parse ``@<token>`` or a legacy ordinal. Returns None if neither."""
    text = text.strip()
    match = LAYER_TOKEN_PATTERN.match(text)
    if match:
        return LayerRef(token=match.group(1))
    if text.isdigit():
        return LayerRef(index=int(text))
    return None


def parse_action(text: str) -> Action:
    """Parse one action token.

    Tokens outside the modeled vocabulary become ``RawAction`` and are kept
    verbatim; only malformed syntax is rejected.

    Raises:
        ActionSyntaxError: If the token is not a well-formed expression
    """
    text = text.strip()
    expression, rest = split_expression(text)
    if rest.strip():
        raise ActionSyntaxError(f"Unexpected text {rest.strip()!r} after {expression!r}")

    name, args = _split_call(expression)
    if args is None:
        if name in TRANSPARENT_TOKENS:
            return TransparentAction(token=name)
        if name in NO_ACTION_TOKENS:
            return NoAction(token=name)
        return KeyAction(code=name)

    return _parse_call(name, args)


def _parse_inner(text: str) -> Action | None:
    try:
        return parse_action(text)
    except ActionSyntaxError:
        return None


def _parse_call(name: str, args: list[str]) -> Action:
    if name in _SWITCH_FUNCTIONS and len(args) == 1:
        layer = parse_layer_ref(args[0])
        if layer is not None:
            return LayerSwitchAction(kind=_SWITCH_FUNCTIONS[name], layer=layer)

    elif name == LayerRefKind.TAP_HOLD.value and len(args) == 2:
        layer = parse_layer_ref(args[0])
        if layer is not None:
            tap = _parse_inner(args[1])
            if tap is not None:
                return LayerTapAction(layer=layer, tap=tap)

    elif name == LayerRefKind.LAYER_MOD.value and len(args) == 2:
        layer = parse_layer_ref(args[0])
        if layer is not None:
            return LayerModAction(layer=layer, mods=normalize_token(args[1]))

    elif name == "MT" and len(args) == 2:
        tap = _parse_inner(args[1])
        if tap is not None:
            return ModTapAction(function="MT", mods=normalize_token(args[0]), tap=tap)

    elif name.endswith("_T") and name not in MODIFIER_WRAPPERS and len(args) == 1:
        tap = _parse_inner(args[0])
        if tap is not None:
            return ModTapAction(function=name, tap=tap)

    elif name == "TD" and len(args) == 1 and IDENTIFIER_PATTERN.fullmatch(args[0]):
        return TapDanceTrigger(name=args[0])

    elif name == "COMBO" and len(args) == 1 and IDENTIFIER_PATTERN.fullmatch(args[0]):
        return ComboTrigger(name=args[0])

    elif name in MODIFIER_WRAPPERS:
        return KeyAction(code=normalize_token(f"{name}({', '.join(args)})"))

    return RawAction(token=normalize_token(f"{name}({', '.join(args)})"))


__all__ = [
    "ActionSyntaxError",
    "MODIFIER_WRAPPERS",
    "normalize_token",
    "parse_action",
    "parse_layer_ref",
    "split_arguments",
    "split_expression",
]
