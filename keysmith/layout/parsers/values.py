"""Human-readable setting values: durations, switches and counts."""

import re


_DURATION_PATTERN = re.compile(
    r"^(\d+)\s*(ms|milliseconds?|s|secs?|seconds?|m|mins?|minutes?)?$", re.IGNORECASE
)
_UNIT_MS = {"ms": 1, "s": 1_000, "m": 60_000}
_DISABLED_WORDS = frozenset({"disabled", "off", "none", "never"})
_TRUE_WORDS = frozenset({"on", "yes", "true", "enabled"})
_FALSE_WORDS = frozenset({"off", "no", "false", "disabled"})


def parse_duration(text: str) -> int:
    """Parse ``"5 min"``, ``"30 sec"``, ``"200ms"`` or a bare millisecond count.

    ``Disabled`` and ``Off`` read as zero.

    Raises:
        ValueError: If the text is not a duration
    """
    value = text.strip()
    if value.lower() in _DISABLED_WORDS:
        return 0
    match = _DURATION_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {text!r}")
    amount = int(match.group(1))
    unit = (match.group(2) or "ms").lower()
    if unit.startswith("ms") or unit.startswith("milli"):
        return amount
    return amount * _UNIT_MS[unit[0]]


def format_duration(ms: int) -> str:
    """Shortest exact form: whole minutes, whole seconds, else milliseconds."""
    if ms > 0 and ms % 60_000 == 0:
        return f"{ms // 60_000} min"
    if ms > 0 and ms % 1_000 == 0:
        return f"{ms // 1_000} sec"
    return f"{ms}ms"


def parse_optional_duration(text: str, unset_word: str) -> int | None:
    """Like ``parse_duration`` but ``unset_word`` (e.g. ``Auto``) reads as None."""
    if text.strip().lower() == unset_word.lower():
        return None
    return parse_duration(text)


def parse_switch(text: str) -> bool:
    """Parse ``On``/``Off`` style booleans.

    Raises:
        ValueError: If the text is not a recognized switch value
    """
    value = text.strip().lower()
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise ValueError(f"Expected On or Off, got {text!r}")


def format_switch(value: bool) -> str:
    return "On" if value else "Off"


def parse_percent(text: str) -> int:
    """Parse ``"75%"`` or ``"75"``.

    Raises:
        ValueError: If the text is not a whole percentage
    """
    match = re.match(r"^(\d+)\s*%?$", text.strip())
    if not match:
        raise ValueError(f"Invalid percentage: {text!r}")
    return int(match.group(1))


def parse_tap_count(text: str) -> int:
    """Parse ``"5 taps"`` or ``"5"``."""
    match = re.match(r"^(\d+)(?:\s*taps?)?$", text.strip(), re.IGNORECASE)
    if not match:
        raise ValueError(f"Invalid tap count: {text!r}")
    return int(match.group(1))


__all__ = [
    "format_duration",
    "format_switch",
    "parse_duration",
    "parse_optional_duration",
    "parse_percent",
    "parse_switch",
    "parse_tap_count",
]
