"""Known QMK keycodes and close-match suggestions for unknown ones.

The vocabulary covers basic, shifted, navigation, function, numpad, media,
mouse, lighting and system keycodes together with their common aliases.
Keycodes wrapped in modifier functions (``LCTL(KC_A)``, ``OSM(MOD_LSFT)``)
are known when every wrapped keycode or modifier is.
"""

import difflib

from keysmith.layout.parsers.action_parser import (
    MODIFIER_WRAPPERS,
    ActionSyntaxError,
    split_arguments,
    split_expression,
)


_LETTERS = [f"KC_{c}" for c in "ABCDEFGHIJKLMNOPQRSTUVWXYZ"]
_DIGITS = [f"KC_{d}" for d in "1234567890"]
_FUNCTION_KEYS = [f"KC_F{n}" for n in range(1, 25)]

_BASIC = [
    "KC_ENTER", "KC_ENT", "KC_ESCAPE", "KC_ESC", "KC_BACKSPACE", "KC_BSPC",
    "KC_TAB", "KC_SPACE", "KC_SPC", "KC_MINUS", "KC_MINS", "KC_EQUAL", "KC_EQL",
    "KC_LEFT_BRACKET", "KC_LBRC", "KC_RIGHT_BRACKET", "KC_RBRC",
    "KC_BACKSLASH", "KC_BSLS", "KC_NONUS_HASH", "KC_NUHS", "KC_SEMICOLON",
    "KC_SCLN", "KC_QUOTE", "KC_QUOT", "KC_GRAVE", "KC_GRV", "KC_COMMA",
    "KC_COMM", "KC_DOT", "KC_SLASH", "KC_SLSH", "KC_CAPS_LOCK", "KC_CAPS",
    "KC_CAPS_WORD", "KC_NONUS_BACKSLASH", "KC_NUBS", "KC_APPLICATION", "KC_APP",
]

_SHIFTED = [
    "KC_TILDE", "KC_TILD", "KC_EXCLAIM", "KC_EXLM", "KC_AT", "KC_HASH",
    "KC_DOLLAR", "KC_DLR", "KC_PERCENT", "KC_PERC", "KC_CIRCUMFLEX", "KC_CIRC",
    "KC_AMPERSAND", "KC_AMPR", "KC_ASTERISK", "KC_ASTR", "KC_LEFT_PAREN",
    "KC_LPRN", "KC_RIGHT_PAREN", "KC_RPRN", "KC_UNDERSCORE", "KC_UNDS",
    "KC_PLUS", "KC_LEFT_CURLY_BRACE", "KC_LCBR", "KC_RIGHT_CURLY_BRACE",
    "KC_RCBR", "KC_PIPE", "KC_COLON", "KC_COLN", "KC_DOUBLE_QUOTE", "KC_DQUO",
    "KC_DQT", "KC_LEFT_ANGLE_BRACKET", "KC_LABK", "KC_LT",
    "KC_RIGHT_ANGLE_BRACKET", "KC_RABK", "KC_GT", "KC_QUESTION", "KC_QUES",
]

_NAVIGATION = [
    "KC_PRINT_SCREEN", "KC_PSCR", "KC_SCROLL_LOCK", "KC_SCRL", "KC_PAUSE",
    "KC_PAUS", "KC_BRK", "KC_INSERT", "KC_INS", "KC_HOME", "KC_PAGE_UP",
    "KC_PGUP", "KC_DELETE", "KC_DEL", "KC_END", "KC_PAGE_DOWN", "KC_PGDN",
    "KC_RIGHT", "KC_RGHT", "KC_LEFT", "KC_DOWN", "KC_UP",
]

_NUMPAD = [
    "KC_NUM_LOCK", "KC_NUM", "KC_KP_SLASH", "KC_PSLS", "KC_KP_ASTERISK",
    "KC_PAST", "KC_KP_MINUS", "KC_PMNS", "KC_KP_PLUS", "KC_PPLS", "KC_KP_ENTER",
    "KC_PENT", "KC_KP_DOT", "KC_PDOT", "KC_KP_EQUAL", "KC_PEQL", "KC_KP_COMMA",
    "KC_PCMM",
    *[f"KC_KP_{d}" for d in "1234567890"],
    *[f"KC_P{d}" for d in "1234567890"],
]

_MODIFIERS = [
    "KC_LEFT_CTRL", "KC_LCTL", "KC_LEFT_SHIFT", "KC_LSFT", "KC_LEFT_ALT",
    "KC_LALT", "KC_LOPT", "KC_LEFT_GUI", "KC_LGUI", "KC_LCMD", "KC_LWIN",
    "KC_RIGHT_CTRL", "KC_RCTL", "KC_RIGHT_SHIFT", "KC_RSFT", "KC_RIGHT_ALT",
    "KC_RALT", "KC_ROPT", "KC_ALGR", "KC_RIGHT_GUI", "KC_RGUI", "KC_RCMD",
    "KC_RWIN", "KC_HYPR", "KC_MEH",
]

_MEDIA = [
    "KC_AUDIO_MUTE", "KC_MUTE", "KC_AUDIO_VOL_UP", "KC_VOLU",
    "KC_AUDIO_VOL_DOWN", "KC_VOLD", "KC_MEDIA_NEXT_TRACK", "KC_MNXT",
    "KC_MEDIA_PREV_TRACK", "KC_MPRV", "KC_MEDIA_STOP", "KC_MSTP",
    "KC_MEDIA_PLAY_PAUSE", "KC_MPLY", "KC_MEDIA_SELECT", "KC_MSEL",
    "KC_MEDIA_EJECT", "KC_EJCT", "KC_MEDIA_FAST_FORWARD", "KC_MFFD",
    "KC_MEDIA_REWIND", "KC_MRWD", "KC_BRIGHTNESS_UP", "KC_BRIU",
    "KC_BRIGHTNESS_DOWN", "KC_BRID", "KC_MAIL", "KC_CALCULATOR", "KC_CALC",
    "KC_MY_COMPUTER", "KC_MYCM", "KC_WWW_SEARCH", "KC_WSCH", "KC_WWW_HOME",
    "KC_WHOM", "KC_WWW_BACK", "KC_WBAK", "KC_WWW_FORWARD", "KC_WFWD",
    "KC_WWW_STOP", "KC_WSTP", "KC_WWW_REFRESH", "KC_WREF", "KC_WWW_FAVORITES",
    "KC_WFAV", "KC_SYSTEM_POWER", "KC_PWR", "KC_SYSTEM_SLEEP", "KC_SLEP",
    "KC_SYSTEM_WAKE", "KC_WAKE", "KC_KB_MUTE", "KC_KB_VOLUME_UP",
    "KC_KB_VOLUME_DOWN",
]

_MOUSE = [
    "MS_UP", "MS_DOWN", "MS_LEFT", "MS_RGHT", "MS_WHLU", "MS_WHLD", "MS_WHLL",
    "MS_WHLR", "MS_ACL0", "MS_ACL1", "MS_ACL2",
    *[f"MS_BTN{n}" for n in range(1, 9)],
    "KC_MS_UP", "KC_MS_U", "KC_MS_DOWN", "KC_MS_D", "KC_MS_LEFT", "KC_MS_L",
    "KC_MS_RIGHT", "KC_MS_R", "KC_MS_WH_UP", "KC_WH_U", "KC_MS_WH_DOWN",
    "KC_WH_D", "KC_MS_WH_LEFT", "KC_WH_L", "KC_MS_WH_RIGHT", "KC_WH_R",
    "KC_MS_ACCEL0", "KC_ACL0", "KC_MS_ACCEL1", "KC_ACL1", "KC_MS_ACCEL2",
    "KC_ACL2",
    *[f"KC_MS_BTN{n}" for n in range(1, 9)],
    *[f"KC_BTN{n}" for n in range(1, 9)],
]

_LIGHTING = [
    "RM_ON", "RM_OFF", "RM_TOGG", "RM_NEXT", "RM_PREV", "RM_HUEU", "RM_HUED",
    "RM_SATU", "RM_SATD", "RM_VALU", "RM_VALD", "RM_SPDU", "RM_SPDD",
    "RGB_TOG", "RGB_MOD", "RGB_RMOD", "RGB_HUI", "RGB_HUD", "RGB_SAI",
    "RGB_SAD", "RGB_VAI", "RGB_VAD", "RGB_SPI", "RGB_SPD", "RGB_M_P",
    "RGB_M_B", "RGB_M_R", "RGB_M_SW", "RGB_M_SN", "RGB_M_K", "RGB_M_X",
    "RGB_M_G", "RGB_M_T", "UG_TOGG", "UG_NEXT", "UG_PREV", "UG_HUEU",
    "UG_HUED", "UG_SATU", "UG_SATD", "UG_VALU", "UG_VALD", "UG_SPDU",
    "UG_SPDD", "BL_TOGG", "BL_STEP", "BL_ON", "BL_OFF", "BL_UP", "BL_DOWN",
    "BL_BRTG",
]

_SYSTEM = [
    "QK_BOOT", "QK_BOOTLOADER", "QK_RBT", "QK_REBOOT", "QK_MAKE",
    "QK_CLEAR_EEPROM", "EE_CLR", "QK_DEBUG_TOGGLE", "DB_TOGG", "QK_LOCK",
    "QK_CAPS_WORD_TOGGLE", "CW_TOGG", "QK_LEAD", "QK_LEADER", "QK_REP",
    "QK_REPEAT_KEY", "QK_AREP", "QK_ALT_REPEAT_KEY", "QK_GESC", "QK_GRAVE_ESCAPE",
    "QK_SPACE_CADET_LEFT_SHIFT_PARENTHESIS_OPEN", "SC_LSPO", "SC_RSPC",
    "SC_LCPO", "SC_RCPC", "SC_LAPO", "SC_RAPC", "SC_SENT", "KC_LSPO",
    "KC_RSPC", "AS_TOGG", "AS_ON", "AS_OFF", "AS_UP", "AS_DOWN", "AS_RPT",
    "CM_TOGG", "CM_ON", "CM_OFF", "DT_PRNT", "DT_UP", "DT_DOWN", "NK_TOGG",
    "NK_ON", "NK_OFF", "CG_TOGG", "CG_SWAP", "CG_NORM", "AG_TOGG", "AG_SWAP",
    "AG_NORM", "OS_TOGG", "OS_ON", "OS_OFF", "AU_TOGG", "AU_ON", "AU_OFF",
    "MU_TOGG", "MU_NEXT", "CK_TOGG", "SH_TOGG", "SH_TT", "SH_MON", "SH_MOFF",
    "SH_OS", "KC_LNG1", "KC_LNG2", "KC_INT1", "KC_INT2", "KC_INT3", "KC_INT4",
    "KC_INT5", "KC_EXECUTE", "KC_EXEC", "KC_HELP", "KC_MENU", "KC_SELECT",
    "KC_SLCT", "KC_STOP", "KC_AGAIN", "KC_AGIN", "KC_UNDO", "KC_CUT",
    "KC_COPY", "KC_PASTE", "KC_PSTE", "KC_FIND", "KC_NO", "KC_TRNS",
    "KC_TRANSPARENT", "XXXXXXX", "_______",
]

# Modifier bit masks accepted by OSM() and MT()
MODIFIER_MASKS = frozenset(
    {
        "MOD_LCTL", "MOD_LSFT", "MOD_LALT", "MOD_LGUI",
        "MOD_RCTL", "MOD_RSFT", "MOD_RALT", "MOD_RGUI",
        "MOD_HYPR", "MOD_MEH",
    }
)  # fmt: skip

KNOWN_KEYCODES = frozenset(
    [
        *_LETTERS,
        *_DIGITS,
        *_FUNCTION_KEYS,
        *_BASIC,
        *_SHIFTED,
        *_NAVIGATION,
        *_NUMPAD,
        *_MODIFIERS,
        *_MEDIA,
        *_MOUSE,
        *_LIGHTING,
        *_SYSTEM,
    ]
)


def is_modifier_mask(text: str) -> bool:
    """True for ``MOD_LCTL`` or an OR of masks such as ``MOD_LCTL | MOD_LSFT``."""
    parts = [part.strip() for part in text.split("|")]
    return all(part in MODIFIER_MASKS for part in parts)


def is_known_keycode(code: str) -> bool:
    """True when ``code`` is a known keycode or a modifier wrapper around one."""
    code = code.strip()
    if code in KNOWN_KEYCODES:
        return True
    try:
        expression, rest = split_expression(code)
    except ActionSyntaxError:
        return False
    paren = expression.find("(")
    if rest.strip() or paren == -1:
        return False

    name = expression[:paren]
    if name not in MODIFIER_WRAPPERS:
        return False
    args = split_arguments(expression[paren + 1 : -1])
    if name == "OSM":
        return len(args) == 1 and is_modifier_mask(args[0])
    return len(args) == 1 and is_known_keycode(args[0])


def suggest_keycodes(code: str, limit: int = 3) -> list[str]:
    """Known keycodes spelled most like ``code``, best match first."""
    query = code.strip().upper()
    if not query.startswith("KC_") and not any(
        query.startswith(prefix) for prefix in ("QK_", "RGB_", "RM_", "MS_")
    ):
        candidates = difflib.get_close_matches(
            "KC_" + query, KNOWN_KEYCODES, n=limit, cutoff=0.6
        )
        if candidates:
            return candidates
    return difflib.get_close_matches(query, KNOWN_KEYCODES, n=limit, cutoff=0.6)


__all__ = [
    "KNOWN_KEYCODES",
    "MODIFIER_MASKS",
    "is_known_keycode",
    "is_modifier_mask",
    "suggest_keycodes",
]
