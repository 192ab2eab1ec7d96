"""Tests for action token parsing."""

import pytest

from keysmith.layout.models import (
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
from keysmith.layout.parsers import (
    ActionSyntaxError,
    normalize_token,
    parse_action,
    parse_layer_ref,
)
from keysmith.layout.parsers.action_parser import split_arguments, split_expression


class TestSimpleTokens:
    """Test tokens without arguments."""

    @pytest.mark.parametrize("token", ["KC_TRNS", "KC_TRANSPARENT", "_______"])
    def test_transparent_spellings(self, token):
        """Test every transparent spelling is kept as written."""
        action = parse_action(token)
        assert isinstance(action, TransparentAction)
        assert action.to_token() == token

    @pytest.mark.parametrize("token", ["KC_NO", "XXXXXXX"])
    def test_no_action_spellings(self, token):
        action = parse_action(token)
        assert isinstance(action, NoAction)
        assert action.to_token() == token

    def test_plain_keycode(self):
        action = parse_action("  KC_A ")
        assert action == KeyAction(code="KC_A")

    def test_modifier_wrapped_key_is_a_key(self):
        """Test modifier wrappers stay plain keys with normalized spacing."""
        action = parse_action("LCTL(LSFT(KC_A))")
        assert isinstance(action, KeyAction)
        assert action.code == "LCTL(LSFT(KC_A))"

    def test_modifier_wrapper_arguments_are_normalized(self):
        action = parse_action("LCA(KC_DEL)")
        assert isinstance(action, KeyAction)
        assert action.to_token() == "LCA(KC_DEL)"


class TestLayerActions:
    """Test layer-targeting actions."""

    @pytest.mark.parametrize(
        "function,kind",
        [
            ("MO", LayerRefKind.MOMENTARY),
            ("TG", LayerRefKind.TOGGLE),
            ("TO", LayerRefKind.SWITCH_TO),
            ("TT", LayerRefKind.TAP_TOGGLE),
            ("OSL", LayerRefKind.ONE_SHOT),
            ("DF", LayerRefKind.DEFAULT_SET),
        ],
    )
    def test_switch_functions(self, function, kind):
        action = parse_action(f"{function}(@nav)")
        assert isinstance(action, LayerSwitchAction)
        assert action.kind is kind
        assert action.layer == LayerRef(token="nav")
        assert action.to_token() == f"{function}(@nav)"

    def test_layer_tap(self):
        action = parse_action("LT(@sym,KC_SPC)")
        assert isinstance(action, LayerTapAction)
        assert action.layer.token == "sym"
        assert action.tap == KeyAction(code="KC_SPC")
        assert action.to_token() == "LT(@sym, KC_SPC)"

    def test_layer_mod(self):
        action = parse_action("LM(@nav, MOD_LCTL|MOD_LSFT)")
        assert isinstance(action, LayerModAction)
        assert action.mods == "MOD_LCTL|MOD_LSFT"
        assert action.layer_refs() == [(LayerRefKind.LAYER_MOD, LayerRef(token="nav"))]

    def test_legacy_index_reference(self):
        action = parse_action("MO(2)")
        assert isinstance(action, LayerSwitchAction)
        assert action.layer.is_legacy
        assert action.layer.index == 2
        assert action.to_token() == "MO(2)"

    def test_layer_tap_refs_include_nested_tap(self):
        """Test a layer-tap reports its own reference before nested ones."""
        action = parse_action("LT(@a, KC_A)")
        assert action.layer_refs() == [(LayerRefKind.TAP_HOLD, LayerRef(token="a"))]

    def test_switch_with_non_layer_argument_is_raw(self):
        action = parse_action("MO(FOO)")
        assert isinstance(action, RawAction)
        assert action.to_token() == "MO(FOO)"


class TestDualRoleAndTriggers:
    """Test mod-taps and tap dance / combo triggers."""

    def test_mod_tap(self):
        action = parse_action("MT(MOD_LCTL, KC_A)")
        assert isinstance(action, ModTapAction)
        assert action.hold_modifier == "MOD_LCTL"
        assert action.to_token() == "MT(MOD_LCTL, KC_A)"

    def test_mod_tap_shorthand(self):
        action = parse_action("LSFT_T(KC_F)")
        assert isinstance(action, ModTapAction)
        assert action.function == "LSFT_T"
        assert action.hold_modifier == "MOD_LSFT"
        assert action.tap == KeyAction(code="KC_F")

    def test_tap_dance_trigger(self):
        assert parse_action("TD(esc_caps)") == TapDanceTrigger(name="esc_caps")

    def test_combo_trigger(self):
        assert parse_action("COMBO(jk_esc)") == ComboTrigger(name="jk_esc")

    def test_unknown_function_is_kept_verbatim(self):
        action = parse_action("QK_BOOT_SOMETHING(1,2)")
        assert isinstance(action, RawAction)
        assert action.to_token() == "QK_BOOT_SOMETHING(1, 2)"


class TestSyntaxErrors:
    """Test malformed tokens."""

    @pytest.mark.parametrize(
        "token", ["", "(KC_A)", "LT(@nav, KC_A", "KC_A KC_B", "MO(@nav,)"]
    )
    def test_malformed_tokens_raise(self, token):
        with pytest.raises(ActionSyntaxError):
            parse_action(token)


class TestHelpers:
    """Test lower level helpers."""

    def test_split_expression_returns_rest(self):
        assert split_expression("LT(@a, KC_B){#FF0000}@cat") == (
            "LT(@a, KC_B)",
            "{#FF0000}@cat",
        )

    def test_split_arguments_respects_nesting(self):
        assert split_arguments("@a, LCTL(KC_A, KC_B)") == ["@a", "LCTL(KC_A, KC_B)"]

    def test_normalize_token(self):
        assert normalize_token("F(a,G(b,c))") == "F(a, G(b, c))"

    @pytest.mark.parametrize("text", ["KC_A", "F(a", "F(a) tail", " KC_B "])
    def test_normalize_token_keeps_non_calls(self, text):
        assert normalize_token(text) == text.strip()

    def test_parse_layer_ref(self):
        assert parse_layer_ref("@x") == LayerRef(token="x")
        assert parse_layer_ref("3") == LayerRef(index=3)
        assert parse_layer_ref("nav") is None
