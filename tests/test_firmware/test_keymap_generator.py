"""Tests for keymap.c generation."""

import pytest

from keysmith.adapters import create_template_adapter
from keysmith.firmware import FeatureFlags, create_keymap_generator
from keysmith.firmware.keymap_generator import step_code
from keysmith.layout import create_color_resolver, resolve_layout
from keysmith.layout.models import (
    KeyAction,
    LayerRef,
    LayerRefKind,
    LayerSwitchAction,
    LightingSettings,
    Position,
)
from keysmith.layout.resolver import TapDanceStep


@pytest.fixture
def generator():
    return create_keymap_generator(create_template_adapter())


def _cells(row: str) -> list[str]:
    """Split a padded keymap row, keeping LT(...) arguments together."""
    cells: list[str] = []
    depth = 0
    current = ""
    for char in row:
        if char == "," and depth == 0:
            cells.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    cells.append(current.strip())
    return cells


class TestLayerMatrix:
    """Test arranging keycodes as the wiring matrix."""

    def test_base_layer(self, generator, sample_layout, sample_geometry):
        resolution = resolve_layout(sample_layout)
        layer = generator.generate_layer(resolution.layers[0], sample_geometry)
        assert layer["define"] == "LAYER_BASE"
        assert [_cells(row) for row in layer["rows"]] == [
            ["LT(1, KC_A)", "KC_B", "KC_NO"],
            ["TD(TD_ESC_CAPS)", "KC_D", "KC_NO"],
        ]

    def test_upper_layer(self, generator, sample_layout, sample_geometry):
        resolution = resolve_layout(sample_layout)
        layer = generator.generate_layer(resolution.layers[1], sample_geometry)
        assert [_cells(row) for row in layer["rows"]] == [
            ["KC_1", "KC_TRNS", "KC_NO"],
            ["KC_TRNS", "KC_2", "KC_NO"],
        ]

    def test_missing_keys_are_filled(self, generator, sample_layout, sample_geometry):
        base, nav = sample_layout.layers
        base.keys = [k for k in base.keys if k.position != Position(row=1, col=0)]
        nav.keys = [k for k in nav.keys if k.position != Position(row=1, col=1)]
        resolution = resolve_layout(sample_layout)
        base_rows = generator.generate_layer(resolution.layers[0], sample_geometry)["rows"]
        nav_rows = generator.generate_layer(resolution.layers[1], sample_geometry)["rows"]
        assert _cells(base_rows[1])[0] == "KC_NO"
        assert _cells(nav_rows[1])[1] == "KC_TRNS"

    def test_rows_are_aligned(self, generator, sample_layout, sample_geometry):
        resolution = resolve_layout(sample_layout)
        rows = generator.generate_layer(resolution.layers[0], sample_geometry)["rows"]
        assert rows[0].index("KC_B") == rows[1].index("KC_D")


class TestKeymapSource:
    """Test the rendered keymap.c."""

    def _render(self, generator, layout, geometry, features, lighting_layer=0):
        resolution = resolve_layout(layout)
        return generator.generate_keymap_c(
            resolution,
            geometry,
            create_color_resolver(layout),
            features,
            lighting_layer,
        )

    def test_layer_defines_and_keymaps(self, generator, sample_layout, sample_geometry):
        source = self._render(generator, sample_layout, sample_geometry, FeatureFlags())
        assert "#define LAYER_BASE 0" in source
        assert "#define LAYER_NAV 1" in source
        assert "[LAYER_BASE] = {" in source
        assert "const uint16_t PROGMEM keymaps[][MATRIX_ROWS][MATRIX_COLS]" in source

    def test_two_way_tap_dance(self, generator, sample_layout, sample_geometry):
        source = self._render(generator, sample_layout, sample_geometry, FeatureFlags())
        assert "[TD_ESC_CAPS] = ACTION_TAP_DANCE_DOUBLE(KC_ESC, KC_CAPS)," in source
        assert "td_current_step" not in source

    def test_hold_makes_tap_dance_three_way(
        self, generator, sample_layout, sample_geometry
    ):
        sample_layout.tap_dances[0].hold = KeyAction(code="KC_LCTL")
        source = self._render(generator, sample_layout, sample_geometry, FeatureFlags())
        assert (
            "[TD_ESC_CAPS] = ACTION_TAP_DANCE_FN_ADVANCED(NULL, "
            "td_esc_caps_finished, td_esc_caps_reset)," in source
        )
        assert "void td_esc_caps_finished(tap_dance_state_t *state" in source
        assert "void td_esc_caps_reset(tap_dance_state_t *state" in source
        assert "register_code16(KC_LCTL);" in source
        assert "unregister_code16(KC_ESC);" in source
        assert "ACTION_TAP_DANCE_DOUBLE" not in source

    def test_adding_hold_keeps_tap_dance_id(
        self, generator, sample_layout, sample_geometry
    ):
        two_way = self._render(
            generator, sample_layout, sample_geometry, FeatureFlags()
        )
        sample_layout.tap_dances[0].hold = KeyAction(code="KC_RSFT")
        three_way = self._render(
            generator, sample_layout, sample_geometry, FeatureFlags()
        )
        assert "[TD_ESC_CAPS] = ACTION_TAP_DANCE_DOUBLE(KC_ESC, KC_CAPS)," in two_way
        assert "[TD_ESC_CAPS] = ACTION_TAP_DANCE_FN_ADVANCED(" in three_way
        assert "TD(TD_ESC_CAPS)" in two_way
        assert "TD(TD_ESC_CAPS)" in three_way
        assert "case TD_STEP_HOLD:\n            register_code16(KC_RSFT);" in three_way

    def test_two_way_tap_dance_with_layer_step(
        self, generator, sample_layout, sample_geometry
    ):
        sample_layout.tap_dances[0].double_tap = LayerSwitchAction(
            kind=LayerRefKind.TOGGLE, layer=LayerRef(token="nav")
        )
        source = self._render(generator, sample_layout, sample_geometry, FeatureFlags())
        assert (
            "[TD_ESC_CAPS] = ACTION_TAP_DANCE_FN_ADVANCED(NULL, "
            "td_esc_caps_finished, td_esc_caps_reset)," in source
        )
        assert "ACTION_TAP_DANCE_DOUBLE" not in source
        assert "layer_invert(1);" in source
        assert "case TD_STEP_HOLD:" not in source
        assert (
            "if (td_esc_caps_step == TD_STEP_HOLD) {\n"
            "        td_esc_caps_step = TD_STEP_SINGLE_TAP;" in source
        )

    def test_combos(self, generator, sample_layout, sample_geometry):
        source = self._render(generator, sample_layout, sample_geometry, FeatureFlags())
        assert (
            "const uint16_t PROGMEM combo_bd_enter[] = { KC_B, KC_D, COMBO_END };"
            in source
        )
        assert "COMBO(combo_bd_enter, KC_ENT)," in source

    def test_lighting_array(self, generator, sample_layout, sample_geometry):
        source = self._render(
            generator, sample_layout, sample_geometry, FeatureFlags(lighting=True)
        )
        assert "static const uint8_t PROGMEM ks_led_colors[5][3] = {" in source
        assert "{ 0x80, 0x80, 0x80 }, // LED 0: matrix 0,0" in source
        assert "{ 0x00, 0xFF, 0x00 }, // LED 1: matrix 0,1" in source
        assert "{ 0xFF, 0x00, 0x00 }, // LED 2: matrix 1,1" in source
        assert "{ 0x00, 0x00, 0x00 }, // LED 4: no key" in source
        assert "rgb_matrix_indicators_advanced_user" in source

    def test_lighting_array_applies_brightness(
        self, generator, sample_layout, sample_geometry
    ):
        sample_layout.lighting = LightingSettings(brightness=50, uncolored_brightness=0)
        source = self._render(
            generator, sample_layout, sample_geometry, FeatureFlags(lighting=True)
        )
        assert "{ 0x00, 0x00, 0x00 }, // LED 0: matrix 0,0" in source
        assert "{ 0x00, 0x7F, 0x00 }, // LED 1: matrix 0,1" in source
        assert "{ 0x7F, 0x00, 0x00 }, // LED 2: matrix 1,1" in source

    def test_lighting_layer(self, generator, sample_layout, sample_geometry):
        source = self._render(
            generator,
            sample_layout,
            sample_geometry,
            FeatureFlags(lighting=True),
            lighting_layer=1,
        )
        assert "// Colors of layer 1 (Nav), one entry per LED" in source
        assert "{ 0x00, 0x00, 0xFF }, // LED 0: matrix 0,0" in source

    def test_no_lighting_without_flag(self, generator, sample_layout, sample_geometry):
        source = self._render(generator, sample_layout, sample_geometry, FeatureFlags())
        assert "ks_led_colors" not in source
        assert "matrix_scan_user" not in source

    def test_idle_effect(self, generator, sample_layout, sample_geometry):
        source = self._render(
            generator,
            sample_layout,
            sample_geometry,
            FeatureFlags(lighting=True, idle_effect=True),
        )
        assert "KS_IDLE_TIMEOUT_MS" in source
        assert "rgb_matrix_mode_noeeprom(KS_IDLE_EFFECT_MODE);" in source
        assert "if (ks_idle_state != IDLE_STATE_ACTIVE) {\n        return false;" in source

    def test_idle_effect_without_duration_turns_off(
        self, generator, sample_layout, sample_geometry
    ):
        sample_layout.idle_effect = sample_layout.idle_effect.model_copy(
            update={"enabled": True, "effect_duration_ms": 0}
        )
        source = self._render(
            generator, sample_layout, sample_geometry, FeatureFlags(idle_effect=True)
        )
        assert "rgb_matrix_mode_noeeprom(KS_IDLE_EFFECT_MODE);" not in source
        assert "rgb_matrix_disable_noeeprom();" in source


class TestStepCode:
    """Test C statements for tap dance steps."""

    def test_keycode(self):
        assert step_code(TapDanceStep(keycode="KC_A")) == (
            "register_code16(KC_A);",
            "unregister_code16(KC_A);",
        )

    @pytest.mark.parametrize(
        ("kind", "press", "release"),
        [
            (LayerRefKind.MOMENTARY, "layer_on(2);", "layer_off(2);"),
            (LayerRefKind.TAP_TOGGLE, "layer_on(2);", "layer_off(2);"),
            (LayerRefKind.TOGGLE, "layer_invert(2);", None),
            (LayerRefKind.SWITCH_TO, "layer_move(2);", None),
            (
                LayerRefKind.ONE_SHOT,
                "set_oneshot_layer(2, ONESHOT_START);",
                "clear_oneshot_layer_state(ONESHOT_PRESSED);",
            ),
            (LayerRefKind.DEFAULT_SET, "default_layer_set((layer_state_t)1 << 2);", None),
        ],
    )
    def test_layer_steps(self, kind, press, release):
        step = TapDanceStep(keycode="MO(2)", layer=2, layer_kind=kind)
        assert step_code(step) == (press, release)
