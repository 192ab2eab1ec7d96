"""Tests for config.h and rules.mk generation."""

import pytest

from keysmith.adapters import create_template_adapter
from keysmith.firmware import FeatureFlags, create_config_generator, tap_hold_defines
from keysmith.layout.models import (
    IdleEffectSettings,
    LightingSettings,
    RgbMatrixEffect,
    TapHoldPreset,
    TapHoldSettings,
)


@pytest.fixture
def generator():
    return create_config_generator(create_template_adapter())


class TestTapHoldDefines:
    """Test tap/hold define selection."""

    def test_default(self):
        assert tap_hold_defines(TapHoldSettings()) == [("TAPPING_TERM", 200)]

    def test_home_row_mods(self):
        defines = tap_hold_defines(TapHoldSettings.from_preset(TapHoldPreset.HOME_ROW_MODS))
        assert defines == [
            ("TAPPING_TERM", 175),
            ("QUICK_TAP_TERM", 120),
            ("PERMISSIVE_HOLD", None),
            ("FLOW_TAP_TERM", 150),
            ("CHORDAL_HOLD", None),
        ]

    def test_non_default_toggle_count(self):
        defines = tap_hold_defines(TapHoldSettings(tapping_toggle=3, retro_tapping=True))
        assert ("TAPPING_TOGGLE", 3) in defines
        assert ("RETRO_TAPPING", None) in defines


class TestConfigH:
    """Test config.h content."""

    def test_matrix_and_tap_hold(self, generator, sample_layout, sample_geometry):
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags()
        )
        assert "#pragma once" in text
        assert "#    define MATRIX_ROWS 2" in text
        assert "#    define MATRIX_COLS 3" in text
        assert "#define TAPPING_TERM 200" in text
        assert "RGB_MATRIX_LED_COUNT" not in text

    def test_flag_defines_have_no_value(self, generator, sample_layout, sample_geometry):
        sample_layout.tap_hold = TapHoldSettings.from_preset(TapHoldPreset.HOME_ROW_MODS)
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags()
        )
        assert "#define PERMISSIVE_HOLD\n" in text
        assert "// Tap-hold (Home Row Mods)" in text

    def test_led_count_with_lighting(self, generator, sample_layout, sample_geometry):
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags(lighting=True)
        )
        assert "#    define RGB_MATRIX_LED_COUNT 5" in text
        assert "RGB_MATRIX_DEFAULT_ON" not in text

    def test_lighting_switched_off(self, generator, sample_layout, sample_geometry):
        sample_layout.lighting = LightingSettings(enabled=False)
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags(lighting=True)
        )
        assert "#undef RGB_MATRIX_DEFAULT_ON\n#define RGB_MATRIX_DEFAULT_ON false" in text

    def test_lighting_switch_needs_rgb_matrix(
        self, generator, sample_layout, sample_geometry
    ):
        sample_layout.lighting = LightingSettings(enabled=False)
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags()
        )
        assert "RGB_MATRIX_DEFAULT_ON" not in text

    def test_combo_layer(self, generator, sample_layout, sample_geometry):
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags(combos=True)
        )
        assert "#define COMBO_ONLY_FROM_LAYER 0" in text

    def test_idle_effect_defines(self, generator, sample_layout, sample_geometry):
        sample_layout.idle_effect = IdleEffectSettings(
            enabled=True, idle_timeout_ms=90_000, effect_duration_ms=30_000
        )
        sample_layout.rgb_timeout_ms = 60_000
        text = generator.generate_config_h(
            sample_layout,
            sample_geometry.geometry,
            FeatureFlags(idle_effect=True, rgb_timeout=False),
        )
        assert "#define KS_IDLE_TIMEOUT_MS 90000" in text
        assert "#define KS_IDLE_EFFECT_DURATION_MS 30000" in text
        assert "#define KS_IDLE_EFFECT_MODE RGB_MATRIX_BREATHING" in text
        assert "#define ENABLE_RGB_MATRIX_BREATHING" in text
        assert "RGB_MATRIX_TIMEOUT" not in text

    def test_solid_color_needs_no_enable_define(
        self, generator, sample_layout, sample_geometry
    ):
        sample_layout.idle_effect = IdleEffectSettings(
            enabled=True, effect=RgbMatrixEffect.SOLID_COLOR
        )
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags(idle_effect=True)
        )
        assert "ENABLE_RGB_MATRIX" not in text

    def test_legacy_timeout(self, generator, sample_layout, sample_geometry):
        sample_layout.rgb_timeout_ms = 60_000
        text = generator.generate_config_h(
            sample_layout, sample_geometry.geometry, FeatureFlags(rgb_timeout=True)
        )
        assert "#define RGB_MATRIX_TIMEOUT 60000" in text
        assert "KS_IDLE" not in text


class TestRulesMk:
    """Test rules.mk content."""

    def test_features(self, generator, sample_layout):
        text = generator.generate_rules_mk(
            sample_layout, FeatureFlags(tap_dance=True, combos=True, lighting=True)
        )
        assert text.splitlines()[1:] == [
            "TAP_DANCE_ENABLE = yes",
            "COMBO_ENABLE = yes",
            "RGB_MATRIX_ENABLE = yes",
        ]

    def test_no_features(self, generator, sample_layout):
        text = generator.generate_rules_mk(sample_layout, FeatureFlags())
        assert "= yes" not in text

    def test_idle_effect_needs_rgb_matrix(self, generator, sample_layout):
        text = generator.generate_rules_mk(sample_layout, FeatureFlags(idle_effect=True))
        assert "RGB_MATRIX_ENABLE = yes" in text
