"""Jinja2 templates for generated QMK sources."""

KEYMAP_C_TEMPLATE = """\
// Generated by keysmith from "{{ layout_name }}"
// Keyboard: {{ keyboard }}  Layout: {{ layout_variant }}
// Do not edit by hand; regenerate from the layout document.

#include QMK_KEYBOARD_H

{% for layer in layers %}
#define {{ layer.define }} {{ layer.index }}
{% endfor %}
{% if tap_dances %}

enum tap_dance_ids {
{% for td in tap_dances %}
    {{ td.firmware_id }},
{% endfor %}
};
{% endif %}
{% if function_tap_dances %}

typedef enum {
    TD_STEP_NONE,
    TD_STEP_SINGLE_TAP,
    TD_STEP_DOUBLE_TAP,
    TD_STEP_HOLD,
} td_step_t;

static td_step_t td_current_step(tap_dance_state_t *state) {
    if (state->count == 1) {
        if (state->interrupted || !state->pressed) {
            return TD_STEP_SINGLE_TAP;
        }
        return TD_STEP_HOLD;
    }
    if (state->count == 2) {
        return TD_STEP_DOUBLE_TAP;
    }
    return TD_STEP_NONE;
}
{% for td in function_tap_dances %}

static td_step_t {{ td.function }}_step = TD_STEP_NONE;

void {{ td.function }}_finished(tap_dance_state_t *state, void *user_data) {
    {{ td.function }}_step = td_current_step(state);
{% if not td.has_hold %}
    if ({{ td.function }}_step == TD_STEP_HOLD) {
        {{ td.function }}_step = TD_STEP_SINGLE_TAP;
    }
{% endif %}
    switch ({{ td.function }}_step) {
{% for step in td.steps %}
        case {{ step.label }}:
            {{ step.press }}
            break;
{% endfor %}
        default:
            break;
    }
}

void {{ td.function }}_reset(tap_dance_state_t *state, void *user_data) {
    switch ({{ td.function }}_step) {
{% for step in td.steps if step.release %}
        case {{ step.label }}:
            {{ step.release }}
            break;
{% endfor %}
        default:
            break;
    }
    {{ td.function }}_step = TD_STEP_NONE;
}
{% endfor %}
{% endif %}
{% if tap_dances %}

tap_dance_action_t tap_dance_actions[] = {
{% for td in tap_dances %}
    [{{ td.firmware_id }}] = {{ td.entry }},
{% endfor %}
};
{% endif %}

const uint16_t PROGMEM keymaps[][MATRIX_ROWS][MATRIX_COLS] = {
{% for layer in layers %}
    // Layer {{ layer.index }}: {{ layer.name }}
    [{{ layer.define }}] = {
{% for row in layer.rows %}
        { {{ row }} }{{ "," if not loop.last else "" }}
{% endfor %}
    }{{ "," if not loop.last else "" }}
{% endfor %}
};
{% if combos %}

{% for combo in combos %}
const uint16_t PROGMEM {{ combo.variable }}[] = { {{ combo.triggers }}, COMBO_END };
{% endfor %}

combo_t key_combos[] = {
{% for combo in combos %}
    COMBO({{ combo.variable }}, {{ combo.keycode }}),
{% endfor %}
};
{% endif %}
{% if idle %}

typedef enum {
    IDLE_STATE_ACTIVE,
    IDLE_STATE_IDLE_EFFECT,
    IDLE_STATE_OFF,
} idle_state_t;

static idle_state_t ks_idle_state = IDLE_STATE_ACTIVE;
static uint32_t ks_idle_timer = 0;
static uint8_t ks_active_mode = 0;

void keyboard_post_init_user(void) {
    ks_active_mode = rgb_matrix_get_mode();
    ks_idle_timer = timer_read32();
}

void matrix_scan_user(void) {
    switch (ks_idle_state) {
        case IDLE_STATE_ACTIVE:
            if (timer_elapsed32(ks_idle_timer) >= KS_IDLE_TIMEOUT_MS) {
{% if idle.skip_effect %}
                rgb_matrix_disable_noeeprom();
                ks_idle_state = IDLE_STATE_OFF;
{% else %}
                rgb_matrix_mode_noeeprom(KS_IDLE_EFFECT_MODE);
                ks_idle_state = IDLE_STATE_IDLE_EFFECT;
{% endif %}
                ks_idle_timer = timer_read32();
            }
            break;
        case IDLE_STATE_IDLE_EFFECT:
            if (timer_elapsed32(ks_idle_timer) >= KS_IDLE_EFFECT_DURATION_MS) {
                rgb_matrix_disable_noeeprom();
                ks_idle_state = IDLE_STATE_OFF;
            }
            break;
        case IDLE_STATE_OFF:
            break;
    }
}

bool process_record_user(uint16_t keycode, keyrecord_t *record) {
    if (ks_idle_state != IDLE_STATE_ACTIVE) {
        rgb_matrix_enable_noeeprom();
        rgb_matrix_mode_noeeprom(ks_active_mode);
        ks_idle_state = IDLE_STATE_ACTIVE;
    }
    ks_idle_timer = timer_read32();
    return true;
}
{% endif %}
{% if lighting %}

#ifdef RGB_MATRIX_ENABLE
// Colors of layer {{ lighting.layer }} ({{ lighting.layer_name }}), one entry per LED
static const uint8_t PROGMEM ks_led_colors[{{ lighting.leds | length }}][3] = {
{% for led in lighting.leds %}
    { 0x{{ "%02X" % led.r }}, 0x{{ "%02X" % led.g }}, 0x{{ "%02X" % led.b }} }, // {{ led.comment }}
{% endfor %}
};

bool rgb_matrix_indicators_advanced_user(uint8_t led_min, uint8_t led_max) {
{% if idle %}
    if (ks_idle_state != IDLE_STATE_ACTIVE) {
        return false;
    }
{% endif %}
    for (uint8_t i = led_min; i < led_max && i < {{ lighting.leds | length }}; i++) {
        rgb_matrix_set_color(
            i,
            pgm_read_byte(&ks_led_colors[i][0]),
            pgm_read_byte(&ks_led_colors[i][1]),
            pgm_read_byte(&ks_led_colors[i][2])
        );
    }
    return false;
}
#endif
{% endif %}
"""

CONFIG_H_TEMPLATE = """\
// Generated by keysmith from "{{ layout_name }}"

#pragma once

#ifndef MATRIX_ROWS
#    define MATRIX_ROWS {{ matrix_rows }}
#endif
#ifndef MATRIX_COLS
#    define MATRIX_COLS {{ matrix_cols }}
#endif
{% if led_count %}
#ifndef RGB_MATRIX_LED_COUNT
#    define RGB_MATRIX_LED_COUNT {{ led_count }}
#endif
{% endif %}
{% if lighting_off %}
#undef RGB_MATRIX_DEFAULT_ON
#define RGB_MATRIX_DEFAULT_ON false
{% endif %}

// Tap-hold ({{ tap_hold_preset }})
{% for name, value in tap_hold %}
#undef {{ name }}
#define {{ name }}{{ (" " ~ value) if value is not none else "" }}
{% endfor %}
{% if combos %}

#define COMBO_ONLY_FROM_LAYER 0
{% endif %}
{% if idle %}

// Idle effect
#define KS_IDLE_TIMEOUT_MS {{ idle.timeout_ms }}
#define KS_IDLE_EFFECT_DURATION_MS {{ idle.duration_ms }}
#define KS_IDLE_EFFECT_MODE {{ idle.mode }}
{% if idle.enable_define %}
#define {{ idle.enable_define }}
{% endif %}
{% elif rgb_timeout_ms %}

#undef RGB_MATRIX_TIMEOUT
#define RGB_MATRIX_TIMEOUT {{ rgb_timeout_ms }}
{% endif %}
"""

RULES_MK_TEMPLATE = """\
# Generated by keysmith from "{{ layout_name }}"
{% for name in features %}
{{ name }} = yes
{% endfor %}
"""


__all__ = ["CONFIG_H_TEMPLATE", "KEYMAP_C_TEMPLATE", "RULES_MK_TEMPLATE"]
