"""keymap.c generation."""

import logging
import re
from typing import Any

from keysmith.adapters import TemplateAdapter
from keysmith.firmware.models import FeatureFlags
from keysmith.firmware.templates import KEYMAP_C_TEMPLATE
from keysmith.geometry import GeometryResult
from keysmith.layout.colors import ColorResolver
from keysmith.layout.models import BLACK, LayerRefKind
from keysmith.layout.resolver import (
    ResolutionResult,
    ResolvedLayer,
    ResolvedTapDance,
    TapDanceStep,
)


logger = logging.getLogger(__name__)

_C_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]+")

_STEP_LABELS = (
    ("TD_STEP_SINGLE_TAP", "single_tap"),
    ("TD_STEP_DOUBLE_TAP", "double_tap"),
    ("TD_STEP_HOLD", "hold"),
)


def step_code(step: TapDanceStep) -> tuple[str, str | None]:
    """C statements run when a tap dance step starts and ends."""
    if step.layer is None:
        return (
            f"register_code16({step.keycode});",
            f"unregister_code16({step.keycode});",
        )
    layer = step.layer
    if step.layer_kind in (LayerRefKind.MOMENTARY, LayerRefKind.TAP_TOGGLE):
        return f"layer_on({layer});", f"layer_off({layer});"
    if step.layer_kind is LayerRefKind.TOGGLE:
        return f"layer_invert({layer});", None
    if step.layer_kind is LayerRefKind.SWITCH_TO:
        return f"layer_move({layer});", None
    if step.layer_kind is LayerRefKind.ONE_SHOT:
        return f"set_oneshot_layer({layer}, ONESHOT_START);", (
            "clear_oneshot_layer_state(ONESHOT_PRESSED);"
        )
    return f"default_layer_set((layer_state_t)1 << {layer});", None


class KeymapGenerator:
    """Generator for ``keymap.c`` from a resolved layout and geometry."""

    def __init__(self, template_adapter: TemplateAdapter) -> None:
        self._template_adapter = template_adapter
        logger.debug("KeymapGenerator initialized")

    def generate_keymap_c(
        self,
        resolution: ResolutionResult,
        geometry: GeometryResult,
        colors: ColorResolver,
        features: FeatureFlags,
        lighting_layer: int = 0,
    ) -> str:
        """Render ``keymap.c``.

        Args:
            resolution: Resolved layout
            geometry: Geometry and visual mapping of the target keyboard
            colors: Color resolver for the same layout
            features: Features to generate code for
            lighting_layer: Layer exported to the per-key lighting array

        Returns:
            Rendered source text
        """
        layout = resolution.layout
        context: dict[str, Any] = {
            "layout_name": layout.metadata.name,
            "keyboard": geometry.geometry.keyboard,
            "layout_variant": geometry.geometry.layout_variant,
            "layers": [
                self.generate_layer(layer, geometry) for layer in resolution.layers
            ],
            "tap_dances": [
                {"firmware_id": td.firmware_id, "entry": self._tap_dance_entry(td)}
                for td in resolution.tap_dances
            ],
            "function_tap_dances": [
                self.generate_tap_dance_functions(td)
                for td in resolution.tap_dances
                if self.needs_functions(td)
            ],
            "combos": self.generate_combos(resolution),
            "idle": None,
            "lighting": None,
        }
        if features.idle_effect:
            context["idle"] = {
                "skip_effect": layout.idle_effect.effect_duration_ms == 0
            }
        if features.lighting:
            context["lighting"] = self.generate_led_colors(
                resolution, geometry, colors, lighting_layer
            )

        return self._template_adapter.render_string(KEYMAP_C_TEMPLATE, context)

    def generate_layer(
        self, layer: ResolvedLayer, geometry: GeometryResult
    ) -> dict[str, Any]:
        """Keycodes of one layer laid out as the wiring matrix.

        Matrix cells with no switch are ``KC_NO``. Switches with no key on the
        layer are ``KC_NO`` on the base layer and ``KC_TRNS`` above it.
        """
        keys = layer.by_position()
        missing = "KC_NO" if layer.index == 0 else "KC_TRNS"
        grid: list[list[str]] = []
        for row in range(geometry.geometry.matrix_rows):
            cells = []
            for col in range(geometry.geometry.matrix_cols):
                visual = geometry.mapping.by_matrix((row, col))
                if visual is None:
                    cells.append("KC_NO")
                    continue
                key = keys.get(visual.grid)
                cells.append(key.keycode if key is not None else missing)
            grid.append(cells)

        width = max((len(cell) for cells in grid for cell in cells), default=0)
        rows = [", ".join(cell.ljust(width) for cell in cells).rstrip() for cells in grid]
        return {
            "index": layer.index,
            "name": layer.name,
            "define": layer.define,
            "rows": rows,
        }

    def needs_functions(self, tap_dance: ResolvedTapDance) -> bool:
        """True when the dance cannot be expressed as ACTION_TAP_DANCE_DOUBLE.

        The double-tap macro only registers keycodes, so a layer step needs
        generated functions even without a hold.
        """
        if tap_dance.arity == 3:
            return True
        return any(
            step.layer is not None
            for step in (tap_dance.single_tap, tap_dance.double_tap)
        )

    def _tap_dance_entry(self, tap_dance: ResolvedTapDance) -> str:
        if not self.needs_functions(tap_dance):
            return (
                f"ACTION_TAP_DANCE_DOUBLE({tap_dance.single_tap.keycode}, "
                f"{tap_dance.double_tap.keycode})"
            )
        function = self._function_name(tap_dance)
        return (
            f"ACTION_TAP_DANCE_FN_ADVANCED(NULL, {function}_finished, "
            f"{function}_reset)"
        )

    def _function_name(self, tap_dance: ResolvedTapDance) -> str:
        return f"td_{tap_dance.name.lower()}"

    def generate_tap_dance_functions(
        self, tap_dance: ResolvedTapDance
    ) -> dict[str, Any]:
        """Context for the ``finished``/``reset`` pair of a tap dance.

        Without a hold step a single held press counts as a single tap.
        """
        steps = []
        for label, field_name in _STEP_LABELS:
            step: TapDanceStep | None = getattr(tap_dance, field_name)
            if step is None:
                continue
            press, release = step_code(step)
            steps.append({"label": label, "press": press, "release": release})
        return {
            "function": self._function_name(tap_dance),
            "steps": steps,
            "has_hold": tap_dance.hold is not None,
        }

    def generate_combos(self, resolution: ResolutionResult) -> list[dict[str, str]]:
        combos = []
        used: set[str] = set()
        for index, combo in enumerate(resolution.combos):
            variable = "combo_" + _C_IDENTIFIER_CHARS.sub("_", combo.name).lower()
            if variable in used:
                variable = f"{variable}_{index}"
            used.add(variable)
            combos.append(
                {
                    "variable": variable,
                    "triggers": ", ".join(combo.trigger_keycodes),
                    "keycode": combo.keycode,
                }
            )
        return combos

    def generate_led_colors(
        self,
        resolution: ResolutionResult,
        geometry: GeometryResult,
        colors: ColorResolver,
        layer_index: int,
    ) -> dict[str, Any]:
        """One color per LED index for ``layer_index``; LEDs without a switch are black."""
        leds = []
        for led in range(geometry.mapping.led_count):
            visual = geometry.mapping.by_led(led)
            if visual is None:
                color = BLACK
                comment = f"LED {led}: no key"
            else:
                color = colors.led_color(layer_index, visual.grid)
                comment = f"LED {led}: matrix {visual.matrix[0]},{visual.matrix[1]}"
            leds.append({"r": color.r, "g": color.g, "b": color.b, "comment": comment})

        return {
            "layer": layer_index,
            "layer_name": resolution.layers[layer_index].name,
            "leds": leds,
        }


def create_keymap_generator(template_adapter: TemplateAdapter) -> KeymapGenerator:
    """Create a new KeymapGenerator instance."""
    return KeymapGenerator(template_adapter)


__all__ = ["KeymapGenerator", "create_keymap_generator", "step_code"]
