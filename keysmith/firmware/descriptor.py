"""Auxiliary JSON descriptor for companion tooling."""

import json
from typing import Any

from keysmith.firmware.models import FeatureFlags
from keysmith.geometry import GeometryResult
from keysmith.layout.colors import ColorResolver
from keysmith.layout.resolver import ResolutionResult


DESCRIPTOR_VERSION = 1


def build_descriptor(
    resolution: ResolutionResult,
    geometry: GeometryResult,
    colors: ColorResolver,
    features: FeatureFlags,
    keymap_name: str,
    lighting_layer: int,
) -> dict[str, Any]:
    """Describe layers, keys and lighting of a generated keymap.

    Keys are listed per layer in visual order, with their matrix, LED and
    grid coordinates, keycode and resolved color.
    """
    layout = resolution.layout
    layers = []
    for layer in resolution.layers:
        resolved = layer.by_position()
        keys = []
        for visual in geometry.mapping:
            key = resolved.get(visual.grid)
            keys.append(
                {
                    "visual_index": visual.visual_index,
                    "matrix": list(visual.matrix),
                    "led": visual.led,
                    "grid": [visual.grid.row, visual.grid.col],
                    "keycode": key.keycode if key is not None else None,
                    "color": colors.resolve(layer.index, visual.grid).to_hex(),
                }
            )
        layers.append(
            {
                "index": layer.index,
                "id": layer.id,
                "name": layer.name,
                "define": layer.define,
                "keys": keys,
            }
        )

    return {
        "version": DESCRIPTOR_VERSION,
        "name": layout.metadata.name,
        "keyboard": geometry.geometry.keyboard,
        "layout_variant": geometry.geometry.layout_variant,
        "keymap_name": keymap_name,
        "matrix": {
            "rows": geometry.geometry.matrix_rows,
            "cols": geometry.geometry.matrix_cols,
        },
        "lighting": {
            "led_count": geometry.geometry.led_count,
            "enabled": features.lighting,
            "layer": lighting_layer if features.lighting else None,
        },
        "features": {
            "tap_dance": features.tap_dance,
            "combos": features.combos,
            "idle_effect": features.idle_effect,
            "rgb_timeout": features.rgb_timeout,
        },
        "layers": layers,
    }


def render_descriptor(descriptor: dict[str, Any]) -> str:
    return json.dumps(descriptor, indent=2) + "\n"


__all__ = ["DESCRIPTOR_VERSION", "build_descriptor", "render_descriptor"]
