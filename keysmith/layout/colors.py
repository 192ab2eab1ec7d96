"""Per-key color resolution.

A key's color is the first one found along this chain:

1. the key's own color override
2. the color of the key's category
3. the color of the layer's category
4. the layer's default color
5. ``FALLBACK_COLOR``

A layer with layer colors turned off skips steps 3 and 4.

Category ids that name no category are skipped rather than treated as errors;
reference validation reports them separately.
"""

from enum import Enum

from keysmith.layout.models import FALLBACK_COLOR, Layout, Position, RgbColor


class ColorSource(str, Enum):
    """Which level of the chain produced a color."""

    KEY = "key"
    KEY_CATEGORY = "key_category"
    LAYER_CATEGORY = "layer_category"
    LAYER = "layer"
    FALLBACK = "fallback"


class ColorResolver:
    """Resolve colors for one layout.

    The resolver holds no state besides the layout and a category lookup, so
    results do not depend on call order.
    """

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self._category_colors: dict[str, RgbColor] = {}
        for category in layout.categories:
            # First definition wins when ids are duplicated
            self._category_colors.setdefault(category.id, category.color)

    def resolve(self, layer_index: int, position: Position) -> RgbColor:
        return self.resolve_with_source(layer_index, position)[0]

    def resolve_with_source(
        self, layer_index: int, position: Position
    ) -> tuple[RgbColor, ColorSource]:
        """Resolve a color and report which level supplied it.

        Raises:
            IndexError: If ``layer_index`` is out of range
        """
        layer = self.layout.layers[layer_index]
        key = layer.get_key(position)

        if key is not None:
            if key.color is not None:
                return key.color, ColorSource.KEY
            if key.category_id in self._category_colors:
                return self._category_colors[key.category_id], ColorSource.KEY_CATEGORY

        if layer.layer_colors_enabled:
            if layer.category_id in self._category_colors:
                return (
                    self._category_colors[layer.category_id],
                    ColorSource.LAYER_CATEGORY,
                )
            if layer.color is not None:
                return layer.color, ColorSource.LAYER
        return FALLBACK_COLOR, ColorSource.FALLBACK

    def led_color(self, layer_index: int, position: Position) -> RgbColor:
        """Resolved color adjusted by the layout's lighting settings."""
        color, source = self.resolve_with_source(layer_index, position)
        return self.layout.lighting.apply(
            color, uncolored=source is ColorSource.FALLBACK
        )

    def layer_colors(self, layer_index: int) -> dict[Position, RgbColor]:
        """Resolved color of every key defined on a layer."""
        layer = self.layout.layers[layer_index]
        return {
            key.position: self.resolve(layer_index, key.position)
            for key in layer.sorted_keys()
        }


def create_color_resolver(layout: Layout) -> ColorResolver:
    """Create a ColorResolver for ``layout``."""
    return ColorResolver(layout)


__all__ = ["ColorResolver", "ColorSource", "create_color_resolver"]
