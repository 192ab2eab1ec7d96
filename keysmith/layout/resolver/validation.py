"""Cross-reference checks run before resolution.

Every problem is collected so a single ``LayoutReferenceError`` can report all
of them at once.
"""

from collections.abc import Iterator

from keysmith.core.errors import LayoutReferenceError
from keysmith.layout.models import (
    FIRMWARE_IDENTIFIER_PATTERN,
    Action,
    ComboTrigger,
    LayerRef,
    LayerTapAction,
    Layout,
    ModTapAction,
    Position,
    TapDanceTrigger,
)
from keysmith.models.diagnostics import Diagnostic, Stage, error


def walk_action(action: Action) -> Iterator[Action]:
    """Yield ``action`` and every action nested inside it."""
    yield action
    if isinstance(action, (LayerTapAction, ModTapAction)):
        yield from walk_action(action.tap)


class _IssueCollector:
    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.issues: list[Diagnostic] = []
        self.layer_ids = {layer.id for layer in layout.layers}
        self.category_ids = {category.id for category in layout.categories}
        self.tap_dance_names = {td.name for td in layout.tap_dances}
        self.combo_names = {combo.name for combo in layout.combos}

    def add(
        self,
        message: str,
        *,
        layer: int | None = None,
        position: Position | None = None,
        value: str | None = None,
    ) -> None:
        self.issues.append(
            error(
                Stage.RESOLVE,
                message,
                layer=layer,
                row=position.row if position else None,
                col=position.col if position else None,
                value=value,
            )
        )

    def check_layer_ref(
        self,
        ref: LayerRef,
        *,
        context: str,
        layer: int | None = None,
        position: Position | None = None,
    ) -> None:
        if ref.token is not None and ref.token not in self.layer_ids:
            self.add(
                f"{context} references a layer that does not exist",
                layer=layer,
                position=position,
                value=ref.token,
            )
        elif ref.index is not None and ref.index >= len(self.layout.layers):
            self.add(
                f"{context} references layer index {ref.index} but the layout "
                f"has {len(self.layout.layers)} layers",
                layer=layer,
                position=position,
                value=str(ref.index),
            )

    def check_action(
        self,
        action: Action,
        *,
        context: str,
        layer: int | None = None,
        position: Position | None = None,
        allow_triggers: bool = True,
    ) -> None:
        for _, ref in action.layer_refs():
            self.check_layer_ref(ref, context=context, layer=layer, position=position)

        for part in walk_action(action):
            if isinstance(part, TapDanceTrigger):
                if not allow_triggers:
                    self.add(
                        f"{context} cannot trigger a tap dance",
                        layer=layer,
                        position=position,
                        value=part.name,
                    )
                elif part.name not in self.tap_dance_names:
                    self.add(
                        f"{context} triggers unknown tap dance",
                        layer=layer,
                        position=position,
                        value=part.name,
                    )
            elif isinstance(part, ComboTrigger):
                if not allow_triggers:
                    self.add(
                        f"{context} cannot trigger a combo",
                        layer=layer,
                        position=position,
                        value=part.name,
                    )
                elif part.name not in self.combo_names:
                    self.add(
                        f"{context} triggers unknown combo",
                        layer=layer,
                        position=position,
                        value=part.name,
                    )

    def check_category(
        self,
        category_id: str | None,
        *,
        context: str,
        layer: int | None = None,
        position: Position | None = None,
    ) -> None:
        if category_id is not None and category_id not in self.category_ids:
            self.add(
                f"{context} uses unknown category",
                layer=layer,
                position=position,
                value=category_id,
            )


def _duplicates(names: list[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def collect_reference_issues(layout: Layout) -> list[Diagnostic]:
    """Return every unresolved or ambiguous reference in ``layout``."""
    collector = _IssueCollector(layout)

    for category_id in _duplicates([c.id for c in layout.categories]):
        collector.add("Duplicate category id", value=category_id)

    for name in _duplicates([td.name for td in layout.tap_dances]):
        collector.add("Duplicate tap dance name", value=name)
    by_firmware_id: dict[str, list[str]] = {}
    for tap_dance in layout.tap_dances:
        names = by_firmware_id.setdefault(tap_dance.firmware_id, [])
        if tap_dance.name not in names:
            names.append(tap_dance.name)
    for firmware_id, names in by_firmware_id.items():
        if len(names) > 1:
            collector.add(
                f"Tap dance names differ only in case and would share {firmware_id}",
                value=", ".join(names),
            )
    for tap_dance in layout.tap_dances:
        if not FIRMWARE_IDENTIFIER_PATTERN.match(tap_dance.name):
            collector.add(
                "Tap dance name is not a valid identifier", value=tap_dance.name
            )
        steps = [tap_dance.single_tap, tap_dance.double_tap]
        if tap_dance.hold is not None:
            steps.append(tap_dance.hold)
        for step in steps:
            collector.check_action(
                step,
                context=f"Tap dance {tap_dance.name!r}",
                allow_triggers=False,
            )

    for name in _duplicates([combo.name for combo in layout.combos]):
        collector.add("Duplicate combo name", value=name)

    for index, layer in enumerate(layout.layers):
        collector.check_category(
            layer.category_id, context=f"Layer {layer.name!r}", layer=index
        )
        for key in layer.sorted_keys():
            collector.check_category(
                key.category_id, context="Key", layer=index, position=key.position
            )
            collector.check_action(
                key.action, context="Key", layer=index, position=key.position
            )

    base = layout.layers[0] if layout.layers else None
    for combo in layout.combos:
        collector.check_action(
            combo.action, context=f"Combo {combo.name!r}", allow_triggers=False
        )
        for position in combo.positions:
            if base is None or base.get_key(position) is None:
                collector.add(
                    f"Combo {combo.name!r} uses a position with no key on the "
                    "base layer",
                    layer=0,
                    position=position,
                    value=combo.name,
                )

    return collector.issues


def validate_references(layout: Layout) -> None:
    """Raise if any reference in ``layout`` cannot be resolved.

    Raises:
        LayoutReferenceError: With every issue found
    """
    issues = collect_reference_issues(layout)
    if issues:
        raise LayoutReferenceError(issues)


__all__ = [
    "collect_reference_issues",
    "validate_references",
    "walk_action",
]
