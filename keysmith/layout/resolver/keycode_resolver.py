"""Resolve layer identity references and decompose dual-role keys."""

import re

from keysmith.core.errors import LayoutReferenceError
from keysmith.core.structlog_logger import get_struct_logger
from keysmith.layout.keycodes import is_known_keycode, suggest_keycodes
from keysmith.layout.models import (
    Action,
    ComboTrigger,
    KeyAction,
    KeyDefinition,
    LayerModAction,
    LayerRef,
    LayerSwitchAction,
    LayerTapAction,
    Layout,
    ModTapAction,
    NoAction,
    Position,
    RawAction,
    TapDance,
    TapDanceTrigger,
    TransparentAction,
    is_transparent,
)
from keysmith.layout.resolver.models import (
    HoldKind,
    LayerReference,
    ResolutionResult,
    ResolvedCombo,
    ResolvedKey,
    ResolvedLayer,
    ResolvedTapDance,
    TapDanceStep,
)
from keysmith.layout.resolver.validation import validate_references, walk_action
from keysmith.models.diagnostics import Diagnostic, Stage, error, warning


logger = get_struct_logger(__name__)

_DEFINE_CHARS = re.compile(r"[^A-Z0-9]+")


def layer_define_names(layout: Layout) -> list[str]:
    """C macro names for each layer, unique within the layout."""
    names: list[str] = []
    for index, layer in enumerate(layout.layers):
        stem = _DEFINE_CHARS.sub("_", layer.name.upper()).strip("_") or str(index)
        name = f"LAYER_{stem}"
        if name in names:
            name = f"{name}_{index}"
        names.append(name)
    return names


class KeycodeResolver:
    """Turns a validated layout into firmware keycodes.

    Layer references are stored as identity tokens; here they become the
    target layer's current ordinal, so reordering layers never changes which
    layer a key activates.
    """

    def resolve(self, layout: Layout) -> ResolutionResult:
        """Resolve every key, tap dance and combo in ``layout``.

        Args:
            layout: Layout to resolve

        Returns:
            ResolutionResult with resolved layers and advisory warnings

        Raises:
            LayoutReferenceError: If any reference cannot be resolved
        """
        validate_references(layout)

        self._layout = layout
        self._index_by_id = {layer.id: i for i, layer in enumerate(layout.layers)}
        self._tap_dances = {td.name: td for td in layout.tap_dances}
        self._combos = {combo.name: combo for combo in layout.combos}
        warnings: list[Diagnostic] = []

        defines = layer_define_names(layout)
        layers: list[ResolvedLayer] = []
        references: dict[int, list[LayerReference]] = {}
        for index, layer in enumerate(layout.layers):
            keys = []
            for key in layer.sorted_keys():
                keys.append(self._resolve_key(key))
                warnings.extend(self._advisories(index, key))
                for ref in self._references(index, key):
                    references.setdefault(ref.target_layer, []).append(ref)
            layers.append(
                ResolvedLayer(
                    index=index,
                    id=layer.id,
                    name=layer.name,
                    define=defines[index],
                    keys=keys,
                )
            )

        warnings.extend(self._shadowed_holds(references))
        for tap_dance in layout.tap_dances:
            for step in (tap_dance.single_tap, tap_dance.double_tap, tap_dance.hold):
                if step is not None:
                    warnings.extend(self._unknown_keycodes(step))
        for combo in layout.combos:
            warnings.extend(self._unknown_keycodes(combo.action))

        result = ResolutionResult(
            success=True,
            layout=layout,
            layers=layers,
            references=references,
            tap_dances=[
                self._resolve_tap_dance(td)
                for td in sorted(layout.tap_dances, key=lambda td: td.name)
            ],
            combos=self._resolve_combos(),
            warnings=warnings,
        )
        logger.debug(
            "layout_resolved",
            layers=len(layers),
            references=sum(len(refs) for refs in references.values()),
            warnings=len(warnings),
        )
        return result

    def layer_index(self, ref: LayerRef) -> int:
        if ref.token is not None:
            return self._index_by_id[ref.token]
        if ref.index is None:
            raise LayoutReferenceError(
                [error(Stage.RESOLVE, "Layer reference names no layer")]
            )
        return ref.index

    def render(self, action: Action) -> str:
        """Firmware expression for ``action`` with ordinals in place of tokens."""
        if isinstance(action, NoAction):
            return "KC_NO"
        if isinstance(action, TransparentAction):
            return "KC_TRNS"
        if isinstance(action, KeyAction):
            return action.code
        if isinstance(action, LayerSwitchAction):
            return f"{action.kind.value}({self.layer_index(action.layer)})"
        if isinstance(action, LayerTapAction):
            return f"LT({self.layer_index(action.layer)}, {self.render(action.tap)})"
        if isinstance(action, LayerModAction):
            return f"LM({self.layer_index(action.layer)}, {action.mods})"
        if isinstance(action, ModTapAction):
            tap = self.render(action.tap)
            if action.function == "MT":
                return f"MT({action.mods}, {tap})"
            return f"{action.function}({tap})"
        if isinstance(action, TapDanceTrigger):
            return f"TD({self._tap_dances[action.name].firmware_id})"
        if isinstance(action, ComboTrigger):
            return self.render(self._combos[action.name].action)
        return action.to_token()

    def _resolve_key(self, key: KeyDefinition) -> ResolvedKey:
        action = key.action
        resolved = ResolvedKey(position=key.position, keycode=self.render(action))

        if isinstance(action, LayerTapAction):
            layer = self.layer_index(action.layer)
            resolved.tap = self.render(action.tap)
            resolved.hold = f"MO({layer})"
            resolved.hold_kind = HoldKind.LAYER
            resolved.hold_layer = layer
        elif isinstance(action, ModTapAction):
            resolved.tap = self.render(action.tap)
            resolved.hold = action.hold_modifier
            resolved.hold_kind = HoldKind.MODIFIER
        elif isinstance(action, TapDanceTrigger):
            tap_dance = self._tap_dances[action.name]
            resolved.tap = self.render(tap_dance.single_tap)
            if tap_dance.hold is not None:
                resolved.hold = self.render(tap_dance.hold)
                resolved.hold_kind = HoldKind.TAP_DANCE
        return resolved

    def _references(self, source: int, key: KeyDefinition) -> list[LayerReference]:
        return [
            LayerReference(
                source_layer=source,
                position=key.position,
                kind=kind,
                token=str(ref),
                target_layer=self.layer_index(ref),
            )
            for kind, ref in key.action.layer_refs()
        ]

    def _advisories(self, layer: int, key: KeyDefinition) -> list[Diagnostic]:
        position = key.position
        found = self._unknown_keycodes(key.action, layer, position)
        for part in walk_action(key.action):
            if isinstance(part, RawAction):
                found.append(
                    warning(
                        Stage.RESOLVE,
                        "Unrecognized action emitted verbatim",
                        layer=layer,
                        row=position.row,
                        col=position.col,
                        value=part.token,
                    )
                )
        for _, ref in key.action.layer_refs():
            if ref.is_legacy:
                target = self._layout.layers[self.layer_index(ref)]
                found.append(
                    warning(
                        Stage.RESOLVE,
                        "Layer referenced by index; it will not follow the layer "
                        f"if layers are reordered (use @{target.id})",
                        layer=layer,
                        row=position.row,
                        col=position.col,
                        value=str(ref.index),
                    )
                )
        return found

    def _unknown_keycodes(
        self,
        action: Action,
        layer: int | None = None,
        position: Position | None = None,
    ) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        for part in walk_action(action):
            if not isinstance(part, KeyAction) or is_known_keycode(part.code):
                continue
            suggestions = suggest_keycodes(part.code)
            message = "Unknown keycode emitted verbatim"
            if suggestions:
                message += f"; did you mean one of: {', '.join(suggestions)}"
            found.append(
                warning(
                    Stage.RESOLVE,
                    message,
                    layer=layer,
                    row=position.row if position else None,
                    col=position.col if position else None,
                    value=part.code,
                )
            )
        return found

    def _shadowed_holds(
        self, references: dict[int, list[LayerReference]]
    ) -> list[Diagnostic]:
        """Warn when a held layer has its own key under the holding finger."""
        found: list[Diagnostic] = []
        for target, refs in sorted(references.items()):
            target_layer = self._layout.layers[target]
            for ref in refs:
                if not ref.kind.is_hold_like:
                    continue
                key = target_layer.get_key(ref.position)
                if key is None or is_transparent(key.action):
                    continue
                found.append(
                    warning(
                        Stage.RESOLVE,
                        f"{ref.kind.value} on layer {ref.source_layer} holds layer "
                        f"{target} ({target_layer.name}), which has "
                        f"{key.action.to_token()} at the held position",
                        layer=target,
                        row=ref.position.row,
                        col=ref.position.col,
                        value=ref.token,
                    )
                )
        return found

    def _step(self, action: Action) -> TapDanceStep:
        step = TapDanceStep(keycode=self.render(action))
        if isinstance(action, LayerSwitchAction):
            step.layer = self.layer_index(action.layer)
            step.layer_kind = action.kind
        return step

    def _resolve_tap_dance(self, tap_dance: TapDance) -> ResolvedTapDance:
        return ResolvedTapDance(
            name=tap_dance.name,
            firmware_id=tap_dance.firmware_id,
            single_tap=self._step(tap_dance.single_tap),
            double_tap=self._step(tap_dance.double_tap),
            hold=self._step(tap_dance.hold) if tap_dance.hold is not None else None,
        )

    def _resolve_combos(self) -> list[ResolvedCombo]:
        if not self._layout.combos:
            return []
        base = self._layout.layers[0]
        combos = []
        for combo in self._layout.combos:
            triggers = []
            for position in combo.positions:
                key = base.get_key(position)
                if key is None:
                    raise LayoutReferenceError(
                        [
                            error(
                                Stage.RESOLVE,
                                f"Combo {combo.name!r} uses a position with no key "
                                "on the base layer",
                                layer=0,
                                row=position.row,
                                col=position.col,
                            )
                        ]
                    )
                triggers.append(self.render(key.action))
            combos.append(
                ResolvedCombo(
                    name=combo.name,
                    positions=list(combo.positions),
                    trigger_keycodes=triggers,
                    keycode=self.render(combo.action),
                )
            )
        return combos


def create_keycode_resolver() -> KeycodeResolver:
    """Create a new KeycodeResolver instance."""
    return KeycodeResolver()


def resolve_layout(layout: Layout) -> ResolutionResult:
    return create_keycode_resolver().resolve(layout)


__all__ = [
    "KeycodeResolver",
    "create_keycode_resolver",
    "layer_define_names",
    "resolve_layout",
]
