"""Firmware service: run the pipeline and write generated sources."""

from keysmith.adapters import (
    FileAdapter,
    TemplateAdapter,
    create_file_adapter,
    create_template_adapter,
)
from keysmith.core.errors import GenerationError
from keysmith.core.structlog_logger import StructlogMixin
from keysmith.firmware.config_generator import ConfigGenerator, create_config_generator
from keysmith.firmware.descriptor import build_descriptor, render_descriptor
from keysmith.firmware.keymap_generator import KeymapGenerator, create_keymap_generator
from keysmith.firmware.models import (
    CONFIG_H,
    DESCRIPTOR_JSON,
    KEYMAP_C,
    RULES_MK,
    FeatureFlags,
    FirmwareResult,
    RenderedFirmware,
)
from keysmith.firmware.options import GenerationOptions
from keysmith.geometry import GeometryResult
from keysmith.layout.colors import create_color_resolver
from keysmith.layout.models import Layout
from keysmith.layout.resolver import KeycodeResolver, create_keycode_resolver
from keysmith.models.diagnostics import Diagnostic, Stage, warning


class FirmwareService(StructlogMixin):
    """Generates QMK keymap sources for a layout on a keyboard.

    Every file is rendered in memory first; nothing is written unless the
    whole generation succeeds.
    """

    def __init__(
        self,
        file_adapter: FileAdapter,
        resolver: KeycodeResolver,
        keymap_generator: KeymapGenerator,
        config_generator: ConfigGenerator,
    ) -> None:
        super().__init__()
        self._file_adapter = file_adapter
        self._resolver = resolver
        self._keymap_generator = keymap_generator
        self._config_generator = config_generator

    def select_features(
        self, layout: Layout, geometry: GeometryResult, options: GenerationOptions
    ) -> tuple[FeatureFlags, list[Diagnostic]]:
        """Decide which features to generate.

        Raises:
            GenerationError: If lighting output is requested, explicitly or by
                the idle effect, on a keyboard without LEDs
        """
        has_leds = geometry.geometry.has_lighting
        keyboard = geometry.geometry.keyboard
        found: list[Diagnostic] = []

        if options.lighting and not has_leds:
            raise GenerationError(
                "Lighting export requested but the keyboard has no LEDs",
                value=keyboard,
            )
        if layout.idle_effect.enabled and not has_leds:
            raise GenerationError(
                "Idle effect is enabled but the keyboard has no LEDs",
                value=keyboard,
            )

        lighting = has_leds if options.lighting is None else options.lighting
        if lighting and not 0 <= options.lighting_layer < len(layout.layers):
            raise GenerationError(
                f"Lighting layer {options.lighting_layer} does not exist",
                value=str(options.lighting_layer),
            )

        rgb_timeout = layout.rgb_timeout_ms > 0 and not layout.idle_effect.enabled
        if rgb_timeout and not has_leds:
            found.append(
                warning(
                    Stage.GENERATE,
                    "RGB timeout ignored because the keyboard has no LEDs",
                    value=keyboard,
                )
            )
            rgb_timeout = False

        features = FeatureFlags(
            tap_dance=bool(layout.tap_dances),
            combos=bool(layout.combos),
            lighting=lighting,
            idle_effect=layout.idle_effect.enabled,
            rgb_timeout=rgb_timeout,
        )
        return features, found

    def _placement_warnings(
        self, layout: Layout, geometry: GeometryResult
    ) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        target = geometry.geometry.keyboard
        if layout.metadata.keyboard and layout.metadata.keyboard != target:
            found.append(
                warning(
                    Stage.GENERATE,
                    f"Layout was written for {layout.metadata.keyboard}, "
                    f"generating for {target}",
                    value=target,
                )
            )
        for index, layer in enumerate(layout.layers):
            for key in layer.sorted_keys():
                if geometry.mapping.by_grid(key.position) is None:
                    found.append(
                        warning(
                            Stage.GENERATE,
                            "Key has no physical switch and is not emitted",
                            layer=index,
                            row=key.position.row,
                            col=key.position.col,
                            value=key.action.to_token(),
                        )
                    )
        return found

    def render(
        self, layout: Layout, geometry: GeometryResult, options: GenerationOptions
    ) -> RenderedFirmware:
        """Render every output file without touching the file system.

        Raises:
            LayoutReferenceError: If the layout has unresolved references
            GenerationError: If the output does not fit the hardware
        """
        resolution = self._resolver.resolve(layout)
        features, feature_warnings = self.select_features(layout, geometry, options)
        colors = create_color_resolver(layout)
        keymap_name = options.keymap_name or layout.metadata.keymap_name

        files = {
            KEYMAP_C: self._keymap_generator.generate_keymap_c(
                resolution, geometry, colors, features, options.lighting_layer
            ),
            CONFIG_H: self._config_generator.generate_config_h(
                layout, geometry.geometry, features
            ),
            RULES_MK: self._config_generator.generate_rules_mk(layout, features),
            DESCRIPTOR_JSON: render_descriptor(
                build_descriptor(
                    resolution,
                    geometry,
                    colors,
                    features,
                    keymap_name,
                    options.lighting_layer,
                )
            ),
        }
        warnings = (
            resolution.warnings
            + feature_warnings
            + self._placement_warnings(layout, geometry)
        )
        return RenderedFirmware(files=files, features=features, warnings=warnings)

    def generate(
        self, layout: Layout, geometry: GeometryResult, options: GenerationOptions
    ) -> FirmwareResult:
        """Render all files, then write them to ``options.output_dir``.

        Returns:
            FirmwareResult with written paths and advisory warnings

        Raises:
            LayoutReferenceError: If the layout has unresolved references
            GenerationError: If the output does not fit the hardware
            FileSystemError: If a file cannot be written
        """
        self.logger.info(
            "firmware_generation_started",
            layout=layout.metadata.name,
            keyboard=geometry.geometry.keyboard,
            output_dir=str(options.output_dir),
        )
        rendered = self.render(layout, geometry, options)

        result = FirmwareResult(
            success=True,
            output_dir=options.output_dir,
            lighting_enabled=rendered.features.lighting,
        )
        outputs = {
            options.output_dir / name: content
            for name, content in rendered.files.items()
        }
        self._file_adapter.write_files(outputs)
        result.files.extend(outputs)
        result.add_warnings(rendered.warnings)
        result.add_message(
            f"Generated {len(result.files)} files in {options.output_dir}"
        )
        self.logger.info(
            "firmware_generation_completed",
            files=len(result.files),
            warnings=len(result.warnings),
        )
        return result


def create_firmware_service(
    file_adapter: FileAdapter | None = None,
    template_adapter: TemplateAdapter | None = None,
) -> FirmwareService:
    """Create a FirmwareService with default collaborators."""
    template_adapter = template_adapter or create_template_adapter()
    return FirmwareService(
        file_adapter=file_adapter or create_file_adapter(),
        resolver=create_keycode_resolver(),
        keymap_generator=create_keymap_generator(template_adapter),
        config_generator=create_config_generator(template_adapter),
    )


__all__ = ["FirmwareService", "create_firmware_service"]
