"""Tests for firmware CLI commands."""

from keysmith.cli import app
from keysmith.cli.commands import register_all_commands
from keysmith.firmware import OUTPUT_FILES


register_all_commands(app)


class TestFirmwareGenerate:
    """Test the firmware generate command."""

    def test_default_output_dir(self, cli_runner, layout_file, hardware_file, tmp_path):
        result = cli_runner.invoke(
            app, ["firmware", "generate", str(layout_file), str(hardware_file)]
        )
        assert result.exit_code == 0
        for name in OUTPUT_FILES:
            assert (tmp_path / "build" / name).is_file()
        assert "with per-key lighting" in result.output

    def test_output_option(self, cli_runner, layout_file, hardware_file, tmp_path):
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app,
            ["firmware", "generate", str(layout_file), str(hardware_file), "-o", str(out)],
        )
        assert result.exit_code == 0
        keymap = (out / "keymap.c").read_text(encoding="utf-8")
        assert "KC_B" in keymap

    def test_dry_run_writes_nothing(
        self, cli_runner, layout_file, hardware_file, tmp_path
    ):
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app,
            [
                "firmware",
                "generate",
                str(layout_file),
                str(hardware_file),
                "-o",
                str(out),
                "--dry-run",
            ],
        )
        assert result.exit_code == 0
        assert "Dry run complete" in result.output
        assert not out.exists()

    def test_no_lighting(self, cli_runner, layout_file, hardware_file, tmp_path):
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app,
            [
                "firmware",
                "generate",
                str(layout_file),
                str(hardware_file),
                "-o",
                str(out),
                "--no-lighting",
            ],
        )
        assert result.exit_code == 0
        assert "without per-key lighting" in result.output
        config = (out / "config.h").read_text(encoding="utf-8")
        assert "RGB_MATRIX_LED_COUNT" not in config

    def test_unlit_keyboard_defaults_to_no_lighting(
        self, cli_runner, layout_file, unlit_hardware_file, tmp_path
    ):
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app,
            [
                "firmware",
                "generate",
                str(layout_file),
                str(unlit_hardware_file),
                "-o",
                str(out),
            ],
        )
        assert result.exit_code == 0
        assert "without per-key lighting" in result.output

    def test_lighting_on_unlit_keyboard_fails(
        self, cli_runner, layout_file, unlit_hardware_file, tmp_path
    ):
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app,
            [
                "firmware",
                "generate",
                str(layout_file),
                str(unlit_hardware_file),
                "-o",
                str(out),
                "--lighting",
            ],
        )
        assert result.exit_code == 1
        assert not (out / "keymap.c").exists()

    def test_unknown_lighting_layer_fails(
        self, cli_runner, layout_file, hardware_file, tmp_path
    ):
        result = cli_runner.invoke(
            app,
            [
                "firmware",
                "generate",
                str(layout_file),
                str(hardware_file),
                "--lighting-layer",
                "5",
            ],
        )
        assert result.exit_code == 1

    def test_output_dir_from_config_file(
        self, cli_runner, layout_file, hardware_file, tmp_path
    ):
        config = tmp_path / "custom.yaml"
        config.write_text(f"output_dir: {tmp_path / 'from_config'}\n", encoding="utf-8")
        result = cli_runner.invoke(
            app,
            [
                "-c",
                str(config),
                "firmware",
                "generate",
                str(layout_file),
                str(hardware_file),
            ],
        )
        assert result.exit_code == 0
        assert (tmp_path / "from_config" / "keymap.c").is_file()

    def test_output_dir_from_environment(
        self, cli_runner, layout_file, hardware_file, tmp_path, monkeypatch
    ):
        monkeypatch.setenv("KEYSMITH_OUTPUT_DIR", str(tmp_path / "from_env"))
        result = cli_runner.invoke(
            app, ["firmware", "generate", str(layout_file), str(hardware_file)]
        )
        assert result.exit_code == 0
        assert (tmp_path / "from_env" / "keymap.c").is_file()

    def test_missing_layout(self, cli_runner, hardware_file, tmp_path):
        result = cli_runner.invoke(
            app,
            ["firmware", "generate", str(tmp_path / "missing.md"), str(hardware_file)],
        )
        assert result.exit_code == 1
