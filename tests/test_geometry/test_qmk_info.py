"""Tests for reading QMK keyboard data."""

from typing import Any

import pytest

from keysmith.core.errors import GeometryConfigError
from keysmith.geometry import list_layout_variants, load_qmk_info_json, parse_hardware_data


@pytest.fixture
def info_json() -> dict[str, Any]:
    """A 2x3 board with two layouts and one underglow LED."""
    return {
        "keyboard_name": "demo",
        "matrix_pins": {"rows": ["B1", "B2"], "cols": ["C1", "C2", "C3"]},
        "rgb_matrix": {
            "layout": [
                {"matrix": [0, 0], "x": 0, "y": 0, "flags": 4},
                {"matrix": [0, 1], "x": 16, "y": 0, "flags": 4},
                {"x": 8, "y": 32, "flags": 2},
                {"matrix": [1, 2], "x": 32, "y": 16, "flags": 4},
            ]
        },
        "layouts": {
            "LAYOUT_full": {
                "layout": [
                    {"matrix": [0, 0], "x": 0, "y": 0},
                    {"matrix": [0, 1], "x": 1, "y": 0},
                    {"matrix": [1, 2], "x": 2, "y": 1, "w": 1.5},
                ]
            },
            "LAYOUT_mini": {"layout": [{"matrix": [0, 0], "x": 0, "y": 0}]},
        },
    }


class TestLoadQmkInfo:
    """Test normalization of info.json data."""

    def test_full_variant(self, info_json):
        description = load_qmk_info_json(info_json, "LAYOUT_full")
        assert description.keyboard == "demo"
        assert description.layout_variant == "LAYOUT_full"
        assert (description.matrix_rows, description.matrix_cols) == (2, 3)
        assert len(description.keys) == 3
        assert description.keys[2].w == 1.5

    def test_leds_follow_rgb_matrix_order(self, info_json):
        description = load_qmk_info_json(info_json, "LAYOUT_full")
        assert [k.led for k in description.keys] == [0, 1, 3]
        assert description.led_count == 4

    def test_keyboard_override(self, info_json):
        description = load_qmk_info_json(info_json, "LAYOUT_mini", keyboard="other/kb")
        assert description.keyboard == "other/kb"

    def test_no_lighting(self, info_json):
        del info_json["rgb_matrix"]
        description = load_qmk_info_json(info_json, "LAYOUT_full")
        assert description.led_count == 0
        assert all(k.led is None for k in description.keys)

    def test_split_doubles_rows(self, info_json):
        info_json["split"] = {"enabled": True}
        description = load_qmk_info_json(info_json, "LAYOUT_full")
        assert description.matrix_rows == 4

    def test_matrix_size_wins(self, info_json):
        info_json["matrix_size"] = {"rows": 5, "cols": 6}
        description = load_qmk_info_json(info_json, "LAYOUT_full")
        assert (description.matrix_rows, description.matrix_cols) == (5, 6)

    def test_matrix_derived_from_keys(self, info_json):
        del info_json["matrix_pins"]
        description = load_qmk_info_json(info_json, "LAYOUT_full")
        assert (description.matrix_rows, description.matrix_cols) == (2, 3)


class TestVariantSelection:
    """Test choosing a physical layout."""

    def test_list_variants(self, info_json):
        assert list_layout_variants(info_json) == ["LAYOUT_full", "LAYOUT_mini"]
        assert list_layout_variants({}) == []

    def test_ambiguous_without_variant(self, info_json):
        with pytest.raises(GeometryConfigError, match="several layouts"):
            load_qmk_info_json(info_json)

    def test_single_layout_is_default(self, info_json):
        del info_json["layouts"]["LAYOUT_full"]
        assert load_qmk_info_json(info_json).layout_variant == "LAYOUT_mini"

    def test_unknown_variant(self, info_json):
        with pytest.raises(GeometryConfigError) as exc_info:
            load_qmk_info_json(info_json, "LAYOUT_nope")
        assert exc_info.value.value == "LAYOUT_nope"

    def test_no_layouts(self):
        with pytest.raises(GeometryConfigError, match="no layouts"):
            load_qmk_info_json({"layouts": {}})

    def test_entry_without_matrix(self, info_json):
        info_json["layouts"]["LAYOUT_mini"]["layout"].append({"x": 1, "y": 0})
        with pytest.raises(GeometryConfigError, match="no matrix position"):
            load_qmk_info_json(info_json, "LAYOUT_mini")


class TestParseHardwareData:
    """Test format detection."""

    def test_native_description(self, hardware_data):
        description = parse_hardware_data(hardware_data)
        assert description.keyboard == "test/board"
        assert description.led_count == 5

    def test_qmk_data(self, info_json):
        description = parse_hardware_data(info_json, "LAYOUT_mini")
        assert description.layout_variant == "LAYOUT_mini"

    def test_native_variant_mismatch(self, hardware_data):
        with pytest.raises(GeometryConfigError):
            parse_hardware_data(hardware_data, "LAYOUT_other")

    def test_invalid_native_description(self):
        with pytest.raises(GeometryConfigError, match="Invalid hardware description"):
            parse_hardware_data({"keyboard": "kb", "keys": []})
