"""Tests for GeometryService."""

import json

import pytest

from keysmith.core.errors import FileSystemError
from keysmith.geometry import HardwareDescription, create_geometry_service


class TestGeometryService:
    """Test loading and memoization."""

    def test_build_is_memoized(self, hardware_data):
        service = create_geometry_service()
        description = HardwareDescription.model_validate(hardware_data)
        first = service.build(description)
        assert service.build(description) is first

    def test_clear_cache(self, hardware_data):
        service = create_geometry_service()
        description = HardwareDescription.model_validate(hardware_data)
        first = service.build(description)
        service.clear_cache()
        second = service.build(description)
        assert second is not first
        assert second.mapping == first.mapping

    def test_variants_cached_separately(self, hardware_data):
        service = create_geometry_service()
        first = service.build(HardwareDescription.model_validate(hardware_data))
        hardware_data["layout_variant"] = "LAYOUT_other"
        second = service.build(HardwareDescription.model_validate(hardware_data))
        assert second is not first

    def test_row_tolerance_is_applied(self, hardware_data):
        hardware_data["keys"][1]["y"] = 0.3
        service = create_geometry_service(row_tolerance=0.1)
        result = service.build(HardwareDescription.model_validate(hardware_data))
        assert result.mapping.grid_rows == 3

    def test_changing_row_tolerance_rebuilds(self, hardware_data):
        hardware_data["keys"][1]["y"] = 0.3
        description = HardwareDescription.model_validate(hardware_data)
        service = create_geometry_service()
        loose = service.build(description)
        assert loose.mapping.grid_rows == 2
        service.row_tolerance = 0.1
        strict = service.build(description)
        assert strict is not loose
        assert strict.mapping.grid_rows == 3
        service.row_tolerance = 0.5
        assert service.build(description) is loose

    def test_load_file(self, hardware_file):
        result = create_geometry_service().load(hardware_file)
        assert result.geometry.keyboard == "test/board"
        assert len(result.mapping) == 4

    def test_load_qmk_file(self, tmp_path):
        path = tmp_path / "info.json"
        path.write_text(
            json.dumps(
                {
                    "keyboard_name": "qmk/demo",
                    "layouts": {
                        "LAYOUT": {
                            "layout": [
                                {"matrix": [0, 0], "x": 0, "y": 0},
                                {"matrix": [0, 1], "x": 1, "y": 0},
                            ]
                        }
                    },
                }
            ),
            encoding="utf-8",
        )
        result = create_geometry_service().load(path)
        assert result.geometry.keyboard == "qmk/demo"
        assert result.mapping.grid_cols == 2

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileSystemError):
            create_geometry_service().load(tmp_path / "missing.json")
