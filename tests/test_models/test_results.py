"""Tests for the shared base model and result model."""

from keysmith.layout.models import LayoutMetadata, Position
from keysmith.models.diagnostics import Stage, warning
from keysmith.models.results import BaseResult


class TestToDict:
    """Test KeysmithBaseModel.to_dict serialization."""

    def test_only_set_fields(self):
        assert LayoutMetadata(name="Mine").to_dict() == {"name": "Mine"}

    def test_json_compatible_values(self):
        assert Position(row=1, col=2).to_dict() == {"row": 1, "col": 2}


class TestBaseResult:
    """Test BaseResult bookkeeping."""

    def test_add_error_marks_failure(self):
        result = BaseResult(success=True)
        result.add_error("boom")
        assert not result.success
        assert not result.is_success()
        assert result.errors == ["boom"]

    def test_errors_at_construction_clear_success(self):
        result = BaseResult(success=True, errors=["boom"])
        assert result.success is False

    def test_warnings_do_not_affect_success(self):
        result = BaseResult(success=True)
        result.add_warnings([warning(Stage.GENERATE, "careful")])
        result.add_message("done")
        assert result.is_success()
        assert len(result.warnings) == 1
        assert result.messages == ["done"]
