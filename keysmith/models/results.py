"""Base result model for pipeline operations."""

from datetime import datetime

from pydantic import Field, model_validator

from keysmith.core.structlog_logger import get_struct_logger
from keysmith.models.base import KeysmithBaseModel
from keysmith.models.diagnostics import Diagnostic


logger = get_struct_logger(__name__)


class BaseResult(KeysmithBaseModel):
    """Base class for all operation results."""

    success: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    messages: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_success_consistency(self) -> "BaseResult":
        """Ensure success flag is consistent with errors."""
        if self.errors and self.success:
            logger.warning("result_success_mismatch", has_errors=len(self.errors) > 0)
            self.success = False
        return self

    def add_message(self, message: str) -> None:
        """Add an informational message."""
        self.messages.append(message)
        logger.info("result_message_added", message=message)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        logger.error(error)
        self.success = False

    def add_warnings(self, warnings: list[Diagnostic]) -> None:
        """Attach advisory diagnostics without affecting success."""
        self.warnings.extend(warnings)

    def is_success(self) -> bool:
        """Check if the operation was successful."""
        return self.success and not self.errors


__all__ = ["BaseResult"]
