"""Base model for all Keysmith Pydantic models.

This module provides a base model class that enforces consistent serialization
behavior across all Keysmith models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class KeysmithBaseModel(BaseModel):
    """Base model class for all Keysmith Pydantic models.

    This class enforces consistent serialization behavior:
    - by_alias=True: Use field aliases for serialization
    - exclude_unset=True: Exclude fields that weren't explicitly set
    - mode="json": Use JSON-compatible serialization (e.g., datetime -> string)

    Enum members are kept as members (not values) so that models can call
    methods defined on the enums they hold.
    """

    model_config = ConfigDict(
        # Allow extra fields for flexibility
        extra="allow",
        # Strip whitespace from string fields
        str_strip_whitespace=True,
        # Validate assignment after model creation
        validate_assignment=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")
