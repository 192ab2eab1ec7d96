"""User settings model."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class KeysmithSettings(BaseSettings):
    """User settings with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (``KEYSMITH_*``)
    2. Constructor arguments (config file data)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYSMITH_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Environment variables override file configuration."""
        return (env_settings, init_settings)

    output_dir: Path = Field(
        default=Path("build"),
        description="Directory generated firmware sources are written to",
    )
    keymap_name: str | None = Field(
        default=None,
        description="Keymap name recorded in the descriptor; defaults to the layout's",
    )
    row_tolerance: float = Field(
        default=0.5,
        ge=0,
        description="Maximum vertical distance (key units) between keys of one row",
    )
    lighting_layer: int = Field(
        default=0,
        ge=0,
        description="Layer exported to the per-key lighting array",
    )

    # Logging
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
