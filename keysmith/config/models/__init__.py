"""Configuration models."""

from keysmith.config.models.settings import LOG_LEVELS, KeysmithSettings


__all__ = ["KeysmithSettings", "LOG_LEVELS"]
