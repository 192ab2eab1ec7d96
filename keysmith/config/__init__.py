"""User configuration."""

from keysmith.config.models import KeysmithSettings
from keysmith.config.user_config import UserConfig, create_user_config


__all__ = ["KeysmithSettings", "UserConfig", "create_user_config"]
