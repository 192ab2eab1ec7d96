"""
User configuration management for Keysmith.

Settings are resolved from multiple sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from keysmith.config.models import KeysmithSettings
from keysmith.core.errors import ConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "KEYSMITH_"


class UserConfig:
    """Loads ``KeysmithSettings`` from the first config file found."""

    def __init__(self, cli_config_path: str | Path | None = None) -> None:
        self._config_sources: dict[str, str] = {}
        self._config_path: Path | None = None
        self._config_paths = self._generate_config_paths(cli_config_path)
        self._cli_config_path = self._config_paths[0] if cli_config_path else None
        self._config = self._load_config()

    @property
    def settings(self) -> KeysmithSettings:
        return self._config

    @property
    def config_path(self) -> Path | None:
        """Config file the settings were read from, if any."""
        return self._config_path

    @property
    def search_paths(self) -> list[Path]:
        return list(self._config_paths)

    def _generate_config_paths(self, cli_config_path: str | Path | None) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if cli_config_path:
            config_paths.append(Path(cli_config_path).expanduser().resolve())

        config_paths.extend([Path.cwd() / "keysmith.yaml", Path.cwd() / ".keysmith.yml"])

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        base = (
            Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
        ) / "keysmith"
        config_paths.extend([base / "config.yaml", base / "config.yml"])
        return config_paths

    def _read_file(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Error parsing config file: {e}", value=str(path)
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Error reading config file: {e}", value=str(path)
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                "Config file must contain a mapping", value=str(path)
            )
        return data

    def _load_config(self) -> KeysmithSettings:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Config search paths: %s", [str(p) for p in self._config_paths]
            )

        if self._cli_config_path is not None and not self._cli_config_path.is_file():
            raise ConfigError(
                "Config file not found", value=str(self._cli_config_path)
            )

        data: dict[str, Any] = {}
        for path in self._config_paths:
            if path.is_file():
                data = self._read_file(path)
                self._config_path = path
                logger.debug("Loaded user configuration from %s", path)
                for key in data:
                    self._config_sources[key] = f"file:{path.name}"
                break
        else:
            logger.debug("No user configuration file found, using defaults")

        for env_name in os.environ:
            if env_name.startswith(ENV_PREFIX):
                key = env_name[len(ENV_PREFIX) :].lower()
                if key in KeysmithSettings.model_fields:
                    self._config_sources[key] = "environment"

        try:
            return KeysmithSettings(**data)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration: {e}",
                value=str(self._config_path) if self._config_path else None,
            ) from e

    def get_source(self, key: str) -> str:
        """Source of a setting: ``environment``, ``file:<name>`` or ``default``."""
        return self._config_sources.get(key, "default")


def create_user_config(cli_config_path: str | Path | None = None) -> UserConfig:
    """Create a UserConfig, searching the standard config locations.

    Raises:
        ConfigError: If the config file is unreadable or its values are invalid
    """
    return UserConfig(cli_config_path=cli_config_path)


__all__ = ["ENV_PREFIX", "UserConfig", "create_user_config"]
