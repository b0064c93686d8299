"""Configuration loading and dot-path access."""

from __future__ import annotations

import os
from typing import Any

import yaml

from composekit.errors import ConfigError, ConfigNotFoundError

__all__ = ["Config"]


class Config:
    """Configuration accessor with dot-path key support.

    Keys read by the framework:

    - ``composition.migration_mode``: ``true``/``false`` to force the vertical
      dependency policy, ``null`` (default) to infer it from an empty core registry.
    - ``routes.include_admin`` / ``routes.include_public`` / ``routes.debug``:
      route builder defaults.
    - ``feature_flags.defaults``: mapping of flag name to bool.
    - ``feature_flags.path``: YAML file with flag overrides, relative to this file.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._path: str | None = None

    @classmethod
    def load(cls, yaml_path: str) -> Config:
        """Load configuration from a YAML file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        if not os.path.isfile(yaml_path):
            raise ConfigNotFoundError(config_path=yaml_path)

        with open(yaml_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        config = cls(data=data)
        config._path = yaml_path
        return config

    @property
    def path(self) -> str | None:
        """Source file path, if loaded from YAML."""
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current
