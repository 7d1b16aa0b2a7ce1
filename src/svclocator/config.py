"""Configuration loading and lookup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Union

import yaml

from svclocator.errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["Config", "ConfigKey"]

ConfigKey = Union[str, tuple[str, ...]]


def _split_key(key: ConfigKey) -> tuple[str, ...]:
    if isinstance(key, tuple):
        return key
    return tuple(key.split("."))


class Config:
    """Configuration accessor with dot-path or tuple key support.

    Every key remembers the file it was loaded from, so that relative paths
    written in a config file can be resolved against that file's location.
    Tuple keys address entries whose names contain dots, e.g.
    ``("locator", "services.mailer")``.
    """

    def __init__(self, data: dict[str, Any] | None = None, source: str | os.PathLike[str] | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._sources: dict[tuple[str, ...], str] = {}
        if data:
            self.merge(data, source=source)

    @classmethod
    def from_yaml(cls, path: str | os.PathLike[str]) -> Config:
        """Create a Config from a single YAML file."""
        config = cls()
        config.load_yaml(path)
        return config

    def load_yaml(self, path: str | os.PathLike[str]) -> None:
        """Merge a YAML mapping file into this config.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        file_path = Path(path).resolve()
        if not file_path.exists():
            raise ConfigNotFoundError(config_path=str(file_path))

        content = file_path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in config file: {file_path}", cause=e) from e

        if parsed is None:
            return
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Config file must be a YAML mapping: {file_path}")
        self.merge(parsed, source=file_path)

    def merge(self, data: dict[str, Any], source: str | os.PathLike[str] | None = None) -> None:
        """Deep-merge ``data`` into this config, recording ``source`` for every key it sets."""
        source_path = str(Path(source).resolve()) if source is not None else None

        def _merge(target: dict[str, Any], incoming: dict[str, Any], prefix: tuple[str, ...]) -> None:
            for key, value in incoming.items():
                key_path = prefix + (str(key),)
                if isinstance(value, dict) and isinstance(target.get(key), dict):
                    _merge(target[key], value, key_path)
                else:
                    target[key] = value
                    if isinstance(value, dict):
                        self._record_nested(value, key_path, source_path)
                if source_path is not None:
                    self._sources[key_path] = source_path
                else:
                    self._sources.pop(key_path, None)

        _merge(self._data, data, ())

    def _record_nested(self, value: dict[str, Any], prefix: tuple[str, ...], source_path: str | None) -> None:
        for key, nested in value.items():
            key_path = prefix + (str(key),)
            if source_path is not None:
                self._sources[key_path] = source_path
            else:
                self._sources.pop(key_path, None)
            if isinstance(nested, dict):
                self._record_nested(nested, key_path, source_path)

    def get(self, key: ConfigKey, default: Any = None) -> Any:
        """Get a configuration value by dot-path or tuple key."""
        current: Any = self._data
        for part in _split_key(key):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def find_bool(self, key: ConfigKey, default: bool) -> bool:
        """Look up a boolean flag, falling back to ``default`` when absent or not a bool."""
        value = self.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            logger.warning("Config value for '%s' is not a boolean: %r, using %r", key, value, default)
            return default
        return value

    def find_absolute_path(self, key: ConfigKey) -> str | None:
        """Return the absolute path of the file that defined ``key``, if any."""
        return self._sources.get(_split_key(key))
