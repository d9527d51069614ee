"""Configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from extreg.errors import ConfigError, ConfigNotFoundError

__all__ = ["Config", "LoaderSettings", "DEFAULT_PLUGIN_DIR", "DEFAULT_TRANSFORMER_FACTORY"]

DEFAULT_PLUGIN_DIR = "./plugins"
DEFAULT_ARCHIVE_SUFFIXES = (".zip", ".pyz")
DEFAULT_TRANSFORMER_FACTORY = "extreg.host:TransformerFactory"

_ENV_KEYS = {
    "EXTREG_PLUGINS": "plugins",
    "EXTREG_TRANSFORMER_FACTORY": "transformer.factory",
}


class Config:
    """Configuration accessor with dot-path key support."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML mapping file."""
        path = Path(path)
        if not path.exists():
            raise ConfigNotFoundError(config_path=str(path))
        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in config file: {path}") from e
        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Config file must be a YAML mapping: {path}")
        return cls(parsed)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Config:
        """Build configuration from ``EXTREG_*`` environment variables."""
        environ = os.environ if environ is None else environ
        config = cls()
        for env_key, key in _ENV_KEYS.items():
            value = environ.get(env_key)
            if value:
                config.set(key, value)
        return config

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

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-path key, creating parents as needed."""
        parts = key.split(".")
        current = self._data
        for part in parts[:-1]:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[parts[-1]] = value


def _split_paths(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    return [str(part).strip() for part in value if str(part).strip()]


class LoaderSettings(BaseModel):
    """Validated settings for plugin discovery and the host engine."""

    plugins: list[str] = [DEFAULT_PLUGIN_DIR]
    archive_suffixes: list[str] = list(DEFAULT_ARCHIVE_SUFFIXES)
    transformer_factory: str = DEFAULT_TRANSFORMER_FACTORY

    @field_validator("plugins", mode="before")
    @classmethod
    def _split_plugins(cls, value: Any) -> list[str]:
        return _split_paths(value)

    @field_validator("archive_suffixes", mode="before")
    @classmethod
    def _normalize_suffixes(cls, value: Any) -> list[str]:
        suffixes = _split_paths(value)
        if not suffixes:
            raise ValueError("at least one archive suffix is required")
        return [s.lower() if s.startswith(".") else f".{s.lower()}" for s in suffixes]

    @field_validator("transformer_factory")
    @classmethod
    def _check_import_path(cls, value: str) -> str:
        module, _, attr = value.partition(":")
        if not module or not attr:
            raise ValueError(f"expected 'module:attribute', got '{value}'")
        return value

    @classmethod
    def from_config(cls, config: Config | None = None) -> LoaderSettings:
        """Build settings from a Config, falling back to defaults for missing keys."""
        if config is None:
            return cls()
        raw: dict[str, Any] = {}
        for field_name, key in (
            ("plugins", "plugins"),
            ("archive_suffixes", "plugins.suffixes"),
            ("transformer_factory", "transformer.factory"),
        ):
            value = config.get(key)
            if value is not None and not isinstance(value, dict):
                raw[field_name] = value
        dirs = config.get("plugins.dirs")
        if dirs is not None:
            raw["plugins"] = dirs
        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(message=f"Invalid loader settings: {e}", cause=e) from e
