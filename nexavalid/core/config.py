"""
NexaValid Configuration Management
==================================

Layered configuration with dot-notation access.

Configuration Loading Priority (highest to lowest):
1. Runtime overrides (`Config.set`)
2. Environment variables (NEXAVALID_*)
3. Sources added with `add_source`
4. Default values

Recognized keys:
    validation.strict   reject unknown rules and malformed bounds (False)
    logging.level       minimum log level name ("WARNING")
    logging.format      "text" or "json" ("text")
    http.timeout        request timeout in seconds (10.0)

Example:
    # NEXAVALID_VALIDATION_STRICT=true in the environment
    config = get_config()
    config.get_bool("validation.strict")  # True
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TypeVar, Union

import orjson

from nexavalid.utils.logger import configure_logging

T = TypeVar("T")

ENV_PREFIX = "NEXAVALID_"

DEFAULTS: Dict[str, Any] = {
    "validation": {"strict": False},
    "logging": {"level": "WARNING", "format": "text"},
    "http": {"timeout": 10.0},
}


@dataclass
class ConfigSource:
    """Represents a configuration source with priority."""
    name: str
    data: Dict[str, Any]
    priority: int = 0


class Config:
    """
    Configuration container.

    Example:
        config = Config()
        config.set("validation.strict", True)

        config.get("validation.strict")       # True
        config.get("missing.key", "default")  # "default"
    """

    def __init__(self, load_env: bool = True) -> None:
        self._sources: List[ConfigSource] = []
        self._cache: Dict[str, Any] = {}
        self._merged: Dict[str, Any] = {}
        self._dirty = True

        self.add_source("defaults", DEFAULTS, priority=0)
        if load_env:
            self._load_env_overrides()

    def _load_env_overrides(self) -> None:
        """Load overrides from NEXAVALID_* environment variables."""
        overrides: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                # NEXAVALID_VALIDATION_STRICT -> validation.strict
                config_key = key[len(ENV_PREFIX):].lower().replace("_", ".")
                overrides[config_key] = self._parse_env_value(value)

        if overrides:
            self.add_source("env_vars", self._unflatten(overrides), priority=100)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        # JSON (for complex values)
        if value.startswith(("{", "[")):
            try:
                return orjson.loads(value)
            except orjson.JSONDecodeError:
                pass

        return value

    def _unflatten(self, flat: Dict[str, Any]) -> Dict[str, Any]:
        """Convert flat dot-notation keys to nested dict."""
        result: Dict[str, Any] = {}

        for key, value in flat.items():
            parts = key.split(".")
            current = result

            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = value

        return result

    def add_source(
        self,
        name: str,
        data: Dict[str, Any],
        priority: int = 0,
    ) -> None:
        """Add a configuration source."""
        self._sources.append(ConfigSource(name=name, data=data, priority=priority))
        self._dirty = True
        self._cache.clear()

    def _merge(self) -> None:
        """Merge all sources into single configuration."""
        if not self._dirty:
            return

        # Lower priority first, so higher overrides
        self._merged = {}
        for source in sorted(self._sources, key=lambda s: s.priority):
            self._deep_merge(self._merged, source.data)

        self._dirty = False
        self._cache.clear()

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            elif isinstance(value, dict):
                base[key] = {}
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: T = None) -> Union[Any, T]:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "validation.strict")
            default: Default value if key not found
        """
        self._merge()

        if key in self._cache:
            return self._cache[key]

        current: Any = self._merged
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        self._cache[key] = current
        return current

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "on", "1")
        return bool(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set a runtime configuration value.

        Runtime values have the highest priority.
        """
        runtime_source = next((s for s in self._sources if s.name == "runtime"), None)
        if runtime_source is None:
            runtime_source = ConfigSource(name="runtime", data={}, priority=1000)
            self._sources.append(runtime_source)

        parts = key.split(".")
        current = runtime_source.data
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

        self._dirty = True

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def section(self, prefix: str) -> Dict[str, Any]:
        """Get all values under a prefix."""
        value = self.get(prefix)
        if isinstance(value, dict):
            return dict(value)
        return {}

    def __getitem__(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.has(key)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the global configuration so the next access reloads it."""
    global _config
    _config = None


def apply_logging(config: Optional[Config] = None) -> None:
    """Configure NexaValid logging from `logging.*` settings."""
    config = config or get_config()
    configure_logging(
        level=config.get("logging.level", "WARNING"),
        format=config.get("logging.format", "text"),
    )
