#!/usr/bin/env python3
"""Layered configuration for filefilter.

This module provides configuration management with:
- 4-level precedence hierarchy
- YAML configuration files
- Environment variable overrides
- Schema validation
- Thread-safe operations
- Deep merge of nested sections

Example configuration file:

    filefilter:
      filter:
        whitelist: ["*.jpg", "*.png"]
        blacklist: ["*.php.*"]
        size: "> 1 KB < 10 MB"
        mtime: ">= 2021-01-01"
      logging:
        level: DEBUG

Example:
    >>> config = ConfigManager()
    >>> config.load_file("filefilter.yaml")
    >>> config.get("filefilter.filter.size")
    '> 1 KB < 10 MB'
    >>> file_filter = config.build_filter()
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import yaml

from filefilter.core.constants import DEFAULT_CONFIG, ConfigKey, ErrorCode
from filefilter.core.validators import ValidationError, validate_config
from filefilter.infrastructure.logger import configure_logging, get_logger

if TYPE_CHECKING:
    from filefilter.rules.file_filter import FileFilter

logger = get_logger("filefilter.config")

ENV_PREFIX = "FILEFILTER_"
ENV_NESTING = "__"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    RUNTIME = 4  # Highest precedence


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigManager:
    """Thread-safe layered configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. User config file (YAML)
    3. Environment variables (FILEFILTER_<SECTION>__<KEY>)
    4. Runtime updates (highest)
    """

    def __init__(
        self, config_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
    ):
        """Initialize configuration manager.

        Args:
            config_file: Optional config file to load
            environ: Environment to read overrides from, os.environ by default
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        self._load_environment(os.environ if environ is None else environ)

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded, parsed or validated
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR)

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}")

        self.load_dict(config_data, source)
        logger.debug("Loaded config file", path=str(path), source=source.name)

    def load_dict(
        self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.RUNTIME
    ) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level

        Raises:
            ConfigError: If the configuration is invalid
        """
        try:
            validate_config(config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}", e.error_code)

        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self, environ: Mapping[str, str]) -> None:
        """Load configuration from environment variables.

        Environment variables in format: FILEFILTER_<SECTION>__<KEY>=value
        Example: FILEFILTER_FILTER__SIZE="> 1 KB"
        """
        env_config: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX) :].lower().split(ENV_NESTING)

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = self._parse_env_value(value)

        if env_config:
            self.load_dict({ConfigKey.ROOT: env_config}, ConfigSource.ENVIRONMENT)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value.

        Args:
            value: String value from environment

        Returns:
            Parsed value (bool, int, float, or str)
        """
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "filefilter.filter.size")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._get_nested(self.get_all(), key)
        return default if value is None else value

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            current = self._config.setdefault(source, {})

            parts = key.split(".")
            for part in parts[:-1]:
                current = current.setdefault(part, {})

            current[parts[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        with self._lock:
            merged: Dict[str, Any] = {}

            # Merge from lowest to highest precedence
            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])

            return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = copy.deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def filter_section(self) -> Dict[str, Any]:
        """Merged ``filefilter.filter`` section."""
        return self.get(f"{ConfigKey.ROOT}.{ConfigKey.FILTER}", {})

    def build_filter(self) -> "FileFilter":
        """Build a FileFilter from the merged filter section.

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        from filefilter.rules.file_filter import FileFilter

        section = self.filter_section()
        try:
            return FileFilter.from_config(section)
        except ValidationError as e:
            raise ConfigError(f"Invalid filter configuration: {e}", e.error_code)

    def apply_logging(self) -> None:
        """Apply the merged logging section to the package loggers."""
        section = self.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}", {})
        configure_logging(
            section.get(ConfigKey.LOG_LEVEL) or "INFO", section.get(ConfigKey.LOG_FILE)
        )

    def clear(self, source: Optional[ConfigSource] = None) -> None:
        """Clear configuration.

        Args:
            source: Specific source to clear, or None for all except defaults
        """
        with self._lock:
            if source:
                if source in self._config and source != ConfigSource.COMPILED_DEFAULTS:
                    del self._config[source]
            else:
                for s in [s for s in self._config if s != ConfigSource.COMPILED_DEFAULTS]:
                    del self._config[s]


# Global config manager instance
_global_config: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[str] = None) -> ConfigManager:
    """Get or create global configuration manager.

    Args:
        config_file: Optional config file to load

    Returns:
        Global configuration manager
    """
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager(config_file)
    return _global_config


def set_global_config(config: Optional[ConfigManager]) -> None:
    """Set the global configuration manager.

    Args:
        config: Configuration manager to use globally, None to reset
    """
    global _global_config
    _global_config = config
