"""filefilter infrastructure.

Services shared by the rules and parsers:
- Logger: Structured logging system
- ConfigManager: Layered configuration from YAML, environment and runtime
"""

from .logger import Logger, LogLevel, configure_logging, get_logger, set_global_logger
from .config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    get_config_manager,
    set_global_config,
)

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "configure_logging",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigError",
    "ConfigManager",
    "get_config_manager",
    "set_global_config",
]
