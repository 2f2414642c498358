"""
FileFilter Core: Constants and Type Definitions

This module provides package-wide constants, error codes, and type definitions.
"""
from enum import IntEnum
from typing import TypeAlias

# Version information
FILEFILTER_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for filter operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad predicate, glob or configuration
    NOT_FOUND = 2  # Configuration file doesn't exist
    PATTERN_ERROR = 3  # Regex engine rejected a pattern or subject
    PARSE_ERROR = 4  # Size or date-time text could not be parsed
    OUT_OF_RANGE = 5  # Parsed value outside of the representable range
    INTERNAL_ERROR = 6  # Bug in filefilter


# Type aliases for clarity
Glob: TypeAlias = str
Regex: TypeAlias = str
Separator: TypeAlias = str


# Resource limits and defaults
class Limits:
    """Limits and default values."""

    # Pattern limits
    MAX_PATTERN_LENGTH = 4096
    MAX_SEPARATOR_LENGTH = 16

    # Byte values of binary units (JEDEC / ISO/IEC 80000)
    KB = 1024
    MB = 1024**2
    GB = 1024**3
    TB = 1024**4

    # Size range
    MIN_SIZE = 0
    MAX_SIZE = 2**63 - 1

    # Glob defaults
    DEFAULT_SEPARATOR = "/"
    DEFAULT_CASE_FOLD = True

    # Rendered pattern delimiter
    PATTERN_DELIMITER = "~"


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    # Top-level keys
    ROOT = "filefilter"
    FILTER = "filter"
    LOGGING = "logging"

    # Filter section
    SEPARATOR = "separator"
    CASE_FOLD = "case_fold"
    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"
    NAME_REGEX = "name_regex"
    NAME_REGEX_FLAGS = "name_regex_flags"
    SIZE = "size"
    MTIME = "mtime"

    # Logging section
    LOG_LEVEL = "level"
    LOG_FILE = "file"


FILTER_KEYS = (
    ConfigKey.SEPARATOR,
    ConfigKey.CASE_FOLD,
    ConfigKey.WHITELIST,
    ConfigKey.BLACKLIST,
    ConfigKey.NAME_REGEX,
    ConfigKey.NAME_REGEX_FLAGS,
    ConfigKey.SIZE,
    ConfigKey.MTIME,
)


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        ConfigKey.FILTER: {
            ConfigKey.SEPARATOR: Limits.DEFAULT_SEPARATOR,
            ConfigKey.CASE_FOLD: Limits.DEFAULT_CASE_FOLD,
            ConfigKey.WHITELIST: [],
            ConfigKey.BLACKLIST: [],
            ConfigKey.NAME_REGEX: None,
            ConfigKey.NAME_REGEX_FLAGS: [],
            ConfigKey.SIZE: None,
            ConfigKey.MTIME: None,
        },
        ConfigKey.LOGGING: {
            ConfigKey.LOG_LEVEL: "INFO",
            ConfigKey.LOG_FILE: None,
        },
    }
}
