"""
FileFilter Core: Input Validators.

This module provides validation functions for filter configuration,
glob lists, separators and predicate values.
"""
from typing import Any, Dict, List, Union

from filefilter.core.constants import FILTER_KEYS, ConfigKey, ErrorCode, Limits

MODIFIER_LETTERS = "imsxu"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate the top-level configuration structure.

    Args:
        config: Configuration dictionary (with or without the root key)

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    section = config.get(ConfigKey.ROOT, config)
    if not isinstance(section, dict):
        raise ValidationError(f"'{ConfigKey.ROOT}' section must be a dictionary")

    if ConfigKey.FILTER in section:
        validate_filter_config(section[ConfigKey.FILTER])

    if ConfigKey.LOGGING in section:
        validate_logging_config(section[ConfigKey.LOGGING])

    return True


def validate_filter_config(section: Dict[str, Any]) -> bool:
    """Validate the filter section of the configuration.

    Args:
        section: Filter configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If the section is invalid
    """
    if not isinstance(section, dict):
        raise ValidationError("Filter configuration must be a dictionary")

    unknown = [key for key in section if key not in FILTER_KEYS]
    if unknown:
        raise ValidationError(f"Unknown filter configuration fields: {', '.join(sorted(unknown))}")

    if section.get(ConfigKey.SEPARATOR) is not None:
        validate_separator(section[ConfigKey.SEPARATOR])

    if ConfigKey.CASE_FOLD in section and not isinstance(section[ConfigKey.CASE_FOLD], bool):
        raise ValidationError(f"case_fold must be boolean: {section[ConfigKey.CASE_FOLD]}")

    for key in (ConfigKey.WHITELIST, ConfigKey.BLACKLIST):
        globs = section.get(key)
        if globs is None:
            continue
        try:
            validate_glob_list(globs)
        except ValidationError as e:
            raise ValidationError(f"Invalid {key}: {e}")

    regex = section.get(ConfigKey.NAME_REGEX)
    if regex is not None and (not isinstance(regex, str) or not regex):
        raise ValidationError(f"name_regex must be a non-empty string: {regex!r}")

    flags = section.get(ConfigKey.NAME_REGEX_FLAGS)
    if flags:
        validate_modifiers(flags)

    for key in (ConfigKey.SIZE, ConfigKey.MTIME):
        if section.get(key) is not None:
            validate_predicate_value(section[key], key)

    return True


def validate_logging_config(section: Dict[str, Any]) -> bool:
    """Validate the logging section of the configuration."""
    if not isinstance(section, dict):
        raise ValidationError("Logging configuration must be a dictionary")

    level = section.get(ConfigKey.LOG_LEVEL)
    if level is not None and str(level).upper() not in LOG_LEVELS:
        raise ValidationError(f"Invalid log level: {level}. Must be one of {list(LOG_LEVELS)}")

    return True


def validate_glob(pattern: str) -> bool:
    """Validate glob pattern.

    Args:
        pattern: Glob pattern string

    Returns:
        True if valid

    Raises:
        ValidationError: If pattern is invalid
    """
    if not isinstance(pattern, str):
        raise ValidationError(f"Glob pattern must be string, got {type(pattern)}")

    if not pattern:
        raise ValidationError("Glob pattern cannot be empty")

    # Check length
    if len(pattern) > Limits.MAX_PATTERN_LENGTH:
        raise ValidationError(f"Glob pattern exceeds maximum length ({Limits.MAX_PATTERN_LENGTH})")

    # Check for null bytes
    if "\0" in pattern:
        raise ValidationError("Invalid glob pattern: contains null bytes")

    return True


def validate_glob_list(globs: Union[List[str], str]) -> bool:
    """Validate a list of globs or a comma-separated glob string."""
    if isinstance(globs, str):
        globs = split_glob_list(globs)

    if not isinstance(globs, list):
        raise ValidationError(f"Glob list must be a list, got {type(globs).__name__}")

    for glob in globs:
        validate_glob(glob)

    return True


def split_glob_list(text: str) -> List[str]:
    """Split a comma-separated glob string into its non-empty items."""
    return [item.strip() for item in text.split(",") if item.strip()]


def validate_separator(separator: str) -> bool:
    """Validate the directory structure separator(s).

    An empty string is valid and disables separator handling.
    """
    if not isinstance(separator, str):
        raise ValidationError(f"Separator must be string, got {type(separator)}")

    if len(separator) > Limits.MAX_SEPARATOR_LENGTH:
        raise ValidationError(
            f"Separator exceeds maximum length ({Limits.MAX_SEPARATOR_LENGTH})"
        )

    return True


def validate_modifiers(modifiers: Union[List[str], str]) -> bool:
    """Validate pattern modifier letters (i, m, s, x, u)."""
    letters = "".join(modifiers) if isinstance(modifiers, list) else modifiers
    if not isinstance(letters, str):
        raise ValidationError(f"Modifiers must be string or list, got {type(modifiers)}")

    invalid = sorted({c for c in letters if c not in MODIFIER_LETTERS})
    if invalid:
        raise ValidationError(
            f"Invalid pattern modifiers: {', '.join(invalid)}. "
            f"Must be any of '{MODIFIER_LETTERS}'"
        )

    return True


def validate_predicate_value(value: Any, name: str = "predicate") -> bool:
    """Validate the raw type of a size or time predicate.

    Only the type is checked here; the predicate grammar is checked when
    the predicate is parsed. Time predicates also accept float epoch
    seconds, sizes do not.
    """
    if name == ConfigKey.MTIME:
        types, expected = (int, float, str), "string or number"
    else:
        types, expected = (int, str), "string or integer"

    if isinstance(value, bool) or not isinstance(value, types):
        raise ValidationError(f"{name} must be {expected}, got {type(value).__name__}")

    if isinstance(value, str) and not value.strip():
        raise ValidationError(f"{name} cannot be empty")

    return True
