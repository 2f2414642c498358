"""filefilter: glob patterns and file filtering by name, size and mtime.

Example:
    >>> from filefilter import FileFilter
    >>> FileFilter().set_whitelist(["*.jpg"]).accepts("photo.jpg", size=2048)
    True
"""

from filefilter.core.constants import FILEFILTER_VERSION
from filefilter.rules import (
    CompiledPattern,
    FileFilter,
    Operator,
    PatternCompiler,
    PatternError,
    PatternErrorKind,
    PatternFlag,
    PredicateFormatError,
    compile_glob,
    compile_globs,
    parse_predicate,
    quote,
)
from filefilter.parsers import (
    SizeParseError,
    SizeParser,
    SizeRangeError,
    TemporalParseError,
    TemporalParser,
)
from filefilter.infrastructure import ConfigError, ConfigManager

__version__ = FILEFILTER_VERSION

__all__ = [
    "__version__",
    "CompiledPattern",
    "PatternCompiler",
    "PatternError",
    "PatternErrorKind",
    "PatternFlag",
    "compile_glob",
    "compile_globs",
    "quote",
    "Operator",
    "PredicateFormatError",
    "parse_predicate",
    "FileFilter",
    "SizeParser",
    "SizeParseError",
    "SizeRangeError",
    "TemporalParser",
    "TemporalParseError",
    "ConfigManager",
    "ConfigError",
]
