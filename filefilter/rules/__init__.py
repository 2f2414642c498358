"""filefilter rules.

This package provides the matching criteria of a FileFilter:
- patterns: glob to regex compilation and immutable regex patterns
- predicates: comparison predicates such as "> 1 KB < 1 MB"
- file_filter: FileFilter combining name, size and time criteria
"""

from .patterns import (
    CompiledPattern,
    PatternCompiler,
    PatternError,
    PatternErrorKind,
    PatternFlag,
    compile_glob,
    compile_globs,
    quote,
)
from .predicates import (
    Operator,
    PredicateClause,
    PredicateFormatError,
    UnknownOperatorError,
    compare,
    parse_predicate,
)
from .file_filter import FileFilter

__all__ = [
    # Patterns
    "PatternFlag",
    "PatternErrorKind",
    "PatternError",
    "CompiledPattern",
    "PatternCompiler",
    "compile_glob",
    "compile_globs",
    "quote",
    # Predicates
    "Operator",
    "PredicateClause",
    "PredicateFormatError",
    "UnknownOperatorError",
    "compare",
    "parse_predicate",
    # Filter
    "FileFilter",
]
