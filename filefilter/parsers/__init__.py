"""Parsers for the values compared by size and time predicates.

- SizeParser: sizes with binary units ("1 KB", "1,5 MiB")
- TemporalParser: free-form date-time text and epoch seconds
"""

from .size import SizeParseError, SizeParser, SizeRangeError
from .temporal import TemporalParseError, TemporalParser

__all__ = [
    "SizeParser",
    "SizeParseError",
    "SizeRangeError",
    "TemporalParser",
    "TemporalParseError",
]
