#!/usr/bin/env python3
"""File filter by name, size and modification time.

A FileFilter combines independent criteria; a file is accepted only when
every configured criterion holds:
- Whitelist of globs the name must match
- Blacklist of globs the name must not match
- Regular expression the name must match
- Size predicate ("> 1 KB < 1 MB")
- Modification time predicate (">= 2021-01-01")

Example:
    >>> file_filter = (
    ...     FileFilter()
    ...     .set_whitelist(["*.jpg", "*.png"])
    ...     .set_blacklist(["*.php.*"])
    ...     .set_size_predicate("> 1 KB < 1 MB")
    ... )
    >>> file_filter.name_matches("photo.jpg")
    True
    >>> file_filter.name_matches("shell.php.jpg")
    False
    >>> file_filter.size_matches(1024)
    False
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from filefilter.core.constants import ConfigKey, Limits
from filefilter.core.validators import split_glob_list, validate_filter_config
from filefilter.infrastructure.logger import get_logger
from filefilter.parsers.size import SizeParser
from filefilter.parsers.temporal import Instant, TemporalParser
from filefilter.rules.patterns import MODIFIERS, CompiledPattern, PatternFlag, compile_globs
from filefilter.rules.predicates import Operator, PredicateClause, parse_predicate

logger = get_logger("filefilter.rules")


class FileFilter:
    """Accepts or rejects files by name, size and modification time.

    Setters replace the corresponding criterion and return the filter for
    chaining. Configure a filter before sharing it; the query methods only
    read already resolved criteria.
    """

    def __init__(
        self,
        size_parser: Optional[SizeParser] = None,
        temporal_parser: Optional[TemporalParser] = None,
    ):
        """Initialize an empty filter that accepts everything.

        Args:
            size_parser: Parser for size predicate values
            temporal_parser: Parser for time predicate values
        """
        self._size_parser = size_parser or SizeParser()
        self._temporal_parser = temporal_parser or TemporalParser()
        self._whitelist: Optional[CompiledPattern] = None
        self._blacklist: Optional[CompiledPattern] = None
        self._name_regex: Optional[CompiledPattern] = None
        self._size_clauses: Tuple[PredicateClause, ...] = ()
        self._time_clauses: Tuple[PredicateClause, ...] = ()

    @property
    def whitelist(self) -> Optional[CompiledPattern]:
        return self._whitelist

    @property
    def blacklist(self) -> Optional[CompiledPattern]:
        return self._blacklist

    @property
    def name_regex(self) -> Optional[CompiledPattern]:
        return self._name_regex

    @property
    def size_clauses(self) -> Tuple[PredicateClause, ...]:
        return self._size_clauses

    @property
    def time_clauses(self) -> Tuple[PredicateClause, ...]:
        return self._time_clauses

    def set_whitelist(
        self,
        globs: Union[str, Iterable[str]],
        separator: str = Limits.DEFAULT_SEPARATOR,
        case_fold: bool = Limits.DEFAULT_CASE_FOLD,
    ) -> "FileFilter":
        """Set the globs of allowed file names.

        Args:
            globs: Shell wildcard patterns, or one comma-separated string;
                an empty list removes the whitelist
            separator: Directory structure separator(s)
            case_fold: Whether names match case-insensitively

        Returns:
            This filter
        """
        self._whitelist = self._compile_list(globs, separator, case_fold)
        logger.debug("Whitelist set", pattern=self._whitelist)
        return self

    def set_blacklist(
        self,
        globs: Union[str, Iterable[str]],
        separator: str = Limits.DEFAULT_SEPARATOR,
        case_fold: bool = Limits.DEFAULT_CASE_FOLD,
    ) -> "FileFilter":
        """Set the globs of rejected file names.

        Same arguments as set_whitelist().
        """
        self._blacklist = self._compile_list(globs, separator, case_fold)
        logger.debug("Blacklist set", pattern=self._blacklist)
        return self

    def set_name_regex(self, pattern: Union[CompiledPattern, str]) -> "FileFilter":
        """Set the regular expression file names must match.

        Args:
            pattern: Pattern, or a raw regex compiled without flags
        """
        if not isinstance(pattern, CompiledPattern):
            pattern = CompiledPattern(pattern)
        self._name_regex = pattern
        logger.debug("Name regex set", pattern=pattern)
        return self

    def set_size_predicate(self, predicate: Union[str, int]) -> "FileFilter":
        """Set the predicate file sizes must satisfy.

        Examples:
            1024             exactly 1024 bytes
            "1KB", "= 1 KB"  exactly 1024 bytes
            "< 1 MB"         less than 1 MB
            "> 1 KB < 1 MB"  more than 1 KB and less than 1 MB

        Args:
            predicate: Predicate text, or a size in bytes

        Returns:
            This filter

        Raises:
            PredicateFormatError: If the predicate cannot be recognized
            SizeParseError: If a value cannot be parsed as a size
        """
        if isinstance(predicate, bool) or not isinstance(predicate, (int, str)):
            raise TypeError(f"Unsupported size predicate: {type(predicate).__name__}")

        if isinstance(predicate, int):
            clauses = [PredicateClause(Operator.EQ, predicate)]
        else:
            clauses = [
                PredicateClause(operator, self._size_parser.parse(raw))
                for operator, raw in parse_predicate(predicate)
            ]

        self._size_clauses = tuple(clauses)
        logger.debug("Size predicate set", predicate=predicate, clauses=self._describe(clauses))
        return self

    def set_time_predicate(self, predicate: Instant) -> "FileFilter":
        """Set the predicate modification times must satisfy.

        Examples:
            datetime(2021, 3, 1)         exactly that instant
            1614556800                   exactly that Unix timestamp
            "2021-03-01", "= 2021-03-01" exactly that date, midnight
            "<> 2021-03-01"              anything but that instant
            "> 2021-01-01 < 2021-03-01"  between these two dates

        Args:
            predicate: Predicate text, epoch seconds or a datetime

        Returns:
            This filter

        Raises:
            PredicateFormatError: If the predicate cannot be recognized
            TemporalParseError: If a value cannot be parsed as a date-time
        """
        if isinstance(predicate, str):
            clauses = [
                PredicateClause(operator, self._temporal_parser.parse(raw))
                for operator, raw in parse_predicate(predicate)
            ]
        else:
            clauses = [PredicateClause(Operator.EQ, self._temporal_parser.coerce(predicate))]

        self._time_clauses = tuple(clauses)
        logger.debug("Time predicate set", predicate=predicate, clauses=self._describe(clauses))
        return self

    def name_matches(self, name: str) -> bool:
        """Check a file name against the whitelist, blacklist and regex.

        Returns True only if the name:
            - matches the whitelist, or no whitelist is set
            - and does not match the blacklist, or no blacklist is set
            - and matches the regex, or no regex is set

        Raises:
            PatternError: If the regex engine fails on a pattern
        """
        if self._whitelist is not None and not self._whitelist.match(name):
            return False

        if self._blacklist is not None and self._blacklist.match(name):
            return False

        if self._name_regex is not None and not self._name_regex.match(name):
            return False

        return True

    def size_matches(self, size: int) -> bool:
        """Check a size in bytes against every size clause."""
        return all(clause.test(size) for clause in self._size_clauses)

    def mtime_matches(self, mtime: Instant) -> bool:
        """Check a modification time against every time clause.

        Args:
            mtime: datetime, epoch seconds or date-time text

        Raises:
            TemporalParseError: If text or number cannot be parsed
        """
        if not self._time_clauses:
            return True
        instant = self._temporal_parser.coerce(mtime)
        return all(clause.test(instant) for clause in self._time_clauses)

    def accepts(
        self, name: str, size: Optional[int] = None, mtime: Optional[Instant] = None
    ) -> bool:
        """Check a file by name and, when given, by size and mtime."""
        if not self.name_matches(name):
            return False
        if size is not None and not self.size_matches(size):
            return False
        if mtime is not None and not self.mtime_matches(mtime):
            return False
        return True

    @classmethod
    def from_config(
        cls,
        section: Mapping[str, Any],
        size_parser: Optional[SizeParser] = None,
        temporal_parser: Optional[TemporalParser] = None,
    ) -> "FileFilter":
        """Build a filter from a filter configuration section.

        Keys: separator, case_fold, whitelist, blacklist, name_regex,
        name_regex_flags, size, mtime. Missing or empty keys leave the
        criterion unset.

        Raises:
            ValidationError: If the section is invalid
        """
        validate_filter_config(dict(section))
        file_filter = cls(size_parser, temporal_parser)

        separator = section.get(ConfigKey.SEPARATOR)
        if separator is None:
            separator = Limits.DEFAULT_SEPARATOR
        case_fold = section.get(ConfigKey.CASE_FOLD, Limits.DEFAULT_CASE_FOLD)

        whitelist = _glob_list(section.get(ConfigKey.WHITELIST))
        if whitelist:
            file_filter.set_whitelist(whitelist, separator, case_fold)

        blacklist = _glob_list(section.get(ConfigKey.BLACKLIST))
        if blacklist:
            file_filter.set_blacklist(blacklist, separator, case_fold)

        regex = section.get(ConfigKey.NAME_REGEX)
        if regex:
            flags = _flags_from_modifiers(section.get(ConfigKey.NAME_REGEX_FLAGS) or [])
            file_filter.set_name_regex(CompiledPattern(regex, flags))

        if section.get(ConfigKey.SIZE) is not None:
            file_filter.set_size_predicate(section[ConfigKey.SIZE])

        if section.get(ConfigKey.MTIME) is not None:
            file_filter.set_time_predicate(section[ConfigKey.MTIME])

        return file_filter

    @staticmethod
    def _compile_list(
        globs: Union[str, Iterable[str]], separator: str, case_fold: bool
    ) -> Optional[CompiledPattern]:
        globs = _glob_list(globs)
        if not globs:
            return None
        return compile_globs(globs, separator, case_fold)

    @staticmethod
    def _describe(clauses: List[PredicateClause]) -> str:
        return ", ".join(str(clause) for clause in clauses)

    def __repr__(self) -> str:
        return (
            f"FileFilter(whitelist={self._whitelist}, blacklist={self._blacklist}, "
            f"name_regex={self._name_regex}, size=[{self._describe(list(self._size_clauses))}], "
            f"mtime=[{self._describe(list(self._time_clauses))}])"
        )


def _glob_list(value: Union[None, str, List[str]]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return split_glob_list(value)
    return list(value)


def _flags_from_modifiers(modifiers: Union[str, List[str]]) -> PatternFlag:
    letters = "".join(modifiers)
    flags = PatternFlag.NONE
    for flag, letter in MODIFIERS:
        if letter in letters:
            flags |= flag
    return flags
