#!/usr/bin/env python3
r"""Regular expression patterns compiled from shell wildcards.

This module provides the pattern layer of filefilter:
- Glob to regex translation with explicit separator semantics
- Literal quoting of text for safe inclusion in a regex
- Named placeholders bound to quoted literal values
- Immutable, delimited pattern values with modifier flags
- Typed errors raised by the regex engine at match time

Glob syntax:
    *      matches zero or more characters, except the separator(s)
    **     matches zero or more characters, including the separator(s)
    ?      matches exactly one character, except the separator(s)
    [abc]  matches one character given in the bracket
    [a-z]  matches one character from the range given in the bracket
    [!a-z] matches one character that is not in the bracket
    \c     matches the character c literally

A bracket expression never matches a separator, even when the separator
falls inside the given range (e.g. "[.-0]" with separator "/").

Example:
    >>> pattern = compile_glob("*.jpg")
    >>> str(pattern)
    '~^[^/]*\\.jpg$~i'
    >>> pattern.match("photo.JPG")
    True
    >>> pattern.match("albums/photo.jpg")
    False
"""

import re
from enum import IntEnum, IntFlag
from functools import cached_property
from typing import Dict, Iterable, Mapping, Optional, Pattern, Union

from filefilter.core.constants import ErrorCode, Glob, Limits, Regex, Separator
from filefilter.infrastructure.logger import get_logger

logger = get_logger("filefilter.rules")

Subject = Union[str, bytes]

# Characters with regex-syntax significance, escaped by quote()
SPECIAL_CHARACTERS = frozenset(".\\+*?[^]$(){}=!<>|:-#")


class PatternFlag(IntFlag):
    """Pattern modifier flags.

    The values are stable: persisted flag combinations keep their meaning.
    """

    NONE = 0
    CASE_INSENSITIVE = 1  # "i"
    MULTILINE = 2  # "m"
    DOTALL = 4  # "s"
    COMMENTS = 8  # "x", whitespace and comments in pattern
    UNICODE = 16  # "u", pattern and subject are UTF-8 text


# Modifier letters in rendering order
MODIFIERS = (
    (PatternFlag.CASE_INSENSITIVE, "i"),
    (PatternFlag.MULTILINE, "m"),
    (PatternFlag.DOTALL, "s"),
    (PatternFlag.COMMENTS, "x"),
    (PatternFlag.UNICODE, "u"),
)

_ENGINE_FLAGS = {
    PatternFlag.CASE_INSENSITIVE: re.IGNORECASE,
    PatternFlag.MULTILINE: re.MULTILINE,
    PatternFlag.DOTALL: re.DOTALL,
    PatternFlag.COMMENTS: re.VERBOSE,
}


class PatternErrorKind(IntEnum):
    """Diagnostic reported by the regex engine."""

    COMPILATION_FAILED = 0
    INTERNAL = 1
    BACKTRACK_LIMIT = 2
    RECURSION_LIMIT = 3
    MALFORMED_ENCODING = 4
    BAD_ENCODING_OFFSET = 5


ERROR_MESSAGES: Mapping[PatternErrorKind, str] = {
    PatternErrorKind.COMPILATION_FAILED: "Compilation failed due to unknown error.",
    PatternErrorKind.INTERNAL: "Regex engine internal error occurred.",
    PatternErrorKind.BACKTRACK_LIMIT: "Regex engine backtracking limit exhausted.",
    PatternErrorKind.RECURSION_LIMIT: "Regex engine recursion limit exhausted.",
    PatternErrorKind.MALFORMED_ENCODING: (
        "Malformed UTF-8 characters, possibly incorrectly encoded."
    ),
    PatternErrorKind.BAD_ENCODING_OFFSET: (
        "The offset did not correspond to the beginning of a valid UTF-8 code point."
    ),
}


class PatternError(Exception):
    """Error raised while compiling or running a pattern."""

    def __init__(
        self,
        kind: PatternErrorKind,
        message: Optional[str] = None,
        pattern: Optional[str] = None,
    ):
        self.kind = kind
        self.message = message or ERROR_MESSAGES[kind]
        self.pattern = pattern
        self.error_code = ErrorCode.PATTERN_ERROR
        super().__init__(self.message)


class CompiledPattern:
    r"""Immutable regular expression pattern with modifier flags.

    The pattern keeps the regex source (placeholders already substituted),
    the flags, and the delimited string form ``~source~flags``. Construction
    never fails; the regex engine only sees the pattern on first use, so a
    malformed regex surfaces as a PatternError from match().

    Example:
        >>> CompiledPattern(r"^(host\.)?example\.com$", binds={"host": "a.b"}).regex
        '^(a\\.b\\.)?example\\.com$'
    """

    DELIMITER = Limits.PATTERN_DELIMITER

    def __init__(
        self,
        regex: str,
        flags: Optional[Union[PatternFlag, int]] = None,
        binds: Optional[Mapping[str, str]] = None,
    ):
        """Create pattern.

        Args:
            regex: The regular expression, without delimiter and modifiers
            flags: Bit mask of PatternFlag values
            binds: Placeholder names mapped to literal values. Values are
                quoted automatically and are not scanned for placeholders.
        """
        self._regex = self._bind_values(regex, binds)
        self._flags = PatternFlag(flags or 0)
        self._compiled_pattern = self._render(self._regex, self._flags)

    @property
    def regex(self) -> str:
        """Regex source with placeholders replaced by their bound values."""
        return self._regex

    @property
    def flags(self) -> PatternFlag:
        return self._flags

    @property
    def modifiers(self) -> str:
        """Modifier letters of this pattern's flags."""
        return "".join(letter for flag, letter in MODIFIERS if self._flags & flag)

    def is_valid(self) -> bool:
        """Check whether the engine accepts this pattern.

        Returns:
            True if matching the empty string raises no PatternError
        """
        try:
            self.match("")
            return True
        except PatternError:
            return False

    def match(self, subject: Subject, offset: int = 0) -> bool:
        """Search ``subject`` for this pattern.

        Args:
            subject: Text to match; bytes are decoded according to the flags
            offset: Position in ``subject`` where the search starts

        Returns:
            True if the pattern matches

        Raises:
            PatternError: If the engine rejects the pattern or the subject
        """
        return self.search(subject, offset) is not None

    def search(self, subject: Subject, offset: int = 0) -> Optional["re.Match[str]"]:
        """Search ``subject`` and return the engine's match object.

        Same as match() but gives access to capture groups.
        """
        text, position = self._prepare_subject(subject, offset)
        engine = self._engine
        try:
            return engine.search(text, position)
        except RecursionError:
            raise self._error(PatternErrorKind.RECURSION_LIMIT)
        except MemoryError:
            raise self._error(PatternErrorKind.INTERNAL)

    @cached_property
    def _engine(self) -> Pattern[str]:
        if self._flags & PatternFlag.UNICODE:
            self._check_encoding(self._regex)
        try:
            return re.compile(self._body, self._engine_flags())
        except re.error as e:
            raise self._error(PatternErrorKind.COMPILATION_FAILED, f"Compilation failed: {e}")
        except RecursionError:
            raise self._error(PatternErrorKind.RECURSION_LIMIT)
        except (MemoryError, OverflowError):
            raise self._error(PatternErrorKind.INTERNAL)

    @property
    def _body(self) -> str:
        """Delimiter-escaped regex, as enclosed by the delimiters."""
        return self._compiled_pattern[1 : self._compiled_pattern.rindex(self.DELIMITER)]

    def _engine_flags(self) -> int:
        flags = re.UNICODE if self._flags & PatternFlag.UNICODE else re.ASCII
        for flag, engine_flag in _ENGINE_FLAGS.items():
            if self._flags & flag:
                flags |= engine_flag
        return flags

    def _prepare_subject(self, subject: Subject, offset: int):
        """Decode the subject and translate the offset to a text position."""
        unicode = bool(self._flags & PatternFlag.UNICODE)

        if offset < 0 or offset > len(subject):
            raise self._error(
                PatternErrorKind.INTERNAL, f"Offset {offset} is outside of the subject."
            )

        if isinstance(subject, (bytes, bytearray)):
            if not unicode:
                return bytes(subject).decode("latin-1"), offset
            try:
                text = bytes(subject).decode("utf-8")
            except UnicodeDecodeError:
                raise self._error(PatternErrorKind.MALFORMED_ENCODING)
            if offset < len(subject) and subject[offset] & 0xC0 == 0x80:
                raise self._error(PatternErrorKind.BAD_ENCODING_OFFSET)
            return text, len(bytes(subject[:offset]).decode("utf-8"))

        if unicode:
            self._check_encoding(subject)
        return subject, offset

    def _check_encoding(self, text: str) -> None:
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            raise self._error(PatternErrorKind.MALFORMED_ENCODING)

    def _error(self, kind: PatternErrorKind, message: Optional[str] = None) -> PatternError:
        error = PatternError(kind, message, self._compiled_pattern)
        logger.debug("Pattern error", pattern=self._compiled_pattern, kind=kind.name)
        return error

    @staticmethod
    def _bind_values(regex: str, binds: Optional[Mapping[str, str]]) -> str:
        """Replace placeholders with quoted values in a single pass.

        Longer placeholder names win over their prefixes; replaced text is
        never rescanned.
        """
        table: Dict[str, str] = {
            key: PatternCompiler.quote(str(value)) for key, value in (binds or {}).items() if key
        }
        return _translate(regex, table)

    @classmethod
    def _render(cls, regex: str, flags: PatternFlag) -> str:
        escaped = regex.replace(cls.DELIMITER, "\\" + cls.DELIMITER)
        modifiers = "".join(letter for flag, letter in MODIFIERS if flags & flag)
        return f"{cls.DELIMITER}{escaped}{cls.DELIMITER}{modifiers}"

    def __str__(self) -> str:
        return self._compiled_pattern

    def __repr__(self) -> str:
        return f"CompiledPattern({self._compiled_pattern!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompiledPattern):
            return NotImplemented
        return self._compiled_pattern == other._compiled_pattern

    def __hash__(self) -> int:
        return hash(self._compiled_pattern)


class PatternCompiler:
    r"""Translates shell wildcard patterns into CompiledPattern objects.

    The compiler holds the default separator(s) and case folding used when
    a call does not give its own.

    Example:
        >>> compiler = PatternCompiler(separator="\\/", case_fold=False)
        >>> compiler.compile_globs(["*.jpg", "*.png"]).match("a.png")
        True
    """

    def __init__(
        self,
        separator: Separator = Limits.DEFAULT_SEPARATOR,
        case_fold: bool = Limits.DEFAULT_CASE_FOLD,
    ):
        """Initialize compiler.

        Args:
            separator: Directory structure separator(s); "" disables them
            case_fold: Whether compiled globs match case-insensitively
        """
        self.separator = separator
        self.case_fold = case_fold

    def compile_glob(
        self,
        pattern: Glob,
        separator: Optional[Separator] = None,
        case_fold: Optional[bool] = None,
    ) -> CompiledPattern:
        """Compile one glob into an anchored pattern.

        Args:
            pattern: Shell wildcard pattern
            separator: Override the default separator(s)
            case_fold: Override the default case folding

        Returns:
            Pattern matching the whole subject against the glob
        """
        separator, flags = self._options(separator, case_fold)
        regex = "^" + self.glob_to_regex(pattern, separator) + "$"
        logger.debug("Compiled glob", glob=pattern, regex=regex)
        return CompiledPattern(regex, flags)

    def compile_globs(
        self,
        patterns: Iterable[Glob],
        separator: Optional[Separator] = None,
        case_fold: Optional[bool] = None,
    ) -> CompiledPattern:
        """Compile several globs into one pattern matching any of them.

        Every glob is anchored on its own: ``(^a$)|(^b$)``.
        """
        separator, flags = self._options(separator, case_fold)
        globs = list(patterns)
        regex = "|".join("(^" + self.glob_to_regex(glob, separator) + "$)" for glob in globs)
        logger.debug("Compiled globs", globs=globs, regex=regex)
        return CompiledPattern(regex, flags)

    def _options(self, separator: Optional[str], case_fold: Optional[bool]):
        if separator is None:
            separator = self.separator
        if case_fold is None:
            case_fold = self.case_fold
        flags = PatternFlag.CASE_INSENSITIVE if case_fold else PatternFlag.NONE
        return separator, flags

    @staticmethod
    def quote(text: str, delimiter: Optional[str] = None) -> str:
        """Return a literal regex for ``text``.

        Puts a backslash in front of every character of the regex syntax:
        ``. \\ + * ? [ ^ ] $ ( ) { } = ! < > | : - #`` and in front of the
        delimiter characters when given. NUL is written as ``\\000``.

        Args:
            text: Text to quote
            delimiter: Optional delimiter that is escaped as well

        Returns:
            Text safe to embed in a pattern
        """
        specials = SPECIAL_CHARACTERS | frozenset(delimiter or "")
        parts = []
        for char in text:
            if char in specials:
                parts.append("\\" + char)
            elif char == "\0":
                parts.append("\\000")
            else:
                parts.append(char)
        return "".join(parts)

    @classmethod
    def glob_to_regex(
        cls, glob: Glob, separator: Separator = Limits.DEFAULT_SEPARATOR
    ) -> Regex:
        """Translate a glob into an unanchored regex.

        Args:
            glob: Shell wildcard pattern
            separator: One or more separator characters; "" for none

        Returns:
            Regex source
        """
        # A bracket expression must not have matched a separator
        class_end = "]" + "".join(f"(?<!{cls.quote(char)})" for char in separator)
        quoted_separator = cls.quote(separator)
        any_run = f"[^{quoted_separator}]*" if separator else ".*"
        any_char = f"[^{quoted_separator}]" if separator else "."

        table = {
            r"\*\*": ".*",
            r"\*": any_run,
            r"\?": any_char,
            r"\[\!": "[^",
            r"\[": "[",
            r"\-": "-",
            r"\]": class_end,
            "\\\\\\": "\\",
        }
        return _translate(cls.quote(glob), table)


def _translate(text: str, table: Mapping[str, str]) -> str:
    """Replace every key of ``table`` in ``text`` in one left-to-right pass.

    At each position the longest matching key wins. Replacements are not
    scanned again.
    """
    if not table:
        return text
    keys = sorted(table, key=len, reverse=True)
    tokens = re.compile("|".join(re.escape(key) for key in keys))
    return tokens.sub(lambda m: table[m.group(0)], text)


_default_compiler = PatternCompiler()


def compile_glob(
    pattern: str,
    separator: str = Limits.DEFAULT_SEPARATOR,
    case_fold: bool = Limits.DEFAULT_CASE_FOLD,
) -> CompiledPattern:
    """Compile one glob, see PatternCompiler.compile_glob()."""
    return _default_compiler.compile_glob(pattern, separator, case_fold)


def compile_globs(
    patterns: Iterable[str],
    separator: str = Limits.DEFAULT_SEPARATOR,
    case_fold: bool = Limits.DEFAULT_CASE_FOLD,
) -> CompiledPattern:
    """Compile a list of globs, see PatternCompiler.compile_globs()."""
    return _default_compiler.compile_globs(patterns, separator, case_fold)


def quote(text: str, delimiter: Optional[str] = None) -> str:
    """Quote literal text, see PatternCompiler.quote()."""
    return PatternCompiler.quote(text, delimiter)
