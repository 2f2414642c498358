#!/usr/bin/env python3
"""Date-time parsing for modification time predicates.

Free-form date-time text is normalized (extra whitespace removed) and
interpreted in this order:

1. Numbers are seconds since the Unix epoch ("1609459200")
2. Keywords: now, today, midnight, yesterday, tomorrow
3. ISO 8601 ("2021-01-01", "2021-01-01 12:00", "2021-01-01T12:00:00+01:00")
4. Day-first with dots ("01.01.2021 12:00"), year-first with slashes
   ("2021/01/01") and month-first with slashes ("01/31/2021")

Every parsed instant is timezone-aware. Text without an offset is read in
the parser's time zone, the process local time zone by default.

Example:
    >>> from datetime import timezone
    >>> parser = TemporalParser(tz=timezone.utc)
    >>> parser.parse(" 2021-01-01   12:00 ")
    datetime.datetime(2021, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
"""

import re
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Union

from filefilter.core.constants import ErrorCode
from filefilter.rules.patterns import CompiledPattern

Instant = Union[datetime, int, float, str]

# (pattern, replacement) pairs applied in order by normalize()
_NORMALIZE_RULES = (
    (r"([\-\.\:\/\+])\s+", r"\1"),
    (r"([0-9\s]+[T])\s+", r"\1"),
    (r"\s+([\-\.\:\/\+])", r"\1"),
    (r"\s+([T][0-9\s]+)", r"\1"),
    (r"\s{2,}", " "),
)

_EPOCH = CompiledPattern(r"^[+-]?[0-9]+(?:\.[0-9]+)?$")

FORMATS = (
    "%d.%m.%Y",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
)

KEYWORDS = ("now", "today", "midnight", "yesterday", "tomorrow")


class TemporalParseError(Exception):
    """Text cannot be parsed as a date-time."""

    def __init__(self, message: str):
        self.message = message
        self.error_code = ErrorCode.PARSE_ERROR
        super().__init__(message)


class TemporalParser:
    """Parses date-time text into timezone-aware datetimes."""

    def __init__(self, tz: Optional[tzinfo] = None):
        """Initialize parser.

        Args:
            tz: Time zone for text without an offset; None for local time
        """
        self.tz = tz

    @staticmethod
    def normalize(text: str) -> str:
        """Remove extra whitespace from date-time text.

        Spaces around the "- . : / +" separators and around the "T"
        date/time separator are dropped, other runs of whitespace are
        collapsed to one space.

        Example:
            >>> TemporalParser.normalize(" 2021 - 01 -01   12 : 00 ")
            '2021-01-01 12:00'
        """
        for pattern, replacement in _NORMALIZE_RULES:
            text = re.sub(pattern, replacement, text)
        return text.strip()

    def parse(self, text: str) -> datetime:
        """Parse free-form date-time text.

        Args:
            text: Date-time text or epoch seconds

        Returns:
            Timezone-aware datetime

        Raises:
            TemporalParseError: If the text cannot be parsed
        """
        normalized = self.normalize(text)

        if _EPOCH.match(normalized):
            return self.of_epoch(float(normalized) if "." in normalized else int(normalized))

        keyword = normalized.lower()
        if keyword in KEYWORDS:
            return self._from_keyword(keyword)

        try:
            return self.localize(datetime.fromisoformat(normalized))
        except ValueError:
            pass

        for fmt in FORMATS:
            try:
                return self.localize(datetime.strptime(normalized, fmt))
            except ValueError:
                continue

        raise TemporalParseError(f"Given text cannot be parsed as a date: {text!r}")

    def of_epoch(self, seconds: Union[int, float]) -> datetime:
        """Get the instant ``seconds`` after 1970-01-01T00:00:00Z.

        Raises:
            TemporalParseError: If the value is not a valid timestamp
        """
        try:
            if self.tz is None:
                return datetime.fromtimestamp(seconds).astimezone()
            return datetime.fromtimestamp(seconds, self.tz)
        except (OverflowError, OSError, ValueError):
            raise TemporalParseError(f"Given number is not a valid Unix timestamp: {seconds}")

    def coerce(self, value: Instant) -> datetime:
        """Turn a datetime, epoch seconds or date-time text into an instant.

        Raises:
            TemporalParseError: If text or number cannot be parsed
            TypeError: If the value has an unsupported type
        """
        if isinstance(value, datetime):
            return self.localize(value)
        if isinstance(value, bool):
            raise TypeError("Boolean is not a valid date-time value")
        if isinstance(value, (int, float)):
            return self.of_epoch(value)
        if isinstance(value, str):
            return self.parse(value)
        raise TypeError(f"Unsupported date-time value: {type(value).__name__}")

    def localize(self, value: datetime) -> datetime:
        """Attach the parser's time zone to a naive datetime."""
        if value.tzinfo is not None:
            return value
        if self.tz is None:
            return value.astimezone()
        return value.replace(tzinfo=self.tz)

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)

    def _from_keyword(self, keyword: str) -> datetime:
        now = self.now()
        if keyword == "now":
            return now
        days = {"yesterday": -1, "tomorrow": 1}.get(keyword, 0)
        day = now.date() + timedelta(days=days)
        return self.localize(datetime(day.year, day.month, day.day))
