#!/usr/bin/env python3
"""Tests for TemporalParser."""

from datetime import datetime, timedelta, timezone

import pytest

from filefilter.core.constants import ErrorCode
from filefilter.parsers.temporal import TemporalParseError, TemporalParser

UTC = timezone.utc
CET = timezone(timedelta(hours=1))


class TestNormalize:
    """Tests for whitespace normalization."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            (" 2021 - 01 -01   12 : 00 ", "2021-01-01 12:00"),
            ("2021-01-01   T   12:00", "2021-01-01T12:00"),
            ("01 . 01 . 2021", "01.01.2021"),
            ("2021 / 01 / 01", "2021/01/01"),
            ("2021-01-01", "2021-01-01"),
        ],
    )
    def test_normalize(self, text, expected):
        """Test spaces around separators are removed."""
        assert TemporalParser.normalize(text) == expected


class TestParse:
    """Tests for parsing date-time text."""

    def test_iso_date(self, utc_parser):
        """Test a date is read as midnight."""
        assert utc_parser.parse("2021-01-01") == datetime(2021, 1, 1, tzinfo=UTC)

    def test_iso_date_time(self, utc_parser):
        """Test a date and time with extra whitespace."""
        assert utc_parser.parse(" 2021-01-01   12:00 ") == datetime(2021, 1, 1, 12, tzinfo=UTC)

    def test_explicit_offset(self, utc_parser):
        """Test an explicit offset wins over the parser's time zone."""
        parsed = utc_parser.parse("2021-01-01T12:00:00+01:00")
        assert parsed == datetime(2021, 1, 1, 11, tzinfo=UTC)
        assert parsed.utcoffset() == timedelta(hours=1)

    def test_parser_time_zone(self):
        """Test text without offset is read in the parser's time zone."""
        parsed = TemporalParser(tz=CET).parse("2021-01-01 12:00")
        assert parsed == datetime(2021, 1, 1, 11, tzinfo=UTC)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("31.01.2021", datetime(2021, 1, 31, tzinfo=UTC)),
            ("31.01.2021 08:30", datetime(2021, 1, 31, 8, 30, tzinfo=UTC)),
            ("2021/01/31", datetime(2021, 1, 31, tzinfo=UTC)),
            ("2021/01/31 08:30:15", datetime(2021, 1, 31, 8, 30, 15, tzinfo=UTC)),
            ("01/31/2021", datetime(2021, 1, 31, tzinfo=UTC)),
        ],
    )
    def test_other_formats(self, utc_parser, text, expected):
        """Test day-first, year-first and month-first formats."""
        assert utc_parser.parse(text) == expected

    def test_epoch_text(self, utc_parser):
        """Test numeric text is read as epoch seconds."""
        assert utc_parser.parse("1609459200") == datetime(2021, 1, 1, tzinfo=UTC)
        assert utc_parser.parse("1609459200.5") == datetime(
            2021, 1, 1, 0, 0, 0, 500000, tzinfo=UTC
        )

    def test_keywords(self, utc_parser):
        """Test relative keywords."""
        today = utc_parser.parse("today")
        assert today.hour == 0 and today.minute == 0
        assert utc_parser.parse("midnight") == today
        assert utc_parser.parse("yesterday") == today - timedelta(days=1)
        assert utc_parser.parse("Tomorrow") == today + timedelta(days=1)
        assert utc_parser.parse("now") >= today

    def test_local_time_is_aware(self):
        """Test the default parser returns aware datetimes."""
        assert TemporalParser().parse("2021-01-01").tzinfo is not None

    @pytest.mark.parametrize("text", ["", "0000 00 00", "2021-13-01", "someday", "31.02.2021"])
    def test_invalid_text(self, utc_parser, text):
        """Test text that is not a date-time."""
        with pytest.raises(TemporalParseError) as exc_info:
            utc_parser.parse(text)
        assert exc_info.value.error_code == ErrorCode.PARSE_ERROR


class TestCoerce:
    """Tests for converting values to instants."""

    def test_aware_datetime(self, utc_parser):
        """Test an aware datetime is returned unchanged."""
        instant = datetime(2021, 1, 1, tzinfo=CET)
        assert utc_parser.coerce(instant) is instant

    def test_naive_datetime(self, utc_parser):
        """Test a naive datetime gets the parser's time zone."""
        assert utc_parser.coerce(datetime(2021, 1, 1)).tzinfo is UTC

    def test_number(self, utc_parser):
        """Test numbers are epoch seconds."""
        assert utc_parser.coerce(0) == datetime(1970, 1, 1, tzinfo=UTC)
        assert utc_parser.coerce(1.5) == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=UTC)

    def test_text(self, utc_parser):
        """Test text is parsed."""
        assert utc_parser.coerce("2021-01-01") == datetime(2021, 1, 1, tzinfo=UTC)

    def test_invalid_timestamp(self, utc_parser):
        """Test a timestamp outside of the supported range."""
        with pytest.raises(TemporalParseError):
            utc_parser.coerce(10**20)

    @pytest.mark.parametrize("value", [True, None, [2021, 1, 1]])
    def test_unsupported_type(self, utc_parser, value):
        """Test values that cannot be instants."""
        with pytest.raises(TypeError):
            utc_parser.coerce(value)
