#!/usr/bin/env python3
"""File size parsing with binary units.

Sizes are written as a number with an optional binary unit in the
ISO/IEC 80000 or JEDEC notation. Both notations use powers of 1024:

    "10", "10 B"         10 bytes
    "1KB", "1 KiB"       1024 bytes
    "1.5 MiB", "1,5 MB"  1572864 bytes

Example:
    >>> parser = SizeParser()
    >>> parser.parse("1.5 KiB")
    1536
    >>> parser.to_unit(1536, "KB")
    1.5
"""

from typing import Optional, Union

from filefilter.core.constants import ErrorCode, Limits
from filefilter.rules.patterns import CompiledPattern

Number = Union[int, float]

UNITS = {
    "B": 1,
    "KB": Limits.KB,
    "KiB": Limits.KB,
    "MB": Limits.MB,
    "MiB": Limits.MB,
    "GB": Limits.GB,
    "GiB": Limits.GB,
    "TB": Limits.TB,
    "TiB": Limits.TB,
}

_SCALED = CompiledPattern(r"^((?:0|[1-9][0-9]*)(?:[.,][0-9]+)?)\s*([KMGT]i?B)$")
_BYTES = CompiledPattern(r"^(0|[1-9][0-9]*)\s*(B)$")
_INTEGER = CompiledPattern(r"^(0|[1-9][0-9]*)$")


class SizeParseError(Exception):
    """Text or unit cannot be parsed as a size."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.PARSE_ERROR):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class SizeRangeError(SizeParseError):
    """Parsed size lies outside of the supported range."""

    def __init__(self, value: Number):
        self.value = value
        super().__init__(
            f"Size {value} is out of range [{Limits.MIN_SIZE}, {Limits.MAX_SIZE}].",
            ErrorCode.OUT_OF_RANGE,
        )


class SizeParser:
    """Converts between byte counts and sizes with binary units."""

    MIN_VALUE = Limits.MIN_SIZE
    MAX_VALUE = Limits.MAX_SIZE

    def parse(self, text: str) -> int:
        """Parse a size such as "1 KB" or "1,5MiB" into bytes.

        Whitespace is allowed around the text and between the number and
        the unit. A number without unit is a byte count.

        Args:
            text: Size text

        Returns:
            Number of bytes, truncated toward zero

        Raises:
            SizeParseError: If the text cannot be parsed
            SizeRangeError: If the size is out of range
        """
        text = text.strip()

        found = _SCALED.search(text) or _BYTES.search(text)
        if found is not None:
            number, unit = found.groups()
            return self.from_unit(float(number.replace(",", ".")), unit)

        found = _INTEGER.search(text)
        if found is not None:
            return self._check_range(int(found.group(1)))

        raise SizeParseError(f"The given string cannot be parsed as a size: {text!r}")

    def from_unit(self, value: Number, unit: str) -> int:
        """Get the number of bytes of ``value`` expressed in ``unit``.

        Example:
            >>> SizeParser().from_unit(1.5, "KiB")
            1536

        Raises:
            SizeParseError: If the unit cannot be recognised
            SizeRangeError: If the size is out of range
        """
        unit_bytes = self._require_unit(unit)
        if isinstance(value, float) and value * unit_bytes > self.MAX_VALUE:
            raise SizeRangeError(value * unit_bytes)
        return self._check_range(int(value * unit_bytes))

    def to_unit(self, size: int, unit: str, precision: int = 2) -> float:
        """Express a byte count in another unit.

        Args:
            size: Number of bytes
            unit: Target unit
            precision: Number of decimals in the result

        Raises:
            SizeParseError: If the unit cannot be recognised
        """
        return round(size / self._require_unit(unit), precision)

    @staticmethod
    def unit_value(unit: str) -> Optional[int]:
        """Number of bytes in one ``unit``, None if the unit is unknown."""
        return UNITS.get(unit.strip())

    def _require_unit(self, unit: str) -> int:
        unit_bytes = self.unit_value(unit)
        if unit_bytes is None:
            raise SizeParseError(f"The given binary unit cannot be recognised: {unit!r}")
        return unit_bytes

    def _check_range(self, value: int) -> int:
        if value < self.MIN_VALUE or value > self.MAX_VALUE:
            raise SizeRangeError(value)
        return value
