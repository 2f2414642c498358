#!/usr/bin/env python3
"""Comparison predicates for file sizes and modification times.

A predicate is one or two comparisons that must all hold:

    "1024"            equal to 1024 (the operator defaults to "=")
    "= 1 KB"          equal to 1 KB
    "< 1 MB"          less than 1 MB
    "> 1 KB < 1 MB"   greater than 1 KB and less than 1 MB
    ">= 2021-01-01"   on or after 2021-01-01

Supported operators: >, <, =, >=, <=, <>

Example:
    >>> parse_predicate("> 1 KB < 1 MB")
    [(<Operator.GT: '>'>, '1 KB'), (<Operator.LT: '<'>, '1 MB')]
"""

import operator as op
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Tuple

from filefilter.core.constants import ErrorCode
from filefilter.infrastructure.logger import get_logger
from filefilter.rules.patterns import CompiledPattern

logger = get_logger("filefilter.rules")


class PredicateFormatError(Exception):
    """Predicate text does not match the predicate grammar."""

    def __init__(self, predicate: str):
        self.predicate = predicate
        self.error_code = ErrorCode.INVALID_INPUT
        super().__init__(f"The predicate format cannot be recognized: {predicate!r}")


class UnknownOperatorError(Exception):
    """Operator symbol is not one of the supported comparisons."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        self.error_code = ErrorCode.INTERNAL_ERROR
        super().__init__(f'Unknown operator "{symbol}".')


class Operator(Enum):
    """Comparison operator of a predicate clause."""

    GT = ">"
    LT = "<"
    EQ = "="
    GE = ">="
    LE = "<="
    NE = "<>"

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        """Get the operator for ``symbol``; an empty symbol means equality.

        Raises:
            UnknownOperatorError: If the symbol is not supported
        """
        if symbol == "":
            return cls.EQ
        try:
            return cls(symbol)
        except ValueError:
            raise UnknownOperatorError(symbol)


COMPARATORS: Mapping[Operator, Callable[[Any, Any], bool]] = {
    Operator.GT: op.gt,
    Operator.LT: op.lt,
    Operator.EQ: op.eq,
    Operator.GE: op.ge,
    Operator.LE: op.le,
    Operator.NE: op.ne,
}


@dataclass(frozen=True)
class PredicateClause:
    """One comparison of a predicate: ``candidate <operator> value``."""

    operator: Operator
    value: Any

    def test(self, candidate: Any) -> bool:
        return compare(candidate, self.operator, self.value)

    def __str__(self) -> str:
        return f"{self.operator.value} {self.value}"


def compare(left: Any, operator: Operator, right: Any) -> bool:
    """Compare two operands with the given operator.

    Args:
        left: The left operand (the candidate value)
        operator: Comparison operator
        right: The right operand (the configured value)

    Returns:
        Result of the comparison

    Raises:
        UnknownOperatorError: If the operator has no comparator
    """
    try:
        comparator = COMPARATORS[operator]
    except KeyError:
        raise UnknownOperatorError(str(operator))
    return comparator(left, right)


# Operators longest first so ">=" is not read as ">" followed by "="
_OPERATOR = r"(<>|>=|<=|[<>=])"
_CLAUSE = r"\s*" + _OPERATOR + r"\s*(\d.*)"
# First value is lazy: it ends at the first operator followed by a digit
_FIRST_CLAUSE = r"\s*" + _OPERATOR + r"\s*(\d.*?)"

_TWO_CLAUSES = CompiledPattern("^" + _FIRST_CLAUSE + _CLAUSE + "$")
_ONE_CLAUSE = CompiledPattern("^" + _CLAUSE + "$")
_BARE_VALUE = CompiledPattern(r"^()(\d.*)$")


def parse_predicate(text: str) -> List[Tuple[Operator, str]]:
    """Split a predicate into its operators and raw values.

    Operators and values keep the order they have in the text. The first
    value of a two-clause predicate ends at the first operator that is
    followed by a digit.

    Args:
        text: Predicate text

    Returns:
        List of (operator, raw value) pairs, raw values stripped

    Raises:
        PredicateFormatError: If the text is not a valid predicate
    """
    predicate = text.strip()

    for grammar in (_TWO_CLAUSES, _ONE_CLAUSE, _BARE_VALUE):
        found = grammar.search(predicate)
        if found is not None:
            break
    else:
        raise PredicateFormatError(text)

    groups = found.groups()
    clauses = [
        (Operator.from_symbol(groups[i]), groups[i + 1].strip()) for i in range(0, len(groups), 2)
    ]
    logger.debug("Parsed predicate", predicate=predicate, clauses=len(clauses))
    return clauses
