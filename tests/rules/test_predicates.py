#!/usr/bin/env python3
"""Tests for comparison predicates."""

import pytest

from filefilter.core.constants import ErrorCode
from filefilter.rules.predicates import (
    Operator,
    PredicateClause,
    PredicateFormatError,
    UnknownOperatorError,
    compare,
    parse_predicate,
)


class TestOperator:
    """Tests for Operator symbols."""

    def test_from_symbol(self):
        """Test every supported symbol maps to its operator."""
        assert Operator.from_symbol(">") == Operator.GT
        assert Operator.from_symbol("<") == Operator.LT
        assert Operator.from_symbol("=") == Operator.EQ
        assert Operator.from_symbol(">=") == Operator.GE
        assert Operator.from_symbol("<=") == Operator.LE
        assert Operator.from_symbol("<>") == Operator.NE

    def test_empty_symbol_is_equality(self):
        """Test a missing operator means equality."""
        assert Operator.from_symbol("") == Operator.EQ

    def test_unknown_symbol(self):
        """Test an unsupported symbol is rejected."""
        with pytest.raises(UnknownOperatorError) as exc_info:
            Operator.from_symbol("!=")
        assert str(exc_info.value) == 'Unknown operator "!=".'
        assert exc_info.value.error_code == ErrorCode.INTERNAL_ERROR


class TestCompare:
    """Tests for comparing operands."""

    @pytest.mark.parametrize(
        "operator,expected",
        [
            (Operator.GT, False),
            (Operator.LT, True),
            (Operator.EQ, False),
            (Operator.GE, False),
            (Operator.LE, True),
            (Operator.NE, True),
        ],
    )
    def test_compare_numbers(self, operator, expected):
        """Test each operator on 1 against 2."""
        assert compare(1, operator, 2) is expected

    def test_compare_equal(self):
        """Test inclusive operators on equal operands."""
        assert compare(5, Operator.GE, 5)
        assert compare(5, Operator.LE, 5)
        assert not compare(5, Operator.NE, 5)

    def test_unknown_operator(self):
        """Test comparing with something that is not an operator."""
        with pytest.raises(UnknownOperatorError):
            compare(1, "~", 2)

    def test_clause(self):
        """Test a clause compares the candidate on the left."""
        clause = PredicateClause(Operator.GT, 1024)
        assert clause.test(1025)
        assert not clause.test(1024)
        assert str(clause) == "> 1024"


class TestParsePredicate:
    """Tests for splitting predicate text."""

    def test_bare_value(self):
        """Test a value without operator is an equality."""
        assert parse_predicate("1024") == [(Operator.EQ, "1024")]

    def test_single_clause(self):
        """Test an operator followed by a value."""
        assert parse_predicate("<>   1,5   KB") == [(Operator.NE, "1,5   KB")]

    def test_two_clauses(self):
        """Test two clauses keep their order."""
        assert parse_predicate(" > 1024 < 1MB ") == [
            (Operator.GT, "1024"),
            (Operator.LT, "1MB"),
        ]

    def test_two_char_operators(self):
        """Test two-character operators are not split."""
        assert parse_predicate(">=1 KB<=2 KB") == [
            (Operator.GE, "1 KB"),
            (Operator.LE, "2 KB"),
        ]

    def test_date_values(self):
        """Test date-time values with spaces and dashes."""
        assert parse_predicate(" > 2021-01-01   12:00 < 2021-01-01 23:59 ") == [
            (Operator.GT, "2021-01-01   12:00"),
            (Operator.LT, "2021-01-01 23:59"),
        ]

    def test_duplicate_operators_kept(self):
        """Test two clauses with the same operator are both kept."""
        assert parse_predicate("> 1 > 2") == [(Operator.GT, "1"), (Operator.GT, "2")]

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "!= 1 MB", "=> 1", "> KB", "abc", "< > 1"],
    )
    def test_invalid_format(self, text):
        """Test text outside of the predicate grammar."""
        with pytest.raises(PredicateFormatError) as exc_info:
            parse_predicate(text)
        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT
        assert "cannot be recognized" in str(exc_info.value)
