"""
Tests for the infix expression parser.
"""

import pytest

from backend.exprlang.logic import (
    And,
    Const,
    ExpressionParser,
    ExpressionSyntaxError,
    False_,
    Mul,
    Not,
    Or,
    Sum,
    True_,
)
from backend.exprlang.logic.arithmetic import render as render_arithmetic
from backend.exprlang.logic.boolean import render as render_boolean


@pytest.fixture
def parser():
    return ExpressionParser()


class TestBooleanParsing:
    """Tests for parse_boolean()."""

    def test_rendered_sample(self, parser):
        """Test parsing the rendered sample expression."""
        expr = parser.parse_boolean("((True OR False) AND NOT False)")
        assert expr == And(Or(True_(), False_()), Not(False_()))

    def test_literals(self, parser):
        """Test literals in any case."""
        assert parser.parse_boolean("True") == True_()
        assert parser.parse_boolean("false") == False_()
        assert parser.parse_boolean("TRUE") == True_()

    def test_and_binds_tighter_than_or(self, parser):
        """Test operator precedence."""
        expr = parser.parse_boolean("True OR False AND False")
        assert expr == Or(True_(), And(False_(), False_()))

    def test_not_binds_tighter_than_and(self, parser):
        """Test NOT applies to the nearest operand."""
        expr = parser.parse_boolean("NOT True AND False")
        assert expr == And(Not(True_()), False_())

    def test_nested_not(self, parser):
        """Test repeated negation."""
        assert parser.parse_boolean("NOT NOT true") == Not(Not(True_()))
        assert parser.parse_boolean("NOT(false)") == Not(False_())

    def test_chains_fold_left(self, parser):
        """Test left-associative folding."""
        expr = parser.parse_boolean("True OR False OR True")
        assert expr == Or(Or(True_(), False_()), True_())

    def test_lowercase_keywords(self, parser):
        """Test case-insensitive operators."""
        expr = parser.parse_boolean("true and not false")
        assert expr == And(True_(), Not(False_()))

    def test_parenthesized_groups(self, parser):
        """Test groups that are not a single outer pair."""
        expr = parser.parse_boolean("(True) AND (False OR True)")
        assert expr == And(True_(), Or(False_(), True_()))

    @pytest.mark.parametrize("expr", [
        True_(),
        Not(Not(False_())),
        Not(And(True_(), False_())),
        Or(Or(True_(), False_()), True_()),
        Or(True_(), Or(False_(), True_())),
        And(Or(True_(), False_()), Not(False_())),
        And(Not(Or(False_(), Not(True_()))), And(True_(), True_())),
    ])
    def test_parses_what_render_produces(self, parser, expr):
        """Test that rendered text parses back to an equal tree."""
        assert parser.parse_boolean(render_boolean(expr)) == expr


class TestArithmeticParsing:
    """Tests for parse_arithmetic()."""

    def test_rendered_sample(self, parser):
        """Test parsing the rendered sample expression."""
        expr = parser.parse_arithmetic("((3 + 5) * 2)")
        assert expr == Mul(Sum(Const(3), Const(5)), Const(2))

    def test_mul_binds_tighter_than_sum(self, parser):
        """Test operator precedence."""
        expr = parser.parse_arithmetic("3 + 5 * 2")
        assert expr == Sum(Const(3), Mul(Const(5), Const(2)))

    def test_chains_fold_left(self, parser):
        """Test left-associative folding."""
        expr = parser.parse_arithmetic("1 + 2 + 3")
        assert expr == Sum(Sum(Const(1), Const(2)), Const(3))

    def test_negative_literals(self, parser):
        """Test signed integer literals."""
        expr = parser.parse_arithmetic("-3 * 4 + -1")
        assert expr == Sum(Mul(Const(-3), Const(4)), Const(-1))

    def test_whitespace_is_optional(self, parser):
        """Test compact input."""
        expr = parser.parse_arithmetic("(3+5)*2")
        assert expr == Mul(Sum(Const(3), Const(5)), Const(2))

    @pytest.mark.parametrize("expr", [
        Const(0),
        Const(-12),
        Sum(Const(1), Sum(Const(2), Const(3))),
        Mul(Sum(Const(3), Const(5)), Const(2)),
        Sum(Mul(Const(2), Const(-3)), Mul(Const(4), Const(5))),
    ])
    def test_parses_what_render_produces(self, parser, expr):
        """Test that rendered text parses back to an equal tree."""
        assert parser.parse_arithmetic(render_arithmetic(expr)) == expr


class TestParse:
    """Tests for algebra detection and validation."""

    def test_detects_boolean(self, parser):
        """Test that boolean literals select the boolean grammar."""
        assert parser.parse("NOT false") == Not(False_())

    def test_detects_arithmetic(self, parser):
        """Test that other text selects the arithmetic grammar."""
        assert parser.parse("2 * 21") == Mul(Const(2), Const(21))

    def test_validate_ok(self, parser):
        """Test validate() on good input."""
        assert parser.validate("True AND False") == (True, None)

    def test_validate_error(self, parser):
        """Test validate() on bad input."""
        valid, message = parser.validate("True AND")
        assert valid is False
        assert "Missing operand" in message

    def test_non_string(self, parser):
        """Test that non-string input is rejected."""
        with pytest.raises(ValueError):
            parser.parse(42)


class TestSyntaxErrors:
    """Tests for malformed input."""

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "True AND",
        "OR False",
        "NOT",
        "(True",
        "True)",
        "()",
        "maybe AND True",
        "True XOR False",
    ])
    def test_bad_boolean(self, parser, text):
        """Test malformed boolean expressions."""
        with pytest.raises(ExpressionSyntaxError):
            parser.parse_boolean(text)

    @pytest.mark.parametrize("text", [
        "3 +",
        "* 2",
        "3 + x",
        "(3 + 5",
        "3.5 * 2",
        "3 - 2",
    ])
    def test_bad_arithmetic(self, parser, text):
        """Test malformed arithmetic expressions."""
        with pytest.raises(ExpressionSyntaxError):
            parser.parse_arithmetic(text)

    def test_error_position(self, parser):
        """Test that errors point at the offending token."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parser.parse_boolean("True AND maybe")
        assert exc_info.value.position == 9
        assert exc_info.value.expression == "True AND maybe"
        assert "maybe" in str(exc_info.value)

    def test_is_value_error(self):
        """Test the exception hierarchy."""
        assert issubclass(ExpressionSyntaxError, ValueError)


class TestNestingLimit:
    """Tests for rejecting deeply nested text before parsing."""

    def test_deep_negation(self, parser):
        """Test a long NOT prefix run."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parser.parse_boolean("NOT " * 3000 + "True")
        assert "nested 3000 levels" in str(exc_info.value)

    def test_deep_parentheses(self, parser):
        """Test deeply parenthesized arithmetic."""
        with pytest.raises(ExpressionSyntaxError):
            parser.parse_arithmetic("(" * 3000 + "1" + ")" * 3000)

    def test_validate_reports_deep_text(self, parser):
        """Test that validate() reports nesting errors instead of raising."""
        valid, message = parser.validate("(" * 3000 + "1" + ")" * 3000)
        assert valid is False
        assert "limit is 100" in message

    def test_at_limit(self, parser):
        """Test text exactly at the nesting limit."""
        expr = parser.parse_boolean("NOT " * 100 + "True")
        assert isinstance(expr, Not)

    def test_negation_inside_parentheses_counts(self):
        """Test that NOT prefixes and parentheses add up."""
        parser = ExpressionParser(max_nesting=3)
        assert parser.parse_boolean("NOT (NOT True)") == Not(Not(True_()))
        with pytest.raises(ExpressionSyntaxError):
            parser.parse_boolean("NOT (NOT NOT True)")

    def test_long_flat_chains_are_allowed(self, parser):
        """Test that sibling operands do not count as nesting."""
        expr = parser.parse_boolean("NOT True AND " * 300 + "True")
        assert isinstance(expr, And)
        expr = parser.parse_arithmetic("(1 + 1) * " * 300 + "1")
        assert isinstance(expr, Mul)
