"""
Expression Parser.

Parses infix text into boolean or arithmetic expression trees. The accepted
syntax is a superset of what ``render`` produces, so rendered text always
parses back to an equal tree.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Tuple, Union

from .arithmetic import Const, Expr, Mul, Sum
from .boolean import And, BooleanExpr, False_, Not, Or, True_

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"-?\d+")
_BOOLEAN_HINT = re.compile(r"\b(true|false)\b", re.IGNORECASE)
_TOKEN = re.compile(r"\(|\)|[^\s()]+")


class ExpressionSyntaxError(ValueError):
    """Raised when text or a mapping cannot be turned into an expression."""

    def __init__(self, message: str, position: int = 0, expression: str = ""):
        self.message = message
        self.position = position
        self.expression = expression
        if expression:
            super().__init__(f"{message} at position {position} in {expression!r}")
        else:
            super().__init__(message)


class ExpressionParser:
    """
    Parser for infix expressions.

    Boolean syntax, lowest precedence first:
        a OR b, a AND b, NOT a, (a), True, False

    Arithmetic syntax, lowest precedence first:
        a + b, a * b, (a), integer literals

    Keywords are case-insensitive. Chains fold to the left, so
    ``a OR b OR c`` parses as ``Or(Or(a, b), c)``.
    """

    BOOLEAN_LITERALS = {
        "TRUE": True_,
        "FALSE": False_,
    }

    def __init__(self, max_nesting: int = 100):
        """
        Initialize the parser.

        Args:
            max_nesting: Deepest combination of parentheses and NOT prefixes
                accepted. Deeper text is rejected before parsing starts.
        """
        self.max_nesting = max_nesting

    def parse(self, expression: str) -> Union[BooleanExpr, Expr]:
        """
        Parse text, picking the algebra from its contents.

        Text mentioning a boolean literal is parsed as a boolean expression,
        anything else as arithmetic.
        """
        text = self._prepare(expression)
        if _BOOLEAN_HINT.search(text):
            return self.parse_boolean(text)
        return self.parse_arithmetic(text)

    def parse_boolean(self, expression: str) -> BooleanExpr:
        """
        Parse a boolean expression.

        Args:
            expression: Text such as ``"(True OR False) AND NOT False"``.

        Returns:
            The expression tree.

        Raises:
            ExpressionSyntaxError: If the text is not a boolean expression.
        """
        text = self._prepare(expression)
        logger.debug("Parsing boolean expression %r", text)
        self._check_balanced(text)
        self._check_nesting(text)
        return self._parse_or(text, 0, text)

    def parse_arithmetic(self, expression: str) -> Expr:
        """
        Parse an arithmetic expression.

        Args:
            expression: Text such as ``"(3 + 5) * 2"``.

        Returns:
            The expression tree.

        Raises:
            ExpressionSyntaxError: If the text is not an arithmetic expression.
        """
        text = self._prepare(expression)
        logger.debug("Parsing arithmetic expression %r", text)
        self._check_balanced(text)
        self._check_nesting(text)
        return self._parse_sum(text, 0, text)

    def validate(self, expression: str) -> Tuple[bool, Optional[str]]:
        """
        Check whether an expression parses.

        Returns:
            Tuple of (is_valid, error_message).
        """
        try:
            self.parse(expression)
            return True, None
        except ValueError as e:
            return False, str(e)

    # Boolean grammar

    def _parse_or(self, expr: str, offset: int, source: str) -> BooleanExpr:
        """Parse OR chains (lowest precedence)."""
        return self._fold(
            expr, offset, source, "OR", True, Or, self._parse_and
        )

    def _parse_and(self, expr: str, offset: int, source: str) -> BooleanExpr:
        """Parse AND chains."""
        return self._fold(
            expr, offset, source, "AND", True, And, self._parse_not
        )

    def _parse_not(self, expr: str, offset: int, source: str) -> BooleanExpr:
        """Parse NOT prefixes."""
        stripped, offset = self._strip(expr, offset)
        match = re.match(r"NOT\b", stripped, re.IGNORECASE)
        if match:
            inner = stripped[match.end():]
            return Not(self._parse_not(inner, offset + match.end(), source))
        return self._parse_boolean_atom(stripped, offset, source)

    def _parse_boolean_atom(self, expr: str, offset: int, source: str) -> BooleanExpr:
        """Parse a literal or a parenthesized boolean expression."""
        if not expr:
            raise ExpressionSyntaxError("Missing operand", offset, source)

        if self._is_wrapped(expr):
            return self._parse_or(expr[1:-1], offset + 1, source)

        literal = self.BOOLEAN_LITERALS.get(expr.upper())
        if literal is not None:
            return literal()

        raise ExpressionSyntaxError(f"Unexpected token {expr!r}", offset, source)

    # Arithmetic grammar

    def _parse_sum(self, expr: str, offset: int, source: str) -> Expr:
        """Parse '+' chains (lowest precedence)."""
        return self._fold(
            expr, offset, source, "+", False, Sum, self._parse_mul
        )

    def _parse_mul(self, expr: str, offset: int, source: str) -> Expr:
        """Parse '*' chains."""
        return self._fold(
            expr, offset, source, "*", False, Mul, self._parse_arithmetic_atom
        )

    def _parse_arithmetic_atom(self, expr: str, offset: int, source: str) -> Expr:
        """Parse an integer literal or a parenthesized arithmetic expression."""
        expr, offset = self._strip(expr, offset)
        if not expr:
            raise ExpressionSyntaxError("Missing operand", offset, source)

        if self._is_wrapped(expr):
            return self._parse_sum(expr[1:-1], offset + 1, source)

        if _INTEGER.fullmatch(expr):
            return Const(int(expr))

        raise ExpressionSyntaxError(f"Unexpected token {expr!r}", offset, source)

    # Helpers

    def _fold(
        self,
        expr: str,
        offset: int,
        source: str,
        operator: str,
        word: bool,
        node: Callable,
        operand: Callable,
    ):
        """Split by a binary operator and fold the operands to the left."""
        parts = self._split_by_operator(expr, operator, word)
        result = None
        for part, start in parts:
            if not part.strip():
                raise ExpressionSyntaxError(
                    f"Missing operand for {operator}", offset + start, source
                )
            value = operand(part, offset + start, source)
            result = value if result is None else node(result, value)
        return result

    def _split_by_operator(
        self,
        expr: str,
        operator: str,
        word: bool
    ) -> List[Tuple[str, int]]:
        """
        Split expression by operator, respecting parentheses.

        Returns (part, start_index) pairs. Keyword operators only match on
        word boundaries and case-insensitively.
        """
        parts = []
        start = 0
        depth = 0
        i = 0
        op_len = len(operator)

        while i < len(expr):
            char = expr[i]

            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            elif depth == 0 and expr[i:i+op_len].upper() == operator:
                if word:
                    before_ok = i == 0 or not expr[i-1].isalnum()
                    after_ok = i + op_len >= len(expr) or not expr[i+op_len].isalnum()
                    if not (before_ok and after_ok):
                        i += 1
                        continue
                parts.append((expr[start:i], start))
                i += op_len
                start = i
                continue
            i += 1

        parts.append((expr[start:], start))
        return parts

    def _is_wrapped(self, expr: str) -> bool:
        """Return True if the outer parentheses enclose the whole expression."""
        if not (expr.startswith("(") and expr.endswith(")")):
            return False

        depth = 0
        for i, char in enumerate(expr):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0 and i < len(expr) - 1:
                    return False
        return True

    def _check_balanced(self, expr: str) -> None:
        """Reject unbalanced parentheses up front."""
        depth = 0
        for i, char in enumerate(expr):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth < 0:
                    raise ExpressionSyntaxError("Unmatched ')'", i, expr)
        if depth:
            raise ExpressionSyntaxError("Unclosed '('", expr.rfind("("), expr)

    def _check_nesting(self, expr: str) -> None:
        """
        Reject text nested deeper than max_nesting.

        Each open parenthesis counts one level, as does each NOT in a prefix
        run; a run ends at the next operand or binary operator. Parentheses
        must already be balanced.
        """
        levels = [0]
        pending = 0
        deepest = 0
        for token in _TOKEN.findall(expr):
            if token == "(":
                levels.append(levels[-1] + pending + 1)
                pending = 0
            elif token == ")":
                levels.pop()
                pending = 0
            elif token.upper() == "NOT":
                pending += 1
            else:
                pending = 0
            deepest = max(deepest, levels[-1] + pending)

        if deepest > self.max_nesting:
            raise ExpressionSyntaxError(
                f"Expression nested {deepest} levels deep, limit is {self.max_nesting}"
            )

    def _strip(self, expr: str, offset: int) -> Tuple[str, int]:
        """Strip whitespace, keeping the offset of the first kept character."""
        leading = len(expr) - len(expr.lstrip())
        return expr.strip(), offset + leading

    def _prepare(self, expression: str) -> str:
        if not isinstance(expression, str):
            raise ValueError(f"Expected string expression, got {type(expression)}")

        expression = expression.strip()
        if not expression:
            raise ExpressionSyntaxError("Empty expression")
        return expression
