"""
Expression Evaluator.

Evaluates boolean and arithmetic expressions given as trees, infix text or
JSON Logic data, under an EvaluatorConfig.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from . import arithmetic, boolean
from .analyzer import algebra_of, tree_depth
from .arithmetic import Expr
from .boolean import BooleanExpr
from .parser import ExpressionParser
from .serialize import from_logic
from ..models import EvaluatorConfig

logger = logging.getLogger(__name__)


class ExpressionDepthError(ValueError):
    """Raised when a tree is deeper than the configured max_depth."""

    def __init__(self, depth: int, max_depth: int):
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(f"Expression depth {depth} exceeds max_depth {max_depth}")


@dataclass
class EvaluationResult:
    """Outcome of evaluating one named expression."""
    name: str
    algebra: str
    rendered: str
    value: Union[bool, int]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "algebra": self.algebra,
            "rendered": self.rendered,
            "value": self.value,
        }


class ExpressionEvaluator:
    """
    Evaluator for boolean and arithmetic expressions.

    Accepts:
    - expression trees
    - infix text, e.g. "(True OR False) AND NOT False" or "(3 + 5) * 2"
    - JSON Logic data, e.g. {"*": [{"+": [3, 5]}, 2]}
    """

    def __init__(self, config: Optional[EvaluatorConfig] = None):
        """
        Initialize the evaluator.

        Args:
            config: Evaluation settings; defaults apply when omitted.
        """
        self.config = config or EvaluatorConfig()
        self.parser = ExpressionParser()

    def coerce(self, expression: Any) -> Union[BooleanExpr, Expr]:
        """
        Turn any accepted input form into an expression tree.

        Raises:
            TypeError: If the input is none of the accepted forms.
            ExpressionSyntaxError: If text or data does not describe an expression.
        """
        if boolean.is_boolean(expression) or arithmetic.is_arithmetic(expression):
            return expression
        if isinstance(expression, str):
            return self.parser.parse(expression)
        if isinstance(expression, (bool, int, dict)):
            return from_logic(expression)
        raise TypeError(f"Cannot evaluate {type(expression).__name__}")

    def evaluate(self, expression: Any) -> Union[bool, int]:
        """
        Evaluate an expression.

        Args:
            expression: A tree, infix text or JSON Logic data.

        Returns:
            bool for boolean expressions, int for arithmetic ones.

        Raises:
            ExpressionDepthError: If the tree is deeper than max_depth.
            ArithmeticOverflowError: Under the checked overflow policy.
        """
        expr = self.coerce(expression)

        depth = tree_depth(expr)
        if depth > self.config.max_depth:
            raise ExpressionDepthError(depth, self.config.max_depth)

        if boolean.is_boolean(expr):
            return boolean.evaluate(expr, short_circuit=self.config.short_circuit)

        return arithmetic.evaluate(
            expr,
            overflow=self.config.overflow,
            bits=self.config.int_bits,
        )

    def evaluate_all(self, expressions: Dict[str, Any]) -> List[EvaluationResult]:
        """
        Evaluate a mapping of named expressions, in mapping order.

        Args:
            expressions: Name to expression (any accepted input form).

        Returns:
            One EvaluationResult per entry.
        """
        results = []
        for name, expression in expressions.items():
            expr = self.coerce(expression)
            value = self.evaluate(expr)
            logger.debug("Evaluated %s = %r", name, value)
            results.append(EvaluationResult(
                name=name,
                algebra=algebra_of(expr),
                rendered=render(expr),
                value=value,
            ))
        return results


def render(expr: Union[BooleanExpr, Expr]) -> str:
    """Render a tree of either algebra."""
    if boolean.is_boolean(expr):
        return boolean.render(expr)
    return arithmetic.render(expr)
