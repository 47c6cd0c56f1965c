"""
Boolean expression trees.

A closed set of five variants (True_, False_, And, Or, Not) built as frozen
pydantic dataclasses. Operands are validated against the variant union when a
node is constructed, so a tree can only ever hold boolean expression nodes.
"""

from __future__ import annotations

from typing import Union

from pydantic import ConfigDict
from pydantic.dataclasses import dataclass, rebuild_dataclass

_NODE_CONFIG = ConfigDict(strict=True)


@dataclass(frozen=True, config=_NODE_CONFIG)
class True_:
    """The constant true."""

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, config=_NODE_CONFIG)
class False_:
    """The constant false."""

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, config=_NODE_CONFIG)
class And:
    """Conjunction of two sub-expressions."""
    left: BooleanExpr
    right: BooleanExpr

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, config=_NODE_CONFIG)
class Or:
    """Disjunction of two sub-expressions."""
    left: BooleanExpr
    right: BooleanExpr

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, config=_NODE_CONFIG)
class Not:
    """Negation of a sub-expression."""
    expr: BooleanExpr

    def __str__(self) -> str:
        return render(self)


BooleanExpr = Union[True_, False_, And, Or, Not]

VARIANTS = (True_, False_, And, Or, Not)

for _node in (And, Or, Not):
    rebuild_dataclass(_node)


def is_boolean(value: object) -> bool:
    """Return True if value is a boolean expression node."""
    return isinstance(value, VARIANTS)


def render(expr: BooleanExpr) -> str:
    """
    Render an expression as parenthesized infix text.

    Binary nodes are wrapped in parentheses, negation is a bare ``NOT`` prefix:

        >>> render(And(Or(True_(), False_()), Not(False_())))
        '((True OR False) AND NOT False)'
    """
    if isinstance(expr, True_):
        return "True"
    if isinstance(expr, False_):
        return "False"
    if isinstance(expr, And):
        return f"({render(expr.left)} AND {render(expr.right)})"
    if isinstance(expr, Or):
        return f"({render(expr.left)} OR {render(expr.right)})"
    if isinstance(expr, Not):
        return f"NOT {render(expr.expr)}"
    raise TypeError(f"Not a boolean expression: {expr!r}")


def evaluate(expr: BooleanExpr, short_circuit: bool = False) -> bool:
    """
    Evaluate an expression by structural recursion.

    Both operands of And/Or are evaluated, left first, unless short_circuit
    is set, in which case the right operand is skipped once the left one
    decides the result.

    Args:
        expr: The expression tree.
        short_circuit: Skip right operands that cannot change the result.

    Returns:
        The truth value of the expression.
    """
    if isinstance(expr, True_):
        return True
    if isinstance(expr, False_):
        return False
    if isinstance(expr, And):
        left = evaluate(expr.left, short_circuit)
        if short_circuit and not left:
            return False
        right = evaluate(expr.right, short_circuit)
        return left and right
    if isinstance(expr, Or):
        left = evaluate(expr.left, short_circuit)
        if short_circuit and left:
            return True
        right = evaluate(expr.right, short_circuit)
        return left or right
    if isinstance(expr, Not):
        return not evaluate(expr.expr, short_circuit)
    raise TypeError(f"Not a boolean expression: {expr!r}")
