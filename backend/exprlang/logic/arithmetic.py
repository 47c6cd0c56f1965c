"""
Arithmetic expression trees.

Three variants (Const, Sum, Mul) built as frozen pydantic dataclasses, plus
the recursive evaluator and its integer overflow policies.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import ConfigDict
from pydantic.dataclasses import dataclass, rebuild_dataclass

_NODE_CONFIG = ConfigDict(strict=True)

SUPPORTED_INT_BITS = (8, 16, 32, 64)


class OverflowPolicy(str, Enum):
    """How evaluation treats results outside a fixed integer width."""
    UNBOUNDED = "unbounded"
    WRAP = "wrap"
    CHECKED = "checked"


class ArithmeticOverflowError(OverflowError):
    """Raised under the checked policy when a result leaves the integer range."""

    def __init__(self, value: int, bits: int):
        self.value = value
        self.bits = bits
        super().__init__(f"{value} does not fit in a signed {bits}-bit integer")


@dataclass(frozen=True, config=_NODE_CONFIG)
class Const:
    """Integer leaf."""
    value: int

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, config=_NODE_CONFIG)
class Sum:
    """Addition of two sub-expressions."""
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, config=_NODE_CONFIG)
class Mul:
    """Multiplication of two sub-expressions."""
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return render(self)


Expr = Union[Const, Sum, Mul]

VARIANTS = (Const, Sum, Mul)

for _node in (Sum, Mul):
    rebuild_dataclass(_node)


def is_arithmetic(value: object) -> bool:
    """Return True if value is an arithmetic expression node."""
    return isinstance(value, VARIANTS)


def render(expr: Expr) -> str:
    """Render an expression as fully parenthesized infix text, e.g. ``((3 + 5) * 2)``."""
    if isinstance(expr, Const):
        return str(expr.value)
    if isinstance(expr, Sum):
        return f"({render(expr.left)} + {render(expr.right)})"
    if isinstance(expr, Mul):
        return f"({render(expr.left)} * {render(expr.right)})"
    raise TypeError(f"Not an arithmetic expression: {expr!r}")


def evaluate(
    expr: Expr,
    overflow: OverflowPolicy = OverflowPolicy.UNBOUNDED,
    bits: int = 32
) -> int:
    """
    Evaluate an expression by structural recursion.

    Operands are evaluated left to right before the operator is applied.
    Under WRAP and CHECKED every intermediate value, constants included,
    is brought into (or checked against) the signed ``bits`` range.

    Args:
        expr: The expression tree.
        overflow: Overflow policy for intermediate results.
        bits: Integer width used by WRAP and CHECKED.

    Returns:
        The integer value of the expression.

    Raises:
        ArithmeticOverflowError: If overflow is CHECKED and a value is out of range.
        ValueError: If bits is not a supported integer width.
    """
    overflow = OverflowPolicy(overflow)
    if bits not in SUPPORTED_INT_BITS:
        allowed = ", ".join(str(b) for b in SUPPORTED_INT_BITS)
        raise ValueError(f"bits must be one of {allowed}, got {bits!r}")

    if isinstance(expr, Const):
        value = expr.value
    elif isinstance(expr, Sum):
        value = evaluate(expr.left, overflow, bits) + evaluate(expr.right, overflow, bits)
    elif isinstance(expr, Mul):
        value = evaluate(expr.left, overflow, bits) * evaluate(expr.right, overflow, bits)
    else:
        raise TypeError(f"Not an arithmetic expression: {expr!r}")

    return _fit(value, overflow, bits)


def _fit(value: int, overflow: OverflowPolicy, bits: int) -> int:
    """Apply the overflow policy to a single result."""
    if overflow is OverflowPolicy.UNBOUNDED:
        return value

    if overflow is OverflowPolicy.WRAP:
        modulus = 1 << bits
        wrapped = value & (modulus - 1)
        if wrapped >= modulus >> 1:
            wrapped -= modulus
        return wrapped

    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1
    if value < low or value > high:
        raise ArithmeticOverflowError(value, bits)
    return value
