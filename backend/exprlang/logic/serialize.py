"""
JSON Logic codec for expression trees.

Boolean trees map to ``true``/``false``, ``{"and": [...]}``, ``{"or": [...]}``
and ``{"!": ...}``; arithmetic trees map to integers, ``{"+": [...]}`` and
``{"*": [...]}``. The output is plain JSON/YAML data.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

from . import arithmetic, boolean
from .arithmetic import Const, Expr, Mul, Sum
from .boolean import And, BooleanExpr, False_, Not, Or, True_
from .parser import ExpressionSyntaxError

Logic = Union[bool, int, Dict[str, Any]]

BINARY_OPS = {
    "and": And,
    "or": Or,
    "+": Sum,
    "*": Mul,
}

MAX_NESTING = 100


def to_logic(expr: Union[BooleanExpr, Expr]) -> Logic:
    """
    Encode an expression tree as JSON Logic data.

    Args:
        expr: A boolean or arithmetic expression.

    Returns:
        A bool, int or single-key dict.
    """
    if isinstance(expr, True_):
        return True
    if isinstance(expr, False_):
        return False
    if isinstance(expr, And):
        return {"and": [to_logic(expr.left), to_logic(expr.right)]}
    if isinstance(expr, Or):
        return {"or": [to_logic(expr.left), to_logic(expr.right)]}
    if isinstance(expr, Not):
        return {"!": to_logic(expr.expr)}
    if isinstance(expr, Const):
        return expr.value
    if isinstance(expr, Sum):
        return {"+": [to_logic(expr.left), to_logic(expr.right)]}
    if isinstance(expr, Mul):
        return {"*": [to_logic(expr.left), to_logic(expr.right)]}
    raise TypeError(f"Not an expression: {expr!r}")


def from_logic(logic: Any, max_nesting: int = MAX_NESTING) -> Union[BooleanExpr, Expr]:
    """
    Decode JSON Logic data into an expression tree.

    Binary operators accept two or more operands and fold them to the left.

    Args:
        logic: A bool, int or single-key dict.
        max_nesting: Deepest operator nesting accepted. Deeper data is
            rejected before decoding starts.

    Returns:
        The expression tree.

    Raises:
        ExpressionSyntaxError: If the data is not a well-formed expression.
    """
    depth = _nesting(logic)
    if depth > max_nesting:
        raise ExpressionSyntaxError(
            f"Expression nested {depth} levels deep, limit is {max_nesting}"
        )
    return _decode(logic)


def _decode(logic: Any) -> Union[BooleanExpr, Expr]:
    # bool before int: bool is an int subclass
    if isinstance(logic, bool):
        return True_() if logic else False_()
    if isinstance(logic, int):
        return Const(logic)

    if not isinstance(logic, dict):
        raise ExpressionSyntaxError(
            f"Expected bool, int or mapping, got {type(logic).__name__}"
        )
    if len(logic) != 1:
        raise ExpressionSyntaxError(
            f"Expected a single operator, got {sorted(map(str, logic))}"
        )

    operator, args = next(iter(logic.items()))

    if operator == "!":
        if isinstance(args, list):
            if len(args) != 1:
                raise ExpressionSyntaxError("'!' takes exactly one operand")
            args = args[0]
        operand = _decode(args)
        _require_algebra(operator, [operand], boolean.VARIANTS)
        return Not(operand)

    node = BINARY_OPS.get(operator)
    if node is None:
        raise ExpressionSyntaxError(f"Unknown operator: {operator!r}")

    if not isinstance(args, list) or len(args) < 2:
        raise ExpressionSyntaxError(f"{operator!r} takes a list of at least two operands")

    operands = [_decode(arg) for arg in args]
    variants = boolean.VARIANTS if node in (And, Or) else arithmetic.VARIANTS
    _require_algebra(operator, operands, variants)

    result = operands[0]
    for operand in operands[1:]:
        result = node(result, operand)
    return result


def _require_algebra(operator: str, operands: List[Any], variants: tuple) -> None:
    """Reject operands from the other algebra."""
    for operand in operands:
        if not isinstance(operand, variants):
            raise ExpressionSyntaxError(
                f"{operator!r} cannot take operand {to_logic(operand)!r}"
            )


def _nesting(logic: Any) -> int:
    """Operator nesting depth of JSON Logic data, measured without recursion."""
    deepest = 0
    stack = [(logic, 0)]
    while stack:
        value, level = stack.pop()
        if isinstance(value, dict):
            level += 1
            deepest = max(deepest, level)
            stack.extend((item, level) for item in value.values())
        elif isinstance(value, list):
            stack.extend((item, level) for item in value)
    return deepest
