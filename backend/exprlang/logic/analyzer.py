"""
Expression Analyzer.

Collects shape statistics for expression trees. Traversal uses an explicit
stack, so trees deeper than the interpreter recursion limit can be measured
before anything recursive touches them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from . import arithmetic, boolean
from .arithmetic import Expr, Mul, Sum
from .boolean import And, BooleanExpr, Not, Or


@dataclass
class AnalysisResult:
    """Shape of an expression tree."""
    algebra: str
    node_count: int = 0
    leaf_count: int = 0
    depth: int = 0
    variant_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "algebra": self.algebra,
            "node_count": self.node_count,
            "leaf_count": self.leaf_count,
            "depth": self.depth,
            "variant_counts": dict(self.variant_counts),
        }


class ExpressionAnalyzer:
    """Analyzes boolean and arithmetic expression trees."""

    def analyze(self, expr: Union[BooleanExpr, Expr]) -> AnalysisResult:
        """
        Analyze an expression tree.

        Args:
            expr: The root of the tree.

        Returns:
            AnalysisResult with node counts and depth. A lone leaf has depth 1.
        """
        result = AnalysisResult(algebra=algebra_of(expr))

        stack = [(expr, 1)]
        while stack:
            node, level = stack.pop()
            name = type(node).__name__
            result.node_count += 1
            result.variant_counts[name] = result.variant_counts.get(name, 0) + 1
            result.depth = max(result.depth, level)

            children = _children(node)
            if not children:
                result.leaf_count += 1
            for child in reversed(children):
                stack.append((child, level + 1))

        return result


def algebra_of(expr: Any) -> str:
    """Name the algebra an expression belongs to."""
    if isinstance(expr, boolean.VARIANTS):
        return "boolean"
    if isinstance(expr, arithmetic.VARIANTS):
        return "arithmetic"
    raise TypeError(f"Not an expression: {expr!r}")


def tree_depth(expr: Union[BooleanExpr, Expr]) -> int:
    """Depth of an expression tree."""
    return ExpressionAnalyzer().analyze(expr).depth


def _children(node: Any) -> Tuple[Any, ...]:
    if isinstance(node, (And, Or, Sum, Mul)):
        return (node.left, node.right)
    if isinstance(node, Not):
        return (node.expr,)
    return ()
