"""
Expression algebras.

Provides boolean and arithmetic expression trees, their recursive
evaluators, a text parser and a JSON Logic codec.
"""

from .boolean import And, BooleanExpr, False_, Not, Or, True_
from .arithmetic import (
    ArithmeticOverflowError,
    Const,
    Expr,
    Mul,
    OverflowPolicy,
    Sum,
)
from .parser import ExpressionParser, ExpressionSyntaxError
from .serialize import from_logic, to_logic
from .analyzer import AnalysisResult, ExpressionAnalyzer
from .evaluator import EvaluationResult, ExpressionDepthError, ExpressionEvaluator

__all__ = [
    # Boolean
    "BooleanExpr",
    "True_",
    "False_",
    "And",
    "Or",
    "Not",
    # Arithmetic
    "Expr",
    "Const",
    "Sum",
    "Mul",
    "OverflowPolicy",
    "ArithmeticOverflowError",
    # Parsing and encoding
    "ExpressionParser",
    "ExpressionSyntaxError",
    "from_logic",
    "to_logic",
    # Analysis and evaluation
    "AnalysisResult",
    "ExpressionAnalyzer",
    "EvaluationResult",
    "ExpressionDepthError",
    "ExpressionEvaluator",
]
