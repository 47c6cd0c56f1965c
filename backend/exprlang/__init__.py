"""
exprlang: boolean and arithmetic expression algebras.

This package provides immutable expression trees with recursive evaluators,
plus the tooling around them: an infix parser, a JSON Logic codec, tree
analysis, configurable evaluation and YAML expression files.
"""

from .logic import (
    And,
    ArithmeticOverflowError,
    BooleanExpr,
    Const,
    Expr,
    ExpressionEvaluator,
    ExpressionParser,
    ExpressionSyntaxError,
    False_,
    Mul,
    Not,
    Or,
    OverflowPolicy,
    Sum,
    True_,
)
from .models import EvaluatorConfig, load_config
from .loader import ExpressionFile, ExpressionFileError, load_expression_file

__version__ = "1.0.0"
__all__ = [
    "BooleanExpr",
    "True_",
    "False_",
    "And",
    "Or",
    "Not",
    "Expr",
    "Const",
    "Sum",
    "Mul",
    "OverflowPolicy",
    "ArithmeticOverflowError",
    "ExpressionParser",
    "ExpressionSyntaxError",
    "ExpressionEvaluator",
    "EvaluatorConfig",
    "load_config",
    "ExpressionFile",
    "ExpressionFileError",
    "load_expression_file",
]
