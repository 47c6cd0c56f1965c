"""
Expression files.

Loads named expressions, plus optional evaluator settings, from YAML:

    evaluator:
      overflow: wrap
    expressions:
      demo: "((True OR False) AND NOT False)"
      area: {"*": [{"+": [3, 5]}, 2]}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Union

import yaml
from pydantic import ValidationError

from .logic.arithmetic import Expr
from .logic.boolean import BooleanExpr
from .logic.evaluator import ExpressionEvaluator
from .models import EvaluatorConfig

logger = logging.getLogger(__name__)


class ExpressionFileError(ValueError):
    """Raised when an expression file cannot be loaded."""


@dataclass
class ExpressionFile:
    """Contents of an expression file."""
    config: EvaluatorConfig = field(default_factory=EvaluatorConfig)
    expressions: Dict[str, Union[BooleanExpr, Expr]] = field(default_factory=dict)


def load_expression_file(path: Path) -> ExpressionFile:
    """
    Load an expression file.

    Entries may be infix text or JSON Logic data; every entry is parsed
    up front so errors name the offending expression.

    Args:
        path: Path to the YAML file.

    Returns:
        ExpressionFile with the settings and parsed trees.

    Raises:
        FileNotFoundError: If the file does not exist.
        ExpressionFileError: If the file or one of its entries is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Expression file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ExpressionFileError(f"YAML parse error: {e}") from e
    except RecursionError as e:
        raise ExpressionFileError(f"YAML nested too deeply in {path}") from e

    if not isinstance(data, dict):
        raise ExpressionFileError(f"Expected a mapping at the top of {path}")

    try:
        config = EvaluatorConfig.from_dict(data.get("evaluator"))
    except ValidationError as e:
        raise ExpressionFileError(f"Invalid evaluator settings: {e}") from e

    raw = data.get("expressions")
    if not isinstance(raw, dict) or not raw:
        raise ExpressionFileError(f"No expressions mapping in {path}")

    evaluator = ExpressionEvaluator(config)
    expressions = {}
    for name, value in raw.items():
        try:
            expressions[str(name)] = evaluator.coerce(value)
        except (TypeError, ValueError) as e:
            raise ExpressionFileError(f"Invalid expression {name!r}: {e}") from e

    logger.debug("Loaded %d expressions from %s", len(expressions), path)
    return ExpressionFile(config=config, expressions=expressions)
