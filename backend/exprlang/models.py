"""
Configuration models for expression evaluation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logic.arithmetic import SUPPORTED_INT_BITS, OverflowPolicy


class EvaluatorConfig(BaseModel):
    """
    Settings for ExpressionEvaluator.

    Attributes:
        overflow: Integer overflow policy for arithmetic evaluation.
        int_bits: Integer width for the wrap and checked policies.
        short_circuit: Skip And/Or right operands that cannot change the result.
        max_depth: Deepest tree accepted for evaluation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    overflow: OverflowPolicy = OverflowPolicy.UNBOUNDED
    int_bits: int = 32
    short_circuit: bool = False
    max_depth: int = Field(default=500, ge=1)

    @field_validator("int_bits")
    @classmethod
    def check_int_bits(cls, v: int) -> int:
        """Only common machine widths are supported."""
        if v not in SUPPORTED_INT_BITS:
            allowed = ", ".join(str(b) for b in SUPPORTED_INT_BITS)
            raise ValueError(f"int_bits must be one of {allowed}")
        return v

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EvaluatorConfig":
        """Create from a settings mapping; None gives the defaults."""
        return cls.model_validate(data or {})


def load_config(path: Path) -> EvaluatorConfig:
    """
    Load evaluator settings from a YAML file.

    Settings may sit under an ``evaluator`` key or at the document root.
    An empty file gives the defaults.

    Args:
        path: Path to the YAML file.

    Returns:
        The validated configuration.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the YAML is malformed or the settings are invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"YAML parse error in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}")

    if "evaluator" in data:
        data = data["evaluator"]

    return EvaluatorConfig.from_dict(data)
