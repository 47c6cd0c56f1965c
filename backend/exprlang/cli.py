"""Command line entry point: evaluate expressions given inline or in a YAML file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .loader import load_expression_file
from .logic.arithmetic import SUPPORTED_INT_BITS, Const, Mul, OverflowPolicy, Sum
from .logic.boolean import And, False_, Not, Or, True_
from .logic.evaluator import ExpressionEvaluator, render
from .models import EvaluatorConfig

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="exprlang",
        description="Render and evaluate boolean and arithmetic expressions.",
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        metavar="EXPR",
        help='infix expression, e.g. "(True OR False) AND NOT False" or "(3 + 5) * 2"',
    )
    parser.add_argument(
        "-f", "--file",
        type=Path,
        help="YAML file with an 'expressions' mapping and optional 'evaluator' settings",
    )
    parser.add_argument(
        "--overflow",
        choices=[p.value for p in OverflowPolicy],
        help="integer overflow policy (default: unbounded)",
    )
    parser.add_argument(
        "--bits",
        type=int,
        choices=SUPPORTED_INT_BITS,
        help="integer width for the wrap and checked policies (default: 32)",
    )
    parser.add_argument(
        "--short-circuit",
        action="store_true",
        help="skip AND/OR right operands that cannot change the result",
    )
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _merge_config(base: EvaluatorConfig, args: argparse.Namespace) -> EvaluatorConfig:
    """Command line flags override file settings."""
    overrides = {}
    if args.overflow:
        overrides["overflow"] = args.overflow
    if args.bits:
        overrides["int_bits"] = args.bits
    if args.short_circuit:
        overrides["short_circuit"] = True
    if not overrides:
        return base
    return EvaluatorConfig.from_dict({**base.model_dump(), **overrides})


def run_demo() -> None:
    """Evaluate and print the two sample expressions."""
    evaluator = ExpressionEvaluator()
    samples = [
        And(Or(True_(), False_()), Not(False_())),
        Mul(Sum(Const(3), Const(5)), Const(2)),
    ]
    for expression in samples:
        print(f"Evaluating expression: {render(expression)}")
        print(f"Result: {evaluator.evaluate(expression)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    _setup_logging(args.verbose)

    if not args.expressions and args.file is None:
        run_demo()
        return 0

    try:
        config = EvaluatorConfig()
        file_results = []
        if args.file is not None:
            loaded = load_expression_file(args.file)
            config = loaded.config
            evaluator = ExpressionEvaluator(_merge_config(config, args))
            file_results = evaluator.evaluate_all(loaded.expressions)

        evaluator = ExpressionEvaluator(_merge_config(config, args))
        inline_results = evaluator.evaluate_all({
            f"expr{index}": text
            for index, text in enumerate(args.expressions, start=1)
        })
    except (FileNotFoundError, ValueError, TypeError, OverflowError) as e:
        logger.debug("Evaluation failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        results = file_results + inline_results
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return 0

    for result in file_results:
        print(f"{result.name}: {result.rendered} = {result.value}")
    for result in inline_results:
        print(f"{result.rendered} = {result.value}")
    return 0
