"""
appframework require check command.

SUMMARY: Evaluate a require expression against a context model
"""
from __future__ import annotations

import argparse

from appframework.cli import OutputFormatter, add_context_flag, add_standard_flags
from appframework.cli._utils import get_evaluator, load_context

SUMMARY = "Evaluate a require expression against a context model"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("expression", help="Require expression, e.g. \"visit && visit.active\"")
    add_context_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Print the result; exit 0 when true, 2 when false."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    evaluator = get_evaluator(args)
    context = load_context(args.context) or {}

    result = evaluator.evaluate(args.expression, context)

    if formatter.json_mode:
        formatter.json_output({"expression": args.expression, "result": result})
    else:
        formatter.text("true" if result else "false")
    return 0 if result else 2
