"""
appframework extension list command.

SUMMARY: List extensions for an extension point
"""
from __future__ import annotations

import argparse

from appframework.cli import OutputFormatter, add_context_flag, add_standard_flags
from appframework.cli._utils import extension_payload, get_engine, load_context

SUMMARY = "List extensions for an extension point"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "point",
        nargs="?",
        help="Extension point id (all points if omitted)",
    )
    parser.add_argument(
        "--enabled",
        action="store_true",
        help="Only extensions whose feature toggle is on (and require passes with --context)",
    )
    add_context_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    engine = get_engine(args)

    if args.enabled:
        extensions = engine.get_all_enabled_extensions(args.point, load_context(args.context))
    else:
        extensions = engine.get_all_extensions(args.point)

    if formatter.json_mode:
        formatter.json_output(
            {
                "extensionPointId": args.point,
                "extensions": [extension_payload(ext) for ext in extensions],
                "count": len(extensions),
            }
        )
        return 0

    if not extensions:
        formatter.text("No extensions found.")
        return 0
    for ext in extensions:
        formatter.text(f"{ext.order:>6}  {ext.id}  [{ext.extension_point_id}]")
    return 0
