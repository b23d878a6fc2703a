"""
appframework app list command.

SUMMARY: List registered apps, or only the enabled ones
"""
from __future__ import annotations

import argparse

from appframework.cli import OutputFormatter, add_context_flag, add_standard_flags
from appframework.cli._utils import app_payload, get_engine, load_context

SUMMARY = "List registered apps, or only the enabled ones"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--enabled",
        action="store_true",
        help="Only apps whose feature toggle is on",
    )
    add_context_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    engine = get_engine(args)

    if args.enabled:
        apps = engine.get_all_enabled_apps(load_context(args.context))
    else:
        apps = engine.get_all_apps()

    if formatter.json_mode:
        formatter.json_output({"apps": [app_payload(app) for app in apps], "count": len(apps)})
        return 0

    if not apps:
        formatter.text("No apps found.")
        return 0
    for app in apps:
        formatter.text(f"{app.order:>6}  {app.id}  {app.label or ''}".rstrip())
    return 0
