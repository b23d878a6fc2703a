"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_config_dir_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config-dir flag overriding the configuration home directory."""
    parser.add_argument(
        "--config-dir",
        dest="home",
        type=str,
        help="Configuration home directory (default: $APPFRAMEWORK_HOME or cwd)",
    )


def add_context_flag(parser: argparse.ArgumentParser) -> None:
    """Add --context flag pointing at a YAML/JSON context model document."""
    parser.add_argument(
        "--context",
        type=str,
        help="YAML or JSON file holding the context model (top-level mapping)",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add the flags every command accepts: --config-dir, --json, --verbose."""
    add_config_dir_flag(parser)
    add_json_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_config_dir_flag",
    "add_context_flag",
    "add_verbose_flag",
    "add_standard_flags",
]
