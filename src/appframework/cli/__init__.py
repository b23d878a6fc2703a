"""
appframework CLI package.

Commands are auto-discovered from domain subfolders (app/, extension/,
require/); each command module defines SUMMARY, register_args() and main().
"""
from ._output import OutputFormatter
from ._args import (
    add_context_flag,
    add_config_dir_flag,
    add_json_flag,
    add_standard_flags,
    add_verbose_flag,
)

__all__ = [
    "OutputFormatter",
    "add_context_flag",
    "add_config_dir_flag",
    "add_json_flag",
    "add_standard_flags",
    "add_verbose_flag",
]
