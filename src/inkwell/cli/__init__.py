"""
Inkwell CLI package.

Commands are auto-discovered from ``inkwell.cli.commands``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
"""
from ._output import OutputFormatter
from ._args import add_config_flag, add_json_flag, add_root_flag, parse_assignments

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_config_flag",
    "add_root_flag",
    "parse_assignments",
]
