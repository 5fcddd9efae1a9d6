"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse
from typing import Dict, Iterable, Optional


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config flag for an explicit project config file."""
    parser.add_argument(
        "--config",
        type=str,
        help="Project config file (default: ./inkwell.yaml if present)",
    )


def add_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --root flag overriding engine.templates_root."""
    parser.add_argument(
        "--root",
        type=str,
        help="Templates root directory (overrides engine.templates_root)",
    )


def parse_assignments(values: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse repeated ``key=value`` arguments.

    Raises:
        argparse.ArgumentTypeError: If an item has no ``=``.
    """
    result: Dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Expected key=value, got: {item!r}")
        result[key.strip()] = value
    return result


__all__ = ["add_json_flag", "add_config_flag", "add_root_flag", "parse_assignments"]
