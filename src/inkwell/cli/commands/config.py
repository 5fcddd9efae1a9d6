"""
Inkwell config command.

SUMMARY: Show the merged configuration
"""

from __future__ import annotations

import argparse
import sys

import yaml

from inkwell.cli import OutputFormatter, add_config_flag, add_json_flag
from inkwell.core.config import ConfigManager
from inkwell.core.exceptions import ConfigError

SUMMARY = "Show the merged configuration"

_MISSING = object()


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Optional dot-notation key, e.g. engine.templates_root",
    )
    add_config_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        manager = ConfigManager(getattr(args, "config", None))
        cfg = manager.load_config()
        key = getattr(args, "key", None)
        if key:
            value = manager.get(key, _MISSING)
            if value is _MISSING:
                raise ConfigError(f"Unknown config key: {key}", context={"key": key})
        else:
            value = cfg

        if formatter.json_mode:
            formatter.json_output(value if not key else {"key": key, "value": value})
        elif isinstance(value, (dict, list)):
            formatter.text(yaml.safe_dump(value, sort_keys=False).rstrip())
        else:
            formatter.text(str(value))
        return 0
    except ConfigError as e:
        formatter.error(e, error_code="config_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
