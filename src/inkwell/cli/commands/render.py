"""
Inkwell render command.

SUMMARY: Render a template from the templates root
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

from inkwell.cli import OutputFormatter, add_config_flag, add_json_flag, add_root_flag, parse_assignments
from inkwell.core.config import ConfigManager, engine_from_config
from inkwell.core.engine import RenderScopes
from inkwell.core.exceptions import InkwellError
from inkwell.core.stdlib_logging import configure_logging

SUMMARY = "Render a template from the templates root"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "template",
        type=str,
        help="Template identifier relative to the templates root, e.g. pages/home.html",
    )
    parser.add_argument(
        "--vars",
        dest="vars_file",
        type=str,
        help="YAML file with local variables (a mapping)",
    )
    for name, help_text in (
        ("var", "Local variable"),
        ("app", "App-scope value"),
        ("session", "Session-scope value"),
        ("req", "Request-scope value"),
    ):
        parser.add_argument(
            f"--{name}",
            action="append",
            default=[],
            metavar="KEY=VALUE",
            help=f"{help_text} (repeatable)",
        )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Enable dev mode (@dump output, live reload)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write the rendered text to this file instead of stdout",
    )
    add_config_flag(parser)
    add_root_flag(parser)
    add_json_flag(parser)


def load_variables(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge ``--vars`` file contents with ``--var`` assignments (assignments win)."""
    variables: Dict[str, Any] = {}
    vars_file = getattr(args, "vars_file", None)
    if vars_file:
        data = yaml.safe_load(Path(vars_file).read_text(encoding="utf-8"))
        if data is not None and not isinstance(data, dict):
            raise ValueError(f"--vars file must contain a mapping: {vars_file}")
        variables.update(data or {})
    variables.update(parse_assignments(args.var))
    return variables


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        cfg = ConfigManager(getattr(args, "config", None)).load_config()
        engine_cfg = cfg.setdefault("engine", {})
        if getattr(args, "root", None):
            engine_cfg["templates_root"] = str(Path(args.root).resolve())
        if getattr(args, "dev", False):
            engine_cfg["dev_mode"] = True

        log_cfg = cfg.get("logging") or {}
        configure_logging(log_cfg.get("level") or "WARNING", log_cfg.get("file"))

        engine = engine_from_config(cfg)
        scopes = RenderScopes(
            app=parse_assignments(args.app),
            session=parse_assignments(args.session),
            req=parse_assignments(args.req),
        )
        text, report = engine.render_with_report(args.template, load_variables(args), scopes)

        output = getattr(args, "output", None)
        if output:
            Path(output).write_text(text, encoding="utf-8")

        if formatter.json_mode:
            payload: Dict[str, Any] = {"template": args.template, "report": report.to_dict()}
            if output:
                payload["output_file"] = output
            else:
                payload["output"] = text
            formatter.json_output(payload)
        elif not output:
            sys.stdout.write(text)
        return 0
    except InkwellError as e:
        formatter.error(e, error_code=e.__class__.__name__)
        return 1
    except (OSError, ValueError, yaml.YAMLError, argparse.ArgumentTypeError) as e:
        formatter.error(e, error_code="render_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
