from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "inkwell"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_TARGET: str | None = None
_INKWELL_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str = "WARNING", log_path: Path | str | None = None) -> None:
    """Install a single handler on the ``inkwell`` logger.

    Records go to ``log_path`` when given, otherwise to stderr. Idempotent
    per-process: calling again with the same target only updates the level.
    """
    global _CONFIGURED_TARGET, _INKWELL_HANDLER

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _INKWELL_HANDLER is not None:
        _INKWELL_HANDLER.setLevel(_level_from_name(level))
        return

    # Replace the handler installed for a previous target.
    if _INKWELL_HANDLER is not None:
        logger.removeHandler(_INKWELL_HANDLER)
        _INKWELL_HANDLER.close()
        _INKWELL_HANDLER = None

    handler: logging.Handler
    if log_path:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _INKWELL_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: remove the installed handler and reset the level."""
    global _CONFIGURED_TARGET, _INKWELL_HANDLER
    logger = logging.getLogger(LOGGER_NAME)
    if _INKWELL_HANDLER is not None:
        logger.removeHandler(_INKWELL_HANDLER)
        _INKWELL_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _CONFIGURED_TARGET = None
    _INKWELL_HANDLER = None


__all__ = ["configure_logging", "reset_logging_for_tests", "LOGGER_NAME"]
