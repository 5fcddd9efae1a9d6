"""Build a :class:`TemplateEngine` from loaded configuration."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from inkwell.core.engine import TemplateEngine


def prefix_hook(prefix: str) -> Callable[[str], str]:
    """Asset hook that prepends ``prefix`` to every asset path."""

    def hook(path: str) -> str:
        return prefix + path

    return hook


def engine_from_config(config: Dict[str, Any], *, base_dir: Optional[Path] = None) -> TemplateEngine:
    """Create an engine from a merged configuration mapping.

    A relative ``engine.templates_root`` is resolved against ``base_dir``
    (the current directory when omitted).
    """
    engine_cfg = config.get("engine") or {}

    root = Path(str(engine_cfg.get("templates_root") or "."))
    if not root.is_absolute():
        root = (base_dir or Path.cwd()) / root

    prefix = engine_cfg.get("asset_prefix") or ""
    return TemplateEngine(
        root,
        dev_mode=bool(engine_cfg.get("dev_mode", False)),
        cache_enabled=bool(engine_cfg.get("cache_enabled", True)),
        live_reload=engine_cfg.get("live_reload"),
        asset_hook=prefix_hook(prefix) if prefix else None,
        globals=config.get("globals") or {},
    )


__all__ = ["engine_from_config", "prefix_hook"]
