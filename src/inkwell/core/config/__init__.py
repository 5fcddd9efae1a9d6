"""Configuration loading for Inkwell."""
from __future__ import annotations

from .factory import engine_from_config, prefix_hook
from .manager import ENV_PREFIX, ConfigManager
from .merge import deep_merge

__all__ = ["ConfigManager", "ENV_PREFIX", "deep_merge", "engine_from_config", "prefix_hook"]
