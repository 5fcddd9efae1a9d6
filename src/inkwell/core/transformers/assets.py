"""Asset path rewriting: ``@asset("css/site.css")``.

The path goes through the engine's asset hook (identity by default). A hook
that raises never fails the render; the literal path is emitted instead.
"""
from __future__ import annotations

import logging
import re

from .base import PatternTransformer, RenderContext

logger = logging.getLogger(__name__)


class AssetTransformer(PatternTransformer):
    """Resolve ``@asset("path")`` through ``context.asset_hook``."""

    PATTERN = re.compile(r'@asset\("([^"]+)"\)')

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        path = match.group(1)
        try:
            return str(context.asset_hook(path))
        except Exception as exc:
            logger.warning("Asset hook failed for %s, using literal path: %s", path, exc)
            return path


__all__ = ["AssetTransformer"]
