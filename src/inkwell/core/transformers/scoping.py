"""Scope directives.

Handles:
- @with(k:"v":x:"y") ... @endwith   - Render the body with extra bindings
- @set("k", "v")                     - Bind a value in the current scope

``@with`` bindings live in a child environment and disappear when the block
ends. ``@set`` writes into the environment the pipeline is currently running
with, so the value is visible to every later pass of the same template (and,
inside a loop or ``@with`` body, only to that body).
"""
from __future__ import annotations

import logging
import re

from ..text import parse_named_args
from .base import PatternTransformer, RenderContext
from .blocks import Block, BlockTransformer

logger = logging.getLogger(__name__)


class WithTransformer(BlockTransformer):
    """Resolve ``@with(...) ... @endwith`` blocks."""

    OPENER = re.compile(r"@with\(([^)]*)\)")
    CLOSER = re.compile(r"@endwith(?![A-Za-z0-9_])")

    def render_block(self, block: Block, context: RenderContext) -> str:
        bindings = parse_named_args(block.group(1))
        return context.render(block.body, context.scope.child(bindings))


class SetTransformer(PatternTransformer):
    """Resolve ``@set("key", "value")``; emits nothing."""

    PATTERN = re.compile(r'@set\("([^"]+)",\s*"([^"]*)"\)')

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        key, value = match.group(1), match.group(2)
        logger.debug("@set %s", key)
        context.scope.set(key, value)
        return ""


__all__ = ["WithTransformer", "SetTransformer"]
