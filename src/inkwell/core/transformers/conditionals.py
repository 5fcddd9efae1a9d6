"""Conditional block transformers.

Handles, in pipeline order:
- @if(cond) ... @else ... @endif      (IfElseTransformer)
- @unless(cond) ... @endunless         (UnlessTransformer)
- @if(cond) ... @endif                 (IfTransformer)

Conditions are variable names (dotted paths allowed) evaluated with
:func:`inkwell.core.scope.truthy`. Only the chosen branch is rendered, with
the current scope, so an ``@set`` inside a rendered branch stays visible to
the rest of the enclosing template.
"""
from __future__ import annotations

import re
from typing import Optional

from ..scope import truthy
from .base import RenderContext
from .blocks import Block, BlockTransformer

IF_OPENER = re.compile(r"@if\(\s*([A-Za-z0-9_.]+)\s*\)")
IF_CLOSER = re.compile(r"@endif(?![A-Za-z0-9_])")
ELSE = re.compile(r"@else(?![A-Za-z0-9_])")


class IfElseTransformer(BlockTransformer):
    """Resolve ``@if`` blocks that carry an ``@else`` branch.

    Blocks without an alternative are left for :class:`IfTransformer`.
    """

    OPENER = IF_OPENER
    CLOSER = IF_CLOSER
    SEPARATOR = ELSE

    def render_block(self, block: Block, context: RenderContext) -> Optional[str]:
        if block.alternative is None:
            return None
        if truthy(context.resolve(block.group(1))):
            return context.render(block.body)
        return context.render(block.alternative)


class UnlessTransformer(BlockTransformer):
    """Resolve ``@unless(cond) ... @endunless``: body only when falsy."""

    OPENER = re.compile(r"@unless\(\s*([A-Za-z0-9_.]+)\s*\)")
    CLOSER = re.compile(r"@endunless(?![A-Za-z0-9_])")

    def render_block(self, block: Block, context: RenderContext) -> str:
        if truthy(context.resolve(block.group(1))):
            return ""
        return context.render(block.body)


class IfTransformer(BlockTransformer):
    """Resolve the remaining ``@if(cond) ... @endif`` blocks."""

    OPENER = IF_OPENER
    CLOSER = IF_CLOSER
    SEPARATOR = ELSE

    def render_block(self, block: Block, context: RenderContext) -> str:
        if truthy(context.resolve(block.group(1))):
            return context.render(block.body)
        if block.alternative is not None:
            return context.render(block.alternative)
        return ""


__all__ = ["IfElseTransformer", "UnlessTransformer", "IfTransformer"]
