"""Loop transformer.

Handles:
- @for(item in items) ... @endfor
- @foreach(item in items) ... @endforeach

Inside the body, ``item`` is the current element and ``item_index`` its
zero-based position. Every iteration renders the body through the full
pipeline with its own child scope, so bindings made inside one iteration
(including ``@set``) never reach the next iteration or the outer scope.

Example:
    Context: {"users": [{"name": "ada"}, {"name": "bob"}]}
    Template: @for(u in users)<li>@var(u_index): @var(u.name)</li>@endfor
    Output:   <li>0: ada</li><li>1: bob</li>
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any, List, Optional

from .base import RenderContext
from .blocks import Block, BlockTransformer


def iter_collection(value: Any) -> Optional[Iterable[Any]]:
    """Return ``value`` if a loop may iterate it, else ``None``.

    Strings, bytes and mappings are not loop collections.
    """
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return None
    if isinstance(value, Iterable):
        return value
    return None


class LoopExpander(BlockTransformer):
    """Expand ``@for``/``@foreach`` blocks."""

    OPENER = re.compile(r"@(?:foreach|for)\(\s*([A-Za-z0-9_]+)\s+in\s+([A-Za-z0-9_.]+)\s*\)")
    CLOSER = re.compile(r"@end(?:foreach|for)(?![A-Za-z0-9_])")

    def render_block(self, block: Block, context: RenderContext) -> str:
        item_name = block.group(1)
        collection = iter_collection(context.resolve(block.group(2)))
        if collection is None:
            return ""

        context.report.loops_expanded += 1
        results: List[str] = []
        for index, item in enumerate(collection):
            child = context.scope.child({item_name: item, f"{item_name}_index": index})
            results.append(context.render(block.body, child))
        return "".join(results)


__all__ = ["LoopExpander", "iter_collection"]
