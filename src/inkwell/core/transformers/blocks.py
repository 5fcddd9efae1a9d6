"""Depth-aware matching of ``@open(...) ... @close`` block directives.

Non-greedy regexes pair an opener with the first closer, which breaks as soon
as a block of the same kind is nested inside another. The scanner here counts
nested openers so that::

    @if(a) @if(b) x @endif y @else z @endif

pairs the outer ``@if`` with the last ``@endif`` and splits on the ``@else``
that sits at the outer block's own level.

An opener without a matching closer is left untouched as literal text and
scanning resumes right after it.
"""
from __future__ import annotations

import re
from abc import abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from .base import ContentTransformer, RenderContext


@dataclass(frozen=True)
class Block:
    """A matched block directive."""

    start: int
    end: int
    opener: re.Match[str]
    body: str
    alternative: Optional[str] = None  # text after the separator, if any

    def group(self, index: int) -> str:
        return self.opener.group(index)


def match_block(
    content: str,
    start: re.Match[str],
    opener: re.Pattern[str],
    closer: re.Pattern[str],
    separator: Optional[re.Pattern[str]] = None,
) -> Optional[Block]:
    """Find the closer pairing with ``start``; ``None`` when unbalanced."""
    depth = 1
    pos = start.end()
    split: Optional[re.Match[str]] = None

    while True:
        close = closer.search(content, pos)
        if close is None:
            return None

        nested = opener.search(content, pos, close.start())
        if separator is not None and depth == 1 and split is None:
            limit = nested.start() if nested is not None else close.start()
            split = separator.search(content, pos, limit)

        if nested is not None:
            depth += 1
            pos = nested.end()
            continue

        depth -= 1
        if depth == 0:
            if split is None:
                body, alternative = content[start.end():close.start()], None
            else:
                body = content[start.end():split.start()]
                alternative = content[split.end():close.start()]
            return Block(
                start=start.start(),
                end=close.end(),
                opener=start,
                body=body,
                alternative=alternative,
            )
        pos = close.end()


def replace_blocks(
    content: str,
    opener: re.Pattern[str],
    closer: re.Pattern[str],
    replacer: Callable[[Block], Optional[str]],
    separator: Optional[re.Pattern[str]] = None,
) -> str:
    """Replace every outermost block; ``replacer`` returning ``None`` keeps it as is."""
    parts: List[str] = []
    pos = 0
    while True:
        start = opener.search(content, pos)
        if start is None:
            break

        block = match_block(content, start, opener, closer, separator)
        if block is None:
            parts.append(content[pos:start.end()])
            pos = start.end()
            continue

        replacement = replacer(block)
        parts.append(content[pos:block.start])
        parts.append(content[block.start:block.end] if replacement is None else replacement)
        pos = block.end

    parts.append(content[pos:])
    return "".join(parts)


class BlockTransformer(ContentTransformer):
    """Transformer for ``OPENER ... [SEPARATOR ...] CLOSER`` directives.

    Subclasses set the patterns and implement :meth:`render_block`.
    """

    OPENER: re.Pattern[str]
    CLOSER: re.Pattern[str]
    SEPARATOR: Optional[re.Pattern[str]] = None

    def transform(self, content: str, context: RenderContext) -> str:
        return replace_blocks(
            content,
            self.OPENER,
            self.CLOSER,
            lambda block: self.render_block(block, context),
            self.SEPARATOR,
        )

    @abstractmethod
    def render_block(self, block: Block, context: RenderContext) -> Optional[str]:
        """Return the replacement text, or ``None`` to leave the block as is."""
        ...


__all__ = ["Block", "BlockTransformer", "match_block", "replace_blocks"]
