"""Tests for depth-aware block matching."""
from __future__ import annotations

import re

from inkwell.core.transformers.blocks import match_block, replace_blocks

OPEN = re.compile(r"@if\((\w+)\)")
CLOSE = re.compile(r"@endif")
ELSE = re.compile(r"@else")


def label(block):
    return f"<{block.group(1)}:{block.body}|{block.alternative}>"


class TestMatchBlock:
    def test_simple_block(self) -> None:
        content = "x @if(a)body@endif y"
        block = match_block(content, OPEN.search(content), OPEN, CLOSE)
        assert block is not None
        assert block.body == "body"
        assert content[block.start:block.end] == "@if(a)body@endif"

    def test_nested_same_kind_pairs_outermost(self) -> None:
        content = "@if(a) @if(b) x @endif y @else z @endif"
        block = match_block(content, OPEN.search(content), OPEN, CLOSE, ELSE)
        assert block.body == " @if(b) x @endif y "
        assert block.alternative == " z "
        assert block.end == len(content)

    def test_separator_inside_nested_block_is_ignored(self) -> None:
        content = "@if(a)@if(b)x@else y@endif@endif"
        block = match_block(content, OPEN.search(content), OPEN, CLOSE, ELSE)
        assert block.alternative is None
        assert block.body == "@if(b)x@else y@endif"

    def test_unbalanced_returns_none(self) -> None:
        content = "@if(a) no closer"
        assert match_block(content, OPEN.search(content), OPEN, CLOSE) is None


class TestReplaceBlocks:
    def test_replaces_every_outer_block(self) -> None:
        result = replace_blocks("@if(a)1@endif-@if(b)2@else3@endif", OPEN, CLOSE, label, ELSE)
        assert result == "<a:1|None>-<b:2|3>"

    def test_unbalanced_opener_kept_literal(self) -> None:
        assert replace_blocks("@if(a) text", OPEN, CLOSE, label) == "@if(a) text"

    def test_unbalanced_outer_does_not_hide_inner_block(self) -> None:
        result = replace_blocks("@if(a) @if(b)x@endif", OPEN, CLOSE, label)
        assert result == "@if(a) <b:x|None>"

    def test_replacer_returning_none_keeps_block(self) -> None:
        assert replace_blocks("@if(a)x@endif", OPEN, CLOSE, lambda block: None) == "@if(a)x@endif"

    def test_stray_closer_left_alone(self) -> None:
        assert replace_blocks("x @endif", OPEN, CLOSE, label) == "x @endif"
