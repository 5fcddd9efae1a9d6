"""Directive transformers for the Inkwell template engine.

Each transformer handles one directive family:

- base: Abstract base classes, render context and pipeline
- blocks: Depth-aware ``@open ... @close`` block matching
- comments: ``@* ... *@`` stripping
- includes: Partial inclusion with cycle detection
- loops: Collection iteration (``@for`` / ``@foreach``)
- conditionals: ``@if`` / ``@else`` / ``@unless``
- scoping: ``@with`` blocks and ``@set``
- assets: ``@asset`` path rewriting
- debug: ``@dump`` (dev mode)
- variables: ``@yield``, ``@raw`` and ``@var`` interpolation
- layouts: ``@extend`` / ``@section`` composition
"""
from __future__ import annotations

from .base import ContentTransformer, PatternTransformer, RenderContext, TransformerPipeline
from .blocks import Block, BlockTransformer
from .comments import CommentStripper
from .includes import IncludeRenderer, IncludeTransformer, IncludeWithArgsTransformer, include_guard
from .loops import LoopExpander
from .conditionals import IfElseTransformer, IfTransformer, UnlessTransformer
from .scoping import SetTransformer, WithTransformer
from .assets import AssetTransformer
from .debug import DumpTransformer
from .variables import RawTransformer, VarTransformer, YieldTransformer
from .layouts import LayoutComposer

__all__ = [
    # Base classes
    "ContentTransformer",
    "PatternTransformer",
    "RenderContext",
    "TransformerPipeline",
    "Block",
    "BlockTransformer",
    # Directives
    "CommentStripper",
    "IncludeRenderer",
    "IncludeWithArgsTransformer",
    "IncludeTransformer",
    "include_guard",
    "LoopExpander",
    "IfElseTransformer",
    "UnlessTransformer",
    "IfTransformer",
    "WithTransformer",
    "SetTransformer",
    "AssetTransformer",
    "DumpTransformer",
    "YieldTransformer",
    "RawTransformer",
    "VarTransformer",
    # Composition
    "LayoutComposer",
]
