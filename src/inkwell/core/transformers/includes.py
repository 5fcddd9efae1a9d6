"""Include transformers for partial templates.

Handles:
- @include("file")                  - Render a partial with the current scope
- @include("file", k:"v":x:"y")     - Render a partial with overrides merged
                                      over the current scope (overrides win)

A missing partial renders as empty text. A partial that escapes the
templates root raises TemplateSecurityError; a partial that is already being
expanded on the current call chain raises TemplateCycleError.
"""
from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Iterator, Optional, Set

from ..exceptions import TemplateCycleError
from ..scope import Environment
from ..text import parse_named_args
from .base import PatternTransformer, RenderContext

logger = logging.getLogger(__name__)


@contextmanager
def include_guard(stack: Set[str], key: str) -> Iterator[None]:
    """Hold ``key`` on the include stack for the duration of the block.

    The key is released on every exit path, so a failing partial does not
    block later sibling includes of the same template.

    Raises:
        TemplateCycleError: If ``key`` is already on the stack.
    """
    if key in stack:
        raise TemplateCycleError(
            f"Include cycle detected: {key}",
            template=key,
            chain=sorted(stack),
        )
    stack.add(key)
    try:
        yield
    finally:
        stack.discard(key)


class IncludeRenderer:
    """Load a partial and run it through the pipeline."""

    def render_include(
        self,
        identifier: str,
        context: RenderContext,
        scope: Optional[Environment] = None,
    ) -> str:
        """Render partial ``identifier``.

        Args:
            identifier: Template identifier relative to the loader root
            context: Current render context
            scope: Scope for the partial (defaults to the current scope)

        Returns:
            Rendered partial, or empty text when it does not exist
        """
        key = context.loader.locate(identifier)
        if key is None:
            logger.debug("Include not found, rendering empty: %s", identifier)
            return ""

        with include_guard(context.include_stack, key):
            raw = context.loader.read(key)
            context.report.record_include(key)
            return context.render(raw, scope)


class IncludeWithArgsTransformer(PatternTransformer):
    """Resolve ``@include("file", k:"v":x:"y")`` directives."""

    PATTERN = re.compile(r'@include\("([^"]+)",\s*([^)]+)\)')

    def __init__(self, renderer: Optional[IncludeRenderer] = None) -> None:
        self.renderer = renderer or IncludeRenderer()

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        overrides = parse_named_args(match.group(2))
        return self.renderer.render_include(
            match.group(1), context, context.scope.child(overrides)
        )


class IncludeTransformer(PatternTransformer):
    """Resolve ``@include("file")`` directives."""

    PATTERN = re.compile(r'@include\("([^"]+)"\)')

    def __init__(self, renderer: Optional[IncludeRenderer] = None) -> None:
        self.renderer = renderer or IncludeRenderer()

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        return self.renderer.render_include(match.group(1), context)


__all__ = [
    "include_guard",
    "IncludeRenderer",
    "IncludeWithArgsTransformer",
    "IncludeTransformer",
]
