"""Base classes for the directive pipeline.

The TemplateEngine runs a fixed sequence of transformers over the text of a
template. Each transformer scans the whole current text for its directive,
replaces every match, and hands the result to the next one.

Transformation Order (14 steps):
1.  COMMENTS        - @* ... *@
2.  INCLUDE ARGS    - @include("file", k:"v":x:"y")
3.  INCLUDES        - @include("file")
4.  LOOPS           - @for(item in list) ... @endfor / @foreach ... @endforeach
5.  IF / ELSE       - @if(cond) ... @else ... @endif
6.  UNLESS          - @unless(cond) ... @endunless
7.  IF              - @if(cond) ... @endif
8.  WITH            - @with(k:"v") ... @endwith
9.  SET             - @set("k", "v")
10. ASSET           - @asset("path")
11. DUMP            - @dump(name)            (dev mode only)
12. YIELD           - @yield("name")         (unescaped)
13. RAW             - @raw(name)             (unescaped)
14. VAR             - @var(name|filter:arg)  (HTML-escaped)

Block bodies (loops, conditionals, with) are rendered by re-entering the
whole pipeline with the block's scope.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional, Set

from ..filters import FilterRegistry, apply_filter_chain, default_registry
from ..report import RenderReport
from ..scope import Environment, resolve
from ..source import TemplateLoader


def identity(path: str) -> str:
    return path


@dataclass
class RenderContext:
    """Everything a transformer needs while rendering one template.

    ``scope`` is the only field that changes when a block is rendered with a
    derived environment; the include stack and report are shared by the whole
    render call.
    """

    scope: Environment
    loader: TemplateLoader
    pipeline: "TransformerPipeline"
    filters: FilterRegistry = field(default_factory=default_registry)
    dev_mode: bool = False
    asset_hook: Callable[[str], str] = identity

    # Per-render state
    include_stack: Set[str] = field(default_factory=set)
    report: RenderReport = field(default_factory=RenderReport)

    def derive(self, scope: Environment) -> "RenderContext":
        """Same render call, different scope."""
        return replace(self, scope=scope)

    def render(self, body: str, scope: Optional[Environment] = None) -> str:
        """Run the full pipeline over ``body``."""
        context = self if scope is None else self.derive(scope)
        return self.pipeline.execute(body, context)

    def resolve(self, token: str) -> Any:
        """Resolve ``token`` in the current scope, tracking misses."""
        value = resolve(self.scope, token)
        if isinstance(value, str) and not value:
            self.report.record_missing_variable(token)
        return value

    def apply_filters(self, value: Any, chain: str) -> Any:
        return apply_filter_chain(
            value, chain, self.filters, on_missing=self.report.record_missing_filter
        )


class ContentTransformer(ABC):
    """Abstract base class for directive transformers.

    Transformers are stateless: everything they read or write goes through
    the :class:`RenderContext` passed to :meth:`transform`.
    """

    @abstractmethod
    def transform(self, content: str, context: RenderContext) -> str:
        """Transform content using this transformer's rules.

        Args:
            content: Input content to transform
            context: RenderContext with scope, loader and tracking

        Returns:
            Transformed content
        """
        ...

    def get_name(self) -> str:
        """Get transformer name for logging/debugging."""
        return self.__class__.__name__


class PatternTransformer(ContentTransformer):
    """Transformer that replaces every match of a single regex.

    Subclasses set ``PATTERN`` and implement :meth:`replace`.
    """

    PATTERN: re.Pattern[str]

    def transform(self, content: str, context: RenderContext) -> str:
        return self.PATTERN.sub(lambda match: self.replace(match, context), content)

    @abstractmethod
    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        ...


class TransformerPipeline:
    """Execute a sequence of transformers on content.

    Example:
        pipeline = TransformerPipeline([
            CommentStripper(),
            IncludeTransformer(),
            VariableTransformer(),
        ])
        result = pipeline.execute(content, context)
    """

    def __init__(self, transformers: List[ContentTransformer]) -> None:
        """Initialize with ordered list of transformers.

        Args:
            transformers: List of transformers to execute in order
        """
        self.transformers = transformers

    def execute(self, content: str, context: RenderContext) -> str:
        """Execute all transformers in sequence.

        Args:
            content: Input content
            context: RenderContext for the pipeline

        Returns:
            Fully transformed content
        """
        result = content
        for transformer in self.transformers:
            result = transformer.transform(result, context)
        return result

    def names(self) -> List[str]:
        return [transformer.get_name() for transformer in self.transformers]


__all__ = [
    "ContentTransformer",
    "PatternTransformer",
    "RenderContext",
    "TransformerPipeline",
    "identity",
]
