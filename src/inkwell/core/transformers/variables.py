"""Interpolation transformers.

Handles, in pipeline order:
- @yield("name")            - Resolved value, unescaped
- @raw(name)                - Resolved value, unescaped
- @var(name|filter:arg)     - Resolved value through the filter chain,
                              HTML-escaped

``@var`` runs last so that only explicit variable sites are escaped; text
produced by includes, loops and raw sites is emitted as is.
"""
from __future__ import annotations

import re

from ..text import html_escape, to_text
from .base import PatternTransformer, RenderContext


class YieldTransformer(PatternTransformer):
    """Resolve ``@yield("name")`` left outside of a layout."""

    PATTERN = re.compile(r'@yield\("([^"]+)"\)')

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        return to_text(context.resolve(match.group(1)))


class RawTransformer(PatternTransformer):
    """Resolve ``@raw(name)`` without escaping."""

    PATTERN = re.compile(r"@raw\(([A-Za-z0-9_.]+)\)")

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        return to_text(context.resolve(match.group(1)))


class VarTransformer(PatternTransformer):
    """Resolve ``@var(name|filters)`` and HTML-escape the result.

    Filter arguments may be double-quoted, in which case they can contain
    ``)``, ``|`` and ``:``.
    """

    PATTERN = re.compile(r'@var\(([A-Za-z0-9_.]+)(\|(?:"[^"]*"|[^")])+)?\)')

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        value = context.resolve(match.group(1))
        chain = match.group(2)
        if chain:
            value = context.apply_filters(value, chain)
        return html_escape(to_text(value))


__all__ = ["YieldTransformer", "RawTransformer", "VarTransformer"]
