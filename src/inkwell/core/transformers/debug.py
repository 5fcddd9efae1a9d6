"""Developer dump: ``@dump(name)``.

Only active when the engine runs in dev mode; otherwise the directive is
removed.
"""
from __future__ import annotations

import re

from ..text import dump, html_escape
from .base import PatternTransformer, RenderContext


class DumpTransformer(PatternTransformer):
    PATTERN = re.compile(r"@dump\(([A-Za-z0-9_.]+)\)")

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        if not context.dev_mode:
            return ""
        value = context.resolve(match.group(1))
        return "<pre>" + html_escape(dump(value)) + "</pre>"


__all__ = ["DumpTransformer"]
