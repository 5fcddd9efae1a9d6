"""Comment stripping: ``@* anything *@`` is removed before any other pass."""
from __future__ import annotations

import re

from .base import PatternTransformer, RenderContext


class CommentStripper(PatternTransformer):
    """Remove ``@* ... *@`` comment spans (may span lines)."""

    PATTERN = re.compile(r"@\*[\s\S]*?\*@")

    def replace(self, match: re.Match[str], context: RenderContext) -> str:
        return ""
