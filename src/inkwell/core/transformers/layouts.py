"""Layout inheritance: ``@extend`` / ``@section`` / ``@yield``.

A child template names its parent layout and declares sections::

    @extend("layouts/base.html")
    @section("title")Home@endsection
    @section("body")<p>Hello @var(user.name)</p>@endsection

Composition renders every section body with the current scope, then fills
the layout's ``@yield("name")`` placeholders with the rendered sections.
Placeholders without a matching section render empty and sections the
layout never yields are dropped. Text of the child outside its sections is
discarded. The composed text is composed again, so a layout may extend a
further layout.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..exceptions import TemplateCycleError
from .base import RenderContext

logger = logging.getLogger(__name__)

EXTEND = re.compile(r'@extend\("([^"]+)"\)')
SECTION = re.compile(r'@section\("([^"]+)"\)([\s\S]*?)@endsection')
YIELD = re.compile(r'@yield\("([^"]+)"\)')


class LayoutComposer:
    """Expand ``@extend`` chains before the directive pipeline runs."""

    def load_layout(self, identifier: str, context: RenderContext) -> Tuple[Optional[str], str]:
        """Return ``(key, raw_text)``; a missing layout is ``(None, "")``."""
        key = context.loader.locate(identifier)
        if key is None:
            logger.debug("Layout not found, composing with empty layout: %s", identifier)
            return None, ""
        return key, context.loader.read(key)

    def render_sections(self, content: str, context: RenderContext) -> Dict[str, str]:
        """Render every ``@section`` of ``content`` with the current scope."""
        sections: Dict[str, str] = {}
        for match in SECTION.finditer(content):
            sections[match.group(1)] = context.render(match.group(2))
        return sections

    def apply_extends(
        self,
        content: str,
        context: RenderContext,
        chain: Optional[Sequence[str]] = None,
    ) -> str:
        """Compose ``content`` with its layout chain.

        Args:
            content: Raw template text
            context: Current render context
            chain: Template keys already on the inheritance chain

        Returns:
            Composed text, or ``content`` unchanged when it extends nothing

        Raises:
            TemplateCycleError: If a layout extends itself, directly or not.
        """
        match = EXTEND.search(content)
        if match is None:
            return content

        seen: List[str] = list(chain or [])
        key, layout = self.load_layout(match.group(1), context)
        if key is not None:
            if key in seen:
                raise TemplateCycleError(
                    f"Layout cycle detected: {key}",
                    template=key,
                    chain=seen,
                )
            seen.append(key)
            context.report.record_layout(key)
            logger.debug("Composing layout %s", key)

        sections = self.render_sections(content, context)
        composed = YIELD.sub(lambda m: sections.get(m.group(1), ""), layout)
        return self.apply_extends(composed, context, seen)


__all__ = ["LayoutComposer", "EXTEND", "SECTION", "YIELD"]
