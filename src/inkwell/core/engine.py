"""Template engine facade.

A :class:`TemplateEngine` owns the long-lived collaborators (template loader
and cache, filter registry, globals, asset hook) and runs every render call
through the same two phases:

1. Composition - ``@extend`` chains are expanded by :class:`LayoutComposer`,
   rendering each ``@section`` body with the render scope.
2. Directives - the composed text runs through the 14-step pipeline (see
   :mod:`inkwell.core.transformers.base`).

Each call gets a fresh :class:`Environment`, include stack and report, so one
engine may serve concurrent renders.

Usage:
    engine = TemplateEngine("templates", dev_mode=True)
    engine.put_global("site", {"name": "Inkwell"})
    html = engine.render(
        "pages/home.html",
        {"user": {"name": "ada"}},
        RenderScopes(req={"path": "/"}),
    )
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .exceptions import TemplateNotFoundError
from .filters import Filter, FilterRegistry, default_registry
from .report import RenderReport
from .scope import Environment
from .source import FileSystemLoader, TemplateCache, TemplateLoader
from .transformers.assets import AssetTransformer
from .transformers.base import RenderContext, TransformerPipeline, identity
from .transformers.comments import CommentStripper
from .transformers.conditionals import IfElseTransformer, IfTransformer, UnlessTransformer
from .transformers.debug import DumpTransformer
from .transformers.includes import IncludeRenderer, IncludeTransformer, IncludeWithArgsTransformer
from .transformers.layouts import LayoutComposer
from .transformers.loops import LoopExpander
from .transformers.scoping import SetTransformer, WithTransformer
from .transformers.variables import RawTransformer, VarTransformer, YieldTransformer

logger = logging.getLogger(__name__)


@dataclass
class RenderScopes:
    """Host-supplied namespaces for one render call.

    ``app`` values overlay the engine globals; ``session`` and ``req`` are
    only visible to the render they are passed to.
    """

    app: Dict[str, Any] = field(default_factory=dict)
    session: Dict[str, Any] = field(default_factory=dict)
    req: Dict[str, Any] = field(default_factory=dict)

    def clear_request(self) -> None:
        self.req.clear()


class TemplateEngine:
    """Render templates from a sandboxed root.

    Args:
        templates_root: Directory templates are loaded from
        dev_mode: Enables ``@dump`` output and, by default, live reload
        cache_enabled: Keep template text in memory
        live_reload: Re-read cached templates whose mtime changed
            (defaults to ``dev_mode``)
        asset_hook: ``path -> path`` rewrite for ``@asset`` (identity)
        loader: Custom loader; replaces the file-system loader. A custom
            loader does its own caching: ``cache_enabled`` and
            ``live_reload`` only configure the default loader, and
            ``cache`` is the loader's own ``TemplateCache`` when it has one
        filters: Filter registry (defaults to the built-in filters)
        globals: Initial engine globals (``app`` namespace)
    """

    def __init__(
        self,
        templates_root: Union[str, Path] = ".",
        *,
        dev_mode: bool = False,
        cache_enabled: bool = True,
        live_reload: Optional[bool] = None,
        asset_hook: Optional[Callable[[str], str]] = None,
        loader: Optional[TemplateLoader] = None,
        filters: Optional[FilterRegistry] = None,
        globals: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.dev_mode = dev_mode
        self.cache: Optional[TemplateCache]
        if loader is None:
            self.cache = TemplateCache(
                enabled=cache_enabled,
                live_reload=dev_mode if live_reload is None else live_reload,
            )
            loader = FileSystemLoader(templates_root, self.cache)
        else:
            cache = getattr(loader, "cache", None)
            self.cache = cache if isinstance(cache, TemplateCache) else None
        self.loader: TemplateLoader = loader
        self.filters = filters if filters is not None else default_registry()
        self.asset_hook: Callable[[str], str] = asset_hook or identity

        self._globals: Dict[str, Any] = dict(globals or {})
        self._globals_lock = threading.Lock()

        self.composer = LayoutComposer()
        self.pipeline = self._build_pipeline()

    def _build_pipeline(self) -> TransformerPipeline:
        """Build the 14-step directive pipeline."""
        includes = IncludeRenderer()
        return TransformerPipeline([
            # Step 1: Comments
            CommentStripper(),
            # Step 2-3: Includes (with overrides, then plain)
            IncludeWithArgsTransformer(includes),
            IncludeTransformer(includes),
            # Step 4: Loops
            LoopExpander(),
            # Step 5-7: Conditionals
            IfElseTransformer(),
            UnlessTransformer(),
            IfTransformer(),
            # Step 8-9: Scope
            WithTransformer(),
            SetTransformer(),
            # Step 10-11: Assets and dev dump
            AssetTransformer(),
            DumpTransformer(),
            # Step 12-14: Interpolation (escaped last)
            YieldTransformer(),
            RawTransformer(),
            VarTransformer(),
        ])

    # ------------------------------------------------------------------
    # Configuration-time API
    # ------------------------------------------------------------------

    def register_filter(self, name: str, func: Filter) -> "TemplateEngine":
        self.filters.add(name, func)
        return self

    def put_global(self, key: str, value: Any) -> "TemplateEngine":
        with self._globals_lock:
            updated = dict(self._globals)
            updated[key] = value
            self._globals = updated
        return self

    def remove_global(self, key: str) -> "TemplateEngine":
        with self._globals_lock:
            updated = dict(self._globals)
            updated.pop(key, None)
            self._globals = updated
        return self

    @property
    def globals(self) -> Dict[str, Any]:
        return dict(self._globals)

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def load(self, template: str) -> Tuple[str, str]:
        """Return ``(key, raw_text)`` for a top-level template.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            TemplateSecurityError: If it resolves outside the root.
        """
        key = self.loader.locate(template)
        if key is None:
            raise TemplateNotFoundError(
                f"Template not found: {template}",
                context={"template": template},
            )
        return key, self.loader.read(key)

    def _environment(
        self,
        variables: Optional[Mapping[str, Any]],
        scopes: Optional[RenderScopes],
    ) -> Environment:
        scopes = scopes or RenderScopes()
        app = self._globals
        if scopes.app:
            app = {**app, **scopes.app}
        return Environment(variables, app=app, session=scopes.session, req=scopes.req)

    def process(
        self,
        content: str,
        variables: Optional[Mapping[str, Any]] = None,
        scopes: Optional[RenderScopes] = None,
        *,
        template: Optional[str] = None,
        root_key: Optional[str] = None,
    ) -> Tuple[str, RenderReport]:
        """Compose and render raw template text.

        Args:
            content: Raw template text
            variables: Local bindings for the render
            scopes: Host-supplied ``app`` / ``session`` / ``req`` values
            template: Template name recorded in the report
            root_key: Loader key of ``content``; seeds cycle detection

        Returns:
            Tuple of (rendered text, report)
        """
        context = RenderContext(
            scope=self._environment(variables, scopes),
            loader=self.loader,
            pipeline=self.pipeline,
            filters=self.filters,
            dev_mode=self.dev_mode,
            asset_hook=self.asset_hook,
            report=RenderReport(template=template),
        )
        chain: List[str] = []
        if root_key is not None:
            context.include_stack.add(root_key)
            chain.append(root_key)

        composed = self.composer.apply_extends(content, context, chain)
        result = self.pipeline.execute(composed, context)

        report = context.report
        if report.variables_missing:
            logger.debug(
                "Render of %s left variables empty: %s",
                template or "<string>",
                ", ".join(sorted(report.variables_missing)),
            )
        return result, report

    def render_with_report(
        self,
        template: str,
        variables: Optional[Mapping[str, Any]] = None,
        scopes: Optional[RenderScopes] = None,
    ) -> Tuple[str, RenderReport]:
        key, raw = self.load(template)
        return self.process(raw, variables, scopes, template=template, root_key=key)

    def render(
        self,
        template: str,
        variables: Optional[Mapping[str, Any]] = None,
        scopes: Optional[RenderScopes] = None,
    ) -> str:
        """Render the template named ``template``."""
        return self.render_with_report(template, variables, scopes)[0]

    def render_string(
        self,
        text: str,
        variables: Optional[Mapping[str, Any]] = None,
        scopes: Optional[RenderScopes] = None,
    ) -> str:
        """Render template text that does not live under the root."""
        return self.process(text, variables, scopes)[0]


__all__ = ["RenderScopes", "TemplateEngine"]
