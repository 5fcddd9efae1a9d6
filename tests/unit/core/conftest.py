from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import pytest

from inkwell.core.engine import TemplateEngine
from inkwell.core.scope import Environment
from inkwell.core.source import MappingLoader
from inkwell.core.transformers.base import RenderContext


@pytest.fixture
def make_context():
    """Build a RenderContext over in-memory templates.

    Usage:
        context = make_context({"name": "ada"}, templates={"nav.html": "..."})
    """

    def _make(
        variables: Optional[Mapping[str, Any]] = None,
        *,
        templates: Optional[Dict[str, str]] = None,
        dev_mode: bool = False,
        app: Optional[Mapping[str, Any]] = None,
        session: Optional[Mapping[str, Any]] = None,
        req: Optional[Mapping[str, Any]] = None,
        **engine_kwargs: Any,
    ) -> RenderContext:
        engine = TemplateEngine(
            loader=MappingLoader(templates or {}),
            dev_mode=dev_mode,
            **engine_kwargs,
        )
        return RenderContext(
            scope=Environment(variables, app=app, session=session, req=req),
            loader=engine.loader,
            pipeline=engine.pipeline,
            filters=engine.filters,
            dev_mode=dev_mode,
            asset_hook=engine.asset_hook,
        )

    return _make


@pytest.fixture
def memory_engine():
    """Engine over in-memory templates."""

    def _make(templates: Optional[Dict[str, str]] = None, **kwargs: Any) -> TemplateEngine:
        return TemplateEngine(loader=MappingLoader(templates or {}), **kwargs)

    return _make
