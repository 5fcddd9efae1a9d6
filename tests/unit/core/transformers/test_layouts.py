"""Tests for @extend / @section / @yield layout composition."""
from __future__ import annotations

import pytest

from inkwell.core.exceptions import TemplateCycleError
from inkwell.core.transformers.layouts import LayoutComposer

BASE = (
    '<title>@yield("title")</title>'
    '<main>@yield("body")</main>'
    '<footer>@yield("footer")</footer>'
)


class TestLayoutComposer:
    def test_sections_fill_yields(self, memory_engine) -> None:
        engine = memory_engine({"base.html": BASE})
        child = (
            '@extend("base.html")'
            '@section("title")Home@endsection'
            '@section("body")Hi @var(name)@endsection'
        )
        assert engine.render_string(child, {"name": "Ada"}) == (
            "<title>Home</title><main>Hi Ada</main><footer></footer>"
        )

    def test_text_outside_sections_is_dropped(self, memory_engine) -> None:
        engine = memory_engine({"base.html": "[@yield(\"body\")]"})
        child = 'ignored @extend("base.html")@section("body")kept@endsection ignored'
        assert engine.render_string(child) == "[kept]"

    def test_unused_section_is_dropped(self, memory_engine) -> None:
        engine = memory_engine({"base.html": "[@yield(\"body\")]"})
        child = '@extend("base.html")@section("body")a@endsection@section("aside")b@endsection'
        assert engine.render_string(child) == "[a]"

    def test_multi_level_inheritance(self, memory_engine) -> None:
        engine = memory_engine({
            "base.html": '[@yield("body")]',
            "mid.html": '@extend("base.html")@section("body")<@yield("inner")>@endsection',
            "page.html": '@extend("mid.html")@section("inner")x@endsection',
        })
        html, report = engine.render_with_report("page.html")
        assert html == "[<x>]"
        assert report.layouts_composed == ["mid.html", "base.html"]

    def test_section_bodies_see_render_scope(self, memory_engine) -> None:
        engine = memory_engine({"base.html": '@yield("body")'})
        child = '@extend("base.html")@section("body")@for(i in items)@var(i)@endfor@endsection'
        assert engine.render_string(child, {"items": [1, 2, 3]}) == "123"

    def test_missing_layout_composes_empty(self, memory_engine) -> None:
        engine = memory_engine()
        assert engine.render_string('@extend("nope.html")@section("s")x@endsection tail') == ""

    def test_content_without_extend_is_untouched(self, make_context) -> None:
        context = make_context()
        assert LayoutComposer().apply_extends("plain @var(x)", context) == "plain @var(x)"


class TestLayoutCycles:
    TEMPLATES = {
        "a.html": '@extend("b.html")@section("s")A@endsection',
        "b.html": '@extend("a.html")@section("s")B@endsection',
    }

    def test_mutual_extends_raises(self, memory_engine) -> None:
        engine = memory_engine(self.TEMPLATES)
        with pytest.raises(TemplateCycleError) as excinfo:
            engine.render("a.html")
        assert excinfo.value.context["template"] == "a.html"

    def test_cycle_detected_from_string_render(self, memory_engine) -> None:
        engine = memory_engine(self.TEMPLATES)
        with pytest.raises(TemplateCycleError):
            engine.render_string('@extend("a.html")')

    def test_self_extend_raises(self, memory_engine) -> None:
        engine = memory_engine({"self.html": '@extend("self.html")'})
        with pytest.raises(TemplateCycleError):
            engine.render("self.html")

    def test_explicit_chain(self, make_context) -> None:
        context = make_context(templates={"base.html": "x"})
        with pytest.raises(TemplateCycleError):
            LayoutComposer().apply_extends('@extend("base.html")', context, ["base.html"])
