"""Tests for @with blocks and @set."""
from __future__ import annotations

from inkwell.core.scope import resolve
from inkwell.core.transformers.scoping import SetTransformer, WithTransformer


class TestWith:
    def test_bindings_visible_in_body_only(self, make_context) -> None:
        context = make_context()
        text = '@with(name:"Ada")Hi @var(name)@endwith|@var(name)'
        assert context.render(text) == "Hi Ada|"

    def test_bindings_shadow_outer_locals(self, make_context) -> None:
        context = make_context({"name": "outer"})
        text = '@with(name:"inner")@var(name)@endwith/@var(name)'
        assert context.render(text) == "inner/outer"

    def test_several_bindings(self, make_context) -> None:
        context = make_context()
        assert context.render('@with(a:"1":b:"2")@var(a)@var(b)@endwith') == "12"

    def test_nested_with_blocks(self, make_context) -> None:
        context = make_context()
        text = '@with(a:"1")@with(b:"2")@var(a)@var(b)@endwith@var(b)@endwith'
        assert context.render(text) == "12"

    def test_set_inside_with_stays_inside(self, make_context) -> None:
        context = make_context()
        context.render('@with(a:"1")@set("b", "2")@endwith')
        assert resolve(context.scope, "b") == ""

    def test_binding_hides_outer_nested_path(self, make_context) -> None:
        context = make_context({"user": {"name": "ada"}})
        text = '@with(user:"bob")[@var(user.name)]@endwith'
        assert context.render(text) == "[]"

    def test_unbalanced_is_literal(self, make_context) -> None:
        context = make_context()
        assert WithTransformer().transform('@with(a:"1")x', context) == '@with(a:"1")x'


class TestSet:
    def test_set_emits_nothing_and_binds(self, make_context) -> None:
        context = make_context()
        assert SetTransformer().transform('a@set("greeting", "hello")b', context) == "ab"
        assert resolve(context.scope, "greeting") == "hello"

    def test_later_passes_see_value(self, make_context) -> None:
        context = make_context()
        assert context.render('@set("greeting", "hello")@var(greeting)') == "hello"

    def test_overwrites_local(self, make_context) -> None:
        context = make_context({"title": "old"})
        assert context.render('@set("title", "new")@raw(title)') == "new"

    def test_prefixed_key_writes_namespace(self, make_context) -> None:
        context = make_context()
        context.render('@set("app.theme", "dark")')
        assert resolve(context.scope, "app.theme") == "dark"

    def test_set_in_rendered_if_branch_reaches_enclosing_scope(self, make_context) -> None:
        context = make_context({"flag": True})
        assert context.render('@if(flag)@set("x", "1")@endif@var(x)') == "1"

    def test_empty_value(self, make_context) -> None:
        context = make_context({"x": "before"})
        assert context.render('@set("x", "")[@var(x)]') == "[]"

    def test_set_runs_after_conditionals(self, make_context) -> None:
        context = make_context()
        assert context.render('@set("show", "yes")[@if(show)Y@endif]') == "[]"
