"""Tests for @var, @raw and @yield interpolation."""
from __future__ import annotations

import pytest

from inkwell.core.transformers.variables import RawTransformer, VarTransformer, YieldTransformer

SPECIAL = "Tom & \"Jerry\" <tj@example.com> 'x'"


class TestVar:
    def test_value_is_escaped(self, make_context) -> None:
        context = make_context({"s": SPECIAL})
        expected = "Tom &amp; &quot;Jerry&quot; &lt;tj@example.com&gt; &#39;x&#39;"
        assert VarTransformer().transform("@var(s)", context) == expected

    def test_missing_is_empty_and_reported(self, make_context) -> None:
        context = make_context()
        assert context.render("[@var(user.name)]") == "[]"
        assert context.report.variables_missing == {"user.name"}

    def test_filter_chain(self, make_context) -> None:
        context = make_context({"name": "  abc  "})
        assert context.render("@var(name|trim|upper)") == "ABC"

    def test_unknown_filter_skipped(self, make_context) -> None:
        context = make_context({"name": "  abc  "})
        assert context.render("@var(name|trim|nope|upper)") == "ABC"
        assert context.report.filters_missing == {"nope"}

    def test_filter_output_is_escaped(self, make_context) -> None:
        context = make_context()
        assert context.render('@var(missing|default:"<none>")') == "&lt;none&gt;"

    def test_quoted_argument_with_parenthesis(self, make_context) -> None:
        context = make_context()
        assert context.render('@var(missing|default:"(none)")') == "(none)"

    def test_non_string_values(self, make_context) -> None:
        context = make_context({"n": 3, "flag": False})
        assert context.render("@var(n)/@var(flag)") == "3/False"

    def test_output_of_earlier_passes_not_escaped(self, make_context) -> None:
        context = make_context(templates={"b.html": "<b>bold</b>"})
        assert context.render('@include("b.html")') == "<b>bold</b>"


class TestRaw:
    def test_value_not_escaped(self, make_context) -> None:
        context = make_context({"s": SPECIAL})
        assert RawTransformer().transform("@raw(s)", context) == SPECIAL

    def test_missing_is_empty(self, make_context) -> None:
        assert make_context().render("[@raw(x)]") == "[]"


class TestYield:
    def test_resolves_variable_unescaped(self, make_context) -> None:
        context = make_context({"content": "<p>hi</p>"})
        assert YieldTransformer().transform('@yield("content")', context) == "<p>hi</p>"

    def test_missing_is_empty(self, make_context) -> None:
        assert make_context().render('[@yield("content")]') == "[]"


@pytest.mark.parametrize("value", ["&<>\"'", "plain", "a&&b", "<<>>"])
def test_escape_round_trip(make_context, value: str) -> None:
    context = make_context({"v": value})
    escaped = (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )
    assert context.render("@var(v)") == escaped
    assert context.render("@raw(v)") == value
