"""Tests for the layered Environment and variable resolution."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import pytest

from inkwell.core.scope import (
    Environment,
    accessors,
    dot_get,
    register_accessor,
    resolve,
    split_namespace,
    truthy,
)


@dataclass
class Point:
    x: int
    y: int
    _secret: str = "hidden"

    def norm(self) -> int:
        return abs(self.x) + abs(self.y)


class Bag:
    """Structured value exposing properties through read_property."""

    def __init__(self, **props):
        self._props = props

    def read_property(self, name):
        return self._props.get(name)


class Opaque:
    def __init__(self, payload):
        self._payload = payload


class TestScopeCascade:
    """Unprefixed lookup cascades req -> session -> app -> locals."""

    def test_request_shadows_session_and_app(self) -> None:
        env = Environment(req={"x": 1}, session={"x": 2}, app={"x": 3})
        assert resolve(env, "x") == 1

    def test_removing_request_falls_back_to_session(self) -> None:
        env = Environment(session={"x": 2}, app={"x": 3})
        assert resolve(env, "x") == 2

    def test_removing_session_falls_back_to_app(self) -> None:
        env = Environment(app={"x": 3})
        assert resolve(env, "x") == 3

    def test_all_absent_is_empty_string(self) -> None:
        assert resolve(Environment(), "x") == ""

    def test_app_shadows_locals(self) -> None:
        env = Environment({"title": "local"}, app={"title": "app"})
        assert resolve(env, "title") == "app"

    def test_locals_used_when_no_namespace_has_key(self) -> None:
        env = Environment({"title": "local"}, app={"other": 1})
        assert resolve(env, "title") == "local"

    def test_prefixed_lookup_does_not_cascade(self) -> None:
        env = Environment({"x": "local"}, req={"x": 1})
        assert resolve(env, "app.x") == ""
        assert resolve(env, "req.x") == 1

    def test_prefixed_lookup_with_nested_path(self) -> None:
        env = Environment(app={"site": {"name": "Inkwell"}})
        assert resolve(env, "app.site.name") == "Inkwell"

    def test_falsy_values_are_not_absent(self) -> None:
        env = Environment({"flag": False, "count": 0}, app={"flag": None})
        assert resolve(env, "flag") is False
        assert resolve(env, "count") == 0


class TestChildEnvironments:
    """Child environments are copy-on-write overlays."""

    def test_child_reads_parent(self) -> None:
        parent = Environment({"a": 1})
        assert resolve(parent.child({"b": 2}), "a") == 1

    def test_child_binding_shadows_parent(self) -> None:
        parent = Environment({"a": 1})
        child = parent.child({"a": 2})
        assert resolve(child, "a") == 2
        assert resolve(parent, "a") == 1

    def test_writes_never_reach_parent(self) -> None:
        parent = Environment({"a": 1})
        child = parent.child()
        child.set("b", 3)
        child.set("app.theme", "dark")
        assert resolve(parent, "b") == ""
        assert resolve(parent, "theme") == ""
        assert parent.local_keys() == {"a"}

    def test_child_binding_hides_parent_nested_path(self) -> None:
        parent = Environment({"user": {"name": "ada"}})
        child = parent.child({"user": "bob"})
        assert resolve(child, "user.name") == ""
        assert resolve(child, "user") == "bob"
        assert resolve(parent, "user.name") == "ada"

    def test_child_binding_of_none_hides_parent(self) -> None:
        child = Environment({"item": "outer"}).child({"item": None})
        assert resolve(child, "item") == ""
        assert "item" not in child

    def test_child_namespace_binding_hides_parent(self) -> None:
        parent = Environment(app={"site": {"name": "Ink"}})
        child = parent.child({"app.site": {"title": "x"}})
        assert resolve(child, "app.site.name") == ""
        assert resolve(child, "app.site.title") == "x"

    def test_unbound_head_still_reads_parent(self) -> None:
        parent = Environment({"user": {"name": "ada"}})
        child = parent.child({"user.email": "a@x"})
        assert resolve(child, "user.name") == "ada"
        assert resolve(child, "user.email") == "a@x"

    def test_contains(self) -> None:
        env = Environment({"a": 1}).child()
        assert "a" in env
        assert "missing" not in env


class TestBindings:
    def test_prefixed_key_goes_to_namespace(self) -> None:
        env = Environment()
        env.set("app.theme", "dark")
        assert resolve(env, "app.theme") == "dark"
        assert resolve(env, "theme") == "dark"
        assert env.local_keys() == set()

    def test_bare_namespace_mapping_is_merged(self) -> None:
        env = Environment(req={"a": 1})
        env.set("req", {"b": 2})
        assert resolve(env, "req.a") == 1
        assert resolve(env, "req.b") == 2

    def test_flat_dotted_key(self) -> None:
        env = Environment()
        env.set("user.name", "bob")
        assert resolve(env, "user.name") == "bob"

    def test_flat_dotted_key_preferred_over_nested(self) -> None:
        env = Environment({"user": {"name": "ada"}})
        env.set("user.name", "bob")
        assert resolve(env, "user.name") == "bob"

    def test_update_binds_every_key(self) -> None:
        env = Environment()
        env.update({"a": 1, "session.b": 2})
        assert resolve(env, "a") == 1
        assert resolve(env, "session.b") == 2


class TestDottedPaths:
    """Dotted-path navigation into mappings, sequences and objects."""

    def test_nested_mapping(self) -> None:
        env = Environment({"user": {"address": {"city": "Lima"}}})
        assert resolve(env, "user.address.city") == "Lima"

    def test_sequence_index(self) -> None:
        env = Environment({"items": ["a", "b"]})
        assert resolve(env, "items.1") == "b"
        assert resolve(env, "items.5") == ""

    def test_object_attribute(self) -> None:
        env = Environment({"p": Point(3, -4)})
        assert resolve(env, "p.x") == 3

    def test_private_and_callable_attributes_are_hidden(self) -> None:
        env = Environment({"p": Point(3, -4)})
        assert resolve(env, "p._secret") == ""
        assert resolve(env, "p.norm") == ""

    def test_property_readable(self) -> None:
        env = Environment({"bag": Bag(color="red")})
        assert resolve(env, "bag.color") == "red"
        assert resolve(env, "bag.size") == ""

    def test_registered_accessor(self) -> None:
        @register_accessor(Opaque)
        def opaque_props(obj, name):
            return obj._payload.get(name)

        try:
            env = Environment({"o": Opaque({"k": "v"})})
            assert resolve(env, "o.k") == "v"
        finally:
            accessors.unregister(Opaque)

    def test_none_intermediate_short_circuits(self) -> None:
        env = Environment({"a": None, "b": {"c": None}})
        assert resolve(env, "a.x") == ""
        assert resolve(env, "b.c.d") == ""

    def test_dot_get_on_none(self) -> None:
        assert dot_get(None, "a") is None
        assert dot_get({"a": 1}, "") is None


class TestSplitNamespace:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("app.x", ("app", "x")),
            ("req.user.id", ("req", "user.id")),
            ("apple.x", ("", "apple.x")),
            ("app", ("", "app")),
        ],
    )
    def test_split(self, key: str, expected) -> None:
        assert split_namespace(key) == expected


class TestTruthy:
    @pytest.mark.parametrize(
        "value",
        [
            None, False, 0, 0.0, 0.5, -0.9, Decimal(0), Decimal("0.25"), float("nan"),
            "", "false", "FALSE", [], {}, (),
        ],
    )
    def test_falsy(self, value) -> None:
        assert truthy(value) is False

    @pytest.mark.parametrize(
        "value",
        [True, 1, -2, 1.5, Decimal("2.5"), float("inf"), "yes", "0", [0], {"a": 1}, object()],
    )
    def test_truthy(self, value) -> None:
        assert truthy(value) is True
