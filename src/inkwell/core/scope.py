"""Layered variable environment and dotted-path resolution.

An :class:`Environment` holds four stores per layer:

- ``req``      - per-render values supplied by the host application
- ``session``  - per-user values supplied by the host application
- ``app``      - engine-lifetime globals
- locals       - unprefixed values bound by the render call, loops, ``@with``
                 blocks and ``@set``

Unprefixed lookups cascade ``req`` -> ``session`` -> ``app`` -> locals.
Prefixed lookups (``app.site.name``) only consult the named namespace.

Child environments are copy-on-write overlays: reads fall through to the
parent, writes always land in the child.

Example:
    >>> env = Environment({"user": {"name": "ada"}}, req={"lang": "en"})
    >>> resolve(env, "user.name")
    'ada'
    >>> resolve(env, "lang")
    'en'
"""
from __future__ import annotations

import threading
from numbers import Number
from collections.abc import Mapping, Sequence, Sized
from typing import Any, Callable, Dict, Iterator, Optional, Protocol, Tuple, runtime_checkable

NAMESPACES: Tuple[str, ...] = ("req", "session", "app")
LOCAL = ""

# Accessor signature: (obj, property_name) -> value or None when absent
Accessor = Callable[[Any, str], Any]


@runtime_checkable
class PropertyReadable(Protocol):
    """Structured values that expose named properties to templates."""

    def read_property(self, name: str) -> Any:
        """Return the property value, or ``None`` when it does not exist."""
        ...


class AccessorRegistry:
    """Accessors keyed by type, looked up along the value's MRO."""

    def __init__(self) -> None:
        self._accessors: Dict[type, Accessor] = {}
        self._lock = threading.Lock()

    def register(self, cls: type, accessor: Accessor) -> None:
        with self._lock:
            updated = dict(self._accessors)
            updated[cls] = accessor
            self._accessors = updated

    def unregister(self, cls: type) -> None:
        with self._lock:
            updated = dict(self._accessors)
            updated.pop(cls, None)
            self._accessors = updated

    def find(self, cls: type) -> Optional[Accessor]:
        accessors = self._accessors
        if not accessors:
            return None
        for klass in cls.__mro__:
            accessor = accessors.get(klass)
            if accessor is not None:
                return accessor
        return None


accessors = AccessorRegistry()


def register_accessor(cls: type) -> Callable[[Accessor], Accessor]:
    """Register a property accessor for ``cls`` (and its subclasses).

    Usage:
        @register_accessor(Point)
        def point_props(point, name):
            return {"x": point.x, "y": point.y}.get(name)
    """

    def decorator(func: Accessor) -> Accessor:
        accessors.register(cls, func)
        return func

    return decorator


def read_property(value: Any, name: str) -> Any:
    """Read a single path segment from ``value``; ``None`` when absent."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value.get(name)

    accessor = accessors.find(type(value))
    if accessor is not None:
        return accessor(value, name)

    if isinstance(value, PropertyReadable):
        return value.read_property(name)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if name.isdigit():
            index = int(name)
            return value[index] if index < len(value) else None
        return None

    if not name or name.startswith("_"):
        return None
    attr = getattr(value, name, None)
    if callable(attr):
        return None
    return attr


def dot_get(base: Any, path: str) -> Any:
    """Navigate ``a.b.c`` through mappings, sequences and objects."""
    if base is None or not path:
        return None
    current = base
    for part in path.split("."):
        current = read_property(current, part)
        if current is None:
            return None
    return current


def _lookup_store(store: Mapping[str, Any], path: str) -> Tuple[bool, Any]:
    """Find ``path`` in ``store``, preferring the longest flat key prefix.

    A store may hold both nested values (``{"user": {...}}``) and flat dotted
    keys (``{"user.name": "x"}`` bound by ``@set``).

    Returns:
        ``(bound, value)``: ``bound`` is True when some prefix of ``path`` is
        a key of ``store``, even if the value found under it is ``None``.
    """
    if not store or not path:
        return False, None
    bound = False
    parts = path.split(".")
    for split in range(len(parts), 0, -1):
        head = ".".join(parts[:split])
        if head not in store:
            continue
        bound = True
        value = store[head]
        rest = ".".join(parts[split:])
        if rest:
            value = dot_get(value, rest)
        if value is not None:
            return True, value
    return bound, None


def split_namespace(key: str) -> Tuple[str, str]:
    """Split ``app.x`` into ``("app", "x")``; unprefixed keys map to locals."""
    head, sep, rest = key.partition(".")
    if sep and head in NAMESPACES and rest:
        return head, rest
    return LOCAL, key


class Environment:
    """Layered scope environment for a single render call."""

    def __init__(
        self,
        local: Optional[Mapping[str, Any]] = None,
        *,
        app: Optional[Mapping[str, Any]] = None,
        session: Optional[Mapping[str, Any]] = None,
        req: Optional[Mapping[str, Any]] = None,
        parent: Optional["Environment"] = None,
    ) -> None:
        self.parent = parent
        self._stores: Dict[str, Dict[str, Any]] = {
            "req": dict(req or {}),
            "session": dict(session or {}),
            "app": dict(app or {}),
            LOCAL: {},
        }
        for key, value in (local or {}).items():
            self.set(key, value)

    def child(self, bindings: Optional[Mapping[str, Any]] = None) -> "Environment":
        """Return an overlay whose writes never reach this environment."""
        return Environment(bindings, parent=self)

    def set(self, key: str, value: Any) -> None:
        """Bind ``key`` in this layer (namespace-prefixed keys go to that namespace).

        A mapping bound under a bare namespace name (``req``) is merged into
        that namespace.
        """
        if key in NAMESPACES and isinstance(value, Mapping):
            self._stores[key].update(value)
            return
        namespace, name = split_namespace(key)
        self._stores[namespace][name] = value

    def update(self, bindings: Mapping[str, Any]) -> None:
        for key, value in bindings.items():
            self.set(key, value)

    def lookup(self, namespace: str, path: str) -> Any:
        """Look ``path`` up in one store, nearest layer first; ``None`` when absent.

        The nearest layer that binds the head of ``path`` answers, so a child
        binding hides the parent's value even when it resolves to ``None``.
        """
        layer: Optional[Environment] = self
        while layer is not None:
            bound, value = _lookup_store(layer._stores[namespace], path)
            if bound:
                return value
            layer = layer.parent
        return None

    def resolve(self, token: str) -> Any:
        return resolve(self, token)

    def layers(self) -> Iterator["Environment"]:
        layer: Optional[Environment] = self
        while layer is not None:
            yield layer
            layer = layer.parent

    def local_keys(self) -> set[str]:
        """Keys bound in this layer's local store (not inherited)."""
        return set(self._stores[LOCAL])

    def __contains__(self, token: str) -> bool:
        return _resolve_value(self, token) is not None

    def __repr__(self) -> str:
        depth = sum(1 for _ in self.layers())
        return f"Environment(depth={depth}, locals={sorted(self._stores[LOCAL])})"


def _resolve_value(env: Environment, token: str) -> Any:
    namespace, path = split_namespace(token)
    if namespace:
        return env.lookup(namespace, path)
    for ns in NAMESPACES:
        value = env.lookup(ns, token)
        if value is not None:
            return value
    return env.lookup(LOCAL, token)


def resolve(env: Environment, token: str) -> Any:
    """Resolve ``token`` through the scope cascade; ``""`` when absent."""
    value = _resolve_value(env, token)
    return "" if value is None else value


def truthy(value: Any) -> bool:
    """Template truthiness used by ``@if`` and ``@unless``."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, Number):
        # Numbers truncate toward zero, so 0.5 is falsy.
        try:
            return int(value) != 0
        except (OverflowError, ValueError):
            return value == value  # inf is truthy, nan is not
        except TypeError:
            return value != 0
    if isinstance(value, str):
        return bool(value) and value.lower() != "false"
    if isinstance(value, Sized):
        return len(value) > 0
    return True


__all__ = [
    "NAMESPACES",
    "Environment",
    "PropertyReadable",
    "AccessorRegistry",
    "accessors",
    "register_accessor",
    "read_property",
    "dot_get",
    "split_namespace",
    "resolve",
    "truthy",
]
