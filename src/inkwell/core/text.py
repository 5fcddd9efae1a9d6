"""Text helpers shared by the directive transformers and filters.

This module must not import the transformers or the engine.
"""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any, Dict, List

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})


def html_escape(text: str) -> str:
    """Escape ``& < > " '`` for HTML output."""
    return text.translate(_HTML_ESCAPES)


def json_escape(text: str) -> str:
    """Escape ``text`` as the body of a JSON string (no surrounding quotes)."""
    return json.dumps(text, ensure_ascii=False)[1:-1]


def to_text(value: Any) -> str:
    """Default string form of a resolved value (``None`` renders empty)."""
    return "" if value is None else str(value)


def _split_colons(raw: str) -> List[str]:
    # Double quotes toggle literal mode and are dropped from the output.
    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in raw:
        if char == '"':
            in_quotes = not in_quotes
            continue
        if char == ":" and not in_quotes:
            tokens.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tokens.append("".join(current).strip())
    return tokens


def parse_args(raw: str) -> List[str]:
    """Parse filter arguments: ``"a":b:"c:d"`` -> ``["a", "b", "c:d"]``.

    Empty arguments are dropped.
    """
    return [token for token in _split_colons(raw) if token]


def parse_named_args(raw: str | None) -> Dict[str, str]:
    """Parse ``k:"v":x:"y"`` into ``{"k": "v", "x": "y"}``.

    A trailing key without a value is ignored.
    """
    if raw is None or not raw.strip():
        return {}
    tokens = _split_colons(raw)
    result: Dict[str, str] = {}
    for index in range(0, len(tokens) - 1, 2):
        key = tokens[index]
        if key:
            result[key] = tokens[index + 1]
    return result


def dump(value: Any) -> str:
    """Structural string form: ``{k: v, ...}`` for mappings, ``[v, ...]`` for sequences."""
    if value is None:
        return "None"
    if isinstance(value, Mapping):
        items = ", ".join(f"{to_text(k)}: {dump(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        return "[" + ", ".join(dump(item) for item in value) + "]"
    return str(value)


__all__ = [
    "html_escape",
    "json_escape",
    "to_text",
    "parse_args",
    "parse_named_args",
    "dump",
]
