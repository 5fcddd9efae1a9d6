"""Filter registry and default filters for ``@var`` interpolation.

A filter is a pure callable ``(value, args) -> str``. Filters are chained
left to right inside a variable site:

    @var(user.name|trim|upper)
    @var(price|number:"#,##0.00")
    @var(title|truncate:20|default:"untitled")

Unknown filter names are skipped: the value passes through unchanged and the
rest of the chain still runs.

Filters are registered at configuration time:

    registry = FilterRegistry()

    @registry.register("shout")
    def shout(value, args):
        return to_text(value).upper() + "!"
"""
from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from urllib.parse import quote_plus

from .text import json_escape, parse_args, to_text

logger = logging.getLogger(__name__)

# Type for registered filters
Filter = Callable[[Any, List[str]], str]


class FilterRegistry:
    """Name -> filter mapping, read-mostly.

    Reads go against an immutable snapshot; writes replace the snapshot under
    a lock, so a render running concurrently with a registration always sees
    a consistent mapping.
    """

    def __init__(self, filters: Optional[Mapping[str, Filter]] = None) -> None:
        self._filters: Dict[str, Filter] = dict(filters or {})
        self._lock = threading.Lock()

    def register(self, name: str) -> Callable[[Filter], Filter]:
        """Decorator to register a filter under ``name``."""

        def decorator(func: Filter) -> Filter:
            self.add(name, func)
            return func

        return decorator

    def add(self, name: str, func: Filter) -> None:
        with self._lock:
            updated = dict(self._filters)
            updated[name] = func
            self._filters = updated

    def remove(self, name: str) -> None:
        with self._lock:
            updated = dict(self._filters)
            updated.pop(name, None)
            self._filters = updated

    def get(self, name: str) -> Optional[Filter]:
        return self._filters.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def names(self) -> List[str]:
        return sorted(self._filters)

    def copy(self) -> "FilterRegistry":
        return FilterRegistry(self._filters)


# ---------------------------------------------------------------------------
# Chain evaluation
# ---------------------------------------------------------------------------


def _split_pipes(chain: str) -> Iterator[str]:
    current: List[str] = []
    in_quotes = False
    for char in chain:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "|" and not in_quotes:
            yield "".join(current)
            current = []
            continue
        current.append(char)
    yield "".join(current)


def parse_filter_chain(chain: str) -> List[Tuple[str, List[str]]]:
    """Parse ``|trim|truncate:10`` into ``[("trim", []), ("truncate", ["10"])]``."""
    steps: List[Tuple[str, List[str]]] = []
    for raw in _split_pipes(chain.lstrip("|")):
        raw = raw.strip()
        if not raw:
            continue
        name, sep, args = raw.partition(":")
        steps.append((name.strip(), parse_args(args) if sep else []))
    return steps


def apply_filter_chain(
    value: Any,
    chain: str,
    registry: FilterRegistry,
    on_missing: Optional[Callable[[str], None]] = None,
) -> Any:
    """Run ``value`` through every filter of ``chain`` in order."""
    for name, args in parse_filter_chain(chain):
        func = registry.get(name)
        if func is None:
            logger.debug("Skipping unknown filter %r", name)
            if on_missing is not None:
                on_missing(name)
            continue
        try:
            value = func(value, args)
        except Exception as exc:
            logger.warning("Filter %r failed, value left unchanged: %s", name, exc)
    return value


# ---------------------------------------------------------------------------
# Default filters
# ---------------------------------------------------------------------------

_NUMBER_BODY = re.compile(r"[#0,.]+")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    text = to_text(value).strip()
    return Decimal(text or "0")


def format_number(value: Any, pattern: str = "#,##0.##") -> str:
    """Format ``value`` with a DecimalFormat-style pattern.

    Supported: literal prefix/suffix, ``,`` grouping, ``0`` (required digit)
    and ``#`` (optional digit). Rounding is half-even.
    """
    match = _NUMBER_BODY.search(pattern)
    if match is None:
        raise ValueError(f"Invalid number pattern: {pattern}")
    prefix, body, suffix = pattern[: match.start()], match.group(0), pattern[match.end():]
    int_part, _, frac_part = body.partition(".")
    grouping = "," in int_part
    min_int = int_part.count("0")
    min_frac = frac_part.count("0")
    max_frac = len(frac_part)

    number = _to_decimal(value)
    quantum = Decimal(1).scaleb(-max_frac)
    rounded = number.quantize(quantum, rounding=ROUND_HALF_EVEN)
    negative = rounded < 0

    text = format(abs(rounded), f"{',' if grouping else ''}.{max_frac}f")
    whole, _, fraction = text.partition(".")
    while len(fraction) > min_frac and fraction.endswith("0"):
        fraction = fraction[:-1]
    digits = whole.replace(",", "")
    if len(digits) < min_int:
        digits = digits.zfill(min_int)
        whole = f"{int(digits):0{min_int},d}" if grouping else digits
    elif min_int == 0 and digits == "0" and fraction:
        whole = ""

    out = whole + ("." + fraction if fraction else "")
    return f"{'-' if negative else ''}{prefix}{out}{suffix}"


_DATE_TOKENS = re.compile(r"'[^']*'|yyyy|yy|MMMM|MMM|MM|M|dd|d|EEEE|EEE|HH|H|hh|h|mm|m|ss|s|a")


def _date_token(moment: datetime, token: str) -> str:
    if token.startswith("'"):
        return token[1:-1]
    hour12 = moment.hour % 12 or 12
    values = {
        "yyyy": f"{moment.year:04d}",
        "yy": f"{moment.year % 100:02d}",
        "MMMM": moment.strftime("%B"),
        "MMM": moment.strftime("%b"),
        "MM": f"{moment.month:02d}",
        "M": str(moment.month),
        "dd": f"{moment.day:02d}",
        "d": str(moment.day),
        "EEEE": moment.strftime("%A"),
        "EEE": moment.strftime("%a"),
        "HH": f"{moment.hour:02d}",
        "H": str(moment.hour),
        "hh": f"{hour12:02d}",
        "h": str(hour12),
        "mm": f"{moment.minute:02d}",
        "m": str(moment.minute),
        "ss": f"{moment.second:02d}",
        "s": str(moment.second),
        "a": "AM" if moment.hour < 12 else "PM",
    }
    return values[token]


def _to_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value)
    text = to_text(value).strip()
    for parser in (date.fromisoformat, datetime.fromisoformat):
        try:
            return _to_datetime(parser(text))
        except ValueError:
            continue
    return None


def format_date(value: Any, pattern: str = "yyyy-MM-dd") -> str:
    """Format a date/datetime (or ISO string, or epoch seconds).

    Patterns use ``yyyy-MM-dd HH:mm`` style tokens; patterns containing ``%``
    are handed to ``strftime``. Unparseable values are returned as text.
    """
    if value is None or value == "":
        return ""
    moment = _to_datetime(value)
    if moment is None:
        return to_text(value)
    if "%" in pattern:
        return moment.strftime(pattern)
    return _DATE_TOKENS.sub(lambda m: _date_token(moment, m.group(0)), pattern)


def _upper(value: Any, args: List[str]) -> str:
    return to_text(value).upper()


def _lower(value: Any, args: List[str]) -> str:
    return to_text(value).lower()


def _trim(value: Any, args: List[str]) -> str:
    return to_text(value).strip()


def _capitalize(value: Any, args: List[str]) -> str:
    text = to_text(value)
    return text[:1].upper() + text[1:]


def _default(value: Any, args: List[str]) -> str:
    text = to_text(value)
    if text:
        return text
    return args[0] if args else ""


def _number(value: Any, args: List[str]) -> str:
    try:
        return format_number(value, args[0] if args else "#,##0.##")
    except (InvalidOperation, ValueError):
        return to_text(value)


def _date(value: Any, args: List[str]) -> str:
    try:
        return format_date(value, args[0] if args else "yyyy-MM-dd")
    except (ValueError, OverflowError, OSError):
        return to_text(value)


def _join(value: Any, args: List[str]) -> str:
    separator = args[0] if args else ","
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
        return separator.join(to_text(item) for item in value)
    return to_text(value)


def _url(value: Any, args: List[str]) -> str:
    return quote_plus(to_text(value))


def _json(value: Any, args: List[str]) -> str:
    return json_escape(to_text(value))


def _truncate(value: Any, args: List[str]) -> str:
    text = to_text(value)
    try:
        length = int(args[0]) if args else 0
    except ValueError:
        length = 0
    if length <= 0 or len(text) <= length:
        return text
    return text[:length] + "..."


def _replace(value: Any, args: List[str]) -> str:
    text = to_text(value)
    if len(args) < 2:
        return text
    return text.replace(args[0], args[1])


def _split(value: Any, args: List[str]) -> str:
    # Renders a readable "[a, b]" form; the result is text, not a list.
    text = to_text(value)
    separator = args[0] if args else ","
    if not text:
        return ""
    parts = text.split(separator)
    while parts and not parts[-1]:
        parts.pop()  # trailing empty parts are dropped
    return "[" + ", ".join(parts) + "]"


DEFAULT_FILTERS: Dict[str, Filter] = {
    "upper": _upper,
    "lower": _lower,
    "trim": _trim,
    "capitalize": _capitalize,
    "default": _default,
    "number": _number,
    "date": _date,
    "join": _join,
    "url": _url,
    "json": _json,
    "truncate": _truncate,
    "replace": _replace,
    "split": _split,
}


def default_registry() -> FilterRegistry:
    """Return a new registry preloaded with the default filters."""
    return FilterRegistry(DEFAULT_FILTERS)


__all__ = [
    "Filter",
    "FilterRegistry",
    "DEFAULT_FILTERS",
    "default_registry",
    "parse_filter_chain",
    "apply_filter_chain",
    "format_number",
    "format_date",
]
