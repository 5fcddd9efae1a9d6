"""Template source loading.

Loaders turn a template identifier into raw text. Every loader enforces the
sandbox rule: an identifier may never resolve outside the loader's root.
Violations raise :class:`TemplateSecurityError`; a missing template is not
an error at this level (``locate`` returns ``None``).

:class:`TemplateCache` keeps file contents keyed by path together with the
file's modification time. With ``live_reload`` on, a changed mtime triggers a
re-read.
"""
from __future__ import annotations

import logging
import posixpath
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Union

from .exceptions import TemplateSecurityError

logger = logging.getLogger(__name__)


class TemplateLoader(Protocol):
    """Resolve template identifiers to text."""

    def locate(self, identifier: str) -> Optional[str]:
        """Return the canonical key for ``identifier`` or ``None`` if missing.

        Raises:
            TemplateSecurityError: If ``identifier`` escapes the loader root.
        """
        ...

    def read(self, key: str) -> str:
        """Return the raw text for a key produced by :meth:`locate`."""
        ...


@dataclass(frozen=True)
class CacheEntry:
    text: str
    mtime_ns: int


def _mtime_ns(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return 0


class TemplateCache:
    """Thread-safe path -> (text, mtime) cache."""

    def __init__(self, enabled: bool = True, live_reload: bool = False) -> None:
        self.enabled = enabled
        self.live_reload = live_reload
        self._entries: Dict[Path, CacheEntry] = {}
        self._lock = threading.Lock()

    def read_cached(self, path: Path) -> str:
        """Return the text of ``path``, reading it only when needed."""
        if not self.enabled:
            return path.read_text(encoding="utf-8")

        with self._lock:
            entry = self._entries.get(path)

        if entry is not None:
            if not self.live_reload:
                return entry.text
            current = _mtime_ns(path)
            if entry.mtime_ns == current:
                return entry.text
            logger.debug("Template changed on disk, reloading %s", path)
        else:
            current = _mtime_ns(path)

        text = path.read_text(encoding="utf-8")
        fresh = CacheEntry(text=text, mtime_ns=current)
        with self._lock:
            self._entries[path] = fresh
        return text

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: Path) -> bool:
        with self._lock:
            return path in self._entries


class FileSystemLoader:
    """Load templates from a directory tree rooted at ``root``."""

    def __init__(self, root: Union[str, Path], cache: Optional[TemplateCache] = None) -> None:
        self.root = Path(root).expanduser().resolve()
        self.cache = cache or TemplateCache()

    def resolve_path(self, identifier: str) -> Path:
        """Resolve ``identifier`` under the root.

        Raises:
            TemplateSecurityError: If the resolved path is outside the root.
        """
        candidate = (self.root / identifier).resolve()
        if candidate != self.root and not candidate.is_relative_to(self.root):
            raise TemplateSecurityError(
                f"Template path escapes templates root: {identifier}",
                context={"identifier": identifier, "root": str(self.root)},
            )
        return candidate

    def locate(self, identifier: str) -> Optional[str]:
        path = self.resolve_path(identifier)
        if not path.is_file():
            return None
        return str(path)

    def read(self, key: str) -> str:
        return self.cache.read_cached(Path(key))

    def __repr__(self) -> str:
        return f"FileSystemLoader(root={str(self.root)!r})"


class MappingLoader:
    """Load templates from an in-memory mapping of identifier -> text.

    Identifiers are normalized as posix paths, so ``partials/../nav.html``
    finds ``nav.html`` while ``../secret`` is rejected.
    """

    def __init__(self, templates: Mapping[str, str]) -> None:
        self.templates: Dict[str, str] = {
            self._normalize(name): text for name, text in templates.items()
        }

    @staticmethod
    def _normalize(identifier: str) -> str:
        normalized = posixpath.normpath("/" + identifier.replace("\\", "/").lstrip("/"))
        return normalized.lstrip("/")

    def locate(self, identifier: str) -> Optional[str]:
        raw = identifier.replace("\\", "/")
        if raw.startswith("/") or posixpath.normpath(raw).startswith(".."):
            raise TemplateSecurityError(
                f"Template path escapes templates root: {identifier}",
                context={"identifier": identifier},
            )
        key = self._normalize(identifier)
        return key if key in self.templates else None

    def read(self, key: str) -> str:
        return self.templates[key]


__all__ = [
    "TemplateLoader",
    "TemplateCache",
    "CacheEntry",
    "FileSystemLoader",
    "MappingLoader",
]
