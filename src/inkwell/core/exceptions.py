from __future__ import annotations

from typing import Any, Dict, Mapping


class InkwellError(Exception):
    """Base exception for the Inkwell template engine."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class TemplateSecurityError(InkwellError, PermissionError):
    """Raised when a template identifier resolves outside the templates root."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        InkwellError.__init__(self, message, context=context)
        PermissionError.__init__(self, message)


class TemplateCycleError(InkwellError, RuntimeError):
    """Raised when an include or layout re-enters its own expansion chain."""

    def __init__(
        self,
        message: str,
        *,
        template: str | None = None,
        chain: list[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if template:
            ctx["template"] = template
        if chain:
            ctx["chain"] = list(chain)
        InkwellError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


class TemplateNotFoundError(InkwellError, FileNotFoundError):
    """Raised when the top-level template of a render call does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        InkwellError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class ConfigError(InkwellError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        InkwellError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "InkwellError",
    "TemplateSecurityError",
    "TemplateCycleError",
    "TemplateNotFoundError",
    "ConfigError",
]
