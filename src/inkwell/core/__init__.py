"""Inkwell core library: scopes, filters, sources, pipeline and engine."""

from . import exceptions  # noqa: F401
from .engine import RenderScopes, TemplateEngine
from .filters import FilterRegistry, default_registry
from .report import RenderReport
from .scope import Environment, PropertyReadable, register_accessor, resolve, truthy
from .source import FileSystemLoader, MappingLoader, TemplateCache, TemplateLoader

__all__ = [
    "exceptions",
    "TemplateEngine",
    "RenderScopes",
    "RenderReport",
    "Environment",
    "PropertyReadable",
    "register_accessor",
    "resolve",
    "truthy",
    "FilterRegistry",
    "default_registry",
    "TemplateLoader",
    "TemplateCache",
    "FileSystemLoader",
    "MappingLoader",
]
