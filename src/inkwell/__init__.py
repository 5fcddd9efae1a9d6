"""
Inkwell - directive-based text templating

Inkwell renders templates containing ``@``-directives (interpolation,
conditionals, loops, layouts, includes, filters) against a layered
app / session / request variable environment.
"""

__version__ = "0.4.0"

from .core.engine import RenderScopes, TemplateEngine
from .core.exceptions import (
    ConfigError,
    InkwellError,
    TemplateCycleError,
    TemplateNotFoundError,
    TemplateSecurityError,
)

__all__ = [
    "__version__",
    "TemplateEngine",
    "RenderScopes",
    "InkwellError",
    "TemplateSecurityError",
    "TemplateCycleError",
    "TemplateNotFoundError",
    "ConfigError",
]
