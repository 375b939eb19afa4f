"""
Rendering Context

Responsibilities:
- Executes page, layout and partial templates through pluggable engines
- Wraps page content in (nested) layouts
- Resolves partial references relative to the current template or the source root

Owns: Render state (output buffer, current engine), template lookup
Never: Decides which pages get built or where output is written
"""

from folio.contexts.rendering.engines import EngineRegistry, TemplateEngine, default_registry
from folio.contexts.rendering.exceptions import InvalidConfigError, RenderError, TemplateNotFound
from folio.contexts.rendering.lookup import locate_layout, resolve_template
from folio.contexts.rendering.partial_resolver import Found, NotFound, PartialResolver
from folio.contexts.rendering.render_context import RenderContext
from folio.contexts.rendering.template_renderer import TemplateRenderer

__all__ = [
    # Engines
    "EngineRegistry",
    "TemplateEngine",
    "default_registry",
    # Lookup
    "locate_layout",
    "resolve_template",
    "PartialResolver",
    "Found",
    "NotFound",
    # Rendering
    "RenderContext",
    "TemplateRenderer",
    # Errors
    "InvalidConfigError",
    "RenderError",
    "TemplateNotFound",
]
