"""
Template Engines

Registry mapping file extensions to Jinja2-backed template engines.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from jinja2 import Environment, FileSystemLoader, Template

from folio.contexts.sitemap.files import SourceFile

if TYPE_CHECKING:
    from folio.contexts.rendering.render_context import RenderContext

# Delimiters that leave LaTeX braces alone:
# - Variable: <<< var >>>
# - Block: <%% block %%>
# - Comment: <# comment #>
LATEX_DELIMITERS = {
    "variable_start_string": "<<<",
    "variable_end_string": ">>>",
    "block_start_string": "<%%",
    "block_end_string": "%%>",
    "comment_start_string": "<#",
    "comment_end_string": "#>",
}


def _empty_block() -> str:
    return ""


class TemplateEngine:
    """
    A Jinja2 environment rooted at a project's source directory.

    Templates are loaded by their source-relative path and cached by Jinja2,
    which reloads them when the file changes on disk.
    """

    def __init__(self, name: str, source_dir: Path, **environment_options: Any):
        """
        Initialize the engine.

        Args:
            name: Engine name (e.g., "jinja")
            source_dir: Directory templates are loaded from
            **environment_options: Extra jinja2.Environment options (delimiters, etc.)
        """
        self.name = name
        self.source_dir = source_dir

        options = {
            # Preserve whitespace so page markup comes out as written
            "trim_blocks": False,
            "lstrip_blocks": False,
            "keep_trailing_newline": True,
        }
        options.update(environment_options)

        self.env = Environment(loader=FileSystemLoader(str(source_dir)), **options)

    def get_template(self, file: SourceFile) -> Template:
        """
        Load a template by source file.

        Raises:
            jinja2.TemplateNotFound: If the file is outside the loader's search path
            jinja2.TemplateSyntaxError: If the template has syntax errors
        """
        return self.env.get_template(file.relative_path.as_posix())

    def render(
        self,
        file: SourceFile,
        context: "RenderContext",
        locals: Mapping[str, Any],
        block: Optional[Callable[[], str]] = None,
    ) -> str:
        """
        Evaluate a template against a render context.

        Output is streamed into a fresh buffer on the context; anything helpers
        write with concat lands in that buffer at the position they are called.

        Args:
            file: Template to evaluate
            context: Shared render context (template globals, buffer)
            locals: Template-local bindings
            block: Content block exposed to the template as yield_content()

        Returns:
            The rendered text
        """
        template = self.get_template(file)

        variables = dict(context.template_globals())
        variables.update(locals)
        variables["yield_content"] = block or _empty_block

        with context.buffer_preserved():
            for chunk in template.generate(variables):
                context.concat(chunk)
            return context.buffer_contents()

    def clear_cache(self) -> None:
        """Drop every compiled template."""
        if self.env.cache is not None:
            self.env.cache.clear()

    def __repr__(self) -> str:
        return f"TemplateEngine({self.name!r})"


class EngineRegistry:
    """
    Registered-capability table: file extension -> template engine.

    Several extensions may share one engine; extensions_for() answers which.
    """

    def __init__(self):
        self._engines: Dict[str, TemplateEngine] = {}

    def register(self, extension: str, engine: TemplateEngine) -> None:
        self._engines[extension.lstrip(".")] = engine

    def engine_for(self, target: Union[str, SourceFile, None]) -> Optional[TemplateEngine]:
        """
        Look up the engine for an extension or a source file.

        Returns:
            The registered engine, or None for static content
        """
        if target is None:
            return None
        extension = target.extension if isinstance(target, SourceFile) else target.lstrip(".")
        return self._engines.get(extension)

    def has_engine(self, extension: Optional[str]) -> bool:
        return bool(extension) and extension.lstrip(".") in self._engines

    def extensions_for(self, extension: str) -> List[str]:
        """
        List every extension bound to the same engine as the given one.

        The given extension comes first; unregistered extensions give [].
        """
        engine = self.engine_for(extension)
        if engine is None:
            return []
        extension = extension.lstrip(".")
        siblings = [ext for ext, other in self._engines.items() if other is engine and ext != extension]
        return [extension] + siblings

    @property
    def extensions(self) -> List[str]:
        return list(self._engines)

    def clear_cache(self) -> None:
        for engine in set(self._engines.values()):
            engine.clear_cache()


def default_registry(source_dir: Path) -> EngineRegistry:
    """
    Build the registry with the built-in engines.

    - "jinja" engine (standard delimiters) for .jinja and .j2
    - "latex" engine (LaTeX-safe delimiters) for .jtex
    """
    registry = EngineRegistry()

    jinja = TemplateEngine("jinja", source_dir)
    registry.register("jinja", jinja)
    registry.register("j2", jinja)

    registry.register("jtex", TemplateEngine("latex", source_dir, **LATEX_DELIMITERS))

    return registry
