"""
File Renderer

Renders a single source file through its engine.
"""

from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from folio.contexts.rendering.exceptions import RenderError, TemplateNotFound
from folio.contexts.sitemap.files import SourceFile

if TYPE_CHECKING:
    from folio.application import Application
    from folio.contexts.rendering.render_context import RenderContext


class FileRenderer:
    """Renders one source file with a shared render context."""

    def __init__(self, app: "Application", file: SourceFile):
        self.app = app
        self.file = file

    def render(
        self,
        locals: Mapping[str, Any],
        options: Mapping[str, Any],
        context: "RenderContext",
        block: Optional[Callable[[], str]] = None,
    ) -> str:
        """
        Render the file.

        The file's extension becomes the context's current engine for the
        duration of the render and the caller's engine is restored afterwards.

        Args:
            locals: Template-local bindings
            options: Render options
            context: The render context shared by the page, its layouts and partials
            block: Content block for layouts and block-accepting partials

        Returns:
            Rendered text (raw contents for files without an engine)

        Raises:
            TemplateNotFound: If the file does not exist
            RenderError: If the engine fails to evaluate the template
        """
        if not self.file.exists():
            raise TemplateNotFound(
                f"Template not found: {self.file.relative_path}", name=str(self.file.relative_path)
            )

        engine = self.app.engines.engine_for(self.file)
        if engine is None:
            # Static content is never run through an engine
            return self.file.read_text()

        with context.engine_preserved():
            context.current_engine = self.file.extension
            try:
                return engine.render(self.file, context, locals, block)
            except (TemplateNotFound, RenderError):
                # Already carries the innermost template's details
                raise
            except Exception as e:
                raise RenderError(
                    f"Failed to render {self.file.relative_path}",
                    template_path=self.file.full_path,
                    engine=self.file.extension,
                    original_error=e,
                ) from e
