"""
Render Context

A clean context in which templates are executed. One context is created per
page render and shared by the page, its layouts and its partials, so helpers
called from any of them (wrap_layout, render) see the same buffer and engine
state.
"""

import time
from contextlib import contextmanager
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Mapping, Optional

from folio.contexts.rendering.exceptions import TemplateNotFound
from folio.contexts.rendering.file_renderer import FileRenderer
from folio.contexts.rendering.logger import _log_debug
from folio.contexts.rendering.lookup import locate_layout
from folio.contexts.rendering.partial_resolver import Found, PartialResolver
from folio.contexts.sitemap.files import SourceFile
from folio.contexts.sitemap.sitemap import Resource

if TYPE_CHECKING:
    from folio.application import Application


def freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Return a read-only copy of a mapping."""
    return MappingProxyType(dict(mapping or {}))


class RenderContext:
    """
    Evaluation context for one page render.

    Holds the mutable render state: the active output buffer and the current
    engine. Both are only changed through scoped acquisitions
    (buffer_preserved, engine_preserved) that restore the previous value on
    every exit path.

    Not thread-safe; concurrent page renders each need their own context.
    """

    def __init__(
        self,
        app: "Application",
        locals: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ):
        """
        Args:
            app: The owning application
            locals: Page locals; "current_path" anchors relative partial lookup
            options: Page render options
        """
        self._app = app
        self._locals = freeze(locals)
        self._options = freeze(options)
        self._out_buf: List[str] = []
        self.current_engine: Optional[str] = None
        self.resolver = PartialResolver(app)

    # Buffer handling

    def save_buffer(self) -> List[str]:
        """
        Swap in an empty buffer and return the previous one.

        Always paired with restore_buffer(); prefer buffer_preserved().
        """
        buf_was, self._out_buf = self._out_buf, []
        return buf_was

    def restore_buffer(self, buf_was: List[str]) -> None:
        """Reinstate a buffer returned by save_buffer()."""
        self._out_buf = buf_was

    @contextmanager
    def buffer_preserved(self) -> Iterator[List[str]]:
        """Run a region against a fresh buffer, restoring the previous one on exit."""
        buf_was = self.save_buffer()
        try:
            yield self._out_buf
        finally:
            self.restore_buffer(buf_was)

    @contextmanager
    def engine_preserved(self) -> Iterator[Optional[str]]:
        """Restore the current engine on exit, whatever the region sets it to."""
        engine_was = self.current_engine
        try:
            yield engine_was
        finally:
            self.current_engine = engine_was

    @property
    def buffer(self) -> List[str]:
        """The active output buffer."""
        return self._out_buf

    def buffer_contents(self) -> str:
        return "".join(self._out_buf)

    def concat(self, text: Any) -> None:
        """Append text to the active buffer."""
        if text:
            self._out_buf.append(str(text))

    def capture_html(self, block: Callable[[], Any]) -> str:
        """
        Run a block and return everything it produced.

        Text written to the buffer while the block runs comes first, followed
        by the block's return value.
        """
        with self.buffer_preserved():
            result = block()
            captured = self.buffer_contents()
        return captured + ("" if result is None else str(result))

    # Template helpers

    def wrap_layout(self, layout_name: str, caller: Optional[Callable[[], Any]] = None) -> str:
        """
        Wrap content in a layout and return the wrapped output.

        Used from templates as a call block, which lets layouts be nested:

            {% call wrap_layout("layout") %}...{% endcall %}

        The output is returned rather than written to the buffer so it lands
        where the call sits, including inside call bodies, set blocks and
        macros that collect their own output.

        The layout written for the current engine is preferred. The layout's
        engine is current while the body is captured; the caller's engine and
        buffer are restored afterwards, also when locating or rendering fails.

        Args:
            layout_name: Layout name without extension
            caller: Body block whose output becomes the layout's yield_content()

        Returns:
            The layout rendered around the captured body

        Raises:
            TemplateNotFound: If no layout file matches the name
        """
        with self.engine_preserved():
            with self.buffer_preserved():
                layout_file = locate_layout(self._app, layout_name, self.current_engine)
                if layout_file is None:
                    raise TemplateNotFound(f"Could not locate layout: {layout_name}", name=str(layout_name))

                self.current_engine = layout_file.extension

                content = self.capture_html(caller) if caller is not None else ""

            return self.render_file(layout_file, self._locals, self._options, lambda: content)

    def render(
        self,
        name: Any,
        options: Optional[Mapping[str, Any]] = None,
        caller: Optional[Callable[[], Any]] = None,
        **extra_options: Any,
    ) -> str:
        """
        Render a partial.

            {{ render("nav") }}
            {{ render("card", locals={"title": "Hello"}) }}
            {% call render("panel") %}inner{% endcall %}

        Args:
            name: Partial reference, relative to the current template or the source root
            options: Render options; the "locals" key holds the partial's locals
            caller: Block forwarded to the partial as yield_content()
            **extra_options: Merged over options

        Returns:
            The rendered partial, its raw contents for static files, or "" when
            there is no page to resolve against and nothing matched at the root

        Raises:
            TemplateNotFound: If no candidate file exists for the current page
        """
        name = str(name)
        opts: Dict[str, Any] = dict(options or {})
        opts.update(extra_options)

        resolution = self.resolver.resolve(name, self.current_path)

        if not isinstance(resolution, Found):
            if not resolution.anchored:
                _log_debug(f"No page context for partial '{name}', rendering nothing")
                return ""
            raise TemplateNotFound(
                f"Could not locate partial: {name}", name=name, candidates=resolution.candidates
            )

        if not resolution.is_template:
            return resolution.file.read_text()

        locs = opts.pop("locals", None)
        return self.render_file(resolution.file, freeze(locs), freeze(opts), caller)

    def render_file(
        self,
        file: SourceFile,
        locals: Mapping[str, Any],
        options: Mapping[str, Any],
        block: Optional[Callable[[], Any]] = None,
    ) -> str:
        """Render a source file with this context."""
        started = time.perf_counter()
        output = FileRenderer(self._app, file).render(locals, options, self, block)
        _log_debug(f"  {file.relative_path} rendered ({time.perf_counter() - started:.3f}s)")
        return output

    def template_globals(self) -> Dict[str, Any]:
        """Names every template evaluated with this context can use."""
        return {
            "wrap_layout": self.wrap_layout,
            "render": self.render,
            "config": self.config,
            "sitemap": self.sitemap,
            "data": self.data,
            "current_path": self.current_path,
            "current_page": self.current_page,
            "is_server": self.is_server,
            "is_build": self.is_build,
            "environment": self.environment,
        }

    # Read-only accessors

    @property
    def app(self) -> "Application":
        return self._app

    @property
    def locals(self) -> Mapping[str, Any]:
        return self._locals

    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    @property
    def config(self):
        return self._app.config

    @property
    def logger(self):
        return self._app.logger

    @property
    def sitemap(self):
        return self._app.sitemap

    @property
    def data(self):
        return self._app.data

    @property
    def extensions(self):
        return self._app.extensions

    @property
    def root(self):
        return self._app.root

    @property
    def source_dir(self):
        return self._app.source_dir

    def is_server(self) -> bool:
        return self._app.is_server()

    def is_build(self) -> bool:
        return self._app.is_build()

    def environment(self, name: Optional[str] = None):
        return self._app.environment(name)

    @property
    def current_path(self) -> Optional[str]:
        return self._locals.get("current_path")

    @property
    def current_page(self) -> Optional[Resource]:
        """Resource for the page being rendered, if it is in the sitemap."""
        return self.sitemap.find_resource_by_destination_path(self.current_path)

    current_resource = current_page
