"""
Template Renderer

Top-level render of one output page: the page template, then the default
layout around it.
"""

import time
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from folio.contexts.rendering.exceptions import TemplateNotFound
from folio.contexts.rendering.logger import log_render_failure, log_render_result, log_render_start
from folio.contexts.rendering.lookup import locate_layout
from folio.contexts.rendering.render_context import RenderContext, freeze

if TYPE_CHECKING:
    from folio.application import Application


class TemplateRenderer:
    """Renders the resource at one destination path."""

    def __init__(self, app: "Application", path: str):
        self.app = app
        self.path = path

    def render(
        self,
        locals: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Render the page.

        A new RenderContext is created for every call. The layout is taken
        from options["layout"] when given, otherwise from config.layout;
        None or False renders the page without one.

        Args:
            locals: Extra page locals (current_path is always set)
            options: Render options

        Returns:
            The rendered page

        Raises:
            TemplateNotFound: If the path is not in the sitemap or the layout is missing
            RenderError: If a template fails to evaluate
        """
        resource = self.app.sitemap.find_resource_by_destination_path(self.path)
        if resource is None:
            raise TemplateNotFound(f"No resource at destination path: {self.path}", name=self.path)

        log_render_start(resource.destination_path, resource.source_file.relative_path)

        # Static resources are copied through untouched
        if not resource.is_template:
            return resource.source_file.read_text()

        locs: Dict[str, Any] = dict(locals or {})
        locs["current_path"] = resource.destination_path
        opts = dict(options or {})

        layout_name = opts["layout"] if "layout" in opts else self.app.config.layout

        frozen_locals, frozen_options = freeze(locs), freeze(opts)
        context = RenderContext(self.app, frozen_locals, frozen_options)

        started = time.perf_counter()
        try:
            content = context.render_file(resource.source_file, frozen_locals, frozen_options)

            if layout_name:
                layout_file = locate_layout(self.app, layout_name, resource.engine)
                if layout_file is None:
                    raise TemplateNotFound(f"Could not locate layout: {layout_name}", name=str(layout_name))
                body = content
                content = context.render_file(layout_file, frozen_locals, frozen_options, lambda: body)
        except Exception as e:
            log_render_failure(resource.destination_path, e, time.perf_counter() - started)
            raise

        log_render_result(resource.destination_path, time.perf_counter() - started, len(content))
        return content
