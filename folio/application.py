"""
Application

The build context a render runs in: configuration, source tree, engines,
sitemap, data store and extension registry for one project.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from folio.config import CONFIG_FILENAME, load_config, load_data
from folio.contexts.rendering.engines import default_registry
from folio.contexts.rendering.template_renderer import TemplateRenderer
from folio.contexts.sitemap import Sitemap, SourceTree


class Application:
    """
    One project, ready to render pages.

    Example:
        app = Application(Path("my-site"))
        html = app.render("index.html")
    """

    def __init__(self, root: Path, config_overrides: Optional[Dict[str, Any]] = None):
        self.root = Path(root).resolve()
        self.config_path = self.root / CONFIG_FILENAME
        self.config = load_config(self.root, config_overrides)
        self.logger = logger

        self.source_dir = self.root / self.config.source_dir
        self.engines = default_registry(self.source_dir)
        self.files = SourceTree(self.source_dir)
        self.sitemap = Sitemap(self.files, self.engines, self.config.layouts_dir)
        self.data = load_data(self.root / self.config.data_dir)

        # Registered extensions by name; populated by the surrounding build system
        self.extensions: Dict[str, Any] = {}

    def is_server(self) -> bool:
        return self.config.mode == "server"

    def is_build(self) -> bool:
        return self.config.mode == "build"

    def environment(self, name: Optional[str] = None):
        """Return the environment name, or whether it equals the given one."""
        if name is None:
            return self.config.environment
        return self.config.environment == name

    def render(
        self,
        destination_path: str,
        locals: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Render the page at a destination path."""
        return TemplateRenderer(self, destination_path).render(locals, options)
