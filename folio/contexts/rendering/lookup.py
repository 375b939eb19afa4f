"""
Template Lookup

Engine-aware resolution of a source-relative path to a template file.
"""

import posixpath
from typing import TYPE_CHECKING, List, Optional

from folio.contexts.rendering.logger import log_layout_located
from folio.contexts.sitemap.files import SourceFile, escape_glob, normalize_relative

if TYPE_CHECKING:
    from folio.application import Application


def resolve_template(
    app: "Application",
    request_path: str,
    preferred_engine: Optional[str] = None,
    try_static: bool = False,
) -> Optional[SourceFile]:
    """
    Find the template file for a path given without its engine extension.

    Lookup order:
    1. "<path>.<ext>" for every extension of the preferred engine
    2. "<path>.*", first match that has a registered engine
    3. "<path>" exactly, accepted without an engine (only when try_static)

    Args:
        app: Application providing the source tree and engine registry
        request_path: Source-relative path, leading slash allowed
        preferred_engine: Extension whose engine should win ambiguous matches
        try_static: Also accept the exact path as a static file

    Returns:
        The matching SourceFile, or None
    """
    relative_path = normalize_relative(request_path)
    if relative_path is None:
        return None

    for extension in _preferred_extensions(app, preferred_engine):
        found = app.files.find(f"{relative_path}.{extension}")
        if found is not None:
            return found

    directory, _, name = relative_path.rpartition("/")
    pattern = posixpath.join(directory, escape_glob(name) + ".*")
    for candidate in app.files.find_all(pattern):
        if app.engines.has_engine(candidate.extension):
            return candidate

    if try_static:
        return app.files.find(relative_path)

    return None


def _preferred_extensions(app: "Application", preferred_engine: Optional[str]) -> List[str]:
    if not preferred_engine:
        return []
    return app.engines.extensions_for(preferred_engine)


def locate_layout(
    app: "Application", layout_name: str, preferred_engine: Optional[str] = None
) -> Optional[SourceFile]:
    """
    Find a layout by name.

    The layouts directory is searched first, then the source root. A layout
    written for the preferred engine wins over one for any other engine.

    Args:
        app: Application providing config, source tree and engines
        layout_name: Layout name without extension (e.g., "layout")
        preferred_engine: Extension of the template being wrapped

    Returns:
        The layout SourceFile, or None
    """
    name = str(layout_name)
    layouts_dir = app.config.layouts_dir

    layout_file = None
    if layouts_dir:
        layout_file = resolve_template(app, posixpath.join(layouts_dir, name), preferred_engine)
    if layout_file is None:
        layout_file = resolve_template(app, name, preferred_engine)

    if layout_file is not None:
        log_layout_located(name, layout_file.relative_path, layout_file.extension)
    return layout_file
