"""
Partial Resolver

Resolves a partial reference against the page being rendered.

Candidates are tried in a fixed order and the first hit wins:

    relative             beside the current template, preferring its engine
    root                 relative to the source root
    root_static          as root, also accepting a static file
    relative_unprefixed  underscore variant beside the current template, static allowed
    root_unprefixed      underscore variant relative to the source root, static allowed

The underscore variant drops the leading "_" of the final path segment, or
adds one when the segment has none, so "nav" finds "_nav.jinja" and "_nav"
finds "nav.jinja".
"""

import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Union

from folio.contexts.rendering.logger import _log_debug, log_partial_resolved
from folio.contexts.rendering.lookup import resolve_template
from folio.contexts.sitemap.files import SourceFile

if TYPE_CHECKING:
    from folio.application import Application


@dataclass(frozen=True)
class Found:
    """A partial reference that resolved to a source file."""

    file: SourceFile
    is_template: bool
    rule: str


@dataclass(frozen=True)
class NotFound:
    """
    A partial reference that matched nothing.

    Attributes:
        name: The reference as requested
        anchored: Whether the current page was known (relative candidates were tried)
        candidates: Candidate paths that were tried, in order
    """

    name: str
    anchored: bool
    candidates: List[str] = field(default_factory=list)


Resolution = Union[Found, NotFound]


class Candidate(NamedTuple):
    rule: str
    path: str
    preferred_engine: Optional[str] = None
    try_static: bool = False


def toggle_underscore(path: str) -> str:
    """Drop the leading underscore of the final segment, or add one if missing."""
    directory, _, name = path.rpartition("/")
    if not name:
        return path
    name = name[1:] if name.startswith("_") else f"_{name}"
    return f"{directory}/{name}" if directory else name


class PartialResolver:
    """Resolves partial references for one application."""

    def __init__(self, app: "Application"):
        self.app = app

    def candidates(self, name: str, current_path: Optional[str]) -> List[Candidate]:
        """
        Build the ordered candidate list for a reference.

        Args:
            name: Partial reference (e.g., "nav", "_nav", "/shared/footer")
            current_path: Destination path of the page being rendered

        Returns:
            Candidates in priority order; relative ones only when the page is known
        """
        non_root = name.lstrip("/")
        unprefixed = toggle_underscore(non_root)

        resource = self.app.sitemap.find_resource_by_destination_path(current_path)

        relative: List[Candidate] = []
        if resource is not None:
            current_dir = posixpath.dirname(resource.source_file.relative_path.as_posix())
            page_engine = resource.source_file.extension or None
            relative = [
                Candidate("relative", posixpath.join(current_dir, non_root), page_engine),
                Candidate("relative_unprefixed", posixpath.join(current_dir, unprefixed), try_static=True),
            ]

        ordered = []
        if relative:
            ordered.append(relative[0])
        ordered.append(Candidate("root", non_root))
        ordered.append(Candidate("root_static", non_root, try_static=True))
        if relative:
            ordered.append(relative[1])
        ordered.append(Candidate("root_unprefixed", unprefixed, try_static=True))
        return ordered

    def resolve(self, name: str, current_path: Optional[str]) -> Resolution:
        """
        Resolve a partial reference to a source file.

        Args:
            name: Partial reference
            current_path: Destination path of the page being rendered

        Returns:
            Found with the file and whether it should be evaluated as a template,
            or NotFound (absence is for the caller to judge)
        """
        candidates = self.candidates(name, current_path)
        anchored = any(c.rule.startswith("relative") for c in candidates)

        for candidate in candidates:
            partial_file = resolve_template(
                self.app,
                candidate.path,
                preferred_engine=candidate.preferred_engine,
                try_static=candidate.try_static,
            )
            if partial_file is None:
                continue

            is_template = self.is_template(partial_file)
            log_partial_resolved(name, partial_file.relative_path, candidate.rule, is_template)
            return Found(file=partial_file, is_template=is_template, rule=candidate.rule)

        _log_debug(f"Partial '{name}' not found (anchored: {anchored})")
        return NotFound(name=name, anchored=anchored, candidates=[c.path for c in candidates])

    def is_template(self, file: SourceFile) -> bool:
        """
        Decide whether a resolved file is evaluated or returned verbatim.

        A file is static when the sitemap knows it as a non-template resource,
        or when no engine is registered for its extension.
        """
        resource = self.app.sitemap.find_resource_by_path(file.relative_path)
        if resource is not None and not resource.is_template:
            return False
        return self.app.engines.has_engine(file.extension)
