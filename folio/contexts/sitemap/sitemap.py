"""
Sitemap

Bidirectional mapping between output destination paths and source files.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Dict, List, Optional

from folio.contexts.sitemap.files import SourceFile, SourceTree, normalize_relative

if TYPE_CHECKING:
    from folio.contexts.rendering.engines import EngineRegistry


@dataclass(frozen=True)
class Resource:
    """
    A logical output page backed by a source file.

    Attributes:
        destination_path: Output path relative to the build directory (e.g., "blog/index.html")
        source_file: The file this page is rendered from
        is_template: Whether the source has a registered template engine
    """

    destination_path: str
    source_file: SourceFile
    is_template: bool

    @property
    def engine(self) -> Optional[str]:
        """Engine identifier of the source file, None for static resources."""
        return self.source_file.extension if self.is_template else None


class Sitemap:
    """
    Resource index built from a SourceTree.

    Layout files, partials (any "_"-prefixed path segment) and dotfiles are
    not resources.
    """

    def __init__(self, files: SourceTree, engines: "EngineRegistry", layouts_dir: str = "layouts"):
        self.files = files
        self.engines = engines
        self.layouts_dir = layouts_dir.strip("/")
        self._by_destination: Dict[str, Resource] = {}
        self._by_source: Dict[str, Resource] = {}
        self.rebuild()

    def rebuild(self) -> None:
        """Rescan the source tree and rebuild both indexes."""
        self._by_destination.clear()
        self._by_source.clear()

        for file in self.files.files():
            destination = self.file_to_path(file)
            if destination is None:
                continue

            resource = Resource(
                destination_path=destination,
                source_file=file,
                is_template=self.engines.has_engine(file.extension),
            )
            # First source wins when two files map to the same destination
            self._by_destination.setdefault(destination, resource)
            self._by_source[file.relative_path.as_posix()] = resource

    @property
    def resources(self) -> List[Resource]:
        return sorted(self._by_destination.values(), key=lambda r: r.destination_path)

    def is_ignored(self, file: SourceFile) -> bool:
        parts = file.relative_path.parts
        if self.layouts_dir and file.relative_path.as_posix().startswith(self.layouts_dir + "/"):
            return True
        return any(part.startswith("_") or part.startswith(".") for part in parts)

    def file_to_path(self, file: SourceFile) -> Optional[str]:
        """
        Compute the destination path for a source file.

        Every trailing engine extension is removed, so "index.html.jinja"
        maps to "index.html".

        Returns:
            Destination path, or None if the file is not a resource
        """
        if self.is_ignored(file):
            return None

        path = file.relative_path
        while path.suffix and self.engines.has_engine(path.suffix[1:]):
            path = path.with_suffix("")
        return path.as_posix()

    def find_resource_by_destination_path(self, path: Optional[str]) -> Optional[Resource]:
        if not path:
            return None
        normalized = normalize_relative(path)
        return self._by_destination.get(normalized) if normalized else None

    def find_resource_by_path(self, source_path: PurePosixPath) -> Optional[Resource]:
        """Find a resource by its source file's relative path."""
        return self._by_source.get(PurePosixPath(source_path).as_posix())
