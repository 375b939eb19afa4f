"""
Source Tree

File lookup over a project's source directory.
"""

import glob as globlib
import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional


@dataclass(frozen=True)
class SourceFile:
    """
    One template or asset on disk.

    Attributes:
        relative_path: Path relative to the source directory (stable identity)
        full_path: Absolute location used for existence checks and reads
    """

    relative_path: PurePosixPath
    full_path: Path

    @property
    def extension(self) -> str:
        """Last suffix without the dot ("" when the file has none)."""
        return self.relative_path.suffix[1:]

    def exists(self) -> bool:
        return self.full_path.is_file()

    def read_text(self) -> str:
        """
        Read the file as UTF-8.

        Bytes that are not valid UTF-8 (images, fonts) are kept as surrogate
        escapes, so encoding with errors="surrogateescape" gives back the
        exact file contents.
        """
        return self.full_path.read_bytes().decode("utf-8", errors="surrogateescape")


def normalize_relative(path: str) -> Optional[str]:
    """
    Normalize a source-relative lookup path.

    Strips leading slashes and collapses "." and ".." segments.

    Returns:
        Normalized posix path, or None if it is empty or escapes the source directory
    """
    stripped = path.lstrip("/")
    if not stripped:
        return None

    normalized = posixpath.normpath(stripped)
    if normalized == "." or normalized == ".." or normalized.startswith("../"):
        return None
    return normalized


class SourceTree:
    """
    Lookup of source files by relative path or glob.

    Every lookup goes to disk so files added after construction are found.
    """

    def __init__(self, source_dir: Path):
        self.source_dir = Path(source_dir).resolve()

    def _source_file(self, full_path: Path) -> SourceFile:
        relative = PurePosixPath(full_path.relative_to(self.source_dir).as_posix())
        return SourceFile(relative_path=relative, full_path=full_path)

    def find(self, path: str, glob: bool = False) -> Optional[SourceFile]:
        """
        Find a single source file.

        Args:
            path: Relative path, or a glob pattern when glob is True
            glob: Treat path as a pattern and return the first sorted match

        Returns:
            The matching SourceFile, or None
        """
        if glob:
            matches = self.find_all(path)
            return matches[0] if matches else None

        relative = normalize_relative(path)
        if relative is None:
            return None

        full_path = self.source_dir / relative
        if not full_path.is_file():
            return None
        return self._source_file(full_path)

    def find_all(self, pattern: str) -> List[SourceFile]:
        """
        Find every source file matching a glob pattern.

        "*" matches within a single path segment. The directory part of the
        pattern is taken literally.

        Args:
            pattern: Relative glob, e.g. "partials/nav.*"

        Returns:
            Matching SourceFiles sorted by relative path
        """
        relative = normalize_relative(pattern)
        if relative is None:
            return []

        directory, _, name_pattern = relative.rpartition("/")
        base = self.source_dir / directory if directory else self.source_dir
        if not base.is_dir():
            return []

        # Only the final segment is a pattern; the directory is used as-is
        return [self._source_file(path) for path in sorted(base.glob(name_pattern)) if path.is_file()]

    def files(self) -> List[SourceFile]:
        """Return every regular file under the source directory, skipping dotfiles."""
        if not self.source_dir.is_dir():
            return []

        found = []
        for path in sorted(self.source_dir.rglob("*")):
            relative = path.relative_to(self.source_dir)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file():
                found.append(self._source_file(path))
        return found


def escape_glob(path: str) -> str:
    """Escape glob metacharacters in a literal path."""
    return globlib.escape(path)
