"""Shared fixtures: throwaway projects written to tmp_path."""

from pathlib import Path
from typing import Dict

import pytest

from folio.application import Application


def write_tree(root: Path, files: Dict[str, str]) -> None:
    """Write {relative_path: content} under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def make_app(tmp_path):
    """
    Build an Application over a source tree.

    Usage:
        app = make_app({"index.html.jinja": "Hi"}, layout="layout")
    """

    def _make(files: Dict[str, str], project_files: Dict[str, str] = None, **config) -> Application:
        write_tree(tmp_path / "source", files)
        write_tree(tmp_path, project_files or {})
        return Application(tmp_path, config_overrides=config or None)

    return _make
