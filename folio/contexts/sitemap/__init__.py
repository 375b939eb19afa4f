"""
Sitemap Context

Responsibilities:
- Looks up source files by path or glob
- Maps source files to output destination paths and back

Owns: Source file identity, resource index
Never: Evaluates templates
"""

from folio.contexts.sitemap.files import SourceFile, SourceTree
from folio.contexts.sitemap.sitemap import Resource, Sitemap

__all__ = ["Resource", "Sitemap", "SourceFile", "SourceTree"]
