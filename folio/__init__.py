"""
folio - template rendering with layout composition and partial resolution

Renders the pages of a static site from a source tree of Jinja2 templates.

Architecture:
- Sitemap Context: Source file lookup and destination path mapping
- Rendering Context: Engines, layouts, partials and the per-page render context
"""

__version__ = "0.1.0"
