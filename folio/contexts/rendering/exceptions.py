"""Custom exceptions for the rendering context with template references."""

from pathlib import Path
from typing import Optional, Sequence


class TemplateNotFound(Exception):
    """
    Exception raised when a page, layout or partial cannot be located.

    Attributes:
        message: Error description
        name: The page, layout or partial reference that was requested
        candidates: Lookup paths that were tried, in order
    """

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        candidates: Optional[Sequence[str]] = None,
    ):
        self.message = message
        self.name = name
        self.candidates = list(candidates or [])

        parts = [message]

        if self.candidates:
            parts.append("\nTried:")
            parts.extend(f"  {candidate}" for candidate in self.candidates)

        super().__init__("\n".join(parts))


class RenderError(Exception):
    """
    Exception raised when a template engine fails to evaluate a located template.

    Attributes:
        message: Error description
        template_path: Path to the template file that failed
        engine: Engine identifier (the template's extension)
        original_error: The original engine error
    """

    def __init__(
        self,
        message: str,
        template_path: Optional[Path] = None,
        engine: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_path = template_path
        self.engine = engine
        self.original_error = original_error

        parts = [message]

        if template_path:
            parts.append(f"\nTemplate: {template_path}")
        if engine:
            parts.append(f"Engine: {engine}")

        if original_error:
            parts.append(f"\nOriginal error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))


class InvalidConfigError(ValueError):
    """
    Exception raised when the project configuration holds an unusable value.

    This is raised for values the renderer cannot act on (e.g., an unknown
    mode), not for unknown keys, which are kept and passed through to templates.
    """

    pass
