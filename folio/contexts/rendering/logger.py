"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

if TYPE_CHECKING:
    from folio.application import Application

load_dotenv()

CONTEXT_PREFIX = "[render]"


def project_provenance(site: Optional["Application"] = None) -> Dict[str, object]:
    """
    Describe the project a session renders, for the log header.

    Without a site only the mode and environment from the environment
    variables are known.
    """
    if site is None:
        return {
            "Mode": os.getenv("FOLIO_MODE", "build"),
            "Environment": os.getenv("FOLIO_ENVIRONMENT", "development"),
        }

    return {
        "Project": site.root,
        "Config": site.config_path if site.config_path.exists() else "none (defaults)",
        "Source directory": site.source_dir,
        "Layouts directory": site.source_dir / site.config.layouts_dir,
        "Mode": site.config.mode,
        "Environment": site.config.environment,
        "Resources": len(site.sitemap.resources),
    }


def setup_rendering_logger(
    log_dir: Path, site: Optional["Application"] = None, console_level: str = "INFO"
) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking; the header records the
    project's root, config file, source and layouts directories.

    Args:
        log_dir: Directory for this rendering session
        site: Project being rendered
        console_level: Minimum level echoed to the console

    Returns:
        Path to log file

    Example:
        from folio.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir, site=Application(Path("my-site")))
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance=project_provenance(site),
        console_level=console_level,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(destination_path: str, source_path: Path) -> None:
    """Log start of a page render."""
    _log_info(f"Rendering {destination_path}")
    _log_debug(f"  Source: {source_path}")


def log_render_result(destination_path: str, elapsed_time: float, output_length: int) -> None:
    """Log a finished page render."""
    _log_success(f"{destination_path}: {output_length} chars ({elapsed_time:.3f}s)")


def log_render_failure(destination_path: str, error: Exception, elapsed_time: float) -> None:
    """Log a failed page render. The error itself is re-raised by the caller."""
    _log_error(f"Failed to render {destination_path} ({elapsed_time:.3f}s)")
    for line in str(error).splitlines():
        _log_error(f"  {line}")


def log_partial_resolved(name: str, relative_path: Path, rule: str, is_template: bool) -> None:
    """Log which candidate a partial reference resolved through."""
    kind = "template" if is_template else "static"
    _log_debug(f"Partial '{name}' -> {relative_path} ({rule}, {kind})")


def log_layout_located(name: str, relative_path: Path, engine: str) -> None:
    """Log the file chosen for a layout name."""
    _log_debug(f"Layout '{name}' -> {relative_path} (engine: {engine})")
