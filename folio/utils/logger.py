"""
Generic logger setup utilities.

Provides reusable loguru configuration with provenance tracking.
Context-specific wrappers should be defined in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from folio import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors; rendered pages go to stdout, so only problems stand out
LEVEL_COLORS = {
    "DEBUG": "<dim>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, object]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Configure loguru for a context and write a provenance header.

    The log file keeps every level; the console (stderr) only shows
    console_level and above, leaving stdout free for rendered output.

    Args:
        context_name: Context identifier, used as the log file stem (e.g., "render")
        log_dir: Directory for log files (created when missing)
        extra_provenance: Project details for the header (source directory, config file...)
        console_level: Minimum level echoed to stderr

    Returns:
        Path to log file

    Example:
        from folio.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="render",
            log_dir=Path("logs"),
            extra_provenance={"Source directory": "my-site/source"},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(log_file, extra_provenance)

    return log_file


def log_provenance(log_file: Path, extra_context: Optional[Dict[str, object]] = None) -> None:
    """
    Log a provenance header: folio version, command line, log file, then
    the project details the caller passes in.

    Args:
        log_file: File this session logs to
        extra_context: Additional key-value pairs to log, in order
    """
    logger.info("=" * 80)
    logger.info(f"folio {__version__} (Python {sys.version.split()[0]})")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Log file: {log_file}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
