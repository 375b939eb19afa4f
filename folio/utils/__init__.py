"""
Shared utilities for folio.

Common functionality used across contexts:
- Logger setup with provenance tracking
"""

from folio.utils.logger import log_provenance, setup_logger

__all__ = ["log_provenance", "setup_logger"]
