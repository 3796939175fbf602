# docindex/logging/__init__.py
"""
Logging setup shared by every docindex module.

Usage:
    from docindex.logging.logger import get_logger
    from docindex.logging.tags import INDEXER

    logger = get_logger(__name__)
    logger.info(f"{INDEXER} Starting run")
"""

from .logger import DEFAULT_FORMAT, configure_logging, get_logger

__all__ = ["DEFAULT_FORMAT", "configure_logging", "get_logger"]
