# docindex/logging/logger.py
"""
Unified logging setup for docindex.

All modules use:
    from docindex.logging.logger import get_logger
    logger = get_logger(__name__)

Configuration happens once, in the CLI entrypoint, through configure_logging().
Library code never installs handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

DEFAULT_FORMAT = "[%(levelname)s] %(name)s - %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_ROOT_LOGGER_NAME = "docindex"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO = sys.stderr,
) -> logging.Logger:
    """
    Configure the docindex logger hierarchy.

    Safe to call multiple times: the handler is installed once and
    later calls only adjust the level (and the format of our handler).
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)

    handler = next(
        (h for h in root.handlers if getattr(h, "_docindex_handler", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler._docindex_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    handler.setFormatter(logging.Formatter(fmt))
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Example:
        logger = get_logger(__name__)

    Do NOT configure logging here; configuration happens in configure_logging().
    """
    return logging.getLogger(name)


__all__ = ["DEFAULT_FORMAT", "VERBOSE_FORMAT", "configure_logging", "get_logger"]
