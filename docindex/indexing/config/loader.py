# docindex/indexing/config/loader.py
"""
Settings loader for indexing runs.

This is a thin wrapper around docindex.core.config; all the YAML and
validation logic lives there.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from docindex.core.config import load_config, validate_config
from docindex.core.paths import DocIndexPaths

from .schema import IndexerSettings, RunOptions


def load_settings(path: Optional[Union[str, Path]] = None) -> IndexerSettings:
    """
    Load the indexer settings file.

    Args:
        path: YAML settings file. If None, uses DocIndexPaths.config()

    Raises:
        ConfigNotFoundError / ConfigParseError / ConfigValidationError
    """
    return load_config(path if path is not None else DocIndexPaths.config(), IndexerSettings)


def build_run_options(settings: IndexerSettings, **overrides: Any) -> RunOptions:
    """
    Merge explicit overrides over the settings file defaults.

    Overrides that are None are treated as "not given".

    Raises:
        ConfigValidationError: If the merged options are invalid

    Examples:
        >>> build_run_options(settings, dry_run=True, batch_size=None)
    """
    merged = settings.defaults.model_dump()
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return validate_config(merged, RunOptions)


__all__ = [
    "build_run_options",
    "load_settings",
]
