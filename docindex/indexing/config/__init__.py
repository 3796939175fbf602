# docindex/indexing/config/__init__.py
from .loader import build_run_options, load_settings
from .schema import DEFAULT_BATCH_SIZE, IndexerSettings, RunOptions

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "IndexerSettings",
    "RunOptions",
    "build_run_options",
    "load_settings",
]
