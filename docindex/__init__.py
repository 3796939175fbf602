"""
docindex - Incremental documentation indexer.

docindex pulls documentation from heterogeneous sources (local files, wikis,
git hosts, web pages), fingerprints every document and works out between
runs exactly which documents were added, changed or removed, so only the
delta gets reprocessed.

Quick Start:
    >>> import asyncio
    >>> from docindex import DocumentationIndexer, build_run_options, load_settings
    >>>
    >>> settings = load_settings("docindex.yaml")
    >>> options = build_run_options(settings, incremental=True)
    >>>
    >>> async def main():
    ...     async with DocumentationIndexer(settings, options) as indexer:
    ...         return await indexer.index_all_sources()
    >>>
    >>> report = asyncio.run(main())
    >>> print(report.summary.processed_documents)

Architecture:
    docindex/
    ├── core/       # Document model, config loading, paths, HTTP client
    ├── indexing/   # Fingerprints, snapshots, change detection, indexer
    ├── sources/    # Adapter contract, registry, built-in adapters
    ├── logging/    # Logger factory and tags
    └── cli/        # typer application
"""

__version__ = "0.1.0"

from docindex.core.document import Document, DocumentType, parse_document
from docindex.indexing import (
    ChangeDetectionService,
    ChangeSet,
    DocumentationIndexer,
    IndexerSettings,
    IndexingReport,
    ProgressTracker,
    RunOptions,
    build_run_options,
    compute_fingerprint,
    load_settings,
)
from docindex.sources import SourceAdapter, SourceConfig, default_registry

__all__ = [
    "__version__",
    "ChangeDetectionService",
    "ChangeSet",
    "Document",
    "DocumentType",
    "DocumentationIndexer",
    "IndexerSettings",
    "IndexingReport",
    "ProgressTracker",
    "RunOptions",
    "SourceAdapter",
    "SourceConfig",
    "build_run_options",
    "compute_fingerprint",
    "default_registry",
    "load_settings",
    "parse_document",
]
