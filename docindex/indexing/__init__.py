# docindex/indexing/__init__.py
"""
Incremental indexing pipeline.

Public API:
    - DocumentationIndexer: Run orchestrator
    - ChangeDetectionService / ChangeSet: Diff against the last snapshot
    - ProgressTracker: Per-run progress and errors
    - compute_fingerprint: Document fingerprinting
    - IndexingReport / SourceReport: Run output
    - IndexerSettings / RunOptions: Configuration
"""

from docindex.indexing.errors import (
    AdapterInitializationError,
    DocIndexError,
    DocumentProcessingError,
    FatalIndexingError,
    SnapshotStoreError,
    SourceUnavailableError,
)
from docindex.indexing.state import DocumentFingerprint, FingerprintSnapshot, SnapshotStore
from docindex.indexing.hashing import compute_fingerprint
from docindex.indexing.diff import ChangeDetectionService, ChangeSet, ChangeType
from docindex.indexing.report import (
    IndexingError,
    IndexingReport,
    ProgressReport,
    SourceError,
    SourceReport,
    SourceStatus,
)
from docindex.indexing.progress import ProgressTracker
from docindex.indexing.config import IndexerSettings, RunOptions, build_run_options, load_settings
from docindex.indexing.indexer import (
    DocumentationIndexer,
    DocumentProcessor,
    LoggingDocumentProcessor,
)

__all__ = [
    "AdapterInitializationError",
    "ChangeDetectionService",
    "ChangeSet",
    "ChangeType",
    "DocIndexError",
    "DocumentFingerprint",
    "DocumentProcessingError",
    "DocumentProcessor",
    "DocumentationIndexer",
    "FatalIndexingError",
    "FingerprintSnapshot",
    "IndexerSettings",
    "IndexingError",
    "IndexingReport",
    "LoggingDocumentProcessor",
    "ProgressReport",
    "ProgressTracker",
    "RunOptions",
    "SnapshotStore",
    "SnapshotStoreError",
    "SourceError",
    "SourceReport",
    "SourceStatus",
    "SourceUnavailableError",
    "build_run_options",
    "compute_fingerprint",
    "load_settings",
]
