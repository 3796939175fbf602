# docindex/indexing/errors.py
"""
Exception hierarchy for indexing runs.

Fatal errors abort the whole run and propagate out of
DocumentationIndexer.initialize() / index_all_sources(). Everything else is
converted into report entries by the indexer.

    DocIndexError
    ├── FatalIndexingError
    │   ├── AdapterInitializationError
    │   └── SnapshotStoreError
    ├── SourceUnavailableError
    └── DocumentProcessingError
"""

from __future__ import annotations

from typing import Optional


class DocIndexError(Exception):
    """Base error for docindex."""

    pass


class FatalIndexingError(DocIndexError):
    """Run-aborting error."""

    pass


class AdapterInitializationError(FatalIndexingError):
    """Raised when a source adapter cannot be initialized outside a dry run."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Failed to initialize source {source!r}: {message}")


class SnapshotStoreError(FatalIndexingError):
    """Raised when the fingerprint snapshot cannot be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (path: {path})"
        super().__init__(message)


class SourceUnavailableError(DocIndexError):
    """Raised when a source fails its health check or cannot be fetched."""

    pass


class DocumentProcessingError(DocIndexError):
    """Raised by document processors for a single failed document."""

    def __init__(self, document_id: str, message: str):
        self.document_id = document_id
        super().__init__(f"{document_id}: {message}")


__all__ = [
    "AdapterInitializationError",
    "DocIndexError",
    "DocumentProcessingError",
    "FatalIndexingError",
    "SnapshotStoreError",
    "SourceUnavailableError",
]
