# docindex/indexing/diff/__init__.py
"""
Change detection between indexing runs.

Public API:
    - ChangeDetectionService: Load snapshot, diff, persist
    - ChangeSet / ChangeType: Diff result types
    - classify_document / compare_fingerprints: Pure helpers
"""

from .detector import ChangeDetectionService
from .differ import (
    DELETED_TITLE,
    Addition,
    ChangeSet,
    ChangeStatistics,
    ChangeType,
    Deletion,
    Update,
    classify_document,
    compare_fingerprints,
    compute_changes,
    compute_statistics,
)

__all__ = [
    "DELETED_TITLE",
    "Addition",
    "ChangeDetectionService",
    "ChangeSet",
    "ChangeStatistics",
    "ChangeType",
    "Deletion",
    "Update",
    "classify_document",
    "compare_fingerprints",
    "compute_changes",
    "compute_statistics",
]
