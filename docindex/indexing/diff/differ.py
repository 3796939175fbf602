# docindex/indexing/diff/differ.py
"""
Diff computation for incremental indexing.

Compares the previous fingerprint snapshot of a source with the
fingerprints of its current documents and produces a ChangeSet:

- additions: ids present now, absent previously (with a classification)
- updates:   ids present in both whose hash triple differs
- deletions: ids present previously, absent now
- unchanged: ids whose hash triple is identical

Every id seen on either side lands in exactly one of those four buckets.

This module ONLY computes changes - it does NOT load or persist snapshots.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from docindex.core.document import Document, DocumentType
from docindex.indexing.state.schema import DocumentFingerprint, utc_now

DELETED_TITLE = "Deleted Document"


class ChangeType(str, Enum):
    """Which part of a document changed."""

    CONTENT = "content"
    METADATA = "metadata"
    STRUCTURE = "structure"
    ALL = "all"


class Addition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    fingerprint: DocumentFingerprint
    classification: DocumentType


class Update(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    old_fingerprint: DocumentFingerprint
    new_fingerprint: DocumentFingerprint
    change_type: ChangeType


class Deletion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    last_fingerprint: DocumentFingerprint
    deletion_detected: datetime


class ChangeStatistics(BaseModel):
    """Counts per change category."""

    model_config = ConfigDict(frozen=True)

    total_changes: int = 0
    additions_count: int = 0
    updates_count: int = 0
    deletions_count: int = 0
    content_changes: int = 0
    metadata_changes: int = 0
    structure_changes: int = 0


class ChangeSet(BaseModel):
    """
    Result of diffing two fingerprint snapshots for one source.

    statistics.total_changes always equals
    len(additions) + len(updates) + len(deletions).
    """

    model_config = ConfigDict(frozen=True)

    source: str
    timestamp: datetime = Field(default_factory=utc_now)
    additions: List[Addition] = Field(default_factory=list)
    updates: List[Update] = Field(default_factory=list)
    deletions: List[Deletion] = Field(default_factory=list)
    unchanged: List[str] = Field(default_factory=list, description="Ids with identical fingerprints")
    statistics: ChangeStatistics = Field(default_factory=ChangeStatistics)

    @property
    def changed_ids(self) -> List[str]:
        """Ids that need processing (additions then updates)."""
        return [a.id for a in self.additions] + [u.id for u in self.updates]

    @property
    def has_changes(self) -> bool:
        return self.statistics.total_changes > 0

    @property
    def summary(self) -> str:
        """Get a summary string."""
        return (
            f"added={len(self.additions)}, "
            f"updated={len(self.updates)}, "
            f"deleted={len(self.deletions)}, "
            f"unchanged={len(self.unchanged)}"
        )


def classify_document(document: Document) -> DocumentType:
    """
    Coarse classification label for an added document.

    Checks run in a fixed priority order; the first match wins.
    """
    title = (document.title or "").lower()
    content = document.content or ""

    if document.type == DocumentType.RUNBOOK.value:
        return DocumentType.RUNBOOK
    if "escalation" in content:
        return DocumentType.ESCALATION_GUIDE
    if "troubleshoot" in title:
        return DocumentType.TROUBLESHOOTING
    if document.type == DocumentType.PROCEDURE.value and "escalation" in title:
        return DocumentType.DOCUMENTATION
    if document.type == DocumentType.PROCEDURE.value:
        return DocumentType.PROCEDURE
    return DocumentType.DOCUMENTATION


def compare_fingerprints(
    old: DocumentFingerprint, new: DocumentFingerprint
) -> Optional[ChangeType]:
    """
    Classify the difference between two fingerprints of the same document.

    Returns:
        None if all three hashes match, the single differing view if exactly
        one differs, ChangeType.ALL if two or three differ
    """
    differing = [
        change_type
        for change_type, before, after in (
            (ChangeType.CONTENT, old.content_hash, new.content_hash),
            (ChangeType.METADATA, old.metadata_hash, new.metadata_hash),
            (ChangeType.STRUCTURE, old.structure_hash, new.structure_hash),
        )
        if before != after
    ]

    if not differing:
        return None
    if len(differing) == 1:
        return differing[0]
    return ChangeType.ALL


def compute_statistics(
    additions: List[Addition], updates: List[Update], deletions: List[Deletion]
) -> ChangeStatistics:
    """Count changes; an ALL update counts toward every view."""
    kinds = [u.change_type for u in updates]
    return ChangeStatistics(
        total_changes=len(additions) + len(updates) + len(deletions),
        additions_count=len(additions),
        updates_count=len(updates),
        deletions_count=len(deletions),
        content_changes=sum(1 for k in kinds if k in (ChangeType.CONTENT, ChangeType.ALL)),
        metadata_changes=sum(1 for k in kinds if k in (ChangeType.METADATA, ChangeType.ALL)),
        structure_changes=sum(1 for k in kinds if k in (ChangeType.STRUCTURE, ChangeType.ALL)),
    )


def compute_changes(
    source: str,
    previous: Mapping[str, DocumentFingerprint],
    current: Mapping[str, DocumentFingerprint],
    documents: Mapping[str, Document],
) -> ChangeSet:
    """
    Diff two fingerprint maps.

    Args:
        source: Source name
        previous: Fingerprints from the last snapshot, keyed by id
        current: Fingerprints of the current documents, keyed by id
        documents: Current documents, keyed by id (for titles/classification)

    Returns:
        ChangeSet with statistics
    """
    now = utc_now()

    additions: List[Addition] = []
    updates: List[Update] = []
    unchanged: List[str] = []

    for doc_id, fingerprint in current.items():
        document = documents[doc_id]
        old = previous.get(doc_id)

        if old is None:
            additions.append(
                Addition(
                    id=doc_id,
                    title=document.title,
                    fingerprint=fingerprint,
                    classification=classify_document(document),
                )
            )
            continue

        change_type = compare_fingerprints(old, fingerprint)
        if change_type is None:
            unchanged.append(doc_id)
        else:
            updates.append(
                Update(
                    id=doc_id,
                    title=document.title,
                    old_fingerprint=old,
                    new_fingerprint=fingerprint,
                    change_type=change_type,
                )
            )

    deletions = [
        Deletion(
            id=doc_id,
            title=DELETED_TITLE,
            last_fingerprint=old,
            deletion_detected=now,
        )
        for doc_id, old in previous.items()
        if doc_id not in current
    ]

    return ChangeSet(
        source=source,
        timestamp=now,
        additions=additions,
        updates=updates,
        deletions=deletions,
        unchanged=unchanged,
        statistics=compute_statistics(additions, updates, deletions),
    )


__all__ = [
    "Addition",
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
