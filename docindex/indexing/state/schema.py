# docindex/indexing/state/schema.py
"""
State schema for incremental indexing.

Defines the Pydantic models for the per-source fingerprint snapshot,
stored as {state_dir}/{source}.json.

Key concepts:
- One snapshot per source, fully overwritten on every run
- Snapshots exist to detect changes between runs, nothing else
- The fingerprint map is keyed by document id
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


class DocumentFingerprint(BaseModel):
    """
    Identity snapshot of one document at one point in time.

    The hash triple is a pure function of the document; last_modified
    falls back to capture time when the document has no usable timestamp.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., description="Document id (unique within a source)")
    content_hash: str = Field(..., description="SHA-256 of raw content (sha256:...)")
    metadata_hash: str = Field(..., description="SHA-256 of title/source/source_type/last_updated")
    structure_hash: str = Field(..., description="SHA-256 of type/procedures/decision tree/sections")
    last_modified: datetime = Field(..., description="Document timestamp or capture time")
    size_bytes: int = Field(..., ge=0, description="UTF-8 length of content")

    def hashes(self) -> tuple:
        """The (content, metadata, structure) hash triple."""
        return (self.content_hash, self.metadata_hash, self.structure_hash)


class FingerprintSnapshot(BaseModel):
    """
    Root model of a persisted source snapshot.

    {source, last_updated, document_count, fingerprints: {id: DocumentFingerprint}}
    """

    model_config = ConfigDict(extra="forbid")

    source: str = Field(..., description="Source name")
    last_updated: datetime = Field(default_factory=utc_now, description="Write time")
    document_count: int = Field(default=0, ge=0)
    fingerprints: Dict[str, DocumentFingerprint] = Field(default_factory=dict)

    @classmethod
    def create(cls, source: str, fingerprints: Dict[str, DocumentFingerprint]) -> "FingerprintSnapshot":
        """Build a snapshot stamped with the current time."""
        return cls(
            source=source,
            last_updated=utc_now(),
            document_count=len(fingerprints),
            fingerprints=dict(fingerprints),
        )


__all__ = [
    "DocumentFingerprint",
    "FingerprintSnapshot",
    "utc_now",
]
