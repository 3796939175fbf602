# docindex/indexing/hashing.py
"""
Document fingerprinting for incremental indexing.

Provides SHA-256 based identity for documents. This is the single source of
truth for deciding whether a document changed between two runs.

Design:
- Three independent views of a document are hashed separately:
  content (raw text), metadata (title/source/source_type/last_updated) and
  structure (type, procedures/decision tree presence, heading count)
- Metadata and structure are hashed over canonical JSON (sorted keys,
  compact separators) so key order never changes a hash
- Missing optional fields hash as empty/false, never raise
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Optional

from docindex.core.document import Document
from docindex.indexing.state.schema import DocumentFingerprint, utc_now


def compute_bytes_hash(data: bytes) -> str:
    """
    Compute SHA-256 hash of raw bytes.

    Returns:
        SHA-256 hash as hex string with "sha256:" prefix
    """
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def compute_text_hash(text: Optional[str]) -> str:
    """
    Compute SHA-256 hash of a string (UTF-8 encoded).

    None hashes like the empty string.

    Examples:
        >>> compute_text_hash("")
        'sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    return compute_bytes_hash((text or "").encode("utf-8"))


def canonical_json(obj: Any) -> str:
    """Serialize obj deterministically: sorted keys, no whitespace."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def count_sections(content: Optional[str]) -> int:
    """Count lines that start with a markdown heading marker."""
    if not content:
        return 0
    return sum(1 for line in content.splitlines() if line.startswith("#"))


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def metadata_projection(document: Document) -> dict:
    """The metadata view that feeds metadata_hash."""
    return {
        "title": document.title or "",
        "source": document.source or "",
        "source_type": document.source_type or "",
        "last_updated": document.last_updated or "",
    }


def structure_projection(document: Document) -> dict:
    """The structural view that feeds structure_hash."""
    return {
        "type": document.type,
        "has_procedures": bool(getattr(document, "procedures", None)),
        "has_decision_tree": bool(getattr(document, "decision_tree", None)),
        "section_count": count_sections(document.content),
    }


def compute_fingerprint(document: Document) -> DocumentFingerprint:
    """
    Fingerprint a document.

    The hash triple depends only on the document. last_modified comes from
    the document's last_updated value when it parses as ISO-8601, otherwise
    from the capture time.

    Args:
        document: Any Document variant

    Returns:
        DocumentFingerprint for the document
    """
    content = document.content or ""

    return DocumentFingerprint(
        id=document.id,
        content_hash=compute_text_hash(content),
        metadata_hash=compute_text_hash(canonical_json(metadata_projection(document))),
        structure_hash=compute_text_hash(canonical_json(structure_projection(document))),
        last_modified=_parse_timestamp(document.last_updated) or utc_now(),
        size_bytes=len(content.encode("utf-8")),
    )


__all__ = [
    "canonical_json",
    "compute_bytes_hash",
    "compute_fingerprint",
    "compute_text_hash",
    "count_sections",
    "metadata_projection",
    "structure_projection",
]
