# docindex/indexing/diff/detector.py
"""
Change detection service.

Ties the snapshot store and the differ together for one source:

1. Ensure the state directory exists
2. Load the previous snapshot (missing/corrupt => empty)
3. Fingerprint the current documents
4. Diff previous vs current
5. Overwrite the snapshot with the current fingerprints (unchanged
   documents keep their previous entry)
6. Return the ChangeSet

Snapshot I/O runs in a worker thread. Detect-and-persist for one source is
serialized by an in-process lock; separate processes are not coordinated.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from docindex.core.document import Document
from docindex.indexing.hashing import compute_fingerprint
from docindex.indexing.state import DocumentFingerprint, SnapshotStore
from docindex.logging.logger import get_logger
from docindex.logging.tags import CHANGES

from .differ import ChangeSet, compute_changes

logger = get_logger(__name__)


class ChangeDetectionService:
    """
    Detects additions, updates and deletions between indexing runs.

    Usage:
        service = ChangeDetectionService(".docindex/state/indexing")
        changes = await service.detect_changes("handbook", documents)
        print(changes.summary)
    """

    def __init__(
        self,
        state_dir: Optional[Union[str, Path]] = None,
        store: Optional[SnapshotStore] = None,
    ) -> None:
        self._store = store if store is not None else SnapshotStore(state_dir)
        self._locks: Dict[str, asyncio.Lock] = {}

    @property
    def store(self) -> SnapshotStore:
        return self._store

    def _lock_for(self, source: str) -> asyncio.Lock:
        lock = self._locks.get(source)
        if lock is None:
            lock = self._locks[source] = asyncio.Lock()
        return lock

    async def detect_changes(
        self,
        source: str,
        current_documents: Sequence[Document],
        *,
        persist: bool = True,
    ) -> ChangeSet:
        """
        Diff the current documents of a source against its last snapshot.

        Args:
            source: Source name
            current_documents: Full current document set of the source
            persist: Overwrite the snapshot afterwards (False for dry runs)

        Returns:
            ChangeSet with statistics

        Raises:
            SnapshotStoreError: If the state directory or snapshot cannot be
                created, read or written
        """
        async with self._lock_for(source):
            await asyncio.to_thread(self._store.ensure_dir)

            snapshot = await asyncio.to_thread(self._store.load, source)
            previous = snapshot.fingerprints if snapshot is not None else {}

            current: Dict[str, DocumentFingerprint] = {}
            documents: Dict[str, Document] = {}
            for document in current_documents:
                if document.id in current:
                    logger.warning(
                        f"{CHANGES} Duplicate document id {document.id!r} in {source!r}, "
                        f"keeping the last one"
                    )
                current[document.id] = compute_fingerprint(document)
                documents[document.id] = document

            changes = compute_changes(source, previous, current, documents)

            # unchanged documents keep their previous fingerprint so last_modified
            # does not drift between runs that see the same content
            unchanged = set(changes.unchanged)
            persisted = {
                doc_id: previous[doc_id] if doc_id in unchanged else fingerprint
                for doc_id, fingerprint in current.items()
            }

            if persist:
                await asyncio.to_thread(self._store.save, source, persisted)
            else:
                logger.debug(f"{CHANGES} Not persisting snapshot for {source!r}")

        logger.info(f"{CHANGES} {source}: {changes.summary}")
        return changes


__all__ = ["ChangeDetectionService"]
