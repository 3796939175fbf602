# docindex/indexing/state/manager.py
"""
Snapshot store for incremental indexing.

Manages reading and writing of {state_dir}/{safe_name}-{hash}.json.

Key responsibilities:
- Load a source's previous fingerprint snapshot
- Atomically overwrite it with the current fingerprints
- List and clear snapshots (CLI state commands)

Key non-responsibilities:
- NO diffing logic (that's the change detection service's job)
- NO locking across processes (last write wins)

All methods are blocking; async callers run them in a worker thread.
"""

from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from docindex.core.paths import DocIndexPaths
from docindex.indexing.errors import SnapshotStoreError
from docindex.logging.logger import get_logger
from docindex.logging.tags import STATE

from .schema import DocumentFingerprint, FingerprintSnapshot

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

SNAPSHOT_NAME_HASH_LENGTH = 12


def safe_source_name(source: str) -> str:
    """Replace characters that are unsafe in file names with '_'."""
    return _UNSAFE_CHARS.sub("_", source) or "_"


def snapshot_filename(source: str) -> str:
    """
    File name of a source's snapshot.

    The readable safe name is suffixed with a short hash of the raw name so
    that names like "ops/wiki" and "ops_wiki" never share a file.
    """
    digest = hashlib.sha256(source.encode("utf-8")).hexdigest()[:SNAPSHOT_NAME_HASH_LENGTH]
    return f"{safe_source_name(source)}-{digest}.json"


class SnapshotStore:
    """
    Manages per-source fingerprint snapshot files.

    Usage:
        store = SnapshotStore(Path(".docindex/state/indexing"))
        previous = store.load("handbook")          # None on first run
        store.save("handbook", current_fingerprints)
    """

    def __init__(self, state_dir: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the snapshot store.

        Args:
            state_dir: Directory holding snapshot files. If None, uses
                DocIndexPaths.state_dir()
        """
        self._state_dir = Path(state_dir) if state_dir is not None else DocIndexPaths.state_dir()

    @property
    def state_dir(self) -> Path:
        """Get the snapshot directory."""
        return self._state_dir

    def path_for(self, source: str) -> Path:
        """Get the snapshot file path for a source."""
        return self._state_dir / snapshot_filename(source)

    def ensure_dir(self) -> None:
        """Create the state directory if needed (idempotent)."""
        try:
            self._state_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SnapshotStoreError(
                f"Cannot create state directory: {e}", path=str(self._state_dir)
            ) from e

    def _read(self, path: Path) -> Optional[FingerprintSnapshot]:
        """Parse one snapshot file. Corrupt content yields None."""
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return FingerprintSnapshot.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"{STATE} Corrupt snapshot at {path}, starting fresh: {e}")
            return None
        except OSError as e:
            raise SnapshotStoreError(f"Cannot read snapshot: {e}", path=str(path)) from e

    def load(self, source: str) -> Optional[FingerprintSnapshot]:
        """
        Load the previous snapshot for a source.

        Returns:
            The snapshot, or None when it is missing or corrupt (fresh baseline)

        Raises:
            SnapshotStoreError: If the file exists but cannot be read
        """
        path = self.path_for(source)

        if not path.exists():
            logger.info(f"{STATE} No snapshot for {source!r} at {path}, starting fresh")
            return None

        snapshot = self._read(path)
        if snapshot is None:
            return None

        if snapshot.source != source:
            logger.warning(
                f"{STATE} Snapshot at {path} belongs to {snapshot.source!r}, "
                f"not {source!r}; starting fresh"
            )
            return None

        logger.debug(
            f"{STATE} Loaded snapshot for {source!r} ({snapshot.document_count} documents)"
        )
        return snapshot

    def save(self, source: str, fingerprints: Dict[str, DocumentFingerprint]) -> FingerprintSnapshot:
        """
        Overwrite the snapshot for a source.

        Writes atomically via a temp file and replace().

        Raises:
            SnapshotStoreError: If the directory or file cannot be written
        """
        self.ensure_dir()

        snapshot = FingerprintSnapshot.create(source, fingerprints)
        path = self.path_for(source)
        temp_path = path.with_suffix(".tmp")

        try:
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(snapshot.model_dump(mode="json"), f, indent=2)
            temp_path.replace(path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise SnapshotStoreError(f"Cannot write snapshot for {source!r}: {e}", path=str(path)) from e

        logger.debug(f"{STATE} Saved snapshot for {source!r} to {path}")
        return snapshot

    def list_snapshots(self) -> List[FingerprintSnapshot]:
        """Load every readable snapshot in the state directory, sorted by source."""
        if not self._state_dir.is_dir():
            return []

        snapshots = []
        for path in sorted(self._state_dir.glob("*.json")):
            snapshot = self._read(path)
            if snapshot is not None:
                snapshots.append(snapshot)
        return sorted(snapshots, key=lambda s: s.source)

    def clear(self, source: Optional[str] = None) -> int:
        """
        Delete snapshots.

        Args:
            source: Only delete this source's snapshot. None deletes all.

        Returns:
            Number of files removed
        """
        if source is not None:
            paths = [self.path_for(source)]
        elif self._state_dir.is_dir():
            paths = list(self._state_dir.glob("*.json"))
        else:
            paths = []

        removed = 0
        for path in paths:
            if path.exists():
                try:
                    path.unlink()
                except OSError as e:
                    raise SnapshotStoreError(f"Cannot delete snapshot: {e}", path=str(path)) from e
                removed += 1

        logger.info(f"{STATE} Cleared {removed} snapshot(s) from {self._state_dir}")
        return removed


__all__ = [
    "SnapshotStore",
    "safe_source_name",
    "snapshot_filename",
]
