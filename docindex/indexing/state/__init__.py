# docindex/indexing/state/__init__.py
"""
Per-source fingerprint snapshots.

Public API:
    - DocumentFingerprint: Identity of one document at one point in time
    - FingerprintSnapshot: Persisted per-source snapshot
    - SnapshotStore: Load/save/clear snapshot files
"""

from .manager import SnapshotStore, safe_source_name, snapshot_filename
from .schema import DocumentFingerprint, FingerprintSnapshot, utc_now

__all__ = [
    "DocumentFingerprint",
    "FingerprintSnapshot",
    "SnapshotStore",
    "safe_source_name",
    "snapshot_filename",
    "utc_now",
]
