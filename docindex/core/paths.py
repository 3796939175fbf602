# docindex/core/paths.py
"""
Central path management for docindex.

Every component that needs a default file location asks DocIndexPaths.
The workspace is the .docindex directory in the current working directory,
or an override set for testing.

Usage:
    from docindex.core.paths import DocIndexPaths

    state_dir = DocIndexPaths.state_dir()
    config_path = DocIndexPaths.config()

    # Override workspace for testing
    DocIndexPaths.set_workspace("/tmp/test_docindex")
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

WORKSPACE_DIRNAME = ".docindex"


class DocIndexPaths:
    """Facade for workspace-relative default paths."""

    _workspace_override: Optional[Path] = None

    @classmethod
    def set_workspace(cls, path: Optional[str | Path]) -> None:
        """
        Override the workspace root.

        Pass None to reset to default (CWD).
        """
        cls._workspace_override = None if path is None else Path(path)

    @classmethod
    def reset(cls) -> None:
        """Reset to default workspace (CWD). Useful in tests."""
        cls._workspace_override = None

    @classmethod
    def workspace(cls) -> Path:
        """The .docindex workspace directory. Default: {CWD}/.docindex/"""
        if cls._workspace_override is not None:
            return cls._workspace_override
        return Path.cwd() / WORKSPACE_DIRNAME

    @classmethod
    def config(cls) -> Path:
        """Default settings file: {workspace}/config.yaml"""
        return cls.workspace() / "config.yaml"

    @classmethod
    def state_dir(cls) -> Path:
        """Fingerprint snapshots: {workspace}/state/indexing/"""
        return cls.workspace() / "state" / "indexing"


__all__ = ["DocIndexPaths", "WORKSPACE_DIRNAME"]
