# docindex/sources/plugins/filesystem.py
"""
Local filesystem source adapter.

Walks a directory for documentation files (.md, .markdown, .txt, .rst by
default) with automatic encoding detection. An optional YAML front matter
block at the top of a file supplies document fields:

    ---
    title: Restart the ingest workers
    type: runbook
    procedures: [drain, restart, verify]
    confidence_score: 0.9
    ---
    # Restart the ingest workers
    ...

Document id is the POSIX path relative to the source root, so ids stay
stable when the checkout moves.
"""

from __future__ import annotations

import asyncio
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from docindex.core.document import Document, parse_document
from docindex.logging.logger import get_logger
from docindex.logging.tags import SOURCE
from docindex.sources.base import SourceAdapter, SourceConfig

logger = get_logger(__name__)

DEFAULT_EXTENSIONS = (".md", ".markdown", ".txt", ".rst")

# Front matter keys that map onto Document fields
DOCUMENT_FIELDS = (
    "title",
    "type",
    "procedures",
    "decision_tree",
    "confidence_score",
    "last_updated",
    "url",
)


# =============================================================================
# Text File Reading
# =============================================================================


def read_text_with_encoding_detection(path: Path) -> str:
    """
    Read text file with automatic encoding detection.

    Handles:
    - UTF-8 (default), with or without BOM
    - UTF-16 LE/BE with BOM
    - Latin-1 fallback
    """
    raw_bytes = path.read_bytes()

    if raw_bytes.startswith(b"\xff\xfe"):
        return raw_bytes[2:].decode("utf-16-le")
    if raw_bytes.startswith(b"\xfe\xff"):
        return raw_bytes[2:].decode("utf-16-be")
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        return raw_bytes[3:].decode("utf-8", errors="replace")

    try:
        return raw_bytes.decode("utf-8")
    except UnicodeDecodeError:
        pass

    # latin-1 never fails
    return raw_bytes.decode("latin-1")


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a leading '---' YAML block from the body.

    Returns ({}, text) when there is no front matter or it isn't a mapping.
    """
    if not text.startswith("---"):
        return {}, text

    lines = text.splitlines(keepends=True)
    if lines[0].strip() != "---":
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() in ("---", "..."):
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            try:
                data = yaml.safe_load(header) or {}
            except yaml.YAMLError as e:
                logger.warning(f"{SOURCE} Ignoring invalid front matter: {e}")
                return {}, text
            if not isinstance(data, dict):
                return {}, text
            return data, body

    return {}, text


def first_heading(body: str) -> Optional[str]:
    for line in body.splitlines():
        if line.startswith("#"):
            title = line.lstrip("#").strip()
            if title:
                return title
    return None


# =============================================================================
# Adapter
# =============================================================================


class FileSystemAdapter(SourceAdapter):
    """
    Reads documentation files below a root directory.

    Config:
        path (or base_url): Root directory
        metadata.extensions: Optional list of extensions to include
    """

    source_type = "file"

    def __init__(self, config: SourceConfig, **kwargs: Any) -> None:
        super().__init__(config, **kwargs)
        root = config.path or config.base_url
        self.root = Path(root).expanduser() if root else None

        extensions = config.metadata.get("extensions") or DEFAULT_EXTENSIONS
        self.extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions
        )

    def _require_root(self) -> Path:
        if self.root is None:
            raise ValueError(f"Source {self.name!r} has no path configured")
        if not self.root.is_dir():
            raise FileNotFoundError(f"Source directory not found: {self.root}")
        return self.root

    async def initialize(self) -> None:
        self._require_root()
        await super().initialize()
        logger.debug(f"{SOURCE} {self.name}: watching {self.root} for {self.extensions}")

    async def _check_connection(self) -> Dict[str, Any]:
        root = self._require_root()
        if not os.access(root, os.R_OK | os.X_OK):
            raise PermissionError(f"Source directory not readable: {root}")
        return {"root": str(root)}

    async def fetch_documents(self) -> List[Document]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> List[Document]:
        root = self._require_root()
        documents: List[Document] = []

        for path in sorted(root.rglob("*")):
            if not path.is_file() or path.suffix.lower() not in self.extensions:
                continue

            try:
                document = self._load(root, path)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.warning(f"{SOURCE} Skipping {path}: {type(e).__name__}: {e}")
                continue

            documents.append(document)

        logger.debug(f"{SOURCE} {self.name}: found {len(documents)} document(s) under {root}")
        return documents

    def _load(self, root: Path, path: Path) -> Document:
        text = read_text_with_encoding_detection(path)
        front, body = split_front_matter(text)

        mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        categories = front.get("categories") or self.config.categories

        data: Dict[str, Any] = {
            "id": path.relative_to(root).as_posix(),
            "title": first_heading(body) or path.stem,
            "content": body,
            "last_updated": mtime.isoformat(),
            "url": path.resolve().as_uri(),
            "source": self.name,
            "source_type": self.source_type,
        }
        data.update({k: front[k] for k in DOCUMENT_FIELDS if front.get(k) is not None})
        data["metadata"] = {
            **{k: v for k, v in front.items() if k not in DOCUMENT_FIELDS},
            "file_extension": path.suffix.lower(),
            "categories": list(categories),
        }

        return parse_document(data)


__all__ = [
    "FileSystemAdapter",
    "read_text_with_encoding_detection",
    "split_front_matter",
]
