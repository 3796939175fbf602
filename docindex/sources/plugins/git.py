# docindex/sources/plugins/git.py
"""
Git host source adapter (GitHub-style REST API).

    - name: platform-docs
      type: git
      base_url: https://api.github.com
      auth: {token_env: GITHUB_TOKEN}
      metadata:
        owner: acme
        repo: platform
        ref: main
        path: docs/

The repository tree is listed once with
GET /repos/{owner}/{repo}/git/trees/{ref}?recursive=1; every documentation
blob below the optional path prefix is then read through
GET /repos/{owner}/{repo}/contents/{path}. Files may carry YAML front matter
like local files do.
"""

from __future__ import annotations

import base64
from typing import Any, Dict, List

from docindex.core.document import Document, parse_document
from docindex.logging.logger import get_logger
from docindex.logging.tags import SOURCE
from docindex.sources.http import HttpSourceAdapter
from docindex.sources.plugins.filesystem import (
    DEFAULT_EXTENSIONS,
    DOCUMENT_FIELDS,
    first_heading,
    split_front_matter,
)

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitAdapter(HttpSourceAdapter):
    """Indexes documentation files of one repository ref."""

    source_type = "git"

    @property
    def base_url(self) -> str:
        return (self.config.base_url or DEFAULT_API_URL).rstrip("/")

    @property
    def repo_path(self) -> str:
        meta = self.config.metadata
        return f"/repos/{meta.get('owner')}/{meta.get('repo')}"

    @property
    def ref(self) -> str:
        return str(self.config.metadata.get("ref") or "main")

    @property
    def prefix(self) -> str:
        return str(self.config.metadata.get("path") or "").lstrip("/")

    def _client_headers(self) -> Dict[str, str]:
        return {"Accept": "application/vnd.github+json"}

    async def initialize(self) -> None:
        meta = self.config.metadata
        if not meta.get("owner") or not meta.get("repo"):
            raise ValueError(f"Source {self.name!r}: metadata.owner and metadata.repo are required")
        await super().initialize()

    async def _check_connection(self) -> Dict[str, Any]:
        info = await self.get_json(self.repo_path)
        return {"repository": info.get("full_name", self.repo_path), "ref": self.ref}

    async def fetch_documents(self) -> List[Document]:
        tree = await self.get_json(
            f"{self.repo_path}/git/trees/{self.ref}", {"recursive": "1"}
        )
        if tree.get("truncated"):
            logger.warning(f"{SOURCE} {self.name}: repository tree was truncated by the API")

        paths = sorted(
            entry["path"]
            for entry in tree.get("tree") or []
            if entry.get("type") == "blob"
            and entry["path"].startswith(self.prefix)
            and entry["path"].lower().endswith(DEFAULT_EXTENSIONS)
        )

        documents = []
        for path in paths:
            item = await self.get_json(f"{self.repo_path}/contents/{path}", {"ref": self.ref})
            documents.append(self._to_document(path, item))

        logger.debug(f"{SOURCE} {self.name}: fetched {len(documents)} file(s) at {self.ref}")
        return documents

    def _to_document(self, path: str, item: Dict[str, Any]) -> Document:
        raw = item.get("content") or ""
        if item.get("encoding") == "base64":
            text = base64.b64decode(raw).decode("utf-8", errors="replace")
        else:
            text = raw

        front, body = split_front_matter(text)
        stem = path.rsplit("/", 1)[-1].rsplit(".", 1)[0]

        data: Dict[str, Any] = {
            "id": path,
            "title": first_heading(body) or stem,
            "content": body,
            "url": item.get("html_url"),
            "source": self.name,
            "source_type": self.source_type,
        }
        data.update({k: front[k] for k in DOCUMENT_FIELDS if front.get(k) is not None})
        data["metadata"] = {
            **{k: v for k, v in front.items() if k not in DOCUMENT_FIELDS},
            "sha": item.get("sha"),
            "ref": self.ref,
            "categories": list(front.get("categories") or self.config.categories),
        }

        return parse_document(data)


__all__ = ["GitAdapter"]
