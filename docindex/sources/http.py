# docindex/sources/http.py
"""
Shared base for adapters that talk HTTP (web, wiki, git).

Owns the httpx.AsyncClient for the adapter's lifetime: created in
initialize(), closed in cleanup(). Tests inject an httpx.MockTransport via
the transport keyword.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

import httpx
from bs4 import BeautifulSoup

from docindex.core.http import create_async_api_client, handle_api_error, raise_for_status
from docindex.logging.logger import get_logger
from docindex.logging.tags import SOURCE
from docindex.sources.base import SourceAdapter, SourceConfig

logger = get_logger(__name__)

_DROPPED_TAGS = ["script", "style", "title"]
_BLOCK_TAGS = ["p", "div", "br", "li", "tr", "h1", "h2", "h3", "h4", "h5", "h6", "pre", "table", "ul", "ol"]
_SPACES = re.compile(r"\s+")


def html_to_text(markup: str) -> str:
    """Visible text of an HTML page, one line per block element."""
    soup = BeautifulSoup(markup or "", "html.parser")
    for tag in soup(_DROPPED_TAGS):
        tag.decompose()
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    lines = (_SPACES.sub(" ", line).strip() for line in soup.get_text().split("\n"))
    return "\n".join(line for line in lines if line)


def html_title(markup: str) -> Optional[str]:
    title_tag = BeautifulSoup(markup or "", "html.parser").find("title")
    if title_tag is None:
        return None
    return _SPACES.sub(" ", title_tag.get_text()).strip() or None


class HttpSourceAdapter(SourceAdapter):
    """
    Base class for HTTP backed adapters.

    Subclasses use self.get_json() / self.get_text() inside fetch_documents().
    """

    def __init__(
        self,
        config: SourceConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        if not self.config.base_url:
            raise ValueError(f"Source {self.name!r} has no base_url configured")
        return self.config.base_url.rstrip("/")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(f"Source {self.name!r} is not initialized")
        return self._client

    def _client_headers(self) -> Dict[str, str]:
        return {}

    async def initialize(self) -> None:
        auth = self.config.auth
        kwargs: Dict[str, Any] = {}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        if auth is not None:
            kwargs["auth_header"] = auth.header
            kwargs["auth_scheme"] = auth.scheme

        self._client = create_async_api_client(
            self.base_url,
            api_key=self.resolve_token(),
            timeout=self.config.timeout_s,
            headers=self._client_headers(),
            **kwargs,
        )
        await super().initialize()

    async def _request(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            raise handle_api_error(e, provider=self.source_type, endpoint=path) from e
        raise_for_status(response, provider=self.source_type, endpoint=path)
        return response

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return (await self._request(path, params)).json()

    async def get_text(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        return (await self._request(path, params)).text

    async def cleanup(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug(f"{SOURCE} {self.name}: closed HTTP client")
        await super().cleanup()


__all__ = [
    "HttpSourceAdapter",
    "html_title",
    "html_to_text",
]
