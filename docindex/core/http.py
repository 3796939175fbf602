# docindex/core/http.py
"""
Centralized HTTP client factory for the network source adapters.

Every adapter that talks HTTP (web, wiki, git) builds its client here, so
timeouts, headers, auth and error mapping are configured in one place.

Usage:
    from docindex.core.http import create_async_api_client, raise_for_status

    async with create_async_api_client("https://wiki.example.com", api_key=token) as client:
        response = await client.get("/rest/api/content")
        raise_for_status(response, provider="wiki", endpoint="/rest/api/content")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from docindex.logging.logger import get_logger
from docindex.logging.tags import HTTP

logger = get_logger(__name__)


# =============================================================================
# Errors
# =============================================================================


@dataclass
class APIError(Exception):
    """
    Structured API error with details.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (if available)
        provider: Source kind that made the call (e.g., "wiki", "git")
        endpoint: Endpoint that failed
        details: Additional error details from the response
    """

    message: str
    status_code: Optional[int] = None
    provider: Optional[str] = None
    endpoint: Optional[str] = None
    details: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.message]

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        if self.details:
            parts.append(f"- {self.details}")

        return " ".join(parts)


class AuthenticationError(APIError):
    """Raised when the remote source rejects our credentials."""

    pass


class RateLimitError(APIError):
    """Raised when the remote source rate limits us."""

    pass


class ResourceNotFoundError(APIError):
    """Raised when the requested page, space or repository doesn't exist."""

    pass


# =============================================================================
# Default Configuration
# =============================================================================

DEFAULT_TIMEOUTS = {
    "default": 30.0,
    "health_check": 5.0,
}

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "docindex",
}


# =============================================================================
# Client Factory
# =============================================================================


def create_async_api_client(
    base_url: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    timeout_type: str = "default",
    headers: Optional[Dict[str, str]] = None,
    auth_header: str = "Authorization",
    auth_scheme: str = "Bearer",
    **kwargs: Any,
) -> httpx.AsyncClient:
    """
    Create a configured async HTTP client.

    Args:
        base_url: Base URL of the source
        api_key: Token for authentication (optional)
        timeout: Request timeout in seconds (or use timeout_type)
        timeout_type: Preset timeout type ("default", "health_check")
        headers: Additional headers to include
        auth_header: Header name for authentication
        auth_scheme: Authentication scheme prefix
        **kwargs: Passed through to httpx.AsyncClient (e.g. transport=)
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUTS.get(timeout_type, DEFAULT_TIMEOUTS["default"])

    final_headers = dict(DEFAULT_HEADERS)

    if api_key:
        final_headers[auth_header] = f"{auth_scheme} {api_key}"

    if headers:
        final_headers.update(headers)

    client = httpx.AsyncClient(
        base_url=base_url,
        headers=final_headers,
        timeout=timeout,
        follow_redirects=True,
        **kwargs,
    )

    logger.debug(f"{HTTP} Created HTTP client for {base_url} (timeout={timeout}s)")

    return client


# =============================================================================
# Error Handling
# =============================================================================


def handle_api_error(
    exc: Exception,
    provider: str = "unknown",
    endpoint: str = "",
) -> APIError:
    """Convert an httpx exception to a structured APIError."""
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        details = exc.response.text[:200] if exc.response.text else None

        if status_code in (401, 403):
            error_cls = AuthenticationError
            message = f"{provider} authentication failed"
        elif status_code == 429:
            error_cls = RateLimitError
            message = f"{provider} rate limit exceeded"
        elif status_code == 404:
            error_cls = ResourceNotFoundError
            message = f"{provider} resource not found"
        else:
            error_cls = APIError
            message = f"{provider} API request failed"

        return error_cls(
            message=message,
            status_code=status_code,
            provider=provider,
            endpoint=endpoint,
            details=details,
        )

    if isinstance(exc, httpx.ConnectError):
        return APIError(
            message=f"Failed to connect to {provider}",
            provider=provider,
            endpoint=endpoint,
            details=str(exc),
        )

    if isinstance(exc, httpx.TimeoutException):
        return APIError(
            message=f"{provider} request timed out",
            provider=provider,
            endpoint=endpoint,
            details="Consider increasing timeout_s for this source",
        )

    return APIError(
        message=f"{provider} request failed: {exc}",
        provider=provider,
        endpoint=endpoint,
    )


def raise_for_status(
    response: httpx.Response,
    provider: str = "unknown",
    endpoint: str = "",
) -> None:
    """Check response status and raise the matching APIError if it failed."""
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise handle_api_error(exc, provider=provider, endpoint=endpoint) from exc


__all__ = [
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "ResourceNotFoundError",
    "DEFAULT_TIMEOUTS",
    "create_async_api_client",
    "handle_api_error",
    "raise_for_status",
]
