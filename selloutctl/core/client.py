"""Async HTTP client for the sellout REST API.

Provides retry logic for idempotent reads and HTTP status classification
shared by every endpoint.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from selloutctl.core.exceptions import (
    EndpointNotFoundError,
    HTTPStatusError,
    InvalidPayloadError,
    MalformedResponseError,
    NetworkError,
    RetryExhaustedError,
    ServerError,
    ServerUnreachableError,
    TransportError,
)
from selloutctl.core.timeouts import DEFAULT_HTTP_TIMEOUT_SECONDS
from selloutctl.core.validation import validate_server_url

# =============================================================================
# Constants
# =============================================================================

DEFAULT_TIMEOUT = DEFAULT_HTTP_TIMEOUT_SECONDS
DEFAULT_MAX_RETRIES = 3
RETRY_BACKOFF_BASE = 2
RETRYABLE_STATUS_CODES = {502, 503, 504}


# =============================================================================
# Response Classification
# =============================================================================


def is_json_response(resp: httpx.Response) -> bool:
    """Check if the response declares a JSON body."""
    return "application/json" in resp.headers.get("content-type", "").lower()


def extract_error_detail(resp: httpx.Response) -> str:
    """Pull a human readable detail out of an error response.

    The backend answers ``{"ok": false, "error": "..."}`` or plain text.
    """
    try:
        if is_json_response(resp):
            data = resp.json()
            if isinstance(data, dict):
                detail = data.get("error") or data.get("message")
                if detail:
                    return str(detail)
            return json.dumps(data, ensure_ascii=False)
        return resp.text.strip()
    except (ValueError, UnicodeDecodeError):
        return ""


def raise_for_status(resp: httpx.Response) -> None:
    """Raise the domain error matching a non-success response.

    Raises:
        EndpointNotFoundError: HTTP 404.
        InvalidPayloadError: HTTP 422.
        ServerError: HTTP 5xx.
        HTTPStatusError: Any other non-2xx status.
    """
    if resp.is_success:
        return

    status = resp.status_code
    detail = extract_error_detail(resp)
    url = str(resp.request.url)

    if status == 404:
        raise EndpointNotFoundError(status, detail, url)
    if status == 422:
        raise InvalidPayloadError(status, detail, url)
    if status >= 500:
        raise ServerError(status, detail, url)
    raise HTTPStatusError(status, detail, url)


def parse_json_body(resp: httpx.Response) -> Any:
    """Decode a 2xx JSON body.

    Raises:
        MalformedResponseError: If the body is not valid JSON.
    """
    try:
        return resp.json()
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"invalid JSON body ({e})", str(resp.request.url)) from e


# =============================================================================
# SelloutClient
# =============================================================================


@dataclass
class SelloutClient:
    """Async HTTP client for the sellout backend with retries for reads."""

    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    _client: httpx.AsyncClient | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate and normalize URL."""
        self.base_url = validate_server_url(self.base_url)

    # =========================================================================
    # Client Management
    # =========================================================================

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                verify=self.verify_ssl,
                follow_redirects=True,
                transport=self.transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SelloutClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Execute HTTP request with retry logic.

        Args:
            method: HTTP method.
            path: API path relative to the base URL.
            params: Query parameters.
            json: JSON body.
            headers: Additional headers.
            timeout: Request timeout override.

        Returns:
            HTTP response.

        Raises:
            HTTPStatusError: For non-retryable error statuses.
            RetryExhaustedError: If all retries fail.
        """
        client = self._get_client()
        request_timeout = timeout or self.timeout
        last_error: TransportError | None = None

        for attempt in range(self.max_retries + 1):
            try:
                resp = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=headers,
                    timeout=request_timeout,
                )
            except httpx.ConnectError:
                last_error = ServerUnreachableError(self.base_url)
            except httpx.TimeoutException:
                last_error = NetworkError(self.base_url, f"Timeout after {request_timeout}s")
            except httpx.TransportError as e:
                last_error = NetworkError(self.base_url, str(e))
            else:
                if resp.status_code not in RETRYABLE_STATUS_CODES:
                    raise_for_status(resp)
                    return resp
                try:
                    raise_for_status(resp)
                except ServerError as e:
                    last_error = e

            # Retry with backoff
            if attempt < self.max_retries:
                await asyncio.sleep(RETRY_BACKOFF_BASE ** (attempt + 1))

        raise RetryExhaustedError(f"{method} {path}", self.max_retries + 1, last_error)

    async def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """GET request."""
        return await self._request(
            "GET",
            path,
            params=params,
            headers=headers,
            timeout=timeout,
        )

    async def get_json(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """GET request returning JSON."""
        resp = await self.get(
            path,
            params=params,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
        return parse_json_body(resp)
