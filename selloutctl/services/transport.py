"""Cancellable upload transport for the sellout import endpoint.

One multipart POST per call, no retries. Cancellation through a ``CancelToken``
aborts the in-flight request and surfaces as ``UploadCancelledError``; every
other failure surfaces as a ``TransportError`` subclass.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any
from urllib.parse import unquote

import httpx

from selloutctl.core.cancellation import CancelToken
from selloutctl.core.client import SelloutClient, parse_json_body, raise_for_status
from selloutctl.core.exceptions import (
    MalformedResponseError,
    NetworkError,
    PathValidationError,
    ServerUnreachableError,
    UploadCancelledError,
    UploadTimeoutError,
)
from selloutctl.core.logging import LogContext
from selloutctl.core.timeouts import DEFAULT_UPLOAD_TIMEOUT_SECONDS
from selloutctl.models.upload import DiagnosticArtifact, FileDescriptor

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

UPLOAD_PATH = "/subir-archivo-venta"
FILE_FIELD = "file"
COD_CLIENTE_FIELD = "codCliente"
DIAGNOSTIC_FLAG = "txt"

SPREADSHEET_CONTENT_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}
DEFAULT_DIAGNOSTIC_TEXT_NAME = "incidencias_RM.txt"
DEFAULT_DIAGNOSTIC_BINARY_NAME = "incidencias_RM.bin"

_EXTENDED_FILENAME = re.compile(r"filename\*\s*=\s*UTF-8''([^;\n]+)", re.IGNORECASE)
_PLAIN_FILENAME = re.compile(r"filename\s*=\s*\"?([^\";\n]+)\"?", re.IGNORECASE)


def parse_content_disposition(header: str | None) -> str | None:
    """Extract the suggested filename from a Content-Disposition header.

    ``filename*=UTF-8''...`` wins over ``filename=...``; both are percent-decoded.
    """
    if not header:
        return None
    match = _EXTENDED_FILENAME.search(header) or _PLAIN_FILENAME.search(header)
    if match is None:
        return None
    name = unquote(match.group(1).strip())
    return name or None


class AbortableTransport:
    """Sends a spreadsheet to the import endpoint and honours cancellation."""

    def __init__(
        self,
        client: SelloutClient,
        *,
        path: str = UPLOAD_PATH,
        cod_cliente: str | None = None,
        deadline: float = DEFAULT_UPLOAD_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Client bound to the backend base URL.
            path: Upload endpoint path.
            cod_cliente: Optional client code routed with every upload.
            deadline: Upper bound in seconds for one upload to settle.
        """
        self.client = client
        self.path = path
        self.cod_cliente = cod_cliente
        self.deadline = deadline

    @property
    def url(self) -> str:
        """Full upload endpoint URL."""
        return f"{self.client.base_url}{self.path}"

    async def send(self, file: FileDescriptor, cancel_token: CancelToken) -> dict[str, Any]:
        """Upload a file and return the backend's JSON report.

        Raises:
            UploadCancelledError: If the token was cancelled before settle.
            TransportError: On network failure, non-2xx status, deadline or
                a body that is not a JSON object.
            PathValidationError: If the file can no longer be read.
        """
        resp = await self._post(file, cancel_token, headers={"Accept": "application/json"})
        payload = parse_json_body(resp)
        if not isinstance(payload, dict):
            raise MalformedResponseError(
                f"expected a JSON object, got {type(payload).__name__}", self.url
            )
        return payload

    async def download_diagnostic(
        self,
        file: FileDescriptor,
        cancel_token: CancelToken | None = None,
    ) -> DiagnosticArtifact:
        """Upload a file with the diagnostic flag and return the incident report."""
        token = cancel_token or CancelToken()
        with LogContext("diagnostic download", logger, file=file.name):
            resp = await self._post(file, token, params={DIAGNOSTIC_FLAG: "true"})

        content_type = resp.headers.get("content-type", "")
        filename = parse_content_disposition(resp.headers.get("content-disposition"))
        if not filename:
            filename = (
                DEFAULT_DIAGNOSTIC_TEXT_NAME
                if "text/plain" in content_type
                else DEFAULT_DIAGNOSTIC_BINARY_NAME
            )
        return DiagnosticArtifact(content=resp.content, filename=filename, content_type=content_type)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _post(
        self,
        file: FileDescriptor,
        cancel_token: CancelToken,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Race the request against the cancel token and the deadline."""
        if cancel_token.cancelled:
            raise UploadCancelledError(file.name)

        request = asyncio.ensure_future(self._issue(file, params, headers))
        watcher = asyncio.ensure_future(cancel_token.wait())
        try:
            done, _ = await asyncio.wait(
                {request, watcher},
                timeout=self.deadline,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            watcher.cancel()

        # A cancel that lands in the same turn as the response still wins.
        if request in done and not cancel_token.cancelled:
            return request.result()

        request.cancel()
        await asyncio.gather(request, return_exceptions=True)

        if cancel_token.cancelled:
            logger.info("Upload of %s aborted by user", file.name)
            raise UploadCancelledError(file.name)

        logger.warning("Upload of %s exceeded %ss deadline", file.name, self.deadline)
        raise UploadTimeoutError(self.url, self.deadline)

    async def _issue(
        self,
        file: FileDescriptor,
        params: dict[str, str] | None,
        headers: dict[str, str] | None,
    ) -> httpx.Response:
        client = self.client._get_client()
        try:
            content = await asyncio.to_thread(file.read_bytes)
        except OSError as e:
            raise PathValidationError(str(file.path or file.name), e.strerror or str(e)) from e
        content_type = SPREADSHEET_CONTENT_TYPES.get(file.extension, "application/octet-stream")
        data = {COD_CLIENTE_FIELD: self.cod_cliente} if self.cod_cliente else None

        logger.debug("POST %s (%s, %d bytes)", self.url, file.name, file.size_bytes)
        try:
            resp = await client.post(
                self.path,
                params=params,
                data=data,
                files={FILE_FIELD: (file.name, content, content_type)},
                headers=headers,
                timeout=self.deadline,
            )
        except httpx.ConnectError as e:
            raise ServerUnreachableError(self.client.base_url) from e
        except httpx.TimeoutException as e:
            raise UploadTimeoutError(self.url, self.deadline) from e
        except httpx.TransportError as e:
            raise NetworkError(self.client.base_url, str(e)) from e

        raise_for_status(resp)
        return resp
