"""Exception hierarchy for selloutctl.

Provides typed exceptions for different failure modes with clear error messages.
Upload outcomes map onto three families: ``ValidationError`` (never reaches the
network), ``TransportError`` (network, HTTP or payload failures) and
``UploadCancelledError`` (user cancellation, never a failure).
"""

from __future__ import annotations

from typing import Any


class SelloutCtlError(Exception):
    """Base exception for all selloutctl errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SelloutCtlError):
    """Error in configuration (missing, invalid, or malformed)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ProfileNotFoundError(ConfigurationError):
    """Requested profile does not exist."""

    def __init__(self, profile: str):
        super().__init__(f"Profile not found: {profile}", field="profile", value=profile)
        self.profile = profile


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SelloutCtlError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidURLError(ValidationError):
    """Invalid URL format."""

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url}"
        if reason:
            msg = f"{msg} - {reason}"
        super().__init__(msg, field="url", value=url)
        self.url = url
        self.reason = reason


class MissingFileError(ValidationError):
    """No file was selected for upload."""

    def __init__(self) -> None:
        super().__init__("No file selected for upload", field="file")


class UnsupportedFileTypeError(ValidationError):
    """File extension is not an accepted spreadsheet format."""

    def __init__(self, file_name: str, accepted: tuple[str, ...]):
        super().__init__(
            f"Unsupported file type: {file_name} (expected {' or '.join(accepted)})",
            field="file",
            value=file_name,
        )
        self.file_name = file_name
        self.accepted = accepted


class PathValidationError(ValidationError):
    """Path validation failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path: {path} - {reason}", field="path", value=path)
        self.path = path
        self.reason = reason


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(SelloutCtlError):
    """Base class for failures talking to the sellout backend."""


class HTTPStatusError(TransportError):
    """Backend answered with a non-success HTTP status."""

    base_message = "HTTP error"

    def __init__(self, status_code: int, detail: str = "", url: str | None = None):
        msg = f"{self.base_message} ({status_code})"
        if detail:
            msg = f"{msg} | Detail: {detail}"
        details: dict[str, Any] = {"url": url} if url else {}
        super().__init__(msg, details)
        self.status_code = status_code
        self.detail = detail
        self.url = url


class EndpointNotFoundError(HTTPStatusError):
    """HTTP 404: the endpoint does not exist."""

    base_message = "Endpoint not found"


class InvalidPayloadError(HTTPStatusError):
    """HTTP 422: the backend rejected the payload."""

    base_message = "Invalid payload"


class ServerError(HTTPStatusError):
    """HTTP 5xx from the backend."""

    base_message = "Server error"


class MalformedResponseError(TransportError):
    """Backend answered 2xx with a body that cannot be interpreted."""

    def __init__(self, reason: str, url: str | None = None):
        details: dict[str, Any] = {"url": url} if url else {}
        super().__init__(f"Malformed response: {reason}", details)
        self.reason = reason
        self.url = url


class ConnectionError(TransportError):
    """Base class for connection-related errors."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, details)
        self.url = url


class NetworkError(ConnectionError):
    """Network-level error (DNS, TCP, TLS)."""

    def __init__(self, url: str, cause: str | None = None):
        msg = f"Network error connecting to {url}"
        if cause:
            msg = f"{msg}: {cause}"
        super().__init__(msg, url)
        self.cause = cause


class ServerUnreachableError(ConnectionError):
    """Server is not reachable."""

    def __init__(self, url: str):
        super().__init__(f"Server unreachable: {url}", url)


class UploadTimeoutError(ConnectionError):
    """Upload did not settle before the transport deadline."""

    def __init__(self, url: str, timeout: float):
        super().__init__(f"Upload timed out after {timeout:g}s: {url}", url)
        self.timeout = timeout


class RetryExhaustedError(ConnectionError):
    """All retry attempts failed."""

    def __init__(self, operation: str, attempts: int, last_error: Exception | None = None):
        msg = f"Operation '{operation}' failed after {attempts} attempts"
        if last_error:
            msg = f"{msg}: {last_error}"
        super().__init__(msg)
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error


# =============================================================================
# Operation Errors
# =============================================================================


class OperationError(SelloutCtlError):
    """Error during an operation."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        full_details = {"operation": operation}
        if details:
            full_details.update(details)
        super().__init__(message, full_details)
        self.operation = operation


class UploadCancelledError(OperationError):
    """Upload was cancelled by the user before it settled."""

    def __init__(self, file_name: str | None = None):
        details = {"file": file_name} if file_name else {}
        super().__init__("upload", "Upload cancelled", details)
        self.file_name = file_name


class UploadInProgressError(OperationError):
    """An upload is already running; concurrent uploads are rejected."""

    def __init__(self, file_name: str):
        super().__init__(
            "upload",
            f"An upload is already in progress: {file_name}",
            {"file": file_name},
        )
        self.file_name = file_name
