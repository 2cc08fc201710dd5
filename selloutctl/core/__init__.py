"""Core modules for selloutctl."""

from selloutctl.core.cancellation import CancelToken
from selloutctl.core.client import SelloutClient, raise_for_status
from selloutctl.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile
from selloutctl.core.exceptions import (
    ConfigurationError,
    ConnectionError,
    EndpointNotFoundError,
    HTTPStatusError,
    InvalidPayloadError,
    MalformedResponseError,
    NetworkError,
    OperationError,
    RetryExhaustedError,
    SelloutCtlError,
    ServerError,
    TransportError,
    UnsupportedFileTypeError,
    UploadCancelledError,
    UploadInProgressError,
    UploadTimeoutError,
    ValidationError,
)
from selloutctl.core.logging import LogContext, get_audit_logger, get_logger, setup_logging
from selloutctl.core.output import (
    OutputFormat,
    console,
    format_duration,
    print_error,
    print_json,
    print_output,
    print_success,
    print_table,
    print_warning,
)
from selloutctl.core.validation import (
    ACCEPTED_EXTENSIONS,
    validate_server_url,
    validate_timeout,
    validate_upload_file,
)

__all__ = [
    # Exceptions
    "SelloutCtlError",
    "ConfigurationError",
    "ValidationError",
    "UnsupportedFileTypeError",
    "TransportError",
    "HTTPStatusError",
    "EndpointNotFoundError",
    "InvalidPayloadError",
    "ServerError",
    "MalformedResponseError",
    "ConnectionError",
    "NetworkError",
    "UploadTimeoutError",
    "RetryExhaustedError",
    "OperationError",
    "UploadCancelledError",
    "UploadInProgressError",
    # Validation
    "ACCEPTED_EXTENSIONS",
    "validate_server_url",
    "validate_timeout",
    "validate_upload_file",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Client
    "SelloutClient",
    "raise_for_status",
    "CancelToken",
    # Output
    "OutputFormat",
    "print_output",
    "print_table",
    "print_json",
    "print_error",
    "print_warning",
    "print_success",
    "format_duration",
    "console",
    # Logging
    "get_logger",
    "get_audit_logger",
    "setup_logging",
    "LogContext",
]
