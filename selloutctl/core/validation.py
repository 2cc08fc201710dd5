"""Input validation for selloutctl.

Validators return the normalized value or raise a ``ValidationError`` subclass.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from selloutctl.core.exceptions import (
    InvalidURLError,
    MissingFileError,
    PathValidationError,
    UnsupportedFileTypeError,
    ValidationError,
)
from selloutctl.models.upload import FileDescriptor

ACCEPTED_EXTENSIONS = (".xlsx", ".xls")


def validate_server_url(url: str) -> str:
    """Validate and normalize a backend base URL.

    Args:
        url: URL such as ``https://host/api-sellout/rm``.

    Returns:
        URL without trailing slash.

    Raises:
        InvalidURLError: If the URL is empty or lacks scheme/host.
    """
    url = (url or "").strip()
    if not url:
        raise InvalidURLError(url, "URL is empty")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, "scheme must be http or https")
    if not parsed.netloc:
        raise InvalidURLError(url, "missing host")

    return url.rstrip("/")


def validate_timeout(timeout: float | int | str, field: str = "timeout") -> float:
    """Validate a timeout in seconds."""
    try:
        value = float(timeout)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {timeout}", field=field, value=timeout)
    if value <= 0:
        raise ValidationError(f"Invalid {field}: must be positive", field=field, value=timeout)
    return value


def validate_upload_file(file: FileDescriptor | Path | str | None) -> FileDescriptor:
    """Check that a spreadsheet can be uploaded.

    Accepts a ready descriptor or a path. Only ``.xlsx`` and ``.xls`` are
    accepted; nothing here touches the network.

    Raises:
        MissingFileError: If no file was given.
        PathValidationError: If the path does not point to a regular file.
        UnsupportedFileTypeError: If the extension is not accepted.
    """
    if file is None or file == "":
        raise MissingFileError()

    if isinstance(file, FileDescriptor):
        descriptor = file
    else:
        path = Path(file)
        if path.suffix.lower() not in ACCEPTED_EXTENSIONS:
            raise UnsupportedFileTypeError(path.name, ACCEPTED_EXTENSIONS)
        if not path.exists():
            raise PathValidationError(str(path), "does not exist")
        if not path.is_file():
            raise PathValidationError(str(path), "not a file")
        descriptor = FileDescriptor.from_path(path)

    if descriptor.extension.lower() not in ACCEPTED_EXTENSIONS:
        raise UnsupportedFileTypeError(descriptor.name, ACCEPTED_EXTENSIONS)

    return descriptor
