"""Tests for selloutctl.core.validation module."""

from __future__ import annotations

from pathlib import Path

import pytest

from selloutctl.core.exceptions import (
    InvalidURLError,
    MissingFileError,
    PathValidationError,
    UnsupportedFileTypeError,
    ValidationError,
)
from selloutctl.core.validation import (
    validate_server_url,
    validate_timeout,
    validate_upload_file,
)
from selloutctl.models.upload import FileDescriptor


class TestValidateServerUrl:
    """Tests for validate_server_url."""

    def test_strips_trailing_slash(self):
        assert (
            validate_server_url("https://sellout.example.com/api-sellout/rm/")
            == "https://sellout.example.com/api-sellout/rm"
        )

    @pytest.mark.parametrize("url", ["", "   ", "ftp://host", "sellout.example.com", "https://"])
    def test_invalid(self, url):
        with pytest.raises(InvalidURLError):
            validate_server_url(url)


class TestValidateTimeout:
    """Tests for validate_timeout."""

    def test_valid(self):
        assert validate_timeout("2.5") == 2.5

    @pytest.mark.parametrize("value", [0, -1, "soon"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_timeout(value)


class TestValidateUploadFile:
    """Tests for validate_upload_file."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        with pytest.raises(MissingFileError):
            validate_upload_file(value)

    def test_existing_xlsx(self, xlsx_file: Path):
        descriptor = validate_upload_file(xlsx_file)
        assert descriptor.name == "ventas.xlsx"
        assert descriptor.path == xlsx_file

    def test_string_path(self, xlsx_file: Path):
        assert validate_upload_file(str(xlsx_file)).size_bytes == xlsx_file.stat().st_size

    def test_uppercase_extension(self, tmp_path: Path):
        path = tmp_path / "STOCK.XLS"
        path.write_bytes(b"\xd0\xcf\x11\xe0")
        assert validate_upload_file(path).extension == ".xls"

    def test_csv_rejected_before_touching_disk(self, tmp_path: Path):
        with pytest.raises(UnsupportedFileTypeError):
            validate_upload_file(tmp_path / "does-not-exist.csv")

    def test_nonexistent_xlsx(self, tmp_path: Path):
        with pytest.raises(PathValidationError):
            validate_upload_file(tmp_path / "missing.xlsx")

    def test_directory_rejected(self, tmp_path: Path):
        folder = tmp_path / "folder.xlsx"
        folder.mkdir()
        with pytest.raises(PathValidationError):
            validate_upload_file(folder)

    def test_descriptor_passthrough(self):
        descriptor = FileDescriptor.from_bytes("ventas.xlsx", b"data")
        assert validate_upload_file(descriptor) is descriptor

    def test_descriptor_wrong_type(self):
        with pytest.raises(UnsupportedFileTypeError):
            validate_upload_file(FileDescriptor.from_bytes("ventas.pdf", b"%PDF"))
