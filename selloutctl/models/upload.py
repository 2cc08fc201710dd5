"""Upload job, server result and outcome models.

Wire payloads from the sellout backend are pydantic models (Spanish field
names are mapped through aliases); client-side job state uses dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator, model_validator

from .base import BaseModel, to_int
from .progress import DurationEstimate

if TYPE_CHECKING:
    from selloutctl.core.cancellation import CancelToken

READ_COUNT_PREFIX = "filasLeidas"
PROCESSED_COUNT_PREFIX = "filasProcesadas"


# =============================================================================
# Job
# =============================================================================


class UploadStatus(Enum):
    """Lifecycle states of the upload orchestrator."""

    IDLE = "idle"
    UPLOADING = "uploading"
    CANCELLED = "cancelled"
    SUCCEEDED = "succeeded"
    PARTIALLY_FAILED = "partially_failed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if this is a settled state."""
        return self in (
            UploadStatus.CANCELLED,
            UploadStatus.SUCCEEDED,
            UploadStatus.PARTIALLY_FAILED,
            UploadStatus.FAILED,
        )


@dataclass(frozen=True)
class FileDescriptor:
    """Spreadsheet selected for upload."""

    name: str
    size_bytes: int
    extension: str
    path: Path | None = None
    content: bytes | None = None

    @classmethod
    def from_path(cls, path: Path) -> FileDescriptor:
        """Describe a file on disk."""
        return cls(
            name=path.name,
            size_bytes=path.stat().st_size,
            extension=path.suffix.lower(),
            path=path,
        )

    @classmethod
    def from_bytes(cls, name: str, content: bytes) -> FileDescriptor:
        """Describe an in-memory spreadsheet."""
        return cls(
            name=name,
            size_bytes=len(content),
            extension=Path(name).suffix.lower(),
            content=content,
        )

    def read_bytes(self) -> bytes:
        """Return the file contents."""
        if self.content is not None:
            return self.content
        if self.path is None:
            raise ValueError(f"No content available for {self.name}")
        return self.path.read_bytes()


@dataclass
class UploadJob:
    """One in-flight attempt to transfer and process a spreadsheet."""

    file: FileDescriptor
    estimate: DurationEstimate
    cancel_token: CancelToken
    status: UploadStatus = UploadStatus.UPLOADING
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None


# =============================================================================
# Server Result
# =============================================================================


class IncidentRecord(BaseModel):
    """A row the backend could not process."""

    code: str = Field("", alias="codigo")
    reason: str = Field("", alias="motivo")
    row: int = Field(-1, alias="fila")
    sheet: str = Field("", alias="hoja")

    @field_validator("code", "reason", "sheet", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @field_validator("row", mode="before")
    @classmethod
    def _coerce_row(cls, value: Any) -> int:
        return to_int(value, -1)


def _dataset_counts(data: dict[str, Any], prefix: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for key, value in data.items():
        if key.startswith(prefix) and len(key) > len(prefix):
            counts[key[len(prefix):].lower()] = to_int(value, 0)
    return counts


class ServerResult(BaseModel):
    """Structured report returned by the upload endpoint.

    ``ok`` is computed by the server and does not imply the incident list is
    empty: a processed upload with incidents is a normal terminal state.
    """

    ok: bool = False
    file_name: str | None = Field(None, alias="archivo")
    cod_cliente: str | None = Field(None, alias="codCliente")
    read_counts_by_dataset: dict[str, int] = Field(default_factory=dict)
    processed_counts_by_dataset: dict[str, int] = Field(default_factory=dict)
    unmatched_keys: list[str] = Field(default_factory=list, alias="codigosNoEncontrados")
    incident_records: list[IncidentRecord] = Field(default_factory=list, alias="incidencias")
    elapsed_seconds: float | None = Field(None, alias="tiempoSegundos")

    @model_validator(mode="before")
    @classmethod
    def _collect_counts(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data.setdefault("read_counts_by_dataset", _dataset_counts(data, READ_COUNT_PREFIX))
        data.setdefault(
            "processed_counts_by_dataset", _dataset_counts(data, PROCESSED_COUNT_PREFIX)
        )
        return data

    @field_validator("ok", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("unmatched_keys", mode="before")
    @classmethod
    def _keys_list(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(v) for v in value if v is not None]

    @field_validator("incident_records", mode="before")
    @classmethod
    def _incident_list(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item if isinstance(item, dict) else {"motivo": item} for item in value]

    @field_validator("elapsed_seconds", mode="before")
    @classmethod
    def _elapsed(cls, value: Any) -> float | None:
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @property
    def has_incidents(self) -> bool:
        """Check if the server reported incidents or unmatched keys."""
        return bool(self.incident_records or self.unmatched_keys)

    @property
    def datasets(self) -> list[str]:
        """Dataset names in the order the server reported them."""
        names = list(self.read_counts_by_dataset)
        names.extend(n for n in self.processed_counts_by_dataset if n not in names)
        return names

    @property
    def total_read(self) -> int:
        """Return rows read across datasets."""
        return sum(self.read_counts_by_dataset.values())

    @property
    def total_processed(self) -> int:
        """Return rows processed across datasets."""
        return sum(self.processed_counts_by_dataset.values())

    def incidents_by_sheet(self) -> dict[str, int]:
        """Count incidents per spreadsheet sheet."""
        counts: dict[str, int] = {}
        for incident in self.incident_records:
            key = incident.sheet or "GENERAL"
            counts[key] = counts.get(key, 0) + 1
        return counts


# =============================================================================
# Outcome
# =============================================================================


@dataclass
class UploadOutcome:
    """Terminal result of one upload job, tagged by ``status``."""

    status: UploadStatus
    file_name: str
    result: ServerResult | None = None
    error: str | None = None
    exception: Exception | None = None
    elapsed_ms: int = 0
    estimate_ms: int = 0
    reloaded: bool = False
    reload_error: str | None = None

    @property
    def completed(self) -> bool:
        """Check if the server accepted and processed the upload."""
        return self.status in (UploadStatus.SUCCEEDED, UploadStatus.PARTIALLY_FAILED)

    @property
    def cancelled(self) -> bool:
        """Check if the user cancelled the upload."""
        return self.status == UploadStatus.CANCELLED

    @property
    def failed(self) -> bool:
        """Check if the upload failed in transport."""
        return self.status == UploadStatus.FAILED

    def summary(self) -> dict[str, Any]:
        """Flatten the outcome for audit logs and JSON output."""
        data: dict[str, Any] = {
            "file": self.file_name,
            "status": self.status.value,
            "elapsed_ms": self.elapsed_ms,
            "estimate_ms": self.estimate_ms,
        }
        if self.result is not None:
            data["ok"] = self.result.ok
            data["read"] = dict(self.result.read_counts_by_dataset)
            data["processed"] = dict(self.result.processed_counts_by_dataset)
            data["unmatched"] = len(self.result.unmatched_keys)
            data["incidents"] = len(self.result.incident_records)
            data["reloaded"] = self.reloaded
            if self.reload_error:
                data["reload_error"] = self.reload_error
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class DiagnosticArtifact:
    """Downloadable incident report produced by the backend."""

    content: bytes
    filename: str
    content_type: str = ""

    def save(self, directory: Path) -> Path:
        """Write the artifact into a directory under its suggested name."""
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / Path(self.filename).name
        target.write_bytes(self.content)
        return target
