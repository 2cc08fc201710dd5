"""Data models for selloutctl.

Provides Pydantic models for backend payloads and dataclasses for upload
job and progress tracking.
"""

from __future__ import annotations

from .base import BaseModel
from .progress import DurationEstimate, TimerState
from .upload import (
    DiagnosticArtifact,
    FileDescriptor,
    IncidentRecord,
    ServerResult,
    UploadJob,
    UploadOutcome,
    UploadStatus,
)
from .venta import Venta

__all__ = [
    # Base
    "BaseModel",
    # Progress
    "DurationEstimate",
    "TimerState",
    # Upload
    "FileDescriptor",
    "UploadStatus",
    "UploadJob",
    "IncidentRecord",
    "ServerResult",
    "UploadOutcome",
    "DiagnosticArtifact",
    # Dataset
    "Venta",
]
