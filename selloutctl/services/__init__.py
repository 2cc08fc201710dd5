"""Service layer for sellout operations.

Provides the upload pipeline (estimate, transport, timers, orchestrator) and
the dataset read service it reloads after an import.
"""

from __future__ import annotations

from .base import BaseService
from .estimator import estimate_duration
from .orchestrator import ResultReporter, UploadOrchestrator, parse_server_result
from .timers import UploadTimers
from .transport import AbortableTransport, parse_content_disposition
from .ventas import VentaService

__all__ = [
    "BaseService",
    "estimate_duration",
    "AbortableTransport",
    "parse_content_disposition",
    "UploadTimers",
    "UploadOrchestrator",
    "ResultReporter",
    "parse_server_result",
    "VentaService",
]
