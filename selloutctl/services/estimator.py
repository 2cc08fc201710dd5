"""Heuristic processing-time estimate for spreadsheet uploads."""

from __future__ import annotations

from selloutctl.models.progress import DurationEstimate

BYTES_PER_MB = 1024 * 1024
NOMINAL_TRANSFER_RATE_MBPS = 0.5
BASE_PROCESSING_MS = 10_000
PROCESSING_MS_PER_MB = 1_000
SAFETY_MULTIPLIER = 1.5
MIN_ESTIMATE_MS = 15_000
MAX_ESTIMATE_MS = 900_000


def estimate_duration(size_bytes: int | float) -> DurationEstimate:
    """Estimate how long the backend needs to receive and process a file.

    Transfer time at a nominal 0.5 MB/s plus a fixed and a per-MB processing
    overhead, padded by 1.5x and clamped to [15 s, 15 min].

    Args:
        size_bytes: File size; negative values count as zero.

    Returns:
        Estimated total duration.
    """
    size_mb = max(0, size_bytes) / BYTES_PER_MB
    transfer_ms = (size_mb / NOMINAL_TRANSFER_RATE_MBPS) * 1000
    processing_ms = BASE_PROCESSING_MS + size_mb * PROCESSING_MS_PER_MB
    total_ms = (transfer_ms + processing_ms) * SAFETY_MULTIPLIER
    return DurationEstimate(total_ms=round(min(max(total_ms, MIN_ESTIMATE_MS), MAX_ESTIMATE_MS)))
