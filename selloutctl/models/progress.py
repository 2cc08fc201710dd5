"""Progress models for tracking a running upload.

Provides the estimate and clock state shown while the backend processes a file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DurationEstimate:
    """Heuristic total duration for one upload, computed once at start."""

    total_ms: int

    @property
    def total_seconds(self) -> float:
        """Return the estimate in seconds."""
        return self.total_ms / 1000


@dataclass
class TimerState:
    """Remaining/elapsed clocks for the active upload."""

    remaining_ms: Optional[int] = None
    elapsed_ms: int = 0

    @property
    def is_seeded(self) -> bool:
        """Check if an estimate has been loaded into the countdown."""
        return self.remaining_ms is not None

    @property
    def overrun(self) -> bool:
        """Check if the countdown ran out while the upload is still going."""
        return self.remaining_ms == 0

    def snapshot(self) -> TimerState:
        """Return an independent copy for callers that keep history."""
        return TimerState(remaining_ms=self.remaining_ms, elapsed_ms=self.elapsed_ms)
