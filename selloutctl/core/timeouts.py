"""Timeout and interval defaults shared across selloutctl."""

from __future__ import annotations

DEFAULT_HTTP_TIMEOUT_SECONDS = 30
DEFAULT_RELOAD_TIMEOUT_SECONDS = 60

# Upper bound for a single upload, independent of the displayed estimate.
DEFAULT_UPLOAD_TIMEOUT_SECONDS = 30 * 60

TICK_INTERVAL_SECONDS = 1.0
TIMER_GRACE_SECONDS = 0.9
