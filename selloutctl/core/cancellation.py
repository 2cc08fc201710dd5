"""Per-job cancellation handle."""

from __future__ import annotations

import asyncio


class CancelToken:
    """Disposable capability used to abort one in-flight upload.

    A token belongs to exactly one job. Once the job settles the token is
    invalidated, so a late ``cancel()`` cannot leak into a later upload.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._invalidated = False

    @property
    def cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._event.is_set()

    @property
    def invalidated(self) -> bool:
        """Check if the owning job already settled."""
        return self._invalidated

    def cancel(self) -> bool:
        """Request cancellation.

        Returns:
            True if this call requested cancellation, False if it was already
            requested or the token is no longer live.
        """
        if self._invalidated or self._event.is_set():
            return False
        self._event.set()
        return True

    def invalidate(self) -> None:
        """Retire the token once its job reaches a terminal state."""
        self._invalidated = True

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        await self._event.wait()
