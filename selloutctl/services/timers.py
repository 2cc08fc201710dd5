"""Remaining/elapsed clocks shown while an upload is in flight."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Optional

from selloutctl.core.timeouts import TICK_INTERVAL_SECONDS, TIMER_GRACE_SECONDS
from selloutctl.models.progress import DurationEstimate, TimerState

logger = logging.getLogger(__name__)

TickCallback = Callable[[TimerState], None]


class UploadTimers:
    """Countdown and count-up clocks driven by one ticking task.

    Each tick lowers ``remaining_ms`` (floored at zero, reaching zero never ends
    the upload) and raises ``elapsed_ms``. Ticks that arrive after ``stop()``
    are ignored.
    """

    def __init__(
        self,
        interval: float = TICK_INTERVAL_SECONDS,
        *,
        grace_period: float = TIMER_GRACE_SECONDS,
        on_tick: Optional[TickCallback] = None,
        autotick: bool = True,
    ) -> None:
        """Initialize timers.

        Args:
            interval: Seconds between ticks.
            grace_period: Seconds the final values stay visible after stop.
            on_tick: Called with the state after every tick.
            autotick: If False, nothing is scheduled and ticks come only
                from explicit ``tick()`` calls.
        """
        self.interval = interval
        self.tick_ms = round(interval * 1000)
        self.grace_period = grace_period
        self.on_tick = on_tick
        self.autotick = autotick
        self.state = TimerState()
        self.visible = False
        self._running = False
        self._task: Optional[asyncio.Task[None]] = None
        self._hide_handle: Optional[asyncio.TimerHandle] = None

    @property
    def running(self) -> bool:
        """Check if the clocks are ticking."""
        return self._running

    def start(self, estimate: DurationEstimate) -> None:
        """Seed the countdown and begin ticking."""
        self._cancel_task()
        self._cancel_hide()
        self.state = TimerState(remaining_ms=estimate.total_ms, elapsed_ms=0)
        self._running = True
        self.visible = True
        if self.autotick:
            self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self) -> TimerState:
        """Advance both clocks by one interval."""
        if not self._running:
            return self.state
        if self.state.remaining_ms is not None:
            self.state.remaining_ms = max(0, self.state.remaining_ms - self.tick_ms)
        self.state.elapsed_ms += self.tick_ms
        if self.on_tick is not None:
            self.on_tick(self.state)
        return self.state

    def stop(self) -> None:
        """Stop ticking now; hide the display after the grace period."""
        if not self._running:
            return
        self._running = False
        self._cancel_task()
        if self.grace_period > 0:
            loop = asyncio.get_running_loop()
            self._hide_handle = loop.call_later(self.grace_period, self._hide)
        else:
            self._hide()
        logger.debug(
            "Timers stopped (elapsed=%sms, remaining=%sms)",
            self.state.elapsed_ms,
            self.state.remaining_ms,
        )

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self.interval)
            self.tick()

    def _hide(self) -> None:
        self.visible = False
        self._hide_handle = None

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _cancel_hide(self) -> None:
        if self._hide_handle is not None:
            self._hide_handle.cancel()
            self._hide_handle = None
