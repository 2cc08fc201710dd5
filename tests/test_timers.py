"""Tests for the upload countdown/elapsed timers."""

from __future__ import annotations

import asyncio

from selloutctl.models.progress import DurationEstimate, TimerState
from selloutctl.services.timers import UploadTimers


def _manual(**kwargs) -> UploadTimers:
    kwargs.setdefault("grace_period", 0)
    return UploadTimers(autotick=False, **kwargs)


class TestManualTicks:
    """Tests driving ticks by hand."""

    def test_start_seeds_state(self):
        timers = _manual()
        timers.start(DurationEstimate(total_ms=15_000))

        assert timers.running
        assert timers.visible
        assert timers.state.remaining_ms == 15_000
        assert timers.state.elapsed_ms == 0

    def test_tick_moves_both_clocks(self):
        timers = _manual()
        timers.start(DurationEstimate(total_ms=15_000))
        timers.tick()
        timers.tick()

        assert timers.state.remaining_ms == 13_000
        assert timers.state.elapsed_ms == 2_000

    def test_remaining_floors_at_zero(self):
        timers = _manual()
        timers.start(DurationEstimate(total_ms=1_500))
        for _ in range(4):
            timers.tick()

        assert timers.state.remaining_ms == 0
        assert timers.state.elapsed_ms == 4_000
        assert timers.state.overrun
        assert timers.running

    def test_ticks_after_stop_are_ignored(self):
        timers = _manual()
        timers.start(DurationEstimate(total_ms=15_000))
        timers.tick()
        timers.stop()
        timers.tick()

        assert not timers.running
        assert timers.state.elapsed_ms == 1_000
        assert timers.state.remaining_ms == 14_000

    def test_ticks_before_start_are_ignored(self):
        timers = _manual()
        timers.tick()
        assert timers.state == TimerState()

    def test_on_tick_receives_state(self):
        seen: list[TimerState] = []
        timers = _manual(on_tick=lambda s: seen.append(s.snapshot()))
        timers.start(DurationEstimate(total_ms=15_000))
        timers.tick()

        assert seen == [TimerState(remaining_ms=14_000, elapsed_ms=1_000)]

    def test_restart_resets_clocks(self):
        timers = _manual()
        timers.start(DurationEstimate(total_ms=15_000))
        timers.tick()
        timers.stop()
        timers.start(DurationEstimate(total_ms=20_000))

        assert timers.state.remaining_ms == 20_000
        assert timers.state.elapsed_ms == 0

    def test_stop_without_grace_hides(self):
        timers = _manual()
        timers.start(DurationEstimate(total_ms=15_000))
        timers.stop()
        assert not timers.visible

    def test_custom_interval(self):
        timers = _manual(interval=0.5)
        timers.start(DurationEstimate(total_ms=15_000))
        timers.tick()
        assert timers.state.remaining_ms == 14_500


class TestScheduledTicks:
    """Tests for the background ticking task."""

    def test_autotick_advances_and_stops(self):
        async def scenario():
            timers = UploadTimers(interval=0.01, grace_period=0)
            timers.start(DurationEstimate(total_ms=15_000))
            await asyncio.sleep(0.06)
            timers.stop()
            frozen = timers.state.snapshot()
            await asyncio.sleep(0.03)
            return frozen, timers.state

        frozen, final = asyncio.run(scenario())

        assert frozen.elapsed_ms > 0
        assert frozen.elapsed_ms % 10 == 0
        assert frozen.remaining_ms == 15_000 - frozen.elapsed_ms
        assert final == frozen

    def test_grace_period_keeps_values_visible(self):
        async def scenario():
            timers = UploadTimers(interval=0.01, grace_period=0.05)
            timers.start(DurationEstimate(total_ms=15_000))
            await asyncio.sleep(0.02)
            timers.stop()
            visible_after_stop = timers.visible
            await asyncio.sleep(0.1)
            return visible_after_stop, timers.visible

        visible_after_stop, visible_later = asyncio.run(scenario())

        assert visible_after_stop is True
        assert visible_later is False
