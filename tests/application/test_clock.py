import asyncio
import time

import pytest

from trailcam_sim.application.clock import ClockSimulator, ClockState


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ClockSimulator(lambda: None, 0)
    with pytest.raises(ValueError):
        ClockSimulator(lambda: None, -1.0)


def test_clock_ticks_until_stopped():
    fired = []

    async def scenario():
        clock = ClockSimulator(lambda: fired.append(time.monotonic()), 0.01)
        assert clock.state is ClockState.RUNNING
        await asyncio.sleep(0.1)
        clock.stop()
        await clock.wait_stopped()
        return clock

    clock = asyncio.run(scenario())

    assert clock.state is ClockState.STOPPED
    assert len(fired) >= 3
    assert clock.ticks_fired == len(fired)


def test_no_tick_fires_after_stop():
    fired = []

    async def scenario():
        clock = ClockSimulator(lambda: fired.append(1), 0.01)
        await asyncio.sleep(0.035)
        clock.stop()
        count_at_stop = len(fired)
        await asyncio.sleep(0.05)
        await clock.wait_stopped()
        return count_at_stop

    count_at_stop = asyncio.run(scenario())

    assert len(fired) == count_at_stop


def test_stop_is_idempotent_and_final():
    async def scenario():
        clock = ClockSimulator(lambda: None, 0.01)
        clock.stop()
        clock.stop()
        await clock.wait_stopped()
        await clock.wait_stopped()
        return clock

    clock = asyncio.run(scenario())

    assert clock.state is ClockState.STOPPED
    assert clock.ticks_fired == 0


def test_missed_ticks_are_skipped_not_replayed():
    interval = 0.02
    fired = []

    def slow_first_tick():
        fired.append(time.monotonic())
        if len(fired) == 1:
            # Block the loop for well over two intervals.
            time.sleep(interval * 3)

    async def scenario():
        started = time.monotonic()
        clock = ClockSimulator(slow_first_tick, interval)
        await asyncio.sleep(interval * 6)
        clock.stop()
        await clock.wait_stopped()
        return clock, time.monotonic() - started

    clock, elapsed = asyncio.run(scenario())

    assert clock.ticks_skipped >= 1
    assert len(fired) >= 2
    assert clock.ticks_fired + clock.ticks_skipped <= int(elapsed / interval) + 1


def test_handler_errors_are_logged_and_ticking_continues(_history_log):
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("tick handler exploded")

    async def scenario():
        clock = ClockSimulator(flaky, 0.01)
        await asyncio.sleep(0.06)
        clock.stop()
        await clock.wait_stopped()

    asyncio.run(scenario())

    assert len(calls) >= 2
    assert "tick handler exploded" in _history_log.read_text(encoding="utf-8")
