"""Fixed-cadence driver for the simulated device clock."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Optional

from trailcam_sim.infrastructure import log_utils

DEFAULT_TICK_SECONDS = 1.0


class ClockState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class ClockSimulator:
    """Invoke ``on_tick`` once per ``interval`` seconds of loop time.

    The simulator is running from construction (which must happen inside a
    running event loop) until :meth:`stop`; a stopped simulator never
    resumes. When the loop falls behind by one or more whole intervals the
    missed ticks are dropped and counted in :attr:`ticks_skipped`; only the
    next scheduled tick fires.
    """

    def __init__(self, on_tick: Callable[[], None], interval: float = DEFAULT_TICK_SECONDS) -> None:
        if interval <= 0:
            raise ValueError("tick interval must be positive")
        self._on_tick = on_tick
        self._interval = float(interval)
        self._state = ClockState.RUNNING
        self._ticks_fired = 0
        self._ticks_skipped = 0
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(self._run())
        log_utils.debug(f"Clock simulator running at {self._interval:.3f}s per tick")

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks_fired(self) -> int:
        return self._ticks_fired

    @property
    def ticks_skipped(self) -> int:
        return self._ticks_skipped

    def stop(self) -> None:
        """Stop ticking. No tick fires after this returns."""
        if self._state is ClockState.STOPPED:
            return
        self._state = ClockState.STOPPED
        if self._task is not None:
            self._task.cancel()
        log_utils.debug(
            f"Clock simulator stopped after {self._ticks_fired} ticks ({self._ticks_skipped} skipped)"
        )

    async def wait_stopped(self) -> None:
        """Wait for the ticking task to finish after :meth:`stop`."""
        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_due = loop.time() + self._interval
        while self._state is ClockState.RUNNING:
            delay = next_due - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)

            lateness = loop.time() - next_due
            if lateness >= self._interval:
                missed = int(lateness // self._interval)
                self._ticks_skipped += missed
                next_due += missed * self._interval
                log_utils.debug(f"Clock fell behind; dropped {missed} tick(s)")

            if self._state is not ClockState.RUNNING:
                break
            self._fire()
            next_due += self._interval

    def _fire(self) -> None:
        self._ticks_fired += 1
        try:
            self._on_tick()
        except Exception as exc:
            log_utils.error(f"Clock tick handler failed: {exc}", exc_info=True)


__all__ = ["ClockSimulator", "ClockState", "DEFAULT_TICK_SECONDS"]
