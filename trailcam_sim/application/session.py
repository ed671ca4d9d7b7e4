"""Live simulator session: one queue, one consumer, one ticking clock.

Operator commands and clock ticks are funnelled through a single
:class:`asyncio.Queue` and applied to the :class:`ConfigurationStore` by one
consumer task, so every mutation sees the snapshot left by the previous one.
Persistence runs in a background writer that never blocks the consumer.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Optional, Tuple

from trailcam_sim.application.clock import ClockSimulator, ClockState
from trailcam_sim.application.exceptions import SessionClosedError
from trailcam_sim.application.sd_card import SimulatedSdCard
from trailcam_sim.application.store import ConfigurationStore
from trailcam_sim.config import Settings
from trailcam_sim.config import settings as app_settings
from trailcam_sim.domain.constraints import ApplicabilityPolicy
from trailcam_sim.domain.dashboard import DisplayModel, project
from trailcam_sim.domain.outcomes import Outcome
from trailcam_sim.domain.persistence import SettingsGateway
from trailcam_sim.domain.record import ConfigurationRecord
from trailcam_sim.infrastructure import log_utils
from trailcam_sim.infrastructure.mappers import RecordMapper
from trailcam_sim.infrastructure.settings_storage import JsonFileSettingsGateway

FIRMWARE_UP_TO_DATE = "Firmware is already up to date; no upgrade needed."
DELETE_ALL_DONE = "All pictures deleted and SD card formatted."

_TICK = object()

_Command = Tuple[Any, Optional[asyncio.Future]]


class PersistenceWriter:
    """Store listener that saves the newest snapshot off the event loop.

    Bursts of commits are coalesced: only the latest pending snapshot is
    written once the previous write finishes. Saves run one at a time in
    commit order; a save older than the last one written is skipped. On
    :meth:`stop` a snapshot still waiting is handed to a worker thread
    without being awaited, so the latest committed record always reaches
    the gateway.
    """

    def __init__(
        self,
        gateway: SettingsGateway,
        key: str,
        mapper: Optional[RecordMapper] = None,
    ) -> None:
        self._gateway = gateway
        self._key = key
        self._mapper = mapper or RecordMapper()
        self._pending: Optional[Tuple[int, ConfigurationRecord]] = None
        self._sequence = 0
        self._written_sequence = 0
        self._save_lock = threading.Lock()
        self._wakeup = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._writes = 0
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(self._run())

    @property
    def writes(self) -> int:
        return self._writes

    def __call__(self, record: ConfigurationRecord) -> None:
        self._sequence += 1
        self._pending = (self._sequence, record)
        self._idle.clear()
        self._wakeup.set()

    async def flush(self) -> None:
        """Wait until every snapshot handed over so far has been written."""
        if self._task is None:
            return
        await self._idle.wait()

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        if self._pending is not None:
            sequence, record = self._pending
            self._pending = None
            asyncio.get_running_loop().run_in_executor(None, self._save, sequence, record)
        self._idle.set()

    def _save(self, sequence: int, record: ConfigurationRecord) -> None:
        with self._save_lock:
            if sequence <= self._written_sequence:
                return
            try:
                self._gateway.save(self._key, self._mapper.to_document(record))
            except Exception as exc:
                log_utils.error(f"Failed to persist settings under '{self._key}': {exc}")
                return
            self._written_sequence = sequence
            self._writes += 1

    async def _run(self) -> None:
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()
            while self._pending is not None:
                sequence, record = self._pending
                self._pending = None
                await asyncio.to_thread(self._save, sequence, record)
            self._idle.set()


class TrailCamSession:
    """Boundary offered to the UI collaborator.

    Must be constructed inside a running event loop; the clock starts
    ticking immediately. Use ``async with`` or call :meth:`close`.
    """

    def __init__(
        self,
        store: ConfigurationStore,
        *,
        tick_seconds: float = 1.0,
        writer: Optional[PersistenceWriter] = None,
        sd_card: Optional[SimulatedSdCard] = None,
    ) -> None:
        self._store = store
        self._sd_card = sd_card or SimulatedSdCard()
        self._writer = writer
        if writer is not None:
            store.subscribe(writer)
        self._queue: asyncio.Queue[_Command] = asyncio.Queue()
        self._closed = False
        self._ticks_applied = 0
        self._consumer = asyncio.get_running_loop().create_task(self._consume())
        self._clock = ClockSimulator(self._enqueue_tick, tick_seconds)
        log_utils.info("Session started.")

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        *,
        gateway: Optional[SettingsGateway] = None,
    ) -> "TrailCamSession":
        """Build a session backed by the configured JSON settings file."""

        config = config or app_settings
        gateway = gateway or JsonFileSettingsGateway(config.TRAILCAM_STATE_PATH)
        key = config.TRAILCAM_RECORD_KEY
        mapper = RecordMapper()
        store = ConfigurationStore.open(
            gateway,
            key,
            mapper=mapper,
            policy=ApplicabilityPolicy(config.TRAILCAM_APPLICABILITY_POLICY),
            autosave=False,
        )
        return cls(
            store,
            tick_seconds=config.TRAILCAM_TICK_SECONDS,
            writer=PersistenceWriter(gateway, key, mapper),
            sd_card=SimulatedSdCard(config.TRAILCAM_SD_USED, config.TRAILCAM_SD_CAPACITY),
        )

    async def __aenter__(self) -> "TrailCamSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    @property
    def clock(self) -> ClockSimulator:
        return self._clock

    @property
    def sd_card(self) -> SimulatedSdCard:
        return self._sd_card

    @property
    def ticks_applied(self) -> int:
        return self._ticks_applied

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Boundary operations
    # ------------------------------------------------------------------
    def get_display_model(self) -> DisplayModel:
        return project(
            self._store.current(),
            self._store.applicability(),
            storage=self._sd_card.usage(),
        )

    async def propose_field_change(self, field_id: Any, value: Any) -> Outcome:
        return await self._submit(lambda: self._store.apply(field_id, value))

    async def confirm_time(self, year: Any, month: Any, day: Any, hour: Any, minute: Any) -> Outcome:
        return await self._submit(lambda: self._store.confirm_time(year, month, day, hour, minute))

    async def reset_to_default(self) -> ConfigurationRecord:
        return await self._submit(self._store.reset_to_default)

    def delete_all(self) -> str:
        """Erase the simulated SD card; the configuration record is untouched."""
        self._ensure_open()
        self._sd_card.erase()
        log_utils.info("SD card erased.")
        return DELETE_ALL_DONE

    def firmware_upgrade(self) -> str:
        self._ensure_open()
        return FIRMWARE_UP_TO_DATE

    async def close(self, *, flush: bool = False) -> None:
        """Stop the clock, apply already queued commands, then stop consuming.

        Pending persistence writes are only awaited when ``flush`` is set.
        """
        if self._closed:
            return
        self._closed = True
        self._clock.stop()
        await self._queue.join()
        self._consumer.cancel()
        try:
            await self._consumer
        except asyncio.CancelledError:
            pass
        await self._clock.wait_stopped()
        if self._writer is not None:
            if flush:
                await self._writer.flush()
            self._writer.stop()
            self._store.unsubscribe(self._writer)
        log_utils.info(f"Session closed after {self._ticks_applied} ticks.")

    # ------------------------------------------------------------------
    # Queue plumbing
    # ------------------------------------------------------------------
    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("session is closed")

    def _enqueue_tick(self) -> None:
        self._queue.put_nowait((_TICK, None))

    async def _submit(self, action: Callable[[], Any]) -> Any:
        self._ensure_open()
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((action, future))
        return await future

    async def _consume(self) -> None:
        while True:
            action, future = await self._queue.get()
            try:
                if action is _TICK:
                    if self._clock.state is ClockState.RUNNING:
                        self._store.tick()
                        self._ticks_applied += 1
                    continue
                try:
                    result = action()
                except Exception as exc:
                    log_utils.error(f"Session command failed: {exc}", exc_info=True)
                    if future is not None and not future.done():
                        future.set_exception(exc)
                    continue
                if future is not None and not future.done():
                    future.set_result(result)
            finally:
                self._queue.task_done()


__all__ = [
    "DELETE_ALL_DONE",
    "FIRMWARE_UP_TO_DATE",
    "PersistenceWriter",
    "TrailCamSession",
]
