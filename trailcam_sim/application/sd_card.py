"""Simulated SD card counter shown on the dashboard."""

from __future__ import annotations

from trailcam_sim.domain.dashboard import StorageUsage

DEFAULT_CAPACITY = 1550
DEFAULT_USED = 123


class SimulatedSdCard:
    """Picture counter living outside the configuration record."""

    def __init__(self, used: int = DEFAULT_USED, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._used = max(0, min(used, capacity))

    @property
    def used(self) -> int:
        return self._used

    @property
    def capacity(self) -> int:
        return self._capacity

    def usage(self) -> StorageUsage:
        return StorageUsage(used=self._used, capacity=self._capacity)

    def erase(self) -> None:
        self._used = 0
