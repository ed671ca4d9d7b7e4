"""Custom exception hierarchy for the trail camera simulator."""

from __future__ import annotations


class TrailCamError(Exception):
    """Base exception for simulator failures."""


class CorruptPersistedRecord(TrailCamError, ValueError):
    """Raised when a stored settings document cannot be turned into a record."""


class SessionClosedError(TrailCamError):
    """Raised when a command is sent to a session that has been closed."""


__all__ = [
    "TrailCamError",
    "CorruptPersistedRecord",
    "SessionClosedError",
]
