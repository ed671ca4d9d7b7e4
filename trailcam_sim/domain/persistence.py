"""Domain-level protocol for persisting the settings document."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol


class SettingsGateway(Protocol):
    """Abstraction over durable key-value storage for settings documents."""

    def load(self, key: str) -> Optional[Mapping[str, Any]]:
        """Return the stored document for ``key`` if available, otherwise ``None``."""

    def save(self, key: str, document: Dict[str, Any]) -> None:
        """Persist ``document`` under ``key``, replacing any previous version."""


__all__ = ["SettingsGateway"]
