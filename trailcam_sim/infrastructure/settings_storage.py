"""Infrastructure implementations of settings persistence."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from trailcam_sim.domain.persistence import SettingsGateway
from trailcam_sim.infrastructure.log_utils import log_message


class JsonFileSettingsGateway(SettingsGateway):
    """Persist settings documents to a single JSON file keyed by record id."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            log_message(f"Failed to read settings from {self._path}: {exc}", "WARN")
            return {}
        if not isinstance(payload, dict):
            log_message(f"Ignoring settings file {self._path}: top level is not an object", "WARN")
            return {}
        return payload

    def load(self, key: str) -> Optional[Mapping[str, Any]]:
        return self._read_all().get(key)

    def save(self, key: str, document: Dict[str, Any]) -> None:
        payload = self._read_all()
        payload[key] = document

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

        try:
            os.chmod(self._path, 0o600)
        except OSError as exc:  # pragma: no cover - depends on platform
            log_message(f"Could not set permissions on {self._path}: {exc}", "WARN")


__all__ = ["JsonFileSettingsGateway"]
