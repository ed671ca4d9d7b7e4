"""Owner of the live configuration snapshot and its validated write path."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional

from trailcam_sim.application.exceptions import CorruptPersistedRecord
from trailcam_sim.domain import constraints
from trailcam_sim.domain.constraints import ApplicabilityPolicy
from trailcam_sim.domain.outcomes import Accepted, Outcome
from trailcam_sim.domain.persistence import SettingsGateway
from trailcam_sim.domain.record import ConfigurationRecord, FieldId, default_record
from trailcam_sim.infrastructure import log_utils
from trailcam_sim.infrastructure.mappers import RecordMapper

TICK = timedelta(seconds=1)

SnapshotListener = Callable[[ConfigurationRecord], None]


class GatewayWriter:
    """Store listener that saves every committed snapshot synchronously."""

    def __init__(
        self,
        gateway: SettingsGateway,
        key: str,
        mapper: Optional[RecordMapper] = None,
    ) -> None:
        self._gateway = gateway
        self._key = key
        self._mapper = mapper or RecordMapper()

    def __call__(self, record: ConfigurationRecord) -> None:
        self._gateway.save(self._key, self._mapper.to_document(record))


def load_record(
    gateway: SettingsGateway,
    key: str,
    mapper: Optional[RecordMapper] = None,
) -> ConfigurationRecord:
    """Restore the stored snapshot, or the default one when absent or corrupt."""

    mapper = mapper or RecordMapper()
    document = gateway.load(key)
    if document is None:
        log_utils.info(f"No stored settings under '{key}'; starting from factory defaults.")
        return default_record()
    try:
        record = mapper.from_document(document)
    except CorruptPersistedRecord as exc:
        log_utils.warn(f"Discarding corrupt settings under '{key}' ({exc}); using factory defaults.")
        return default_record()
    log_utils.info(f"Restored settings under '{key}'.")
    return record


class ConfigurationStore:
    """Single writer of the :class:`ConfigurationRecord`.

    Every successful write replaces the snapshot with a new immutable
    record and hands it to each subscribed listener. Rejected writes leave
    the current snapshot object untouched.
    """

    def __init__(
        self,
        record: Optional[ConfigurationRecord] = None,
        *,
        policy: ApplicabilityPolicy = ApplicabilityPolicy.VIDEO_ONLY,
    ) -> None:
        self._record = record if record is not None else default_record()
        self._policy = policy
        self._listeners: List[SnapshotListener] = []

    @classmethod
    def open(
        cls,
        gateway: SettingsGateway,
        key: str,
        *,
        mapper: Optional[RecordMapper] = None,
        policy: ApplicabilityPolicy = ApplicabilityPolicy.VIDEO_ONLY,
        autosave: bool = True,
    ) -> "ConfigurationStore":
        """Load the stored snapshot and optionally save every later commit."""

        mapper = mapper or RecordMapper()
        store = cls(load_record(gateway, key, mapper), policy=policy)
        if autosave:
            store.subscribe(GatewayWriter(gateway, key, mapper))
        return store

    @property
    def policy(self) -> ApplicabilityPolicy:
        return self._policy

    def current(self) -> ConfigurationRecord:
        return self._record

    def applicability(self) -> Dict[FieldId, bool]:
        return constraints.applicability(self._record, self._policy)

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def apply(self, field_id: Any, proposed: Any) -> Outcome:
        outcome = constraints.validate(self._record, field_id, proposed)
        if not isinstance(outcome, Accepted):
            log_utils.info(f"Rejected {field_id}={proposed!r}: {outcome.reason.value}")
            return outcome

        parsed_id = FieldId.parse(field_id)
        record = self._commit(self._record.with_value(parsed_id, outcome.value))
        log_utils.info(f"Set {parsed_id.value} to {outcome.value}")
        return Accepted(record)

    def confirm_time(self, year: Any, month: Any, day: Any, hour: Any, minute: Any) -> Outcome:
        outcome = constraints.validate_device_time(year, month, day, hour, minute)
        if not isinstance(outcome, Accepted):
            log_utils.info(f"Rejected device time correction: {outcome.message}")
            return outcome

        record = self._commit(self._record.with_value(FieldId.CURRENT_DEVICE_TIME, outcome.value))
        log_utils.info(f"Device time set to {outcome.value.isoformat()}")
        return Accepted(record)

    def reset_to_default(self) -> ConfigurationRecord:
        log_utils.info("Restoring factory default settings.")
        return self._commit(default_record())

    def tick(self) -> ConfigurationRecord:
        current = self._record.current_device_time
        try:
            advanced = current + TICK
        except OverflowError:
            log_utils.warn("Device clock reached the last representable instant; holding.")
            return self._record
        return self._commit(self._record.with_value(FieldId.CURRENT_DEVICE_TIME, advanced))

    def _commit(self, record: ConfigurationRecord) -> ConfigurationRecord:
        self._record = record
        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception as exc:
                log_utils.error(f"Snapshot listener {listener!r} failed: {exc}", exc_info=True)
        return record


__all__ = ["ConfigurationStore", "GatewayWriter", "SnapshotListener", "TICK", "load_record"]
