"""Mapping between stored settings documents and configuration records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time
from typing import Any, Dict, Mapping, Type

from trailcam_sim.application.exceptions import CorruptPersistedRecord
from trailcam_sim.domain.options import LabelledOption
from trailcam_sim.domain.record import (
    CAMERA_NAME_MAX_LENGTH,
    CAPTURE_TIMER_START,
    CAPTURE_TIMER_STOP,
    FIELD_SPECS,
    CaptureTimer,
    ConfigurationRecord,
    FieldId,
    FieldKind,
)

CAPTURE_TIMER_KEY = "captureTimer"
TIME_OF_DAY_FORMAT = "%H:%M"

# Fields stored flat at the top level of the document.
_FLAT_SPECS = tuple(
    spec
    for spec in FIELD_SPECS
    if spec.field_id
    not in (
        FieldId.CAPTURE_TIMER_ENABLED,
        FieldId.CAPTURE_TIMER_START_TIME,
        FieldId.CAPTURE_TIMER_STOP_TIME,
        FieldId.CURRENT_DEVICE_TIME,
    )
)


@dataclass
class RecordMapper:
    """Translate between :class:`ConfigurationRecord` and its JSON-ready document."""

    def to_document(self, record: ConfigurationRecord) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for spec in _FLAT_SPECS:
            value = record.value_of(spec.field_id)
            document[spec.field_id.value] = value.label if isinstance(value, LabelledOption) else value

        timer = record.capture_timer
        document[CAPTURE_TIMER_KEY] = {
            "enabled": timer.enabled,
            "startTime": timer.start_time.strftime(TIME_OF_DAY_FORMAT),
            "stopTime": timer.stop_time.strftime(TIME_OF_DAY_FORMAT),
        }
        document[FieldId.CURRENT_DEVICE_TIME.value] = record.current_device_time.isoformat(timespec="seconds")
        return document

    def from_document(self, document: Mapping[str, Any]) -> ConfigurationRecord:
        """Build a record, raising :class:`CorruptPersistedRecord` on any defect.

        There is no partial repair: a missing key or an out-of-domain value
        invalidates the whole document.
        """

        if not isinstance(document, Mapping):
            raise CorruptPersistedRecord("settings document must be a mapping")

        record = ConfigurationRecord()
        for spec in _FLAT_SPECS:
            raw = self._require(document, spec.field_id.value)
            if spec.kind is FieldKind.OPTION and spec.domain is not None:
                value: Any = self._to_option(spec.domain, raw, spec.field_id.value)
            elif spec.kind is FieldKind.BOOLEAN:
                value = self._to_bool(raw, spec.field_id.value)
            else:
                value = self._to_name(raw)
            record = record.with_value(spec.field_id, value)

        timer_payload = self._require(document, CAPTURE_TIMER_KEY)
        if not isinstance(timer_payload, Mapping):
            raise CorruptPersistedRecord(f"{CAPTURE_TIMER_KEY} must be an object")
        timer = CaptureTimer(
            enabled=self._to_bool(self._require(timer_payload, "enabled"), "captureTimer.enabled"),
            start_time=self._to_fixed_time(
                self._require(timer_payload, "startTime"), "captureTimer.startTime", CAPTURE_TIMER_START
            ),
            stop_time=self._to_fixed_time(
                self._require(timer_payload, "stopTime"), "captureTimer.stopTime", CAPTURE_TIMER_STOP
            ),
        )

        device_time = self._to_timestamp(self._require(document, FieldId.CURRENT_DEVICE_TIME.value))
        return replace(record, capture_timer=timer, current_device_time=device_time)

    @staticmethod
    def _require(payload: Mapping[str, Any], key: str) -> Any:
        if key not in payload:
            raise CorruptPersistedRecord(f"missing required key '{key}'")
        return payload[key]

    @staticmethod
    def _to_option(domain: Type[LabelledOption], raw: Any, key: str) -> LabelledOption:
        if not isinstance(raw, str):
            raise CorruptPersistedRecord(f"{key} must be a string label")
        try:
            return domain(raw)
        except ValueError as exc:
            raise CorruptPersistedRecord(f"{key} has out-of-domain value {raw!r}") from exc

    @staticmethod
    def _to_bool(raw: Any, key: str) -> bool:
        if not isinstance(raw, bool):
            raise CorruptPersistedRecord(f"{key} must be a boolean")
        return raw

    @staticmethod
    def _to_name(raw: Any) -> str:
        if not isinstance(raw, str) or not raw.strip():
            raise CorruptPersistedRecord("cameraName must be a non-empty string")
        if raw != raw.strip():
            raise CorruptPersistedRecord("cameraName must not have surrounding whitespace")
        if len(raw) > CAMERA_NAME_MAX_LENGTH:
            raise CorruptPersistedRecord("cameraName is too long")
        return raw

    @staticmethod
    def _to_time(raw: Any, key: str) -> time:
        if not isinstance(raw, str):
            raise CorruptPersistedRecord(f"{key} must be an HH:MM string")
        try:
            return datetime.strptime(raw, TIME_OF_DAY_FORMAT).time()
        except ValueError as exc:
            raise CorruptPersistedRecord(f"{key} is not a valid HH:MM time: {raw!r}") from exc

    @classmethod
    def _to_fixed_time(cls, raw: Any, key: str, expected: time) -> time:
        # The capture window is not operator-editable.
        value = cls._to_time(raw, key)
        if value != expected:
            raise CorruptPersistedRecord(
                f"{key} must be {expected.strftime(TIME_OF_DAY_FORMAT)}, got {raw!r}"
            )
        return value

    @staticmethod
    def _to_timestamp(raw: Any) -> datetime:
        if not isinstance(raw, str):
            raise CorruptPersistedRecord("currentDeviceTime must be an ISO-8601 string")
        try:
            moment = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise CorruptPersistedRecord(f"currentDeviceTime is not a valid timestamp: {raw!r}") from exc
        if moment.tzinfo is not None:
            raise CorruptPersistedRecord("currentDeviceTime must not carry a UTC offset")
        return moment.replace(microsecond=0)


__all__ = ["RecordMapper", "CAPTURE_TIMER_KEY", "TIME_OF_DAY_FORMAT"]
