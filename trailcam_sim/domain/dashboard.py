"""Read-only status projection shown on the camera's LCD."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Mapping, Optional, Tuple

from trailcam_sim.domain.options import LabelledOption
from trailcam_sim.domain.record import FIELD_SPECS, ConfigurationRecord, FieldId

DEFAULT_BATTERY_PERCENT = 100


@dataclass(frozen=True)
class StorageUsage:
    """Simulated SD card counter, in pictures."""

    used: int
    capacity: int

    @property
    def text(self) -> str:
        return f"{self.used:04d}/{self.capacity:04d}"


@dataclass(frozen=True)
class DisplayField:
    field_id: FieldId
    label: str
    value: Any
    display_value: str
    applicable: bool


@dataclass(frozen=True)
class DisplayModel:
    """Flat dashboard view derived from one configuration snapshot."""

    fields: Tuple[DisplayField, ...]
    date_text: str
    time_text: str
    storage_text: str
    battery_text: str
    motion_alert: bool

    def field(self, field_id: FieldId | str) -> DisplayField:
        parsed = FieldId.parse(field_id)
        for entry in self.fields:
            if entry.field_id is parsed:
                return entry
        raise KeyError(f"No display field named {field_id!r}")

    def visible_fields(self) -> Tuple[DisplayField, ...]:
        return tuple(entry for entry in self.fields if entry.applicable)


def format_date(moment: datetime) -> str:
    """Format as ``YYYY/MM/DD``."""
    return f"{moment.year:04d}/{moment.month:02d}/{moment.day:02d}"


def format_time(moment: datetime) -> str:
    """Format as 12-hour ``h:MM AM`` with midnight and noon shown as 12."""
    suffix = "PM" if moment.hour >= 12 else "AM"
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    if isinstance(value, LabelledOption):
        return value.label
    if isinstance(value, datetime):
        return f"{format_date(value)} {format_time(value)}"
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value)


def project(
    record: ConfigurationRecord,
    applicability: Mapping[FieldId, bool],
    *,
    storage: Optional[StorageUsage] = None,
    battery_percent: int = DEFAULT_BATTERY_PERCENT,
) -> DisplayModel:
    """Pair every field's value with its applicability flag and format the clock."""

    fields = []
    for spec in FIELD_SPECS:
        value = record.value_of(spec.field_id)
        fields.append(
            DisplayField(
                field_id=spec.field_id,
                label=spec.label,
                value=value,
                display_value=format_value(value),
                applicable=bool(applicability.get(spec.field_id, True)),
            )
        )

    now = record.current_device_time
    return DisplayModel(
        fields=tuple(fields),
        date_text=format_date(now),
        time_text=format_time(now),
        storage_text=storage.text if storage is not None else "",
        battery_text=f"{battery_percent}%",
        motion_alert=record.motion_test_enabled,
    )


__all__ = [
    "DEFAULT_BATTERY_PERCENT",
    "DisplayField",
    "DisplayModel",
    "StorageUsage",
    "format_date",
    "format_time",
    "format_value",
    "project",
]
