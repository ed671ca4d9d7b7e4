"""Rules deciding which settings are meaningful and which writes are legal.

Everything here is pure: functions take a :class:`ConfigurationRecord` and
return plain values or :mod:`~trailcam_sim.domain.outcomes` results. No
function in this module raises for a well-typed record, whatever the
proposed value is.
"""

from __future__ import annotations

import calendar
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from trailcam_sim.domain.options import CameraMode
from trailcam_sim.domain.outcomes import Accepted, Outcome, Rejected, RejectionReason
from trailcam_sim.domain.record import (
    CAMERA_NAME_MAX_LENGTH,
    FIELD_SPECS,
    FIELD_SPECS_BY_ID,
    ConfigurationRecord,
    FieldId,
    FieldKind,
)

VIDEO_FIELDS = frozenset({FieldId.VIDEO_RESOLUTION, FieldId.VIDEO_LENGTH})
PHOTO_FIELDS = frozenset({FieldId.PHOTO_RESOLUTION})
TIME_LAPSE_FIELDS = frozenset({FieldId.TIME_LAPSE_FREQUENCY, FieldId.TIME_LAPSE_PERIOD})
CAPTURE_TIMER_FIELDS = frozenset({FieldId.CAPTURE_TIMER_START_TIME, FieldId.CAPTURE_TIMER_STOP_TIME})


class ApplicabilityPolicy(str, Enum):
    """Which modes count as video modes for display purposes.

    ``VIDEO_ONLY`` shows video fields for ``VIDEO`` alone. The
    ``TIMELAPSE_PLUS_HYBRID`` variant also shows them in ``TIMELAPSE PLUS``,
    where the photo quality stays visible as well.
    """

    VIDEO_ONLY = "video_only"
    TIMELAPSE_PLUS_HYBRID = "timelapse_plus_hybrid"


def _video_applicable(mode: CameraMode, policy: ApplicabilityPolicy) -> bool:
    if mode is CameraMode.VIDEO:
        return True
    return policy is ApplicabilityPolicy.TIMELAPSE_PLUS_HYBRID and mode is CameraMode.TIMELAPSE_PLUS


def _photo_applicable(mode: CameraMode) -> bool:
    return mode is not CameraMode.VIDEO


def applicability(
    record: ConfigurationRecord,
    policy: ApplicabilityPolicy = ApplicabilityPolicy.VIDEO_ONLY,
) -> Dict[FieldId, bool]:
    """Map every field id to whether its value is currently meaningful."""

    flags: Dict[FieldId, bool] = {spec.field_id: True for spec in FIELD_SPECS}

    video = _video_applicable(record.mode, policy)
    for field_id in VIDEO_FIELDS:
        flags[field_id] = video
    for field_id in PHOTO_FIELDS:
        flags[field_id] = _photo_applicable(record.mode)
    for field_id in TIME_LAPSE_FIELDS:
        flags[field_id] = record.time_lapse_enabled
    for field_id in CAPTURE_TIMER_FIELDS:
        flags[field_id] = record.capture_timer.enabled

    return flags


def validate(record: ConfigurationRecord, field_id: Any, proposed: Any) -> Outcome:
    """Decide whether ``proposed`` may be written to ``field_id``.

    On success the returned :class:`Accepted` carries the typed value the
    store should commit (an enum member, a ``bool`` or a stripped name).
    ``record`` is accepted for symmetry with :func:`applicability`; legality
    of a value never depends on the rest of the record.
    """

    parsed_id = FieldId.parse(field_id)
    if parsed_id is None:
        return Rejected(RejectionReason.UNKNOWN_FIELD, f"Unknown setting '{field_id}'.")

    spec = FIELD_SPECS_BY_ID[parsed_id]
    if not spec.editable:
        return Rejected(
            RejectionReason.READ_ONLY_FIELD,
            f"{spec.label} cannot be changed directly.",
        )

    if spec.kind is FieldKind.OPTION and spec.domain is not None:
        member = spec.domain.from_text(proposed)
        if member is None:
            allowed = ", ".join(spec.domain.labels())
            return Rejected(
                RejectionReason.INVALID_ENUM_VALUE,
                f"'{proposed}' is not a valid {spec.label}; choose one of: {allowed}.",
            )
        return Accepted(member)

    if spec.kind is FieldKind.BOOLEAN:
        if isinstance(proposed, bool):
            return Accepted(proposed)
        return Rejected(
            RejectionReason.INVALID_ENUM_VALUE,
            f"{spec.label} must be ON or OFF, got '{proposed}'.",
        )

    if spec.kind is FieldKind.TEXT:
        if not isinstance(proposed, str) or not proposed.strip():
            return Rejected(RejectionReason.INVALID_TEXT, f"{spec.label} must not be empty.")
        name = proposed.strip()
        if len(name) > CAMERA_NAME_MAX_LENGTH:
            return Rejected(
                RejectionReason.INVALID_TEXT,
                f"{spec.label} is limited to {CAMERA_NAME_MAX_LENGTH} characters.",
            )
        return Accepted(name)

    return Rejected(RejectionReason.READ_ONLY_FIELD, f"{spec.label} cannot be changed directly.")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_device_time(year: Any, month: Any, day: Any, hour: Any, minute: Any) -> Outcome:
    """Build the clock correction instant, rejecting impossible calendar values."""

    parts = (year, month, day, hour, minute)
    if not all(_is_int(part) for part in parts):
        return Rejected(RejectionReason.INVALID_DATE, "Date and time must be whole numbers.")
    try:
        candidate = datetime(year, month, day, hour, minute)
    except (ValueError, OverflowError) as exc:
        return Rejected(
            RejectionReason.INVALID_DATE,
            f"{year:04d}/{month:02d}/{day:02d} {hour:02d}:{minute:02d} is not a valid date/time ({exc}).",
        )
    return Accepted(candidate)


def days_in_month(year: int, month: int) -> int:
    """Number of selectable days for a date picker showing ``year``/``month``."""

    return calendar.monthrange(year, month)[1]


def options_for(field_id: Any) -> List[str]:
    """Legal labels for an editable field, for UI pickers."""

    parsed_id = FieldId.parse(field_id)
    if parsed_id is None:
        return []
    spec = FIELD_SPECS_BY_ID[parsed_id]
    if not spec.editable:
        return []
    if spec.kind is FieldKind.OPTION and spec.domain is not None:
        return spec.domain.labels()
    if spec.kind is FieldKind.BOOLEAN:
        return ["ON", "OFF"]
    return []


__all__ = [
    "ApplicabilityPolicy",
    "CAPTURE_TIMER_FIELDS",
    "PHOTO_FIELDS",
    "TIME_LAPSE_FIELDS",
    "VIDEO_FIELDS",
    "applicability",
    "days_in_month",
    "options_for",
    "validate",
    "validate_device_time",
]
