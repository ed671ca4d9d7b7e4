"""Domain entities describing the camera configuration snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, time
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from trailcam_sim.domain.options import (
    BatteryType,
    CameraMode,
    IrFlashRange,
    LabelledOption,
    Language,
    MotionDetectionRange,
    MultiShotMode,
    PhotoDelay,
    PhotoResolution,
    TempUnits,
    TimeLapseFrequency,
    TimeLapsePeriod,
    TriggerSpeed,
    VideoLength,
    VideoResolution,
)

# Device clock reads 1970/01/01 00:00 on a fresh camera.
DEFAULT_DEVICE_TIME = datetime(1970, 1, 1, 0, 0, 0)
CAPTURE_TIMER_START = time(19, 0)
CAPTURE_TIMER_STOP = time(5, 0)
CAMERA_NAME_MAX_LENGTH = 32


class FieldId(str, Enum):
    """Public identifiers of every configuration field (persisted key names)."""

    MODE = "mode"
    PHOTO_RESOLUTION = "photoResolution"
    VIDEO_RESOLUTION = "videoResolution"
    VIDEO_LENGTH = "videoLength"
    PHOTO_DELAY = "photoDelay"
    MULTI_SHOT_MODE = "multiShotMode"
    TEMP_UNITS = "tempUnits"
    CAMERA_NAME = "cameraName"
    IMAGE_DATA_STRIP_ENABLED = "imageDataStripEnabled"
    MOTION_TEST_ENABLED = "motionTestEnabled"
    MOTION_DETECTION_RANGE = "motionDetectionRange"
    TRIGGER_SPEED = "triggerSpeed"
    BATTERY_TYPE = "batteryType"
    TIME_LAPSE_ENABLED = "timeLapseEnabled"
    TIME_LAPSE_FREQUENCY = "timeLapseFrequency"
    TIME_LAPSE_PERIOD = "timeLapsePeriod"
    SMART_IR_VIDEO_ENABLED = "smartIrVideoEnabled"
    IR_FLASH_RANGE = "irFlashRange"
    SD_MANAGEMENT_ENABLED = "sdManagementEnabled"
    LANGUAGE = "language"
    CAPTURE_TIMER_ENABLED = "captureTimerEnabled"
    CAPTURE_TIMER_START_TIME = "captureTimerStartTime"
    CAPTURE_TIMER_STOP_TIME = "captureTimerStopTime"
    HDR_ENABLED = "hdrEnabled"
    CURRENT_DEVICE_TIME = "currentDeviceTime"

    @classmethod
    def parse(cls, raw: object) -> Optional["FieldId"]:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw)
        except ValueError:
            return cls.__members__.get(raw)

    def __str__(self) -> str:
        return self.value


class FieldKind(str, Enum):
    OPTION = "option"
    BOOLEAN = "boolean"
    TEXT = "text"
    TIME_OF_DAY = "time_of_day"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class FieldSpec:
    """Static description of one configuration field."""

    field_id: FieldId
    label: str
    kind: FieldKind
    domain: Optional[Type[LabelledOption]] = None
    editable: bool = True


@dataclass(frozen=True)
class CaptureTimer:
    """Capture window; only ``enabled`` is operator-editable."""

    enabled: bool = False
    start_time: time = CAPTURE_TIMER_START
    stop_time: time = CAPTURE_TIMER_STOP


@dataclass(frozen=True)
class ConfigurationRecord:
    """Immutable snapshot of every camera setting."""

    mode: CameraMode = CameraMode.TRAIL_CAM
    photo_resolution: PhotoResolution = PhotoResolution.MP_12
    video_resolution: VideoResolution = VideoResolution.FHD_30
    video_length: VideoLength = VideoLength.SEC_30
    photo_delay: PhotoDelay = PhotoDelay.SEC_1
    multi_shot_mode: MultiShotMode = MultiShotMode.SINGLE
    temp_units: TempUnits = TempUnits.FAHRENHEIT
    camera_name: str = "BROWNING CAM"
    image_data_strip_enabled: bool = True
    motion_test_enabled: bool = False
    motion_detection_range: MotionDetectionRange = MotionDetectionRange.NORMAL_RANGE
    trigger_speed: TriggerSpeed = TriggerSpeed.NORMAL
    battery_type: BatteryType = BatteryType.ALKALINE
    time_lapse_enabled: bool = False
    time_lapse_frequency: TimeLapseFrequency = TimeLapseFrequency.SEC_5
    time_lapse_period: TimeLapsePeriod = TimeLapsePeriod.ALL_DAY
    smart_ir_video_enabled: bool = False
    ir_flash_range: IrFlashRange = IrFlashRange.ECONOMY
    sd_management_enabled: bool = False
    language: Language = Language.ENGLISH
    capture_timer: CaptureTimer = field(default_factory=CaptureTimer)
    hdr_enabled: bool = False
    current_device_time: datetime = DEFAULT_DEVICE_TIME

    def value_of(self, field_id: FieldId) -> Any:
        """Return the stored value addressed by ``field_id``."""

        if field_id is FieldId.CAPTURE_TIMER_ENABLED:
            return self.capture_timer.enabled
        if field_id is FieldId.CAPTURE_TIMER_START_TIME:
            return self.capture_timer.start_time
        if field_id is FieldId.CAPTURE_TIMER_STOP_TIME:
            return self.capture_timer.stop_time
        return getattr(self, _ATTRIBUTES[field_id])

    def with_value(self, field_id: FieldId, value: Any) -> "ConfigurationRecord":
        """Return a new snapshot differing only in ``field_id``.

        Callers are expected to pass an already validated value.
        """

        if field_id is FieldId.CAPTURE_TIMER_ENABLED:
            return replace(self, capture_timer=replace(self.capture_timer, enabled=value))
        if field_id is FieldId.CAPTURE_TIMER_START_TIME:
            return replace(self, capture_timer=replace(self.capture_timer, start_time=value))
        if field_id is FieldId.CAPTURE_TIMER_STOP_TIME:
            return replace(self, capture_timer=replace(self.capture_timer, stop_time=value))
        return replace(self, **{_ATTRIBUTES[field_id]: value})


_ATTRIBUTES: Dict[FieldId, str] = {
    FieldId.MODE: "mode",
    FieldId.PHOTO_RESOLUTION: "photo_resolution",
    FieldId.VIDEO_RESOLUTION: "video_resolution",
    FieldId.VIDEO_LENGTH: "video_length",
    FieldId.PHOTO_DELAY: "photo_delay",
    FieldId.MULTI_SHOT_MODE: "multi_shot_mode",
    FieldId.TEMP_UNITS: "temp_units",
    FieldId.CAMERA_NAME: "camera_name",
    FieldId.IMAGE_DATA_STRIP_ENABLED: "image_data_strip_enabled",
    FieldId.MOTION_TEST_ENABLED: "motion_test_enabled",
    FieldId.MOTION_DETECTION_RANGE: "motion_detection_range",
    FieldId.TRIGGER_SPEED: "trigger_speed",
    FieldId.BATTERY_TYPE: "battery_type",
    FieldId.TIME_LAPSE_ENABLED: "time_lapse_enabled",
    FieldId.TIME_LAPSE_FREQUENCY: "time_lapse_frequency",
    FieldId.TIME_LAPSE_PERIOD: "time_lapse_period",
    FieldId.SMART_IR_VIDEO_ENABLED: "smart_ir_video_enabled",
    FieldId.IR_FLASH_RANGE: "ir_flash_range",
    FieldId.SD_MANAGEMENT_ENABLED: "sd_management_enabled",
    FieldId.LANGUAGE: "language",
    FieldId.HDR_ENABLED: "hdr_enabled",
    FieldId.CURRENT_DEVICE_TIME: "current_device_time",
}


def _option(field_id: FieldId, label: str, domain: Type[LabelledOption]) -> FieldSpec:
    return FieldSpec(field_id, label, FieldKind.OPTION, domain)


def _toggle(field_id: FieldId, label: str) -> FieldSpec:
    return FieldSpec(field_id, label, FieldKind.BOOLEAN)


# Dashboard order follows the camera's status screen.
FIELD_SPECS: Tuple[FieldSpec, ...] = (
    _option(FieldId.MODE, "Mode", CameraMode),
    _option(FieldId.VIDEO_RESOLUTION, "Video Resolution", VideoResolution),
    _option(FieldId.VIDEO_LENGTH, "Video Length", VideoLength),
    _option(FieldId.PHOTO_RESOLUTION, "Photo Quality", PhotoResolution),
    _option(FieldId.MULTI_SHOT_MODE, "Multi Shot", MultiShotMode),
    _option(FieldId.PHOTO_DELAY, "Photo Delay", PhotoDelay),
    _option(FieldId.MOTION_DETECTION_RANGE, "Motion Detection", MotionDetectionRange),
    _option(FieldId.TRIGGER_SPEED, "Trigger Speed", TriggerSpeed),
    _option(FieldId.TEMP_UNITS, "Temperature Units", TempUnits),
    _toggle(FieldId.SD_MANAGEMENT_ENABLED, "SD Management"),
    _toggle(FieldId.IMAGE_DATA_STRIP_ENABLED, "Image Data Strip"),
    _option(FieldId.BATTERY_TYPE, "Battery Type", BatteryType),
    _option(FieldId.IR_FLASH_RANGE, "IR Flash Range", IrFlashRange),
    _toggle(FieldId.SMART_IR_VIDEO_ENABLED, "Smart IR Video"),
    _toggle(FieldId.HDR_ENABLED, "HDR"),
    _toggle(FieldId.MOTION_TEST_ENABLED, "Motion Test"),
    _option(FieldId.LANGUAGE, "Language", Language),
    FieldSpec(FieldId.CAMERA_NAME, "Camera Name", FieldKind.TEXT),
    _toggle(FieldId.TIME_LAPSE_ENABLED, "Time Lapse"),
    _option(FieldId.TIME_LAPSE_FREQUENCY, "Time Lapse Frequency", TimeLapseFrequency),
    _option(FieldId.TIME_LAPSE_PERIOD, "Time Lapse Period", TimeLapsePeriod),
    _toggle(FieldId.CAPTURE_TIMER_ENABLED, "Capture Timer"),
    FieldSpec(FieldId.CAPTURE_TIMER_START_TIME, "Timer Start", FieldKind.TIME_OF_DAY, editable=False),
    FieldSpec(FieldId.CAPTURE_TIMER_STOP_TIME, "Timer Stop", FieldKind.TIME_OF_DAY, editable=False),
    FieldSpec(FieldId.CURRENT_DEVICE_TIME, "Device Time", FieldKind.TIMESTAMP, editable=False),
)

FIELD_SPECS_BY_ID: Dict[FieldId, FieldSpec] = {spec.field_id: spec for spec in FIELD_SPECS}

DEFAULT_RECORD = ConfigurationRecord()


def default_record() -> ConfigurationRecord:
    """Return the factory default snapshot."""

    return DEFAULT_RECORD


__all__ = [
    "CAMERA_NAME_MAX_LENGTH",
    "CAPTURE_TIMER_START",
    "CAPTURE_TIMER_STOP",
    "CaptureTimer",
    "ConfigurationRecord",
    "DEFAULT_DEVICE_TIME",
    "DEFAULT_RECORD",
    "FIELD_SPECS",
    "FIELD_SPECS_BY_ID",
    "FieldId",
    "FieldKind",
    "FieldSpec",
    "default_record",
]
