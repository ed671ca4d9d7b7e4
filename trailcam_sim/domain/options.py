"""Closed option domains for every enumerated camera setting."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class LabelledOption(str, Enum):
    """Enum whose value is the label shown on the camera and stored on disk."""

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def labels(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def from_text(cls, text: object) -> Optional["LabelledOption"]:
        """Return the member matching ``text`` by label or name, else ``None``."""

        if isinstance(text, cls):
            return text
        if isinstance(text, Enum) or not isinstance(text, str):
            return None
        for member in cls:
            if text == member.value or text == member.name:
                return member
        return None

    def __str__(self) -> str:
        return self.value


class CameraMode(LabelledOption):
    TRAIL_CAM = "TRAIL CAM"
    TIMELAPSE_PLUS = "TIMELAPSE PLUS"
    VIDEO = "VIDEO"


class PhotoResolution(LabelledOption):
    MP_4 = "4MP"
    MP_8 = "8MP"
    MP_12 = "12MP"
    MP_24 = "24MP"


class VideoResolution(LabelledOption):
    FHD_30 = "1920x1080 30fps"
    FHD_60 = "1920x1080 60fps"


class VideoLength(LabelledOption):
    SEC_5 = "5s"
    SEC_10 = "10s"
    SEC_20 = "20s"
    SEC_30 = "30s"
    MIN_1 = "1min"
    MIN_2 = "2min"


class PhotoDelay(LabelledOption):
    SEC_1 = "1s"
    SEC_5 = "5s"
    SEC_10 = "10s"
    SEC_20 = "20s"
    SEC_30 = "30s"
    MIN_1 = "1min"
    MIN_5 = "5min"
    MIN_10 = "10min"
    MIN_30 = "30min"
    MIN_60 = "60min"


class MultiShotMode(LabelledOption):
    SINGLE = "SINGLE"
    MULTI_SHOT = "MULTI SHOT (2-8 shots)"
    RAPID_FIRE = "RAPID FIRE (2-8 shots)"


class TempUnits(LabelledOption):
    FAHRENHEIT = "Fahrenheit"
    CELSIUS = "Celsius"


class MotionDetectionRange(LabelledOption):
    NORMAL_RANGE = "NORMAL RANGE (60ft)"
    LONG_RANGE = "LONG RANGE (100ft)"


class TriggerSpeed(LabelledOption):
    NORMAL = "NORMAL (0.7s)"
    FAST = "FAST (0.1s)"


class BatteryType(LabelledOption):
    ALKALINE = "Alkaline"
    LITHIUM = "Lithium"
    RECHARGEABLE = "Rechargeable"


class TimeLapseFrequency(LabelledOption):
    SEC_5 = "5s"
    SEC_10 = "10s"
    SEC_20 = "20s"
    SEC_30 = "30s"
    MIN_1 = "1min"
    MIN_2 = "2min"
    MIN_5 = "5min"
    MIN_10 = "10min"
    MIN_30 = "30min"
    MIN_60 = "60min"


class TimeLapsePeriod(LabelledOption):
    ALL_DAY = "ALL DAY"
    HOUR_1 = "1 HOUR"
    HOUR_2 = "2 HOUR"
    HOUR_3 = "3 HOUR"
    HOUR_4 = "4 HOUR"


class IrFlashRange(LabelledOption):
    ECONOMY = "Economy"
    LONG_RANGE = "Long Range"
    FAST_MOTION = "Fast Motion"


class Language(LabelledOption):
    ENGLISH = "English"


__all__ = [
    "LabelledOption",
    "CameraMode",
    "PhotoResolution",
    "VideoResolution",
    "VideoLength",
    "PhotoDelay",
    "MultiShotMode",
    "TempUnits",
    "MotionDetectionRange",
    "TriggerSpeed",
    "BatteryType",
    "TimeLapseFrequency",
    "TimeLapsePeriod",
    "IrFlashRange",
    "Language",
]
