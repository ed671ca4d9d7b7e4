"""Explicit success/failure values returned by validation and store writes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class RejectionReason(str, Enum):
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    INVALID_DATE = "InvalidDate"
    INVALID_TEXT = "InvalidText"
    UNKNOWN_FIELD = "UnknownField"
    READ_ONLY_FIELD = "ReadOnlyField"


@dataclass(frozen=True)
class Accepted:
    """Successful outcome carrying the normalised value or the new snapshot."""

    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """Failed outcome; ``message`` is meant for display to the operator."""

    reason: RejectionReason
    message: str

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Accepted, Rejected]

__all__ = ["Accepted", "Outcome", "Rejected", "RejectionReason"]
