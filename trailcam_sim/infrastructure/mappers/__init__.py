"""Infrastructure mappers bridging persistence and domain layers."""

from .record_mapper import RecordMapper

__all__ = ["RecordMapper"]
