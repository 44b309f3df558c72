from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import to_iso
from ..core.enums import ScanOutcome


@dataclass(frozen=True)
class AttendanceRecord:
    """Current presence row for one worker badge/tag."""

    record_id: int
    uid: str
    name: str
    timestamp: datetime

    def as_dict(self) -> dict:
        return {
            "id": self.record_id,
            "uid": self.uid,
            "name": self.name,
            "timestamp": to_iso(self.timestamp),
        }


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan plus the row as stored afterwards.

    For DEDUPLICATED the record is untouched, so `record.timestamp` is the
    previous scan still inside its cooldown.
    """

    outcome: ScanOutcome
    record: AttendanceRecord

    @property
    def last_scan(self) -> datetime:
        return self.record.timestamp
