from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, Tuple

from ..core.enums import ScanOutcome
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert_scan(
        self,
        *,
        uid: str,
        name: str,
        now: datetime,
        cooldown_cutoff: datetime,
    ) -> Tuple[ScanOutcome, AttendanceRecord]:
        """Insert, refresh or leave the uid's row in one atomic store call.

        The row is refreshed only when its timestamp is at or before
        `cooldown_cutoff`.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_latest(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_uid(self, uid: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
