from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_fields, require_non_empty
from ..core.constants import DEFAULT_SCAN_COOLDOWN_SECONDS
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Records badge scans with a per-uid cooldown.

    A scan for an unknown uid inserts a row. A scan inside the cooldown of the
    stored one is reported as a duplicate and writes nothing. Anything older
    refreshes the row's timestamp and name. The decision and the write happen
    in one repository call so concurrent scans cannot both win.
    """

    def __init__(self, attendance: AttendanceRepository, *, cooldown_seconds: int = DEFAULT_SCAN_COOLDOWN_SECONDS):
        if int(cooldown_seconds) < 0:
            raise ValueError("cooldown_seconds must be >= 0")
        self._attendance = attendance
        self._cooldown = timedelta(seconds=int(cooldown_seconds))

    @property
    def cooldown(self) -> timedelta:
        return self._cooldown

    def record_scan(self, uid: Any, name: Any, *, now: datetime | None = None) -> ScanResult:
        require_fields({"uid": uid, "name": name}, "uid", "name")
        uid = require_non_empty(uid, "uid")
        name = require_non_empty(name, "name")

        now = now or now_utc()
        outcome, record = self._attendance.upsert_scan(
            uid=uid,
            name=name,
            now=now,
            cooldown_cutoff=now - self._cooldown,
        )
        logger.info("Attendance scan uid=%s outcome=%s", uid, outcome.value)
        return ScanResult(outcome=outcome, record=record)

    def list_records(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all()

    def list_latest(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_latest()

    def history_for(self, uid: str) -> Sequence[AttendanceRecord]:
        if not uid or not uid.strip():
            raise ValidationError("Missing required fields: uid")
        return self._attendance.list_for_uid(uid.strip())
