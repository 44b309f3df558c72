from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence, Tuple

from ..common.datetime_utils import from_db, to_db
from ..core.enums import ScanOutcome
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# MySQL reports 1 for a fresh row, 2 for an updated one and 0 when the
# duplicate row was left as is (FOUND_ROWS disabled on the connection).
_ROWCOUNT_OUTCOMES = {
    1: ScanOutcome.INSERTED,
    2: ScanOutcome.UPDATED,
    0: ScanOutcome.DEDUPLICATED,
}


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["id"]),
        uid=r["uid"],
        name=r["name"],
        timestamp=from_db(r["timestamp"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_scan(
        self,
        *,
        uid: str,
        name: str,
        now: datetime,
        cooldown_cutoff: datetime,
    ) -> Tuple[ScanOutcome, AttendanceRecord]:
        cutoff = to_db(cooldown_cutoff)
        with db_cursor(self._conn_factory, operation="attendance.upsert_scan", key=uid) as (_, cur):
            # `name` is assigned first so its guard still reads the old timestamp.
            cur.execute(
                """
                INSERT INTO attendance(uid, name, timestamp)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name = IF(timestamp <= %s, VALUES(name), name),
                    timestamp = IF(timestamp <= %s, VALUES(timestamp), timestamp)
                """,
                (uid, name, to_db(now), cutoff, cutoff),
            )
            outcome = _ROWCOUNT_OUTCOMES.get(cur.rowcount)
            if outcome is None:
                logger.error("Unexpected rowcount %r during attendance.upsert_scan (key=%r)", cur.rowcount, uid)
                raise StoreError("attendance.upsert_scan", uid)

            cur.execute(
                """
                SELECT id, uid, name, timestamp
                FROM attendance
                WHERE uid=%s
                """,
                (uid,),
            )
            r = fetchone(cur)
            if not r:
                logger.error("Row missing after attendance.upsert_scan (key=%r)", uid)
                raise StoreError("attendance.upsert_scan", uid)
            return outcome, _to_record(r)

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="attendance.list_all") as (_, cur):
            cur.execute(
                """
                SELECT id, uid, name, timestamp
                FROM attendance
                ORDER BY timestamp DESC, id DESC
                """
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_latest(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="attendance.list_latest") as (_, cur):
            cur.execute(
                """
                SELECT a.id, a.uid, a.name, a.timestamp
                FROM attendance a
                JOIN (
                    SELECT uid, MAX(timestamp) AS last_ts
                    FROM attendance
                    GROUP BY uid
                ) latest ON latest.uid = a.uid AND latest.last_ts = a.timestamp
                ORDER BY a.timestamp DESC
                """
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_uid(self, uid: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="attendance.list_for_uid", key=uid) as (_, cur):
            cur.execute(
                """
                SELECT id, uid, name, timestamp
                FROM attendance
                WHERE uid=%s
                ORDER BY timestamp DESC, id DESC
                """,
                (uid,),
            )
            return [_to_record(r) for r in fetchall(cur)]
