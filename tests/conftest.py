from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Optional

import mysql.connector
import pytest

from field_telemetry.attendance.model import AttendanceRecord
from field_telemetry.attendance.service import AttendanceService
from field_telemetry.container import Container
from field_telemetry.core.enums import ScanOutcome
from field_telemetry.core.exceptions import StoreError
from field_telemetry.tracking.service import TrackerService
from field_telemetry.tracking.state import TrackerState


class InMemoryAttendance:
    """Keyed by uid, with the same guarded-upsert rule as the MySQL statement."""

    def __init__(self):
        self._by_uid: dict[str, AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()
        self.writes = 0
        self.fail_with: Optional[StoreError] = None

    def upsert_scan(self, *, uid: str, name: str, now: datetime, cooldown_cutoff: datetime):
        if self.fail_with:
            raise self.fail_with
        with self._lock:
            existing = self._by_uid.get(uid)
            if existing is None:
                self._id += 1
                rec = AttendanceRecord(record_id=self._id, uid=uid, name=name, timestamp=now)
                self._by_uid[uid] = rec
                self.writes += 1
                return ScanOutcome.INSERTED, rec
            if existing.timestamp <= cooldown_cutoff:
                rec = AttendanceRecord(record_id=existing.record_id, uid=uid, name=name, timestamp=now)
                self._by_uid[uid] = rec
                self.writes += 1
                return ScanOutcome.UPDATED, rec
            return ScanOutcome.DEDUPLICATED, existing

    def list_all(self):
        if self.fail_with:
            raise self.fail_with
        return sorted(self._by_uid.values(), key=lambda r: r.timestamp, reverse=True)

    def list_latest(self):
        return self.list_all()

    def list_for_uid(self, uid: str):
        if self.fail_with:
            raise self.fail_with
        rec = self._by_uid.get(uid)
        return [rec] if rec else []

    def get(self, uid: str) -> Optional[AttendanceRecord]:
        return self._by_uid.get(uid)


class FakeCursor:
    def __init__(self, rows=None, rowcount: int = 0, error: Exception | None = None):
        self.rows = list(rows or [])
        self.rowcount = rowcount
        self.error = error
        self.executed: list[tuple[str, tuple]] = []
        self.closed = False

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), tuple(params)))
        if self.error:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary: bool = True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, cursor: FakeCursor | None = None, unreachable: bool = False):
        self.cursor = cursor or FakeCursor(rows=[{"ok": 1}])
        self.unreachable = unreachable
        self.connections: list[FakeConnection] = []

    def connect(self):
        if self.unreachable:
            raise mysql.connector.Error("Can't connect to MySQL server")
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def conn_factory() -> FakeConnFactory:
    return FakeConnFactory()


@pytest.fixture
def container(attendance_repo, conn_factory) -> Container:
    state = TrackerState()
    return Container(
        conn=conn_factory,
        attendance_repo=attendance_repo,
        tracker_state=state,
        attendance_service=AttendanceService(attendance_repo, cooldown_seconds=60),
        tracker_service=TrackerService(state),
    )


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from field_telemetry.main import create_app

    app = create_app(container)
    return app.test_client()
