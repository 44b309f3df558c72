from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_SCAN_COOLDOWN_SECONDS, MAX_ALERT_HISTORY
from .database.connection import DBConfig, DatabaseConnection
from .tracking.service import TrackerService
from .tracking.state import TrackerState


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: AttendanceRepository
    tracker_state: TrackerState

    attendance_service: AttendanceService
    tracker_service: TrackerService


def build_container(
    *,
    db_config: dict,
    scan_cooldown_seconds: int = DEFAULT_SCAN_COOLDOWN_SECONDS,
    alert_history_limit: int = MAX_ALERT_HISTORY,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    tracker_state = TrackerState(history_limit=alert_history_limit)

    attendance_service = AttendanceService(attendance_repo, cooldown_seconds=scan_cooldown_seconds)
    tracker_service = TrackerService(tracker_state)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        tracker_state=tracker_state,
        attendance_service=attendance_service,
        tracker_service=tracker_service,
    )
