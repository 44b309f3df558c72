from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import to_iso
from ..common.http import STORE_FAILURE_MESSAGE, error_response, json_body
from ..core.enums import ScanOutcome
from ..core.exceptions import StoreError, ValidationError
from ..container import Container

_OUTCOME_MESSAGES = {
    ScanOutcome.INSERTED: ("Attendance recorded successfully!", 201),
    ScanOutcome.UPDATED: ("Attendance updated successfully!", 200),
    ScanOutcome.DEDUPLICATED: ("Already scanned recently, still in cooldown", 200),
}


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        try:
            return jsonify([r.as_dict() for r in service.list_records()])
        except StoreError:
            return error_response(STORE_FAILURE_MESSAGE, 503)

    @app.route("/api/attendance/latest", methods=["GET"], endpoint="attendance_latest")
    def attendance_latest():
        try:
            return jsonify([r.as_dict() for r in service.list_latest()])
        except StoreError:
            return error_response(STORE_FAILURE_MESSAGE, 503)

    @app.route("/api/attendance/history/<uid>", methods=["GET"], endpoint="attendance_history")
    def attendance_history(uid: str):
        try:
            return jsonify([r.as_dict() for r in service.history_for(uid)])
        except ValidationError as e:
            return error_response(str(e), 400)
        except StoreError:
            return error_response(STORE_FAILURE_MESSAGE, 503)

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_scan")
    def attendance_scan():
        data = json_body()
        try:
            result = service.record_scan(data.get("uid"), data.get("name"))
        except ValidationError as e:
            return error_response(str(e), 400)
        except StoreError:
            return error_response(STORE_FAILURE_MESSAGE, 503)

        message, status = _OUTCOME_MESSAGES[result.outcome]
        payload = {"message": message, "outcome": result.outcome.value, **result.record.as_dict()}
        if result.outcome == ScanOutcome.DEDUPLICATED:
            payload["lastScan"] = to_iso(result.last_scan)
            payload["cooldownSeconds"] = int(service.cooldown.total_seconds())
        return jsonify(payload), status
