from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    tracker = container.tracker_service

    # ---- SOS alerts ----

    @app.route("/api/alert", methods=["POST"], endpoint="alert_report")
    def alert_report():
        data = json_body()
        try:
            alert = tracker.report_sos(data.get("device_id"), data.get("lat"), data.get("lon"))
        except ValidationError as e:
            return error_response(str(e), 400)
        return jsonify({"message": "Alert received", "alert": alert.as_dict()})

    @app.route("/api/alert", methods=["GET"], endpoint="alert_latest")
    def alert_latest():
        alert = tracker.get_latest_alert()
        return jsonify(
            {
                "alert": alert.as_dict() if alert else None,
                "message": "Active alert" if alert else "No active alerts",
            }
        )

    @app.route("/api/alert/clear", methods=["POST"], endpoint="alert_clear")
    def alert_clear():
        tracker.clear_alert()
        return jsonify({"message": "Alert cleared"})

    # ---- GPS ----

    @app.route("/api/gps", methods=["POST"], endpoint="gps_record")
    def gps_record():
        data = json_body()
        try:
            tracker.record_gps(data.get("gps"))
        except ValidationError as e:
            return error_response(str(e), 400)
        return jsonify({"message": "GPS stored successfully"})

    @app.route("/api/gps", methods=["GET"], endpoint="gps_latest")
    def gps_latest():
        return jsonify({"gps": tracker.get_latest_gps()})

    # ---- Geofence ----

    @app.route("/api/fence/breach", methods=["POST"], endpoint="fence_breach")
    def fence_breach():
        data = json_body()
        try:
            tracker.report_geofence_breach(data.get("device_id"), data.get("lat"), data.get("lon"))
        except ValidationError as e:
            return error_response(str(e), 400)
        return jsonify({"success": True})

    @app.route("/api/fence", methods=["GET"], endpoint="fence_status")
    def fence_status():
        return jsonify({"breach": tracker.get_fence_status()})

    @app.route("/api/fence/clear", methods=["POST"], endpoint="fence_clear")
    def fence_clear():
        tracker.clear_fence()
        return jsonify({"success": True})

    # ---- History ----

    @app.route("/api/alerts/history", methods=["GET"], endpoint="alerts_history")
    def alerts_history():
        return jsonify([a.as_dict() for a in tracker.get_history()])

    @app.route("/api/alerts/history", methods=["DELETE"], endpoint="alerts_history_clear")
    def alerts_history_clear():
        tracker.clear_history()
        return jsonify({"message": "Alerts history cleared"})
