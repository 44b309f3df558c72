"""Example: drive the service layer without Flask.

Controllers are a thin layer; the rules live in the services.
"""

import importlib

from config import get_settings_module

from field_telemetry.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    tracker = container.tracker_service
    tracker.report_sos("dev1", 12.5, 77.6)
    tracker.report_geofence_breach("dev1")
    print([a.as_dict() for a in tracker.get_history()])

    result = container.attendance_service.record_scan("A1", "Sam")
    print(result.outcome.value, result.record.as_dict())


if __name__ == "__main__":
    main()
