"""Field Telemetry backend.

Feature modules (attendance, tracking, health) each carry a thin Flask
controller over a service layer. Attendance persists to MySQL through a
repository; tracking keeps alert/GPS/geofence state in process memory.
"""
