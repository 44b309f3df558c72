from __future__ import annotations

from enum import Enum


class ScanOutcome(str, Enum):
    """Result of an attendance scan under the cooldown policy."""

    INSERTED = "INSERTED"
    UPDATED = "UPDATED"
    DEDUPLICATED = "DEDUPLICATED"


class AlertType(str, Enum):
    SOS = "SOS"
    GEOFENCE = "GEOFENCE"
