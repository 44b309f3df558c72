from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import AlertType


@dataclass(frozen=True)
class Alert:
    """One SOS or geofence event, held in memory only."""

    type: AlertType
    device_id: str
    lat: Optional[float]
    lon: Optional[float]
    timestamp: datetime

    def as_dict(self) -> dict:
        return {
            "type": self.type.value,
            "device_id": self.device_id,
            "lat": self.lat,
            "lon": self.lon,
            "timestamp": to_iso(self.timestamp),
        }
