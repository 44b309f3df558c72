from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import optional_coordinate, require_coordinate, require_non_empty, require_present
from ..core.constants import UNKNOWN_DEVICE
from ..core.enums import AlertType
from ..core.exceptions import ValidationError
from .model import Alert
from .state import TrackerState

logger = logging.getLogger(__name__)


class TrackerService:
    def __init__(self, state: TrackerState):
        self._state = state

    @staticmethod
    def _device_id_text(device_id: Any) -> Any:
        # Chip ids often arrive as JSON numbers.
        if isinstance(device_id, (int, float)) and not isinstance(device_id, bool):
            return str(device_id)
        return device_id

    @staticmethod
    def _lenient_coordinate(value: Any, field_name: str) -> Optional[float]:
        try:
            return optional_coordinate(value, field_name)
        except ValidationError:
            logger.warning("Geofence breach with unusable %s %r; storing null", field_name, value)
            return None

    @staticmethod
    def _missing_sos_fields(device_id: Any, lat: Any, lon: Any) -> list[str]:
        missing = []
        if device_id is None or device_id == 0 or (isinstance(device_id, str) and not device_id.strip()):
            missing.append("device_id")
        for field_name, value in (("lat", lat), ("lon", lon)):
            if value is None or value == "" or (not isinstance(value, bool) and value == 0):
                missing.append(field_name)
        return missing

    def report_sos(self, device_id: Any, lat: Any, lon: Any, *, now: Optional[datetime] = None) -> Alert:
        """Validate an SOS fix, then make it the latest alert and log it to history."""

        missing = self._missing_sos_fields(device_id, lat, lon)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        alert = Alert(
            type=AlertType.SOS,
            device_id=require_non_empty(self._device_id_text(device_id), "device_id"),
            lat=require_coordinate(lat, "lat"),
            lon=require_coordinate(lon, "lon"),
            timestamp=now or now_utc(),
        )
        self._state.push_sos(alert)
        logger.warning("SOS alert received: %s", alert.as_dict())
        return alert

    def get_latest_alert(self) -> Optional[Alert]:
        return self._state.latest_alert()

    def clear_alert(self) -> None:
        self._state.clear_alert()
        logger.info("SOS alert cleared")

    def report_geofence_breach(
        self,
        device_id: Any = None,
        lat: Any = None,
        lon: Any = None,
        *,
        now: Optional[datetime] = None,
    ) -> Alert:
        """Never rejected: malformed fields are coerced or dropped so the breach is kept."""

        if device_id is not None and not isinstance(device_id, str):
            logger.warning("Geofence breach with non-string device_id %r; coercing", device_id)
            device_id = str(device_id)
        alert = Alert(
            type=AlertType.GEOFENCE,
            device_id=(device_id or "").strip() or UNKNOWN_DEVICE,
            lat=self._lenient_coordinate(lat, "lat"),
            lon=self._lenient_coordinate(lon, "lon"),
            timestamp=now or now_utc(),
        )
        self._state.push_breach(alert)
        logger.warning("Geofence breach detected: %s", alert.as_dict())
        return alert

    def get_fence_status(self) -> bool:
        return self._state.fence_breached()

    def clear_fence(self) -> None:
        self._state.clear_fence()
        logger.info("Geofence breach flag cleared")

    def record_gps(self, payload: Any) -> None:
        self._state.set_gps(require_present(payload, "GPS data"))
        logger.info("GPS location updated: %s", payload)

    def get_latest_gps(self) -> Any:
        return self._state.latest_gps()

    def get_history(self) -> List[Alert]:
        return self._state.history()

    def clear_history(self) -> None:
        self._state.clear_history()
        logger.info("Alerts history cleared")
