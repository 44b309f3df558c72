from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from field_telemetry.core.exceptions import StoreError

from tests.conftest import FakeConnFactory


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_index_and_dbtest(client):
    assert client.get("/").get_data(as_text=True) == "Backend is live!"
    assert client.get("/api/dbtest").get_json() == {"success": True}


def test_dbtest_reports_store_down(container, client):
    object.__setattr__(container, "conn", FakeConnFactory(unreachable=True))

    resp = client.get("/api/dbtest")

    assert resp.status_code == 503
    assert resp.get_json() == {"error": "DB test failed"}


def test_sos_round_trip(client):
    resp = client.post("/api/alert", json={"device_id": "dev1", "lat": 12.5, "lon": 77.6})

    assert resp.status_code == 200
    alert = resp.get_json()["alert"]
    assert {k: alert[k] for k in ("type", "device_id", "lat", "lon")} == {
        "type": "SOS",
        "device_id": "dev1",
        "lat": 12.5,
        "lon": 77.6,
    }
    _parse_iso(alert["timestamp"])

    latest = client.get("/api/alert").get_json()
    assert latest == {"alert": alert, "message": "Active alert"}


def test_sos_missing_fields_is_client_error(client):
    resp = client.post("/api/alert", json={"device_id": "dev1"})

    assert resp.status_code == 400
    assert "lat" in resp.get_json()["error"] and "lon" in resp.get_json()["error"]
    assert client.get("/api/alert").get_json() == {"alert": None, "message": "No active alerts"}


def test_malformed_body_is_treated_as_empty(client):
    resp = client.post("/api/alert", data="not json", content_type="application/json")

    assert resp.status_code == 400


def test_alert_clear(client):
    client.post("/api/alert", json={"device_id": "dev1", "lat": 12.5, "lon": 77.6})

    assert client.post("/api/alert/clear").get_json() == {"message": "Alert cleared"}
    assert client.get("/api/alert").get_json()["alert"] is None
    assert len(client.get("/api/alerts/history").get_json()) == 1


def test_gps_endpoints(client):
    assert client.get("/api/gps").get_json() == {"gps": None}
    assert client.post("/api/gps", json={}).status_code == 400

    resp = client.post("/api/gps", json={"gps": "12.5,77.6"})

    assert resp.get_json() == {"message": "GPS stored successfully"}
    assert client.get("/api/gps").get_json() == {"gps": "12.5,77.6"}


def test_fence_flow(client):
    assert client.get("/api/fence").get_json() == {"breach": False}

    assert client.post("/api/fence/breach", json={}).get_json() == {"success": True}
    assert client.get("/api/fence").get_json() == {"breach": True}

    history = client.get("/api/alerts/history").get_json()
    assert history[0]["type"] == "GEOFENCE"
    assert history[0]["device_id"] == "unknown"
    assert history[0]["lat"] is None

    assert client.post("/api/fence/clear").get_json() == {"success": True}
    assert client.get("/api/fence").get_json() == {"breach": False}


def test_history_delete(client):
    client.post("/api/alert", json={"device_id": "dev1", "lat": 12.5, "lon": 77.6})
    client.post("/api/fence/breach", json={"device_id": "dev2"})

    history = client.get("/api/alerts/history").get_json()
    assert [a["type"] for a in history] == ["GEOFENCE", "SOS"]

    assert client.delete("/api/alerts/history").get_json() == {"message": "Alerts history cleared"}
    assert client.get("/api/alerts/history").get_json() == []


def test_attendance_duplicate_scan_reports_last_scan(client, monkeypatch):
    first = datetime(2026, 2, 1, 8, 0, 0, tzinfo=timezone.utc)
    times = iter([first, first + timedelta(seconds=1)])
    monkeypatch.setattr("field_telemetry.attendance.service.now_utc", lambda: next(times))

    r1 = client.post("/api/attendance", json={"uid": "A1", "name": "Sam"})
    r2 = client.post("/api/attendance", json={"uid": "A1", "name": "Sam"})

    assert r1.status_code == 201
    assert r1.get_json()["outcome"] == "INSERTED"
    assert r2.status_code == 200
    body = r2.get_json()
    assert body["outcome"] == "DEDUPLICATED"
    assert body["lastScan"] == r1.get_json()["timestamp"]
    assert _parse_iso(body["lastScan"]) == first


def test_attendance_update_after_cooldown(client, monkeypatch):
    first = datetime(2026, 2, 1, 8, 0, 0, tzinfo=timezone.utc)
    times = iter([first, first + timedelta(minutes=2)])
    monkeypatch.setattr("field_telemetry.attendance.service.now_utc", lambda: next(times))

    client.post("/api/attendance", json={"uid": "A1", "name": "Sam"})
    resp = client.post("/api/attendance", json={"uid": "A1", "name": "Sam"})

    assert resp.get_json()["outcome"] == "UPDATED"
    assert _parse_iso(resp.get_json()["timestamp"]) == first + timedelta(minutes=2)


def test_attendance_queries(client):
    client.post("/api/attendance", json={"uid": "A1", "name": "Sam"})
    client.post("/api/attendance", json={"uid": "B2", "name": "Kim"})

    assert {r["uid"] for r in client.get("/api/attendance").get_json()} == {"A1", "B2"}
    assert len(client.get("/api/attendance/latest").get_json()) == 2
    history = client.get("/api/attendance/history/A1").get_json()
    assert [r["name"] for r in history] == ["Sam"]
    assert client.get("/api/attendance/history/ZZ").get_json() == []


def test_attendance_validation(client):
    resp = client.post("/api/attendance", json={"uid": "A1"})

    assert resp.status_code == 400
    assert "name" in resp.get_json()["error"]


def test_store_failure_is_opaque_server_error(client, attendance_repo):
    attendance_repo.fail_with = StoreError("attendance.upsert_scan", "A1")

    post = client.post("/api/attendance", json={"uid": "A1", "name": "Sam"})
    get = client.get("/api/attendance")

    assert post.status_code == 503
    assert post.get_json() == {"error": "Database operation failed"}
    assert get.status_code == 503


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_cors_header_on_api(client):
    resp = client.get("/api/fence", headers={"Origin": "http://example.com"})

    assert resp.headers.get("Access-Control-Allow-Origin") in {"*", "http://example.com"}


def test_malformed_breach_still_sets_flag_and_history(client):
    r1 = client.post("/api/fence/breach", json={"device_id": "dev9", "lat": "n/a"})
    r2 = client.post("/api/fence/breach", json={"device_id": 42})

    assert r1.status_code == 200 and r2.status_code == 200
    assert client.get("/api/fence").get_json() == {"breach": True}
    history = client.get("/api/alerts/history").get_json()
    assert [(a["device_id"], a["lat"]) for a in history] == [("42", None), ("dev9", None)]


def test_non_finite_sos_is_rejected_and_history_stays_valid_json(client):
    resp = client.post("/api/alert", json={"device_id": "d", "lat": "NaN", "lon": "inf"})

    assert resp.status_code == 400
    body = client.get("/api/alerts/history").get_data(as_text=True)
    assert json.loads(body, parse_constant=_reject_constant) == []


def _reject_constant(name):
    raise ValueError(name)
