# tests/test_attendance_api.py
from http import HTTPStatus

from app.api.routes import attendance as attendance_module


def _payload(**overrides):
    payload = {
        "today": "2025-11-10",
        "users": [
            {"id": "u1", "name": "Asha", "email": "asha@example.com", "is_checked_in": True},
            {"id": "u2", "name": "Ben", "email": "ben@example.com"},
            {"id": "u3", "name": "Chen", "email": "chen@example.com"},
        ],
        "events": [
            {"id": "i1", "user_id": "u1", "kind": "check-in", "timestamp": "2025-11-10T09:00:00Z"},
            {"id": "o1", "user_id": "u1", "kind": "check-out", "timestamp": "2025-11-10T11:00:00Z"},
            {"id": "i2", "user_id": "u2", "kind": "check-in", "timestamp": 1762765200000},
        ],
    }
    payload.update(overrides)
    return payload


def test_reconcile_endpoint_returns_sessions_and_stats(client):
    response = client.post("/attendance/reconcile", json=_payload())

    assert response.status_code == HTTPStatus.OK
    data = response.json()

    assert data["today"] == "2025-11-10"
    assert len(data["sessions"]) == 2
    assert set(data["user_stats"]) == {"u1", "u2", "u3"}
    assert data["user_stats"]["u1"]["total_minutes_today"] == 120
    assert data["org_stats"] == {
        "total_users": 3,
        "checked_in_users": 1,
        "today_attendance": 2,
        "avg_hours_today": 2.0,
    }
    assert data["anomalies"] == []


def test_reconcile_endpoint_reports_unknown_users(client):
    payload = _payload()
    payload["events"].append(
        {"id": "g1", "user_id": "ghost", "kind": "check-in", "timestamp": "2025-11-10T08:00:00Z"}
    )

    response = client.post("/attendance/reconcile", json=payload)

    assert response.status_code == HTTPStatus.OK
    anomalies = response.json()["anomalies"]
    assert len(anomalies) == 1
    assert anomalies[0]["kind"] == "UNKNOWN_USER"
    assert anomalies[0]["event_id"] == "g1"


def test_reconcile_endpoint_rejects_bad_timestamp(client):
    payload = _payload()
    payload["events"].append(
        {"id": "bad", "user_id": "u1", "kind": "check-out", "timestamp": "half past nine"}
    )

    response = client.post("/attendance/reconcile", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    detail = response.json()["detail"]
    assert detail["event_id"] == "bad"
    assert "invalid timestamp" in detail["message"].lower()


def test_reconcile_endpoint_rejects_unknown_kind(client):
    payload = _payload()
    payload["events"][0]["kind"] = "lunch-break"

    response = client.post("/attendance/reconcile", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_reconcile_endpoint_empty_snapshot(client):
    response = client.post(
        "/attendance/reconcile", json={"today": "2025-11-10", "events": [], "users": []}
    )

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data["sessions"] == []
    assert data["user_stats"] == {}
    assert data["org_stats"]["avg_hours_today"] == 0.0


def test_reconcile_endpoint_defaults_today_from_server_clock(monkeypatch, client):
    from datetime import date

    monkeypatch.setattr(attendance_module, "today_in", lambda tz: date(2025, 11, 10))

    payload = _payload()
    payload.pop("today")
    response = client.post("/attendance/reconcile", json=payload)

    assert response.status_code == HTTPStatus.OK
    assert response.json()["today"] == "2025-11-10"
    assert response.json()["user_stats"]["u1"]["total_minutes_today"] == 120


def test_dashboard_endpoint(client):
    response = client.post("/attendance/dashboard", json=_payload())

    assert response.status_code == HTTPStatus.OK
    data = response.json()

    assert data["today"] == "2025-11-10"
    assert data["org_stats"]["today_attendance"] == 2
    assert len(data["today_sessions"]) == 2
    assert [p["user_id"] for p in data["productivity"]] == ["u1"]
    assert data["productivity"][0]["display_duration"] == "2 hr"


def test_user_history_endpoint(client):
    response = client.post("/attendance/users/u1/history", json=_payload())

    assert response.status_code == HTTPStatus.OK
    data = response.json()

    assert data["user_id"] == "u1"
    assert data["stats"]["total_minutes_all_time"] == 120
    assert len(data["days"]) == 1
    assert data["days"][0]["date"] == "2025-11-10"
    assert data["days"][0]["display_total"] == "2 hr"


def test_user_history_endpoint_unknown_user(client):
    response = client.post("/attendance/users/nobody/history", json=_payload())

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert "not found" in response.json()["detail"].lower()
