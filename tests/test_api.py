from __future__ import annotations

import pytest

AS_OF = {"as_of": "2024-03-10"}


@pytest.fixture()
def location(client):
    resp = client.post(
        "/api/v1/locations",
        json={"name": "Gebze Plant", "registry": "1234567", "hazard_class": "Çok Tehlikeli", "revision_date": "2023-05-01"},
    )
    assert resp.status_code == 201
    return resp.json()


def _hazard(client, location_id, p, f, s, **extra):
    body = {"source": "Press line", "hazard": "Crushing", "probability": p, "frequency": f, "severity": s}
    body.update(extra)
    return client.post(f"/api/v1/locations/{location_id}/hazards", params=AS_OF, json=body)


def test_health_endpoints(client):
    health = client.get("/api/healthz")
    assert health.status_code == 200
    assert health.json()["rules"] == "tr-6331"
    assert client.get("/api/readyz").json()["db"] == "up"


def test_location_defaults_and_duplicate_name(client, location):
    assert location["hazard_class"] == "highly_hazardous"
    assert location["thresholds"]["is_custom"] is False
    assert location["thresholds"]["intolerable"] == 400

    dup = client.post("/api/v1/locations", json={"name": "Gebze Plant"})
    assert dup.status_code == 409
    body = dup.json()
    assert body["ok"] is False
    assert body["error"]["status"] == 409
    assert dup.headers["X-Request-ID"] == body["error"]["trace_id"]


def test_assessment_validity(client, location):
    resp = client.get(f"/api/v1/locations/{location['id']}/assessment-validity")
    assert resp.status_code == 200
    assert resp.json()["valid_until"] == "2025-05-01"
    assert resp.json()["years"] == 2


def test_create_hazard_with_suggested_deadline(client, location):
    resp = _hazard(client, location["id"], 6, 6, 15, actions=[{"description": "Fit light curtain"}])
    assert resp.status_code == 201
    h = resp.json()
    assert h["risk_score"] == 540
    assert h["classification"]["level"] == "intolerable"
    assert h["sla"] == {"level": "intolerable", "due_date": "2024-03-10", "label": "Immediate", "offset_days": 0}
    assert h["detection_date"] == "2024-03-10"
    assert h["actions"][0]["due_date"] == "2024-03-10"
    assert h["action_summary"] == {"overdue_count": 0, "nearest_upcoming": {"id": h["actions"][0]["id"], "days_left": 0}}


def test_boundary_score_and_custom_thresholds(client, location):
    h = _hazard(client, location["id"], 10, 1, 40).json()
    assert h["risk_score"] == 400
    assert h["classification"]["label"] == "Substantial"
    assert h["sla"]["due_date"] == "2024-04-09"

    bad = client.put(
        f"/api/v1/locations/{location['id']}/thresholds",
        json={"intolerable": 100, "substantial": 200, "important": 70, "possible": 20},
    )
    assert bad.status_code == 422

    ok = client.put(
        f"/api/v1/locations/{location['id']}/thresholds",
        json={"intolerable": 1000, "substantial": 500, "important": 100, "possible": 50},
    )
    assert ok.json()["is_custom"] is True

    again = client.get(f"/api/v1/hazards/{h['id']}", params=AS_OF).json()
    assert again["classification"]["level"] == "important"

    reset = client.delete(f"/api/v1/locations/{location['id']}/thresholds")
    assert reset.json()["is_custom"] is False


def test_risk_preview_does_not_store(client, location):
    resp = client.post(
        "/api/v1/risk/evaluate",
        params=AS_OF,
        json={"probability": 4, "frequency": 6, "severity": 15, "location_id": location["id"]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["risk_score"] == 360
    assert body["scale_warnings"] == ["probability"]
    assert client.get("/api/v1/hazards").json() == []


def test_overdue_actions_against_as_of(client, location):
    h = _hazard(client, location["id"], 3, 6, 3).json()
    created = client.post(
        f"/api/v1/hazards/{h['id']}/actions",
        params={"as_of": "2024-06-01"},
        json={"description": "Mark wet areas", "due_date": "2024-01-01"},
    )
    assert created.status_code == 201
    assert created.json()["is_overdue"] is True

    hazard = client.get(f"/api/v1/hazards/{h['id']}", params={"as_of": "2024-06-01"}).json()
    assert hazard["action_summary"]["overdue_count"] == 1
    assert hazard["action_summary"]["nearest_upcoming"]["days_left"] == -152

    done = client.patch(f"/api/v1/actions/{created.json()['id']}", json={"is_completed": True})
    assert done.json()["is_overdue"] is False


def test_suggested_deadline_and_missing_responsible(client, location):
    h = _hazard(client, location["id"], 3, 6, 3).json()
    suggestion = client.get(f"/api/v1/hazards/{h['id']}/actions/suggested-deadline", params=AS_OF)
    assert suggestion.json()["due_date"] == "2024-06-08"

    resp = client.post(
        f"/api/v1/hazards/{h['id']}/actions",
        json={"description": "Train staff", "responsible_employee_id": 999},
    )
    assert resp.status_code == 422


def test_hazard_list_sorted_by_score(client, location):
    _hazard(client, location["id"], 1, 1, 1)
    _hazard(client, location["id"], 6, 6, 15)
    _hazard(client, location["id"], 3, 6, 3)
    scores = [h["risk_score"] for h in client.get("/api/v1/hazards", params=AS_OF).json()]
    assert scores == [540, 54, 1]


def test_import_from_analysis(client, location):
    resp = client.post(
        f"/api/v1/locations/{location['id']}/hazards/import",
        params=AS_OF,
        json={
            "image_url": "/uploads/site.jpg",
            "items": [
                {"source": "Scaffold", "hazard": "Fall", "probability": 3, "frequency": 6, "severity": 40,
                 "actions": ["Install guardrails"], "confidence": 0.9},
                {"hazard": "Noise", "probability": None, "severity": 3, "actions": []},
            ],
        },
    )
    assert resp.status_code == 201
    first, second = resp.json()
    assert first["actions"][0]["due_date"] == "2024-03-10"
    assert first["image_url"] == "/uploads/site.jpg"
    assert second["source"] == "Unspecified source"
    assert second["risk_score"] == 3


def test_employee_compliance(client, location):
    resp = client.post(
        "/api/v1/employees",
        json={
            "location_id": location["id"],
            "name": "Mehmet Kaya",
            "job_title": "Welder",
            "hazard_class": "Highly Hazardous",
            "last_training_date": "2020-01-15",
        },
    )
    assert resp.status_code == 201
    emp = resp.json()

    c = client.get(f"/api/v1/employees/{emp['id']}/compliance", params={"as_of": "2021-01-16"}).json()
    assert c["training"]["status"] == "Expired"
    assert c["training"]["due_date"] == "2021-01-15"
    assert c["health"]["status"] == "NoData"

    listed = client.get("/api/v1/employees/compliance", params={"location_id": location["id"]}).json()
    assert [x["employee_id"] for x in listed] == [emp["id"]]


def test_employee_import(client, location):
    resp = client.post(
        f"/api/v1/locations/{location['id']}/employees/import",
        json=[
            {"name": "Zeynep", "job_title": "Chemist", "hazard_class": "Tehlikeli",
             "last_training_date": 45292, "last_health_check_date": "15.03.2024"},
            {"name": "", "job_title": "skipped"},
        ],
    )
    assert resp.status_code == 201
    rows = resp.json()
    assert len(rows) == 1
    assert rows[0]["hazard_class"] == "hazardous"
    assert rows[0]["last_training_date"] == "2024-01-01"


def test_dashboard_and_notifications(client, location):
    h = _hazard(client, location["id"], 6, 6, 15).json()
    client.post(
        f"/api/v1/hazards/{h['id']}/actions",
        json={"description": "Lockout", "due_date": "2024-01-01"},
    )

    summary = client.get("/api/v1/dashboard/summary", params={"as_of": "2024-06-01"}).json()
    assert summary["scope"] == "all"
    assert summary["critical_hazards"] == 1
    assert summary["overdue_actions"] == 1

    first = client.post("/api/v1/notifications/sync", params={"as_of": "2024-06-01"}).json()
    assert first == {"created": 2, "active": 2}
    second = client.post("/api/v1/notifications/sync", params={"as_of": "2024-06-01"}).json()
    assert second["created"] == 0

    items = client.get("/api/v1/notifications", params={"unread_only": True}).json()
    assert {n["kind"] for n in items} == {"critical_risk", "overdue_actions"}
    read = client.post(f"/api/v1/notifications/{items[0]['id']}/read").json()
    assert read["read_at"] is not None
    assert len(client.get("/api/v1/notifications", params={"unread_only": True}).json()) == 1


def test_delete_location_cascades(client, location):
    h = _hazard(client, location["id"], 1, 1, 1).json()
    assert client.delete(f"/api/v1/locations/{location['id']}").status_code == 204
    assert client.get(f"/api/v1/hazards/{h['id']}").status_code == 404


def test_invalid_as_of(client):
    resp = client.get("/api/v1/dashboard/summary", params={"as_of": "yesterday"})
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "invalid_input"
    assert resp.json()["error"]["details"]["field"] == "as_of"


def test_inline_action_with_unknown_responsible_is_rejected(client, location):
    resp = _hazard(
        client,
        location["id"],
        6,
        6,
        15,
        actions=[{"description": "Guard it", "responsible_employee_id": 999}],
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["message"] == "Responsible employee not found"
    assert client.get("/api/v1/hazards").json() == []


def test_inline_action_with_known_responsible(client, location):
    emp = client.post(
        "/api/v1/employees",
        json={"location_id": location["id"], "name": "Mehmet Kaya", "job_title": "Welder"},
    ).json()
    resp = _hazard(
        client,
        location["id"],
        6,
        6,
        15,
        actions=[{"description": "Guard it", "responsible_employee_id": emp["id"]}],
    )
    assert resp.status_code == 201
    assert resp.json()["actions"][0]["responsible_employee_id"] == emp["id"]


def test_employee_import_validates_rows(client, location):
    resp = client.post(
        f"/api/v1/locations/{location['id']}/employees/import",
        json=[{"name": "Z", "job_title": "Chemist"}],
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "validation_error"

    bad_date = client.post(
        f"/api/v1/locations/{location['id']}/employees/import",
        json=[{"name": "Zeynep", "last_training_date": "2024-01-01garbage"}],
    )
    assert bad_date.status_code == 422
    assert client.get("/api/v1/employees").json() == []
