from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

from riskboard.models.action_item import ActionItem
from riskboard.models.employee import Employee
from riskboard.models.hazard import HazardRecord
from riskboard.models.location import Location
from riskboard.models.notification import Notification
from riskboard.services.metrics import build_summary, dashboard_summary
from riskboard.services.notifications import build_alerts, sync_notifications

NOW = datetime(2024, 6, 1, 9, 0)


def _action(id, due, done=False):
    return SimpleNamespace(id=id, due_date=due, is_completed=done)


def _hazard(id, location_id, score, status="open", actions=()):
    return SimpleNamespace(
        id=id,
        location_id=location_id,
        source=f"source {id}",
        risk_score=score,
        status=status,
        actions=list(actions),
    )


def _employee(id, training=None, health=None, hazard_class="highly_hazardous"):
    return SimpleNamespace(
        id=id,
        name=f"employee {id}",
        location_id=1,
        hazard_class=hazard_class,
        last_training_date=training,
        last_health_check_date=health,
    )


def _sample():
    hazards = [
        _hazard(1, 1, 540, actions=[_action(1, date(2024, 1, 1))]),
        _hazard(2, 1, 100),
        _hazard(3, 2, 300, status="completed", actions=[_action(2, date(2024, 2, 15), done=True)]),
        _hazard(4, 2, 10),
    ]
    employees = [
        _employee(1, training=date(2020, 1, 15)),
        _employee(2, training=date(2023, 6, 20), health=date(2023, 7, 1)),
    ]
    return hazards, employees


def test_summary_counts_and_series(rules):
    hazards, employees = _sample()
    s = build_summary(hazards, employees, {}, NOW, location_names={1: "Plant", 2: "Depot"}, rules=rules)

    assert s["total_hazards"] == 4
    assert s["critical_hazards"] == 1
    assert s["high_hazards"] == 1
    assert s["overdue_actions"] == 1
    assert s["expired_training"] == 1
    assert s["expired_health"] == 0
    assert {b["level"]: b["count"] for b in s["risk_distribution"]} == {
        "intolerable": 1,
        "substantial": 1,
        "important": 1,
        "possible": 0,
        "negligible": 1,
    }
    assert s["score_by_location"] == [
        {"location_id": 1, "name": "Plant", "total_score": 640.0},
        {"location_id": 2, "name": "Depot", "total_score": 310.0},
    ]
    assert s["closed_actions_by_month"] == [{"month": "2024-02", "actions": 1}]


def test_alerts_cover_risk_actions_and_personnel(rules):
    hazards, employees = _sample()
    keys = [a.dedupe_key for a in build_alerts(hazards, employees, {}, NOW, rules=rules)]
    assert keys == [
        "critical_risk:1",
        "overdue_actions:1:2024-01-01",
        "important_risk:2",
        "training_expired:1:2021-01-15",
        "training_due_soon:2:2024-06-20",
        "health_due_soon:2:2024-07-01",
    ]


def _seed(db):
    loc = Location(name="Plant", hazard_class="highly_hazardous")
    db.add(loc)
    db.flush()
    hazard = HazardRecord(
        location_id=loc.id,
        source="Press",
        hazard="Crush",
        detection_date=date(2024, 1, 1),
        probability=6,
        frequency=6,
        severity=15,
    )
    hazard.actions.append(ActionItem(description="Fit light curtain", due_date=date(2024, 1, 1)))
    db.add(hazard)
    db.add(
        Employee(
            location_id=loc.id,
            name="Ayşe",
            job_title="Operator",
            hazard_class="highly_hazardous",
            last_training_date=date(2020, 1, 15),
        )
    )
    db.commit()
    return loc


def test_sync_is_idempotent(db, rules):
    _seed(db)

    first = sync_notifications(db, NOW, rules=rules)
    assert first == {"created": 3, "active": 3}
    assert db.query(Notification).count() == 3

    again = sync_notifications(db, NOW, rules=rules)
    assert again == {"created": 0, "active": 3}


def test_dashboard_summary_from_database(db, rules):
    loc = _seed(db)
    s = dashboard_summary(db, NOW, location_id=loc.id, rules=rules)
    assert s["scope"] == "location"
    assert s["critical_hazards"] == 1
    assert s["overdue_actions"] == 1
    assert s["expired_training"] == 1
    assert s["score_by_location"][0]["name"] == "Plant"
