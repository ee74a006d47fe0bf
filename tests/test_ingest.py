from __future__ import annotations

from datetime import date, datetime

import pytest

from riskboard.core.errors import InvalidInput
from riskboard.services.ingest import build_employee_payload, build_hazard_payload, build_hazards_from_analysis


def test_missing_factors_default_to_one_and_texts_are_filled(rules):
    payload = build_hazard_payload(
        {"probability": 0, "frequency": None, "severity": "15", "actions": ["Install guard", "  "]},
        rules.default_thresholds,
        datetime(2024, 3, 10, 14, 0),
        rules=rules,
    )
    assert (payload["probability"], payload["frequency"], payload["severity"]) == (1.0, 1.0, 15.0)
    assert payload["department"] == "General area"
    assert payload["hazard"] == "Unspecified hazard"
    assert payload["detection_date"] == date(2024, 3, 10)
    assert payload["status"] == "open"
    # score 15 -> negligible -> 180 days
    assert payload["actions"] == [{"description": "Install guard", "due_date": date(2024, 9, 6)}]


def test_every_action_gets_its_hazards_deadline(rules):
    items = [
        {"source": "Press", "hazard": "Crush", "probability": 6, "frequency": 6, "severity": 15,
         "actions": ["Fit light curtain", "Train operators"]},
        {"source": "Floor", "hazard": "Slip", "probability": 3, "frequency": 6, "severity": 3,
         "actions": ["Mark wet areas"]},
    ]
    built = build_hazards_from_analysis(
        items, rules.default_thresholds, date(2024, 3, 10), image_url="/img/1.png", rules=rules
    )
    assert [a["due_date"] for a in built[0]["actions"]] == [date(2024, 3, 10)] * 2
    # 54 -> possible -> 90 days
    assert built[1]["actions"][0]["due_date"] == date(2024, 6, 8)
    assert {b["image_url"] for b in built} == {"/img/1.png"}


def test_employee_row_normalization():
    row = {
        "name": " Ayşe Yılmaz ",
        "job_title": "",
        "hazard_class": "Çok Tehlikeli",
        "last_training_date": 45292,
        "last_health_check_date": "15.03.2024",
    }
    payload = build_employee_payload(row, 3)
    assert payload == {
        "location_id": 3,
        "name": "Ayşe Yılmaz",
        "job_title": "Unspecified",
        "hazard_class": "highly_hazardous",
        "last_training_date": date(2024, 1, 1),
        "last_health_check_date": date(2024, 3, 15),
    }


def test_employee_row_blank_dates_stay_empty():
    payload = build_employee_payload({"name": "Ali"}, 1)
    assert payload["hazard_class"] == "hazardous"
    assert payload["last_training_date"] is None
    assert payload["last_health_check_date"] is None


def test_employee_row_with_unknown_class_is_rejected():
    with pytest.raises(InvalidInput):
        build_employee_payload({"name": "Ali", "hazard_class": "Medium"}, 1)
