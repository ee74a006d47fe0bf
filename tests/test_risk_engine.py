from __future__ import annotations

from datetime import date, datetime

import pytest

from riskboard.core.errors import InvalidInput
from riskboard.core.rules import RiskThresholds
from riskboard.services.risk_engine import (
    classify,
    compute_deadline,
    risk_level,
    risk_score,
    scale_warnings,
)


@pytest.fixture()
def defaults(rules) -> RiskThresholds:
    return rules.default_thresholds


def test_score_is_product_of_factors():
    assert risk_score(6, 6, 15) == 540
    assert risk_score(0.5, 2, 7) == 7


@pytest.mark.parametrize(
    "score, level",
    [
        (540, "intolerable"),
        (400.01, "intolerable"),
        (400, "substantial"),
        (200, "important"),
        (70, "possible"),
        (20, "negligible"),
        (0, "negligible"),
    ],
)
def test_boundary_scores_fall_to_lower_tier(defaults, score, level):
    assert risk_level(score, defaults) == level


def test_classify_returns_tier_presentation(defaults, rules):
    c = classify(400, defaults, rules)
    assert c.level == "substantial"
    assert c.label == "Substantial"
    assert c.recommended_action == "Urgent remediation"
    assert c.severity_rank == 3
    assert c.color == "#ea580c"


def test_custom_thresholds_shift_classification(rules):
    custom = RiskThresholds(intolerable=1000, substantial=500, important=100, possible=50)
    assert classify(400, custom, rules).level == "important"
    assert classify(40, custom, rules).level == "negligible"


def test_non_descending_thresholds_are_rejected(rules):
    broken = RiskThresholds(intolerable=100, substantial=200, important=70, possible=20)
    with pytest.raises(InvalidInput):
        classify(150, broken, rules)
    with pytest.raises(InvalidInput):
        compute_deadline(150, broken, date(2024, 3, 10), rules)


@pytest.mark.parametrize(
    "score, due, label",
    [
        (540, date(2024, 3, 10), "Immediate"),
        (300, date(2024, 4, 9), "1 month"),
        (100, date(2024, 5, 9), "2 months"),
        (50, date(2024, 6, 8), "3 months"),
        (5, date(2024, 9, 6), "Low priority"),
    ],
)
def test_deadline_offsets_from_local_calendar_day(defaults, rules, score, due, label):
    d = compute_deadline(score, defaults, datetime(2024, 3, 10, 23, 45), rules)
    assert d.due_date == due
    assert d.label == label


def test_deadline_accepts_plain_date(defaults, rules):
    d = compute_deadline(300, defaults, date(2024, 12, 15), rules)
    assert d.due_date == date(2025, 1, 14)
    assert d.offset_days == 30


def test_scale_warnings_names_off_scale_factors(rules):
    assert scale_warnings(6, 6, 15, rules) == []
    assert scale_warnings(4, 6, 15, rules) == ["probability"]
    assert scale_warnings(4, 5, 16, rules) == ["probability", "frequency", "severity"]
