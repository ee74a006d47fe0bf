from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from riskboard.core.errors import InvalidInput
from riskboard.core.rules import DEFAULT_RULES, load_rules, normalize_hazard_class


def test_builtin_profile(rules):
    assert rules.name == "tr-6331"
    assert rules.validity_years["highly_hazardous"] == {"training": 1, "health": 1}
    assert rules.validity_years["hazardous"] == {"training": 2, "health": 3}
    assert rules.validity_years["low"] == {"training": 3, "health": 5}
    assert rules.warning_window_days == 60
    assert [rules.tier(lvl).sla_days for lvl in rules.tiers] == [0, 30, 60, 90, 180]


def test_override_file_merges_into_defaults(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps(
            {
                "name": "site-policy",
                "warning_window_days": 45,
                "validity_years": {"hazardous": {"training": 1}},
            }
        ),
        encoding="utf-8",
    )
    profile = load_rules(str(path))
    assert profile.name == "site-policy"
    assert profile.warning_window_days == 45
    assert profile.validity_years["hazardous"] == {"training": 1, "health": 3}
    assert profile.default_thresholds == DEFAULT_RULES.default_thresholds


def test_override_with_bad_thresholds_fails_loudly(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"default_thresholds": {"possible": 500}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_rules(str(path))


@pytest.mark.parametrize(
    "raw, key",
    [
        ("Low", "low"),
        ("Highly Hazardous", "highly_hazardous"),
        ("highly-hazardous", "highly_hazardous"),
        ("Çok Tehlikeli", "highly_hazardous"),
        (" tehlikeli ", "hazardous"),
    ],
)
def test_hazard_class_aliases(raw, key):
    assert normalize_hazard_class(raw) == key


def test_unknown_hazard_class():
    with pytest.raises(InvalidInput):
        normalize_hazard_class("moderate")
