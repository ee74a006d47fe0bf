# riskboard/services/risk_engine.py
"""
Fine-Kinney risk classification and remediation deadlines.

Tiers are matched most severe first with strict ``>`` comparisons, so a score
sitting exactly on a boundary falls into the lower tier (400 with the default
thresholds is Substantial, not Intolerable).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from riskboard.core.dates import add_days, as_moment
from riskboard.core.rules import BOUNDED_LEVELS, RiskThresholds, RuleProfile, get_rules


@dataclass(frozen=True)
class RiskClassification:
    level: str
    label: str
    recommended_action: str
    severity_rank: int
    color: str


@dataclass(frozen=True)
class Deadline:
    level: str
    due_date: date
    label: str
    offset_days: int


def risk_score(probability: float, frequency: float, severity: float) -> float:
    return probability * frequency * severity


def risk_level(score: float, thresholds: RiskThresholds) -> str:
    thresholds.ensure_descending()
    for level in BOUNDED_LEVELS:
        if score > getattr(thresholds, level):
            return level
    return "negligible"


def classify(
    score: float, thresholds: RiskThresholds, rules: Optional[RuleProfile] = None
) -> RiskClassification:
    rules = rules or get_rules()
    level = risk_level(score, thresholds)
    tier = rules.tier(level)
    return RiskClassification(
        level=level,
        label=tier.label,
        recommended_action=tier.recommended_action,
        severity_rank=tier.severity_rank,
        color=tier.color,
    )


def compute_deadline(
    score: float,
    thresholds: RiskThresholds,
    now: Union[date, datetime],
    rules: Optional[RuleProfile] = None,
) -> Deadline:
    """
    Suggested remediation date: tier offset in whole days from the local
    calendar date of ``now``. Callers may override it before persisting.
    """
    rules = rules or get_rules()
    level = risk_level(score, thresholds)
    tier = rules.tier(level)
    today = as_moment(now).date()
    return Deadline(
        level=level,
        due_date=add_days(today, tier.sla_days),
        label=tier.sla_label,
        offset_days=tier.sla_days,
    )


def scale_warnings(
    probability: float,
    frequency: float,
    severity: float,
    rules: Optional[RuleProfile] = None,
) -> List[str]:
    """Names of factors that are not on their Fine-Kinney reference scale."""
    scales = (rules or get_rules()).fine_kinney_scales
    factors: Dict[str, float] = {
        "probability": probability,
        "frequency": frequency,
        "severity": severity,
    }
    return [
        name
        for name, value in factors.items()
        if value not in getattr(scales, name)
    ]
