# riskboard/core/rules.py
"""
Regulatory rule profile.

Everything jurisdiction-specific lives here as data: default Fine-Kinney
thresholds, the five risk tiers (labels, recommended actions, color tokens,
remediation offsets), the training / health-check validity matrix per hazard
class and the risk-assessment document validity.

The built-in profile follows the Turkish OHS regime (Law 6331 and its
training / health surveillance regulations). A JSON file named by
RISKBOARD_RULES_FILE may override any subset of it, e.g.::

    {"validity_years": {"hazardous": {"training": 2, "health": 2}},
     "warning_window_days": 45}
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, conint, model_validator

from riskboard.core import config
from riskboard.core.errors import InvalidInput

log = logging.getLogger("riskboard.rules")

HazardClass = Literal["low", "hazardous", "highly_hazardous"]
ComplianceKind = Literal["training", "health"]
RiskLevel = Literal["intolerable", "substantial", "important", "possible", "negligible"]

HAZARD_CLASSES = ("low", "hazardous", "highly_hazardous")
COMPLIANCE_KINDS = ("training", "health")

# Most severe first; this is also the match order of the classifier
RISK_LEVELS = ("intolerable", "substantial", "important", "possible", "negligible")
BOUNDED_LEVELS = RISK_LEVELS[:-1]

HAZARD_CLASS_LABELS = {
    "low": "Low",
    "hazardous": "Hazardous",
    "highly_hazardous": "Highly Hazardous",
}

# Accepted spellings, including the Turkish regulatory terms
_HAZARD_CLASS_ALIASES = {
    "low": "low",
    "az tehlikeli": "low",
    "hazardous": "hazardous",
    "tehlikeli": "hazardous",
    "highly hazardous": "highly_hazardous",
    "highly_hazardous": "highly_hazardous",
    "çok tehlikeli": "highly_hazardous",
    "cok tehlikeli": "highly_hazardous",
}


def normalize_hazard_class(value: str) -> str:
    key = (value or "").strip().lower().replace("-", " ")
    try:
        return _HAZARD_CLASS_ALIASES[key]
    except KeyError:
        raise InvalidInput(f"Unknown hazard class: {value!r}", field="hazard_class", value=value) from None


class RiskThresholds(BaseModel):
    """One consistent snapshot of the four Fine-Kinney boundaries."""

    model_config = ConfigDict(frozen=True)

    intolerable: float
    substantial: float
    important: float
    possible: float

    def boundaries(self) -> Dict[str, float]:
        return {level: getattr(self, level) for level in BOUNDED_LEVELS}

    def is_descending(self) -> bool:
        return self.intolerable > self.substantial > self.important > self.possible

    def ensure_descending(self) -> "RiskThresholds":
        if not self.is_descending():
            raise InvalidInput(
                "Thresholds must be strictly descending: "
                "intolerable > substantial > important > possible",
                field="thresholds",
                value=self.boundaries(),
            )
        return self


class TierRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    recommended_action: str
    severity_rank: conint(ge=0)
    color: str
    sla_days: conint(ge=0)
    sla_label: str


class FineKinneyScales(BaseModel):
    model_config = ConfigDict(frozen=True)

    probability: List[float]
    frequency: List[float]
    severity: List[float]


class RuleProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "tr-6331"
    default_thresholds: RiskThresholds
    tiers: Dict[str, TierRule]
    validity_years: Dict[str, Dict[str, conint(ge=1)]]
    warning_window_days: conint(ge=0) = 60
    assessment_validity_years: Dict[str, conint(ge=1)]
    fine_kinney_scales: FineKinneyScales = Field(default_factory=lambda: FineKinneyScales(**_DEFAULT_SCALES))

    @model_validator(mode="after")
    def check_complete(self) -> "RuleProfile":
        if not self.default_thresholds.is_descending():
            raise ValueError("default_thresholds must be strictly descending")
        missing_tiers = [lvl for lvl in RISK_LEVELS if lvl not in self.tiers]
        if missing_tiers:
            raise ValueError(f"tiers missing: {', '.join(missing_tiers)}")
        for hc in HAZARD_CLASSES:
            row = self.validity_years.get(hc) or {}
            gaps = [k for k in COMPLIANCE_KINDS if k not in row]
            if gaps:
                raise ValueError(f"validity_years[{hc}] missing: {', '.join(gaps)}")
            if hc not in self.assessment_validity_years:
                raise ValueError(f"assessment_validity_years missing: {hc}")
        return self

    def tier(self, level: str) -> TierRule:
        return self.tiers[level]


_DEFAULT_SCALES: Dict[str, List[float]] = {
    "probability": [0.2, 0.5, 1, 3, 6, 10],
    "frequency": [0.5, 1, 2, 3, 6, 10],
    "severity": [1, 3, 7, 15, 40, 100],
}

DEFAULT_RULES_DATA: Dict[str, Any] = {
    "name": "tr-6331",
    "default_thresholds": {
        "intolerable": 400,
        "substantial": 200,
        "important": 70,
        "possible": 20,
    },
    "tiers": {
        "intolerable": {
            "label": "Intolerable",
            "recommended_action": "Stop immediately",
            "severity_rank": 4,
            "color": "#dc2626",
            "sla_days": 0,
            "sla_label": "Immediate",
        },
        "substantial": {
            "label": "Substantial",
            "recommended_action": "Urgent remediation",
            "severity_rank": 3,
            "color": "#ea580c",
            "sla_days": 30,
            "sla_label": "1 month",
        },
        "important": {
            "label": "Important",
            "recommended_action": "Resolve short-term",
            "severity_rank": 2,
            "color": "#f97316",
            "sla_days": 60,
            "sla_label": "2 months",
        },
        "possible": {
            "label": "Possible",
            "recommended_action": "Keep under observation",
            "severity_rank": 1,
            "color": "#eab308",
            "sla_days": 90,
            "sla_label": "3 months",
        },
        "negligible": {
            "label": "Negligible",
            "recommended_action": "Continue monitoring",
            "severity_rank": 0,
            "color": "#16a34a",
            "sla_days": 180,
            "sla_label": "Low priority",
        },
    },
    # Training: employee OHS training regulation; health: periodic examinations
    "validity_years": {
        "highly_hazardous": {"training": 1, "health": 1},
        "hazardous": {"training": 2, "health": 3},
        "low": {"training": 3, "health": 5},
    },
    "warning_window_days": 60,
    "assessment_validity_years": {
        "highly_hazardous": 2,
        "hazardous": 4,
        "low": 6,
    },
    "fine_kinney_scales": _DEFAULT_SCALES,
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_rules(path: Optional[str] = None) -> RuleProfile:
    """
    Build a RuleProfile from the built-in data, overlaid with the JSON file at
    ``path`` when given. Invalid overrides fail loudly (pydantic ValidationError).
    """
    data = DEFAULT_RULES_DATA
    if path:
        override = json.loads(Path(path).read_text(encoding="utf-8"))
        data = _deep_merge(DEFAULT_RULES_DATA, override)
        log.info("Loaded rule overrides from %s (keys=%s)", path, sorted(override))
    return RuleProfile.model_validate(data)


DEFAULT_RULES = load_rules()


@lru_cache(maxsize=1)
def get_rules() -> RuleProfile:
    """Active profile: built-in defaults unless RISKBOARD_RULES_FILE points elsewhere."""
    if config.RULES_FILE:
        return load_rules(config.RULES_FILE)
    return DEFAULT_RULES
