# riskboard/services/ingest.py
"""
Turns raw hazard analysis output (probability / frequency / severity triples
plus free-text action suggestions) into hazard payloads ready for the register.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from riskboard.core.dates import as_moment, normalize_calendar_date
from riskboard.core.rules import RiskThresholds, RuleProfile, get_rules, normalize_hazard_class
from riskboard.services.risk_engine import compute_deadline, risk_score, scale_warnings

log = logging.getLogger("riskboard.ingest")

# Fallback texts for fields the analysis left empty
_TEXT_DEFAULTS = {
    "department": "General area",
    "source": "Unspecified source",
    "activity": "Unspecified activity",
    "hazard": "Unspecified hazard",
    "risks": "Unspecified risk",
    "current_measures": "None",
}


def _get(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def _factor(item: Any, key: str) -> float:
    """Missing, zero or negative factors count as 1 (neutral in the product)."""
    value = _get(item, key)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 1.0
    return value if value > 0 else 1.0


def build_hazard_payload(
    item: Any,
    thresholds: RiskThresholds,
    now: Union[date, datetime],
    *,
    image_url: Optional[str] = None,
    rules: Optional[RuleProfile] = None,
) -> Dict[str, Any]:
    rules = rules or get_rules()
    probability = _factor(item, "probability")
    frequency = _factor(item, "frequency")
    severity = _factor(item, "severity")
    score = risk_score(probability, frequency, severity)
    deadline = compute_deadline(score, thresholds, now, rules)

    off_scale = scale_warnings(probability, frequency, severity, rules)
    if off_scale:
        log.warning("Imported hazard has off-scale factors: %s", ", ".join(off_scale))

    payload: Dict[str, Any] = {
        key: (_get(item, key) or default) for key, default in _TEXT_DEFAULTS.items()
    }
    payload.update(
        {
            "specific_area": _get(item, "specific_area") or None,
            "probability": probability,
            "frequency": frequency,
            "severity": severity,
            "detection_date": as_moment(now).date(),
            "status": "open",
            "image_url": image_url,
            "actions": [
                {"description": text.strip(), "due_date": deadline.due_date}
                for text in (_get(item, "actions") or [])
                if isinstance(text, str) and text.strip()
            ],
        }
    )
    return payload


def build_hazards_from_analysis(
    items: Iterable[Any],
    thresholds: RiskThresholds,
    now: Union[date, datetime],
    *,
    image_url: Optional[str] = None,
    rules: Optional[RuleProfile] = None,
) -> List[Dict[str, Any]]:
    """Every item becomes one hazard payload; every action gets its hazard's SLA date."""
    return [
        build_hazard_payload(item, thresholds, now, image_url=image_url, rules=rules)
        for item in items
    ]


def build_employee_payload(row: Dict[str, Any], location_id: int) -> Dict[str, Any]:
    """
    One roster row (from a spreadsheet or the analysis service) -> employee
    payload. Dates may be ISO, DD.MM.YYYY or spreadsheet serial numbers;
    blank dates stay None ("no data").
    """
    hazard_class = row.get("hazard_class") or "hazardous"
    return {
        "location_id": location_id,
        "name": str(row.get("name") or "").strip(),
        "job_title": str(row.get("job_title") or "").strip() or "Unspecified",
        "hazard_class": normalize_hazard_class(hazard_class),
        "last_training_date": normalize_calendar_date(row.get("last_training_date")),
        "last_health_check_date": normalize_calendar_date(row.get("last_health_check_date")),
    }
