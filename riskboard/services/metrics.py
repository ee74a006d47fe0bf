# riskboard/services/metrics.py
from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy.orm import Session, selectinload

from riskboard.core.rules import RISK_LEVELS, RiskThresholds, RuleProfile, get_rules
from riskboard.models.employee import Employee
from riskboard.models.hazard import HazardRecord
from riskboard.models.location import Location
from riskboard.services.action_tracking import is_overdue
from riskboard.services.compliance import EXPIRED, check_validity
from riskboard.services.risk_engine import risk_level
from riskboard.services.thresholds import resolve_thresholds

CLOSED_STATUS = "completed"


def thresholds_by_location(
    locations: Iterable[Location], rules: Optional[RuleProfile] = None
) -> Dict[int, RiskThresholds]:
    """One threshold snapshot per location for the whole calculation."""
    return {loc.id: resolve_thresholds(loc, rules) for loc in locations}


def build_summary(
    hazards: List[HazardRecord],
    employees: List[Employee],
    thresholds: Dict[int, RiskThresholds],
    now: Union[date, datetime],
    *,
    location_names: Optional[Dict[int, str]] = None,
    rules: Optional[RuleProfile] = None,
) -> Dict[str, Any]:
    """
    Aggregates for the dashboard cards and charts:
      - critical: open hazards above 'substantial'
      - high: open hazards above 'important' and at most 'substantial'
      - overdue actions, expired training / health checks
      - per-level distribution, total score per location, closed actions per month
    """
    rules = rules or get_rules()
    location_names = location_names or {}
    default = rules.default_thresholds

    distribution = {level: 0 for level in RISK_LEVELS}
    score_by_location: "OrderedDict[int, float]" = OrderedDict()
    closed_by_month: Dict[str, int] = {}
    critical = high = overdue = 0

    for h in hazards:
        t = thresholds.get(h.location_id, default)
        score = h.risk_score
        distribution[risk_level(score, t)] += 1
        score_by_location[h.location_id] = score_by_location.get(h.location_id, 0.0) + score

        if h.status != CLOSED_STATUS:
            if score > t.substantial:
                critical += 1
            elif score > t.important:
                high += 1

        for a in h.actions:
            if is_overdue(a, now):
                overdue += 1
            if a.is_completed:
                month = a.due_date.strftime("%Y-%m")
                closed_by_month[month] = closed_by_month.get(month, 0) + 1

    expired_training = sum(
        1
        for e in employees
        if check_validity(e.last_training_date, e.hazard_class, "training", now, rules).status == EXPIRED
    )
    expired_health = sum(
        1
        for e in employees
        if check_validity(e.last_health_check_date, e.hazard_class, "health", now, rules).status == EXPIRED
    )

    return {
        "total_hazards": len(hazards),
        "critical_hazards": critical,
        "high_hazards": high,
        "overdue_actions": overdue,
        "expired_training": expired_training,
        "expired_health": expired_health,
        "risk_distribution": [
            {
                "level": level,
                "label": rules.tier(level).label,
                "color": rules.tier(level).color,
                "count": distribution[level],
            }
            for level in RISK_LEVELS
        ],
        "score_by_location": [
            {
                "location_id": loc_id,
                "name": location_names.get(loc_id, str(loc_id)),
                "total_score": total,
            }
            for loc_id, total in score_by_location.items()
        ],
        "closed_actions_by_month": [
            {"month": m, "actions": closed_by_month[m]} for m in sorted(closed_by_month)
        ],
    }


def dashboard_summary(
    db: Session,
    now: Union[date, datetime],
    location_id: Optional[int] = None,
    rules: Optional[RuleProfile] = None,
) -> Dict[str, Any]:
    locations_q = db.query(Location)
    hazards_q = db.query(HazardRecord).options(selectinload(HazardRecord.actions))
    employees_q = db.query(Employee)
    if location_id is not None:
        locations_q = locations_q.filter(Location.id == location_id)
        hazards_q = hazards_q.filter(HazardRecord.location_id == location_id)
        employees_q = employees_q.filter(Employee.location_id == location_id)

    locations = locations_q.order_by(Location.id.asc()).all()
    hazards = hazards_q.order_by(HazardRecord.risk_score.desc(), HazardRecord.id.asc()).all()

    summary = build_summary(
        hazards,
        employees_q.all(),
        thresholds_by_location(locations, rules),
        now,
        location_names={loc.id: loc.name for loc in locations},
        rules=rules,
    )
    summary["scope"] = "location" if location_id is not None else "all"
    summary["location_id"] = location_id
    return summary
