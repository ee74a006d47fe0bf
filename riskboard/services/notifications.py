# riskboard/services/notifications.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy.orm import Session, selectinload

from riskboard.core.dates import as_moment
from riskboard.core.rules import RiskThresholds, RuleProfile, get_rules
from riskboard.models.employee import Employee
from riskboard.models.hazard import HazardRecord
from riskboard.models.location import Location
from riskboard.models.notification import Notification
from riskboard.services.action_tracking import is_overdue
from riskboard.services.compliance import EXPIRED, WARNING, check_validity
from riskboard.services.metrics import CLOSED_STATUS, thresholds_by_location

log = logging.getLogger("riskboard.notifications")


@dataclass(frozen=True)
class Alert:
    kind: str
    severity: str  # critical | warning
    title: str
    message: str
    dedupe_key: str
    location_id: Optional[int] = None
    hazard_id: Optional[int] = None
    employee_id: Optional[int] = None


# ---------------------------------
# Pure alert derivation
# ---------------------------------


def _hazard_alerts(
    hazards: Iterable[HazardRecord],
    thresholds: Dict[int, RiskThresholds],
    now: Union[date, datetime],
    names: Dict[int, str],
    default: RiskThresholds,
) -> List[Alert]:
    out: List[Alert] = []
    for h in hazards:
        t = thresholds.get(h.location_id, default)
        where = names.get(h.location_id, f"location #{h.location_id}")
        score = h.risk_score

        if h.status != CLOSED_STATUS:
            if score > t.substantial:
                out.append(
                    Alert(
                        kind="critical_risk",
                        severity="critical",
                        title=f"Urgent: {where}",
                        message=f"{h.source}: risk score {score:g}.",
                        dedupe_key=f"critical_risk:{h.id}",
                        location_id=h.location_id,
                        hazard_id=h.id,
                    )
                )
            elif score > t.important:
                out.append(
                    Alert(
                        kind="important_risk",
                        severity="warning",
                        title=f"Risk: {where}",
                        message=f"{h.source} (score {score:g}).",
                        dedupe_key=f"important_risk:{h.id}",
                        location_id=h.location_id,
                        hazard_id=h.id,
                    )
                )

        late = [a for a in h.actions if is_overdue(a, now)]
        if late:
            # keyed by the earliest late date so a new slip raises a new alert
            first_late = min(a.due_date for a in late)
            out.append(
                Alert(
                    kind="overdue_actions",
                    severity="critical",
                    title="Overdue actions",
                    message=f"{where}: {len(late)} action(s) past due for '{h.source}'.",
                    dedupe_key=f"overdue_actions:{h.id}:{first_late.isoformat()}",
                    location_id=h.location_id,
                    hazard_id=h.id,
                )
            )
    return out


def _employee_alerts(
    employees: Iterable[Employee],
    now: Union[date, datetime],
    rules: RuleProfile,
) -> List[Alert]:
    out: List[Alert] = []
    checks = (
        ("training", "last_training_date", "Training"),
        ("health", "last_health_check_date", "Health check"),
    )
    for e in employees:
        for kind, attr, noun in checks:
            v = check_validity(getattr(e, attr), e.hazard_class, kind, now, rules)
            if v.status == EXPIRED:
                out.append(
                    Alert(
                        kind=f"{kind}_expired",
                        severity="critical",
                        title=f"{noun} expired",
                        message=f"{e.name}: {noun.lower()} must be renewed (due {v.due_date.isoformat()}).",
                        dedupe_key=f"{kind}_expired:{e.id}:{v.due_date.isoformat()}",
                        location_id=e.location_id,
                        employee_id=e.id,
                    )
                )
            elif v.status == WARNING:
                out.append(
                    Alert(
                        kind=f"{kind}_due_soon",
                        severity="warning",
                        title=f"{noun} due soon",
                        message=f"{e.name}: {v.label} (due {v.due_date.isoformat()}).",
                        dedupe_key=f"{kind}_due_soon:{e.id}:{v.due_date.isoformat()}",
                        location_id=e.location_id,
                        employee_id=e.id,
                    )
                )
    return out


def build_alerts(
    hazards: Iterable[HazardRecord],
    employees: Iterable[Employee],
    thresholds: Dict[int, RiskThresholds],
    now: Union[date, datetime],
    *,
    location_names: Optional[Dict[int, str]] = None,
    rules: Optional[RuleProfile] = None,
) -> List[Alert]:
    """All alerts that hold at ``now``; hazard alerts first, then personnel."""
    rules = rules or get_rules()
    names = location_names or {}
    return _hazard_alerts(hazards, thresholds, now, names, rules.default_thresholds) + _employee_alerts(
        employees, now, rules
    )


# ---------------------------------
# Persistence
# ---------------------------------


def sync_notifications(
    db: Session,
    now: Union[date, datetime],
    *,
    for_location_id: Optional[int] = None,
    rules: Optional[RuleProfile] = None,
) -> Dict[str, int]:
    """
    Store every current alert whose dedupe_key has not been stored yet.
    Returns {"created": n, "active": total alerts at ``now``}.
    """
    locations_q = db.query(Location)
    hazards_q = db.query(HazardRecord).options(selectinload(HazardRecord.actions))
    employees_q = db.query(Employee)
    if for_location_id is not None:
        locations_q = locations_q.filter(Location.id == for_location_id)
        hazards_q = hazards_q.filter(HazardRecord.location_id == for_location_id)
        employees_q = employees_q.filter(Employee.location_id == for_location_id)

    locations = locations_q.all()
    alerts = build_alerts(
        hazards_q.all(),
        employees_q.all(),
        thresholds_by_location(locations, rules),
        now,
        location_names={loc.id: loc.name for loc in locations},
        rules=rules,
    )
    if not alerts:
        return {"created": 0, "active": 0}

    keys = [a.dedupe_key for a in alerts]
    existing = {
        k for (k,) in db.query(Notification.dedupe_key).filter(Notification.dedupe_key.in_(keys)).all()
    }

    created_at = as_moment(now)
    created = 0
    for a in alerts:
        if a.dedupe_key in existing:
            continue
        db.add(
            Notification(
                kind=a.kind,
                severity=a.severity,
                title=a.title,
                message=a.message,
                dedupe_key=a.dedupe_key,
                location_id=a.location_id,
                hazard_id=a.hazard_id,
                employee_id=a.employee_id,
                created_at=created_at,
            )
        )
        existing.add(a.dedupe_key)
        created += 1

    db.commit()
    log.info("notifications sync: created=%s active=%s", created, len(alerts))
    return {"created": created, "active": len(alerts)}
