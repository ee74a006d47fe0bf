# riskboard/crud/hazard.py
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, selectinload

from riskboard.models.action_item import ActionItem
from riskboard.models.hazard import HazardRecord
from riskboard.schemas.hazard import HazardUpdate

NULLABLE_FIELDS = {"specific_area", "activity", "risks", "current_measures", "image_url"}


def get_hazard(db: Session, hazard_id: int) -> Optional[HazardRecord]:
    return (
        db.query(HazardRecord)
        .options(selectinload(HazardRecord.actions))
        .filter(HazardRecord.id == hazard_id)
        .first()
    )


def list_hazards(
    db: Session,
    location_id: Optional[int] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[HazardRecord]:
    q = db.query(HazardRecord).options(selectinload(HazardRecord.actions))
    if location_id is not None:
        q = q.filter(HazardRecord.location_id == location_id)
    if status:
        q = q.filter(HazardRecord.status == status)
    # Highest risk first; tie-breaker by id
    return (
        q.order_by(HazardRecord.risk_score.desc(), HazardRecord.id.asc())
         .offset(skip)
         .limit(limit)
         .all()
    )


def create_hazard(
    db: Session,
    location_id: int,
    data: Dict[str, Any],
    *,
    today: date,
    default_due: date,
    commit: bool = True,
) -> HazardRecord:
    """
    ``data`` is a HazardCreate dump (or an ingest payload). Actions without
    a due date get ``default_due`` (the suggested remediation deadline).
    """
    data = dict(data)
    actions = data.pop("actions", None) or []
    obj = HazardRecord(location_id=location_id, **data)
    if obj.detection_date is None:
        obj.detection_date = today

    for a in actions:
        obj.actions.append(
            ActionItem(
                description=a["description"],
                due_date=a.get("due_date") or default_due,
                responsible_employee_id=a.get("responsible_employee_id"),
                is_completed=bool(a.get("is_completed", False)),
            )
        )

    db.add(obj)
    if commit:
        db.commit()
        db.refresh(obj)
    return obj


def update_hazard(db: Session, obj: HazardRecord, payload: HazardUpdate) -> HazardRecord:
    data = payload.model_dump(exclude_unset=True)
    # only the optional text fields may be cleared
    for k in [k for k, v in data.items() if v is None and k not in NULLABLE_FIELDS]:
        data.pop(k)
    for k, v in data.items():
        setattr(obj, k, v)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_hazard(db: Session, obj: HazardRecord) -> None:
    db.delete(obj)
    db.commit()
