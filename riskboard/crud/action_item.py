# riskboard/crud/action_item.py
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from riskboard.models.action_item import ActionItem
from riskboard.models.hazard import HazardRecord
from riskboard.schemas.action_item import ActionItemCreate, ActionItemUpdate


def get_action(db: Session, action_id: int) -> Optional[ActionItem]:
    return db.get(ActionItem, action_id)


def create_action(
    db: Session, hazard: HazardRecord, payload: ActionItemCreate, *, suggested_due: date
) -> ActionItem:
    obj = ActionItem(
        hazard_id=hazard.id,
        description=payload.description,
        # creator override wins over the suggestion
        due_date=payload.due_date or suggested_due,
        responsible_employee_id=payload.responsible_employee_id,
        is_completed=payload.is_completed,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def update_action(db: Session, obj: ActionItem, payload: ActionItemUpdate) -> ActionItem:
    data = payload.model_dump(exclude_unset=True)
    # due_date / description / is_completed cannot be nulled
    for k in ("due_date", "description", "is_completed"):
        if k in data and data[k] is None:
            data.pop(k)
    for k, v in data.items():
        setattr(obj, k, v)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_action(db: Session, obj: ActionItem) -> None:
    db.delete(obj)
    db.commit()
