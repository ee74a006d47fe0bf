# riskboard/api/v1/actions.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session

from riskboard.api.deps import get_now
from riskboard.api.v1.hazards import action_to_out
from riskboard.core.rules import RuleProfile, get_rules
from riskboard.db.session import get_db
from riskboard.models.hazard import HazardRecord
from riskboard.schemas.action_item import (
    ActionItemCreate,
    ActionItemOut,
    ActionItemUpdate,
    DeadlineOut,
)
from riskboard.crud.action_item import (
    get_action as crud_get_action,
    create_action as crud_create_action,
    update_action as crud_update_action,
    delete_action as crud_delete_action,
)
from riskboard.crud.employee import get_employee as crud_get_employee
from riskboard.crud.hazard import get_hazard as crud_get_hazard
from riskboard.services.risk_engine import compute_deadline
from riskboard.services.thresholds import resolve_thresholds

router = APIRouter()


def _hazard_or_404(db: Session, hazard_id: int) -> HazardRecord:
    obj = crud_get_hazard(db, hazard_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Hazard not found")
    return obj


def _check_responsible(db: Session, employee_id: Optional[int]) -> None:
    if employee_id is not None and not crud_get_employee(db, employee_id):
        raise HTTPException(status_code=422, detail="Responsible employee not found")


def _suggested(hazard: HazardRecord, now: datetime, rules: RuleProfile):
    return compute_deadline(hazard.risk_score, resolve_thresholds(hazard.location, rules), now, rules)


@router.get("/hazards/{hazard_id}/actions", response_model=List[ActionItemOut])
def list_actions(
    hazard_id: int,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    return [action_to_out(a, now) for a in _hazard_or_404(db, hazard_id).actions]


@router.get("/hazards/{hazard_id}/actions/suggested-deadline", response_model=DeadlineOut)
def suggested_deadline(
    hazard_id: int,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """Deadline a new action would get if the creator does not pick one."""
    return DeadlineOut.model_validate(_suggested(_hazard_or_404(db, hazard_id), now, rules))


@router.post(
    "/hazards/{hazard_id}/actions",
    response_model=ActionItemOut,
    status_code=status.HTTP_201_CREATED,
)
def create_action(
    hazard_id: int,
    payload: ActionItemCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    hazard = _hazard_or_404(db, hazard_id)
    _check_responsible(db, payload.responsible_employee_id)
    obj = crud_create_action(
        db, hazard, payload, suggested_due=_suggested(hazard, now, rules).due_date
    )
    return action_to_out(obj, now)


@router.patch("/actions/{action_id}", response_model=ActionItemOut)
def update_action(
    action_id: int,
    payload: ActionItemUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    obj = crud_get_action(db, action_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Action not found")
    _check_responsible(db, payload.responsible_employee_id)
    return action_to_out(crud_update_action(db, obj, payload), now)


@router.delete("/actions/{action_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_action(action_id: int, db: Session = Depends(get_db)) -> Response:
    obj = crud_get_action(db, action_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Action not found")
    crud_delete_action(db, obj)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
