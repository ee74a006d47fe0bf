# riskboard/api/v1/hazards.py
from datetime import datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status, Response
from pydantic import BaseModel, confloat, conint
from sqlalchemy.orm import Session

from riskboard.api.deps import get_now
from riskboard.core.rules import RiskThresholds, RuleProfile, get_rules
from riskboard.db.session import get_db
from riskboard.models.hazard import HazardRecord
from riskboard.schemas.hazard import (
    ClassificationOut,
    HazardCreate,
    HazardImportRequest,
    HazardOut,
    HazardUpdate,
)
from riskboard.schemas.action_item import ActionItemOut, ActionSummaryOut, DeadlineOut
from riskboard.crud.hazard import (
    get_hazard as crud_get_hazard,
    list_hazards as crud_list_hazards,
    create_hazard as crud_create_hazard,
    update_hazard as crud_update_hazard,
    delete_hazard as crud_delete_hazard,
)
from riskboard.crud.employee import get_employee as crud_get_employee
from riskboard.crud.location import get_location as crud_get_location
from riskboard.services.action_tracking import evaluate, is_overdue
from riskboard.services.ingest import build_hazards_from_analysis
from riskboard.services.risk_engine import classify, compute_deadline, risk_score, scale_warnings
from riskboard.services.thresholds import resolve_thresholds, resolve_thresholds_for_location

log = logging.getLogger("riskboard.hazards")

router = APIRouter()


def action_to_out(a, now: datetime) -> ActionItemOut:
    out = ActionItemOut.model_validate(a)
    out.is_overdue = is_overdue(a, now)
    return out


def hazard_to_out(
    h: HazardRecord, thresholds: RiskThresholds, now: datetime, rules: RuleProfile
) -> HazardOut:
    """Attach the live classification, SLA suggestion and action summary."""
    score = h.risk_score
    return HazardOut(
        id=h.id,
        location_id=h.location_id,
        department=h.department,
        specific_area=h.specific_area,
        detection_date=h.detection_date,
        source=h.source,
        activity=h.activity,
        hazard=h.hazard,
        risks=h.risks,
        current_measures=h.current_measures,
        probability=h.probability,
        frequency=h.frequency,
        severity=h.severity,
        status=h.status,
        image_url=h.image_url,
        risk_score=score,
        classification=ClassificationOut.model_validate(classify(score, thresholds, rules)),
        sla=DeadlineOut.model_validate(compute_deadline(score, thresholds, now, rules)),
        scale_warnings=scale_warnings(h.probability, h.frequency, h.severity, rules),
        action_summary=ActionSummaryOut.model_validate(evaluate(h.actions, now)),
        actions=[action_to_out(a, now) for a in h.actions],
        created_at=h.created_at,
        updated_at=h.updated_at,
    )


def _get_or_404(db: Session, hazard_id: int) -> HazardRecord:
    obj = crud_get_hazard(db, hazard_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Hazard not found")
    return obj


def _location_or_404(db: Session, location_id: int):
    loc = crud_get_location(db, location_id)
    if not loc:
        raise HTTPException(status_code=404, detail="Location not found")
    return loc


def _check_responsibles(db: Session, payload: HazardCreate) -> None:
    for a in payload.actions:
        if a.responsible_employee_id is not None and not crud_get_employee(db, a.responsible_employee_id):
            raise HTTPException(status_code=422, detail="Responsible employee not found")


# -----------------------------
# Stateless scoring preview
# -----------------------------
class RiskEvaluateIn(BaseModel):
    probability: confloat(gt=0)
    frequency: confloat(gt=0)
    severity: confloat(gt=0)
    location_id: Optional[conint(ge=1)] = None


class RiskEvaluateOut(BaseModel):
    risk_score: float
    classification: ClassificationOut
    sla: DeadlineOut
    scale_warnings: List[str]


@router.post("/risk/evaluate", response_model=RiskEvaluateOut)
def evaluate_risk(
    payload: RiskEvaluateIn,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """Score a Fine-Kinney triple against a location's thresholds without storing anything."""
    thresholds = resolve_thresholds_for_location(db, payload.location_id, rules)
    score = risk_score(payload.probability, payload.frequency, payload.severity)
    return RiskEvaluateOut(
        risk_score=score,
        classification=ClassificationOut.model_validate(classify(score, thresholds, rules)),
        sla=DeadlineOut.model_validate(compute_deadline(score, thresholds, now, rules)),
        scale_warnings=scale_warnings(payload.probability, payload.frequency, payload.severity, rules),
    )


# -----------------------------
# Register
# -----------------------------
@router.get("/hazards", response_model=List[HazardOut])
def list_hazards(
    location_id: Optional[int] = Query(None),
    status_f: Optional[str] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """Hazards sorted by risk score (highest first)."""
    rows = crud_list_hazards(db, location_id=location_id, status=status_f, skip=skip, limit=limit)
    snapshots = {}
    out = []
    for h in rows:
        if h.location_id not in snapshots:
            snapshots[h.location_id] = resolve_thresholds(h.location, rules)
        out.append(hazard_to_out(h, snapshots[h.location_id], now, rules))
    return out


@router.post(
    "/locations/{location_id}/hazards",
    response_model=HazardOut,
    status_code=status.HTTP_201_CREATED,
)
def create_hazard(
    location_id: int,
    payload: HazardCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    loc = _location_or_404(db, location_id)
    _check_responsibles(db, payload)
    thresholds = resolve_thresholds(loc, rules)
    score = risk_score(payload.probability, payload.frequency, payload.severity)
    suggested = compute_deadline(score, thresholds, now, rules)

    off_scale = scale_warnings(payload.probability, payload.frequency, payload.severity, rules)
    if off_scale:
        log.warning("Hazard at location id=%s has off-scale factors: %s", loc.id, ", ".join(off_scale))

    obj = crud_create_hazard(
        db,
        loc.id,
        payload.model_dump(),
        today=now.date(),
        default_due=suggested.due_date,
    )
    return hazard_to_out(obj, thresholds, now, rules)


@router.post(
    "/locations/{location_id}/hazards/import",
    response_model=List[HazardOut],
    status_code=status.HTTP_201_CREATED,
)
def import_hazards(
    location_id: int,
    payload: HazardImportRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """Store hazards produced by the external analysis service, seeding action deadlines."""
    loc = _location_or_404(db, location_id)
    thresholds = resolve_thresholds(loc, rules)
    built = build_hazards_from_analysis(
        payload.items, thresholds, now, image_url=payload.image_url, rules=rules
    )

    objs = []
    for data in built:
        due = data["actions"][0]["due_date"] if data["actions"] else now.date()
        objs.append(
            crud_create_hazard(db, loc.id, data, today=now.date(), default_due=due, commit=False)
        )
    db.commit()
    for o in objs:
        db.refresh(o)

    log.info("Imported %s hazard(s) into location id=%s", len(objs), loc.id)
    return [hazard_to_out(o, thresholds, now, rules) for o in objs]


@router.get("/hazards/{hazard_id}", response_model=HazardOut)
def get_hazard(
    hazard_id: int,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    obj = _get_or_404(db, hazard_id)
    return hazard_to_out(obj, resolve_thresholds(obj.location, rules), now, rules)


@router.patch("/hazards/{hazard_id}", response_model=HazardOut)
def update_hazard(
    hazard_id: int,
    payload: HazardUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    obj = crud_update_hazard(db, _get_or_404(db, hazard_id), payload)
    return hazard_to_out(obj, resolve_thresholds(obj.location, rules), now, rules)


@router.delete("/hazards/{hazard_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hazard(hazard_id: int, db: Session = Depends(get_db)) -> Response:
    crud_delete_hazard(db, _get_or_404(db, hazard_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
