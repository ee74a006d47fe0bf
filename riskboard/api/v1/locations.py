# riskboard/api/v1/locations.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status, Response
from sqlalchemy.orm import Session

from riskboard.core.rules import RuleProfile, get_rules
from riskboard.db.session import get_db
from riskboard.models.location import Location
from riskboard.schemas.location import (
    AssessmentValidityOut,
    LocationCreate,
    LocationOut,
    LocationUpdate,
    ThresholdsIn,
    ThresholdsOut,
)
from riskboard.crud.location import (
    get_location as crud_get_location,
    get_location_by_name as crud_get_location_by_name,
    list_locations as crud_list_locations,
    create_location as crud_create_location,
    update_location as crud_update_location,
    set_thresholds as crud_set_thresholds,
    delete_location as crud_delete_location,
)
from riskboard.services.compliance import assessment_validity
from riskboard.services.thresholds import has_custom_thresholds, resolve_thresholds

router = APIRouter()


def _thresholds_out(loc: Location, rules: RuleProfile) -> ThresholdsOut:
    t = resolve_thresholds(loc, rules)
    return ThresholdsOut(
        location_id=loc.id,
        is_custom=has_custom_thresholds(loc),
        **t.boundaries(),
    )


def _to_out(loc: Location, rules: RuleProfile) -> LocationOut:
    return LocationOut(
        id=loc.id,
        name=loc.name,
        registry=loc.registry,
        hazard_class=loc.hazard_class,
        revision_date=loc.revision_date,
        thresholds=_thresholds_out(loc, rules),
        created_at=loc.created_at,
        updated_at=loc.updated_at,
    )


def _get_or_404(db: Session, location_id: int) -> Location:
    obj = crud_get_location(db, location_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Location not found")
    return obj


@router.get("/locations", response_model=List[LocationOut])
def list_locations(
    registry: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    return [_to_out(x, rules) for x in crud_list_locations(db, registry=registry)]


@router.post("/locations", response_model=LocationOut, status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationCreate,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    if crud_get_location_by_name(db, payload.name):
        raise HTTPException(status_code=409, detail="Location name already exists")
    return _to_out(crud_create_location(db, payload), rules)


@router.get("/locations/{location_id}", response_model=LocationOut)
def get_location(
    location_id: int,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    return _to_out(_get_or_404(db, location_id), rules)


@router.patch("/locations/{location_id}", response_model=LocationOut)
def update_location(
    location_id: int,
    payload: LocationUpdate,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    obj = _get_or_404(db, location_id)
    if payload.name and payload.name != obj.name and crud_get_location_by_name(db, payload.name):
        raise HTTPException(status_code=409, detail="Location name already exists")
    return _to_out(crud_update_location(db, obj, payload), rules)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(location_id: int, db: Session = Depends(get_db)) -> Response:
    """Deletes the location with its hazards, actions and employees."""
    crud_delete_location(db, _get_or_404(db, location_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -----------------------------
# Thresholds
# -----------------------------
@router.get("/locations/{location_id}/thresholds", response_model=ThresholdsOut)
def get_thresholds(
    location_id: int,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    return _thresholds_out(_get_or_404(db, location_id), rules)


@router.put("/locations/{location_id}/thresholds", response_model=ThresholdsOut)
def put_thresholds(
    location_id: int,
    payload: ThresholdsIn,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    obj = crud_set_thresholds(db, _get_or_404(db, location_id), payload)
    return _thresholds_out(obj, rules)


@router.delete("/locations/{location_id}/thresholds", response_model=ThresholdsOut)
def reset_thresholds(
    location_id: int,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    obj = crud_set_thresholds(db, _get_or_404(db, location_id), None)
    return _thresholds_out(obj, rules)


@router.get("/locations/{location_id}/assessment-validity", response_model=AssessmentValidityOut)
def get_assessment_validity(
    location_id: int,
    db: Session = Depends(get_db),
    rules: RuleProfile = Depends(get_rules),
):
    obj = _get_or_404(db, location_id)
    return AssessmentValidityOut(
        location_id=obj.id,
        hazard_class=obj.hazard_class,
        revision_date=obj.revision_date,
        valid_until=assessment_validity(obj.revision_date, obj.hazard_class, rules),
        years=rules.assessment_validity_years[obj.hazard_class],
    )
