# riskboard/api/v1/dashboard.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from riskboard.api.deps import get_now
from riskboard.core.rules import RuleProfile, get_rules
from riskboard.crud.location import get_location as crud_get_location
from riskboard.db.session import get_db
from riskboard.schemas.dashboard import DashboardSummary
from riskboard.services.metrics import dashboard_summary

router = APIRouter()


@router.get("/dashboard/summary", response_model=DashboardSummary)
def get_summary(
    location_id: Optional[int] = Query(None, description="Omit for all locations."),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """
    Card counts and chart series for the dashboard, recomputed on every call:
    critical / high open hazards, overdue actions, expired training and health
    checks, risk level distribution, score per location, closed actions per month.
    """
    if location_id is not None and not crud_get_location(db, location_id):
        raise HTTPException(status_code=404, detail="Location not found")
    return dashboard_summary(db, now, location_id=location_id, rules=rules)
