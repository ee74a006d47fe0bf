# riskboard/api/v1/notifications.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from riskboard.api.deps import get_now
from riskboard.core.rules import RuleProfile, get_rules
from riskboard.crud.notification import (
    get_notification as crud_get_notification,
    list_notifications as crud_list_notifications,
    mark_read as crud_mark_read,
)
from riskboard.db.session import get_db
from riskboard.schemas.notification import NotificationOut, NotificationSyncResult
from riskboard.services.notifications import sync_notifications

router = APIRouter()


@router.get("/notifications", response_model=List[NotificationOut])
def list_notifications(
    location_id: Optional[int] = Query(None),
    unread_only: bool = Query(False),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = crud_list_notifications(db, location_id=location_id, unread_only=unread_only, limit=limit)
    return [NotificationOut.model_validate(r) for r in rows]


@router.post("/notifications/sync", response_model=NotificationSyncResult)
def run_sync(
    location_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    rules: RuleProfile = Depends(get_rules),
):
    """Same pass the daily scheduler runs, on demand."""
    return sync_notifications(db, now, for_location_id=location_id, rules=rules)


@router.post("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    obj = crud_get_notification(db, notification_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationOut.model_validate(crud_mark_read(db, obj, now))
