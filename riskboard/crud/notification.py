# riskboard/crud/notification.py
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from riskboard.models.notification import Notification


def list_notifications(
    db: Session,
    *,
    location_id: Optional[int] = None,
    unread_only: bool = False,
    limit: int = 100,
) -> List[Notification]:
    q = db.query(Notification)
    if location_id is not None:
        q = q.filter(Notification.location_id == location_id)
    if unread_only:
        q = q.filter(Notification.read_at.is_(None))
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    return db.get(Notification, notification_id)


def mark_read(db: Session, obj: Notification, when: datetime) -> Notification:
    if obj.read_at is None:
        obj.read_at = when
        db.add(obj)
        db.commit()
        db.refresh(obj)
    return obj
