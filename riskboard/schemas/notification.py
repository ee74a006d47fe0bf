# riskboard/schemas/notification.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    kind: str
    severity: str
    title: str
    message: str
    location_id: Optional[int] = None
    hazard_id: Optional[int] = None
    employee_id: Optional[int] = None
    created_at: datetime
    read_at: Optional[datetime] = None


class NotificationSyncResult(BaseModel):
    created: int
    active: int
