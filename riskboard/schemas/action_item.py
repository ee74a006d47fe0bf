# riskboard/schemas/action_item.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, conint, constr


class ActionItemCreate(BaseModel):
    description: constr(strip_whitespace=True, min_length=2) = Field(
        ..., description="Corrective / preventive action."
    )
    due_date: Optional[date] = Field(
        None, description="Omit to use the suggested remediation deadline."
    )
    responsible_employee_id: Optional[conint(ge=1)] = None
    is_completed: bool = False


class ActionItemUpdate(BaseModel):
    # All optional for PATCH; explicit null clears the responsible party
    description: Optional[constr(strip_whitespace=True, min_length=2)] = None
    due_date: Optional[date] = None
    responsible_employee_id: Optional[conint(ge=1)] = None
    is_completed: Optional[bool] = None


class ActionItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hazard_id: int
    description: str
    due_date: date
    is_completed: bool
    responsible_employee_id: Optional[int] = None
    is_overdue: bool = False
    created_at: datetime
    updated_at: datetime


class UpcomingActionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    days_left: int


class ActionSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    overdue_count: int
    nearest_upcoming: Optional[UpcomingActionOut] = None


class DeadlineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: str
    due_date: date
    label: str
    offset_days: int
