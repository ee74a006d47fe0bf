# riskboard/schemas/hazard.py
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, confloat, constr

from riskboard.schemas.action_item import (
    ActionItemCreate,
    ActionItemOut,
    ActionSummaryOut,
    DeadlineOut,
)

HazardStatus = Literal["open", "in_progress", "completed"]


class HazardBase(BaseModel):
    department: constr(strip_whitespace=True, min_length=1, max_length=255) = "General area"
    specific_area: Optional[constr(strip_whitespace=True, max_length=255)] = None
    source: constr(strip_whitespace=True, min_length=1, max_length=255) = Field(
        ..., description="Hazard source (equipment, floor, installation...)."
    )
    activity: Optional[constr(strip_whitespace=True, max_length=255)] = None
    hazard: constr(strip_whitespace=True, min_length=1)
    risks: Optional[str] = None
    current_measures: Optional[str] = None

    probability: confloat(gt=0) = Field(..., description="Fine-Kinney probability.")
    frequency: confloat(gt=0) = Field(..., description="Fine-Kinney exposure frequency.")
    severity: confloat(gt=0) = Field(..., description="Fine-Kinney severity.")

    status: HazardStatus = "open"
    image_url: Optional[str] = None


class HazardCreate(HazardBase):
    detection_date: Optional[date] = Field(
        None, description="Defaults to the creation day; immutable afterwards."
    )
    actions: List[ActionItemCreate] = Field(default_factory=list)


class HazardUpdate(BaseModel):
    # detection_date is deliberately absent (immutable)
    department: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    specific_area: Optional[constr(strip_whitespace=True, max_length=255)] = None
    source: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    activity: Optional[constr(strip_whitespace=True, max_length=255)] = None
    hazard: Optional[constr(strip_whitespace=True, min_length=1)] = None
    risks: Optional[str] = None
    current_measures: Optional[str] = None
    probability: Optional[confloat(gt=0)] = None
    frequency: Optional[confloat(gt=0)] = None
    severity: Optional[confloat(gt=0)] = None
    status: Optional[HazardStatus] = None
    image_url: Optional[str] = None


class ClassificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: str
    label: str
    recommended_action: str
    severity_rank: int
    color: str


class HazardOut(HazardBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    location_id: int
    detection_date: date
    risk_score: float

    # Recomputed per request, never stored
    classification: ClassificationOut
    sla: DeadlineOut
    scale_warnings: List[str] = Field(default_factory=list)
    action_summary: ActionSummaryOut
    actions: List[ActionItemOut] = Field(default_factory=list)

    created_at: datetime
    updated_at: datetime


# -----------------------------
# Bulk import of extraction output
# -----------------------------
class AnalysisItem(BaseModel):
    """One hazard as returned by the external image/text analysis service."""

    model_config = ConfigDict(extra="ignore")

    department: Optional[str] = None
    specific_area: Optional[str] = None
    source: Optional[str] = None
    activity: Optional[str] = None
    hazard: Optional[str] = None
    risks: Optional[str] = None
    probability: Optional[float] = None
    frequency: Optional[float] = None
    severity: Optional[float] = None
    current_measures: Optional[str] = None
    actions: List[str] = Field(default_factory=list)


class HazardImportRequest(BaseModel):
    items: List[AnalysisItem]
    image_url: Optional[str] = None
