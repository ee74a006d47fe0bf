# riskboard/schemas/location.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, confloat, constr, field_validator, model_validator

from riskboard.schemas.common import HAZARD_CLASS_HELP, hazard_class_value


# -----------------------------
# Thresholds
# -----------------------------
class ThresholdsIn(BaseModel):
    intolerable: confloat(gt=0)
    substantial: confloat(gt=0)
    important: confloat(gt=0)
    possible: confloat(gt=0)

    @model_validator(mode="after")
    def _strictly_descending(self):
        if not (self.intolerable > self.substantial > self.important > self.possible):
            raise ValueError(
                "thresholds must satisfy intolerable > substantial > important > possible"
            )
        return self


class ThresholdsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    location_id: Optional[int] = None
    intolerable: float
    substantial: float
    important: float
    possible: float
    is_custom: bool = Field(False, description="False when the rule profile defaults apply.")


# -----------------------------
# Create / Update payloads
# -----------------------------
class LocationCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=2, max_length=255)
    registry: Optional[constr(strip_whitespace=True, max_length=255)] = Field(
        None, description="Registry number or company title the location belongs to."
    )
    hazard_class: str = Field("hazardous", description=HAZARD_CLASS_HELP)
    revision_date: Optional[date] = Field(
        None, description="Last risk assessment revision (YYYY-MM-DD)."
    )
    thresholds: Optional[ThresholdsIn] = None

    check_hazard_class = field_validator("hazard_class")(hazard_class_value)


class LocationUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=2, max_length=255)] = None
    registry: Optional[constr(strip_whitespace=True, max_length=255)] = None
    hazard_class: Optional[str] = None
    revision_date: Optional[date] = None

    check_hazard_class = field_validator("hazard_class")(hazard_class_value)


# -----------------------------
# Response models
# -----------------------------
class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    registry: Optional[str] = None
    hazard_class: str
    revision_date: Optional[date] = None
    thresholds: ThresholdsOut
    created_at: datetime
    updated_at: datetime


class AssessmentValidityOut(BaseModel):
    location_id: int
    hazard_class: str
    revision_date: Optional[date] = None
    valid_until: Optional[date] = None
    years: int
