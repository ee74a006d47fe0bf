# riskboard/schemas/employee.py
from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, conint, constr, field_validator

from riskboard.schemas.common import HAZARD_CLASS_HELP, ValidityOut, hazard_class_value


class EmployeeCreate(BaseModel):
    location_id: conint(ge=1)
    name: constr(strip_whitespace=True, min_length=2, max_length=255)
    job_title: constr(strip_whitespace=True, min_length=1, max_length=255)
    hazard_class: str = Field("hazardous", description=HAZARD_CLASS_HELP)
    last_training_date: Optional[date] = Field(None, description="Omit when unknown.")
    last_health_check_date: Optional[date] = Field(None, description="Omit when unknown.")

    check_hazard_class = field_validator("hazard_class")(hazard_class_value)


class EmployeeUpdate(BaseModel):
    location_id: Optional[conint(ge=1)] = None
    name: Optional[constr(strip_whitespace=True, min_length=2, max_length=255)] = None
    job_title: Optional[constr(strip_whitespace=True, min_length=1, max_length=255)] = None
    hazard_class: Optional[str] = None
    last_training_date: Optional[date] = None
    last_health_check_date: Optional[date] = None

    check_hazard_class = field_validator("hazard_class")(hazard_class_value)


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    location_id: int
    name: str
    job_title: str
    hazard_class: str
    last_training_date: Optional[date] = None
    last_health_check_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class EmployeeComplianceOut(BaseModel):
    employee_id: int
    name: str
    hazard_class: str
    training: ValidityOut
    health: ValidityOut


# -----------------------------
# Roster import
# -----------------------------
class EmployeeImportRow(BaseModel):
    """One roster row from a spreadsheet; dates may be ISO, DD.MM.YYYY or serial numbers."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    job_title: Optional[constr(strip_whitespace=True, max_length=255)] = None
    hazard_class: Optional[str] = Field(None, description=HAZARD_CLASS_HELP)
    last_training_date: Optional[Union[int, float, str]] = None
    last_health_check_date: Optional[Union[int, float, str]] = None

    check_hazard_class = field_validator("hazard_class")(hazard_class_value)

    @field_validator("name")
    @classmethod
    def _name_or_blank(cls, v: Optional[str]) -> Optional[str]:
        # blank rows are skipped by the importer; anything else must be a real name
        v = (v or "").strip()
        if not v:
            return None
        if len(v) < 2 or len(v) > 255:
            raise ValueError("name must be 2-255 characters")
        return v
