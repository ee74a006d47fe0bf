# riskboard/schemas/common.py
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

from riskboard.core.rules import normalize_hazard_class

HAZARD_CLASS_HELP = "low | hazardous | highly_hazardous (Turkish terms accepted)"


def hazard_class_value(v: Optional[str]) -> Optional[str]:
    """field_validator helper: canonical hazard class key, None passes through."""
    if v is None:
        return None
    return normalize_hazard_class(v)


class ValidityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str  # NoData | Expired | Warning | Valid
    label: str
    days_remaining: int
    due_date: Optional[date] = None
