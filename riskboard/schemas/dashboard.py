# riskboard/schemas/dashboard.py
from typing import List, Optional
from pydantic import BaseModel


class RiskBucket(BaseModel):
    level: str
    label: str
    color: str
    count: int = 0


class LocationScore(BaseModel):
    location_id: int
    name: str
    total_score: float


class MonthlyClosures(BaseModel):
    month: str  # YYYY-MM
    actions: int


class DashboardSummary(BaseModel):
    scope: str  # "all" | "location"
    location_id: Optional[int] = None
    total_hazards: int
    critical_hazards: int
    high_hazards: int
    overdue_actions: int
    expired_training: int
    expired_health: int
    risk_distribution: List[RiskBucket]
    score_by_location: List[LocationScore]
    closed_actions_by_month: List[MonthlyClosures]
