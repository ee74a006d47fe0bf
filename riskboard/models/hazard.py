# riskboard/models/hazard.py
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Float, Date, DateTime, ForeignKey,
    CheckConstraint, Index
)
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship

from riskboard.db.base import Base

# NOTE: keep simple string "enums" for SQLite portability
HAZARD_STATUS = ("open", "in_progress", "completed")


class HazardRecord(Base):
    __tablename__ = "hazards"

    id = Column(Integer, primary_key=True, index=True)

    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)

    department = Column(String(255), nullable=False, default="General area")
    specific_area = Column(String(255), nullable=True)
    detection_date = Column(Date, nullable=False)  # set once at creation

    source = Column(String(255), nullable=False)
    activity = Column(String(255), nullable=True)
    hazard = Column(Text, nullable=False)
    risks = Column(Text, nullable=True)
    current_measures = Column(Text, nullable=True)

    # Fine-Kinney factors; the score is always derived from them
    probability = Column(Float, nullable=False)
    frequency = Column(Float, nullable=False)
    severity = Column(Float, nullable=False)

    # open | in_progress | completed
    status = Column(String(20), nullable=False, default="open", index=True)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    location = relationship("Location", back_populates="hazards")
    actions = relationship(
        "ActionItem",
        back_populates="hazard",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ActionItem.id",
    )

    @hybrid_property
    def risk_score(self):
        return self.probability * self.frequency * self.severity

    __table_args__ = (
        CheckConstraint(
            f"status IN {HAZARD_STATUS}",
            name="ck_hazards_status_allowed",
        ),
        CheckConstraint(
            "probability > 0 AND frequency > 0 AND severity > 0",
            name="ck_hazards_factors_positive",
        ),
        Index("ix_hazards_location_status", "location_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<HazardRecord id={self.id} source={self.source!r} score={self.risk_score}>"
