# riskboard/models/action_item.py
from datetime import datetime
from sqlalchemy import Column, Integer, Text, Boolean, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from riskboard.db.base import Base


class ActionItem(Base):
    """Corrective / preventive action belonging to exactly one hazard."""

    __tablename__ = "action_items"

    id = Column(Integer, primary_key=True, index=True)

    hazard_id = Column(Integer, ForeignKey("hazards.id", ondelete="CASCADE"), nullable=False, index=True)

    description = Column(Text, nullable=False)
    due_date = Column(Date, nullable=False, index=True)  # calendar date, no time
    is_completed = Column(Boolean, nullable=False, default=False)

    responsible_employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    hazard = relationship("HazardRecord", back_populates="actions")
    responsible = relationship("Employee", foreign_keys=[responsible_employee_id])

    __table_args__ = (Index("ix_actions_hazard_due", "hazard_id", "due_date"),)

    def __repr__(self) -> str:
        return f"<ActionItem id={self.id} due={self.due_date} done={self.is_completed}>"
