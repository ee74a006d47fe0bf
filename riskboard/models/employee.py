# riskboard/models/employee.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from riskboard.db.base import Base

HAZARD_CLASS_VALUES = ("low", "hazardous", "highly_hazardous")


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)

    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    job_title = Column(String(255), nullable=False)
    hazard_class = Column(String(32), nullable=False, default="hazardous")

    # NULL means "no data", never "expired"
    last_training_date = Column(Date, nullable=True)
    last_health_check_date = Column(Date, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    location = relationship("Location", back_populates="employees")

    __table_args__ = (
        CheckConstraint(
            f"hazard_class IN {HAZARD_CLASS_VALUES}",
            name="ck_employees_hazard_class_allowed",
        ),
    )

    def __repr__(self) -> str:
        return f"<Employee id={self.id} name={self.name!r} class={self.hazard_class}>"
