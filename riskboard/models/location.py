# riskboard/models/location.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Index
from sqlalchemy.orm import relationship

from riskboard.db.base import Base


class Location(Base):
    """
    Business location (workplace unit) under a registry (company / SGK registry).
    Owns an optional custom set of Fine-Kinney thresholds; when any of the four
    columns is missing the rule profile defaults apply.
    """

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)

    registry = Column(String(255), nullable=True, index=True)  # registry no. / company title
    name = Column(String(255), nullable=False, unique=True, index=True)
    hazard_class = Column(String(32), nullable=False, default="hazardous")

    # Risk assessment revision (drives document validity)
    revision_date = Column(Date, nullable=True)

    # Custom thresholds (all four or none)
    threshold_intolerable = Column(Float, nullable=True)
    threshold_substantial = Column(Float, nullable=True)
    threshold_important = Column(Float, nullable=True)
    threshold_possible = Column(Float, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    hazards = relationship(
        "HazardRecord",
        back_populates="location",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    employees = relationship(
        "Employee",
        back_populates="location",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_locations_registry_name", "registry", "name"),)

    def __repr__(self) -> str:
        return f"<Location id={self.id} name={self.name!r}>"
